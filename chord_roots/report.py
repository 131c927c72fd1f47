from __future__ import annotations

import math
from typing import Iterable

import pandas as pd

from .solver import RootResult

COLUMNS = [
    "root",
    "f_root",
    "error",
    "iterations",
    "evaluations",
    "convergence",
    "elapsed_ms",
    "bracket_low",
    "bracket_high",
    "status",
]


def _fixed6(value: float) -> str:
    return "NaN" if math.isnan(value) else f"{value:.6f}"


def format_result(res: RootResult) -> str:
    lines = [
        f"Root found: x = {res.root:.6f}",
        f"Error: {res.error:.6E}",
        f"Function value f(Xi): {res.f_root:.6E}",
        f"Number of iterations: {res.iterations}",
        f"Number of function evaluations f(x): {res.evaluations}",
        f"Calculation time: {res.elapsed_ms} ms",
        f"Convergence parameter: {_fixed6(res.convergence)}",
    ]
    return "\n".join(lines)


def format_total(elapsed_ms: float) -> str:
    return f"Total calculation time: {elapsed_ms} ms"


def results_frame(results: Iterable[RootResult]) -> pd.DataFrame:
    """One row per refinement, in scan order."""
    rows = [
        {
            "root": r.root,
            "f_root": r.f_root,
            "error": r.error,
            "iterations": r.iterations,
            "evaluations": r.evaluations,
            "convergence": r.convergence,
            "elapsed_ms": r.elapsed_ms,
            "bracket_low": r.bracket[0],
            "bracket_high": r.bracket[1],
            "status": str(r.status),
        }
        for r in results
    ]
    return pd.DataFrame(rows, columns=COLUMNS)
