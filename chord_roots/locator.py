from __future__ import annotations

import time
from dataclasses import dataclass, replace
from typing import List, Tuple

from .functions import Evaluator
from .logger import setup_logger
from .scanner import DEFAULT_STEP, Bracket, scan_brackets
from .solver import DEFAULT_MAX_ITER, RootResult, solve_chord

logger = setup_logger("chord_roots.locator")


@dataclass(frozen=True)
class LocatorReport:
    roots: Tuple[RootResult, ...]
    failed: Tuple[RootResult, ...]
    brackets: Tuple[Bracket, ...]
    total_elapsed_ms: float


def find_roots(
    f: Evaluator,
    a: float,
    b: float,
    tol_x: float,
    tol_f: float,
    step: float = DEFAULT_STEP,
    max_iter: int = DEFAULT_MAX_ITER,
    stop_rule: str = "both",
    record_history: bool = False,
) -> LocatorReport:
    """Scan [a, b] for sign changes and refine each bracket with the chord method.

    Each refinement is timed separately (``elapsed_ms`` on the result); the
    total covers the scan and all refinements. Results whose estimate is not
    finite go to ``failed`` instead of ``roots``.
    """
    a, b = float(a), float(b)
    if not a < b:
        raise ValueError(f"Interval lower bound must be below upper bound, got [{a}, {b}]")
    if not (tol_x > 0 and tol_f > 0):
        raise ValueError(f"Tolerances must be positive, got eps1={tol_x}, eps2={tol_f}")

    t_total = time.perf_counter()
    brackets = scan_brackets(f, a, b, step=step)

    roots: List[RootResult] = []
    failed: List[RootResult] = []
    for br in brackets:
        t0 = time.perf_counter()
        res = solve_chord(
            f, br.left, br.right,
            tol_x=tol_x,
            tol_f=tol_f,
            max_iter=max_iter,
            stop_rule=stop_rule,
            record_history=record_history,
        )
        res = replace(res, elapsed_ms=(time.perf_counter() - t0) * 1000.0)

        if res.is_finite:
            roots.append(res)
        else:
            failed.append(res)

    total_ms = (time.perf_counter() - t_total) * 1000.0
    logger.info(f"{len(roots)} root(s) in [{a}, {b}], {len(failed)} failed, {total_ms:.3f} ms")
    return LocatorReport(
        roots=tuple(roots),
        failed=tuple(failed),
        brackets=brackets,
        total_elapsed_ms=total_ms,
    )
