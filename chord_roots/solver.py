# chord_roots/solver.py
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from .functions import Evaluator
from .logger import setup_logger

logger = setup_logger("chord_roots.solver")

DEFAULT_MAX_ITER = 500
STOP_RULES = ("both", "either")


class SolveStatus(Enum):
    CONVERGED = "converged"
    MAX_ITERATIONS = "max_iterations"
    DEGENERATE = "degenerate"
    DIVERGED = "diverged"

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class IterationPoint:
    iteration: int
    x: float
    fx: float
    error: float


@dataclass(frozen=True)
class RootResult:
    root: float
    f_root: float
    error: float
    iterations: int
    evaluations: int
    convergence: float
    bracket: Tuple[float, float]
    status: SolveStatus
    elapsed_ms: float = 0.0
    history: Tuple[IterationPoint, ...] = ()

    @property
    def converged(self) -> bool:
        return self.status is SolveStatus.CONVERGED

    @property
    def is_finite(self) -> bool:
        return math.isfinite(self.root)


def _stop_predicate(stop_rule: str, tol_x: float, tol_f: float) -> Callable[[float, float], bool]:
    if stop_rule == "both":
        return lambda fx, err: abs(fx) <= tol_f and err <= tol_x
    if stop_rule == "either":
        return lambda fx, err: abs(fx) <= tol_f or err <= tol_x
    raise ValueError(f"stop_rule must be one of {STOP_RULES}, got '{stop_rule}'")


def solve_chord(
    f: Evaluator,
    x_low: float,
    x_high: float,
    tol_x: float = 1e-4,
    tol_f: float = 1e-4,
    max_iter: int = DEFAULT_MAX_ITER,
    stop_rule: str = "both",
    record_history: bool = False,
) -> RootResult:
    """Chord (fixed-endpoint secant) refinement of a sign-change bracket.

    The endpoint with the larger |f| stays fixed for the whole run; the other
    one is the starting iterate. Each step moves the iterate to where the
    chord through (x_fixed, f_fixed) and (x_prev, f_prev) crosses zero:

        x_curr = x_prev - f_prev * (x_fixed - x_prev) / (f_fixed - f_prev)

    The loop runs at least once and stops on ``stop_rule``:
    - "both":   |f(x_curr)| <= tol_f and |x_curr - x_prev| <= tol_x
    - "either": one of the two is enough

    ``convergence`` is error / previous error, NaN until a second iteration
    with a nonzero previous error.

    Outcomes other than convergence are reported through ``status``:
    - MAX_ITERATIONS: ``max_iter`` steps ran; the last estimate is returned.
    - DEGENERATE: f_fixed == f_prev, the chord is horizontal; root is NaN.
    - DIVERGED: the iterate is non-finite or f is undefined there; root is NaN.

    evaluations == iterations + 2 holds for every status.
    """
    stop = _stop_predicate(stop_rule, float(tol_x), float(tol_f))
    if int(max_iter) < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")

    a, b = float(x_low), float(x_high)
    f_a = f(a)
    f_b = f(b)
    evaluations = 2
    if f_a is None or f_b is None:
        raise ValueError(f"Chord method needs f defined at both ends. f(a)={f_a}, f(b)={f_b}")

    # Larger |f| end stays fixed; a replaceable heuristic, ties fix b.
    if abs(f_a) > abs(f_b):
        x_fixed, f_fixed = a, f_a
        x_prev, f_prev = b, f_b
    else:
        x_fixed, f_fixed = b, f_b
        x_prev, f_prev = a, f_a

    hist: List[IterationPoint] = []
    iterations = 0
    convergence = math.nan
    error = math.inf
    x_curr, f_curr = x_prev, f_prev
    status = SolveStatus.MAX_ITERATIONS

    while iterations < max_iter:
        denom = f_fixed - f_prev
        if denom == 0.0:
            status = SolveStatus.DEGENERATE
            break

        x_curr = x_prev - f_prev * (x_fixed - x_prev) / denom
        fx = f(x_curr) if math.isfinite(x_curr) else None
        evaluations += 1
        iterations += 1

        prev_error = error
        error = abs(x_curr - x_prev)
        if iterations > 1 and prev_error != 0:
            convergence = error / prev_error

        if fx is None:
            status = SolveStatus.DIVERGED
            f_curr = math.nan
            break
        f_curr = fx

        if record_history:
            hist.append(IterationPoint(iterations, x_curr, f_curr, error))

        x_prev, f_prev = x_curr, f_curr

        if stop(f_curr, error):
            status = SolveStatus.CONVERGED
            break

    if status is SolveStatus.DEGENERATE or status is SolveStatus.DIVERGED:
        logger.debug(f"Chord refinement on [{a:.6f}, {b:.6f}] ended {status} after {iterations} iteration(s)")
        x_curr, f_curr = math.nan, math.nan
    elif status is SolveStatus.MAX_ITERATIONS:
        logger.warning(f"Chord refinement on [{a:.6f}, {b:.6f}] hit max_iter={max_iter}; error={error:.3e}")
    else:
        logger.debug(f"Root {x_curr:.10f} on [{a:.6f}, {b:.6f}] after {iterations} iteration(s)")

    return RootResult(
        root=x_curr,
        f_root=f_curr,
        error=error,
        iterations=iterations,
        evaluations=evaluations,
        convergence=convergence,
        bracket=(a, b),
        status=status,
        history=tuple(hist),
    )


def solve_brent_reference(
    f: Evaluator,
    x_low: float,
    x_high: float,
    tol_x: float = 1e-12,
    max_iter: int = DEFAULT_MAX_ITER,
) -> Optional[float]:
    """Independent estimate of the same root via SciPy brentq.

    Returns None when f is undefined at an end or has no sign change there.
    """
    try:
        from scipy.optimize import brentq  # type: ignore
    except ImportError as e:
        raise ImportError(
            "The Brent reference check requires SciPy. Install with: pip install scipy"
        ) from e

    a, b = float(x_low), float(x_high)
    fa, fb = f(a), f(b)
    if fa is None or fb is None or fa * fb > 0:
        return None

    def f_wrapped(x: float) -> float:
        fx = f(x)
        return math.nan if fx is None else fx

    root = brentq(f_wrapped, a, b, xtol=float(tol_x), rtol=1e-12, maxiter=int(max_iter))
    return float(root)
