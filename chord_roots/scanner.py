from __future__ import annotations

from dataclasses import dataclass
from typing import List, Tuple

from .functions import Evaluator
from .logger import setup_logger

logger = setup_logger("chord_roots.scanner")

DEFAULT_STEP = 0.16


@dataclass(frozen=True)
class Bracket:
    left: float
    right: float
    f_left: float
    f_right: float


def scan_brackets(
    f: Evaluator,
    a: float,
    b: float,
    step: float = DEFAULT_STEP,
) -> Tuple[Bracket, ...]:
    """Walk [a, b] in fixed steps and collect sub-intervals with a sign change.

    Notes:
    - The last sub-interval starts below b and may end past it (not clamped).
    - A sign change needs f_left * f_right < 0, so an exact zero sitting on a
      grid point is not reported.
    - Sub-intervals with an invalid endpoint (f returns None) are skipped.
    - Each grid point is evaluated once; the right value becomes the next left.
    """
    step = float(step)
    if step <= 0:
        raise ValueError(f"step must be positive, got {step}")

    x, b = float(a), float(b)
    f_left = f(x)
    found: List[Bracket] = []

    while x < b:
        if x + step <= x:
            raise ValueError(f"step {step} is below float resolution at x={x}; the scan cannot advance")
        f_right = f(x + step)
        if f_left is not None and f_right is not None and f_left * f_right < 0:
            logger.debug(f"Sign change on [{x:.6f}, {x + step:.6f}]: f={f_left:.3e}, {f_right:.3e}")
            found.append(Bracket(x, x + step, f_left, f_right))
        f_left = f_right
        x += step

    logger.info(f"Scan of [{a}, {b}] with step {step} found {len(found)} bracket(s)")
    return tuple(found)
