from __future__ import annotations

import math
from typing import Callable, Dict, Optional

Evaluator = Callable[[float], Optional[float]]


def log_sine(
    x: float,
    log_coef: float = 2.0,
    shift: float = 7.0,
    sin_coef: float = 5.0,
) -> Optional[float]:
    """log_coef*log10(x + shift) - sin_coef*sin(x); None where the log is undefined."""
    arg = float(x) + shift
    if arg <= 0:
        return None
    return log_coef * math.log10(arg) - sin_coef * math.sin(x)


def _make_log_sine(log_coef: float = 2.0, shift: float = 7.0, sin_coef: float = 5.0) -> Evaluator:
    log_coef, shift, sin_coef = float(log_coef), float(shift), float(sin_coef)

    def f(x: float) -> Optional[float]:
        return log_sine(x, log_coef=log_coef, shift=shift, sin_coef=sin_coef)

    return f


FUNCTIONS: Dict[str, Callable[..., Evaluator]] = {
    "log_sine": _make_log_sine,
}


def make_function(name: str = "log_sine", **params: float) -> Evaluator:
    if name not in FUNCTIONS:
        raise KeyError(f"Unknown function '{name}'. Available: {list(FUNCTIONS.keys())}")
    return FUNCTIONS[name](**params)
