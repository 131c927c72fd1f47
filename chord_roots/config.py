from __future__ import annotations
import copy
from pathlib import Path
from typing import Any, Dict, Optional
import yaml

DEFAULTS: Dict[str, Any] = {
    "function": {
        "name": "log_sine",
        "params": {"log_coef": 2.0, "shift": 7.0, "sin_coef": 5.0},
    },
    "scan": {
        "step": 0.16,
        "interval": {"lower": -6.0, "upper": 2.0},
    },
    "tolerances": {
        "argument": 1e-4,
        "function": 1e-4,
    },
    "solver": {
        "max_iter": 500,
        "stop_rule": "both",
    },
    "logging": {
        "level": "WARNING",
        "file": None,
    },
}

def load_config(path: Optional[str | Path] = None) -> Dict[str, Any]:
    """Built-in defaults, overlaid with the YAML file at ``path`` if given."""
    if path is None:
        return copy.deepcopy(DEFAULTS)
    path = Path(path)
    with path.open("r", encoding="utf-8") as f:
        loaded = yaml.safe_load(f) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config file {path} must contain a mapping at the top level")
    return deep_update(DEFAULTS, loaded)

def deep_update(base: Dict[str, Any], updates: Dict[str, Any]) -> Dict[str, Any]:
    out = copy.deepcopy(base)
    for k, v in updates.items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = deep_update(out[k], v)
        else:
            out[k] = v
    return out

def function_spec(cfg: Dict[str, Any]) -> tuple[str, Dict[str, float]]:
    fn = cfg.get("function", {})
    params = fn.get("params") or {}
    return str(fn.get("name", "log_sine")), {k: float(v) for k, v in params.items()}
