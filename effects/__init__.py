"""
Pixelsort -- Sort Key & Interval Function Registry
Names used on the command line map to the functions that implement them.

Sort keys:          (pixels: np.ndarray) -> np.ndarray of keys
Interval functions: (intervals: list[IntervalSet], ...) -> None
"""

from core import interval_func
from effects.sort_keys import lightness, intensity, chan_min, chan_max

SORT_KEYS = {
    "lightness": {
        "fn": lightness,
        "description": "Perceptual luma of the pixel",
    },
    "intensity": {
        "fn": intensity,
        "description": "Sum of all channel values (alpha included)",
    },
    "minimum": {
        "fn": chan_min,
        "description": "Smallest channel value (alpha included)",
    },
    "maximum": {
        "fn": chan_max,
        "description": "Largest channel value (alpha included)",
    },
}

# params: which settings each function reads (lower/upper/num/seed)
INTERVAL_FUNCTIONS = {
    "full": {
        "fn": interval_func.full,
        "params": {},
        "description": "Sort each whole row as one interval",
    },
    "edge": {
        "fn": interval_func.edges_canny,
        "params": {"lower": "float", "upper": "float"},
        "description": "Sort only Canny edge pixels (hysteresis thresholds lower/upper)",
    },
    "random": {
        "fn": interval_func.random,
        "params": {"lower": "int", "upper": "int", "seed": "int"},
        "description": "Split rows into random widths in [lower, upper)",
    },
    "split": {
        "fn": interval_func.split_equal,
        "params": {"num": "int"},
        "description": "Split rows into num equal parts",
    },
    "threshold": {
        "fn": interval_func.threshold,
        "params": {"lower": "byte", "upper": "byte"},
        "description": "Sort only pixels with lightness in [lower, upper)",
    },
}


def get_sort_key(name: str):
    """Look up a sort key function by its CLI name."""
    if name not in SORT_KEYS:
        raise KeyError(
            f"Unknown sort key: {name}. Available: {', '.join(SORT_KEYS)}"
        )
    return SORT_KEYS[name]["fn"]


def get_interval_function(name: str):
    """Look up an interval function by its CLI name."""
    if name not in INTERVAL_FUNCTIONS:
        raise KeyError(
            f"Unknown interval function: {name}. Available: {', '.join(INTERVAL_FUNCTIONS)}"
        )
    return INTERVAL_FUNCTIONS[name]["fn"]


def list_sort_keys() -> list[dict]:
    return [{"name": name, "description": entry["description"]}
            for name, entry in SORT_KEYS.items()]


def list_interval_functions() -> list[dict]:
    return [{"name": name, "params": entry["params"], "description": entry["description"]}
            for name, entry in INTERVAL_FUNCTIONS.items()]
