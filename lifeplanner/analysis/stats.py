"""Small numeric helpers shared by the analyzers."""

from __future__ import annotations

import math
from typing import Sequence

import numpy as np


def round_half_up(value: float) -> int:
    """Round .5 upward (2.5 -> 3), unlike Python's banker's rounding."""
    return int(math.floor(value + 0.5))


def rate(part: float, whole: float) -> float:
    """Percentage part/whole*100. An empty whole gives 0, never NaN."""
    if whole <= 0:
        return 0.0
    return part / whole * 100


def mean(values: Sequence[float]) -> float:
    """Arithmetic mean; 0.0 for an empty sequence."""
    if len(values) == 0:
        return 0.0
    return float(np.mean(np.asarray(values, dtype=float)))
