"""Numeric helpers shared by the scoring code."""

from __future__ import annotations

import math


def round_half_up(value: float) -> int:
    """Round to the nearest integer with .5 going up (2.5 → 3), unlike round()."""
    return int(math.floor(value + 0.5))
