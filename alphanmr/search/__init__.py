"""Shift search over signal registries.

Core algorithms:
1. Tolerance window pick ordered by shift distance (stable on ties)
2. Closest shift pick returning all exact ties
3. Multiplicity filtering and closest-shift/multiplicity intersection
"""

from .shift_matching import (
    ShiftMatcher,
    pick_within_tolerance_numba,
    pick_closest_numba,
)

__all__ = [
    'ShiftMatcher',
    'pick_within_tolerance_numba',
    'pick_closest_numba',
]
