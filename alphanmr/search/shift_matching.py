"""Tolerance-window shift search over a signal registry.

Core queries used to align predicted and experimental signals:
1. Tolerance window pick, ordered by distance to the query (stable)
2. Closest-shift pick with exact tie handling
3. Multiplicity filter

Shifts are searched linearly on the registry's insertion order. Registries
hold tens of signals, and insertion order is part of the result contract
(ties are broken by signal index), so no sorted index is kept.

Examples
--------
>>> registry = SignalRegistry(["13C"])
>>> for shift in (30.0, 30.2, 31.0):
...     registry.add_signal(Signal(("13C",), [shift], "s"))
>>> matcher = ShiftMatcher(registry)
>>> matcher.pick_within_tolerance(30.05, dim=0, tolerance=0.2)
array([0, 1])
"""

from typing import Optional

import numpy as np
import numba

from ..signals.registry import SignalRegistry


# =============================================================================
# Numba Kernels
# =============================================================================

@numba.jit(nopython=True, cache=True)
def pick_within_tolerance_numba(
    shifts: np.ndarray,
    query_shift: float,
    tolerance: float,
) -> np.ndarray:
    """Find all shifts within tolerance, sorted by distance to the query.

    Parameters
    ----------
    shifts : np.ndarray (float64)
        Shift per signal in registry order, NaN for unknown shifts
    query_shift : float
        Shift to search for (ppm)
    tolerance : float
        Maximum absolute deviation (ppm), inclusive

    Returns
    -------
    indices : np.ndarray (int64)
        Matching signal indices, ascending distance, ties by index

    Notes
    -----
    - NaN shifts never match (comparison with NaN is False)
    - Mergesort keeps equal distances in index order
    """
    n = len(shifts)
    candidates = np.empty(n, dtype=np.int64)
    distances = np.empty(n, dtype=np.float64)
    n_found = 0

    for i in range(n):
        distance = abs(shifts[i] - query_shift)
        if distance <= tolerance:
            candidates[n_found] = i
            distances[n_found] = distance
            n_found += 1

    order = np.argsort(distances[:n_found], kind='mergesort')
    return candidates[:n_found][order]


@numba.jit(nopython=True, cache=True)
def pick_closest_numba(
    shifts: np.ndarray,
    query_shift: float,
    tolerance: float,
) -> np.ndarray:
    """Find all shifts at the minimum distance to the query.

    The bound starts at tolerance and narrows to the smallest distance seen.
    Every index attaining that distance is returned (exact ties).

    Returns
    -------
    indices : np.ndarray (int64)
        Ascending signal indices, empty if nothing lies within tolerance
    """
    n = len(shifts)
    min_distance = tolerance
    for i in range(n):
        distance = abs(shifts[i] - query_shift)
        if distance < min_distance:
            min_distance = distance

    matches = np.empty(n, dtype=np.int64)
    n_found = 0
    for i in range(n):
        if abs(shifts[i] - query_shift) == min_distance:
            matches[n_found] = i
            n_found += 1

    return matches[:n_found]


# =============================================================================
# Registry-Level Matcher
# =============================================================================

class ShiftMatcher:
    """Side-effect free shift and multiplicity queries over a registry.

    All methods return int64 index arrays. Invalid dimensions give an empty
    array instead of raising.
    """

    def __init__(self, registry: SignalRegistry):
        self.registry = registry

    def pick_within_tolerance(self, shift: float, dim: int, tolerance: float) -> np.ndarray:
        if not self.registry.contains_dim(dim) or shift is None:
            return np.empty(0, dtype=np.int64)
        return pick_within_tolerance_numba(self.registry.get_shifts(dim), float(shift), float(tolerance))

    def pick_closest(self, shift: float, dim: int, tolerance: float) -> np.ndarray:
        if not self.registry.contains_dim(dim) or shift is None:
            return np.empty(0, dtype=np.int64)
        return pick_closest_numba(self.registry.get_shifts(dim), float(shift), float(tolerance))

    def pick_by_multiplicity(self, multiplicity: Optional[str]) -> np.ndarray:
        """Exact multiplicity filter; None matches signals without multiplicity."""
        return np.array(
            [i for i, label in enumerate(self.registry.get_multiplicities()) if label == multiplicity],
            dtype=np.int64,
        )

    def pick_closest_with_multiplicity(
        self,
        shift: float,
        dim: int,
        tolerance: float,
        multiplicity: Optional[str],
    ) -> np.ndarray:
        """Closest-shift pick restricted to one multiplicity.

        Used to pick the right signal when overlapping peaks differ only in
        their splitting pattern.
        """
        closest = self.pick_closest(shift, dim, tolerance)
        same_multiplicity = self.pick_by_multiplicity(multiplicity)
        return closest[np.isin(closest, same_multiplicity)]
