"""
Equivalence detection and class derivation for NMR signals.

Groups signals that are chemically indistinguishable (same shift within a
tolerance and same multiplicity) by writing links into the registry's
equivalence table, and reads the resulting partition back as classes.

Detection is a single greedy pass: each signal is linked to the closest
earlier signal of the same multiplicity. With tolerance > 0 this is order
dependent and not transitive (A~B and B~C does not imply a direct A~C
link), which matches how equivalences are assigned by hand on 1D spectra.
"""

import logging
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence

import numpy as np
import numba

from ..constants import (
    DEFAULT_EQUIVALENCE_TOLERANCE,
    EQUIVALENCE_TOLERANCE_BY_NUCLEUS,
    NO_RELATION,
)
from ..search.shift_matching import pick_within_tolerance_numba
from ..signals.registry import SignalRegistry

logger = logging.getLogger(__name__)


@dataclass
class EquivalenceDetectionParams:
    """Parameters for equivalence detection.

    Tolerance is an absolute shift deviation in ppm on the first dimension.
    """

    tolerance: float = DEFAULT_EQUIVALENCE_TOLERANCE

    def __post_init__(self):
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be >= 0, got {self.tolerance}")

    @classmethod
    def for_nucleus(cls, nucleus: str) -> 'EquivalenceDetectionParams':
        """Create parameters with the default tolerance for a nucleus.

        Args:
            nucleus: Nucleus label, e.g. '13C'

        Returns:
            EquivalenceDetectionParams with nucleus-specific tolerance
        """
        if nucleus not in EQUIVALENCE_TOLERANCE_BY_NUCLEUS:
            raise ValueError(f"Unknown nucleus: {nucleus}")
        return cls(tolerance=EQUIVALENCE_TOLERANCE_BY_NUCLEUS[nucleus])


def encode_multiplicities(multiplicities: Sequence[Optional[str]]) -> np.ndarray:
    """Map multiplicity labels to int codes (equal labels, equal codes).

    None gets a code of its own, so signals without multiplicity match
    each other.

    Examples
    --------
    >>> encode_multiplicities(['s', 'd', None, 's', None])
    array([0, 1, 2, 0, 2])
    """
    codes = {}
    return np.array(
        [codes.setdefault(label, len(codes)) for label in multiplicities],
        dtype=np.int64,
    )


@numba.jit(nopython=True, cache=True)
def detect_backward_links(
    shifts: np.ndarray,
    multiplicity_codes: np.ndarray,
    tolerance: float,
) -> np.ndarray:
    """Greedy backward search for an equivalent earlier signal.

    For each signal, candidates within tolerance are visited by ascending
    shift distance. The first candidate with a smaller index and the same
    multiplicity code becomes the link.

    Parameters
    ----------
    shifts : np.ndarray (float64)
        First-dimension shifts, NaN for unknown
    multiplicity_codes : np.ndarray (int64)
        Code per signal from encode_multiplicities()
    tolerance : float
        Shift tolerance (ppm)

    Returns
    -------
    equivalences : np.ndarray (int64)
        New equivalence table, -1 where no earlier match exists
    """
    n = len(shifts)
    links = np.full(n, -1, dtype=np.int64)
    for i in range(n):
        candidates = pick_within_tolerance_numba(shifts, shifts[i], tolerance)
        for candidate in candidates:
            if candidate >= i:
                continue
            if multiplicity_codes[candidate] == multiplicity_codes[i]:
                links[i] = candidate
                break
    return links


class EquivalenceClusterer:
    """Maintain and read equivalence classes of a SignalRegistry.

    The registry recomputes its class labels after every change, so the
    partition returned here always reflects the current table.

    Examples
    --------
    >>> clusterer = EquivalenceClusterer(registry)
    >>> clusterer.detect_equivalences(0.0)
    array([-1,  0, -1])
    >>> clusterer.get_equivalent_signal_classes()
    {0: [0, 1], 1: [2]}
    """

    def __init__(
        self,
        registry: SignalRegistry,
        params: Optional[EquivalenceDetectionParams] = None,
    ):
        self.registry = registry
        self.params = params if params is not None else EquivalenceDetectionParams()

    def set_equivalence(self, signal_index: int, equivalent_signal_index: int) -> bool:
        """Link two existing signals; False if either index is invalid."""
        return self.registry.set_equivalence(signal_index, equivalent_signal_index)

    def clear_equivalences(self):
        self.registry.set_equivalences(np.full(self.registry.signal_count, NO_RELATION, dtype=np.int64))

    def detect_equivalences(self, tolerance: Optional[float] = None) -> np.ndarray:
        """Detect equivalent signals on the first dimension.

        Replaces the whole equivalence table. Signals without a first
        dimension shift are never linked.

        Parameters
        ----------
        tolerance : float, optional
            Shift tolerance (ppm); params.tolerance if None

        Returns
        -------
        equivalences : np.ndarray (int64)
            The new equivalence table
        """
        if tolerance is None:
            tolerance = self.params.tolerance

        links = detect_backward_links(
            self.registry.get_shifts(0),
            encode_multiplicities(self.registry.get_multiplicities()),
            float(tolerance),
        )
        self.registry.set_equivalences(links)

        n_linked = int((links != NO_RELATION).sum())
        logger.info(
            f"Detected {n_linked} equivalence links among {len(links)} signals "
            f"(tolerance {tolerance} ppm)"
        )
        return links

    def get_equivalent_signal_classes(self) -> Dict[int, List[int]]:
        """Partition of all signal indices into equivalence classes.

        Returns
        -------
        classes : Dict[int, List[int]]
            Class id (0..k-1, no relation to signal indices) to ascending
            signal indices. Every index appears in exactly one class.
        """
        classes: Dict[int, List[int]] = {}
        for signal_index, label in enumerate(self.registry.get_equivalence_labels()):
            classes.setdefault(int(label), []).append(signal_index)
        return classes

    def get_equivalent_signals(self, signal_index: int) -> Optional[List[int]]:
        """Other members of signal_index's class, None for invalid index."""
        if not self.registry.check_signal_index(signal_index):
            return None
        labels = self.registry.get_equivalence_labels()
        return [int(i) for i in np.flatnonzero(labels == labels[signal_index]) if i != signal_index]

    def has_equivalences(self, signal_index: int) -> Optional[bool]:
        """True if the signal links to, or is linked from, another signal."""
        if not self.registry.check_signal_index(signal_index):
            return None
        equivalences = self.registry.get_equivalences()
        return bool(equivalences[signal_index] != NO_RELATION or (equivalences == signal_index).any())
