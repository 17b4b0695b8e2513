"""Convenience wrapper functions for easy-to-use API.

This module provides Python wrapper functions that build registries and
assignments from plain lists, so callers do not have to create Signal
objects or matchers themselves.

Examples
--------
>>> # 1D carbon spectrum from plain lists
>>> registry = build_registry("13C", [30.0, 30.0, 75.0], ["s", "s", "s"])
>>> registry.get_equivalences()
array([-1,  0, -1])

>>> # Map predicted atom shifts onto the experimental signals
>>> assignment = assign_atom_shifts(registry, {3: 30.02, 5: 74.9}, tolerance=0.2)
>>> assignment.get_indices(0, 5)
[2]
"""

import logging
from typing import Dict, Optional, Sequence, Union

from .assignment import Assignment
from .constants import multiplicity_from_protons_count
from .equivalence.clustering import EquivalenceClusterer
from .search.shift_matching import ShiftMatcher
from .signals.registry import SignalRegistry
from .signals.signal import Signal

logger = logging.getLogger(__name__)


# =============================================================================
# Registry Construction
# =============================================================================

def build_registry(
    nucleus: str,
    shifts: Sequence[Optional[float]],
    multiplicities: Optional[Sequence[Optional[str]]] = None,
    intensities: Optional[Sequence[Optional[float]]] = None,
    detect_equivalences: bool = True,
    tolerance: Optional[float] = None,
) -> SignalRegistry:
    """Build a 1D registry from parallel lists (convenience wrapper).

    Parameters
    ----------
    nucleus : str
        Nucleus label, e.g. '13C'
    shifts : Sequence[float]
        Chemical shifts in ppm (None for unknown)
    multiplicities : Sequence[str], optional
        Multiplicity per signal, None entries allowed
    intensities : Sequence[float], optional
        Intensity per signal
    detect_equivalences : bool, default=True
        Run equivalence detection after adding all signals
    tolerance : float, optional
        Detection tolerance (ppm), default of EquivalenceDetectionParams
        if None

    Returns
    -------
    SignalRegistry

    Raises
    ------
    ValueError
        If multiplicities or intensities do not match len(shifts)
    """
    n_signals = len(shifts)
    if multiplicities is None:
        multiplicities = [None] * n_signals
    if intensities is None:
        intensities = [None] * n_signals
    if len(multiplicities) != n_signals or len(intensities) != n_signals:
        raise ValueError(
            f"Got {n_signals} shifts, {len(multiplicities)} multiplicities "
            f"and {len(intensities)} intensities"
        )

    registry = SignalRegistry([nucleus])
    registry.add_signals(
        Signal(nuclei=(nucleus,), shifts=[shift], multiplicity=multiplicity, intensity=intensity)
        for shift, multiplicity, intensity in zip(shifts, multiplicities, intensities)
    )

    if detect_equivalences:
        EquivalenceClusterer(registry).detect_equivalences(tolerance)

    return registry


# =============================================================================
# Assignment Construction
# =============================================================================

def assign_atom_shifts(
    registry: SignalRegistry,
    atom_shifts: Dict[int, float],
    atom_multiplicities: Optional[Dict[int, Union[str, int]]] = None,
    dim: int = 0,
    tolerance: float = 0.0,
) -> Assignment:
    """Assign atoms to their closest registry signal (convenience wrapper).

    Each atom goes to the first signal at the minimum shift distance within
    tolerance. If a multiplicity is known for the atom, only signals with
    that multiplicity are considered. Atoms without a match stay unassigned.

    Parameters
    ----------
    registry : SignalRegistry
        Experimental signals
    atom_shifts : Dict[int, float]
        Atom index to (predicted) shift
    atom_multiplicities : Dict[int, str or int], optional
        Atom index to multiplicity label, or to attached protons count
        (converted with multiplicity_from_protons_count)
    dim : int
        Registry dimension to match on
    tolerance : float
        Shift tolerance (ppm)

    Returns
    -------
    Assignment
        Assignment over registry.signal_count signals
    """
    atom_multiplicities = atom_multiplicities or {}
    matcher = ShiftMatcher(registry)
    assignment = Assignment(registry.nuclei)
    assignment.init_assignments(registry.signal_count)

    n_unassigned = 0
    for atom_index, shift in atom_shifts.items():
        multiplicity = atom_multiplicities.get(atom_index)
        if isinstance(multiplicity, int):
            multiplicity = multiplicity_from_protons_count(multiplicity)

        if atom_index in atom_multiplicities:
            matches = matcher.pick_closest_with_multiplicity(shift, dim, tolerance, multiplicity)
        else:
            matches = matcher.pick_closest(shift, dim, tolerance)

        if len(matches) == 0:
            n_unassigned += 1
            continue
        assignment.add_assignment_equivalence(dim, int(matches[0]), atom_index)

    if n_unassigned > 0:
        logger.info(f"{n_unassigned} of {len(atom_shifts)} atoms without matching signal")

    return assignment

