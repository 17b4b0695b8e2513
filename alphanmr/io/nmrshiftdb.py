"""NMRShiftDB spectrum property parsing.

NMRShiftDB SD files store each spectrum as one property string:

    "17.6;0.0Q;9|18.3;0.0Q;10|22.6;0.0T;1|"

i.e. '|' separated signals, each "shift;intensity+multiplicity;atom index".
This module turns such a string into a 1D SignalRegistry and the matching
Assignment. Explicit hydrogen handling and structure parsing stay with the
caller.

Examples
--------
>>> registry = nmrshiftdb_to_registry("17.6;0.0Q;9|22.6;0.0T;1|", "13C")
>>> registry.get_shifts(0)
array([17.6, 22.6])
>>> assignment = nmrshiftdb_to_assignment("17.6;0.0Q;9|22.6;0.0T;1|", "13C")
>>> assignment.get_indices(0, 1)
[1]
"""

import logging
import string
from typing import List, Optional, Tuple

from ..assignment import Assignment
from ..search.shift_matching import ShiftMatcher
from ..signals.registry import SignalRegistry
from ..signals.signal import Signal

logger = logging.getLogger(__name__)

# (shift, intensity, multiplicity, atom index)
NMRShiftDBRecord = Tuple[float, float, Optional[str], int]


def parse_nmrshiftdb_spectrum(spectrum_string: str) -> List[NMRShiftDBRecord]:
    """Split an NMRShiftDB spectrum string into per-signal records.

    Parameters
    ----------
    spectrum_string : str
        Property value, e.g. "17.6;0.0Q;9|18.3;0.0Q;10|"

    Returns
    -------
    records : List[Tuple[float, float, str or None, int]]
        (shift, intensity, multiplicity, atom index) per signal; the
        multiplicity is lower case, None if absent

    Raises
    ------
    ValueError
        If a signal entry cannot be parsed
    """
    records = []
    for entry in spectrum_string.strip().split('|'):
        entry = entry.strip()
        if not entry:
            continue
        fields = entry.split(';')
        if len(fields) < 3:
            raise ValueError(f"Malformed NMRShiftDB signal entry: {entry!r}")

        intensity_and_multiplicity = fields[1].strip().lower()
        intensity = intensity_and_multiplicity.rstrip(string.ascii_lowercase)
        multiplicity = intensity_and_multiplicity[len(intensity):] or None

        records.append((
            float(fields[0]),
            float(intensity),
            multiplicity,
            int(fields[2]),
        ))
    return records


def _read_records(spectrum_string: Optional[str]) -> Optional[List[NMRShiftDBRecord]]:
    """Parse records, None for empty or malformed input."""
    if spectrum_string is None or not spectrum_string.strip():
        return None
    try:
        return parse_nmrshiftdb_spectrum(spectrum_string)
    except ValueError as e:
        logger.warning(f"Skipping NMRShiftDB spectrum: {e}")
        return None


def _registry_from_records(records: List[NMRShiftDBRecord], nucleus: str) -> SignalRegistry:
    registry = SignalRegistry([nucleus])
    for shift, intensity, multiplicity, _ in records:
        registry.add_signal(Signal(
            nuclei=(nucleus,),
            shifts=[shift],
            multiplicity=multiplicity,
            intensity=intensity,
        ))
    return registry


def nmrshiftdb_to_registry(spectrum_string: Optional[str], nucleus: str) -> Optional[SignalRegistry]:
    """Build a 1D registry from an NMRShiftDB spectrum string.

    Returns None for empty or malformed input.
    """
    records = _read_records(spectrum_string)
    if records is None:
        return None
    return _registry_from_records(records, nucleus)


def nmrshiftdb_to_assignment(spectrum_string: Optional[str], nucleus: str) -> Optional[Assignment]:
    """Build the signal-to-atom assignment for an NMRShiftDB spectrum string.

    Each record is mapped to the first signal with exactly its shift and
    multiplicity. Returns None for empty or malformed input.
    """
    records = _read_records(spectrum_string)
    if records is None:
        return None
    registry = _registry_from_records(records, nucleus)

    matcher = ShiftMatcher(registry)
    assignment = Assignment(registry.nuclei)
    assignment.init_assignments(registry.signal_count)
    for shift, _, multiplicity, atom_index in records:
        matches = matcher.pick_closest_with_multiplicity(shift, 0, 0.0, multiplicity)
        if len(matches) == 0:
            logger.warning(f"No signal found for atom {atom_index} at {shift} ppm ({multiplicity})")
            return None
        assignment.add_assignment_equivalence(0, int(matches[0]), atom_index)

    return assignment
