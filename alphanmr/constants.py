"""Constants and lookup tables for NMR signal handling.

This module provides the sentinel values, multiplicity labels and nucleus
lookup tables used throughout AlphaNMR.

Key Features
------------
- NO_RELATION sentinel for the equivalence table (int, Numba friendly)
- Carbon multiplicity labels derived from attached proton counts
- Nucleus <-> element lookup for 1D/2D experiments
- Default shift tolerances per nucleus (ppm)
"""

from typing import Optional

import numpy as np

# =============================================================================
# Sentinels
# =============================================================================

# Equivalence table entry for "not linked to any other signal".
# Plain int so it can live in int64 arrays passed to Numba kernels.
NO_RELATION = -1

# Returned by add_signal() when a signal is rejected
INVALID_INDEX = -1

# =============================================================================
# Multiplicities
# =============================================================================

# Splitting pattern labels for carbons by number of attached protons
# (off-resonance decoupled / DEPT nomenclature)
MULTIPLICITY_BY_PROTONS_COUNT = {
    0: "s",  # quaternary
    1: "d",  # CH
    2: "t",  # CH2
    3: "q",  # CH3
}

# =============================================================================
# Nuclei
# =============================================================================

NUCLEUS_TO_ELEMENT = {
    "1H": "H",
    "13C": "C",
    "15N": "N",
    "17O": "O",
    "19F": "F",
    "29Si": "Si",
    "31P": "P",
    "33S": "S",
}

ELEMENT_TO_NUCLEUS = {element: nucleus for nucleus, element in NUCLEUS_TO_ELEMENT.items()}

# =============================================================================
# Default Tolerances (ppm)
# =============================================================================

# Shift deviation allowed when detecting equivalent signals, per nucleus.
# 0.0 means exact shift identity.
DEFAULT_EQUIVALENCE_TOLERANCE = 0.0

EQUIVALENCE_TOLERANCE_BY_NUCLEUS = {
    "1H": 0.01,
    "13C": 0.1,
    "15N": 0.5,
}


def multiplicity_from_protons_count(protons_count: int) -> Optional[str]:
    """Return carbon multiplicity label for a number of attached protons.

    Parameters
    ----------
    protons_count : int
        Number of (implicit) hydrogens attached to the carbon

    Returns
    -------
    multiplicity : str or None
        's', 'd', 't' or 'q'; None for counts outside 0..3

    Examples
    --------
    >>> multiplicity_from_protons_count(2)
    't'
    """
    return MULTIPLICITY_BY_PROTONS_COUNT.get(protons_count)


def atom_type_from_nucleus(nucleus: str) -> Optional[str]:
    """Return element symbol for a nucleus label like '13C', None if unknown."""
    return NUCLEUS_TO_ELEMENT.get(nucleus)


def nucleus_from_atom_type(atom_type: str) -> Optional[str]:
    """Return NMR active nucleus label for an element symbol, None if unknown."""
    return ELEMENT_TO_NUCLEUS.get(atom_type)


def is_index(value) -> bool:
    """True for Python or numpy integers; bool and floats are not indices."""
    return isinstance(value, (int, np.integer)) and not isinstance(value, bool)
