"""Record parsers building registries and assignments.

Currently supported:
- NMRShiftDB spectrum property strings ("shift;intensity+mult;atom|...")
"""

from .nmrshiftdb import (
    parse_nmrshiftdb_spectrum,
    nmrshiftdb_to_registry,
    nmrshiftdb_to_assignment,
)

__all__ = [
    'parse_nmrshiftdb_spectrum',
    'nmrshiftdb_to_registry',
    'nmrshiftdb_to_assignment',
]
