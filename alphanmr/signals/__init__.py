"""Signal storage.

This module provides:
- Signal: one resonance entry (shift per dimension, multiplicity, intensity)
- SignalRegistry: ordered signals of one experiment with equivalence table
- Numba kernels for equivalence class labelling and table renumbering
"""

from .signal import Signal

from .registry import SignalRegistry

from .equivalence_table import (
    label_equivalence_classes,
    renumber_after_removal,
)

__all__ = [
    'Signal',
    'SignalRegistry',
    'label_equivalence_classes',
    'renumber_after_removal',
]
