"""Equivalence detection and equivalence classes.

This module provides:
- Greedy backward equivalence detection by shift tolerance and multiplicity
- Equivalence class partitions read from a SignalRegistry
- Detection parameter presets per nucleus
"""

from .clustering import (
    EquivalenceClusterer,
    EquivalenceDetectionParams,
    detect_backward_links,
    encode_multiplicities,
)

__all__ = [
    'EquivalenceClusterer',
    'EquivalenceDetectionParams',
    'detect_backward_links',
    'encode_multiplicities',
]
