"""AlphaNMR - Fast NMR signal registries, equivalence classes and shift search.

This library provides the core data structures for recorded NMR spectra:
signal registries with equivalence tables, greedy equivalence detection,
tolerance-window shift search and signal-to-atom assignments. Inner loops
are Numba-compiled.

Parsers for external record formats build registries through the public
operations only.
"""

__version__ = "0.1.0"

# Import main submodules for convenient access
from alphanmr import constants
from alphanmr import signals
from alphanmr import search
from alphanmr import equivalence
from alphanmr import io

from alphanmr.signals import Signal, SignalRegistry
from alphanmr.search import ShiftMatcher
from alphanmr.equivalence import EquivalenceClusterer, EquivalenceDetectionParams
from alphanmr.assignment import Assignment

__all__ = [
    "constants",
    "signals",
    "search",
    "equivalence",
    "io",
    "Signal",
    "SignalRegistry",
    "ShiftMatcher",
    "EquivalenceClusterer",
    "EquivalenceDetectionParams",
    "Assignment",
]
