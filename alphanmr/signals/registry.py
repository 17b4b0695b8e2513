"""Signal registry: ordered signals of one experiment plus equivalence table.

Central data structure of AlphaNMR. Signals are stored in insertion order
and addressed by position. A parallel int64 equivalence table links each
signal to another one (or to nothing), and the derived equivalence class
labels are recomputed eagerly after every structural change.

Design principles:
1. Fixed dimension signature (nuclei) per registry
2. Index-based links, never object references between signals
3. Failures reported as return values (-1, False, None), never raised
4. No partial mutation: validate first, then write
"""

import logging
from typing import Iterable, List, Optional, Sequence

import numpy as np

from ..constants import INVALID_INDEX, NO_RELATION, is_index
from .equivalence_table import label_equivalence_classes, renumber_after_removal
from .signal import Signal

logger = logging.getLogger(__name__)


class SignalRegistry:
    """Ordered collection of signals for one experiment.

    Attributes
    ----------
    nuclei : Tuple[str, ...]
        Declared nucleus per dimension, fixed at creation
    spec_type : str, optional
        Experiment type, e.g. '13C', 'DEPT', 'HSQC'
    description : str, optional
        Free text description
    solvent, standard : str, optional
        Measurement conditions
    spectrometer_frequency : float, optional
        Proton frequency of the spectrometer (MHz)

    Examples
    --------
    >>> registry = SignalRegistry(["13C"])
    >>> registry.add_signal(Signal(("13C",), [30.0], "s"))
    0
    >>> registry.add_signal(Signal(("13C",), [30.0], "s"), equivalent_signal_index=0)
    1
    >>> registry.get_equivalences()
    array([-1,  0])
    """

    def __init__(self, nuclei: Sequence[str]):
        self.nuclei = tuple(nuclei)
        self.spec_type: Optional[str] = None
        self.description: Optional[str] = None
        self.solvent: Optional[str] = None
        self.standard: Optional[str] = None
        self.spectrometer_frequency: Optional[float] = None

        self._signals: List[Signal] = []
        self._equivalences = np.empty(0, dtype=np.int64)
        self._class_labels = np.empty(0, dtype=np.int64)

    # =========================================================================
    # Shape checks
    # =========================================================================

    @property
    def n_dims(self) -> int:
        return len(self.nuclei)

    @property
    def signal_count(self) -> int:
        return len(self._signals)

    def __len__(self) -> int:
        return self.signal_count

    def contains_dim(self, dim: int) -> bool:
        """Check dim against the declared dimension count."""
        return is_index(dim) and 0 <= dim < self.n_dims

    def check_signal_index(self, signal_index: Optional[int]) -> bool:
        return is_index(signal_index) and 0 <= signal_index < self.signal_count

    def _check_input_size(self, size: int) -> bool:
        return size == self.signal_count

    # =========================================================================
    # Adding and removing signals
    # =========================================================================

    def add_signal(self, signal: Signal, equivalent_signal_index: int = NO_RELATION) -> int:
        """Append a copy of signal, optionally linked to an equivalent signal.

        Parameters
        ----------
        signal : Signal
            Signal to add; must have exactly the registry's nuclei
        equivalent_signal_index : int
            Index of an equivalent signal (may be the new signal's own
            index), NO_RELATION or None for none

        Returns
        -------
        index : int
            Index of the new signal, INVALID_INDEX (-1) if rejected
        """
        if signal is None or not signal.has_nuclei(self.nuclei):
            logger.debug(
                f"Rejected signal with nuclei {getattr(signal, 'nuclei', None)}, "
                f"registry expects {self.nuclei}"
            )
            return INVALID_INDEX

        if equivalent_signal_index is None:
            equivalent_signal_index = NO_RELATION
        new_index = self.signal_count
        if not is_index(equivalent_signal_index) or (
            equivalent_signal_index != NO_RELATION and not 0 <= equivalent_signal_index <= new_index
        ):
            logger.debug(f"Rejected signal linked to unknown index {equivalent_signal_index}")
            return INVALID_INDEX

        self._signals.append(signal.clone())
        self._equivalences = np.append(self._equivalences, np.int64(equivalent_signal_index))
        self._update_equivalence_classes()

        return new_index

    def add_signals(self, signals: Iterable[Signal]) -> bool:
        """Add several signals without links, all or nothing."""
        signals = list(signals)
        for signal in signals:
            if signal is None or not signal.has_nuclei(self.nuclei):
                logger.debug(f"Rejected batch of {len(signals)} signals: nuclei mismatch")
                return False
        for signal in signals:
            self.add_signal(signal)

        return True

    def remove_signal(self, signal_index: int, assignments: Iterable = ()) -> bool:
        """Remove one signal together with its equivalence table slot.

        Links pointing at the removed signal become NO_RELATION, links to
        higher indices are shifted down by one. The same slot is removed
        from every passed Assignment that fits this registry; stale
        assignments (see Assignment.is_stale_for) are left untouched.

        Returns
        -------
        success : bool
            False if signal_index is out of range (nothing changed)
        """
        if not self.check_signal_index(signal_index):
            return False

        fitting = []
        for assignment in assignments:
            if assignment.is_stale_for(self):
                logger.debug(f"Skipped stale {assignment!r} while removing signal {signal_index}")
            else:
                fitting.append(assignment)

        del self._signals[signal_index]
        self._equivalences = renumber_after_removal(self._equivalences, signal_index)
        for assignment in fitting:
            assignment.remove_signal(signal_index)
        self._update_equivalence_classes()

        return True

    # =========================================================================
    # Accessors
    # =========================================================================

    def get_signal(self, signal_index: int) -> Optional[Signal]:
        """Return a copy of the stored signal, None for invalid index."""
        if not self.check_signal_index(signal_index):
            return None
        return self._signals[signal_index].clone()

    def get_signals(self) -> List[Signal]:
        return [signal.clone() for signal in self._signals]

    def get_signal_index(self, signal: Signal) -> int:
        """Position of an equal signal, INVALID_INDEX if not present."""
        for i, stored in enumerate(self._signals):
            if stored == signal:
                return i
        return INVALID_INDEX

    def get_shift(self, signal_index: int, dim: int) -> Optional[float]:
        if not self.check_signal_index(signal_index) or not self.contains_dim(dim):
            return None
        return self._signals[signal_index].get_shift(dim)

    def get_shifts(self, dim: int) -> np.ndarray:
        """Shifts of all signals in one dimension (NaN where unknown).

        Returns an empty array for an undeclared dimension.
        """
        if not self.contains_dim(dim):
            return np.empty(0, dtype=np.float64)
        return np.array(
            [np.nan if s.shifts[dim] is None else s.shifts[dim] for s in self._signals],
            dtype=np.float64,
        )

    def get_multiplicity(self, signal_index: int) -> Optional[str]:
        if not self.check_signal_index(signal_index):
            return None
        return self._signals[signal_index].multiplicity

    def get_multiplicities(self) -> List[Optional[str]]:
        return [signal.multiplicity for signal in self._signals]

    def get_intensity(self, signal_index: int) -> Optional[float]:
        if not self.check_signal_index(signal_index):
            return None
        return self._signals[signal_index].intensity

    def get_intensities(self) -> List[Optional[float]]:
        return [signal.intensity for signal in self._signals]

    def get_equivalence(self, signal_index: int) -> Optional[int]:
        if not self.check_signal_index(signal_index):
            return None
        return int(self._equivalences[signal_index])

    def get_equivalences(self) -> np.ndarray:
        return self._equivalences.copy()

    def get_equivalence_labels(self) -> np.ndarray:
        """Current class id per signal (see label_equivalence_classes)."""
        return self._class_labels.copy()

    def get_signal_count_with_equivalences(self) -> int:
        """Number of nuclei represented, i.e. sum of equivalences_count."""
        return sum(signal.equivalences_count for signal in self._signals)

    # =========================================================================
    # Setters
    # =========================================================================

    def set_shift(self, shift: Optional[float], dim: int, signal_index: int) -> bool:
        if not self.contains_dim(dim) or not self.check_signal_index(signal_index):
            return False
        return self._signals[signal_index].set_shift(shift, dim)

    def set_shifts(self, shifts: Sequence[Optional[float]], dim: int) -> bool:
        if not self.contains_dim(dim) or not self._check_input_size(len(shifts)):
            return False
        for i, shift in enumerate(shifts):
            self._signals[i].set_shift(shift, dim)
        return True

    def set_intensity(self, intensity: Optional[float], signal_index: int) -> bool:
        if not self.check_signal_index(signal_index):
            return False
        self._signals[signal_index].intensity = intensity
        return True

    def set_intensities(self, intensities: Sequence[Optional[float]]) -> bool:
        if not self._check_input_size(len(intensities)):
            return False
        for signal, intensity in zip(self._signals, intensities):
            signal.intensity = intensity
        return True

    def set_multiplicity(self, multiplicity: Optional[str], signal_index: int) -> bool:
        if not self.check_signal_index(signal_index):
            return False
        self._signals[signal_index].multiplicity = multiplicity
        return True

    def set_multiplicities(self, multiplicities: Sequence[Optional[str]]) -> bool:
        if not self._check_input_size(len(multiplicities)):
            return False
        for signal, multiplicity in zip(self._signals, multiplicities):
            signal.multiplicity = multiplicity
        return True

    # =========================================================================
    # Equivalence table
    # =========================================================================

    def set_equivalence(self, signal_index: int, equivalent_signal_index: int) -> bool:
        """Link signal_index to equivalent_signal_index; both must exist."""
        if not self.check_signal_index(signal_index) or not self.check_signal_index(equivalent_signal_index):
            return False
        self._equivalences[signal_index] = equivalent_signal_index
        self._update_equivalence_classes()
        return True

    def set_equivalences(self, equivalences: Sequence[int]) -> bool:
        """Replace the whole table; every entry must be -1 or a valid index."""
        equivalences = np.asarray(equivalences)
        if not self._check_input_size(len(equivalences)):
            return False
        if equivalences.size and not np.issubdtype(equivalences.dtype, np.integer):
            logger.debug(f"Rejected equivalence table of dtype {equivalences.dtype}")
            return False
        equivalences = equivalences.astype(np.int64)
        valid = (equivalences == NO_RELATION) | ((equivalences >= 0) & (equivalences < self.signal_count))
        if not valid.all():
            return False
        self._equivalences = equivalences.copy()
        self._update_equivalence_classes()
        return True

    def _update_equivalence_classes(self):
        self._class_labels = label_equivalence_classes(self._equivalences)

    # =========================================================================
    # Copy
    # =========================================================================

    def clone(self) -> "SignalRegistry":
        """Deep copy with signals, links and metadata."""
        registry = SignalRegistry(self.nuclei)
        registry.spec_type = self.spec_type
        registry.description = self.description
        registry.solvent = self.solvent
        registry.standard = self.standard
        registry.spectrometer_frequency = self.spectrometer_frequency
        registry._signals = [signal.clone() for signal in self._signals]
        registry._equivalences = self._equivalences.copy()
        registry._class_labels = self._class_labels.copy()
        return registry

    def __repr__(self) -> str:
        return f"SignalRegistry(nuclei={self.nuclei}, signal_count={self.signal_count})"
