"""Single NMR resonance signal.

A Signal stores one resolved peak: a chemical shift per dimension, its
splitting pattern, intensity and how many equivalent nuclei it represents.
Signals only become meaningful once added to a SignalRegistry, which keeps
its own copy.
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Sequence, Tuple

from ..constants import is_index


@dataclass
class Signal:
    """Container for one resonance entry.

    Attributes
    ----------
    nuclei : Tuple[str, ...]
        Nucleus label per dimension, e.g. ('13C',) or ('1H', '13C')
    shifts : List[Optional[float]]
        Chemical shift per dimension (ppm), None if unknown
    multiplicity : str or None
        Splitting pattern label ('s', 'd', 't', 'q', 'm', ...), None = "none"
    intensity : float or None
        Peak intensity
    equivalences_count : int
        Number of equivalent nuclei represented by this signal (>= 1)
    kind : str
        Signal kind, 'signal' for real peaks
    sign : int or None
        Phase sign for edited experiments
    id : str or None
        Opaque identifier from the source record
    """

    nuclei: Tuple[str, ...]
    shifts: List[Optional[float]] = field(default_factory=list)
    multiplicity: Optional[str] = None
    intensity: Optional[float] = None
    equivalences_count: int = 1
    kind: str = "signal"
    sign: Optional[int] = None
    id: Optional[str] = None

    def __post_init__(self):
        self.nuclei = tuple(self.nuclei)
        if not self.shifts:
            self.shifts = [None] * len(self.nuclei)
        else:
            self.shifts = list(self.shifts)
        if len(self.shifts) != len(self.nuclei):
            raise ValueError(
                f"Got {len(self.shifts)} shifts for {len(self.nuclei)} nuclei {self.nuclei}"
            )
        if self.equivalences_count < 1:
            raise ValueError(f"equivalences_count must be >= 1, got {self.equivalences_count}")

    @property
    def n_dims(self) -> int:
        return len(self.nuclei)

    def contains_dim(self, dim: int) -> bool:
        return is_index(dim) and 0 <= dim < self.n_dims

    def get_shift(self, dim: int) -> Optional[float]:
        if not self.contains_dim(dim):
            return None
        return self.shifts[dim]

    def set_shift(self, shift: Optional[float], dim: int) -> bool:
        if not self.contains_dim(dim):
            return False
        self.shifts[dim] = shift
        return True

    def has_nuclei(self, nuclei: Sequence[str]) -> bool:
        """Check dimension signature (count and labels) against nuclei."""
        return self.nuclei == tuple(nuclei)

    def clone(self) -> "Signal":
        return replace(self, shifts=list(self.shifts))
