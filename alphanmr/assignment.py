"""Signal-to-atom assignments.

Maps each signal of a registry to atom indices of an external structure,
per dimension. One signal can carry several atoms (magnetic equivalence)
and one atom can appear in several signals.

An Assignment belongs to one registry snapshot. If the registry changes
size without the assignment being passed to remove_signal(), the
assignment is stale and must be rebuilt (see is_stale_for()).
"""

import logging
from typing import List, Optional, Sequence

from .constants import is_index

logger = logging.getLogger(__name__)


class Assignment:
    """Per-dimension mapping from signal index to atom indices.

    Examples
    --------
    >>> assignment = Assignment(["13C"])
    >>> assignment.init_assignments(2)
    >>> assignment.add_assignment_equivalence(0, 1, 7)
    True
    >>> assignment.add_assignment_equivalence(0, 1, 8)
    True
    >>> assignment.get_indices(0, 8)
    [1]
    """

    def __init__(self, nuclei: Sequence[str]):
        self.nuclei = tuple(nuclei)
        self._assignments: List[List[List[int]]] = [[] for _ in self.nuclei]

    @property
    def n_dims(self) -> int:
        return len(self.nuclei)

    @property
    def signal_count(self) -> int:
        return len(self._assignments[0]) if self._assignments else 0

    def contains_dim(self, dim: int) -> bool:
        return is_index(dim) and 0 <= dim < self.n_dims

    def check_signal_index(self, signal_index: Optional[int]) -> bool:
        return is_index(signal_index) and 0 <= signal_index < self.signal_count

    def init_assignments(self, signal_count: int):
        """Reset to signal_count empty atom lists in every dimension."""
        self._assignments = [[[] for _ in range(signal_count)] for _ in self.nuclei]

    def add_assignment_equivalence(self, dim: int, signal_index: int, atom_index: int) -> bool:
        """Append atom_index to the atoms of signal_index."""
        if not self.contains_dim(dim) or not self.check_signal_index(signal_index):
            logger.debug(f"Cannot assign atom {atom_index} to signal {signal_index} in dim {dim}")
            return False
        self._assignments[dim][signal_index].append(atom_index)
        return True

    def set_assignment(self, dim: int, signal_index: int, atom_indices: Sequence[int]) -> bool:
        if not self.contains_dim(dim) or not self.check_signal_index(signal_index):
            return False
        self._assignments[dim][signal_index] = list(atom_indices)
        return True

    def get_assignment(self, dim: int, signal_index: int) -> Optional[List[int]]:
        if not self.contains_dim(dim) or not self.check_signal_index(signal_index):
            return None
        return list(self._assignments[dim][signal_index])

    def get_indices(self, dim: int, atom_index: int) -> List[int]:
        """Signal indices whose atom list contains atom_index (ascending)."""
        if not self.contains_dim(dim):
            return []
        return [
            signal_index
            for signal_index, atom_indices in enumerate(self._assignments[dim])
            if atom_index in atom_indices
        ]

    def get_assigned_atom_indices(self, dim: int) -> List[int]:
        """All atom indices assigned in dim, in signal order, duplicates kept."""
        if not self.contains_dim(dim):
            return []
        return [atom for atom_indices in self._assignments[dim] for atom in atom_indices]

    def remove_signal(self, signal_index: int) -> bool:
        """Drop one signal slot in every dimension; later slots shift down."""
        if not self.check_signal_index(signal_index):
            return False
        for per_signal in self._assignments:
            del per_signal[signal_index]
        return True

    def is_stale_for(self, registry) -> bool:
        """True if this assignment no longer fits registry's shape."""
        return self.nuclei != registry.nuclei or self.signal_count != registry.signal_count

    def __repr__(self) -> str:
        return f"Assignment(nuclei={self.nuclei}, signal_count={self.signal_count})"
