"""Numba kernels for the registry equivalence table.

The equivalence table is an int64 array parallel to the signal list. Entry
i is either NO_RELATION (-1) or the index of the signal that i is linked to.
Classes are the connected components of the undirected link graph, so a
signal belongs to the class of every signal pointing at it as well as the
one it points to.

Performance
-----------
Union-find with path halving, near O(n) per recomputation. Registries are
small, the whole partition is rebuilt after every mutation.
"""

import numpy as np
import numba


@numba.jit(nopython=True, cache=True)
def _find_root(parent: np.ndarray, i: int) -> int:
    while parent[i] != i:
        parent[i] = parent[parent[i]]
        i = parent[i]
    return i


@numba.jit(nopython=True, cache=True)
def label_equivalence_classes(equivalences: np.ndarray) -> np.ndarray:
    """Label every signal with its equivalence class id.

    Parameters
    ----------
    equivalences : np.ndarray (int64)
        Equivalence table, -1 for no relation

    Returns
    -------
    labels : np.ndarray (int64)
        Class id per signal. Ids are 0..k-1, numbered in order of each
        class's smallest signal index.

    Examples
    --------
    >>> label_equivalence_classes(np.array([-1, 0, -1, 1]))
    array([0, 0, 1, 0])
    """
    n = len(equivalences)
    parent = np.arange(n)

    for i in range(n):
        j = equivalences[i]
        if j < 0 or j >= n:
            continue
        root_i = _find_root(parent, i)
        root_j = _find_root(parent, j)
        # Smaller index stays root, so each root is its class minimum
        if root_i < root_j:
            parent[root_j] = root_i
        elif root_j < root_i:
            parent[root_i] = root_j

    labels = np.full(n, -1, dtype=np.int64)
    n_classes = 0
    for i in range(n):
        root = _find_root(parent, i)
        if root == i:
            labels[i] = n_classes
            n_classes += 1
        else:
            labels[i] = labels[root]

    return labels


@numba.jit(nopython=True, cache=True)
def renumber_after_removal(equivalences: np.ndarray, removed_index: int) -> np.ndarray:
    """Drop one slot from the equivalence table and fix remaining links.

    Links to the removed signal become -1, links above it shift down by one.

    Examples
    --------
    >>> renumber_after_removal(np.array([-1, 0, 1]), 1)
    array([-1, -1])
    """
    n = len(equivalences)
    renumbered = np.empty(n - 1, dtype=np.int64)
    k = 0
    for i in range(n):
        if i == removed_index:
            continue
        link = equivalences[i]
        if link == removed_index:
            link = -1
        elif link > removed_index:
            link -= 1
        renumbered[k] = link
        k += 1
    return renumbered
