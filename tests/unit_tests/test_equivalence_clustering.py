"""Tests for equivalence detection and equivalence classes.

Tests:
- Class labelling kernel (closure in both link directions)
- Greedy backward detection (exact and tolerant)
- Partition law and idempotence
- Parameter presets
- Eager recomputation after every mutation
"""

import numpy as np
import pytest

from alphanmr.constants import NO_RELATION
from alphanmr.equivalence import (
    EquivalenceClusterer,
    EquivalenceDetectionParams,
    detect_backward_links,
    encode_multiplicities,
)
from alphanmr.signals import Signal, SignalRegistry, label_equivalence_classes, renumber_after_removal


def carbon(shift, multiplicity="s"):
    return Signal(nuclei=("13C",), shifts=[shift], multiplicity=multiplicity)


def registry_from(shifts, multiplicities):
    registry = SignalRegistry(["13C"])
    for shift, multiplicity in zip(shifts, multiplicities):
        registry.add_signal(carbon(shift, multiplicity))
    return registry


def assert_partition(classes, n_signals):
    """Classes are disjoint and cover 0..n-1."""
    members = [i for group in classes.values() for i in group]
    assert sorted(members) == list(range(n_signals))
    assert len(members) == len(set(members))
    assert list(classes.keys()) == list(range(len(classes)))


class TestLabelKernel:
    """Test label_equivalence_classes() and renumber_after_removal()."""

    def test_no_links(self):
        labels = label_equivalence_classes(np.array([-1, -1, -1], dtype=np.int64))
        assert labels.tolist() == [0, 1, 2]

    def test_empty(self):
        labels = label_equivalence_classes(np.empty(0, dtype=np.int64))
        assert labels.size == 0

    def test_backward_link_closes_both_ways(self):
        """If 2 links to 0, 0's class contains 2 even though 0 links nowhere."""
        labels = label_equivalence_classes(np.array([-1, -1, 0], dtype=np.int64))
        assert labels.tolist() == [0, 1, 0]

    def test_forward_link(self):
        labels = label_equivalence_classes(np.array([2, -1, -1], dtype=np.int64))
        assert labels.tolist() == [0, 1, 0]

    def test_two_signals_pointing_at_same_root(self):
        labels = label_equivalence_classes(np.array([-1, 0, -1, 0], dtype=np.int64))
        assert labels.tolist() == [0, 0, 1, 0]

    def test_chain(self):
        labels = label_equivalence_classes(np.array([-1, 0, 1, -1, 2], dtype=np.int64))
        assert labels.tolist() == [0, 0, 0, 1, 0]

    def test_self_link(self):
        labels = label_equivalence_classes(np.array([0, -1], dtype=np.int64))
        assert labels.tolist() == [0, 1]

    def test_class_ids_follow_smallest_member(self):
        labels = label_equivalence_classes(np.array([-1, 3, -1, -1, 2], dtype=np.int64))
        # classes: {0}, {1, 3}, {2, 4}
        assert labels.tolist() == [0, 1, 2, 1, 2]

    def test_renumber_kernel(self):
        renumbered = renumber_after_removal(np.array([-1, 0, 1], dtype=np.int64), 1)
        assert renumbered.tolist() == [-1, -1]

        renumbered = renumber_after_removal(np.array([3, -1, 0, 2], dtype=np.int64), 0)
        assert renumbered.tolist() == [-1, -1, 1]


class TestEncodeMultiplicities:
    """Test multiplicity encoding for the Numba kernel."""

    def test_equal_labels_equal_codes(self):
        codes = encode_multiplicities(["s", "d", None, "s", None])
        assert codes.tolist() == [0, 1, 2, 0, 2]

    def test_empty(self):
        assert encode_multiplicities([]).size == 0


class TestDetectEquivalences:
    """Test greedy backward equivalence detection."""

    def test_exact_duplicates(self, duplicate_shift_registry):
        """Shifts [30, 30, 75], all singlets -> links [-1, 0, -1]."""
        clusterer = EquivalenceClusterer(duplicate_shift_registry)

        links = clusterer.detect_equivalences(0.0)

        assert links.tolist() == [-1, 0, -1]
        assert duplicate_shift_registry.get_equivalences().tolist() == [-1, 0, -1]
        assert clusterer.get_equivalent_signal_classes() == {0: [0, 1], 1: [2]}

    def test_multiplicity_must_match(self):
        registry = registry_from([30.0, 30.0], ["s", "d"])
        links = EquivalenceClusterer(registry).detect_equivalences(0.0)
        assert links.tolist() == [-1, -1]

    def test_none_multiplicity_matches_none(self):
        registry = registry_from([30.0, 30.0, 30.0], [None, "s", None])
        links = EquivalenceClusterer(registry).detect_equivalences(0.0)
        assert links.tolist() == [-1, -1, 0]

    def test_closest_earlier_candidate_wins(self):
        registry = registry_from([30.0, 30.3, 30.1], ["s", "s", "s"])
        links = EquivalenceClusterer(registry).detect_equivalences(0.5)
        # signal 2 (30.1): candidates by distance 2 (self), 0 (0.1), 1 (0.2)
        assert links.tolist() == [-1, 0, 0]

    def test_only_backward_links(self):
        registry = registry_from([30.0, 30.0, 30.0], ["s", "s", "s"])
        links = EquivalenceClusterer(registry).detect_equivalences(0.0)
        assert links.tolist() == [-1, 0, 0]
        assert np.all((links == NO_RELATION) | (links < np.arange(3)))

    def test_tolerant_detection_not_transitive(self):
        """A~B and B~C within tolerance, A and C too far apart.

        Greedy linking still joins all three through B, while a pair-wise
        check of A and C alone would not.
        """
        registry = registry_from([30.0, 30.15, 30.3], ["s", "s", "s"])
        clusterer = EquivalenceClusterer(registry)

        links = clusterer.detect_equivalences(0.2)

        assert links.tolist() == [-1, 0, 1]
        assert abs(registry.get_shift(2, 0) - registry.get_shift(0, 0)) > 0.2
        assert clusterer.get_equivalent_signal_classes() == {0: [0, 1, 2]}

    def test_order_dependence(self):
        """Same shifts in another order give another link table."""
        forward = registry_from([30.0, 30.15, 30.3], ["s", "s", "s"])
        shuffled = registry_from([30.15, 30.0, 30.3], ["s", "s", "s"])

        links_forward = EquivalenceClusterer(forward).detect_equivalences(0.2)
        links_shuffled = EquivalenceClusterer(shuffled).detect_equivalences(0.2)

        assert links_forward.tolist() == [-1, 0, 1]
        assert links_shuffled.tolist() == [-1, 0, 0]

    def test_unknown_shift_never_linked(self):
        registry = registry_from([30.0, None, 30.0], ["s", "s", "s"])
        links = EquivalenceClusterer(registry).detect_equivalences(0.0)
        assert links.tolist() == [-1, -1, 0]

    def test_detection_replaces_existing_links(self, duplicate_shift_registry):
        duplicate_shift_registry.set_equivalence(2, 0)
        links = EquivalenceClusterer(duplicate_shift_registry).detect_equivalences(0.0)
        assert links.tolist() == [-1, 0, -1]

    def test_default_tolerance_from_params(self):
        registry = registry_from([30.0, 30.05], ["s", "s"])

        exact = EquivalenceClusterer(registry).detect_equivalences()
        assert exact.tolist() == [-1, -1]

        tolerant = EquivalenceClusterer(registry, EquivalenceDetectionParams(tolerance=0.1))
        assert tolerant.detect_equivalences().tolist() == [-1, 0]

    def test_empty_registry(self, empty_carbon_registry):
        links = EquivalenceClusterer(empty_carbon_registry).detect_equivalences(0.0)
        assert links.size == 0

    def test_kernel_directly(self):
        links = detect_backward_links(
            np.array([5.0, 5.0, 6.0]),
            np.array([0, 0, 0], dtype=np.int64),
            0.0,
        )
        assert links.tolist() == [-1, 0, -1]


class TestEquivalenceClasses:
    """Test partition reads and explicit links."""

    def test_singletons(self, close_shift_registry):
        classes = EquivalenceClusterer(close_shift_registry).get_equivalent_signal_classes()
        assert classes == {0: [0], 1: [1], 2: [2]}

    def test_set_equivalence(self, close_shift_registry):
        clusterer = EquivalenceClusterer(close_shift_registry)

        assert clusterer.set_equivalence(0, 2) is True

        assert clusterer.get_equivalent_signal_classes() == {0: [0, 2], 1: [1]}

    def test_set_equivalence_invalid(self, close_shift_registry):
        clusterer = EquivalenceClusterer(close_shift_registry)
        assert clusterer.set_equivalence(0, 3) is False
        assert clusterer.set_equivalence(-1, 0) is False
        assert close_shift_registry.get_equivalences().tolist() == [-1, -1, -1]

    def test_idempotent(self, chained_registry):
        clusterer = EquivalenceClusterer(chained_registry)
        assert clusterer.get_equivalent_signal_classes() == clusterer.get_equivalent_signal_classes()

    def test_partition_law_random_tables(self):
        rng = np.random.default_rng(3)
        for _ in range(50):
            n = int(rng.integers(1, 15))
            registry = registry_from([float(x) for x in rng.integers(0, 4, n)], ["s"] * n)
            registry.set_equivalences(rng.integers(-1, n, n))

            classes = EquivalenceClusterer(registry).get_equivalent_signal_classes()

            assert_partition(classes, n)

    def test_partition_after_detection(self):
        rng = np.random.default_rng(11)
        shifts = [float(x) for x in rng.integers(0, 6, 20)]
        multiplicities = [str(m) for m in rng.choice(["s", "d", "t"], 20)]
        registry = registry_from(shifts, multiplicities)
        clusterer = EquivalenceClusterer(registry)

        clusterer.detect_equivalences(1.0)

        assert_partition(clusterer.get_equivalent_signal_classes(), 20)

    def test_classes_follow_add_and_remove(self, duplicate_shift_registry):
        clusterer = EquivalenceClusterer(duplicate_shift_registry)
        clusterer.detect_equivalences(0.0)

        duplicate_shift_registry.add_signal(carbon(75.0), equivalent_signal_index=2)
        assert clusterer.get_equivalent_signal_classes() == {0: [0, 1], 1: [2, 3]}

        duplicate_shift_registry.remove_signal(0)
        assert clusterer.get_equivalent_signal_classes() == {0: [0], 1: [1, 2]}

    def test_clear_equivalences(self, chained_registry):
        clusterer = EquivalenceClusterer(chained_registry)
        clusterer.clear_equivalences()
        assert chained_registry.get_equivalences().tolist() == [-1, -1, -1]
        assert clusterer.get_equivalent_signal_classes() == {0: [0], 1: [1], 2: [2]}

    def test_get_equivalent_signals(self, chained_registry):
        clusterer = EquivalenceClusterer(chained_registry)
        assert clusterer.get_equivalent_signals(0) == [1, 2]
        assert clusterer.get_equivalent_signals(2) == [0, 1]
        assert clusterer.get_equivalent_signals(3) is None

    def test_has_equivalences(self, duplicate_shift_registry):
        clusterer = EquivalenceClusterer(duplicate_shift_registry)
        clusterer.detect_equivalences(0.0)

        assert clusterer.has_equivalences(0) is True  # linked from 1
        assert clusterer.has_equivalences(1) is True
        assert clusterer.has_equivalences(2) is False
        assert clusterer.has_equivalences(5) is None


class TestEquivalenceDetectionParams:
    """Test parameter presets and validation."""

    def test_default_is_exact(self):
        assert EquivalenceDetectionParams().tolerance == 0.0

    def test_carbon_preset(self):
        assert EquivalenceDetectionParams.for_nucleus("13C").tolerance == 0.1

    def test_proton_preset(self):
        assert EquivalenceDetectionParams.for_nucleus("1H").tolerance == 0.01

    def test_unknown_nucleus(self):
        with pytest.raises(ValueError):
            EquivalenceDetectionParams.for_nucleus("2H")

    def test_negative_tolerance(self):
        with pytest.raises(ValueError):
            EquivalenceDetectionParams(tolerance=-0.1)
