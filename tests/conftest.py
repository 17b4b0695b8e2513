"""Pytest configuration for AlphaNMR tests.

This module provides common fixtures and configuration for all tests.
Registries are small hand-built 13C and HSQC-like examples.
"""

import numpy as np
import pytest

from alphanmr.signals import Signal, SignalRegistry


def _carbon_signal(shift, multiplicity="s", intensity=None):
    """1D 13C signal helper."""
    return Signal(nuclei=("13C",), shifts=[shift], multiplicity=multiplicity, intensity=intensity)


@pytest.fixture
def empty_carbon_registry():
    """Empty 1D 13C registry."""
    return SignalRegistry(["13C"])


@pytest.fixture
def duplicate_shift_registry():
    """Two identical singlets and one distinct singlet: 30.0, 30.0, 75.0."""
    registry = SignalRegistry(["13C"])
    for shift in (30.0, 30.0, 75.0):
        registry.add_signal(_carbon_signal(shift, "s"))
    return registry


@pytest.fixture
def close_shift_registry():
    """Three close shifts: 30.0, 30.2, 31.0."""
    registry = SignalRegistry(["13C"])
    for shift, multiplicity in ((30.0, "s"), (30.2, "d"), (31.0, "t")):
        registry.add_signal(_carbon_signal(shift, multiplicity))
    return registry


@pytest.fixture
def chained_registry():
    """Three signals with equivalence table [-1, 0, 1]."""
    registry = SignalRegistry(["13C"])
    registry.add_signal(_carbon_signal(20.0, "q"))
    registry.add_signal(_carbon_signal(20.0, "q"), equivalent_signal_index=0)
    registry.add_signal(_carbon_signal(20.0, "q"), equivalent_signal_index=1)
    return registry


@pytest.fixture
def hsqc_registry():
    """2D 1H/13C registry with three cross peaks."""
    registry = SignalRegistry(["1H", "13C"])
    registry.add_signal(Signal(("1H", "13C"), [1.2, 22.5], "q", 10.0))
    registry.add_signal(Signal(("1H", "13C"), [3.6, 61.0], "t", 8.0))
    registry.add_signal(Signal(("1H", "13C"), [7.2, 128.4], "d", 12.0))
    return registry


# Random seed for reproducibility
@pytest.fixture(scope="session", autouse=True)
def set_random_seed():
    """Set random seed for reproducible tests."""
    np.random.seed(42)
