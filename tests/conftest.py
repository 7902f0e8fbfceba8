# conftest.py

import numpy as np
import pytest

from container import BoundaryContainer
from laws import CoulombLaw, ImpulseCollision


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def box():
    """A 1000 x 500 container with the gate open."""
    return BoundaryContainer.from_size(1000.0, 500.0)


@pytest.fixture
def gated_box():
    """A 1000 x 500 container with the gate closed (midline at x = 500)."""
    return BoundaryContainer.from_size(1000.0, 500.0, gate_active=True)


@pytest.fixture
def impulse_law():
    return ImpulseCollision()


@pytest.fixture
def coulomb_law():
    return CoulombLaw()
