"""
pytest configuration and shared fixtures.
"""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return np.random.default_rng(42)


@pytest.fixture
def line_data(rng):
    """y = -5 + 3x with small noise."""
    x = np.linspace(0, 10, 50)
    y = -5.0 + 3.0 * x + rng.standard_normal(x.size) * 0.2
    return x, y, np.array([-5.0, 3.0])


@pytest.fixture
def quadratic_data(rng):
    """y = 1 - 2x + 0.5x^2 with small noise."""
    x = np.linspace(-4, 4, 80)
    y = 1.0 - 2.0 * x + 0.5 * x ** 2 + rng.standard_normal(x.size) * 0.1
    return x, y, np.array([1.0, -2.0, 0.5])


@pytest.fixture
def decay_data(rng):
    """y = 10 exp(-0.1 x) with noise."""
    x = np.linspace(0, 40, 60)
    y = 10.0 * np.exp(-0.1 * x) + rng.standard_normal(x.size) * 0.1
    return x, y, np.array([10.0, 0.1])


@pytest.fixture
def logistic_data(rng):
    """Logistic dose-response with midpoint 500 and steepness 0.01."""
    x = np.linspace(0, 1000, 101)
    y = 1.0 / (1.0 + np.exp(-0.01 * (x - 500.0))) + rng.standard_normal(x.size) * 0.02
    return x, y, np.array([0.01, 500.0])
