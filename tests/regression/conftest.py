"""
Regression test fixtures.
"""

import numpy as np
import pytest


@pytest.fixture
def simple_regression_data(rng):
    """Intercept plus two predictors, sigma = 0.1."""
    n = 100
    X = np.column_stack([
        np.ones(n),
        rng.standard_normal(n),
        rng.standard_normal(n),
    ])
    beta_true = np.array([1.0, 2.0, -0.5])
    y = X @ beta_true + rng.standard_normal(n) * 0.1
    return X, y, beta_true
