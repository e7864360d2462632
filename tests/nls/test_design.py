"""
Tests for NLSDesign construction.
"""

from dataclasses import FrozenInstanceError

import numpy as np
import pytest

from pynls.core.exceptions import DimensionError, ValidationError
from pynls.models import decay, get_model
from pynls.nls import NLSDesign


X = np.linspace(0, 10, 20)
Y = decay(X, 4.0, 0.3)


class TestBuild:

    def test_self_start(self):
        design = NLSDesign.build('decay', X, Y)
        assert design.model is get_model('decay')
        assert design.start_source == 'self_start'
        np.testing.assert_allclose(design.start, [4.0, 0.3])
        assert design.n == 20
        assert design.p == 2
        assert not design.has_bounds

    def test_user_start(self):
        design = NLSDesign.build('decay', X, Y, start=[1.0, 1.0])
        assert design.start_source == 'user'
        np.testing.assert_array_equal(design.start, [1.0, 1.0])

    def test_residuals(self):
        design = NLSDesign.build('decay', X, Y)
        np.testing.assert_allclose(design.residuals(np.array([4.0, 0.3])), 0.0, atol=1e-12)
        np.testing.assert_allclose(
            design.residuals(np.array([5.0, 0.3])), decay(X, 1.0, 0.3)
        )

    def test_column_vector_y(self):
        design = NLSDesign.build('decay', X, Y.reshape(-1, 1))
        assert design.y.shape == (20,)

    def test_frozen(self):
        design = NLSDesign.build('decay', X, Y)
        with pytest.raises(FrozenInstanceError):
            design.start = np.zeros(2)


class TestBounds:

    def test_scalar_bounds(self):
        design = NLSDesign.build('decay', X, Y, bounds=(0.0, 100.0))
        np.testing.assert_array_equal(design.lower, [0.0, 0.0])
        np.testing.assert_array_equal(design.upper, [100.0, 100.0])
        assert design.has_bounds

    def test_mapping_bounds_fill_unbounded(self):
        design = NLSDesign.build('decay', X, Y, bounds=({'b': 0.0}, None))
        assert design.lower[0] == -np.inf
        assert design.lower[1] == 0.0
        assert np.all(np.isinf(design.upper))

    def test_self_start_clipped_into_bounds(self):
        design = NLSDesign.build('decay', X, Y, bounds=([0.0, 0.0], [2.0, 1.0]))
        assert design.start[0] == 2.0

    def test_lower_not_below_upper(self):
        with pytest.raises(ValidationError, match="lower must be < upper"):
            NLSDesign.build('decay', X, Y, bounds=([0.0, 1.0], [1.0, 1.0]))

    def test_not_a_pair(self):
        with pytest.raises(ValidationError, match="pair"):
            NLSDesign.build('decay', X, Y, bounds=[0.0])

    def test_nan_bound(self):
        with pytest.raises(ValidationError, match="NaN"):
            NLSDesign.build('decay', X, Y, bounds=(np.nan, 1.0))

    def test_unknown_bound_name(self):
        with pytest.raises(ValidationError, match="unknown parameter"):
            NLSDesign.build('decay', X, Y, bounds=({'k': 0.0}, None))

    def test_wrong_length_bounds(self):
        with pytest.raises(DimensionError):
            NLSDesign.build('decay', X, Y, bounds=([0.0, 0.0, 0.0], None))


class TestDataValidation:

    def test_length_mismatch(self):
        with pytest.raises(DimensionError, match="x=20, y=19"):
            NLSDesign.build('decay', X, Y[:-1])

    def test_nan_in_y(self):
        y = Y.copy()
        y[0] = np.nan
        with pytest.raises(ValidationError, match="non-finite"):
            NLSDesign.build('decay', X, y)

    def test_2d_x(self):
        with pytest.raises(DimensionError):
            NLSDesign.build('decay', np.ones((20, 2)), Y)

    def test_start_missing_name(self):
        with pytest.raises(ValidationError, match="missing value"):
            NLSDesign.build('decay', X, Y, start={'a': 1.0})

    def test_start_nan(self):
        with pytest.raises(ValidationError, match="non-finite"):
            NLSDesign.build('decay', X, Y, start=[np.nan, 1.0])

    def test_model_returning_wrong_shape(self):
        def scalar_model(x, a):
            return a

        with pytest.raises(ValidationError, match="returned shape"):
            NLSDesign.build(scalar_model, X, Y, start=[1.0])
