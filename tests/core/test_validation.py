"""
Tests for input validation utilities.
"""

import numpy as np
import pytest

from pynls.core.exceptions import DimensionError, DomainError, ValidationError
from pynls.core.validation import (
    check_1d,
    check_2d,
    check_array,
    check_consistent_length,
    check_finite,
    check_min_samples,
    check_param_count,
    check_positive,
)


# ═══════════════════════════════════════════════════════════════════════
# check_array
# ═══════════════════════════════════════════════════════════════════════


class TestCheckArray:
    """check_array converts to ndarray and rejects non-numeric data."""

    def test_list_to_float_array(self):
        result = check_array([1, 2, 3], "x")
        assert np.issubdtype(result.dtype, np.floating)
        np.testing.assert_array_equal(result, [1.0, 2.0, 3.0])

    def test_float32_preserved(self):
        result = check_array(np.array([1.0, 2.0], dtype=np.float32), "x")
        assert result.dtype == np.float32

    def test_scalar_becomes_0d(self):
        assert check_array(5.0, "x").ndim == 0

    def test_rejects_mixed_types(self):
        with pytest.raises(ValidationError, match="object dtype"):
            check_array([None, 1, 2.0], "x")

    def test_rejects_strings(self):
        with pytest.raises(ValidationError, match="non-numeric dtype"):
            check_array(["a", "b"], "x")

    def test_rejects_complex(self):
        with pytest.raises(ValidationError, match="complex"):
            check_array([1 + 2j, 3.0], "x")

    def test_error_message_includes_name(self):
        with pytest.raises(ValidationError, match="my_var"):
            check_array(["a"], "my_var")


# ═══════════════════════════════════════════════════════════════════════
# check_finite / shape checks
# ═══════════════════════════════════════════════════════════════════════


class TestCheckFinite:

    def test_finite_passes(self):
        check_finite(np.array([1.0, 2.0, 3.0]), "x")

    def test_counts_reported(self):
        with pytest.raises(ValidationError, match="2 NaN.*1 Inf"):
            check_finite(np.array([np.nan, np.inf, np.nan]), "x")


class TestShapeChecks:

    def test_1d_passes(self):
        check_1d(np.zeros(3), "x")

    def test_1d_rejects_2d(self):
        with pytest.raises(DimensionError, match="expected 1D"):
            check_1d(np.zeros((3, 2)), "x")

    def test_2d_rejects_1d(self):
        with pytest.raises(DimensionError, match="expected 2D"):
            check_2d(np.zeros(3), "X")

    def test_consistent_length(self):
        check_consistent_length(np.zeros(4), np.zeros(4), names=("x", "y"))

    def test_inconsistent_length(self):
        with pytest.raises(DimensionError, match="x=4, y=5"):
            check_consistent_length(np.zeros(4), np.zeros(5), names=("x", "y"))

    def test_names_must_match(self):
        with pytest.raises(ValueError):
            check_consistent_length(np.zeros(4), np.zeros(4), names=("x",))

    def test_min_samples(self):
        with pytest.raises(ValidationError, match="at least 3 samples, got 2"):
            check_min_samples(np.zeros(2), 3, "y")


# ═══════════════════════════════════════════════════════════════════════
# check_positive / check_param_count
# ═══════════════════════════════════════════════════════════════════════


class TestCheckPositive:

    def test_positive_passes(self):
        check_positive(np.array([0.1, 1.0, 100.0]), "x")

    def test_zero_fails(self):
        with pytest.raises(DomainError) as exc_info:
            check_positive(np.array([1.0, 0.0]), "x", model_name="logfun")
        err = exc_info.value
        assert err.n_invalid == 1
        assert err.min_value == 0.0
        assert err.model_name == "logfun"
        assert "logfun" in str(err)

    def test_scalar(self):
        with pytest.raises(DomainError):
            check_positive(np.array(-1.0), "x")


class TestCheckParamCount:

    def test_correct_length(self):
        check_param_count(np.array([1.0, 2.0]), 2, "start")

    def test_wrong_length(self):
        with pytest.raises(DimensionError, match="expected 3 values"):
            check_param_count(np.array([1.0, 2.0]), 3, "start")

    def test_wrong_rank(self):
        with pytest.raises(DimensionError):
            check_param_count(np.zeros((2, 1)), 2, "start")
