"""
Tests for nested model comparison.

Validates:
    - Extra sum of squares F statistic and p-value against direct formulas
    - Ordering by residual degrees of freedom
    - Linear and non-linear fits in the same table
    - Rejection of fits that are not comparable
"""

from types import SimpleNamespace

import numpy as np
import pytest
from scipy import stats

from pynls.anova import AnovaSolution, anova
from pynls.core.exceptions import ValidationError
from pynls.nls import nls
from pynls.regression import polyfit


def _fake_fit(rss, df_residual, y, model=None):
    """Minimal object exposing the attributes anova() reads."""
    return SimpleNamespace(
        rss=rss,
        df_residual=df_residual,
        nobs=len(y),
        fitted_values=np.asarray(y, dtype=float),
        residuals=np.zeros(len(y)),
        model=model,
    )


# ═══════════════════════════════════════════════════════════════════════
# F test
# ═══════════════════════════════════════════════════════════════════════


class TestFTest:

    def test_polynomial_degrees(self, quadratic_data):
        x, y, _ = quadratic_data
        line = polyfit(x, y, 1)
        quad = polyfit(x, y, 2)
        result = anova(line, quad)
        assert isinstance(result, AnovaSolution)

        row = result.table[1]
        f_expected = (line.rss - quad.rss) / (quad.rss / quad.df_residual)
        assert row.df == 1
        assert row.sum_sq == pytest.approx(line.rss - quad.rss)
        assert row.f_value == pytest.approx(f_expected)
        assert row.p_value == pytest.approx(stats.f.sf(f_expected, 1, quad.df_residual))
        assert row.p_value < 1e-10

    def test_first_row_has_no_test(self, quadratic_data):
        x, y, _ = quadratic_data
        first = anova(polyfit(x, y, 1), polyfit(x, y, 2)).table[0]
        assert first.df is None
        assert first.f_value is None
        assert first.p_value is None

    def test_unneeded_term_not_significant(self, quadratic_data):
        x, y, _ = quadratic_data
        needed = anova(polyfit(x, y, 1), polyfit(x, y, 2))
        unneeded = anova(polyfit(x, y, 2), polyfit(x, y, 3))
        assert unneeded.p_values[0] > needed.p_values[0]

    def test_three_models(self, quadratic_data):
        x, y, _ = quadratic_data
        result = anova(polyfit(x, y, 1), polyfit(x, y, 2), polyfit(x, y, 3))
        assert [row.res_df for row in result.table] == [78, 77, 76]
        assert len(result.p_values) == 2

    def test_sorted_by_residual_df(self, quadratic_data):
        x, y, _ = quadratic_data
        result = anova(polyfit(x, y, 2), polyfit(x, y, 1))
        assert [row.model for row in result.table] == ['linear', 'poly2']

    def test_nls_models(self, decay_data):
        x, y, _ = decay_data

        def offset_decay(x, a, b, c):
            return a * np.exp(-b * x) + c

        small = nls('decay', x, y)
        big = nls(offset_decay, x, y, start=[10.0, 0.1, 0.0])
        result = anova(small, big)
        assert [row.model for row in result.table] == ['decay', 'offset_decay']
        assert result.table[1].sum_sq >= -1e-8
        assert 0.0 <= result.p_values[0] <= 1.0

    def test_linear_against_nls(self, decay_data):
        x, y, _ = decay_data
        result = anova(polyfit(x, y, 2), nls('decay', x, y), names=['quadratic', 'exp'])
        assert {row.model for row in result.table} == {'quadratic', 'exp'}


# ═══════════════════════════════════════════════════════════════════════
# Edge cases
# ═══════════════════════════════════════════════════════════════════════


class TestEdgeCases:

    def test_perfect_fit_gives_infinite_f(self):
        y = np.arange(10.0)
        result = anova(_fake_fit(5.0, 8, y), _fake_fit(0.0, 7, y))
        assert result.table[1].f_value == float('inf')
        assert result.table[1].p_value == 0.0

    def test_larger_rss_warns(self):
        y = np.arange(10.0)
        result = anova(_fake_fit(1.0, 8, y), _fake_fit(2.0, 7, y))
        assert result.table[1].sum_sq == -1.0
        assert any('larger RSS' in w for w in result.warnings)
        assert 'Warning:' in result.summary()

    def test_default_labels(self):
        y = np.arange(10.0)
        result = anova(_fake_fit(3.0, 8, y), _fake_fit(2.0, 7, y))
        assert [row.model for row in result.table] == ['Model 1', 'Model 2']


# ═══════════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════════


class TestValidation:

    def test_single_fit(self, line_data):
        x, y, _ = line_data
        with pytest.raises(ValidationError, match="at least two fits"):
            anova(polyfit(x, y))

    def test_not_a_fit(self, line_data):
        x, y, _ = line_data
        with pytest.raises(ValidationError, match="missing 'rss'"):
            anova(polyfit(x, y), object())

    def test_names_length(self, line_data):
        x, y, _ = line_data
        with pytest.raises(ValidationError, match="names"):
            anova(polyfit(x, y, 1), polyfit(x, y, 2), names=['one'])

    def test_different_nobs(self, line_data):
        x, y, _ = line_data
        with pytest.raises(ValidationError, match="same observations"):
            anova(polyfit(x, y, 1), polyfit(x[:-1], y[:-1], 2))

    def test_different_response(self, line_data):
        x, y, _ = line_data
        with pytest.raises(ValidationError, match="different response"):
            anova(polyfit(x, y, 1), polyfit(x, y + 1.0, 2))

    def test_same_residual_df(self, line_data):
        x, y, _ = line_data
        with pytest.raises(ValidationError, match="distinct residual degrees"):
            anova(polyfit(x, y, 1), nls('linear', x, y))


class TestOutput:

    def test_summary(self, quadratic_data):
        x, y, _ = quadratic_data
        text = anova(polyfit(x, y, 1), polyfit(x, y, 2)).summary()
        assert text.startswith('Analysis of Variance Table')
        assert 'Model 1: linear' in text
        assert 'Model 2: poly2' in text
        assert 'Res.Df' in text
        assert '***' in text

    def test_repr_and_info(self, quadratic_data):
        x, y, _ = quadratic_data
        result = anova(polyfit(x, y, 1), polyfit(x, y, 2))
        assert repr(result) == "AnovaSolution(n=80, models=['linear', 'poly2'])"
        assert result.info['method'] == 'extra_sum_of_squares'
        assert result.n_obs == 80
        assert 'total_seconds' in result.timing
