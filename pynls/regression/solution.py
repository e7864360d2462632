"""
Regression solution types.

Contains the parameter payload computed by backends and the user-facing
solution wrapper with inference (standard errors, t tests), information
criteria and prediction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats

from pynls.core.result import Result
from pynls.core.validation import check_array

if TYPE_CHECKING:
    from pynls.regression.design import RegressionDesign


# Polynomial degree -> library model with the same parameterization
_POLYNOMIAL_MODELS = {1: 'linear', 2: 'poly2', 3: 'poly3'}


@dataclass(frozen=True)
class LinearParams:
    """
    Parameter payload for linear least squares.

    This is the immutable data computed by backends.
    """
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]
    fitted_values: NDArray[np.floating[Any]]
    rss: float
    tss: float
    rank: int
    df_residual: int
    cov_unscaled: NDArray[np.floating[Any]]


@dataclass
class LinearSolution:
    """
    User-facing linear regression results.

    Wraps the backend Result and provides convenient accessors for all
    regression outputs including standard errors, t statistics and
    p-values.
    """
    _result: Result[LinearParams]
    _design: 'RegressionDesign'

    _standard_errors: NDArray[np.floating[Any]] | None = None

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._design.column_names

    @property
    def model(self) -> str | None:
        """
        Name of the library model with this parameterization.

        'linear', 'poly2' or 'poly3' for polynomial fits of degree 1-3,
        otherwise None.
        """
        degree = self._design.degree
        if degree is None:
            return None
        return _POLYNOMIAL_MODELS.get(degree)

    @property
    def params(self) -> dict[str, float]:
        """
        Coefficients by name.

        Uses the library model's parameter names (a, b / a0, a1, ...)
        when model is not None, else the design column names.
        """
        if self.model is not None:
            from pynls.models import get_model
            return get_model(self.model).params_dict(self.coefficients)
        return {name: float(c) for name, c in zip(self.column_names, self.coefficients)}

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def tss(self) -> float:
        return self._result.params.tss

    @property
    def nobs(self) -> int:
        return self._design.n

    @property
    def n_params(self) -> int:
        return self._design.p

    @property
    def r_squared(self) -> float:
        if self.tss == 0:
            return 1.0 if self.rss == 0 else 0.0
        return 1.0 - (self.rss / self.tss)

    @property
    def adjusted_r_squared(self) -> float:
        n = self._design.n
        p = self._result.params.rank
        if n - p <= 0 or self.tss == 0:
            return self.r_squared
        return 1.0 - (1.0 - self.r_squared) * (n - 1) / (n - p)

    @property
    def residual_std_error(self) -> float:
        df = self._result.params.df_residual
        if df <= 0:
            return 0.0
        return float(np.sqrt(self.rss / df))

    @property
    def covariance(self) -> NDArray[np.floating[Any]]:
        """Estimated covariance of the coefficients, σ² (X'X)⁻¹."""
        return self.residual_std_error ** 2 * self._result.params.cov_unscaled

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        """Standard errors SE(β) = sqrt(diag(σ² (X'X)⁻¹))."""
        if self._standard_errors is None:
            with np.errstate(invalid='ignore'):
                self._standard_errors = np.sqrt(np.diag(self.covariance))
        return self._standard_errors

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / self.standard_errors
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values from Student's t with df_residual."""
        return 2.0 * stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    def confint(self, level: float = 0.95) -> NDArray[np.floating[Any]]:
        """
        Confidence intervals for the coefficients.

        Returns:
            Array of shape (p, 2) with lower and upper limits
        """
        if not 0 < level < 1:
            raise ValueError(f"level must be in (0, 1), got {level}")
        q = stats.t.ppf(0.5 + level / 2, self.df_residual)
        half = q * self.standard_errors
        return np.column_stack([self.coefficients - half, self.coefficients + half])

    @property
    def loglik(self) -> float:
        """Gaussian log-likelihood at the ML variance estimate RSS/n."""
        n = self.nobs
        return float(-0.5 * n * (np.log(2 * np.pi) + np.log(self.rss / n) + 1))

    @property
    def aic(self) -> float:
        # +1 for the residual variance
        return -2.0 * self.loglik + 2.0 * (self.rank + 1)

    @property
    def bic(self) -> float:
        return -2.0 * self.loglik + np.log(self.nobs) * (self.rank + 1)

    @property
    def rank(self) -> int:
        return self._result.params.rank

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def predict(self, x: ArrayLike | None = None) -> NDArray[np.floating[Any]]:
        """
        Evaluate the fitted model.

        Args:
            x: New predictor values. For polynomial fits this is the 1-D x;
               for general designs, a matrix with the same columns as X.
               None returns the fitted values.
        """
        if x is None:
            return self.fitted_values

        x_arr = check_array(x, 'x')
        degree = self._design.degree
        if degree is not None:
            from pynls.regression.design import vandermonde
            X_new = vandermonde(np.atleast_1d(x_arr), degree)
        else:
            X_new = np.atleast_2d(x_arr)
        return X_new @ self.coefficients

    def summary(self) -> str:
        """Generate R-style summary output."""
        title = "Linear Regression Results"
        if self.model is not None:
            from pynls.models import get_model
            title += f" (y = {get_model(self.model).formula})"
        lines = [
            title,
            "=" * 72,
            f"Observations: {self._design.n}",
            f"Coefficients: {self._design.p}",
            f"R-squared: {self.r_squared:.6f}",
            f"Adj. R-squared: {self.adjusted_r_squared:.6f}",
            f"Residual Std. Error: {self.residual_std_error:.6f} on {self.df_residual} DF",
            "",
            f"{'':<14} {'Estimate':>14} {'Std. Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
            "-" * 72,
        ]

        names = list(self.params.keys())
        for name, coef, se, t, pv in zip(
            names, self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values,
        ):
            lines.append(
                f"{name:<14} {coef:>14.6f} {se:>12.6f} {t:>10.3f} "
                f"{pv:>12.4e} {significance_stars(pv)}"
            )

        lines.append("-" * 72)
        lines.append("Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1")
        lines.append(f"AIC: {self.aic:.4f}  BIC: {self.bic:.4f}")
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LinearSolution(n={self._design.n}, p={self._design.p}, "
            f"rank={self.rank}, r_squared={self.r_squared:.4f})"
        )


def significance_stars(p: float) -> str:
    """R's significance codes."""
    if p is None or np.isnan(p):
        return ''
    if p < 0.001:
        return '***'
    if p < 0.01:
        return '**'
    if p < 0.05:
        return '*'
    if p < 0.1:
        return '.'
    return ''
