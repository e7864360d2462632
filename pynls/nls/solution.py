"""
NLS solution types.

NLSParams is the frozen payload computed by a backend; NLSSolution is
the user-facing wrapper. Inference uses the usual linear approximation
at the solution: the Jacobian J plays the role of the design matrix, so
Cov(θ) = σ² (JᵀJ)⁻¹ with σ² = RSS / (n - p).
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike, NDArray
from scipy import stats

from pynls.core.result import Result
from pynls.models.registry import Model
from pynls.regression.solution import significance_stars

if TYPE_CHECKING:
    from pynls.nls.design import NLSDesign


@dataclass(frozen=True)
class NLSParams:
    """Parameter payload for non-linear least squares."""
    coefficients: NDArray[np.floating[Any]]
    residuals: NDArray[np.floating[Any]]        # y - f(x; θ)
    fitted_values: NDArray[np.floating[Any]]
    jacobian: NDArray[np.floating[Any]]
    cov_unscaled: NDArray[np.floating[Any]]     # (JᵀJ)⁻¹
    rss: float
    df_residual: int
    n_iter: int
    converged: bool


@dataclass
class NLSSolution:
    """
    User-facing non-linear least squares results.

    Wraps the backend Result; accessors mirror R's summary.nls.
    """
    _result: Result[NLSParams]
    _design: 'NLSDesign'

    @property
    def model(self) -> Model:
        return self._design.model

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return self._result.params.coefficients

    @property
    def params(self) -> dict[str, float]:
        """Estimates by parameter name."""
        return self.model.params_dict(self.coefficients)

    @property
    def start(self) -> dict[str, float]:
        """Starting values the optimizer began from."""
        return self.model.params_dict(self._design.start)

    @property
    def residuals(self) -> NDArray[np.floating[Any]]:
        return self._result.params.residuals

    @property
    def fitted_values(self) -> NDArray[np.floating[Any]]:
        return self._result.params.fitted_values

    @property
    def jacobian(self) -> NDArray[np.floating[Any]]:
        return self._result.params.jacobian

    @property
    def rss(self) -> float:
        return self._result.params.rss

    @property
    def nobs(self) -> int:
        return self._design.n

    @property
    def n_params(self) -> int:
        return self._design.p

    @property
    def df_residual(self) -> int:
        return self._result.params.df_residual

    @property
    def residual_std_error(self) -> float:
        return float(np.sqrt(self.rss / self.df_residual))

    @property
    def covariance(self) -> NDArray[np.floating[Any]]:
        """σ² (JᵀJ)⁻¹; NaN when the Jacobian is rank-deficient."""
        return self.residual_std_error ** 2 * self._result.params.cov_unscaled

    @property
    def standard_errors(self) -> NDArray[np.floating[Any]]:
        with np.errstate(invalid='ignore'):
            return np.sqrt(np.diag(self.covariance))

    @property
    def t_statistics(self) -> NDArray[np.floating[Any]]:
        with np.errstate(divide='ignore', invalid='ignore'):
            t = self.coefficients / self.standard_errors
        return np.where(np.isfinite(t), t, np.nan)

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        """Two-sided p-values from Student's t with df_residual."""
        return 2.0 * stats.t.sf(np.abs(self.t_statistics), self.df_residual)

    def confint(self, level: float = 0.95) -> dict[str, tuple[float, float]]:
        """
        Wald confidence intervals, estimate ± t_{df} * SE.

        Returns:
            {name: (lower, upper)}
        """
        if not 0 < level < 1:
            raise ValueError(f"level must be in (0, 1), got {level}")
        q = stats.t.ppf(0.5 + level / 2, self.df_residual)
        half = q * self.standard_errors
        return {
            name: (float(est - h), float(est + h))
            for name, est, h in zip(self.model.param_names, self.coefficients, half)
        }

    @property
    def converged(self) -> bool:
        return self._result.params.converged

    @property
    def n_iter(self) -> int:
        """Number of residual evaluations used by the optimizer."""
        return self._result.params.n_iter

    @property
    def loglik(self) -> float:
        """Gaussian log-likelihood at the ML variance estimate RSS/n."""
        n = self.nobs
        return float(-0.5 * n * (np.log(2 * np.pi) + np.log(self.rss / n) + 1))

    @property
    def aic(self) -> float:
        return -2.0 * self.loglik + 2.0 * (self.n_params + 1)

    @property
    def bic(self) -> float:
        return -2.0 * self.loglik + np.log(self.nobs) * (self.n_params + 1)

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

    def predict(self, x: ArrayLike | None = None) -> Any:
        """
        Evaluate the fitted model at x (the fitted values when x is None).

        Raises:
            DomainError: If x is outside the model's domain
        """
        if x is None:
            return self.fitted_values
        return self.model(x, *self.coefficients)

    def summary(self) -> str:
        """Generate R-style summary output (summary.nls layout)."""
        lines = [
            f"Formula: y ~ {self.model.formula}",
            "",
            "Parameters:",
            f"{'':<10} {'Estimate':>14} {'Std. Error':>12} {'t value':>10} {'Pr(>|t|)':>12}",
            "-" * 66,
        ]
        for name, est, se, t, pv in zip(
            self.model.param_names, self.coefficients, self.standard_errors,
            self.t_statistics, self.p_values,
        ):
            se_str = f"{se:>12.6g}" if np.isfinite(se) else f"{'NA':>12}"
            t_str = f"{t:>10.3f}" if np.isfinite(t) else f"{'NA':>10}"
            p_str = f"{pv:>12.4e}" if np.isfinite(pv) else f"{'NA':>12}"
            lines.append(
                f"{name:<10} {est:>14.6g} {se_str} {t_str} {p_str} {significance_stars(pv)}"
            )
        lines.append("-" * 66)
        lines.append("Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1")
        lines.append("")
        lines.append(
            f"Residual standard error: {self.residual_std_error:.6g} on "
            f"{self.df_residual} degrees of freedom"
        )
        status = "converged" if self.converged else "NOT converged"
        lines.append(
            f"Optimizer {status} after {self.n_iter} evaluations "
            f"({self.info.get('message', '')})"
        )
        lines.append(f"AIC: {self.aic:.4f}  BIC: {self.bic:.4f}")
        lines.append(f"Backend: {self.backend_name}")
        if self.timing:
            lines.append(f"Time: {self.timing.get('total_seconds', 0):.4f}s")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        params = ', '.join(f"{k}={v:.4g}" for k, v in self.params.items())
        return (
            f"NLSSolution(model={self.model.name!r}, n={self.nobs}, {params}, "
            f"rss={self.rss:.4g})"
        )
