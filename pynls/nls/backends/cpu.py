"""
CPU backend for non-linear least squares.

Minimises RSS(θ) = Σ (y_i - f(x_i; θ))² with scipy.optimize.least_squares.
The Jacobian is approximated by finite differences, as in R's nls().
"""

from typing import Any
import numpy as np
from scipy.optimize import least_squares

from pynls.core.result import Result
from pynls.core.compute.timing import Timer
from pynls.core.compute.tolerances import NLSControl, DEFAULT_CONTROL
from pynls.core.compute.linalg.jacobian import unscaled_covariance
from pynls.nls.design import NLSDesign
from pynls.nls.solution import NLSParams


class CPULeastSquaresBackend:
    """
    CPU backend wrapping scipy's trust-region / Levenberg-Marquardt solvers.

    Implements the Backend protocol for NLSDesign -> NLSParams.
    """

    def __init__(self, control: NLSControl = DEFAULT_CONTROL):
        self.control = control

    @property
    def name(self) -> str:
        return f'cpu_{self.control.method}'

    def solve(self, design: NLSDesign) -> Result[NLSParams]:
        """
        Run the optimizer from design.start.

        Non-convergence is reported through params.converged and a
        warning string, not an exception.
        """
        control = self.control
        timer = Timer()
        timer.start()
        warnings_list = []

        bounds = (design.lower, design.upper) if design.has_bounds else (-np.inf, np.inf)

        with timer.section('optimization'):
            opt = least_squares(
                design.residuals,
                design.start,
                jac='2-point',
                bounds=bounds,
                method=control.method,
                ftol=control.ftol,
                xtol=control.xtol,
                gtol=control.gtol,
                max_nfev=control.max_iter,
                diff_step=control.diff_step,
            )

        theta = opt.x
        converged = bool(opt.status > 0)
        if not converged:
            warnings_list.append(
                f"Optimizer did not converge after {opt.nfev} evaluations: {opt.message}"
            )

        with timer.section('fitted_residuals'):
            fitted_values = np.asarray(design.model(design.x, *theta), dtype=np.float64)
            residuals = design.y - fitted_values
            rss = float(residuals @ residuals)

        with timer.section('covariance'):
            jac_cov = unscaled_covariance(opt.jac)

        if jac_cov.rank < design.p:
            warnings_list.append(
                f"Jacobian is rank-deficient at the solution (rank={jac_cov.rank}, "
                f"p={design.p}); standard errors are undefined. The model may be "
                f"over-parameterized for these data."
            )

        active = np.asarray(opt.active_mask)
        if np.any(active != 0):
            at_bound = [n for n, a in zip(design.model.param_names, active) if a != 0]
            warnings_list.append(
                f"Parameter(s) {at_bound} ended at a bound; standard errors "
                f"assume an interior solution."
            )

        timer.stop()

        params = NLSParams(
            coefficients=theta,
            residuals=residuals,
            fitted_values=fitted_values,
            jacobian=opt.jac,
            cov_unscaled=jac_cov.cov_unscaled,
            rss=rss,
            df_residual=design.n - design.p,
            n_iter=int(opt.nfev),
            converged=converged,
        )

        info: dict[str, Any] = {
            'method': control.method,
            'status': int(opt.status),
            'message': str(opt.message),
            'nfev': int(opt.nfev),
            'njev': int(opt.njev) if opt.njev is not None else None,
            'cost': float(opt.cost),
            'optimality': float(opt.optimality),
            'active_mask': active.tolist(),
            'jacobian_rank': jac_cov.rank,
            'condition_number': jac_cov.condition_number,
            'start': design.start.tolist(),
            'start_source': design.start_source,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=tuple(warnings_list),
        )
