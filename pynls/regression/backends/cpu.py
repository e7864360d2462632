"""
CPU reference backend for linear least squares.

Uses QR decomposition via LAPACK (through NumPy/SciPy), the same
algorithm R's lm() uses. The unscaled covariance (X'X)⁻¹ is taken from
the R factor so X'X is never formed.
"""

from typing import Any
import numpy as np

from pynls.core.result import Result
from pynls.core.compute.timing import Timer
from pynls.core.compute.linalg.qr import qr_cpu, qr_solve_cpu, unscaled_covariance_qr
from pynls.regression.design import RegressionDesign
from pynls.regression.solution import LinearParams


class CPUQRBackend:
    """
    CPU backend using QR decomposition.

    Implements the Backend protocol for RegressionDesign -> LinearParams.
    """

    @property
    def name(self) -> str:
        return 'cpu_qr'

    def solve(self, design: RegressionDesign) -> Result[LinearParams]:
        """
        Solve OLS via QR decomposition.

        Algorithm:
            1. X = QR
            2. β = R⁻¹ Q'y
            3. (X'X)⁻¹ = R⁻¹ R⁻ᵀ
            4. Residuals, fitted values, RSS and TSS

        Raises:
            SingularMatrixError: If X is rank-deficient
        """
        timer = Timer()
        timer.start()

        X = design.X
        y = design.y
        n = design.n

        with timer.section('qr_decomposition'):
            qr_result = qr_cpu(X, mode='reduced')

        with timer.section('solve'):
            coefficients = qr_solve_cpu(X, y, check_rank=True, qr_result=qr_result)

        with timer.section('covariance'):
            cov_unscaled = unscaled_covariance_qr(qr_result)

        with timer.section('residuals'):
            fitted_values = X @ coefficients
            residuals = y - fitted_values

        with timer.section('statistics'):
            rss = float(residuals @ residuals)
            tss = float(np.sum((y - np.mean(y)) ** 2))

        timer.stop()

        params = LinearParams(
            coefficients=coefficients,
            residuals=residuals,
            fitted_values=fitted_values,
            rss=rss,
            tss=tss,
            rank=qr_result.rank,
            df_residual=n - qr_result.rank,
            cov_unscaled=cov_unscaled,
        )

        info: dict[str, Any] = {
            'method': 'qr',
            'rank': qr_result.rank,
        }

        return Result(
            params=params,
            info=info,
            timing=timer.result(),
            backend_name=self.name,
            warnings=(),
        )
