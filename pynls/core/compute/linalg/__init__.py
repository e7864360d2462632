"""
Linear algebra kernels for PyNLS.

Conventions:
    - CPU functions use NumPy/SciPy (LAPACK under the hood)
    - Each operation returns a structured result dataclass
    - Errors are raised immediately with clear messages

Submodules:
    qr: QR decomposition and least squares solve
    jacobian: Covariance of estimates from a residual Jacobian
"""

from pynls.core.compute.linalg.qr import (
    QRResult,
    qr_cpu,
    qr_solve_cpu,
    unscaled_covariance_qr,
)
from pynls.core.compute.linalg.jacobian import (
    JacobianCovariance,
    unscaled_covariance,
)

__all__ = [
    "QRResult",
    "qr_cpu",
    "qr_solve_cpu",
    "unscaled_covariance_qr",
    "JacobianCovariance",
    "unscaled_covariance",
]
