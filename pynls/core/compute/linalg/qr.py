"""
QR decomposition for linear least squares.

Used by the CPU regression backend and by the linearized starting-value
fits in pynls.nls.selfstart.
"""

from dataclasses import dataclass
from typing import Literal, Any
import numpy as np
from numpy.typing import NDArray
from scipy.linalg import solve_triangular

from pynls.core.exceptions import SingularMatrixError


@dataclass(frozen=True)
class QRResult:
    """
    X = QR with the numerical rank of X.

    Attributes:
        Q: Orthonormal columns, n x min(n, p) in reduced mode
        R: Upper triangular, min(n, p) x p in reduced mode
        rank: Count of |R_jj| above the rank tolerance
    """
    Q: NDArray[np.floating[Any]]
    R: NDArray[np.floating[Any]]
    rank: int


def _numerical_rank(R: NDArray[np.floating[Any]], shape: tuple[int, int]) -> int:
    """|R_jj| > max(n, p) * eps * |R_00|, the LINPACK-style rule."""
    d = np.abs(np.diagonal(R))
    if d.size == 0 or d[0] == 0:
        return 0
    return int(np.count_nonzero(d > max(shape) * np.finfo(R.dtype).eps * d[0]))


def qr_cpu(
    X: NDArray[np.floating[Any]],
    mode: Literal['reduced', 'complete'] = 'reduced'
) -> QRResult:
    """Householder QR through LAPACK, with rank detection."""
    Q, R = np.linalg.qr(X, mode=mode)
    return QRResult(Q=Q, R=R, rank=_numerical_rank(R, X.shape))


def qr_solve_cpu(
    X: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
    check_rank: bool = True,
    qr_result: QRResult | None = None,
) -> NDArray[np.floating[Any]]:
    """
    Least squares coefficients β = R⁻¹ Q'y.

    Args:
        X: Design matrix (n x p), n >= p
        y: Response vector (n,)
        check_rank: Raise on rank-deficient X instead of dividing by ~0
        qr_result: Decomposition of X, if the caller already has one

    Raises:
        SingularMatrixError: If X is rank-deficient and check_rank=True
    """
    p = X.shape[1]
    qr = qr_result if qr_result is not None else qr_cpu(X)

    if check_rank and qr.rank < p:
        raise SingularMatrixError(
            f"Design matrix is rank-deficient (rank {qr.rank} < {p} columns). "
            f"For polynomial fits this means fewer distinct x values than "
            f"degree + 1.",
            matrix_name='X',
            rank=qr.rank,
            expected_rank=p,
        )

    return solve_triangular(qr.R[:p, :p], (qr.Q.T @ y)[:p], lower=False)


def unscaled_covariance_qr(qr_result: QRResult) -> NDArray[np.floating[Any]]:
    """
    (X'X)⁻¹ computed from the R factor: (R'R)⁻¹ = R⁻¹ R⁻ᵀ.

    Avoids forming X'X, which squares the condition number.
    """
    p = qr_result.R.shape[1]
    R_inv = solve_triangular(qr_result.R[:p, :p], np.eye(p), lower=False)
    return R_inv @ R_inv.T
