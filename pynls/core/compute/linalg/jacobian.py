"""
Covariance of least squares estimates from a Jacobian.

At the NLS solution the model is locally linear with design matrix J
(the Jacobian of the residuals), so the unscaled covariance is (J'J)⁻¹,
exactly as (X'X)⁻¹ is for a linear model. It is computed through the SVD
of J with small singular values discarded, the same way
scipy.optimize.curve_fit does.
"""

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class JacobianCovariance:
    """
    Unscaled covariance and rank information for a Jacobian.

    Attributes:
        cov_unscaled: (J'J)⁻¹ with NaN entries when J is rank-deficient
        rank: Numerical rank of J
        condition_number: Ratio of largest to smallest singular value
    """
    cov_unscaled: NDArray[np.floating[Any]]
    rank: int
    condition_number: float


def unscaled_covariance(jac: NDArray[np.floating[Any]]) -> JacobianCovariance:
    """
    Compute (J'J)⁻¹ via the SVD of J.

    Singular values below max(n, p) * eps * s_max are treated as zero.
    If any are discarded the covariance is undefined and is returned
    filled with NaN.
    """
    n, p = jac.shape
    _, s, VT = np.linalg.svd(jac, full_matrices=False)

    if s.size == 0 or s[0] == 0:
        return JacobianCovariance(
            cov_unscaled=np.full((p, p), np.nan),
            rank=0,
            condition_number=float('inf'),
        )

    threshold = np.finfo(float).eps * max(n, p) * s[0]
    keep = s > threshold
    rank = int(np.sum(keep))
    cond = float(s[0] / s[-1]) if s[-1] > 0 else float('inf')

    if rank < p:
        return JacobianCovariance(
            cov_unscaled=np.full((p, p), np.nan),
            rank=rank,
            condition_number=cond,
        )

    V = VT.T / s
    return JacobianCovariance(cov_unscaled=V @ V.T, rank=rank, condition_number=cond)
