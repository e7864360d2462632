"""
Generic result container for all PyNLS computations.

Every backend returns a Result wrapping its own parameter payload, so
timing, warnings and backend identification look the same whether the
fit came from QR, Cholesky on a GPU, or scipy's trust-region solver.

Design decisions:
    - Generic over parameter payload P
    - info dict for flexible metadata (method, convergence, evaluations)
    - timing is optional (tests construct Results without it)
    - Immutable (frozen=True)
"""

from dataclasses import dataclass, field
from typing import TypeVar, Generic, Any

P = TypeVar('P')  # Parameter payload type


@dataclass(frozen=True)
class Result(Generic[P]):
    """
    Immutable result envelope for a least squares fit.

    Type Parameters:
        P: The domain-specific parameter payload type

    Attributes:
        params: Payload computed by the backend (coefficients, residuals, ...)
        info: Structured metadata (method, convergence, diagnostics)
        timing: Execution timing breakdown, or None if not measured
        backend_name: Identifier of the backend that produced this result
        warnings: Non-fatal issues encountered during computation

    Examples:
        >>> # Direct method (no convergence notion)
        >>> Result(
        ...     params=LinearParams(coefficients=beta, ...),
        ...     info={'method': 'qr', 'rank': 3},
        ...     timing={'total_seconds': 0.01},
        ...     backend_name='cpu_qr'
        ... )

        >>> # Iterative method
        >>> Result(
        ...     params=NLSParams(coefficients=theta, ...),
        ...     info={'method': 'trf', 'converged': True, 'nfev': 12},
        ...     timing={'total_seconds': 0.004, 'optimization': 0.003},
        ...     backend_name='cpu_trf'
        ... )
    """
    params: P
    info: dict[str, Any]
    timing: dict[str, float] | None
    backend_name: str
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def has_warning(self, substring: str) -> bool:
        """Check if any warning contains the given substring."""
        return any(substring in w for w in self.warnings)
