"""
Core infrastructure for PyNLS.

Shared abstractions used by the model library and by every fitting
submodule (regression, nls, anova).

Key components:
    protocols: Backend protocol
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Device detection, timing, tolerances, linear algebra kernels
"""

from pynls.core.protocols import Backend
from pynls.core.result import Result
from pynls.core.exceptions import (
    PyNLSError,
    ValidationError,
    DimensionError,
    DomainError,
    NumericalError,
    SingularMatrixError,
    ConvergenceError,
)

__all__ = [
    "Backend",
    "Result",
    "PyNLSError",
    "ValidationError",
    "DimensionError",
    "DomainError",
    "NumericalError",
    "SingularMatrixError",
    "ConvergenceError",
]
