"""
Exception hierarchy for PyNLS.

All exceptions inherit from PyNLSError so callers can catch any
library-specific error with a single clause. Model, regression and NLS
code raise the most specific class that applies.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages state the offending value and what was expected
    - Never catch and re-raise with less information
"""


class PyNLSError(Exception):
    """Base exception for all PyNLS errors."""
    pass


class ValidationError(PyNLSError):
    """
    Input validation failed.

    Raised when user-provided inputs (data, starting values, bounds,
    options) fail validation checks at a public entry point.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when x and y differ in length, when a parameter vector has the
    wrong number of entries, or when an array has the wrong rank.
    """
    pass


class DomainError(ValidationError):
    """
    Input lies outside a model's mathematical domain.

    Raised by the logarithmic model when any x is not strictly positive.

    Attributes:
        model_name: Name of the model that rejected the input
        n_invalid: Number of offending elements
        min_value: Smallest offending value
    """

    def __init__(
        self,
        message: str,
        model_name: str | None = None,
        n_invalid: int | None = None,
        min_value: float | None = None,
    ):
        super().__init__(message)
        self.model_name = model_name
        self.n_invalid = n_invalid
        self.min_value = min_value


class NumericalError(PyNLSError):
    """
    Numerical computation failed.

    Base class for errors arising from numerical issues during computation.
    """
    pass


class SingularMatrixError(NumericalError):
    """
    Matrix is singular or nearly singular.

    Raised when a linear design matrix is rank-deficient, so the least
    squares coefficients are not unique.

    Attributes:
        matrix_name: Name/description of the problematic matrix
        condition_number: Estimated condition number, if available
        rank: Numerical rank, if computed
        expected_rank: Expected rank (number of columns)
    """

    def __init__(
        self,
        message: str,
        matrix_name: str | None = None,
        condition_number: float | None = None,
        rank: int | None = None,
        expected_rank: int | None = None,
    ):
        super().__init__(message)
        self.matrix_name = matrix_name
        self.condition_number = condition_number
        self.rank = rank
        self.expected_rank = expected_rank


class ConvergenceError(PyNLSError):
    """
    Iterative least squares failed to converge.

    Raised by nls(..., strict=True) when the optimizer stops without
    meeting its termination tolerances.

    Attributes:
        iterations: Number of function evaluations completed
        final_change: Final cost (half the residual sum of squares)
        reason: Optimizer termination message
        threshold: The tolerance that was not met
    """

    def __init__(
        self,
        message: str,
        iterations: int,
        final_change: float | None = None,
        reason: str | None = None,
        threshold: float | None = None,
    ):
        super().__init__(message)
        self.iterations = iterations
        self.final_change = final_change
        self.reason = reason
        self.threshold = threshold
