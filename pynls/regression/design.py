"""
Regression design.

Holds the design matrix X and response y for a linear least squares fit.
Polynomial designs also remember the original x and the degree, so the
fitted curve can be evaluated at new x and matched to the library models
linear / poly2 / poly3.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pynls.core.exceptions import ValidationError
from pynls.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_2d,
    check_consistent_length,
    check_min_samples,
)


def vandermonde(x: NDArray[np.floating[Any]], degree: int) -> NDArray[np.floating[Any]]:
    """Columns [1, x, x^2, ..., x^degree]."""
    return np.vander(np.asarray(x, dtype=np.float64), N=degree + 1, increasing=True)


def polynomial_column_names(degree: int) -> tuple[str, ...]:
    names = ['(Intercept)']
    for k in range(1, degree + 1):
        names.append('x' if k == 1 else f'x^{k}')
    return tuple(names)


@dataclass(frozen=True)
class RegressionDesign:
    """
    Regression design matrix specification.

    Immutable after construction.

    Construction:
        RegressionDesign.from_arrays(X, y)              # arbitrary X
        RegressionDesign.polynomial(x, y, degree=2)     # [1, x, x^2]
    """
    _X: NDArray[np.floating[Any]]
    _y: NDArray[np.floating[Any]]
    _n: int
    _p: int
    _column_names: tuple[str, ...]
    _x: NDArray[np.floating[Any]] | None = None
    _degree: int | None = None

    @classmethod
    def from_arrays(
        cls,
        X: ArrayLike,
        y: ArrayLike,
        column_names: tuple[str, ...] | list[str] | None = None,
    ) -> RegressionDesign:
        """Build a design directly from arrays."""
        X_arr = check_array(X, 'X')
        y_arr = check_array(y, 'y')
        if X_arr.ndim == 1:
            X_arr = X_arr.reshape(-1, 1)

        p = X_arr.shape[1] if X_arr.ndim == 2 else 0
        if column_names is None:
            column_names = tuple(f'X{j}' for j in range(p))
        elif len(column_names) != p:
            raise ValidationError(
                f"column_names: expected {p} names, got {len(column_names)}"
            )
        return cls._build(X_arr, y_arr, tuple(column_names))

    @classmethod
    def polynomial(cls, x: ArrayLike, y: ArrayLike, degree: int = 1) -> RegressionDesign:
        """
        Build a polynomial design y ~ 1 + x + ... + x^degree.

        Raises:
            ValidationError: If degree < 0 or there are too few
                observations for the requested degree
        """
        if isinstance(degree, bool) or not isinstance(degree, (int, np.integer)) or degree < 0:
            raise ValidationError(f"degree: expected a non-negative integer, got {degree!r}")
        degree = int(degree)

        x_arr = check_array(x, 'x')
        check_1d(x_arr, 'x')
        check_finite(x_arr, 'x')
        y_arr = check_array(y, 'y')

        X = vandermonde(x_arr, degree)
        return cls._build(
            X, y_arr, polynomial_column_names(degree), x=x_arr, degree=degree,
        )

    @classmethod
    def _build(
        cls,
        X: NDArray,
        y: NDArray,
        column_names: tuple[str, ...],
        x: NDArray | None = None,
        degree: int | None = None,
    ) -> RegressionDesign:
        if y.ndim == 2 and y.shape[1] == 1:
            y = y.ravel()

        check_2d(X, 'X')
        check_1d(y, 'y')
        check_finite(X, 'X')
        check_finite(y, 'y')
        check_consistent_length(X, y, names=('X', 'y'))

        n, p = X.shape
        # one residual degree of freedom is needed for a variance estimate
        check_min_samples(X, p + 1, 'X')

        return cls(
            _X=X, _y=y, _n=n, _p=p, _column_names=column_names,
            _x=x, _degree=degree,
        )

    # === Properties ===

    @property
    def X(self) -> NDArray[np.floating[Any]]:
        """Design matrix (n x p)."""
        return self._X

    @property
    def y(self) -> NDArray[np.floating[Any]]:
        """Response vector (n,)."""
        return self._y

    @property
    def n(self) -> int:
        """Number of observations."""
        return self._n

    @property
    def p(self) -> int:
        """Number of coefficients."""
        return self._p

    @property
    def column_names(self) -> tuple[str, ...]:
        return self._column_names

    @property
    def x(self) -> NDArray[np.floating[Any]] | None:
        """Original predictor for polynomial designs, else None."""
        return self._x

    @property
    def degree(self) -> int | None:
        """Polynomial degree, or None for arbitrary designs."""
        return self._degree

    def XtX(self) -> NDArray[np.floating[Any]]:
        return self._X.T @ self._X

    def Xty(self) -> NDArray[np.floating[Any]]:
        return self._X.T @ self._y
