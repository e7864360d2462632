"""
Model functions for curve fitting.

Each function is pure and stateless: f(x, *params) -> y. x may be a real
scalar or any array-like of reals; sequences are evaluated elementwise
and return an ndarray of the same shape, scalars return a float.

Overflow and invalid-operation warnings from numpy are suppressed. An
extreme parameter vector produces inf or NaN, which a least squares
solver treats as a very poor fit rather than an error. The one exception
is logfun, whose domain is x > 0 and which raises DomainError otherwise.
"""

import functools

import numpy as np

from pynls.core.validation import check_positive


def _elementwise(func):
    """Convert x to float64, silence fp warnings, unwrap 0-d results."""

    @functools.wraps(func)
    def wrapper(x, *params, **kwargs):
        x_arr = np.asarray(x, dtype=np.float64)
        with np.errstate(over='ignore', invalid='ignore', divide='ignore', under='ignore'):
            y = func(x_arr, *params, **kwargs)
        if np.ndim(y) == 0:
            return float(y)
        return y

    return wrapper


@_elementwise
def linear(x, a, b):
    """Straight line: y = a + b*x."""
    return a + b * x


@_elementwise
def poly2(x, a0, a1, a2):
    """Quadratic polynomial: y = a0 + a1*x + a2*x^2."""
    return a0 + a1 * x + a2 * x ** 2


@_elementwise
def poly3(x, a0, a1, a2, a3):
    """Cubic polynomial: y = a0 + a1*x + a2*x^2 + a3*x^3."""
    return a0 + a1 * x + a2 * x ** 2 + a3 * x ** 3


@_elementwise
def grow(x, a, b):
    """
    Exponential growth: y = a * exp(b*x).

    a is the value at x = 0 and b the relative growth rate.
    """
    return a * np.exp(b * x)


@_elementwise
def decay(x, a, b):
    """
    Exponential decay: y = a * exp(-b*x).

    a is the value at x = 0 and b the decay constant; the half-life is
    log(2) / b.
    """
    return a * np.exp(-b * x)


@_elementwise
def plateau(x, a, b):
    """
    Growth to a plateau: y = a * (1 - exp(-b*x)).

    Starts at 0 for x = 0 and approaches a as x grows when b > 0.
    """
    return a * (1 - np.exp(-b * x))


@_elementwise
def decay2(x, a, p, b1, b2):
    """
    Double exponential decay.

        y = a*p*exp(-b1*x) + a*(1-p)*exp(-b2*x)

    Two decaying pools sharing a total initial amount a, with fraction p
    in the pool decaying at rate b1 and 1 - p in the pool decaying at b2.
    """
    return a * p * np.exp(-b1 * x) + a * (1 - p) * np.exp(-b2 * x)


def logfun(x, a, b):
    """
    Logarithmic model: y = a + b*log(x).

    Raises:
        DomainError: If any element of x is <= 0
    """
    x_arr = np.asarray(x, dtype=np.float64)
    check_positive(x_arr, 'x', model_name='logfun')
    with np.errstate(over='ignore', invalid='ignore'):
        y = a + b * np.log(x_arr)
    if np.ndim(y) == 0:
        return float(y)
    return y


@_elementwise
def logistic(x, b, m):
    """
    Logistic curve: y = 1 / (1 + exp(-b*(x - m))).

    m is the midpoint (y = 0.5) and b the steepness. For b > 0 the curve
    rises from 0 to 1.
    """
    return 1.0 / (1.0 + np.exp(-b * (x - m)))
