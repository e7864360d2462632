"""
Non-linear least squares.

Fits the library models (or any callable f(x, *params)) by minimising
the residual sum of squares with scipy's least squares solvers, and
reports R-style inference from the linear approximation at the solution.

Public API:
    nls(model, x, y, ...) -> NLSSolution
    self_start(model, x, y) -> starting values
    linearized_fit(model, x, y) -> LinearizedFit

Example:
    >>> from pynls.nls import nls
    >>> result = nls('decay', x, y)
    >>> print(result.summary())
"""

from pynls.nls.design import NLSDesign
from pynls.nls.solution import NLSSolution, NLSParams
from pynls.nls.selfstart import self_start, has_self_start, linearized_fit, LinearizedFit
from pynls.nls.solvers import nls

__all__ = [
    "nls",
    "NLSDesign",
    "NLSSolution",
    "NLSParams",
    "self_start",
    "has_self_start",
    "linearized_fit",
    "LinearizedFit",
]
