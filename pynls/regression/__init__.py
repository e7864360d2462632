"""
Linear least squares.

Fits models that are linear in their parameters: straight lines,
polynomials (the library models linear, poly2, poly3) and arbitrary
design matrices.

Public API:
    fit(X, y, ...) -> LinearSolution
    polyfit(x, y, degree, ...) -> LinearSolution

Example:
    >>> from pynls.regression import polyfit
    >>> result = polyfit(x, y, degree=2)
    >>> print(result.params)
    >>> print(result.summary())
"""

from pynls.regression.design import RegressionDesign
from pynls.regression.solution import LinearSolution, LinearParams
from pynls.regression.solvers import fit, polyfit

__all__ = [
    "fit",
    "polyfit",
    "RegressionDesign",
    "LinearSolution",
    "LinearParams",
]
