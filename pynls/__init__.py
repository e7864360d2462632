"""
PyNLS: model functions and least squares curve fitting for Python.

A small library of named model functions (linear, polynomial,
exponential growth/decay, plateau, double decay, logarithmic, logistic)
and the fitting tools that use them.

Submodules:
    models: The model function library and registry
    regression: Linear least squares (lines, polynomials, design matrices)
    nls: Non-linear least squares with self-starting values
    anova: Extra-sum-of-squares comparison of nested fits
"""

__version__ = "0.1.0"

from pynls import models
from pynls import regression
from pynls import nls
from pynls import anova
from pynls.models import get_model, list_models

__all__ = [
    "__version__",
    "models",
    "regression",
    "nls",
    "anova",
    "get_model",
    "list_models",
]
