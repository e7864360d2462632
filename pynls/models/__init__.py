"""
Model function library.

Named pure functions f(x, *params) used as fitting targets:

    linear    a + b*x
    poly2     a0 + a1*x + a2*x^2
    poly3     a0 + a1*x + a2*x^2 + a3*x^3
    grow      a * exp(b*x)
    decay     a * exp(-b*x)
    plateau   a * (1 - exp(-b*x))
    decay2    a*p*exp(-b1*x) + a*(1-p)*exp(-b2*x)
    logfun    a + b*log(x)            (x > 0)
    logistic  1 / (1 + exp(-b*(x - m)))

Example:
    >>> from pynls.models import decay, get_model
    >>> decay(0, a=10, b=0.1)
    10.0
    >>> get_model('logistic').param_names
    ('b', 'm')
"""

from pynls.models.functions import (
    linear,
    poly2,
    poly3,
    grow,
    decay,
    plateau,
    decay2,
    logfun,
    logistic,
)
from pynls.models.registry import (
    Model,
    MODELS,
    get_model,
    list_models,
    evaluate,
)

__all__ = [
    "linear",
    "poly2",
    "poly3",
    "grow",
    "decay",
    "plateau",
    "decay2",
    "logfun",
    "logistic",
    "Model",
    "MODELS",
    "get_model",
    "list_models",
    "evaluate",
]
