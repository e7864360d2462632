"""
Model registry.

Maps model names to Model records (function, parameter names, formula).
Fitting code resolves models through get_model(), which also accepts a
Model instance or a plain callable f(x, p1, p2, ...) whose parameter names
are read from its signature.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable

import numpy as np
from numpy.typing import ArrayLike

from pynls.models import functions


@dataclass(frozen=True)
class Model:
    """
    A named model function and its parameter layout.

    Attributes:
        name: Registry name ('decay', 'logistic', ...)
        func: Pure function f(x, *params)
        param_names: Parameter names in positional order
        formula: Human-readable formula
        description: One-line description
        linear_in_params: True when y is linear in the parameters, so
            the fit has a closed-form least squares solution
    """
    name: str
    func: Callable[..., Any]
    param_names: tuple[str, ...]
    formula: str
    description: str = ""
    linear_in_params: bool = False

    def __call__(self, x: ArrayLike, *params: Any, **kwargs: Any) -> Any:
        return self.func(x, *params, **kwargs)

    @property
    def n_params(self) -> int:
        return len(self.param_names)

    def params_dict(self, values: ArrayLike) -> dict[str, float]:
        """Map a parameter vector to {name: value}."""
        values = np.asarray(values, dtype=np.float64).ravel()
        if values.shape[0] != self.n_params:
            raise ValueError(
                f"{self.name}: expected {self.n_params} parameters "
                f"{self.param_names}, got {values.shape[0]}"
            )
        return {name: float(v) for name, v in zip(self.param_names, values)}

    def __repr__(self) -> str:
        return f"Model({self.name!r}: y = {self.formula})"


MODELS: dict[str, Model] = {
    'linear': Model(
        name='linear',
        func=functions.linear,
        param_names=('a', 'b'),
        formula='a + b*x',
        description='Straight line',
        linear_in_params=True,
    ),
    'poly2': Model(
        name='poly2',
        func=functions.poly2,
        param_names=('a0', 'a1', 'a2'),
        formula='a0 + a1*x + a2*x^2',
        description='Quadratic polynomial',
        linear_in_params=True,
    ),
    'poly3': Model(
        name='poly3',
        func=functions.poly3,
        param_names=('a0', 'a1', 'a2', 'a3'),
        formula='a0 + a1*x + a2*x^2 + a3*x^3',
        description='Cubic polynomial',
        linear_in_params=True,
    ),
    'grow': Model(
        name='grow',
        func=functions.grow,
        param_names=('a', 'b'),
        formula='a * exp(b*x)',
        description='Exponential growth',
    ),
    'decay': Model(
        name='decay',
        func=functions.decay,
        param_names=('a', 'b'),
        formula='a * exp(-b*x)',
        description='Exponential decay',
    ),
    'plateau': Model(
        name='plateau',
        func=functions.plateau,
        param_names=('a', 'b'),
        formula='a * (1 - exp(-b*x))',
        description='Growth to a plateau',
    ),
    'decay2': Model(
        name='decay2',
        func=functions.decay2,
        param_names=('a', 'p', 'b1', 'b2'),
        formula='a*p*exp(-b1*x) + a*(1-p)*exp(-b2*x)',
        description='Double exponential decay',
    ),
    'logfun': Model(
        name='logfun',
        func=functions.logfun,
        param_names=('a', 'b'),
        formula='a + b*log(x)',
        description='Logarithmic (x > 0)',
        linear_in_params=True,
    ),
    'logistic': Model(
        name='logistic',
        func=functions.logistic,
        param_names=('b', 'm'),
        formula='1 / (1 + exp(-b*(x - m)))',
        description='Logistic curve from 0 to 1',
    ),
}


def list_models() -> list[str]:
    """Return the registered model names in registry order."""
    return list(MODELS.keys())


def get_model(model: str | Model | Callable[..., Any]) -> Model:
    """
    Resolve a model specification to a Model.

    Args:
        model: Registry name, a Model instance, or a callable
            f(x, p1, p2, ...). For callables the parameter names are the
            positional parameters after the first.

    Returns:
        Model

    Raises:
        ValueError: If a name is not registered or a callable has no
            parameters besides x
        TypeError: If model is none of the accepted types
    """
    if isinstance(model, Model):
        return model

    if isinstance(model, str):
        found = MODELS.get(model)
        if found is None:
            available = ', '.join(MODELS.keys())
            raise ValueError(f"Unknown model: {model!r}. Available models: {available}")
        return found

    if callable(model):
        return _model_from_callable(model)

    raise TypeError(
        f"model must be a name, Model or callable, got {type(model).__name__}"
    )


def evaluate(model: str | Model | Callable[..., Any], x: ArrayLike, *params: Any, **kwargs: Any) -> Any:
    """
    Evaluate a model by name (or Model / callable) at x.

    Example:
        >>> evaluate('linear', 2, a=-5, b=3)
        1.0
    """
    return get_model(model)(x, *params, **kwargs)


def _model_from_callable(func: Callable[..., Any]) -> Model:
    sig = inspect.signature(func)
    positional = [
        p.name for p in sig.parameters.values()
        if p.kind in (p.POSITIONAL_ONLY, p.POSITIONAL_OR_KEYWORD)
    ]
    if len(positional) < 2:
        raise ValueError(
            f"Model callable {getattr(func, '__name__', func)!r} must take x and at "
            f"least one parameter, got signature {sig}"
        )
    name = getattr(func, '__name__', 'custom')
    return Model(
        name=name,
        func=func,
        param_names=tuple(positional[1:]),
        formula=f"{name}({', '.join(positional)})",
        description='User-supplied model',
    )
