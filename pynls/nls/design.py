"""
NLS design.

Bundles everything a non-linear least squares backend needs: the model,
validated data, a starting parameter vector and box bounds. All user
input is checked here so backends can trust it.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable, Mapping
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pynls.core.exceptions import ValidationError
from pynls.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_consistent_length,
    check_min_samples,
    check_param_count,
)
from pynls.models.registry import Model, get_model
from pynls.nls.selfstart import self_start

ParamSpec = ArrayLike | Mapping[str, float]
BoundsSpec = tuple[float | ParamSpec, float | ParamSpec]


@dataclass(frozen=True)
class NLSDesign:
    """
    Non-linear least squares problem specification.

    Immutable after construction. Build with NLSDesign.build().
    """
    model: Model
    x: NDArray[np.floating[Any]]
    y: NDArray[np.floating[Any]]
    start: NDArray[np.floating[Any]]
    lower: NDArray[np.floating[Any]]
    upper: NDArray[np.floating[Any]]
    start_source: str

    @classmethod
    def build(
        cls,
        model: str | Model | Callable[..., Any],
        x: ArrayLike,
        y: ArrayLike,
        start: ParamSpec | None = None,
        bounds: BoundsSpec | None = None,
    ) -> NLSDesign:
        """
        Validate inputs and build the design.

        Args:
            model: Library model name, Model, or callable f(x, p1, ...)
            x: Predictor values (1-D)
            y: Response values (1-D, same length as x)
            start: Starting values as a sequence in parameter order or a
                mapping {name: value}. None computes self-starting values.
            bounds: (lower, upper); each a scalar applied to every
                parameter, a sequence in parameter order, or a mapping
                {name: value} (unnamed parameters are unbounded)

        Raises:
            ValidationError: On invalid data, start or bounds
            DimensionError: On length mismatches
            DomainError: If x is outside the model's domain
        """
        model = get_model(model)
        p = model.n_params

        x_arr = check_array(x, 'x')
        y_arr = check_array(y, 'y')
        if y_arr.ndim == 2 and y_arr.shape[1] == 1:
            y_arr = y_arr.ravel()
        check_1d(x_arr, 'x')
        check_1d(y_arr, 'y')
        check_finite(x_arr, 'x')
        check_finite(y_arr, 'y')
        check_consistent_length(x_arr, y_arr, names=('x', 'y'))
        check_min_samples(y_arr, p + 1, 'y')

        lower, upper = _resolve_bounds(bounds, model)

        if start is None:
            theta0 = self_start(model, x_arr, y_arr)
            theta0 = np.clip(theta0, lower, upper)
            start_source = 'self_start'
        else:
            theta0 = _resolve_params(start, model, 'start')
            check_finite(theta0, 'start')
            outside = (theta0 < lower) | (theta0 > upper)
            if np.any(outside):
                names = [n for n, o in zip(model.param_names, outside) if o]
                raise ValidationError(
                    f"start: values for {names} lie outside the bounds"
                )
            start_source = 'user'

        # evaluating the model also surfaces DomainError for bad x
        y0 = np.asarray(model(x_arr, *theta0), dtype=np.float64)
        if y0.shape != y_arr.shape:
            raise ValidationError(
                f"model {model.name!r} returned shape {y0.shape} for x of shape {x_arr.shape}"
            )
        if not np.all(np.isfinite(y0)):
            raise ValidationError(
                f"model {model.name!r} is not finite at the starting values "
                f"{model.params_dict(theta0)}"
            )

        return cls(
            model=model,
            x=x_arr,
            y=y_arr,
            start=theta0,
            lower=lower,
            upper=upper,
            start_source=start_source,
        )

    @property
    def n(self) -> int:
        """Number of observations."""
        return self.y.shape[0]

    @property
    def p(self) -> int:
        """Number of parameters."""
        return self.model.n_params

    @property
    def has_bounds(self) -> bool:
        return bool(np.any(np.isfinite(self.lower)) or np.any(np.isfinite(self.upper)))

    def residuals(self, theta: NDArray[np.floating[Any]]) -> NDArray[np.floating[Any]]:
        """f(x; θ) - y, the vector whose sum of squares is minimised."""
        return np.asarray(self.model(self.x, *theta), dtype=np.float64) - self.y


def _resolve_params(spec: ParamSpec, model: Model, name: str) -> NDArray[np.floating[Any]]:
    """Sequence or {name: value} mapping -> vector in parameter order."""
    if isinstance(spec, Mapping):
        unknown = sorted(set(spec) - set(model.param_names))
        missing = [n for n in model.param_names if n not in spec]
        if unknown:
            raise ValidationError(
                f"{name}: unknown parameter(s) {unknown} for model {model.name!r} "
                f"with parameters {model.param_names}"
            )
        if missing:
            raise ValidationError(f"{name}: missing value(s) for {missing}")
        values = check_array([spec[n] for n in model.param_names], name)
    else:
        values = check_array(spec, name)
        values = np.atleast_1d(values)
    check_param_count(values, model.n_params, name)
    return values


def _resolve_bound(spec: Any, model: Model, fill: float, name: str) -> NDArray[np.floating[Any]]:
    p = model.n_params
    if spec is None:
        return np.full(p, fill)
    if isinstance(spec, Mapping):
        unknown = sorted(set(spec) - set(model.param_names))
        if unknown:
            raise ValidationError(
                f"{name}: unknown parameter(s) {unknown} for model {model.name!r}"
            )
        values = np.array([spec.get(n, fill) for n in model.param_names], dtype=np.float64)
    else:
        values = check_array(spec, name)
        if values.ndim == 0:
            values = np.full(p, float(values))
        check_param_count(values, p, name)
    if np.any(np.isnan(values)):
        raise ValidationError(f"{name}: contains NaN")
    return values.astype(np.float64)


def _resolve_bounds(bounds: BoundsSpec | None, model: Model) -> tuple[NDArray, NDArray]:
    if bounds is None:
        p = model.n_params
        return np.full(p, -np.inf), np.full(p, np.inf)

    if not isinstance(bounds, (tuple, list)) or len(bounds) != 2:
        raise ValidationError("bounds: expected a (lower, upper) pair")

    lower = _resolve_bound(bounds[0], model, -np.inf, 'bounds lower')
    upper = _resolve_bound(bounds[1], model, np.inf, 'bounds upper')
    if np.any(lower >= upper):
        names = [n for n, lo, hi in zip(model.param_names, lower, upper) if lo >= hi]
        raise ValidationError(f"bounds: lower must be < upper for {names}")
    return lower, upper
