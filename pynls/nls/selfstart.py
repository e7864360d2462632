"""
Starting values for non-linear least squares.

Iterative least squares needs a starting parameter vector. For the
library models one can be computed from the data by linearization: a
transformation (log, logit) turns the model into a straight line whose
ordinary least squares fit is closed form.

The linearized estimate is not the least squares estimate of the
original model. Taking log(y) turns additive errors into multiplicative
ones, so points near zero get undue weight. It is a good starting point
for nls() and, through linearized_fit(), a way to see that difference.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Callable
import numpy as np
from numpy.typing import ArrayLike, NDArray

from pynls.core.exceptions import ValidationError, SingularMatrixError, DomainError
from pynls.core.compute.linalg.qr import qr_solve_cpu
from pynls.core.validation import check_array, check_1d, check_finite, check_consistent_length, check_positive
from pynls.models.registry import MODELS, Model, get_model
from pynls.regression.design import vandermonde
from pynls.regression.solution import LinearSolution
from pynls.regression.solvers import polyfit

# logit is clipped to this band so y = 0 or 1 does not produce inf
_LOGIT_CLIP = 0.01


def _line(x: NDArray, z: NDArray) -> tuple[float, float]:
    """Intercept and slope of the least squares line z ~ 1 + x."""
    if x.shape[0] < 2 or np.ptp(x) == 0:
        raise ValidationError("need at least two distinct x values")
    c = qr_solve_cpu(vandermonde(x, 1), z, check_rank=True)
    return float(c[0]), float(c[1])


def _log_line(x: NDArray, y: NDArray) -> tuple[float, float]:
    """
    Fit log|y| ~ 1 + x over the points sharing the dominant sign of y.

    Returns (a, slope) with a = ±exp(intercept).
    """
    sign = 1.0 if np.sum(y > 0) >= np.sum(y < 0) else -1.0
    mask = sign * y > 0
    if np.sum(mask) < 2:
        raise ValidationError("need at least two non-zero y values of the same sign")
    c0, c1 = _line(x[mask], np.log(sign * y[mask]))
    return sign * float(np.exp(c0)), c1


def _start_polynomial(degree: int) -> Callable[[NDArray, NDArray], tuple[float, ...]]:
    def start(x: NDArray, y: NDArray) -> tuple[float, ...]:
        try:
            c = qr_solve_cpu(vandermonde(x, degree), y, check_rank=True)
        except SingularMatrixError as e:
            raise ValidationError(
                f"need at least {degree + 1} distinct x values"
            ) from e
        return tuple(float(v) for v in c)
    return start


def _start_logfun(x: NDArray, y: NDArray) -> tuple[float, ...]:
    check_positive(x, 'x', model_name='logfun')
    return _line(np.log(x), y)


def _start_grow(x: NDArray, y: NDArray) -> tuple[float, ...]:
    a, slope = _log_line(x, y)
    return a, slope


def _start_decay(x: NDArray, y: NDArray) -> tuple[float, ...]:
    a, slope = _log_line(x, y)
    return a, -slope


def _start_plateau(x: NDArray, y: NDArray) -> tuple[float, ...]:
    # a just beyond the largest observation keeps 1 - y/a positive
    a = float(y[np.argmax(np.abs(y))]) * 1.05
    if a == 0:
        raise ValidationError("all y values are zero")
    z = 1.0 - y / a
    mask = (z > 0) & (x != 0)
    if not np.any(mask):
        raise ValidationError("no usable points for the rate constant")
    # log(1 - y/a) = -b*x, a line through the origin
    xm, lz = x[mask], np.log(z[mask])
    b = float(-np.sum(xm * lz) / np.sum(xm * xm))
    if not np.isfinite(b) or b <= 0:
        b = 3.0 / float(np.max(np.abs(x)))
    return a, b


def _start_logistic(x: NDArray, y: NDArray) -> tuple[float, ...]:
    p = np.clip(y, _LOGIT_CLIP, 1 - _LOGIT_CLIP)
    c0, c1 = _line(x, np.log(p / (1 - p)))
    if c1 == 0:
        return 0.0, float(np.median(x))
    # logit(y) = b*x - b*m
    return c1, -c0 / c1


def _start_decay2(x: NDArray, y: NDArray) -> tuple[float, ...]:
    order = np.argsort(x)
    xs, ys = x[order], y[order]
    half = xs.shape[0] // 2
    if half < 2:
        raise ValidationError("need at least four observations to separate two decays")

    # Slow pool from the tail, fast pool from what is left early on
    a_slow, b_slow = _start_decay(xs[half:], ys[half:])
    early = ys[:half] - a_slow * np.exp(-b_slow * xs[:half])
    try:
        a_fast, b_fast = _start_decay(xs[:half], early)
    except ValidationError:
        a_fast, b_fast = a_slow, 2.0 * b_slow

    if b_fast < b_slow:
        a_fast, b_fast, a_slow, b_slow = a_slow, b_slow, a_fast, b_fast
    if b_fast == b_slow:
        b_fast = b_slow * 2.0 if b_slow != 0 else 1.0

    a = a_fast + a_slow
    if a == 0:
        raise ValidationError("estimated total amplitude is zero")
    return a, a_fast / a, b_fast, b_slow


SELF_STARTERS: dict[str, Callable[[NDArray, NDArray], tuple[float, ...]]] = {
    'linear': _start_polynomial(1),
    'poly2': _start_polynomial(2),
    'poly3': _start_polynomial(3),
    'grow': _start_grow,
    'decay': _start_decay,
    'plateau': _start_plateau,
    'decay2': _start_decay2,
    'logfun': _start_logfun,
    'logistic': _start_logistic,
}


def has_self_start(model: str | Model | Callable[..., Any]) -> bool:
    """True if starting values can be computed for this model."""
    model = get_model(model)
    return SELF_STARTERS.get(model.name) is not None and model.func is _registered_func(model.name)


def self_start(
    model: str | Model | Callable[..., Any],
    x: NDArray[np.floating[Any]],
    y: NDArray[np.floating[Any]],
) -> NDArray[np.floating[Any]]:
    """
    Compute starting values for a library model from data.

    Args:
        model: Library model (name or Model)
        x, y: Validated 1-D data arrays of equal length

    Returns:
        Parameter vector in the model's parameter order

    Raises:
        ValidationError: If the model has no self-start or the data do not
            allow one; pass start= to nls() instead
        DomainError: If x is outside the model's domain (logfun)
    """
    model = get_model(model)
    if not has_self_start(model):
        raise ValidationError(
            f"No self-starting values for model {model.name!r}; pass start= "
            f"with values for {', '.join(model.param_names)}"
        )

    try:
        values = SELF_STARTERS[model.name](x, y)
    except DomainError:
        raise
    except ValidationError as e:
        raise ValidationError(
            f"{model.name}: cannot compute starting values ({e}); pass start= "
            f"with values for {', '.join(model.param_names)}"
        ) from e

    start = np.asarray(values, dtype=np.float64)
    if not np.all(np.isfinite(start)):
        raise ValidationError(
            f"{model.name}: starting values are not finite ({start.tolist()}); pass start="
        )
    return start


def _registered_func(name: str):
    registered = MODELS.get(name)
    return registered.func if registered is not None else None


# =====================================================================
# Linearized fits
# =====================================================================

@dataclass(frozen=True)
class LinearizedFit:
    """
    A model fit through a linearizing transformation.

    Attributes:
        model: The library model
        transform: Description of the linear form that was fit
        params: Back-transformed model parameters
        solution: Ordinary least squares fit of the transformed data
    """
    model: Model
    transform: str
    params: dict[str, float]
    solution: LinearSolution

    @property
    def coefficients(self) -> NDArray[np.floating[Any]]:
        return np.array(list(self.params.values()))


_TRANSFORMS = {
    'linear': 'y ~ 1 + x',
    'poly2': 'y ~ 1 + x + x^2',
    'poly3': 'y ~ 1 + x + x^2 + x^3',
    'grow': 'log(y) ~ 1 + x;  a = exp(c0), b = c1',
    'decay': 'log(y) ~ 1 + x;  a = exp(c0), b = -c1',
    'logfun': 'y ~ 1 + log(x)',
    'logistic': 'logit(y) ~ 1 + x;  b = c1, m = -c0 / c1',
}


def linearized_fit(model: str | Model, x: ArrayLike, y: ArrayLike) -> LinearizedFit:
    """
    Fit a linearizable model by ordinary least squares on transformed data.

    Supported models: linear, poly2, poly3, grow, decay, logfun, logistic.

    Raises:
        ValidationError: If the model is not linearizable
        DomainError: If the data are outside the transform's domain
            (y <= 0 for grow/decay, y outside (0, 1) for logistic,
            x <= 0 for logfun)
    """
    model = get_model(model)
    if model.name not in _TRANSFORMS or model.func is not _registered_func(model.name):
        raise ValidationError(
            f"Model {model.name!r} has no linearizing transform. "
            f"Linearizable: {', '.join(_TRANSFORMS)}"
        )

    x_arr = check_array(x, 'x')
    y_arr = check_array(y, 'y')
    check_1d(x_arr, 'x')
    check_1d(y_arr, 'y')
    check_finite(x_arr, 'x')
    check_finite(y_arr, 'y')
    check_consistent_length(x_arr, y_arr, names=('x', 'y'))

    name = model.name
    if name in ('linear', 'poly2', 'poly3'):
        solution = polyfit(x_arr, y_arr, degree=model.n_params - 1, backend='cpu')
        params = model.params_dict(solution.coefficients)
    elif name == 'logfun':
        check_positive(x_arr, 'x', model_name=name)
        solution = polyfit(np.log(x_arr), y_arr, degree=1, backend='cpu')
        params = model.params_dict(solution.coefficients)
    elif name in ('grow', 'decay'):
        check_positive(y_arr, 'y', model_name=name)
        solution = polyfit(x_arr, np.log(y_arr), degree=1, backend='cpu')
        c0, c1 = solution.coefficients
        rate = c1 if name == 'grow' else -c1
        params = model.params_dict([np.exp(c0), rate])
    else:
        bad = (y_arr <= 0) | (y_arr >= 1)
        if np.any(bad):
            raise DomainError(
                f"logistic: y must lie strictly between 0 and 1, got "
                f"{int(np.sum(bad))} value(s) outside",
                model_name=name,
                n_invalid=int(np.sum(bad)),
                min_value=float(np.min(y_arr[bad])),
            )
        solution = polyfit(x_arr, np.log(y_arr / (1 - y_arr)), degree=1, backend='cpu')
        c0, c1 = solution.coefficients
        if c1 == 0:
            raise ValidationError("logistic: fitted slope is zero, midpoint undefined")
        params = model.params_dict([c1, -c0 / c1])

    return LinearizedFit(
        model=model,
        transform=_TRANSFORMS[name],
        params=params,
        solution=solution,
    )
