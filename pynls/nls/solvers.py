"""
Solver dispatch for non-linear least squares.

Public API: nls(model, x, y, ...) -> NLSSolution
"""

import warnings
from typing import Any, Callable

from pynls.core.exceptions import ConvergenceError, ValidationError
from pynls.core.compute.tolerances import NLSControl, DEFAULT_CONTROL
from pynls.core.datasource import get_xy
from pynls.models.registry import Model
from pynls.nls.design import NLSDesign, ParamSpec, BoundsSpec
from pynls.nls.solution import NLSSolution
from pynls.nls.backends.cpu import CPULeastSquaresBackend


def nls(
    model: str | Model | Callable[..., Any] | NLSDesign,
    x: Any = None,
    y: Any = None,
    *,
    start: ParamSpec | None = None,
    bounds: BoundsSpec | None = None,
    data: Any = None,
    control: NLSControl | None = None,
    method: str | None = None,
    max_iter: int | None = None,
    tol: float | None = None,
    strict: bool = False,
    verbose: bool = False,
) -> NLSSolution:
    """
    Fit a model by non-linear least squares.

    Finds θ minimising RSS(θ) = Σ (y_i - f(x_i; θ))², starting from
    ``start`` (or self-starting values computed by linearization) and
    iterating with scipy.optimize.least_squares.

    Accepts EITHER:
        1. An NLSDesign object (x, y and the other data arguments ignored)
        2. A model plus data

    Parameters
    ----------
    model : str, Model, callable or NLSDesign
        Library model name ('decay', 'logistic', ...), a Model, or a
        callable f(x, p1, p2, ...).
    x, y : array-like or str
        Data, or column names in ``data``.
    start : sequence or mapping, optional
        Starting values in parameter order or as {name: value}. Required
        for callables; optional for library models.
    bounds : (lower, upper), optional
        Box constraints. Not supported by method='lm'.
    data : DataFrame or mapping, optional
        Source for column names given as x / y.
    control : NLSControl, optional
        Termination settings; defaults to DEFAULT_CONTROL.
    method, max_iter, tol : optional
        Shortcuts overriding the corresponding control fields (tol sets
        ftol, xtol and gtol together).
    strict : bool
        Raise ConvergenceError instead of warning when the optimizer
        stops without converging.
    verbose : bool
        Print progress information.

    Returns
    -------
    NLSSolution

    Raises
    ------
    ValidationError
        Invalid data, starting values, bounds or options.
    DomainError
        x outside the model's domain (logfun with x <= 0).
    ConvergenceError
        strict=True and the optimizer did not converge.

    Examples
    --------
    >>> from pynls.nls import nls
    >>> sol = nls('decay', t, conc)
    >>> sol.params
    {'a': 9.93..., 'b': 0.101...}
    >>> sol = nls('logistic', dose, response, start={'b': 0.01, 'm': 500})
    """
    try:
        effective = (control or DEFAULT_CONTROL).with_overrides(
            method=method, max_iter=max_iter, tol=tol,
        )
    except ValueError as e:
        raise ValidationError(str(e)) from e

    if isinstance(model, NLSDesign):
        design = model
    else:
        if x is None or y is None:
            raise ValueError("x and y required unless an NLSDesign is given")
        x_data, y_data = get_xy(data, x, y)
        design = NLSDesign.build(model, x_data, y_data, start=start, bounds=bounds)

    if effective.method == 'lm' and design.has_bounds:
        raise ValidationError(
            "method='lm' does not support bounds; use method='trf' or 'dogbox'"
        )

    backend_impl = CPULeastSquaresBackend(control=effective)

    if verbose:
        print(f"NLS: model {design.model.name!r}, {design.n} observations, "
              f"{design.p} parameters")
        print(f"Start ({design.start_source}): {design.model.params_dict(design.start)}")
        print(f"Backend: {backend_impl.name}")

    result = backend_impl.solve(design)

    if strict and not result.params.converged:
        raise ConvergenceError(
            f"NLS fit of {design.model.name!r} did not converge after "
            f"{result.info['nfev']} evaluations: {result.info['message']}",
            iterations=result.info['nfev'],
            final_change=result.info['cost'],
            reason=result.info['message'],
            threshold=effective.ftol,
        )

    for message in result.warnings:
        warnings.warn(message, RuntimeWarning, stacklevel=2)

    if verbose:
        print(f"Converged: {result.params.converged} "
              f"(evaluations: {result.params.n_iter}, RSS: {result.params.rss:.6g})")

    return NLSSolution(_result=result, _design=design)
