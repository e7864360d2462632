"""
Input validation utilities for PyNLS.

Validators raise immediately with a message naming the parameter and the
offending value. They never silently repair input. Public entry points
(fit, polyfit, nls, anova) call these once; everything downstream trusts
the validated arrays.
"""

import numpy as np
from numpy.typing import ArrayLike, NDArray
from typing import Any

from pynls.core.exceptions import ValidationError, DimensionError, DomainError


def check_array(array: ArrayLike, name: str) -> NDArray[np.floating[Any]]:
    """
    Convert x / y / parameter input to a floating point ndarray.

    Lists, tuples, scalars and pandas objects are accepted. Integer and
    boolean input is promoted to float64; float32 is kept.

    Raises:
        ValidationError: For object, string or complex data
    """
    try:
        arr = np.asarray(array)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    kind = arr.dtype.kind
    if kind == 'O':
        raise ValidationError(
            f"{name}: converted to object dtype (mixed or non-numeric values)"
        )
    if kind == 'c':
        raise ValidationError(f"{name}: complex values are not supported")
    if kind not in 'biuf':
        raise ValidationError(
            f"{name}: non-numeric dtype {arr.dtype}, expected real numbers"
        )
    if kind != 'f':
        arr = arr.astype(np.float64)
    return arr


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """Reject NaN and Inf, reporting how many of each were found."""
    finite = np.isfinite(array)
    if finite.all():
        return
    n_nan = int(np.isnan(array).sum())
    n_inf = int(finite.size - finite.sum()) - n_nan
    raise ValidationError(
        f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
    )


def check_ndim(array: NDArray[np.floating[Any]], ndim: int, name: str) -> None:
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got shape {array.shape}"
        )


def check_1d(array: NDArray[np.floating[Any]], name: str) -> None:
    check_ndim(array, 1, name)


def check_2d(array: NDArray[np.floating[Any]], name: str) -> None:
    check_ndim(array, 2, name)


def check_consistent_length(
    *arrays: NDArray[np.floating[Any]],
    names: tuple[str, ...]
) -> None:
    """
    Require every array to have the same first dimension.

    Raises:
        ValueError: If names and arrays differ in number (caller bug)
        DimensionError: On a length mismatch, listing each length
    """
    if len(names) != len(arrays):
        raise ValueError(f"got {len(arrays)} arrays but {len(names)} names")

    lengths = {name: arr.shape[0] for name, arr in zip(names, arrays)}
    if len(set(lengths.values())) > 1:
        details = ", ".join(f"{k}={v}" for k, v in lengths.items())
        raise DimensionError(f"Inconsistent lengths: {details}")


def check_min_samples(array: NDArray[np.floating[Any]], min_samples: int, name: str) -> None:
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_positive(
    array: NDArray[np.floating[Any]],
    name: str,
    model_name: str | None = None,
) -> None:
    """
    Verify every element is strictly positive.

    Used for models defined through log(x).

    Raises:
        DomainError: If any element is <= 0 (NaN elements also fail)
    """
    bad = ~(array > 0)
    if np.any(bad):
        offending = array[bad]
        n_bad = int(offending.size)
        min_value = float(np.nanmin(offending)) if np.any(~np.isnan(offending)) else float('nan')
        prefix = f"{model_name}: " if model_name else ""
        raise DomainError(
            f"{prefix}{name} must be > 0, got {n_bad} value(s) <= 0 "
            f"(smallest {min_value!r})",
            model_name=model_name,
            n_invalid=n_bad,
            min_value=min_value,
        )


def check_param_count(
    values: NDArray[np.floating[Any]],
    expected: int,
    name: str,
) -> None:
    """
    Verify a parameter vector has the expected number of entries.

    Raises:
        DimensionError: If the length differs from expected
    """
    if values.ndim != 1 or values.shape[0] != expected:
        raise DimensionError(
            f"{name}: expected {expected} values, got shape {values.shape}"
        )
