"""
Column access for data frames and mappings.

Entry points accept either arrays, or column names together with a
``data`` argument, the way R's lm(y ~ x, data = df) does:

    nls('decay', 'time', 'conc', data=df)

``data`` can be a pandas DataFrame, a dict of arrays, or anything else
supporting ``data[name]``. Torch tensors are moved to the CPU.
"""

from __future__ import annotations

from typing import Any, Mapping, TYPE_CHECKING
import numpy as np
from numpy.typing import ArrayLike

from pynls.core.exceptions import ValidationError

if TYPE_CHECKING:
    import pandas as pd


def get_column(data: 'pd.DataFrame | Mapping[str, Any] | None', key: Any, name: str) -> ArrayLike:
    """
    Resolve one argument to array-like data.

    Args:
        data: Optional container to look string keys up in
        key: Either array-like data or, when data is given, a column name
        name: Parameter name for error messages

    Returns:
        The array-like (not yet validated)

    Raises:
        ValidationError: If key is a string but no data was given, or the
            column does not exist
    """
    if isinstance(key, str):
        if data is None:
            raise ValidationError(
                f"{name}: got column name {key!r} but no data= was supplied"
            )
        try:
            column = data[key]
        except (KeyError, IndexError) as e:
            available = _available_columns(data)
            raise ValidationError(
                f"{name}: column {key!r} not found in data. Available: {available}"
            ) from e
    else:
        column = key

    if hasattr(column, 'cpu') and hasattr(column, 'numpy'):
        column = column.detach().cpu().numpy()
    elif hasattr(column, 'to_numpy'):
        column = column.to_numpy()

    return column


def get_xy(data: Any, x: Any, y: Any) -> tuple[ArrayLike, ArrayLike]:
    """Resolve an (x, y) pair, each either array-like or a column name."""
    return get_column(data, x, 'x'), get_column(data, y, 'y')


def _available_columns(data: Any) -> str:
    keys = getattr(data, 'columns', None)
    if keys is None and hasattr(data, 'keys'):
        keys = data.keys()
    if keys is None:
        return '(unknown)'
    return ', '.join(sorted(str(k) for k in keys))
