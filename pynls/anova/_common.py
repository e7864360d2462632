"""
Common data types for model comparison.

Frozen parameter payloads that go inside Result[P] envelopes. Pure data
containers with no computation.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class AnovaTableRow:
    """
    One row of a model comparison table.

    The first row describes the smallest model only; its comparison
    columns (df, sum_sq, f_value, p_value) are None.
    """
    model: str
    res_df: int
    rss: float
    df: int | None
    sum_sq: float | None
    f_value: float | None
    p_value: float | None


@dataclass(frozen=True)
class AnovaParams:
    """Parameter payload for an extra-sum-of-squares comparison."""
    table: tuple[AnovaTableRow, ...]
    n_obs: int
