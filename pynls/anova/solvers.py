"""
Nested model comparison.

Public API: anova(*fits) -> AnovaSolution

Each consecutive pair of fits (ordered from most to fewest residual
degrees of freedom) is compared with the extra sum of squares F test:

    F = ((RSS_small - RSS_big) / (df_small - df_big)) / (RSS_big / df_big)

which follows F(df_small - df_big, df_big) when the smaller model is
adequate. Polynomial degrees, or a one- versus two-pool decay, are the
typical comparisons.
"""

from typing import Any, Sequence
import numpy as np
from scipy import stats

from pynls.core.exceptions import ValidationError
from pynls.core.result import Result
from pynls.core.compute.timing import Timer
from pynls.anova._common import AnovaParams, AnovaTableRow
from pynls.anova.solution import AnovaSolution


def anova(*fits: Any, names: Sequence[str] | None = None) -> AnovaSolution:
    """
    Compare nested least squares fits of the same response.

    Args:
        *fits: Two or more LinearSolution / NLSSolution objects
        names: Optional labels, one per fit, in the order given

    Returns:
        AnovaSolution

    Raises:
        ValidationError: If fewer than two fits are given, they were fit
            to different data, or two fits have the same residual df

    Example:
        >>> line = polyfit(x, y, 1)
        >>> quad = polyfit(x, y, 2)
        >>> print(anova(line, quad).summary())
    """
    if len(fits) < 2:
        raise ValidationError(f"anova requires at least two fits, got {len(fits)}")

    for i, f in enumerate(fits):
        for attr in ('rss', 'df_residual', 'nobs', 'fitted_values', 'residuals'):
            if not hasattr(f, attr):
                raise ValidationError(
                    f"fit {i + 1}: {type(f).__name__} is not a least squares solution "
                    f"(missing {attr!r})"
                )

    if names is None:
        labels = [_label(f, i) for i, f in enumerate(fits)]
    else:
        if len(names) != len(fits):
            raise ValidationError(
                f"names: expected {len(fits)} labels, got {len(names)}"
            )
        labels = [str(n) for n in names]

    n_obs = {f.nobs for f in fits}
    if len(n_obs) > 1:
        raise ValidationError(
            f"all fits must use the same observations, got nobs {sorted(n_obs)}"
        )

    y_ref = fits[0].fitted_values + fits[0].residuals
    for i, f in enumerate(fits[1:], start=2):
        if not np.allclose(f.fitted_values + f.residuals, y_ref, rtol=1e-8, atol=1e-10):
            raise ValidationError(f"fit {i} was fit to a different response than fit 1")

    timer = Timer()
    timer.start()

    # Stable sort: largest residual df (smallest model) first
    order = sorted(range(len(fits)), key=lambda i: -fits[i].df_residual)
    res_dfs = [fits[i].df_residual for i in order]
    if len(set(res_dfs)) != len(res_dfs):
        raise ValidationError(
            f"fits must have distinct residual degrees of freedom to be nested, got {res_dfs}"
        )

    warnings_list = []
    rows = []
    with timer.section('f_tests'):
        first = fits[order[0]]
        rows.append(AnovaTableRow(
            model=labels[order[0]],
            res_df=int(first.df_residual),
            rss=float(first.rss),
            df=None, sum_sq=None, f_value=None, p_value=None,
        ))
        for prev_i, cur_i in zip(order[:-1], order[1:]):
            prev, cur = fits[prev_i], fits[cur_i]
            df = int(prev.df_residual - cur.df_residual)
            sum_sq = float(prev.rss - cur.rss)
            if cur.rss > 0:
                f_value = (sum_sq / df) / (cur.rss / cur.df_residual)
                p_value = float(stats.f.sf(f_value, df, cur.df_residual))
            else:
                f_value, p_value = float('inf'), 0.0
            if sum_sq < 0:
                warnings_list.append(
                    f"{labels[cur_i]} has a larger RSS than {labels[prev_i]}; "
                    f"the models may not be nested or the larger fit found a local minimum"
                )
            rows.append(AnovaTableRow(
                model=labels[cur_i],
                res_df=int(cur.df_residual),
                rss=float(cur.rss),
                df=df,
                sum_sq=sum_sq,
                f_value=float(f_value),
                p_value=p_value,
            ))

    timer.stop()

    params = AnovaParams(table=tuple(rows), n_obs=int(first.nobs))
    result = Result(
        params=params,
        info={'method': 'extra_sum_of_squares', 'n_models': len(fits)},
        timing=timer.result(),
        backend_name='cpu_anova',
        warnings=tuple(warnings_list),
    )
    return AnovaSolution(_result=result)


def _label(fit: Any, index: int) -> str:
    model = getattr(fit, 'model', None)
    if model is None:
        return f"Model {index + 1}"
    return getattr(model, 'name', str(model))
