"""
User-facing model comparison results.
"""

from dataclasses import dataclass
from typing import Any

from pynls.core.result import Result
from pynls.anova._common import AnovaParams, AnovaTableRow
from pynls.regression.solution import significance_stars


@dataclass
class AnovaSolution:
    """
    Result of anova(): an R-style "Analysis of Variance Table".
    """
    _result: Result[AnovaParams]

    @property
    def table(self) -> tuple[AnovaTableRow, ...]:
        """Rows ordered from smallest to largest model."""
        return self._result.params.table

    @property
    def n_obs(self) -> int:
        return self._result.params.n_obs

    @property
    def p_values(self) -> tuple[float, ...]:
        """p-values of the successive comparisons."""
        return tuple(row.p_value for row in self.table[1:])

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Generate the comparison table in R's anova() layout."""
        lines = [
            "Analysis of Variance Table",
            "",
        ]
        for i, row in enumerate(self.table, start=1):
            lines.append(f"Model {i}: {row.model}")
        lines.append("")
        lines.append(
            f"{'':<4} {'Res.Df':>7} {'Res.Sum Sq':>14} {'Df':>4} "
            f"{'Sum Sq':>14} {'F value':>10} {'Pr(>F)':>12}"
        )
        lines.append("-" * 72)
        for i, row in enumerate(self.table, start=1):
            if row.df is None:
                lines.append(f"{i:<4} {row.res_df:>7} {row.rss:>14.6g}")
            else:
                lines.append(
                    f"{i:<4} {row.res_df:>7} {row.rss:>14.6g} {row.df:>4} "
                    f"{row.sum_sq:>14.6g} {row.f_value:>10.4f} {row.p_value:>12.4e} "
                    f"{significance_stars(row.p_value)}"
                )
        lines.append("-" * 72)
        lines.append("Signif. codes:  0 '***' 0.001 '**' 0.01 '*' 0.05 '.' 0.1 ' ' 1")
        for w in self.warnings:
            lines.append(f"Warning: {w}")
        return "\n".join(lines)

    def __repr__(self) -> str:
        models = [row.model for row in self.table]
        return f"AnovaSolution(n={self.n_obs}, models={models})"
