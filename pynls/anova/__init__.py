"""
Comparison of nested least squares fits.

Public API:
    anova(*fits) -> AnovaSolution

Example:
    >>> from pynls.anova import anova
    >>> result = anova(polyfit(x, y, 1), polyfit(x, y, 2), polyfit(x, y, 3))
    >>> print(result.summary())
"""

from pynls.anova._common import AnovaParams, AnovaTableRow
from pynls.anova.solution import AnovaSolution
from pynls.anova.solvers import anova

__all__ = [
    "anova",
    "AnovaSolution",
    "AnovaParams",
    "AnovaTableRow",
]
