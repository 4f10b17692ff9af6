"""
PyPostHoc: robust ANOVA, Monte Carlo Fisher tests, and post-hoc comparisons.

Submodules:
    hypothesis: Fisher's exact test (exact 2x2 / Monte Carlo RxC),
        Pearson's chi-squared test, p-value adjustment
    anova: Welch's heteroscedastic one-way ANOVA, Levene's test
    posthoc: Parametric, rank-based and contingency-table multiple
        comparisons with compact letter display
"""

__version__ = "0.1.0"

from pyposthoc import hypothesis
from pyposthoc import anova
from pyposthoc import posthoc

__all__ = [
    "__version__",
    "hypothesis",
    "anova",
    "posthoc",
]
