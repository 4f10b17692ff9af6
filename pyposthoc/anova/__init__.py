"""
ANOVA module.

Public API:
    welch_anova(groups)  - Welch's heteroscedastic one-way ANOVA
    levene_test(groups)  - Levene / Brown-Forsythe test of equal variances
"""

from pyposthoc.anova.solvers import welch_anova, levene_test
from pyposthoc.anova.design import GroupsDesign
from pyposthoc.anova.solution import WelchSolution, LeveneSolution
from pyposthoc.anova._common import WelchParams, LeveneParams

__all__ = [
    "welch_anova",
    "levene_test",
    "GroupsDesign",
    "WelchSolution",
    "LeveneSolution",
    "WelchParams",
    "LeveneParams",
]
