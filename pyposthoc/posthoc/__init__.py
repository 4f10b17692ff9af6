"""
Post-hoc multiple comparison module.

Public API:
    posthoc_test(groups)               - Parametric comparisons (Tukey, LSD,
                                         Bonferroni, Sidak, Scheffe, SNK,
                                         Duncan, Tamhane)
    posthoc_nonpar(groups)             - Rank-based comparisons (Dunn, Nemenyi)
    posthoc_contingency_row(table)     - Pairwise row tests (chi-squared, Fisher)
    posthoc_contingency_cell(table)    - Cell tests (ASR, one-vs-rest Fisher)
    generate_cld(stats, comparisons)   - Compact letter display
"""

from pyposthoc.posthoc.solvers import (
    posthoc_test,
    posthoc_nonpar,
    posthoc_contingency_row,
    posthoc_contingency_cell,
)
from pyposthoc.posthoc._cld import generate_cld
from pyposthoc.posthoc._common import (
    PostHocComparison,
    PostHocParams,
    CellTestParams,
)
from pyposthoc.posthoc.design import (
    PostHocDesign,
    ContingencyDesign,
    PARAMETRIC_METHODS,
    NONPARAMETRIC_METHODS,
    CELL_METHODS,
    ROW_METHODS,
)
from pyposthoc.posthoc.solution import PostHocSolution, CellTestSolution

__all__ = [
    "posthoc_test",
    "posthoc_nonpar",
    "posthoc_contingency_row",
    "posthoc_contingency_cell",
    "generate_cld",
    "PostHocComparison",
    "PostHocParams",
    "CellTestParams",
    "PostHocDesign",
    "ContingencyDesign",
    "PARAMETRIC_METHODS",
    "NONPARAMETRIC_METHODS",
    "CELL_METHODS",
    "ROW_METHODS",
    "PostHocSolution",
    "CellTestSolution",
]
