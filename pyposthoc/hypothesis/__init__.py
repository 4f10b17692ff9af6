"""
Hypothesis testing module.

Public API:
    fisher_test(table)   - Fisher's exact test (exact 2x2, Monte Carlo r x c)
    chisq_test(table)    - Pearson's chi-squared test of independence
    p_adjust(p)          - Multiple testing correction (Bonferroni, BH)

Monte Carlo engine:
    FisherMCState, perform_swap, simulate_extreme_count,
    mc_p_value, mc_conf_int
"""

from pyposthoc.hypothesis.solvers import fisher_test, chisq_test
from pyposthoc.hypothesis._p_adjust import p_adjust, VALID_METHODS
from pyposthoc.hypothesis._fisher_mc import (
    FisherMCState,
    perform_swap,
    simulate_extreme_count,
    mc_p_value,
    mc_conf_int,
)
from pyposthoc.hypothesis.design import HypothesisDesign
from pyposthoc.hypothesis._common import HTestParams
from pyposthoc.hypothesis.solution import HTestSolution

__all__ = [
    "fisher_test",
    "chisq_test",
    "p_adjust",
    "VALID_METHODS",
    "FisherMCState",
    "perform_swap",
    "simulate_extreme_count",
    "mc_p_value",
    "mc_conf_int",
    "HypothesisDesign",
    "HTestParams",
    "HTestSolution",
]
