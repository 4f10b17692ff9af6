"""
Solver dispatch for contingency-table hypothesis tests.

Provides fisher_test() (exact 2x2 or Monte Carlo r x c) and
chisq_test(). Also re-exports p_adjust() for convenience.
"""

from __future__ import annotations

from typing import Literal
import numpy as np
from numpy.typing import ArrayLike

from pyposthoc.hypothesis.design import HypothesisDesign
from pyposthoc.hypothesis.solution import HTestSolution
from pyposthoc.hypothesis.backends.cpu import CPUHypothesisBackend
from pyposthoc.hypothesis._fisher_mc import (
    DEFAULT_N_SIM, DEFAULT_BURNIN, DEFAULT_TOL,
)
from pyposthoc.hypothesis._p_adjust import p_adjust  # re-export

Alternative = Literal["two.sided", "less", "greater"]


def fisher_test(
    table: ArrayLike | HypothesisDesign,
    *,
    alternative: Alternative = "two.sided",
    conf_int: bool = True,
    conf_level: float = 0.95,
    n_sim: int = DEFAULT_N_SIM,
    burnin: int = DEFAULT_BURNIN,
    tol: float = DEFAULT_TOL,
    seed: int | None = None,
    rng: np.random.Generator | None = None,
) -> HTestSolution:
    """
    Fisher's Exact Test for Count Data, for any r x c table.

    An exactly 2x2 table gets the exact conditional test with the
    conditional MLE of the odds ratio and its exact CI
    (`test_type == "fisher_2x2"`). Any larger table gets a Monte Carlo
    estimate from a margins-preserving Markov chain
    (`test_type == "fisher_mc"`).

    Parameters
    ----------
    table : array-like or HypothesisDesign
        Contingency table of non-negative integer counts, at least 2x2.
    alternative : str
        "two.sided" (default), "less", or "greater". 2x2 only; the Monte
        Carlo test is right-tailed.
    conf_int : bool
        Compute the odds-ratio CI (2x2 only).
    conf_level : float
        Confidence level. Default 0.95. For the Monte Carlo test this is
        the level of the interval around the p-value estimate.
    n_sim : int
        Counted Markov chain steps. Default 100000.
    burnin : int
        Discarded warm-up steps. Default 10000.
    tol : float
        Tolerance of the "at least as extreme" comparison. Default 1e-10.
    seed : int or None
        Seed of the per-call random generator.
    rng : numpy.random.Generator or None
        Generator to draw from instead of seeding a new one.

    Returns
    -------
    HTestSolution
        For 2x2: p_value, estimate {"odds ratio"}, conf_int for the odds
        ratio. For r x c: statistic (observed sum log(n!)), p_value
        estimate, conf_int of the p-value estimate.
    """
    if isinstance(table, HypothesisDesign):
        design = table
    else:
        design = HypothesisDesign.for_fisher_test(
            table,
            alternative=alternative,
            conf_int=conf_int,
            conf_level=conf_level,
            n_sim=n_sim,
            burnin=burnin,
            tol=tol,
            seed=seed,
            rng=rng,
        )

    result = CPUHypothesisBackend().solve(design)
    return HTestSolution(_result=result, _design=design)


def chisq_test(
    table: ArrayLike | HypothesisDesign,
    *,
    correct: bool = True,
) -> HTestSolution:
    """
    Pearson's Chi-squared test of independence. Matches R chisq.test().

    Parameters
    ----------
    table : array-like or HypothesisDesign
        Contingency table of non-negative integer counts, at least 2x2,
        with no all-zero row or column.
    correct : bool
        Apply Yates' continuity correction for 2x2 tables.
        Default True (matches R).

    Returns
    -------
    HTestSolution
        Test result with statistic, df, p_value, and extras
        (observed, expected, residuals, stdres).
    """
    if isinstance(table, HypothesisDesign):
        design = table
    else:
        design = HypothesisDesign.for_chisq_test(table, correct=correct)

    result = CPUHypothesisBackend().solve(design)
    return HTestSolution(_result=result, _design=design)
