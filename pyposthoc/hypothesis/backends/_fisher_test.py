"""
Fisher's exact test implementation.

Supports:
- 2x2 tables: exact p-value, conditional MLE odds ratio, exact CI
- r x c tables: Monte Carlo p-value from the margins-preserving
  Markov chain, with a simulation-error interval for the p-value

The two-sided 2x2 p-value uses the central rule: twice the smaller
hypergeometric tail of the observed cell, capped at 1. It is not the
minimum-likelihood rule of R's fisher.test.
"""

from __future__ import annotations

from math import lgamma
from typing import TYPE_CHECKING
import numpy as np
from scipy import stats as sp_stats
from scipy.optimize import brentq

from pyposthoc.hypothesis._common import HTestParams
from pyposthoc.hypothesis._fisher_mc import (
    FisherMCState, simulate_extreme_count, mc_p_value, mc_conf_int,
)

if TYPE_CHECKING:
    from pyposthoc.hypothesis.design import HypothesisDesign

MC_CI_WARNING = (
    "The confidence interval of a Monte Carlo Fisher test bounds the "
    "simulation error of the p-value estimate; it is not an interval "
    "for an effect size such as the odds ratio."
)


def fisher_2x2(design: HypothesisDesign) -> tuple[HTestParams, list[str]]:
    """Exact conditional Fisher test for a 2x2 table."""
    table = design.table
    alternative = design.alternative
    conf_level = design.conf_level
    warnings_list: list[str] = []

    a, b = int(table[0, 0]), int(table[0, 1])
    c, d = int(table[1, 0]), int(table[1, 1])

    p_value = fisher_2x2_pvalue(a, b, c, d, alternative)

    or_mle = conditional_mle_or(a, b, c, d)

    ci = None
    if design.compute_conf_int:
        ci = np.array(_fisher_or_ci(a, b, c, d, conf_level, alternative))

    return HTestParams(
        statistic=None,
        statistic_name="",
        parameter=None,
        p_value=p_value,
        conf_int=ci,
        conf_level=conf_level,
        estimate={"odds ratio": float(or_mle)},
        null_value={"odds ratio": 1.0},
        alternative=alternative,
        method="Fisher's Exact Test for Count Data",
        data_name=design.data_name,
    ), warnings_list


def fisher_2x2_pvalue(
    a: int, b: int, c: int, d: int, alternative: str = "two.sided",
) -> float:
    """
    Exact p-value of the 2x2 table [[a, b], [c, d]].

    Under the null, X = a is hypergeometric with population a+b+c+d,
    a+b successes and a+c draws. "less" is P(X <= a), "greater" is
    P(X >= a) and "two.sided" is min(1, 2 * min(P(X <= a), P(X >= a))).
    """
    dist = sp_stats.hypergeom(a + b + c + d, a + b, a + c)
    p_less = float(dist.cdf(a))
    p_greater = float(dist.sf(a - 1))

    if alternative == "less":
        p = p_less
    elif alternative == "greater":
        p = p_greater
    else:
        p = 2.0 * min(p_less, p_greater)
    return min(1.0, p)


def fisher_mc(design: HypothesisDesign) -> tuple[HTestParams, list[str]]:
    """Monte Carlo Fisher test for an r x c table (r > 2 or c > 2)."""
    state = FisherMCState.from_table(design.table)
    n_sim = design.n_sim

    count = simulate_extreme_count(
        state, n_sim, design.burnin, design.make_rng(), tol=design.tol,
    )
    p_value = mc_p_value(count, n_sim)
    ci = mc_conf_int(count, n_sim, design.conf_level)

    warnings_list = [MC_CI_WARNING]
    if design.alternative != "two.sided":
        warnings_list.append(
            f"alternative={design.alternative!r} is ignored for r x c tables; "
            f"the Monte Carlo test is right-tailed"
        )

    method = (
        "Fisher's Exact Test for RxC Tables (Monte Carlo)"
        f"\n\t(based on {n_sim} samples after {design.burnin} burn-in steps)"
    )

    return HTestParams(
        statistic=state.log_prob_obs,
        statistic_name="sum log(n!)",
        parameter=None,
        p_value=float(p_value),
        conf_int=np.array(ci),
        conf_level=design.conf_level,
        estimate=None,
        null_value=None,
        alternative="greater",
        method=method,
        data_name=design.data_name,
        extras={
            "observed": state.table.copy(),
            "n_extreme": count,
            "n_sim": n_sim,
            "burnin": design.burnin,
        },
    ), warnings_list


def conditional_mle_or(a: int, b: int, c: int, d: int) -> float:
    """
    Conditional maximum likelihood estimate of the odds ratio.

    Solves E[X | margins, OR] = a under Fisher's noncentral
    hypergeometric distribution. Differs from the sample odds ratio
    (a*d)/(b*c).
    """
    if a + b == 0 or c + d == 0 or a + c == 0 or b + d == 0:
        return float('nan')

    if (a == 0 or d == 0) and (b == 0 or c == 0):
        return float('nan')

    if a == 0 or d == 0:
        return 0.0

    if b == 0 or c == 0:
        return float('inf')

    m1 = a + b
    m2 = c + d
    n1 = a + c

    def _equation(log_or: float) -> float:
        ks, probs = _nchg_pmf(n1, m1, m2, log_or)
        return float(np.sum(ks * probs)) - a

    try:
        log_or_mle = brentq(_equation, -50, 50, xtol=1e-12)
    except (ValueError, RuntimeError):
        return float(a * d) / float(b * c)
    return float(np.exp(log_or_mle))


def _nchg_pmf(n1: int, m1: int, m2: int, log_or: float) -> tuple[np.ndarray, np.ndarray]:
    """
    Support and normalised probabilities of the noncentral hypergeometric.

    P(X = k) is proportional to C(m1, k) * C(m2, n1 - k) * OR^k.
    """
    lo = max(0, n1 - m2)
    hi = min(n1, m1)
    ks = np.arange(lo, hi + 1)
    log_probs = np.array([
        _log_comb(m1, k) + _log_comb(m2, n1 - k) + k * log_or
        for k in ks
    ])
    probs = np.exp(log_probs - np.max(log_probs))
    return ks, probs / np.sum(probs)


def _log_comb(n: int, k: int) -> float:
    """Log of C(n, k) using lgamma."""
    if k < 0 or k > n:
        return -np.inf
    return lgamma(n + 1) - lgamma(k + 1) - lgamma(n - k + 1)


def _fisher_or_ci(
    a: int, b: int, c: int, d: int,
    conf_level: float, alternative: str,
) -> tuple[float, float]:
    """Exact confidence interval for the odds ratio."""
    alpha = 1.0 - conf_level
    n1 = a + c
    m1 = a + b
    m2 = c + d

    lo_k = max(0, n1 - m2)
    hi_k = min(n1, m1)

    if alternative == "two.sided":
        tail = alpha / 2.0
        ci_lo = 0.0 if a == lo_k else _find_or_bound(a, n1, m1, m2, tail, "lower")
        ci_hi = float('inf') if a == hi_k else _find_or_bound(a, n1, m1, m2, tail, "upper")
    elif alternative == "less":
        ci_lo = 0.0
        ci_hi = float('inf') if a == hi_k else _find_or_bound(a, n1, m1, m2, alpha, "upper")
    else:
        ci_lo = 0.0 if a == lo_k else _find_or_bound(a, n1, m1, m2, alpha, "lower")
        ci_hi = float('inf')

    return (ci_lo, ci_hi)


def _find_or_bound(
    x: int, n1: int, m1: int, m2: int,
    alpha: float, bound: str,
) -> float:
    """
    Solve the tail-probability equation for one CI endpoint.

    "lower": OR such that P(X >= x | OR) = alpha.
    "upper": OR such that P(X <= x | OR) = alpha.
    """
    def _tail_prob(log_or: float) -> float:
        ks, probs = _nchg_pmf(n1, m1, m2, log_or)
        if bound == "lower":
            return float(np.sum(probs[ks >= x])) - alpha
        return float(np.sum(probs[ks <= x])) - alpha

    try:
        log_or = brentq(_tail_prob, -100, 100, xtol=1e-12, maxiter=1000)
    except (ValueError, RuntimeError):
        return 0.0 if bound == "lower" else float('inf')
    return float(np.exp(log_or))
