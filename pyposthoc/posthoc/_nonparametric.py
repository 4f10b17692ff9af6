"""
Rank-based pairwise comparisons (post-hoc for Kruskal-Wallis).

Observations of all groups are pooled and given mid-ranks. Each pair is
compared on its difference in mean ranks with standard error

    se = sqrt(N (N + 1) / 12 * C * (1 / n_i + 1 / n_j))

where C = 1 - sum(t^3 - t) / (N^3 - N) is the tie correction.
"""

from typing import Callable, Sequence

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyposthoc.posthoc._common import PostHocComparison, RankStats

SQRT2 = np.sqrt(2.0)


def compute_ranks(
    groups: Sequence[NDArray],
) -> tuple[list[NDArray], float, int]:
    """
    Mid-ranks of the pooled sample, split back by group.

    Returns:
        (group_ranks, tie_correction, n_total). The tie correction is
        forced to 1.0 when it would be 0 (all observations tied).
    """
    pooled = np.concatenate(groups)
    n_total = len(pooled)
    ranks = sp_stats.rankdata(pooled, method="average")

    _, counts = np.unique(pooled, return_counts=True)
    ties = counts[counts > 1].astype(np.float64)
    denom = float(n_total) ** 3 - n_total
    tie_corr = 1.0 - np.sum(ties ** 3 - ties) / denom if denom > 0 else 1.0
    if tie_corr == 0:
        tie_corr = 1.0

    bounds = np.cumsum([len(g) for g in groups])[:-1]
    return list(np.split(ranks, bounds)), float(tie_corr), n_total


def _base_variance(d: RankStats) -> float:
    return d.n_total * (d.n_total + 1) / 12.0 * d.tie_correction


def _run_dunn(d: RankStats, adjustment: str) -> list[PostHocComparison]:
    """Dunn's z-test with no, Bonferroni or Sidak adjustment."""
    m = len(d.pairs)
    base_var = _base_variance(d)

    if adjustment == "bonferroni":
        adj_alpha = d.alpha / m
        note = "Adj: Bonferroni"
    elif adjustment == "sidak":
        adj_alpha = 1.0 - (1.0 - d.alpha) ** (1.0 / m)
        note = "Adj: Sidak"
    else:
        adj_alpha = d.alpha
        note = "Adj: None"

    crit = float(sp_stats.norm.ppf(1.0 - adj_alpha / 2.0))

    out = []
    for i, j in d.pairs:
        diff = float(d.mean_ranks[i - 1] - d.mean_ranks[j - 1])
        se = float(np.sqrt(base_var * (1.0 / d.ns[i - 1] + 1.0 / d.ns[j - 1])))
        z = abs(diff) / se
        raw = float(2.0 * sp_stats.norm.sf(z))
        if adjustment == "bonferroni":
            p = min(1.0, raw * m)
        elif adjustment == "sidak":
            p = 1.0 - (1.0 - raw) ** m
        else:
            p = raw
        margin = crit * se
        out.append(PostHocComparison(
            group1=i, group2=j, diff=diff, se=se, statistic=z,
            crit_val=crit, p_value=p,
            lower_ci=diff - margin, upper_ci=diff + margin,
            rejected=p < d.alpha, note=note,
        ))
    return out


def run_dunn(d: RankStats) -> list[PostHocComparison]:
    return _run_dunn(d, "none")


def run_dunn_bonferroni(d: RankStats) -> list[PostHocComparison]:
    return _run_dunn(d, "bonferroni")


def run_dunn_sidak(d: RankStats) -> list[PostHocComparison]:
    return _run_dunn(d, "sidak")


def run_nemenyi(d: RankStats) -> list[PostHocComparison]:
    """
    Nemenyi test: studentized range with infinite df.

    Statistic and critical value are on the z scale (q / sqrt(2)).
    """
    base_var = _base_variance(d)
    crit = float(sp_stats.studentized_range.ppf(1.0 - d.alpha, d.k, np.inf) / SQRT2)

    out = []
    for i, j in d.pairs:
        diff = float(d.mean_ranks[i - 1] - d.mean_ranks[j - 1])
        se = float(np.sqrt(base_var * (1.0 / d.ns[i - 1] + 1.0 / d.ns[j - 1])))
        stat = abs(diff) / se
        p = float(sp_stats.studentized_range.sf(stat * SQRT2, d.k, np.inf))
        margin = crit * se
        out.append(PostHocComparison(
            group1=i, group2=j, diff=diff, se=se, statistic=stat,
            crit_val=crit, p_value=p,
            lower_ci=diff - margin, upper_ci=diff + margin,
            rejected=p < d.alpha, note="Nemenyi",
        ))
    return out


NONPARAMETRIC_DISPATCH: dict[str, Callable[[RankStats], list[PostHocComparison]]] = {
    "dunn": run_dunn,
    "dunn_bonferroni": run_dunn_bonferroni,
    "dunn_sidak": run_dunn_sidak,
    "nemenyi": run_nemenyi,
}
