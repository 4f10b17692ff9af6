"""
Parametric pairwise comparison procedures.

All procedures except Tamhane's T2 share the pooled error variance
(mse on df_resid degrees of freedom) of a one-way ANOVA.

Single-step:
    lsd          unadjusted t-tests
    bonferroni   t-tests, alpha / m and p * m
    sidak        t-tests, 1 - (1 - alpha)^(1/m) and 1 - (1 - p)^m
    scheffe      F-based, valid for all contrasts
    tukey        studentized range (Tukey-Kramer for unequal n)
    tamhane      Welch t-tests with Sidak correction (unequal variances)

Stepwise multiple range:
    snk          Student-Newman-Keuls
    duncan       Duncan's new multiple range test
"""

from typing import Callable

import numpy as np
from scipy import stats as sp_stats

from pyposthoc.core.exceptions import ValidationError
from pyposthoc.posthoc._common import GroupStats, PostHocComparison

SQRT2 = np.sqrt(2.0)


def _pooled_se(d: GroupStats, i: int, j: int) -> float:
    return float(np.sqrt(d.mse * (1.0 / d.ns[i - 1] + 1.0 / d.ns[j - 1])))


def _diff(d: GroupStats, i: int, j: int) -> float:
    return float(d.means[i - 1] - d.means[j - 1])


def _comparison(
    i: int, j: int, diff: float, se: float, stat: float,
    crit: float, p_value: float, margin: float, alpha: float, note: str = "",
) -> PostHocComparison:
    return PostHocComparison(
        group1=i,
        group2=j,
        diff=diff,
        se=se,
        statistic=float(stat),
        crit_val=float(crit),
        p_value=float(p_value),
        lower_ci=float(diff - margin),
        upper_ci=float(diff + margin),
        rejected=bool(p_value < alpha),
        note=note,
    )


# =====================================================================
# Single-step procedures
# =====================================================================


def run_lsd(d: GroupStats) -> list[PostHocComparison]:
    """Fisher's least significant difference (no multiplicity control)."""
    crit = sp_stats.t.ppf(1.0 - d.alpha / 2.0, d.df_resid)
    out = []
    for i, j in d.pairs:
        diff = _diff(d, i, j)
        se = _pooled_se(d, i, j)
        stat = abs(diff) / se
        p = 2.0 * sp_stats.t.sf(stat, d.df_resid)
        out.append(_comparison(i, j, diff, se, stat, crit, p, crit * se, d.alpha))
    return out


def run_bonferroni(d: GroupStats) -> list[PostHocComparison]:
    m = len(d.pairs)
    crit = sp_stats.t.ppf(1.0 - (d.alpha / m) / 2.0, d.df_resid)
    out = []
    for i, j in d.pairs:
        diff = _diff(d, i, j)
        se = _pooled_se(d, i, j)
        stat = abs(diff) / se
        raw = 2.0 * sp_stats.t.sf(stat, d.df_resid)
        p = min(1.0, raw * m)
        out.append(_comparison(i, j, diff, se, stat, crit, p, crit * se, d.alpha, f"m={m}"))
    return out


def run_sidak(d: GroupStats) -> list[PostHocComparison]:
    m = len(d.pairs)
    adj_alpha = 1.0 - (1.0 - d.alpha) ** (1.0 / m)
    crit = sp_stats.t.ppf(1.0 - adj_alpha / 2.0, d.df_resid)
    out = []
    for i, j in d.pairs:
        diff = _diff(d, i, j)
        se = _pooled_se(d, i, j)
        stat = abs(diff) / se
        raw = 2.0 * sp_stats.t.sf(stat, d.df_resid)
        p = 1.0 - (1.0 - raw) ** m
        out.append(_comparison(i, j, diff, se, stat, crit, p, crit * se, d.alpha, f"m={m}"))
    return out


def run_scheffe(d: GroupStats) -> list[PostHocComparison]:
    df1 = d.k - 1
    crit = np.sqrt(df1 * sp_stats.f.ppf(1.0 - d.alpha, df1, d.df_resid))
    out = []
    for i, j in d.pairs:
        diff = _diff(d, i, j)
        se = _pooled_se(d, i, j)
        stat = abs(diff) / se
        p = sp_stats.f.sf(stat ** 2 / df1, df1, d.df_resid)
        out.append(_comparison(i, j, diff, se, stat, crit, p, crit * se, d.alpha))
    return out


def run_tukey(d: GroupStats) -> list[PostHocComparison]:
    """Tukey HSD; statistic and critical value are on the q scale."""
    q_crit = sp_stats.studentized_range.ppf(1.0 - d.alpha, d.k, d.df_resid)
    out = []
    for i, j in d.pairs:
        diff = _diff(d, i, j)
        se = _pooled_se(d, i, j)
        q = abs(diff) / (se / SQRT2)
        p = sp_stats.studentized_range.sf(q, d.k, d.df_resid)
        margin = (q_crit / SQRT2) * se
        out.append(_comparison(i, j, diff, se, q, q_crit, p, margin, d.alpha))
    return out


def run_tamhane(d: GroupStats) -> list[PostHocComparison]:
    """Tamhane's T2: per-pair Welch t-test, Sidak-corrected."""
    involved = sorted({g for pair in d.pairs for g in pair})
    zero_var = [g for g in involved if d.vars[g - 1] == 0.0]
    if zero_var:
        raise ValidationError(
            f"tamhane requires non-zero variance in every compared group; "
            f"zero variance in groups {zero_var}"
        )

    m = len(d.pairs)
    adj_alpha = 1.0 - (1.0 - d.alpha) ** (1.0 / m)
    out = []
    for i, j in d.pairs:
        vi = d.vars[i - 1] / d.ns[i - 1]
        vj = d.vars[j - 1] / d.ns[j - 1]
        diff = _diff(d, i, j)
        se = float(np.sqrt(vi + vj))
        df_pair = (vi + vj) ** 2 / (vi ** 2 / (d.ns[i - 1] - 1) + vj ** 2 / (d.ns[j - 1] - 1))
        crit = sp_stats.t.ppf(1.0 - adj_alpha / 2.0, df_pair)
        stat = abs(diff) / se
        raw = 2.0 * sp_stats.t.sf(stat, df_pair)
        p = 1.0 - (1.0 - raw) ** m
        out.append(_comparison(i, j, diff, se, stat, crit, p, crit * se, d.alpha, "Welch+Sidak"))
    return out


# =====================================================================
# Stepwise procedures
# =====================================================================


def _run_stepwise(d: GroupStats, kind: str) -> list[PostHocComparison]:
    """
    Multiple range test over the ordered means.

    Ranges are tested from the widest span (k) down to 2, with a common
    standard error based on the harmonic mean group size. A range is
    declared different only if its q statistic exceeds the critical value
    for its span and neither enclosing range one step wider that shares an
    endpoint was declared not different.
    """
    k = d.k
    order = np.argsort(d.means, kind="stable")
    n_harmonic = k / np.sum(1.0 / d.ns)
    se_step = np.sqrt(d.mse / n_harmonic)

    q_crit_by_span: dict[int, float] = {}
    for span in range(2, k + 1):
        level = d.alpha if kind == "snk" else 1.0 - (1.0 - d.alpha) ** (span - 1)
        q_crit_by_span[span] = float(
            sp_stats.studentized_range.ppf(1.0 - level, span, d.df_resid)
        )

    sig: dict[tuple[int, int], bool] = {}
    by_pair: dict[tuple[int, int], PostHocComparison] = {}

    for span in range(k, 1, -1):
        q_crit = q_crit_by_span[span]
        for lo in range(k - span + 1):
            hi = lo + span - 1
            g_lo, g_hi = int(order[lo]) + 1, int(order[hi]) + 1

            q = abs(d.means[g_hi - 1] - d.means[g_lo - 1]) / se_step

            protected = span < k and (
                (hi < k - 1 and not sig[(lo, hi + 1)])
                or (lo > 0 and not sig[(lo - 1, hi)])
            )
            significant = bool(q > q_crit) and not protected
            sig[(lo, hi)] = significant

            g1, g2 = min(g_lo, g_hi), max(g_lo, g_hi)
            diff = _diff(d, g1, g2)
            se = _pooled_se(d, g1, g2)
            margin = (q_crit / SQRT2) * se
            p = float(sp_stats.studentized_range.sf(q, span, d.df_resid))

            by_pair[(g1, g2)] = PostHocComparison(
                group1=g1,
                group2=g2,
                diff=diff,
                se=se,
                statistic=float(q),
                crit_val=q_crit,
                p_value=p,
                lower_ci=diff - margin,
                upper_ci=diff + margin,
                rejected=significant,
                note=f"Span={span}",
            )

    wanted = {(min(i, j), max(i, j)) for i, j in d.pairs}
    return [by_pair[key] for key in sorted(wanted)]


def run_snk(d: GroupStats) -> list[PostHocComparison]:
    return _run_stepwise(d, "snk")


def run_duncan(d: GroupStats) -> list[PostHocComparison]:
    return _run_stepwise(d, "duncan")


PARAMETRIC_DISPATCH: dict[str, Callable[[GroupStats], list[PostHocComparison]]] = {
    "lsd": run_lsd,
    "bonferroni": run_bonferroni,
    "sidak": run_sidak,
    "scheffe": run_scheffe,
    "tukey": run_tukey,
    "tamhane": run_tamhane,
    "snk": run_snk,
    "duncan": run_duncan,
}
