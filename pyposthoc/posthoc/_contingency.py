"""
Post-hoc analysis of r x c contingency tables.

Cell level:
    asr            adjusted standardized residual of every cell,
                   z = (O - E) / sqrt(E (1 - row_prop) (1 - col_prop))
    fisher_1vsall  exact test of every cell against the rest of the table,
                   on the 2x2 table [[a, b], [c, d]] with a = cell,
                   b = rest of its row, c = rest of its column, d = rest

Row level (pairwise comparison of row distributions):
    chisq          Pearson chi-squared on each 2-row sub-table
    fisher         Fisher's exact test on each 2-row sub-table
                   (exact for 2x2, Monte Carlo otherwise)

All cell p-values form one family for adjustment, as do all row pairs.
"""

from typing import Callable

import numpy as np
from numpy.typing import NDArray
from scipy import stats as sp_stats

from pyposthoc.hypothesis import chisq_test, fisher_test, p_adjust
from pyposthoc.hypothesis.backends._fisher_test import fisher_2x2_pvalue
from pyposthoc.posthoc._common import CellTestParams, PostHocComparison
from pyposthoc.posthoc.design import ContingencyDesign

RawRowResult = tuple[int, int, float, float, str]


# =====================================================================
# Cell level
# =====================================================================


def cell_asr(table: NDArray[np.int64]) -> tuple[NDArray, NDArray]:
    """Adjusted standardized residuals and their two-sided normal p-values."""
    obs = table.astype(np.float64)
    total = obs.sum()
    row_sums = obs.sum(axis=1)
    col_sums = obs.sum(axis=0)

    expected = np.outer(row_sums, col_sums) / total
    variance = expected * np.outer(1.0 - row_sums / total, 1.0 - col_sums / total)
    denom = np.sqrt(variance)

    # zero denominator -> z = 0
    z = np.zeros_like(obs)
    np.divide(obs - expected, denom, out=z, where=denom > 0)

    pvals = 2.0 * sp_stats.norm.sf(np.abs(z))
    return z, pvals


def cell_fisher_1vsall(table: NDArray[np.int64]) -> tuple[NDArray, NDArray]:
    """
    One-vs-rest exact tests with central two-sided p-values.

    The statistic is the sample odds ratio, with 0.5 substituted for any
    zero cell of the 2x2 table.
    """
    total = int(table.sum())
    row_sums = table.sum(axis=1)
    col_sums = table.sum(axis=0)

    stats = np.zeros(table.shape, dtype=np.float64)
    pvals = np.zeros(table.shape, dtype=np.float64)

    for (i, j), a in np.ndenumerate(table):
        a = int(a)
        b = int(row_sums[i]) - a
        c = int(col_sums[j]) - a
        d = total - int(row_sums[i]) - int(col_sums[j]) + a

        pvals[i, j] = fisher_2x2_pvalue(a, b, c, d)

        sa, sb, sc, sd = (x if x != 0 else 0.5 for x in (a, b, c, d))
        stats[i, j] = (sa * sd) / (sb * sc)

    return stats, pvals


CELL_DISPATCH: dict[str, Callable[[NDArray[np.int64]], tuple[NDArray, NDArray]]] = {
    "asr": cell_asr,
    "fisher_1vsall": cell_fisher_1vsall,
}


def run_cell_test(design: ContingencyDesign) -> tuple[CellTestParams, list[str]]:
    """Cell statistics, raw and adjusted p-values, significance flags."""
    table = design.table
    stats, pvals = CELL_DISPATCH[design.method](table)

    adj = p_adjust(pvals.ravel(), design.adjustment).reshape(table.shape)
    sig = adj < design.alpha

    warnings_list: list[str] = []
    if design.method == "asr":
        expected = np.outer(table.sum(axis=1), table.sum(axis=0)) / table.sum()
        if np.any(expected < 5):
            warnings_list.append(
                "Some expected counts are below 5; the normal approximation "
                "of the adjusted residuals may be inaccurate"
            )

    return CellTestParams(
        method=design.method,
        adjust_method=design.adjustment,
        observed=table.copy(),
        stats_matrix=stats,
        pvals_matrix=pvals,
        adj_pvals_matrix=adj,
        sig_matrix=sig,
        alpha=design.alpha,
        row_labels=design.row_labels,
        col_labels=design.col_labels,
    ), warnings_list


# =====================================================================
# Row level
# =====================================================================


def _row_subtable(table: NDArray[np.int64], r1: int, r2: int) -> NDArray[np.int64]:
    """Rows r1 and r2 (1-based) with all-zero columns removed."""
    sub = table[[r1 - 1, r2 - 1], :]
    return sub[:, sub.sum(axis=0) > 0]


def row_chisq(
    design: ContingencyDesign, rng: np.random.Generator,
) -> list[RawRowResult]:
    """Pearson chi-squared (no continuity correction) for each row pair."""
    out = []
    for r1, r2 in design.pairs:
        sub = _row_subtable(design.table, r1, r2)
        # an empty row leaves expected counts of zero
        if sub.shape[1] < 2 or np.any(sub.sum(axis=1) == 0):
            out.append((r1, r2, 0.0, 1.0, "Degenerate"))
            continue
        res = chisq_test(sub, correct=False)
        out.append((r1, r2, float(res.statistic), res.p_value, ""))
    return out


def row_fisher(
    design: ContingencyDesign, rng: np.random.Generator,
) -> list[RawRowResult]:
    """
    Fisher's exact test for each row pair.

    2x2 sub-tables report the conditional MLE odds ratio ("Exact 2x2");
    wider ones report the observed sum log(n!) ("MC RxC"). All Monte Carlo
    runs draw from the single per-call generator.
    """
    out = []
    for r1, r2 in design.pairs:
        sub = _row_subtable(design.table, r1, r2)
        if sub.shape[1] < 2:
            out.append((r1, r2, 0.0, 1.0, "Degenerate"))
            continue
        res = fisher_test(
            sub, conf_int=False, n_sim=design.n_sim, burnin=design.burnin, rng=rng,
        )
        if res.is_monte_carlo:
            out.append((r1, r2, float(res.statistic), res.p_value, "MC RxC"))
        else:
            out.append((r1, r2, float(res.odds_ratio), res.p_value, "Exact 2x2"))
    return out


ROW_DISPATCH: dict[
    str, Callable[[ContingencyDesign, np.random.Generator], list[RawRowResult]]
] = {
    "chisq": row_chisq,
    "fisher": row_fisher,
}


def run_row_test(design: ContingencyDesign) -> list[PostHocComparison]:
    """
    Pairwise row comparisons with family-wide p-value adjustment.

    Only statistic, p_value (adjusted), rejected and note are meaningful;
    diff, se, crit_val and the interval are 0.
    """
    raw = ROW_DISPATCH[design.method](design, design.make_rng())
    adj = p_adjust([r[3] for r in raw], design.adjustment)

    comparisons = []
    for (r1, r2, stat, _, note), p in zip(raw, adj):
        suffix = f"Adj: {design.adjustment}"
        comparisons.append(PostHocComparison(
            group1=r1,
            group2=r2,
            diff=0.0,
            se=0.0,
            statistic=stat,
            crit_val=0.0,
            p_value=float(p),
            lower_ci=0.0,
            upper_ci=0.0,
            rejected=bool(p < design.alpha),
            note=f"{note}; {suffix}" if note else suffix,
        ))
    return comparisons


def first_column_proportions(table: NDArray[np.int64]) -> NDArray[np.floating]:
    """Share of each row in the first column (0 for empty rows); orders the CLD."""
    row_sums = table.sum(axis=1).astype(np.float64)
    props = np.zeros(table.shape[0])
    np.divide(table[:, 0], row_sums, out=props, where=row_sums > 0)
    return props
