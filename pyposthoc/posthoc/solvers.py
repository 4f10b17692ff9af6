"""
Post-hoc solver dispatch.

Public API:
    posthoc_test(groups, ...) -> PostHocSolution
    posthoc_nonpar(groups, ...) -> PostHocSolution
    posthoc_contingency_row(table, ...) -> PostHocSolution
    posthoc_contingency_cell(table, ...) -> CellTestSolution
"""

from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike

from pyposthoc.core.result import Result
from pyposthoc.core.compute.timing import Timer
from pyposthoc.anova._levene import levene_test_impl
from pyposthoc.posthoc._common import GroupStats, PostHocParams, RankStats
from pyposthoc.posthoc._parametric import PARAMETRIC_DISPATCH
from pyposthoc.posthoc._nonparametric import NONPARAMETRIC_DISPATCH, compute_ranks
from pyposthoc.posthoc._contingency import (
    run_cell_test,
    run_row_test,
    first_column_proportions,
)
from pyposthoc.posthoc._cld import generate_cld
from pyposthoc.posthoc.design import (
    PostHocDesign,
    ContingencyDesign,
    ParametricMethod,
    NonParametricMethod,
    CellMethod,
    RowMethod,
)
from pyposthoc.posthoc.solution import PostHocSolution, CellTestSolution


def posthoc_test(
    groups: Sequence[ArrayLike],
    *,
    method: ParametricMethod = "tukey",
    alpha: float = 0.05,
    alpha_levene: float = 0.05,
    cld: bool = False,
    pairs: Sequence[tuple[int, int]] | None = None,
    labels: Sequence[Any] | None = None,
) -> PostHocSolution:
    """
    Parametric pairwise comparisons of group means.

    Levene's test (center='mean') is run first as an advisory check; when
    its p-value is below alpha_levene a warning recommending 'tamhane' is
    recorded on the result.

    Args:
        groups: Sequence of k >= 2 numeric samples, each with n >= 2
        method: One of:
            'tukey' (default)  Tukey HSD, studentized range
            'lsd'              Fisher's LSD, unadjusted t-tests
            'bonferroni'       t-tests at alpha / m
            'sidak'            t-tests at 1 - (1 - alpha)^(1/m)
            'scheffe'          F-based, all contrasts
            'snk'              Student-Newman-Keuls stepwise range test
            'duncan'           Duncan's new multiple range test
            'tamhane'          Tamhane's T2 (Welch + Sidak), unequal variances
        alpha: Significance level in (0, 1)
        alpha_levene: Threshold of the Levene pre-check
        cld: Compute compact letter display from the group means
        pairs: 1-based (i, j) pairs to compare; default all C(k, 2) pairs
        labels: Group labels; default "Group1".."Groupk"

    Returns:
        PostHocSolution

    Raises:
        ValidationError: Unknown method, alpha outside (0, 1), k < 2,
            a group with fewer than 2 observations, invalid pairs, or
            'tamhane' with a zero-variance group

    Examples:
        >>> res = posthoc_test([a, b, c], method='tukey', cld=True)
        >>> res.to_dataframe()
        >>> print(res.summary())
    """
    timer = Timer()
    timer.start()

    design = PostHocDesign.for_parametric(
        groups,
        method=method,
        alpha=alpha,
        alpha_levene=alpha_levene,
        cld=cld,
        pairs=pairs,
        labels=labels,
    )
    data = design.data
    warnings_list: list[str] = []

    with timer.section('levene'):
        levene = levene_test_impl(data, center='mean')
    if levene.p_value < design.alpha_levene:
        warnings_list.append(
            f"Levene's test: unequal variances (p={levene.p_value:.4f}). "
            f"Consider using method='tamhane'."
        )

    means = data.means()
    variances = data.variances()
    ns = data.sizes
    df_resid = float(data.n - data.k)
    mse = float(np.sum((ns - 1) * variances) / df_resid)

    stats = GroupStats(
        k=data.k,
        means=means,
        vars=variances,
        ns=ns,
        mse=mse,
        df_resid=df_resid,
        alpha=design.alpha,
        pairs=design.pairs,
    )

    with timer.section('comparisons'):
        comparisons = PARAMETRIC_DISPATCH[design.method](stats)

    result = _finish(
        design.method, comparisons, design, means, timer, warnings_list,
        info={
            'method': design.method,
            'n_groups': data.k,
            'mse': mse,
            'df_resid': df_resid,
            'levene_p_value': levene.p_value,
        },
    )
    return PostHocSolution(_result=result)


def posthoc_nonpar(
    groups: Sequence[ArrayLike],
    *,
    method: NonParametricMethod = "dunn_bonferroni",
    alpha: float = 0.05,
    cld: bool = False,
    pairs: Sequence[tuple[int, int]] | None = None,
    labels: Sequence[Any] | None = None,
) -> PostHocSolution:
    """
    Rank-based pairwise comparisons (post-hoc for Kruskal-Wallis).

    Args:
        groups: Sequence of k >= 2 numeric samples
        method: 'dunn_bonferroni' (default), 'dunn' (unadjusted),
            'dunn_sidak', or 'nemenyi' (studentized range, infinite df)
        alpha: Significance level in (0, 1)
        cld: Compute compact letter display from the mean ranks
        pairs: 1-based (i, j) pairs to compare; default all C(k, 2) pairs
        labels: Group labels; default "Group1".."Groupk"

    Returns:
        PostHocSolution whose diff column is the difference in mean ranks
    """
    timer = Timer()
    timer.start()

    design = PostHocDesign.for_nonparametric(
        groups, method=method, alpha=alpha, cld=cld, pairs=pairs, labels=labels,
    )
    data = design.data

    with timer.section('ranks'):
        group_ranks, tie_corr, n_total = compute_ranks(data.groups)
    mean_ranks = np.array([np.mean(r) for r in group_ranks])

    stats = RankStats(
        k=data.k,
        n_total=n_total,
        mean_ranks=mean_ranks,
        ns=data.sizes,
        tie_correction=tie_corr,
        alpha=design.alpha,
        pairs=design.pairs,
    )

    with timer.section('comparisons'):
        comparisons = NONPARAMETRIC_DISPATCH[design.method](stats)

    result = _finish(
        design.method, comparisons, design, mean_ranks, timer, [],
        info={
            'method': design.method,
            'n_groups': data.k,
            'n_obs': n_total,
            'tie_correction': tie_corr,
        },
    )
    return PostHocSolution(_result=result)


def posthoc_contingency_row(
    table: ArrayLike,
    *,
    method: RowMethod = "chisq",
    adjustment: str = "bonferroni",
    alpha: float = 0.05,
    cld: bool = False,
    pairs: Sequence[tuple[int, int]] | None = None,
    row_labels: Sequence[Any] | None = None,
    n_sim: int = 100_000,
    burnin: int = 10_000,
    seed: int | None = None,
) -> PostHocSolution:
    """
    Pairwise comparison of the column distributions of table rows.

    Each pair is tested on its 2-row sub-table with all-zero columns
    dropped; fewer than 2 remaining columns gives a "Degenerate"
    comparison with p = 1.

    Args:
        table: r x c table of non-negative integer counts
        method: 'chisq' (Pearson, no continuity correction) or 'fisher'
            (exact for 2x2 sub-tables, Monte Carlo otherwise)
        adjustment: 'bonferroni' (default), 'bh' / 'fdr', or 'none'
        alpha: Significance level in (0, 1)
        cld: Compute compact letter display ordered by each row's share
            in the first column
        pairs: 1-based (i, j) row pairs; default all pairs
        row_labels: Row labels; default "R1".."Rr"
        n_sim, burnin: Monte Carlo sizes for 'fisher'
        seed: Seed of the per-call random generator

    Returns:
        PostHocSolution with method "row_chisq" or "row_fisher"; p_value
        holds the adjusted p-values
    """
    timer = Timer()
    timer.start()

    design = ContingencyDesign.for_rows(
        table,
        method=method,
        adjustment=adjustment,
        alpha=alpha,
        cld=cld,
        pairs=pairs,
        row_labels=row_labels,
        n_sim=n_sim,
        burnin=burnin,
        seed=seed,
    )

    with timer.section('comparisons'):
        comparisons = run_row_test(design)

    result = _finish(
        f"row_{design.method}", comparisons, design,
        first_column_proportions(design.table), timer, [],
        info={
            'method': f"row_{design.method}",
            'adjustment': design.adjustment,
            'shape': design.table.shape,
            'n_sim': design.n_sim,
            'burnin': design.burnin,
        },
        labels=design.row_labels,
    )
    return PostHocSolution(_result=result)


def posthoc_contingency_cell(
    table: ArrayLike,
    *,
    method: CellMethod = "asr",
    adjustment: str = "bonferroni",
    alpha: float = 0.05,
    row_labels: Sequence[Any] | None = None,
    col_labels: Sequence[Any] | None = None,
) -> CellTestSolution:
    """
    Cell-wise post-hoc analysis of a contingency table.

    Args:
        table: r x c table of non-negative integer counts
        method: 'asr' (adjusted standardized residuals, default) or
            'fisher_1vsall' (exact test of each cell against the rest)
        adjustment: 'bonferroni' (default), 'bh' / 'fdr', or 'none';
            all r * c p-values form one family
        alpha: Significance level in (0, 1)
        row_labels: Row labels; default "R1".."Rr"
        col_labels: Column labels; default "C1".."Cc"

    Returns:
        CellTestSolution
    """
    timer = Timer()
    timer.start()

    design = ContingencyDesign.for_cells(
        table,
        method=method,
        adjustment=adjustment,
        alpha=alpha,
        row_labels=row_labels,
        col_labels=col_labels,
    )

    with timer.section('cells'):
        params, warnings_list = run_cell_test(design)

    timer.stop()

    result = Result(
        params=params,
        info={
            'method': design.method,
            'adjustment': design.adjustment,
            'shape': design.table.shape,
        },
        timing=timer.result(),
        backend_name='cpu',
        warnings=tuple(warnings_list),
    )
    return CellTestSolution(_result=result)


# =====================================================================
# Internal helpers
# =====================================================================


def _finish(
    method: str,
    comparisons,
    design,
    cld_stats,
    timer: Timer,
    warnings_list: list[str],
    *,
    info: dict[str, Any],
    labels: tuple[str, ...] | None = None,
) -> Result[PostHocParams]:
    """Attach CLD letters and labels, stop the timer, build the Result."""
    if labels is None:
        labels = design.labels

    letters: dict[int, str] = {}
    if design.use_cld:
        with timer.section('cld'):
            letters, cld_warnings = generate_cld(cld_stats, comparisons, design.alpha)
        warnings_list = warnings_list + cld_warnings

    timer.stop()

    params = PostHocParams(
        method=method,
        comparisons=tuple(comparisons),
        alpha=design.alpha,
        use_cld=design.use_cld,
        cld_letters=letters,
        label_map={i: label for i, label in enumerate(labels, start=1)},
    )
    return Result(
        params=params,
        info=info,
        timing=timer.result(),
        backend_name='cpu',
        warnings=tuple(warnings_list),
    )
