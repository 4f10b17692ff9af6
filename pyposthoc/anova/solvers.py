"""
ANOVA solver dispatch.

Public API:
    welch_anova(groups, ...) -> WelchSolution
    levene_test(groups, ...) -> LeveneSolution
"""

from typing import Any, Sequence

from numpy.typing import ArrayLike

from pyposthoc.core.result import Result
from pyposthoc.core.compute.timing import Timer
from pyposthoc.core.validation import check_method
from pyposthoc.anova._levene import levene_test_impl, VALID_CENTERS
from pyposthoc.anova._welch import welch_anova_impl
from pyposthoc.anova.design import GroupsDesign
from pyposthoc.anova.solution import WelchSolution, LeveneSolution


def welch_anova(
    groups: Sequence[ArrayLike],
    *,
    labels: Sequence[Any] | None = None,
) -> WelchSolution:
    """
    Welch's one-way ANOVA for groups with unequal variances.

    Tests whether k group means are equal without assuming equal
    variances. The statistic is approximately F(k - 1, df2) with a
    fractional df2.

    Args:
        groups: Sequence of k >= 2 numeric samples, each with at least
            2 observations and non-zero variance
        labels: Optional group labels; defaults to "Group1".."Groupk"

    Returns:
        WelchSolution with statistic, df, p_value, n_obs, group_means,
        group_vars

    Raises:
        ValidationError: If k < 2, a group has fewer than 2 observations,
            or a group has zero variance

    Examples:
        >>> result = welch_anova([a, b, c], labels=["ctrl", "low", "high"])
        >>> result.p_value < 0.05
        >>> print(result.summary())
    """
    timer = Timer()
    timer.start()

    design = GroupsDesign.for_groups(groups, labels, min_size=2)

    with timer.section('welch'):
        params, warnings_list = welch_anova_impl(design)

    timer.stop()

    result = Result(
        params=params,
        info={'method': 'welch', 'n_groups': design.k, 'n_obs': design.n},
        timing=timer.result(),
        backend_name='cpu',
        warnings=tuple(warnings_list),
    )
    return WelchSolution(_result=result)


def levene_test(
    groups: Sequence[ArrayLike],
    *,
    center: str = 'mean',
    labels: Sequence[Any] | None = None,
) -> LeveneSolution:
    """
    Levene's test for homogeneity of variances.

    Tests the null hypothesis that all groups have equal variances.

    Args:
        groups: Sequence of k >= 2 numeric samples
        center: 'mean' (original Levene, default) or 'median'
            (Brown-Forsythe, more robust to non-normality)
        labels: Optional group labels; defaults to "Group1".."Groupk"

    Returns:
        LeveneSolution with F statistic, p-value, and group variances
    """
    check_method(center, VALID_CENTERS, name="center")

    timer = Timer()
    timer.start()

    design = GroupsDesign.for_groups(groups, labels, min_size=1)
    levene_params = levene_test_impl(design, center=center)

    timer.stop()

    result = Result(
        params=levene_params,
        info={'center': center},
        timing=timer.result(),
        backend_name='cpu',
    )
    return LeveneSolution(_result=result)
