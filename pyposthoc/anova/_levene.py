"""
Levene's test for homogeneity of variances.

Algorithm: transform each observation to |y_ij - center(group_j)|, then run
a one-way ANOVA on the transformed values. center='mean' gives the original
Levene test (used as the pre-check of the parametric post-hoc tests);
center='median' gives the Brown-Forsythe variant.
"""

import numpy as np
from scipy import stats as sp_stats

from pyposthoc.anova._common import LeveneParams
from pyposthoc.anova.design import GroupsDesign

VALID_CENTERS = ('mean', 'median')


def levene_test_impl(
    design: GroupsDesign,
    *,
    center: str = 'mean',
) -> LeveneParams:
    """
    Compute Levene's test (or the Brown-Forsythe variant).

    Args:
        design: Validated groups
        center: 'mean' (original Levene, default) or 'median' (Brown-Forsythe)

    Returns:
        LeveneParams with F statistic, p-value, and degrees of freedom.
        When the transformed values have no within-group spread the test
        is degenerate and F = 0, p = 1.
    """
    center_fn = np.mean if center == 'mean' else np.median

    z_groups = [np.abs(g - center_fn(g)) for g in design.groups]
    group_vars = {
        label: float(np.var(g, ddof=1)) if len(g) > 1 else float('nan')
        for label, g in zip(design.labels, design.groups)
    }

    z_grand_mean = np.mean(np.concatenate(z_groups))
    ss_between = sum(len(z) * (np.mean(z) - z_grand_mean) ** 2 for z in z_groups)
    ss_within = sum(np.sum((z - np.mean(z)) ** 2) for z in z_groups)

    df_between = design.k - 1
    df_within = design.n - design.k

    if df_within <= 0 or ss_within == 0:
        f_val = 0.0
        p_val = 1.0
    else:
        f_val = float((ss_between / df_between) / (ss_within / df_within))
        p_val = float(sp_stats.f.sf(f_val, df_between, df_within))

    return LeveneParams(
        f_value=f_val,
        p_value=p_val,
        df_between=df_between,
        df_within=df_within,
        center=center,
        group_vars=group_vars,
    )
