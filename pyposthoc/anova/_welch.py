"""
Welch's heteroscedastic one-way ANOVA.

Algorithm (Welch 1951): with group sizes N_i, means m_i and sample
variances v_i,

    w_i  = N_i / v_i,  W = sum(w_i),  m' = sum(w_i m_i) / W
    A    = sum(w_i (m_i - m')^2) / (k - 1)
    L    = sum((1 - w_i / W)^2 / (N_i - 1))
    F    = A / (1 + 2 (k - 2) / (k^2 - 1) * L)
    df1  = k - 1,  df2 = (k^2 - 1) / (3 L)

and the p-value is the upper tail of F(df1, df2).
"""

import numpy as np
from scipy import stats as sp_stats

from pyposthoc.core.exceptions import ValidationError
from pyposthoc.anova._common import WelchParams
from pyposthoc.anova.design import GroupsDesign


def welch_anova_impl(design: GroupsDesign) -> tuple[WelchParams, list[str]]:
    """
    Compute Welch's F statistic, degrees of freedom and p-value.

    Args:
        design: Validated groups, each with at least 2 observations

    Returns:
        (WelchParams, warnings)

    Raises:
        ValidationError: If a group has zero variance (its weight is infinite)
    """
    k = design.k
    sizes = design.sizes.astype(np.float64)
    means = design.means()
    variances = design.variances()

    zero_var = np.where(variances == 0.0)[0]
    if len(zero_var) > 0:
        names = ", ".join(design.labels[i] for i in zero_var)
        raise ValidationError(
            f"Welch's ANOVA requires non-zero variance in every group; "
            f"zero variance in: {names}"
        )

    weights = sizes / variances
    w_total = np.sum(weights)
    weighted_mean = float(np.sum(weights * means) / w_total)

    numerator = np.sum(weights * (means - weighted_mean) ** 2) / (k - 1)
    lam = np.sum((1.0 - weights / w_total) ** 2 / (sizes - 1.0))
    correction = 1.0 + (2.0 * (k - 2) / (k ** 2 - 1)) * lam

    f_stat = float(numerator / correction)
    df1 = float(k - 1)
    df2 = float((k ** 2 - 1) / (3.0 * lam))
    p_value = float(sp_stats.f.sf(f_stat, df1, df2))

    warnings_list: list[str] = []

    return WelchParams(
        statistic=f_stat,
        df1=df1,
        df2=df2,
        p_value=p_value,
        n_obs=tuple(int(n) for n in design.sizes),
        group_means=means,
        group_vars=variances,
        weighted_mean=weighted_mean,
        labels=design.labels,
    ), warnings_list
