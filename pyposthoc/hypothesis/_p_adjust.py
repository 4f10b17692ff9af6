"""
Multiple testing correction for a family of p-values.

Supports Bonferroni (FWER), Benjamini-Hochberg (FDR, alias "fdr") and
"none". Output order always matches input order.

This is a standalone utility function (no Design/Backend pipeline).
"""

from __future__ import annotations

from typing import Literal

import numpy as np
from numpy.typing import NDArray, ArrayLike

from pyposthoc.core.exceptions import ValidationError

AdjustMethod = Literal["bonferroni", "bh", "fdr", "none"]

VALID_METHODS = ("bonferroni", "bh", "fdr", "none")


def p_adjust(
    p: ArrayLike,
    method: str = "bonferroni",
) -> NDArray[np.floating]:
    """
    Adjust p-values for multiple comparisons.

    Parameters
    ----------
    p : array-like
        Vector of raw p-values. Position defines identity.
    method : str
        "bonferroni" (default): min(1, p * n).
        "bh" (alias "fdr"): Benjamini-Hochberg step-up procedure.
        "none": returned unchanged.

    Returns
    -------
    ndarray
        Adjusted p-values in the input order, clipped to [0, 1].
        NaN positions are left out of the family and stay NaN.
        Families of size <= 1 are returned unchanged.

    Raises
    ------
    ValidationError
        If method is not one of VALID_METHODS.
    """
    if method not in VALID_METHODS:
        raise ValidationError(
            f"Unknown adjustment method {method!r}. Supported: {VALID_METHODS}"
        )

    p_arr = np.asarray(p, dtype=np.float64).ravel()
    result = p_arr.copy()

    if method == "none":
        return result

    nan_mask = np.isnan(p_arr)
    valid_idx = np.where(~nan_mask)[0]
    pv = p_arr[valid_idx]
    n = len(pv)

    if n <= 1:
        return result

    if method == "bonferroni":
        adjusted = np.minimum(pv * n, 1.0)
    else:
        adjusted = _bh(pv, n)

    result[valid_idx] = np.clip(adjusted, 0.0, 1.0)
    return result


def _bh(pv: NDArray, n: int) -> NDArray:
    """Benjamini-Hochberg (controls FDR, needs independence/PRDS)."""
    order = np.argsort(pv, kind="stable")[::-1]  # descending
    sorted_p = pv[order]

    # rank i of the i-th smallest value, walked from the top
    ranks = np.arange(n, 0, -1, dtype=np.float64)
    adjusted_sorted = sorted_p * n / ranks

    # Running minimum from the largest p-value down
    adjusted_sorted = np.minimum.accumulate(adjusted_sorted)
    adjusted_sorted = np.minimum(adjusted_sorted, 1.0)

    result = np.empty(n, dtype=np.float64)
    result[order] = adjusted_sorted
    return result
