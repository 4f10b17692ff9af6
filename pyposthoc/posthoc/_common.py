"""
Common data types for post-hoc comparisons.

Frozen parameter payloads that go inside Result[P] envelopes, plus the
per-call summary statistics the comparison engines read. Group and row
indices are 1-based throughout.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class PostHocComparison:
    """
    One pairwise comparison.

    diff is the difference of the summary values (means, mean ranks) of
    group1 and group2. rejected is True when the null of no difference is
    rejected at the result's alpha. note carries method-specific context
    ("m=3", "Span=2", "Adj: bh", ...).
    """
    group1: int
    group2: int
    diff: float
    se: float
    statistic: float
    crit_val: float
    p_value: float
    lower_ci: float
    upper_ci: float
    rejected: bool
    note: str = ""


@dataclass(frozen=True)
class PostHocParams:
    """Parameter payload for pairwise post-hoc procedures."""
    method: str
    comparisons: tuple[PostHocComparison, ...]
    alpha: float
    use_cld: bool
    cld_letters: dict[int, str]     # 1-based index -> letters
    label_map: dict[int, str]       # 1-based index -> label


@dataclass(frozen=True)
class CellTestParams:
    """
    Parameter payload for cell-level contingency post-hoc tests.

    All matrices have the shape of `observed`. stats_matrix holds adjusted
    standardized residuals ('asr') or one-vs-rest odds ratios
    ('fisher_1vsall').
    """
    method: str
    adjust_method: str
    observed: NDArray[np.int64]
    stats_matrix: NDArray[np.floating[Any]]
    pvals_matrix: NDArray[np.floating[Any]]
    adj_pvals_matrix: NDArray[np.floating[Any]]
    sig_matrix: NDArray[np.bool_]
    alpha: float
    row_labels: tuple[str, ...]
    col_labels: tuple[str, ...]


@dataclass(frozen=True)
class GroupStats:
    """Summary statistics the parametric procedures work from."""
    k: int
    means: NDArray[np.floating[Any]]
    vars: NDArray[np.floating[Any]]
    ns: NDArray[np.int64]
    mse: float
    df_resid: float
    alpha: float
    pairs: tuple[tuple[int, int], ...]


@dataclass(frozen=True)
class RankStats:
    """Summary statistics the rank-based procedures work from."""
    k: int
    n_total: int
    mean_ranks: NDArray[np.floating[Any]]
    ns: NDArray[np.int64]
    tie_correction: float
    alpha: float
    pairs: tuple[tuple[int, int], ...]
