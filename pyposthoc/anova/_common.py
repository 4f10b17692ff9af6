"""
Common data types for ANOVA.

Contains the frozen parameter payloads that go inside Result[P] envelopes.
Each payload is a pure data container with no computation.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray


@dataclass(frozen=True)
class WelchParams:
    """
    Parameter payload for Welch's heteroscedastic one-way ANOVA.

    df2 is fractional (Welch-Satterthwaite style correction).
    """
    statistic: float
    df1: float
    df2: float
    p_value: float
    n_obs: tuple[int, ...]
    group_means: NDArray[np.floating[Any]]
    group_vars: NDArray[np.floating[Any]]
    weighted_mean: float
    labels: tuple[str, ...]


@dataclass(frozen=True)
class LeveneParams:
    """Parameter payload for Levene / Brown-Forsythe test."""
    f_value: float
    p_value: float
    df_between: int
    df_within: int
    center: str           # 'mean' or 'median'
    group_vars: dict[str, float]   # group label -> variance
