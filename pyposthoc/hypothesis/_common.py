"""
Common types for hypothesis testing.

Defines HTestParams, an R htest-like payload shared by Fisher's exact
test (exact 2x2 and Monte Carlo r x c) and Pearson's chi-squared test.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray


VALID_ALTERNATIVES = ("two.sided", "less", "greater")


@dataclass(frozen=True)
class HTestParams:
    """
    Parameter payload for hypothesis tests.

    Attributes
    ----------
    statistic : float or None
        Test statistic. For the Monte Carlo Fisher test this is the
        observed table's sum of log-factorials; None for the exact 2x2 test.
    statistic_name : str
        Name of the statistic ("X-squared", "sum log(n!)").
    parameter : dict or None
        Distribution parameters, e.g. {"df": 2}.
    p_value : float
        p-value (an estimate for Monte Carlo tests).
    conf_int : ndarray or None
        Confidence interval, shape (2,). For the exact 2x2 test it bounds
        the odds ratio; for the Monte Carlo test it bounds the p-value
        estimate itself (simulation error only).
    conf_level : float
        Confidence level (e.g. 0.95).
    estimate : dict or None
        Point estimate(s), e.g. {"odds ratio": 2.9}.
    null_value : dict or None
        Hypothesized value under H0, e.g. {"odds ratio": 1}.
    alternative : str
        "two.sided", "less", or "greater".
    method : str
        Human-readable method name.
    data_name : str
        Description of the data.
    extras : dict or None
        Test-specific additional outputs (expected counts, simulation
        counts, ...).
    """
    statistic: float | None
    statistic_name: str
    parameter: dict[str, float] | None
    p_value: float
    conf_int: NDArray[np.floating[Any]] | None
    conf_level: float
    estimate: dict[str, float] | None
    null_value: dict[str, float] | None
    alternative: str
    method: str
    data_name: str
    extras: dict[str, Any] | None = None
