"""
ANOVA solution types.

User-facing result wrappers with summary() output and property accessors.
"""

from dataclasses import dataclass
from typing import Any

import numpy as np
from numpy.typing import NDArray

from pyposthoc.core.result import Result
from pyposthoc.anova._common import WelchParams, LeveneParams


# =====================================================================
# WelchSolution
# =====================================================================


@dataclass
class WelchSolution:
    """
    User-facing result for Welch's ANOVA.

    Produced by welch_anova().
    """
    _result: Result[WelchParams]

    @property
    def statistic(self) -> float:
        """Welch's F statistic."""
        return self._result.params.statistic

    @property
    def df(self) -> tuple[float, float]:
        """(df1, df2); df2 is fractional."""
        p = self._result.params
        return (p.df1, p.df2)

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def n_obs(self) -> tuple[int, ...]:
        """Group sizes, in input order."""
        return self._result.params.n_obs

    @property
    def group_means(self) -> NDArray[np.floating[Any]]:
        return self._result.params.group_means

    @property
    def group_vars(self) -> NDArray[np.floating[Any]]:
        return self._result.params.group_vars

    @property
    def labels(self) -> tuple[str, ...]:
        return self._result.params.labels

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def summary(self) -> str:
        """Welch ANOVA report with per-group descriptives."""
        p = self._result.params
        lines = [
            "Welch's ANOVA test (Unequal Variances)",
            "=" * 60,
            "",
            f"F = {p.statistic:.4f}, num df = {p.df1:g}, "
            f"denom df = {p.df2:.3f}, p-value = {_format_p(p.p_value)}",
            "",
            f"{'Group':<16s} {'N':>6s} {'Mean':>12s} {'Variance':>12s}",
            "-" * 50,
        ]
        for label, n, m, v in zip(p.labels, p.n_obs, p.group_means, p.group_vars):
            lines.append(f"{label:<16s} {n:>6d} {m:>12.4f} {v:>12.4f}")

        if self.warnings:
            lines.append("")
            for w in self.warnings:
                lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        return (
            f"WelchSolution(F={p.statistic:.4f}, "
            f"df=({p.df1:g}, {p.df2:.3f}), p={p.p_value:.4e})"
        )


# =====================================================================
# LeveneSolution
# =====================================================================


@dataclass
class LeveneSolution:
    """
    User-facing result for Levene's test.

    Produced by levene_test().
    """
    _result: Result[LeveneParams]

    @property
    def f_value(self) -> float:
        return self._result.params.f_value

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def df_between(self) -> int:
        return self._result.params.df_between

    @property
    def df_within(self) -> int:
        return self._result.params.df_within

    @property
    def center(self) -> str:
        return self._result.params.center

    @property
    def group_vars(self) -> dict[str, float]:
        return self._result.params.group_vars

    def summary(self) -> str:
        variant = "Brown-Forsythe" if self.center == 'median' else "Levene"
        lines = [
            f"{variant} Test for Homogeneity of Variances",
            "=" * 50,
            f"F({self.df_between}, {self.df_within}) = {self.f_value:.4f}, "
            f"p = {self.p_value:.4e}",
            "",
            f"Center: {self.center}",
        ]
        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"LeveneSolution(F={self.f_value:.4f}, "
            f"p={self.p_value:.4e}, center={self.center!r})"
        )


def _format_p(p: float) -> str:
    if p < 2.2e-16:
        return "< 2.2e-16"
    if p < 0.001:
        return f"{p:.4e}"
    return f"{p:.4g}"
