"""
Hypothesis test solution types.

HTestSolution wraps Result[HTestParams] and provides R's print.htest format.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING
import numpy as np
from numpy.typing import NDArray

from pyposthoc.core.result import Result
from pyposthoc.hypothesis._common import HTestParams

if TYPE_CHECKING:
    from pyposthoc.hypothesis.design import HypothesisDesign


@dataclass
class HTestSolution:
    """
    User-facing hypothesis test results.

    Wraps Result[HTestParams]. For the Monte Carlo Fisher test
    (`test_type == "fisher_mc"`) the statistic is the observed sum of
    log-factorials and `conf_int` bounds the simulation error of the
    p-value, not an effect size.
    """
    _result: Result[HTestParams]
    _design: 'HypothesisDesign | None'

    # --- Standard htest fields ---

    @property
    def statistic(self) -> float | None:
        """Test statistic value."""
        return self._result.params.statistic

    @property
    def statistic_name(self) -> str:
        return self._result.params.statistic_name

    @property
    def parameter(self) -> dict[str, float] | None:
        """Distribution parameters (e.g. {'df': 2})."""
        return self._result.params.parameter

    @property
    def p_value(self) -> float:
        return self._result.params.p_value

    @property
    def conf_int(self) -> NDArray[np.floating[Any]] | None:
        """Confidence interval, shape (2,)."""
        return self._result.params.conf_int

    @property
    def conf_level(self) -> float:
        return self._result.params.conf_level

    @property
    def estimate(self) -> dict[str, float] | None:
        """Point estimate(s)."""
        return self._result.params.estimate

    @property
    def null_value(self) -> dict[str, float] | None:
        return self._result.params.null_value

    @property
    def alternative(self) -> str:
        return self._result.params.alternative

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def data_name(self) -> str:
        return self._result.params.data_name

    @property
    def test_type(self) -> str:
        """"fisher_2x2", "fisher_mc" or "chisq_independence"."""
        return self._result.info['test_type']

    @property
    def is_monte_carlo(self) -> bool:
        return self.test_type == "fisher_mc"

    # --- Test-specific extras ---

    @property
    def extras(self) -> dict[str, Any] | None:
        return self._result.params.extras

    @property
    def odds_ratio(self) -> float | None:
        """For the exact 2x2 Fisher test: conditional MLE of the odds ratio."""
        e = self._result.params.estimate
        return e.get('odds ratio') if e else None

    @property
    def expected(self) -> NDArray | None:
        """For chisq_test: expected counts under H0."""
        e = self._result.params.extras
        return e.get('expected') if e else None

    @property
    def stdres(self) -> NDArray | None:
        """For chisq_test: adjusted standardized residuals."""
        e = self._result.params.extras
        return e.get('stdres') if e else None

    @property
    def n_extreme(self) -> int | None:
        """For the Monte Carlo test: number of sampled tables at least as extreme."""
        e = self._result.params.extras
        return e.get('n_extreme') if e else None

    # --- Metadata ---

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def backend_name(self) -> str:
        return self._result.backend_name

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    # --- Formatting ---

    def summary(self) -> str:
        """
        Format as R's print.htest output.

        Produces output like:
            Fisher's Exact Test for Count Data

        data:  table
        p-value = 0.03497
        alternative hypothesis: true odds ratio is not equal to 1
        95 percent confidence interval:
         1.008849  21.50623
        sample estimates:
           odds ratio
             4.299504
        """
        p = self._result.params
        lines = [f"\t{p.method}", "", f"data:  {p.data_name}"]

        parts = []
        if p.statistic is not None:
            parts.append(f"{p.statistic_name} = {p.statistic:.5g}")
        if p.parameter is not None:
            for name, val in p.parameter.items():
                parts.append(f"{name} = {val:.5g}")
        parts.append(f"p-value = {_format_pvalue(p.p_value)}")
        lines.append(", ".join(parts))

        if p.null_value:
            nv_name, nv_val = next(iter(p.null_value.items()))
            relation = {
                "two.sided": "is not equal to",
                "less": "is less than",
                "greater": "is greater than",
            }[p.alternative]
            lines.append(
                f"alternative hypothesis: true {nv_name} {relation} {nv_val:g}"
            )

        if p.conf_int is not None:
            pct = f"{p.conf_level * 100:g}"
            if self.is_monte_carlo:
                lines.append(f"{pct} percent Monte Carlo interval for the p-value:")
            else:
                lines.append(f"{pct} percent confidence interval:")
            lo, hi = p.conf_int
            lines.append(f" {_format_number(lo)}  {_format_number(hi)}")

        if p.estimate is not None:
            lines.append("sample estimates:")
            lines.append(" ".join(f"{n:>14s}" for n in p.estimate))
            lines.append(" ".join(f"{v:14.7g}" for v in p.estimate.values()))

        lines.append("")
        return "\n".join(lines)

    def __repr__(self) -> str:
        p = self._result.params
        stat_str = ""
        if p.statistic is not None:
            stat_str = f", {p.statistic_name}={p.statistic:.4g}"
        return (
            f"HTestSolution(test_type={self.test_type!r}{stat_str}, "
            f"p_value={p.p_value:.4g})"
        )


def _format_pvalue(p: float) -> str:
    """Format p-value like R does."""
    if p < 2.2e-16:
        return "< 2.2e-16"
    if p < 0.001:
        return f"{p:.4e}"
    return f"{p:.4g}"


def _format_number(x: float) -> str:
    """Format a number, handling infinity."""
    if np.isinf(x):
        return "-Inf" if x < 0 else "Inf"
    return f"{x:.7g}"
