"""
Post-hoc solution types.

User-facing result wrappers with summary() output, property accessors
and pandas exports. pandas is imported only when an export is requested.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, TYPE_CHECKING

import numpy as np
from numpy.typing import NDArray

from pyposthoc.core.result import Result
from pyposthoc.posthoc._common import PostHocComparison, PostHocParams, CellTestParams

if TYPE_CHECKING:
    import pandas as pd


# =====================================================================
# PostHocSolution
# =====================================================================


@dataclass
class PostHocSolution:
    """
    User-facing result for pairwise post-hoc comparisons.

    Produced by posthoc_test(), posthoc_nonpar() and
    posthoc_contingency_row(). Group indices in `comparisons` are 1-based;
    `label_map` resolves them to labels.
    """
    _result: Result[PostHocParams]

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def comparisons(self) -> tuple[PostHocComparison, ...]:
        return self._result.params.comparisons

    @property
    def alpha(self) -> float:
        return self._result.params.alpha

    @property
    def use_cld(self) -> bool:
        return self._result.params.use_cld

    @property
    def cld_letters(self) -> dict[int, str]:
        """1-based group index -> compact letters (empty without cld=True)."""
        return self._result.params.cld_letters

    @property
    def label_map(self) -> dict[int, str]:
        return self._result.params.label_map

    @property
    def p_values(self) -> NDArray[np.floating[Any]]:
        return np.array([c.p_value for c in self.comparisons])

    @property
    def rejected(self) -> NDArray[np.bool_]:
        return np.array([c.rejected for c in self.comparisons], dtype=bool)

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def label(self, index: int) -> str:
        """Label of a 1-based group index, falling back to the index itself."""
        return self.label_map.get(index, str(index))

    def to_dataframe(self) -> 'pd.DataFrame':
        """
        One row per comparison.

        Columns: Contrast ("label1 - label2"), Diff, StdErr, Stat,
        Critical, P-value, LowerCI, UpperCI, Sig ("*" when rejected), Note.
        """
        import pandas as pd

        rows = [
            {
                "Contrast": f"{self.label(c.group1)} - {self.label(c.group2)}",
                "Diff": c.diff,
                "StdErr": c.se,
                "Stat": c.statistic,
                "Critical": c.crit_val,
                "P-value": c.p_value,
                "LowerCI": c.lower_ci,
                "UpperCI": c.upper_ci,
                "Sig": "*" if c.rejected else "",
                "Note": c.note,
            }
            for c in self.comparisons
        ]
        columns = [
            "Contrast", "Diff", "StdErr", "Stat", "Critical",
            "P-value", "LowerCI", "UpperCI", "Sig", "Note",
        ]
        return pd.DataFrame(rows, columns=columns)

    def cld_dataframe(self) -> 'pd.DataFrame':
        """Columns GroupIndex, GroupLabel, CLD, sorted by group index."""
        import pandas as pd

        indices = sorted(self.label_map) or sorted(self.cld_letters)
        return pd.DataFrame({
            "GroupIndex": indices,
            "GroupLabel": [self.label(i) for i in indices],
            "CLD": [self.cld_letters.get(i, "") for i in indices],
        })

    def summary(self) -> str:
        method_names = {
            'tukey': "Tukey HSD",
            'lsd': "Fisher's LSD",
            'bonferroni': "Bonferroni Pairwise Comparisons",
            'sidak': "Sidak Pairwise Comparisons",
            'scheffe': "Scheffe's Method",
            'tamhane': "Tamhane's T2 (unequal variances)",
            'snk': "Student-Newman-Keuls",
            'duncan': "Duncan's Multiple Range Test",
            'dunn': "Dunn's Test (unadjusted)",
            'dunn_bonferroni': "Dunn's Test (Bonferroni)",
            'dunn_sidak': "Dunn's Test (Sidak)",
            'nemenyi': "Nemenyi Test",
            'row_chisq': "Pairwise Row Chi-squared Tests",
            'row_fisher': "Pairwise Row Fisher Tests",
        }
        title = method_names.get(self.method, self.method)

        lines = [
            title,
            "=" * 72,
            f"alpha = {self.alpha:g}",
            "",
            f"{'Comparison':<25} {'diff':>10} {'lwr':>12} {'upr':>12} {'p':>12}",
            "-" * 72,
        ]

        for c in self.comparisons:
            contrast = f"{self.label(c.group1)} - {self.label(c.group2)}"
            sig = "*" if c.rejected else ""
            lines.append(
                f"{contrast:<25} {c.diff:>10.4f} {c.lower_ci:>12.4f} "
                f"{c.upper_ci:>12.4f} {c.p_value:>12.4e} {sig}"
            )
        lines.append("-" * 72)

        if self.use_cld and self.cld_letters:
            lines.append("")
            lines.append("Compact letter display:")
            for idx in sorted(self.cld_letters):
                lines.append(f"  {self.label(idx):<20} {self.cld_letters[idx]}")

        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"PostHocSolution(method={self.method!r}, "
            f"n_comparisons={len(self.comparisons)}, "
            f"n_rejected={int(self.rejected.sum())})"
        )


# =====================================================================
# CellTestSolution
# =====================================================================


@dataclass
class CellTestSolution:
    """
    User-facing result for cell-level contingency post-hoc tests.

    Produced by posthoc_contingency_cell().
    """
    _result: Result[CellTestParams]

    @property
    def method(self) -> str:
        return self._result.params.method

    @property
    def adjust_method(self) -> str:
        return self._result.params.adjust_method

    @property
    def observed(self) -> NDArray[np.int64]:
        return self._result.params.observed

    @property
    def stats_matrix(self) -> NDArray[np.floating[Any]]:
        """Adjusted residuals ('asr') or odds ratios ('fisher_1vsall')."""
        return self._result.params.stats_matrix

    @property
    def pvals_matrix(self) -> NDArray[np.floating[Any]]:
        return self._result.params.pvals_matrix

    @property
    def adj_pvals_matrix(self) -> NDArray[np.floating[Any]]:
        return self._result.params.adj_pvals_matrix

    @property
    def sig_matrix(self) -> NDArray[np.bool_]:
        return self._result.params.sig_matrix

    @property
    def alpha(self) -> float:
        return self._result.params.alpha

    @property
    def row_labels(self) -> tuple[str, ...]:
        return self._result.params.row_labels

    @property
    def col_labels(self) -> tuple[str, ...]:
        return self._result.params.col_labels

    @property
    def info(self) -> dict[str, Any]:
        return self._result.info

    @property
    def timing(self) -> dict[str, float] | None:
        return self._result.timing

    @property
    def warnings(self) -> tuple[str, ...]:
        return self._result.warnings

    def to_dataframe(self) -> 'pd.DataFrame':
        """
        Long format, one row per cell in row-major order.

        Columns: Row, Column, Observed, Stat, P-value, AdjP-value, Significant.
        """
        import pandas as pd

        n_rows, n_cols = self.observed.shape
        return pd.DataFrame({
            "Row": np.repeat(self.row_labels, n_cols),
            "Column": np.tile(self.col_labels, n_rows),
            "Observed": self.observed.ravel(),
            "Stat": self.stats_matrix.ravel(),
            "P-value": self.pvals_matrix.ravel(),
            "AdjP-value": self.adj_pvals_matrix.ravel(),
            "Significant": self.sig_matrix.ravel(),
        })

    def to_matrix_frame(self) -> 'pd.DataFrame':
        """
        Matrix layout: RowLabel plus one column per table column, each
        cell formatted "%.2f" with a "*" suffix when significant.
        Column labels are kept positionally, so repeated labels (or one
        named "RowLabel") each keep their own column.
        """
        import pandas as pd

        rows = [
            [label] + [
                "%.2f%s" % (self.stats_matrix[i, j], "*" if self.sig_matrix[i, j] else "")
                for j in range(len(self.col_labels))
            ]
            for i, label in enumerate(self.row_labels)
        ]
        return pd.DataFrame(rows, columns=["RowLabel", *self.col_labels])

    def summary(self) -> str:
        stat_name = "Z" if self.method == "asr" else "OR"
        row_w = max(8, max(len(r) for r in self.row_labels))
        col_w = max(10, max(len(c) for c in self.col_labels))

        lines = [
            f"Post-hoc Cell Analysis: {self.method}",
            f"Adjustment: {self.adjust_method} (alpha={self.alpha:g})",
            "=" * 60,
            f"Table content: {stat_name} (* significant)",
            "",
            " " * row_w + "".join(f" {c:>{col_w}}" for c in self.col_labels),
        ]
        for i, r in enumerate(self.row_labels):
            cells = "".join(
                f" {'%.2f%s' % (self.stats_matrix[i, j], '*' if self.sig_matrix[i, j] else ''):>{col_w}}"
                for j in range(len(self.col_labels))
            )
            lines.append(f"{r:<{row_w}}{cells}")

        for w in self.warnings:
            lines.append(f"Warning: {w}")

        return "\n".join(lines)

    def __repr__(self) -> str:
        return (
            f"CellTestSolution(method={self.method!r}, "
            f"adjustment={self.adjust_method!r}, "
            f"n_significant={int(self.sig_matrix.sum())})"
        )
