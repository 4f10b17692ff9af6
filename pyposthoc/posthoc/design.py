"""
Post-hoc design objects.

Wrap validated inputs and configuration for the comparison procedures.
Factory methods validate method names, levels and pair lists up front so
the engines never see bad configuration.
"""

from dataclasses import dataclass
from typing import Any, Literal, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyposthoc.core.exceptions import ValidationError
from pyposthoc.core.validation import (
    check_count_table,
    check_labels,
    check_method,
    check_pairs,
    check_probability,
)
from pyposthoc.anova.design import GroupsDesign
from pyposthoc.hypothesis._p_adjust import VALID_METHODS as ADJUST_METHODS

ParametricMethod = Literal[
    "lsd", "bonferroni", "sidak", "scheffe", "tukey", "tamhane", "snk", "duncan",
]
NonParametricMethod = Literal["dunn", "dunn_bonferroni", "dunn_sidak", "nemenyi"]
CellMethod = Literal["asr", "fisher_1vsall"]
RowMethod = Literal["chisq", "fisher"]

PARAMETRIC_METHODS = (
    "lsd", "bonferroni", "sidak", "scheffe", "tukey", "tamhane", "snk", "duncan",
)
NONPARAMETRIC_METHODS = ("dunn", "dunn_bonferroni", "dunn_sidak", "nemenyi")
CELL_METHODS = ("asr", "fisher_1vsall")
ROW_METHODS = ("chisq", "fisher")


@dataclass(frozen=True)
class PostHocDesign:
    """
    Validated groups plus configuration for group-based comparisons.

    Created via for_parametric() / for_nonparametric(), not directly.
    """
    data: GroupsDesign
    method: str
    alpha: float
    use_cld: bool
    pairs: tuple[tuple[int, int], ...]
    alpha_levene: float = 0.05

    @property
    def k(self) -> int:
        return self.data.k

    @property
    def labels(self) -> tuple[str, ...]:
        return self.data.labels

    @staticmethod
    def for_parametric(
        groups: Sequence[ArrayLike],
        *,
        method: str = "tukey",
        alpha: float = 0.05,
        alpha_levene: float = 0.05,
        cld: bool = False,
        pairs: Sequence[tuple[int, int]] | None = None,
        labels: Sequence[Any] | None = None,
    ) -> 'PostHocDesign':
        """
        Design for posthoc_test(). Every group needs at least 2
        observations so that its variance is defined.
        """
        check_method(method, PARAMETRIC_METHODS)
        alpha = check_probability(alpha, "alpha")
        alpha_levene = check_probability(alpha_levene, "alpha_levene")
        data = GroupsDesign.for_groups(groups, labels, min_size=2)
        if data.n - data.k < 1:
            raise ValidationError("groups: no residual degrees of freedom")
        if np.sum((data.sizes - 1) * data.variances()) <= 0.0:
            raise ValidationError(
                "groups: pooled within-group variance is zero "
                "(every group is constant)"
            )
        return PostHocDesign(
            data=data,
            method=method,
            alpha=alpha,
            use_cld=bool(cld),
            pairs=check_pairs(pairs, data.k),
            alpha_levene=alpha_levene,
        )

    @staticmethod
    def for_nonparametric(
        groups: Sequence[ArrayLike],
        *,
        method: str = "dunn_bonferroni",
        alpha: float = 0.05,
        cld: bool = False,
        pairs: Sequence[tuple[int, int]] | None = None,
        labels: Sequence[Any] | None = None,
    ) -> 'PostHocDesign':
        """Design for posthoc_nonpar(). Groups need at least 1 observation."""
        check_method(method, NONPARAMETRIC_METHODS)
        alpha = check_probability(alpha, "alpha")
        data = GroupsDesign.for_groups(groups, labels, min_size=1)
        return PostHocDesign(
            data=data,
            method=method,
            alpha=alpha,
            use_cld=bool(cld),
            pairs=check_pairs(pairs, data.k),
        )


@dataclass(frozen=True)
class ContingencyDesign:
    """
    Validated contingency table plus configuration.

    Created via for_cells() / for_rows(), not directly.
    """
    table: NDArray[np.int64]
    method: str
    adjustment: str
    alpha: float
    row_labels: tuple[str, ...]
    col_labels: tuple[str, ...]
    use_cld: bool = False
    pairs: tuple[tuple[int, int], ...] = ()
    n_sim: int = 100_000
    burnin: int = 10_000
    seed: int | None = None

    def make_rng(self) -> np.random.Generator:
        """Fresh per-call generator seeded from `seed`."""
        return np.random.default_rng(self.seed)

    @staticmethod
    def for_cells(
        table: ArrayLike,
        *,
        method: str = "asr",
        adjustment: str = "bonferroni",
        alpha: float = 0.05,
        row_labels: Sequence[Any] | None = None,
        col_labels: Sequence[Any] | None = None,
    ) -> 'ContingencyDesign':
        """Design for posthoc_contingency_cell()."""
        check_method(method, CELL_METHODS)
        check_method(adjustment, ADJUST_METHODS, name="adjustment")
        alpha = check_probability(alpha, "alpha")
        tbl = _validate_table(table)
        return ContingencyDesign(
            table=tbl,
            method=method,
            adjustment=adjustment,
            alpha=alpha,
            row_labels=check_labels(row_labels, tbl.shape[0], "R", "row_labels"),
            col_labels=check_labels(col_labels, tbl.shape[1], "C", "col_labels"),
        )

    @staticmethod
    def for_rows(
        table: ArrayLike,
        *,
        method: str = "chisq",
        adjustment: str = "bonferroni",
        alpha: float = 0.05,
        cld: bool = False,
        pairs: Sequence[tuple[int, int]] | None = None,
        row_labels: Sequence[Any] | None = None,
        n_sim: int = 100_000,
        burnin: int = 10_000,
        seed: int | None = None,
    ) -> 'ContingencyDesign':
        """Design for posthoc_contingency_row()."""
        check_method(method, ROW_METHODS)
        check_method(adjustment, ADJUST_METHODS, name="adjustment")
        alpha = check_probability(alpha, "alpha")
        for name, value in (("n_sim", n_sim), ("burnin", burnin)):
            if isinstance(value, bool) or int(value) != value or value < 0:
                raise ValidationError(
                    f"{name} must be a non-negative integer, got {value!r}"
                )
        tbl = _validate_table(table)
        return ContingencyDesign(
            table=tbl,
            method=method,
            adjustment=adjustment,
            alpha=alpha,
            row_labels=check_labels(row_labels, tbl.shape[0], "R", "row_labels"),
            col_labels=check_labels(None, tbl.shape[1], "C", "col_labels"),
            use_cld=bool(cld),
            pairs=check_pairs(pairs, tbl.shape[0]),
            n_sim=int(n_sim),
            burnin=int(burnin),
            seed=seed,
        )


def _validate_table(table: ArrayLike) -> NDArray[np.int64]:
    tbl = check_count_table(table, "table")
    if tbl.shape[0] < 2 or tbl.shape[1] < 2:
        raise ValidationError(
            f"table: needs at least 2 rows and 2 columns, got shape {tbl.shape}"
        )
    if tbl.sum() == 0:
        raise ValidationError("table: all counts are zero")
    return tbl
