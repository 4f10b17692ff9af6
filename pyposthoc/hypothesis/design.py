"""
HypothesisDesign: tagged union for contingency-table test inputs.

Uses factory classmethods per test family. The `test_type` field
identifies which fields are populated. Immutable after construction.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any
import numpy as np
from numpy.typing import NDArray, ArrayLike

from pyposthoc.core.exceptions import ValidationError
from pyposthoc.core.validation import check_count_table, check_probability
from pyposthoc.hypothesis._common import VALID_ALTERNATIVES
from pyposthoc.hypothesis._fisher_mc import (
    DEFAULT_N_SIM, DEFAULT_BURNIN, DEFAULT_TOL,
)


def _validate_alternative(alternative: str) -> str:
    """Validate and return alternative hypothesis string."""
    if alternative not in VALID_ALTERNATIVES:
        raise ValidationError(
            f"alternative must be one of {VALID_ALTERNATIVES}, got {alternative!r}"
        )
    return alternative


def _validate_steps(value: int, name: str) -> int:
    """Validate a simulation size (n_sim, burnin)."""
    if isinstance(value, bool) or int(value) != value or value < 0:
        raise ValidationError(
            f"{name} must be a non-negative integer, got {value!r}"
        )
    return int(value)


def _validate_table(table: ArrayLike) -> NDArray[np.int64]:
    """Validate a count table with at least 2 rows and 2 columns."""
    tbl = check_count_table(table, "table")
    if tbl.shape[0] < 2 or tbl.shape[1] < 2:
        raise ValidationError(
            f"Contingency table must have at least 2 rows and 2 columns, "
            f"got shape {tbl.shape}"
        )
    return tbl


@dataclass(frozen=True)
class HypothesisDesign:
    """
    Design for contingency-table hypothesis tests.

    test_type is one of "fisher_2x2", "fisher_mc" or
    "chisq_independence".

    Do not construct directly; use factory classmethods.
    """
    test_type: str
    _table: NDArray[np.int64]

    _alternative: str = "two.sided"
    _conf_level: float = 0.95
    _compute_conf_int: bool = True
    _correct: bool = True

    # Monte Carlo
    _n_sim: int = DEFAULT_N_SIM
    _burnin: int = DEFAULT_BURNIN
    _tol: float = DEFAULT_TOL
    _seed: int | None = None
    _rng: np.random.Generator | None = None

    _data_name: str = "table"

    # --- Properties ---

    @property
    def table(self) -> NDArray[np.int64]:
        return self._table

    @property
    def alternative(self) -> str:
        return self._alternative

    @property
    def conf_level(self) -> float:
        return self._conf_level

    @property
    def compute_conf_int(self) -> bool:
        return self._compute_conf_int

    @property
    def correct(self) -> bool:
        return self._correct

    @property
    def n_sim(self) -> int:
        return self._n_sim

    @property
    def burnin(self) -> int:
        return self._burnin

    @property
    def tol(self) -> float:
        return self._tol

    @property
    def data_name(self) -> str:
        return self._data_name

    def make_rng(self) -> np.random.Generator:
        """
        The per-call random generator.

        A caller-supplied Generator is used as is; otherwise a fresh one
        is seeded from `seed` (None gives fresh OS entropy).
        """
        if self._rng is not None:
            return self._rng
        return np.random.default_rng(self._seed)

    # --- Factory classmethods ---

    @classmethod
    def for_fisher_test(
        cls,
        table: ArrayLike,
        *,
        alternative: str = "two.sided",
        conf_int: bool = True,
        conf_level: float = 0.95,
        n_sim: int = DEFAULT_N_SIM,
        burnin: int = DEFAULT_BURNIN,
        tol: float = DEFAULT_TOL,
        seed: int | None = None,
        rng: np.random.Generator | None = None,
        data_name: str = "table",
    ) -> HypothesisDesign:
        """
        Build design for fisher_test().

        Exactly 2x2 tables get the exact conditional test; anything larger
        gets the Monte Carlo estimator, which is right-tailed and ignores
        `alternative` and `conf_int` (its interval bounds the p-value).
        """
        alternative = _validate_alternative(alternative)
        conf_level = check_probability(conf_level, "conf_level")
        tbl = _validate_table(table)
        n_sim = _validate_steps(n_sim, "n_sim")
        burnin = _validate_steps(burnin, "burnin")
        if tol < 0:
            raise ValidationError(f"tol must be >= 0, got {tol}")

        test_type = "fisher_2x2" if tbl.shape == (2, 2) else "fisher_mc"

        return cls(
            test_type=test_type,
            _table=tbl,
            _alternative=alternative,
            _conf_level=conf_level,
            _compute_conf_int=bool(conf_int),
            _n_sim=n_sim,
            _burnin=burnin,
            _tol=float(tol),
            _seed=seed,
            _rng=rng,
            _data_name=data_name,
        )

    @classmethod
    def for_chisq_test(
        cls,
        table: ArrayLike,
        *,
        correct: bool = True,
        data_name: str = "table",
    ) -> HypothesisDesign:
        """
        Build design for chisq_test() on an r x c contingency table.

        Yates' continuity correction applies to 2x2 tables only, and only
        when `correct` is True.
        """
        tbl = _validate_table(table)
        if np.any(tbl.sum(axis=0) == 0) or np.any(tbl.sum(axis=1) == 0):
            raise ValidationError(
                "Contingency table has an all-zero row or column; "
                "expected counts would be zero"
            )
        return cls(
            test_type="chisq_independence",
            _table=tbl,
            _correct=bool(correct),
            _data_name=data_name,
        )

    def __repr__(self) -> str:
        return (
            f"HypothesisDesign(test_type={self.test_type!r}, "
            f"shape={self._table.shape})"
        )
