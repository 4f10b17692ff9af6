"""
Group design object.

Wraps validated group samples and their labels. Shared by the ANOVA
solvers and the group-based post-hoc procedures.
"""

from dataclasses import dataclass
from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyposthoc.core.validation import (
    check_array,
    check_finite,
    check_1d,
    check_min_samples,
    check_labels,
)
from pyposthoc.core.exceptions import ValidationError


@dataclass(frozen=True)
class GroupsDesign:
    """
    Validated container of k independent samples.

    Created via for_groups(), not directly. Each group is a private
    float64 copy of the caller's data.
    """
    groups: tuple[NDArray[np.floating[Any]], ...]
    labels: tuple[str, ...]

    @property
    def k(self) -> int:
        return len(self.groups)

    @property
    def sizes(self) -> NDArray[np.int64]:
        return np.array([len(g) for g in self.groups], dtype=np.int64)

    @property
    def n(self) -> int:
        return int(self.sizes.sum())

    def means(self) -> NDArray[np.floating[Any]]:
        return np.array([np.mean(g) for g in self.groups])

    def variances(self) -> NDArray[np.floating[Any]]:
        """Sample variances (ddof=1). Requires every group to have n >= 2."""
        return np.array([np.var(g, ddof=1) for g in self.groups])

    @staticmethod
    def for_groups(
        groups: Sequence[ArrayLike],
        labels: Sequence[Any] | None = None,
        *,
        min_size: int = 2,
    ) -> 'GroupsDesign':
        """
        Create a design from a sequence of samples.

        Args:
            groups: k >= 2 one-dimensional numeric samples
            labels: Optional display labels; defaults to "Group1".."Groupk"
            min_size: Minimum observations per group

        Returns:
            GroupsDesign

        Raises:
            ValidationError: If fewer than 2 groups are given or a group is
                too small, non-numeric or non-finite
            DimensionError: If a group is not 1D or labels have the wrong length
        """
        if isinstance(groups, np.ndarray) and groups.ndim == 1:
            raise ValidationError(
                "groups: expected a sequence of samples, got a single 1D array"
            )

        k = len(groups)
        if k < 2:
            raise ValidationError(f"groups: requires at least 2 groups, got {k}")

        arrays = []
        for i, g in enumerate(groups, start=1):
            name = f"groups[{i}]"
            arr = check_array(g, name)
            check_1d(arr, name)
            check_finite(arr, name)
            check_min_samples(arr, min_size, name)
            arrays.append(arr.astype(np.float64))

        return GroupsDesign(
            groups=tuple(arrays),
            labels=check_labels(labels, k, "Group", "labels"),
        )
