"""
Input validation utilities for PyPostHoc.

These validators follow the "fail fast, fail loud" principle. They raise
immediately with clear error messages rather than silently correcting
or making assumptions about user intent.

Design principles:
    - No silent type coercion (except np.asarray on array-likes)
    - Clear, actionable error messages with actual values
    - Each function validates ONE thing
    - Parameter names included in all error messages
"""

from typing import Any, Sequence

import numpy as np
from numpy.typing import ArrayLike, NDArray

from pyposthoc.core.exceptions import ValidationError, DimensionError


def check_array(
    array: ArrayLike,
    name: str,
) -> NDArray[np.floating[Any]]:
    """
    Validate and convert input to a float64 numpy array.

    Rejects inputs that result in object dtype (indicating mixed types or
    non-numeric data) and non-numeric dtypes.

    Args:
        array: Input to validate
        name: Parameter name for error messages

    Returns:
        numpy.ndarray with floating dtype (a fresh copy)

    Raises:
        ValidationError: If input cannot be converted to numeric array
    """
    try:
        result = np.array(array)
    except (ValueError, TypeError) as e:
        raise ValidationError(f"{name}: cannot convert to array: {e}") from e

    if result.dtype == object:
        raise ValidationError(
            f"{name}: converted to object dtype, indicating mixed types or non-numeric data"
        )

    if not np.issubdtype(result.dtype, np.number):
        raise ValidationError(
            f"{name}: non-numeric dtype {result.dtype}, expected numeric data"
        )

    if not np.issubdtype(result.dtype, np.floating):
        result = result.astype(np.float64)

    return result


def check_finite(array: NDArray[np.floating[Any]], name: str) -> None:
    """
    Verify array contains no NaN or Inf values.

    Raises:
        ValidationError: If array contains non-finite values
    """
    if not np.all(np.isfinite(array)):
        n_nan = int(np.sum(np.isnan(array)))
        n_inf = int(np.sum(np.isinf(array)))
        raise ValidationError(
            f"{name}: contains non-finite values ({n_nan} NaN, {n_inf} Inf)"
        )


def check_ndim(array: NDArray[Any], ndim: int, name: str) -> None:
    """
    Verify array has exactly the specified number of dimensions.

    Raises:
        DimensionError: If array has wrong number of dimensions
    """
    if array.ndim != ndim:
        raise DimensionError(
            f"{name}: expected {ndim}D array, got {array.ndim}D with shape {array.shape}"
        )


def check_1d(array: NDArray[Any], name: str) -> None:
    """Verify array is 1-dimensional."""
    check_ndim(array, 1, name)


def check_2d(array: NDArray[Any], name: str) -> None:
    """Verify array is 2-dimensional."""
    check_ndim(array, 2, name)


def check_min_samples(array: NDArray[Any], min_samples: int, name: str) -> None:
    """
    Verify array has at least the minimum number of samples.

    Raises:
        ValidationError: If array has fewer than min_samples
    """
    n = array.shape[0]
    if n < min_samples:
        raise ValidationError(
            f"{name}: requires at least {min_samples} samples, got {n}"
        )


def check_probability(value: float, name: str) -> float:
    """
    Verify a level (alpha, conf_level) lies strictly inside (0, 1).

    Raises:
        ValidationError: If value is outside (0, 1)
    """
    if not (0.0 < value < 1.0):
        raise ValidationError(f"{name} must be in (0, 1), got {value}")
    return float(value)


def check_method(method: str, allowed: Sequence[str], name: str = "method") -> str:
    """
    Verify a method tag belongs to a closed set of supported values.

    Raises:
        ValidationError: Naming the offending value and the supported set
    """
    if method not in allowed:
        raise ValidationError(
            f"Unknown {name} {method!r}. Supported: {tuple(allowed)}"
        )
    return method


def check_count_table(table: ArrayLike, name: str = "table") -> NDArray[np.int64]:
    """
    Validate a contingency table of non-negative integer counts.

    Args:
        table: 2D array-like of counts
        name: Parameter name for error messages

    Returns:
        A fresh int64 copy of the table

    Raises:
        DimensionError: If the table is not 2D
        ValidationError: If entries are negative, non-finite or non-integer
    """
    arr = check_array(table, name)
    check_2d(arr, name)
    check_finite(arr, name)

    if np.any(arr < 0):
        raise ValidationError(
            f"{name}: all entries must be non-negative"
        )
    if not np.all(arr == np.round(arr)):
        raise ValidationError(
            f"{name}: entries must be integer counts"
        )

    return arr.astype(np.int64)


def check_labels(
    labels: Sequence[Any] | None,
    n: int,
    prefix: str,
    name: str,
) -> tuple[str, ...]:
    """
    Resolve display labels, falling back to generated ones.

    Args:
        labels: User-provided labels, or None/empty for the fallback
        n: Required number of labels
        prefix: Prefix of generated labels ("Group" -> "Group1", ...)
        name: Parameter name for error messages

    Returns:
        Tuple of n label strings

    Raises:
        DimensionError: If a non-empty label sequence has the wrong length
    """
    if labels is None or len(labels) == 0:
        return tuple(f"{prefix}{i}" for i in range(1, n + 1))

    if len(labels) != n:
        raise DimensionError(
            f"{name}: expected {n} labels, got {len(labels)}"
        )
    return tuple(str(label) for label in labels)


def check_pairs(
    pairs: Sequence[tuple[int, int]] | None,
    k: int,
    name: str = "pairs",
) -> tuple[tuple[int, int], ...]:
    """
    Resolve the comparison family over k items (1-based indices).

    None means all C(k, 2) unordered pairs (i, j) with i < j. A caller
    list is kept in the given order and orientation.

    Raises:
        ValidationError: If an index is out of range or a pair repeats an index
    """
    if pairs is None:
        return tuple(
            (i, j) for i in range(1, k + 1) for j in range(i + 1, k + 1)
        )

    resolved: list[tuple[int, int]] = []
    for pair in pairs:
        if len(pair) != 2:
            raise ValidationError(
                f"{name}: each pair must have 2 indices, got {pair!r}"
            )
        i, j = int(pair[0]), int(pair[1])
        if not (1 <= i <= k and 1 <= j <= k):
            raise ValidationError(
                f"{name}: indices must be in 1..{k} (1-based), got {pair!r}"
            )
        if i == j:
            raise ValidationError(
                f"{name}: a pair must compare two different indices, got {pair!r}"
            )
        resolved.append((i, j))

    if not resolved:
        raise ValidationError(f"{name}: at least one pair is required")

    return tuple(resolved)
