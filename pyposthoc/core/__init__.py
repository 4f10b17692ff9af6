"""
Core infrastructure for PyPostHoc.

Shared abstractions used by every domain subpackage (hypothesis, anova,
posthoc).

Key components:
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    compute: Timing utilities
"""

from pyposthoc.core.result import Result
from pyposthoc.core.exceptions import (
    PyPostHocError,
    ValidationError,
    DimensionError,
)

__all__ = [
    # Result
    "Result",
    # Exceptions
    "PyPostHocError",
    "ValidationError",
    "DimensionError",
]
