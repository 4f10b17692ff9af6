"""
Exception hierarchy for PyPostHoc.

All exceptions inherit from PyPostHocError to allow catching any
library-specific error.

Design principles:
    - Error messages are actionable with actual vs expected values
    - Configuration errors name the offending value and the allowed set
    - Never catch and re-raise with less information
"""


class PyPostHocError(Exception):
    """Base exception for all PyPostHoc errors."""
    pass


class ValidationError(PyPostHocError):
    """
    Input validation failed.

    Raised when user-provided inputs or configuration (method names,
    alpha, simulation sizes) fail validation checks.
    """
    pass


class DimensionError(ValidationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when a contingency table is not 2D, is smaller than the test
    requires, or when label vectors do not match the table shape.
    """
    pass
