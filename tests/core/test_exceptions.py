"""
Tests for PyPostHoc exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyPostHocError)
    - str/repr work correctly
"""

import pytest

from pyposthoc.core.exceptions import (
    DimensionError,
    PyPostHocError,
    ValidationError,
)


class TestInheritance:
    """Every exception is catchable via PyPostHocError."""

    def test_validation_error_is_pyposthoc_error(self):
        with pytest.raises(PyPostHocError):
            raise ValidationError("bad input")

    def test_dimension_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise DimensionError("wrong shape")

    def test_dimension_error_is_pyposthoc_error(self):
        with pytest.raises(PyPostHocError):
            raise DimensionError("wrong shape")

    def test_base_is_exception(self):
        assert issubclass(PyPostHocError, Exception)


class TestMessages:

    def test_message_preserved(self):
        err = ValidationError("alpha must be in (0, 1), got 2")
        assert str(err) == "alpha must be in (0, 1), got 2"

    def test_repr_contains_class_name(self):
        assert "DimensionError" in repr(DimensionError("x"))
