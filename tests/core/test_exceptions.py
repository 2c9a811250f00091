"""
Tests for PyStreamReg exception hierarchy.

Validates:
    - Inheritance chain (all exceptions catchable via PyStreamRegError)
    - Diagnostic attributes on ModelSpecificationError and OutOfRangeError
    - Default attribute values (None for optional attributes)
"""

import pytest

from pystreamreg.core.exceptions import (
    DimensionError,
    ModelSpecificationError,
    OutOfRangeError,
    PyStreamRegError,
    ValidationError,
)


# ═══════════════════════════════════════════════════════════════════════
# Inheritance hierarchy
# ═══════════════════════════════════════════════════════════════════════


class TestInheritance:
    """Every exception is catchable via PyStreamRegError."""

    def test_validation_error_is_pystreamreg_error(self):
        with pytest.raises(PyStreamRegError):
            raise ValidationError("bad input")

    def test_model_specification_error_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise ModelSpecificationError("too few observations")

    def test_dimension_error_is_model_specification_error(self):
        """A row/label count mismatch is a specification error."""
        with pytest.raises(ModelSpecificationError):
            raise DimensionError("wrong shape")

    def test_out_of_range_is_validation_error(self):
        with pytest.raises(ValidationError):
            raise OutOfRangeError(5, 0, 2)

    def test_out_of_range_is_not_specification_error(self):
        err = OutOfRangeError(5, 0, 2)
        assert not isinstance(err, ModelSpecificationError)


# ═══════════════════════════════════════════════════════════════════════
# Diagnostic attributes
# ═══════════════════════════════════════════════════════════════════════


class TestModelSpecificationError:

    def test_defaults_are_none(self):
        err = ModelSpecificationError("msg")
        assert err.expected is None
        assert err.actual is None
        assert str(err) == "msg"

    def test_expected_and_actual(self):
        err = ModelSpecificationError("3 observations for 5 regressors", expected=6, actual=3)
        assert err.expected == 6
        assert err.actual == 3
        assert "5 regressors" in str(err)


class TestOutOfRangeError:

    def test_attributes(self):
        err = OutOfRangeError(7, 0, 3)
        assert err.index == 7
        assert err.lower == 0
        assert err.upper == 3

    def test_message(self):
        assert str(OutOfRangeError(-1, 0, 3)) == "index -1 out of range [0, 3]"
