"""
Exception hierarchy for PyStreamReg.

All exceptions inherit from PyStreamRegError to allow catching any
library-specific error. Domain-specific exceptions should inherit from
the appropriate base class here.

Design principles:
    - Exceptions carry diagnostic information as attributes
    - Error messages are actionable with actual vs expected values
    - Numerical degeneracy (rank deficiency, zero variance) is NOT an
      exception: it is reported through NaN outputs and warnings
"""


class PyStreamRegError(Exception):
    """Base exception for all PyStreamReg errors."""
    pass


class ValidationError(PyStreamRegError):
    """
    Input validation failed.

    Raised when user-provided inputs fail validation checks.
    """
    pass


class ModelSpecificationError(ValidationError):
    """
    The requested model does not fit the data or the model shape.

    Raised for caller shape/size/order violations: too few observations
    for the requested number of regressors, an observation of the wrong
    length, a regressor index outside the model, repeated indices.

    Attributes:
        expected: What the model required (count, length, bound)
        actual: What the caller supplied
    """

    def __init__(
        self,
        message: str,
        expected: int | None = None,
        actual: int | None = None,
    ):
        super().__init__(message)
        self.expected = expected
        self.actual = actual


class DimensionError(ModelSpecificationError):
    """
    Array dimensions are incorrect or inconsistent.

    Raised when array shapes don't match expected dimensions or
    when multiple arrays have inconsistent shapes.
    """
    pass


class OutOfRangeError(ValidationError):
    """
    An index accessor was called with an index outside its range.

    Attributes:
        index: The offending index
        lower: Smallest valid index
        upper: Largest valid index
    """

    def __init__(self, index: int, lower: int, upper: int):
        super().__init__(
            f"index {index} out of range [{lower}, {upper}]"
        )
        self.index = index
        self.lower = lower
        self.upper = upper
