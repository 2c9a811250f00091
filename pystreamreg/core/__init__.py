"""
Core infrastructure for PyStreamReg.

This module provides shared abstractions and utilities used by the
regression domain package.

Key components:
    protocols: StorelessStatistic, UpdatingRegression protocols
    result: Generic Result[P] envelope
    exceptions: Exception hierarchy
    validation: Input validators
    datasource: Domain-agnostic data container with batch iteration
    compute: Timing, tolerances, guarded summation, packed storage
"""

from pystreamreg.core.protocols import StorelessStatistic, UpdatingRegression
from pystreamreg.core.result import Result
from pystreamreg.core.datasource import DataSource
from pystreamreg.core.exceptions import (
    PyStreamRegError,
    ValidationError,
    DimensionError,
    ModelSpecificationError,
    OutOfRangeError,
)

__all__ = [
    # Protocols
    "StorelessStatistic",
    "UpdatingRegression",
    # Data
    "DataSource",
    # Result
    "Result",
    # Exceptions
    "PyStreamRegError",
    "ValidationError",
    "DimensionError",
    "ModelSpecificationError",
    "OutOfRangeError",
]
