"""
Shared compute infrastructure for PyStreamReg.

IMPORTANT: This is NOT where the regression algorithm lives. That is in
regression/. This module contains shared NUMERIC infrastructure.

Submodules:
    timing: Execution timing utilities
    tolerances: Machine epsilon and the default relative epsilon
    summation: Guarded addition and guarded running sums
    linalg: Packed triangular storage
"""

from pystreamreg.core.compute.timing import Timer
from pystreamreg.core.compute.summation import (
    GuardedSum,
    GuardedSumOfSquares,
    smart_add,
)
from pystreamreg.core.compute.tolerances import DEFAULT_EPSILON, MACHINE_EPSILON

__all__ = [
    # Timing
    "Timer",
    # Summation
    "GuardedSum",
    "GuardedSumOfSquares",
    "smart_add",
    # Tolerances
    "DEFAULT_EPSILON",
    "MACHINE_EPSILON",
]
