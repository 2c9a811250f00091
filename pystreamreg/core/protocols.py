"""
Core protocols for PyStreamReg.

These define structural interfaces that implementations must satisfy.
We use Protocol (structural typing) rather than ABC (nominal typing) so
third-party accumulators and regressions can be plugged in without
inheriting from anything here.

Design Principles:
    - Minimal contracts: prescribe only what the core actually calls
    - Streaming first: nothing here requires the data to be materialized
"""

from typing import Protocol, Any, runtime_checkable

from numpy.typing import ArrayLike


@runtime_checkable
class StorelessStatistic(Protocol):
    """
    A scalar statistic updated one value at a time without storing values.

    The regression engine only needs running totals of y and y², but any
    accumulator honouring this contract (mean, variance, min/max) fits.
    """

    @property
    def n(self) -> int:
        """Number of values folded in since the last reset."""
        ...

    @property
    def result(self) -> float:
        """Current value of the statistic."""
        ...

    def increment(self, value: float) -> None:
        """Fold one value into the statistic."""
        ...

    def reset(self) -> None:
        """Return to the empty state."""
        ...


@runtime_checkable
class UpdatingRegression(Protocol):
    """
    A linear regression that absorbs observations incrementally.

    Implementations never store the design matrix; every call to
    add_observation updates a summary of constant size, and regress()
    can be called at any point without replaying earlier data.
    """

    @property
    def n(self) -> int:
        """Number of observations added so far."""
        ...

    @property
    def has_intercept(self) -> bool:
        """Whether a constant regressor is implicitly prepended."""
        ...

    def add_observation(self, x: ArrayLike, y: float) -> None:
        """Add one observation."""
        ...

    def add_observations(self, X: ArrayLike, y: ArrayLike) -> None:
        """Add a batch of observations, one row per observation."""
        ...

    def clear(self) -> None:
        """Discard every observation."""
        ...

    def regress(self, *args: Any) -> Any:
        """Estimate the model from the observations seen so far."""
        ...
