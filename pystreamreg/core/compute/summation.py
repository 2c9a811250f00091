"""
Guarded summation.

Running totals in the updating regression are built with smart_add: an
addend whose magnitude is within machine epsilon of the larger operand's
magnitude is dropped instead of summed, so rounding noise does not
cascade through thousands of updates.

GuardedSum and GuardedSumOfSquares implement the StorelessStatistic
protocol on top of it; the regression state uses them to total y and y².
"""

from pystreamreg.core.compute.tolerances import MACHINE_EPSILON


def smart_add(a: float, b: float) -> float:
    """
    Add two numbers, dropping the smaller one when it is negligible.

    The smaller-magnitude operand is kept only if it exceeds
    ``MACHINE_EPSILON * max(|a|, |b|)``.

    Examples:
        >>> smart_add(1.0, 1e-17)
        1.0
        >>> smart_add(1.0, 2.0)
        3.0
    """
    abs_a = abs(a)
    abs_b = abs(b)
    if abs_a > abs_b:
        if abs_b > abs_a * MACHINE_EPSILON:
            return a + b
        return a
    if abs_a > abs_b * MACHINE_EPSILON:
        return a + b
    return b


class GuardedSum:
    """Running sum of values using guarded addition."""

    def __init__(self) -> None:
        self._total = 0.0
        self._n = 0

    @property
    def n(self) -> int:
        return self._n

    @property
    def result(self) -> float:
        return self._total

    def increment(self, value: float) -> None:
        self._total = smart_add(self._total, float(value))
        self._n += 1

    def reset(self) -> None:
        self._total = 0.0
        self._n = 0

    def __repr__(self) -> str:
        return f"{type(self).__name__}(n={self._n}, result={self._total!r})"


class GuardedSumOfSquares(GuardedSum):
    """Running sum of squared values using guarded addition."""

    def increment(self, value: float) -> None:
        value = float(value)
        super().increment(value * value)
