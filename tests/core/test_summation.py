"""
Tests for guarded summation.

Validates:
    - smart_add drops addends below machine epsilon relative to the other
    - GuardedSum / GuardedSumOfSquares satisfy StorelessStatistic
"""

import pytest

from pystreamreg.core.compute.summation import GuardedSum, GuardedSumOfSquares, smart_add
from pystreamreg.core.compute.tolerances import MACHINE_EPSILON
from pystreamreg.core.protocols import StorelessStatistic


class TestSmartAdd:

    def test_ordinary_sum(self):
        assert smart_add(1.0, 2.0) == 3.0

    def test_negligible_right_operand_dropped(self):
        assert smart_add(1.0, 1e-17) == 1.0

    def test_negligible_left_operand_dropped(self):
        assert smart_add(1e-17, -1.0) == -1.0

    def test_threshold_is_relative(self):
        big = 1e20
        assert smart_add(big, 1000.0) == big
        assert smart_add(1e-20, 1e-36) == 1e-20

    def test_just_above_threshold_kept(self):
        addend = 4.0 * MACHINE_EPSILON
        assert smart_add(1.0, addend) == 1.0 + addend

    def test_cancellation_to_zero(self):
        assert smart_add(2.5, -2.5) == 0.0

    def test_zero_operands(self):
        assert smart_add(0.0, 0.0) == 0.0
        assert smart_add(0.0, 3.0) == 3.0


class TestGuardedSum:

    def test_satisfies_protocol(self):
        assert isinstance(GuardedSum(), StorelessStatistic)
        assert isinstance(GuardedSumOfSquares(), StorelessStatistic)

    def test_accumulates(self):
        s = GuardedSum()
        for v in [1.0, 2.0, 3.5]:
            s.increment(v)
        assert s.n == 3
        assert s.result == pytest.approx(6.5)

    def test_sum_of_squares(self):
        s = GuardedSumOfSquares()
        for v in [1.0, -2.0, 3.0]:
            s.increment(v)
        assert s.n == 3
        assert s.result == pytest.approx(14.0)

    def test_reset(self):
        s = GuardedSum()
        s.increment(5.0)
        s.reset()
        assert s.n == 0
        assert s.result == 0.0

    def test_repr(self):
        s = GuardedSum()
        s.increment(2.0)
        assert repr(s) == "GuardedSum(n=1, result=2.0)"
