"""Tests for SafeInt checked arithmetic."""

import pytest

from simpledex.constants import UINT256_MAX
from simpledex.safe_int import (
    S,
    DivisionByZero,
    SafeInt,
    SafeIntError,
    Uint256Overflow,
    Underflow,
    check_uint256,
)


class TestConstruction:
    def test_wraps_int(self):
        assert S(5).value == 5

    def test_wraps_safe_int(self):
        assert S(S(7)).value == 7

    def test_rejects_bool(self):
        with pytest.raises(TypeError):
            SafeInt(True)

    def test_rejects_float(self):
        with pytest.raises(TypeError):
            SafeInt(1.5)  # type: ignore[arg-type]


class TestOperators:
    def test_add_and_mul(self):
        assert (S(2) + 3) * 4 == 20
        assert 3 + S(2) == 5
        assert 4 * S(2) == 8

    def test_sub(self):
        assert S(5) - 3 == 2
        assert 5 - S(3) == 2

    def test_sub_underflow(self):
        with pytest.raises(Underflow, match="Underflow"):
            S(3) - 5

    def test_rsub_underflow(self):
        with pytest.raises(Underflow):
            3 - S(5)

    def test_floordiv(self):
        assert S(7) // 2 == 3

    def test_floordiv_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(7) // 0

    def test_ceiling_div(self):
        assert S(7).ceiling_div(2) == 4
        assert S(8).ceiling_div(2) == 4
        assert S(0).ceiling_div(5) == 0

    def test_ceiling_div_by_zero(self):
        with pytest.raises(DivisionByZero):
            S(7).ceiling_div(0)

    def test_min(self):
        assert S(4).min(9) == 4
        assert S(9).min(S(4)) == 4

    def test_comparisons(self):
        assert S(1) < 2
        assert S(2) <= S(2)
        assert S(3) > 2
        assert S(3) >= 3
        assert not S(0)

    def test_errors_are_arithmetic_errors(self):
        assert issubclass(SafeIntError, ArithmeticError)


class TestUint256:
    def test_max_fits(self):
        assert S(UINT256_MAX).to_uint256() == UINT256_MAX

    def test_overflow(self):
        with pytest.raises(Uint256Overflow):
            (S(UINT256_MAX) + 1).to_uint256()

    def test_check_uint256_accepts_zero(self):
        assert check_uint256("amount", 0) == 0

    def test_check_uint256_rejects_negative(self):
        with pytest.raises(Uint256Overflow, match="amount cannot be negative"):
            check_uint256("amount", -1)

    def test_check_uint256_rejects_overflow(self):
        with pytest.raises(Uint256Overflow, match="exceeds uint256"):
            check_uint256("amount", UINT256_MAX + 1)

    def test_check_uint256_rejects_non_int(self):
        with pytest.raises(TypeError):
            check_uint256("amount", "10")  # type: ignore[arg-type]
