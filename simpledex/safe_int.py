"""Checked integer arithmetic for token amounts and reserves.

Pool math runs on plain Python ints, which never overflow and happily go
negative. Reserves, balances and liquidity shares must do neither, so the
engines wrap operands in SafeInt and unwrap the result:

    from simpledex.safe_int import S

    amount_x = (S(reserve_x) * liquidity // total_liquidity).value
    new_reserve = (S(reserve) + deposit).to_uint256()

Subtraction below zero raises Underflow, division by zero raises
DivisionByZero, and to_uint256() raises Uint256Overflow for anything that
does not fit a 256-bit word.
"""

from __future__ import annotations

from simpledex.constants import UINT256_MAX


class SafeIntError(ArithmeticError):
    """Base class for checked-arithmetic failures."""


class DivisionByZero(SafeIntError):
    """Division by a zero amount (e.g. burning from an empty pool)."""


class Underflow(SafeIntError):
    """Subtraction would leave a negative amount."""


class Uint256Overflow(SafeIntError):
    """Amount does not fit an unsigned 256-bit word."""


def _raw(x: SafeInt | int) -> int:
    return x._value if isinstance(x, SafeInt) else x


class SafeInt:
    """Integer amount whose subtraction and division are checked.

    Sums and products are left unbounded while a calculation runs; the
    uint256 bound is applied when a value leaves it through to_uint256().
    """

    __slots__ = ("_value",)

    def __init__(self, value: SafeInt | int) -> None:
        if isinstance(value, bool) or not isinstance(value, (int, SafeInt)):
            raise TypeError(f"SafeInt requires int, got {type(value).__name__}")
        self._value = _raw(value)

    @property
    def value(self) -> int:
        return self._value

    def __add__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value + _raw(other))

    __radd__ = __add__

    def __mul__(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(self._value * _raw(other))

    __rmul__ = __mul__

    def __sub__(self, other: SafeInt | int) -> SafeInt:
        return _checked_sub(self._value, _raw(other))

    def __rsub__(self, other: int) -> SafeInt:
        return _checked_sub(other, self._value)

    def __floordiv__(self, other: SafeInt | int) -> SafeInt:
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(self._value // divisor)

    def ceiling_div(self, other: SafeInt | int) -> SafeInt:
        """Division rounding up, for amounts the pool must not undercharge."""
        divisor = _raw(other)
        if divisor == 0:
            raise DivisionByZero(f"Division by zero: {self._value} // 0")
        return SafeInt(-(-self._value // divisor))

    def min(self, other: SafeInt | int) -> SafeInt:
        return SafeInt(min(self._value, _raw(other)))

    def to_uint256(self) -> int:
        """Unwrap, enforcing the uint256 range.

        Raises:
            Uint256Overflow: If the value is negative or exceeds 2^256-1
        """
        return check_uint256("value", self._value)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, (SafeInt, int)):
            return self._value == _raw(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._value)

    def __lt__(self, other: SafeInt | int) -> bool:
        return self._value < _raw(other)

    def __le__(self, other: SafeInt | int) -> bool:
        return self._value <= _raw(other)

    def __gt__(self, other: SafeInt | int) -> bool:
        return self._value > _raw(other)

    def __ge__(self, other: SafeInt | int) -> bool:
        return self._value >= _raw(other)

    def __bool__(self) -> bool:
        return self._value != 0

    def __int__(self) -> int:
        return self._value

    def __repr__(self) -> str:
        return f"SafeInt({self._value})"


def _checked_sub(a: int, b: int) -> SafeInt:
    if b > a:
        raise Underflow(f"Underflow: {a} - {b} < 0")
    return SafeInt(a - b)


def check_uint256(name: str, amount: int) -> int:
    """Validate that a caller-supplied amount fits uint256 and return it.

    Raises:
        TypeError: If amount is not an int
        Uint256Overflow: If amount is negative or exceeds 2^256-1
    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise TypeError(f"{name} must be int, got {type(amount).__name__}")
    if amount < 0:
        raise Uint256Overflow(f"{name} cannot be negative: {amount}")
    if amount > UINT256_MAX:
        raise Uint256Overflow(f"{name} exceeds uint256 max: {amount}")
    return amount


S = SafeInt
