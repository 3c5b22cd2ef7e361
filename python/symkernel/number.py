# SymKernel - Number Tower
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Mixed-kind numeric values.

A Number holds one of four kinds, promoted along the chain

    Integer -> BigInteger -> Rational -> Float

Integer and BigInteger share Python's unbounded ``int``; the kind is decided
by whether the value fits a signed 64-bit machine word, so overflow promotes
automatically. Rationals are ``Fraction`` values in lowest terms with a
positive denominator, and ``n/1`` is always stored as the integer ``n``.
Floats only appear when an operand already is one.

Example:
    >>> Number(1) / Number(2) + Number(Fraction(1, 3))
    Number(5/6)
    >>> Number(2) ** Number(100)
    Number(1267650600228229401496703205376)
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
import math
import operator
from typing import Callable, Optional, Union

from .exceptions import DivisionByZero
from .rational import normalize, to_fraction


INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1

# Exact powers whose result would exceed this many bits stay symbolic
MAX_POWER_BITS = 1 << 16

RawNumber = Union[int, Fraction, float]
NumberLike = Union['Number', int, Fraction, float]


class NumberKind(Enum):
    """The four numeric variants."""
    INTEGER = "integer"
    BIG_INTEGER = "big_integer"
    RATIONAL = "rational"
    FLOAT = "float"


@dataclass(frozen=True, eq=False)
class Number:
    """An immutable numeric value with value equality across kinds."""
    value: RawNumber

    def __init__(self, value: NumberLike):
        if isinstance(value, Number):
            value = value.value
        elif isinstance(value, bool):
            value = int(value)
        elif isinstance(value, Fraction):
            value = normalize(value)
        elif not isinstance(value, (int, float)):
            raise TypeError(f"Cannot make a Number from {type(value).__name__}")
        object.__setattr__(self, 'value', value)

    @classmethod
    def rational(cls, numerator: int, denominator: int) -> Number:
        """Exact ratio in lowest terms."""
        if denominator == 0:
            raise DivisionByZero('rational construction')
        return cls(Fraction(numerator, denominator))

    # Classification

    @property
    def kind(self) -> NumberKind:
        v = self.value
        if isinstance(v, float):
            return NumberKind.FLOAT
        if isinstance(v, Fraction):
            return NumberKind.RATIONAL
        if INT64_MIN <= v <= INT64_MAX:
            return NumberKind.INTEGER
        return NumberKind.BIG_INTEGER

    def is_zero(self) -> bool:
        return self.value == 0

    def is_one(self) -> bool:
        return self.value == 1

    def is_minus_one(self) -> bool:
        return self.value == -1

    def is_negative(self) -> bool:
        return self.value < 0

    def is_positive(self) -> bool:
        return self.value > 0

    def is_integer(self) -> bool:
        """True for exact integers (machine or big)."""
        return isinstance(self.value, int)

    def is_exact(self) -> bool:
        return not isinstance(self.value, float)

    def is_float(self) -> bool:
        return isinstance(self.value, float)

    def is_finite(self) -> bool:
        return self.is_exact() or math.isfinite(self.value)

    @property
    def sign(self) -> int:
        if self.value > 0:
            return 1
        if self.value < 0:
            return -1
        return 0

    @property
    def numerator(self) -> int:
        return self.to_fraction().numerator

    @property
    def denominator(self) -> int:
        return self.to_fraction().denominator

    def to_fraction(self) -> Fraction:
        """Exact value; floats are read through their decimal form."""
        return to_fraction(self.value)

    # Arithmetic

    def _binary(self, other: NumberLike, op: Callable) -> Number:
        a = self.value
        b = other.value if isinstance(other, Number) else Number(other).value
        if isinstance(a, float) or isinstance(b, float):
            return Number(op(_as_float(a), _as_float(b)))
        return Number(op(a, b))

    def __add__(self, other: NumberLike) -> Number:
        return self._binary(other, operator.add)

    __radd__ = __add__

    def __sub__(self, other: NumberLike) -> Number:
        return self._binary(other, operator.sub)

    def __rsub__(self, other: NumberLike) -> Number:
        return Number(other)._binary(self, operator.sub)

    def __mul__(self, other: NumberLike) -> Number:
        return self._binary(other, operator.mul)

    __rmul__ = __mul__

    def __truediv__(self, other: NumberLike) -> Number:
        divisor = other if isinstance(other, Number) else Number(other)
        if divisor.is_zero():
            raise DivisionByZero('number division')
        if self.is_float() or divisor.is_float():
            return self._binary(divisor, operator.truediv)
        return Number(Fraction(self.value) / Fraction(divisor.value))

    def __rtruediv__(self, other: NumberLike) -> Number:
        return Number(other) / self

    def __mod__(self, other: NumberLike) -> Number:
        divisor = other if isinstance(other, Number) else Number(other)
        if divisor.is_zero():
            raise DivisionByZero('number modulo')
        return self._binary(divisor, operator.mod)

    def __neg__(self) -> Number:
        return Number(-self.value)

    def __abs__(self) -> Number:
        return Number(abs(self.value))

    def __pow__(self, exponent: NumberLike) -> Number:
        result = self.power(exponent if isinstance(exponent, Number) else Number(exponent))
        if result is None:
            raise ValueError(f"{self} ** {exponent} has no representable value")
        return result

    def power(self, exponent: Number) -> Optional[Number]:
        """
        Evaluate ``self ** exponent`` when the result is a representable Number.

        Returns None when the result would be irrational (exact base with a
        fractional exponent), complex, or larger than MAX_POWER_BITS.

        Raises:
            DivisionByZero: For an exact zero base with a negative exponent.
        """
        base, exp = self.value, exponent.value
        if isinstance(exp, int) and not isinstance(base, float):
            if base == 0 and exp < 0:
                raise DivisionByZero('zero to a negative power')
            frac = Fraction(base)
            size = max(frac.numerator.bit_length(), frac.denominator.bit_length())
            if abs(exp) * size > MAX_POWER_BITS:
                return None
            return Number(frac ** exp)
        if isinstance(base, float) or isinstance(exp, float):
            fb, fe = _as_float(base), _as_float(exp)
            if fb < 0 and not fe.is_integer():
                return None
            if fb == 0 and fe < 0:
                return None
            try:
                return Number(fb ** fe)
            except OverflowError:
                return None
        return None

    # Comparison

    def _other_value(self, other) -> Optional[RawNumber]:
        if isinstance(other, Number):
            return other.value
        if isinstance(other, (int, float, Fraction)) and not isinstance(other, bool):
            return other
        return None

    def __eq__(self, other) -> bool:
        v = self._other_value(other)
        if v is None:
            return NotImplemented
        return self.value == v

    def __hash__(self) -> int:
        return hash(self.value)

    def __lt__(self, other) -> bool:
        return self.value < Number(other).value

    def __le__(self, other) -> bool:
        return self.value <= Number(other).value

    def __gt__(self, other) -> bool:
        return self.value > Number(other).value

    def __ge__(self, other) -> bool:
        return self.value >= Number(other).value

    # Conversion

    def __float__(self) -> float:
        return _as_float(self.value)

    def __int__(self) -> int:
        return int(self.value)

    def __bool__(self) -> bool:
        return not self.is_zero()

    def __str__(self) -> str:
        return str(self.value)

    def __repr__(self) -> str:
        return f"Number({self.value})"


def _as_float(x: RawNumber) -> float:
    try:
        return float(x)
    except OverflowError:
        return math.inf if x > 0 else -math.inf


ZERO = Number(0)
ONE = Number(1)
MINUS_ONE = Number(-1)
TWO = Number(2)
HALF = Number(Fraction(1, 2))
