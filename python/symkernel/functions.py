# SymKernel - Function Properties Registry
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Read-only table of named-function properties.

Each entry supplies what the simplifier, the derivative kernel and the
integration kernel need to know about a function: its derivative and
antiderivative (as expressions in the argument), parity, period, a textual
domain restriction, exact special values, and a float evaluator.

The default registry is built once at import time. Extra entries may be
registered during start-up, before any simplification that depends on them.

Example:
    >>> props = REGISTRY.get('sin')
    >>> props.parity
    <Parity.ODD: 'odd'>
    >>> props.derivative(symbol('u'))
    cos(u)
"""

from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from fractions import Fraction
import logging
import math
from typing import Callable, Dict, Iterator, Optional

from .expr import (
    Expr, Const, Undefined,
    add, mul, pow_, neg, div, sqrt, pi, E,
    sin, cos, tan, cot, sec, csc, sinh, cosh, tanh, exp, ln, abs_, sign,
    asin, acos, atan, gamma, function, erf,
)
from .number import Number

logger = logging.getLogger(__name__)

# Largest integer argument evaluated exactly by gamma / factorial
MAX_EXACT_FACTORIAL = 1000


class Parity(Enum):
    EVEN = "even"
    ODD = "odd"
    NONE = "none"


@dataclass
class FunctionProperties:
    """
    Everything the core knows about one named function.

    Attributes:
        name: Function name as it appears in ``Function.name``.
        derivative: ``u -> f'(u)``.
        antiderivative: ``u -> F(u)`` with ``F' = f``.
        parity: Even/odd symmetry folded by the simplifier.
        period: Period as a rational multiple of pi (2 for sin).
        domain: Human-readable domain restriction.
        special_values: Exact values keyed by canonical argument.
        exact: Exact evaluation at a numeric argument, or None to decline.
        evaluator: Float evaluator; may raise ValueError outside the domain.
    """
    name: str
    derivative: Optional[Callable[[Expr], Expr]] = None
    antiderivative: Optional[Callable[[Expr], Expr]] = None
    parity: Parity = Parity.NONE
    period: Optional[Fraction] = None
    domain: str = "all complex numbers"
    special_values: Dict[Expr, Expr] = field(default_factory=dict)
    exact: Optional[Callable[[Number], Optional[Expr]]] = None
    evaluator: Optional[Callable[[float], float]] = None


class FunctionRegistry:
    """Name -> FunctionProperties table with aliases."""

    def __init__(self):
        self._entries: Dict[str, FunctionProperties] = {}
        self._aliases: Dict[str, str] = {}

    def register(self, props: FunctionProperties, *aliases: str) -> None:
        if props.name in self._entries:
            logger.debug("Replacing registry entry for %s", props.name)
        self._entries[props.name] = props
        for alias in aliases:
            self._aliases[alias] = props.name

    def canonical_name(self, name: str) -> str:
        return self._aliases.get(name, name)

    def get(self, name: str) -> Optional[FunctionProperties]:
        return self._entries.get(self.canonical_name(name))

    def __contains__(self, name: str) -> bool:
        return self.canonical_name(name) in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)


def pi_multiple(k: Fraction) -> Expr:
    """The canonical form of k*pi."""
    if k == 0:
        return Const(0)
    if k == 1:
        return pi
    return mul(Const(Number(k)), pi)


_SQRT2 = sqrt(Const(2))
_SQRT3 = sqrt(Const(3))

# sin(k*pi) for k in [0, 1/2]
_SIN_FIRST_QUADRANT = {
    Fraction(0): Const(0),
    Fraction(1, 6): Const(Number(Fraction(1, 2))),
    Fraction(1, 4): mul(Const(Number(Fraction(1, 2))), _SQRT2),
    Fraction(1, 3): mul(Const(Number(Fraction(1, 2))), _SQRT3),
    Fraction(1, 2): Const(1),
}

# Multiples of pi covered by the trigonometric tables, over one full period
_TRIG_GRID = sorted({Fraction(n, 6) for n in range(12)} | {Fraction(n, 4) for n in range(8)})


def _sin_at(k: Fraction) -> Expr:
    k = k % 2
    negative = k >= 1
    if negative:
        k -= 1
    if k > Fraction(1, 2):
        k = 1 - k
    value = _SIN_FIRST_QUADRANT[k]
    return neg(value) if negative else value


def _cos_at(k: Fraction) -> Expr:
    return _sin_at(k + Fraction(1, 2))


def _is_zero_value(e: Expr) -> bool:
    return isinstance(e, Const) and e.number.is_zero()


def _trig_table(fn: Callable[[Fraction], Optional[Expr]], period: Fraction) -> Dict[Expr, Expr]:
    table = {}
    for k in _TRIG_GRID:
        if k >= period:
            continue
        value = fn(k)
        if value is not None:
            table[pi_multiple(k)] = value
    return table


def _ratio(num: Expr, den: Expr) -> Optional[Expr]:
    # None at poles; those arguments stay symbolic
    return None if _is_zero_value(den) else div(num, den)


# Exact hooks

def _exact_abs(n: Number) -> Expr:
    return Const(abs(n))


def _exact_sign(n: Number) -> Expr:
    return Const(n.sign)


def _exact_factorial(n: Number) -> Optional[Expr]:
    if not n.is_integer():
        return None
    if n.is_negative():
        return Undefined()
    if n.value > MAX_EXACT_FACTORIAL:
        return None
    return Const(math.factorial(n.value))


def _exact_gamma(n: Number) -> Optional[Expr]:
    if not n.is_integer():
        # gamma(1/2) = sqrt(pi)
        if n.value == Fraction(1, 2):
            return sqrt(pi)
        return None
    if n.value <= 0:
        return Undefined()
    if n.value > MAX_EXACT_FACTORIAL:
        return None
    return Const(math.factorial(n.value - 1))


def _float_factorial(x: float) -> float:
    return math.gamma(x + 1)


def _float_cot(x: float) -> float:
    return math.cos(x) / math.sin(x)


def _float_sec(x: float) -> float:
    return 1 / math.cos(x)


def _float_csc(x: float) -> float:
    return 1 / math.sin(x)


def _float_sign(x: float) -> float:
    return float((x > 0) - (x < 0))


def _build_default_registry() -> FunctionRegistry:
    reg = FunctionRegistry()
    half = Const(Number(Fraction(1, 2)))
    two_pi = Fraction(2)

    reg.register(FunctionProperties(
        'sin',
        derivative=lambda u: cos(u),
        antiderivative=lambda u: neg(cos(u)),
        parity=Parity.ODD,
        period=two_pi,
        special_values=_trig_table(_sin_at, two_pi),
        evaluator=math.sin,
    ))
    reg.register(FunctionProperties(
        'cos',
        derivative=lambda u: neg(sin(u)),
        antiderivative=lambda u: sin(u),
        parity=Parity.EVEN,
        period=two_pi,
        special_values=_trig_table(_cos_at, two_pi),
        evaluator=math.cos,
    ))
    reg.register(FunctionProperties(
        'tan',
        derivative=lambda u: pow_(sec(u), 2),
        antiderivative=lambda u: neg(ln(abs_(cos(u)))),
        parity=Parity.ODD,
        period=Fraction(1),
        domain="u != pi/2 + k*pi",
        special_values=_trig_table(lambda k: _ratio(_sin_at(k), _cos_at(k)), Fraction(1)),
        evaluator=math.tan,
    ))
    reg.register(FunctionProperties(
        'cot',
        derivative=lambda u: neg(pow_(csc(u), 2)),
        antiderivative=lambda u: ln(abs_(sin(u))),
        parity=Parity.ODD,
        period=Fraction(1),
        domain="u != k*pi",
        special_values=_trig_table(lambda k: _ratio(_cos_at(k), _sin_at(k)), Fraction(1)),
        evaluator=_float_cot,
    ))
    reg.register(FunctionProperties(
        'sec',
        derivative=lambda u: mul(sec(u), tan(u)),
        antiderivative=lambda u: ln(abs_(add(sec(u), tan(u)))),
        parity=Parity.EVEN,
        period=two_pi,
        domain="u != pi/2 + k*pi",
        special_values=_trig_table(lambda k: _ratio(Const(1), _cos_at(k)), two_pi),
        evaluator=_float_sec,
    ))
    reg.register(FunctionProperties(
        'csc',
        derivative=lambda u: neg(mul(csc(u), cot(u))),
        antiderivative=lambda u: neg(ln(abs_(add(csc(u), cot(u))))),
        parity=Parity.ODD,
        period=two_pi,
        domain="u != k*pi",
        special_values=_trig_table(lambda k: _ratio(Const(1), _sin_at(k)), two_pi),
        evaluator=_float_csc,
    ))

    reg.register(FunctionProperties(
        'asin',
        derivative=lambda u: pow_(add(1, neg(pow_(u, 2))), Const(Number(Fraction(-1, 2)))),
        antiderivative=lambda u: add(mul(u, asin(u)), sqrt(add(1, neg(pow_(u, 2))))),
        parity=Parity.ODD,
        domain="-1 <= u <= 1",
        special_values={
            Const(0): Const(0),
            half: pi_multiple(Fraction(1, 6)),
            Const(1): pi_multiple(Fraction(1, 2)),
        },
        evaluator=math.asin,
    ))
    reg.register(FunctionProperties(
        'acos',
        derivative=lambda u: neg(pow_(add(1, neg(pow_(u, 2))), Const(Number(Fraction(-1, 2))))),
        antiderivative=lambda u: add(mul(u, acos(u)), neg(sqrt(add(1, neg(pow_(u, 2)))))),
        domain="-1 <= u <= 1",
        special_values={
            Const(0): pi_multiple(Fraction(1, 2)),
            half: pi_multiple(Fraction(1, 3)),
            Const(1): Const(0),
            Const(-1): pi,
        },
        evaluator=math.acos,
    ))
    reg.register(FunctionProperties(
        'atan',
        derivative=lambda u: pow_(add(1, pow_(u, 2)), -1),
        antiderivative=lambda u: add(mul(u, atan(u)), mul(Const(Number(Fraction(-1, 2))), ln(add(1, pow_(u, 2))))),
        parity=Parity.ODD,
        special_values={
            Const(0): Const(0),
            Const(1): pi_multiple(Fraction(1, 4)),
            _SQRT3: pi_multiple(Fraction(1, 3)),
        },
        evaluator=math.atan,
    ))

    reg.register(FunctionProperties(
        'sinh',
        derivative=lambda u: cosh(u),
        antiderivative=lambda u: cosh(u),
        parity=Parity.ODD,
        special_values={Const(0): Const(0)},
        evaluator=math.sinh,
    ))
    reg.register(FunctionProperties(
        'cosh',
        derivative=lambda u: sinh(u),
        antiderivative=lambda u: sinh(u),
        parity=Parity.EVEN,
        special_values={Const(0): Const(1)},
        evaluator=math.cosh,
    ))
    reg.register(FunctionProperties(
        'tanh',
        derivative=lambda u: add(1, neg(pow_(tanh(u), 2))),
        antiderivative=lambda u: ln(cosh(u)),
        parity=Parity.ODD,
        special_values={Const(0): Const(0)},
        evaluator=math.tanh,
    ))

    reg.register(FunctionProperties(
        'exp',
        derivative=lambda u: exp(u),
        antiderivative=lambda u: exp(u),
        special_values={Const(0): Const(1), Const(1): E},
        evaluator=math.exp,
    ))
    reg.register(FunctionProperties(
        'ln',
        derivative=lambda u: pow_(u, -1),
        antiderivative=lambda u: add(mul(u, ln(u)), neg(u)),
        domain="u != 0",
        special_values={Const(1): Const(0), E: Const(1)},
        evaluator=math.log,
    ), 'log')

    reg.register(FunctionProperties(
        'abs',
        derivative=lambda u: sign(u),
        parity=Parity.EVEN,
        domain="all real numbers",
        exact=_exact_abs,
        evaluator=abs,
    ))
    reg.register(FunctionProperties(
        'sign',
        derivative=lambda u: Const(0),
        parity=Parity.ODD,
        domain="all real numbers",
        exact=_exact_sign,
        evaluator=_float_sign,
    ))
    reg.register(FunctionProperties(
        'sqrt',
        derivative=lambda u: mul(half, pow_(u, Const(Number(Fraction(-1, 2))))),
        antiderivative=lambda u: mul(Const(Number(Fraction(2, 3))), pow_(u, Const(Number(Fraction(3, 2))))),
        domain="u >= 0 for real results",
        evaluator=math.sqrt,
    ))
    reg.register(FunctionProperties(
        'gamma',
        derivative=lambda u: mul(gamma(u), function('digamma', u)),
        domain="u not a non-positive integer",
        exact=_exact_gamma,
        evaluator=math.gamma,
    ))
    reg.register(FunctionProperties(
        'factorial',
        derivative=lambda u: mul(gamma(add(u, 1)), function('digamma', add(u, 1))),
        domain="u not a negative integer",
        exact=_exact_factorial,
        evaluator=_float_factorial,
    ))
    reg.register(FunctionProperties(
        'erf',
        derivative=lambda u: mul(Const(2), pow_(pi, Const(Number(Fraction(-1, 2)))), exp(neg(pow_(u, 2)))),
        antiderivative=lambda u: add(mul(u, erf(u)), mul(pow_(pi, Const(Number(Fraction(-1, 2)))), exp(neg(pow_(u, 2))))),
        parity=Parity.ODD,
        special_values={Const(0): Const(0)},
        evaluator=math.erf,
    ))
    return reg


REGISTRY = _build_default_registry()


def get_properties(name: str) -> Optional[FunctionProperties]:
    """Look up a function in the default registry."""
    return REGISTRY.get(name)


def register_function(props: FunctionProperties, *aliases: str) -> None:
    """Add an entry to the default registry (start-up time only)."""
    REGISTRY.register(props, *aliases)
