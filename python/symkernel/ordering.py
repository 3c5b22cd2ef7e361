# SymKernel - Canonical Ordering
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Total order on expressions used to canonicalize sums and products.

``sort_key(e)`` returns a tuple whose first element is the variant rank:

    0  numbers, by value
    1  named constants, by a fixed table
    2  symbols, by (name, type tag)
    3  powers, by (base, exponent)
    4  products, by their factors without the leading numeric coefficient
    5  sums, by descending total degree, then by terms
    6  functions, by (name, args)
    7  everything else, by a fixed discriminant then children

Keys of equal rank always have the same shape, so comparing two keys never
compares values of unrelated types.
"""

from __future__ import annotations
from typing import Tuple

from .expr import (
    Expr, Const, Variable, MathConstant, Add, Mul, Pow, Function,
    Matrix, Complex, FiniteSet, Interval, Piecewise, Relation, Boolean, Undefined,
    Derivative, Integral, DefiniteIntegral, Limit, Sum, Product, CONSTANT_ORDER,
)
from .number import Number, ONE


_DISCRIMINANT = {
    Complex: 0,
    Matrix: 1,
    FiniteSet: 2,
    Interval: 3,
    Piecewise: 4,
    Relation: 5,
    Boolean: 6,
    Undefined: 7,
    Derivative: 8,
    Integral: 9,
    DefiniteIntegral: 10,
    Limit: 11,
    Sum: 12,
    Product: 13,
}


def sort_key(e: Expr) -> tuple:
    """Key implementing the canonical order."""
    if isinstance(e, Const):
        return (0, e.number.value)
    if isinstance(e, MathConstant):
        return (1, CONSTANT_ORDER[e.kind])
    if isinstance(e, Variable):
        return (2,) + e.symbol.sort_key()
    if isinstance(e, Pow):
        return (3, sort_key(e.base), sort_key(e.exponent))
    if isinstance(e, Mul):
        factors = e.factors[1:] if isinstance(e.factors[0], Const) else e.factors
        return (4, tuple(sort_key(f) for f in factors))
    if isinstance(e, Add):
        return (5, -total_degree(e), tuple(sort_key(t) for t in e.terms))
    if isinstance(e, Function):
        return (6, e.name, tuple(sort_key(a) for a in e.args))
    return (7, _DISCRIMINANT.get(type(e), 99), _extra(e), tuple(sort_key(c) for c in e.children()))


def _extra(e: Expr) -> str:
    # Non-child data that distinguishes nodes of the same variant
    if isinstance(e, Relation):
        return e.kind.value
    if isinstance(e, Interval):
        return f"{int(e.start_inclusive)}{int(e.end_inclusive)}"
    if isinstance(e, Matrix):
        return f"{e.storage.value}:{e.nrows}x{e.ncols}"
    if isinstance(e, Boolean):
        return str(e.value)
    if isinstance(e, Derivative):
        return f"{e.variable.name}:{e.order}"
    if isinstance(e, Limit):
        return f"{e.variable.name}:{e.direction}"
    if isinstance(e, (Integral, DefiniteIntegral, Sum, Product)):
        return e.variable.name
    return ''


def total_degree(e: Expr) -> int:
    """Total degree when ``e`` reads as a polynomial; non-polynomial parts count as 0."""
    if isinstance(e, Variable):
        return 1
    if isinstance(e, Pow):
        exp = e.exponent
        if isinstance(exp, Const) and exp.number.is_integer() and exp.number.is_positive():
            return total_degree(e.base) * exp.number.value
        return 0
    if isinstance(e, Mul):
        return sum(total_degree(f) for f in e.factors)
    if isinstance(e, Add):
        return max(total_degree(t) for t in e.terms)
    return 0


def split_coefficient(term: Expr) -> Tuple[Number, Expr]:
    """
    Split a term into (numeric coefficient, rest).

    ``3*x*y`` -> (3, x*y); ``x`` -> (1, x); a bare number ``c`` -> (c, 1).
    """
    if isinstance(term, Const):
        return term.number, Const(1)
    if isinstance(term, Mul) and isinstance(term.factors[0], Const):
        rest = term.factors[1:]
        return term.factors[0].number, rest[0] if len(rest) == 1 else Mul(rest)
    return ONE, term


def term_sort_key(term: Expr) -> tuple:
    """Order of terms inside a sum: by the non-numeric part, then the coefficient."""
    coeff, rest = split_coefficient(term)
    return (sort_key(rest), coeff.value)
