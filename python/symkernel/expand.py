# SymKernel - Expansion
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Distribution of products over sums.

``expand`` multiplies out products of sums and positive integer powers of
sums, then simplifies so like terms are collected. Non-commutative factors
keep their left-to-right order in every product it forms.

Example:
    >>> x, y = symbols('x y')
    >>> expand((x + 1) * (x - 1))
    (-1 + x**2)
"""

from __future__ import annotations
from typing import List, Optional

from .config import Config
from .expr import Expr, Add, Mul, Pow, Const, mul
from .simplify import simplify

# Powers of sums above this exponent are left unexpanded
MAX_EXPAND_POWER = 64


def expand(expr: Expr, config: Optional[Config] = None) -> Expr:
    """
    Expand products and integer powers of sums.

    Args:
        expr: Expression to expand
        config: Passed through to the simplifier

    Returns:
        Simplified sum of products
    """
    return simplify(_expand(simplify(expr, config), config), config)


def _expand(expr: Expr, config: Optional[Config]) -> Expr:
    children = expr.children()
    if not children:
        return expr
    expr = expr.with_children([_expand(c, config) for c in children])

    if isinstance(expr, Mul):
        return _distribute(expr.factors, config)

    if isinstance(expr, Pow) and isinstance(expr.base, Add):
        exponent = expr.exponent
        if (isinstance(exponent, Const) and exponent.number.is_integer()
                and 1 < exponent.number.value <= MAX_EXPAND_POWER):
            return _expand_power(expr.base, exponent.number.value, config)

    return expr


def _terms(e: Expr) -> List[Expr]:
    return list(e.terms) if isinstance(e, Add) else [e]


def _distribute(factors, config: Optional[Config]) -> Expr:
    products: List[Expr] = [Const(1)]
    for factor in factors:
        products = [mul(p, t) for p in products for t in _terms(factor)]
    # Collect after each full product so the next caller sees a reduced sum
    return simplify(Add(tuple(products)), config) if len(products) > 1 else simplify(products[0], config)


def _expand_power(base: Add, n: int, config: Optional[Config]) -> Expr:
    # Square-and-multiply keeps intermediate sums collected
    result: Optional[Expr] = None
    square = base
    while n:
        if n & 1:
            result = square if result is None else _distribute((result, square), config)
        n >>= 1
        if n:
            square = _distribute((square, square), config)
    return result
