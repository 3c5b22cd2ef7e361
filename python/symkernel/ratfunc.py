# SymKernel - Rational Expressions
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Numerator/denominator split, combination over a common denominator and
cancellation of common polynomial factors.

Example:
    >>> x = symbol('x')
    >>> cancel((x**2 - 1) / (x - 1))
    (1 + x)
"""

from __future__ import annotations
import logging
from typing import Optional, Sequence, Tuple

from .config import Config, resolve
from .exceptions import NotAPolynomial
from .expand import expand
from .expr import Expr, ExprLike, SymbolLike, Const, Add, Mul, Pow, _to_expr, add, mul, pow_
from .gcd import gcd_multipoly
from .poly import coefficients, polys_from_exprs
from .simplify import simplify

logger = logging.getLogger(__name__)


def _is_one(e: Expr) -> bool:
    return isinstance(e, Const) and e.number.is_one()


def numer_denom(expr: ExprLike) -> Tuple[Expr, Expr]:
    """
    Split into ``(numerator, denominator)`` with ``expr == n / d``.

    Negative powers and rational constants contribute to the denominator;
    sums are brought over a common denominator.
    """
    n, d = _numer_denom(simplify(_to_expr(expr)))
    return simplify(n), simplify(d)


def _numer_denom(e: Expr) -> Tuple[Expr, Expr]:
    if isinstance(e, Const):
        if e.number.is_exact() and not e.number.is_integer():
            frac = e.number.to_fraction()
            return Const(frac.numerator), Const(frac.denominator)
        return e, Const(1)
    if isinstance(e, Pow):
        exponent = e.exponent
        if isinstance(exponent, Const) and exponent.number.is_negative():
            return Const(1), simplify(pow_(e.base, Const(-exponent.number)))
        return e, Const(1)
    if isinstance(e, Mul):
        nums, dens = [], []
        for f in e.factors:
            n, d = _numer_denom(f)
            nums.append(n)
            dens.append(d)
        return simplify(mul(*nums)), simplify(mul(*dens))
    if isinstance(e, Add):
        num, den = _numer_denom(e.terms[0])
        for t in e.terms[1:]:
            n, d = _numer_denom(t)
            if d == den:
                num = add(num, n)
            elif _is_one(d):
                num = add(num, mul(n, den))
            elif _is_one(den):
                num, den = add(mul(num, d), n), d
            else:
                num, den = add(mul(num, d), mul(n, den)), mul(den, d)
            den = simplify(den)
        return simplify(num), den
    return e, Const(1)


def together(expr: ExprLike, config: Optional[Config] = None) -> Expr:
    """Combine into a single fraction ``n / d`` with an expanded numerator."""
    n, d = numer_denom(expr)
    n = expand(n, config)
    if _is_one(d):
        return n
    return simplify(mul(n, pow_(d, -1)), config)


def cancel(
    expr: ExprLike, gens: Optional[Sequence[SymbolLike]] = None, config: Optional[Config] = None,
) -> Expr:
    """
    Cancel the polynomial GCD of numerator and denominator.

    The denominator of the result is primitive with a positive leading
    coefficient. Inputs that are not rational functions in ``gens`` are
    returned in ``together`` form.
    """
    cfg = resolve(config)
    n, d = numer_denom(expr)
    try:
        (pn, pd), symbols = polys_from_exprs([n, d], gens)
    except NotAPolynomial as e:
        logger.debug("cancel: %s; returning combined form", e)
        return together(expr, config)
    if pd.is_zero():
        return simplify(mul(n, pow_(d, -1)), config)
    if pn.is_zero():
        return Const(0)
    g = gcd_multipoly(pn, pd, cfg.gcd)
    pn, pd = pn.exact_div(g), pd.exact_div(g)
    c, pd = pd.primitive()
    pn = pn * (1 / c)
    num = pn.to_expr(symbols)
    if pd.is_constant():
        return num
    return simplify(mul(num, pow_(pd.to_expr(symbols), -1)), config)


def is_rational_function(expr: ExprLike, var: SymbolLike) -> bool:
    """True if ``expr`` is a ratio of polynomials in ``var`` (other symbols act as coefficients)."""
    n, d = numer_denom(expr)
    try:
        coefficients(n, var)
        coefficients(d, var)
    except NotAPolynomial:
        return False
    return True


