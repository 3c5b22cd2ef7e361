# SymKernel - Polynomial Factorization
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Factorization of univariate polynomials over Q.

The polynomial is split into its square-free parts (Yun's algorithm); each
part is then searched for rational roots and, from degree four on, for
integer quadratic factors by Kronecker's method using the values at
0, 1 and -1. Every factor of degree at most three that survives the search
is irreducible, so factorizations are complete up to degree five.
Multivariate polynomials only have their numeric content and common
monomial pulled out.

Example:
    >>> x = symbol('x')
    >>> factor_polynomial(2*x**2 - 2, x)
    (2, [((-1 + x), 1), ((1 + x), 1)])
"""

from __future__ import annotations
from fractions import Fraction
from itertools import product
import logging
from typing import List, Optional, Sequence, Tuple

from .exceptions import NotAPolynomial
from .expr import Expr, ExprLike, SymbolLike, Const, Variable, _to_expr, as_symbol, mul, pow_
from .gcd import modular_gcd
from .number import Number
from .poly import MultiPoly, UniPoly, polys_from_exprs, to_unipoly
from .ratfunc import numer_denom
from .rational import divisors
from .simplify import simplify

logger = logging.getLogger(__name__)

# Divisor triples tried by the quadratic search before giving up
MAX_KRONECKER_CANDIDATES = 200000

Factors = List[Tuple[UniPoly, int]]


def square_free_decomposition(f: UniPoly) -> Factors:
    """
    Yun's square-free decomposition.

    Returns ``[(a_i, i)]`` with each ``a_i`` square-free, pairwise coprime,
    primitive with positive leading coefficient, and ``f`` equal to
    ``content * prod(a_i**i)``. Constant parts are omitted.
    """
    if f.degree < 1:
        return []
    df = f.derivative()
    b = modular_gcd(f, df)
    c = f.exact_div(b)
    d = df.exact_div(b) - c.derivative()
    out: Factors = []
    i = 1
    while c.degree > 0:
        a = modular_gcd(c, d)
        if a.degree > 0:
            out.append((a.primitive()[1], i))
        c = c.exact_div(a)
        d = d.exact_div(a) - c.derivative()
        i += 1
    return out


def _rational_roots(f: UniPoly) -> List[Fraction]:
    """Rational roots of an integer polynomial with non-zero constant term."""
    coeffs = f.integer_coeffs()
    roots = []
    for p in divisors(abs(coeffs[0])):
        for q in divisors(abs(coeffs[-1])):
            for r in (Fraction(p, q), Fraction(-p, q)):
                if r not in roots and f.evaluate(r) == 0:
                    roots.append(r)
    return roots


def _split_linear(f: UniPoly) -> Tuple[Factors, UniPoly]:
    """Pull out linear factors; returns (linear factors, remaining cofactor)."""
    found: Factors = []
    x = UniPoly.x()
    while f.degree > 0 and f.coeff(0) == 0:
        found.append((x, 1))
        f = f.exact_div(x)
    if f.degree < 1:
        return found, f
    for r in _rational_roots(f):
        linear = UniPoly((-r.numerator, r.denominator))
        found.append((linear, 1))
        f = f.exact_div(linear)
    return found, f


def _signed(values: List[int]) -> List[int]:
    return values + [-v for v in values]


def _quadratic_factor(f: UniPoly) -> Optional[UniPoly]:
    """An integer quadratic factor of ``f``, or None (Kronecker search)."""
    v0, v1, vm1 = (f.evaluate(t) for t in (0, 1, -1))
    if 0 in (v0, v1, vm1):
        return None
    d0 = _signed(divisors(abs(int(v0))))
    d1 = _signed(divisors(abs(int(v1))))
    dm1 = _signed(divisors(abs(int(vm1))))
    if len(d0) * len(d1) * len(dm1) > MAX_KRONECKER_CANDIDATES:
        logger.debug("Quadratic factor search skipped (%d candidates)",
                     len(d0) * len(d1) * len(dm1))
        return None
    for c, s1, sm1 in product(d0, d1, dm1):
        # q(0) = c, q(1) = a + b + c, q(-1) = a - b + c
        if (s1 + sm1) % 2 or (s1 - sm1) % 2:
            continue
        a = (s1 + sm1) // 2 - c
        b = (s1 - sm1) // 2
        if a <= 0:
            continue
        q = UniPoly((c, b, a))
        if q.divides(f):
            return q.primitive()[1]
    return None


def _factor_square_free(f: UniPoly) -> List[UniPoly]:
    linear, rest = _split_linear(f)
    factors = [p for p, _ in linear]
    while rest.degree >= 4:
        q = _quadratic_factor(rest)
        if q is None:
            break
        factors.append(q)
        rest = rest.exact_div(q)
    if rest.degree > 0:
        factors.append(rest.primitive()[1])
    return factors


def factor_unipoly(f: UniPoly) -> Tuple[Fraction, Factors]:
    """
    Factor a univariate polynomial over Q.

    Returns:
        ``(content, [(factor, multiplicity)])`` where the factors are
        primitive integer polynomials with positive leading coefficient,
        sorted by degree and then by coefficients.
    """
    if f.degree < 1:
        return f.lc if not f.is_zero() else Fraction(0), []
    c, prim = f.primitive()
    factors: Factors = []
    for part, mult in square_free_decomposition(prim):
        for irreducible in _factor_square_free(part):
            factors.append((irreducible, mult))
    # Fix the sign lost to positive-leading-coefficient normalization
    product_lc = Fraction(1)
    for p, m in factors:
        product_lc *= p.lc ** m
    c = f.lc / product_lc
    factors.sort(key=lambda pm: (pm[0].degree, pm[0].coeffs, pm[1]))
    return c, factors


def factor_polynomial(expr: ExprLike, var: SymbolLike) -> Tuple[Expr, List[Tuple[Expr, int]]]:
    """
    Factor a univariate polynomial expression.

    Returns:
        ``(content, [(factor, multiplicity)])`` with ``expr`` equal to
        ``content * prod(factor**multiplicity)``.

    Raises:
        NotAPolynomial: If ``expr`` is not a polynomial in ``var`` with
                        rational coefficients.
    """
    v = as_symbol(var)
    c, factors = factor_unipoly(to_unipoly(expr, v))
    return Const(Number(c)), [(p.to_expr(v), m) for p, m in factors]


def _product(content: Expr, factors: Sequence[Tuple[Expr, int]]) -> Expr:
    parts = [pow_(f, m) if m != 1 else f for f, m in factors]
    if not parts:
        return content
    return mul(content, *parts)


def _factor_part(e: Expr, var: Optional[SymbolLike]) -> Expr:
    if var is not None:
        try:
            content, factors = factor_polynomial(e, var)
        except NotAPolynomial:
            return e
        return _product(content, factors)
    (p,), symbols = polys_from_exprs([e])
    if len(symbols) == 1:
        return _factor_part(e, symbols[0])
    return _factor_multivariate(p, symbols)


def _factor_multivariate(p: MultiPoly, symbols: List) -> Expr:
    if p.is_zero() or not symbols:
        return p.to_expr(symbols)
    c, prim = p.primitive()
    common = tuple(min(m[i] for m in prim.terms) for i in range(p.nvars))
    parts = []
    if any(common):
        rest = {tuple(a - b for a, b in zip(m, common)): v for m, v in prim.terms.items()}
        prim = MultiPoly(rest, p.nvars)
        parts = [(Variable(s), e) for s, e in zip(symbols, common) if e]
    parts.append((prim.to_expr(symbols), 1))
    return _product(Const(Number(c)), parts)


def factor(expr: ExprLike, var: Optional[SymbolLike] = None) -> Expr:
    """
    Factored form of a polynomial or rational expression.

    The result is a product built without simplification (simplifying would
    distribute a numeric content over a single sum). Expressions that are not
    polynomial in the variables are returned simplified but unfactored.
    """
    e = simplify(_to_expr(expr))
    n, d = numer_denom(e)
    try:
        fn = _factor_part(n, var)
        if isinstance(d, Const) and d.number.is_one():
            return fn
        fd = _factor_part(d, var)
    except NotAPolynomial as err:
        logger.debug("factor: %s", err)
        return e
    return mul(fn, pow_(fd, -1))
