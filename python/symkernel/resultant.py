# SymKernel - Resultants
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Resultants and discriminants via the Sylvester matrix.

The determinant is computed with fraction-free Bareiss elimination over
polynomial entries (every division is exact), so the other symbols of a
multivariate input are carried through as coefficients. Eliminating a
variable from two equations is ``polynomial_resultant(f, g, var)``.
"""

from __future__ import annotations
from typing import List, Optional

from .exceptions import ConvergenceFailed
from .expr import Expr, ExprLike, SymbolLike, Const, as_symbol
from .poly import MultiPoly, polys_from_exprs


def sylvester_matrix(f: MultiPoly, g: MultiPoly, var: int) -> List[List[MultiPoly]]:
    """
    Sylvester matrix of ``f`` and ``g`` with respect to variable ``var``.

    Rows are ``deg g`` shifted copies of the coefficients of ``f`` followed by
    ``deg f`` shifted copies of those of ``g``, highest degree first.
    """
    m, n = f.degree(var), g.degree(var)
    zero = MultiPoly.zero(f.nvars)
    cf, cg = f.coefficients_in(var), g.coefficients_in(var)
    size = m + n
    rows = []
    for i in range(n):
        row = [zero] * size
        for k, c in cf.items():
            row[i + m - k] = c
        rows.append(row)
    for i in range(m):
        row = [zero] * size
        for k, c in cg.items():
            row[i + n - k] = c
        rows.append(row)
    return rows


def bareiss_determinant(matrix: List[List[MultiPoly]], nvars: int) -> MultiPoly:
    """Determinant of a square matrix of polynomials by Bareiss elimination."""
    n = len(matrix)
    if n == 0:
        return MultiPoly.constant(1, nvars)
    m = [list(row) for row in matrix]
    sign = 1
    previous = MultiPoly.constant(1, nvars)
    for k in range(n - 1):
        if m[k][k].is_zero():
            pivot = next((i for i in range(k + 1, n) if not m[i][k].is_zero()), None)
            if pivot is None:
                return MultiPoly.zero(nvars)
            m[k], m[pivot] = m[pivot], m[k]
            sign = -sign
        for i in range(k + 1, n):
            for j in range(k + 1, n):
                num = m[i][j] * m[k][k] - m[i][k] * m[k][j]
                q = num.exact_div(previous)
                if q is None:
                    raise ConvergenceFailed("inexact Bareiss division")
                m[i][j] = q
        previous = m[k][k]
    det = m[n - 1][n - 1]
    return -det if sign < 0 else det


def resultant(f: MultiPoly, g: MultiPoly, var: int) -> MultiPoly:
    """Resultant of two polynomials with respect to variable ``var``."""
    if f.is_zero() or g.is_zero():
        return MultiPoly.zero(f.nvars)
    if f.degree(var) == 0 and g.degree(var) == 0:
        return MultiPoly.constant(1, f.nvars)
    if f.degree(var) == 0:
        return f ** g.degree(var)
    if g.degree(var) == 0:
        return g ** f.degree(var)
    return bareiss_determinant(sylvester_matrix(f, g, var), f.nvars)


def _derivative(f: MultiPoly, var: int) -> MultiPoly:
    terms = {}
    for mono, c in f.terms.items():
        if mono[var]:
            lowered = mono[:var] + (mono[var] - 1,) + mono[var + 1:]
            terms[lowered] = c * mono[var]
    return MultiPoly(terms, f.nvars)


def polynomial_resultant(f: ExprLike, g: ExprLike, var: SymbolLike) -> Expr:
    """
    Resultant of ``f`` and ``g`` with respect to ``var``.

    Zero exactly when the two polynomials share a root in ``var`` (for
    non-vanishing leading coefficients). Other symbols stay symbolic.

    Raises:
        NotAPolynomial: If an input is not a polynomial.
    """
    v = as_symbol(var)
    (a, b), symbols = polys_from_exprs([f, g])
    if v not in symbols:
        symbols.append(v)
        (a, b), symbols = polys_from_exprs([f, g], symbols)
    return resultant(a, b, symbols.index(v)).to_expr(symbols)


def discriminant(f: ExprLike, var: SymbolLike) -> Expr:
    """
    Discriminant ``(-1)**(n(n-1)/2) * res(f, f') / lc(f)`` of a polynomial of degree n >= 1.

    For ``a*x**2 + b*x + c`` this is ``b**2 - 4*a*c``.
    """
    v = as_symbol(var)
    (a,), symbols = polys_from_exprs([f])
    if v not in symbols:
        return Const(0)
    index = symbols.index(v)
    n = a.degree(index)
    if n < 1:
        return Const(0)
    if n == 1:
        return Const(1)
    res = resultant(a, _derivative(a, index), index)
    lc = a.leading_coefficient_in(index)
    quotient: Optional[MultiPoly] = res.exact_div(lc)
    if quotient is None:
        raise ConvergenceFailed("leading coefficient does not divide the resultant")
    if (n * (n - 1) // 2) % 2:
        quotient = -quotient
    return quotient.to_expr(symbols)
