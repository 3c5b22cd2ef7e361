# SymKernel - Partial Fractions
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Partial-fraction decomposition of univariate rational functions over Q.

The denominator is factored into monic irreducible factors ``f_i`` with
multiplicities ``m_i``. For every ``f_i**j`` (``1 <= j <= m_i``) an unknown
numerator of degree below ``deg f_i`` is introduced, and the unknowns are
found by equating coefficients of the recombined numerator, an exact square
linear system over Q.

Example:
    >>> x = symbol('x')
    >>> partial_fraction(1 / ((x - 1) * (x - 2)), x)
    (-(-1 + x)**-1 + (-2 + x)**-1)
"""

from __future__ import annotations
from dataclasses import dataclass
from fractions import Fraction
import logging
from typing import List, Tuple

from .expr import Expr, ExprLike, SymbolLike, Const, as_symbol, add, mul, pow_
from .factor import factor_unipoly
from .matrices import solve_exact
from .poly import UniPoly, to_unipoly
from .ratfunc import numer_denom
from .simplify import simplify

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PartialTerm:
    """One term ``numerator / factor**power`` of a decomposition."""
    numerator: Expr
    factor: Expr
    power: int

    def to_expr(self) -> Expr:
        return simplify(mul(self.numerator, pow_(self.factor, -self.power)))


def decompose(num: UniPoly, den: UniPoly) -> Tuple[UniPoly, List[Tuple[UniPoly, UniPoly, int]]]:
    """Polynomial part and ``(numerator, monic factor, power)`` triples."""
    poly_part, rem = num.divmod(den)
    if rem.is_zero():
        return poly_part, []
    _, factors = factor_unipoly(den)
    monic = [(f.monic(), m) for f, m in factors]
    rem = rem * (1 / den.lc)
    full = UniPoly.constant(1)
    for f, m in monic:
        full = full * f ** m

    # One column per unknown coefficient: x**t * full / f**j
    columns: List[UniPoly] = []
    slots: List[Tuple[int, int, int]] = []
    for index, (f, m) in enumerate(monic):
        for j in range(1, m + 1):
            base = full.exact_div(f ** j)
            for t in range(f.degree):
                columns.append(base * UniPoly.monomial(1, t))
                slots.append((index, j, t))
    n = full.degree
    matrix = [[col.coeff(row) for col in columns] for row in range(n)]
    solution = solve_exact(matrix, [rem.coeff(row) for row in range(n)])

    numerators = {}
    for (index, j, t), value in zip(slots, solution):
        numerators.setdefault((index, j), [Fraction(0)] * monic[index][0].degree)[t] = value
    terms = []
    for (index, j), coeffs in sorted(numerators.items()):
        numerator = UniPoly(coeffs)
        if not numerator.is_zero():
            terms.append((numerator, monic[index][0], j))
    return poly_part, terms


def apart_terms(expr: ExprLike, var: SymbolLike) -> Tuple[Expr, List[PartialTerm]]:
    """
    Decompose ``expr`` into a polynomial part and partial-fraction terms.

    Raises:
        NotAPolynomial: If the numerator or denominator is not a polynomial in
                        ``var`` with rational coefficients.
    """
    v = as_symbol(var)
    n, d = numer_denom(expr)
    poly_part, terms = decompose(to_unipoly(n, v), to_unipoly(d, v))
    logger.debug("Partial fractions: %d terms", len(terms))
    return poly_part.to_expr(v), [
        PartialTerm(num.to_expr(v), f.to_expr(v), j) for num, f, j in terms
    ]


def partial_fraction(expr: ExprLike, var: SymbolLike) -> Expr:
    """
    Partial-fraction decomposition of a rational function in ``var``.

    Returns:
        ``polynomial part + sum(A_ij / f_i**j)`` as a simplified sum.
    """
    poly_part, terms = apart_terms(expr, var)
    return simplify(add(poly_part, *[t.to_expr() for t in terms]))
