# SymKernel - Equation Solving
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Solving polynomial equations and linear systems.

``solve`` brings an equation to the form ``n(x) / d(x) = 0`` and finds the
roots of the numerator:

- degree one and two in closed form, with symbolic coefficients allowed and
  complex conjugate roots for a negative discriminant
- higher degrees with rational coefficients by factoring over Q, then
  ``numpy.roots`` for the irreducible factors of degree three or more

Roots at which the denominator vanishes are removed. An equation that holds
for every value gives the whole real line.

Example:
    >>> x = symbol('x')
    >>> solve(eq(x**2 - 5*x + 6, 0), x)
    {2, 3}
"""

from __future__ import annotations
from fractions import Fraction
import logging
from typing import Dict, List, Optional, Sequence

import numpy as np

from .config import Config
from .exceptions import DomainError, NotAPolynomial, VariableCountError
from .expr import (
    Expr, ExprLike, SymbolLike, Const, Complex, FiniteSet, Relation, RelationKind,
    _to_expr, as_symbol, add, mul, pow_, neg, sub, sqrt, finite_set, interval, oo, neg_oo,
)
from .expr import matrix as matrix_literal
from .factor import factor_unipoly
from .matrices import inverse, solve_exact
from .number import Number
from .poly import UniPoly, coefficients, to_unipoly
from .ratfunc import cancel, numer_denom
from .simplify import simplify
from .substitution import substitute

logger = logging.getLogger(__name__)

# Imaginary parts below this are treated as zero for numeric roots
IMAGINARY_TOLERANCE = 1e-12


def _as_zero_form(equation: ExprLike) -> Expr:
    e = _to_expr(equation)
    if isinstance(e, Relation):
        if e.kind is not RelationKind.EQ:
            raise DomainError('solve', e, 'only equations can be solved')
        return sub(e.lhs, e.rhs)
    return e


def _is_zero(e: Expr) -> bool:
    return isinstance(e, Const) and e.number.is_zero()


def solve(equation: ExprLike, var: SymbolLike, config: Optional[Config] = None) -> Expr:
    """
    Solve a polynomial (or rational) equation for ``var``.

    Args:
        equation: An ``eq(lhs, rhs)`` relation, or an expression meaning ``expr = 0``
        var: The unknown
        config: Passed to the simplifier

    Returns:
        A FiniteSet of solutions, or ``Interval(-oo, oo)`` for an identity

    Raises:
        NotAPolynomial: If the numerator is not polynomial in ``var``.
        DomainError: For symbolic coefficients above degree two, or a
                     relation that is not an equation.
    """
    v = as_symbol(var)
    n, d = numer_denom(simplify(_as_zero_form(equation), config))
    coeffs = dict(coefficients(n, v))
    deg = max(coeffs) if coeffs else -1
    if deg < 1:
        if deg < 0:
            logger.debug("solve: %s holds identically", equation)
            return interval(neg_oo, oo)
        return FiniteSet(())

    if deg <= 2:
        roots = _closed_form(coeffs, deg, config)
    else:
        roots = _high_degree(n, v, config)

    valid = []
    for r in roots:
        if v in d.free_symbols() and _is_zero(substitute(d, {v: r}, config=config)):
            logger.debug("solve: dropping %s (denominator vanishes)", r)
            continue
        valid.append(r)
    return simplify(finite_set(*valid), config)


def _closed_form(coeffs: Dict[int, Expr], deg: int, config: Optional[Config]) -> List[Expr]:
    zero = Const(0)
    if deg == 1:
        return [simplify(neg(mul(coeffs.get(0, zero), pow_(coeffs[1], -1))), config)]
    return _quadratic(coeffs[2], coeffs.get(1, zero), coeffs.get(0, zero), config)


def _quadratic(a: Expr, b: Expr, c: Expr, config: Optional[Config]) -> List[Expr]:
    """Roots of ``a x**2 + b x + c`` by the quadratic formula."""
    disc = simplify(sub(pow_(b, 2), mul(4, a, c)), config)
    two_a_inv = pow_(mul(2, a), -1)
    center = simplify(mul(neg(b), two_a_inv), config)
    if isinstance(disc, Const) and disc.number.is_zero():
        return [center]
    if isinstance(disc, Const) and disc.number.is_negative():
        offset = simplify(mul(sqrt(Const(-disc.number)), two_a_inv), config)
        return [
            simplify(Complex(center, neg(offset)), config),
            simplify(Complex(center, offset), config),
        ]
    offset = mul(sqrt(disc), two_a_inv)
    return [simplify(sub(center, offset), config), simplify(add(center, offset), config)]


def _high_degree(n: Expr, v, config: Optional[Config]) -> List[Expr]:
    try:
        p = to_unipoly(n, v)
    except NotAPolynomial as err:
        raise DomainError('solve', n, 'symbolic coefficients above degree two') from err
    _, factors = factor_unipoly(p)
    roots: List[Expr] = []
    for f, _ in factors:
        if f.degree == 1:
            roots.append(Const(Number(-f.coeff(0) / f.coeff(1))))
        elif f.degree == 2:
            roots.extend(_quadratic(*(Const(Number(f.coeff(i))) for i in (2, 1, 0)), config))
        else:
            roots.extend(_numeric_roots(f))
    return roots


def _numeric_roots(f: UniPoly) -> List[Expr]:
    """Float roots of an irreducible factor by ``numpy.roots``."""
    logger.debug("solve: numeric roots for degree %d factor", f.degree)
    values = np.roots([float(c) for c in reversed(f.coeffs)])
    out: List[Expr] = []
    for z in values:
        if abs(z.imag) < IMAGINARY_TOLERANCE:
            out.append(Const(Number(float(z.real))))
        else:
            out.append(Complex(Const(Number(float(z.real))), Const(Number(float(z.imag)))))
    return out


def solve_linear_system(
    equations: Sequence[ExprLike], vars: Sequence[SymbolLike], config: Optional[Config] = None,
) -> Dict:
    """
    Solve a square linear system by Gaussian elimination.

    Args:
        equations: Relations or expressions meaning ``expr = 0``
        vars: The unknowns
        config: Passed to the simplifier

    Returns:
        Mapping from each unknown's Symbol to its value

    Raises:
        VariableCountError: If the number of equations and unknowns differ.
        NotAPolynomial: If an equation is not linear in the unknowns.
        SingularMatrix: If the system has no unique solution.
    """
    symbols = [as_symbol(s) for s in vars]
    if len(equations) != len(symbols):
        raise VariableCountError('solve_linear_system', len(symbols), len(equations))
    unknowns = set(symbols)
    zeros = {s: 0 for s in symbols}

    rows: List[List[Expr]] = []
    rhs: List[Expr] = []
    for equation in equations:
        e = simplify(_as_zero_form(equation), config)
        row = []
        for s in symbols:
            coeffs = dict(coefficients(e, s))
            if set(coeffs) - {0, 1}:
                raise NotAPolynomial(e, tuple(symbols), 'not linear in the unknowns')
            c = coeffs.get(1, Const(0))
            if c.free_symbols() & unknowns:
                raise NotAPolynomial(e, tuple(symbols), 'not linear in the unknowns')
            row.append(c)
        rows.append(row)
        rhs.append(simplify(neg(substitute(e, zeros, config=config)), config))

    exact = _exact(rows, rhs)
    if exact is not None:
        a, b = exact
        solution = [Const(Number(value)) for value in solve_exact(a, b)]
    else:
        inv = inverse(matrix_literal(rows))
        solution = [
            cancel(add(*[mul(inv.entry(i, j), rhs[j]) for j in range(len(rhs))]), config=config)
            for i in range(len(symbols))
        ]
    return dict(zip(symbols, solution))


def _exact(rows: List[List[Expr]], rhs: List[Expr]):
    def value(e: Expr) -> Optional[Fraction]:
        if isinstance(e, Const) and e.number.is_exact():
            return e.number.to_fraction()
        return None

    a = [[value(e) for e in row] for row in rows]
    b = [value(e) for e in rhs]
    if any(x is None for row in a for x in row) or any(x is None for x in b):
        return None
    return a, b
