# SymKernel - Laplace Equation
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Separation-of-variables solution of Laplace's equation on a rectangle.

For ``u_xx + u_yy = 0`` on ``[0, a] x [0, b]`` with homogeneous Dirichlet
conditions on the sides ``x = 0``, ``x = a`` and ``y = 0``, the solution has
the form

    u(x, y) = sum_n C_n sin(lambda_n x) sinh(lambda_n y),  lambda_n = n pi / a

The eigenvalues are exact. The Fourier coefficients ``C_n`` depend on the
remaining boundary function and are returned as symbols; the result says so
through ``coefficients_symbolic``.
"""

from __future__ import annotations
from dataclasses import dataclass
import logging
from typing import List, Sequence

from .exceptions import DomainError, VariableCountError
from .expr import (
    Expr, ExprLike, SymbolLike, Const, Variable, _to_expr, as_symbol,
    add, mul, pow_, sin, sinh, pi, symbol,
)
from .simplify import simplify

logger = logging.getLogger(__name__)

DEFAULT_TERMS = 10


@dataclass(frozen=True)
class LaplaceSolution:
    """
    Truncated series solution of Laplace's equation on a rectangle.

    Attributes:
        solution: ``sum C_n sin(lambda_n x) sinh(lambda_n y)`` over the kept terms
        x_eigenvalues: ``n pi / a`` for n = 1..terms
        y_eigenvalues: ``n pi / b`` for n = 1..terms
        coefficients: The symbols ``C_1, C_2, ...``
        coefficients_symbolic: Always True; the ``C_n`` are not computed
        note: Description of what still has to be supplied
    """
    solution: Expr
    x_eigenvalues: List[Expr]
    y_eigenvalues: List[Expr]
    coefficients: List[Expr]
    coefficients_symbolic: bool = True
    note: str = ("C_n are the Fourier sine coefficients of the boundary function "
                 "on y = b, divided by sinh(n*pi*b/a); they are left symbolic.")


def solve_laplace_2d(
    variables: Sequence[SymbolLike],
    width: ExprLike = 1,
    height: ExprLike = 1,
    terms: int = DEFAULT_TERMS,
) -> LaplaceSolution:
    """
    Series solution of ``u_xx + u_yy = 0`` on ``[0, width] x [0, height]``.

    Args:
        variables: The two independent variables ``(x, y)``
        width: Domain length ``a`` in x
        height: Domain length ``b`` in y
        terms: Number of series terms to keep

    Raises:
        VariableCountError: If not exactly two variables are given.
        DomainError: If ``terms`` is not positive or a numeric side length
                     is not positive.
    """
    if len(variables) != 2:
        raise VariableCountError('solve_laplace_2d', 2, len(variables))
    if terms < 1:
        raise DomainError('solve_laplace_2d', terms, 'at least one term is required')
    x, y = (Variable(as_symbol(v)) for v in variables)
    a, b = simplify(_to_expr(width)), simplify(_to_expr(height))
    for side in (a, b):
        if isinstance(side, Const) and not side.number.is_positive():
            raise DomainError('solve_laplace_2d', side, 'side lengths must be positive')

    x_eigs = [simplify(mul(n, pi, pow_(a, -1))) for n in range(1, terms + 1)]
    y_eigs = [simplify(mul(n, pi, pow_(b, -1))) for n in range(1, terms + 1)]
    coeffs: List[Expr] = [symbol(f'C_{n}') for n in range(1, terms + 1)]
    series = add(*[
        mul(c, sin(mul(lam, x)), sinh(mul(lam, y)))
        for c, lam in zip(coeffs, x_eigs)
    ])
    logger.debug("Laplace solution with %d terms on [0, %s] x [0, %s]", terms, a, b)
    return LaplaceSolution(simplify(series), x_eigs, y_eigs, coeffs)
