# SymKernel - Symbolic Differentiation
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Symbolic differentiation.

Each rule is applied once per node, bottom-up, and the result is
simplified. Higher orders repeat the first-order step, simplifying in
between. Functions are differentiated with the chain rule using the
derivative stored in the function registry; functions the registry does
not know produce an unevaluated ``Derivative`` node.

Example:
    >>> x = symbol('x')
    >>> derivative(x**2 + 3*x + 1, x)
    (3 + 2*x)
    >>> derivative(sin(x), x, 2)
    -sin(x)
"""

from __future__ import annotations
from math import comb
import logging
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from .config import Config
from .expr import (
    Expr, ExprLike, SymbolLike, Const, Variable, MathConstant, Undefined, Boolean,
    Add, Mul, Pow, Function, Matrix, MatrixStorage, Complex, Piecewise, Relation,
    Derivative, Integral, _to_expr, as_symbol, add, mul, pow_, ln, function,
)
from .functions import REGISTRY
from .simplify import simplify
from .substitution import substitute
from .symbol import Symbol

logger = logging.getLogger(__name__)

# (input, unsimplified derivative, simplified derivative)
ExplainCallback = Callable[[Expr, Expr, Expr], None]


def derivative(
    expr: ExprLike,
    var: SymbolLike,
    order: int = 1,
    explain: Optional[ExplainCallback] = None,
    config: Optional[Config] = None,
) -> Expr:
    """
    The ``order``-th derivative of ``expr`` with respect to ``var``.

    Args:
        expr: Expression to differentiate
        var: Differentiation variable
        order: Number of differentiations (0 returns the simplified input)
        explain: Called after every step with (input, raw, simplified)
        config: Passed to the simplifier

    Returns:
        Simplified derivative
    """
    if order < 0:
        raise ValueError(f"Derivative order must be non-negative, got {order}")
    v = as_symbol(var)
    result = simplify(_to_expr(expr), config)
    for _ in range(order):
        raw = _diff(result, v)
        simplified = simplify(raw, config)
        if explain is not None:
            explain(result, raw, simplified)
        result = simplified
    return result


def _diff(e: Expr, v: Symbol) -> Expr:
    if isinstance(e, (Const, MathConstant, Boolean)):
        return Const(0)
    if isinstance(e, Undefined):
        return e
    if isinstance(e, Variable):
        return Const(1) if e.symbol == v else Const(0)
    if isinstance(e, Matrix):
        return e.with_children([_diff(c, v) for c in e.children()])
    if v not in e.free_symbols():
        return Const(0)

    if isinstance(e, Add):
        return add(*[_diff(t, v) for t in e.terms])
    if isinstance(e, Mul):
        return _product_rule(e.factors, v)
    if isinstance(e, Pow):
        return _power_rule(e.base, e.exponent, v)
    if isinstance(e, Function):
        return _chain_rule(e, v)
    if isinstance(e, Complex):
        return Complex(_diff(e.real, v), _diff(e.imag, v))
    if isinstance(e, Piecewise):
        pieces = tuple((cond, _diff(value, v)) for cond, value in e.pieces)
        default = _diff(e.default, v) if e.default is not None else None
        return Piecewise(pieces, default)
    if isinstance(e, Relation):
        return Relation(_diff(e.lhs, v), _diff(e.rhs, v), e.kind)
    if isinstance(e, Integral) and e.variable == v:
        return e.integrand
    if isinstance(e, Derivative) and e.variable == v:
        return Derivative(e.expr, v, e.order + 1)
    return Derivative(e, v, 1)


def _product_rule(factors: Sequence[Expr], v: Symbol) -> Expr:
    terms = []
    for i, f in enumerate(factors):
        df = _diff(f, v)
        if isinstance(df, Const) and df.number.is_zero():
            continue
        # f_i' takes the place of f_i so non-commuting neighbours keep their order
        terms.append(mul(*factors[:i], df, *factors[i + 1:]))
    return add(*terms) if terms else Const(0)


def _power_rule(base: Expr, exponent: Expr, v: Symbol) -> Expr:
    base_depends = v in base.free_symbols()
    exp_depends = v in exponent.free_symbols()
    if not exp_depends:
        # n * b**(n-1) * b'
        return mul(exponent, pow_(base, add(exponent, -1)), _diff(base, v))
    if not base_depends:
        # b**f * ln(b) * f'
        return mul(pow_(base, exponent), ln(base), _diff(exponent, v))
    # b**f * (f' ln b + f b'/b)
    return mul(
        pow_(base, exponent),
        add(mul(_diff(exponent, v), ln(base)),
            mul(exponent, _diff(base, v), pow_(base, -1))),
    )


def _chain_rule(e: Function, v: Symbol) -> Expr:
    name = REGISTRY.canonical_name(e.name)
    if len(e.args) != 1:
        return Derivative(e, v, 1)
    u = e.args[0]
    du = _diff(u, v)
    # d/dv ln|u| = u'/u
    if name == 'ln' and isinstance(u, Function) and REGISTRY.canonical_name(u.name) == 'abs':
        inner = u.args[0]
        return mul(_diff(inner, v), pow_(inner, -1))
    props = REGISTRY.get(name)
    if props is None or props.derivative is None:
        logger.debug("No derivative rule for %s; leaving it unevaluated", e.name)
        return Derivative(e, v, 1)
    return mul(props.derivative(u), du)


# Several variables

def partial_derivative(expr: ExprLike, *vars: SymbolLike, config: Optional[Config] = None) -> Expr:
    """Mixed partial derivative, differentiating by each variable in turn."""
    result = simplify(_to_expr(expr), config)
    for var in vars:
        result = derivative(result, var, 1, config=config)
    return result


def gradient(expr: ExprLike, vars: Sequence[SymbolLike], config: Optional[Config] = None) -> Matrix:
    """Column vector (n x 1 matrix) of first partial derivatives."""
    rows = tuple((derivative(expr, v, 1, config=config),) for v in vars)
    return Matrix(MatrixStorage.DENSE, len(rows), 1, rows)


def jacobian(
    exprs: Sequence[ExprLike], vars: Sequence[SymbolLike], config: Optional[Config] = None,
) -> Matrix:
    """m x n matrix of partial derivatives of m functions in n variables."""
    rows = tuple(tuple(derivative(f, v, 1, config=config) for v in vars) for f in exprs)
    return Matrix(MatrixStorage.DENSE, len(rows), len(vars), rows)


def hessian(expr: ExprLike, vars: Sequence[SymbolLike], config: Optional[Config] = None) -> Matrix:
    """Symmetric matrix of second partial derivatives (stored as its upper triangle)."""
    first = [derivative(expr, v, 1, config=config) for v in vars]
    n = len(vars)
    upper = tuple(
        tuple(derivative(first[i], vars[j], 1, config=config) for j in range(i, n))
        for i in range(n)
    )
    return Matrix(MatrixStorage.SYMMETRIC, n, n, upper)


# Closed forms for higher orders

def leibniz_derivative(
    f: ExprLike, g: ExprLike, var: SymbolLike, n: int, config: Optional[Config] = None,
) -> Expr:
    """n-th derivative of ``f*g`` by Leibniz's rule ``sum C(n,k) f^(k) g^(n-k)``."""
    if n < 0:
        raise ValueError(f"Derivative order must be non-negative, got {n}")
    f_derivs = _successive(f, var, n, config)
    g_derivs = _successive(g, var, n, config)
    terms = [mul(comb(n, k), f_derivs[k], g_derivs[n - k]) for k in range(n + 1)]
    return simplify(add(*terms), config)


def _successive(e: ExprLike, var: SymbolLike, n: int, config: Optional[Config]) -> List[Expr]:
    out = [simplify(_to_expr(e), config)]
    for _ in range(n):
        out.append(derivative(out[-1], var, 1, config=config))
    return out


def bell_polynomial(n: int, k: int, xs: Sequence[Expr]) -> Expr:
    """
    Partial Bell polynomial ``B_{n,k}(x_1, ..., x_{n-k+1})``.

    ``xs[i]`` is ``x_{i+1}``. Uses the recurrence
    ``B_{n,k} = sum_{i=1}^{n-k+1} C(n-1, i-1) x_i B_{n-i,k-1}``.
    """
    memo: Dict[Tuple[int, int], Expr] = {}

    def bell(n: int, k: int) -> Expr:
        if (n, k) in memo:
            return memo[(n, k)]
        if n == 0 and k == 0:
            value: Expr = Const(1)
        elif n == 0 or k == 0:
            value = Const(0)
        else:
            value = add(*[mul(comb(n - 1, i - 1), xs[i - 1], bell(n - i, k - 1))
                          for i in range(1, n - k + 2)])
        memo[(n, k)] = value
        return value

    return simplify(bell(n, k))


# Stands for the argument of the outer function in faa_di_bruno
_OUTER_ARG = Symbol('_u')


def faa_di_bruno(
    name: str, inner: ExprLike, var: SymbolLike, n: int, config: Optional[Config] = None,
) -> Expr:
    """
    n-th derivative of ``name(inner)`` by Faa di Bruno's formula
    ``sum_k f^(k)(g) * B_{n,k}(g', g'', ..., g^(n-k+1))``.
    """
    if n < 0:
        raise ValueError(f"Derivative order must be non-negative, got {n}")
    g = simplify(_to_expr(inner), config)
    if n == 0:
        return simplify(function(name, g), config)
    u = _OUTER_ARG
    outer = _successive(function(name, Variable(u)), u, n, config)
    inner_derivs = _successive(g, var, n, config)[1:]
    terms = []
    for k in range(1, n + 1):
        fk = substitute(outer[k], {u: g}, config=config)
        terms.append(mul(fk, bell_polynomial(n, k, inner_derivs)))
    return simplify(add(*terms), config)
