# SymKernel - Substitution and Numeric Evaluation
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Symbol substitution, subexpression replacement and numeric evaluation.

Substitution is mechanical and total. Variables bound by calculus nodes
(the integration variable of a definite integral, the index of a sum, ...)
are never replaced inside the node's body.

Example:
    >>> x, y = symbols('x y')
    >>> substitute(x**2 + y, {x: 3})
    (9 + y)
    >>> evalf(sin(pi / 6))
    0.49999999999999994
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Union

from .config import Config
from .exceptions import DomainError
from .expr import (
    Expr, ExprLike, SymbolLike, Const, Variable, MathConstant, Pow, Complex,
    Calculus, Derivative, Integral, DefiniteIntegral, Limit, Sum, Product,
    CONSTANT_VALUES, _to_expr, as_symbol,
)
from .simplify import simplify
from .symbol import Symbol


def _normalize_mapping(mapping: Mapping[SymbolLike, ExprLike]) -> Dict[Symbol, Expr]:
    return {as_symbol(k): _to_expr(v) for k, v in mapping.items()}


def substitute(
    expr: Expr,
    mapping: Mapping[SymbolLike, ExprLike],
    simplify_result: bool = True,
    config: Optional[Config] = None,
) -> Expr:
    """
    Replace symbols by expressions.

    Args:
        expr: Expression to substitute into
        mapping: Symbol (or Variable, or name) -> replacement
        simplify_result: Simplify the substituted tree before returning

    Returns:
        The substituted expression
    """
    table = _normalize_mapping(mapping)
    result = _substitute(expr, table) if table else expr
    return simplify(result, config) if simplify_result else result


def _substitute(expr: Expr, table: Dict[Symbol, Expr]) -> Expr:
    if isinstance(expr, Variable):
        return table.get(expr.symbol, expr)
    children = expr.children()
    if not children:
        return expr
    if isinstance(expr, Calculus):
        return _substitute_calculus(expr, table)
    return expr.with_children([_substitute(c, table) for c in children])


def _substitute_calculus(expr: Calculus, table: Dict[Symbol, Expr]) -> Expr:
    # The node's own variable is left alone in its body
    inner = {k: v for k, v in table.items() if k != expr.variable}
    if isinstance(expr, (Derivative, Integral)):
        return expr.with_children([_substitute(c, inner) for c in expr.children()])
    if isinstance(expr, Limit):
        return expr.with_children([_substitute(expr.expr, inner), _substitute(expr.point, table)])
    if isinstance(expr, (DefiniteIntegral, Sum, Product)):
        body, lower, upper = expr.children()
        return expr.with_children([
            _substitute(body, inner), _substitute(lower, table), _substitute(upper, table),
        ])
    return expr.with_children([_substitute(c, inner) for c in expr.children()])


def replace(expr: Expr, old: Expr, new: Expr) -> Expr:
    """Replace every occurrence of the subexpression ``old`` by ``new`` (no simplification)."""
    if expr == old:
        return new
    children = expr.children()
    if not children:
        return expr
    return expr.with_children([replace(c, old, new) for c in children])


@dataclass
class EvalContext:
    """
    Settings for ``evaluate``.

    Attributes:
        substitutions: Symbol -> value applied before evaluation.
        numeric: Fold to floats; when False ``evaluate`` is the identity.
        precision: Precision hint in bits (53 = IEEE double).
        simplify: Simplify the evaluated tree.
    """
    substitutions: Mapping[SymbolLike, ExprLike] = field(default_factory=dict)
    numeric: bool = True
    precision: int = 53
    simplify: bool = True

    @classmethod
    def symbolic(cls) -> EvalContext:
        return cls(numeric=False)

    @classmethod
    def with_values(cls, values: Mapping[SymbolLike, ExprLike]) -> EvalContext:
        return cls(substitutions=values)


def evaluate(expr: Expr, context: Optional[EvalContext] = None) -> Expr:
    """
    Numerically fold an expression.

    In numeric mode the substitutions are applied, pi/e/gamma/phi become
    floats and exact numbers become floats (integer exponents stay exact);
    ``I`` stays symbolic. In symbolic mode the expression is returned
    unchanged.
    """
    ctx = context if context is not None else EvalContext()
    if not ctx.numeric:
        return expr
    table = _normalize_mapping(ctx.substitutions)
    if table:
        expr = _substitute(expr, table)
    folded = _to_floats(expr)
    return simplify(folded) if ctx.simplify else folded


def _to_floats(expr: Expr) -> Expr:
    if isinstance(expr, Const):
        return expr if expr.number.is_float() else Const(float(expr.number))
    if isinstance(expr, MathConstant):
        value = CONSTANT_VALUES.get(expr.kind)
        return expr if value is None else Const(value)
    if isinstance(expr, Pow):
        exponent = expr.exponent
        if isinstance(exponent, Const) and exponent.number.is_integer():
            return Pow(_to_floats(expr.base), exponent)
        return Pow(_to_floats(expr.base), _to_floats(exponent))
    children = expr.children()
    if not children:
        return expr
    return expr.with_children([_to_floats(c) for c in children])


def evalf(expr: Expr, values: Optional[Mapping[SymbolLike, ExprLike]] = None) -> Union[float, complex]:
    """
    Evaluate to a Python number.

    Raises:
        DomainError: If the result is not a number (free symbols remain,
                     or the value is outside a function's real domain).
    """
    result = evaluate(expr, EvalContext(substitutions=values or {}))
    if isinstance(result, Const):
        return float(result.number)
    if isinstance(result, Complex) and isinstance(result.real, Const) and isinstance(result.imag, Const):
        return complex(float(result.real.number), float(result.imag.number))
    raise DomainError('evalf', result, 'expression does not evaluate to a number')
