# SymKernel - Substitution Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for substitution, subexpression replacement and numeric evaluation.
"""

import math
import pytest

from symkernel import (
    Const, Complex, Mul, Symbol, symbol, symbols, sin, cos, exp, ln, sqrt, pi, E, I,
    definite_integral_of, sum_of, substitute, replace, evaluate, evalf, EvalContext,
    simplify, DomainError,
)


class TestSubstitute:
    """Symbol substitution."""

    def test_numeric_value(self):
        x, y = symbols('x y')
        assert substitute(x ** 2 + y, {x: 3}) == simplify(9 + y)

    def test_accepts_names_and_symbols(self):
        x = symbol('x')
        assert substitute(x + 1, {'x': 2}) == Const(3)
        assert substitute(x + 1, {Symbol('x'): 2}) == Const(3)

    def test_expression_value(self):
        x, t = symbols('x t')
        assert substitute(sin(x), {x: 2 * t}) == sin(2 * t)

    def test_simultaneous(self):
        """x -> y and y -> x swap in one pass."""
        x, y = symbols('x y')
        assert substitute(x - 2 * y, {x: y, y: x}) == simplify(y - 2 * x)

    def test_unsimplified(self):
        x = symbol('x')
        raw = substitute(x + x, {x: 1}, simplify_result=False)
        assert raw != Const(2)
        assert simplify(raw) == Const(2)

    def test_result_is_simplified(self):
        x = symbol('x')
        assert substitute(sin(x), {x: pi}) == Const(0)

    def test_identity_mapping(self):
        x, y = symbols('x y')
        for e in (x ** 2 + 3 * x, sin(x) * y - exp(x), (x + y) ** 2 / (x - 1)):
            assert substitute(e, {x: x}) == simplify(e)

    def test_bound_variable_untouched(self):
        """The integration variable of a definite integral is not replaced."""
        x, a = symbols('x a')
        node = definite_integral_of(x * a, x, 0, a)
        result = substitute(node, {x: 5, a: 2}, simplify_result=False)
        assert result.integrand == Mul((x, Const(2)))
        assert result.upper == Const(2)

    def test_sum_index_untouched(self):
        n, m = symbols('n m')
        node = sum_of(n ** 2, n, 1, m)
        result = substitute(node, {n: 7, m: 3}, simplify_result=False)
        assert result.expr == n ** 2
        assert result.upper == Const(3)


class TestReplace:
    """Subexpression replacement."""

    def test_replace_subtree(self):
        x, t = symbols('x t')
        e = exp(x ** 2) * x
        assert replace(e, x ** 2, t) == exp(t) * x

    def test_replace_does_not_simplify(self):
        x, t = symbols('x t')
        assert replace(x + x, x, t) == t + t


class TestEvaluate:
    """Numeric folding."""

    def test_evalf_constants(self):
        assert evalf(pi) == pytest.approx(math.pi)
        assert evalf(E) == pytest.approx(math.e)

    def test_evalf_with_values(self):
        x = symbol('x')
        assert evalf(sin(x) + x ** 2, {x: 0.5}) == pytest.approx(math.sin(0.5) + 0.25)

    def test_evalf_sqrt(self):
        assert evalf(sqrt(Const(2))) == pytest.approx(math.sqrt(2))

    def test_evalf_complex(self):
        result = evalf(Complex(Const(1), Const(2)))
        assert result == complex(1, 2)

    def test_evalf_free_symbol_raises(self):
        x = symbol('x')
        with pytest.raises(DomainError):
            evalf(x + 1)

    def test_evalf_outside_domain_raises(self):
        """ln of a negative float has no real value."""
        with pytest.raises(DomainError):
            evalf(ln(Const(-1.0)))

    def test_symbolic_mode_is_identity(self):
        x = symbol('x')
        e = cos(x) + 1
        assert evaluate(e, EvalContext.symbolic()) is e

    def test_context_substitutions(self):
        x = symbol('x')
        result = evaluate(exp(x), EvalContext.with_values({x: 0}))
        assert result == Const(1.0)
        assert result.number.is_float()
