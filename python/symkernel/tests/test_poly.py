# SymKernel - Polynomial Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for the dense/sparse polynomial types and the expression-level
polynomial routines.
"""

import pytest
from fractions import Fraction

from symkernel import (
    Const, symbol, symbols, sin, sqrt, simplify,
    coefficients, degree, leading_coefficient, polynomial_div,
    NotAPolynomial, DivisionByZero, VariableCountError,
)
from symkernel.poly import UniPoly, MultiPoly, to_poly, to_unipoly, monomial_key


class TestUniPoly:
    """Dense univariate arithmetic over Q."""

    def test_trailing_zeros_trimmed(self):
        p = UniPoly([1, 2, 0, 0])
        assert p.degree == 1
        assert UniPoly().degree == -1

    def test_arithmetic(self):
        x = UniPoly.x()
        p = x * x - UniPoly.constant(1)
        assert p.coeffs == (-1, 0, 1)
        assert (p + UniPoly.constant(1)).coeffs == (0, 0, 1)

    def test_power(self):
        p = UniPoly([1, 1]) ** 3
        assert p.coeffs == (1, 3, 3, 1)
        assert UniPoly([5, 7]) ** 0 == UniPoly.constant(1)

    def test_divmod(self):
        """(x**3 - 1) = (x - 1)(x**2 + x + 1)."""
        q, r = UniPoly([-1, 0, 0, 1]).divmod(UniPoly([-1, 1]))
        assert q.coeffs == (1, 1, 1)
        assert r.is_zero()

    def test_divmod_with_remainder(self):
        q, r = UniPoly([1, 0, 1]).divmod(UniPoly([0, 2]))
        assert q.coeffs == (0, Fraction(1, 2))
        assert r.coeffs == (1,)

    def test_division_by_zero(self):
        with pytest.raises(DivisionByZero):
            UniPoly([1, 1]).divmod(UniPoly())

    def test_exact_div_rejects_remainder(self):
        with pytest.raises(ValueError):
            UniPoly([1, 0, 1]).exact_div(UniPoly([1, 1]))

    def test_primitive(self):
        """-2/3 x - 4/3 = (-2/3) * (x + 2)."""
        c, prim = UniPoly([Fraction(-4, 3), Fraction(-2, 3)]).primitive()
        assert c == Fraction(-2, 3)
        assert prim.coeffs == (2, 1)

    def test_derivative_and_evaluate(self):
        p = UniPoly([1, 0, 3])
        assert p.derivative().coeffs == (0, 6)
        assert p.evaluate(2) == 13

    def test_compose(self):
        """p(x + 1) for p = x**2."""
        p = UniPoly([0, 0, 1]).compose(UniPoly([1, 1]))
        assert p.coeffs == (1, 2, 1)

    def test_euclidean_gcd_monic(self):
        a = UniPoly([-1, 0, 1])
        b = UniPoly([-2, 2])
        assert a.euclidean_gcd(b).coeffs == (-1, 1)

    def test_to_expr(self):
        x = symbol('x')
        assert UniPoly([1, 2, 3]).to_expr(x) == simplify(3 * x ** 2 + 2 * x + 1)


class TestMultiPoly:
    """Sparse multivariate arithmetic."""

    def test_zero_terms_dropped(self):
        p = MultiPoly({(1, 0): 0, (0, 1): 2}, 2)
        assert len(p) == 1

    def test_wrong_monomial_length(self):
        with pytest.raises(VariableCountError):
            MultiPoly({(1,): 1}, 2)

    def test_mixed_variable_counts(self):
        with pytest.raises(VariableCountError):
            MultiPoly.variable(0, 1) + MultiPoly.variable(0, 2)

    def test_product_and_degrees(self):
        x = MultiPoly.variable(0, 2)
        y = MultiPoly.variable(1, 2)
        p = (x + y) ** 2
        assert p.terms == {(2, 0): 1, (1, 1): 2, (0, 2): 1}
        assert p.total_degree() == 2
        assert p.degree(1) == 2

    def test_leading_term_orders(self):
        """x*y**2 vs x**2: lex prefers x**2, grlex prefers x*y**2."""
        p = MultiPoly({(1, 2): 1, (2, 0): 1}, 2)
        assert p.leading_monomial(monomial_key('lex')) == (2, 0)
        assert p.leading_monomial(monomial_key('grlex')) == (1, 2)

    def test_divmod_remainder(self):
        """x**2 + y divided by x leaves y."""
        x = MultiPoly.variable(0, 2)
        y = MultiPoly.variable(1, 2)
        (q,), r = (x * x + y).divmod([x])
        assert q == x
        assert r == y

    def test_exact_div(self):
        x = MultiPoly.variable(0, 2)
        y = MultiPoly.variable(1, 2)
        assert (x * x - y * y).exact_div(x - y) == x + y
        assert (x * x + y).exact_div(x) is None

    def test_evaluate(self):
        x = MultiPoly.variable(0, 2)
        y = MultiPoly.variable(1, 2)
        p = x * y + x
        assert p.evaluate(1, 3) == x * 4
        assert p.evaluate_all([2, 3]) == 8

    def test_primitive_sign(self):
        p = MultiPoly({(1, 0): -6, (0, 1): 4}, 2)
        c, prim = p.primitive()
        assert c == -2
        assert prim.terms == {(1, 0): 3, (0, 1): -2}

    def test_to_unipoly_rejects_other_variables(self):
        p = MultiPoly({(1, 1): 1}, 2)
        with pytest.raises(NotAPolynomial):
            p.to_unipoly(0)


class TestConversion:
    """Reading expressions as polynomials."""

    def test_to_poly(self):
        x, y = symbols('x y')
        p = to_poly(x ** 2 * y + 3, [x, y])
        assert p.terms == {(2, 1): 1, (0, 0): 3}

    def test_to_poly_expands_powers(self):
        x = symbol('x')
        assert to_unipoly((x + 1) ** 2, x).coeffs == (1, 2, 1)

    def test_negative_exponent_rejected(self):
        x = symbol('x')
        with pytest.raises(NotAPolynomial) as exc_info:
            to_unipoly(x ** -1, x)
        assert exc_info.value.reason == 'negative exponent'

    def test_transcendental_rejected(self):
        x = symbol('x')
        with pytest.raises(NotAPolynomial):
            to_unipoly(sin(x) + 1, x)

    def test_symbolic_coefficient_rejected(self):
        x, a = symbols('x a')
        with pytest.raises(NotAPolynomial):
            to_unipoly(a * x, x)

    def test_constant_radical_coefficient_rejected(self):
        x = symbol('x')
        with pytest.raises(NotAPolynomial):
            to_unipoly(sqrt(Const(2)) * x, x)


class TestCoefficients:
    """Symbolic-coefficient view."""

    def test_collects_by_power(self):
        x, a, b = symbols('x a b')
        coeffs = dict(coefficients(a * x ** 2 + b * x + x + 4, x))
        assert coeffs[2] == a
        assert coeffs[1] == simplify(b + 1)
        assert coeffs[0] == Const(4)

    def test_expands_first(self):
        x = symbol('x')
        assert coefficients((x + 1) * (x - 1), x) == [(0, Const(-1)), (2, Const(1))]

    def test_degree_and_leading_coefficient(self):
        x, a = symbols('x a')
        e = a * x ** 3 + x
        assert degree(e, x) == 3
        assert leading_coefficient(e, x) == a

    def test_zero_polynomial_degree(self):
        x = symbol('x')
        assert degree(x - x, x) == -1

    def test_non_polynomial(self):
        x = symbol('x')
        with pytest.raises(NotAPolynomial):
            coefficients(sqrt(x) + 1, x)


class TestPolynomialDivision:
    """Expression-level long division."""

    def test_exact_quotient(self):
        x = symbol('x')
        q, r = polynomial_div(x ** 2 - 1, x - 1)
        assert q == simplify(x + 1)
        assert r == Const(0)

    def test_with_remainder(self):
        x = symbol('x')
        q, r = polynomial_div(x ** 3 + 2, x ** 2)
        assert q == x
        assert r == Const(2)

    def test_parametric_coefficients(self):
        """(x**2 + a*x) / (x + a) = x, remainder 0."""
        x, a = symbols('x a')
        q, r = polynomial_div(x ** 2 + a * x, x + a, x)
        assert q == x
        assert r == Const(0)

    def test_requires_variable_when_ambiguous(self):
        x, y = symbols('x y')
        with pytest.raises(VariableCountError):
            polynomial_div(x + y, x)

    def test_zero_divisor(self):
        x = symbol('x')
        with pytest.raises(DivisionByZero):
            polynomial_div(x, Const(0), x)
