# SymKernel - Resultant and Groebner Basis Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for Sylvester resultants, discriminants and Buchberger's algorithm.
"""

import pytest

from symkernel import (
    Const, symbol, symbols, simplify, substitute, Config,
    polynomial_resultant, discriminant, groebner_basis, groebner_reduce,
    MaxIterationsExceeded, NotAPolynomial,
)
from symkernel.groebner import buchberger, reduce_basis, s_polynomial
from symkernel.poly import MultiPoly, monomial_key
from symkernel.resultant import bareiss_determinant, sylvester_matrix


class TestResultant:
    """Resultants vanish exactly on common roots."""

    def test_common_root(self):
        x = symbol('x')
        assert polynomial_resultant(x ** 2 - 1, x - 1, x) == Const(0)

    def test_no_common_root(self):
        """res(x**2 + 1, x - 2) = (2 - i)(2 + i) = 5."""
        x = symbol('x')
        assert polynomial_resultant(x ** 2 + 1, x - 2, x) == Const(5)

    def test_eliminates_variable(self):
        """res_y(x - y, x + y - 2) leaves a polynomial in x vanishing at x = 1."""
        x, y = symbols('x y')
        r = polynomial_resultant(x - y, x + y - 2, y)
        assert not r.has("y")
        assert substitute(r, {x: 1}) == Const(0)

    def test_constant_argument(self):
        x = symbol('x')
        assert polynomial_resultant(Const(3), x ** 2 + 1, x) == Const(9)

    def test_sylvester_shape(self):
        x = MultiPoly.variable(0, 1)
        one = MultiPoly.constant(1, 1)
        rows = sylvester_matrix(x * x - one, x - one, 0)
        assert len(rows) == 3
        assert all(len(row) == 3 for row in rows)

    def test_bareiss_identity(self):
        one, zero = MultiPoly.constant(1, 1), MultiPoly.zero(1)
        det = bareiss_determinant([[one, zero], [zero, one]], 1)
        assert det == one

    def test_rejects_non_polynomial(self):
        x = symbol('x')
        with pytest.raises(NotAPolynomial):
            polynomial_resultant(x ** -1, x, x)


class TestDiscriminant:

    def test_general_quadratic(self):
        """disc(a*x**2 + b*x + c) = b**2 - 4*a*c."""
        x, a, b, c = symbols('x a b c')
        assert discriminant(a * x ** 2 + b * x + c, x) == simplify(b ** 2 - 4 * a * c)

    def test_double_root(self):
        x = symbol('x')
        assert discriminant(x ** 2 - 2 * x + 1, x) == Const(0)

    def test_numeric_quadratic(self):
        x = symbol('x')
        assert discriminant(x ** 2 - 5 * x + 6, x) == Const(1)

    def test_linear(self):
        x = symbol('x')
        assert discriminant(3 * x + 1, x) == Const(1)


class TestGroebner:
    """Reduced bases, ideal membership and the iteration bound."""

    def test_lex_basis(self):
        x, y = symbols('x y')
        basis = groebner_basis([x ** 2 + y, x * y - 1], order='lex')
        assert basis == [simplify(x + y ** 2), simplify(y ** 3 + 1)]

    def test_whole_ring(self):
        """Contradictory generators give the unit ideal."""
        x = symbol('x')
        assert groebner_basis([x, x - 1]) == [Const(1)]

    def test_linear_system(self):
        """A linear ideal's lex basis is the solved system."""
        x, y = symbols('x y')
        basis = groebner_basis([x + y - 3, x - y - 1], order='lex')
        assert basis == [simplify(x - 2), simplify(y - 1)]

    def test_member_reduces_to_zero(self):
        x, y = symbols('x y')
        gens = [x ** 2 + y, x * y - 1]
        member = x * gens[0] + y * gens[1]
        assert groebner_reduce(member, gens) == Const(0)

    def test_non_member_remainder(self):
        x, y = symbols('x y')
        rem = groebner_reduce(x, [x ** 2 + y, x * y - 1], order='lex')
        assert rem == simplify(-y ** 2)

    def test_iteration_bound(self):
        x, y = symbols('x y')
        with pytest.raises(MaxIterationsExceeded) as exc_info:
            groebner_basis([x ** 2 + y, x * y - 1], order='lex', config=Config(max_iterations=1))
        assert exc_info.value.limit == 1

    def test_s_polynomial_cancels_leads(self):
        key = monomial_key('lex')
        x, y = MultiPoly.variable(0, 2), MultiPoly.variable(1, 2)
        s = s_polynomial(x * x + y, x * y - MultiPoly.constant(1, 2), key)
        assert s.leading_monomial(key) != (2, 1)

    def test_reduced_basis_is_monic(self):
        key = monomial_key('grlex')
        x, y = MultiPoly.variable(0, 2), MultiPoly.variable(1, 2)
        basis = reduce_basis(buchberger([x * 2 - y * 4, y * 3], key), key)
        assert all(p.leading_coefficient(key) == 1 for p in basis)
