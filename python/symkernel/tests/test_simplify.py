# SymKernel - Simplification Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for canonical simplification and expansion.
"""

import math
import pytest
from fractions import Fraction

from symkernel import (
    Const, Add, Mul, Pow, Function, FiniteSet, Relation, Boolean, Undefined, Piecewise,
    symbol, symbols, matrix_symbol, operator_symbol, mul, pow_, complex_, finite_set,
    eq, relation, piecewise, sin, cos, tan, exp, ln, sqrt, abs_, pi, E, I, oo,
    simplify, expand, clear_cache, cache_info, Config,
)


class TestArithmetic:
    """Constant folding and identity laws."""

    def test_rational_sum(self):
        """1/2 + 1/3 folds to 5/6."""
        result = simplify(Const(Fraction(1, 2)) + Const(Fraction(1, 3)))
        assert result == Const(Fraction(5, 6))
        assert result.number.is_exact()

    def test_mixed_kinds(self):
        """2 + 1/3 = 7/3 exactly."""
        assert simplify(Const(2) + Const(Fraction(1, 3))) == Const(Fraction(7, 3))

    def test_like_terms(self):
        """2x + 3x + x = 6x."""
        x = symbol('x')
        assert simplify(2 * x + 3 * x + x) == 6 * x

    def test_self_subtraction(self):
        x = symbol('x')
        assert simplify(x - x) == Const(0)

    def test_zero_product(self):
        x = symbol('x')
        assert simplify(x * 0) == Const(0)

    def test_self_division(self):
        """x / x cancels through base combining."""
        x = symbol('x')
        assert simplify(x / x) == Const(1)

    def test_like_bases(self):
        x = symbol('x')
        assert simplify(x * x ** 2) == x ** 3

    def test_numeric_distributes_over_sum(self):
        """2*(x + 1) and 2*x + 2 share a canonical form."""
        x = symbol('x')
        assert simplify(2 * (x + 1)) == simplify(2 * x + 2)

    def test_big_integer_power(self):
        result = simplify(Const(2) ** 100)
        assert result == Const(2 ** 100)
        assert result.number.is_integer()


class TestCanonicalOrder:
    """Commutative reordering and non-commutative order."""

    def test_sum_order_irrelevant(self):
        x, y = symbols('x y')
        assert simplify(x + y) == simplify(y + x)

    def test_product_order_irrelevant(self):
        x, y = symbols('x y')
        assert simplify(x * y * 3) == simplify(3 * y * x)

    def test_scalar_commutator_vanishes(self):
        """a*b - b*a == 0 for scalar symbols."""
        a, b = symbols('a b')
        assert simplify(a * b - b * a) == Const(0)

    def test_matrix_symbols_do_not_commute(self):
        """A*B - B*A stays non-zero for matrix symbols."""
        A, B = matrix_symbol('A'), matrix_symbol('B')
        result = simplify(A * B - B * A)
        assert result != Const(0)
        assert isinstance(result, Add)

    def test_adjacent_operator_powers(self):
        """Neighbouring equal operator factors still combine."""
        H = operator_symbol('H')
        assert simplify(H * H) == Pow(H, Const(2))

    def test_scalars_move_past_matrices(self):
        """Scalars commute with matrix symbols; matrices keep their order."""
        a = symbol('a')
        A, B = matrix_symbol('A'), matrix_symbol('B')
        assert simplify(A * a * B) == simplify(a * A * B)

    def test_finite_set_sorted(self):
        result = simplify(finite_set(3, 1, 2, 1))
        assert result == FiniteSet((Const(1), Const(2), Const(3)))


class TestPowers:
    """Power laws and radicals."""

    def test_power_of_power_integer(self):
        x = symbol('x')
        assert simplify((x ** 2) ** 3) == x ** 6

    def test_power_of_power_branch_cut(self):
        """(x**2)**(1/2) is not x."""
        x = symbol('x')
        result = simplify(sqrt(x ** 2))
        assert isinstance(result, Pow)
        assert result.base == x ** 2

    def test_perfect_square_root(self):
        assert simplify(sqrt(Const(4))) == Const(2)

    def test_extract_square_factor(self):
        """sqrt(8) = 2*sqrt(2)."""
        assert simplify(sqrt(Const(8))) == 2 * sqrt(Const(2))

    def test_rational_exponent(self):
        """8**(2/3) = 4."""
        assert simplify(Const(8) ** Const(Fraction(2, 3))) == Const(4)

    def test_sqrt_minus_one(self):
        assert simplify(sqrt(Const(-1))) == I

    def test_i_squared(self):
        assert simplify(I ** 2) == Const(-1)

    def test_e_power_is_exp(self):
        x = symbol('x')
        assert simplify(E ** x) == exp(x)

    def test_product_power_distributes(self):
        """(2*x)**2 = 4*x**2 for commuting factors."""
        x = symbol('x')
        assert simplify((2 * x) ** 2) == simplify(4 * x ** 2)


class TestUndefinedForms:
    """Undefined forms become the Undefined leaf and never raise."""

    def test_zero_over_zero(self):
        assert isinstance(simplify(Const(0) * Const(0) ** -1), Undefined)

    def test_zero_to_zero(self):
        assert isinstance(simplify(Pow(Const(0), Const(0))), Undefined)

    def test_infinity_minus_infinity(self):
        assert isinstance(simplify(oo - oo), Undefined)

    def test_zero_times_infinity(self):
        assert isinstance(simplify(mul(0, oo)), Undefined)

    def test_undefined_absorbs(self):
        x = symbol('x')
        assert isinstance(simplify(x + Undefined()), Undefined)

    def test_division_by_zero(self):
        assert isinstance(simplify(Const(1) / Const(0)), Undefined)


class TestFunctions:
    """Special values, parity and inverse pairs."""

    def test_trig_special_values(self):
        assert simplify(sin(Const(0))) == Const(0)
        assert simplify(cos(pi)) == Const(-1)
        assert simplify(sin(pi / 6)) == Const(Fraction(1, 2))

    def test_periodicity(self):
        """sin(2*pi + pi/2) folds to sin(pi/2) = 1."""
        assert simplify(sin(Const(Fraction(5, 2)) * pi)) == Const(1)

    def test_odd_parity(self):
        x = symbol('x')
        assert simplify(sin(-x)) == simplify(-sin(x))

    def test_even_parity(self):
        x = symbol('x')
        assert simplify(cos(-x)) == cos(x)

    def test_tan_pole_stays_symbolic(self):
        result = simplify(tan(pi / 2))
        assert isinstance(result, Function)
        assert result.name == 'tan'

    def test_exp_ln_inverse(self):
        x = symbol('x')
        assert simplify(exp(ln(x))) == x
        assert simplify(ln(exp(x))) == x

    def test_log_special_values(self):
        assert simplify(ln(Const(1))) == Const(0)
        assert simplify(ln(E)) == Const(1)
        assert simplify(exp(Const(0))) == Const(1)

    def test_float_argument_evaluates(self):
        result = simplify(sin(Const(0.5)))
        assert result.number.is_float()
        assert float(result.number) == pytest.approx(math.sin(0.5))

    def test_exact_abs(self):
        assert simplify(abs_(Const(-3))) == Const(3)


class TestContainers:
    """Relations, piecewise, complex numbers."""

    def test_relation_moves_to_zero_form(self):
        x = symbol('x')
        result = simplify(eq(x + 1, 3))
        assert result == Relation(simplify(x - 2), Const(0))

    def test_numeric_relation_evaluates(self):
        assert simplify(eq(Const(2), Const(2))) == Boolean(True)
        assert simplify(relation(Const(1), Const(2), '>')) == Boolean(False)

    def test_piecewise_first_true_wins(self):
        x = symbol('x')
        p = piecewise([(Boolean(False), 1), (Boolean(True), x)], 0)
        assert simplify(p) == x

    def test_piecewise_symbolic_condition_kept(self):
        x = symbol('x')
        p = piecewise([(relation(x, 0, '<'), -x)], x)
        assert isinstance(simplify(p), Piecewise)

    def test_complex_zero_imaginary(self):
        assert simplify(complex_(1, 0)) == Const(1)


class TestFixedPoint:
    """Idempotence and the cache."""

    def test_idempotent(self):
        x, y = symbols('x y')
        e = sin(x) * y + 2 * x ** 2 * y - exp(x + 0) + 3
        once = simplify(e)
        assert simplify(once) == once

    def test_float_and_exact_not_confused(self):
        """Const(2) == Const(2.0) structurally, but the cache keeps them apart."""
        clear_cache()
        x = symbol('x')
        exact = simplify(x + Const(2))
        inexact = simplify(x + Const(2.0))
        assert exact.terms[0].number.is_exact()
        assert inexact.terms[0].number.is_float()

    def test_cache_counts_hits(self):
        clear_cache()
        x = symbol('x')
        simplify(x + x)
        simplify(x + x)
        assert cache_info().hits >= 1

    def test_cache_disabled(self):
        clear_cache()
        x = symbol('x')
        cfg = Config(use_cache=False)
        simplify(x * 3 + x, cfg)
        assert cache_info().size == 0


class TestExpand:
    """Distribution and multinomial expansion."""

    def test_distribute(self):
        x, y = symbols('x y')
        assert expand(x * (y + 1)) == simplify(x * y + x)

    def test_binomial_square(self):
        x = symbol('x')
        assert expand((x + 1) ** 2) == simplify(x ** 2 + 2 * x + 1)

    def test_difference_of_squares(self):
        x = symbol('x')
        assert expand((x - 1) * (x + 1)) == simplify(x ** 2 - 1)

    def test_expand_inside_functions(self):
        x = symbol('x')
        assert expand(sin((x + 1) ** 2)) == sin(simplify(x ** 2 + 2 * x + 1))

    def test_cancellation(self):
        x = symbol('x')
        assert expand((x + 1) ** 2 - x ** 2 - 2 * x) == Const(1)


class TestComplexLiterals:
    """Numeric complex literals fold like other numbers."""

    def setup_method(self):
        self.c1 = complex_(1, 2)
        self.c2 = complex_(3, 4)

    def test_difference_cancels(self):
        assert simplify(self.c1 - self.c1) == Const(0)

    def test_product(self):
        """(1+2i)(3+4i) = -5+10i."""
        assert simplify(self.c1 * self.c2) == complex_(-5, 10)

    def test_scalar_multiple(self):
        assert simplify(2 * self.c1) == complex_(2, 4)

    def test_integer_power(self):
        assert simplify(self.c1 ** 2) == complex_(-3, 4)

    def test_quotient(self):
        """(3+4i)/(1+2i) = (11-2i)/5."""
        assert simplify(self.c1 / self.c1) == Const(1)
        assert simplify(self.c2 / self.c1) == complex_(Fraction(11, 5), Fraction(-2, 5))

    def test_equality(self):
        assert simplify(eq(self.c1, self.c1)) == Boolean(True)
        assert simplify(eq(self.c1, self.c2)) == Boolean(False)

    def test_like_terms_with_complex_coefficient(self):
        x = symbol('x')
        assert simplify(self.c1 * x - self.c1 * x) == Const(0)


class TestFloatSums:
    """Float addition does not depend on the order of the terms."""

    def test_constants(self):
        forward = simplify(Const(0.1) + Const(0.2) + Const(0.3))
        backward = simplify(Const(0.3) + Const(0.2) + Const(0.1))
        assert forward.number.value == backward.number.value

    def test_coefficients(self):
        x = symbol('x')
        forward = simplify(Const(0.1) * x + Const(0.2) * x + Const(0.3) * x)
        backward = simplify(Const(0.3) * x + Const(0.2) * x + Const(0.1) * x)
        assert forward == backward
