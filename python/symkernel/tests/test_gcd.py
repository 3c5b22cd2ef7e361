# SymKernel - GCD Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for Z_p arithmetic, the modular and sparse-interpolation GCD
algorithms, and the expression-level GCD helpers.
"""

import pytest
from fractions import Fraction

from symkernel import (
    Const, symbol, symbols, simplify, GcdConfig, Config,
    polynomial_gcd, polynomial_lcm, polynomial_div, content, primitive_part,
    ConvergenceFailed, DivisionByZero, NotAPolynomial,
)
from symkernel.finite_field import (
    LARGE_PRIMES, ZpPoly, is_prime, mod_inverse, symmetric_mod, crt_pair, interpolate,
)
from symkernel.gcd import modular_gcd, multivariate_gcd, prs_gcd
from symkernel.poly import UniPoly, MultiPoly
from symkernel.zippel import zippel_gcd, CrtState


def _xy():
    return MultiPoly.variable(0, 2), MultiPoly.variable(1, 2)


class TestFiniteField:
    """Scalar and polynomial arithmetic modulo a prime."""

    def test_prime_table(self):
        """The table holds distinct primes just below 2**31, largest first."""
        assert all(is_prime(p) for p in LARGE_PRIMES[:8])
        assert LARGE_PRIMES[0] == 2 ** 31 - 1
        assert list(LARGE_PRIMES) == sorted(LARGE_PRIMES, reverse=True)

    def test_is_prime(self):
        assert is_prime(2)
        assert is_prime(97)
        assert not is_prime(91)
        assert not is_prime(1)

    def test_mod_inverse(self):
        assert mod_inverse(3, 7) == 5
        with pytest.raises(DivisionByZero):
            mod_inverse(7, 7)

    def test_symmetric_mod(self):
        assert symmetric_mod(6, 7) == -1
        assert symmetric_mod(3, 7) == 3

    def test_crt_pair(self):
        """x = 2 (mod 3), x = 3 (mod 5) -> x = 8 (mod 15)."""
        assert crt_pair(2, 3, 3, 5) == (8, 15)

    def test_zp_product(self):
        """(x + 1)(x - 1) = x**2 - 1 over Z_7."""
        p = ZpPoly((1, 1), 7) * ZpPoly((-1, 1), 7)
        assert p.coeffs == (6, 0, 1)

    def test_zp_gcd_is_monic(self):
        a = ZpPoly((1, 1), 7) * ZpPoly((2, 3), 7)
        b = ZpPoly((1, 1), 7) * ZpPoly((5, 1), 7)
        assert a.gcd(b) == ZpPoly((1, 1), 7)

    def test_zp_moduli_must_match(self):
        with pytest.raises(ValueError):
            ZpPoly((1,), 5) + ZpPoly((1,), 7)

    def test_interpolate(self):
        """Three points determine x**2 + 1 over Z_11."""
        poly = interpolate([1, 2, 3], [2, 5, 10], 11)
        assert poly.coeffs == (1, 0, 1)


class TestModularGcd:
    """Univariate GCD over Q."""

    def test_common_linear_factor(self):
        f = UniPoly([-1, 0, 1])
        g = UniPoly([-1, 1])
        assert modular_gcd(f, g).coeffs == (-1, 1)

    def test_coprime(self):
        f = UniPoly([1, 0, 1])
        g = UniPoly([-1, 1])
        assert modular_gcd(f, g) == UniPoly.constant(1)

    def test_content_is_kept(self):
        """gcd(2x**2 - 2, 4x - 4) = 2(x - 1)."""
        f = UniPoly([-2, 0, 2])
        g = UniPoly([-4, 4])
        assert modular_gcd(f, g).coeffs == (-2, 2)

    def test_rational_content(self):
        """Contents 1/2 and 1/3 give 1/6."""
        f = UniPoly([Fraction(-1, 2), Fraction(1, 2)])
        g = UniPoly([Fraction(-1, 3), 0, Fraction(1, 3)])
        assert modular_gcd(f, g).coeffs == (Fraction(-1, 6), Fraction(1, 6))

    def test_zero_argument(self):
        g = UniPoly([-3, 6])
        assert modular_gcd(UniPoly(), g).coeffs == (-3, 6)

    def test_higher_degree(self):
        """Shared quadratic factor x**2 + x + 1."""
        common = UniPoly([1, 1, 1])
        f = common * UniPoly([5, 0, 3])
        g = common * UniPoly([-7, 2])
        assert modular_gcd(f, g) == common


class TestMultivariateGcd:
    """Sparse interpolation, PRS fallback and strict mode."""

    def test_zippel_difference_of_squares(self):
        x, y = _xy()
        result = zippel_gcd(x * x - y * y, x - y)
        assert result.converged
        assert result.state is CrtState.CONVERGED
        assert result.value == x - y

    def test_zippel_constant_gcd(self):
        x, y = _xy()
        result = zippel_gcd(x + y + MultiPoly.constant(1, 2), x - y)
        assert result.value == MultiPoly.constant(1, 2)

    def test_prs_gcd(self):
        x, y = _xy()
        assert prs_gcd(x * x - y * y, x - y) == x - y

    def test_prs_gcd_shared_content(self):
        """gcd(x*y + x, y**2 - 1) = y + 1."""
        x, y = _xy()
        one = MultiPoly.constant(1, 2)
        assert prs_gcd(x * y + x, y * y - one) == y + one

    def test_fallback_when_bounds_run_out(self):
        """One prime can never confirm a candidate; the PRS fallback answers."""
        x, y = _xy()
        cfg = GcdConfig(max_crt_iterations=1)
        assert multivariate_gcd(x * x - y * y, x - y, cfg) == x - y

    def test_strict_mode_raises(self):
        x, y = _xy()
        cfg = GcdConfig(max_crt_iterations=1, strict=True)
        with pytest.raises(ConvergenceFailed):
            multivariate_gcd(x * x - y * y, x - y, cfg)

    def test_failed_result_reports_diagnostic(self):
        x, y = _xy()
        result = zippel_gcd(x * x - y * y, x - y, GcdConfig(max_crt_iterations=1))
        assert result.state is CrtState.FAILED
        assert isinstance(result.diagnostic, ConvergenceFailed)


class TestExpressionGcd:
    """GCD, LCM and content on expressions."""

    def test_gcd(self):
        """gcd(x**2 - 1, x - 1) = x - 1."""
        x = symbol('x')
        assert polynomial_gcd(x ** 2 - 1, x - 1) == simplify(x - 1)

    def test_gcd_coprime(self):
        x = symbol('x')
        assert polynomial_gcd(x ** 2 + 1, x - 1) == Const(1)

    def test_gcd_numeric_content(self):
        x = symbol('x')
        assert polynomial_gcd(2 * x ** 2 - 2, 4 * x - 4) == simplify(2 * x - 2)

    def test_gcd_multivariate(self):
        x, y = symbols('x y')
        assert polynomial_gcd(x ** 2 - y ** 2, x ** 2 - 2 * x * y + y ** 2) == simplify(x - y)

    def test_gcd_is_symmetric(self):
        x = symbol('x')
        f, g = x ** 3 - x, x ** 2 + 2 * x + 1
        assert polynomial_gcd(f, g) == polynomial_gcd(g, f)

    def test_common_divisor_divides_gcd(self):
        """Any common divisor of f and g divides gcd(f, g)."""
        x = symbol('x')
        f = (x - 1) * (x + 2) * (x + 3)
        g = (x - 1) * (x + 3) * (x - 5)
        d = polynomial_gcd(f, g)
        for h in (x - 1, x + 3, (x - 1) * (x + 3)):
            assert polynomial_div(d, h, x)[1] == Const(0)
        assert polynomial_div(f, d, x)[1] == Const(0)
        assert polynomial_div(g, d, x)[1] == Const(0)

    def test_gcd_rejects_non_polynomial(self):
        x = symbol('x')
        with pytest.raises(NotAPolynomial):
            polynomial_gcd(x ** -1, x)

    def test_lcm(self):
        x = symbol('x')
        assert polynomial_lcm(x ** 2 - 1, x - 1) == simplify(x ** 2 - 1)

    def test_lcm_with_zero(self):
        x = symbol('x')
        assert polynomial_lcm(x, Const(0)) == Const(0)

    def test_numeric_content(self):
        x = symbol('x')
        assert content(6 * x ** 2 + 4 * x) == Const(2)

    def test_content_in_variable(self):
        """Content of 2*a*x + 4*a as a polynomial in x is 2*a."""
        x, a = symbols('x a')
        assert content(2 * a * x + 4 * a, x) == simplify(2 * a)

    def test_primitive_part(self):
        x = symbol('x')
        assert primitive_part(6 * x ** 2 + 4 * x) == simplify(3 * x ** 2 + 2 * x)

    def test_config_is_honoured(self):
        x, y = symbols('x y')
        cfg = Config(gcd=GcdConfig(max_crt_iterations=1))
        assert polynomial_gcd(x ** 2 - y ** 2, x + y, config=cfg) == simplify(x + y)
