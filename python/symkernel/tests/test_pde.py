# SymKernel - Laplace Equation Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""Tests for the separation-of-variables Laplace solver."""

import pytest

from symkernel import (
    pi, symbol, symbols, simplify, evalf, derivative,
    solve_laplace_2d, LaplaceSolution, DomainError, VariableCountError,
)


class TestLaplace2D:

    def test_shape_of_result(self):
        x, y = symbols('x y')
        result = solve_laplace_2d([x, y], terms=3)
        assert isinstance(result, LaplaceSolution)
        assert len(result.x_eigenvalues) == 3
        assert len(result.y_eigenvalues) == 3
        assert result.coefficients == [symbol('C_1'), symbol('C_2'), symbol('C_3')]
        assert result.coefficients_symbolic

    def test_unit_square_eigenvalues(self):
        """On the unit square lambda_n = n pi."""
        x, y = symbols('x y')
        result = solve_laplace_2d([x, y], terms=4)
        for n, lam in enumerate(result.x_eigenvalues, start=1):
            assert lam == simplify(n * pi)

    def test_width_scales_eigenvalues(self):
        x, y = symbols('x y')
        result = solve_laplace_2d([x, y], width=2, terms=2)
        assert result.x_eigenvalues[1] == simplify(pi)
        assert result.y_eigenvalues[1] == simplify(2 * pi)

    def test_symbolic_width(self):
        x, y, a = symbols('x y a')
        result = solve_laplace_2d([x, y], width=a, terms=1)
        assert result.x_eigenvalues[0] == simplify(pi / a)

    def test_satisfies_laplace(self):
        """u_xx + u_yy vanishes at sample points."""
        x, y = symbols('x y')
        u = solve_laplace_2d([x, y], terms=2).solution
        lap = derivative(u, x, 2) + derivative(u, y, 2)
        values = {x: 0.3, y: 0.4, symbol('C_1'): 1.0, symbol('C_2'): -0.5}
        assert evalf(lap, values) == pytest.approx(0, abs=1e-9)

    def test_boundary_vanishes(self):
        x, y = symbols('x y')
        u = solve_laplace_2d([x, y], terms=2).solution
        values = {symbol('C_1'): 1.0, symbol('C_2'): 2.0}
        assert evalf(u, {**values, x: 0.0, y: 0.5}) == pytest.approx(0, abs=1e-12)
        assert evalf(u, {**values, x: 0.5, y: 0.0}) == pytest.approx(0, abs=1e-12)
        assert evalf(u, {**values, x: 1.0, y: 0.5}) == pytest.approx(0, abs=1e-9)


class TestLaplaceErrors:

    def test_wrong_variable_count(self):
        x = symbol('x')
        with pytest.raises(VariableCountError):
            solve_laplace_2d([x])

    def test_no_terms(self):
        x, y = symbols('x y')
        with pytest.raises(DomainError):
            solve_laplace_2d([x, y], terms=0)

    def test_non_positive_side(self):
        x, y = symbols('x y')
        with pytest.raises(DomainError):
            solve_laplace_2d([x, y], width=0)
        with pytest.raises(DomainError):
            solve_laplace_2d([x, y], height=-1)
