# SymKernel - Expression Tests
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Tests for expression construction, structural equality and traversal.
"""

import pytest
from fractions import Fraction

from symkernel import (
    Symbol, SymbolType, Const, Variable, Add, Mul, Pow, Function, Matrix, MatrixStorage,
    FiniteSet, Integral, DefiniteIntegral, Sum, Limit, Undefined, Boolean,
    symbol, symbols, matrix_symbol, operator_symbol, rational, float_, integer,
    add, mul, pow_, neg, sub, div, function, matrix, sparse_matrix, symmetric_matrix,
    diagonal_matrix, identity_matrix, finite_set, interval, relation, eq,
    derivative_of, integral_of, definite_integral_of, limit_of, sum_of,
    sin, cos, exp, sqrt, pi, DimensionMismatch,
)


class TestSymbols:
    """Symbol identity and type tags."""

    def test_symbol_equality_uses_type(self):
        """Same name with a different type tag is a different symbol."""
        assert Symbol('A') == Symbol('A')
        assert Symbol('A') != Symbol('A', SymbolType.MATRIX)

    def test_symbol_type_from_string(self):
        assert Symbol('A', 'matrix').symbol_type is SymbolType.MATRIX

    def test_empty_name_rejected(self):
        with pytest.raises(ValueError):
            Symbol('')

    def test_symbols_helper(self):
        x, y = symbols('x y')
        assert x.name == 'x'
        assert y.name == 'y'

    def test_matrix_symbol_is_not_commutative(self):
        A = matrix_symbol('A')
        assert not A.symbol.is_commutative()
        assert symbol('a').symbol.is_commutative()

    def test_operator_symbol_type(self):
        assert operator_symbol('H').symbol_type is SymbolType.OPERATOR


class TestConstruction:
    """Factories and operator overloading."""

    def test_const_wraps_number(self):
        c = Const(3)
        assert c.value == 3
        assert Const(2) == Const(2.0)

    def test_rational_constructor(self):
        assert rational(2, 4).value == Fraction(1, 2)

    def test_float_constructor(self):
        assert float_(0.5).number.is_float()
        assert integer(7).value == 7

    def test_add_flattens_and_folds(self):
        """Nested sums flatten and numeric terms merge."""
        x, y = symbols('x y')
        e = add(add(x, 1), add(y, 2))
        assert isinstance(e, Add)
        assert e.terms[0] == Const(3)
        assert set(e.terms[1:]) == {x, y}

    def test_add_drops_zero(self):
        x = symbol('x')
        assert add(x, 0) == x
        assert add() == Const(0)

    def test_mul_drops_one(self):
        x = symbol('x')
        assert mul(x, 1) == x
        assert mul() == Const(1)

    def test_mul_keeps_factor_order(self):
        """The factory does not sort factors."""
        A, B = matrix_symbol('A'), matrix_symbol('B')
        assert mul(A, B).factors == (A, B)
        assert mul(A, B) != mul(B, A)

    def test_pow_identities(self):
        x = symbol('x')
        assert pow_(x, 1) == x
        assert pow_(x, 0) == Const(1)
        assert isinstance(pow_(0, 0), Undefined)

    def test_operators(self):
        """Python operators build the expected nodes."""
        x = symbol('x')
        assert x + 1 == add(x, 1)
        assert 2 * x == mul(2, x)
        assert x - 1 == sub(x, 1)
        assert -x == neg(x)
        assert x / 2 == div(x, 2)
        assert x ** 2 == Pow(x, Const(2))
        assert 2 ** x == Pow(Const(2), x)

    def test_sqrt_is_half_power(self):
        x = symbol('x')
        assert sqrt(x) == Pow(x, Const(Fraction(1, 2)))

    def test_function(self):
        x = symbol('x')
        f = function('f', x, 2)
        assert isinstance(f, Function)
        assert f.args == (x, Const(2))
        with pytest.raises(ValueError):
            function('', x)

    def test_bool_becomes_boolean(self):
        x = symbol('x')
        assert add(x, True).terms[-1] == Boolean(True)

    def test_bad_operand(self):
        x = symbol('x')
        with pytest.raises(TypeError):
            x + "one"


class TestMatrixLiterals:
    """Storage layouts and entry access."""

    def test_dense(self):
        m = matrix([[1, 2], [3, 4]])
        assert m.shape == (2, 2)
        assert m.entry(1, 0) == Const(3)

    def test_ragged_rows_rejected(self):
        with pytest.raises(DimensionMismatch):
            matrix([[1, 2], [3]])

    def test_sparse_defaults_to_zero(self):
        m = sparse_matrix(3, 3, [(0, 2, 5)])
        assert m.storage is MatrixStorage.SPARSE
        assert m.entry(0, 2) == Const(5)
        assert m.entry(1, 1) == Const(0)

    def test_sparse_out_of_range(self):
        with pytest.raises(DimensionMismatch):
            sparse_matrix(2, 2, [(2, 0, 1)])

    def test_symmetric_mirror(self):
        """Entries below the diagonal mirror the upper triangle."""
        m = symmetric_matrix([[1, 2], [3]])
        assert m.entry(1, 0) == Const(2)
        assert m.entry(0, 1) == Const(2)
        assert m.entry(1, 1) == Const(3)

    def test_diagonal_and_identity(self):
        d = diagonal_matrix([4, 5])
        assert d.entry(1, 1) == Const(5)
        assert d.entry(0, 1) == Const(0)
        i3 = identity_matrix(3)
        assert i3.entry(2, 2) == Const(1)
        assert i3.children() == ()

    def test_entry_out_of_range(self):
        with pytest.raises(IndexError):
            matrix([[1]]).entry(1, 0)

    def test_rows_dense_view(self):
        assert identity_matrix(2).rows() == ((Const(1), Const(0)), (Const(0), Const(1)))


class TestStructure:
    """Equality, hashing, traversal and free symbols."""

    def test_structural_equality_and_hash(self):
        x = symbol('x')
        a = sin(x) + 1
        b = sin(symbol('x')) + 1
        assert a == b
        assert hash(a) == hash(b)
        assert len({a, b}) == 1

    def test_walk_is_preorder(self):
        x = symbol('x')
        e = sin(x + 1)
        nodes = list(e.walk())
        assert nodes[0] == e
        assert nodes[1] == x + 1
        assert x in nodes

    def test_free_symbols(self):
        x, y = symbols('x y')
        e = exp(x) * y + pi
        assert e.free_symbols() == frozenset({x.symbol, y.symbol})
        assert e.has('x')
        assert not e.has('z')

    def test_bound_variable_not_free(self):
        """Definite integrals, sums and limits bind their variable."""
        x, n, a = symbols('x n a')
        assert definite_integral_of(x * a, x, 0, 1).free_symbols() == frozenset({a.symbol})
        assert sum_of(n, n, 1, a).free_symbols() == frozenset({a.symbol})
        assert limit_of(sin(x) / x, x, 0).free_symbols() == frozenset()

    def test_indefinite_integral_keeps_variable(self):
        x = symbol('x')
        node = integral_of(x ** 2, x)
        assert isinstance(node, Integral)
        assert x.symbol in node.free_symbols()

    def test_derivative_order_validation(self):
        x = symbol('x')
        assert derivative_of(x, x, 2).order == 2
        with pytest.raises(ValueError):
            derivative_of(x, x, -1)

    def test_limit_direction_validation(self):
        x = symbol('x')
        with pytest.raises(ValueError):
            limit_of(x, x, 0, 'left')

    def test_with_children_round_trip(self):
        x, y = symbols('x y')
        e = cos(x) * y
        assert e.with_children(e.children()) == e

    def test_finite_set_dedups(self):
        x = symbol('x')
        s = finite_set(x, 1, x)
        assert isinstance(s, FiniteSet)
        assert len(s) == 2
        assert 1 in s

    def test_relation_constructors(self):
        x = symbol('x')
        r = eq(x, 1)
        assert r.lhs == x
        assert relation(x, 1, '<').kind.value == '<'

    def test_interval_bounds(self):
        i = interval(0, 1, end_inclusive=False)
        assert i.start == Const(0)
        assert not i.end_inclusive
