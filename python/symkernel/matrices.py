# SymKernel - Matrix Operations
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Operations on matrix literals.

Entries are arbitrary expressions; products keep the left-to-right order of
entry factors, so matrices of non-commuting symbols multiply correctly.
Determinants and inverses work over exact numbers (Fractions) when every
entry is an exact number, and over rational expressions otherwise, with
``cancel`` keeping intermediate entries reduced.

Numeric work is handed to numpy through ``to_numpy``.
"""

from __future__ import annotations
from fractions import Fraction
import logging
from typing import List, Mapping, Optional, Sequence

import numpy as np

from .exceptions import DimensionMismatch, DomainError, SingularMatrix
from .expr import (
    Expr, ExprLike, SymbolLike, Const, Matrix, MatrixStorage,
    _to_expr, add, mul, pow_, sub,
)
from .number import Number
from .ratfunc import cancel
from .simplify import simplify
from .substitution import evalf

logger = logging.getLogger(__name__)


# Exact linear algebra over Q

def solve_exact(a: Sequence[Sequence[Fraction]], b: Sequence[Fraction]) -> List[Fraction]:
    """
    Solve the square system ``a x = b`` over Q by Gauss-Jordan elimination.

    Raises:
        DimensionMismatch: If ``a`` is not square or ``b`` has the wrong length.
        SingularMatrix: If the system has no unique solution.
    """
    n = len(a)
    if any(len(row) != n for row in a):
        raise DimensionMismatch('solve_exact', 'square matrix', (n, len(a[0]) if a else 0))
    if len(b) != n:
        raise DimensionMismatch('solve_exact', n, len(b))
    m = [[Fraction(v) for v in row] + [Fraction(rhs)] for row, rhs in zip(a, b)]
    for col in range(n):
        pivot = next((r for r in range(col, n) if m[r][col] != 0), None)
        if pivot is None:
            raise SingularMatrix('solve_exact')
        m[col], m[pivot] = m[pivot], m[col]
        inv = 1 / m[col][col]
        m[col] = [v * inv for v in m[col]]
        for r in range(n):
            if r != col and m[r][col] != 0:
                factor = m[r][col]
                m[r] = [v - factor * w for v, w in zip(m[r], m[col])]
    return [row[n] for row in m]


# Shape helpers

def _as_matrix(m: Expr, operation: str) -> Matrix:
    if not isinstance(m, Matrix):
        raise DimensionMismatch(operation, 'matrix', type(m).__name__)
    return m


def _require_square(m: Matrix, operation: str) -> None:
    if m.nrows != m.ncols:
        raise DimensionMismatch(operation, 'square', m.shape)


def _dense(rows: Sequence[Sequence[Expr]]) -> Matrix:
    data = tuple(tuple(row) for row in rows)
    ncols = len(data[0]) if data else 0
    return Matrix(MatrixStorage.DENSE, len(data), ncols, data)


def to_dense(m: Matrix) -> Matrix:
    """Same matrix with DENSE storage."""
    m = _as_matrix(m, 'to_dense')
    if m.storage is MatrixStorage.DENSE:
        return m
    return Matrix(MatrixStorage.DENSE, m.nrows, m.ncols, m.rows())


# Arithmetic

def matrix_add(a: Matrix, b: Matrix) -> Matrix:
    a, b = _as_matrix(a, 'matrix_add'), _as_matrix(b, 'matrix_add')
    if a.shape != b.shape:
        raise DimensionMismatch('matrix_add', a.shape, b.shape)
    if a.storage is MatrixStorage.DIAGONAL and b.storage is MatrixStorage.DIAGONAL:
        return Matrix(MatrixStorage.DIAGONAL, a.nrows, a.ncols,
                      tuple(simplify(add(x, y)) for x, y in zip(a.data, b.data)))
    return _dense([[simplify(add(a.entry(i, j), b.entry(i, j))) for j in range(a.ncols)]
                   for i in range(a.nrows)])


def scalar_mul(c: ExprLike, m: Matrix) -> Matrix:
    c = _to_expr(c)
    m = _as_matrix(m, 'scalar_mul')
    return _dense([[simplify(mul(c, v)) for v in row] for row in m.rows()])


def matrix_sub(a: Matrix, b: Matrix) -> Matrix:
    return matrix_add(a, scalar_mul(-1, b))


def matrix_mul(a: Matrix, b: Matrix) -> Matrix:
    """Matrix product; entry products keep their left-to-right order."""
    a, b = _as_matrix(a, 'matrix_mul'), _as_matrix(b, 'matrix_mul')
    if a.ncols != b.nrows:
        raise DimensionMismatch('matrix_mul', a.ncols, b.nrows)
    if a.storage is MatrixStorage.IDENTITY:
        return b
    if b.storage is MatrixStorage.IDENTITY:
        return a
    if a.storage is MatrixStorage.DIAGONAL and b.storage is MatrixStorage.DIAGONAL:
        return Matrix(MatrixStorage.DIAGONAL, a.nrows, a.ncols,
                      tuple(simplify(mul(x, y)) for x, y in zip(a.data, b.data)))
    ra, rb = a.rows(), b.rows()
    rows = []
    for i in range(a.nrows):
        row = []
        for j in range(b.ncols):
            row.append(simplify(add(*[mul(ra[i][k], rb[k][j]) for k in range(a.ncols)])))
        rows.append(row)
    return _dense(rows)


def transpose(m: Matrix) -> Matrix:
    m = _as_matrix(m, 'transpose')
    if m.storage in (MatrixStorage.SYMMETRIC, MatrixStorage.DIAGONAL, MatrixStorage.IDENTITY):
        return m
    if m.storage is MatrixStorage.SPARSE:
        data = tuple(sorted((c, r, v) for r, c, v in m.data))
        return Matrix(MatrixStorage.SPARSE, m.ncols, m.nrows, data)
    rows = m.rows()
    return _dense([[rows[i][j] for i in range(m.nrows)] for j in range(m.ncols)])


def trace(m: Matrix) -> Expr:
    m = _as_matrix(m, 'trace')
    _require_square(m, 'trace')
    return simplify(add(*[m.entry(i, i) for i in range(m.nrows)]))


def commutator(a: ExprLike, b: ExprLike) -> Expr:
    """``[a, b] = a*b - b*a`` for matrices or non-commuting symbols."""
    a, b = _to_expr(a), _to_expr(b)
    if isinstance(a, Matrix) and isinstance(b, Matrix):
        return matrix_sub(matrix_mul(a, b), matrix_mul(b, a))
    return simplify(sub(mul(a, b), mul(b, a)))


# Determinant and inverse

def _exact_entries(rows) -> Optional[List[List[Fraction]]]:
    out = []
    for row in rows:
        values = []
        for v in row:
            if not (isinstance(v, Const) and v.number.is_exact()):
                return None
            values.append(v.number.to_fraction())
        out.append(values)
    return out


def _is_zero(e: Expr) -> bool:
    return isinstance(e, Const) and e.number.is_zero()


def _bareiss_fractions(m: List[List[Fraction]]) -> Fraction:
    n = len(m)
    sign, previous = 1, Fraction(1)
    for k in range(n - 1):
        if m[k][k] == 0:
            pivot = next((i for i in range(k + 1, n) if m[i][k] != 0), None)
            if pivot is None:
                return Fraction(0)
            m[k], m[pivot] = m[pivot], m[k]
            sign = -sign
        for i in range(k + 1, n):
            for j in range(k + 1, n):
                m[i][j] = (m[i][j] * m[k][k] - m[i][k] * m[k][j]) / previous
        previous = m[k][k]
    return sign * m[n - 1][n - 1]


def _bareiss_symbolic(m: List[List[Expr]]) -> Expr:
    n = len(m)
    sign, previous = 1, Const(1)
    for k in range(n - 1):
        if _is_zero(m[k][k]):
            pivot = next((i for i in range(k + 1, n) if not _is_zero(m[i][k])), None)
            if pivot is None:
                return Const(0)
            m[k], m[pivot] = m[pivot], m[k]
            sign = -sign
        for i in range(k + 1, n):
            for j in range(k + 1, n):
                num = sub(mul(m[i][j], m[k][k]), mul(m[i][k], m[k][j]))
                m[i][j] = cancel(mul(num, pow_(previous, -1)))
        previous = m[k][k]
    det = m[n - 1][n - 1]
    return simplify(mul(-1, det)) if sign < 0 else det


def determinant(m: Matrix) -> Expr:
    """
    Determinant by fraction-free Bareiss elimination.

    Raises:
        DimensionMismatch: If ``m`` is not square.
    """
    m = _as_matrix(m, 'determinant')
    _require_square(m, 'determinant')
    if m.nrows == 0 or m.storage is MatrixStorage.IDENTITY:
        return Const(1)
    if m.storage is MatrixStorage.DIAGONAL:
        return simplify(mul(*m.data))
    rows = m.rows()
    exact = _exact_entries(rows)
    if exact is not None:
        return Const(Number(_bareiss_fractions(exact)))
    return _bareiss_symbolic([[simplify(v) for v in row] for row in rows])


def inverse(m: Matrix) -> Matrix:
    """
    Inverse by Gauss-Jordan elimination.

    Raises:
        DimensionMismatch: If ``m`` is not square.
        SingularMatrix: If ``m`` is not invertible.
    """
    m = _as_matrix(m, 'inverse')
    _require_square(m, 'inverse')
    n = m.nrows
    if m.storage is MatrixStorage.IDENTITY:
        return m
    if m.storage is MatrixStorage.DIAGONAL:
        if any(_is_zero(simplify(v)) for v in m.data):
            raise SingularMatrix('inverse')
        return Matrix(MatrixStorage.DIAGONAL, n, n, tuple(simplify(pow_(v, -1)) for v in m.data))

    rows = m.rows()
    exact = _exact_entries(rows)
    if exact is not None:
        columns = []
        for j in range(n):
            unit = [Fraction(int(i == j)) for i in range(n)]
            columns.append(solve_exact(exact, unit))
        return _dense([[Const(Number(columns[j][i])) for j in range(n)] for i in range(n)])

    aug = [[simplify(v) for v in row] + [Const(int(i == j)) for j in range(n)]
           for i, row in enumerate(rows)]
    for col in range(n):
        pivot = next((r for r in range(col, n) if not _is_zero(aug[r][col])), None)
        if pivot is None:
            raise SingularMatrix('inverse')
        aug[col], aug[pivot] = aug[pivot], aug[col]
        inv = pow_(aug[col][col], -1)
        aug[col] = [cancel(mul(v, inv)) for v in aug[col]]
        for r in range(n):
            if r != col and not _is_zero(aug[r][col]):
                factor = aug[r][col]
                aug[r] = [cancel(sub(v, mul(factor, w))) for v, w in zip(aug[r], aug[col])]
    return _dense([row[n:] for row in aug])


# Numeric bridge

def to_numpy(m: Matrix, values: Optional[Mapping[SymbolLike, ExprLike]] = None) -> np.ndarray:
    """
    Evaluate every entry to a float (or complex) numpy array.

    Raises:
        DomainError: If an entry does not evaluate to a number.
    """
    m = _as_matrix(m, 'to_numpy')
    entries = [[evalf(v, values) for v in row] for row in m.rows()]
    is_complex = any(isinstance(v, complex) for row in entries for v in row)
    try:
        return np.array(entries, dtype=complex if is_complex else float).reshape(m.nrows, m.ncols)
    except (TypeError, ValueError) as err:
        raise DomainError('to_numpy', m, str(err)) from err

