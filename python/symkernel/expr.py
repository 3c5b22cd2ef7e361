# SymKernel - Symbolic Expressions
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Expression tree for SymKernel.

Expressions are immutable frozen dataclasses, one class per variant. Code that
operates on expressions matches on the variant with ``isinstance``. Shared
subtrees are ordinary Python references, so structural duplication is cheap.

The factory functions at the bottom of this module (``add``, ``mul``,
``pow_``, ``matrix``, ...) enforce the structural invariants: n-ary nodes are
flattened, numeric operands are merged into one, single-operand sums and
products collapse, and ``x**1`` / ``x**0`` are reduced. Full canonical form
(term ordering, like-term combining) is the simplifier's job.

Example:
    >>> x, y = symbols('x y')
    >>> expr = x**2 + sin(y)
    >>> sorted(s.name for s in expr.free_symbols())
    ['x', 'y']
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from fractions import Fraction
import math
from typing import Iterator, Optional, Sequence, Tuple, Union, FrozenSet

from .exceptions import DimensionMismatch
from .number import Number, HALF
from .symbol import Symbol, SymbolType

# Type alias for things that can be converted to expressions
ExprLike = Union['Expr', int, float, Fraction, Number, Symbol]
SymbolLike = Union['Variable', Symbol, str]


class Expr(ABC):
    """
    Base class for symbolic expressions.

    Expressions are immutable and can be composed using Python operators.
    Equality is structural and hashing agrees with it.
    """

    @abstractmethod
    def children(self) -> Tuple[Expr, ...]:
        """Direct sub-expressions in stored order."""
        ...

    @abstractmethod
    def with_children(self, children: Sequence[Expr]) -> Expr:
        """Rebuild this node (same variant) around new children."""
        ...

    def free_symbols(self) -> FrozenSet[Symbol]:
        """All symbols this expression depends on."""
        result: FrozenSet[Symbol] = frozenset()
        for child in self.children():
            result = result | child.free_symbols()
        return result

    def has(self, sym: SymbolLike) -> bool:
        """True if the expression depends on ``sym``."""
        return as_symbol(sym) in self.free_symbols()

    def walk(self) -> Iterator[Expr]:
        """Pre-order traversal of the tree."""
        yield self
        for child in self.children():
            yield from child.walk()

    # Operator overloading for natural math syntax
    def __neg__(self) -> Expr:
        return mul(Const(-1), self)

    def __add__(self, other: ExprLike) -> Expr:
        return add(self, _to_expr(other))

    def __radd__(self, other: ExprLike) -> Expr:
        return add(_to_expr(other), self)

    def __sub__(self, other: ExprLike) -> Expr:
        return add(self, mul(Const(-1), _to_expr(other)))

    def __rsub__(self, other: ExprLike) -> Expr:
        return add(_to_expr(other), mul(Const(-1), self))

    def __mul__(self, other: ExprLike) -> Expr:
        return mul(self, _to_expr(other))

    def __rmul__(self, other: ExprLike) -> Expr:
        return mul(_to_expr(other), self)

    def __truediv__(self, other: ExprLike) -> Expr:
        return mul(self, pow_(_to_expr(other), Const(-1)))

    def __rtruediv__(self, other: ExprLike) -> Expr:
        return mul(_to_expr(other), pow_(self, Const(-1)))

    def __pow__(self, other: ExprLike) -> Expr:
        return pow_(self, _to_expr(other))

    def __rpow__(self, other: ExprLike) -> Expr:
        return pow_(_to_expr(other), self)


def _to_expr(x: ExprLike) -> Expr:
    """Convert a value to an Expr."""
    if isinstance(x, Expr):
        return x
    if isinstance(x, bool):
        return Boolean(x)
    if isinstance(x, (int, float, Fraction, Number)):
        return Const(x)
    if isinstance(x, Symbol):
        return Variable(x)
    raise TypeError(f"Cannot convert {type(x).__name__} to Expr")


def as_symbol(v: SymbolLike) -> Symbol:
    """Accept a Variable, a Symbol, or a name and return the Symbol."""
    if isinstance(v, Variable):
        return v.symbol
    if isinstance(v, Symbol):
        return v
    if isinstance(v, str):
        return Symbol(v)
    raise TypeError(f"Expected a symbol, got {type(v).__name__}")


# Leaves

@dataclass(frozen=True)
class Const(Expr):
    """A numeric leaf."""
    number: Number

    def __post_init__(self):
        if not isinstance(self.number, Number):
            object.__setattr__(self, 'number', Number(self.number))

    @property
    def value(self):
        return self.number.value

    def children(self) -> Tuple[Expr, ...]:
        return ()

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return self

    def free_symbols(self) -> FrozenSet[Symbol]:
        return frozenset()

    def __repr__(self) -> str:
        return str(self.number)


@dataclass(frozen=True)
class Variable(Expr):
    """A symbol used as an expression."""
    symbol: Symbol

    def __post_init__(self):
        if isinstance(self.symbol, str):
            object.__setattr__(self, 'symbol', Symbol(self.symbol))

    @property
    def name(self) -> str:
        return self.symbol.name

    @property
    def symbol_type(self) -> SymbolType:
        return self.symbol.symbol_type

    def children(self) -> Tuple[Expr, ...]:
        return ()

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return self

    def free_symbols(self) -> FrozenSet[Symbol]:
        return frozenset({self.symbol})

    def __repr__(self) -> str:
        return self.symbol.name


class ConstantKind(Enum):
    """Named mathematical constants."""
    PI = "pi"
    E = "e"
    I = "i"
    INFINITY = "oo"
    NEG_INFINITY = "-oo"
    EULER_GAMMA = "gamma"
    GOLDEN_RATIO = "phi"


# Fixed ordering table for constants
CONSTANT_ORDER = {
    ConstantKind.PI: 0,
    ConstantKind.E: 1,
    ConstantKind.I: 2,
    ConstantKind.EULER_GAMMA: 3,
    ConstantKind.GOLDEN_RATIO: 4,
    ConstantKind.INFINITY: 5,
    ConstantKind.NEG_INFINITY: 6,
}

# Float values used by numeric evaluation; i has none
CONSTANT_VALUES = {
    ConstantKind.PI: math.pi,
    ConstantKind.E: math.e,
    ConstantKind.EULER_GAMMA: 0.5772156649015329,
    ConstantKind.GOLDEN_RATIO: (1 + math.sqrt(5)) / 2,
    ConstantKind.INFINITY: math.inf,
    ConstantKind.NEG_INFINITY: -math.inf,
}

_CONSTANT_NAMES = {
    ConstantKind.PI: 'pi',
    ConstantKind.E: 'E',
    ConstantKind.I: 'I',
    ConstantKind.INFINITY: 'oo',
    ConstantKind.NEG_INFINITY: '-oo',
    ConstantKind.EULER_GAMMA: 'EulerGamma',
    ConstantKind.GOLDEN_RATIO: 'GoldenRatio',
}


@dataclass(frozen=True)
class MathConstant(Expr):
    """pi, e, i, +/- infinity, Euler's gamma, the golden ratio."""
    kind: ConstantKind

    def children(self) -> Tuple[Expr, ...]:
        return ()

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return self

    def free_symbols(self) -> FrozenSet[Symbol]:
        return frozenset()

    def is_infinite(self) -> bool:
        return self.kind in (ConstantKind.INFINITY, ConstantKind.NEG_INFINITY)

    def __repr__(self) -> str:
        return _CONSTANT_NAMES[self.kind]


@dataclass(frozen=True)
class Undefined(Expr):
    """The distinguished result of 0/0, 0**0, oo - oo and friends."""

    def children(self) -> Tuple[Expr, ...]:
        return ()

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return self

    def free_symbols(self) -> FrozenSet[Symbol]:
        return frozenset()

    def __repr__(self) -> str:
        return 'undefined'


@dataclass(frozen=True)
class Boolean(Expr):
    """Truth value produced by evaluating a numeric relation."""
    value: bool

    def children(self) -> Tuple[Expr, ...]:
        return ()

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return self

    def free_symbols(self) -> FrozenSet[Symbol]:
        return frozenset()

    def __bool__(self) -> bool:
        return self.value

    def __repr__(self) -> str:
        return 'True' if self.value else 'False'


# Algebraic nodes

@dataclass(frozen=True)
class Add(Expr):
    """n-ary sum (at least two terms)."""
    terms: Tuple[Expr, ...]

    def __post_init__(self):
        object.__setattr__(self, 'terms', tuple(self.terms))
        if len(self.terms) < 2:
            raise ValueError("Add needs at least two terms")

    def children(self) -> Tuple[Expr, ...]:
        return self.terms

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Add(tuple(children))

    def __repr__(self) -> str:
        return '(' + ' + '.join(repr(t) for t in self.terms) + ')'


@dataclass(frozen=True)
class Mul(Expr):
    """n-ary product (at least two factors); order matters for non-scalar factors."""
    factors: Tuple[Expr, ...]

    def __post_init__(self):
        object.__setattr__(self, 'factors', tuple(self.factors))
        if len(self.factors) < 2:
            raise ValueError("Mul needs at least two factors")

    def children(self) -> Tuple[Expr, ...]:
        return self.factors

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Mul(tuple(children))

    def __repr__(self) -> str:
        return '*'.join(_wrap(f) for f in self.factors)


@dataclass(frozen=True)
class Pow(Expr):
    """base ** exponent."""
    base: Expr
    exponent: Expr

    def children(self) -> Tuple[Expr, ...]:
        return (self.base, self.exponent)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Pow(children[0], children[1])

    def __repr__(self) -> str:
        return f"{_wrap(self.base)}**{_wrap(self.exponent)}"


@dataclass(frozen=True)
class Function(Expr):
    """A named function applied to arguments: sin(x), gamma(z), ..."""
    name: str
    args: Tuple[Expr, ...]

    def __post_init__(self):
        object.__setattr__(self, 'args', tuple(self.args))

    @property
    def arg(self) -> Expr:
        """The single argument of a unary function."""
        return self.args[0]

    def children(self) -> Tuple[Expr, ...]:
        return self.args

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Function(self.name, tuple(children))

    def __repr__(self) -> str:
        return f"{self.name}({', '.join(repr(a) for a in self.args)})"


def _wrap(e: Expr) -> str:
    if isinstance(e, (Add, Mul, Pow)) or (isinstance(e, Const) and e.number.is_negative()):
        text = repr(e)
        return text if text.startswith('(') else f"({text})"
    return repr(e)


# Matrices

class MatrixStorage(Enum):
    """Storage layouts for matrix literals."""
    DENSE = "dense"
    SPARSE = "sparse"
    SYMMETRIC = "symmetric"
    DIAGONAL = "diagonal"
    IDENTITY = "identity"


@dataclass(frozen=True)
class Matrix(Expr):
    """
    A matrix literal.

    ``data`` depends on ``storage``:
        DENSE:     tuple of row tuples
        SPARSE:    tuple of (row, col, value) triples, absent entries are 0
        SYMMETRIC: upper triangle, row i holding columns i..n-1
        DIAGONAL:  tuple of the n diagonal entries
        IDENTITY:  empty
    """
    storage: MatrixStorage
    nrows: int
    ncols: int
    data: tuple = ()

    def __post_init__(self):
        _validate_matrix(self.storage, self.nrows, self.ncols, self.data)

    @property
    def shape(self) -> Tuple[int, int]:
        return (self.nrows, self.ncols)

    def entry(self, i: int, j: int) -> Expr:
        if not (0 <= i < self.nrows and 0 <= j < self.ncols):
            raise IndexError(f"Entry ({i}, {j}) outside {self.nrows}x{self.ncols} matrix")
        s = self.storage
        if s is MatrixStorage.DENSE:
            return self.data[i][j]
        if s is MatrixStorage.SPARSE:
            for r, c, v in self.data:
                if r == i and c == j:
                    return v
            return Const(0)
        if s is MatrixStorage.SYMMETRIC:
            if i > j:
                i, j = j, i
            return self.data[i][j - i]
        if s is MatrixStorage.DIAGONAL:
            return self.data[i] if i == j else Const(0)
        return Const(1) if i == j else Const(0)

    def rows(self) -> Tuple[Tuple[Expr, ...], ...]:
        """Dense view of the entries."""
        return tuple(
            tuple(self.entry(i, j) for j in range(self.ncols))
            for i in range(self.nrows)
        )

    def children(self) -> Tuple[Expr, ...]:
        s = self.storage
        if s is MatrixStorage.DENSE or s is MatrixStorage.SYMMETRIC:
            return tuple(v for row in self.data for v in row)
        if s is MatrixStorage.SPARSE:
            return tuple(v for _, _, v in self.data)
        if s is MatrixStorage.DIAGONAL:
            return tuple(self.data)
        return ()

    def with_children(self, children: Sequence[Expr]) -> Expr:
        s = self.storage
        children = list(children)
        if s is MatrixStorage.DENSE or s is MatrixStorage.SYMMETRIC:
            data, pos = [], 0
            for row in self.data:
                data.append(tuple(children[pos:pos + len(row)]))
                pos += len(row)
            return Matrix(s, self.nrows, self.ncols, tuple(data))
        if s is MatrixStorage.SPARSE:
            data = tuple((r, c, v) for (r, c, _), v in zip(self.data, children))
            return Matrix(s, self.nrows, self.ncols, data)
        if s is MatrixStorage.DIAGONAL:
            return Matrix(s, self.nrows, self.ncols, tuple(children))
        return self

    def __repr__(self) -> str:
        return 'Matrix([' + ', '.join(
            '[' + ', '.join(repr(v) for v in row) + ']' for row in self.rows()
        ) + '])'


def _validate_matrix(storage: MatrixStorage, nrows: int, ncols: int, data: tuple) -> None:
    if nrows < 0 or ncols < 0:
        raise DimensionMismatch('matrix', 'non-negative', (nrows, ncols))
    if storage is MatrixStorage.DENSE:
        if len(data) != nrows:
            raise DimensionMismatch('matrix', (nrows, ncols), (len(data), None))
        for row in data:
            if len(row) != ncols:
                raise DimensionMismatch('matrix row', ncols, len(row))
    elif storage is MatrixStorage.SPARSE:
        for r, c, _ in data:
            if not (0 <= r < nrows and 0 <= c < ncols):
                raise DimensionMismatch('sparse entry', (nrows, ncols), (r, c))
    elif storage in (MatrixStorage.SYMMETRIC, MatrixStorage.DIAGONAL, MatrixStorage.IDENTITY):
        if nrows != ncols:
            raise DimensionMismatch(f'{storage.value} matrix', 'square', (nrows, ncols))
        if storage is MatrixStorage.SYMMETRIC:
            if len(data) != nrows or any(len(row) != nrows - i for i, row in enumerate(data)):
                raise DimensionMismatch('symmetric matrix', 'upper triangle', tuple(len(r) for r in data))
        elif storage is MatrixStorage.DIAGONAL and len(data) != nrows:
            raise DimensionMismatch('diagonal matrix', nrows, len(data))
        elif storage is MatrixStorage.IDENTITY and data:
            raise DimensionMismatch('identity matrix', 0, len(data))


# Other containers

@dataclass(frozen=True)
class Complex(Expr):
    """real + imag*i with explicit parts."""
    real: Expr
    imag: Expr

    def children(self) -> Tuple[Expr, ...]:
        return (self.real, self.imag)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Complex(children[0], children[1])

    def __repr__(self) -> str:
        return f"({self.real!r} + {self.imag!r}*I)"


@dataclass(frozen=True)
class FiniteSet(Expr):
    """A finite set of expressions."""
    elements: Tuple[Expr, ...]

    def __post_init__(self):
        object.__setattr__(self, 'elements', tuple(self.elements))

    def __len__(self) -> int:
        return len(self.elements)

    def __iter__(self) -> Iterator[Expr]:
        return iter(self.elements)

    def __contains__(self, item) -> bool:
        return _to_expr(item) in self.elements

    def children(self) -> Tuple[Expr, ...]:
        return self.elements

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return FiniteSet(tuple(children))

    def __repr__(self) -> str:
        return '{' + ', '.join(repr(e) for e in self.elements) + '}'


@dataclass(frozen=True)
class Interval(Expr):
    """An interval of the real line with open or closed ends."""
    start: Expr
    end: Expr
    start_inclusive: bool = True
    end_inclusive: bool = True

    def children(self) -> Tuple[Expr, ...]:
        return (self.start, self.end)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Interval(children[0], children[1], self.start_inclusive, self.end_inclusive)

    def __repr__(self) -> str:
        left = '[' if self.start_inclusive else '('
        right = ']' if self.end_inclusive else ')'
        return f"{left}{self.start!r}, {self.end!r}{right}"


@dataclass(frozen=True)
class Piecewise(Expr):
    """Ordered (condition, value) pieces with an optional default."""
    pieces: Tuple[Tuple[Expr, Expr], ...]
    default: Optional[Expr] = None

    def __post_init__(self):
        object.__setattr__(self, 'pieces', tuple((c, v) for c, v in self.pieces))

    def children(self) -> Tuple[Expr, ...]:
        flat = tuple(e for piece in self.pieces for e in piece)
        return flat + ((self.default,) if self.default is not None else ())

    def with_children(self, children: Sequence[Expr]) -> Expr:
        children = list(children)
        n = len(self.pieces)
        pieces = tuple((children[2 * k], children[2 * k + 1]) for k in range(n))
        default = children[2 * n] if self.default is not None else None
        return Piecewise(pieces, default)

    def __repr__(self) -> str:
        parts = [f"({v!r} if {c!r})" for c, v in self.pieces]
        if self.default is not None:
            parts.append(f"({self.default!r} otherwise)")
        return 'Piecewise(' + ', '.join(parts) + ')'


class RelationKind(Enum):
    EQ = "="
    NE = "!="
    LT = "<"
    LE = "<="
    GT = ">"
    GE = ">="


@dataclass(frozen=True)
class Relation(Expr):
    """lhs (kind) rhs."""
    lhs: Expr
    rhs: Expr
    kind: RelationKind = RelationKind.EQ

    def children(self) -> Tuple[Expr, ...]:
        return (self.lhs, self.rhs)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Relation(children[0], children[1], self.kind)

    def __repr__(self) -> str:
        return f"{self.lhs!r} {self.kind.value} {self.rhs!r}"


# Calculus nodes

class Calculus(Expr):
    """Unevaluated calculus operation over a variable."""
    variable: Symbol

    def bound_symbols(self) -> FrozenSet[Symbol]:
        """Symbols bound by this node (not visible from outside)."""
        return frozenset()


@dataclass(frozen=True)
class Derivative(Calculus):
    expr: Expr
    variable: Symbol
    order: int = 1

    def children(self) -> Tuple[Expr, ...]:
        return (self.expr,)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Derivative(children[0], self.variable, self.order)

    def __repr__(self) -> str:
        return f"Derivative({self.expr!r}, {self.variable}, {self.order})"


@dataclass(frozen=True)
class Integral(Calculus):
    integrand: Expr
    variable: Symbol

    def children(self) -> Tuple[Expr, ...]:
        return (self.integrand,)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Integral(children[0], self.variable)

    def __repr__(self) -> str:
        return f"Integral({self.integrand!r}, {self.variable})"


@dataclass(frozen=True)
class DefiniteIntegral(Calculus):
    integrand: Expr
    variable: Symbol
    lower: Expr
    upper: Expr

    def children(self) -> Tuple[Expr, ...]:
        return (self.integrand, self.lower, self.upper)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return DefiniteIntegral(children[0], self.variable, children[1], children[2])

    def bound_symbols(self) -> FrozenSet[Symbol]:
        return frozenset({self.variable})

    def free_symbols(self) -> FrozenSet[Symbol]:
        inner = self.integrand.free_symbols() - {self.variable}
        return inner | self.lower.free_symbols() | self.upper.free_symbols()

    def __repr__(self) -> str:
        return f"Integral({self.integrand!r}, ({self.variable}, {self.lower!r}, {self.upper!r}))"


@dataclass(frozen=True)
class Limit(Calculus):
    expr: Expr
    variable: Symbol
    point: Expr
    direction: str = '+-'

    def children(self) -> Tuple[Expr, ...]:
        return (self.expr, self.point)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Limit(children[0], self.variable, children[1], self.direction)

    def bound_symbols(self) -> FrozenSet[Symbol]:
        return frozenset({self.variable})

    def free_symbols(self) -> FrozenSet[Symbol]:
        return (self.expr.free_symbols() - {self.variable}) | self.point.free_symbols()

    def __repr__(self) -> str:
        return f"Limit({self.expr!r}, {self.variable}, {self.point!r}, '{self.direction}')"


@dataclass(frozen=True)
class Sum(Calculus):
    expr: Expr
    variable: Symbol
    lower: Expr
    upper: Expr

    def children(self) -> Tuple[Expr, ...]:
        return (self.expr, self.lower, self.upper)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Sum(children[0], self.variable, children[1], children[2])

    def bound_symbols(self) -> FrozenSet[Symbol]:
        return frozenset({self.variable})

    def free_symbols(self) -> FrozenSet[Symbol]:
        inner = self.expr.free_symbols() - {self.variable}
        return inner | self.lower.free_symbols() | self.upper.free_symbols()

    def __repr__(self) -> str:
        return f"Sum({self.expr!r}, ({self.variable}, {self.lower!r}, {self.upper!r}))"


@dataclass(frozen=True)
class Product(Calculus):
    expr: Expr
    variable: Symbol
    lower: Expr
    upper: Expr

    def children(self) -> Tuple[Expr, ...]:
        return (self.expr, self.lower, self.upper)

    def with_children(self, children: Sequence[Expr]) -> Expr:
        return Product(children[0], self.variable, children[1], children[2])

    def bound_symbols(self) -> FrozenSet[Symbol]:
        return frozenset({self.variable})

    def free_symbols(self) -> FrozenSet[Symbol]:
        inner = self.expr.free_symbols() - {self.variable}
        return inner | self.lower.free_symbols() | self.upper.free_symbols()

    def __repr__(self) -> str:
        return f"Product({self.expr!r}, ({self.variable}, {self.lower!r}, {self.upper!r}))"


# Predicates

def is_number(e: Expr) -> bool:
    return isinstance(e, Const)

def is_zero(e: Expr) -> bool:
    return isinstance(e, Const) and e.number.is_zero()

def is_one(e: Expr) -> bool:
    return isinstance(e, Const) and e.number.is_one()

def is_integer_const(e: Expr) -> bool:
    return isinstance(e, Const) and e.number.is_integer()

def is_commutative(e: Expr) -> bool:
    """False if ``e`` contains a non-scalar symbol or a matrix literal."""
    for node in e.walk():
        if isinstance(node, Variable) and not node.symbol.is_commutative():
            return False
        if isinstance(node, Matrix):
            return False
    return True

def contains_undefined(e: Expr) -> bool:
    return any(isinstance(node, Undefined) for node in e.walk())


# Public constructors

def number(value: Union[int, float, Fraction, Number]) -> Const:
    """Create a numeric expression of any kind."""
    return Const(Number(value))


def integer(n: int) -> Const:
    if not isinstance(n, int) or isinstance(n, bool):
        raise TypeError(f"integer() expects an int, got {type(n).__name__}")
    return Const(Number(n))


def rational(numerator: int, denominator: int) -> Const:
    """Exact rational in lowest terms; raises DivisionByZero for a zero denominator."""
    return Const(Number.rational(numerator, denominator))


def float_(x: float) -> Const:
    return Const(Number(float(x)))


def symbol(name: str, symbol_type: Union[SymbolType, str] = SymbolType.SCALAR) -> Variable:
    """Create a symbolic variable with the given name and type tag."""
    return Variable(Symbol(name, SymbolType(symbol_type) if isinstance(symbol_type, str) else symbol_type))


def symbols(names: str, symbol_type: Union[SymbolType, str] = SymbolType.SCALAR) -> Tuple[Variable, ...]:
    """``symbols('x y z')`` -> (x, y, z). Commas are accepted as separators."""
    parts = names.replace(',', ' ').split()
    return tuple(symbol(p, symbol_type) for p in parts)


def matrix_symbol(name: str) -> Variable:
    return symbol(name, SymbolType.MATRIX)


def operator_symbol(name: str) -> Variable:
    return symbol(name, SymbolType.OPERATOR)


def quaternion_symbol(name: str) -> Variable:
    return symbol(name, SymbolType.QUATERNION)


def add(*terms: ExprLike) -> Expr:
    """
    Sum of terms, flattened, with numeric terms merged and zero dropped.

    A single remaining term is returned as-is; no terms gives 0.
    """
    flat: list[Expr] = []
    numeric: Optional[Number] = None
    for t in terms:
        t = _to_expr(t)
        for part in (t.terms if isinstance(t, Add) else (t,)):
            if isinstance(part, Const):
                numeric = part.number if numeric is None else numeric + part.number
            else:
                flat.append(part)
    if numeric is not None and (not numeric.is_zero() or not flat):
        flat.insert(0, Const(numeric))
    if not flat:
        return Const(0)
    if len(flat) == 1:
        return flat[0]
    return Add(tuple(flat))


def mul(*factors: ExprLike) -> Expr:
    """
    Product of factors, flattened, with numeric factors merged in front and 1 dropped.

    Non-numeric factors keep their order.
    """
    flat: list[Expr] = []
    numeric: Optional[Number] = None
    for f in factors:
        f = _to_expr(f)
        for part in (f.factors if isinstance(f, Mul) else (f,)):
            if isinstance(part, Const):
                numeric = part.number if numeric is None else numeric * part.number
            else:
                flat.append(part)
    if numeric is not None and (not numeric.is_one() or not flat):
        flat.insert(0, Const(numeric))
    if not flat:
        return Const(1)
    if len(flat) == 1:
        return flat[0]
    return Mul(tuple(flat))


def pow_(base: ExprLike, exponent: ExprLike) -> Expr:
    """base ** exponent with x**1 = x, x**0 = 1 and 0**0 = undefined."""
    base, exponent = _to_expr(base), _to_expr(exponent)
    if isinstance(exponent, Const):
        if exponent.number.is_one():
            return base
        if exponent.number.is_zero():
            return Undefined() if is_zero(base) else Const(1)
    return Pow(base, exponent)


def neg(e: ExprLike) -> Expr:
    return mul(Const(-1), e)


def sub(a: ExprLike, b: ExprLike) -> Expr:
    return add(a, neg(b))


def div(a: ExprLike, b: ExprLike) -> Expr:
    return mul(a, pow_(b, Const(-1)))


def function(name: str, *args: ExprLike) -> Function:
    """Apply a named function."""
    if not name:
        raise ValueError("Function name cannot be empty")
    return Function(name, tuple(_to_expr(a) for a in args))


def matrix(rows: Sequence[Sequence[ExprLike]]) -> Matrix:
    """Dense matrix from a list of equal-length rows."""
    data = tuple(tuple(_to_expr(v) for v in row) for row in rows)
    ncols = len(data[0]) if data else 0
    return Matrix(MatrixStorage.DENSE, len(data), ncols, data)


def sparse_matrix(nrows: int, ncols: int, entries: Sequence[Tuple[int, int, ExprLike]]) -> Matrix:
    """Sparse matrix from (row, col, value) triples; later duplicates win."""
    merged: dict[Tuple[int, int], Expr] = {}
    for r, c, v in entries:
        merged[(r, c)] = _to_expr(v)
    data = tuple((r, c, v) for (r, c), v in sorted(merged.items()) if not is_zero(v))
    return Matrix(MatrixStorage.SPARSE, nrows, ncols, data)


def symmetric_matrix(upper_rows: Sequence[Sequence[ExprLike]]) -> Matrix:
    """Symmetric matrix from its upper triangle (row i holds columns i..n-1)."""
    data = tuple(tuple(_to_expr(v) for v in row) for row in upper_rows)
    return Matrix(MatrixStorage.SYMMETRIC, len(data), len(data), data)


def diagonal_matrix(entries: Sequence[ExprLike]) -> Matrix:
    data = tuple(_to_expr(v) for v in entries)
    return Matrix(MatrixStorage.DIAGONAL, len(data), len(data), data)


def identity_matrix(n: int) -> Matrix:
    return Matrix(MatrixStorage.IDENTITY, n, n, ())


def complex_(real: ExprLike, imag: ExprLike) -> Complex:
    return Complex(_to_expr(real), _to_expr(imag))


def finite_set(*elements: ExprLike) -> FiniteSet:
    """Set literal; duplicate elements are dropped, first occurrence kept."""
    seen: list[Expr] = []
    for e in elements:
        e = _to_expr(e)
        if e not in seen:
            seen.append(e)
    return FiniteSet(tuple(seen))


def interval(start: ExprLike, end: ExprLike,
             start_inclusive: bool = True, end_inclusive: bool = True) -> Interval:
    return Interval(_to_expr(start), _to_expr(end), start_inclusive, end_inclusive)


def piecewise(pieces: Sequence[Tuple[ExprLike, ExprLike]],
              default: Optional[ExprLike] = None) -> Piecewise:
    return Piecewise(
        tuple((_to_expr(c), _to_expr(v)) for c, v in pieces),
        None if default is None else _to_expr(default),
    )


def relation(lhs: ExprLike, rhs: ExprLike, kind: Union[RelationKind, str] = RelationKind.EQ) -> Relation:
    if isinstance(kind, str):
        kind = RelationKind(kind)
    return Relation(_to_expr(lhs), _to_expr(rhs), kind)


def eq(lhs: ExprLike, rhs: ExprLike) -> Relation:
    """The equation lhs = rhs."""
    return relation(lhs, rhs, RelationKind.EQ)


def derivative_of(e: ExprLike, var: SymbolLike, order: int = 1) -> Derivative:
    """Unevaluated derivative node."""
    if order < 0:
        raise ValueError("Derivative order must be non-negative")
    return Derivative(_to_expr(e), as_symbol(var), order)


def integral_of(e: ExprLike, var: SymbolLike) -> Integral:
    """Unevaluated indefinite integral node."""
    return Integral(_to_expr(e), as_symbol(var))


def definite_integral_of(e: ExprLike, var: SymbolLike, lower: ExprLike, upper: ExprLike) -> DefiniteIntegral:
    return DefiniteIntegral(_to_expr(e), as_symbol(var), _to_expr(lower), _to_expr(upper))


def limit_of(e: ExprLike, var: SymbolLike, point: ExprLike, direction: str = '+-') -> Limit:
    if direction not in ('+', '-', '+-'):
        raise ValueError(f"Limit direction must be '+', '-' or '+-', got {direction!r}")
    return Limit(_to_expr(e), as_symbol(var), _to_expr(point), direction)


def sum_of(e: ExprLike, var: SymbolLike, lower: ExprLike, upper: ExprLike) -> Sum:
    return Sum(_to_expr(e), as_symbol(var), _to_expr(lower), _to_expr(upper))


def product_of(e: ExprLike, var: SymbolLike, lower: ExprLike, upper: ExprLike) -> Product:
    return Product(_to_expr(e), as_symbol(var), _to_expr(lower), _to_expr(upper))


# Constants

pi = MathConstant(ConstantKind.PI)
E = MathConstant(ConstantKind.E)
I = MathConstant(ConstantKind.I)
oo = MathConstant(ConstantKind.INFINITY)
neg_oo = MathConstant(ConstantKind.NEG_INFINITY)
euler_gamma = MathConstant(ConstantKind.EULER_GAMMA)
golden_ratio = MathConstant(ConstantKind.GOLDEN_RATIO)
undefined = Undefined()


# Function constructors

def sin(e: ExprLike) -> Function:
    """Sine function."""
    return function('sin', e)


def cos(e: ExprLike) -> Function:
    """Cosine function."""
    return function('cos', e)


def tan(e: ExprLike) -> Function:
    return function('tan', e)


def cot(e: ExprLike) -> Function:
    return function('cot', e)


def sec(e: ExprLike) -> Function:
    return function('sec', e)


def csc(e: ExprLike) -> Function:
    return function('csc', e)


def asin(e: ExprLike) -> Function:
    return function('asin', e)


def acos(e: ExprLike) -> Function:
    return function('acos', e)


def atan(e: ExprLike) -> Function:
    """Arc tangent function."""
    return function('atan', e)


def sinh(e: ExprLike) -> Function:
    return function('sinh', e)


def cosh(e: ExprLike) -> Function:
    return function('cosh', e)


def tanh(e: ExprLike) -> Function:
    return function('tanh', e)


def exp(e: ExprLike) -> Function:
    """Exponential function."""
    return function('exp', e)


def ln(e: ExprLike) -> Function:
    """Natural logarithm."""
    return function('ln', e)


log = ln


def sqrt(e: ExprLike) -> Expr:
    """Square root, stored as a power with exponent 1/2."""
    return pow_(e, Const(HALF))


def abs_(e: ExprLike) -> Function:
    """Absolute value."""
    return function('abs', e)


# Alias for abs to avoid shadowing builtin
abs = abs_


def sign(e: ExprLike) -> Function:
    return function('sign', e)


def gamma(e: ExprLike) -> Function:
    """Euler's gamma function."""
    return function('gamma', e)


def factorial(e: ExprLike) -> Function:
    return function('factorial', e)


def erf(e: ExprLike) -> Function:
    """
    Error function: erf(x) = (2/sqrt(pi)) * Integral(exp(-t**2), (t, 0, x)).
    """
    return function('erf', e)
