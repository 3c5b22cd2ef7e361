# SymKernel - Polynomial Representations
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Polynomial representations used by the polynomial kernel.

Three forms are used, picked by what the algorithm needs:

- ``UniPoly``: dense univariate polynomial over Q, coefficients indexed by
  exponent.
- ``MultiPoly``: sparse multivariate polynomial over Q, a mapping from
  exponent tuples (one entry per variable) to Fractions. Absent keys are zero.
- Symbolic-coefficient univariate form: the ``(exponent, coefficient)`` list
  returned by ``coefficients(e, var)``, where coefficients are expressions
  free of ``var``.

Conversion from expressions fails with ``NotAPolynomial`` when the input
depends on a variable non-polynomially.

Example:
    >>> x, y = symbols('x y')
    >>> p, gens = poly_from_expr(x**2*y + 3*x)
    >>> p.total_degree()
    3
"""

from __future__ import annotations
from fractions import Fraction
from typing import Callable, Dict, Iterable, List, Mapping, Optional, Sequence, Tuple, Union

from .config import MonomialOrder
from .exceptions import DivisionByZero, NotAPolynomial, VariableCountError
from .expr import (
    Expr, ExprLike, SymbolLike, Const, Variable, Add, Mul, Pow, Function, MathConstant,
    add, mul, pow_, _to_expr, as_symbol,
)
from .expand import expand
from .number import Number
from .ordering import sort_key
from .rational import fraction_content, lcm, to_fraction
from .simplify import simplify
from .symbol import Symbol

Monomial = Tuple[int, ...]
Rational = Union[int, Fraction]


def _frac(c: Rational) -> Fraction:
    if isinstance(c, Fraction):
        return c
    if isinstance(c, Number):
        return c.to_fraction()
    return to_fraction(c)


# Univariate

class UniPoly:
    """
    Dense univariate polynomial over Q.

    ``coeffs[i]`` is the coefficient of ``x**i``; trailing zeros are trimmed so
    the zero polynomial has no coefficients and degree -1.
    """

    __slots__ = ('coeffs',)

    def __init__(self, coeffs: Iterable[Rational] = ()):
        cs = [_frac(c) for c in coeffs]
        while cs and cs[-1] == 0:
            cs.pop()
        self.coeffs: Tuple[Fraction, ...] = tuple(cs)

    @classmethod
    def x(cls) -> UniPoly:
        return cls((0, 1))

    @classmethod
    def constant(cls, c: Rational) -> UniPoly:
        return cls((c,))

    @classmethod
    def monomial(cls, c: Rational, n: int) -> UniPoly:
        return cls([0] * n + [c])

    @property
    def degree(self) -> int:
        return len(self.coeffs) - 1

    @property
    def lc(self) -> Fraction:
        return self.coeffs[-1] if self.coeffs else Fraction(0)

    def is_zero(self) -> bool:
        return not self.coeffs

    def is_constant(self) -> bool:
        return len(self.coeffs) <= 1

    def coeff(self, i: int) -> Fraction:
        return self.coeffs[i] if 0 <= i < len(self.coeffs) else Fraction(0)

    # Arithmetic

    def __add__(self, other: UniPoly) -> UniPoly:
        n = max(len(self.coeffs), len(other.coeffs))
        return UniPoly(self.coeff(i) + other.coeff(i) for i in range(n))

    def __sub__(self, other: UniPoly) -> UniPoly:
        n = max(len(self.coeffs), len(other.coeffs))
        return UniPoly(self.coeff(i) - other.coeff(i) for i in range(n))

    def __neg__(self) -> UniPoly:
        return UniPoly(-c for c in self.coeffs)

    def __mul__(self, other: Union[UniPoly, Rational]) -> UniPoly:
        if not isinstance(other, UniPoly):
            k = _frac(other)
            return UniPoly(c * k for c in self.coeffs)
        if self.is_zero() or other.is_zero():
            return UniPoly()
        out = [Fraction(0)] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a == 0:
                continue
            for j, b in enumerate(other.coeffs):
                out[i + j] += a * b
        return UniPoly(out)

    __rmul__ = __mul__

    def __pow__(self, n: int) -> UniPoly:
        if n < 0:
            raise ValueError("UniPoly powers must be non-negative")
        result, base = UniPoly.constant(1), self
        while n:
            if n & 1:
                result = result * base
            base = base * base
            n >>= 1
        return result

    def divmod(self, other: UniPoly) -> Tuple[UniPoly, UniPoly]:
        """Long division: ``self = q*other + r`` with ``deg r < deg other``."""
        if other.is_zero():
            raise DivisionByZero('polynomial division')
        rem = list(self.coeffs)
        dg, lc = other.degree, other.lc
        if len(rem) - 1 < dg:
            return UniPoly(), self
        quo = [Fraction(0)] * (len(rem) - dg)
        for k in range(len(rem) - 1 - dg, -1, -1):
            c = rem[k + dg] / lc
            quo[k] = c
            if c:
                for j, b in enumerate(other.coeffs):
                    rem[k + j] -= c * b
        return UniPoly(quo), UniPoly(rem[:dg])

    def __floordiv__(self, other: UniPoly) -> UniPoly:
        return self.divmod(other)[0]

    def __mod__(self, other: UniPoly) -> UniPoly:
        return self.divmod(other)[1]

    def exact_div(self, other: UniPoly) -> UniPoly:
        """Quotient of an exact division; raises ValueError if there is a remainder."""
        q, r = self.divmod(other)
        if not r.is_zero():
            raise ValueError(f"{other} does not divide {self}")
        return q

    def divides(self, other: UniPoly) -> bool:
        """True if ``self`` divides ``other``."""
        return (other % self).is_zero()

    def monic(self) -> UniPoly:
        if self.is_zero():
            return self
        return self * (1 / self.lc)

    def content(self) -> Fraction:
        return fraction_content(self.coeffs)

    def primitive(self) -> Tuple[Fraction, UniPoly]:
        """
        Split as ``content * primitive`` where the primitive part has coprime
        integer coefficients and a positive leading coefficient.
        """
        if self.is_zero():
            return Fraction(0), self
        c = self.content()
        if self.lc < 0:
            c = -c
        return c, self * (1 / c)

    def integer_coeffs(self) -> List[int]:
        out = []
        for c in self.coeffs:
            if c.denominator != 1:
                raise ValueError("polynomial has non-integer coefficients")
            out.append(c.numerator)
        return out

    def derivative(self) -> UniPoly:
        return UniPoly(i * c for i, c in enumerate(self.coeffs) if i > 0)

    def evaluate(self, x):
        """Horner evaluation at a number (or anything supporting + and *)."""
        result = 0
        for c in reversed(self.coeffs):
            result = result * x + c
        return result

    def compose(self, inner: UniPoly) -> UniPoly:
        result = UniPoly()
        for c in reversed(self.coeffs):
            result = result * inner + UniPoly.constant(c)
        return result

    def euclidean_gcd(self, other: UniPoly) -> UniPoly:
        """Monic GCD over Q by the Euclidean algorithm."""
        a, b = self, other
        while not b.is_zero():
            a, b = b, a % b
        return a.monic()

    def to_expr(self, var: SymbolLike) -> Expr:
        v = Variable(as_symbol(var))
        terms = [mul(Const(Number(c)), pow_(v, i)) for i, c in enumerate(self.coeffs) if c]
        return simplify(add(*terms))

    def __eq__(self, other) -> bool:
        return isinstance(other, UniPoly) and self.coeffs == other.coeffs

    def __hash__(self) -> int:
        return hash(self.coeffs)

    def __repr__(self) -> str:
        if self.is_zero():
            return "UniPoly(0)"
        parts = []
        for i in range(self.degree, -1, -1):
            c = self.coeffs[i]
            if c:
                parts.append(f"{c}" if i == 0 else f"{c}*x**{i}" if i > 1 else f"{c}*x")
        return "UniPoly(" + " + ".join(parts) + ")"


# Monomial orders

def monomial_key(order: Union[MonomialOrder, str]) -> Callable[[Monomial], tuple]:
    """Sort key realizing a monomial order (larger key = larger monomial)."""
    if isinstance(order, str):
        order = MonomialOrder(order.lower())
    if order is MonomialOrder.LEX:
        return lambda m: m
    if order is MonomialOrder.GRLEX:
        return lambda m: (sum(m), m)
    return lambda m: (sum(m), tuple(-e for e in reversed(m)))


def _lex(m: Monomial) -> Monomial:
    return m


# Multivariate

class MultiPoly:
    """
    Sparse multivariate polynomial over Q in ``nvars`` variables.

    Terms map exponent tuples to non-zero Fractions.
    """

    __slots__ = ('nvars', 'terms')

    def __init__(self, terms: Mapping[Monomial, Rational], nvars: int):
        self.nvars = nvars
        clean: Dict[Monomial, Fraction] = {}
        for m, c in terms.items():
            c = _frac(c)
            if c:
                if len(m) != nvars:
                    raise VariableCountError('MultiPoly', nvars, len(m))
                clean[tuple(m)] = c
        self.terms = clean

    @classmethod
    def zero(cls, nvars: int) -> MultiPoly:
        return cls({}, nvars)

    @classmethod
    def constant(cls, c: Rational, nvars: int) -> MultiPoly:
        return cls({(0,) * nvars: c}, nvars)

    @classmethod
    def variable(cls, index: int, nvars: int) -> MultiPoly:
        m = [0] * nvars
        m[index] = 1
        return cls({tuple(m): 1}, nvars)

    @classmethod
    def from_unipoly(cls, p: UniPoly, index: int = 0, nvars: int = 1) -> MultiPoly:
        terms = {}
        for i, c in enumerate(p.coeffs):
            m = [0] * nvars
            m[index] = i
            terms[tuple(m)] = c
        return cls(terms, nvars)

    def is_zero(self) -> bool:
        return not self.terms

    def is_constant(self) -> bool:
        return all(not any(m) for m in self.terms)

    def constant_value(self) -> Fraction:
        return self.terms.get((0,) * self.nvars, Fraction(0))

    def degree(self, index: int) -> int:
        """Degree in one variable (-1 for the zero polynomial)."""
        return max((m[index] for m in self.terms), default=-1)

    def total_degree(self) -> int:
        return max((sum(m) for m in self.terms), default=-1)

    def variables_present(self) -> List[int]:
        return [i for i in range(self.nvars) if any(m[i] for m in self.terms)]

    def __len__(self) -> int:
        return len(self.terms)

    # Arithmetic

    def _check(self, other: MultiPoly) -> None:
        if other.nvars != self.nvars:
            raise VariableCountError('MultiPoly arithmetic', self.nvars, other.nvars)

    def __add__(self, other: MultiPoly) -> MultiPoly:
        self._check(other)
        out = dict(self.terms)
        for m, c in other.terms.items():
            out[m] = out.get(m, 0) + c
        return MultiPoly(out, self.nvars)

    def __sub__(self, other: MultiPoly) -> MultiPoly:
        self._check(other)
        out = dict(self.terms)
        for m, c in other.terms.items():
            out[m] = out.get(m, 0) - c
        return MultiPoly(out, self.nvars)

    def __neg__(self) -> MultiPoly:
        return MultiPoly({m: -c for m, c in self.terms.items()}, self.nvars)

    def __mul__(self, other: Union[MultiPoly, Rational]) -> MultiPoly:
        if not isinstance(other, MultiPoly):
            k = _frac(other)
            return MultiPoly({m: c * k for m, c in self.terms.items()}, self.nvars)
        self._check(other)
        out: Dict[Monomial, Fraction] = {}
        for m1, c1 in self.terms.items():
            for m2, c2 in other.terms.items():
                m = tuple(a + b for a, b in zip(m1, m2))
                out[m] = out.get(m, 0) + c1 * c2
        return MultiPoly(out, self.nvars)

    __rmul__ = __mul__

    def __pow__(self, n: int) -> MultiPoly:
        if n < 0:
            raise ValueError("MultiPoly powers must be non-negative")
        result, base = MultiPoly.constant(1, self.nvars), self
        while n:
            if n & 1:
                result = result * base
            base = base * base
            n >>= 1
        return result

    def mul_term(self, mono: Monomial, c: Rational) -> MultiPoly:
        c = _frac(c)
        return MultiPoly(
            {tuple(a + b for a, b in zip(m, mono)): v * c for m, v in self.terms.items()},
            self.nvars,
        )

    def __eq__(self, other) -> bool:
        return isinstance(other, MultiPoly) and self.nvars == other.nvars and self.terms == other.terms

    __hash__ = None

    # Structure

    def leading_term(self, key: Callable[[Monomial], tuple] = _lex) -> Tuple[Monomial, Fraction]:
        if not self.terms:
            raise DivisionByZero('leading term of the zero polynomial')
        m = max(self.terms, key=key)
        return m, self.terms[m]

    def leading_monomial(self, key: Callable[[Monomial], tuple] = _lex) -> Monomial:
        return self.leading_term(key)[0]

    def leading_coefficient(self, key: Callable[[Monomial], tuple] = _lex) -> Fraction:
        return self.leading_term(key)[1]

    def coefficients_in(self, index: int) -> Dict[int, MultiPoly]:
        """View as a polynomial in one variable: degree -> coefficient (var set to exponent 0)."""
        parts: Dict[int, Dict[Monomial, Fraction]] = {}
        for m, c in self.terms.items():
            k = m[index]
            rest = m[:index] + (0,) + m[index + 1:]
            parts.setdefault(k, {})[rest] = c
        return {k: MultiPoly(t, self.nvars) for k, t in parts.items()}

    def leading_coefficient_in(self, index: int) -> MultiPoly:
        parts = self.coefficients_in(index)
        return parts[max(parts)] if parts else MultiPoly.zero(self.nvars)

    def evaluate(self, index: int, value: Rational) -> MultiPoly:
        """Substitute a number for one variable (the variable count is kept)."""
        value = _frac(value)
        out: Dict[Monomial, Fraction] = {}
        for m, c in self.terms.items():
            rest = m[:index] + (0,) + m[index + 1:]
            out[rest] = out.get(rest, 0) + c * value ** m[index]
        return MultiPoly(out, self.nvars)

    def evaluate_all(self, values: Sequence[Rational]) -> Fraction:
        total = Fraction(0)
        for m, c in self.terms.items():
            term = c
            for v, e in zip(values, m):
                if e:
                    term *= _frac(v) ** e
            total += term
        return total

    def permute(self, order: Sequence[int]) -> MultiPoly:
        """New polynomial whose variable i is this polynomial's variable ``order[i]``."""
        return MultiPoly({tuple(m[j] for j in order): c for m, c in self.terms.items()}, self.nvars)

    def to_unipoly(self, index: int) -> UniPoly:
        """Univariate view; fails if any other variable occurs."""
        coeffs: Dict[int, Fraction] = {}
        for m, c in self.terms.items():
            if any(e for i, e in enumerate(m) if i != index):
                raise NotAPolynomial(self, (index,), 'symbolic coefficient')
            coeffs[m[index]] = c
        n = max(coeffs, default=-1) + 1
        return UniPoly(coeffs.get(i, 0) for i in range(n))

    def content(self) -> Fraction:
        return fraction_content(self.terms.values())

    def primitive(self, key: Callable[[Monomial], tuple] = _lex) -> Tuple[Fraction, MultiPoly]:
        """``content * primitive`` with integer coprime coefficients and positive leading coefficient."""
        if self.is_zero():
            return Fraction(0), self
        c = self.content()
        if self.leading_coefficient(key) < 0:
            c = -c
        return c, self * (1 / c)

    def clear_denominators(self) -> Tuple[int, MultiPoly]:
        """(d, d*self) with d the lcm of the coefficient denominators."""
        d = 1
        for c in self.terms.values():
            d = lcm(d, c.denominator)
        return d, self * d

    def integer_terms(self) -> Dict[Monomial, int]:
        out = {}
        for m, c in self.terms.items():
            if c.denominator != 1:
                raise ValueError("polynomial has non-integer coefficients")
            out[m] = c.numerator
        return out

    def divmod(
        self,
        divisors: Sequence[MultiPoly],
        key: Callable[[Monomial], tuple] = _lex,
    ) -> Tuple[List[MultiPoly], MultiPoly]:
        """
        Multivariate division by an ordered list of divisors.

        Returns (quotients, remainder) with ``self = sum(q_i * d_i) + r`` and no
        term of ``r`` divisible by a leading term of any divisor.
        """
        if any(d.is_zero() for d in divisors):
            raise DivisionByZero('multivariate division')
        leads = [d.leading_term(key) for d in divisors]
        quotients: List[Dict[Monomial, Fraction]] = [{} for _ in divisors]
        remainder: Dict[Monomial, Fraction] = {}
        p = dict(self.terms)
        while p:
            m = max(p, key=key)
            c = p[m]
            for i, (dm, dc) in enumerate(leads):
                if all(a >= b for a, b in zip(m, dm)):
                    qm = tuple(a - b for a, b in zip(m, dm))
                    qc = c / dc
                    quotients[i][qm] = quotients[i].get(qm, 0) + qc
                    for tm, tc in divisors[i].terms.items():
                        mm = tuple(a + b for a, b in zip(tm, qm))
                        v = p.get(mm, 0) - qc * tc
                        if v:
                            p[mm] = v
                        else:
                            p.pop(mm, None)
                    break
            else:
                remainder[m] = c
                del p[m]
        return [MultiPoly(q, self.nvars) for q in quotients], MultiPoly(remainder, self.nvars)

    def exact_div(self, other: MultiPoly) -> Optional[MultiPoly]:
        """Quotient if ``other`` divides ``self`` exactly, else None."""
        if other.is_zero():
            raise DivisionByZero('multivariate division')
        (q,), r = self.divmod([other])
        return q if r.is_zero() else None

    def to_expr(self, gens: Sequence[SymbolLike]) -> Expr:
        vs = [Variable(as_symbol(g)) for g in gens]
        if len(vs) != self.nvars:
            raise VariableCountError('MultiPoly.to_expr', self.nvars, len(vs))
        terms = []
        for m, c in self.terms.items():
            factors = [Const(Number(c))] + [pow_(v, e) for v, e in zip(vs, m) if e]
            terms.append(mul(*factors))
        return simplify(add(*terms))

    def __repr__(self) -> str:
        if not self.terms:
            return "MultiPoly(0)"
        items = sorted(self.terms.items(), reverse=True)
        return "MultiPoly(" + ", ".join(f"{m}: {c}" for m, c in items) + ")"


# Conversion from expressions

def _sorted_symbols(exprs: Iterable[Expr]) -> List[Symbol]:
    syms = set()
    for e in exprs:
        syms |= e.free_symbols()
    return sorted(syms, key=lambda s: s.sort_key())


def to_poly(expr: ExprLike, gens: Sequence[SymbolLike]) -> MultiPoly:
    """
    Read ``expr`` as a polynomial with rational coefficients in ``gens``.

    Raises:
        NotAPolynomial: If ``expr`` is not polynomial in ``gens`` or has a
                        non-numeric coefficient.
    """
    expr = _to_expr(expr)
    symbols = [as_symbol(g) for g in gens]
    index = {s: i for i, s in enumerate(symbols)}
    n = len(symbols)

    def conv(e: Expr) -> MultiPoly:
        if isinstance(e, Const):
            if not e.number.is_finite():
                raise NotAPolynomial(expr, symbols, 'non-finite coefficient')
            return MultiPoly.constant(e.number.to_fraction(), n)
        if isinstance(e, Variable):
            if e.symbol in index:
                return MultiPoly.variable(index[e.symbol], n)
            raise NotAPolynomial(expr, symbols, f'symbolic coefficient {e}')
        if isinstance(e, Add):
            total = MultiPoly.zero(n)
            for t in e.terms:
                total = total + conv(t)
            return total
        if isinstance(e, Mul):
            prod = MultiPoly.constant(1, n)
            for f in e.factors:
                prod = prod * conv(f)
            return prod
        if isinstance(e, Pow):
            exp = e.exponent
            if not (e.free_symbols() & index.keys()):
                value = simplify(e)
                if isinstance(value, Const):
                    return conv(value)
                raise NotAPolynomial(expr, symbols, f'symbolic coefficient {e}')
            if isinstance(exp, Const) and exp.number.is_integer():
                if exp.number.value >= 0:
                    return conv(e.base) ** exp.number.value
                raise NotAPolynomial(expr, symbols, 'negative exponent')
            if isinstance(exp, Const):
                raise NotAPolynomial(expr, symbols, 'fractional exponent')
            raise NotAPolynomial(expr, symbols, 'symbolic exponent')
        if isinstance(e, Function) and e.free_symbols() & index.keys():
            raise NotAPolynomial(expr, symbols, f'transcendental function {e.name}')
        raise NotAPolynomial(expr, symbols, f'symbolic coefficient {e}')

    return conv(expr)


def poly_from_expr(
    expr: ExprLike, gens: Optional[Sequence[SymbolLike]] = None,
) -> Tuple[MultiPoly, List[Symbol]]:
    """Convert using ``gens`` or, by default, every free symbol in canonical order."""
    expr = _to_expr(expr)
    symbols = [as_symbol(g) for g in gens] if gens is not None else _sorted_symbols([expr])
    return to_poly(expr, symbols), symbols


def polys_from_exprs(
    exprs: Sequence[ExprLike], gens: Optional[Sequence[SymbolLike]] = None,
) -> Tuple[List[MultiPoly], List[Symbol]]:
    """Convert several expressions over a common generator list."""
    exprs = [_to_expr(e) for e in exprs]
    symbols = [as_symbol(g) for g in gens] if gens is not None else _sorted_symbols(exprs)
    return [to_poly(e, symbols) for e in exprs], symbols


def to_unipoly(expr: ExprLike, var: SymbolLike) -> UniPoly:
    """Univariate polynomial over Q in ``var``."""
    return to_poly(expr, [var]).to_unipoly(0)


def from_poly(p: Union[UniPoly, MultiPoly], gens: Union[SymbolLike, Sequence[SymbolLike]]) -> Expr:
    """Expression for a polynomial (simplified)."""
    if isinstance(p, UniPoly):
        return p.to_expr(gens)
    return p.to_expr(gens)


# Symbolic-coefficient form

def _var_power(factor: Expr, var: Symbol, whole: Expr) -> Optional[int]:
    """Exponent if ``factor`` is var**k (k >= 0 integer), None if free of var."""
    if isinstance(factor, Variable) and factor.symbol == var:
        return 1
    if var not in factor.free_symbols():
        return None
    if isinstance(factor, Pow) and isinstance(factor.base, Variable) and factor.base.symbol == var:
        exp = factor.exponent
        if isinstance(exp, Const) and exp.number.is_integer():
            if exp.number.value >= 0:
                return exp.number.value
            raise NotAPolynomial(whole, (var,), 'negative exponent')
        if isinstance(exp, Const):
            raise NotAPolynomial(whole, (var,), 'fractional exponent')
        raise NotAPolynomial(whole, (var,), 'symbolic exponent')
    if isinstance(factor, Function):
        raise NotAPolynomial(whole, (var,), f'transcendental function {factor.name}')
    raise NotAPolynomial(whole, (var,), f'non-polynomial factor {factor}')


def coefficients(expr: ExprLike, var: SymbolLike) -> List[Tuple[int, Expr]]:
    """
    Expand and collect by powers of ``var``.

    Returns:
        Sorted ``(exponent, coefficient)`` pairs with non-zero coefficients
        free of ``var``.

    Raises:
        NotAPolynomial: If ``expr`` is not polynomial in ``var``.
    """
    expr = _to_expr(expr)
    v = as_symbol(var)
    expanded = expand(expr)
    terms = expanded.terms if isinstance(expanded, Add) else (expanded,)
    collected: Dict[int, List[Expr]] = {}
    for term in terms:
        factors = term.factors if isinstance(term, Mul) else (term,)
        k = 0
        rest = []
        for f in factors:
            power = _var_power(f, v, expr)
            if power is None:
                rest.append(f)
            else:
                k += power
        collected.setdefault(k, []).append(mul(*rest))
    out = []
    for k in sorted(collected):
        c = simplify(add(*collected[k]))
        if not (isinstance(c, Const) and c.number.is_zero()):
            out.append((k, c))
    return out


def degree(expr: ExprLike, var: SymbolLike) -> int:
    """Degree in ``var`` (-1 for the zero polynomial)."""
    coeffs = coefficients(expr, var)
    return coeffs[-1][0] if coeffs else -1


def leading_coefficient(expr: ExprLike, var: SymbolLike) -> Expr:
    coeffs = coefficients(expr, var)
    return coeffs[-1][1] if coeffs else Const(0)


def _is_numeric(e: Expr) -> bool:
    return isinstance(e, Const) and e.number.is_exact()


def polynomial_div(f: ExprLike, g: ExprLike, var: Optional[SymbolLike] = None) -> Tuple[Expr, Expr]:
    """
    Polynomial long division in ``var``: ``f = q*g + r`` with ``deg r < deg g``.

    Coefficients may involve other symbols; they are then treated as
    parameters and the quotient may have rational-function coefficients.

    Raises:
        DivisionByZero: If ``g`` is zero.
        VariableCountError: If ``var`` is omitted and the inputs do not have
                            exactly one free symbol.
        NotAPolynomial: If ``f`` or ``g`` is not polynomial in ``var``.
    """
    f, g = _to_expr(f), _to_expr(g)
    if var is None:
        syms = _sorted_symbols([f, g])
        if len(syms) > 1:
            raise VariableCountError('polynomial_div', 1, len(syms))
        if not syms:
            gs = simplify(g)
            if isinstance(gs, Const) and gs.number.is_zero():
                raise DivisionByZero('polynomial division')
            return simplify(mul(f, pow_(gs, -1))), Const(0)
        var = syms[0]
    v = as_symbol(var)

    cf, cg = coefficients(f, v), coefficients(g, v)
    if not cg:
        raise DivisionByZero('polynomial division')

    if all(_is_numeric(c) for _, c in cf + cg):
        F = UniPoly.constant(0)
        for k, c in cf:
            F = F + UniPoly.monomial(c.number.to_fraction(), k)
        G = UniPoly.constant(0)
        for k, c in cg:
            G = G + UniPoly.monomial(c.number.to_fraction(), k)
        q, r = F.divmod(G)
        return q.to_expr(v), r.to_expr(v)

    # Parametric coefficients
    x = Variable(v)
    rem: Dict[int, Expr] = dict(cf)
    dg, glc = cg[-1]
    quo: Dict[int, Expr] = {}
    while rem and max(rem) >= dg:
        d = max(rem)
        t = simplify(mul(rem[d], pow_(glc, -1)))
        quo[d - dg] = t
        for k, c in cg[:-1]:
            j = k + d - dg
            rem[j] = expand(add(rem.get(j, Const(0)), mul(-1, t, c)))
        del rem[d]
        rem = {k: c for k, c in rem.items() if not (isinstance(c, Const) and c.number.is_zero())}
    q = simplify(add(*[mul(c, pow_(x, k)) for k, c in quo.items()]))
    r = simplify(add(*[mul(c, pow_(x, k)) for k, c in rem.items()]))
    return q, r
