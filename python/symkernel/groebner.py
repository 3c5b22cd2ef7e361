# SymKernel - Groebner Bases
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Buchberger's algorithm for Groebner bases of polynomial ideals over Q.

Critical pairs are processed with normal selection (smallest lcm of leading
monomials first) and pairs with coprime leading monomials are skipped. The
result is the reduced basis: monic, with no leading monomial dividing any
term of another element, sorted by decreasing leading monomial.

Example:
    >>> x, y = symbols('x y')
    >>> groebner_basis([x**2 + y, x*y - 1], order='lex')
    [(x + y**2), (1 + y**3)]
"""

from __future__ import annotations
import heapq
import logging
from typing import Callable, List, Optional, Sequence, Tuple, Union

from .config import Config, MonomialOrder, resolve
from .exceptions import MaxIterationsExceeded
from .expr import Expr, ExprLike, SymbolLike
from .poly import Monomial, MultiPoly, monomial_key, polys_from_exprs

logger = logging.getLogger(__name__)

Key = Callable[[Monomial], tuple]


def _lcm(a: Monomial, b: Monomial) -> Monomial:
    return tuple(max(x, y) for x, y in zip(a, b))


def _divides(a: Monomial, b: Monomial) -> bool:
    return all(x <= y for x, y in zip(a, b))


def s_polynomial(f: MultiPoly, g: MultiPoly, key: Key) -> MultiPoly:
    """S-polynomial: cancel the leading terms of ``f`` and ``g`` against their lcm."""
    mf, cf = f.leading_term(key)
    mg, cg = g.leading_term(key)
    lcm = _lcm(mf, mg)
    left = f.mul_term(tuple(a - b for a, b in zip(lcm, mf)), 1 / cf)
    right = g.mul_term(tuple(a - b for a, b in zip(lcm, mg)), 1 / cg)
    return left - right


def normal_form(f: MultiPoly, basis: Sequence[MultiPoly], key: Key) -> MultiPoly:
    """Remainder of ``f`` on full division by ``basis``."""
    if not basis:
        return f
    return f.divmod(list(basis), key)[1]


def _monic(p: MultiPoly, key: Key) -> MultiPoly:
    return p * (1 / p.leading_coefficient(key))


def buchberger(
    polys: Sequence[MultiPoly], key: Key, max_iterations: int = 1000,
) -> List[MultiPoly]:
    """
    Groebner basis of the ideal generated by ``polys`` (not yet reduced).

    Raises:
        MaxIterationsExceeded: If more than ``max_iterations`` critical pairs
                               are processed.
    """
    basis = [_monic(p, key) for p in polys if not p.is_zero()]
    if not basis:
        return []
    leads = [p.leading_monomial(key) for p in basis]
    pairs: List[Tuple[tuple, int, int, int]] = []
    counter = 0

    def push(i: int, j: int) -> None:
        nonlocal counter
        lcm = _lcm(leads[i], leads[j])
        heapq.heappush(pairs, (key(lcm), counter, i, j))
        counter += 1

    for j in range(len(basis)):
        for i in range(j):
            push(i, j)

    processed = 0
    while pairs:
        _, _, i, j = heapq.heappop(pairs)
        # Coprime leading monomials: the S-polynomial reduces to zero
        if all(a == 0 or b == 0 for a, b in zip(leads[i], leads[j])):
            continue
        processed += 1
        if processed > max_iterations:
            raise MaxIterationsExceeded('groebner_basis', max_iterations)
        r = normal_form(s_polynomial(basis[i], basis[j], key), basis, key)
        if r.is_zero():
            continue
        r = _monic(r, key)
        basis.append(r)
        leads.append(r.leading_monomial(key))
        new = len(basis) - 1
        logger.debug("Groebner pair (%d, %d) added element %d (lead %s)", i, j, new, leads[new])
        for k in range(new):
            push(k, new)
    logger.debug("Buchberger processed %d pairs, %d generators", processed, len(basis))
    return basis


def reduce_basis(basis: Sequence[MultiPoly], key: Key) -> List[MultiPoly]:
    """Reduced Groebner basis from any Groebner basis."""
    polys = [_monic(p, key) for p in basis if not p.is_zero()]
    # Drop elements whose leading monomial is divisible by another's
    minimal: List[MultiPoly] = []
    for i, p in enumerate(polys):
        lp = p.leading_monomial(key)
        redundant = False
        for j, q in enumerate(polys):
            if i == j:
                continue
            lq = q.leading_monomial(key)
            if _divides(lq, lp) and (lq != lp or j < i):
                redundant = True
                break
        if not redundant:
            minimal.append(p)
    reduced = []
    for i, p in enumerate(minimal):
        others = minimal[:i] + minimal[i + 1:]
        reduced.append(_monic(normal_form(p, others, key), key))
    reduced.sort(key=lambda p: key(p.leading_monomial(key)), reverse=True)
    return reduced


def groebner_basis(
    polys: Sequence[ExprLike],
    gens: Optional[Sequence[SymbolLike]] = None,
    order: Optional[Union[MonomialOrder, str]] = None,
    config: Optional[Config] = None,
) -> List[Expr]:
    """
    Reduced Groebner basis of the ideal generated by ``polys``.

    Args:
        polys: Generating polynomials
        gens: Variable order (first is most significant); defaults to the free
              symbols in canonical order
        order: 'lex', 'grlex' or 'grevlex'; defaults to ``config.monomial_order``
        config: Supplies the iteration bound and default order

    Returns:
        Basis elements as expressions, largest leading monomial first.
        ``[1]`` when the ideal is the whole ring, ``[]`` for the zero ideal.

    Raises:
        NotAPolynomial: If an input is not a polynomial.
        MaxIterationsExceeded: If the pair bound is reached.
    """
    cfg = resolve(config)
    key = monomial_key(order if order is not None else cfg.monomial_order)
    converted, symbols = polys_from_exprs(polys, gens)
    basis = reduce_basis(buchberger(converted, key, cfg.max_iterations), key)
    return [p.to_expr(symbols) for p in basis]


def groebner_reduce(
    f: ExprLike,
    polys: Sequence[ExprLike],
    gens: Optional[Sequence[SymbolLike]] = None,
    order: Optional[Union[MonomialOrder, str]] = None,
) -> Expr:
    """Remainder of ``f`` modulo the ideal of ``polys`` (zero iff ``f`` is in the ideal)."""
    key = monomial_key(order if order is not None else resolve(None).monomial_order)
    converted, symbols = polys_from_exprs([f, *polys], gens)
    basis = reduce_basis(buchberger(converted[1:], key, resolve(None).max_iterations), key)
    return normal_form(converted[0], basis, key).to_expr(symbols)
