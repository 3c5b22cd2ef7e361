# SymKernel - Polynomial GCD
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Greatest common divisors of polynomials.

Univariate inputs use the modular algorithm: images in Z_p[x] for primes
not dividing either leading coefficient, combined by CRT until two
successive primes give the same lifted result, then verified by trial
division. Multivariate inputs go through ``zippel.zippel_gcd``; when its
bounds run out the exact (slower) primitive PRS algorithm is used instead,
unless ``GcdConfig.strict`` asks for the ``ConvergenceFailed`` error.

Results are normalized as ``content * primitive``: the primitive part has
coprime integer coefficients and a positive leading coefficient, and the
content is the positive rational GCD of the input contents.

Example:
    >>> x = symbol('x')
    >>> polynomial_gcd(x**2 - 1, x - 1)
    (-1 + x)
"""

from __future__ import annotations
from fractions import Fraction
import logging
from math import gcd as igcd
from typing import List, Optional, Sequence

from .config import Config, GcdConfig, resolve
from .exceptions import ConvergenceFailed
from .expr import Expr, ExprLike, SymbolLike, Const, _to_expr, as_symbol, mul, pow_
from .finite_field import LARGE_PRIMES, ZpPoly, crt_coefficients, symmetric_mod
from .number import Number
from .poly import MultiPoly, UniPoly, polys_from_exprs
from .rational import fraction_content
from .simplify import simplify
from .zippel import zippel_gcd

logger = logging.getLogger(__name__)

# Lifted candidate must be unchanged across this many successive primes
STABLE_PRIMES = 2


# Univariate

def modular_gcd(f: UniPoly, g: UniPoly, config: Optional[GcdConfig] = None) -> UniPoly:
    """
    GCD of two univariate polynomials over Q by the modular algorithm.

    Raises:
        ConvergenceFailed: If the prime bound runs out and ``config.strict``.
    """
    cfg = config if config is not None else GcdConfig()
    if f.is_zero() or g.is_zero():
        other = g if f.is_zero() else f
        if other.is_zero():
            return other
        c, prim = other.primitive()
        return prim * abs(c)

    cf, pf = f.primitive()
    cg, pg = g.primitive()
    content = fraction_content([cf, cg])
    if pf.is_constant() or pg.is_constant():
        return UniPoly.constant(content)

    prim = _modular_primitive_gcd(pf.integer_coeffs(), pg.integer_coeffs(), cfg)
    if prim is None:
        if cfg.strict:
            raise ConvergenceFailed(
                f"modular GCD did not stabilize within {cfg.max_crt_iterations} primes")
        logger.info("Modular GCD fell back to Euclid over Q")
        prim = pf.euclidean_gcd(pg).primitive()[1]
    return prim * content


def _modular_primitive_gcd(f: List[int], g: List[int], cfg: GcdConfig) -> Optional[UniPoly]:
    lc_f, lc_g = f[-1], g[-1]
    d = igcd(lc_f, lc_g)
    bound = min(len(f), len(g)) - 1
    candidate: Optional[List[int]] = None
    modulus = 1
    previous: Optional[List[int]] = None
    stable = 0
    primes_used = 0
    F, G = UniPoly(f), UniPoly(g)

    for p in LARGE_PRIMES:
        if primes_used >= cfg.max_crt_iterations:
            break
        if lc_f % p == 0 or lc_g % p == 0:
            continue
        primes_used += 1
        image = ZpPoly(f, p).gcd(ZpPoly(g, p))
        if image.degree == 0:
            return UniPoly.constant(1)
        if image.degree > bound:
            logger.debug("Skipping unlucky prime %d (degree %d > %d)", p, image.degree, bound)
            continue
        if image.degree < bound or candidate is None:
            if candidate is not None:
                logger.debug("Prime %d lowers the degree bound to %d", p, image.degree)
            bound = image.degree
            candidate, modulus, previous, stable = list((image * d).coeffs), p, None, 0
        else:
            candidate = crt_coefficients(candidate, modulus, (image * d).coeffs, p)
            modulus *= p

        lifted = [symmetric_mod(c, modulus) for c in candidate]
        if lifted == previous:
            stable += 1
        else:
            previous, stable = lifted, 1
        if stable < STABLE_PRIMES:
            continue
        trial = UniPoly(lifted).primitive()[1]
        if trial.divides(F) and trial.divides(G):
            logger.debug("Modular GCD stabilized after %d primes", primes_used)
            return trial
    return None


# Multivariate

def _pseudo_remainder(a: MultiPoly, b: MultiPoly, var: int) -> MultiPoly:
    db = b.degree(var)
    lcb = b.leading_coefficient_in(var)
    r = a
    while not r.is_zero() and r.degree(var) >= db:
        shift = [0] * a.nvars
        shift[var] = r.degree(var) - db
        lcr = r.leading_coefficient_in(var)
        r = r * lcb - (b * lcr).mul_term(tuple(shift), 1)
    return r


def _exact(a: MultiPoly, b: MultiPoly) -> MultiPoly:
    q = a.exact_div(b)
    if q is None:
        raise ConvergenceFailed("inexact division in primitive remainder sequence")
    return q


def _normalized(p: MultiPoly) -> MultiPoly:
    if p.is_zero():
        return p
    return p.primitive()[1]


def _content_in(p: MultiPoly, var: int) -> MultiPoly:
    result: Optional[MultiPoly] = None
    for coeff in p.coefficients_in(var).values():
        result = _normalized(coeff) if result is None else prs_gcd(result, coeff)
        if result.is_constant():
            break
    return result if result is not None else MultiPoly.zero(p.nvars)


def prs_gcd(a: MultiPoly, b: MultiPoly) -> MultiPoly:
    """
    Primitive GCD by the recursive primitive polynomial remainder sequence.

    Exact and bound-free, used as the fallback for the modular algorithms.
    The numeric content is discarded: the result has coprime integer
    coefficients and a positive lex-leading coefficient.
    """
    if a.is_zero():
        return _normalized(b)
    if b.is_zero():
        return _normalized(a)
    present = sorted(set(a.variables_present()) | set(b.variables_present()))
    if not present:
        return MultiPoly.constant(1, a.nvars)
    var = present[-1]

    ca, cb = _content_in(a, var), _content_in(b, var)
    pa, pb = _exact(a, ca), _exact(b, cb)
    c = prs_gcd(ca, cb)
    if pa.degree(var) < pb.degree(var):
        pa, pb = pb, pa
    while not pb.is_zero() and pb.degree(var) > 0:
        r = _pseudo_remainder(pa, pb, var)
        pa = pb
        pb = r if r.is_zero() else _exact(r, _content_in(r, var))
    g = pa if pb.is_zero() else MultiPoly.constant(1, a.nvars)
    g = _exact(g, _content_in(g, var))
    return _normalized(c * g)


def multivariate_gcd(a: MultiPoly, b: MultiPoly, config: Optional[GcdConfig] = None) -> MultiPoly:
    """
    GCD of two multivariate polynomials over Q.

    Raises:
        ConvergenceFailed: If the modular bounds run out and ``config.strict``.
    """
    cfg = config if config is not None else GcdConfig()
    result = zippel_gcd(a, b, cfg)
    if result.converged:
        return result.value
    if cfg.strict:
        raise result.diagnostic
    logger.info("Falling back to primitive PRS GCD: %s", result.diagnostic.reason)
    return _normalized(prs_gcd(a, b)) * result.value.constant_value()


# Expression level

def _content_poly(polys: Sequence[MultiPoly]) -> Fraction:
    return fraction_content(c for p in polys for c in p.terms.values())


def gcd_multipoly(a: MultiPoly, b: MultiPoly, cfg: GcdConfig) -> MultiPoly:
    present = set(a.variables_present()) | set(b.variables_present())
    if len(present) == 0:
        return MultiPoly.constant(_content_poly([a, b]), a.nvars)
    if len(present) == 1:
        (var,) = present
        g = modular_gcd(a.to_unipoly(var), b.to_unipoly(var), cfg)
        return MultiPoly.from_unipoly(g, var, a.nvars)
    return multivariate_gcd(a, b, cfg)


def polynomial_gcd(
    f: ExprLike, g: ExprLike, *gens: SymbolLike, config: Optional[Config] = None,
) -> Expr:
    """
    GCD of two polynomial expressions.

    Args:
        f, g: Polynomials with rational coefficients
        *gens: Generators; defaults to every free symbol
        config: Supplies the GcdConfig bounds

    Returns:
        The GCD as a simplified expression

    Raises:
        NotAPolynomial: If either input is not a polynomial in the generators.
    """
    cfg = resolve(config).gcd
    (a, b), symbols = polys_from_exprs([f, g], gens or None)
    return gcd_multipoly(a, b, cfg).to_expr(symbols)


def polynomial_lcm(
    f: ExprLike, g: ExprLike, *gens: SymbolLike, config: Optional[Config] = None,
) -> Expr:
    """Least common multiple ``f*g / gcd(f, g)``, primitive with positive leading coefficient."""
    cfg = resolve(config).gcd
    (a, b), symbols = polys_from_exprs([f, g], gens or None)
    if a.is_zero() or b.is_zero():
        return Const(0)
    product = a * b
    quotient = product.exact_div(gcd_multipoly(a, b, cfg))
    return _normalized(quotient).to_expr(symbols)


def content(f: ExprLike, var: Optional[SymbolLike] = None) -> Expr:
    """
    Content of a polynomial.

    Without ``var`` this is the rational GCD of the numeric coefficients. With
    ``var`` the other symbols are coefficients and the content is the GCD of
    the coefficient polynomials of ``var``.
    """
    (a,), symbols = polys_from_exprs([f])
    if var is None:
        return Const(Number(a.content()))
    v = as_symbol(var)
    if v not in symbols:
        return _to_expr(f) if not a.is_zero() else Const(0)
    index = symbols.index(v)
    cfg = GcdConfig()
    result: Optional[MultiPoly] = None
    for coeff in a.coefficients_in(index).values():
        result = coeff if result is None else gcd_multipoly(result, coeff, cfg)
    if result is None:
        return Const(0)
    return result.to_expr(symbols)


def primitive_part(f: ExprLike, var: Optional[SymbolLike] = None) -> Expr:
    """``f / content(f, var)``."""
    f = _to_expr(f)
    c = content(f, var)
    if isinstance(c, Const) and c.number.is_zero():
        return Const(0)
    (a, b), symbols = polys_from_exprs([f, c])
    q = a.exact_div(b)
    if q is None:
        return simplify(mul(f, pow_(c, -1)))
    return q.to_expr(symbols)
