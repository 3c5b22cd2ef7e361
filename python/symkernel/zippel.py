# SymKernel - Multivariate Modular GCD
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Multivariate polynomial GCD by evaluation, interpolation and CRT.

The GCD of two integer polynomials is computed from images: modulo a prime
p, the last variable is evaluated at points of Z_p, the GCDs of the
evaluated polynomials are computed recursively (down to univariate Euclid
over Z_p) and the results are interpolated back. Images for several primes
are combined coefficient-wise by the Chinese Remainder Theorem until the
lifted candidate stops changing, and the candidate is then verified by
trial division over Q.

Unlucky primes and evaluation points are detected by comparing leading
monomials of the images: an image whose leading monomial is smaller than
everything seen before invalidates the previous images; a larger one is
discarded.

The reconstruction runs through the states of ``CrtState``. When the bounds
in ``GcdConfig`` run out the result is the integer content of the inputs
(a divisor of the true GCD) together with a ``ConvergenceFailed``
diagnostic.
"""

from __future__ import annotations
from dataclasses import dataclass
from enum import Enum
import logging
import random
from math import gcd as igcd
from typing import Dict, List, Optional

from .config import GcdConfig
from .exceptions import ConvergenceFailed
from .finite_field import LARGE_PRIMES, ZpPoly, crt_pair, interpolate, mod_inverse, symmetric_mod
from .poly import MultiPoly, Monomial
from .rational import fraction_content

logger = logging.getLogger(__name__)

ModPoly = Dict[Monomial, int]


class CrtState(Enum):
    """Progress of the CRT reconstruction across primes."""
    INIT = "init"
    ACCUMULATING = "accumulating"
    CONVERGED = "converged"
    FAILED = "failed"


@dataclass
class GcdResult:
    """
    Outcome of a multivariate GCD.

    Attributes:
        value: The GCD (the integer content when the state is FAILED)
        state: Final reconstruction state
        primes_used: Number of primes whose images were computed
        diagnostic: ConvergenceFailed describing why the bounds ran out
    """
    value: MultiPoly
    state: CrtState
    primes_used: int = 0
    diagnostic: Optional[ConvergenceFailed] = None

    @property
    def converged(self) -> bool:
        return self.state is CrtState.CONVERGED


class _PointsExhausted(Exception):
    """Internal: a level used up its evaluation points."""


# Z_p[x_0..x_k] helpers; monomials keep the full variable count

def _reduce(terms: Dict[Monomial, int], p: int) -> ModPoly:
    out = {}
    for m, c in terms.items():
        c %= p
        if c:
            out[m] = c
    return out


def _mod_sub(a: ModPoly, b: ModPoly, p: int) -> ModPoly:
    out = dict(a)
    for m, c in b.items():
        v = (out.get(m, 0) - c) % p
        if v:
            out[m] = v
        else:
            out.pop(m, None)
    return out


def _mod_scale(a: ModPoly, c: int, p: int) -> ModPoly:
    return _reduce({m: v * c for m, v in a.items()}, p)


def _mod_exact_div(a: ModPoly, b: ModPoly, p: int) -> Optional[ModPoly]:
    """Quotient of ``a / b`` in Z_p[x] under lex order, None if inexact."""
    lm = max(b)
    inv = mod_inverse(b[lm], p)
    rem = dict(a)
    quo: ModPoly = {}
    while rem:
        m = max(rem)
        if any(x < y for x, y in zip(m, lm)):
            return None
        qm = tuple(x - y for x, y in zip(m, lm))
        qc = rem[m] * inv % p
        quo[qm] = qc
        rem = _mod_sub(rem, {tuple(x + y for x, y in zip(t, qm)): c * qc for t, c in b.items()}, p)
    return quo


def _split(a: ModPoly, k: int, p: int) -> Dict[Monomial, ZpPoly]:
    """View ``a`` as a polynomial in x_0..x_{k-1} with coefficients in Z_p[x_k]."""
    dense: Dict[Monomial, Dict[int, int]] = {}
    for m, c in a.items():
        head = m[:k] + (0,) + m[k + 1:]
        dense.setdefault(head, {})[m[k]] = c
    out = {}
    for head, cs in dense.items():
        out[head] = ZpPoly((cs.get(i, 0) for i in range(max(cs) + 1)), p)
    return out


def _join(parts: Dict[Monomial, ZpPoly], k: int) -> ModPoly:
    out: ModPoly = {}
    for head, poly in parts.items():
        for i, c in enumerate(poly.coeffs):
            if c:
                out[head[:k] + (i,) + head[k + 1:]] = c
    return out


def _evaluate_last(a: ModPoly, k: int, point: int, p: int) -> ModPoly:
    out: ModPoly = {}
    for m, c in a.items():
        head = m[:k] + (0,) + m[k + 1:]
        out[head] = (out.get(head, 0) + c * pow(point, m[k], p)) % p
    return {m: c for m, c in out.items() if c}


def _lex_monic(a: ModPoly, p: int) -> ModPoly:
    return _mod_scale(a, mod_inverse(a[max(a)], p), p)


def _univariate_gcd(a: ModPoly, b: ModPoly, nvars: int, p: int) -> ModPoly:
    def dense(poly: ModPoly) -> ZpPoly:
        cs: Dict[int, int] = {m[0]: c for m, c in poly.items()}
        return ZpPoly((cs.get(i, 0) for i in range(max(cs) + 1)), p)

    g = dense(a).gcd(dense(b))
    return {(i,) + (0,) * (nvars - 1): c for i, c in enumerate(g.coeffs) if c}


def _gcd_mod_p(a: ModPoly, b: ModPoly, k: int, nvars: int, p: int,
               rng: random.Random, max_points: int) -> ModPoly:
    """
    Lex-monic GCD of non-zero ``a`` and ``b`` in Z_p[x_0..x_k].

    At most ``max_points`` evaluation points of x_k are tried.
    """
    if k == 0:
        return _univariate_gcd(a, b, nvars, p)

    sa, sb = _split(a, k, p), _split(b, k, p)
    ca = _fold_gcd(sa.values())
    cb = _fold_gcd(sb.values())
    c = ca.gcd(cb)
    sa = {h: q // ca for h, q in sa.items()}
    sb = {h: q // cb for h, q in sb.items()}
    lca, lcb = sa[max(sa)], sb[max(sb)]
    gamma = lca.gcd(lcb)
    a1, b1 = _join(sa, k), _join(sb, k)
    bound = min(max(q.degree for q in sa.values()), max(q.degree for q in sb.values()))
    needed = bound + gamma.degree + 1

    points: List[int] = []
    images: List[ModPoly] = []
    lead: Optional[Monomial] = None
    tried = set()
    while True:
        if len(tried) >= min(max_points, p - 1):
            raise _PointsExhausted()
        point = rng.randrange(1, p)
        if point in tried:
            continue
        tried.add(point)
        if lca.evaluate(point) == 0 or lcb.evaluate(point) == 0:
            continue
        image = _gcd_mod_p(_evaluate_last(a1, k, point, p), _evaluate_last(b1, k, point, p),
                           k - 1, nvars, p, rng, max_points)
        m = max(image)
        if lead is not None and m > lead:
            continue
        if lead is None or m < lead:
            lead, points, images = m, [], []
        points.append(point)
        images.append(_mod_scale(image, gamma.evaluate(point), p))
        if len(points) < needed:
            continue

        candidate = _interpolate_images(points, images, k, p)
        parts = _split(candidate, k, p)
        content = _fold_gcd(parts.values())
        primitive = _join({h: q // content for h, q in parts.items()}, k)
        if _mod_exact_div(a1, primitive, p) is not None and _mod_exact_div(b1, primitive, p) is not None:
            result = _join({h: q * c for h, q in _split(primitive, k, p).items()}, k)
            return _lex_monic(result, p)
        # Undetected bad point among the samples; start over with fresh ones
        lead, points, images = None, [], []


def _fold_gcd(polys) -> ZpPoly:
    result: Optional[ZpPoly] = None
    for q in polys:
        result = q.monic() if result is None else result.gcd(q)
        if result.degree == 0:
            break
    return result


def _interpolate_images(points: List[int], images: List[ModPoly], k: int, p: int) -> ModPoly:
    monomials = set()
    for image in images:
        monomials |= image.keys()
    out: ModPoly = {}
    for m in monomials:
        poly = interpolate(points, [image.get(m, 0) for image in images], p)
        for i, c in enumerate(poly.coeffs):
            if c:
                out[m[:k] + (i,) + m[k + 1:]] = c
    return out


# Integer level

def _variable_order(a: MultiPoly, b: MultiPoly) -> List[int]:
    """Variables by decreasing combined degree; the last ones are evaluated first."""
    n = a.nvars
    return sorted(range(n), key=lambda i: (-(a.degree(i) + b.degree(i)), i))


def _inverse_order(order: List[int]) -> List[int]:
    inverse = [0] * len(order)
    for position, var in enumerate(order):
        inverse[var] = position
    return inverse


def zippel_gcd(a: MultiPoly, b: MultiPoly, config: Optional[GcdConfig] = None) -> GcdResult:
    """
    GCD of two multivariate polynomials over Q.

    The result is normalized as ``content * primitive`` with the primitive
    part having coprime integer coefficients and a positive lex-leading
    coefficient.

    Args:
        a: First polynomial
        b: Second polynomial (same variable count)
        config: Evaluation-point and prime bounds

    Returns:
        GcdResult; on FAILED the value is the content GCD and ``diagnostic``
        holds the ConvergenceFailed reason.
    """
    cfg = config if config is not None else GcdConfig()
    n = a.nvars
    if a.is_zero() or b.is_zero():
        other = b if a.is_zero() else a
        if other.is_zero():
            return GcdResult(other, CrtState.CONVERGED)
        c, prim = other.primitive()
        return GcdResult(prim * abs(c), CrtState.CONVERGED)

    ca, pa = a.primitive()
    cb, pb = b.primitive()
    content = fraction_content([ca, cb])
    content_poly = MultiPoly.constant(content, n)
    if pa.is_constant() or pb.is_constant():
        return GcdResult(content_poly, CrtState.CONVERGED)

    order = _variable_order(pa, pb)
    A = pa.permute(order)
    B = pb.permute(order)
    inverse = _inverse_order(order)

    state = CrtState.INIT
    ia, ib = A.integer_terms(), B.integer_terms()
    lc_a, lc_b = ia[max(ia)], ib[max(ib)]
    gamma = igcd(lc_a, lc_b)
    rng = random.Random(cfg.seed)

    candidate: Dict[Monomial, int] = {}
    modulus = 1
    lead: Optional[Monomial] = None
    previous: Optional[Dict[Monomial, int]] = None
    primes_used = 0

    for p in LARGE_PRIMES:
        if primes_used >= cfg.max_crt_iterations:
            break
        if lc_a % p == 0 or lc_b % p == 0:
            continue
        primes_used += 1
        try:
            image = _gcd_mod_p(_reduce(ia, p), _reduce(ib, p), n - 1, n, p, rng,
                               cfg.max_eval_points)
        except _PointsExhausted:
            logger.debug("Evaluation points exhausted modulo %d", p)
            continue
        m = max(image)
        if lead is not None and m > lead:
            logger.debug("Unlucky prime %d (leading monomial %s > %s)", p, m, lead)
            continue
        if lead is None or m < lead:
            if lead is not None:
                logger.debug("Prime %d lowers leading monomial to %s; restarting", p, m)
            lead, candidate, modulus, previous = m, {}, 1, None
            state = CrtState.INIT

        image = _mod_scale(image, gamma, p)
        if state is CrtState.INIT:
            candidate, modulus = dict(image), p
            state = CrtState.ACCUMULATING
        else:
            keys = candidate.keys() | image.keys()
            merged = {}
            for key in keys:
                merged[key] = crt_pair(candidate.get(key, 0), modulus, image.get(key, 0), p)[0]
            candidate, modulus = merged, modulus * p

        lifted = {key: symmetric_mod(c, modulus) for key, c in candidate.items()}
        lifted = {key: c for key, c in lifted.items() if c}
        if lifted != previous:
            previous = lifted
            continue

        trial = MultiPoly(lifted, n)
        _, trial = trial.primitive()
        if A.exact_div(trial) is not None and B.exact_div(trial) is not None:
            logger.debug("Multivariate GCD converged after %d primes", primes_used)
            _, result = trial.permute(inverse).primitive()
            result = result * content
            return GcdResult(result, CrtState.CONVERGED, primes_used)

    reason = (f"no stable GCD image after {primes_used} primes "
              f"(max_crt_iterations={cfg.max_crt_iterations}, "
              f"max_eval_points={cfg.max_eval_points})")
    logger.warning("Multivariate GCD failed: %s", reason)
    return GcdResult(content_poly, CrtState.FAILED, primes_used, ConvergenceFailed(reason))
