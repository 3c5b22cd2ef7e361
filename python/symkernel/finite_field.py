# SymKernel - Finite Field Arithmetic
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Arithmetic in Z_p and dense univariate polynomials over Z_p.

These are the image domains of the modular GCD algorithms: integer
polynomials are reduced modulo a prime, the work is done in Z_p[x], and
results are lifted back with the Chinese Remainder Theorem and the symmetric
representation ``(-p/2, p/2]``.

The prime table ``LARGE_PRIMES`` holds the largest primes below 2**31,
found once at import with a deterministic Miller-Rabin test.
"""

from __future__ import annotations
from typing import Iterable, List, Sequence, Tuple

from .exceptions import DivisionByZero

# Witness set that makes Miller-Rabin deterministic for n < 3.3e24
_MR_BASES = (2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37)

PRIME_TABLE_SIZE = 64


def is_prime(n: int) -> bool:
    """Deterministic primality test for the integer range used here."""
    if n < 2:
        return False
    for p in _MR_BASES:
        if n % p == 0:
            return n == p
    d, s = n - 1, 0
    while d % 2 == 0:
        d //= 2
        s += 1
    for a in _MR_BASES:
        x = pow(a, d, n)
        if x == 1 or x == n - 1:
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


def _largest_primes_below(bound: int, count: int) -> Tuple[int, ...]:
    found = []
    n = bound - 1 if bound % 2 == 0 else bound - 2
    while len(found) < count and n > 2:
        if is_prime(n):
            found.append(n)
        n -= 2
    return tuple(found)


LARGE_PRIMES: Tuple[int, ...] = _largest_primes_below(1 << 31, PRIME_TABLE_SIZE)


# Scalars

def mod_inverse(a: int, p: int) -> int:
    """Inverse of ``a`` modulo ``p``; raises DivisionByZero if none exists."""
    a %= p
    if a == 0:
        raise DivisionByZero(f'inverse of 0 mod {p}')
    old_r, r = a, p
    old_s, s = 1, 0
    while r:
        q = old_r // r
        old_r, r = r, old_r - q * r
        old_s, s = s, old_s - q * s
    if old_r != 1:
        raise DivisionByZero(f'{a} is not invertible mod {p}')
    return old_s % p


def symmetric_mod(a: int, m: int) -> int:
    """Representative of ``a`` mod ``m`` in ``(-m/2, m/2]``."""
    r = a % m
    return r - m if r > m // 2 else r


def crt_pair(r1: int, m1: int, r2: int, m2: int) -> Tuple[int, int]:
    """Combine ``x = r1 (mod m1)`` and ``x = r2 (mod m2)`` for coprime moduli."""
    t = (r2 - r1) * mod_inverse(m1 % m2, m2) % m2
    m = m1 * m2
    return (r1 + m1 * t) % m, m


def crt_coefficients(
    current: Sequence[int], modulus: int, image: Sequence[int], p: int,
) -> List[int]:
    """Coefficient-wise CRT of a lifted candidate with a new image mod ``p``."""
    n = max(len(current), len(image))
    out = []
    for i in range(n):
        a = current[i] if i < len(current) else 0
        b = image[i] if i < len(image) else 0
        out.append(crt_pair(a % modulus, modulus, b % p, p)[0])
    return out


# Polynomials

class ZpPoly:
    """
    Dense polynomial over Z_p: ``coeffs[i]`` is the coefficient of ``x**i``,
    every entry in ``[0, p)``, no trailing zeros.
    """

    __slots__ = ('coeffs', 'p')

    def __init__(self, coeffs: Iterable[int], p: int):
        cs = [c % p for c in coeffs]
        while cs and cs[-1] == 0:
            cs.pop()
        self.coeffs: Tuple[int, ...] = tuple(cs)
        self.p = p

    @classmethod
    def from_integers(cls, coeffs: Iterable[int], p: int) -> ZpPoly:
        return cls(coeffs, p)

    @property
    def degree(self) -> int:
        return len(self.coeffs) - 1

    @property
    def lc(self) -> int:
        return self.coeffs[-1] if self.coeffs else 0

    def is_zero(self) -> bool:
        return not self.coeffs

    def _check_modulus(self, other: ZpPoly) -> None:
        if other.p != self.p:
            raise ValueError(f"moduli differ: {self.p} and {other.p}")

    def __add__(self, other: ZpPoly) -> ZpPoly:
        self._check_modulus(other)
        a, b = self.coeffs, other.coeffs
        n = max(len(a), len(b))
        return ZpPoly(((a[i] if i < len(a) else 0) + (b[i] if i < len(b) else 0)
                      for i in range(n)), self.p)

    def __sub__(self, other: ZpPoly) -> ZpPoly:
        self._check_modulus(other)
        a, b = self.coeffs, other.coeffs
        n = max(len(a), len(b))
        return ZpPoly(((a[i] if i < len(a) else 0) - (b[i] if i < len(b) else 0)
                      for i in range(n)), self.p)

    def __neg__(self) -> ZpPoly:
        return ZpPoly((-c for c in self.coeffs), self.p)

    def __mul__(self, other) -> ZpPoly:
        if isinstance(other, int):
            return ZpPoly((c * other for c in self.coeffs), self.p)
        self._check_modulus(other)
        if self.is_zero() or other.is_zero():
            return ZpPoly((), self.p)
        out = [0] * (len(self.coeffs) + len(other.coeffs) - 1)
        for i, a in enumerate(self.coeffs):
            if a:
                for j, b in enumerate(other.coeffs):
                    out[i + j] += a * b
        return ZpPoly(out, self.p)

    __rmul__ = __mul__

    def divmod(self, other: ZpPoly) -> Tuple[ZpPoly, ZpPoly]:
        self._check_modulus(other)
        if other.is_zero():
            raise DivisionByZero(f'polynomial division mod {self.p}')
        p = self.p
        rem = list(self.coeffs)
        dg = other.degree
        if len(rem) - 1 < dg:
            return ZpPoly((), p), self
        inv = mod_inverse(other.lc, p)
        quo = [0] * (len(rem) - dg)
        for k in range(len(rem) - 1 - dg, -1, -1):
            c = rem[k + dg] * inv % p
            quo[k] = c
            if c:
                for j, b in enumerate(other.coeffs):
                    rem[k + j] = (rem[k + j] - c * b) % p
        return ZpPoly(quo, p), ZpPoly(rem[:dg], p)

    def __floordiv__(self, other: ZpPoly) -> ZpPoly:
        return self.divmod(other)[0]

    def __mod__(self, other: ZpPoly) -> ZpPoly:
        return self.divmod(other)[1]

    def monic(self) -> ZpPoly:
        if self.is_zero():
            return self
        return self * mod_inverse(self.lc, self.p)

    def gcd(self, other: ZpPoly) -> ZpPoly:
        """Monic GCD by the Euclidean algorithm."""
        a, b = self, other
        while not b.is_zero():
            a, b = b, a % b
        return a.monic()

    def evaluate(self, x: int) -> int:
        result = 0
        for c in reversed(self.coeffs):
            result = (result * x + c) % self.p
        return result

    def derivative(self) -> ZpPoly:
        return ZpPoly((i * c for i, c in enumerate(self.coeffs) if i), self.p)

    def symmetric_coeffs(self) -> List[int]:
        """Coefficients lifted to the symmetric range around zero."""
        return [symmetric_mod(c, self.p) for c in self.coeffs]

    def __eq__(self, other) -> bool:
        return isinstance(other, ZpPoly) and self.p == other.p and self.coeffs == other.coeffs

    def __hash__(self) -> int:
        return hash((self.coeffs, self.p))

    def __repr__(self) -> str:
        return f"ZpPoly({list(self.coeffs)}, p={self.p})"


def interpolate(points: Sequence[int], values: Sequence[int], p: int) -> ZpPoly:
    """
    Newton interpolation over Z_p.

    Returns the unique polynomial of degree < len(points) taking
    ``values[i]`` at ``points[i]``. Points must be distinct mod ``p``.
    """
    n = len(points)
    table = [v % p for v in values]
    for j in range(1, n):
        for i in range(n - 1, j - 1, -1):
            inv = mod_inverse(points[i] - points[i - j], p)
            table[i] = (table[i] - table[i - 1]) * inv % p
    # Horner on the Newton form
    result = ZpPoly((), p)
    for i in range(n - 1, -1, -1):
        result = result * ZpPoly((-points[i], 1), p) + ZpPoly((table[i],), p)
    return result
