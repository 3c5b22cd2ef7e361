# SymKernel - Rational Number Utilities
# Copyright (c) 2024 SymKernel Contributors. All rights reserved.

"""
Exact integer and rational helpers shared by the number tower and the
polynomial kernel.

Floats that enter exact algorithms (polynomial conversion, root extraction)
are read the way a person wrote them rather than by their binary expansion:

    >>> from fractions import Fraction
    >>> Fraction(0.1)
    Fraction(3602879701896397, 36028797018963968)
    >>> to_fraction(0.1)
    Fraction(1, 10)
"""

from __future__ import annotations
from fractions import Fraction
from math import gcd, isqrt
from typing import Iterable, Optional, Tuple, Union


Rational = Union[int, Fraction]


def to_fraction(x: Union[int, float, Fraction], max_denom: int = 10**12) -> Fraction:
    """
    Convert an exact or floating value to a Fraction.

    Floats are converted through their shortest decimal representation, so
    ``0.1`` becomes ``1/10``; very long decimals fall back to
    ``limit_denominator(max_denom)``.

    Examples:
        >>> to_fraction(0.25)
        Fraction(1, 4)
        >>> to_fraction(Fraction(1, 3))
        Fraction(1, 3)
    """
    if isinstance(x, Fraction):
        return x
    if isinstance(x, int):
        return Fraction(x)
    if x != x or x in (float('inf'), float('-inf')):
        raise ValueError(f"Cannot convert {x!r} to an exact fraction")
    if x == int(x):
        return Fraction(int(x))

    text = repr(x)
    if 'e' in text or 'E' in text:
        return Fraction(x).limit_denominator(max_denom)

    # Fraction parses decimal strings exactly: "0.125" -> 1/8
    result = Fraction(text)
    if result.denominator <= max_denom:
        return result
    return Fraction(x).limit_denominator(max_denom)


def normalize(value: Rational) -> Rational:
    """Collapse a Fraction with unit denominator to an int."""
    if isinstance(value, Fraction) and value.denominator == 1:
        return value.numerator
    return value


def integer_nth_root(n: int, k: int) -> Tuple[int, bool]:
    """
    Integer k-th root of a non-negative integer.

    Returns:
        (r, exact) with r = floor(n ** (1/k)) and exact True iff r**k == n.
    """
    if n < 0:
        raise ValueError("integer_nth_root requires n >= 0")
    if n < 2:
        return n, True
    if k == 1:
        return n, True
    if k == 2:
        r = isqrt(n)
        return r, r * r == n
    # Newton iteration from an overestimate
    r = 1 << ((n.bit_length() + k - 1) // k)
    while True:
        s = ((k - 1) * r + n // r ** (k - 1)) // k
        if s >= r:
            break
        r = s
    while r ** k > n:
        r -= 1
    while (r + 1) ** k <= n:
        r += 1
    return r, r ** k == n


def extract_perfect_power(n: int, k: int, trial_limit: int = 10**4) -> Tuple[int, int]:
    """
    Split a positive integer as ``n = outside**k * inside``.

    Only prime factors below ``trial_limit`` are pulled out, except that an
    exact k-th power is always recognised. ``inside`` has no k-th power
    factor built from those primes.
    """
    if n <= 0:
        raise ValueError("extract_perfect_power requires n > 0")
    root, exact = integer_nth_root(n, k)
    if exact:
        return root, 1
    outside, inside = 1, 1
    rest = n
    p = 2
    while p * p <= rest and p < trial_limit:
        count = 0
        while rest % p == 0:
            rest //= p
            count += 1
        if count:
            outside *= p ** (count // k)
            inside *= p ** (count % k)
        p += 1 if p == 2 else 2
    if rest > 1:
        root, exact = integer_nth_root(rest, k)
        if exact:
            outside *= root
        else:
            inside *= rest
    return outside, inside


def rational_nth_root(q: Fraction, k: int) -> Optional[Fraction]:
    """Exact k-th root of a non-negative rational, or None."""
    if q < 0:
        return None
    num, num_exact = integer_nth_root(q.numerator, k)
    den, den_exact = integer_nth_root(q.denominator, k)
    if num_exact and den_exact:
        return Fraction(num, den)
    return None


def divisors(n: int) -> list[int]:
    """Positive divisors of a non-zero integer, in increasing order."""
    n = abs(n)
    if n == 0:
        raise ValueError("0 has infinitely many divisors")
    small, large = [], []
    d = 1
    while d * d <= n:
        if n % d == 0:
            small.append(d)
            if d * d != n:
                large.append(n // d)
        d += 1
    return small + large[::-1]


def lcm(a: int, b: int) -> int:
    """Least common multiple of two integers (non-negative)."""
    if a == 0 or b == 0:
        return 0
    return abs(a * b) // gcd(a, b)


def fraction_content(values: Iterable[Rational]) -> Fraction:
    """
    Rational content: gcd of numerators over lcm of denominators.

    The result is non-negative; the content of all-zero input is 0.
    """
    num_gcd, den_lcm = 0, 1
    for v in values:
        v = Fraction(v)
        if v == 0:
            continue
        num_gcd = gcd(num_gcd, v.numerator)
        den_lcm = lcm(den_lcm, v.denominator)
    return Fraction(num_gcd, den_lcm)
