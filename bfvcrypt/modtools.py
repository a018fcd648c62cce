"""Modular arithmetic, negacyclic polynomial products and NTT parameter search."""

from __future__ import annotations

import random
from typing import NamedTuple

from .primes import is_prime, mod_pow


class PrimeParams(NamedTuple):
    """An NTT-friendly modulus with its 2n-th root of unity and inverses."""

    q: int
    psi: int
    psi_inv: int
    w: int
    w_inv: int


def _tdiv(a: int, b: int) -> int:
    """Integer division truncated toward zero."""
    quotient = abs(a) // abs(b)
    return -quotient if (a < 0) != (b < 0) else quotient


def _tmod(a: int, b: int) -> int:
    """Remainder whose sign follows the dividend."""
    return a - b * _tdiv(a, b)


def extended_gcd(a: int, b: int) -> tuple[int, int, int]:
    """Return (g, x, y) with a*x + b*y == g."""
    if a == 0:
        return b, 0, 1
    g, y, x = extended_gcd(_tmod(b, a), a)
    return g, x - _tdiv(b, a) * y, y


def mod_inv(a: int, m: int) -> int:
    """Return the inverse of a modulo m; ValueError if it does not exist."""
    g, x, _ = extended_gcd(a, m)
    if g != 1:
        raise ValueError("modular inverse doesn't exist")
    return x % m


def gcd(a: int, b: int) -> int:
    """Euclid's algorithm with remainders that follow the dividend's sign."""
    while b != 0:
        a, b = b, _tmod(a, b)
    return a


def int_reverse(a: int, bits: int) -> int:
    """Reverse the lowest `bits` bits of a."""
    result = 0
    for _ in range(bits):
        result = (result << 1) | (a & 1)
        a >>= 1
    return result


def _negacyclic_product(poly_a: list[int], poly_b: list[int]) -> list[int]:
    if len(poly_a) != len(poly_b):
        raise ValueError("polynomials must have the same number of coefficients")
    degree = len(poly_a)
    product = [0] * (2 * degree)
    for i, a in enumerate(poly_a):
        for j, b in enumerate(poly_b):
            product[i + j] += a * b
    return [low - high for low, high in zip(product[:degree], product[degree:])]


def red_pol_mul(poly_a: list[int], poly_b: list[int], m: int) -> list[int]:
    """Multiply two polynomials modulo x^n + 1 and m."""
    return [c % m for c in _negacyclic_product(poly_a, poly_b)]


def red_pol_mul_unreduced(poly_a: list[int], poly_b: list[int]) -> list[int]:
    """Multiply two polynomials modulo x^n + 1 over the integers."""
    return _negacyclic_product(poly_a, poly_b)


def ntt_friendly_prime(n: int, logq: int, rounds: int, rng: random.Random) -> int:
    """Find the largest prime q < 2**logq with q = 1 (mod 2n), above 2**(logq-1)."""
    step = 2 * n
    candidate = (1 << logq) - step + 1
    lower_bound = 1 << (logq - 1)
    while candidate > lower_bound:
        if is_prime(candidate, rounds, rng):
            return candidate
        candidate -= step
    raise RuntimeError("failed to find a suitable ntt prime")


def root_of_unity_check(w: int, m: int, q: int) -> bool:
    """Return True if w**(m/2) == -1 modulo q."""
    if w == 0:
        return False
    return mod_pow(w, _tdiv(m, 2), q) == q - 1


def find_primitive_root(m: int, q: int, rng: random.Random) -> tuple[bool, int]:
    """Search for a primitive m-th root of unity modulo q.

    Returns (divides, root): divides is False when m does not divide q - 1;
    root is 0 when no root was found within the attempt budget.
    """
    g = _tdiv(q - 1, m)
    if q - 1 != g * m:
        return False, 0
    for _ in range(100):
        a = rng.randint(2, q - 1)
        b = mod_pow(a, g, q)
        if root_of_unity_check(b, m, q):
            return True, b
    return True, 0


def bfv_param_gen(n: int, logq: int, rounds: int, rng: random.Random) -> PrimeParams:
    """Generate an NTT-friendly modulus and its root-of-unity parameters."""
    while True:
        q = ntt_friendly_prime(n, logq, rounds, rng)
        found, psi = find_primitive_root(2 * n, q, rng)
        if found:
            break
    psi_inv = mod_inv(psi, q)
    w = mod_pow(psi, 2, q)
    w_inv = mod_inv(w, q)
    return PrimeParams(q, psi, psi_inv, w, w_inv)