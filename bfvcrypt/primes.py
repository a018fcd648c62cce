"""Primality testing and prime generation."""

from __future__ import annotations

import math
import random

LOW_PRIMES: tuple[int, ...] = (
    3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71, 73,
    79, 83, 89, 97, 101, 103, 107, 109, 113, 127, 131, 137, 139, 149, 151, 157,
    163, 167, 173, 179, 181, 191, 193, 197, 199, 211, 223, 227, 229, 233, 239,
    241, 251, 257, 263, 269, 271, 277, 281, 283, 293, 307, 311, 313, 317, 331,
    337, 347, 349, 353, 359, 367, 373, 379, 383, 389, 397, 401, 409, 419, 421,
    431, 433, 439, 443, 449, 457, 461, 463, 467, 479, 487, 491, 499, 503, 509,
    521, 523, 541, 547, 557, 563, 569, 571, 577, 587, 593, 599, 601, 607, 613,
    617, 619, 631, 641, 643, 647, 653, 659, 661, 673, 677, 683, 691, 701, 709,
    719, 727, 733, 739, 743, 751, 757, 761, 769, 773, 787, 797, 809, 811, 821,
    823, 827, 829, 839, 853, 857, 859, 863, 877, 881, 883, 887, 907, 911, 919,
    929, 937, 941, 947, 953, 967, 971, 977, 983, 991, 997,
)


def mod_pow(base: int, exp: int, mod: int) -> int:
    """Return base**exp modulo mod; a non-positive exponent gives 1."""
    if exp <= 0:
        return 1
    return pow(base % mod, exp, mod)


def miller_rabin(p: int, rounds: int, rng: random.Random) -> bool:
    """Run `rounds` Miller-Rabin rounds on the odd number p."""
    r = p - 1
    u = 0
    while r & 1 == 0:
        u += 1
        r >>= 1

    for _ in range(rounds):
        a = rng.randint(2, p - 2)
        z = mod_pow(a, r, p)
        if z in (1, p - 1):
            continue
        for _ in range(u - 1):
            z = mod_pow(z, 2, p)
            if z == 1:
                return False
            if z == p - 1:
                break
        if z != p - 1:
            return False
    return True


def is_prime(n: int, rounds: int, rng: random.Random) -> bool:
    """Return True if n is (probably) prime."""
    if n < 2:
        return False
    if n == 2:
        return True
    for p in LOW_PRIMES:
        if n == p:
            return True
        if n % p == 0:
            return False
    return miller_rabin(n, rounds, rng)


def generate_large_prime(bit_length: int, rounds: int, rng: random.Random) -> int:
    """Draw random numbers of exactly `bit_length` bits until one is prime."""
    attempts = int(100 * (math.log2(bit_length) + 1))
    low = 1 << (bit_length - 1)
    high = (1 << bit_length) - 1
    for _ in range(attempts):
        candidate = rng.randint(low, high)
        if is_prime(candidate, rounds, rng):
            return candidate
    raise RuntimeError("Failed to generate a large prime after many attempts")