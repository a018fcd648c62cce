"""The BFV somewhat-homomorphic encryption scheme over Z_q[x]/(x^n + 1)."""

from __future__ import annotations

import math
import random
from typing import Sequence

from .modtools import red_pol_mul, red_pol_mul_unreduced
from .poly import NttParams, Polynomial

Ciphertext = list[Polynomial]

DECOMPOSITION_BASE = 16


def _round_div(num: int, den: int) -> int:
    """Exact num/den rounded to the nearest integer, halves away from zero."""
    negative = (num < 0) != (den < 0)
    quotient, remainder = divmod(abs(num), abs(den))
    if 2 * remainder >= abs(den):
        quotient += 1
    return -quotient if negative else quotient


def _centered(coeffs: Sequence[int], modulus: int) -> list[int]:
    """Lift residues to the symmetric range around zero."""
    half = modulus // 2
    return [c - modulus if c > half else c for c in coeffs]


class BFV:
    """Key generation, encryption and homomorphic evaluation for BFV.

    Plaintexts are polynomials modulo t, ciphertexts lists of polynomials
    modulo q. The relinearization attributes ``base`` (T) and ``levels`` (l)
    are set by :meth:`eval_key_gen_1`; the special modulus ``p`` used by
    :meth:`eval_key_gen_2` must be assigned before that call.
    """

    def __init__(
        self,
        n: int,
        q: int,
        t: int,
        mu: float,
        sigma: float,
        params: NttParams,
        rng: random.Random | None = None,
    ) -> None:
        self.n = n
        self.q = q
        self.t = t
        self.base = 0
        self.levels = 0
        self.p = 0
        self.mu = mu
        self.sigma = sigma
        self.params = params
        self.rng = rng if rng is not None else random.SystemRandom()

        self.secret_key = Polynomial.zeros(n, q, params)
        self.public_key: Ciphertext = []
        self.relin_keys_1: list[tuple[Polynomial, Polynomial]] = []
        self.relin_keys_2: list[Polynomial] = []

    def __str__(self) -> str:
        return (
            "\n--- Parameters:\n"
            f"n     : {self.n}\n"
            f"q     : {self.q}\n"
            f"t     : {self.t}\n"
            f"T     : {self.base}\n"
            f"l     : {self.levels}\n"
            f"p     : {self.p}\n"
            f"mu    : {self.mu:g}\n"
            f"sigma : {self.sigma:g}\n"
        )

    def print_params(self) -> None:
        """Print the parameter summary."""
        print(self)

    # -- sampling helpers -------------------------------------------------

    def _poly(self, coeffs: Sequence[int], modulus: int | None = None) -> Polynomial:
        return Polynomial(self.n, self.q if modulus is None else modulus, list(coeffs), self.params)

    def _uniform(self, modulus: int | None = None) -> Polynomial:
        modulus = self.q if modulus is None else modulus
        poly = Polynomial.zeros(self.n, modulus, self.params)
        poly.randomize(modulus, rng=self.rng)
        return poly

    def _ternary(self) -> Polynomial:
        poly = Polynomial.zeros(self.n, self.q, self.params)
        poly.randomize(2, rng=self.rng)
        return poly

    def _error(self, modulus: int | None = None) -> Polynomial:
        modulus = self.q if modulus is None else modulus
        poly = Polynomial.zeros(self.n, modulus, self.params)
        poly.randomize(0, gaussian=True, mu=self.mu, sigma=self.sigma, rng=self.rng)
        return poly

    @staticmethod
    def _split(ciphertext: Sequence[Polynomial], size: int) -> tuple[Polynomial, ...]:
        if len(ciphertext) != size:
            raise ValueError(
                f"expected a ciphertext of {size} polynomials, got {len(ciphertext)}"
            )
        return tuple(ciphertext)

    def _scale_down(self, noisy: Polynomial) -> Polynomial:
        t, q = self.t, self.q
        return self._poly([_round_div(t * c, q) % t for c in noisy.coeffs], t)

    # -- key generation ---------------------------------------------------

    def secret_key_gen(self) -> None:
        """Draw a ternary secret key."""
        self.secret_key = self._ternary()

    def public_key_gen(self) -> None:
        """Derive the public key (-(a*s + e), a)."""
        a = self._uniform()
        e = self._error()
        self.public_key = [-(a * self.secret_key + e), a]

    def eval_key_gen_1(self) -> None:
        """Generate base-T digit-decomposition relinearization keys."""
        self.base = DECOMPOSITION_BASE
        self.levels = math.floor(math.log(self.q) / math.log(self.base))
        s = self.secret_key
        s_sq = s * s

        keys = []
        for i in range(self.levels + 1):
            a = self._uniform()
            e = self._error()
            scale = pow(self.base, i, self.q)
            scaled_sq = self._poly([(scale * c) % self.q for c in s_sq.coeffs])
            keys.append((scaled_sq - (a * s + e), a))
        self.relin_keys_1 = keys

    def eval_key_gen_2(self) -> None:
        """Generate the modulus-switching relinearization key over p*q."""
        if self.p <= 0:
            raise ValueError("eval_key_gen_2 needs a positive special modulus p")
        pq = self.p * self.q
        s_small = _centered(self.secret_key.coeffs, self.q)

        a = self._uniform(pq)
        e = self._error(pq)
        a_s = red_pol_mul(a.coeffs, s_small, pq)
        s_sq = red_pol_mul_unreduced(s_small, s_small)
        key0 = [
            (-(x + err) + self.p * sq) % pq
            for x, err, sq in zip(a_s, e.coeffs, s_sq)
        ]
        self.relin_keys_2 = [self._poly(key0, pq), a]

    # -- encryption -------------------------------------------------------

    def encrypt(self, m: Polynomial) -> Ciphertext:
        """Encrypt a plaintext polynomial into a two-element ciphertext."""
        if not self.public_key:
            raise ValueError("public key has not been generated")
        pk0, pk1 = self.public_key
        delta = self.q // self.t

        u = self._ternary()
        e1 = self._error()
        e2 = self._error()
        scaled = self._poly([(delta * c) % self.q for c in m.coeffs])

        c0 = pk0 * u + e1 + scaled
        c1 = pk1 * u + e2
        return [c0, c1]

    def decrypt(self, ciphertext: Sequence[Polynomial]) -> Polynomial:
        """Decrypt a two-element ciphertext into a plaintext modulo t."""
        c0, c1 = self._split(ciphertext, 2)
        return self._scale_down(c1 * self.secret_key + c0)

    def decrypt_3(self, ciphertext: Sequence[Polynomial]) -> Polynomial:
        """Decrypt a three-element ciphertext produced by multiplication."""
        c0, c1, c2 = self._split(ciphertext, 3)
        s = self.secret_key
        s_sq = s * s
        return self._scale_down(c0 + (c1 * s + c2 * s_sq))

    # -- relinearization --------------------------------------------------

    def relinearize_1(self, ciphertext: Sequence[Polynomial]) -> Ciphertext:
        """Reduce a three-element ciphertext to two using digit decomposition."""
        if not self.relin_keys_1:
            raise ValueError("relinearization keys have not been generated")
        c0, c1, c2 = self._split(ciphertext, 3)

        remaining = list(c2.coeffs)
        digits = []
        for _ in range(self.levels + 1):
            digits.append(self._poly([c % self.base for c in remaining]))
            remaining = [c // self.base for c in remaining]

        c0r, c1r = c0, c1
        for (key0, key1), digit in zip(self.relin_keys_1, digits):
            c0r = c0r + key0 * digit
            c1r = c1r + key1 * digit
        return [c0r, c1r]

    def relinearize_2(self, ciphertext: Sequence[Polynomial]) -> Ciphertext:
        """Reduce a three-element ciphertext to two using modulus switching."""
        if not self.relin_keys_2:
            raise ValueError("relinearization keys have not been generated")
        if self.p <= 0:
            raise ValueError("relinearization needs a positive special modulus p")
        c0, c1, c2 = self._split(ciphertext, 3)

        def lowered(key: Polynomial) -> Polynomial:
            product = red_pol_mul_unreduced(c2.coeffs, key.coeffs)
            return self._poly([_round_div(x, self.p) % self.q for x in product])

        key0, key1 = self.relin_keys_2
        return [c0 + lowered(key0), c1 + lowered(key1)]

    # -- encoding ---------------------------------------------------------

    def int_encode(self, m: int) -> Polynomial:
        """Encode an integer as its binary digits, negated modulo t if negative."""
        magnitude = abs(m)
        bits = [(magnitude >> i) & 1 for i in range(self.n)]
        if m < 0:
            bits = [(self.t - b) % self.t for b in bits]
        return self._poly(bits, self.t)

    def int_decode(self, m: Polynomial) -> int:
        """Evaluate the centred plaintext polynomial at x = 2."""
        t = self.t
        threshold = 2 if t == 2 else (t + 1) >> 1
        return sum(
            (c - t if c >= threshold else c) * (1 << i)
            for i, c in enumerate(m.coeffs)
        )

    # -- homomorphic operations -------------------------------------------

    def add(self, ct0: Sequence[Polynomial], ct1: Sequence[Polynomial]) -> Ciphertext:
        """Add two ciphertexts component by component."""
        if len(ct0) != len(ct1):
            raise ValueError("ciphertexts must have the same number of polynomials")
        return [a + b for a, b in zip(ct0, ct1)]

    def sub(self, ct0: Sequence[Polynomial], ct1: Sequence[Polynomial]) -> Ciphertext:
        """Subtract two ciphertexts component by component."""
        if len(ct0) != len(ct1):
            raise ValueError("ciphertexts must have the same number of polynomials")
        return [a - b for a, b in zip(ct0, ct1)]

    def multiply(self, ct0: Sequence[Polynomial], ct1: Sequence[Polynomial]) -> Ciphertext:
        """Multiply two ciphertexts into a three-element ciphertext."""
        a0, a1 = self._split(ct0, 2)
        b0, b1 = self._split(ct1, 2)

        r0 = red_pol_mul_unreduced(a0.coeffs, b0.coeffs)
        r1 = [
            x + y
            for x, y in zip(
                red_pol_mul_unreduced(a0.coeffs, b1.coeffs),
                red_pol_mul_unreduced(a1.coeffs, b0.coeffs),
            )
        ]
        r2 = red_pol_mul_unreduced(a1.coeffs, b1.coeffs)

        t, q = self.t, self.q
        return [self._poly([_round_div(t * x, q) % q for x in r]) for r in (r0, r1, r2)]