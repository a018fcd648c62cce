"""Polynomials in Z_q[x]/(x^n + 1) with NTT-accelerated multiplication."""

from __future__ import annotations

import math
import random
from dataclasses import dataclass, field

from .modtools import mod_inv
from .ntt import intt, ntt

_SYSTEM_RNG = random.SystemRandom()


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    magnitude = math.floor(abs(value) + 0.5)
    return -magnitude if value < 0 else magnitude


def _powers(base: int, count: int, q: int) -> tuple[int, ...]:
    table = [1] * count
    for i in range(1, count):
        table[i] = (table[i - 1] * base) % q
    return tuple(table)


@dataclass(frozen=True)
class NttParams:
    """Power tables of w, w^-1, psi and psi^-1 used by the transform."""

    w: tuple[int, ...] = ()
    w_inv: tuple[int, ...] = ()
    psi: tuple[int, ...] = ()
    psi_inv: tuple[int, ...] = ()

    @classmethod
    def from_root(cls, n: int, q: int, psi: int) -> NttParams:
        """Build the tables from a primitive 2n-th root of unity psi modulo q."""
        psi_inv = mod_inv(psi, q)
        w = pow(psi, 2, q)
        w_inv = mod_inv(w, q)
        return cls(
            w=_powers(w, n, q),
            w_inv=_powers(w_inv, n, q),
            psi=_powers(psi, n, q),
            psi_inv=_powers(psi_inv, n, q),
        )


@dataclass(eq=False)
class Polynomial:
    """A polynomial of n coefficients modulo q, in coefficient or NTT form."""

    n: int
    q: int
    coeffs: list[int]
    params: NttParams = field(default_factory=NttParams)
    in_ntt: bool = False

    __hash__ = None  # type: ignore[assignment]

    def __post_init__(self) -> None:
        self.coeffs = list(self.coeffs)
        if len(self.coeffs) != self.n:
            raise ValueError(
                f"expected {self.n} coefficients, got {len(self.coeffs)}"
            )

    @classmethod
    def zeros(cls, n: int, q: int, params: NttParams) -> Polynomial:
        """Return the zero polynomial."""
        return cls(n, q, [0] * n, params)

    def _derive(self, coeffs: list[int], in_ntt: bool | None = None) -> Polynomial:
        return Polynomial(
            self.n,
            self.q,
            coeffs,
            self.params,
            self.in_ntt if in_ntt is None else in_ntt,
        )

    def randomize(
        self,
        bound: int,
        in_ntt: bool = False,
        gaussian: bool = False,
        mu: float = 0.0,
        sigma: float = 1.0,
        rng: random.Random | None = None,
    ) -> None:
        """Fill with random coefficients in place.

        Uniform values are drawn from [-bound/2, bound/2]; Gaussian values
        from N(mu, sigma) rounded to integers. Both are reduced modulo q.
        """
        rng = rng if rng is not None else _SYSTEM_RNG
        if gaussian:
            values = (_round_half_away(rng.gauss(mu, sigma)) for _ in range(self.n))
        else:
            half = abs(bound) // 2
            values = (rng.randint(-half, half) for _ in range(self.n))
        self.coeffs = [value % self.q for value in values]
        self.in_ntt = in_ntt

    def __str__(self) -> str:
        shown = self.coeffs[: min(self.n, 8)]
        if not shown:
            return ""
        parts = [str(shown[0])]
        parts.extend(f"{c}*x^{i}" for i, c in enumerate(shown[1:], start=1))
        text = " + ".join(parts)
        if self.n > 8:
            text += " + ..."
        return text

    def _check_compatible(self, other: Polynomial, operation: str) -> None:
        if self.in_ntt != other.in_ntt:
            raise ValueError(f"polynomial {operation}: inputs must be in the same domain")
        if self.q != other.q:
            raise ValueError(f"polynomial {operation}: inputs must have the same modulus")
        if self.n != other.n:
            raise ValueError(f"polynomial {operation}: inputs must have the same degree")

    def __add__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        self._check_compatible(other, "addition")
        return self._derive([(a + b) % self.q for a, b in zip(self.coeffs, other.coeffs)])

    def __sub__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        self._check_compatible(other, "subtraction")
        return self._derive([(a - b) % self.q for a, b in zip(self.coeffs, other.coeffs)])

    def __mul__(self, other: Polynomial) -> Polynomial:
        if not isinstance(other, Polynomial):
            return NotImplemented
        self._check_compatible(other, "multiplication")
        q = self.q
        if self.in_ntt:
            return self._derive([(a * b) % q for a, b in zip(self.coeffs, other.coeffs)], True)

        psi = self.params.psi
        a_twisted = [(c * p) % q for c, p in zip(self.coeffs, psi)]
        b_twisted = [(c * p) % q for c, p in zip(other.coeffs, psi)]
        a_hat = ntt(a_twisted, self.params.w, q)
        b_hat = ntt(b_twisted, self.params.w, q)
        product = intt([(x * y) % q for x, y in zip(a_hat, b_hat)], self.params.w_inv, q)
        return self._derive(
            [(c * p) % q for c, p in zip(product, self.params.psi_inv)], False
        )

    def __neg__(self) -> Polynomial:
        return self._derive([(-c) % self.q for c in self.coeffs])

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Polynomial):
            return NotImplemented
        return self.n == other.n and self.q == other.q and self.coeffs == other.coeffs

    def mod(self, base: int) -> Polynomial:
        """Reduce every coefficient modulo base."""
        return self._derive([c % base for c in self.coeffs])

    def round(self) -> Polynomial:
        """Round every coefficient to the nearest integer, halves away from zero."""
        return self._derive([_round_half_away(c) for c in self.coeffs])

    def copy(self) -> Polynomial:
        """Return an independent copy."""
        return self._derive(list(self.coeffs))

    def to_ntt(self) -> Polynomial:
        """Return the polynomial in the NTT domain."""
        if self.in_ntt:
            return self._derive(list(self.coeffs), True)
        return self._derive(ntt(self.coeffs, self.params.w, self.q), True)

    def to_pol(self) -> Polynomial:
        """Return the polynomial in coefficient form."""
        if not self.in_ntt:
            return self._derive(list(self.coeffs), False)
        return self._derive(intt(self.coeffs, self.params.w_inv, self.q), False)