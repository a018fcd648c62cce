"""Number-theoretic transform over Z_q."""

from __future__ import annotations

from typing import Sequence, TypeVar

from .modtools import int_reverse, mod_inv

T = TypeVar("T")


def index_reverse(values: Sequence[T], bits: int) -> list[T]:
    """Permute values into bit-reversed index order."""
    result: list[T] = list(values)
    for i, value in enumerate(values):
        result[int_reverse(i, bits)] = value
    return result


def _levels(n: int) -> int:
    if n <= 0 or n & (n - 1):
        raise ValueError("input size must be a power of two")
    return n.bit_length() - 1


def _transform(values: Sequence[int], w_table: Sequence[int], q: int) -> tuple[list[int], int]:
    output = list(values)
    levels = _levels(len(output))
    for i in range(levels):
        step = 1 << (levels - i - 1)
        for j in range(1 << i):
            base = j * (step << 1)
            for k in range(step):
                s = base + k
                t = s + step
                w = w_table[(1 << i) * k]
                u, v = output[s], output[t]
                output[s] = (u + v) % q
                output[t] = ((q + u - v) * w) % q
    return index_reverse(output, levels), levels


def ntt(values: Sequence[int], w_table: Sequence[int], q: int) -> list[int]:
    """Forward transform; w_table holds successive powers of an n-th root of unity."""
    output, _ = _transform(values, w_table, q)
    return output


def intt(values: Sequence[int], w_table: Sequence[int], q: int) -> list[int]:
    """Inverse transform; w_table holds successive powers of the inverse root."""
    output, _ = _transform(values, w_table, q)
    n_inv = mod_inv(len(output), q)
    return [(value * n_inv) % q for value in output]