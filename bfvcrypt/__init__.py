"""BFV homomorphic encryption with NTT-based polynomial arithmetic."""

__version__ = "0.1.0"
__all__ = ["primes", "modtools", "ntt", "poly", "bfv"]