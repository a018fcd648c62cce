# bfvcrypt

bfvcrypt is a small, pure-Python implementation of the BFV (Brakerski/Fan–Vercauteren)
somewhat-homomorphic encryption scheme. You can add, subtract and multiply
encrypted integers without decrypting them.

Arithmetic takes place in the ring Z_q[x]/(x^n + 1). Polynomial products use
a negacyclic number-theoretic transform. The package uses only the standard
library.

It is written for learning and experiments. It is not hardened cryptography.

## Installation

```
pip install .
```

To run the tests:

```
pip install .[test]
pytest
```

## Modules

- `bfvcrypt.primes`
  - `mod_pow(base, exp, mod)`
  - `miller_rabin(p, rounds, rng)`
  - `is_prime(n, rounds, rng)`: trial division by the primes below 1000, then Miller–Rabin.
  - `generate_large_prime(bit_length, rounds, rng)`: raises `RuntimeError` if no prime is found within its attempt budget.
- `bfvcrypt.modtools`
  - `extended_gcd`, `gcd` and `mod_inv`. `mod_inv` raises `ValueError` when no inverse exists.
  - `int_reverse(a, bits)`: bit reversal.
  - `red_pol_mul(a, b, m)` and `red_pol_mul_unreduced(a, b)`: products modulo x^n + 1, with reduction modulo `m` or over the integers.
  - `ntt_friendly_prime(n, logq, rounds, rng)`: the largest prime `q < 2**logq` with `q ≡ 1 (mod 2n)`.
  - `root_of_unity_check` and `find_primitive_root`.
  - `bfv_param_gen(n, logq, rounds, rng)`: returns a `PrimeParams(q, psi, psi_inv, w, w_inv)`.
- `bfvcrypt.ntt`
  - `ntt(values, w_table, q)` and `intt(values, w_table, q)`. The input length must be a power of two, otherwise they raise `ValueError`.
  - `index_reverse(values, bits)`.
- `bfvcrypt.poly`
  - `NttParams` holds the power tables of `w`, `w⁻¹`, `psi` and `psi⁻¹`. Build one from a primitive 2n-th root of unity with `NttParams.from_root(n, q, psi)`.
  - `Polynomial` has coefficients modulo `q`, in coefficient form or NTT form. It supports:
    - `+`, `-`, `*`, unary `-` and `==`;
    - `mod`, `round`, `copy`, `to_ntt` and `to_pol`;
    - `Polynomial.zeros(n, q, params)`;
    - in-place random filling with `randomize(bound, in_ntt, gaussian, mu, sigma, rng)`.

    Operands of a binary operation must have the same domain, modulus and degree, otherwise it raises `ValueError`.
- `bfvcrypt.bfv`
  - `BFV(n, q, t, mu, sigma, params, rng=None)`: the scheme. When `rng` is omitted, sampling uses `random.SystemRandom`.

## Example

```python
import random

from bfvcrypt.bfv import BFV
from bfvcrypt.poly import NttParams

n, q, t = 1024, 132120577, 16
psi = 73993  # primitive 2n-th root of unity modulo q

params = NttParams.from_root(n, q, psi)
scheme = BFV(n, q, t, 0.0, 1.6, params, random.Random(1))

scheme.secret_key_gen()
scheme.public_key_gen()
scheme.eval_key_gen_1()
scheme.print_params()

ct1 = scheme.encrypt(scheme.int_encode(1234))
ct2 = scheme.encrypt(scheme.int_encode(-567))

print(scheme.int_decode(scheme.decrypt(scheme.add(ct1, ct2))))  # 667
print(scheme.int_decode(scheme.decrypt(scheme.sub(ct1, ct2))))  # 1801

product = scheme.multiply(ct1, ct2)           # three-element ciphertext
print(scheme.int_decode(scheme.decrypt_3(product)))             # -699678
print(scheme.int_decode(scheme.decrypt(scheme.relinearize_1(product))))
```

### Encoding and decryption

`int_encode` writes the binary digits of `|m|` into the coefficients of the
plaintext. For a negative `m`, each digit is negated modulo `t`.
`int_decode` centres each coefficient and evaluates the polynomial at x = 2.

`decrypt` takes two-element ciphertexts. `decrypt_3` takes the
three-element result of `multiply`.

### Relinearization

Two relinearization methods are provided:

- `eval_key_gen_1` sets the decomposition base `base` (16) and the number of
  digits `levels`, then generates keys for `relinearize_1`.
- `eval_key_gen_2` and `relinearize_2` use modulus switching with a special
  modulus. Assign a positive value to `scheme.p` before calling them,
  otherwise they raise `ValueError`.

Other misuse also raises `ValueError`:

- encrypting before the public key exists;
- relinearizing before the keys exist;
- passing a ciphertext with the wrong number of polynomials.

## Parameter generation

`bfv_param_gen(n, logq, rounds, rng)` in `bfvcrypt.modtools` finds a prime
`q` and a matching `psi`. Pass these to `NttParams.from_root(n, q, psi)` to
build your own parameter sets.

## What it does not do

- It has no command-line program.
- It has no way to save or load keys or ciphertexts.
- It encodes plaintexts only as single integers through `int_encode`, with no
  batching.
- It does not manage noise: results are correct only while noise stays within
  the bounds that the chosen `n`, `q`, `t` and `sigma` allow.