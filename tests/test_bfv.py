import random

import pytest

from bfvcrypt.bfv import BFV
from bfvcrypt.modtools import bfv_param_gen
from bfvcrypt.poly import NttParams

SOURCE_Q = 132120577
SOURCE_PSI = 73993
SOURCE_N = 1024


@pytest.fixture(scope="module")
def source_params():
    return NttParams.from_root(SOURCE_N, SOURCE_Q, SOURCE_PSI)


def _source_evaluator(params, seed=7):
    ev = BFV(SOURCE_N, SOURCE_Q, 16, 0.0, 0.5 * 3.2, params, random.Random(seed))
    ev.secret_key_gen()
    ev.public_key_gen()
    return ev


def _small_evaluator(n=64, t=16, seed=3):
    prime = bfv_param_gen(n, 27, 20, random.Random(seed))
    params = NttParams.from_root(n, prime.q, prime.psi)
    ev = BFV(n, prime.q, t, 0.0, 1.6, params, random.Random(seed))
    ev.secret_key_gen()
    ev.public_key_gen()
    return ev


def _centered(values, q):
    return [v - q if v > q // 2 else v for v in values]


def test_str_lists_parameters(source_params):
    ev = BFV(SOURCE_N, SOURCE_Q, 16, 0.0, 1.6, source_params, random.Random(1))
    assert str(ev) == (
        "\n--- Parameters:\n"
        "n     : 1024\n"
        "q     : 132120577\n"
        "t     : 16\n"
        "T     : 0\n"
        "l     : 0\n"
        "p     : 0\n"
        "mu    : 0\n"
        "sigma : 1.6\n"
    )


def test_print_params(source_params, capsys):
    ev = BFV(SOURCE_N, SOURCE_Q, 16, 0.0, 1.6, source_params, random.Random(1))
    ev.print_params()
    assert capsys.readouterr().out == str(ev) + "\n"


def test_secret_key_is_ternary(source_params):
    ev = _source_evaluator(source_params)
    assert set(ev.secret_key.coeffs) == {0, 1, SOURCE_Q - 1}


def test_public_key_hides_small_error(source_params):
    ev = _source_evaluator(source_params)
    pk0, pk1 = ev.public_key
    residual = _centered((pk0 + pk1 * ev.secret_key).coeffs, SOURCE_Q)
    assert max(abs(v) for v in residual) <= 16


def test_int_encode_values(source_params):
    ev = BFV(SOURCE_N, SOURCE_Q, 16, 0.0, 1.6, source_params, random.Random(1))
    assert ev.int_encode(5).coeffs[:4] == [1, 0, 1, 0]
    assert ev.int_encode(-5).coeffs[:4] == [15, 0, 15, 0]
    assert ev.int_encode(0).coeffs == [0] * SOURCE_N
    assert ev.int_encode(5).q == 16


@pytest.mark.parametrize("value", [0, 1, -1, 12345, -32768, 32767])
def test_int_encode_decode_round_trip(source_params, value):
    ev = BFV(SOURCE_N, SOURCE_Q, 16, 0.0, 1.6, source_params, random.Random(1))
    assert ev.int_decode(ev.int_encode(value)) == value


def test_int_decode_with_binary_plaintext_modulus():
    ev = _small_evaluator(n=16, t=2)
    assert ev.int_decode(ev.int_encode(6)) == 6
    assert ev.int_decode(ev.int_encode(-6)) == 6


@pytest.mark.parametrize("seed", [11, 22, 33])
def test_source_scenario_add_sub(source_params, seed):
    ev = _source_evaluator(source_params, seed)
    gen = random.Random(seed)
    n1 = gen.randint(-(1 << 15), (1 << 15) - 1)
    n2 = gen.randint(-(1 << 15), (1 << 15) - 1)

    m1 = ev.int_encode(n1)
    m2 = ev.int_encode(n2)
    ct1 = ev.encrypt(m1)
    ct2 = ev.encrypt(m2)

    assert ev.decrypt(ct1) == m1
    assert ev.int_decode(ev.decrypt(ct1)) == n1
    assert ev.int_decode(ev.decrypt(ct2)) == n2
    assert ev.int_decode(ev.decrypt(ev.add(ct1, ct2))) == n1 + n2
    assert ev.int_decode(ev.decrypt(ev.sub(ct1, ct2))) == n1 - n2


@pytest.mark.parametrize("n1, n2", [(13, 11), (-7, 6), (0, 9), (-5, -3)])
def test_multiplication_without_relinearization(n1, n2):
    ev = _small_evaluator()
    ct = ev.multiply(ev.encrypt(ev.int_encode(n1)), ev.encrypt(ev.int_encode(n2)))
    assert len(ct) == 3
    assert ev.int_decode(ev.decrypt_3(ct)) == n1 * n2


@pytest.mark.parametrize("n1, n2", [(13, 11), (-7, 6)])
def test_multiplication_with_relinearization_1(n1, n2):
    ev = _small_evaluator()
    ev.eval_key_gen_1()
    assert ev.base == 16
    assert ev.levels == 6
    assert len(ev.relin_keys_1) == 7

    ct = ev.multiply(ev.encrypt(ev.int_encode(n1)), ev.encrypt(ev.int_encode(n2)))
    relinearized = ev.relinearize_1(ct)
    assert len(relinearized) == 2
    assert ev.int_decode(ev.decrypt(relinearized)) == n1 * n2


@pytest.mark.parametrize("n1, n2", [(13, 11), (-7, 6)])
def test_multiplication_with_relinearization_2(n1, n2):
    ev = _small_evaluator()
    ev.p = ev.q
    ev.eval_key_gen_2()
    assert ev.relin_keys_2[0].q == ev.q * ev.q

    ct = ev.multiply(ev.encrypt(ev.int_encode(n1)), ev.encrypt(ev.int_encode(n2)))
    relinearized = ev.relinearize_2(ct)
    assert len(relinearized) == 2
    assert ev.int_decode(ev.decrypt(relinearized)) == n1 * n2


def test_encrypt_requires_public_key():
    ev = _small_evaluator(n=16)
    ev.public_key = []
    with pytest.raises(ValueError):
        ev.encrypt(ev.int_encode(3))


def test_relinearize_1_requires_keys():
    ev = _small_evaluator(n=16)
    ct = ev.multiply(ev.encrypt(ev.int_encode(2)), ev.encrypt(ev.int_encode(3)))
    with pytest.raises(ValueError):
        ev.relinearize_1(ct)


def test_relinearize_2_requires_keys():
    ev = _small_evaluator(n=16)
    ct = ev.multiply(ev.encrypt(ev.int_encode(2)), ev.encrypt(ev.int_encode(3)))
    with pytest.raises(ValueError):
        ev.relinearize_2(ct)


def test_eval_key_gen_2_requires_special_modulus():
    ev = _small_evaluator(n=16)
    with pytest.raises(ValueError):
        ev.eval_key_gen_2()


def test_decrypt_rejects_wrong_ciphertext_size():
    ev = _small_evaluator(n=16)
    ct = ev.encrypt(ev.int_encode(4))
    with pytest.raises(ValueError):
        ev.decrypt(ct[:1])
    with pytest.raises(ValueError):
        ev.decrypt_3(ct)


def test_add_rejects_mismatched_ciphertexts():
    ev = _small_evaluator(n=16)
    ct = ev.encrypt(ev.int_encode(4))
    with pytest.raises(ValueError):
        ev.add(ct, ct[:1])
    with pytest.raises(ValueError):
        ev.sub(ct[:1], ct)