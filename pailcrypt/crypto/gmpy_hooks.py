"""
gmpy2-backed acceleration hooks.

GMP does the modular exponentiations; the formulas are the same as the pure
path, so results are identical for every valid input.
"""

from gmpy2 import mpz, powmod

from pailcrypt.crypto.hooks import AccelerationHooks


def _mpz(text: str) -> mpz:
    return mpz(text, 16)


def _hex(value: mpz) -> str:
    return value.digits(16)


def encrypt_with_r(n: str, g: str, m: str, r: str) -> str:
    n, m, r = _mpz(n), _mpz(m), _mpz(r)
    n_sqr = n * n
    # g^m = 1 + m*n
    g_m = (1 + m * n) % n_sqr
    return _hex(g_m * powmod(r, n, n_sqr) % n_sqr)


def decrypt(
    lam: str,
    mu: str,
    n: str,
    p: str,
    q: str,
    p_sqr: str,
    q_sqr: str,
    p_minus1: str,
    q_minus1: str,
    hp: str,
    hq: str,
    q_inv_p: str,
    p_inv_q: str,
    c: str,
) -> str:
    n, p, q = _mpz(n), _mpz(p), _mpz(q)
    p_sqr, q_sqr = _mpz(p_sqr), _mpz(q_sqr)
    c = _mpz(c)
    xp = powmod(c, _mpz(p_minus1), p_sqr)
    xq = powmod(c, _mpz(q_minus1), q_sqr)
    mp = (xp - 1) // p * _mpz(hp) % p
    mq = (xq - 1) // q * _mpz(hq) % q
    return _hex((mp * _mpz(q_inv_p) * q + mq * _mpz(p_inv_q) * p) % n)


def add(n: str, g: str, e_a: str, e_b: str) -> str:
    n = _mpz(n)
    return _hex(_mpz(e_a) * _mpz(e_b) % (n * n))


def add_plain(n: str, g: str, e_a: str, b: str) -> str:
    n = _mpz(n)
    n_sqr = n * n
    g_b = (1 + _mpz(b) * n) % n_sqr
    return _hex(_mpz(e_a) * g_b % n_sqr)


def mul_plain(n: str, g: str, e_a: str, k: str) -> str:
    n = _mpz(n)
    return _hex(powmod(_mpz(e_a), _mpz(k), n * n))


GMPY_HOOKS = AccelerationHooks(
    encrypt_with_r=encrypt_with_r,
    decrypt=decrypt,
    add=add,
    add_plain=add_plain,
    mul_plain=mul_plain,
)
