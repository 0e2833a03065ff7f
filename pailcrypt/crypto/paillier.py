"""
Paillier cryptosystem with CRT decryption.

    Encrypt:    c = g^m * r^n mod n^2 = (1 + m*n) * r^n mod n^2   (g = n + 1)
    Decrypt:    m = CRT(L_p(c^(p-1) mod p^2) * hp mod p,
                        L_q(c^(q-1) mod q^2) * hq mod q)
    Add:        E(a+b) = E(a) * E(b) mod n^2
    Add plain:  E(a+b) = E(a) * (1 + b*n) mod n^2
    Mul plain:  E(k*a) = E(a)^k mod n^2

Each hot operation first looks for an acceleration hook on the key
(see `pailcrypt.crypto.hooks`).
"""

import logging
import math
from dataclasses import dataclass, field, replace
from typing import NamedTuple, Optional

from pailcrypt.config import get_hooks, get_randomness, get_settings
from pailcrypt.crypto.hooks import NO_HOOKS, AccelerationHooks, call_hook
from pailcrypt.crypto.rand import RandomnessProvider
from pailcrypt.errors import InvalidOperand, ModularInverseUndefined

logger = logging.getLogger(__name__)


def _l_function(x: int, prime: int) -> int:
    """L_p(x) = (x - 1) / p, exact when x = 1 mod p."""
    return (x - 1) // prime


def _crt(mp: int, mq: int, p: int, q: int, q_inv_p: int, p_inv_q: int, n: int) -> int:
    return (mp * q_inv_p * q + mq * p_inv_q * p) % n


def _inverse(value: int, modulus: int, name: str) -> int:
    try:
        return pow(value, -1, modulus)
    except ValueError as exc:
        raise ModularInverseUndefined(name, modulus.bit_length()) from exc


def _check_range(name: str, value: int, upper: int, operation: str) -> None:
    if not 0 <= value < upper:
        raise InvalidOperand(name, "out of range", operation)


@dataclass(frozen=True)
class PublicKey:
    n: int
    g: int
    n_sqr: int = field(init=False)
    hooks: AccelerationHooks = field(default=NO_HOOKS, compare=False, repr=False)

    def __post_init__(self):
        # encryption relies on g^m = 1 + m*n
        if self.g != self.n + 1:
            raise InvalidOperand("g", "must equal n + 1", "PublicKey")
        object.__setattr__(self, "n_sqr", self.n * self.n)

    def with_hooks(self, hooks: AccelerationHooks) -> "PublicKey":
        return replace(self, hooks=hooks)

    def encrypt_with_r(self, m: int, r: int) -> int:
        """Encrypt `m` in [0, n) with randomizer `r` in [1, n), gcd(r, n) = 1."""
        _check_range("m", m, self.n, "encrypt_with_r")
        if not 1 <= r < self.n or math.gcd(r, self.n) != 1:
            raise InvalidOperand("r", "must lie in [1, n) and be coprime to n", "encrypt_with_r")
        if self.hooks.encrypt_with_r:
            return call_hook("encrypt_with_r", self.hooks.encrypt_with_r, self.n, self.g, m, r)
        # g^m = 1 + m*n because g = n + 1
        g_m = (1 + m * self.n) % self.n_sqr
        r_n = pow(r, self.n, self.n_sqr)
        return (g_m * r_n) % self.n_sqr

    def encrypt(self, m: int, rand: Optional[RandomnessProvider] = None) -> int:
        """Encrypt `m` with a fresh randomizer. Blocks on the randomness provider."""
        rand = rand or get_randomness()
        r = rand.random_coprime_less_than(self.n)
        return self.encrypt_with_r(m, r)

    def homomorphic_add(self, e_a: int, e_b: int) -> int:
        """E(a) * E(b) = E(a + b)."""
        _check_range("e_a", e_a, self.n_sqr, "homomorphic_add")
        _check_range("e_b", e_b, self.n_sqr, "homomorphic_add")
        if self.hooks.add:
            return call_hook("add", self.hooks.add, self.n, self.g, e_a, e_b)
        return (e_a * e_b) % self.n_sqr

    def homomorphic_add_plain(self, e_a: int, b: int) -> int:
        """E(a) * g^b = E(a + b) for a known plaintext b."""
        _check_range("e_a", e_a, self.n_sqr, "homomorphic_add_plain")
        _check_range("b", b, self.n, "homomorphic_add_plain")
        if self.hooks.add_plain:
            return call_hook("add_plain", self.hooks.add_plain, self.n, self.g, e_a, b)
        g_b = (1 + b * self.n) % self.n_sqr
        return (e_a * g_b) % self.n_sqr

    def homomorphic_mul_plain(self, e_a: int, k: int) -> int:
        """E(a)^k = E(k * a) for a known non-negative scalar k."""
        _check_range("e_a", e_a, self.n_sqr, "homomorphic_mul_plain")
        if k < 0:
            raise InvalidOperand("k", "must be non-negative", "homomorphic_mul_plain")
        if self.hooks.mul_plain:
            return call_hook("mul_plain", self.hooks.mul_plain, self.n, self.g, e_a, k)
        return pow(e_a, k, self.n_sqr)


@dataclass(frozen=True)
class PrivateKey:
    lam: int
    mu: int
    n: int
    p: int
    q: int
    p_sqr: int
    q_sqr: int
    p_minus1: int
    q_minus1: int
    hp: int
    hq: int
    q_inv_p: int
    p_inv_q: int
    n_sqr: int = field(init=False)
    hooks: AccelerationHooks = field(default=NO_HOOKS, compare=False, repr=False)

    def __post_init__(self):
        object.__setattr__(self, "n_sqr", self.n * self.n)

    def __repr__(self) -> str:
        return f"PrivateKey(bits={self.n.bit_length()})"

    def with_hooks(self, hooks: AccelerationHooks) -> "PrivateKey":
        return replace(self, hooks=hooks)

    def decrypt(self, c: int) -> int:
        """Recover m from ciphertext `c` using two half-size exponentiations."""
        _check_range("c", c, self.n_sqr, "decrypt")
        if self.hooks.decrypt:
            return call_hook(
                "decrypt",
                self.hooks.decrypt,
                self.lam,
                self.mu,
                self.n,
                self.p,
                self.q,
                self.p_sqr,
                self.q_sqr,
                self.p_minus1,
                self.q_minus1,
                self.hp,
                self.hq,
                self.q_inv_p,
                self.p_inv_q,
                c,
            )
        # xp = c^(p-1) mod p^2, xq = c^(q-1) mod q^2
        xp = pow(c % self.p_sqr, self.p_minus1, self.p_sqr)
        xq = pow(c % self.q_sqr, self.q_minus1, self.q_sqr)
        mp = (_l_function(xp, self.p) * self.hp) % self.p
        mq = (_l_function(xq, self.q) * self.hq) % self.q
        return _crt(mp, mq, self.p, self.q, self.q_inv_p, self.p_inv_q, self.n)


class KeyPair(NamedTuple):
    private: PrivateKey
    public: PublicKey


def generate_keypair(
    key_byte_length: Optional[int] = None,
    rand: Optional[RandomnessProvider] = None,
    hooks: Optional[AccelerationHooks] = None,
) -> KeyPair:
    """Generate a key pair whose modulus n is `key_byte_length` bytes long.

    Each prime is `key_byte_length // 2` bytes. Arguments left as None come
    from the environment (see `pailcrypt.config`). Raises
    `PrimeGenerationError` when the provider cannot deliver a prime.
    """
    if key_byte_length is None or rand is None or hooks is None:
        settings = get_settings()
        if key_byte_length is None:
            key_byte_length = settings.key_byte_length
        rand = rand or get_randomness(settings)
        hooks = hooks or get_hooks(settings)
    if key_byte_length < 4 or key_byte_length % 2:
        raise InvalidOperand("key_byte_length", "must be an even number of bytes, at least 4", "generate_keypair")
    p = rand.random_prime(key_byte_length // 2)
    q = rand.random_prime(key_byte_length // 2)
    while q == p:
        logger.debug("sampled identical primes, resampling q")
        q = rand.random_prime(key_byte_length // 2)
    # make p > q
    if p < q:
        p, q = q, p

    n = p * q
    g = n + 1
    p_minus1 = p - 1
    q_minus1 = q - 1
    lam = p_minus1 * q_minus1
    mu = _inverse(lam, n, "mu")

    p_sqr = p * p
    q_sqr = q * q
    # hp = L_p(g^(p-1) mod p^2)^-1 mod p
    hp = _inverse(_l_function(pow(g, p_minus1, p_sqr), p), p, "hp")
    # hq = L_q(g^(q-1) mod q^2)^-1 mod q
    hq = _inverse(_l_function(pow(g, q_minus1, q_sqr), q), q, "hq")
    q_inv_p = _inverse(q, p, "q_inv_p")
    p_inv_q = _inverse(p, q, "p_inv_q")

    logger.debug("generated Paillier key pair with %d-bit modulus", n.bit_length())
    private = PrivateKey(
        lam=lam,
        mu=mu,
        n=n,
        p=p,
        q=q,
        p_sqr=p_sqr,
        q_sqr=q_sqr,
        p_minus1=p_minus1,
        q_minus1=q_minus1,
        hp=hp,
        hq=hq,
        q_inv_p=q_inv_p,
        p_inv_q=p_inv_q,
        hooks=hooks,
    )
    return KeyPair(private, PublicKey(n=n, g=g, hooks=hooks))
