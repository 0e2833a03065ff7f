"""Verifies the invariants of a freshly generated key pair and the decryption boundaries."""

import sys
from typing import Optional

from pailcrypt.config import get_randomness, get_settings
from pailcrypt.crypto.paillier import KeyPair, generate_keypair


def _textbook_decrypt(keys: KeyPair, c: int) -> int:
    # m = L_n(c^lam mod n^2) * mu mod n, no CRT
    priv = keys.private
    x = pow(c, priv.lam, priv.n_sqr)
    return ((x - 1) // priv.n) * priv.mu % priv.n


def check(key_byte_length: Optional[int] = None, keys: Optional[KeyPair] = None) -> dict:
    settings = get_settings()
    if keys is None:
        keys = generate_keypair(key_byte_length or settings.key_byte_length, rand=get_randomness(settings))
    priv, pub = keys
    p, q, n = priv.p, priv.q, priv.n

    invariants = {
        "n = p*q": n == p * q and pub.n == n,
        "g = n+1": pub.g == n + 1,
        "n_sqr = n^2": pub.n_sqr == n * n and priv.n_sqr == n * n,
        "p > q": p > q,
        "p, q odd": p % 2 == 1 and q % 2 == 1,
        "lam = (p-1)(q-1)": priv.lam == (p - 1) * (q - 1),
        "mu = lam^-1 mod n": priv.lam * priv.mu % n == 1,
        "p_sqr, q_sqr": priv.p_sqr == p * p and priv.q_sqr == q * q,
        "p_minus1, q_minus1": priv.p_minus1 == p - 1 and priv.q_minus1 == q - 1,
        "hp": (pow(pub.g, p - 1, p * p) - 1) // p * priv.hp % p == 1,
        "hq": (pow(pub.g, q - 1, q * q) - 1) // q * priv.hq % q == 1,
        "q_inv_p": q * priv.q_inv_p % p == 1,
        "p_inv_q": p * priv.p_inv_q % q == 1,
    }
    violations = [name for name, ok in invariants.items() if not ok]

    rand = get_randomness(settings)
    r = rand.random_coprime_less_than(n)
    samples = [(0, r), (n - 1, r), (rand.random_less_than(n), 1)]
    for m, r_m in samples:
        c = pub.encrypt_with_r(m, r_m)
        if priv.decrypt(c) != m:
            violations.append(f"round trip failed (r={'1' if r_m == 1 else 'random'}, m bits={m.bit_length()})")
        if _textbook_decrypt(keys, c) != priv.decrypt(c):
            violations.append("CRT decryption disagrees with textbook decryption")

    return {
        "check": "keypair_invariants",
        "modulus_bits": n.bit_length(),
        "balanced": abs(p.bit_length() - q.bit_length()) <= 1,
        "violations": violations,
        "passed": len(violations) == 0,
    }


if __name__ == "__main__":
    result = check()
    status = "✅ PASS" if result["passed"] else "❌ FAIL"
    print(f"{status} – Key pair: {result['modulus_bits']}-bit modulus, {len(result['violations'])} violation(s)")
    for v in result["violations"]:
        print(f"  ⚠️  {v}")
    sys.exit(0 if result["passed"] else 1)
