import math

import pytest

from pailcrypt.crypto.rand import SystemRandomness, is_probable_prime
from pailcrypt.errors import InvalidOperand, PrimeGenerationError, RandomnessExhausted


def test_is_probable_prime_known_values():
    assert is_probable_prime(2)
    assert is_probable_prime(97)
    assert is_probable_prime(2**61 - 1)
    assert not is_probable_prime(1)
    assert not is_probable_prime(561)  # Carmichael number
    assert not is_probable_prime((2**31 - 1) * (2**61 - 1))


@pytest.mark.parametrize("byte_length", [1, 8, 16])
def test_random_prime_has_exact_bit_length(byte_length):
    p = SystemRandomness().random_prime(byte_length)
    assert p.bit_length() == byte_length * 8
    assert p >> (byte_length * 8 - 2) == 0b11
    assert is_probable_prime(p)


def test_product_of_primes_has_double_length():
    rand = SystemRandomness()
    p, q = rand.random_prime(16), rand.random_prime(16)
    assert (p * q).bit_length() == 256


def test_random_prime_gives_up_after_bound(monkeypatch):
    monkeypatch.setattr("pailcrypt.crypto.rand.is_probable_prime", lambda n, rounds: False)
    with pytest.raises(PrimeGenerationError) as exc:
        SystemRandomness(max_prime_attempts=5).random_prime(8)
    assert exc.value.details == {"attempts": 5, "bits": 64}
    assert exc.value.code == "PC_RAND_PRIME_FAILED"


def test_random_coprime_less_than():
    rand = SystemRandomness()
    n = (2**61 - 1) * (2**31 - 1)
    for _ in range(20):
        r = rand.random_coprime_less_than(n)
        assert 1 <= r < n
        assert math.gcd(r, n) == 1


def test_random_coprime_gives_up_after_bound(monkeypatch):
    monkeypatch.setattr("pailcrypt.crypto.rand.secrets.randbelow", lambda bound: 0)
    with pytest.raises(RandomnessExhausted) as exc:
        SystemRandomness(max_coprime_attempts=3).random_coprime_less_than(15)
    assert exc.value.details == {"attempts": 3}


def test_random_less_than_bounds():
    rand = SystemRandomness()
    assert rand.random_less_than(1) == 0
    assert all(0 <= rand.random_less_than(10) < 10 for _ in range(50))
    with pytest.raises(InvalidOperand):
        rand.random_less_than(0)
    with pytest.raises(InvalidOperand):
        rand.random_coprime_less_than(1)


def test_is_probable_prime_agrees_with_trial_division():
    def trial(n):
        return n >= 2 and all(n % d for d in range(2, math.isqrt(n) + 1))

    assert [n for n in range(3000) if is_probable_prime(n)] == [n for n in range(3000) if trial(n)]
