"""Shared pytest fixtures for the pailcrypt test suite."""

import pytest

from pailcrypt.crypto.hooks import NO_HOOKS
from pailcrypt.crypto.paillier import generate_keypair
from pailcrypt.crypto.rand import SystemRandomness

SETTINGS_ENV = ("PAILCRYPT_KEY_BYTES", "PAILCRYPT_PRIME_ATTEMPTS", "PAILCRYPT_MR_ROUNDS", "PAILCRYPT_ACCELERATOR")

# Known primes, small enough to keep fixed-key tests instant
P_61 = 2**61 - 1
P_31 = 2**31 - 1


class FixedRandomness:
    """Deterministic `RandomnessProvider` that hands out queued values."""

    def __init__(self, primes=(), coprimes=(), values=()):
        self.primes = list(primes)
        self.coprimes = list(coprimes)
        self.values = list(values)
        self.prime_calls = []

    def random_prime(self, byte_length):
        self.prime_calls.append(byte_length)
        return self.primes.pop(0)

    def random_coprime_less_than(self, bound):
        return self.coprimes.pop(0)

    def random_less_than(self, bound):
        return self.values.pop(0)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in SETTINGS_ENV:
        monkeypatch.delenv(name, raising=False)


@pytest.fixture(scope="session")
def anyio_backend():
    return "asyncio"


@pytest.fixture(scope="session")
def keypair():
    """A 256-bit modulus key pair shared by the functional tests."""
    return generate_keypair(32, rand=SystemRandomness(), hooks=NO_HOOKS)


@pytest.fixture()
def fixed_keypair():
    """Key pair over two known primes, passed in the "wrong" order."""
    return generate_keypair(16, rand=FixedRandomness(primes=[P_31, P_61]))
