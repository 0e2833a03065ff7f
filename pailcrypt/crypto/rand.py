"""Randomness service: uniform integers, coprime randomizers and probable primes."""

import logging
import math
import secrets
from typing import Optional, Protocol

from pailcrypt.errors import InvalidOperand, PrimeGenerationError, RandomnessExhausted

logger = logging.getLogger(__name__)

SMALL_PRIMES = [2, 3, 5, 7, 11, 13, 17, 19, 23, 29, 31, 37, 41, 43, 47, 53, 59, 61, 67, 71, 73, 79, 83, 89, 97]


class RandomnessProvider(Protocol):
    """What the key generator and `PublicKey.encrypt` need from a randomness source.

    Calls may block. Implementations own their retry bound and raise
    `RandomnessExhausted` (or `PrimeGenerationError`) when it is hit.
    """

    def random_less_than(self, bound: int) -> int: ...

    def random_coprime_less_than(self, bound: int) -> int: ...

    def random_prime(self, byte_length: int) -> int: ...


def is_probable_prime(n: int, rounds: int = 40) -> bool:
    """Trial division by SMALL_PRIMES, then `rounds` Miller-Rabin witnesses."""
    if n < 2:
        return False
    for p in SMALL_PRIMES:
        if n % p == 0:
            return n == p

    # n - 1 = d * 2^s with d odd
    s = ((n - 1) & -(n - 1)).bit_length() - 1
    d = (n - 1) >> s

    for _ in range(rounds):
        x = pow(secrets.randbelow(n - 3) + 2, d, n)
        if x in (1, n - 1):
            continue
        for _ in range(s - 1):
            x = x * x % n
            if x == n - 1:
                break
        else:
            return False
    return True


class SystemRandomness:
    """`RandomnessProvider` backed by the OS CSPRNG (`secrets`)."""

    def __init__(self, max_prime_attempts: Optional[int] = None, max_coprime_attempts: int = 128, rounds: int = 40):
        self.max_prime_attempts = max_prime_attempts
        self.max_coprime_attempts = max_coprime_attempts
        self.rounds = rounds

    def random_less_than(self, bound: int) -> int:
        if bound < 1:
            raise InvalidOperand("bound", "must be at least 1")
        return secrets.randbelow(bound)

    def random_coprime_less_than(self, bound: int) -> int:
        """Uniform r in [1, bound) with gcd(r, bound) == 1."""
        if bound < 2:
            raise InvalidOperand("bound", "must be at least 2")
        for _ in range(self.max_coprime_attempts):
            r = secrets.randbelow(bound)
            if r >= 1 and math.gcd(r, bound) == 1:
                return r
        raise RandomnessExhausted(
            f"no value coprime to the bound after {self.max_coprime_attempts} draws",
            attempts=self.max_coprime_attempts,
        )

    def random_prime(self, byte_length: int) -> int:
        """Probable prime of exactly 8*byte_length bits with the two top bits set.

        Setting both top bits makes the product of two such primes exactly
        twice as long.
        """
        if byte_length < 1:
            raise InvalidOperand("byte_length", "must be at least 1")
        bits = byte_length * 8
        # ~0.35*bits candidates are needed on average
        attempts = self.max_prime_attempts if self.max_prime_attempts is not None else bits * 20
        top = (1 << (bits - 1)) | (1 << (bits - 2))
        for attempt in range(1, attempts + 1):
            candidate = secrets.randbits(bits) | top | 1
            if is_probable_prime(candidate, self.rounds):
                logger.debug("found %d-bit prime after %d candidates", bits, attempt)
                return candidate
        raise PrimeGenerationError(bits=bits, attempts=attempts)
