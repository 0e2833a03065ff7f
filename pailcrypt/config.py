"""
Runtime configuration read from the environment.

    PAILCRYPT_KEY_BYTES       default modulus size in bytes (256 = 2048-bit n)
    PAILCRYPT_PRIME_ATTEMPTS  candidate bound per prime (unset = 20 * bits)
    PAILCRYPT_MR_ROUNDS       Miller-Rabin rounds per candidate
    PAILCRYPT_ACCELERATOR     "none" or "gmpy2"
"""

import logging
import os
from typing import Optional

from pydantic import BaseModel, Field, field_validator

from pailcrypt.crypto.hooks import NO_HOOKS, AccelerationHooks
from pailcrypt.crypto.rand import SystemRandomness

logger = logging.getLogger(__name__)


class Settings(BaseModel):
    key_byte_length: int = Field(default=256, ge=4)
    max_prime_attempts: Optional[int] = Field(default=None, ge=1)
    miller_rabin_rounds: int = Field(default=40, ge=1, le=256)
    accelerator: str = Field(default="none", pattern="^(none|gmpy2)$")

    @field_validator("key_byte_length")
    @classmethod
    def _even(cls, value: int) -> int:
        if value % 2:
            raise ValueError("key_byte_length must be even")
        return value


def get_settings() -> Settings:
    attempts = os.getenv("PAILCRYPT_PRIME_ATTEMPTS")
    return Settings(
        key_byte_length=int(os.getenv("PAILCRYPT_KEY_BYTES", "256")),
        max_prime_attempts=int(attempts) if attempts else None,
        miller_rabin_rounds=int(os.getenv("PAILCRYPT_MR_ROUNDS", "40")),
        accelerator=os.getenv("PAILCRYPT_ACCELERATOR", "none").lower(),
    )


def get_randomness(settings: Optional[Settings] = None) -> SystemRandomness:
    if settings is None:
        settings = get_settings()
    return SystemRandomness(
        max_prime_attempts=settings.max_prime_attempts,
        rounds=settings.miller_rabin_rounds,
    )


def get_hooks(settings: Optional[Settings] = None) -> AccelerationHooks:
    if settings is None:
        settings = get_settings()
    if settings.accelerator == "gmpy2":
        from pailcrypt.crypto.gmpy_hooks import GMPY_HOOKS

        logger.info("acceleration hooks enabled: gmpy2")
        return GMPY_HOOKS
    return NO_HOOKS
