"""Async wrappers for the blocking Paillier calls (prime and randomizer sampling)."""

from functools import partial
from typing import Optional

from anyio import to_thread

from pailcrypt.crypto.hooks import AccelerationHooks
from pailcrypt.crypto.paillier import KeyPair, PublicKey, generate_keypair
from pailcrypt.crypto.rand import RandomnessProvider


async def generate_keypair_async(
    key_byte_length: Optional[int] = None,
    rand: Optional[RandomnessProvider] = None,
    hooks: Optional[AccelerationHooks] = None,
) -> KeyPair:
    return await to_thread.run_sync(partial(generate_keypair, key_byte_length, rand=rand, hooks=hooks))


async def encrypt_async(pub: PublicKey, m: int, rand: Optional[RandomnessProvider] = None) -> int:
    return await to_thread.run_sync(partial(pub.encrypt, m, rand=rand))
