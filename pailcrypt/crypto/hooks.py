"""
Acceleration hooks for the hot Paillier operations.

A hook is a drop-in replacement for one operation, typically backed by a
native big-integer library. Hooks talk in hexadecimal text only: every
operand is passed as lowercase hex without a prefix and the result comes back
the same way, so any backend in any language can satisfy the contract.

Hook signatures (all arguments and the return value are hex strings):

    encrypt_with_r(n, g, m, r)
    decrypt(lam, mu, n, p, q, p_sqr, q_sqr, p_minus1, q_minus1, hp, hq, q_inv_p, p_inv_q, c)
    add(n, g, e_a, e_b)
    add_plain(n, g, e_a, b)
    mul_plain(n, g, e_a, k)

A hook must return exactly what the pure path computes for every valid
input. Hooks are bound to key objects at construction; there is no
process-wide registry.
"""

import re
from dataclasses import dataclass
from typing import Callable, Optional

from pailcrypt.errors import AccelerationHookMismatch

HexHook = Callable[..., str]

_HEX_RE = re.compile(r"[0-9a-f]+")


@dataclass(frozen=True)
class AccelerationHooks:
    """One optional replacement per hot operation. `None` keeps the pure path."""

    encrypt_with_r: Optional[HexHook] = None
    decrypt: Optional[HexHook] = None
    add: Optional[HexHook] = None
    add_plain: Optional[HexHook] = None
    mul_plain: Optional[HexHook] = None

    def installed(self) -> list[str]:
        """Names of the operations that have a hook."""
        return [name for name in HOOK_NAMES if getattr(self, name) is not None]


HOOK_NAMES = ("encrypt_with_r", "decrypt", "add", "add_plain", "mul_plain")

NO_HOOKS = AccelerationHooks()


def to_hex(value: int) -> str:
    if value < 0:
        raise ValueError("hex interchange is unsigned")
    return format(value, "x")


def from_hex(operation: str, text: object) -> int:
    # int(text, 16) alone would also take "0x", "+", "_" and whitespace
    if not isinstance(text, str):
        raise AccelerationHookMismatch(operation, f"expected str, got {type(text).__name__}")
    if not _HEX_RE.fullmatch(text):
        raise AccelerationHookMismatch(operation, "not hexadecimal text")
    return int(text, 16)


def call_hook(operation: str, hook: HexHook, *operands: int) -> int:
    """Marshal operands to hex, run the hook and parse its result."""
    return from_hex(operation, hook(*(to_hex(x) for x in operands)))
