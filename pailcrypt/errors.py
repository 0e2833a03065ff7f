"""
Error taxonomy for pailcrypt.

Every error carries a machine-readable code and structured details.
Details only ever hold sizes, bit lengths and operation names: never key
material, plaintexts or randomizers.

Error codes follow PC_<CATEGORY>_<SPECIFIC>.
"""

from typing import Any, Dict, Optional


class PaillierError(Exception):
    """Base exception for all pailcrypt errors."""

    def __init__(
        self,
        message: str,
        code: str = "PC_INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def __str__(self) -> str:
        return f"[{self.code}] {self.message}"

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
        }


# ── Randomness ──────────────────────────────────────


class RandomnessExhausted(PaillierError):
    """The randomness provider gave up within its own attempt bound."""

    def __init__(self, reason: str, attempts: Optional[int] = None, code: str = "PC_RAND_EXHAUSTED"):
        super().__init__(
            message=f"randomness exhausted: {reason}",
            code=code,
            details={"attempts": attempts} if attempts is not None else {},
        )


class PrimeGenerationError(RandomnessExhausted):
    """No probable prime was found within the provider's attempt bound."""

    def __init__(self, bits: int, attempts: int):
        super().__init__(
            reason=f"no {bits}-bit prime after {attempts} candidates",
            attempts=attempts,
            code="PC_RAND_PRIME_FAILED",
        )
        self.details["bits"] = bits


# ── Operands ────────────────────────────────────────


class InvalidOperand(PaillierError, ValueError):
    """A caller-supplied operand lies outside its valid range."""

    def __init__(self, operand: str, reason: str, operation: Optional[str] = None):
        details = {"operand": operand}
        if operation:
            details["operation"] = operation
        super().__init__(
            message=f"invalid operand '{operand}': {reason}",
            code="PC_OPERAND_INVALID",
            details=details,
        )


# ── Arithmetic ──────────────────────────────────────


class ModularInverseUndefined(PaillierError, ArithmeticError):
    """An inverse required by key generation does not exist.

    Cannot happen for two distinct odd primes of equal bit length; seeing
    it means the prime source is broken. Do not catch and continue.
    """

    def __init__(self, name: str, modulus_bits: int):
        super().__init__(
            message=f"modular inverse undefined while computing {name}",
            code="PC_INVERSE_UNDEFINED",
            details={"value": name, "modulus_bits": modulus_bits},
        )


# ── Acceleration hooks ──────────────────────────────


class AccelerationHookMismatch(PaillierError):
    """An acceleration hook returned something that is not hexadecimal text."""

    def __init__(self, operation: str, reason: str):
        super().__init__(
            message=f"acceleration hook '{operation}' returned invalid output: {reason}",
            code="PC_HOOK_MISMATCH",
            details={"operation": operation},
        )
