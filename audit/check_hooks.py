"""Checks that every installed acceleration hook matches the pure path on a representative sample."""

import sys
import time
from typing import Optional

from pailcrypt.config import get_hooks, get_randomness, get_settings
from pailcrypt.crypto.hooks import NO_HOOKS, AccelerationHooks
from pailcrypt.crypto.paillier import KeyPair, generate_keypair
from pailcrypt.errors import InvalidOperand, PaillierError

DEFAULT_SAMPLES = 8


def _timed(fn, *args):
    start = time.perf_counter()
    out = fn(*args)
    return out, (time.perf_counter() - start) * 1000


def check(
    hooks: Optional[AccelerationHooks] = None,
    keys: Optional[KeyPair] = None,
    samples: int = DEFAULT_SAMPLES,
) -> dict:
    if samples < 1:
        raise InvalidOperand("samples", "must be at least 1", "check_hooks")
    settings = get_settings()
    if hooks is None:
        hooks = get_hooks(settings)
    installed = hooks.installed()
    if not installed:
        return {
            "check": "acceleration_hooks",
            "installed": [],
            "violations": [],
            "timings_ms": {},
            "passed": True,
        }

    rand = get_randomness(settings)
    if keys is None:
        keys = generate_keypair(settings.key_byte_length, rand=rand)
    pure_priv, pure_pub = keys.private.with_hooks(NO_HOOKS), keys.public.with_hooks(NO_HOOKS)
    fast_priv, fast_pub = keys.private.with_hooks(hooks), keys.public.with_hooks(hooks)
    n = pure_pub.n

    operations = {
        "encrypt_with_r": (pure_pub.encrypt_with_r, fast_pub.encrypt_with_r),
        "decrypt": (pure_priv.decrypt, fast_priv.decrypt),
        "add": (pure_pub.homomorphic_add, fast_pub.homomorphic_add),
        "add_plain": (pure_pub.homomorphic_add_plain, fast_pub.homomorphic_add_plain),
        "mul_plain": (pure_pub.homomorphic_mul_plain, fast_pub.homomorphic_mul_plain),
    }

    violations = []
    timings = {name: {"pure": 0.0, "accelerated": 0.0} for name in installed}
    for i in range(samples):
        # boundary operands first, random ones after
        m = [0, n - 1][i] if i < 2 else rand.random_less_than(n)
        r = 1 if i == 0 else rand.random_coprime_less_than(n)
        c = pure_pub.encrypt_with_r(m, r)
        c2 = pure_pub.encrypt_with_r(rand.random_less_than(n), rand.random_coprime_less_than(n))
        b = rand.random_less_than(n)
        operands = {
            "encrypt_with_r": (m, r),
            "decrypt": (c,),
            "add": (c, c2),
            "add_plain": (c, b),
            "mul_plain": (c, b),
        }
        for name in installed:
            pure_fn, fast_fn = operations[name]
            expected, pure_ms = _timed(pure_fn, *operands[name])
            try:
                got, fast_ms = _timed(fast_fn, *operands[name])
            except PaillierError as exc:
                violations.append({"operation": name, "sample": i, "reason": exc.code})
                continue
            timings[name]["pure"] += pure_ms
            timings[name]["accelerated"] += fast_ms
            if got != expected:
                violations.append({"operation": name, "sample": i, "reason": "result differs from pure path"})

    return {
        "check": "acceleration_hooks",
        "installed": installed,
        "samples": samples,
        "violations": violations,
        "timings_ms": {
            name: {k: round(v / samples, 3) for k, v in t.items()} for name, t in timings.items()
        },
        "passed": len(violations) == 0,
    }


if __name__ == "__main__":
    result = check()
    status = "✅ PASS" if result["passed"] else "❌ FAIL"
    installed = ", ".join(result["installed"]) or "none"
    print(f"{status} – Acceleration hooks ({installed}): {len(result['violations'])} violation(s)")
    for name, t in result["timings_ms"].items():
        print(f"  ⏱️  {name}: pure {t['pure']} ms, accelerated {t['accelerated']} ms")
    for v in result["violations"]:
        print(f"  ⚠️  {v['operation']} sample #{v['sample']}: {v['reason']}")
    sys.exit(0 if result["passed"] else 1)
