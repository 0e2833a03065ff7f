"""Runs every pailcrypt audit and writes a consolidated report."""

import json
import sys
from datetime import datetime, timezone

from audit.check_hooks import check as check_hooks
from audit.check_keypair import check as check_keypair
from pailcrypt.config import get_randomness, get_settings
from pailcrypt.crypto.paillier import generate_keypair


def run_checks() -> list[dict]:
    settings = get_settings()
    # both checks share one key pair; prime sampling dominates the runtime
    keys = generate_keypair(settings.key_byte_length, rand=get_randomness(settings))
    return [
        check_keypair(keys=keys),
        check_hooks(keys=keys),
    ]


def format_result(result: dict) -> str:
    """One status line per check, then one indented line per violation."""
    violations = result.get("violations", [])
    if result["passed"]:
        return f"  ✅ {result['check']}"
    lines = [f"  ❌ {result['check']} ({len(violations)} violation(s))"]
    lines += [f"      ⚠️  {json.dumps(v, ensure_ascii=False) if isinstance(v, dict) else v}" for v in violations]
    return "\n".join(lines)


def main(report_path: str = "audit_report.json") -> int:
    print("=" * 60)
    print("  🔒 PAILLIER AUDIT – pailcrypt")
    print(f"  📅 {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M:%S UTC')}")
    print("=" * 60)
    print()

    all_results = run_checks()

    for r in all_results:
        print(format_result(r))

    failed = sum(not r["passed"] for r in all_results)
    total = len(all_results)
    passed = total - failed
    print()
    print("-" * 60)
    print(f"  Result: {passed}/{total} checks passed")

    report = {
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "summary": {"total": total, "passed": passed, "failed": failed},
        "checks": all_results,
    }
    with open(report_path, "w", encoding="utf-8") as f:
        json.dump(report, f, indent=2, ensure_ascii=False, default=str)
    print(f"\n  📄 JSON report written: {report_path}")
    print("=" * 60)

    return 0 if failed == 0 else 1


if __name__ == "__main__":
    sys.exit(main())
