import json

import pytest

from audit.check_hooks import check as check_hooks
from audit.check_keypair import check as check_keypair
from audit.run_all_audits import format_result, main as run_all
from pailcrypt.crypto import gmpy_hooks
from pailcrypt.crypto.gmpy_hooks import GMPY_HOOKS
from pailcrypt.crypto.hooks import NO_HOOKS, AccelerationHooks


@pytest.fixture(autouse=True)
def small_keys(monkeypatch):
    monkeypatch.setenv("PAILCRYPT_KEY_BYTES", "32")
    monkeypatch.delenv("PAILCRYPT_ACCELERATOR", raising=False)


def test_keypair_check_passes_on_generated_keys():
    result = check_keypair()
    assert result["check"] == "keypair_invariants"
    assert result["modulus_bits"] == 256
    assert result["balanced"] is True
    assert result["violations"] == []
    assert result["passed"] is True


def test_keypair_check_flags_broken_hp(keypair):
    import dataclasses

    priv, pub = keypair
    broken = dataclasses.replace(priv, hp=priv.hp + 1)
    result = check_keypair(keys=type(keypair)(broken, pub))
    assert result["passed"] is False
    assert "hp" in result["violations"]


def test_hooks_check_without_hooks():
    result = check_hooks(hooks=NO_HOOKS)
    assert result == {
        "check": "acceleration_hooks",
        "installed": [],
        "violations": [],
        "timings_ms": {},
        "passed": True,
    }


def test_hooks_check_passes_for_gmpy(keypair):
    result = check_hooks(hooks=GMPY_HOOKS, keys=keypair, samples=4)
    assert result["passed"] is True
    assert result["installed"] == ["encrypt_with_r", "decrypt", "add", "add_plain", "mul_plain"]
    assert set(result["timings_ms"]) == set(result["installed"])


def test_hooks_check_detects_wrong_results(keypair):
    def off_by_one(n, g, e_a, k):
        return format(int(gmpy_hooks.mul_plain(n, g, e_a, k), 16) + 1, "x")

    result = check_hooks(hooks=AccelerationHooks(mul_plain=off_by_one, add=gmpy_hooks.add), keys=keypair, samples=3)
    assert result["passed"] is False
    assert {v["operation"] for v in result["violations"]} == {"mul_plain"}
    assert len(result["violations"]) == 3


def test_hooks_check_reports_malformed_output(keypair):
    hooks = AccelerationHooks(decrypt=lambda *args: "not hex")
    result = check_hooks(hooks=hooks, keys=keypair, samples=2)
    assert result["violations"] == [
        {"operation": "decrypt", "sample": 0, "reason": "PC_HOOK_MISMATCH"},
        {"operation": "decrypt", "sample": 1, "reason": "PC_HOOK_MISMATCH"},
    ]


def test_run_all_writes_report(tmp_path, capsys):
    report_path = tmp_path / "audit_report.json"
    assert run_all(str(report_path)) == 0
    report = json.loads(report_path.read_text(encoding="utf-8"))
    assert report["summary"] == {"total": 2, "passed": 2, "failed": 0}
    assert [c["check"] for c in report["checks"]] == ["keypair_invariants", "acceleration_hooks"]
    assert "2/2" in capsys.readouterr().out


@pytest.mark.parametrize("samples", [0, -1])
def test_hooks_check_rejects_empty_sample(keypair, samples):
    from pailcrypt.errors import InvalidOperand

    with pytest.raises(InvalidOperand) as exc:
        check_hooks(hooks=GMPY_HOOKS, keys=keypair, samples=samples)
    assert exc.value.details == {"operand": "samples", "operation": "check_hooks"}


def test_format_result_lists_violations():
    assert format_result({"check": "keypair_invariants", "passed": True, "violations": []}) == "  ✅ keypair_invariants"
    text = format_result(
        {
            "check": "acceleration_hooks",
            "passed": False,
            "violations": [{"operation": "add", "sample": 0, "reason": "PC_HOOK_MISMATCH"}, "hp"],
        }
    )
    lines = text.splitlines()
    assert lines[0] == "  ❌ acceleration_hooks (2 violation(s))"
    assert '"operation": "add"' in lines[1]
    assert lines[2].endswith("hp")
