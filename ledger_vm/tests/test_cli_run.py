from __future__ import annotations

import json
import logging

import pytest

from ledger_vm.cli import ENTRYPOINTS, resolve_entrypoint
from ledger_vm.cli import run as cli_run

A = "0x" + "01" * 20
B = "0x" + "02" * 20
C = "0x" + "03" * 20


@pytest.fixture(autouse=True)
def _restore_root_logger():
    root = logging.getLogger()
    saved = (root.level, list(root.handlers))
    yield
    for h in list(root.handlers):
        root.removeHandler(h)
    root.setLevel(saved[0])
    for h in saved[1]:
        root.addHandler(h)


def _write(tmp_path, steps) -> str:
    p = tmp_path / "script.json"
    p.write_text(json.dumps(steps), encoding="utf-8")
    return str(p)


def test_entrypoint_table():
    assert set(ENTRYPOINTS) == {"run"}
    assert resolve_entrypoint("run") is cli_run.main


def test_successful_script_json_output(tmp_path, capsys):
    path = _write(
        tmp_path,
        [
            {"sender": A, "method": "init", "args": ["Tok", "TK", 18, "1000"]},
            {"sender": A, "method": "transfer", "args": [B, 300]},
            {"sender": A, "method": "approve(address,uint256)", "args": [C, 200]},
            {"sender": C, "method": "0x23b872dd", "args": [A, B, "150"]},
            {"method": "balanceOf", "args": [B]},
        ],
    )
    assert cli_run.main([path, "--json"]) == 0
    out = json.loads(capsys.readouterr().out)
    assert out["failed_steps"] == []
    assert out["state"]["total_supply"] == 1000
    assert out["state"]["balances"][A] == 550
    assert out["state"]["balances"][B] == 450
    assert out["steps"][-1]["return"] == 450
    assert [log["event"] for log in out["steps"][3]["logs"]] == ["Approval", "Transfer"]


def test_revert_sets_exit_code(tmp_path, capsys):
    path = _write(
        tmp_path,
        [
            {"sender": A, "method": "init", "args": ["Tok", "TK", 18, 10]},
            {"sender": B, "method": "transfer", "args": [C, 1]},
        ],
    )
    assert cli_run.main([path]) == 1
    text = capsys.readouterr().out
    assert "REVERT 'Insufficient balance'" in text
    assert cli_run.main([path, "--allow-revert"]) == 0


@pytest.mark.parametrize(
    "steps",
    [
        {"not": "a list"},
        [{"sender": A, "method": "burn", "args": [1]}],
        [{"sender": A, "method": "transfer", "args": [B]}],
        [{"sender": A, "method": "transfer", "args": ["0x1234", 1]}],
        [{"sender": A, "method": "transfer", "args": [B, "1.5"]}],
        [{"sender": A, "method": "transfer", "args": [B, "²"]}],
        [{"sender": A, "method": "transfer", "args": [B, "٣"]}],
        [{"sender": "bob", "method": "transfer", "args": [B, 1]}],
    ],
)
def test_bad_input_exit_code(tmp_path, steps):
    assert cli_run.main([_write(tmp_path, steps)]) == 2


def test_missing_file(tmp_path):
    assert cli_run.main([str(tmp_path / "nope.json")]) == 2
