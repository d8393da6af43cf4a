# -*- coding: utf-8 -*-
"""
contracts.tests.conftest
========================

Pytest fixtures for the token ledger.

- Stable addresses `A = 0x01…01`, `B = 0x02…02`, `C = 0x03…03`.
- A fresh in-memory `Host` + `Engine` bound to `ERC20Token` per test.
- `deployed`: the same engine after `init("Tok", "TK", 18, 1000)` by `A`.
- `vm_env`: set LEDGER_VM_* variables for one test (the config cache is
  cleared before and after).

Usage:
    def test_transfer(deployed, A, B):
        res = deployed.call("transfer", B, 300, sender=A)
        assert res.ok and res.return_value is True
        assert [e.as_tuple() for e in res.logs] == [("Transfer", A, B, 300)]
"""
from __future__ import annotations

import json
from typing import Any, Dict, Iterable, List, Optional, Tuple

import pytest

from contracts.stdlib.token.fungible import ERC20Token
from ledger_vm.config import load_config
from ledger_vm.runtime.engine import Engine
from ledger_vm.runtime.host import Host

ADDR_A = b"\x01" * 20
ADDR_B = b"\x02" * 20
ADDR_C = b"\x03" * 20
TOKEN_ADDRESS = b"\xee" * 20


def snapshot(engine: Engine, accounts: Iterable[bytes] = (ADDR_A, ADDR_B, ADDR_C)) -> Dict[str, Any]:
    """Observable ledger state: supply, balances and all pairwise allowances."""
    token = engine.contract
    accounts = list(accounts)
    return {
        "T": token.total_supply(),
        "B": {a.hex(): token.balance_of(a) for a in accounts},
        "A": {f"{o.hex()}:{s.hex()}": token.allowance(o, s) for o in accounts for s in accounts},
        "events": len(engine.host.log),
    }


def event_tuples(events: Iterable[Any]) -> List[Tuple[Any, ...]]:
    return [e.as_tuple() for e in events]


# --- fixtures ----------------------------------------------------------------

@pytest.fixture(scope="session")
def A() -> bytes:
    return ADDR_A


@pytest.fixture(scope="session")
def B() -> bytes:
    return ADDR_B


@pytest.fixture(scope="session")
def C() -> bytes:
    return ADDR_C


@pytest.fixture
def vm_env(monkeypatch):
    """
    Apply LEDGER_VM_* overrides for the duration of a test:

        def test_unguarded(vm_env, engine, A):
            vm_env(LEDGER_VM_INIT_GUARD="0")
            ...
    """
    def _apply(**env: str) -> None:
        for k, v in env.items():
            monkeypatch.setenv(k, v)
        load_config.cache_clear()

    load_config.cache_clear()
    yield _apply
    load_config.cache_clear()


@pytest.fixture
def host() -> Host:
    return Host(address=TOKEN_ADDRESS)


@pytest.fixture
def engine(host: Host) -> Engine:
    return Engine(ERC20Token, host)


@pytest.fixture
def deployed(engine: Engine, A: bytes) -> Engine:
    res = engine.call("init", "Tok", "TK", 18, 1000, sender=A)
    assert res.ok, res.error
    return engine


# --- pretty assertion diffs for bytes & small dicts --------------------------

def pytest_assertrepr_compare(op: str, left: Any, right: Any) -> Optional[List[str]]:
    if isinstance(left, (bytes, bytearray)) and isinstance(right, (bytes, bytearray)) and op == "==":
        def hexdump(b: bytes) -> str:
            return " ".join(f"{x:02x}" for x in b)
        return [
            "bytes differ:",
            f" left: {hexdump(bytes(left))}",
            f"right: {hexdump(bytes(right))}",
        ]
    if isinstance(left, dict) and isinstance(right, dict) and op == "==":
        try:
            lj = json.dumps(left, sort_keys=True, indent=2, default=str)
            rj = json.dumps(right, sort_keys=True, indent=2, default=str)
        except (TypeError, ValueError):
            return None
        return ["dicts differ (compact JSON):", " left:", lj, " right:", rj]
    return None
