# -*- coding: utf-8 -*-
"""
Property tests for the ERC-20 ledger.

Random operation sequences run against the real engine and a plain-dict
model side by side. After every step:

- sum of balances == total supply, and no balance exceeds it
- the engine's success/failure matches the model's preconditions
- a failed step changes nothing and publishes no events
- a successful step publishes exactly the model's events, in order
"""
from __future__ import annotations

from typing import Any, Dict, List, Tuple

from hypothesis import given, settings
from hypothesis import strategies as st

from contracts.stdlib.token import ZERO_ADDRESS
from contracts.stdlib.token.fungible import ERC20Token
from ledger_vm.runtime.engine import Engine
from ledger_vm.runtime.host import Host

from . import ACCOUNTS, U256_MAX, addresses, amounts

DEPLOYER = ACCOUNTS[0]
INITIAL = 10_000

Op = Tuple[Any, ...]

OPS = st.one_of(
    st.tuples(st.just("transfer"), addresses(), addresses(), amounts()),
    st.tuples(st.just("approve"), addresses(), addresses(), amounts()),
    st.tuples(st.just("transfer_from"), addresses(), addresses(), addresses(), amounts()),
    st.tuples(st.just("mint"), addresses(), addresses(), amounts()),
)


class Model:
    def __init__(self) -> None:
        self.T = INITIAL
        self.B: Dict[bytes, int] = {DEPLOYER: INITIAL}
        self.A: Dict[Tuple[bytes, bytes], int] = {}

    def bal(self, a: bytes) -> int:
        return self.B.get(a, 0)

    def apply(self, op: Op) -> Tuple[bool, List[Tuple[Any, ...]]]:
        kind, caller = op[0], op[1]
        if kind == "transfer":
            _, _, to, n = op
            return self._move(caller, to, n, [])
        if kind == "approve":
            _, _, spender, n = op
            self.A[(caller, spender)] = n
            return True, [("Approval", caller, spender, n)]
        if kind == "transfer_from":
            _, _, owner, to, n = op
            allowed = self.A.get((owner, caller), 0)
            if allowed < n:
                return False, []
            saved = dict(self.A)
            self.A[(owner, caller)] = allowed - n
            ok, evs = self._move(owner, to, n, [("Approval", owner, caller, allowed - n)])
            if not ok:
                self.A = saved
            return ok, evs
        _, _, to, n = op
        if self.T + n > U256_MAX or self.bal(to) + n > U256_MAX:
            return False, []
        self.T += n
        self.B[to] = self.bal(to) + n
        return True, [("Transfer", ZERO_ADDRESS, to, n)]

    def _move(self, frm: bytes, to: bytes, n: int, evs: List[Tuple[Any, ...]]):
        if self.bal(frm) < n:
            return False, []
        self.B[frm] = self.bal(frm) - n
        if self.bal(to) + n > U256_MAX:
            self.B[frm] += n
            return False, []
        self.B[to] = self.bal(to) + n
        return True, evs + [("Transfer", frm, to, n)]


def _fresh() -> Engine:
    eng = Engine(ERC20Token, Host())
    assert eng.call("init", "Tok", "TK", 18, INITIAL, sender=DEPLOYER).ok
    return eng


def _state(eng: Engine) -> Tuple[int, Dict[bytes, int], Dict[Tuple[bytes, bytes], int]]:
    tok = eng.contract
    bal = {a: tok.balance_of(a) for a in ACCOUNTS}
    allow = {(o, s): tok.allowance(o, s) for o in ACCOUNTS for s in ACCOUNTS}
    return tok.total_supply(), bal, allow


def _call(eng: Engine, op: Op):
    kind, caller, *args = op
    return eng.call(kind, *args, sender=caller)


@settings(max_examples=150)
@given(st.lists(OPS, min_size=1, max_size=25))
def test_ledger_matches_model_and_conserves_supply(ops):
    eng = _fresh()
    model = Model()

    for op in ops:
        before = _state(eng)
        logged = len(eng.host.log)
        ok, expected_events = model.apply(op)
        res = _call(eng, op)

        assert res.ok == ok, (op, res.error)
        T, B, A = _state(eng)
        if ok:
            assert [e.as_tuple() for e in res.logs] == expected_events
        else:
            assert (T, B, A) == before
            assert len(eng.host.log) == logged
            assert res.error in ("Insufficient balance", "Insufficient allowance", "Arithmetic overflow")

        assert sum(B.values()) == T == model.T
        assert all(b <= T for b in B.values())
        assert B == {a: model.bal(a) for a in ACCOUNTS}
        assert A == {(o, s): model.A.get((o, s), 0) for o in ACCOUNTS for s in ACCOUNTS}


@given(addresses(), addresses(), amounts(), amounts())
def test_approve_sets_exact_value(owner, spender, first, second):
    eng = _fresh()
    eng.call("approve", spender, first, sender=owner)
    eng.call("approve", spender, second, sender=owner)
    assert eng.contract.allowance(owner, spender) == second


@given(addresses(), st.integers(min_value=0, max_value=INITIAL))
def test_self_transfer_is_balance_neutral(to, n):
    eng = _fresh()
    eng.call("transfer", to, INITIAL, sender=DEPLOYER)
    before = eng.contract.balance_of(to)
    res = eng.call("transfer", to, n, sender=to)
    assert res.ok
    assert eng.contract.balance_of(to) == before
    assert [e.as_tuple() for e in res.logs] == [("Transfer", to, to, n)]


@given(addresses(), addresses(), st.integers(min_value=0, max_value=INITIAL))
def test_exact_allowance_drains_to_zero(spender, to, n):
    eng = _fresh()
    eng.call("approve", spender, n, sender=DEPLOYER)
    res = eng.call("transfer_from", DEPLOYER, to, n, sender=spender)
    assert res.ok
    assert eng.contract.allowance(DEPLOYER, spender) == 0
    assert [e.as_tuple() for e in res.logs] == [
        ("Approval", DEPLOYER, spender, 0),
        ("Transfer", DEPLOYER, to, n),
    ]
