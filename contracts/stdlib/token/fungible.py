# -*- coding: utf-8 -*-
"""
ERC-20 fungible token ledger
============================

Storage-backed token bound to a `ledger_vm.runtime.host.Host`. Every read and
write goes through the host (`storage_get` / `storage_set`), every event
through `host.emit`, and the caller of a state-changing method is
`host.msg_sender()`. Atomicity is the host's job: a revert raised anywhere in
a method discards all of that call's writes and events.

Public interface
----------------
# views
name() -> str
symbol() -> str
decimals() -> int
total_supply() -> int
balance_of(addr: bytes) -> int
allowance(owner: bytes, spender: bytes) -> int
is_initialized() -> bool

# state-changing (caller from the host)
init(name: str, symbol: str, decimals: int, initial_supply: int) -> None
transfer(to: bytes, amount: int) -> bool
approve(spender: bytes, amount: int) -> bool
transfer_from(owner: bytes, to: bytes, amount: int) -> bool
mint(to: bytes, amount: int) -> bool

Notes
-----
- `init` refuses to run twice while `LEDGER_VM_INIT_GUARD` is on (default).
  With the guard off a second `init` overwrites metadata and supply and
  credits the new caller.
- `mint` has no access control: anyone may mint.
- `transfer_from` decrements the allowance and emits `Approval` with the new
  value before moving the balance. An allowance of 2**256-1 is decremented
  like any other.
- Transfers to `ZERO_ADDRESS` and to oneself are ordinary transfers.
"""

from __future__ import annotations

from ledger_vm.config import load_config
from ledger_vm.logging import get_logger
from ledger_vm.runtime.error import AlreadyInitialized, InsufficientAllowance, InsufficientBalance
from ledger_vm.runtime.host import Host

from ..math.safe_uint import u256_add, u256_sub
from . import ZERO_ADDRESS, require_address, require_amount, require_decimals, require_text
from .interface import APPROVAL_EVENT, INTERFACE, TRANSFER_EVENT
from .layout import (SLOT_DECIMALS, SLOT_INITIALIZED, SLOT_NAME, SLOT_SYMBOL,
                     SLOT_TOTAL_SUPPLY, allowance_slot, balance_slot,
                     decode_string, encode_string, int_from_word,
                     slot_bytes, word_from_int)

log = get_logger(__name__)

_DECIMALS_SLOT = slot_bytes(SLOT_DECIMALS)
_SUPPLY_SLOT = slot_bytes(SLOT_TOTAL_SUPPLY)
_INIT_SLOT = slot_bytes(SLOT_INITIALIZED)


class ERC20Token:
    INTERFACE = INTERFACE

    def __init__(self, host: Host) -> None:
        self.host = host

    # ------------------------------------------------------------------ #
    # storage helpers
    # ------------------------------------------------------------------ #

    def _get_u256(self, slot: bytes) -> int:
        return int_from_word(self.host.storage_get(slot))

    def _set_u256(self, slot: bytes, n: int) -> None:
        self.host.storage_set(slot, word_from_int(require_amount(n)))

    def _set_string(self, base_slot: int, text: str) -> None:
        for slot, word in encode_string(base_slot, text).items():
            self.host.storage_set(slot, word)

    # ------------------------------------------------------------------ #
    # views
    # ------------------------------------------------------------------ #

    def name(self) -> str:
        return decode_string(self.host.storage_get, SLOT_NAME)

    def symbol(self) -> str:
        return decode_string(self.host.storage_get, SLOT_SYMBOL)

    def decimals(self) -> int:
        return self.host.storage_get(_DECIMALS_SLOT)[-1]

    def total_supply(self) -> int:
        return self._get_u256(_SUPPLY_SLOT)

    def balance_of(self, addr: bytes) -> int:
        return self._get_u256(balance_slot(require_address(addr)))

    def allowance(self, owner: bytes, spender: bytes) -> int:
        return self._get_u256(allowance_slot(require_address(owner), require_address(spender)))

    def is_initialized(self) -> bool:
        return self._get_u256(_INIT_SLOT) != 0

    # ------------------------------------------------------------------ #
    # state-changing
    # ------------------------------------------------------------------ #

    def init(self, name: str, symbol: str, decimals: int, initial_supply: int) -> None:
        caller = self.host.msg_sender()
        require_text(name, "name")
        require_text(symbol, "symbol")
        require_decimals(decimals)
        require_amount(initial_supply)

        if load_config().init_guard and self.is_initialized():
            raise AlreadyInitialized()

        self._set_string(SLOT_NAME, name)
        self._set_string(SLOT_SYMBOL, symbol)
        self.host.storage_set(_DECIMALS_SLOT, word_from_int(decimals))
        self._set_u256(_SUPPLY_SLOT, initial_supply)
        self._set_u256(balance_slot(caller), initial_supply)
        self._set_u256(_INIT_SLOT, 1)

        self.host.emit(TRANSFER_EVENT, **{"from": ZERO_ADDRESS, "to": caller, "value": initial_supply})

    def transfer(self, to: bytes, amount: int) -> bool:
        caller = self.host.msg_sender()
        self._transfer(caller, require_address(to), require_amount(amount))
        return True

    def approve(self, spender: bytes, amount: int) -> bool:
        caller = self.host.msg_sender()
        spender = require_address(spender)
        self._set_u256(allowance_slot(caller, spender), require_amount(amount))
        self.host.emit(APPROVAL_EVENT, owner=caller, spender=spender, value=amount)
        return True

    def transfer_from(self, owner: bytes, to: bytes, amount: int) -> bool:
        caller = self.host.msg_sender()
        owner = require_address(owner)
        to = require_address(to)
        require_amount(amount)

        slot = allowance_slot(owner, caller)
        allowed = self._get_u256(slot)
        if allowed < amount:
            raise InsufficientAllowance(context={"allowance": allowed, "amount": amount})
        remaining = u256_sub(allowed, amount)
        self._set_u256(slot, remaining)
        self.host.emit(APPROVAL_EVENT, owner=owner, spender=caller, value=remaining)

        self._transfer(owner, to, amount)
        return True

    def mint(self, to: bytes, amount: int) -> bool:
        caller = self.host.msg_sender()
        to = require_address(to)
        require_amount(amount)

        self._set_u256(_SUPPLY_SLOT, u256_add(self.total_supply(), amount))
        slot = balance_slot(to)
        self._set_u256(slot, u256_add(self._get_u256(slot), amount))
        self.host.emit(TRANSFER_EVENT, **{"from": ZERO_ADDRESS, "to": to, "value": amount})

        log.debug("unrestricted mint", extra={"minter": "0x" + caller.hex(), "to": "0x" + to.hex(), "amount": amount})
        return True

    # ------------------------------------------------------------------ #

    def _transfer(self, sender: bytes, to: bytes, amount: int) -> None:
        src = balance_slot(sender)
        have = self._get_u256(src)
        if have < amount:
            raise InsufficientBalance(context={"balance": have, "amount": amount})
        self._set_u256(src, u256_sub(have, amount))

        # read after the debit so a self-transfer nets out
        dst = balance_slot(to)
        self._set_u256(dst, u256_add(self._get_u256(dst), amount))

        self.host.emit(TRANSFER_EVENT, **{"from": sender, "to": to, "value": amount})


__all__ = ["ERC20Token"]
