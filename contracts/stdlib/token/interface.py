# -*- coding: utf-8 -*-
"""
contracts.stdlib.token.interface
================================

The ERC-20 method and event surface: canonical signatures, the Python
attribute implementing each method, 4-byte selectors and event topics.

    transfer(address,uint256)          -> 0xa9059cbb
    Transfer(address,address,uint256)  -> 0xddf252ad...
"""

from __future__ import annotations

from typing import Dict, Final

from ledger_vm.runtime.abi import ContractInterface, MethodSpec, selector
from ledger_vm.runtime.events_api import EventParam, EventSpec
from ledger_vm.runtime.hash_api import keccak256_text

# -----------------------------------------------------------------------------
# Events
# -----------------------------------------------------------------------------

TRANSFER_EVENT: Final[EventSpec] = EventSpec(
    "Transfer",
    (
        EventParam("from", "address", indexed=True),
        EventParam("to", "address", indexed=True),
        EventParam("value", "uint256"),
    ),
)

APPROVAL_EVENT: Final[EventSpec] = EventSpec(
    "Approval",
    (
        EventParam("owner", "address", indexed=True),
        EventParam("spender", "address", indexed=True),
        EventParam("value", "uint256"),
    ),
)


def event_topic(signature: str) -> bytes:
    return keccak256_text(signature)


TRANSFER_TOPIC: Final[bytes] = TRANSFER_EVENT.topic0
APPROVAL_TOPIC: Final[bytes] = APPROVAL_EVENT.topic0

# -----------------------------------------------------------------------------
# Methods
# -----------------------------------------------------------------------------

METHODS = (
    MethodSpec("init(string,string,uint8,uint256)", "init", mutating=True),
    MethodSpec("name()", "name", mutating=False, returns="string"),
    MethodSpec("symbol()", "symbol", mutating=False, returns="string"),
    MethodSpec("decimals()", "decimals", mutating=False, returns="uint8"),
    MethodSpec("totalSupply()", "total_supply", mutating=False, returns="uint256"),
    MethodSpec("balanceOf(address)", "balance_of", mutating=False, returns="uint256"),
    MethodSpec("transfer(address,uint256)", "transfer", mutating=True, returns="bool"),
    MethodSpec("approve(address,uint256)", "approve", mutating=True, returns="bool"),
    MethodSpec("allowance(address,address)", "allowance", mutating=False, returns="uint256"),
    MethodSpec("transferFrom(address,address,uint256)", "transfer_from", mutating=True, returns="bool"),
    MethodSpec("mint(address,uint256)", "mint", mutating=True, returns="bool"),
)

INTERFACE: Final[ContractInterface] = ContractInterface(METHODS, events=(TRANSFER_EVENT, APPROVAL_EVENT))

# selector -> Python method name
SELECTORS: Final[Dict[bytes, str]] = {m.selector: m.attr for m in METHODS}

MUTATING: Final[frozenset] = frozenset(m.attr for m in METHODS if m.mutating)
VIEWS: Final[frozenset] = frozenset(m.attr for m in METHODS if not m.mutating)


__all__ = [
    "TRANSFER_EVENT",
    "APPROVAL_EVENT",
    "TRANSFER_TOPIC",
    "APPROVAL_TOPIC",
    "METHODS",
    "INTERFACE",
    "SELECTORS",
    "MUTATING",
    "VIEWS",
    "event_topic",
    "selector",
]
