# -*- coding: utf-8 -*-
"""
contracts.stdlib.token.layout
=============================

Storage layout of the fungible token: Solidity-compatible slot derivation so
the state can be inspected with ordinary EVM tooling.

Fields occupy consecutive base slots in declaration order:

    0  balances      mapping(address => uint256)
    1  allowances    mapping(address => mapping(address => uint256))
    2  name          string
    3  symbol        string
    4  decimals      uint8
    5  total_supply  uint256
    6  initialized   bool

Mapping entries live at keccak256(pad32(key) || pad32(slot)); a nested
mapping applies the rule twice, outer key first. Strings use the Solidity
encoding: up to 31 bytes inline with `len * 2` in the low byte, longer
strings store `len * 2 + 1` in the base slot and the data in consecutive
words starting at keccak256(pad32(slot)).
"""

from __future__ import annotations

from typing import Callable, Dict, Final, Union

from ledger_vm.runtime.error import HostError
from ledger_vm.runtime.hash_api import keccak256

WORD: Final[int] = 32

SLOT_BALANCES: Final[int] = 0
SLOT_ALLOWANCES: Final[int] = 1
SLOT_NAME: Final[int] = 2
SLOT_SYMBOL: Final[int] = 3
SLOT_DECIMALS: Final[int] = 4
SLOT_TOTAL_SUPPLY: Final[int] = 5
SLOT_INITIALIZED: Final[int] = 6

SlotLike = Union[int, bytes]
WordReader = Callable[[bytes], bytes]

_SHORT_MAX = WORD - 1

# -----------------------------------------------------------------------------
# Words & slots
# -----------------------------------------------------------------------------


def slot_bytes(slot: SlotLike) -> bytes:
    """Normalise a slot number (or an already derived 32-byte slot) to bytes."""
    if isinstance(slot, (bytes, bytearray)):
        if len(slot) != WORD:
            raise HostError("slot must be 32 bytes", code="storage_invalid")
        return bytes(slot)
    return int(slot).to_bytes(WORD, "big")


def word_from_int(n: int) -> bytes:
    return int(n).to_bytes(WORD, "big")


def int_from_word(word: bytes) -> int:
    return int.from_bytes(word, "big")


def _pad_key(key: bytes) -> bytes:
    if len(key) > WORD:
        raise HostError("mapping key longer than 32 bytes", code="storage_invalid")
    return bytes(key).rjust(WORD, b"\x00")


def mapping_slot(key: bytes, base_slot: SlotLike) -> bytes:
    return keccak256(_pad_key(key) + slot_bytes(base_slot))


def nested_mapping_slot(k1: bytes, k2: bytes, base_slot: SlotLike) -> bytes:
    return mapping_slot(k2, mapping_slot(k1, base_slot))


def balance_slot(addr: bytes) -> bytes:
    return mapping_slot(addr, SLOT_BALANCES)


def allowance_slot(owner: bytes, spender: bytes) -> bytes:
    return nested_mapping_slot(owner, spender, SLOT_ALLOWANCES)


# -----------------------------------------------------------------------------
# Strings
# -----------------------------------------------------------------------------


def _data_slot(base: bytes, i: int) -> bytes:
    start = int_from_word(keccak256(base))
    return word_from_int((start + i) % (1 << 256))


def encode_string(base_slot: SlotLike, text: str) -> Dict[bytes, bytes]:
    """Return every {slot: word} write needed to store `text` at `base_slot`."""
    base = slot_bytes(base_slot)
    data = text.encode("utf-8")
    n = len(data)
    if n <= _SHORT_MAX:
        return {base: data.ljust(_SHORT_MAX, b"\x00") + bytes([n * 2])}

    out = {base: word_from_int(n * 2 + 1)}
    for i in range(0, n, WORD):
        out[_data_slot(base, i // WORD)] = data[i : i + WORD].ljust(WORD, b"\x00")
    return out


def decode_string(reader: WordReader, base_slot: SlotLike) -> str:
    base = slot_bytes(base_slot)
    head = reader(base)
    if head[-1] & 1 == 0:
        n = head[-1] // 2
        if n > _SHORT_MAX:
            raise HostError("corrupt short string", code="storage_invalid")
        return head[:n].decode("utf-8")

    n = (int_from_word(head) - 1) // 2
    chunks = [reader(_data_slot(base, i)) for i in range((n + WORD - 1) // WORD)]
    return b"".join(chunks)[:n].decode("utf-8")


__all__ = [
    "WORD",
    "SLOT_BALANCES",
    "SLOT_ALLOWANCES",
    "SLOT_NAME",
    "SLOT_SYMBOL",
    "SLOT_DECIMALS",
    "SLOT_TOTAL_SUPPLY",
    "SLOT_INITIALIZED",
    "slot_bytes",
    "word_from_int",
    "int_from_word",
    "mapping_slot",
    "nested_mapping_slot",
    "balance_slot",
    "allowance_slot",
    "encode_string",
    "decode_string",
]
