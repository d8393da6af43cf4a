"""
ledger_vm.runtime.context: per-call transaction environment.

The host binds a `TxEnv` for every state-mutating call so contracts can read
the caller identity without ambient globals.

Addresses are raw 20-byte values. The helpers below also accept hex strings
(with or without "0x") and normalise them to bytes; this is the only place a
hex address becomes `bytes` on its way into a contract.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

ADDRESS_LEN = 20

BytesLike = Union[bytes, bytearray, memoryview, str]


class ContextError(Exception):
    """A value could not be turned into bytes, an address or a nonce."""


def to_bytes(value: BytesLike) -> bytes:
    """bytes-like values are copied; strings are parsed as (optionally 0x-prefixed) hex."""
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if not isinstance(value, str):
        raise ContextError(f"expected bytes or hex str, got {type(value).__name__}")
    text = value.strip()
    if text[:2] in ("0x", "0X"):
        text = text[2:]
    if len(text) % 2:
        raise ContextError(f"odd-length hex: {value!r}")
    try:
        return bytes.fromhex(text)
    except ValueError as e:
        raise ContextError(f"not hex: {value!r}") from e


def to_hex(b: Union[bytes, bytearray, memoryview]) -> str:
    return "0x" + bytes(b).hex()


def to_address(value: BytesLike) -> bytes:
    """Coerce to a 20-byte address or raise ContextError."""
    raw = to_bytes(value)
    if len(raw) != ADDRESS_LEN:
        raise ContextError(f"address must be {ADDRESS_LEN} bytes, got {len(raw)}")
    return raw


def _nonce(v: Any) -> int:
    if isinstance(v, bool) or not isinstance(v, int) or v < 0:
        raise ContextError(f"nonce must be a non-negative int, got {v!r}")
    return v


@dataclass(frozen=True)
class TxEnv:
    """
    sender:   caller address (20 bytes)
    to:       address of the contract being called, if the host has one
    nonce:    host-assigned call sequence number
    tx_hash:  optional correlation hash for logs
    """

    sender: bytes
    to: Optional[bytes] = None
    nonce: int = 0
    tx_hash: bytes = b""

    def __post_init__(self) -> None:
        set_ = object.__setattr__
        set_(self, "sender", to_address(self.sender))
        set_(self, "to", None if self.to is None else to_address(self.to))
        set_(self, "nonce", _nonce(self.nonce))
        set_(self, "tx_hash", to_bytes(self.tx_hash))

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TxEnv":
        return cls(
            sender=d.get("sender", b""),
            to=d.get("to"),
            nonce=d.get("nonce", 0),
            tx_hash=d.get("tx_hash", b""),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "sender": to_hex(self.sender),
            "to": None if self.to is None else to_hex(self.to),
            "nonce": self.nonce,
            "tx_hash": to_hex(self.tx_hash),
        }


__all__ = [
    "ADDRESS_LEN",
    "ContextError",
    "to_bytes",
    "to_hex",
    "to_address",
    "TxEnv",
]
