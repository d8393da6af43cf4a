"""
ledger_vm.runtime.hash_api: Keccak-256 for selectors, event topics and
storage slot derivation.

Strictly bytes-in, bytes-out (no implicit text encoding). Keccak-256 here is
the pre-standard variant used by Ethereum, not hashlib's SHA3-256; it is
provided by PyCryptodome.
"""

from __future__ import annotations

from Crypto.Hash import keccak as _keccak

from .error import VmError


def _ensure_bytes(buf: object, name: str) -> bytes:
    if isinstance(buf, (bytes, bytearray, memoryview)):
        return bytes(buf)
    raise VmError(f"{name} must be bytes-like (got {type(buf).__name__})", code="hash_invalid")


def keccak256(data: bytes | bytearray | memoryview) -> bytes:
    h = _keccak.new(digest_bits=256)
    h.update(_ensure_bytes(data, "data"))
    return h.digest()


def keccak256_hex(data: bytes | bytearray | memoryview) -> str:
    return "0x" + keccak256(data).hex()


def hash_concat_keccak256(*chunks: bytes | bytearray | memoryview) -> bytes:
    """keccak256(chunk0 || chunk1 || ...) without building the joined buffer."""
    h = _keccak.new(digest_bits=256)
    for i, c in enumerate(chunks):
        h.update(_ensure_bytes(c, f"chunk[{i}]"))
    return h.digest()


def keccak256_text(text: str) -> bytes:
    """Hash the ASCII/UTF-8 form of a canonical signature string."""
    if not isinstance(text, str):
        raise VmError("signature must be str", code="hash_invalid")
    return keccak256(text.encode("utf-8"))


__all__ = [
    "keccak256",
    "keccak256_hex",
    "keccak256_text",
    "hash_concat_keccak256",
]
