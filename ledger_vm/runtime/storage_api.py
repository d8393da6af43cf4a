"""
ledger_vm.runtime.storage_api: host hooks for deterministic key/value storage.

Design goals
------------
- Deterministic: pure functions over (key, value) with no wall-clock or I/O.
- Simple default: in-process memory backend for local runs & tests.
- Pluggable: a tiny backend interface so the host can swap in a real state DB.
- Safe: strict byte-length caps enforced before the backend is touched.

Backend API
-----------
- get(key: bytes) -> Optional[bytes]
- set(key: bytes, value: bytes) -> None
- delete(key: bytes) -> None
- exists(key: bytes) -> bool

Length caps are read from ledger_vm.config.
"""

from __future__ import annotations

import threading
from typing import Dict, Iterator, Optional, Protocol, Tuple, runtime_checkable

from ledger_vm.config import load_config

from .error import HostError


@runtime_checkable
class StorageBackend(Protocol):
    """Minimal backend interface for contract storage."""

    def get(self, key: bytes) -> Optional[bytes]: ...
    def set(self, key: bytes, value: bytes) -> None: ...
    def delete(self, key: bytes) -> None: ...
    def exists(self, key: bytes) -> bool: ...


class MemoryBackend:
    """Thread-safe in-memory backend for local runs and tests."""

    def __init__(self, initial: Optional[Dict[bytes, bytes]] = None) -> None:
        self._store: Dict[bytes, bytes] = dict(initial or {})
        self._lock = threading.RLock()

    def get(self, key: bytes) -> Optional[bytes]:
        with self._lock:
            return self._store.get(key)

    def set(self, key: bytes, value: bytes) -> None:
        with self._lock:
            self._store[key] = value

    def delete(self, key: bytes) -> None:
        with self._lock:
            self._store.pop(key, None)

    def exists(self, key: bytes) -> bool:
        with self._lock:
            return key in self._store

    def items(self) -> Iterator[Tuple[bytes, bytes]]:
        """Stable (sorted) snapshot of all entries."""
        with self._lock:
            snap = sorted(self._store.items())
        return iter(snap)

    def snapshot(self) -> Dict[bytes, bytes]:
        with self._lock:
            return dict(self._store)

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)


def require_backend(backend: object) -> StorageBackend:
    """Check protocol conformance of a host-supplied backend."""
    for attr in ("get", "set", "delete", "exists"):
        if not callable(getattr(backend, attr, None)):
            raise HostError(f"backend missing method: {attr}", context={"backend": type(backend).__name__})
    return backend  # type: ignore[return-value]


# --------------------------- Validation helpers --------------------------- #


def check_key(key: object) -> bytes:
    if not isinstance(key, (bytes, bytearray)):
        raise HostError("storage key must be bytes", code="storage_invalid")
    if len(key) == 0:
        raise HostError("storage key must be non-empty", code="storage_invalid")
    cap = load_config().max_storage_key_bytes
    if len(key) > cap:
        raise HostError(f"storage key too long (>{cap} bytes)", code="storage_invalid")
    return bytes(key)


def check_value(value: object) -> bytes:
    if not isinstance(value, (bytes, bytearray)):
        raise HostError("storage value must be bytes", code="storage_invalid")
    cap = load_config().max_storage_value_bytes
    if len(value) > cap:
        raise HostError(f"storage value too large (>{cap} bytes)", code="storage_invalid")
    return bytes(value)


__all__ = [
    "StorageBackend",
    "MemoryBackend",
    "require_backend",
    "check_key",
    "check_value",
]
