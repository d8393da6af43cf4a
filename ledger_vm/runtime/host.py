"""
ledger_vm.runtime.host: the execution environment a ledger contract runs in.

The host owns:
- persistent storage (a StorageBackend behind a write Journal),
- the caller identity of the call in progress (TxEnv),
- the pending event sink and the append-only committed event log,
- per-call atomicity: `transaction()` commits storage and publishes events
  only when the call returns normally,
- the host lock: calls and views from different threads run one at a time.

Contracts see a small surface: `msg_sender()`, `storage_get()`,
`storage_set()`, `emit()`.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Iterator, Optional

from ledger_vm.logging import get_logger

from .context import TxEnv, to_address
from .error import HostError
from .events_api import Event, EventLog, EventSink, EventSpec
from .journal import Journal
from .storage_api import MemoryBackend, StorageBackend

log = get_logger(__name__)

WORD_SIZE = 32
ZERO_WORD = b"\x00" * WORD_SIZE


class Host:
    def __init__(self, backend: Optional[StorageBackend] = None, *, address: Any = None) -> None:
        self.backend: StorageBackend = backend if backend is not None else MemoryBackend()
        self.journal = Journal(self.backend)
        self.sink = EventSink()
        self.log = EventLog()
        self.address: Optional[bytes] = to_address(address) if address is not None else None
        self._env: Optional[TxEnv] = None
        self._nonce = 0
        # Serializes calls across threads. _owner is the thread holding it.
        self._lock = threading.Lock()
        self._owner: Optional[int] = None

    # ------------------------------------------------------------------ #
    # Contract-facing API
    # ------------------------------------------------------------------ #

    @property
    def env(self) -> Optional[TxEnv]:
        return self._env

    def msg_sender(self) -> bytes:
        if self._env is None:
            raise HostError("no active call: caller identity unavailable", code="no_context")
        return self._env.sender

    def storage_get(self, slot: bytes) -> bytes:
        """Read a 32-byte word; unset slots read as zero."""
        raw = self.journal.get(slot)
        if raw is None:
            return ZERO_WORD
        if len(raw) != WORD_SIZE:
            raise HostError(
                "corrupt storage word",
                code="storage_invalid",
                context={"slot": "0x" + bytes(slot).hex(), "len": len(raw)},
            )
        return raw

    def storage_set(self, slot: bytes, word: bytes) -> None:
        if not isinstance(word, (bytes, bytearray)) or len(word) != WORD_SIZE:
            raise HostError("storage value must be a 32-byte word", code="storage_invalid")
        self.journal.set(slot, bytes(word))

    def emit(self, spec: EventSpec, **args: Any) -> Event:
        if self._env is None:
            raise HostError("events can only be emitted during a call", code="no_context")
        return self.sink.emit(spec, args, self.address)

    # ------------------------------------------------------------------ #
    # Host-facing API
    # ------------------------------------------------------------------ #

    @contextmanager
    def _exclusive(self) -> Iterator[None]:
        self._lock.acquire()
        self._owner = threading.get_ident()
        try:
            yield
        finally:
            self._owner = None
            self._lock.release()

    @contextmanager
    def view(self) -> Iterator[None]:
        """
        Hold the host for a read-only call so it never observes another
        thread's open overlay. Reads from inside a running call pass through.
        """
        if self._owner == threading.get_ident():
            yield
            return
        with self._exclusive():
            yield

    @contextmanager
    def transaction(self, sender: Any) -> Iterator[TxEnv]:
        """
        Run one state-mutating call atomically. Any exception reverts every
        storage write and drops every event of the call, then propagates.

        Calls from different threads wait for each other. Nesting a call
        inside another on the same thread raises HostError("reentrancy").
        """
        if self._owner == threading.get_ident():
            raise HostError("re-entrant call", code="reentrancy")
        caller = to_address(sender)

        with self._exclusive():
            env = TxEnv(sender=caller, to=self.address, nonce=self._nonce)
            self._nonce += 1

            marker = self.journal.depth()
            self.journal.begin()
            self._env = env
            try:
                yield env
            except BaseException:
                self.journal.revert_to(marker)
                dropped = len(self.sink.pending())
                self.sink.discard()
                log.debug("call rolled back", extra={"nonce": env.nonce, "dropped_events": dropped})
                raise
            else:
                self.journal.commit()
                self.log.append_all(self.sink.flush())
            finally:
                self._env = None


__all__ = ["Host", "WORD_SIZE", "ZERO_WORD"]
