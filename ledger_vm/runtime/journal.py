"""
ledger_vm.runtime.journal: journaling writes, checkpoints, revert/commit.

A deterministic, in-memory write journal layered over a StorageBackend. It
supports nested checkpoints via a stack of overlays. Writes go to the top
overlay; reads consult overlays from top → base. `commit()` merges the top
overlay into the next layer, or into the backend when it is the last one.
`revert()` discards the top overlay.

This is what gives every ledger call its all-or-nothing semantics: the host
opens a checkpoint before dispatch and either commits or reverts it.

Intended usage
--------------
    j = Journal(backend)
    j.begin()
    j.set(slot, word)
    j.commit()          # applied to the backend

Notes
-----
- `None` in an overlay marks a deletion.
- Writing an all-zero word is stored as-is; the ledger never relies on
  deletion to represent zero (unset and zero both read as zero).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from .error import HostError
from .storage_api import StorageBackend, check_key, check_value, require_backend


@dataclass
class _Overlay:
    """A single journal layer: staged writes, `None` meaning deletion."""

    writes: Dict[bytes, Optional[bytes]] = field(default_factory=dict)


class Journal:
    """
    A copy-on-write write journal with nested checkpoints.

    The journal starts with no open checkpoint; reads then go straight to the
    backend and writes are rejected, so every mutation happens inside a
    begin()/commit() or begin()/revert() pair.
    """

    def __init__(self, backend: StorageBackend) -> None:
        self._backend = require_backend(backend)
        self._layers: List[_Overlay] = []

    @property
    def backend(self) -> StorageBackend:
        return self._backend

    # --------------------------------------------------------------------- #
    # Checkpointing
    # --------------------------------------------------------------------- #

    def depth(self) -> int:
        """Number of open checkpoints (0 when idle)."""
        return len(self._layers)

    def begin(self) -> int:
        """Open a new checkpoint. Returns the new depth marker."""
        self._layers.append(_Overlay())
        return len(self._layers)

    def commit(self) -> None:
        """Merge the top overlay into its parent, or apply it to the backend."""
        if not self._layers:
            raise HostError("journal commit without open checkpoint", code="journal_state")
        top = self._layers.pop()
        if self._layers:
            self._layers[-1].writes.update(top.writes)
        else:
            self._apply_to_backend(top)

    def revert(self) -> None:
        """Discard the top overlay."""
        if not self._layers:
            raise HostError("journal revert without open checkpoint", code="journal_state")
        self._layers.pop()

    def revert_to(self, marker: int) -> None:
        """Revert repeatedly until depth equals `marker` (0 discards everything)."""
        if marker < 0:
            raise ValueError("marker must be >= 0")
        while len(self._layers) > marker:
            self.revert()

    # --------------------------------------------------------------------- #
    # Storage API
    # --------------------------------------------------------------------- #

    def get(self, key: bytes) -> Optional[bytes]:
        k = check_key(key)
        for layer in reversed(self._layers):
            if k in layer.writes:
                return layer.writes[k]
        return self._backend.get(k)

    def set(self, key: bytes, value: bytes) -> None:
        k = check_key(key)
        v = check_value(value)
        self._top().writes[k] = v

    def delete(self, key: bytes) -> None:
        k = check_key(key)
        self._top().writes[k] = None

    def pending_keys(self) -> Set[bytes]:
        """Keys with staged writes in any open checkpoint."""
        out: Set[bytes] = set()
        for layer in self._layers:
            out.update(layer.writes.keys())
        return out

    # --------------------------------------------------------------------- #
    # Internals
    # --------------------------------------------------------------------- #

    def _top(self) -> _Overlay:
        if not self._layers:
            raise HostError("storage write outside of a call", code="journal_state")
        return self._layers[-1]

    def _apply_to_backend(self, layer: _Overlay) -> None:
        for k in sorted(layer.writes):
            v = layer.writes[k]
            if v is None:
                self._backend.delete(k)
            else:
                self._backend.set(k, v)


__all__ = ["Journal"]
