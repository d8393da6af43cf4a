"""
ledger_vm.runtime.abi: method surface, selectors and revert helpers.

Call/return encoding is the host's business; this module only carries what
the ledger host needs to route a call: the canonical signature of each
method, its 4-byte selector, the Python attribute implementing it, and
whether it mutates state.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Iterable, NoReturn, Optional, Sequence, Tuple, Type, Union

from .error import Revert, VmError
from .events_api import EventSpec
from .hash_api import keccak256_text


def revert(message: Optional[Any] = None, *, exc: Type[Revert] = Revert) -> NoReturn:
    """Abort the current call; the host rolls back its writes and events."""
    raise exc() if message is None else exc(message)


def require(condition: bool, message: Optional[Any] = None, *, exc: Type[Revert] = Revert) -> None:
    """
    Assertion helper for contracts:

        abi.require(balance >= amount, exc=InsufficientBalance)
        abi.require(n <= 255, "decimals out of range")
    """
    if not condition:
        revert(message, exc=exc)


def selector(signature: str) -> bytes:
    """First four bytes of keccak256(canonical signature)."""
    return keccak256_text(signature)[:4]


@dataclass(frozen=True)
class MethodSpec:
    signature: str
    attr: str
    mutating: bool
    returns: Optional[str] = None

    @property
    def name(self) -> str:
        return self.signature.split("(", 1)[0]

    @property
    def input_types(self) -> Tuple[str, ...]:
        inner = self.signature[self.signature.index("(") + 1 : -1]
        return tuple(t for t in inner.split(",") if t)

    @property
    def selector(self) -> bytes:
        return selector(self.signature)


class ContractInterface:
    """Lookup table from method name / signature / selector / attribute to MethodSpec."""

    def __init__(self, methods: Sequence[MethodSpec], events: Iterable[EventSpec] = ()) -> None:
        self.methods: Tuple[MethodSpec, ...] = tuple(methods)
        self.events: Tuple[EventSpec, ...] = tuple(events)
        self._index: Dict[Union[str, bytes], MethodSpec] = {}
        for m in self.methods:
            for key in (m.signature, m.name, m.attr, m.selector):
                other = self._index.get(key)
                if other is not None and other is not m:
                    raise VmError(f"ambiguous method key {key!r}", code="abi_invalid")
                self._index[key] = m

    def resolve(self, key: Union[str, bytes, bytearray]) -> MethodSpec:
        k = bytes(key) if isinstance(key, (bytes, bytearray)) else key
        spec = self._index.get(k)
        if spec is None:
            shown = "0x" + k.hex() if isinstance(k, bytes) else k
            raise VmError(f"unknown method {shown}", code="unknown_method")
        return spec

    def selectors(self) -> Dict[bytes, str]:
        return {m.selector: m.signature for m in self.methods}

    def __iter__(self):
        return iter(self.methods)

    def __len__(self) -> int:
        return len(self.methods)


__all__ = [
    "revert",
    "require",
    "selector",
    "MethodSpec",
    "ContractInterface",
]
