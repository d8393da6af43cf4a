from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

from ledger_vm.config import load_config

from .error import HostError
from .hash_api import keccak256_text

WORD = 32
_UINT_BITS = {"uint8": 8, "uint256": 256}
_SUPPORTED_TYPES = ("address", "bool") + tuple(_UINT_BITS)


@dataclass(frozen=True)
class EventParam:
    name: str
    type: str
    indexed: bool = False


@dataclass(frozen=True)
class EventSpec:
    """
    Declared event shape, e.g.

        EventSpec("Transfer", (EventParam("from", "address", True),
                               EventParam("to", "address", True),
                               EventParam("value", "uint256")))
    """

    name: str
    params: Tuple[EventParam, ...]

    def __post_init__(self) -> None:
        for p in self.params:
            if p.type not in _SUPPORTED_TYPES:
                raise HostError(f"unsupported event param type {p.type!r}", code="event_invalid")

    @property
    def signature(self) -> str:
        return f"{self.name}({','.join(p.type for p in self.params)})"

    @property
    def topic0(self) -> bytes:
        return keccak256_text(self.signature)


@dataclass(frozen=True)
class LogRecord:
    """
    ABI-shaped log record as persisted by the host:

        topics[0] = keccak256(signature)
        topics[1:] = indexed params, each left-padded to 32 bytes
        data       = non-indexed params, 32-byte words concatenated
    """

    address: Optional[bytes]
    topics: Tuple[bytes, ...]
    data: bytes

    def to_dict(self) -> Dict[str, Any]:
        return {
            "address": "0x" + self.address.hex() if self.address is not None else None,
            "topics": ["0x" + t.hex() for t in self.topics],
            "data": "0x" + self.data.hex(),
        }


@dataclass(frozen=True)
class Event:
    """In-VM representation of an emitted event plus its encoded log record."""

    name: str
    args: Mapping[str, Any]
    log: LogRecord = field(compare=False)

    def as_tuple(self) -> Tuple[Any, ...]:
        return (self.name, *self.args.values())


# --- encoding ---------------------------------------------------------------


def _encode_word(p: EventParam, value: Any) -> bytes:
    if p.type == "address":
        if not isinstance(value, (bytes, bytearray)) or len(value) != 20:
            raise HostError(
                f"event arg {p.name!r} must be a 20-byte address",
                code="event_invalid",
                context={"param": p.name},
            )
        return bytes(value).rjust(WORD, b"\x00")
    if p.type == "bool":
        if not isinstance(value, bool):
            raise HostError(f"event arg {p.name!r} must be bool", code="event_invalid")
        return int(value).to_bytes(WORD, "big")
    bits = _UINT_BITS[p.type]
    if not isinstance(value, int) or isinstance(value, bool) or value < 0 or value.bit_length() > bits:
        raise HostError(
            f"event arg {p.name!r} out of range for {p.type}",
            code="event_invalid",
            context={"param": p.name},
        )
    return value.to_bytes(WORD, "big")


def encode_log(spec: EventSpec, args: Mapping[str, Any], address: Optional[bytes] = None) -> LogRecord:
    expected = [p.name for p in spec.params]
    if sorted(args) != sorted(expected):
        raise HostError(
            f"event {spec.name} expects args {expected}, got {sorted(args)}",
            code="event_invalid",
        )
    topics = [spec.topic0]
    data = b""
    for p in spec.params:
        word = _encode_word(p, args[p.name])
        if p.indexed:
            topics.append(word)
        else:
            data += word
    return LogRecord(address=address, topics=tuple(topics), data=data)


# --- sink & log -------------------------------------------------------------


class EventSink:
    """Pending events of the call in progress."""

    def __init__(self) -> None:
        self._pending: List[Event] = []

    def emit(self, spec: EventSpec, args: Mapping[str, Any], address: Optional[bytes] = None) -> Event:
        cap = load_config().max_logs_per_call
        if len(self._pending) >= cap:
            raise HostError(f"too many events in one call (>{cap})", code="event_limit")
        record = encode_log(spec, args, address)
        ordered = {p.name: args[p.name] for p in spec.params}
        ev = Event(name=spec.name, args=ordered, log=record)
        self._pending.append(ev)
        return ev

    def pending(self) -> Tuple[Event, ...]:
        return tuple(self._pending)

    def discard(self) -> None:
        self._pending.clear()

    def flush(self) -> List[Event]:
        out = list(self._pending)
        self._pending.clear()
        return out


class EventLog:
    """Append-only log of events from committed calls."""

    def __init__(self) -> None:
        self._events: List[Event] = []

    def append_all(self, events: Sequence[Event]) -> None:
        self._events.extend(events)

    def events(self) -> Tuple[Event, ...]:
        return tuple(self._events)

    def records(self) -> Tuple[LogRecord, ...]:
        return tuple(e.log for e in self._events)

    def __len__(self) -> int:
        return len(self._events)


__all__ = [
    "EventParam",
    "EventSpec",
    "LogRecord",
    "Event",
    "encode_log",
    "EventSink",
    "EventLog",
]
