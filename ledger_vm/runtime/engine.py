"""
ledger_vm.runtime.engine: route calls to a contract and report the outcome.

The engine is what a chain host does around every invocation:

    resolve method (name | signature | 4-byte selector)
      → coerce arguments (hex addresses → bytes)
      → views: run directly, no checkpoint, no events
      → mutators: run inside Host.transaction(sender)
      → CallResult(ok, return_value, error, logs)

A `VmError` raised anywhere below (revert, host failure, bad arguments) turns
into `ok=False` with state untouched. Any other exception is a programming
error: the host still rolls the call back, and the exception propagates.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

from ledger_vm.config import load_config
from ledger_vm.logging import get_logger, trace_scope

from .abi import ContractInterface, MethodSpec
from .context import ContextError, to_address, to_hex
from .error import VmError
from .events_api import Event
from .host import Host

log = get_logger(__name__)

MethodKey = Union[str, bytes, bytearray]


@dataclass
class CallResult:
    ok: bool
    method: str
    return_value: Any = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    logs: List[Event] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        def _j(v: Any) -> Any:
            return to_hex(v) if isinstance(v, (bytes, bytearray)) else v

        return {
            "ok": self.ok,
            "method": self.method,
            "return": _j(self.return_value),
            "error": self.error,
            "error_code": self.error_code,
            "logs": [
                {"event": e.name, "args": {k: _j(v) for k, v in e.args.items()}, **e.log.to_dict()}
                for e in self.logs
            ],
        }


def _coerce_arg(type_name: str, value: Any) -> Any:
    if type_name == "address" and isinstance(value, (str, bytearray, memoryview)):
        return to_address(value)
    return value


def _type_ok(type_name: str, value: Any) -> bool:
    if type_name == "address":
        return isinstance(value, bytes) and len(value) == 20
    if type_name == "string":
        return isinstance(value, str)
    if type_name == "bool":
        return isinstance(value, bool)
    if type_name.startswith("uint"):
        return isinstance(value, int) and not isinstance(value, bool) and 0 <= value < (1 << int(type_name[4:]))
    return True


class Engine:
    """
    Bind a contract class to a host and dispatch calls to it.

    `contract_factory` is called once with the host and must return an object
    exposing an `INTERFACE: ContractInterface` attribute.
    """

    def __init__(self, contract_factory: Callable[[Host], Any], host: Optional[Host] = None) -> None:
        self.host = host if host is not None else Host()
        self.contract = contract_factory(self.host)
        interface = getattr(self.contract, "INTERFACE", None)
        if not isinstance(interface, ContractInterface):
            raise VmError("contract does not declare an INTERFACE", code="abi_invalid")
        self.interface: ContractInterface = interface

    # ------------------------------------------------------------------ #

    def call(self, method: MethodKey, *args: Any, sender: Any = None) -> CallResult:
        shown = method if isinstance(method, str) else "0x" + bytes(method).hex()
        try:
            spec = self.interface.resolve(method)
            call_args = self._coerce_args(spec, args)
        except VmError as e:
            log.info("call rejected", extra={"method": shown, "code": e.code, "reason": e.message})
            return CallResult(ok=False, method=shown, error=e.message, error_code=e.code)

        if not spec.mutating:
            return self._view(spec, call_args)
        return self._mutate(spec, call_args, sender)

    def call_data(self, selector: bytes, args: Sequence[Any], *, sender: Any = None) -> CallResult:
        """Dispatch by 4-byte selector, the way a chain host would."""
        return self.call(bytes(selector), *args, sender=sender)

    def transact(self, method: MethodKey, *args: Any, sender: Any = None) -> Any:
        """Like `call`, but return the value directly and raise on failure."""
        res = self.call(method, *args, sender=sender)
        if not res.ok:
            raise VmError(res.error or "call failed", code=res.error_code or "vm_error")
        return res.return_value

    # ------------------------------------------------------------------ #

    def _coerce_args(self, spec: MethodSpec, args: Sequence[Any]) -> List[Any]:
        types = spec.input_types
        if len(args) != len(types):
            raise VmError(
                f"{spec.signature} takes {len(types)} argument(s), got {len(args)}",
                code="bad_args",
            )
        try:
            out = [_coerce_arg(t, v) for t, v in zip(types, args)]
        except ContextError as e:
            raise VmError(str(e), code="bad_args") from e
        if load_config().strict_mode:
            for i, (t, v) in enumerate(zip(types, out)):
                if not _type_ok(t, v):
                    raise VmError(
                        f"argument {i} of {spec.signature} is not a valid {t}",
                        code="bad_args",
                        context={"index": i, "type": t},
                    )
        return out

    def _view(self, spec: MethodSpec, args: List[Any]) -> CallResult:
        fn = getattr(self.contract, spec.attr)
        try:
            with self.host.view():
                value = fn(*args)
        except VmError as e:
            return CallResult(ok=False, method=spec.name, error=e.message, error_code=e.code)
        return CallResult(ok=True, method=spec.name, return_value=value)

    def _mutate(self, spec: MethodSpec, args: List[Any], sender: Any) -> CallResult:
        try:
            caller = to_address(sender) if sender is not None else None
        except ContextError as e:
            return CallResult(ok=False, method=spec.name, error=str(e), error_code="bad_sender")
        if caller is None:
            return CallResult(
                ok=False, method=spec.name, error="sender required for state-changing call", error_code="bad_sender"
            )

        fn = getattr(self.contract, spec.attr)
        with trace_scope(caller=to_hex(caller), method=spec.name):
            try:
                with self.host.transaction(caller):
                    value = fn(*args)
                    # Exactly what the host publishes on commit.
                    logs = list(self.host.sink.pending())
            except VmError as e:
                log.info("call reverted", extra={"code": e.code, "reason": e.message})
                return CallResult(ok=False, method=spec.name, error=e.message, error_code=e.code)

            log.debug("call committed", extra={"events": len(logs)})
            return CallResult(ok=True, method=spec.name, return_value=value, logs=logs)


__all__ = ["CallResult", "Engine"]
