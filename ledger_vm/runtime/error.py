from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, Mapping


@dataclass
class VmError(Exception):
    """
    Structured error raised by the ledger host and by contracts running on it.

    Supported call patterns:

        VmError("simple message")
        VmError("message", code="some_code", context={...})

    Attributes:
        code: short machine-readable code string
        message: human-readable message (the revert string for reverts)
        context: optional extra fields for debugging / receipts
    """

    code: str
    message: str
    context: Dict[str, Any]

    default_code = "vm_error"

    def __init__(self, message: Any = "", **kwargs: Any) -> None:
        code = str(kwargs.pop("code", self.default_code))
        ctx = kwargs.pop("context", None)
        if kwargs:
            raise TypeError(f"unexpected keyword arguments: {sorted(kwargs)}")
        if isinstance(message, (bytes, bytearray)):
            message = bytes(message).decode("utf-8", errors="replace")

        super().__init__(str(message))

        object.__setattr__(self, "code", code)
        object.__setattr__(self, "message", str(message))
        object.__setattr__(self, "context", dict(ctx) if isinstance(ctx, Mapping) else {})

    def __str__(self) -> str:
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        return {
            "code": self.code,
            "message": self.message,
            "context": dict(self.context),
        }


class HostError(VmError):
    """Failure reported by the storage or event subsystem; propagated unchanged."""

    default_code = "host_error"


class Revert(VmError):
    """Contract-level abort. The host discards every write and event of the call."""

    default_code = "revert"


class InsufficientBalance(Revert):
    default_code = "insufficient_balance"

    def __init__(self, message: Any = "Insufficient balance", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InsufficientAllowance(Revert):
    default_code = "insufficient_allowance"

    def __init__(self, message: Any = "Insufficient allowance", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ArithmeticOverflow(Revert):
    default_code = "arithmetic_overflow"

    def __init__(self, message: Any = "Arithmetic overflow", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class ArithmeticUnderflow(Revert):
    default_code = "arithmetic_underflow"

    def __init__(self, message: Any = "Arithmetic underflow", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class AlreadyInitialized(Revert):
    default_code = "already_initialized"

    def __init__(self, message: Any = "Already initialized", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class InvalidAddress(Revert):
    default_code = "invalid_address"

    def __init__(self, message: Any = "Invalid address", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


class AmountOutOfRange(Revert):
    default_code = "amount_out_of_range"

    def __init__(self, message: Any = "Amount out of range", **kwargs: Any) -> None:
        super().__init__(message, **kwargs)


__all__ = [
    "VmError",
    "HostError",
    "Revert",
    "InsufficientBalance",
    "InsufficientAllowance",
    "ArithmeticOverflow",
    "ArithmeticUnderflow",
    "AlreadyInitialized",
    "InvalidAddress",
    "AmountOutOfRange",
]
