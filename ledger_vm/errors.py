"""
Public error surface.

Callers import:

    from ledger_vm.errors import VmError, Revert

The canonical implementation lives in ledger_vm.runtime.error.
"""

from __future__ import annotations

from ledger_vm.runtime.error import (AlreadyInitialized, AmountOutOfRange,
                                     ArithmeticOverflow, ArithmeticUnderflow,
                                     HostError, InsufficientAllowance,
                                     InsufficientBalance, InvalidAddress,
                                     Revert, VmError)

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
