# -*- coding: utf-8 -*-
"""
contracts.stdlib.token
======================

Constants and validation shared by fungible token contracts. This package
does not touch storage or emit events by itself; `contracts.stdlib.token.fungible`
does that through the `Host` it is bound to.

Conventions
-----------
- Addresses are raw 20-byte `bytes`. Hex strings are coerced by the host
  layer (`ledger_vm.runtime.engine`) before they reach a contract.
- `ZERO_ADDRESS` (twenty zero bytes) is the `from` of mint Transfer events.
  Ordinary transfers to it are allowed.
- Amounts fit U256 (0 <= n <= 2**256-1). Use `contracts.stdlib.math.safe_uint`
  for arithmetic inside token implementations.
- Decimals fit uint8. The conventional 0..36 range is not enforced.
"""

from __future__ import annotations

from typing import Final

from ledger_vm.runtime.error import AmountOutOfRange, InvalidAddress, Revert

from ..math import U8_MAX, require_u256

# -----------------------------------------------------------------------------
# Constants
# -----------------------------------------------------------------------------

ADDRESS_LEN: Final[int] = 20
ZERO_ADDRESS: Final[bytes] = b"\x00" * ADDRESS_LEN

# -----------------------------------------------------------------------------
# Validation
# -----------------------------------------------------------------------------


def require_address(addr: object) -> bytes:
    """Return `addr` as bytes if it is a 20-byte address, else revert."""
    if not isinstance(addr, (bytes, bytearray)) or len(addr) != ADDRESS_LEN:
        raise InvalidAddress(context={"value": repr(addr)})
    return bytes(addr)


def require_amount(n: object) -> int:
    require_u256(n)
    return n  # type: ignore[return-value]


def require_decimals(d: object) -> int:
    if not isinstance(d, int) or isinstance(d, bool) or not 0 <= d <= U8_MAX:
        raise AmountOutOfRange("decimals out of range", context={"value": repr(d)})
    return d


def require_text(s: object, field: str) -> str:
    if not isinstance(s, str):
        raise Revert(f"{field} must be a string", code="invalid_text")
    return s


__all__ = [
    "ADDRESS_LEN",
    "ZERO_ADDRESS",
    "require_address",
    "require_amount",
    "require_decimals",
    "require_text",
]
