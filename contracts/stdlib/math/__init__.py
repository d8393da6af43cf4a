# -*- coding: utf-8 -*-
"""
contracts.stdlib.math
=====================

Deterministic, integer-only numeric envelopes for ledger contracts.

Conventions
-----------
- Amounts are Python ints in the U256 domain [0, 2**256 - 1].
- `bool` is rejected even though it subclasses int.
- Domain violations revert with `AmountOutOfRange`; the checked arithmetic
  built on top of these lives in `contracts.stdlib.math.safe_uint`.
"""

from __future__ import annotations

from typing import Final, Optional

from ledger_vm.runtime.error import AmountOutOfRange

U256_MAX: Final[int] = (1 << 256) - 1
U8_MAX: Final[int] = (1 << 8) - 1


def is_u256(x: object) -> bool:
    return isinstance(x, int) and not isinstance(x, bool) and 0 <= x <= U256_MAX


def require_u256(*xs: object) -> None:
    """Revert if any value is not an int in [0, U256_MAX]."""
    for n in xs:
        if not is_u256(n):
            raise AmountOutOfRange(context={"value": repr(n)})


def try_add_u256(x: int, y: int) -> Optional[int]:
    """Return x+y or None on overflow/out-of-domain input."""
    if not (is_u256(x) and is_u256(y)):
        return None
    s = x + y
    return s if s <= U256_MAX else None


def try_sub_u256(x: int, y: int) -> Optional[int]:
    """Return x-y or None on underflow/out-of-domain input."""
    if not (is_u256(x) and is_u256(y)):
        return None
    return x - y if x >= y else None


__all__ = [
    "U256_MAX",
    "U8_MAX",
    "is_u256",
    "require_u256",
    "try_add_u256",
    "try_sub_u256",
]
