# -*- coding: utf-8 -*-
"""
contracts.stdlib.math.safe_uint
===============================

Checked unsigned-integer helpers for ledger contracts.

- U256-oriented arithmetic, integer-only.
- "Checked": revert on overflow/underflow instead of wrapping or saturating.
- Inputs are validated to the U256 domain first.

The ledger checks its own preconditions (balance, allowance) before it
subtracts, so `u256_sub` failing means a broken caller, not a user error.
"""

from __future__ import annotations

from ledger_vm.runtime.error import ArithmeticOverflow, ArithmeticUnderflow

from . import U256_MAX, require_u256, try_add_u256, try_sub_u256


def u256_add(x: int, y: int) -> int:
    """Checked add: revert on overflow."""
    require_u256(x, y)
    s = x + y
    if s > U256_MAX:
        raise ArithmeticOverflow(context={"lhs": x, "rhs": y})
    return s


def u256_sub(x: int, y: int) -> int:
    """Checked sub: revert on underflow (y > x)."""
    require_u256(x, y)
    if y > x:
        raise ArithmeticUnderflow(context={"lhs": x, "rhs": y})
    return x - y


__all__ = [
    "U256_MAX",
    "u256_add",
    "u256_sub",
    "try_add_u256",
    "try_sub_u256",
]
