# -*- coding: utf-8 -*-
"""
contracts.stdlib
================

Standard library for contracts running on the ledger host:

- `contracts.stdlib.math`        integer-only U256 helpers (checked arithmetic)
- `contracts.stdlib.token`       ERC-20 fungible token ledger, its interface
                                 (selectors, event topics) and storage layout

Contracts reach the host only through the `Host` object they are constructed
with; nothing here keeps module-level state.
"""
from __future__ import annotations

__version__ = "0.1.0"

__all__ = ["__version__"]
