"""
Ledger VM (ledger_vm): host adapter for an ERC-20 token ledger.

A small, deterministic stand-in for a smart-contract host: persistent
key/value storage behind a write journal, caller identity per call, an
append-only event log, and call-level atomicity. The token itself lives in
`contracts.stdlib.token`.

- __version__: semantic version string
- new_token_engine(backend=None, address=None) -> Engine
    Fresh engine bound to an ERC20Token on a new (or given) host backend.
"""

from __future__ import annotations

import importlib
from typing import Any, Optional

from .version import __version__


def new_token_engine(backend: Any = None, *, address: Optional[Any] = None) -> Any:
    """Build an Engine around an ERC20Token (imports are lazy)."""
    runtime = importlib.import_module(".runtime", __name__)
    fungible = importlib.import_module("contracts.stdlib.token.fungible")
    host = runtime.Host(backend, address=address)
    return runtime.Engine(fungible.ERC20Token, host)


__all__ = ["__version__", "new_token_engine"]
