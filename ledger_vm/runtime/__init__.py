"""
Ledger host runtime package.

Host-facing APIs that a contract running on the ledger host can use, plus
the engine that dispatches calls to it:

    from ledger_vm.runtime import Engine, Host, TxEnv
    from ledger_vm.runtime import abi, events, hashing, storage

Notes
-----
- All state goes through Host.storage_get / Host.storage_set (32-byte words).
- Events are buffered per call and only reach the log when the call commits.
"""

from __future__ import annotations

from ..version import __version__  # re-export
from . import abi as abi
from . import events_api as events
from . import hash_api as hashing  # avoid shadowing builtin `hash`
from . import storage_api as storage
from .context import TxEnv
from .engine import CallResult, Engine
from .host import Host
from .journal import Journal

__all__ = [
    "__version__",
    "Engine",
    "CallResult",
    "Host",
    "Journal",
    "TxEnv",
    "abi",
    "events",
    "hashing",
    "storage",
]
