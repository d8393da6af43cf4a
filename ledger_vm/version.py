"""ledger_vm.version: semantic version string.

First match wins:
- LEDGER_VM_VERSION environment variable
- installed metadata of the `erc20-ledger` distribution
- BASE_VERSION + "+dev" (source checkout)
"""

from __future__ import annotations

import os
from functools import lru_cache
from importlib import metadata

# Bump on changes to storage layout, event encoding or revert strings.
BASE_VERSION = "0.1.0"

DIST_NAME = "erc20-ledger"


@lru_cache(maxsize=1)
def compute_version() -> str:
    override = os.getenv("LEDGER_VM_VERSION")
    if override:
        return override
    try:
        installed = metadata.version(DIST_NAME)
    except metadata.PackageNotFoundError:
        installed = ""
    if installed and installed != "0.0.0":
        return installed
    return BASE_VERSION + "+dev"


__version__ = compute_version()

__all__ = ["__version__", "BASE_VERSION", "DIST_NAME", "compute_version"]
