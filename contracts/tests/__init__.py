# -*- coding: utf-8 -*-
"""
contracts.tests
================

Ledger contract tests. Keeps local runs deterministic by pinning a couple of
environment defaults before any ledger module reads its configuration.
"""
from __future__ import annotations

import os

__version__ = "0.1.0"


def _set_if_absent(key: str, value: str) -> None:
    """Set environment variable only if it's not already present."""
    if key not in os.environ or os.environ.get(key) in ("", None):
        os.environ[key] = value


_set_if_absent("PYTHONHASHSEED", "0")
# Tests assume the re-init guard is on unless they flip it explicitly.
_set_if_absent("LEDGER_VM_INIT_GUARD", "1")
_set_if_absent("LEDGER_VM_LOG_FORMAT", "text")

__all__ = ["__version__"]
