"""
ledger_vm.config: runtime feature flags and numeric caps for the ledger host.

This module centralizes configuration for the host adapter. It has NO
third-party deps and is safe to import very early.

Configuration precedence:
  1) Environment variables (LEDGER_VM_*)
  2) Hardcoded safe defaults below

Key env vars (case-insensitive where boolean):
  - LEDGER_VM_STRICT                 (bool)   default: true
  - LEDGER_VM_INIT_GUARD             (bool)   default: true
  - LEDGER_VM_MAX_LOGS_PER_CALL      (int)    default: 1024
  - LEDGER_VM_MAX_STORAGE_KEY_BYTES  (int)    default: 64
  - LEDGER_VM_MAX_STORAGE_VAL_BYTES  (int)    default: 4096
  - LEDGER_VM_LOG_LEVEL              (str)    default: INFO
  - LEDGER_VM_LOG_FORMAT             (str)    json | text, default: auto

`init_guard` turns the one-shot initializer into a real one-shot: a second
`init` reverts with "Already initialized". Setting it to false lets a later
`init` overwrite metadata and supply.

Usage:
    from ledger_vm.config import load_config
    CFG = load_config()
    if CFG.init_guard: ...
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Optional

_TRUE = ("1", "true", "t", "yes", "y", "on")


# ----------------------------- helpers ---------------------------------------


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE


def _env_int(name: str, default: int, *, min_v: int, max_v: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        v = int(raw, 0)
    except ValueError:
        return default
    if v < min_v:
        return min_v
    if v > max_v:
        return max_v
    return v


def _env_choice(name: str, choices: tuple, default: Optional[str]) -> Optional[str]:
    raw = os.getenv(name)
    if raw is None:
        return default
    val = raw.strip().lower()
    return val if val in choices else default


# ------------------------------- config --------------------------------------


@dataclass(frozen=True)
class VMConfig:
    # Feature flags
    strict_mode: bool
    init_guard: bool

    # Numeric caps
    max_logs_per_call: int
    max_storage_key_bytes: int
    max_storage_value_bytes: int

    # Logging
    log_level: str
    log_format: Optional[str]

    def as_dict(self) -> Dict[str, Any]:
        return {
            "strict_mode": self.strict_mode,
            "init_guard": self.init_guard,
            "max_logs_per_call": self.max_logs_per_call,
            "max_storage_key_bytes": self.max_storage_key_bytes,
            "max_storage_value_bytes": self.max_storage_value_bytes,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


@lru_cache(maxsize=1)
def load_config() -> VMConfig:
    """
    Build and cache a VMConfig from environment + safe defaults.
    Tests that tweak the environment call `load_config.cache_clear()`.
    """
    return VMConfig(
        strict_mode=_env_bool("LEDGER_VM_STRICT", True),
        init_guard=_env_bool("LEDGER_VM_INIT_GUARD", True),
        max_logs_per_call=_env_int("LEDGER_VM_MAX_LOGS_PER_CALL", 1024, min_v=1, max_v=10_000),
        max_storage_key_bytes=_env_int("LEDGER_VM_MAX_STORAGE_KEY_BYTES", 64, min_v=32, max_v=256),
        max_storage_value_bytes=_env_int("LEDGER_VM_MAX_STORAGE_VAL_BYTES", 4096, min_v=32, max_v=1_048_576),
        log_level=(os.getenv("LEDGER_VM_LOG_LEVEL") or "INFO").strip().upper(),
        log_format=_env_choice("LEDGER_VM_LOG_FORMAT", ("json", "text"), None),
    )


__all__ = ["VMConfig", "load_config"]
