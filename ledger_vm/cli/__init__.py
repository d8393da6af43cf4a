"""
ledger_vm.cli
-------------

Command-line entrypoints for the ledger host.

  - `ledger-vm-run`  -> ledger_vm.cli.run:main

Modules are loaded lazily via `resolve_entrypoint`.
"""

from __future__ import annotations

from importlib import import_module
from typing import Callable, Dict

ENTRYPOINTS: Dict[str, str] = {
    "run": "ledger_vm.cli.run:main",
}


def resolve_entrypoint(name: str) -> Callable[..., int]:
    """
    Resolve a CLI name to its `main()` callable.

    Raises KeyError for unknown names and ImportError for malformed targets.
    """
    target = ENTRYPOINTS[name]
    module_path, _, attr = target.partition(":")
    if not module_path or not attr:
        raise ImportError(f"Malformed entrypoint target: {target!r}")
    main_fn = getattr(import_module(module_path), attr)
    if not callable(main_fn):
        raise AttributeError(f"Entrypoint {target!r} is not callable")
    return main_fn  # type: ignore[return-value]


__all__ = ["ENTRYPOINTS", "resolve_entrypoint"]
