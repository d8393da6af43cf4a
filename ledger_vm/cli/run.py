#!/usr/bin/env python3
"""
ledger-vm run

Replay a scripted sequence of token calls against a fresh in-memory ledger.

Script format (JSON array):

  [
    {"sender": "0x0101010101010101010101010101010101010101",
     "method": "init", "args": ["Tok", "TK", 18, 1000]},
    {"sender": "0x0101010101010101010101010101010101010101",
     "method": "transfer", "args": ["0x0202020202020202020202020202020202020202", "300"]},
    {"method": "balanceOf", "args": ["0x0202020202020202020202020202020202020202"]}
  ]

`method` may be a Python name (`transfer_from`), a canonical signature
(`transferFrom(address,address,uint256)`) or a 0x-prefixed 4-byte selector.
Address arguments are 0x-prefixed 40-hex strings; uint arguments may be JSON
integers or decimal strings (for values beyond 2**53).

Examples:
  python -m ledger_vm.cli.run script.json
  python -m ledger_vm.cli.run script.json --json --log-level DEBUG

Exit codes:
  0 all steps succeeded, 1 a step reverted (unless --allow-revert), 2 bad input.
"""
from __future__ import annotations

import argparse
import json
import sys
from typing import Any, Dict, List, Optional, Sequence

from ledger_vm import new_token_engine
from ledger_vm.config import load_config
from ledger_vm.logging import configure, get_logger
from ledger_vm.runtime.abi import MethodSpec
from ledger_vm.runtime.context import ContextError, to_address, to_hex
from ledger_vm.runtime.engine import CallResult, Engine
from ledger_vm.errors import VmError

log = get_logger("ledger_vm.cli.run")

EXIT_OK = 0
EXIT_REVERTED = 1
EXIT_BAD_INPUT = 2


class ScriptError(ValueError):
    """Malformed script file or step."""


# ---------------------- small utils ---------------------- #

def eprint(*a: Any, **k: Any) -> None:
    print(*a, file=sys.stderr, **k)


def _safe_json(obj: Any) -> Any:
    if isinstance(obj, (bytes, bytearray)):
        return to_hex(obj)
    if isinstance(obj, (list, tuple)):
        return [_safe_json(x) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _safe_json(v) for k, v in obj.items()}
    return obj


def _coerce(type_name: str, value: Any) -> Any:
    if type_name.startswith("uint") and isinstance(value, str):
        text = value.strip()
        if not (text.isascii() and text.isdigit()):
            raise ScriptError(f"expected a decimal integer for {type_name}, got {value!r}")
        return int(text)
    if type_name == "address" and isinstance(value, str):
        if not (value.startswith("0x") and len(value) == 42):
            raise ScriptError(f"expected a 0x-prefixed 20-byte address, got {value!r}")
        try:
            return to_address(value)
        except ContextError as e:
            raise ScriptError(str(e)) from e
    return value


def _method_key(raw: Any) -> Any:
    if not isinstance(raw, str) or not raw:
        raise ScriptError("step.method must be a non-empty string")
    if raw.startswith("0x") and len(raw) == 10:
        try:
            return bytes.fromhex(raw[2:])
        except ValueError as e:
            raise ScriptError(f"bad selector {raw!r}") from e
    return raw


# ---------------------- script ---------------------- #

def load_script(path: str) -> List[Dict[str, Any]]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            steps = json.load(f)
    except OSError as e:
        raise ScriptError(f"cannot read {path}: {e}") from e
    except json.JSONDecodeError as e:
        raise ScriptError(f"{path} is not valid JSON: {e}") from e
    if not isinstance(steps, list):
        raise ScriptError("script must be a JSON array of steps")
    for i, step in enumerate(steps):
        if not isinstance(step, dict):
            raise ScriptError(f"step {i} must be an object")
        if not isinstance(step.get("args", []), list):
            raise ScriptError(f"step {i}: args must be an array")
    return steps


def run_step(engine: Engine, step: Dict[str, Any]) -> CallResult:
    key = _method_key(step.get("method"))
    try:
        spec: MethodSpec = engine.interface.resolve(key)
    except VmError as e:
        raise ScriptError(e.message) from e
    raw_args = step.get("args", [])
    if len(raw_args) != len(spec.input_types):
        raise ScriptError(f"{spec.signature} takes {len(spec.input_types)} argument(s), got {len(raw_args)}")
    args = [_coerce(t, v) for t, v in zip(spec.input_types, raw_args)]
    sender = step.get("sender")
    if sender is not None:
        sender = _coerce("address", sender)
    return engine.call(key, *args, sender=sender)


def _summary(engine: Engine, seen: Sequence[bytes]) -> Dict[str, Any]:
    token = engine.contract
    return {
        "total_supply": token.total_supply(),
        "balances": {to_hex(a): token.balance_of(a) for a in seen},
    }


def _seen_addresses(results: Sequence[CallResult], steps: Sequence[Dict[str, Any]]) -> List[bytes]:
    out: Dict[bytes, None] = {}
    for step in steps:
        for v in [step.get("sender"), *step.get("args", [])]:
            if isinstance(v, str) and v.startswith("0x") and len(v) == 42:
                try:
                    out.setdefault(to_address(v), None)
                except ContextError:
                    continue
    for r in results:
        for ev in r.logs:
            for v in ev.args.values():
                if isinstance(v, bytes):
                    out.setdefault(v, None)
    return list(out)


# ---------------------- CLI ---------------------- #

def parse_args(argv: List[str]) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="ledger-vm-run", description="Replay token calls against an in-memory ledger.")
    p.add_argument("script", help="Path to a JSON array of {sender, method, args} steps")
    p.add_argument("--json", action="store_true", help="Emit one JSON document instead of text")
    p.add_argument("--log-level", default=None, help="Log level (default: LEDGER_VM_LOG_LEVEL or INFO)")
    p.add_argument("--allow-revert", action="store_true", help="Exit 0 even if a step reverts")
    return p.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    cfg = load_config()
    configure(level=args.log_level or cfg.log_level or "INFO")

    try:
        steps = load_script(args.script)
        engine = new_token_engine()
        results: List[CallResult] = []
        for i, step in enumerate(steps):
            res = run_step(engine, step)
            results.append(res)
            if not res.ok:
                log.info("step reverted", extra={"step": i, "method": res.method, "reason": res.error})
    except ScriptError as e:
        eprint(f"[ledger-vm-run] bad input: {e}")
        return EXIT_BAD_INPUT

    summary = _summary(engine, _seen_addresses(results, steps))
    failed = [i for i, r in enumerate(results) if not r.ok]

    if args.json:
        out = {"steps": [r.to_dict() for r in results], "state": summary, "failed_steps": failed}
        print(json.dumps(_safe_json(out), indent=2))
    else:
        for i, r in enumerate(results):
            status = "ok" if r.ok else f"REVERT {r.error!r}"
            print(f"[{i}] {r.method}: {status} -> {_safe_json(r.return_value)}")
            for ev in r.logs:
                shown = ", ".join(f"{k}={_safe_json(v)}" for k, v in ev.args.items())
                print(f"      {ev.name}({shown})")
        print(f"total_supply: {summary['total_supply']}")
        for addr, bal in summary["balances"].items():
            print(f"  {addr}: {bal}")

    if failed and not args.allow_revert:
        return EXIT_REVERTED
    return EXIT_OK


if __name__ == "__main__":
    raise SystemExit(main())
