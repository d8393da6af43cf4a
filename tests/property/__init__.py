# -*- coding: utf-8 -*-
"""
tests.property package bootstrap.

Shared configuration for property-based tests (Hypothesis).

What this does on import:
- Registers named Hypothesis profiles (dev/ci/fast/stress).
- Selects the active profile using HYPOTHESIS_PROFILE, otherwise "ci" on CI
  (CI env var present/truthy) and "dev" locally.
- Exposes shared strategies for ledger addresses and U256 amounts.

Environment knobs:
- HYPOTHESIS_PROFILE=dev|ci|fast|stress
- CI=true (auto-pick the 'ci' profile if HYPOTHESIS_PROFILE not set)

Note: If you need per-test overrides, just use @settings(...) on that test.
"""
from __future__ import annotations

import os
from typing import Final, Tuple

from hypothesis import HealthCheck, Verbosity, settings
from hypothesis import strategies as st

U256_MAX: Final[int] = (1 << 256) - 1

# ---- profile registry --------------------------------------------------------

_QUIET_CHECKS = (HealthCheck.too_slow, HealthCheck.filter_too_much)

# name -> (max_examples, derandomize, verbosity)
_PROFILES = {
    "dev": (100, False, Verbosity.normal),
    "ci": (200, True, Verbosity.verbose),
    "fast": (25, False, Verbosity.normal),
    "stress": (1000, True, Verbosity.normal),
}

for _name, (_n, _derand, _verb) in _PROFILES.items():
    settings.register_profile(
        _name,
        max_examples=_n,
        deadline=None,
        derandomize=_derand,
        verbosity=_verb,
        suppress_health_check=_QUIET_CHECKS,
    )


def _env_truthy(name: str) -> bool:
    return (os.getenv(name) or "").lower() not in ("", "0", "false", "no", "off")


_active: Final[str] = os.getenv("HYPOTHESIS_PROFILE") or ("ci" if _env_truthy("CI") else "dev")
settings.load_profile(_active)

# ---- shared strategies -------------------------------------------------------

ACCOUNTS: Final[Tuple[bytes, ...]] = tuple(bytes([i]) * 20 for i in (1, 2, 3, 4))


def addresses():
    """One of a small fixed set of accounts, so operations collide often."""
    return st.sampled_from(ACCOUNTS)


def amounts():
    """Mostly small amounts, occasionally extreme ones that hit overflow paths."""
    return st.one_of(
        st.integers(min_value=0, max_value=2_000),
        st.just(U256_MAX),
        st.integers(min_value=0, max_value=U256_MAX),
    )


def active_profile() -> str:
    """Return the name of the active Hypothesis profile."""
    return _active


__all__ = ["U256_MAX", "ACCOUNTS", "addresses", "amounts", "active_profile", "st"]
