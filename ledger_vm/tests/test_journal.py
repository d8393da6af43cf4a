from __future__ import annotations

import pytest

from ledger_vm.runtime.error import HostError
from ledger_vm.runtime.journal import Journal
from ledger_vm.runtime.storage_api import MemoryBackend

K1 = b"\x01" * 32
K2 = b"\x02" * 32
W1 = b"\xaa" * 32
W2 = b"\xbb" * 32


def test_commit_applies_to_backend():
    be = MemoryBackend()
    j = Journal(be)
    assert j.begin() == 1
    j.set(K1, W1)
    assert be.get(K1) is None
    assert j.get(K1) == W1
    j.commit()
    assert be.get(K1) == W1
    assert j.depth() == 0


def test_revert_leaves_backend_identical():
    be = MemoryBackend({K1: W1})
    before = be.snapshot()
    j = Journal(be)
    j.begin()
    j.set(K1, W2)
    j.set(K2, W2)
    j.delete(K1)
    j.revert()
    assert be.snapshot() == before
    assert j.get(K1) == W1


def test_nested_checkpoints_merge_into_parent():
    be = MemoryBackend()
    j = Journal(be)
    j.begin()
    j.set(K1, W1)
    j.begin()
    j.set(K1, W2)
    j.set(K2, W2)
    assert j.pending_keys() == {K1, K2}
    j.commit()
    assert be.get(K1) is None
    assert j.get(K1) == W2
    j.commit()
    assert be.snapshot() == {K1: W2, K2: W2}


def test_inner_revert_keeps_outer_writes():
    j = Journal(MemoryBackend())
    j.begin()
    j.set(K1, W1)
    j.begin()
    j.set(K1, W2)
    j.revert()
    assert j.get(K1) == W1


def test_revert_to_marker():
    be = MemoryBackend()
    j = Journal(be)
    j.begin()
    j.begin()
    j.begin()
    j.set(K1, W1)
    j.revert_to(0)
    assert j.depth() == 0
    assert len(be) == 0
    with pytest.raises(ValueError):
        j.revert_to(-1)


def test_delete_in_overlay_hides_backend_value():
    be = MemoryBackend({K1: W1})
    j = Journal(be)
    j.begin()
    j.delete(K1)
    assert j.get(K1) is None
    j.commit()
    assert not be.exists(K1)


def test_write_without_checkpoint_is_rejected():
    j = Journal(MemoryBackend())
    with pytest.raises(HostError) as ei:
        j.set(K1, W1)
    assert ei.value.code == "journal_state"
    with pytest.raises(HostError):
        j.commit()
    with pytest.raises(HostError):
        j.revert()
