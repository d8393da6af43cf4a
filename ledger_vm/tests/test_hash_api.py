from __future__ import annotations

import pytest

from ledger_vm.runtime.abi import selector
from ledger_vm.runtime.error import VmError
from ledger_vm.runtime.hash_api import hash_concat_keccak256, keccak256, keccak256_hex, keccak256_text


def test_empty_input_vector():
    # Ethereum Keccak-256, not FIPS SHA3-256
    assert keccak256(b"").hex() == "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"


def test_hex_and_text_forms():
    assert keccak256_hex(b"") == "0x" + keccak256(b"").hex()
    assert keccak256_text("Transfer(address,address,uint256)").hex().startswith("ddf252ad")
    assert selector("transfer(address,uint256)") == bytes.fromhex("a9059cbb")


def test_concat_matches_joined():
    parts = [b"ab", bytearray(b"cd"), memoryview(b"ef")]
    assert hash_concat_keccak256(*parts) == keccak256(b"abcdef")


@pytest.mark.parametrize("bad", ["text", 1, None])
def test_rejects_non_bytes(bad):
    with pytest.raises(VmError) as ei:
        keccak256(bad)
    assert ei.value.code == "hash_invalid"


def test_text_requires_str():
    with pytest.raises(VmError):
        keccak256_text(b"bytes")
