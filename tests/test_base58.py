import os

import pytest

from gazer_node.base58 import BASE58_ALPHABET, base58_to_bytes, bytes_to_base58


def test_empty_round_trip():
    assert bytes_to_base58(b"") == ""
    assert base58_to_bytes("") == b""


def test_single_zero_byte_is_one():
    assert bytes_to_base58(b"\x00") == "1"
    assert base58_to_bytes("1") == b"\x00"


def test_leading_zeros_kept():
    encoded = bytes_to_base58(b"\x00\x00\x01")
    assert encoded == "112"
    assert base58_to_bytes(encoded) == b"\x00\x00\x01"


def test_known_value():
    assert bytes_to_base58(b"hello world") == "StV1DL6CwTryKyV"
    assert base58_to_bytes("StV1DL6CwTryKyV") == b"hello world"


@pytest.mark.parametrize("size", [1, 2, 16, 32, 64])
def test_random_round_trip(size):
    data = os.urandom(size)
    encoded = bytes_to_base58(data)
    assert all(char in BASE58_ALPHABET for char in encoded)
    assert base58_to_bytes(encoded) == data


def test_all_zero_bytes():
    data = b"\x00" * 5
    assert bytes_to_base58(data) == "1" * 5
    assert base58_to_bytes("1" * 5) == data


@pytest.mark.parametrize("bad", ["0", "O", "I", "l", "abc!", "12 3"])
def test_invalid_character_raises(bad):
    with pytest.raises(ValueError):
        base58_to_bytes(bad)