#!/usr/bin/env python3
# scripts/tests/test_short_string.py

import os
import sys

import pytest

# Add the project root to the Python path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from rewards_viewer.metadata.short_string import (
    SHORT_STRING_BOUND,
    decode_short_string,
    encode_short_string,
    is_short_string,
)


def test_decode_known_value():
    assert decode_short_string(0x68656c6c6f) == "hello"


def test_zero_is_empty_string():
    assert is_short_string(0)
    assert decode_short_string(0) == ""


def test_encode_decode():
    felt = encode_short_string("BADGE-01")
    assert is_short_string(felt)
    assert decode_short_string(felt) == "BADGE-01"


@pytest.mark.parametrize("value", [
    True,
    -1,
    SHORT_STRING_BOUND,
    0x01,           # control character
    0xff,           # not ASCII
    "0x68656c6c6f",  # strings go through the hex path instead
    1.5,
])
def test_not_short_string(value):
    assert not is_short_string(value)


def test_decode_rejects_non_short_string():
    with pytest.raises(ValueError):
        decode_short_string(0xff)


def test_encode_rejects_long_text():
    with pytest.raises(ValueError):
        encode_short_string("x" * 32)
