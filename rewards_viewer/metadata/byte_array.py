"""
Starknet ByteArray reassembly

A ByteArray is returned by the node as full 31-byte words plus one partial
trailing word:

    {"data": [word, ...], "pending_word": word, "pending_word_len": n}
"""
from collections.abc import Mapping
from typing import Any


BYTES_PER_WORD = 31
MAX_PENDING_WORD_LEN = BYTES_PER_WORD - 1


class MalformedWordArray(ValueError):
    """Raised when a ByteArray record holds a value that is not a valid word"""


def parse_felt(value: Any) -> int:
    """Coerce an int, 0x-hex string or decimal string into a non-negative felt"""
    if isinstance(value, bool):
        raise MalformedWordArray(f"boolean is not a felt: {value!r}")

    if isinstance(value, int):
        felt = value
    elif isinstance(value, str):
        text = value.strip()
        try:
            if text[:2].lower() == "0x":
                felt = int(text[2:], 16)
            else:
                felt = int(text, 10)
        except ValueError:
            raise MalformedWordArray(f"not a numeric felt: {value!r}") from None
    else:
        raise MalformedWordArray(f"unsupported felt type {type(value).__name__}")

    if felt < 0:
        raise MalformedWordArray(f"negative felt: {felt}")
    return felt


def is_byte_array(value: Any) -> bool:
    """True when value has the ByteArray shape (data list plus a pending word field)"""
    if not isinstance(value, Mapping):
        return False
    data = value.get("data")
    if not isinstance(data, (list, tuple)):
        return False
    return "pending_word" in value or "pending_word_len" in value


def _felt_to_bytes(felt: int) -> bytes:
    # Big-endian hex, one leading zero added when the digit count is odd
    hex_str = format(felt, "x")
    if len(hex_str) % 2:
        hex_str = "0" + hex_str
    return bytes.fromhex(hex_str)


def _word_to_bytes(felt: int) -> bytes:
    raw = _felt_to_bytes(felt)
    if len(raw) > BYTES_PER_WORD:
        raise MalformedWordArray(f"full word wider than {BYTES_PER_WORD} bytes: {felt:#x}")
    if len(raw) < BYTES_PER_WORD:
        raw = raw.rjust(BYTES_PER_WORD, b"\x00")
    return raw


def _pending_to_bytes(felt: int, length: int) -> bytes:
    raw = _felt_to_bytes(felt)
    if len(raw) < length:
        raw = raw.rjust(length, b"\x00")
    # Only the first `length` bytes count; anything past them is dropped
    return raw[:length]


def reassemble_byte_array(value: Mapping) -> bytes:
    """
    Rebuild the raw bytes held by a ByteArray record.

    Full words contribute 31 bytes each, in order. The pending word contributes
    the first `pending_word_len` bytes of its big-endian rendering.

    Raises MalformedWordArray if the record is not ByteArray-shaped or any
    word is negative or non-numeric.
    """
    if not is_byte_array(value):
        raise MalformedWordArray("value is not a ByteArray record")

    pending_word_len = parse_felt(value.get("pending_word_len", 0))
    if pending_word_len > MAX_PENDING_WORD_LEN:
        raise MalformedWordArray(
            f"pending_word_len {pending_word_len} outside [0, {MAX_PENDING_WORD_LEN}]"
        )

    chunks = [_word_to_bytes(parse_felt(word)) for word in value["data"]]

    if pending_word_len > 0:
        pending_word = parse_felt(value.get("pending_word", 0))
        chunks.append(_pending_to_bytes(pending_word, pending_word_len))

    return b"".join(chunks)


def pack_byte_array(data: bytes) -> dict:
    """Pack raw bytes into a ByteArray record (inverse of reassemble_byte_array)"""
    data = bytes(data)
    full_len = len(data) - len(data) % BYTES_PER_WORD
    words = [
        int.from_bytes(data[i:i + BYTES_PER_WORD], "big")
        for i in range(0, full_len, BYTES_PER_WORD)
    ]
    pending = data[full_len:]
    return {
        "data": words,
        "pending_word": int.from_bytes(pending, "big") if pending else 0,
        "pending_word_len": len(pending),
    }


def bytes_to_text(raw: bytes) -> str:
    """UTF-8 rendering of raw bytes, invalid sequences replaced"""
    return bytes(raw).decode("utf-8", errors="replace")
