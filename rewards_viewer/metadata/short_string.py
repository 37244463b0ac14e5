"""
Cairo short strings: up to 31 ASCII characters packed big-endian into one felt
"""
from typing import Any


MAX_SHORT_STRING_LENGTH = 31
SHORT_STRING_BOUND = 1 << (8 * MAX_SHORT_STRING_LENGTH)

_ALLOWED_WHITESPACE = "\t\n\r"


def _felt_text(value: int) -> str:
    if value == 0:
        return ""
    raw = value.to_bytes((value.bit_length() + 7) // 8, "big")
    return raw.decode("ascii")


def is_short_string(value: Any) -> bool:
    """True for an int felt that decodes to printable ASCII text"""
    if isinstance(value, bool) or not isinstance(value, int):
        return False
    if not 0 <= value < SHORT_STRING_BOUND:
        return False
    try:
        text = _felt_text(value)
    except UnicodeDecodeError:
        return False
    return all(ch.isprintable() or ch in _ALLOWED_WHITESPACE for ch in text)


def decode_short_string(value: int) -> str:
    if not is_short_string(value):
        raise ValueError(f"{value} is not a short string felt")
    return _felt_text(value)


def encode_short_string(text: str) -> int:
    raw = text.encode("ascii")
    if len(raw) > MAX_SHORT_STRING_LENGTH:
        raise ValueError(f"short string longer than {MAX_SHORT_STRING_LENGTH} characters: {text!r}")
    return int.from_bytes(raw, "big")
