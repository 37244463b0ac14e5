"""
Strict CBOR decoding of metadata payloads.

The payload must hold exactly one well-formed CBOR data item. cbor2 decodes
the first item from a stream, and the stream position afterwards tells
whether any bytes were left over.
"""
import datetime
import io
from collections.abc import Mapping
from decimal import Decimal
from fractions import Fraction
from typing import Any

import cbor2


BREAK = 0xFF


class ContainerDecodeFailure(ValueError):
    """Raised when bytes are not exactly one valid CBOR item"""


def _key_text(key: Any) -> str:
    if isinstance(key, str):
        return key
    if isinstance(key, (bytes, bytearray)):
        return "0x" + bytes(key).hex()
    if isinstance(key, bool):
        return "true" if key else "false"
    return str(key)


def normalize(value: Any) -> Any:
    """Convert cbor2 output into plain dict/list/str/int/float/bool/None/bytes values"""
    if isinstance(value, cbor2.CBORTag):
        return normalize(value.value)
    if value is cbor2.undefined or value is None:
        return None
    if isinstance(value, (bool, int, float, str)):
        return value
    if isinstance(value, (bytes, bytearray, memoryview)):
        return bytes(value)
    if isinstance(value, cbor2.CBORSimpleValue):
        return value.value
    if isinstance(value, Mapping):
        return {_key_text(k): normalize(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [normalize(item) for item in value]
    if isinstance(value, (set, frozenset)):
        return [normalize(item) for item in value]
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, (Decimal, Fraction)):
        return str(value)
    return str(value)


def decode_structured(data: bytes) -> Any:
    """
    Decode bytes holding exactly one CBOR item.

    Raises ContainerDecodeFailure for empty input, trailing bytes, truncated
    or malformed items, and content cbor2 refuses (e.g. invalid UTF-8 text).
    """
    data = bytes(data)
    if not data:
        raise ContainerDecodeFailure("empty input")
    # cbor2 hands a lone break code back as a marker object
    if data[0] == BREAK:
        raise ContainerDecodeFailure("unexpected break code")

    fp = io.BytesIO(data)
    try:
        decoded = cbor2.CBORDecoder(fp).decode()
    except (cbor2.CBORDecodeError, ValueError, TypeError, OverflowError, RecursionError) as e:
        raise ContainerDecodeFailure(f"CBOR decoding error: {e}") from e

    end = fp.tell()
    if end != len(data):
        raise ContainerDecodeFailure(f"{len(data) - end} trailing bytes after CBOR item")

    return normalize(decoded)
