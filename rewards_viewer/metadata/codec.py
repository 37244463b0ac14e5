"""
Metadata decoding cascade.

Contracts do not declare how a metadata field is encoded, so a raw value is
run through an ordered list of stages. The first stage whose predicate
accepts the value decodes it; each stage handles its own fallbacks, and
values no stage accepts are wrapped as {"metadata": <text>}.

    structured    mapping/sequence already decoded upstream, returned as is
    byte_array    Starknet ByteArray -> bytes -> CBOR, else UTF-8 text
    raw_bytes     bytes -> CBOR, else UTF-8 text
    short_string  int felt holding printable ASCII -> text
    hex           hex string -> bytes -> CBOR, else UTF-8 text
    text          other string -> UTF-8 bytes -> CBOR, else the string
"""
import logging
import re
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Callable, Optional

from .byte_array import MalformedWordArray, bytes_to_text, is_byte_array, reassemble_byte_array
from .cbor_decoder import ContainerDecodeFailure, decode_structured
from .render import render_metadata
from .short_string import decode_short_string, is_short_string

logger = logging.getLogger('rewards_viewer.metadata')

HEX_PATTERN = re.compile(r"(0x)?[0-9a-fA-F]+")

UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class Matched:
    value: Any


@dataclass(frozen=True)
class Stage:
    name: str
    predicate: Callable[[Any], bool]
    decoder: Callable[[Any], Any]

    def attempt(self, value: Any) -> Optional[Matched]:
        """Matched(decoded) if this stage applies to value, else None"""
        if not self.predicate(value):
            return None
        return Matched(self.decoder(value))


def unsupported_value(value: Any) -> dict:
    """Diagnostic wrapper for values that could not be decoded"""
    return {"metadata": value if isinstance(value, str) else render_metadata(value)}


def _bytes_or_text(raw: bytes) -> Any:
    try:
        return decode_structured(raw)
    except ContainerDecodeFailure as e:
        logger.debug(f"Not CBOR ({e}), using UTF-8 text of {len(raw)} bytes")
        return bytes_to_text(raw)


def hex_to_bytes(value: str) -> bytes:
    hex_str = value[2:] if value.startswith("0x") else value
    if len(hex_str) % 2:
        hex_str = "0" + hex_str
    return bytes.fromhex(hex_str)


def _is_structured(value: Any) -> bool:
    return isinstance(value, (Mapping, list, tuple)) and not is_byte_array(value)


def _is_raw_bytes(value: Any) -> bool:
    return isinstance(value, (bytes, bytearray, memoryview))


def _is_hex(value: Any) -> bool:
    return isinstance(value, str) and HEX_PATTERN.fullmatch(value) is not None


def _is_text(value: Any) -> bool:
    return isinstance(value, str)


def _passthrough(value: Any) -> Any:
    return value


def _decode_byte_array(value: Mapping) -> Any:
    try:
        raw = reassemble_byte_array(value)
    except MalformedWordArray as e:
        logger.warning(f"Malformed ByteArray, keeping raw value: {e}")
        return unsupported_value(value)
    return _bytes_or_text(raw)


def _decode_raw_bytes(value) -> Any:
    return _bytes_or_text(bytes(value))


def _decode_hex(value: str) -> Any:
    return _bytes_or_text(hex_to_bytes(value))


def _decode_text(value: str) -> Any:
    try:
        return decode_structured(value.encode("utf-8"))
    except ContainerDecodeFailure as e:
        logger.debug(f"Not CBOR ({e}), keeping text of {len(value)} characters")
        return value


STAGES = (
    Stage("structured", _is_structured, _passthrough),
    Stage("byte_array", is_byte_array, _decode_byte_array),
    Stage("raw_bytes", _is_raw_bytes, _decode_raw_bytes),
    Stage("short_string", is_short_string, decode_short_string),
    Stage("hex", _is_hex, _decode_hex),
    Stage("text", _is_text, _decode_text),
)


def classify(value: Any) -> str:
    """Name of the stage that handles value"""
    if value is None:
        return "null"
    for stage in STAGES:
        if stage.predicate(value):
            return stage.name
    return UNSUPPORTED


def decode_metadata(value: Any) -> Any:
    """
    Best-effort decoding of a raw contract field into structured metadata.

    Never raises. None is passed through unchanged.
    """
    if value is None:
        return None

    try:
        for stage in STAGES:
            matched = stage.attempt(value)
            if matched is not None:
                return matched.value

        logger.warning(f"Unsupported metadata value of type {type(value).__name__}")
        return unsupported_value(value)
    except Exception as e:
        logger.error(f"Unexpected error decoding metadata of type {type(value).__name__}: {e}", exc_info=True)
        return {"metadata": repr(value)}


def byte_array_to_string(value: Any) -> str:
    """Plain text of a name/symbol style field"""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if is_byte_array(value):
        try:
            return bytes_to_text(reassemble_byte_array(value))
        except MalformedWordArray as e:
            logger.warning(f"Malformed ByteArray in text field: {e}")
            return render_metadata(value)
    if is_short_string(value):
        return decode_short_string(value)
    return render_metadata(value)
