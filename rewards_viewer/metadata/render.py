"""
Text rendering of decoded metadata for display and JSON responses.

Integers outside the IEEE-754 safe range are rendered as decimal strings so
JavaScript consumers never round them.
"""
import json
from collections.abc import Mapping
from typing import Any, List, Tuple


MAX_SAFE_INTEGER = 2 ** 53 - 1

# Keys shown in dedicated places rather than in the metadata tree
DISPLAYED_KEYS = ("name", "image", "banner_image", "description", "external_link")

LINK_PREFIXES = ("http://", "https://")


def to_jsonable(value: Any) -> Any:
    """Convert decoded metadata into values json.dumps can emit losslessly"""
    if value is None or isinstance(value, (bool, float, str)):
        return value
    if isinstance(value, int):
        return value if abs(value) <= MAX_SAFE_INTEGER else str(value)
    if isinstance(value, (bytes, bytearray, memoryview)):
        return "0x" + bytes(value).hex()
    if isinstance(value, Mapping):
        return {_json_key(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple, set, frozenset)):
        return [to_jsonable(item) for item in value]
    return str(value)


def _json_key(key: Any) -> str:
    if isinstance(key, str):
        return key
    jsonable = to_jsonable(key)
    return jsonable if isinstance(jsonable, str) else json.dumps(jsonable)


def _render_structure(value: Any, indent) -> str:
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return json.dumps(to_jsonable(value), indent=indent, ensure_ascii=False)


def render_metadata(value: Any, indent=2) -> str:
    """
    Render decoded metadata as text.

    Strings holding JSON are pretty-printed, other strings are returned as
    is. Bare integers render as their exact decimal digits.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        try:
            parsed = json.loads(value)
        except ValueError:
            return value
        return _render_structure(parsed, indent)
    return _render_structure(value, indent)


def display_string(value: Any, default: str = "") -> str:
    """Single-line text for a value of unknown type"""
    if value is None:
        return default
    if isinstance(value, str):
        return value
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return json.dumps(to_jsonable(value), ensure_ascii=False, separators=(",", ":"))


def is_link(value: Any) -> bool:
    return isinstance(value, str) and value.startswith(LINK_PREFIXES)


def metadata_field(metadata: Any, key: str) -> str:
    """String value of a conventional metadata key, or empty string"""
    if not isinstance(metadata, Mapping):
        return ""
    value = metadata.get(key)
    return value if isinstance(value, str) else ""


def token_display_name(metadata: Any, token_id) -> str:
    name = metadata.get("name") if isinstance(metadata, Mapping) else None
    if not name:
        return f"Token #{token_id}"
    return display_string(name)


def metadata_entries(metadata: Any) -> List[Tuple[str, Any]]:
    """Metadata items not already shown in a dedicated place"""
    if not isinstance(metadata, Mapping):
        return []
    return [(str(k), v) for k, v in metadata.items() if k not in DISPLAYED_KEYS]


def metadata_tree(value: Any) -> List[dict]:
    """
    Nested nodes for a collapsible tree view.

    Containers become {"key", "children"} nodes; leaves become
    {"key", "value", "is_link"}. Sequence items are keyed "[index]".
    """
    if isinstance(value, Mapping):
        items = [(str(k), v) for k, v in value.items()]
    elif isinstance(value, (list, tuple)):
        items = [(f"[{i}]", v) for i, v in enumerate(value)]
    else:
        return []

    nodes = []
    for key, item in items:
        if isinstance(item, (Mapping, list, tuple)):
            nodes.append({"key": key, "children": metadata_tree(item)})
        else:
            nodes.append({
                "key": key,
                "value": display_string(item, "null"),
                "is_link": is_link(item),
            })
    return nodes
