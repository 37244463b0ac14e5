"""
Static ABI of the rewards contracts and deserialization of call results.

Outputs come back from starknet_call as a flat list of felts; the declared
output types say how many felts each value spans.
"""
from typing import Any, Iterable, List, Tuple

from eth_utils import keccak

from ..metadata.byte_array import parse_felt


# Starknet selectors are keccak-256 truncated to 250 bits
SELECTOR_MASK = (1 << 250) - 1

U128_MASK = (1 << 128) - 1

SINGLE_FELT_TYPES = {
    "felt252", "ContractAddress", "ClassHash",
    "u8", "u16", "u32", "u64", "u128",
}

POINTS_ABI = {
    "get_details": [
        ("name", "ByteArray"),
        ("symbol", "ByteArray"),
        ("metadata", "ByteArray"),
        ("decimals", "u8"),
        ("total_supply", "u256"),
    ],
}

COLLECTIBLE_ABI = {
    "get_details": [
        ("name", "ByteArray"),
        ("metadata", "ByteArray"),
        ("points_contract", "ContractAddress"),
        ("token_ids", "Array<u256>"),
        ("token_prices", "Array<u256>"),
        ("token_expiry", "Array<u64>"),
        ("token_metadata", "Array<ByteArray>"),
        ("token_supplies", "Array<u256>"),
    ],
    "get_token_data": [
        ("points_contract", "ContractAddress"),
        ("price", "u256"),
        ("expiry", "u64"),
        ("metadata", "ByteArray"),
        ("supply", "u256"),
    ],
}


def get_selector(name: str) -> int:
    """Entry point selector for a function name"""
    return int.from_bytes(keccak(text=name), "big") & SELECTOR_MASK


def encode_u256(value: int) -> List[int]:
    """u256 calldata: [low, high]"""
    if value < 0 or value >> 256:
        raise ValueError(f"{value} does not fit in u256")
    return [value & U128_MASK, value >> 128]


class FeltReader:
    """Sequential reader over a flat felt list"""

    def __init__(self, felts: Iterable[Any]):
        self.felts = [parse_felt(f) for f in felts]
        self.pos = 0

    def next(self) -> int:
        if self.pos >= len(self.felts):
            raise ValueError(f"Output too short: needed felt #{self.pos}, got {len(self.felts)}")
        felt = self.felts[self.pos]
        self.pos += 1
        return felt

    def remaining(self) -> int:
        return len(self.felts) - self.pos


def read_value(reader: FeltReader, type_name: str) -> Any:
    if type_name in SINGLE_FELT_TYPES:
        return reader.next()
    if type_name == "bool":
        return reader.next() != 0
    if type_name == "u256":
        low = reader.next()
        high = reader.next()
        return low + (high << 128)
    if type_name == "ByteArray":
        data_len = reader.next()
        data = [reader.next() for _ in range(data_len)]
        pending_word = reader.next()
        pending_word_len = reader.next()
        return {"data": data, "pending_word": pending_word, "pending_word_len": pending_word_len}
    if type_name.startswith("Array<") and type_name.endswith(">"):
        item_type = type_name[len("Array<"):-1]
        length = reader.next()
        return [read_value(reader, item_type) for _ in range(length)]

    raise ValueError(f"Unsupported ABI type: {type_name}")


def decode_outputs(outputs: List[Tuple[str, str]], felts: Iterable[Any]) -> dict:
    """Map a function's declared outputs onto the felts returned by the node"""
    reader = FeltReader(felts)
    return {name: read_value(reader, type_name) for name, type_name in outputs}
