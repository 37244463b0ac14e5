"""
Read-only access to points and collectible contracts
"""
import logging
import threading
from typing import Optional

import requests
from cachetools import TTLCache

from .contracts.abi import COLLECTIBLE_ABI, POINTS_ABI, decode_outputs, encode_u256
from .metadata.byte_array import MalformedWordArray, parse_felt
from .metadata.codec import byte_array_to_string, decode_metadata
from .starknet_rpc import CONTRACT_NOT_FOUND, ContractNotFoundError, RPCError

logger = logging.getLogger('rewards_viewer.service')

# Contract addresses are felts below 2**251
ADDRESS_BOUND = 1 << 251


def normalize_address(address) -> str:
    """0x-prefixed, zero-padded 64 digit form of a contract address"""
    try:
        value = parse_felt(address)
    except MalformedWordArray as e:
        raise ValueError(f"Invalid contract address {address!r}: {e}") from None
    if value >= ADDRESS_BOUND:
        raise ValueError(f"Invalid contract address {address!r}: out of range")
    return f"0x{value:064x}"


class ContractService:
    """Fetch contract details and decode their metadata"""

    def __init__(self, rpc, class_hash_ttl: int = 3600):
        self.rpc = rpc
        self.class_hash_cache = TTLCache(maxsize=10_000, ttl=class_hash_ttl)
        # Flask serves requests from several threads; TTLCache is not thread-safe
        self._cache_lock = threading.Lock()

    def _ensure_contract(self, address) -> str:
        address = normalize_address(address)
        with self._cache_lock:
            if self.class_hash_cache.get(address) is not None:
                return address

        class_hash = self.rpc.get_class_hash_at(address)
        if not class_hash:
            raise ContractNotFoundError(
                "starknet_getClassHashAt",
                {"code": CONTRACT_NOT_FOUND, "message": "Contract not found"}
            )

        with self._cache_lock:
            self.class_hash_cache[address] = class_hash
        return address

    def _call(self, address: str, abi: dict, function_name: str, calldata=None) -> dict:
        felts = self.rpc.call(address, function_name, calldata)
        if not isinstance(felts, list):
            raise ValueError(f"{function_name} returned {type(felts).__name__}, expected a felt list")
        return decode_outputs(abi[function_name], felts)

    def get_points_details(self, address) -> Optional[dict]:
        """Name, symbol, metadata, decimals and total supply of a points contract"""
        try:
            address = self._ensure_contract(address)
            outputs = self._call(address, POINTS_ABI, "get_details")
        except (RPCError, requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Error getting points details for {address}: {e}")
            return None

        return {
            "address": address,
            "name": byte_array_to_string(outputs["name"]),
            "symbol": byte_array_to_string(outputs["symbol"]),
            "metadata": decode_metadata(outputs["metadata"]),
            "decimals": outputs["decimals"],
            "total_supply": str(outputs["total_supply"]),
        }

    def get_collectible_details(self, address) -> Optional[dict]:
        """Contract details plus the per-token ids, prices, expiries, metadata and supplies"""
        try:
            address = self._ensure_contract(address)
            outputs = self._call(address, COLLECTIBLE_ABI, "get_details")
        except (RPCError, requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Error getting collectible details for {address}: {e}")
            return None

        token_metadata = []
        for index, item in enumerate(outputs["token_metadata"]):
            decoded = decode_metadata(item)
            logger.debug(f"Token metadata #{index} of {address}: {type(decoded).__name__}")
            token_metadata.append(decoded)

        return {
            "address": address,
            "name": byte_array_to_string(outputs["name"]),
            "metadata": decode_metadata(outputs["metadata"]),
            "points_contract": f"0x{outputs['points_contract']:064x}",
            "token_ids": [str(token_id) for token_id in outputs["token_ids"]],
            "prices": [str(price) for price in outputs["token_prices"]],
            "expiry_times": list(outputs["token_expiry"]),
            "token_metadata": token_metadata,
            "supplies": [str(supply) for supply in outputs["token_supplies"]],
        }

    def get_token_data(self, token_id, address) -> Optional[dict]:
        """Price, expiry, metadata and supply of one collectible token"""
        try:
            address = self._ensure_contract(address)
            token_value = parse_felt(token_id)
            outputs = self._call(address, COLLECTIBLE_ABI, "get_token_data", encode_u256(token_value))
        except (RPCError, requests.exceptions.RequestException, ValueError) as e:
            logger.error(f"Error getting token data for token {token_id} of {address}: {e}")
            return None

        return {
            "address": address,
            "token_id": str(token_value),
            "points_contract": f"0x{outputs['points_contract']:064x}",
            "price": str(outputs["price"]),
            "expiry": outputs["expiry"],
            "metadata": decode_metadata(outputs["metadata"]),
            "supply": str(outputs["supply"]),
        }
