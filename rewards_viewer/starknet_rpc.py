"""
JSON-RPC client for Starknet nodes over HTTP
"""
import logging
import threading
from typing import Any, List, Optional, Union

import requests

from .contracts.abi import get_selector

logger = logging.getLogger('rewards_viewer.rpc')

# Starknet JSON-RPC error codes
CONTRACT_NOT_FOUND = 20


class RPCError(RuntimeError):
    """JSON-RPC error object returned by the node"""

    def __init__(self, method: str, error: Any):
        self.method = method
        self.error = error
        self.code = error.get("code") if isinstance(error, dict) else None
        super().__init__(f"RPC error {method}: {error}")


class ContractNotFoundError(RPCError):
    """No contract is deployed at the requested address"""


def to_hex(value: Union[int, str]) -> str:
    if isinstance(value, str):
        return value
    return hex(value)


class StarknetRPC:
    """Raw JSON-RPC client over HTTP"""

    def __init__(self, url: str, timeout: int = 30, session: Optional[requests.Session] = None):
        self.url = url
        self.timeout = timeout
        self.session = session or requests.Session()
        self._id = 0
        self._id_lock = threading.Lock()

    def request(self, method: str, params: Union[List[Any], dict]) -> Any:
        """Send JSON-RPC request and return its result"""
        with self._id_lock:
            self._id += 1
            request_id = self._id
        payload = {
            "jsonrpc": "2.0",
            "id": request_id,
            "method": method,
            "params": params
        }
        logger.debug(f"RPC {method} (id {request_id})")

        response = self.session.post(self.url, json=payload, timeout=self.timeout)
        response.raise_for_status()
        data = response.json()

        if "error" in data:
            raise RPCError(method, data["error"])
        return data.get("result")

    def chain_id(self) -> str:
        return self.request("starknet_chainId", [])

    def block_number(self) -> int:
        return self.request("starknet_blockNumber", [])

    def get_class_hash_at(self, address: str, block_id: str = "latest") -> str:
        """Class hash of the contract deployed at address"""
        try:
            return self.request(
                "starknet_getClassHashAt",
                {"block_id": block_id, "contract_address": address}
            )
        except RPCError as e:
            if e.code == CONTRACT_NOT_FOUND:
                raise ContractNotFoundError(e.method, e.error) from None
            raise

    def call(self, address: str, function_name: str, calldata: Optional[List[Union[int, str]]] = None,
             block_id: str = "latest") -> List[str]:
        """Call a view function, returning the raw felt list"""
        request = {
            "contract_address": address,
            "entry_point_selector": hex(get_selector(function_name)),
            "calldata": [to_hex(c) for c in (calldata or [])],
        }
        return self.request("starknet_call", {"request": request, "block_id": block_id})
