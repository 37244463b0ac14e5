#!/usr/bin/env python3
# scripts/tests/test_starknet_rpc.py

import os
import sys
from concurrent.futures import ThreadPoolExecutor

import pytest
import requests

# Add the project root to the Python path
sys.path.append(os.path.join(os.path.dirname(__file__), '..', '..'))

from rewards_viewer.contracts.abi import get_selector
from rewards_viewer.starknet_rpc import ContractNotFoundError, RPCError, StarknetRPC


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self.payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} error")

    def json(self):
        return self.payload


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.requests = []

    def post(self, url, json=None, timeout=None):
        self.requests.append({"url": url, "json": json, "timeout": timeout})
        return self.responses.pop(0)


def make_rpc(*responses):
    session = FakeSession(responses)
    return StarknetRPC("http://node.test/rpc", timeout=5, session=session), session


def test_request_payload_and_result():
    rpc, session = make_rpc(FakeResponse({"jsonrpc": "2.0", "id": 1, "result": "0x534e5f5345504f4c4941"}))

    assert rpc.chain_id() == "0x534e5f5345504f4c4941"
    sent = session.requests[0]
    assert sent["url"] == "http://node.test/rpc"
    assert sent["timeout"] == 5
    assert sent["json"] == {"jsonrpc": "2.0", "id": 1, "method": "starknet_chainId", "params": []}


def test_request_ids_increment():
    rpc, session = make_rpc(FakeResponse({"result": 1}), FakeResponse({"result": 2}))
    rpc.block_number()
    rpc.block_number()
    assert [r["json"]["id"] for r in session.requests] == [1, 2]


def test_request_ids_unique_across_threads():
    rpc, session = make_rpc(*[FakeResponse({"result": n}) for n in range(200)])

    with ThreadPoolExecutor(max_workers=8) as pool:
        list(pool.map(lambda _: rpc.block_number(), range(200)))

    ids = [r["json"]["id"] for r in session.requests]
    assert sorted(ids) == list(range(1, 201))


def test_call_builds_request():
    rpc, session = make_rpc(FakeResponse({"result": ["0x1", "0x2"]}))

    assert rpc.call("0xabc", "get_token_data", [5, 0]) == ["0x1", "0x2"]
    params = session.requests[0]["json"]["params"]
    assert params == {
        "request": {
            "contract_address": "0xabc",
            "entry_point_selector": hex(get_selector("get_token_data")),
            "calldata": ["0x5", "0x0"],
        },
        "block_id": "latest",
    }


def test_rpc_error_raises():
    rpc, _ = make_rpc(FakeResponse({"error": {"code": 40, "message": "Contract error"}}))
    with pytest.raises(RPCError) as exc_info:
        rpc.call("0xabc", "get_details")
    assert exc_info.value.code == 40
    assert "starknet_call" in str(exc_info.value)


def test_contract_not_found():
    rpc, _ = make_rpc(FakeResponse({"error": {"code": 20, "message": "Contract not found"}}))
    with pytest.raises(ContractNotFoundError):
        rpc.get_class_hash_at("0xabc")


def test_http_error_propagates():
    rpc, _ = make_rpc(FakeResponse({}, status_code=503))
    with pytest.raises(requests.exceptions.HTTPError):
        rpc.chain_id()
