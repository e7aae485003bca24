"""
EthRpcClient tests against mocked JSON-RPC responses (httpx.MockTransport).
"""

from __future__ import annotations

import json

import httpx
import pytest

from backend_txparser.core.exceptions import (
    BlockNotFoundError,
    RPCDecodeError,
    RPCError,
    RPCResponseError,
    RPCTransportError,
)
from backend_txparser.rpc_client import EthRpcClient, parse_hex_quantity

NODE_URL = "http://node.test"


def _client(handler) -> EthRpcClient:
    http_client = httpx.Client(transport=httpx.MockTransport(handler))
    return EthRpcClient(NODE_URL, http_client=http_client)


def _json_handler(payload, status_code: int = 200, seen: list | None = None):
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(json.loads(request.content))
        return httpx.Response(status_code, json=payload)

    return handler


def test_fetch_current_block():
    """0xa decodes to 10; request is a parameterless eth_blockNumber call."""
    seen: list = []
    client = _client(_json_handler({"jsonrpc": "2.0", "id": 1, "result": "0xa"}, seen=seen))
    assert client.fetch_current_block() == 10
    assert seen[0]["method"] == "eth_blockNumber"
    assert seen[0]["params"] == []
    assert seen[0]["jsonrpc"] == "2.0"


def test_fetch_current_block_rpc_error():
    client = _client(
        _json_handler({"jsonrpc": "2.0", "id": 1, "error": {"code": -32603, "message": "Internal error"}})
    )
    with pytest.raises(RPCResponseError) as exc_info:
        client.fetch_current_block()
    assert "Internal error" in str(exc_info.value)
    assert exc_info.value.code == -32603


def test_fetch_current_block_bad_status():
    client = _client(_json_handler({"error": "nope"}, status_code=503))
    with pytest.raises(RPCTransportError, match="503"):
        client.fetch_current_block()


def test_fetch_current_block_malformed_hex():
    client = _client(_json_handler({"jsonrpc": "2.0", "id": 1, "result": "0xzz"}))
    with pytest.raises(RPCDecodeError):
        client.fetch_current_block()


def test_fetch_current_block_invalid_json():
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=b"<html>gateway</html>")

    client = _client(handler)
    with pytest.raises(RPCDecodeError):
        client.fetch_current_block()


def test_transport_failure_is_rpc_error():
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = _client(handler)
    with pytest.raises(RPCTransportError):
        client.fetch_current_block()
    with pytest.raises(RPCError):
        client.fetch_block_by_number(1)


def test_fetch_block_by_number():
    """Block with two transactions; params are [hex height, true]."""
    seen: list = []
    payload = {
        "jsonrpc": "2.0",
        "id": 1,
        "result": {
            "number": "0x1",
            "hash": "0xblock",
            "transactions": [
                {"hash": "0x1", "from": "0xFrom1", "to": "0xTo1", "value": "100"},
                {"hash": "0x2", "from": "0xFrom2", "to": "0xTo2", "value": "0xc8"},
            ],
        },
    }
    client = _client(_json_handler(payload, seen=seen))
    block = client.fetch_block_by_number(1)

    assert seen[0]["method"] == "eth_getBlockByNumber"
    assert seen[0]["params"] == ["0x1", True]
    assert [t.hash for t in block.transactions] == ["0x1", "0x2"]
    assert block.transactions[0].from_address == "0xFrom1"
    assert block.transactions[0].value == "100"
    assert block.transactions[1].value == "200"


def test_fetch_block_by_number_rpc_error():
    client = _client(
        _json_handler({"jsonrpc": "2.0", "id": 1, "error": {"code": -32603, "message": "Internal error"}})
    )
    with pytest.raises(RPCResponseError, match="Internal error"):
        client.fetch_block_by_number(1)


def test_fetch_block_null_result():
    client = _client(_json_handler({"jsonrpc": "2.0", "id": 1, "result": None}))
    with pytest.raises(BlockNotFoundError) as exc_info:
        client.fetch_block_by_number(99)
    assert exc_info.value.height == 99


def test_contract_creation_has_empty_to():
    payload = {
        "jsonrpc": "2.0",
        "id": 1,
        "result": {"number": "0x5", "transactions": [{"hash": "0x1", "from": "0xa", "to": None, "value": "0x0"}]},
    }
    client = _client(_json_handler(payload))
    block = client.fetch_block_by_number(5)
    assert block.transactions[0].to_address == ""
    assert block.transactions[0].value == "0"


def test_request_ids_increase():
    seen: list = []
    client = _client(_json_handler({"jsonrpc": "2.0", "id": 1, "result": "0x1"}, seen=seen))
    client.fetch_current_block()
    client.fetch_current_block()
    assert seen[1]["id"] > seen[0]["id"]


def test_parse_hex_quantity():
    assert parse_hex_quantity("0x0") == 0
    assert parse_hex_quantity("ff") == 255
    for bad in ("", "0x", "0xg1", None, 12):
        with pytest.raises(RPCDecodeError):
            parse_hex_quantity(bad)


def test_empty_url_rejected():
    with pytest.raises(ValueError, match="non-empty"):
        EthRpcClient("  ")


@pytest.mark.parametrize(
    "bad_tx",
    [
        {"hash": "0xbad", "from": 123, "to": "0xa", "value": "0x1"},
        {"hash": "0xbad", "from": "0xa", "to": {"address": "0xb"}, "value": "0x1"},
        {"hash": 7, "from": "0xa", "to": "0xb", "value": "0x1"},
        {"from": "0xa", "to": "0xb", "value": "0x1"},
        {"hash": "0xbad", "from": "0xa", "to": "0xb", "value": ["0x1"]},
    ],
)
def test_mistyped_transaction_fields_are_decode_errors(bad_tx):
    payload = {"jsonrpc": "2.0", "id": 1, "result": {"transactions": [bad_tx]}}
    client = _client(_json_handler(payload))
    with pytest.raises(RPCDecodeError):
        client.fetch_block_by_number(1)


def test_unused_block_metadata_is_not_decoded():
    """Odd block or position metadata does not make an otherwise valid block unreadable."""
    payload = {
        "jsonrpc": "2.0",
        "id": 1,
        "result": {
            "number": "pending",
            "hash": None,
            "transactions": [
                {
                    "hash": "0x1",
                    "from": "0xa",
                    "to": "0xb",
                    "value": "0x64",
                    "blockNumber": "not-hex",
                    "transactionIndex": None,
                }
            ],
        },
    }
    client = _client(_json_handler(payload))
    block = client.fetch_block_by_number(1)
    assert [(t.hash, t.value) for t in block.transactions] == [("0x1", "100")]
