"""
Tests for HttpxTransport and the full HTTP stack, using pytest-httpx.

Test plan:
- post_json sends the JSON-RPC body with a JSON content type and
  returns the decoded response
- HTTP 5xx raises httpx.HTTPStatusError
- Through the gateway: connection errors and timeouts become
  TransportFailure with the httpx exception chained; a paginated
  account_objects read is assembled across two HTTP requests
"""

import json

import httpx
import pytest
from pytest_httpx import HTTPXMock

from xrpl_credentials.errors import TransportFailure
from xrpl_credentials.jsonrpc_client import JsonRpcClient
from xrpl_credentials.ledger import XRPLGateway
from xrpl_credentials.transport import HttpxTransport, JsonRpcTransport

URL = "https://rippled.test/"
ACCOUNT = "rHb9CJAWyB4rj91VRWn96DkukG4bwdtyTh"


def _gateway(timeout: float = 5.0) -> XRPLGateway:
    return XRPLGateway(JsonRpcClient(URL, HttpxTransport(timeout=timeout)), poll_interval=0)


class TestHttpxTransport:
    def test_satisfies_protocol(self) -> None:
        assert isinstance(HttpxTransport(), JsonRpcTransport)
        assert HttpxTransport(timeout=2.5).timeout == 2.5

    @pytest.mark.asyncio
    async def test_post_json(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, json={"result": {"status": "success"}})

        response = await HttpxTransport().post_json(URL, {"method": "server_info", "params": [{}]})

        assert response == {"result": {"status": "success"}}
        [request] = httpx_mock.get_requests()
        assert request.headers["Content-Type"] == "application/json"
        assert json.loads(request.content) == {"method": "server_info", "params": [{}]}

    @pytest.mark.asyncio
    async def test_http_error(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(method="POST", url=URL, status_code=503, text="busy")
        with pytest.raises(httpx.HTTPStatusError):
            await HttpxTransport().post_json(URL, {"method": "tx"})


class TestThroughGateway:
    @pytest.mark.asyncio
    async def test_connect_error(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_exception(httpx.ConnectError("Connection refused"), method="POST", url=URL)
        with pytest.raises(TransportFailure) as exc_info:
            await _gateway().account_flags(ACCOUNT)
        assert isinstance(exc_info.value.__cause__, httpx.ConnectError)

    @pytest.mark.asyncio
    async def test_timeout(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_exception(httpx.ReadTimeout("Request timed out"), method="POST", url=URL)
        with pytest.raises(TransportFailure, match="ReadTimeout"):
            await _gateway().account_objects(ACCOUNT, "credential")

    @pytest.mark.asyncio
    async def test_paginated_read(self, httpx_mock: HTTPXMock) -> None:
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json={
                "result": {
                    "status": "success",
                    "account_objects": [{"LedgerEntryType": "Credential", "n": 1}],
                    "marker": "page2",
                }
            },
        )
        httpx_mock.add_response(
            method="POST",
            url=URL,
            json={
                "result": {
                    "status": "success",
                    "account_objects": [{"LedgerEntryType": "Credential", "n": 2}],
                }
            },
        )

        objects = await _gateway().account_objects(ACCOUNT, "credential")

        assert [obj["n"] for obj in objects] == [1, 2]
        bodies = [json.loads(request.content) for request in httpx_mock.get_requests()]
        assert [body["method"] for body in bodies] == ["account_objects", "account_objects"]
        assert "marker" not in bodies[0]["params"][0]
        assert bodies[1]["params"][0]["marker"] == "page2"
