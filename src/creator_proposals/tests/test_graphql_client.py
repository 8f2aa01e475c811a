"""Tests for the indexer GraphQL transport using httpx.MockTransport."""
import asyncio
import json

import httpx
import pytest

from src.creator_proposals.exceptions import QueryExecutionError
from src.creator_proposals.graphql_client import IndexerGraphQLClient

URL = "https://indexer.test/subgraphs/osx-sepolia/api"


def _run(handler, query="query { x }", params=None):
    async def go():
        async with IndexerGraphQLClient(URL, transport=httpx.MockTransport(handler)) as client:
            return await client.request(query=query, params=params)

    return asyncio.run(go())


class TestIndexerGraphQLClient:
    """Test response handling."""

    def test_returns_data_and_posts_variables(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["body"] = json.loads(request.content)
            return httpx.Response(200, json={"data": {"multisigProposals": [{"id": "m1"}]}})

        data = _run(handler, params={"block": None})

        assert data == {"multisigProposals": [{"id": "m1"}]}
        assert seen["method"] == "POST"
        assert seen["body"] == {"query": "query { x }", "variables": {"block": None}}

    def test_graphql_errors(self):
        def handler(request):
            return httpx.Response(200, json={"errors": [{"message": "bad filter"}]})

        with pytest.raises(QueryExecutionError, match="bad filter") as exc_info:
            _run(handler)
        assert exc_info.value.errors == [{"message": "bad filter"}]

    def test_http_error_status(self):
        def handler(request):
            return httpx.Response(503, json={"message": "unavailable"})

        with pytest.raises(QueryExecutionError) as exc_info:
            _run(handler)
        assert exc_info.value.status_code == 503
        assert exc_info.value.code == 502

    def test_non_json_response(self):
        def handler(request):
            return httpx.Response(200, text="<html>gateway</html>")

        with pytest.raises(QueryExecutionError, match="non-JSON"):
            _run(handler)

    def test_missing_data_object(self):
        def handler(request):
            return httpx.Response(200, json={"data": None})

        with pytest.raises(QueryExecutionError):
            _run(handler)

    def test_transport_failure(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(QueryExecutionError, match="transport"):
            _run(handler)
