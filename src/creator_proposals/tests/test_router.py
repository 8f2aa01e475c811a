"""Tests for the creator proposals HTTP endpoints."""
from unittest.mock import AsyncMock, patch

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from src.creator_proposals.cache import CreatorProposalsCache, QueryState
from src.creator_proposals.exceptions import QueryExecutionError
from src.creator_proposals.router import router
from src.creator_proposals.types import PluginType

from .factories import make_multisig_record

PARAMS = {
    "network": "sepolia",
    "plugin_address": "0xP",
    "creator_address": "0xC",
    "plugin_type": PluginType.MULTISIG.value,
}


@pytest.fixture
def client():
    app = FastAPI()
    app.include_router(router, prefix="/creator-proposals")
    return TestClient(app)


class TestListCreatorProposals:
    """Test GET /creator-proposals."""

    @patch("src.creator_proposals.router.fetch_creator_proposals", new_callable=AsyncMock)
    def test_success(self, mock_fetch, client):
        mock_fetch.return_value = QueryState(
            status="success", data=[make_multisig_record("m1"), make_multisig_record("m2", age_days=1)]
        )

        response = client.get("/creator-proposals", params={**PARAMS, "block_number": 10})

        assert response.status_code == 200
        body = response.json()
        assert body["count"] == 2
        assert [p["id"] for p in body["proposals"]] == ["m1", "m2"]
        assert body["proposals"][0]["kind"] == "multisig"
        kwargs = mock_fetch.call_args.kwargs
        assert kwargs["plugin_type"] == PluginType.MULTISIG
        assert kwargs["block_number"] == 10

    @patch("src.creator_proposals.router.fetch_creator_proposals", new_callable=AsyncMock)
    def test_disabled_query(self, mock_fetch, client):
        mock_fetch.return_value = QueryState(status="idle")
        response = client.get("/creator-proposals", params=PARAMS)
        assert response.status_code == 503

    @patch("src.creator_proposals.router.fetch_creator_proposals", new_callable=AsyncMock)
    def test_error_maps_code(self, mock_fetch, client):
        mock_fetch.return_value = QueryState(
            status="error", error=QueryExecutionError("indexer down").to_dict()
        )

        response = client.get("/creator-proposals", params=PARAMS)

        assert response.status_code == 502
        assert response.json()["detail"]["error_message"] == "indexer down"

    def test_unknown_plugin_type_rejected(self, client):
        response = client.get("/creator-proposals", params={**PARAMS, "plugin_type": "nope"})
        assert response.status_code == 422

    def test_negative_block_rejected(self, client):
        response = client.get("/creator-proposals", params={**PARAMS, "block_number": -1})
        assert response.status_code == 422


class TestCacheAdmin:
    """Test cache admin endpoints."""

    def test_stats_and_invalidate(self, client):
        cache = CreatorProposalsCache()
        with patch("src.creator_proposals.router.get_creator_proposals_cache", return_value=cache):
            stats = client.get("/creator-proposals/cache/stats")
            cleared = client.post("/creator-proposals/cache/invalidate")

        assert stats.status_code == 200
        assert stats.json()["entries"] == 0
        assert cleared.json() == {"success": True, "cleared": 0}
