"""
Async GraphQL client for the governance indexers (subgraphs).

Wraps an httpx.AsyncClient and normalises every transport, HTTP and
GraphQL-level failure into QueryExecutionError.
"""
from typing import Any, Dict, Optional

import httpx

from src.utils.logger import logger

from .exceptions import QueryExecutionError


class IndexerGraphQLClient:
    """
    HTTP client for a single subgraph endpoint.

    Usage:
        async with IndexerGraphQLClient(url) as graphql:
            data = await graphql.request(query=MULTISIG_PROPOSALS_QUERY, params=params)
    """

    def __init__(
        self,
        url: str,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the indexer client.

        Args:
            url: Subgraph GraphQL endpoint
            timeout: Request timeout in seconds (default 30.0)
            transport: Optional httpx transport (used by tests)
        """
        self.url = url
        self.client = httpx.AsyncClient(timeout=timeout, transport=transport)

    def _get_headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _handle_response(self, response: httpx.Response) -> Dict[str, Any]:
        """
        Handle a GraphQL response and raise errors if needed.

        Args:
            response: HTTP response

        Returns:
            The "data" object of the GraphQL response

        Raises:
            QueryExecutionError: On HTTP errors, GraphQL errors or malformed payloads
        """
        try:
            payload = response.json()
        except ValueError:
            raise QueryExecutionError(
                "Indexer returned a non-JSON response", status_code=response.status_code
            )

        if not isinstance(payload, dict):
            raise QueryExecutionError(
                "Indexer returned an unexpected payload", status_code=response.status_code
            )

        if response.status_code >= 400:
            raise QueryExecutionError(
                f"Indexer returned HTTP {response.status_code}",
                status_code=response.status_code,
                errors=payload.get("errors"),
            )

        if payload.get("errors"):
            messages = [
                e.get("message", str(e)) if isinstance(e, dict) else str(e)
                for e in payload["errors"]
            ]
            raise QueryExecutionError(
                "Indexer query failed: " + "; ".join(messages),
                status_code=response.status_code,
                errors=payload["errors"],
            )

        data = payload.get("data")
        if not isinstance(data, dict):
            raise QueryExecutionError(
                "Indexer response has no data object", status_code=response.status_code
            )
        return data

    async def request(self, query: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Execute a GraphQL query.

        Args:
            query: GraphQL document
            params: Query variables

        Returns:
            The "data" object keyed by entity-collection name

        Raises:
            QueryExecutionError: If the request fails for any reason
        """
        body = {"query": query, "variables": params or {}}
        try:
            response = await self.client.post(self.url, json=body, headers=self._get_headers())
        except httpx.HTTPError as e:
            logger.error(f"[IndexerGraphQL] transport error for {self.url}: {e}")
            raise QueryExecutionError(f"Indexer transport error: {e}") from e

        return self._handle_response(response)

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
