"""
Cached query layer for creator proposals.

Wraps the aggregation behind a query key, shares one in-flight request
between identical concurrent callers, keeps successful results for a TTL and
reports every call as a QueryState instead of raising.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ValidationError

from src.config import creator_proposals_settings as settings
from src.utils.logger import logger

from .client_resolver import resolve_plugin_client
from .exceptions import InvalidQueryError, classify_exception
from .orchestrator import DetailResolver, aggregate
from .plugin_clients import PluginClient
from .proposal_details import get_proposal
from .query_keys import QueryKey, creator_proposals_query_key
from .types import PluginType, ProposalCreatorQuery, ProposalRecord, SupportedNetwork


class QueryState(BaseModel):
    """Outcome of a cached query: idle (disabled), success or error."""
    status: Literal["idle", "success", "error"]
    data: Optional[List[ProposalRecord]] = None
    error: Optional[Dict[str, Any]] = None

    @property
    def is_success(self) -> bool:
        return self.status == "success"

    @property
    def is_error(self) -> bool:
        return self.status == "error"


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    deduplicated: int = 0
    failures: int = 0
    invalidations: int = 0


def _freeze(data: Any) -> Any:
    return tuple(data) if isinstance(data, list) else data


def _thaw(data: Any) -> Any:
    # Each caller gets its own list; the cached value is never handed out
    return list(data) if isinstance(data, (list, tuple)) else data


@dataclass
class _CacheEntry:
    data: Any
    stored_at: float


class CreatorProposalsCache:
    """
    In-memory TTL cache with request de-duplication.

    Usage:
        cache = CreatorProposalsCache(ttl_seconds=60)
        proposals = await cache.fetch(key, lambda: aggregate(query, client, network))
    """

    def __init__(
        self,
        ttl_seconds: float = 60.0,
        max_entries: int = 256,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[QueryKey, _CacheEntry] = {}
        self._in_flight: Dict[QueryKey, asyncio.Future] = {}
        self._stats = CacheStats()
        self._lock = asyncio.Lock()

    def _is_fresh(self, entry: _CacheEntry) -> bool:
        return self._clock() - entry.stored_at < self.ttl_seconds

    def _store(self, key: QueryKey, data: Any) -> None:
        self._entries.pop(key, None)
        self._entries[key] = _CacheEntry(data=data, stored_at=self._clock())
        while len(self._entries) > self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]

    def _on_done(self, key: QueryKey, task: asyncio.Future) -> None:
        # Only the task still registered for the key may write its result
        if self._in_flight.get(key) is not task:
            return
        del self._in_flight[key]
        if task.cancelled():
            return
        if task.exception() is not None:
            self._stats.failures += 1
            return
        self._store(key, _freeze(task.result()))

    async def fetch(self, key: QueryKey, query_fn: Callable[[], Awaitable[Any]]) -> Any:
        """
        Return the cached value for key, or run query_fn once for all callers.

        Raises:
            Whatever query_fn raises; failures are never cached
        """
        async with self._lock:
            entry = self._entries.get(key)
            if entry is not None:
                if self._is_fresh(entry):
                    self._stats.hits += 1
                    logger.debug(f"[ProposalCache] HIT {key}")
                    return _thaw(entry.data)
                del self._entries[key]

            task = self._in_flight.get(key)
            if task is not None:
                self._stats.deduplicated += 1
                logger.debug(f"[ProposalCache] JOIN in-flight {key}")
            else:
                self._stats.misses += 1
                logger.debug(f"[ProposalCache] MISS {key}")
                task = asyncio.ensure_future(query_fn())
                self._in_flight[key] = task
                task.add_done_callback(lambda t, k=key: self._on_done(k, t))

        # A cancelled caller must not cancel the shared request
        return _thaw(await asyncio.shield(task))

    async def invalidate(self, key: QueryKey) -> bool:
        """Drop a cached value; an in-flight request for it will not be stored."""
        async with self._lock:
            removed = self._entries.pop(key, None) is not None
            removed = self._in_flight.pop(key, None) is not None or removed
            if removed:
                self._stats.invalidations += 1
            return removed

    async def clear(self) -> int:
        async with self._lock:
            count = len(self._entries)
            self._entries.clear()
            self._in_flight.clear()
            self._stats.invalidations += count
            logger.info(f"[ProposalCache] Cleared {count} entries")
            return count

    async def get_stats(self) -> dict:
        """Get current cache statistics for monitoring."""
        async with self._lock:
            fresh = sum(1 for e in self._entries.values() if self._is_fresh(e))
            return {
                "entries": len(self._entries),
                "fresh_entries": fresh,
                "in_flight": len(self._in_flight),
                "ttl_seconds": self.ttl_seconds,
                "max_entries": self.max_entries,
                "hits": self._stats.hits,
                "misses": self._stats.misses,
                "deduplicated": self._stats.deduplicated,
                "failures": self._stats.failures,
                "invalidations": self._stats.invalidations,
            }


_default_cache: Optional[CreatorProposalsCache] = None


def get_creator_proposals_cache() -> CreatorProposalsCache:
    """Get or create the process-wide cache."""
    global _default_cache
    if _default_cache is None:
        _default_cache = CreatorProposalsCache(
            ttl_seconds=settings.CREATOR_PROPOSALS_CACHE_TTL_SECONDS,
            max_entries=settings.CREATOR_PROPOSALS_CACHE_MAX_ENTRIES,
        )
    return _default_cache


async def fetch_creator_proposals(
    network: Union[SupportedNetwork, str],
    plugin_address: str,
    creator_address: str,
    plugin_type: Optional[Union[PluginType, str]] = None,
    block_number: Optional[int] = None,
    cache: Optional[CreatorProposalsCache] = None,
    client_resolver: Callable[..., Optional[PluginClient]] = resolve_plugin_client,
    resolve_detail: DetailResolver = get_proposal,
) -> QueryState:
    """
    Cached, de-duplicated creator proposals query.

    The query is disabled (status "idle", aggregation never runs) when the
    plugin type is missing or no client can be resolved for it.

    Returns:
        QueryState with the proposals, or the classified error
    """
    network_name = network.value if isinstance(network, SupportedNetwork) else network

    client = client_resolver(plugin_type, network_name) if plugin_type else None
    if client is None or not plugin_type:
        logger.info(
            f"[CreatorProposals] Query disabled: plugin_type={plugin_type}, network={network_name}"
        )
        return QueryState(status="idle")

    try:
        query = ProposalCreatorQuery(
            plugin_address=plugin_address,
            creator_address=creator_address,
            plugin_type=plugin_type,
            block_number=block_number,
        )
    except ValidationError as e:
        return QueryState(status="error", error=InvalidQueryError(str(e)).to_dict())

    cache = cache or get_creator_proposals_cache()
    key = creator_proposals_query_key(network_name, query)

    try:
        proposals = await cache.fetch(
            key, lambda: aggregate(query, client, network_name, resolve_detail=resolve_detail)
        )
    except Exception as e:
        error = classify_exception(e)
        logger.error(f"[CreatorProposals] Query {key} failed: {error.message}")
        return QueryState(status="error", error=error.to_dict())

    return QueryState(status="success", data=proposals)
