"""
FastAPI router for creator proposals.

Exposes the cached aggregation as a REST endpoint plus cache admin routes.
"""
from typing import Optional

from fastapi import APIRouter, HTTPException, Query

from src.utils.logger import logger

from .cache import fetch_creator_proposals, get_creator_proposals_cache
from .types import CreatorProposalsResponse, PluginType, SupportedNetwork

router = APIRouter()


@router.get("", response_model=CreatorProposalsResponse)
async def list_creator_proposals(
    network: SupportedNetwork = Query(..., description="Network the DAO lives on"),
    plugin_address: str = Query(..., min_length=1, description="Governance plugin address"),
    creator_address: str = Query(..., min_length=1, description="Proposal creator address"),
    plugin_type: PluginType = Query(..., description="Governance plugin type tag"),
    block_number: Optional[int] = Query(None, ge=0, description="Historical block bound"),
) -> CreatorProposalsResponse:
    """
    List the proposals an address created on a governance plugin, newest first.

    Raises:
        HTTPException: 503 if no plugin client is available, otherwise the
            status code of the classified error
    """
    logger.info(
        f"[CreatorProposals] Request: network={network.value}, plugin={plugin_address}, "
        f"creator={creator_address}, plugin_type={plugin_type.value}, block={block_number}"
    )
    state = await fetch_creator_proposals(
        network=network,
        plugin_address=plugin_address,
        creator_address=creator_address,
        plugin_type=plugin_type,
        block_number=block_number,
    )

    if state.status == "idle":
        raise HTTPException(
            status_code=503,
            detail=f"No {plugin_type.value} client available on {network.value}",
        )
    if state.is_error:
        raise HTTPException(status_code=state.error.get("error_code", 500), detail=state.error)

    proposals = state.data or []
    return CreatorProposalsResponse(proposals=proposals, count=len(proposals))


@router.get("/cache/stats")
async def get_creator_proposals_cache_stats():
    """Get cache statistics for monitoring."""
    return await get_creator_proposals_cache().get_stats()


@router.post("/cache/invalidate")
async def invalidate_creator_proposals_cache():
    """Drop every cached creator proposals result (admin function)."""
    cleared = await get_creator_proposals_cache().clear()
    return {"success": True, "cleared": cleared}
