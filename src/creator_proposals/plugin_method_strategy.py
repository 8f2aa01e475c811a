"""Direct method strategy for the gasless voting plugin."""
from typing import List, Optional

from src.utils.logger import logger

from .exceptions import ClientUnavailableError
from .plugin_clients import PluginClient
from .types import ProposalCreatorQuery, ProposalSortBy, SortDirection


async def fetch_via_plugin_method(
    query: ProposalCreatorQuery,
    client: Optional[PluginClient],
) -> List[str]:
    """
    Fetch a creator's proposal ids through the plugin's member-proposal method.

    A missing block number is sent as 0, which the plugin reads as "no bound".

    Raises:
        ClientUnavailableError: If there is no client, or it has no
            member-proposal capability
    """
    if client is None:
        raise ClientUnavailableError("fetch_via_plugin_method: client is not defined")

    methods = getattr(client, "methods", None)
    if methods is None or not hasattr(methods, "get_member_proposals"):
        raise ClientUnavailableError(
            f"fetch_via_plugin_method: {type(client).__name__} has no member proposals method"
        )

    logger.info(
        f"[CreatorProposals] Plugin method query: plugin={query.plugin_address}, "
        f"creator={query.creator_address}, block={query.block_number or 0}"
    )
    ids = await methods.get_member_proposals(
        query.plugin_address,
        query.creator_address,
        query.block_number or 0,
        SortDirection.DESC,
        ProposalSortBy.CREATED_AT,
    )
    return list(ids)
