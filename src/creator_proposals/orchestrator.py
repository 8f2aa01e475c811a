"""
Creator proposals aggregation.

Flow:
1. Pick the id strategy for the plugin type (gasless -> plugin method,
   everything else -> indexer query)
2. Fetch the creator's proposal ids, newest first
3. Resolve every id concurrently and wait for all of them to settle
4. Drop ids that resolved to nothing, keeping the upstream order
"""
import asyncio
from typing import Awaitable, Callable, List, Optional, Sequence, Union

from src.utils.logger import logger

from .exceptions import ClientUnavailableError
from .indexer_strategy import fetch_via_indexer
from .plugin_clients import PluginClient
from .plugin_method_strategy import fetch_via_plugin_method
from .proposal_details import get_proposal
from .types import AggregationResult, PluginType, ProposalCreatorQuery, ProposalRecord

IdStrategy = Callable[[ProposalCreatorQuery, PluginClient, str], Awaitable[List[str]]]
DetailResolver = Callable[[PluginClient, str, str], Awaitable[Optional[ProposalRecord]]]


async def _plugin_method_ids(query: ProposalCreatorQuery, client: PluginClient, network: str) -> List[str]:
    return await fetch_via_plugin_method(query, client)


def select_identifier_strategy(plugin_type: PluginType) -> IdStrategy:
    """Pick the id strategy for a plugin type."""
    if plugin_type == PluginType.GASLESS:
        return _plugin_method_ids
    if plugin_type in (PluginType.MULTISIG, PluginType.TOKEN_VOTING):
        return fetch_via_indexer
    raise ValueError(f"Unsupported plugin type: {plugin_type}")


def _merge_resolved(
    outcomes: Sequence[Union[Optional[ProposalRecord], BaseException]],
) -> AggregationResult:
    """Keep the present records in order; re-raise the first failure."""
    for outcome in outcomes:
        if isinstance(outcome, BaseException):
            raise outcome
    return [outcome for outcome in outcomes if outcome is not None]


async def aggregate(
    query: ProposalCreatorQuery,
    client: Optional[PluginClient],
    network: str,
    resolve_detail: DetailResolver = get_proposal,
) -> AggregationResult:
    """
    List every proposal a creator made on one plugin.

    Args:
        query: Plugin, creator, plugin type and optional block bound
        client: Plugin client resolved for the plugin type
        network: Network the client points at
        resolve_detail: Maps one id to a record, or None when not found

    Returns:
        Proposal records, newest first

    Raises:
        ClientUnavailableError: If no client is given
        QueryExecutionError: If the id query or any detail lookup fails
    """
    if client is None:
        raise ClientUnavailableError("aggregate: client is not defined")

    strategy = select_identifier_strategy(query.plugin_type)
    proposal_ids = await strategy(query, client, network)

    if not proposal_ids:
        logger.info(f"[CreatorProposals] No proposals for creator={query.creator_address} on {network}")
        return []

    outcomes = await asyncio.gather(
        *(resolve_detail(client, proposal_id, network) for proposal_id in proposal_ids),
        return_exceptions=True,
    )
    proposals = _merge_resolved(outcomes)

    logger.info(
        f"[CreatorProposals] Resolved {len(proposals)}/{len(proposal_ids)} proposals "
        f"for creator={query.creator_address}, plugin_type={query.plugin_type.value}"
    )
    return proposals
