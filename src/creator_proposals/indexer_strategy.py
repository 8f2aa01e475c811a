"""
Indexer query strategy.

Finds the ids of the proposals a creator made on a multisig or token voting
plugin by querying the OSx subgraph. The two plugin kinds are indexed as
different entities, so each has its own query document and response key.
"""
from typing import Any, Dict, List, Tuple

from src.utils.logger import logger

from .exceptions import QueryExecutionError
from .plugin_clients import PluginClient
from .queries import MULTISIG_PROPOSALS_QUERY, TOKEN_VOTING_PROPOSALS_QUERY
from .types import PluginType, ProposalCreatorQuery, ProposalSortBy, SortDirection


def build_indexer_params(query: ProposalCreatorQuery) -> Dict[str, Any]:
    """Build the GraphQL variables for a creator proposals query."""
    return {
        "where": {
            "plugin": query.plugin_address.lower(),
            "creator": query.creator_address.lower(),
        },
        "block": {"number": query.block_number} if query.block_number else None,
        "direction": SortDirection.DESC.value,
        "sortBy": ProposalSortBy.CREATED_AT.value,
    }


def select_indexer_query(plugin_type: PluginType) -> Tuple[str, str]:
    """
    Pick the query document and response collection for a plugin type.

    Returns:
        (GraphQL document, entity collection key in the response)
    """
    if plugin_type == PluginType.MULTISIG:
        return MULTISIG_PROPOSALS_QUERY, "multisigProposals"
    return TOKEN_VOTING_PROPOSALS_QUERY, "tokenVotingProposals"


def extract_proposal_ids(data: Dict[str, Any], collection: str) -> List[str]:
    items = data.get(collection) or []
    if not isinstance(items, list):
        raise QueryExecutionError(f"Indexer returned a non-list '{collection}' collection")

    ids = []
    for item in items:
        if not isinstance(item, dict) or not isinstance(item.get("id"), str):
            raise QueryExecutionError(f"Malformed '{collection}' entry in indexer response")
        ids.append(item["id"])
    return ids


async def fetch_via_indexer(
    query: ProposalCreatorQuery,
    client: PluginClient,
    network: str,
) -> List[str]:
    """
    Fetch the ids of a creator's proposals from the indexer.

    Args:
        query: Creator proposals filter
        client: Resolved plugin client (its graphql transport is used)
        network: Network the client points at

    Returns:
        Proposal ids, newest first. Empty when nothing matches.

    Raises:
        QueryExecutionError: If the indexer request fails
    """
    document, collection = select_indexer_query(query.plugin_type)
    params = build_indexer_params(query)

    logger.info(
        f"[CreatorProposals] Indexer query {collection}: network={network}, "
        f"plugin={params['where']['plugin']}, creator={params['where']['creator']}, "
        f"block={params['block']}"
    )
    data = await client.graphql.request(query=document, params=params)
    return extract_proposal_ids(data, collection)
