from typing import Optional, Tuple

from .types import ProposalCreatorQuery

CREATOR_PROPOSALS_KEY = "creatorProposals"

QueryKey = Tuple[str, str, str, str, str, Optional[int]]


def creator_proposals_query_key(network: str, query: ProposalCreatorQuery) -> QueryKey:
    """
    Cache key for a creator proposals query on a network.

    Addresses are lowercased and a block number of 0 keys like None, since
    both backends read those inputs the same way.
    """
    return (
        CREATOR_PROPOSALS_KEY,
        network,
        query.plugin_address.lower(),
        query.creator_address.lower(),
        query.plugin_type.value,
        query.block_number or None,
    )
