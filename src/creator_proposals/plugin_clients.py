"""
Plugin clients.

A plugin client bundles the indexer transport for one plugin type on one
network. The gasless client also exposes the member-proposal capability
under ``client.methods``.
"""
from typing import List, Optional

from src.utils.logger import logger

from .exceptions import QueryExecutionError
from .graphql_client import IndexerGraphQLClient
from .queries import GASLESS_MEMBER_PROPOSALS_QUERY
from .types import PluginType, ProposalSortBy, SortDirection


class PluginClient:
    """Base client: indexer transport plus optional plugin methods."""

    plugin_type: PluginType

    def __init__(self, network: str, graphql: IndexerGraphQLClient):
        self.network = network
        self.graphql = graphql
        self.methods: Optional[object] = None

    async def close(self):
        await self.graphql.close()

    def __repr__(self) -> str:
        return f"{type(self).__name__}(network={self.network!r}, url={self.graphql.url!r})"


class MultisigClient(PluginClient):
    plugin_type = PluginType.MULTISIG


class TokenVotingClient(PluginClient):
    plugin_type = PluginType.TOKEN_VOTING


class GaslessVotingMethods:
    """Plugin-specific retrieval methods of the gasless voting plugin."""

    def __init__(self, graphql: IndexerGraphQLClient):
        self.graphql = graphql

    async def get_member_proposals(
        self,
        plugin_address: str,
        creator: str,
        block_number: int,
        direction: SortDirection,
        sort_by: ProposalSortBy,
    ) -> List[str]:
        """
        Get the ids of the proposals a member created on a gasless plugin.

        Args:
            plugin_address: Gasless plugin address
            creator: Member address
            block_number: Block bound; 0 means no bound
            direction: Sort direction
            sort_by: Sort key

        Returns:
            Proposal ids in the requested order

        Raises:
            QueryExecutionError: If the indexer fails or the response is malformed
        """
        params = {
            "where": {
                "pluginAddress": plugin_address.lower(),
                "creator": creator.lower(),
            },
            "block": {"number": block_number} if block_number else None,
            "direction": SortDirection(direction).value,
            "sortBy": ProposalSortBy(sort_by).value,
        }
        data = await self.graphql.request(query=GASLESS_MEMBER_PROPOSALS_QUERY, params=params)

        ids = []
        for item in data.get("pluginProposals") or []:
            if not isinstance(item, dict) or not isinstance(item.get("id"), str):
                raise QueryExecutionError("Malformed pluginProposals entry in indexer response")
            ids.append(item["id"])

        logger.debug(f"[GaslessVoting] {len(ids)} member proposals for creator={creator}")
        return ids


class GaslessVotingClient(PluginClient):
    plugin_type = PluginType.GASLESS

    def __init__(self, network: str, graphql: IndexerGraphQLClient):
        super().__init__(network, graphql)
        self.methods = GaslessVotingMethods(graphql)


PLUGIN_CLIENT_CLASSES = {
    PluginType.MULTISIG: MultisigClient,
    PluginType.TOKEN_VOTING: TokenVotingClient,
    PluginType.GASLESS: GaslessVotingClient,
}
