"""Creator proposals: every proposal an address created on a DAO governance plugin.

Supports the three Ring DAO plugin types:
- Multisig (indexer query)
- Token voting (indexer query)
- Gasless voting (plugin member-proposal method)
"""
from .cache import CreatorProposalsCache, QueryState, fetch_creator_proposals
from .client_resolver import close_plugin_clients, resolve_plugin_client
from .exceptions import ClientUnavailableError, CreatorProposalsError, QueryExecutionError
from .orchestrator import aggregate, select_identifier_strategy
from .types import PluginType, ProposalCreatorQuery, SupportedNetwork

__all__ = [
    "aggregate",
    "select_identifier_strategy",
    "fetch_creator_proposals",
    "CreatorProposalsCache",
    "QueryState",
    "resolve_plugin_client",
    "close_plugin_clients",
    "ClientUnavailableError",
    "CreatorProposalsError",
    "QueryExecutionError",
    "PluginType",
    "ProposalCreatorQuery",
    "SupportedNetwork",
]
