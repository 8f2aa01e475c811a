"""
Plugin client resolution.

Clients are memoised per (plugin type, network) at the module level and
persist while the process runs; call close_plugin_clients() on shutdown.
"""
from typing import Dict, Optional, Tuple, Union

from src.config import creator_proposals_settings as settings
from src.utils.logger import logger

from .graphql_client import IndexerGraphQLClient
from .plugin_clients import PLUGIN_CLIENT_CLASSES, PluginClient
from .types import PluginType, SupportedNetwork

_plugin_clients: Dict[Tuple[PluginType, SupportedNetwork], PluginClient] = {}


def _coerce(enum_cls, value):
    if value is None or isinstance(value, enum_cls):
        return value
    try:
        return enum_cls(value)
    except ValueError:
        return None


def resolve_plugin_client(
    plugin_type: Optional[Union[PluginType, str]],
    network: Optional[Union[SupportedNetwork, str]],
) -> Optional[PluginClient]:
    """
    Get or create the plugin client for a plugin type on a network.

    Args:
        plugin_type: Plugin type tag
        network: Network name

    Returns:
        The client, or None when the plugin type is missing or unknown, the
        network is unsupported, or no indexer is configured for it
    """
    ptype = _coerce(PluginType, plugin_type)
    net = _coerce(SupportedNetwork, network)
    if ptype is None or net is None:
        logger.info(f"[ClientResolver] No client for plugin_type={plugin_type}, network={network}")
        return None

    key = (ptype, net)
    client = _plugin_clients.get(key)
    if client is not None:
        return client

    url = settings.get_subgraph_url(net.value, gasless=ptype == PluginType.GASLESS)
    if not url:
        logger.warning(f"[ClientResolver] No indexer configured for {ptype.value} on {net.value}")
        return None

    graphql = IndexerGraphQLClient(url, timeout=settings.INDEXER_TIMEOUT_SECONDS)
    client = PLUGIN_CLIENT_CLASSES[ptype](net.value, graphql)
    _plugin_clients[key] = client
    logger.info(f"[ClientResolver] Created {client!r}")
    return client


async def close_plugin_clients() -> None:
    """Close and forget every memoised client."""
    clients = list(_plugin_clients.values())
    _plugin_clients.clear()
    for client in clients:
        await client.close()
