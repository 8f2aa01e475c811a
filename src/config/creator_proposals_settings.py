import os
from typing import Optional

from dotenv import load_dotenv

load_dotenv()  # Load environment variables from .env file

# --------------------------------------------------
# Indexer (subgraph) Configuration
# --------------------------------------------------
# Base URL hosting the per-network subgraphs; per-network overrides below win.
SUBGRAPH_BASE_URL = (
    os.environ.get("SUBGRAPH_BASE_URL")
    or "https://subgraph.satsuma-prod.com/qHR2wGfc5RLi6/aragon"
).rstrip("/")

# Subgraph names for the OSx (multisig + token voting) and gasless indexes
SUBGRAPH_NAMES = {
    "ethereum": "osx-mainnet",
    "sepolia": "osx-sepolia",
    "polygon": "osx-polygon",
    "arbitrum": "osx-arbitrum",
    "base": "osx-baseMainnet",
    "zksync": "osx-zksyncMainnet",
    "zksyncSepolia": "osx-zksyncSepolia",
}

GASLESS_SUBGRAPH_NAMES = {
    "ethereum": "gasless-voting-mainnet",
    "sepolia": "gasless-voting-sepolia",
    "polygon": "gasless-voting-polygon",
    "arbitrum": "gasless-voting-arbitrum",
    "base": "gasless-voting-baseMainnet",
}

SUBGRAPH_VERSION = os.environ.get("SUBGRAPH_VERSION", "version/latest")

# --------------------------------------------------
# Transport & Cache Configuration
# --------------------------------------------------
INDEXER_TIMEOUT_SECONDS = float(os.environ.get("INDEXER_TIMEOUT_SECONDS", "30"))
CREATOR_PROPOSALS_CACHE_TTL_SECONDS = float(
    os.environ.get("CREATOR_PROPOSALS_CACHE_TTL_SECONDS", "60")
)
CREATOR_PROPOSALS_CACHE_MAX_ENTRIES = int(
    os.environ.get("CREATOR_PROPOSALS_CACHE_MAX_ENTRIES", "256")
)

# --------------------------------------------------
# HTTP Server Configuration
# --------------------------------------------------
ALLOWED_ORIGINS = os.environ.get("ALLOWED_ORIGINS", "*")


def _env_key(network: str) -> str:
    # zksyncSepolia -> ZKSYNC_SEPOLIA
    out = []
    for ch in network:
        if ch.isupper():
            out.append("_")
        out.append(ch.upper())
    return "".join(out)


def get_subgraph_url(network: str, gasless: bool = False) -> Optional[str]:
    """
    Resolve the indexer URL for a network.

    Args:
        network: Network name (e.g. "ethereum", "sepolia")
        gasless: True for the gasless voting index, False for the OSx index

    Returns:
        The subgraph URL, or None when the network has no configured index
    """
    prefix = "GASLESS_SUBGRAPH_URL_" if gasless else "SUBGRAPH_URL_"
    override = os.environ.get(prefix + _env_key(network))
    if override:
        return override

    names = GASLESS_SUBGRAPH_NAMES if gasless else SUBGRAPH_NAMES
    name = names.get(network)
    if not name:
        return None
    return f"{SUBGRAPH_BASE_URL}/{name}/{SUBGRAPH_VERSION}/api"
