"""Shared fixtures for creator proposals tests."""
from unittest.mock import AsyncMock, MagicMock

import pytest

from src.creator_proposals.plugin_clients import (
    GaslessVotingClient,
    MultisigClient,
    TokenVotingClient,
)

from .factories import mock_graphql


@pytest.fixture
def multisig_client():
    return MultisigClient("sepolia", mock_graphql())


@pytest.fixture
def token_voting_client():
    return TokenVotingClient("sepolia", mock_graphql())


@pytest.fixture
def gasless_client():
    client = GaslessVotingClient("sepolia", mock_graphql())
    client.methods = MagicMock()
    client.methods.get_member_proposals = AsyncMock(return_value=[])
    return client
