"""Tests for proposal detail resolution and status computation."""
import asyncio
from datetime import datetime, timezone

import pytest

from src.creator_proposals.exceptions import QueryExecutionError
from src.creator_proposals.proposal_details import get_proposal
from src.creator_proposals.queries import GASLESS_PROPOSAL_QUERY, MULTISIG_PROPOSAL_QUERY
from src.creator_proposals.types import (
    GaslessVotingProposal,
    MultisigProposal,
    ProposalStatus,
    TokenVotingProposal,
)

START = 1714521600  # 2024-05-01
END = 1715126400    # 2024-05-08
DURING = datetime(2024, 5, 3, tzinfo=timezone.utc)
AFTER = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _entity(**overrides):
    entity = {
        "id": "0xplugin_0x0",
        "dao": {"id": "0xdao"},
        "plugin": {"address": "0xplugin"},
        "creator": "0xcreator",
        "metadata": '{"title": "Fund the grants program", "summary": "Q3 budget"}',
        "createdAt": str(START),
        "creationBlockNumber": "5000000",
        "startDate": str(START),
        "endDate": str(END),
        "executed": False,
    }
    entity.update(overrides)
    return entity


def _resolve(client, proposal_id="0xplugin_0x0", now=DURING):
    return asyncio.run(get_proposal(client, proposal_id, "sepolia", now=lambda: now))


class TestMultisigDetails:
    """Test multisig detail parsing."""

    def test_parses_record(self, multisig_client):
        multisig_client.graphql.request.return_value = {
            "multisigProposal": _entity(approvals=1, minApprovals=3)
        }

        record = _resolve(multisig_client)

        assert isinstance(record, MultisigProposal)
        assert record.kind == "multisig"
        assert record.status == ProposalStatus.ACTIVE
        assert record.metadata.title == "Fund the grants program"
        assert record.creation_date == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert record.creation_block_number == 5000000
        kwargs = multisig_client.graphql.request.call_args.kwargs
        assert kwargs["query"] == MULTISIG_PROPOSAL_QUERY
        assert kwargs["params"] == {"proposalId": "0xplugin_0x0"}

    def test_enough_approvals_succeeds(self, multisig_client):
        multisig_client.graphql.request.return_value = {
            "multisigProposal": _entity(approvals=3, minApprovals=3)
        }
        assert _resolve(multisig_client).status == ProposalStatus.SUCCEEDED

    def test_expired_without_approvals_defeated(self, multisig_client):
        multisig_client.graphql.request.return_value = {
            "multisigProposal": _entity(approvals=1, minApprovals=3)
        }
        assert _resolve(multisig_client, now=AFTER).status == ProposalStatus.DEFEATED

    def test_executed(self, multisig_client):
        multisig_client.graphql.request.return_value = {
            "multisigProposal": _entity(executed=True, approvals=3, minApprovals=3)
        }
        assert _resolve(multisig_client).status == ProposalStatus.EXECUTED

    def test_ipfs_metadata_left_empty(self, multisig_client):
        """IPFS URIs are not dereferenced."""
        multisig_client.graphql.request.return_value = {
            "multisigProposal": _entity(metadata="ipfs://QmHash")
        }
        assert _resolve(multisig_client).metadata.title == ""


class TestTokenVotingDetails:
    """Test token voting detail parsing."""

    def test_support_met_after_end(self, token_voting_client):
        token_voting_client.graphql.request.return_value = {
            "tokenVotingProposal": _entity(
                yes="700", no="300", abstain="0",
                totalVotingPower="2000", supportThreshold="500000", minVotingPower="500",
            )
        }

        record = _resolve(token_voting_client, now=AFTER)

        assert isinstance(record, TokenVotingProposal)
        assert record.status == ProposalStatus.SUCCEEDED
        assert record.support_threshold == 0.5
        assert record.total_voting_weight == 2000

    def test_participation_not_met(self, token_voting_client):
        token_voting_client.graphql.request.return_value = {
            "tokenVotingProposal": _entity(
                yes="70", no="30", abstain="0",
                supportThreshold="500000", minVotingPower="500",
            )
        }
        assert _resolve(token_voting_client, now=AFTER).status == ProposalStatus.DEFEATED

    def test_pending_before_start(self, token_voting_client):
        token_voting_client.graphql.request.return_value = {"tokenVotingProposal": _entity()}
        before = datetime(2024, 4, 1, tzinfo=timezone.utc)
        assert _resolve(token_voting_client, now=before).status == ProposalStatus.PENDING


class TestGaslessDetails:
    """Test gasless detail parsing."""

    def test_tally_and_approvers(self, gasless_client):
        gasless_client.graphql.request.return_value = {
            "pluginProposal": _entity(
                vochainProposalId="0xvochain",
                tallies=["10", "4", "1"],
                censusSize="50",
                approvers=[{"id": "0xa1"}, {"id": "0xa2"}],
            )
        }

        record = _resolve(gasless_client, now=AFTER)

        assert isinstance(record, GaslessVotingProposal)
        assert record.tally == [10, 4, 1]
        assert record.approvers == ["0xa1", "0xa2"]
        assert record.status == ProposalStatus.SUCCEEDED
        assert gasless_client.graphql.request.call_args.kwargs["query"] == GASLESS_PROPOSAL_QUERY


class TestAbsenceAndFaults:
    """Test the not-found vs fault contract."""

    def test_not_found_is_none(self, multisig_client):
        multisig_client.graphql.request.return_value = {"multisigProposal": None}
        assert _resolve(multisig_client) is None

    def test_invalid_entity_raises(self, multisig_client):
        """An entity missing its creation time is a protocol fault."""
        multisig_client.graphql.request.return_value = {
            "multisigProposal": _entity(createdAt=None)
        }
        with pytest.raises(QueryExecutionError):
            _resolve(multisig_client)

    @pytest.mark.parametrize(
        "overrides",
        [
            {"dao": "0xdao"},
            {"plugin": "0xplugin"},
            {"createdAt": "99999999999999999999"},
        ],
    )
    def test_malformed_nested_fields_raise(self, multisig_client, overrides):
        """Scalar dao/plugin or an out-of-range timestamp is a protocol fault."""
        multisig_client.graphql.request.return_value = {"multisigProposal": _entity(**overrides)}
        with pytest.raises(QueryExecutionError):
            _resolve(multisig_client)

    def test_non_object_entity_raises(self, multisig_client):
        multisig_client.graphql.request.return_value = {"multisigProposal": "m1"}
        with pytest.raises(QueryExecutionError):
            _resolve(multisig_client)

    def test_transport_fault_raises(self, multisig_client):
        multisig_client.graphql.request.side_effect = QueryExecutionError("down")
        with pytest.raises(QueryExecutionError):
            _resolve(multisig_client)
