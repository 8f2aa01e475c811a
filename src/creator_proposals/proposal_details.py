"""
Proposal detail resolution.

Maps one proposal id to a fully hydrated proposal record by querying the
plugin's detail entity. Returns None when the indexer has no such entity and
raises QueryExecutionError for transport or protocol faults.
"""
import json
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Optional

from pydantic import ValidationError

from src.utils.logger import logger

from .exceptions import QueryExecutionError
from .plugin_clients import PluginClient
from .queries import GASLESS_PROPOSAL_QUERY, MULTISIG_PROPOSAL_QUERY, TOKEN_VOTING_PROPOSAL_QUERY
from .types import (
    GaslessVotingProposal,
    MultisigProposal,
    PluginType,
    ProposalMetadata,
    ProposalRecord,
    ProposalStatus,
    TokenVotingProposal,
)

# Subgraph ratios are stored in parts per million
RATIO_BASE = 1_000_000


def _to_datetime(value: Any) -> Optional[datetime]:
    if value in (None, ""):
        return None
    return datetime.fromtimestamp(int(value), tz=timezone.utc)


def _to_int(value: Any) -> int:
    if value in (None, ""):
        return 0
    return int(value)


def _parse_metadata(raw: Any) -> ProposalMetadata:
    """Metadata is either inline JSON or an IPFS URI we don't dereference."""
    if isinstance(raw, dict):
        data = raw
    elif isinstance(raw, str):
        try:
            data = json.loads(raw)
        except ValueError:
            return ProposalMetadata()
    else:
        return ProposalMetadata()
    if not isinstance(data, dict):
        return ProposalMetadata()
    return ProposalMetadata(title=data.get("title") or "", summary=data.get("summary") or "")


def _nested(entity: Dict[str, Any], key: str, field: str) -> str:
    value = entity.get(key)
    if value is None:
        return ""
    if not isinstance(value, dict):
        raise TypeError(f"'{key}' must be an object, got {type(value).__name__}")
    return value.get(field) or ""


def _base_fields(entity: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": entity["id"],
        "dao_address": _nested(entity, "dao", "id"),
        "plugin_address": _nested(entity, "plugin", "address"),
        "creator_address": entity.get("creator") or "",
        "creation_date": _to_datetime(entity.get("createdAt")),
        "creation_block_number": _to_int(entity.get("creationBlockNumber")),
        "start_date": _to_datetime(entity.get("startDate")),
        "end_date": _to_datetime(entity.get("endDate")),
        "executed": bool(entity.get("executed")),
        "metadata": _parse_metadata(entity.get("metadata")),
    }


def _timeline_status(fields: Dict[str, Any], now: datetime) -> Optional[ProposalStatus]:
    """Status decided by execution and dates alone, or None if votes decide."""
    if fields["executed"]:
        return ProposalStatus.EXECUTED
    if fields["start_date"] and now < fields["start_date"]:
        return ProposalStatus.PENDING
    return None


def _is_open(fields: Dict[str, Any], now: datetime) -> bool:
    return fields["end_date"] is None or now < fields["end_date"]


def parse_multisig_proposal(entity: Dict[str, Any], now: datetime) -> MultisigProposal:
    fields = _base_fields(entity)
    approvals = _to_int(entity.get("approvals"))
    min_approvals = _to_int(entity.get("minApprovals"))

    status = _timeline_status(fields, now)
    if status is None:
        if min_approvals and approvals >= min_approvals:
            status = ProposalStatus.SUCCEEDED
        elif _is_open(fields, now):
            status = ProposalStatus.ACTIVE
        else:
            status = ProposalStatus.DEFEATED

    return MultisigProposal(**fields, status=status, approvals=approvals, min_approvals=min_approvals)


def parse_token_voting_proposal(entity: Dict[str, Any], now: datetime) -> TokenVotingProposal:
    fields = _base_fields(entity)
    yes = _to_int(entity.get("yes"))
    no = _to_int(entity.get("no"))
    abstain = _to_int(entity.get("abstain"))
    support_threshold = _to_int(entity.get("supportThreshold")) / RATIO_BASE
    min_voting_power = _to_int(entity.get("minVotingPower"))

    status = _timeline_status(fields, now)
    if status is None:
        if _is_open(fields, now):
            status = ProposalStatus.ACTIVE
        else:
            cast = yes + no
            support_met = cast > 0 and yes / cast > support_threshold
            participation_met = yes + no + abstain >= min_voting_power
            status = ProposalStatus.SUCCEEDED if support_met and participation_met else ProposalStatus.DEFEATED

    return TokenVotingProposal(
        **fields,
        status=status,
        yes=yes,
        no=no,
        abstain=abstain,
        total_voting_weight=_to_int(entity.get("totalVotingPower")),
        support_threshold=support_threshold,
        min_voting_power=min_voting_power,
    )


def parse_gasless_proposal(entity: Dict[str, Any], now: datetime) -> GaslessVotingProposal:
    fields = _base_fields(entity)
    # Vocdoni tallies are ordered [yes, no, abstain]
    tally = [_to_int(v) for v in entity.get("tallies") or []]

    status = _timeline_status(fields, now)
    if status is None:
        if _is_open(fields, now):
            status = ProposalStatus.ACTIVE
        elif len(tally) >= 2 and tally[0] > tally[1]:
            status = ProposalStatus.SUCCEEDED
        else:
            status = ProposalStatus.DEFEATED

    return GaslessVotingProposal(
        **fields,
        status=status,
        vochain_proposal_id=entity.get("vochainProposalId"),
        tally=tally,
        census_size=_to_int(entity.get("censusSize")),
        approvers=[a["id"] for a in entity.get("approvers") or [] if isinstance(a, dict) and a.get("id")],
    )


DETAIL_QUERIES: Dict[PluginType, tuple] = {
    PluginType.MULTISIG: (MULTISIG_PROPOSAL_QUERY, "multisigProposal", parse_multisig_proposal),
    PluginType.TOKEN_VOTING: (TOKEN_VOTING_PROPOSAL_QUERY, "tokenVotingProposal", parse_token_voting_proposal),
    PluginType.GASLESS: (GASLESS_PROPOSAL_QUERY, "pluginProposal", parse_gasless_proposal),
}


async def get_proposal(
    client: PluginClient,
    proposal_id: str,
    network: str,
    now: Optional[Callable[[], datetime]] = None,
) -> Optional[ProposalRecord]:
    """
    Resolve one proposal id into a proposal record.

    Args:
        client: Plugin client the id came from
        proposal_id: Proposal id
        network: Network the client points at
        now: Clock used for status computation (defaults to UTC now)

    Returns:
        The proposal record, or None if the indexer has no such proposal

    Raises:
        QueryExecutionError: If the indexer fails or returns an invalid entity
    """
    document, entity_key, parse = DETAIL_QUERIES[client.plugin_type]
    data = await client.graphql.request(query=document, params={"proposalId": proposal_id})

    entity = data.get(entity_key)
    if entity is None:
        logger.info(f"[ProposalDetails] {entity_key} {proposal_id} not found on {network}")
        return None
    if not isinstance(entity, dict):
        raise QueryExecutionError(f"Invalid {entity_key} entity for {proposal_id}: not an object")

    clock = now or (lambda: datetime.now(timezone.utc))
    try:
        return parse(entity, clock())
    except (KeyError, TypeError, ValueError, OverflowError, OSError, ValidationError) as e:
        logger.error(f"[ProposalDetails] Invalid {entity_key} {proposal_id}: {e}")
        raise QueryExecutionError(f"Invalid {entity_key} entity for {proposal_id}: {e}") from e
