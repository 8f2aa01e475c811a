"""
Pydantic schemas and enums for creator proposal aggregation.
"""
from datetime import datetime
from enum import Enum
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


# ==================
# Enums
# ==================

class PluginType(str, Enum):
    """Governance plugin variants installed on a DAO."""
    MULTISIG = "multisig.plugin.ring-dao.eth"
    TOKEN_VOTING = "token-voting.plugin.ring-dao.eth"
    GASLESS = "vocdoni-gasless-voting-poc-vanilla-erc20.plugin.dao.eth"


GASLESS_PLUGIN_NAME = PluginType.GASLESS.value


class SupportedNetwork(str, Enum):
    """Networks a plugin client can be resolved for."""
    ETHEREUM = "ethereum"
    SEPOLIA = "sepolia"
    POLYGON = "polygon"
    ARBITRUM = "arbitrum"
    BASE = "base"
    ZKSYNC = "zksync"
    ZKSYNC_SEPOLIA = "zksyncSepolia"
    LOCAL = "local"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class ProposalSortBy(str, Enum):
    CREATED_AT = "createdAt"


class ProposalStatus(str, Enum):
    PENDING = "Pending"
    ACTIVE = "Active"
    SUCCEEDED = "Succeeded"
    EXECUTED = "Executed"
    DEFEATED = "Defeated"


# ==================
# Query Input
# ==================

class ProposalCreatorQuery(BaseModel):
    """Filter for the proposals created by one address on one plugin."""
    model_config = ConfigDict(frozen=True)

    plugin_address: str = Field(..., min_length=1, description="Plugin contract address")
    creator_address: str = Field(..., min_length=1, description="Proposal creator address")
    plugin_type: PluginType
    block_number: Optional[int] = Field(
        None,
        ge=0,
        description="Upper block bound for historical queries. None means latest.",
    )

    @field_validator("plugin_address", "creator_address")
    @classmethod
    def _strip(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("address must not be blank")
        return value


# ==================
# Proposal Records
# ==================

class ProposalMetadata(BaseModel):
    title: str = ""
    summary: str = ""


class ProposalBase(BaseModel):
    """Fields shared by every proposal kind."""
    id: str
    dao_address: str
    plugin_address: str
    creator_address: str
    creation_date: datetime
    creation_block_number: int = 0
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    executed: bool = False
    status: ProposalStatus
    metadata: ProposalMetadata = Field(default_factory=ProposalMetadata)


class MultisigProposal(ProposalBase):
    kind: Literal["multisig"] = "multisig"
    approvals: int = 0
    min_approvals: int = 0


class TokenVotingProposal(ProposalBase):
    kind: Literal["tokenVoting"] = "tokenVoting"
    yes: int = 0
    no: int = 0
    abstain: int = 0
    total_voting_weight: int = 0
    support_threshold: float = 0.0
    min_voting_power: int = 0


class GaslessVotingProposal(ProposalBase):
    kind: Literal["gasless"] = "gasless"
    vochain_proposal_id: Optional[str] = None
    tally: List[int] = Field(default_factory=list)
    census_size: int = 0
    approvers: List[str] = Field(default_factory=list)


ProposalRecord = Annotated[
    Union[MultisigProposal, TokenVotingProposal, GaslessVotingProposal],
    Field(discriminator="kind"),
]

AggregationResult = List[ProposalRecord]


class CreatorProposalsResponse(BaseModel):
    """Response body of the creator proposals endpoint."""
    proposals: List[ProposalRecord]
    count: int
