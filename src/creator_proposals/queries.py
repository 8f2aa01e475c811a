"""GraphQL documents sent to the governance indexers."""

TOKEN_VOTING_PROPOSALS_QUERY = """
query TokenVotingProposals(
  $where: TokenVotingProposal_filter!
  $block: Block_height
  $direction: OrderDirection!
  $sortBy: TokenVotingProposal_orderBy!
) {
  tokenVotingProposals(
    where: $where
    block: $block
    orderDirection: $direction
    orderBy: $sortBy
  ) {
    id
  }
}
"""

MULTISIG_PROPOSALS_QUERY = """
query MultisigProposals(
  $where: MultisigProposal_filter!
  $block: Block_height
  $direction: OrderDirection!
  $sortBy: MultisigProposal_orderBy!
) {
  multisigProposals(
    where: $where
    block: $block
    orderDirection: $direction
    orderBy: $sortBy
  ) {
    id
  }
}
"""

# Gasless plugin index, used by the member-proposal method
GASLESS_MEMBER_PROPOSALS_QUERY = """
query PluginProposals(
  $where: PluginProposal_filter!
  $block: Block_height
  $direction: OrderDirection!
  $sortBy: PluginProposal_orderBy!
) {
  pluginProposals(
    where: $where
    block: $block
    orderDirection: $direction
    orderBy: $sortBy
  ) {
    id
  }
}
"""

# ==================
# Detail queries
# ==================

MULTISIG_PROPOSAL_QUERY = """
query MultisigProposal($proposalId: ID!) {
  multisigProposal(id: $proposalId) {
    id
    dao { id }
    plugin { address }
    creator
    metadata
    createdAt
    creationBlockNumber
    startDate
    endDate
    executed
    approvals
    minApprovals
  }
}
"""

TOKEN_VOTING_PROPOSAL_QUERY = """
query TokenVotingProposal($proposalId: ID!) {
  tokenVotingProposal(id: $proposalId) {
    id
    dao { id }
    plugin { address }
    creator
    metadata
    createdAt
    creationBlockNumber
    startDate
    endDate
    executed
    yes
    no
    abstain
    totalVotingPower
    supportThreshold
    minVotingPower
  }
}
"""

GASLESS_PROPOSAL_QUERY = """
query PluginProposal($proposalId: ID!) {
  pluginProposal(id: $proposalId) {
    id
    dao { id }
    plugin { address }
    creator
    metadata
    createdAt
    creationBlockNumber
    startDate
    endDate
    executed
    vochainProposalId
    tallies
    censusSize
    approvers { id }
  }
}
"""
