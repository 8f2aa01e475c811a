"""
Creator proposals service backend.

Aggregates the governance proposals an address created on a DAO plugin
(multisig, token voting or gasless voting) into one newest-first list.
"""

__all__ = [
]
