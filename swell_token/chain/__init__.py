"""
On-chain SWELL operations.

Connection provider, mint decimals cache, associated token account resolver,
balance reader and the transfer orchestrator. Every component receives its
collaborators explicitly; nothing here holds hidden global state.
"""

from swell_token.chain.account import TokenAccountResolver
from swell_token.chain.balance import BalanceReader
from swell_token.chain.connection import BlockhashInfo, RpcConnectionProvider
from swell_token.chain.mint import MintMetadataCache
from swell_token.chain.transfer import TransferOrchestrator

__all__ = [
    "BalanceReader",
    "BlockhashInfo",
    "MintMetadataCache",
    "RpcConnectionProvider",
    "TokenAccountResolver",
    "TransferOrchestrator",
]
