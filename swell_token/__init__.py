"""
SWELL token: wallet-agnostic SPL token operations on Solana.

Resolves associated token accounts, reads balances with chain-derived decimals,
and runs the validate -> build -> simulate -> sign -> submit -> confirm pipeline
for transfers. Wallet key custody stays with the caller: the core only needs a
signer exposing a public key and a transaction-signing function.
"""

__version__ = "0.1.0"
