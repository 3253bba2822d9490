"""
Local keypair signer for the CLI and scripts.

Loads a keypair from a base58 secret or a JSON array of 64 bytes (solana-keygen id.json format).
"""

from __future__ import annotations

import json
import os

import base58
from solders.keypair import Keypair
from solders.pubkey import Pubkey
from solders.transaction import Transaction

from swell_token.swell_logging import get_logger

logger = get_logger(__name__)

SENDER_KEY_ENV = "SWELL_SENDER_PRIVATE_KEY"


def load_keypair(private_key: str) -> Keypair:
    """Load Keypair from a base58 string or JSON array of 64 bytes."""
    raw = private_key.strip()
    if raw.startswith("["):
        try:
            arr = json.loads(raw)
            if len(arr) >= 64:
                return Keypair.from_bytes(bytes(arr[:64]))
        except (json.JSONDecodeError, TypeError, ValueError):
            pass
    try:
        secret = base58.b58decode(raw)
        return Keypair.from_bytes(secret)
    except Exception as e:
        logger.warning("swell_keypair_load_failed", error=type(e).__name__)
        raise ValueError("Invalid private key: expected base58 secret or JSON array of 64 bytes") from e


def load_keypair_from_env(name: str = SENDER_KEY_ENV) -> Keypair:
    raw = (os.getenv(name) or "").strip()
    if not raw:
        raise ValueError(f"{name} must be set to sign transfers")
    return load_keypair(raw)


class KeypairSigner:
    """WalletSigner backed by an in-process Keypair."""

    def __init__(self, keypair: Keypair) -> None:
        self._keypair = keypair

    @property
    def public_key(self) -> Pubkey:
        return self._keypair.pubkey()

    def sign_transaction(self, transaction: Transaction) -> Transaction:
        transaction.sign([self._keypair], transaction.message.recent_blockhash)
        return transaction
