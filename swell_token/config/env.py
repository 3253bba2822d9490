"""
Environment variable loading and validation for the SWELL token core.

- SOLANA_CLUSTER: mainnet-beta | devnet | testnet (default: mainnet-beta; SOLANA_NETWORK accepted)
- SOLANA_RPC_URL: RPC endpoint (read from .env)
- HELIUS_API_KEY: Helius API key (fallback for RPC URL when SOLANA_RPC_URL is unset)
- SOLANA_COMMITMENT: processed | confirmed | finalized (default: confirmed)
- Loads .env from project root when available.
"""

from __future__ import annotations

import os
from pathlib import Path

# Project root: config is swell_token/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_CLUSTER = "mainnet-beta"
DEVNET_CLUSTER = "devnet"
TESTNET_CLUSTER = "testnet"

CLUSTER_RPC_URLS = {
    MAINNET_CLUSTER: "https://api.mainnet-beta.solana.com",
    DEVNET_CLUSTER: "https://api.devnet.solana.com",
    TESTNET_CLUSTER: "https://api.testnet.solana.com",
}
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"
HELIUS_DEVNET_URL_TEMPLATE = "https://devnet.helius-rpc.com/?api-key={key}"

COMMITMENT_LEVELS = ("processed", "confirmed", "finalized")
DEFAULT_COMMITMENT = "confirmed"


def load_swell_env() -> None:
    """Load .env from project root. Safe to call multiple times; existing env vars win."""
    from dotenv import load_dotenv

    load_dotenv(_ENV_PATH, override=False)


def get_solana_cluster() -> str:
    """
    Return SOLANA_CLUSTER from env: mainnet-beta | devnet | testnet.
    Default: mainnet-beta. "mainnet" is an alias of mainnet-beta.
    """
    load_swell_env()
    raw = (os.getenv("SOLANA_CLUSTER") or os.getenv("SOLANA_NETWORK") or MAINNET_CLUSTER).strip().lower()
    if raw in ("mainnet", MAINNET_CLUSTER):
        return MAINNET_CLUSTER
    if raw in (DEVNET_CLUSTER, TESTNET_CLUSTER):
        return raw
    raise ValueError(f"Unsupported SOLANA_CLUSTER: {raw!r}")


def get_solana_rpc_url(cluster: str | None = None) -> str:
    """
    Resolve Solana RPC URL from env.
    Order: SOLANA_RPC_URL > HELIUS_API_KEY (cluster-specific) > public cluster default.
    """
    load_swell_env()
    url = (os.getenv("SOLANA_RPC_URL") or "").strip()
    if url:
        return url
    cluster = cluster or get_solana_cluster()
    key = (os.getenv("HELIUS_API_KEY") or "").strip()
    if key and cluster in (MAINNET_CLUSTER, DEVNET_CLUSTER):
        if cluster == DEVNET_CLUSTER:
            return HELIUS_DEVNET_URL_TEMPLATE.format(key=key)
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return CLUSTER_RPC_URLS[cluster]


def get_commitment() -> str:
    """Return SOLANA_COMMITMENT from env (default: confirmed). Validation happens in SwellSettings."""
    load_swell_env()
    return (os.getenv("SOLANA_COMMITMENT") or DEFAULT_COMMITMENT).strip().lower()


def get_int_env(name: str, default: int) -> int:
    """Read an integer env var; empty or missing falls back to default."""
    load_swell_env()
    raw = (os.getenv(name) or "").strip()
    if not raw:
        return default
    try:
        return int(raw)
    except ValueError as e:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from e


def get_str_env(name: str, default: str) -> str:
    load_swell_env()
    return (os.getenv(name) or "").strip() or default


def mask_rpc_url(url: str) -> str:
    """Mask API key in URL for logs."""
    if "api-key=" in url:
        return url.split("api-key=")[0] + "api-key=***"
    return url
