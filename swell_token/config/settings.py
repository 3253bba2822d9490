"""
Application settings for the SWELL token core.

Responsibilities:
- Resolve configuration from environment variables and .env files (see env.py).
- Validate settings and provide defaults for optional ones.
- Expose typed settings (cluster, RPC URL, commitment, mint, priority fee,
  compute units, confirmation timeout, explorer URL) to every component.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from solders.pubkey import Pubkey

from swell_token.config.env import (
    CLUSTER_RPC_URLS,
    COMMITMENT_LEVELS,
    get_commitment,
    get_int_env,
    get_solana_cluster,
    get_solana_rpc_url,
    get_str_env,
)

# SPL mint that identifies the SWELL token on mainnet
SWELL_MINT_ADDRESS = "3L3dY6ZQnZ68MKhFCYVZYhimAdWbuAREdsY5fhebcDao"

# Microlamports per compute unit; 0 disables the compute budget instructions
DEFAULT_PRIORITY_FEE_MICROLAMPORTS = 1000
# SPL transfers use ~30k CU; headroom for the create-ATA instruction
DEFAULT_COMPUTE_UNITS = 100_000
TX_CONFIRMATION_TIMEOUT_MS = 60_000
SOLANA_EXPLORER_URL = "https://explorer.solana.com"


@dataclass(frozen=True)
class SwellSettings:
    """Config for the SWELL token core (env or explicit). Pass an instance to every component."""

    cluster: str = field(default_factory=get_solana_cluster)
    rpc_url: str = ""
    """Empty means: resolve from env for this cluster (SOLANA_RPC_URL > HELIUS_API_KEY > public)."""
    commitment: str = field(default_factory=get_commitment)
    mint_address: str = field(default_factory=lambda: get_str_env("SWELL_MINT_ADDRESS", SWELL_MINT_ADDRESS))
    default_priority_fee: int = field(
        default_factory=lambda: get_int_env("SWELL_PRIORITY_FEE_MICROLAMPORTS", DEFAULT_PRIORITY_FEE_MICROLAMPORTS)
    )
    default_compute_units: int = field(default_factory=lambda: get_int_env("SWELL_COMPUTE_UNITS", DEFAULT_COMPUTE_UNITS))
    confirm_timeout_ms: int = field(
        default_factory=lambda: get_int_env("SWELL_CONFIRM_TIMEOUT_MS", TX_CONFIRMATION_TIMEOUT_MS)
    )
    explorer_url: str = field(default_factory=lambda: get_str_env("SOLANA_EXPLORER_URL", SOLANA_EXPLORER_URL))

    def __post_init__(self) -> None:
        if self.cluster not in CLUSTER_RPC_URLS:
            raise ValueError(f"cluster must be one of {sorted(CLUSTER_RPC_URLS)}, got {self.cluster!r}")
        if not self.rpc_url.strip():
            object.__setattr__(self, "rpc_url", get_solana_rpc_url(self.cluster))
        if self.commitment not in COMMITMENT_LEVELS:
            raise ValueError(f"commitment must be one of {COMMITMENT_LEVELS}, got {self.commitment!r}")
        if self.default_priority_fee < 0:
            raise ValueError("default_priority_fee must be >= 0")
        if self.default_compute_units <= 0:
            raise ValueError("default_compute_units must be positive")
        if self.confirm_timeout_ms <= 0:
            raise ValueError("confirm_timeout_ms must be positive")
        try:
            Pubkey.from_string(self.mint_address)
        except ValueError as e:
            raise ValueError(f"Invalid SWELL mint address: {self.mint_address!r}") from e
        object.__setattr__(self, "explorer_url", self.explorer_url.rstrip("/"))

    @property
    def mint(self) -> Pubkey:
        return Pubkey.from_string(self.mint_address)

    @property
    def confirm_timeout_sec(self) -> float:
        return self.confirm_timeout_ms / 1000.0


@lru_cache(maxsize=1)
def get_settings() -> SwellSettings:
    """
    Return the process-wide settings resolved from the environment.

    Components take settings explicitly; this is the default used by the
    facade and the CLI. Call get_settings.cache_clear() after changing env.
    """
    return SwellSettings()


def explorer_tx_url(signature: str, settings: SwellSettings | None = None) -> str:
    """Solana Explorer URL for a transaction signature: {explorer}/tx/{signature}."""
    base = (settings or get_settings()).explorer_url
    return f"{base}/tx/{signature}"


def explorer_address_url(address: str | Pubkey, settings: SwellSettings | None = None) -> str:
    """Solana Explorer URL for an account: {explorer}/address/{address}."""
    base = (settings or get_settings()).explorer_url
    return f"{base}/address/{address}"
