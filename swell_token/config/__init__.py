"""
Configuration management for the SWELL token core.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for cluster, RPC, commitment,
fee and timeout settings.
"""

from swell_token.config.settings import (  # noqa: F401
    SwellSettings,
    explorer_address_url,
    explorer_tx_url,
    get_settings,
)

__all__ = ["SwellSettings", "explorer_address_url", "explorer_tx_url", "get_settings"]
