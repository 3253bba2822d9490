"""
Settings resolution from env and validation.
"""

from __future__ import annotations

import pytest

from swell_token.config.env import get_solana_rpc_url, mask_rpc_url
from swell_token.config.settings import SwellSettings, explorer_address_url, explorer_tx_url


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "SOLANA_CLUSTER",
        "SOLANA_NETWORK",
        "SOLANA_RPC_URL",
        "HELIUS_API_KEY",
        "SOLANA_COMMITMENT",
        "SWELL_MINT_ADDRESS",
        "SWELL_PRIORITY_FEE_MICROLAMPORTS",
        "SWELL_COMPUTE_UNITS",
        "SWELL_CONFIRM_TIMEOUT_MS",
        "SOLANA_EXPLORER_URL",
    ):
        monkeypatch.delenv(name, raising=False)


def test_defaults():
    s = SwellSettings()
    assert s.cluster == "mainnet-beta"
    assert s.rpc_url == "https://api.mainnet-beta.solana.com"
    assert s.commitment == "confirmed"
    assert s.mint_address == "3L3dY6ZQnZ68MKhFCYVZYhimAdWbuAREdsY5fhebcDao"
    assert s.default_priority_fee == 1000
    assert s.default_compute_units == 100_000
    assert s.confirm_timeout_ms == 60_000
    assert s.confirm_timeout_sec == 60.0


def test_rpc_url_env_override(monkeypatch):
    monkeypatch.setenv("SOLANA_RPC_URL", "https://rpc.example.com")
    assert SwellSettings().rpc_url == "https://rpc.example.com"


def test_helius_fallback_per_cluster(monkeypatch):
    monkeypatch.setenv("HELIUS_API_KEY", "secret")
    assert get_solana_rpc_url("devnet") == "https://devnet.helius-rpc.com/?api-key=secret"
    assert get_solana_rpc_url("mainnet-beta") == "https://mainnet.helius-rpc.com/?api-key=secret"
    assert mask_rpc_url(get_solana_rpc_url("devnet")) == "https://devnet.helius-rpc.com/?api-key=***"


def test_cluster_alias_and_devnet_default_url(monkeypatch):
    monkeypatch.setenv("SOLANA_CLUSTER", "mainnet")
    assert SwellSettings().cluster == "mainnet-beta"
    monkeypatch.setenv("SOLANA_CLUSTER", "devnet")
    assert SwellSettings().rpc_url == "https://api.devnet.solana.com"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"commitment": "recent"},
        {"default_priority_fee": -1},
        {"default_compute_units": 0},
        {"confirm_timeout_ms": 0},
        {"mint_address": "not-a-mint"},
        {"cluster": "localnet"},
    ],
)
def test_invalid_settings_rejected(kwargs):
    with pytest.raises(ValueError):
        SwellSettings(**kwargs)


def test_invalid_env_integer(monkeypatch):
    monkeypatch.setenv("SWELL_COMPUTE_UNITS", "lots")
    with pytest.raises(ValueError, match="SWELL_COMPUTE_UNITS"):
        SwellSettings()


def test_explorer_urls():
    s = SwellSettings(explorer_url="https://explorer.solana.com/")
    assert explorer_tx_url("abc", s) == "https://explorer.solana.com/tx/abc"
    assert explorer_address_url("xyz", s) == "https://explorer.solana.com/address/xyz"
