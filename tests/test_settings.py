"""
Settings from env and overrides; validation before any RPC call.
"""

from __future__ import annotations

import pytest

from ledger_fakes import COUNTERPARTY, WALLET
from transfer_indexer.config import get_settings
from transfer_indexer.config.env import MAINNET_RPC_URL, USDC_MINT_ADDRESS, mask_rpc_url
from transfer_indexer.core.exceptions import ConfigurationError


def test_defaults_with_only_wallet(clean_env):
    clean_env.setenv("WALLET_ADDRESS", WALLET)
    s = get_settings()
    assert s.wallet_address == WALLET
    assert s.token_mint == USDC_MINT_ADDRESS
    assert s.days_to_index == 1
    assert s.rpc_url == MAINNET_RPC_URL
    assert s.page_limit == 1000
    assert s.workers == 1
    assert s.max_retries == 0
    assert s.on_transport_error == "abort"
    assert s.commitment == "confirmed"


def test_rpc_url_resolution_order(clean_env):
    clean_env.setenv("WALLET_ADDRESS", WALLET)
    clean_env.setenv("HELIUS_API_KEY", "secret")
    s = get_settings()
    assert s.rpc_url == "https://mainnet.helius-rpc.com/?api-key=secret"
    assert s.to_dict()["rpc_url"] == "https://mainnet.helius-rpc.com/?api-key=***"

    clean_env.setenv("SOLANA_RPC_URL", "https://solana.example")
    assert get_settings().rpc_url == "https://solana.example"

    clean_env.setenv("RPC_URL", "https://rpc.example")
    assert get_settings().rpc_url == "https://rpc.example"


def test_env_values_parsed(clean_env):
    clean_env.setenv("WALLET_ADDRESS", f"  {WALLET} ")
    clean_env.setenv("TOKEN_MINT", COUNTERPARTY)
    clean_env.setenv("DAYS_TO_INDEX", "7")
    clean_env.setenv("INDEXER_WORKERS", "4")
    clean_env.setenv("ON_TRANSPORT_ERROR", "SKIP")
    clean_env.setenv("RPC_TIMEOUT_SEC", "2.5")
    s = get_settings()
    assert s.wallet_address == WALLET
    assert s.token_mint == COUNTERPARTY
    assert s.days_to_index == 7
    assert s.workers == 4
    assert s.on_transport_error == "skip"
    assert s.request_timeout_sec == 2.5


def test_overrides_win_and_none_is_ignored(clean_env):
    clean_env.setenv("WALLET_ADDRESS", WALLET)
    clean_env.setenv("DAYS_TO_INDEX", "3")
    s = get_settings(days_to_index=10, wallet_address=None, rpc_url="https://override.example")
    assert s.days_to_index == 10
    assert s.wallet_address == WALLET
    assert s.rpc_url == "https://override.example"


def test_missing_wallet(clean_env):
    with pytest.raises(ConfigurationError, match="WALLET_ADDRESS"):
        get_settings()


@pytest.mark.parametrize(
    "overrides, message",
    [
        ({"wallet_address": "not-a-pubkey"}, "Invalid wallet address"),
        ({"token_mint": "xyz"}, "Invalid token mint"),
        ({"days_to_index": 0}, "DAYS_TO_INDEX"),
        ({"days_to_index": -3}, "DAYS_TO_INDEX"),
        ({"days_to_index": "abc"}, "DAYS_TO_INDEX"),
        ({"page_limit": 1001}, "SIGNATURES_PAGE_LIMIT"),
        ({"workers": 0}, "INDEXER_WORKERS"),
        ({"on_transport_error": "retry"}, "ON_TRANSPORT_ERROR"),
        ({"commitment": "latest"}, "RPC_COMMITMENT"),
        ({"request_timeout_sec": 0}, "RPC_TIMEOUT_SEC"),
    ],
)
def test_invalid_values_rejected(clean_env, overrides, message):
    clean_env.setenv("WALLET_ADDRESS", WALLET)
    with pytest.raises(ConfigurationError, match=message):
        get_settings(**overrides)


def test_invalid_days_from_env(clean_env):
    clean_env.setenv("WALLET_ADDRESS", WALLET)
    clean_env.setenv("DAYS_TO_INDEX", "one")
    with pytest.raises(ConfigurationError, match="DAYS_TO_INDEX"):
        get_settings()


def test_unknown_override(clean_env):
    clean_env.setenv("WALLET_ADDRESS", WALLET)
    with pytest.raises(ConfigurationError, match="Unknown settings"):
        get_settings(wallet=WALLET)


def test_dotenv_in_working_directory_is_loaded(clean_env, tmp_path):
    # register the vars with monkeypatch so values loaded from .env are removed afterwards
    for name in ("WALLET_ADDRESS", "DAYS_TO_INDEX"):
        clean_env.setenv(name, "")
        clean_env.delenv(name)
    (tmp_path / ".env").write_text(f"WALLET_ADDRESS={WALLET}\nDAYS_TO_INDEX=2\n")
    s = get_settings()
    assert s.wallet_address == WALLET
    assert s.days_to_index == 2


def test_mask_rpc_url_without_key():
    assert mask_rpc_url(MAINNET_RPC_URL) == MAINNET_RPC_URL
