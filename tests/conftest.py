"""
Pytest fixtures for transfer indexer tests. Ledger access is faked in memory.
"""

from __future__ import annotations

import pytest

from ledger_fakes import FakeLedger

CONFIG_ENV_VARS = (
    "RPC_URL",
    "SOLANA_RPC_URL",
    "HELIUS_API_KEY",
    "WALLET_ADDRESS",
    "TOKEN_MINT",
    "DAYS_TO_INDEX",
    "RPC_TIMEOUT_SEC",
    "RPC_COMMITMENT",
    "RPC_MAX_RETRIES",
    "SIGNATURES_PAGE_LIMIT",
    "INDEXER_WORKERS",
    "ON_TRANSPORT_ERROR",
)


@pytest.fixture
def ledger():
    """Empty FakeLedger; tests add signatures newest first."""
    return FakeLedger()


@pytest.fixture
def clean_env(tmp_path, monkeypatch):
    """
    Unset every config variable and run from an empty directory so no .env
    in the working tree leaks into settings.
    """
    for name in CONFIG_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return monkeypatch
