"""
Environment variable loading for the transfer indexer.

- RPC_URL / SOLANA_RPC_URL: RPC endpoint (read from .env)
- HELIUS_API_KEY: Helius API key (fallback for RPC URL)
- WALLET_ADDRESS: tracked wallet (required)
- TOKEN_MINT: tracked mint (default: USDC on mainnet)
- DAYS_TO_INDEX: size of the time window in days (default: 1)
- Loads .env from project root and current directory when available.
"""

from __future__ import annotations

import os
from pathlib import Path

from dotenv import find_dotenv, load_dotenv

# Project root: config is transfer_indexer/config/, root is 2 levels up
_CONFIG_DIR = Path(__file__).resolve().parent
_PACKAGE_DIR = _CONFIG_DIR.parent
_ROOT = _PACKAGE_DIR.parent
_ENV_PATH = _ROOT / ".env"

MAINNET_RPC_URL = "https://api.mainnet-beta.solana.com"
HELIUS_MAINNET_URL_TEMPLATE = "https://mainnet.helius-rpc.com/?api-key={key}"

# USDC mint address on Solana mainnet
USDC_MINT_ADDRESS = "EPjFWdd5AufqSSqeM2qN1xzybapC8G4wEGGkZwyTDt1v"

DEFAULT_DAYS_TO_INDEX = "1"
DEFAULT_RPC_TIMEOUT_SEC = "30"
DEFAULT_RPC_COMMITMENT = "confirmed"
DEFAULT_RPC_MAX_RETRIES = "0"
DEFAULT_SIGNATURES_PAGE_LIMIT = "1000"
DEFAULT_WORKERS = "1"
DEFAULT_ON_TRANSPORT_ERROR = "abort"


def load_indexer_env() -> None:
    """Load .env from project root, then from the working directory. Safe to call multiple times."""
    load_dotenv(_ENV_PATH)
    load_dotenv(find_dotenv(usecwd=True))


def _env(name: str, default: str = "") -> str:
    return (os.getenv(name) or default).strip()


def get_rpc_url() -> str:
    """
    Resolve Solana RPC URL from env.
    Order: RPC_URL > SOLANA_RPC_URL > HELIUS_API_KEY > public mainnet endpoint.
    """
    load_indexer_env()
    url = _env("RPC_URL") or _env("SOLANA_RPC_URL")
    if url:
        return url
    key = _env("HELIUS_API_KEY")
    if key:
        return HELIUS_MAINNET_URL_TEMPLATE.format(key=key)
    return MAINNET_RPC_URL


def get_wallet_address() -> str:
    """Return WALLET_ADDRESS from env; empty string when unset (validated later)."""
    load_indexer_env()
    return _env("WALLET_ADDRESS")


def get_token_mint() -> str:
    """Return TOKEN_MINT from env, or the USDC mainnet mint."""
    load_indexer_env()
    return _env("TOKEN_MINT") or USDC_MINT_ADDRESS


def get_days_to_index() -> str:
    """Return DAYS_TO_INDEX raw string; parsed and validated by settings."""
    load_indexer_env()
    return _env("DAYS_TO_INDEX", DEFAULT_DAYS_TO_INDEX)


def get_tuning_env() -> dict[str, str]:
    """Raw strings for RPC and engine tuning knobs."""
    load_indexer_env()
    return {
        "request_timeout_sec": _env("RPC_TIMEOUT_SEC", DEFAULT_RPC_TIMEOUT_SEC),
        "commitment": _env("RPC_COMMITMENT", DEFAULT_RPC_COMMITMENT).lower(),
        "max_retries": _env("RPC_MAX_RETRIES", DEFAULT_RPC_MAX_RETRIES),
        "page_limit": _env("SIGNATURES_PAGE_LIMIT", DEFAULT_SIGNATURES_PAGE_LIMIT),
        "workers": _env("INDEXER_WORKERS", DEFAULT_WORKERS),
        "on_transport_error": _env("ON_TRANSPORT_ERROR", DEFAULT_ON_TRANSPORT_ERROR).lower(),
    }


def mask_rpc_url(rpc: str) -> str:
    """Mask API key in URL if present."""
    if "api-key=" in rpc:
        return rpc.split("api-key=")[0] + "api-key=***"
    return rpc
