"""
Application settings.

Builds a frozen IndexerSettings from environment variables (see config.env),
applies explicit overrides (CLI flags), and validates everything up front so
a bad wallet, mint or day count fails before any RPC call is made.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from transfer_indexer.config import env
from transfer_indexer.core.exceptions import ConfigurationError
from transfer_indexer.utils.wallet_utils import is_valid_address

VALID_COMMITMENTS = ("processed", "confirmed", "finalized")
TRANSPORT_ERROR_MODES = ("abort", "skip")
MAX_SIGNATURES_PAGE_LIMIT = 1000


@dataclass(frozen=True)
class IndexerSettings:
    """Validated configuration for one indexing run."""

    rpc_url: str
    wallet_address: str
    token_mint: str
    days_to_index: int
    request_timeout_sec: float = 30.0
    commitment: str = "confirmed"
    max_retries: int = 0
    page_limit: int = MAX_SIGNATURES_PAGE_LIMIT
    workers: int = 1
    on_transport_error: str = "abort"

    def validate(self) -> "IndexerSettings":
        """Raise ConfigurationError on the first invalid field; return self otherwise."""
        if not self.rpc_url.strip():
            raise ConfigurationError("RPC_URL must be non-empty")
        if not self.wallet_address:
            raise ConfigurationError("WALLET_ADDRESS must be set")
        if not is_valid_address(self.wallet_address):
            raise ConfigurationError(f"Invalid wallet address: {self.wallet_address!r}")
        if not self.token_mint:
            raise ConfigurationError("TOKEN_MINT must be set")
        if not is_valid_address(self.token_mint):
            raise ConfigurationError(f"Invalid token mint address: {self.token_mint!r}")
        if self.days_to_index <= 0:
            raise ConfigurationError("DAYS_TO_INDEX must be a positive integer")
        if self.request_timeout_sec <= 0:
            raise ConfigurationError("RPC_TIMEOUT_SEC must be positive")
        if self.commitment not in VALID_COMMITMENTS:
            raise ConfigurationError(
                f"RPC_COMMITMENT must be one of {', '.join(VALID_COMMITMENTS)}"
            )
        if self.max_retries < 0:
            raise ConfigurationError("RPC_MAX_RETRIES must be >= 0")
        if not (1 <= self.page_limit <= MAX_SIGNATURES_PAGE_LIMIT):
            raise ConfigurationError("SIGNATURES_PAGE_LIMIT must be between 1 and 1000")
        if self.workers < 1:
            raise ConfigurationError("INDEXER_WORKERS must be >= 1")
        if self.on_transport_error not in TRANSPORT_ERROR_MODES:
            raise ConfigurationError("ON_TRANSPORT_ERROR must be 'abort' or 'skip'")
        return self

    def to_dict(self) -> dict[str, Any]:
        out = asdict(self)
        out["rpc_url"] = env.mask_rpc_url(self.rpc_url)
        return out


def _parse_int(name: str, raw: Any) -> int:
    if isinstance(raw, bool):
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}")
    if isinstance(raw, int):
        return raw
    try:
        return int(str(raw).strip())
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be an integer, got {raw!r}") from e


def _parse_float(name: str, raw: Any) -> float:
    try:
        return float(raw)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"{name} must be a number, got {raw!r}") from e


def get_settings(**overrides: Any) -> IndexerSettings:
    """
    Return validated settings from env, with non-None keyword overrides applied.

    Overrides use IndexerSettings field names (e.g. wallet_address="...", days_to_index=7).
    Raises ConfigurationError when anything is missing or invalid.
    """
    tuning = env.get_tuning_env()
    raw: dict[str, Any] = {
        "rpc_url": env.get_rpc_url(),
        "wallet_address": env.get_wallet_address(),
        "token_mint": env.get_token_mint(),
        "days_to_index": env.get_days_to_index(),
        **tuning,
    }
    unknown = set(overrides) - set(raw)
    if unknown:
        raise ConfigurationError(f"Unknown settings: {', '.join(sorted(unknown))}")
    raw.update({k: v for k, v in overrides.items() if v is not None})

    settings = IndexerSettings(
        rpc_url=str(raw["rpc_url"]).strip(),
        wallet_address=str(raw["wallet_address"]).strip(),
        token_mint=str(raw["token_mint"]).strip(),
        days_to_index=_parse_int("DAYS_TO_INDEX", raw["days_to_index"]),
        request_timeout_sec=_parse_float("RPC_TIMEOUT_SEC", raw["request_timeout_sec"]),
        commitment=str(raw["commitment"]).strip().lower(),
        max_retries=_parse_int("RPC_MAX_RETRIES", raw["max_retries"]),
        page_limit=_parse_int("SIGNATURES_PAGE_LIMIT", raw["page_limit"]),
        workers=_parse_int("INDEXER_WORKERS", raw["workers"]),
        on_transport_error=str(raw["on_transport_error"]).strip().lower(),
    )
    return settings.validate()
