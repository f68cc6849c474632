"""
Value types for transfer reconstruction.

All models are immutable and live for a single scan.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from enum import Enum
from typing import Any

from transfer_indexer.solana_rpc.models import TokenBalance

SECONDS_PER_DAY = 86_400
UNKNOWN_ADDRESS = "unknown"


def _iso(ts: int) -> str:
    return datetime.fromtimestamp(ts, tz=timezone.utc).isoformat()


@dataclass(frozen=True)
class TimeWindow:
    """Half-open window [start, end) in Unix seconds."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end < self.start:
            raise ValueError("TimeWindow end must not precede start")

    @classmethod
    def last_days(cls, days: int, now: int | None = None) -> "TimeWindow":
        """[now - days, now); `now` is read once here and never again during a scan."""
        if days <= 0:
            raise ValueError("days must be positive")
        end = int(time.time()) if now is None else int(now)
        return cls(start=end - days * SECONDS_PER_DAY, end=end)

    def contains(self, ts: int) -> bool:
        return self.start <= ts < self.end

    def is_before(self, ts: int) -> bool:
        """True when ts is older than the window (scan can stop)."""
        return ts < self.start

    def to_dict(self) -> dict[str, Any]:
        return {
            "start": _iso(self.start),
            "end": _iso(self.end),
            "start_unix": self.start,
            "end_unix": self.end,
        }


class TransferDirection(str, Enum):
    """Direction relative to the tracked wallet."""

    INCOMING = "Incoming"
    OUTGOING = "Outgoing"


@dataclass(frozen=True)
class ResolvedTransaction:
    """Transaction reduced to the tracked mint's pre/post token balances."""

    signature: str
    timestamp: int
    pre_balances: tuple[TokenBalance, ...] = ()
    post_balances: tuple[TokenBalance, ...] = ()
    slot: int | None = None


@dataclass(frozen=True)
class TransferRecord:
    """
    One inferred movement of the tracked mint.

    Invariants: amount > 0; INCOMING implies to_address is the tracked wallet;
    OUTGOING implies from_address is the tracked wallet.
    """

    signature: str
    timestamp: int
    """Unix timestamp (seconds) from the signature's blockTime."""
    from_address: str
    to_address: str
    amount: Decimal
    """UI units (decimals-adjusted); always > 0."""
    direction: TransferDirection

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-serializable dict; amount as a decimal string to keep precision."""
        return {
            "signature": self.signature,
            "timestamp": _iso(self.timestamp),
            "from": self.from_address,
            "to": self.to_address,
            "amount": str(self.amount),
            "direction": self.direction.value,
        }


@dataclass(frozen=True)
class TransferSummary:
    """Ordered records plus totals."""

    records: tuple[TransferRecord, ...]
    total_in: Decimal
    total_out: Decimal
    net: Decimal

    def to_dict(self) -> dict[str, Any]:
        return {
            "records": [r.to_dict() for r in self.records],
            "total_in": str(self.total_in),
            "total_out": str(self.total_out),
            "net": str(self.net),
        }


@dataclass
class ScanStats:
    """
    Counters for one scan. Mutated only by the indexer's owning thread.
    """

    signatures_scanned: int = 0
    """Entries yielded by the scanner (inside the window)."""
    transactions_resolved: int = 0
    skipped_missing_timestamp: int = 0
    skipped_out_of_window: int = 0
    """Entries newer than window end."""
    skipped_missing_metadata: int = 0
    skipped_not_found: int = 0
    skipped_transport_error: int = 0
    """Only non-zero in skip mode; a non-zero value means results may be incomplete."""
    pages_fetched: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "pages_fetched": self.pages_fetched,
            "signatures_scanned": self.signatures_scanned,
            "transactions_resolved": self.transactions_resolved,
            "skipped_missing_timestamp": self.skipped_missing_timestamp,
            "skipped_out_of_window": self.skipped_out_of_window,
            "skipped_missing_metadata": self.skipped_missing_metadata,
            "skipped_not_found": self.skipped_not_found,
            "skipped_transport_error": self.skipped_transport_error,
        }


@dataclass(frozen=True)
class IndexReport:
    """Everything one run produces; consumed by the CLI for JSON and console output."""

    wallet: str
    mint: str
    window: TimeWindow
    summary: TransferSummary
    stats: ScanStats = field(default_factory=ScanStats)

    @property
    def complete(self) -> bool:
        """False when transport failures were skipped and transfers may be missing."""
        return self.stats.skipped_transport_error == 0

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "wallet": self.wallet,
            "mint": self.mint,
            "window": self.window.to_dict(),
            "complete": self.complete,
            "transfer_count": len(self.summary.records),
        }
        out.update(self.summary.to_dict())
        out["stats"] = self.stats.to_dict()
        return out
