"""
Transfer indexer: scanner, resolver, inference and aggregator wired together.

Runs one bounded historical scan for one wallet and one mint:
- The scanner always runs sequentially in the calling thread, so the
  early-stop decision sees signatures in true reverse-chronological order.
- Transaction resolution is sequential by default, or fanned out over a
  bounded thread pool in batches; results are merged in scan order by this
  object alone, so output is deterministic for the same ledger state.
- Missing metadata / not-found transactions are skipped per signature.
  TransportError aborts the run unless on_transport_error="skip", in which
  case each skip is logged and counted (IndexReport.complete becomes False).

Usage:
  python -m transfer_indexer --days 7
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Any, Iterable, Iterator

from transfer_indexer.core.exceptions import (
    MissingMetadataError,
    MissingTimestampError,
    TransactionNotFoundError,
    TransportError,
)
from transfer_indexer.indexer_logging import bind_wallet, get_logger
from transfer_indexer.solana_rpc.client import SolanaRpcClient
from transfer_indexer.solana_rpc.models import SignatureInfo
from transfer_indexer.transfer_engine.aggregator import aggregate
from transfer_indexer.transfer_engine.inference import infer_from_resolved
from transfer_indexer.transfer_engine.models import (
    IndexReport,
    ResolvedTransaction,
    ScanStats,
    TimeWindow,
    TransferRecord,
)
from transfer_indexer.transfer_engine.resolver import resolve_transaction
from transfer_indexer.transfer_engine.scanner import DEFAULT_PAGE_LIMIT, scan_signatures

logger = get_logger(__name__)

ON_ERROR_ABORT = "abort"
ON_ERROR_SKIP = "skip"
BATCH_PER_WORKER = 4

# Outcome tags produced by resolution workers and applied to ScanStats by the owner
_RESOLVED = "resolved"
_MISSING_METADATA = "missing_metadata"
_MISSING_TIMESTAMP = "missing_timestamp"
_NOT_FOUND = "not_found"
_TRANSPORT_ERROR = "transport_error"


@dataclass(frozen=True)
class _Outcome:
    entry: SignatureInfo
    status: str
    tx: ResolvedTransaction | None = None
    error: str | None = None


def _batched(entries: Iterable[SignatureInfo], size: int) -> Iterator[list[SignatureInfo]]:
    batch: list[SignatureInfo] = []
    for entry in entries:
        batch.append(entry)
        if len(batch) >= size:
            yield batch
            batch = []
    if batch:
        yield batch


class TransferIndexer:
    """
    Reconstructs token transfers for one wallet from a ledger client.

    The client must provide list_signatures(address, before=, limit=) and
    get_transaction(signature); SolanaRpcClient is the production one.
    """

    def __init__(
        self,
        client: Any,
        *,
        page_limit: int = DEFAULT_PAGE_LIMIT,
        workers: int = 1,
        on_transport_error: str = ON_ERROR_ABORT,
    ) -> None:
        if workers < 1:
            raise ValueError("workers must be >= 1")
        if on_transport_error not in (ON_ERROR_ABORT, ON_ERROR_SKIP):
            raise ValueError("on_transport_error must be 'abort' or 'skip'")
        self._client = client
        self._page_limit = page_limit
        self._workers = workers
        self._on_transport_error = on_transport_error

    def index(self, wallet: str, mint: str, window: TimeWindow) -> IndexReport:
        """Scan `window` for `wallet` and return records, totals and stats for `mint`."""
        stats = ScanStats()
        log = bind_wallet(wallet).bind(mint=mint)
        log.info(
            "index_started",
            window_start=window.start,
            window_end=window.end,
            workers=self._workers,
            on_transport_error=self._on_transport_error,
        )

        entries = scan_signatures(
            self._client,
            wallet,
            window,
            page_limit=self._page_limit,
            stats=stats,
        )
        records: list[TransferRecord] = []
        for outcome in self._resolve_all(entries, mint):
            self._apply(outcome, wallet, mint, stats, records)

        summary = aggregate(records)
        log.info(
            "index_finished",
            transfer_count=len(summary.records),
            total_in=str(summary.total_in),
            total_out=str(summary.total_out),
            net=str(summary.net),
            **stats.to_dict(),
        )
        if stats.skipped_transport_error:
            log.warning(
                "index_incomplete",
                skipped_transport_error=stats.skipped_transport_error,
                message="Transactions skipped after transport errors; totals may be under-reported",
            )
        return IndexReport(wallet=wallet, mint=mint, window=window, summary=summary, stats=stats)

    def _resolve_all(self, entries: Iterable[SignatureInfo], mint: str) -> Iterator[_Outcome]:
        if self._workers == 1:
            for entry in entries:
                yield self._resolve_one(entry, mint)
            return

        with ThreadPoolExecutor(max_workers=self._workers) as executor:
            for batch in _batched(entries, self._workers * BATCH_PER_WORKER):
                # map() keeps submission order regardless of completion order
                yield from executor.map(lambda e: self._resolve_one(e, mint), batch)

    def _resolve_one(self, entry: SignatureInfo, mint: str) -> _Outcome:
        """Resolve one signature; per-signature failures become outcomes, fatal ones raise."""
        try:
            tx = resolve_transaction(self._client, entry, mint)
        except MissingMetadataError as e:
            return _Outcome(entry, _MISSING_METADATA, error=str(e))
        except MissingTimestampError as e:
            return _Outcome(entry, _MISSING_TIMESTAMP, error=str(e))
        except TransactionNotFoundError as e:
            return _Outcome(entry, _NOT_FOUND, error=str(e))
        except TransportError as e:
            if self._on_transport_error == ON_ERROR_ABORT:
                raise
            return _Outcome(entry, _TRANSPORT_ERROR, error=str(e))
        return _Outcome(entry, _RESOLVED, tx=tx)

    def _apply(
        self,
        outcome: _Outcome,
        wallet: str,
        mint: str,
        stats: ScanStats,
        records: list[TransferRecord],
    ) -> None:
        sig = outcome.entry.signature
        if outcome.status == _RESOLVED and outcome.tx is not None:
            stats.transactions_resolved += 1
            inferred = infer_from_resolved(wallet, mint, outcome.tx)
            if inferred:
                logger.debug("index_transfers_inferred", signature=sig, count=len(inferred))
            records.extend(inferred)
        elif outcome.status == _MISSING_METADATA:
            stats.skipped_missing_metadata += 1
            logger.debug("index_skip_missing_metadata", signature=sig)
        elif outcome.status == _MISSING_TIMESTAMP:
            stats.skipped_missing_timestamp += 1
            logger.debug("index_skip_missing_timestamp", signature=sig)
        elif outcome.status == _NOT_FOUND:
            stats.skipped_not_found += 1
            logger.warning("index_skip_not_found", signature=sig)
        elif outcome.status == _TRANSPORT_ERROR:
            stats.skipped_transport_error += 1
            logger.warning("index_skip_transport_error", signature=sig, error=outcome.error)


def run_index(settings: Any, *, now: int | None = None, client: Any = None) -> IndexReport:
    """
    Run one scan from validated IndexerSettings.

    The time window is computed once here. When `client` is None a
    SolanaRpcClient is built from settings and closed afterwards.
    """
    window = TimeWindow.last_days(settings.days_to_index, now=now)
    if client is not None:
        return _index_with(client, settings, window)
    with SolanaRpcClient(
        settings.rpc_url,
        timeout_sec=settings.request_timeout_sec,
        commitment=settings.commitment,
        max_retries=settings.max_retries,
    ) as rpc:
        return _index_with(rpc, settings, window)


def _index_with(client: Any, settings: Any, window: TimeWindow) -> IndexReport:
    indexer = TransferIndexer(
        client,
        page_limit=settings.page_limit,
        workers=settings.workers,
        on_transport_error=settings.on_transport_error,
    )
    return indexer.index(settings.wallet_address, settings.token_mint, window)
