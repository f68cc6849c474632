"""
Signature window scanner.

Walks a wallet's signature history newest first, page by page, and yields
the entries whose blockTime falls inside the window. Stops at the first
entry older than the window start: the node returns signatures in
reverse-chronological order, so nothing after it can be in range.
"""

from __future__ import annotations

from typing import Any, Iterator

from transfer_indexer.core.exceptions import MissingTimestampError
from transfer_indexer.indexer_logging import get_logger
from transfer_indexer.solana_rpc.models import SignatureInfo
from transfer_indexer.transfer_engine.models import ScanStats, TimeWindow

logger = get_logger(__name__)

DEFAULT_PAGE_LIMIT = 1000


def scan_signatures(
    client: Any,
    wallet: str,
    window: TimeWindow,
    *,
    page_limit: int = DEFAULT_PAGE_LIMIT,
    stats: ScanStats | None = None,
) -> Iterator[SignatureInfo]:
    """
    Yield in-window SignatureInfo entries for `wallet`, newest first.

    Entries without blockTime and entries at or after window.end are skipped;
    the first entry before window.start ends the scan. Lazy: each page is
    requested only when the previous one has been consumed. TransportError
    from the client propagates.
    """
    stats = stats if stats is not None else ScanStats()
    before: str | None = None

    while True:
        page = client.list_signatures(wallet, before=before, limit=page_limit)
        stats.pages_fetched += 1
        logger.debug(
            "scan_page_fetched",
            wallet_id=wallet,
            page=stats.pages_fetched,
            count=len(page.entries),
            before=before,
        )

        for entry in page.entries:
            try:
                block_time = entry.require_block_time()
            except MissingTimestampError:
                stats.skipped_missing_timestamp += 1
                logger.debug("scan_skip_missing_timestamp", signature=entry.signature)
                continue
            if window.is_before(block_time):
                logger.info(
                    "scan_window_start_reached",
                    wallet_id=wallet,
                    signature=entry.signature,
                    block_time=block_time,
                    pages=stats.pages_fetched,
                )
                return
            if block_time >= window.end:
                stats.skipped_out_of_window += 1
                continue
            stats.signatures_scanned += 1
            yield entry

        if page.next_cursor is None:
            logger.info("scan_history_exhausted", wallet_id=wallet, pages=stats.pages_fetched)
            return
        before = page.next_cursor
