"""
Command-line entry point: index one wallet's token transfers.

Reads configuration from the environment / .env (see config.env); flags
override it. Writes the report as JSON and prints a summary table.

Usage:
  transfer-indexer --wallet <ADDRESS> --days 7 -o transfers.json
  python -m transfer_indexer --mint <MINT> --workers 4

Exit codes: 0 success, 1 configuration or transport failure (no file written),
130 interrupted (partial results discarded).
"""

from __future__ import annotations

import argparse
import json
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import TextIO

from transfer_indexer import __version__
from transfer_indexer.config import IndexerSettings, get_settings
from transfer_indexer.config.env import mask_rpc_url
from transfer_indexer.core.exceptions import ConfigurationError, TransportError
from transfer_indexer.indexer_logging import get_logger
from transfer_indexer.transfer_engine.indexer import run_index
from transfer_indexer.transfer_engine.models import IndexReport, TransferDirection
from transfer_indexer.utils.wallet_utils import short_address

logger = get_logger(__name__)

DEFAULT_OUTPUT = "transfers.json"
EXIT_OK = 0
EXIT_FAILURE = 1
EXIT_INTERRUPTED = 130


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="transfer-indexer",
        description="Reconstruct a wallet's token transfers from Solana JSON-RPC.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("-o", "--output", default=DEFAULT_OUTPUT, help="Output file path (JSON format)")
    parser.add_argument("--wallet", help="Tracked wallet address (overrides WALLET_ADDRESS)")
    parser.add_argument("--mint", help="Token mint address (overrides TOKEN_MINT; default USDC)")
    parser.add_argument("--days", type=int, help="Days to index (overrides DAYS_TO_INDEX)")
    parser.add_argument("--rpc-url", help="Solana RPC endpoint (overrides RPC_URL)")
    parser.add_argument("--workers", type=int, help="Threads for transaction resolution")
    parser.add_argument(
        "--on-transport-error",
        choices=("abort", "skip"),
        help="abort (default) or skip transactions whose fetch fails; skips are reported",
    )
    parser.add_argument("--no-summary", action="store_true", help="Do not print the summary table")
    return parser


def settings_from_args(args: argparse.Namespace) -> IndexerSettings:
    return get_settings(
        rpc_url=args.rpc_url,
        wallet_address=args.wallet,
        token_mint=args.mint,
        days_to_index=args.days,
        workers=args.workers,
        on_transport_error=args.on_transport_error,
    )


def write_report(report: IndexReport, path: str | Path) -> Path:
    """Write the report as pretty JSON; returns the written path."""
    out = Path(path)
    out.parent.mkdir(parents=True, exist_ok=True)
    with open(out, "w", encoding="utf-8") as f:
        json.dump(report.to_dict(), f, indent=2)
        f.write("\n")
    return out


def print_summary(report: IndexReport, stream: TextIO | None = None) -> None:
    """Console table of transfers followed by totals."""
    stream = stream or sys.stdout

    def emit(line: str = "") -> None:
        print(line, file=stream)

    summary = report.summary
    emit("\nTransfer Summary:")
    emit(f"{'Timestamp':<25} | {'Amount':<14} | {'Direction':<9} | {'From':<45} | {'To':<45}")
    for t in summary.records:
        ts = datetime.fromtimestamp(t.timestamp, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S")
        direction = "IN" if t.direction == TransferDirection.INCOMING else "OUT"
        emit(
            f"{ts:<25} | {t.amount:<14.6f} | {direction:<9} | "
            f"{short_address(t.from_address):<45} | {short_address(t.to_address):<45}"
        )

    emit(f"\nTotal IN: {summary.total_in:.6f}")
    emit(f"Total OUT: {summary.total_out:.6f}")
    emit(f"Net change: {summary.net:.6f}")
    if not report.complete:
        emit(
            f"WARNING: {report.stats.skipped_transport_error} transaction(s) skipped after "
            "transport errors; totals may be incomplete."
        )


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        settings = settings_from_args(args)
    except ConfigurationError as e:
        logger.error("cli_config_error", error=e.message)
        print(f"Configuration error: {e.message}", file=sys.stderr)
        return EXIT_FAILURE

    print(f"Indexing transfers for wallet: {settings.wallet_address}")
    print(f"Token mint: {settings.token_mint}")
    print(f"Time range: last {settings.days_to_index} days")
    print(f"Using RPC endpoint: {mask_rpc_url(settings.rpc_url)}")

    try:
        report = run_index(settings)
    except TransportError as e:
        logger.error("cli_transport_error", error=e.message, method=e.method, signature=e.signature)
        print(f"RPC failure: {e.message}", file=sys.stderr)
        return EXIT_FAILURE
    except KeyboardInterrupt:
        logger.warning("cli_interrupted")
        print("Interrupted; no results written.", file=sys.stderr)
        return EXIT_INTERRUPTED

    print(f"Found {len(report.summary.records)} transfers")
    path = write_report(report, args.output)
    print(f"Results saved to {path}")

    if not args.no_summary:
        print_summary(report)
    return EXIT_OK


def run(argv: list[str] | None = None) -> None:
    """Console-script wrapper."""
    raise SystemExit(main(argv))


if __name__ == "__main__":
    run()
