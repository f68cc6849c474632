"""
Solana JSON-RPC client: the ledger access the transfer engine depends on.

Responsibilities:
- getSignaturesForAddress paging (newest first, `before` cursor).
- getTransaction by signature (json encoding, versioned transactions allowed).
- Bounded timeout on every request; transport, HTTP and JSON-RPC failures
  surface as TransportError. Retries only when configured, and every retry is logged.
"""

from __future__ import annotations

import itertools
import time
from typing import Any

import httpx

from transfer_indexer.core.exceptions import TransportError
from transfer_indexer.indexer_logging import get_logger
from transfer_indexer.solana_rpc.models import SignatureInfo, SignaturePage

logger = get_logger(__name__)

DEFAULT_TIMEOUT_SEC = 30.0
DEFAULT_COMMITMENT = "confirmed"
MAX_SIGNATURES_LIMIT = 1000
MIN_RETRY_DELAY_SEC = 1.0
MAX_RETRY_DELAY_SEC = 30.0

# JSON-RPC request id counter
_request_ids = itertools.count(1)


def _next_id() -> int:
    return next(_request_ids)


def build_signatures_body(
    address: str,
    before: str | None,
    limit: int,
    commitment: str = DEFAULT_COMMITMENT,
) -> dict[str, Any]:
    opts: dict[str, Any] = {"limit": limit, "commitment": commitment}
    if before is not None:
        opts["before"] = before
    return {
        "jsonrpc": "2.0",
        "id": _next_id(),
        "method": "getSignaturesForAddress",
        "params": [address, opts],
    }


def build_transaction_body(signature: str, commitment: str = DEFAULT_COMMITMENT) -> dict[str, Any]:
    return {
        "jsonrpc": "2.0",
        "id": _next_id(),
        "method": "getTransaction",
        "params": [
            signature,
            {
                "encoding": "json",
                "commitment": commitment,
                "maxSupportedTransactionVersion": 0,
            },
        ],
    }


class SolanaRpcClient:
    """
    Synchronous Solana JSON-RPC client over httpx.

    Use as a context manager so the underlying connection pool is closed:

        with SolanaRpcClient(rpc_url) as client:
            page = client.list_signatures(wallet)
    """

    def __init__(
        self,
        rpc_url: str,
        *,
        timeout_sec: float = DEFAULT_TIMEOUT_SEC,
        commitment: str = DEFAULT_COMMITMENT,
        max_retries: int = 0,
        min_retry_delay_sec: float = MIN_RETRY_DELAY_SEC,
        max_retry_delay_sec: float = MAX_RETRY_DELAY_SEC,
        http_client: httpx.Client | None = None,
    ) -> None:
        """
        Args:
            rpc_url: Solana RPC HTTP endpoint (e.g. https://api.mainnet-beta.solana.com).
            timeout_sec: HTTP timeout for each RPC request.
            commitment: processed | confirmed | finalized.
            max_retries: Extra attempts per call after a transport failure (0 = fail fast).
            min_retry_delay_sec: Initial delay for exponential backoff between retries.
            max_retry_delay_sec: Cap for backoff delay.
            http_client: Pre-built httpx.Client (tests inject one with a MockTransport).
        """
        if not rpc_url.strip():
            raise ValueError("rpc_url must be non-empty")
        if timeout_sec <= 0:
            raise ValueError("timeout_sec must be positive")
        if max_retries < 0:
            raise ValueError("max_retries must be >= 0")

        self._rpc_url = rpc_url.rstrip("/")
        self._commitment = commitment
        self._max_retries = max_retries
        self._min_retry_delay = min_retry_delay_sec
        self._max_retry_delay = max_retry_delay_sec
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=httpx.Timeout(timeout_sec))

    def __enter__(self) -> "SolanaRpcClient":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def list_signatures(
        self,
        address: str,
        before: str | None = None,
        limit: int = MAX_SIGNATURES_LIMIT,
    ) -> SignaturePage:
        """
        One page of getSignaturesForAddress, newest first.

        next_cursor is the last signature of the page when the page is full,
        None when history is exhausted.
        """
        if not (1 <= limit <= MAX_SIGNATURES_LIMIT):
            raise ValueError("limit must be between 1 and 1000")
        body = build_signatures_body(address, before, limit, self._commitment)
        result = self._call(body)
        if not isinstance(result, list):
            raise TransportError(
                "getSignaturesForAddress returned a non-list result",
                method="getSignaturesForAddress",
            )

        entries: list[SignatureInfo] = []
        last_signature: str | None = None
        for item in result:
            if not isinstance(item, dict) or "signature" not in item:
                logger.debug("rpc_signature_item_invalid", item=str(item)[:80])
                continue
            last_signature = item["signature"]
            try:
                entries.append(SignatureInfo.from_rpc_item(item))
            except (KeyError, TypeError, ValueError) as e:
                logger.debug("rpc_signature_item_skipped", signature=item.get("signature"), error=str(e))

        next_cursor = last_signature if len(result) >= limit else None
        return SignaturePage(entries=entries, next_cursor=next_cursor)

    def get_transaction(self, signature: str) -> dict[str, Any] | None:
        """Raw getTransaction result (transaction, meta, blockTime, slot) or None if not found."""
        body = build_transaction_body(signature, self._commitment)
        try:
            result = self._call(body)
        except TransportError as e:
            e.signature = signature
            raise
        if result is not None and not isinstance(result, dict):
            raise TransportError(
                "getTransaction returned a non-object result",
                method="getTransaction",
                signature=signature,
            )
        return result

    def _call(self, body: dict[str, Any]) -> Any:
        """Perform one JSON-RPC call with optional logged retries; return `result`."""
        method = body["method"]
        delay = self._min_retry_delay
        for attempt in range(self._max_retries + 1):
            try:
                return self._post(body)
            except TransportError as e:
                if attempt >= self._max_retries:
                    raise
                logger.warning(
                    "rpc_retry",
                    method=method,
                    attempt=attempt + 1,
                    max_retries=self._max_retries,
                    error=str(e),
                )
                time.sleep(delay)
                delay = min(delay * 2, self._max_retry_delay)
        raise AssertionError("unreachable")

    def _post(self, body: dict[str, Any]) -> Any:
        """POST a JSON-RPC body; raise TransportError on transport, HTTP or RPC error."""
        method = body["method"]
        try:
            resp = self._client.post(self._rpc_url, json=body)
            resp.raise_for_status()
            data = resp.json()
        except httpx.TimeoutException as e:
            raise TransportError(f"Solana RPC timeout on {method}: {e}", method=method) from e
        except httpx.HTTPStatusError as e:
            raise TransportError(
                f"Solana RPC HTTP {e.response.status_code} on {method}",
                method=method,
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise TransportError(f"Solana RPC transport error on {method}: {e}", method=method) from e
        except ValueError as e:
            raise TransportError(f"Solana RPC returned invalid JSON on {method}", method=method) from e

        if not isinstance(data, dict):
            raise TransportError(f"Solana RPC returned a non-object response on {method}", method=method)
        if "error" in data and data["error"] is not None:
            err = data["error"]
            code = err.get("code") if isinstance(err, dict) else None
            message = err.get("message", err) if isinstance(err, dict) else err
            raise TransportError(
                f"Solana RPC error: {message} (code={code})",
                method=method,
                rpc_code=code,
            )
        if "result" not in data:
            raise TransportError(f"Solana RPC returned no result on {method}", method=method)
        return data["result"]
