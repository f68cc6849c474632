"""
Transfer Indexer: token transfer history for a Solana wallet over plain JSON-RPC.

Walks the wallet's signature history inside a time window, resolves each
transaction, and infers transfers from pre/post token balances. No indexing
service, no persistence: one bounded scan per run.
"""

__version__ = "0.1.0"
