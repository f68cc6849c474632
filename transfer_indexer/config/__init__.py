"""
Configuration management for the transfer indexer.

Loads and validates settings from environment variables and an optional
.env file. Exposes a single source of truth for run configuration.
"""

from transfer_indexer.config.settings import IndexerSettings, get_settings  # noqa: F401

__all__ = ["IndexerSettings", "get_settings"]
