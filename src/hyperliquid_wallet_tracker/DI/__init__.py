"""Dependency injection."""

from hyperliquid_wallet_tracker.DI.container import Container

__all__ = ["Container"]
