"""Wallet status reports."""

from hyperliquid_wallet_tracker.services.status.wallet_status_service import WalletStatusService

__all__ = ["WalletStatusService"]
