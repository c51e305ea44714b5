"""Exceptions subpackage."""

from hyperliquid_wallet_tracker.exceptions.exceptions import (
    HyperliquidAPIError,
    InvalidWalletAddressError,
    MissingRequiredConfigError,
    NotificationDeliveryError,
    RateLimitError,
    SubscriberNotFoundError,
    TrackerError,
    WalletLimitExceededError,
    WalletNotTrackedError,
)

__all__ = [
    "HyperliquidAPIError",
    "InvalidWalletAddressError",
    "MissingRequiredConfigError",
    "NotificationDeliveryError",
    "RateLimitError",
    "SubscriberNotFoundError",
    "TrackerError",
    "WalletLimitExceededError",
    "WalletNotTrackedError",
]
