"""Custom exceptions for the Hyperliquid API, subscriptions and delivery."""

from __future__ import annotations


class TrackerError(Exception):
    """Base exception for wallet-tracker errors."""

    pass


class MissingRequiredConfigError(TrackerError):
    """Raised when a required configuration value is missing."""

    pass


class HyperliquidAPIError(TrackerError):
    """Raised when a Hyperliquid API request fails after retries."""

    def __init__(
        self,
        message: str,
        *,
        url: str | None = None,
        status_code: int | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.url = url
        self.status_code = status_code
        self.cause = cause


class RateLimitError(HyperliquidAPIError):
    """Raised when the API returns HTTP 429 (Too Many Requests)."""

    def __init__(
        self,
        message: str = "Rate limit exceeded (429)",
        *,
        url: str | None = None,
        retry_after: float | None = None,
    ) -> None:
        super().__init__(message, url=url, status_code=429)
        self.retry_after = retry_after


class InvalidWalletAddressError(TrackerError, ValueError):
    """Raised when a wallet address is not 0x followed by 40 hex chars."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Invalid wallet address: {address!r}")
        self.address = address


class WalletLimitExceededError(TrackerError):
    """Raised when a subscriber already tracks the maximum number of wallets."""

    def __init__(self, limit: int) -> None:
        super().__init__(f"Maximum {limit} wallets allowed per subscriber")
        self.limit = limit


class SubscriberNotFoundError(TrackerError):
    """Raised when an operation references an unknown subscriber."""

    pass


class WalletNotTrackedError(TrackerError):
    """Raised when a subscriber asks about a wallet they do not track."""

    def __init__(self, address: str) -> None:
        super().__init__(f"Wallet is not tracked: {address}")
        self.address = address


class NotificationDeliveryError(TrackerError):
    """Raised when a message could not be delivered to a recipient."""

    def __init__(
        self,
        message: str,
        *,
        recipient_id: str | None = None,
        cause: Exception | None = None,
    ) -> None:
        super().__init__(message)
        self.recipient_id = recipient_id
        self.cause = cause
