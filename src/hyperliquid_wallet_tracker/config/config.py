# -*- coding: utf-8 -*-
"""Configuration loaded from environment via Pydantic Settings.

Nested env vars use <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, MONITORING__POLL_SECONDS.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Any, Literal, Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class AppSettings(BaseSettings):
    """General application configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    app_name: str = "hyperliquid-wallet-tracker"
    service_name: Optional[str] = None
    service_version: Optional[str] = None
    environment: Literal["development", "test", "production"] = "development"


class LoggingSettings(BaseSettings):
    """Structured logging configuration for structlog/stdlib/Logfire."""

    model_config = SettingsConfigDict(extra="ignore")

    # Per-target levels (only the 5 standard levels)
    console_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    logfire_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"

    # Local outputs
    log_to_console: bool = True
    log_to_file: bool = False
    log_file_path: str = "logs/wallet_tracker.log"
    # TimedRotatingFileHandler: when to rotate (S/M/H/D/W0–W6/midnight), interval, backups to keep
    log_file_when: Literal[
        "S", "M", "H", "D", "W0", "W1", "W2", "W3", "W4", "W5", "W6", "midnight"
    ] = "midnight"
    log_file_interval: int = 1
    log_file_backup_count: int = 30
    log_file_utc: bool = True

    # Main output format: JSONRenderer if True, ConsoleRenderer if False
    json_format: bool = False

    # Logfire integration via structlog
    logfire_enabled: bool = False
    logfire_token: Optional[str] = None


class ApiSettings(BaseSettings):
    """Configuration for the Hyperliquid info API (HTTP)."""

    model_config = SettingsConfigDict(extra="ignore")

    base_url: str = Field(
        default="https://api.hyperliquid.xyz",
        description="Hyperliquid API base URL (the /info endpoint is appended).",
    )
    timeout_seconds: float = Field(
        default=15.0,
        ge=1.0,
        le=120.0,
        description="HTTP request timeout in seconds.",
    )
    max_retries: int = Field(
        default=3,
        ge=1,
        le=20,
        description="Maximum number of attempts for a failed request.",
    )


class MonitoringSettings(BaseSettings):
    """Wallet activity polling, fan-out and broadcast configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    poll_seconds: float = Field(
        default=10.0,
        ge=1.0,
        le=3600.0,
        description="Interval between sweeps over all tracked wallets.",
    )
    initial_lookback_seconds: float = Field(
        default=60.0,
        ge=0.0,
        le=86400.0,
        description="Lookback used the first time a wallet is seen by the scheduler.",
    )
    max_concurrent_wallets: int = Field(
        default=8,
        ge=1,
        le=256,
        description="Upper bound on wallets processed concurrently within one sweep.",
    )
    max_wallets_per_subscriber: int = Field(
        default=5,
        ge=1,
        le=1000,
        description="Maximum active wallets a single subscriber may track.",
    )
    large_stake_threshold: float = Field(
        default=10_000.0,
        ge=0.0,
        description="Staking amount above which an event is broadcast to every subscriber.",
    )
    broadcast_batch_size: int = Field(default=25, ge=1, le=1000)
    broadcast_batch_delay_seconds: float = Field(default=1.0, ge=0.0, le=60.0)
    staking_wei_decimals: int = Field(
        default=18,
        ge=0,
        le=36,
        description="Decimals used to convert staking transfer amounts given in wei.",
    )
    finished_sliced_orders_cache_size: int = Field(
        default=4096,
        ge=1,
        le=1_000_000,
        description="How many finished sliced-order ids to remember to ignore late slices.",
    )
    sliced_order_idle_seconds: float = Field(
        default=86_400.0,
        ge=0,
        description="Drop a live sliced order after this long without a new slice (0 disables).",
    )
    status_activity_window_seconds: float = Field(
        default=86_400.0,
        ge=60.0,
        description="How far back a wallet status report counts activity.",
    )


class MarketsSettings(BaseSettings):
    """New market listing detection."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True
    poll_seconds: float = Field(default=300.0, ge=10.0, le=86400.0)


class StorageSettings(BaseSettings):
    """Persistence backend for subscribers, tracked wallets and processed events."""

    model_config = SettingsConfigDict(extra="ignore")

    backend: Literal["sqlite", "memory"] = "sqlite"
    database_path: str = Field(
        default="./hyperliquid_tracker.db",
        description="SQLite database file (ignored by the memory backend).",
    )


class TelegramNotificationSettings(BaseSettings):
    """Telegram notifications (from env TELEGRAM__*)."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = False
    api_key: Optional[str] = Field(default=None, description="Telegram bot API key.")
    owner_chat_id: Optional[str] = Field(
        default=None,
        description="Chat that receives system messages (started/stopped).",
    )
    messages_per_minute: int = Field(default=30, ge=1, le=120)
    max_retries: int = Field(default=5, ge=1, le=20)
    backoff_base_seconds: float = Field(default=1.0, ge=0.1, le=60.0)
    connect_timeout: float = Field(default=10.0, ge=0.1, le=60.0)
    read_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    write_timeout: float = Field(default=20.0, ge=0.1, le=120.0)
    pool_timeout: float = Field(default=10.0, ge=0.1, le=60.0)


class ConsoleNotificationSettings(BaseSettings):
    """Console notification settings."""

    model_config = SettingsConfigDict(extra="ignore")

    enabled: bool = True


class Settings(BaseSettings):
    """Root application configuration.

    Groups all sub-configurations so the rest of the code does not
    read environment variables directly. Nested overrides use
    <section>__<key>, e.g. LOGGING__CONSOLE_LEVEL, API__BASE_URL.
    """

    model_config = SettingsConfigDict(
        env_nested_delimiter="__",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        frozen=True,
    )

    app: AppSettings = Field(default_factory=AppSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    api: ApiSettings = Field(default_factory=ApiSettings)
    monitoring: MonitoringSettings = Field(default_factory=MonitoringSettings)
    markets: MarketsSettings = Field(default_factory=MarketsSettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    telegram: TelegramNotificationSettings = Field(default_factory=TelegramNotificationSettings)
    console: ConsoleNotificationSettings = Field(default_factory=ConsoleNotificationSettings)

    @classmethod
    def from_env(cls, **overrides: Any) -> Settings:
        """Build settings from environment (and .env), with optional overrides.

        Nested overrides can be passed as nested dicts, e.g.
        from_env(monitoring={"poll_seconds": 5}).

        Returns:
            A new Settings instance.
        """
        return cls(**overrides)


@lru_cache
def get_settings() -> Settings:
    """Return a single cached instance of Settings.

    Typical usage:

        from hyperliquid_wallet_tracker.config import get_settings

        settings = get_settings()
        interval = settings.monitoring.poll_seconds
    """
    return Settings()
