# -*- coding: utf-8 -*-
"""Logging configuration for structlog + Logfire."""

from __future__ import annotations

import logging
from logging.handlers import TimedRotatingFileHandler
from pathlib import Path
from typing import Any

import logfire
import structlog
from structlog.types import EventDict, Processor

from hyperliquid_wallet_tracker.config import Settings, get_settings
from hyperliquid_wallet_tracker.utils.validation import mask_address

# Map standard logging levels to Logfire levels
LOG_LEVEL_TO_LOGFIRE: dict[str, str] = {
    "DEBUG": "debug",
    "INFO": "info",
    "WARNING": "warn",
    "ERROR": "error",
    "CRITICAL": "fatal",
}

# Event keys that may carry a raw wallet address.
_WALLET_KEYS = ("wallet", "wallet_address", "address")


def _add_service_context(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Attach logger name, app/service identity and environment to every log event."""
    stdlib_logger = getattr(logger, "_logger", None)
    event_dict["logger"] = (
        getattr(stdlib_logger, "name", None) or getattr(logger, "name", "") or ""
    )
    app_settings = get_settings().app
    event_dict["app_name"] = app_settings.app_name
    if app_settings.service_name:
        event_dict["service_name"] = app_settings.service_name
    if app_settings.service_version:
        event_dict["service_version"] = app_settings.service_version
    event_dict["environment"] = app_settings.environment
    return event_dict


def _mask_wallet_fields(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
    """Replace raw wallet addresses with their masked form (0x1234...abcd)."""
    for key in _WALLET_KEYS:
        value = event_dict.get(key)
        if isinstance(value, str) and value.startswith("0x"):
            event_dict[key] = mask_address(value)
    return event_dict


def _build_handlers(settings: Settings) -> tuple[list[logging.Handler], list[int]]:
    """Create the stdlib handlers enabled in settings and their levels."""
    log_cfg = settings.logging
    handlers: list[logging.Handler] = []
    levels: list[int] = []

    if log_cfg.log_to_console:
        level = getattr(logging, log_cfg.console_level.upper(), logging.INFO)
        handler: logging.Handler = logging.StreamHandler()
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(handler)
        levels.append(level)

    if log_cfg.log_to_file:
        level = getattr(logging, log_cfg.file_level.upper(), logging.INFO)
        path = Path(log_cfg.log_file_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = TimedRotatingFileHandler(
            path,
            when=log_cfg.log_file_when,
            interval=log_cfg.log_file_interval,
            backupCount=log_cfg.log_file_backup_count,
            encoding="utf-8",
            utc=log_cfg.log_file_utc,
        )
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter("%(message)s"))
        handlers.append(handler)
        levels.append(level)

    return handlers, levels


def _configure_logfire(settings: Settings) -> None:
    app_cfg = settings.app
    log_cfg = settings.logging
    logfire.configure(
        token=log_cfg.logfire_token,
        service_name=app_cfg.service_name or app_cfg.app_name,
        service_version=app_cfg.service_version,
        min_level=LOG_LEVEL_TO_LOGFIRE.get(log_cfg.logfire_level, "info"),  # type: ignore[arg-type]
        environment=app_cfg.environment,
    )


def _build_processors(settings: Settings) -> list[Processor]:
    log_cfg = settings.logging
    processors: list[Processor] = [
        structlog.stdlib.filter_by_level,
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        _add_service_context,
        _mask_wallet_fields,
    ]
    if log_cfg.logfire_enabled:
        processors.append(logfire.StructlogProcessor())  # type: ignore[arg-type]

    # File output is always JSON; console follows json_format unless a file is also written.
    if log_cfg.log_to_console or log_cfg.log_to_file:
        renderer: Any = (
            structlog.processors.JSONRenderer()
            if log_cfg.log_to_file or log_cfg.json_format
            else structlog.dev.ConsoleRenderer()
        )
        processors.append(renderer)
    return processors


def configure_logging(settings: Settings | None = None) -> None:
    """Configure stdlib handlers, Logfire (optional) and the structlog pipeline."""
    settings = settings or get_settings()

    handlers, levels = _build_handlers(settings)
    if handlers:
        logging.basicConfig(level=min(levels), handlers=handlers, force=True)

    if settings.logging.logfire_enabled:
        _configure_logfire(settings)

    structlog.configure(
        processors=_build_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
