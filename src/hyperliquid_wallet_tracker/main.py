# -*- coding: utf-8 -*-
"""
Entry point for the wallet tracker.

Orchestrates: logging, settings, container, storage, notifications, poll
scheduler, market-listing detector, shutdown (SIGINT/SIGTERM or CancelledError).
Activity flows: scheduler -> event source -> dedup / aggregator -> dispatcher -> notifiers.

Run with: python -m hyperliquid_wallet_tracker.main

Notebook usage:
    from hyperliquid_wallet_tracker.main import run
    await run()  # Interrupt kernel to stop; system will shut down on CancelledError.
"""
from __future__ import annotations

import asyncio
import signal
from typing import Any

import structlog

from hyperliquid_wallet_tracker.DI import Container
from hyperliquid_wallet_tracker.config import Settings, get_settings
from hyperliquid_wallet_tracker.exceptions import MissingRequiredConfigError
from hyperliquid_wallet_tracker.logging.config import configure_logging
from hyperliquid_wallet_tracker.notifications.messages import (
    EVENT_SYSTEM_STARTED,
    EVENT_SYSTEM_STOPPED,
)
from hyperliquid_wallet_tracker.notifications.types import NotificationMessage


def _setup_signals(shutdown_event: asyncio.Event) -> None:
    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, shutdown_event.set)
        except NotImplementedError:
            pass  # Windows has no add_signal_handler


def _check_required_config(settings: Settings, logger: Any) -> None:
    if settings.telegram.enabled and not settings.telegram.api_key:
        logger.error(
            "main_missing_telegram_api_key",
            message="TELEGRAM__API_KEY is not set while TELEGRAM__ENABLED=true",
        )
        raise MissingRequiredConfigError("TELEGRAM__API_KEY")


async def _stop_tasks(tasks: list[asyncio.Task[None]]) -> None:
    for t in tasks:
        t.cancel()
    for t in tasks:
        try:
            await t
        except asyncio.CancelledError:
            pass


async def run() -> None:
    configure_logging()
    logger = structlog.get_logger("main")
    settings = get_settings()
    _check_required_config(settings, logger)

    container = Container()
    use_sqlite = settings.storage.backend == "sqlite"
    if use_sqlite:
        await container.sqlite_database().initialize()

    notification_service = container.notification_service()
    await notification_service.initialize()
    scheduler = container.poll_scheduler()
    detector = container.market_listing_detector()
    listing_notifier = container.new_listing_notifier()
    subscriptions = container.subscription_repository()

    shutdown_event = asyncio.Event()
    _setup_signals(shutdown_event)

    wallets = await subscriptions.list_active_wallet_addresses()
    logger.info(
        "main_monitoring_started",
        wallets_count=len(wallets),
        poll_seconds=settings.monitoring.poll_seconds,
        storage_backend=settings.storage.backend,
        markets_enabled=settings.markets.enabled,
    )
    notification_service.notify(
        NotificationMessage(
            event_type=EVENT_SYSTEM_STARTED,
            message="Hyperliquid wallet tracker started",
            payload={"wallets_count": len(wallets)},
        )
    )

    tasks: list[asyncio.Task[None]] = [asyncio.create_task(scheduler.run(shutdown_event))]
    if settings.markets.enabled:
        listing_notifier.start()
        tasks.append(asyncio.create_task(detector.run(shutdown_event)))

    try:
        try:
            await shutdown_event.wait()
        except asyncio.CancelledError:
            logger.info("main_shutdown_cancelled")
            raise
        logger.info("main_shutdown_started")
    finally:
        shutdown_event.set()
        await _stop_tasks(tasks)
        if settings.markets.enabled:
            listing_notifier.stop()
            await container.event_bus().stop()

        notification_service.notify(
            NotificationMessage(
                event_type=EVENT_SYSTEM_STOPPED,
                message="Hyperliquid wallet tracker stopped",
                payload={},
            )
        )
        await notification_service.shutdown()
        await container.http_client().aclose()
        if use_sqlite:
            await container.sqlite_database().aclose()
        logger.info("main_shutdown_complete")


def main() -> None:
    asyncio.run(run())


__all__ = ["run", "main"]

if __name__ == "__main__":
    main()
