# -*- coding: utf-8 -*-
"""Dependency injection container (dependency-injector)."""

from __future__ import annotations

from dependency_injector import containers, providers

from hyperliquid_wallet_tracker.clients.http import AsyncHttpClient
from hyperliquid_wallet_tracker.clients.info_api import InfoApiClient
from hyperliquid_wallet_tracker.config import Settings, get_settings
from hyperliquid_wallet_tracker.events.bus import build_event_bus
from hyperliquid_wallet_tracker.notifications.notification_manager import NotificationService
from hyperliquid_wallet_tracker.notifications.strategies.base import BaseNotificationStrategy
from hyperliquid_wallet_tracker.notifications.strategies.console import ConsoleNotifier
from hyperliquid_wallet_tracker.notifications.strategies.telegram import TelegramNotifier
from hyperliquid_wallet_tracker.notifications.stylers.notification_styler import EventNotificationStyler
from hyperliquid_wallet_tracker.persistence.repositories.in_memory import (
    InMemoryProcessedEventRepository,
    InMemorySubscriptionRepository,
)
from hyperliquid_wallet_tracker.persistence.repositories.sqlite import (
    SqliteDatabase,
    SqliteProcessedEventRepository,
    SqliteSubscriptionRepository,
)
from hyperliquid_wallet_tracker.services.dispatch import NotificationDispatcher
from hyperliquid_wallet_tracker.services.markets import MarketListingDetector, NewListingNotifier
from hyperliquid_wallet_tracker.services.monitoring import (
    EventSourceAdapter,
    PollScheduler,
    SchedulerContext,
    SlicedOrderAggregator,
)
from hyperliquid_wallet_tracker.services.status import WalletStatusService
from hyperliquid_wallet_tracker.services.subscriptions import SubscriptionService


def _storage_backend(settings: Settings) -> str:
    return settings.storage.backend


def _build_sqlite_database(settings: Settings) -> SqliteDatabase:
    return SqliteDatabase(settings.storage.database_path)


def _build_notification_notifiers(
    settings: Settings,
    styler: EventNotificationStyler,
) -> list[BaseNotificationStrategy]:
    notifiers: list[BaseNotificationStrategy] = []
    if settings.console.enabled:
        notifiers.append(ConsoleNotifier(settings=settings, styler=styler))
    if settings.telegram.enabled:
        notifiers.append(TelegramNotifier(settings=settings, styler=styler))
    return notifiers


class Container(containers.DeclarativeContainer):
    """Application container. Wires settings, API clients, storage, monitoring core, notifications."""

    config = providers.Callable(get_settings)

    http_client = providers.Singleton(
        AsyncHttpClient,
        settings=config,
    )

    info_api_client = providers.Singleton(
        InfoApiClient,
        http_client=http_client,
        settings=config,
    )

    event_bus = providers.Singleton(build_event_bus, config)

    sqlite_database = providers.Singleton(_build_sqlite_database, config)

    processed_event_repository = providers.Selector(
        providers.Callable(_storage_backend, config),
        sqlite=providers.Singleton(SqliteProcessedEventRepository, database=sqlite_database),
        memory=providers.Singleton(InMemoryProcessedEventRepository),
    )

    subscription_repository = providers.Selector(
        providers.Callable(_storage_backend, config),
        sqlite=providers.Singleton(SqliteSubscriptionRepository, database=sqlite_database),
        memory=providers.Singleton(InMemorySubscriptionRepository),
    )

    notification_styler = providers.Singleton(EventNotificationStyler)

    notification_service = providers.Singleton(
        NotificationService,
        notifiers=providers.Callable(_build_notification_notifiers, config, notification_styler),
    )

    notification_dispatcher = providers.Singleton(
        NotificationDispatcher,
        subscription_repository=subscription_repository,
        notification_service=notification_service,
        settings=config,
    )

    event_source = providers.Singleton(
        EventSourceAdapter,
        info_api=info_api_client,
        settings=config,
    )

    sliced_order_aggregator = providers.Singleton(
        SlicedOrderAggregator,
        settings=config,
    )

    scheduler_context = providers.Singleton(
        SchedulerContext,
        aggregator=sliced_order_aggregator,
    )

    poll_scheduler = providers.Singleton(
        PollScheduler,
        event_source=event_source,
        processed_event_repository=processed_event_repository,
        subscription_repository=subscription_repository,
        dispatcher=notification_dispatcher,
        settings=config,
        context=scheduler_context,
    )

    market_listing_detector = providers.Singleton(
        MarketListingDetector,
        info_api=info_api_client,
        event_bus=event_bus,
        settings=config,
    )

    new_listing_notifier = providers.Singleton(
        NewListingNotifier,
        dispatcher=notification_dispatcher,
        event_bus=event_bus,
    )

    subscription_service = providers.Singleton(
        SubscriptionService,
        subscription_repository=subscription_repository,
        processed_event_repository=processed_event_repository,
        settings=config,
    )

    wallet_status_service = providers.Singleton(
        WalletStatusService,
        subscription_repository=subscription_repository,
        event_source=event_source,
        info_api=info_api_client,
        settings=config,
    )
