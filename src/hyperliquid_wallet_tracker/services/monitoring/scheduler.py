# -*- coding: utf-8 -*-
"""Poll scheduler: periodic per-wallet sweeps feeding dedup, aggregation and dispatch."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Literal, Optional

import structlog
from structlog.contextvars import bound_contextvars

from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.models.activity import Activity, SlicedFill, StakingEvent
from hyperliquid_wallet_tracker.models.processed_event import ProcessedEvent
from hyperliquid_wallet_tracker.notifications.messages import activity_message, sliced_order_message
from hyperliquid_wallet_tracker.services.dispatch import DispatchResult
from hyperliquid_wallet_tracker.services.monitoring.sliced_order_aggregator import (
    SlicedOrderAggregator,
)
from hyperliquid_wallet_tracker.utils.dedupe import event_id
from hyperliquid_wallet_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from hyperliquid_wallet_tracker.persistence.repositories.interfaces import (
        IProcessedEventRepository,
        ISubscriptionRepository,
    )
    from hyperliquid_wallet_tracker.services.dispatch import NotificationDispatcher
    from hyperliquid_wallet_tracker.services.monitoring.event_source import EventSourceAdapter


def _now_ms() -> int:
    return int(time.time() * 1000)


@dataclass
class SchedulerContext:
    """Mutable monitoring state scoped to one scheduler's lifetime (not persisted)."""

    aggregator: SlicedOrderAggregator
    checkpoints: dict[str, int] = field(default_factory=dict)
    """wallet -> epoch ms of the last sweep start."""
    in_flight: set[str] = field(default_factory=set)
    """Wallets whose sweep is currently running."""


@dataclass(frozen=True, slots=True)
class WalletSweepResult:
    wallet: str
    status: Literal["ok", "skipped", "failed"]
    new_events: int = 0
    transitions: int = 0
    sent: int = 0
    failed_sends: int = 0


class PollScheduler:
    """Drives the monitoring pipeline on a fixed period.

    Each tick sweeps every distinct active wallet. Wallets run concurrently
    (bounded by ``monitoring.max_concurrent_wallets``); the work of one wallet
    is strictly sequential: fetch, dedupe-check, mark, dispatch, aggregate.
    A wallet whose previous sweep is still running is skipped for the tick.

    The checkpoint of a wallet advances to the sweep start time whether or not
    the sweep succeeded, so a failing upstream never causes a replay storm.
    """

    def __init__(
        self,
        event_source: "EventSourceAdapter",
        processed_event_repository: "IProcessedEventRepository",
        subscription_repository: "ISubscriptionRepository",
        dispatcher: "NotificationDispatcher",
        settings: Settings,
        *,
        context: Optional[SchedulerContext] = None,
        clock: Callable[[], int] = _now_ms,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the scheduler.

        Args:
            event_source: Fetches classified activity of a wallet since a checkpoint.
            processed_event_repository: Deduplication store.
            subscription_repository: Source of the distinct active wallets.
            dispatcher: Fan-out to subscribers and large-stake broadcast.
            settings: Application settings (uses settings.monitoring).
            context: Explicit state container; a fresh one is created if None.
            clock: Current time in epoch milliseconds (injected for tests).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._event_source = event_source
        self._processed = processed_event_repository
        self._subscriptions = subscription_repository
        self._dispatcher = dispatcher
        self._settings = settings
        self._context = context or SchedulerContext(aggregator=SlicedOrderAggregator(settings))
        self._clock = clock
        self._semaphore = asyncio.Semaphore(settings.monitoring.max_concurrent_wallets)
        self._tick_tasks: set[asyncio.Task[list[WalletSweepResult]]] = set()
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def context(self) -> SchedulerContext:
        return self._context

    async def run(self, shutdown_event: asyncio.Event) -> None:
        """Start a sweep every ``monitoring.poll_seconds`` until shutdown_event is set.

        Every tick is its own task, so a slow wallet never delays the next tick.
        Running sweeps are cancelled on shutdown.
        """
        poll_seconds = self._settings.monitoring.poll_seconds
        self._logger.info(
            "scheduler_started",
            scheduler_poll_seconds=poll_seconds,
            scheduler_max_concurrent_wallets=self._settings.monitoring.max_concurrent_wallets,
        )
        try:
            while not shutdown_event.is_set():
                task = asyncio.create_task(self.sweep())
                self._tick_tasks.add(task)
                task.add_done_callback(self._tick_tasks.discard)
                try:
                    await asyncio.wait_for(shutdown_event.wait(), timeout=poll_seconds)
                except TimeoutError:
                    pass
        finally:
            await self._cancel_ticks()
            self._logger.info("scheduler_stopped")

    async def _cancel_ticks(self) -> None:
        tasks = list(self._tick_tasks)
        for t in tasks:
            t.cancel()
        for t in tasks:
            try:
                await t
            except asyncio.CancelledError:
                pass

    async def sweep(self) -> list[WalletSweepResult]:
        """Sweep every distinct active wallet once."""
        try:
            wallets = await self._subscriptions.list_active_wallet_addresses()
        except Exception as e:
            self._logger.error(
                "scheduler_sweep_failed",
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return []

        active = set(wallets)
        for stale in [w for w in self._context.checkpoints if w not in active]:
            if stale not in self._context.in_flight:
                self.forget_wallet(stale)
        self._context.aggregator.evict_idle(self._clock())

        if not wallets:
            self._logger.debug("scheduler_no_wallets")
            return []
        results = await asyncio.gather(*(self.sweep_wallet(w) for w in wallets))
        self._logger.debug(
            "scheduler_sweep_completed",
            scheduler_wallets_count=len(wallets),
            scheduler_skipped_count=sum(1 for r in results if r.status == "skipped"),
            scheduler_failed_count=sum(1 for r in results if r.status == "failed"),
        )
        return list(results)

    async def sweep_wallet(self, wallet: str) -> WalletSweepResult:
        """Fetch and process one wallet's activity since its checkpoint. Never raises."""
        ctx = self._context
        if wallet in ctx.in_flight:
            self._logger.info("scheduler_wallet_skipped_in_flight", wallet=mask_address(wallet))
            return WalletSweepResult(wallet=wallet, status="skipped")

        ctx.in_flight.add(wallet)
        started_ms = self._clock()
        lookback_ms = int(self._settings.monitoring.initial_lookback_seconds * 1000)
        since = ctx.checkpoints.get(wallet, started_ms - lookback_ms)
        try:
            async with self._semaphore:
                with bound_contextvars(wallet=mask_address(wallet), since_ms=since):
                    return await self._process_wallet(wallet, since)
        except Exception as e:
            self._logger.error(
                "scheduler_wallet_failed",
                wallet=mask_address(wallet),
                error_type=type(e).__name__,
                error_message=str(e),
            )
            return WalletSweepResult(wallet=wallet, status="failed")
        finally:
            ctx.checkpoints[wallet] = started_ms
            ctx.in_flight.discard(wallet)

    def forget_wallet(self, wallet: str) -> None:
        """Drop the checkpoint and live sliced orders of an untracked wallet."""
        self._context.checkpoints.pop(wallet, None)
        self._context.aggregator.forget_wallet(wallet)

    async def _process_wallet(self, wallet: str, since: int) -> WalletSweepResult:
        activities = await self._event_source.fetch_activity(wallet, since)
        totals = DispatchResult()
        new_events = 0
        slices: list[SlicedFill] = []

        for activity in activities:
            if isinstance(activity, SlicedFill):
                slices.append(activity)
                continue
            if not await self._mark_if_new(wallet, activity):
                continue
            new_events += 1
            totals += await self._dispatcher.dispatch(wallet, activity_message(wallet, activity))
            if isinstance(activity, StakingEvent):
                await self._dispatcher.maybe_broadcast_large_stake(wallet, activity)

        transitions = self._context.aggregator.consume(wallet, slices)
        for transition in transitions:
            totals += await self._dispatcher.dispatch(wallet, sliced_order_message(transition))

        if new_events or transitions:
            self._logger.info(
                "scheduler_wallet_processed",
                wallet=mask_address(wallet),
                scheduler_new_events=new_events,
                scheduler_transitions=len(transitions),
                dispatch_sent=totals.sent,
                dispatch_failed=totals.failed,
            )
        return WalletSweepResult(
            wallet=wallet,
            status="ok",
            new_events=new_events,
            transitions=len(transitions),
            sent=totals.sent,
            failed_sends=totals.failed,
        )

    async def _mark_if_new(self, wallet: str, activity: Activity) -> bool:
        """Record the activity before anything is sent for it; False if already processed."""
        key = event_id(activity)
        if await self._processed.contains(wallet, key):
            return False
        await self._processed.add(ProcessedEvent.create(wallet, key))
        return True
