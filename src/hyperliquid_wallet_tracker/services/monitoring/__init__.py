"""Activity monitoring core: event source, sliced-order aggregation, poll scheduler."""

from hyperliquid_wallet_tracker.services.monitoring.event_source import EventSourceAdapter
from hyperliquid_wallet_tracker.services.monitoring.scheduler import (
    PollScheduler,
    SchedulerContext,
    WalletSweepResult,
)
from hyperliquid_wallet_tracker.services.monitoring.sliced_order_aggregator import (
    SlicedOrderAggregator,
)

__all__ = [
    "EventSourceAdapter",
    "PollScheduler",
    "SchedulerContext",
    "SlicedOrderAggregator",
    "WalletSweepResult",
]
