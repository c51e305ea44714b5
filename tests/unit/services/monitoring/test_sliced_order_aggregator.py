# -*- coding: utf-8 -*-
"""Unit tests for SlicedOrderAggregator."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

from hyperliquid_wallet_tracker.models.activity import SlicedFill
from hyperliquid_wallet_tracker.models.sliced_order import SlicedOrderPhase
from hyperliquid_wallet_tracker.services.monitoring.sliced_order_aggregator import (
    SlicedOrderAggregator,
)


def _aggregator(settings: Any) -> SlicedOrderAggregator:
    return SlicedOrderAggregator(settings)


def test_three_slices_in_one_batch_start_and_complete(
    settings: Any,
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
    D: Callable[[Any], Decimal],
) -> None:
    agg = _aggregator(settings)
    slices = [
        sliced_fill_factory(time=100),
        sliced_fill_factory(time=200),
        sliced_fill_factory(time=300, is_terminal_done=True, closed_pnl=D("5")),
    ]

    transitions = agg.consume(wallet, slices)

    assert [t.phase for t in transitions] == [SlicedOrderPhase.STARTED, SlicedOrderPhase.COMPLETED]
    started, completed = transitions
    assert started.start_time == 100
    assert started.initial_size == D("10")
    assert completed.fills_seen == 3
    assert completed.filled_size == D("30")
    assert completed.duration_ms == 200
    assert completed.closed_pnl == D("5")
    assert agg.live_count == 0
    assert agg.is_finished(wallet, "T1")


def test_slices_across_batches_emit_one_started_and_one_terminal(
    settings: Any,
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
) -> None:
    agg = _aggregator(settings)

    first = agg.consume(wallet, [sliced_fill_factory(time=100)])
    middle = agg.consume(wallet, [sliced_fill_factory(time=200), sliced_fill_factory(time=250)])
    state = agg.get_state(wallet, "T1")
    last = agg.consume(wallet, [sliced_fill_factory(time=300, is_terminal_done=True)])

    assert [t.phase for t in first] == [SlicedOrderPhase.STARTED]
    assert middle == []
    assert state is not None
    assert state.phase is SlicedOrderPhase.ACCUMULATING
    assert state.fills_seen == 3
    assert [t.phase for t in last] == [SlicedOrderPhase.COMPLETED]
    assert last[0].fills_seen == 4


def test_out_of_order_batch_is_applied_by_time(
    settings: Any,
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
) -> None:
    agg = _aggregator(settings)

    transitions = agg.consume(
        wallet,
        [
            sliced_fill_factory(time=300, is_terminal_done=True),
            sliced_fill_factory(time=100),
            sliced_fill_factory(time=200),
        ],
    )

    assert transitions[0].start_time == 100
    assert transitions[-1].duration_ms == 200


def test_replayed_slices_are_not_counted_twice(
    settings: Any,
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
) -> None:
    agg = _aggregator(settings)
    batch = [sliced_fill_factory(time=100), sliced_fill_factory(time=200)]

    agg.consume(wallet, batch)
    replay = agg.consume(wallet, batch)
    state = agg.get_state(wallet, "T1")

    assert replay == []
    assert state is not None
    assert state.fills_seen == 2


def test_finished_order_ignores_late_slices(
    settings: Any,
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
) -> None:
    agg = _aggregator(settings)
    agg.consume(wallet, [sliced_fill_factory(time=100, is_terminal_done=True)])

    late = agg.consume(wallet, [sliced_fill_factory(time=150)])

    assert late == []
    assert agg.live_count == 0


def test_cancel_takes_precedence_and_reports_filled_size(
    settings: Any,
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
    D: Callable[[Any], Decimal],
) -> None:
    agg = _aggregator(settings)
    agg.consume(wallet, [sliced_fill_factory(time=100)])

    transitions = agg.consume(
        wallet,
        [
            sliced_fill_factory(time=200, is_terminal_done=True),
            sliced_fill_factory(time=300, is_terminal_cancelled=True, filled_size=D("18")),
        ],
    )

    assert [t.phase for t in transitions] == [SlicedOrderPhase.CANCELLED]
    assert transitions[0].filled_size == D("18")
    assert transitions[0].closed_pnl is None


def test_cancel_without_reported_size_uses_accumulated(
    settings: Any,
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
    D: Callable[[Any], Decimal],
) -> None:
    agg = _aggregator(settings)

    transitions = agg.consume(
        wallet,
        [sliced_fill_factory(time=100), sliced_fill_factory(time=200, is_terminal_cancelled=True)],
    )

    assert transitions[-1].phase is SlicedOrderPhase.CANCELLED
    assert transitions[-1].filled_size == D("20")


def test_orders_are_scoped_per_wallet_and_id(
    settings: Any,
    wallet: str,
    other_wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
) -> None:
    agg = _aggregator(settings)

    agg.consume(wallet, [sliced_fill_factory(slice_order_id="T1"), sliced_fill_factory(slice_order_id="T2")])
    agg.consume(other_wallet, [sliced_fill_factory(slice_order_id="T1")])
    assert agg.live_count == 3

    agg.forget_wallet(wallet)
    assert agg.live_count == 1
    assert agg.get_state(other_wallet, "T1") is not None


def test_idle_live_order_is_evicted_and_not_restarted(
    settings_factory: Callable[..., Any],
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
) -> None:
    agg = SlicedOrderAggregator(settings_factory(sliced_order_idle_seconds=60))
    agg.consume(wallet, [sliced_fill_factory(time=1_000, slice_order_id="T1")])
    agg.consume(wallet, [sliced_fill_factory(time=50_000, slice_order_id="T2")])

    evicted = agg.evict_idle(now_ms=70_000)
    replay = agg.consume(wallet, [sliced_fill_factory(time=1_000, slice_order_id="T1")])

    assert evicted == 1
    assert agg.get_state(wallet, "T1") is None
    assert agg.is_finished(wallet, "T1")
    assert agg.get_state(wallet, "T2") is not None
    assert replay == []


def test_idle_eviction_disabled_with_zero(
    settings_factory: Callable[..., Any],
    wallet: str,
    sliced_fill_factory: Callable[..., SlicedFill],
) -> None:
    agg = SlicedOrderAggregator(settings_factory(sliced_order_idle_seconds=0))
    agg.consume(wallet, [sliced_fill_factory(time=1_000)])

    assert agg.evict_idle(now_ms=10**12) == 0
    assert agg.live_count == 1
