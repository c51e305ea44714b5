# -*- coding: utf-8 -*-
"""Sliced (TWAP) order aggregator: rebuild one lifecycle from many partial fills."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from decimal import Decimal
from typing import Any, Optional

import structlog
from cachetools import LRUCache

from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.models.activity import SlicedFill
from hyperliquid_wallet_tracker.models.sliced_order import (
    SlicedOrderPhase,
    SlicedOrderState,
    SlicedOrderTransition,
)
from hyperliquid_wallet_tracker.utils.dedupe import event_id
from hyperliquid_wallet_tracker.utils.validation import mask_address

OrderKey = tuple[str, str]


class SlicedOrderAggregator:
    """State machine per (wallet, slice_order_id): Started -> Accumulating -> Completed | Cancelled.

    consume() receives one wallet's slices from one poll and returns the
    notifiable transitions. Only STARTED and the terminal phase are emitted;
    pure accumulation updates fills_seen silently.

    Per batch, slices of one order are applied in ascending time order and the
    terminal flag is honoured only after every slice of the batch has been
    counted. If the batch carries both a done and a cancelled flag the order
    is CANCELLED.

    Slices already counted for a live order are ignored, as are slices of an
    order that finished recently (bounded LRU of finished keys), so a replayed
    poll never emits a second STARTED or terminal transition.

    Venue slices rarely carry a terminal flag, so evict_idle() drops live
    orders that stopped receiving slices and remembers them as finished.
    """

    def __init__(
        self,
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._live: dict[OrderKey, SlicedOrderState] = {}
        self._finished: LRUCache[OrderKey, SlicedOrderPhase] = LRUCache(
            maxsize=settings.monitoring.finished_sliced_orders_cache_size
        )
        self._idle_ms = int(settings.monitoring.sliced_order_idle_seconds * 1000)
        self._logger = get_logger(logger_name or self.__class__.__name__)

    @property
    def live_count(self) -> int:
        return len(self._live)

    def get_state(self, wallet: str, slice_order_id: str) -> SlicedOrderState | None:
        """Live state of an order, or None if untracked or finished."""
        return self._live.get((wallet, slice_order_id))

    def is_finished(self, wallet: str, slice_order_id: str) -> bool:
        return (wallet, slice_order_id) in self._finished

    def forget_wallet(self, wallet: str) -> None:
        """Drop live state of a wallet that is no longer tracked."""
        for key in [k for k in self._live if k[0] == wallet]:
            del self._live[key]

    def evict_idle(self, now_ms: int) -> int:
        """Drop live orders whose last slice is older than the idle limit; return how many."""
        if self._idle_ms <= 0:
            return 0
        idle = [s for s in self._live.values() if now_ms - s.last_seen_time > self._idle_ms]
        for state in idle:
            del self._live[state.key]
            self._finished[state.key] = state.phase
            self._logger.info(
                "sliced_order_evicted_idle",
                wallet=mask_address(state.wallet),
                slice_order_id=state.slice_order_id,
                fills_seen=state.fills_seen,
                idle_ms=now_ms - state.last_seen_time,
            )
        return len(idle)

    def consume(self, wallet: str, slices: Iterable[SlicedFill]) -> list[SlicedOrderTransition]:
        """Apply one batch of slices for a wallet; return the transitions, oldest order first."""
        groups: dict[str, list[SlicedFill]] = {}
        for s in sorted(slices, key=lambda s: s.time):
            groups.setdefault(s.slice_order_id, []).append(s)

        transitions: list[SlicedOrderTransition] = []
        for slice_order_id, group in groups.items():
            transitions.extend(self._consume_group(wallet, slice_order_id, group))
        return transitions

    def _consume_group(
        self,
        wallet: str,
        slice_order_id: str,
        group: list[SlicedFill],
    ) -> list[SlicedOrderTransition]:
        key = (wallet, slice_order_id)
        if key in self._finished:
            self._logger.debug(
                "sliced_order_slices_after_finish_ignored",
                wallet=mask_address(wallet),
                slice_order_id=slice_order_id,
                slice_count=len(group),
            )
            return []

        state = self._live.get(key)
        seen: set[str] = state.slice_ids if state is not None else set()
        new_slices: list[SlicedFill] = []
        for s in group:
            sid = event_id(s)
            if sid in seen:
                continue
            seen.add(sid)
            new_slices.append(s)
        if not new_slices:
            return []

        transitions: list[SlicedOrderTransition] = []
        if state is None:
            first = new_slices[0]
            state = SlicedOrderState(
                wallet=wallet,
                slice_order_id=slice_order_id,
                coin=first.coin,
                side=first.side,
                start_time=first.time,
                initial_size=first.size,
                slice_ids=seen,
            )
            self._live[key] = state
            transitions.append(
                SlicedOrderTransition.from_state(state, SlicedOrderPhase.STARTED, time=first.time)
            )
            self._logger.info(
                "sliced_order_started",
                wallet=mask_address(wallet),
                slice_order_id=slice_order_id,
                coin=state.coin,
                side=state.side,
                initial_size=str(state.initial_size),
            )
        elif state.phase is SlicedOrderPhase.STARTED:
            state.phase = SlicedOrderPhase.ACCUMULATING

        for s in new_slices:
            state.fills_seen += 1
            state.filled_size += s.size
            state.last_seen_time = max(state.last_seen_time, s.time)

        terminal = self._terminal_phase(new_slices)
        if terminal is None:
            return transitions

        last = new_slices[-1]
        if terminal is SlicedOrderPhase.CANCELLED:
            reported = [s.filled_size for s in new_slices if s.filled_size is not None]
            filled_size = reported[-1] if reported else state.filled_size
            closed_pnl = None
        else:
            filled_size = state.filled_size
            closed_pnl = self._terminal_pnl(new_slices)
        state.phase = terminal
        transitions.append(
            SlicedOrderTransition.from_state(
                state,
                terminal,
                time=last.time,
                filled_size=filled_size,
                closed_pnl=closed_pnl,
            )
        )
        del self._live[key]
        self._finished[key] = terminal
        self._logger.info(
            "sliced_order_finished",
            wallet=mask_address(wallet),
            slice_order_id=slice_order_id,
            sliced_order_phase=terminal.value,
            fills_seen=state.fills_seen,
            duration_ms=last.time - state.start_time,
        )
        return transitions

    @staticmethod
    def _terminal_phase(slices: list[SlicedFill]) -> SlicedOrderPhase | None:
        if any(s.is_terminal_cancelled for s in slices):
            return SlicedOrderPhase.CANCELLED
        if any(s.is_terminal_done for s in slices):
            return SlicedOrderPhase.COMPLETED
        return None

    @staticmethod
    def _terminal_pnl(slices: list[SlicedFill]) -> Decimal | None:
        """Realized P&L of the latest terminal slice, if the venue reported one."""
        for s in reversed(slices):
            if s.is_terminal and s.closed_pnl is not None:
                return s.closed_pnl
        return None
