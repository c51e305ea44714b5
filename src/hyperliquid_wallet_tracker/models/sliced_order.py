"""Sliced (TWAP) order lifecycle: live state and emitted transitions.

Identity is (wallet, slice_order_id). A SlicedOrderState lives in the
aggregator's live map from the first slice seen until a terminal slice.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum

from hyperliquid_wallet_tracker.models.activity import TradeSide


class SlicedOrderPhase(str, Enum):
    """Lifecycle phase of a sliced order."""

    STARTED = "STARTED"
    ACCUMULATING = "ACCUMULATING"
    COMPLETED = "COMPLETED"
    """Terminal; the venue reported the order finished."""
    CANCELLED = "CANCELLED"
    """Terminal; the venue reported the order terminated."""

    @property
    def is_terminal(self) -> bool:
        return self in (SlicedOrderPhase.COMPLETED, SlicedOrderPhase.CANCELLED)


@dataclass(slots=True)
class SlicedOrderState:
    """Mutable progress of one live sliced order."""

    wallet: str
    slice_order_id: str
    coin: str
    side: TradeSide
    start_time: int
    initial_size: Decimal
    fills_seen: int = 0
    filled_size: Decimal = Decimal(0)
    last_seen_time: int = 0
    phase: SlicedOrderPhase = SlicedOrderPhase.STARTED
    slice_ids: set[str] = field(default_factory=set)
    """Slice ids already counted; a replayed slice is not counted twice."""

    @property
    def key(self) -> tuple[str, str]:
        return (self.wallet, self.slice_order_id)


@dataclass(frozen=True, slots=True)
class SlicedOrderTransition:
    """A notifiable lifecycle change (STARTED, COMPLETED or CANCELLED)."""

    wallet: str
    slice_order_id: str
    phase: SlicedOrderPhase
    coin: str
    side: TradeSide
    start_time: int
    time: int
    """Time of the slice that triggered the transition."""
    initial_size: Decimal
    fills_seen: int
    filled_size: Decimal
    closed_pnl: Decimal | None = None

    @property
    def duration_ms(self) -> int:
        return self.time - self.start_time

    @classmethod
    def from_state(
        cls,
        state: SlicedOrderState,
        phase: SlicedOrderPhase,
        *,
        time: int,
        filled_size: Decimal | None = None,
        closed_pnl: Decimal | None = None,
    ) -> SlicedOrderTransition:
        """Snapshot a state into an immutable transition."""
        return cls(
            wallet=state.wallet,
            slice_order_id=state.slice_order_id,
            phase=phase,
            coin=state.coin,
            side=state.side,
            start_time=state.start_time,
            time=time,
            initial_size=state.initial_size,
            fills_seen=state.fills_seen,
            filled_size=filled_size if filled_size is not None else state.filled_size,
            closed_pnl=closed_pnl,
        )
