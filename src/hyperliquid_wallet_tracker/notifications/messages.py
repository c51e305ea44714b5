# -*- coding: utf-8 -*-
"""Build NotificationMessage objects from wallet activity and market events.

Payload values are plain JSON-friendly types (Decimal as str). The dispatcher
adds ``nickname`` and the recipient per subscriber; the styler renders.
"""

from __future__ import annotations

from decimal import Decimal
from typing import Any

from hyperliquid_wallet_tracker.models.activity import (
    Activity,
    Fill,
    OrderEvent,
    StakingEvent,
)
from hyperliquid_wallet_tracker.models.market import MarketListing, MarketListingDiff
from hyperliquid_wallet_tracker.models.sliced_order import SlicedOrderPhase, SlicedOrderTransition
from hyperliquid_wallet_tracker.models.wallet_status import WalletStatus
from hyperliquid_wallet_tracker.notifications.types import NotificationMessage
from hyperliquid_wallet_tracker.utils.validation import mask_address

EVENT_FILL = "wallet_fill"
EVENT_ORDER = "wallet_order"
EVENT_STAKING = "wallet_staking"
EVENT_SLICED_STARTED = "sliced_order_started"
EVENT_SLICED_COMPLETED = "sliced_order_completed"
EVENT_SLICED_CANCELLED = "sliced_order_cancelled"
EVENT_LARGE_STAKE = "large_stake"
EVENT_NEW_MARKETS = "new_markets"
EVENT_SYSTEM_STARTED = "system_started"
EVENT_SYSTEM_STOPPED = "system_stopped"
EVENT_WALLET_STATUS = "wallet_status"

_SLICED_EVENT_TYPES = {
    SlicedOrderPhase.STARTED: EVENT_SLICED_STARTED,
    SlicedOrderPhase.COMPLETED: EVENT_SLICED_COMPLETED,
    SlicedOrderPhase.CANCELLED: EVENT_SLICED_CANCELLED,
}


def _str(value: Decimal | None) -> str | None:
    return None if value is None else str(value)


def activity_message(wallet: str, activity: Activity) -> NotificationMessage:
    """Message for one new non-aggregated activity of a tracked wallet."""
    payload: dict[str, Any] = {"wallet": wallet, "time": activity.time}
    match activity:
        case Fill():
            payload.update(
                coin=activity.coin,
                side=activity.side,
                size=str(activity.size),
                price=str(activity.price),
                order_id=activity.order_id,
                closed_pnl=_str(activity.closed_pnl),
                hash=activity.hash,
            )
            return NotificationMessage(
                event_type=EVENT_FILL,
                message=f"{activity.coin} fill for {mask_address(wallet)}",
                payload=payload,
            )
        case OrderEvent():
            payload.update(
                coin=activity.coin,
                side=activity.side,
                size=str(activity.size),
                price=_str(activity.price),
                order_id=activity.order_id,
                status=activity.status,
            )
            return NotificationMessage(
                event_type=EVENT_ORDER,
                message=f"{activity.coin} order {activity.status} for {mask_address(wallet)}",
                payload=payload,
            )
        case StakingEvent():
            payload.update(
                kind=activity.kind.value,
                amount=str(activity.amount),
                validator=activity.validator,
                hash=activity.hash,
            )
            return NotificationMessage(
                event_type=EVENT_STAKING,
                message=f"Staking {activity.kind.value} for {mask_address(wallet)}",
                payload=payload,
            )
    # Sliced fills are reported through SlicedOrderTransition.
    raise TypeError(f"Unsupported activity type: {type(activity).__name__}")


def sliced_order_message(transition: SlicedOrderTransition) -> NotificationMessage:
    """Message for a sliced-order lifecycle transition."""
    event_type = _SLICED_EVENT_TYPES.get(transition.phase)
    if event_type is None:
        raise ValueError(f"phase {transition.phase.value} is not notifiable")
    return NotificationMessage(
        event_type=event_type,
        message=(
            f"Sliced order {transition.slice_order_id} {transition.phase.value.lower()} "
            f"for {mask_address(transition.wallet)}"
        ),
        payload={
            "wallet": transition.wallet,
            "slice_order_id": transition.slice_order_id,
            "coin": transition.coin,
            "side": transition.side,
            "start_time": transition.start_time,
            "time": transition.time,
            "initial_size": str(transition.initial_size),
            "fills_seen": transition.fills_seen,
            "filled_size": str(transition.filled_size),
            "duration_ms": transition.duration_ms,
            "closed_pnl": _str(transition.closed_pnl),
        },
    )


def large_stake_message(wallet: str, event: StakingEvent) -> NotificationMessage:
    """System-wide alert for a staking movement above the broadcast threshold."""
    return NotificationMessage(
        event_type=EVENT_LARGE_STAKE,
        message=f"Large staking {event.kind.value} of {event.amount} HYPE",
        payload={
            "wallet": wallet,
            "time": event.time,
            "kind": event.kind.value,
            "amount": str(event.amount),
            "validator": event.validator,
            "hash": event.hash,
        },
    )


def _listing(listing: MarketListing) -> dict[str, Any]:
    return {"name": listing.name, "sz_decimals": listing.sz_decimals}


def new_markets_message(diff: MarketListingDiff) -> NotificationMessage:
    """Announcement of newly listed perpetual and spot instruments."""
    names = [m.name for m in (*diff.new_perps, *diff.new_spots)]
    return NotificationMessage(
        event_type=EVENT_NEW_MARKETS,
        message=f"New markets listed: {', '.join(names)}",
        payload={
            "perps": [_listing(m) for m in diff.new_perps],
            "spots": [_listing(m) for m in diff.new_spots],
        },
    )


def wallet_status_message(status: WalletStatus, *, recipient_id: str | None = None) -> NotificationMessage:
    """Reply to a status request; ``positions``/``open_orders`` are None when unknown."""
    positions = (
        None
        if status.open_positions is None
        else [
            {"coin": p.coin, "size": str(p.size), "unrealized_pnl": _str(p.unrealized_pnl)}
            for p in status.open_positions
        ]
    )
    return NotificationMessage(
        event_type=EVENT_WALLET_STATUS,
        message=f"Status for {status.display_name}",
        payload={
            "wallet": status.address,
            "nickname": status.display_name,
            "window_hours": max(1, status.window_ms // 3_600_000),
            "activity_count": status.activity_count,
            "last_activity_time": status.last_activity_time,
            "positions": positions,
            "open_orders": status.open_order_count,
            "account_value": _str(status.account_value),
            "delegated": _str(status.delegated),
        },
        recipient_id=recipient_id,
    )
