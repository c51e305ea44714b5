"""Deterministic event identity for the processed-event store."""

from __future__ import annotations

import hashlib

from hyperliquid_wallet_tracker.models.activity import (
    Activity,
    Fill,
    OrderEvent,
    SlicedFill,
    StakingEvent,
)


def _composite(*parts: object) -> str:
    raw = "|".join("" if p is None else str(p) for p in parts)
    return "cmp:" + hashlib.sha1(raw.encode("utf-8")).hexdigest()


def event_id(activity: Activity) -> str:
    """Return a stable key identifying an activity (for deduplication).

    Prefers the exchange-assigned id (trade id, order id, tx hash) combined with
    the event time. Falls back to a hash of immutable fields; never random.
    """
    match activity:
        case Fill(time=t, trade_id=tid, order_id=oid):
            if tid is not None:
                return f"fill:{t}:{tid}"
            if oid is not None:
                return f"fill:{t}:oid:{oid}"
            return _composite(
                "fill", t, activity.coin, activity.side, activity.size, activity.price
            )
        case OrderEvent(time=t, order_id=oid, status=status):
            if oid is not None:
                return f"order:{t}:{oid}:{status}"
            return _composite(
                "order", t, activity.coin, activity.side, activity.size, status
            )
        case StakingEvent(time=t, hash=tx):
            if tx:
                return f"staking:{t}:{tx}"
            return _composite(
                "staking", t, activity.kind.value, activity.amount, activity.validator
            )
        case SlicedFill(time=t, slice_order_id=twap_id, slice_id=sid):
            if sid is not None:
                return f"slice:{twap_id}:{sid}"
            return _composite(
                "slice", twap_id, t, activity.side, activity.size, activity.price
            )
    raise TypeError(f"Unsupported activity type: {type(activity).__name__}")
