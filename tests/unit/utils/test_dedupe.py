# -*- coding: utf-8 -*-
"""Unit tests for event identity derivation."""

from __future__ import annotations

from collections.abc import Callable
from decimal import Decimal
from typing import Any

import pytest

from hyperliquid_wallet_tracker.models.activity import (
    Fill,
    OrderEvent,
    SlicedFill,
    StakingEvent,
    StakingKind,
)
from hyperliquid_wallet_tracker.utils.dedupe import event_id


def test_fill_key_prefers_trade_id(fill_factory: Callable[..., Fill]) -> None:
    fill = fill_factory(time=1000, trade_id="77", order_id="5")
    assert event_id(fill) == "fill:1000:77"


def test_fill_key_falls_back_to_order_id(fill_factory: Callable[..., Fill]) -> None:
    fill = fill_factory(time=1000, trade_id=None, order_id="5")
    assert event_id(fill) == "fill:1000:oid:5"


def test_fill_without_ids_uses_deterministic_composite(fill_factory: Callable[..., Fill]) -> None:
    a = fill_factory(trade_id=None, order_id=None)
    b = fill_factory(trade_id=None, order_id=None)

    assert event_id(a) == event_id(b)
    assert event_id(a).startswith("cmp:")


def test_composite_changes_with_immutable_fields(
    fill_factory: Callable[..., Fill],
    D: Callable[[Any], Decimal],
) -> None:
    a = fill_factory(trade_id=None, order_id=None, size=D("1"))
    b = fill_factory(trade_id=None, order_id=None, size=D("2"))
    assert event_id(a) != event_id(b)


def test_order_key_includes_status(order_event_factory: Callable[..., OrderEvent]) -> None:
    opened = order_event_factory(time=5, order_id="9", status="open")
    filled = order_event_factory(time=5, order_id="9", status="filled")

    assert event_id(opened) == "order:5:9:open"
    assert event_id(opened) != event_id(filled)


def test_fill_and_order_with_same_time_and_id_do_not_collide(
    fill_factory: Callable[..., Fill],
    order_event_factory: Callable[..., OrderEvent],
) -> None:
    fill = fill_factory(time=5, trade_id=None, order_id="9")
    order = order_event_factory(time=5, order_id="9", status="filled")
    assert event_id(fill) != event_id(order)


def test_staking_key_uses_hash(staking_factory: Callable[..., StakingEvent]) -> None:
    event = staking_factory(time=42, hash="0xfeed")
    assert event_id(event) == "staking:42:0xfeed"


def test_staking_without_hash_uses_composite(
    staking_factory: Callable[..., StakingEvent],
) -> None:
    a = staking_factory(hash=None, kind=StakingKind.DELEGATE)
    b = staking_factory(hash=None, kind=StakingKind.UNDELEGATE)

    assert event_id(a).startswith("cmp:")
    assert event_id(a) != event_id(b)


def test_slice_key_is_scoped_to_parent_order(
    sliced_fill_factory: Callable[..., SlicedFill],
) -> None:
    s = sliced_fill_factory(slice_order_id="T1", slice_id="88")
    assert event_id(s) == "slice:T1:88"


def test_unknown_type_raises() -> None:
    with pytest.raises(TypeError):
        event_id(object())  # type: ignore[arg-type]


def test_slice_without_id_distinguishes_price(
    sliced_fill_factory: Callable[..., SlicedFill],
    D: Callable[[Any], Decimal],
) -> None:
    a = sliced_fill_factory(time=100, slice_id=None, price=D("100"))
    b = sliced_fill_factory(time=100, slice_id=None, price=D("101"))
    again = sliced_fill_factory(time=100, slice_id=None, price=D("100"))

    assert event_id(a) != event_id(b)
    assert event_id(a) == event_id(again)
    assert event_id(a).startswith("cmp:")
