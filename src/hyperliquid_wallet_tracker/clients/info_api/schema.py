"""Info API response types (keys match the venue's camelCase JSON)."""

from __future__ import annotations

from typing import Any, TypedDict


class FillSchema(TypedDict, total=False):
    """``userFills`` item."""

    coin: str
    px: str
    sz: str
    side: str
    time: int
    startPosition: str
    dir: str
    closedPnl: str
    hash: str
    oid: int
    crossed: bool
    fee: str
    tid: int
    feeToken: str


class OrderSchema(TypedDict, total=False):
    """Order body, nested under ``order`` in history items; also an ``openOrders`` item."""

    coin: str
    side: str
    limitPx: str
    sz: str
    origSz: str
    oid: int
    timestamp: int
    orderType: str
    reduceOnly: bool


class OrderHistorySchema(TypedDict, total=False):
    """``historicalOrders`` item."""

    order: OrderSchema
    status: str
    statusTimestamp: int


class TwapSliceFillSchema(TypedDict, total=False):
    """``userTwapSliceFills`` item."""

    fill: FillSchema
    twapId: int
    status: Any
    state: dict[str, Any]


class DelegatorHistorySchema(TypedDict, total=False):
    """``delegatorHistory`` item. ``delta`` holds one of delegate / cDeposit / cWithdraw."""

    time: int
    hash: str
    delta: dict[str, Any]


class UniverseEntrySchema(TypedDict, total=False):
    """Entry of ``meta['universe']`` / ``spotMeta['universe']``."""

    name: str
    szDecimals: int
    maxLeverage: int
    tokens: list[int]
    index: int


class MetaSchema(TypedDict, total=False):
    """``meta`` / ``spotMeta`` response."""

    universe: list[UniverseEntrySchema]
    tokens: list[dict[str, Any]]
