"""Wallet activity: a closed tagged union of the four shapes the venue reports.

Raw info-API records are classified exactly once, in the event source, via the
``from_response`` constructors below. Everything downstream (dedupe, sliced-order
aggregation, dispatch, rendering) matches on these frozen dataclasses.

All times are epoch milliseconds as reported by the venue. Sizes, prices and
amounts are Decimal to keep fill sums exact.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Any, Literal, cast

TradeSide = Literal["B", "A"]
"""Venue side code: B = bid (buy / long), A = ask (sell / short)."""

# Sliced-order (TWAP) status strings that end the order.
_DONE_STATUSES = frozenset({"finished", "done", "completed", "filled"})
_CANCELLED_STATUSES = frozenset({"terminated", "canceled", "cancelled", "error"})


def _to_decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        return None


def _require_decimal(value: Any, field: str) -> Decimal:
    number = _to_decimal(value)
    if number is None:
        raise ValueError(f"missing or invalid numeric field: {field}")
    return number


def _require_time(value: Any) -> int:
    if value is None or isinstance(value, bool):
        raise ValueError("missing time")
    try:
        return int(value)
    except (TypeError, ValueError) as e:
        raise ValueError(f"invalid time: {value!r}") from e


def _optional_id(value: Any) -> str | None:
    if value is None or value == "":
        return None
    return str(value)


def _side(value: Any) -> TradeSide:
    side = str(value or "").upper()
    if side in ("B", "BUY", "BID"):
        return "B"
    if side in ("A", "SELL", "ASK"):
        return "A"
    raise ValueError(f"unknown side: {value!r}")


def is_spot_coin(coin: str) -> bool:
    """Spot pairs are named BASE/QUOTE or referenced by index (@107)."""
    return "/" in coin or coin.startswith("@")


@dataclass(frozen=True, slots=True)
class Fill:
    """One execution of one of the wallet's orders (info type ``userFills``)."""

    time: int
    coin: str
    side: TradeSide
    size: Decimal
    price: Decimal
    order_id: str | None = None
    trade_id: str | None = None
    closed_pnl: Decimal | None = None
    hash: str | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> Fill:
        """Build from a raw ``userFills`` item (camelCase)."""
        return cls(
            time=_require_time(response.get("time")),
            coin=str(response.get("coin") or "Unknown"),
            side=_side(response.get("side")),
            size=_require_decimal(response.get("sz"), "sz"),
            price=_require_decimal(response.get("px"), "px"),
            order_id=_optional_id(response.get("oid")),
            trade_id=_optional_id(response.get("tid")),
            closed_pnl=_to_decimal(response.get("closedPnl")),
            hash=_optional_id(response.get("hash")),
        )


@dataclass(frozen=True, slots=True)
class OrderEvent:
    """A status change of one of the wallet's orders (info type ``historicalOrders``)."""

    time: int
    order_id: str | None
    status: str
    coin: str
    side: TradeSide
    size: Decimal
    price: Decimal | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> OrderEvent:
        """Build from a raw order-history item.

        The API nests the order under ``order`` with ``status`` and
        ``statusTimestamp`` alongside; a flat record is accepted too.
        """
        nested = response.get("order")
        order = cast(dict[str, Any], nested) if isinstance(nested, dict) else response
        time = response.get("statusTimestamp")
        if time is None:
            time = response.get("time", order.get("timestamp"))
        status = response.get("status") or response.get("orderStatus") or "unknown"
        return cls(
            time=_require_time(time),
            order_id=_optional_id(order.get("oid")),
            status=str(status),
            coin=str(order.get("coin") or "Unknown"),
            side=_side(order.get("side")),
            size=_require_decimal(order.get("origSz", order.get("sz")), "sz"),
            price=_to_decimal(order.get("limitPx", order.get("px"))),
        )


@dataclass(frozen=True, slots=True)
class SlicedFill:
    """One slice of a sliced (TWAP) order (info type ``userTwapSliceFills``)."""

    time: int
    slice_order_id: str
    coin: str
    side: TradeSide
    size: Decimal
    slice_id: str | None = None
    price: Decimal | None = None
    closed_pnl: Decimal | None = None
    is_terminal_done: bool = False
    is_terminal_cancelled: bool = False
    filled_size: Decimal | None = None

    @property
    def is_terminal(self) -> bool:
        return self.is_terminal_done or self.is_terminal_cancelled

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> SlicedFill:
        """Build from a raw ``{fill: {...}, twapId, status?, state?}`` item."""
        raw_fill = response.get("fill")
        fill = cast(dict[str, Any], raw_fill) if isinstance(raw_fill, dict) else response
        twap_id = _optional_id(response.get("twapId", fill.get("twapId")))
        if twap_id is None:
            raise ValueError("missing twapId")

        raw_status = response.get("status", fill.get("status"))
        if isinstance(raw_status, dict):
            raw_status = cast(dict[str, Any], raw_status).get("status")
        status = str(raw_status or "").lower()

        raw_state = response.get("state")
        state = cast(dict[str, Any], raw_state) if isinstance(raw_state, dict) else {}
        filled = _to_decimal(
            response.get("filledSz", response.get("executedSz", state.get("executedSz")))
        )

        return cls(
            time=_require_time(fill.get("time")),
            slice_order_id=twap_id,
            coin=str(fill.get("coin") or "Unknown"),
            side=_side(fill.get("side")),
            size=_require_decimal(fill.get("sz"), "sz"),
            slice_id=_optional_id(fill.get("tid")),
            price=_to_decimal(fill.get("px")),
            closed_pnl=_to_decimal(fill.get("closedPnl")),
            is_terminal_done=status in _DONE_STATUSES,
            is_terminal_cancelled=status in _CANCELLED_STATUSES,
            filled_size=filled,
        )


class StakingKind(str, Enum):
    """Kind of staking ledger movement."""

    DELEGATE = "delegate"
    UNDELEGATE = "undelegate"
    DEPOSIT_TO_STAKING = "deposit_to_staking"
    WITHDRAW_FROM_STAKING = "withdraw_from_staking"


@dataclass(frozen=True, slots=True)
class StakingEvent:
    """A staking movement (info type ``delegatorHistory``)."""

    time: int
    kind: StakingKind
    amount: Decimal
    hash: str | None = None
    validator: str | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any], *, wei_decimals: int = 18) -> StakingEvent:
        """Build from a raw ``{time, hash, delta: {...}}`` item.

        ``delegate`` amounts are already in token units; ``cDeposit`` and
        ``cWithdraw`` carry ``wei`` that is scaled by ``wei_decimals``.
        """
        time = _require_time(response.get("time"))
        tx_hash = _optional_id(response.get("hash"))
        raw_delta = response.get("delta")
        delta = cast(dict[str, Any], raw_delta) if isinstance(raw_delta, dict) else {}
        scale = Decimal(10) ** wei_decimals

        if isinstance(delta.get("delegate"), dict):
            delegate = cast(dict[str, Any], delta["delegate"])
            kind = StakingKind.UNDELEGATE if delegate.get("isUndelegate") else StakingKind.DELEGATE
            return cls(
                time=time,
                kind=kind,
                amount=_require_decimal(delegate.get("amount"), "amount"),
                hash=tx_hash,
                validator=_optional_id(delegate.get("validator")),
            )
        if isinstance(delta.get("cDeposit"), dict):
            wei = _require_decimal(cast(dict[str, Any], delta["cDeposit"]).get("wei"), "wei")
            return cls(time=time, kind=StakingKind.DEPOSIT_TO_STAKING, amount=wei / scale, hash=tx_hash)
        if isinstance(delta.get("cWithdraw"), dict):
            wei = _require_decimal(cast(dict[str, Any], delta["cWithdraw"]).get("wei"), "wei")
            return cls(time=time, kind=StakingKind.WITHDRAW_FROM_STAKING, amount=wei / scale, hash=tx_hash)
        raise ValueError(f"unsupported staking delta: {sorted(delta)}")


Activity = Fill | OrderEvent | SlicedFill | StakingEvent
