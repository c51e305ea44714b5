"""On-demand status report of one tracked wallet."""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Any, cast


def _decimal(value: Any) -> Decimal | None:
    if value is None or value == "":
        return None
    try:
        return Decimal(str(value))
    except InvalidOperation:
        return None


@dataclass(frozen=True, slots=True)
class OpenPosition:
    """A non-zero perpetual position from ``clearinghouseState['assetPositions']``."""

    coin: str
    size: Decimal
    """Signed size (``szi``); negative is short."""
    entry_price: Decimal | None = None
    unrealized_pnl: Decimal | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any]) -> OpenPosition:
        position = response.get("position")
        if not isinstance(position, dict):
            raise ValueError("asset position without position body")
        body = cast(dict[str, Any], position)
        coin = body.get("coin")
        size = _decimal(body.get("szi"))
        if not coin or size is None:
            raise ValueError("position without coin or size")
        return cls(
            coin=str(coin),
            size=size,
            entry_price=_decimal(body.get("entryPx")),
            unrealized_pnl=_decimal(body.get("unrealizedPnl")),
        )

    @classmethod
    def from_clearinghouse_state(cls, state: dict[str, Any]) -> list[OpenPosition]:
        """Open positions of an account; zero-size and unparsable entries are skipped."""
        raw = state.get("assetPositions")
        if not isinstance(raw, list):
            return []
        positions: list[OpenPosition] = []
        for item in cast(list[Any], raw):
            if not isinstance(item, dict):
                continue
            try:
                position = cls.from_response(cast(dict[str, Any], item))
            except ValueError:
                continue
            if position.size != 0:
                positions.append(position)
        return positions


@dataclass(frozen=True, slots=True)
class WalletStatus:
    """Recent activity and current holdings of a wallet.

    Fields that could not be fetched are None (unknown), which is distinct
    from an empty list or zero.
    """

    address: str
    display_name: str
    window_ms: int
    activity_count: int
    last_activity_time: int | None = None
    open_positions: list[OpenPosition] | None = None
    open_order_count: int | None = None
    account_value: Decimal | None = None
    delegated: Decimal | None = None

    @staticmethod
    def account_value_from_state(state: dict[str, Any]) -> Decimal | None:
        summary = state.get("marginSummary")
        if not isinstance(summary, dict):
            return None
        return _decimal(cast(dict[str, Any], summary).get("accountValue"))

    @staticmethod
    def delegated_from_summary(summary: dict[str, Any]) -> Decimal | None:
        """HYPE currently delegated, from a ``delegatorSummary`` response."""
        return _decimal(summary.get("delegated"))
