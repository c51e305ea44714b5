# -*- coding: utf-8 -*-
"""Hyperliquid info API client (read-only POST /info queries)."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Callable, Dict, List, Literal, Optional, cast

import structlog
from structlog.contextvars import bound_contextvars

from hyperliquid_wallet_tracker.clients.info_api.schema import (
    DelegatorHistorySchema,
    FillSchema,
    MetaSchema,
    OrderHistorySchema,
    OrderSchema,
    TwapSliceFillSchema,
)
from hyperliquid_wallet_tracker.config import Settings
from hyperliquid_wallet_tracker.utils.validation import mask_address

if TYPE_CHECKING:
    from hyperliquid_wallet_tracker.clients.http import AsyncHttpClient

InfoQuery = Literal[
    "userFills",
    "historicalOrders",
    "userTwapSliceFills",
    "openOrders",
    "clearinghouseState",
    "delegatorSummary",
    "delegatorHistory",
    "meta",
    "spotMeta",
]


class InfoApiClient:
    """Client for the Hyperliquid ``/info`` endpoint.

    One method per query type. Transport failures surface as HyperliquidAPIError
    (raised by the HTTP client after its retries); an unexpected payload shape
    degrades to an empty result and is logged.
    """

    def __init__(
        self,
        http_client: "AsyncHttpClient",
        settings: Settings,
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        """Initialize the client.

        Args:
            http_client: Async HTTP client (e.g. AsyncHttpClient).
            settings: Application settings (uses settings.api.base_url).
            get_logger: Logger factory (injected) with default of structlog.get_logger.
            logger_name: Optional logger name (defaults to class name).
        """
        self._http = http_client
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)

    def _info_url(self) -> str:
        return f"{self._settings.api.base_url.rstrip('/')}/info"

    async def _query(
        self,
        query: InfoQuery,
        *,
        user: Optional[str] = None,
        start_time: Optional[int] = None,
        end_time: Optional[int] = None,
    ) -> Any:
        body: Dict[str, Any] = {"type": query}
        if user is not None:
            body["user"] = user
        if start_time is not None:
            body["startTime"] = start_time
        if end_time is not None:
            body["endTime"] = end_time
        return await self._http.post_json(self._info_url(), json=body)

    async def _query_list(self, query: InfoQuery, **kwargs: Any) -> List[Dict[str, Any]]:
        user = kwargs.get("user")
        with bound_contextvars(
            info_query=query,
            info_user_masked=mask_address(user) if user else None,
        ):
            data = await self._query(query, **kwargs)
            if data is None:
                return []
            if not isinstance(data, list):
                self._logger.warning(
                    "info_api_non_list_response",
                    info_response_type=type(data).__name__,
                )
                return []
            return [cast(Dict[str, Any], x) for x in cast(list[Any], data) if isinstance(x, dict)]

    async def _query_dict(self, query: InfoQuery, **kwargs: Any) -> Optional[Dict[str, Any]]:
        user = kwargs.get("user")
        with bound_contextvars(
            info_query=query,
            info_user_masked=mask_address(user) if user else None,
        ):
            data = await self._query(query, **kwargs)
            if data is None:
                return None
            if not isinstance(data, dict):
                self._logger.warning(
                    "info_api_non_dict_response",
                    info_response_type=type(data).__name__,
                )
                return None
            return cast(Dict[str, Any], data)

    # -- per-wallet activity ------------------------------------------------

    async def user_fills(self, user: str) -> List[FillSchema]:
        """Most recent fills of a wallet."""
        return cast(List[FillSchema], await self._query_list("userFills", user=user))

    async def order_history(self, user: str) -> List[OrderHistorySchema]:
        """Order status history of a wallet."""
        return cast(List[OrderHistorySchema], await self._query_list("historicalOrders", user=user))

    async def twap_slice_fills(self, user: str) -> List[TwapSliceFillSchema]:
        """Fills of the wallet's sliced (TWAP) orders, one item per slice."""
        return cast(
            List[TwapSliceFillSchema], await self._query_list("userTwapSliceFills", user=user)
        )

    async def open_orders(self, user: str) -> List[OrderSchema]:
        return cast(List[OrderSchema], await self._query_list("openOrders", user=user))

    async def clearinghouse_state(self, user: str) -> Optional[Dict[str, Any]]:
        """Perpetuals account state (margin summary, asset positions)."""
        return await self._query_dict("clearinghouseState", user=user)

    # -- staking -------------------------------------------------------------

    async def delegator_summary(self, user: str) -> Optional[Dict[str, Any]]:
        return await self._query_dict("delegatorSummary", user=user)

    async def delegator_history(
        self,
        user: str,
        *,
        start_time: Optional[int] = None,
        end_time: Optional[int] = None,
    ) -> List[DelegatorHistorySchema]:
        """Staking movements of a wallet, optionally bounded in time (epoch ms)."""
        return cast(
            List[DelegatorHistorySchema],
            await self._query_list(
                "delegatorHistory", user=user, start_time=start_time, end_time=end_time
            ),
        )

    # -- market data ---------------------------------------------------------

    async def meta(self) -> Optional[MetaSchema]:
        """Perpetuals universe."""
        return cast(Optional[MetaSchema], await self._query_dict("meta"))

    async def spot_meta(self) -> Optional[MetaSchema]:
        """Spot universe."""
        return cast(Optional[MetaSchema], await self._query_dict("spotMeta"))

