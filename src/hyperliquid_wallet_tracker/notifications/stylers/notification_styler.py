# -*- coding: utf-8 -*-
"""Event-based notification styler with emoji sections (Telegram HTML)."""

from __future__ import annotations

import html
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any, cast

from hyperliquid_wallet_tracker.models.activity import is_spot_coin
from hyperliquid_wallet_tracker.notifications import messages as ev
from hyperliquid_wallet_tracker.notifications.types import NotificationMessage, NotificationStyler

_STAKING_TITLES = {
    "delegate": ("📥", "HYPE Staking", "Delegate"),
    "undelegate": ("📤", "HYPE Unstaking", "Undelegate"),
    "deposit_to_staking": ("💰", "Spot to Staking Transfer", "Deposit to Staking"),
    "withdraw_from_staking": ("💸", "Staking to Spot Transfer", "Withdraw from Staking"),
}

_MAX_LISTED_POSITIONS = 5

_STAKING_NOTES = {
    "delegate": ("⏱️ Lock Period", "1 day"),
    "undelegate": ("⏱️ Unstaking Queue", "7 days"),
    "withdraw_from_staking": ("⏱️ Processing Time", "7 days"),
}


class EventNotificationStyler(NotificationStyler):
    """Render notifications by event_type with emojis and formatted sections."""

    def render(self, message: NotificationMessage) -> str:
        """Dispatch to the appropriate renderer based on event_type."""
        match message.event_type:
            case ev.EVENT_FILL | ev.EVENT_ORDER:
                return self._render_order_activity(message)
            case ev.EVENT_STAKING:
                return self._render_staking(message)
            case ev.EVENT_SLICED_STARTED | ev.EVENT_SLICED_COMPLETED | ev.EVENT_SLICED_CANCELLED:
                return self._render_sliced_order(message)
            case ev.EVENT_LARGE_STAKE:
                return self._render_large_stake(message)
            case ev.EVENT_NEW_MARKETS:
                return self._render_new_markets(message)
            case ev.EVENT_WALLET_STATUS:
                return self._render_wallet_status(message)
            case ev.EVENT_SYSTEM_STARTED | ev.EVENT_SYSTEM_STOPPED:
                return self._render_system(message)
        return self._render_generic(message)

    def _render_order_activity(self, message: NotificationMessage) -> str:
        p = message.payload or {}
        coin = str(p.get("coin") or "Unknown")
        is_fill = message.event_type == ev.EVENT_FILL
        status = "Filled" if is_fill else str(p.get("status") or "Unknown")
        price = p.get("price")
        rows: list[tuple[str, Any]] = [
            ("👤 Wallet", self._wallet_name(p)),
            ("📈 Pair", html.escape(coin)),
            ("🏪 Market", "Spot" if is_spot_coin(coin) else "Perp"),
            ("📊 Side", self._display_side(p.get("side"), coin)),
            ("💰 Size", self._format_amount(p.get("size"))),
            ("💲 Price", self._format_amount(price) if price is not None else "Market Order"),
            ("📝 Status", html.escape(status)),
        ]
        pnl = self._to_decimal(p.get("closed_pnl"))
        if pnl:
            rows.append(("📈 PnL" if pnl > 0 else "📉 PnL", f"${self._format_amount(pnl)}"))
        rows.append(("⏰ Time", self._format_time_ms(p.get("time"))))
        lines = [
            "🔔 <b>New Order Activity</b>\n",
            self._section("", rows),
            self._address_line(p),
        ]
        return "\n".join(line for line in lines if line).strip()

    def _render_staking(self, message: NotificationMessage) -> str:
        p = message.payload or {}
        kind = str(p.get("kind") or "")
        icon, title, action = _STAKING_TITLES.get(kind, ("🔶", "Staking Activity", kind or "N/A"))
        rows: list[tuple[str, Any]] = [
            ("👤 Wallet", self._wallet_name(p)),
            ("🏪 Action", action),
            ("💰 Amount", f"{self._format_amount(p.get('amount'))} HYPE"),
        ]
        if p.get("validator"):
            rows.append(("🔐 Validator", f"<code>{self._short(p['validator'], 8, 6)}</code>"))
        note = _STAKING_NOTES.get(kind)
        if note:
            rows.append(note)
        if p.get("hash"):
            rows.append(("🔗 TX Hash", f"<code>{self._short(p['hash'], 10, 8)}</code>"))
        rows.append(("⏰ Time", self._format_time_ms(p.get("time"))))
        lines = [f"{icon} <b>{title}</b>\n", self._section("", rows), self._address_line(p)]
        return "\n".join(line for line in lines if line).strip()

    def _render_sliced_order(self, message: NotificationMessage) -> str:
        p = message.payload or {}
        coin = str(p.get("coin") or "Unknown")
        rows: list[tuple[str, Any]] = [
            ("👤 Wallet", self._wallet_name(p)),
            ("📈 Pair", html.escape(coin)),
            ("🏪 Market", "Spot" if is_spot_coin(coin) else "Perp"),
            ("📊 Side", self._display_side(p.get("side"), coin)),
            ("🆔 TWAP ID", html.escape(str(p.get("slice_order_id") or "N/A"))),
        ]
        if message.event_type == ev.EVENT_SLICED_STARTED:
            header = "🔄 <b>TWAP Order Started</b>\n"
            rows.append(("💰 Size", self._format_amount(p.get("initial_size"))))
            rows.append(("⏰ Started", self._format_time_ms(p.get("start_time"))))
        elif message.event_type == ev.EVENT_SLICED_COMPLETED:
            header = "✅ <b>TWAP Order Completed</b>\n"
            rows.extend(
                [
                    ("🧮 Total Fills", str(p.get("fills_seen", 0))),
                    ("💰 Size", self._format_amount(p.get("initial_size"))),
                    ("⏳ Duration", self._format_duration_ms(p.get("duration_ms"))),
                ]
            )
            pnl = self._to_decimal(p.get("closed_pnl"))
            if pnl is not None:
                rows.append(("📈 PnL" if pnl >= 0 else "📉 PnL", f"${self._format_amount(pnl)}"))
        else:
            header = "🛑 <b>TWAP Order Cancelled</b>\n"
            filled = self._format_amount(p.get("filled_size"))
            initial = self._format_amount(p.get("initial_size"))
            rows.extend(
                [
                    ("📦 Filled", f"{filled} / {initial}"),
                    ("🧮 Fills", str(p.get("fills_seen", 0))),
                    ("⏳ Duration", self._format_duration_ms(p.get("duration_ms"))),
                ]
            )
        lines = [header, self._section("", rows), self._address_line(p)]
        return "\n".join(line for line in lines if line).strip()

    def _render_large_stake(self, message: NotificationMessage) -> str:
        p = message.payload or {}
        kind = str(p.get("kind") or "")
        _, title, action = _STAKING_TITLES.get(kind, ("", "Staking Activity", kind or "N/A"))
        rows: list[tuple[str, Any]] = [
            ("🏪 Action", f"{action} ({title})"),
            ("💰 Amount", f"{self._format_amount(p.get('amount'))} HYPE"),
        ]
        if p.get("validator"):
            rows.append(("🔐 Validator", f"<code>{self._short(p['validator'], 8, 6)}</code>"))
        if p.get("hash"):
            rows.append(("🔗 TX Hash", f"<code>{self._short(p['hash'], 10, 8)}</code>"))
        rows.append(("⏰ Time", self._format_time_ms(p.get("time"))))
        lines = ["🐋 <b>Large Staking Movement</b>\n", self._section("", rows), self._address_line(p)]
        return "\n".join(line for line in lines if line).strip()

    def _render_new_markets(self, message: NotificationMessage) -> str:
        p = message.payload or {}
        blocks: list[str] = []
        for key, icon, label in (("perps", "⚡", "Perpetual"), ("spots", "💱", "Spot")):
            raw = p.get(key)
            markets = cast(list[dict[str, Any]], raw) if isinstance(raw, list) else []
            if not markets:
                continue
            plural = "s" if len(markets) > 1 else ""
            lines = [f"{icon} <b>New {label} Market{plural} Listed!</b>\n"]
            for index, market in enumerate(markets, start=1):
                lines.append(f"{index}. <b>{html.escape(str(market.get('name')))}</b>")
                if market.get("sz_decimals") is not None:
                    lines.append(f"   Size Decimals: {market['sz_decimals']}")
            blocks.append("\n".join(lines))
        if not blocks:
            return self._render_generic(message)
        blocks.append("🚀 Start trading now on Hyperliquid!")
        return "\n\n".join(blocks).strip()

    def _render_wallet_status(self, message: NotificationMessage) -> str:
        p = message.payload or {}
        hours = p.get("window_hours") or 24
        count = int(p.get("activity_count") or 0)
        if count:
            rows: list[tuple[str, Any]] = [
                (f"📈 Recent Activity ({hours}h)", f"{count} events"),
                ("⏰ Last Activity", self._format_time_ms(p.get("last_activity_time"))),
            ]
        else:
            rows = [("📈 Recent Activity", f"No activity in last {hours} hours")]

        raw = p.get("positions")
        position_lines: list[str] = []
        if not isinstance(raw, list):
            rows.append(("💼 Open Positions", "Unavailable"))
        else:
            positions = cast(list[dict[str, Any]], raw)
            rows.append(("💼 Open Positions", str(len(positions)) if positions else "None"))
            for pos in positions[:_MAX_LISTED_POSITIONS]:
                pnl = pos.get("unrealized_pnl")
                pnl_text = f" (PnL: ${self._format_amount(pnl)})" if pnl is not None else ""
                coin = html.escape(str(pos.get("coin")))
                position_lines.append(f"   • {coin}: {self._format_amount(pos.get('size'))}{pnl_text}")
            if len(positions) > _MAX_LISTED_POSITIONS:
                position_lines.append(f"   ... and {len(positions) - _MAX_LISTED_POSITIONS} more")

        extra: list[tuple[str, Any]] = []
        if p.get("open_orders") is not None:
            extra.append(("📋 Open Orders", str(p["open_orders"])))
        if p.get("account_value") is not None:
            extra.append(("💵 Account Value", f"${self._format_amount(p['account_value'])}"))
        if p.get("delegated") is not None:
            extra.append(("🥩 Staked", f"{self._format_amount(p['delegated'])} HYPE"))

        lines = [
            f"📊 <b>Status for {self._wallet_name(p)}</b>\n",
            self._section("", rows).rstrip("\n"),
            "\n".join(position_lines),
            self._section("", extra),
            self._address_line(p),
        ]
        return "\n".join(line for line in lines if line).strip()

    def _render_system(self, message: NotificationMessage) -> str:
        emoji, title = self._title(message.event_type)
        p = message.payload or {}
        rows: list[tuple[str, Any]] = [("", html.escape(message.message))]
        if p.get("wallets_count") is not None:
            rows.append(("👛 Tracked wallets", str(p["wallets_count"])))
        lines = [f"{emoji} <b>{title}</b>\n", self._section("", rows)]
        return "\n".join(line for line in lines if line).strip()

    def _render_generic(self, message: NotificationMessage) -> str:
        """Render unknown event types using message and payload."""
        emoji, title = self._title(message.event_type)
        lines = [f"{emoji} <b>{title}</b>", html.escape(message.message)]
        if message.payload:
            for key in sorted(message.payload.keys()):
                value = message.payload.get(key)
                if value is not None:
                    lines.append(f"<b>{key}:</b> {html.escape(str(value))}")
        return "\n".join(lines).strip()

    @staticmethod
    def _title(event_type: str) -> tuple[str, str]:
        mapping = {
            ev.EVENT_SYSTEM_STARTED: ("▶️", "Wallet Tracker Started"),
            ev.EVENT_SYSTEM_STOPPED: ("⏹️", "Wallet Tracker Stopped"),
        }
        return mapping.get(event_type, ("ℹ️", event_type.replace("_", " ").title()))

    def _section(self, header: str, rows: list[tuple[str, Any]]) -> str:
        """Format a section with an optional header and rows; empty values are skipped."""
        content_lines: list[str] = []
        for label, value in rows:
            if not value:
                continue
            if label:
                content_lines.append(f"{self._format_label(label)} {value}")
            else:
                content_lines.append(str(value))
        if not content_lines:
            return ""
        if header:
            content_lines.insert(0, f"<b>{header}</b>\n{'─' * 12}")
        return "\n".join(content_lines) + "\n"

    @staticmethod
    def _wallet_name(payload: dict[str, Any]) -> str:
        nickname = payload.get("nickname")
        if nickname:
            return html.escape(str(nickname))
        wallet = str(payload.get("wallet") or "")
        if len(wallet) < 10:
            return wallet or "N/A"
        return f"{wallet[:6]}...{wallet[-4:]}"

    @staticmethod
    def _address_line(payload: dict[str, Any]) -> str:
        wallet = payload.get("wallet")
        if not wallet:
            return ""
        return f"🔗 <b>Address:</b> <code>{html.escape(str(wallet))}</code>"

    @staticmethod
    def _display_side(side: Any, coin: str) -> str:
        """B/A as Long/Short on perps and Buy/Sell on spot."""
        spot = is_spot_coin(coin)
        if side == "B":
            return "Buy" if spot else "Long"
        if side == "A":
            return "Sell" if spot else "Short"
        return str(side or "N/A").upper()

    @staticmethod
    def _short(value: Any, head: int, tail: int) -> str:
        text = html.escape(str(value))
        if len(text) <= head + tail:
            return text
        return f"{text[:head]}...{text[-tail:]}"

    @staticmethod
    def _to_decimal(value: Any) -> Decimal | None:
        if value is None or value == "":
            return None
        try:
            return Decimal(str(value))
        except InvalidOperation:
            return None

    def _format_amount(self, value: Any) -> str:
        """Thousands separators, venue precision kept; N/A when missing."""
        number = self._to_decimal(value)
        if number is None:
            return "N/A" if value is None else html.escape(str(value))
        return f"{number:,}"

    @staticmethod
    def _format_time_ms(value: Any) -> str:
        """Format epoch milliseconds as UTC."""
        if value is None:
            return "N/A"
        try:
            ts = float(value) / 1000
            return datetime.fromtimestamp(ts, tz=timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        except (TypeError, ValueError, OSError, OverflowError):
            return str(value)

    @staticmethod
    def _format_duration_ms(value: Any) -> str:
        try:
            total_seconds = int(value) // 1000
        except (TypeError, ValueError):
            return "N/A"
        if total_seconds < 1:
            return f"{int(value)}ms"
        hours, rest = divmod(total_seconds, 3600)
        minutes, seconds = divmod(rest, 60)
        if hours:
            return f"{hours}h {minutes}m {seconds}s"
        if minutes:
            return f"{minutes}m {seconds}s"
        return f"{seconds}s"

    @staticmethod
    def _format_label(label: str) -> str:
        """Format row labels with bold text."""
        emoji, _, remainder = label.partition(" ")
        if remainder:
            return f"{emoji} <b>{remainder}:</b>"
        return f"<b>{label}:</b>"
