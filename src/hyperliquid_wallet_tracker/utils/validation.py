"""Validation helpers for wallet addresses."""

from __future__ import annotations

import re
from typing import Any

_ADDRESS_RE = re.compile(r"^0x[a-fA-F0-9]{40}$")


def is_hex_address(addr: Any) -> bool:
    """Return True if addr is a valid 0x wallet address (42 chars)."""
    if not isinstance(addr, str):
        return False
    return _ADDRESS_RE.match(addr.strip()) is not None


def normalize_address(addr: str) -> str:
    """Lowercase and strip an address so lookups are case-insensitive."""
    return addr.strip().lower()


def mask_address(addr: str | None) -> str:
    """Return a masked wallet address for logging (e.g. 0x1234...abcd)."""
    if not addr or len(addr) < 10:
        return "***"
    return f"{addr[:6]}...{addr[-4:]}"


def short_hash(value: str | None, *, head: int = 10, tail: int = 8) -> str:
    """Shorten a transaction hash or validator address for display."""
    if not value:
        return ""
    if len(value) <= head + tail:
        return value
    return f"{value[:head]}...{value[-tail:]}"
