# -*- coding: utf-8 -*-
"""Utility modules."""

from hyperliquid_wallet_tracker.utils.dedupe import event_id
from hyperliquid_wallet_tracker.utils.validation import (
    is_hex_address,
    mask_address,
    normalize_address,
    short_hash,
)

__all__ = ["event_id", "is_hex_address", "mask_address", "normalize_address", "short_hash"]
