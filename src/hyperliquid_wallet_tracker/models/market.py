"""Tradable instrument listings and the diff between two observations."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Literal, cast

MarketPool = Literal["perp", "spot"]


@dataclass(frozen=True, slots=True)
class MarketListing:
    """One instrument from a ``meta`` / ``spotMeta`` universe."""

    name: str
    pool: MarketPool
    sz_decimals: int | None = None

    @classmethod
    def from_response(cls, response: dict[str, Any], pool: MarketPool) -> MarketListing:
        name = response.get("name")
        if not name:
            raise ValueError("universe entry without name")
        decimals = response.get("szDecimals")
        return cls(
            name=str(name),
            pool=pool,
            sz_decimals=decimals if isinstance(decimals, int) else None,
        )

    @classmethod
    def from_universe(cls, meta: dict[str, Any] | None, pool: MarketPool) -> list[MarketListing]:
        """Parse ``meta['universe']``; entries without a name are skipped."""
        if not meta:
            return []
        universe = meta.get("universe")
        if not isinstance(universe, list):
            return []
        listings: list[MarketListing] = []
        for entry in cast(list[Any], universe):
            if isinstance(entry, dict) and entry.get("name"):
                listings.append(cls.from_response(cast(dict[str, Any], entry), pool))
        return listings


@dataclass(frozen=True, slots=True)
class MarketListingDiff:
    """Instruments present now that were absent from the previous snapshot."""

    new_perps: list[MarketListing] = field(default_factory=list)
    new_spots: list[MarketListing] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.new_perps and not self.new_spots
