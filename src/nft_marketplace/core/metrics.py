"""Derived trading metrics shared by owner and collection views."""
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Any

# floorPrice reported for a collection with no NFTs.
NO_FLOOR_PRICE: float | None = None


@dataclass(frozen=True)
class TradeWindow:
    """Trade total of the last day and its ratio to the day before, in percent."""

    today_trade: float
    percent: float


@dataclass(frozen=True)
class CollectionStats:
    """Aggregates computed by scanning a collection's NFTs."""

    volume: float
    floor_price: float | None
    owners: int
    items: int

    def as_fields(self) -> dict[str, Any]:
        """Document fields as exposed in API payloads."""
        return {
            "volume": self.volume,
            "floorPrice": self.floor_price,
            "owners": self.owners,
            "items": self.items,
        }


def compute_24h_values(
    trades: Iterable[tuple[float, float]], now: datetime | None = None
) -> TradeWindow:
    """Split (unix date, price) pairs into the last day and the day before.

    A trade is "today" when its date is after now minus one day, and
    "yesterday" when it is after now minus two days but not after the first
    boundary. The percent is 0 without trades today, 100 without trades
    yesterday, else today / yesterday * 100.
    """
    now = now or datetime.now(timezone.utc)
    yesterday = (now - timedelta(days=1)).timestamp()
    day_before = (now - timedelta(days=2)).timestamp()

    today_trade = 0.0
    yesterday_trade = 0.0
    for date, price in trades:
        if date > yesterday:
            today_trade += price
        elif date > day_before:
            yesterday_trade += price

    if today_trade == 0:
        percent = 0.0
    elif yesterday_trade == 0:
        percent = 100.0
    else:
        percent = today_trade / yesterday_trade * 100
    return TradeWindow(today_trade=today_trade, percent=percent)


def trade_points(activities: Iterable[Mapping[str, Any]]) -> list[tuple[float, float]]:
    """Extract (date, price) pairs from Activity documents; missing values count as 0."""
    return [
        (float(a.get("date") or 0), float(a.get("price") or 0))
        for a in activities
    ]


def distinct_owners(nfts: Iterable[Mapping[str, Any]]) -> list[str]:
    """Current owners in first-seen order, each once."""
    return list(dict.fromkeys(nft["owner"] for nft in nfts if nft.get("owner")))


def compute_collection_stats(nfts: list[Mapping[str, Any]]) -> CollectionStats:
    """Volume (sum of prices), floor price (min price), distinct owners, item count."""
    prices = [float(nft.get("price") or 0) for nft in nfts]
    return CollectionStats(
        volume=sum(prices),
        floor_price=min(prices) if prices else NO_FLOOR_PRICE,
        owners=len(distinct_owners(nfts)),
        items=len(nfts),
    )
