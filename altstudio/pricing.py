"""Pricing of bidders for a given selection of alternates."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Sequence

from .alternates import AlternateItem, NumberedAlternate, item_sort_key
from .bidders import Bidder


@dataclass(frozen=True)
class BidTotal:
    """A bidder's total price for one selection."""

    bidder_id: int
    name: str
    total: float


def price_for(bidder: Bidder, item: AlternateItem) -> float:
    if isinstance(item, NumberedAlternate):
        return bidder.alternate_price(item.index)
    return bidder.special_price or 0.0


def bidder_total(bidder: Bidder, selection: Iterable[AlternateItem] = ()) -> float:
    """Base price plus the bidder's price for every selected alternate."""

    ordered = sorted(set(selection), key=item_sort_key)
    return bidder.base_price + sum(price_for(bidder, item) for item in ordered)


def rank_bidders(
    bidders: Sequence[Bidder], selection: Iterable[AlternateItem] = ()
) -> List[BidTotal]:
    """Return every bidder's total, cheapest first.

    Equal totals keep the order of ``bidders`` so the first listed bidder wins
    a tie.
    """

    items = frozenset(selection)
    totals = [
        BidTotal(bidder_id=bidder.id, name=bidder.name, total=bidder_total(bidder, items))
        for bidder in bidders
    ]
    return sorted(totals, key=lambda bid: bid.total)


__all__ = ["BidTotal", "bidder_total", "price_for", "rank_bidders"]
