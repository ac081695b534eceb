"""Combination analysis: who wins every valid selection of alternates."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from .alternates import (
    AlternateItem,
    build_universe,
    describe_selection,
    enumerate_selections,
    item_sort_key,
    reconcile_selection,
    rules_for,
)
from .bidders import Bidder
from .config import AnalysisConfig
from .pricing import BidTotal, rank_bidders

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CombinationResult:
    """Ranking of all bidders for one valid selection."""

    label: str
    selection: Tuple[AlternateItem, ...]
    bids: Tuple[BidTotal, ...]

    @property
    def winner(self) -> BidTotal:
        return self.bids[0]

    @property
    def runner_up(self) -> Optional[BidTotal]:
        return self.bids[1] if len(self.bids) > 1 else None

    @property
    def margin(self) -> float:
        """Difference between the next lowest total and the winning total."""
        runner_up = self.runner_up
        return runner_up.total - self.winner.total if runner_up else 0.0

    @property
    def size(self) -> int:
        return len(self.selection)


@dataclass(frozen=True)
class WinRate:
    bidder_id: int
    name: str
    wins: int
    percentage: float


@dataclass(frozen=True)
class FrontierPoint:
    """Cheapest winning scenario that adds exactly ``size`` alternates."""

    size: int
    combination: CombinationResult


@dataclass
class BidAnalysis:
    """Structured output from :func:`analyze`."""

    combinations: List[CombinationResult]
    filtered: List[CombinationResult]
    top: List[CombinationResult]
    win_rates: List[WinRate]
    frontier: List[FrontierPoint]
    contractor: List[CombinationResult] = field(default_factory=list)
    contractor_id: Optional[int] = None
    selection: Optional[Tuple[AlternateItem, ...]] = None
    current: List[BidTotal] = field(default_factory=list)
    metadata: Dict[str, Any] = field(default_factory=dict)


def all_combinations(
    bidders: Sequence[Bidder], config: AnalysisConfig
) -> List[CombinationResult]:
    """Rank every bidder for every valid selection, cheapest winner first."""

    if not bidders:
        logger.info("No bidders provided; nothing to rank")
        return []

    universe = build_universe(config.alternate_count, config.special_enabled)
    rules = rules_for(config)
    logger.info(
        "Enumerating %d alternates with %d exclusion rule(s) for %d bidders",
        len(universe),
        len(rules),
        len(bidders),
    )

    results: List[CombinationResult] = []
    for combo in enumerate_selections(universe, rules):
        results.append(
            CombinationResult(
                label=describe_selection(combo, config),
                selection=combo,
                bids=tuple(rank_bidders(bidders, combo)),
            )
        )

    results.sort(key=lambda result: result.winner.total)
    return results


def budget_filtered(
    results: Sequence[CombinationResult], budget_cap: Optional[float]
) -> List[CombinationResult]:
    """Keep results whose winning total fits under ``budget_cap``.

    Only ``None`` disables filtering; lowering the cap never keeps more results.
    """

    if budget_cap is None:
        return list(results)
    return [result for result in results if result.winner.total <= budget_cap]


def win_rate_statistics(
    bidders: Sequence[Bidder], results: Sequence[CombinationResult]
) -> List[WinRate]:
    """Share of ``results`` won by each bidder, highest share first."""

    wins: Dict[int, int] = {bidder.id: 0 for bidder in bidders}
    for result in results:
        winner_id = result.winner.bidder_id
        wins[winner_id] = wins.get(winner_id, 0) + 1

    total = len(results)
    stats = [
        WinRate(
            bidder_id=bidder.id,
            name=bidder.name,
            wins=wins[bidder.id],
            percentage=(wins[bidder.id] / total * 100.0) if total else 0.0,
        )
        for bidder in bidders
    ]
    return sorted(stats, key=lambda stat: stat.percentage, reverse=True)


def scope_cost_frontier(results: Sequence[CombinationResult]) -> List[FrontierPoint]:
    """Cheapest winning result for each number of selected alternates."""

    best: Dict[int, CombinationResult] = {}
    for result in results:
        current = best.get(result.size)
        if current is None or result.winner.total < current.winner.total:
            best[result.size] = result
    return [FrontierPoint(size=size, combination=best[size]) for size in sorted(best)]


def contractor_combinations(
    results: Sequence[CombinationResult], bidder_id: Optional[int]
) -> List[CombinationResult]:
    if bidder_id is None:
        return []
    return [result for result in results if result.winner.bidder_id == bidder_id]


def top_combinations(
    results: Sequence[CombinationResult], top_n: int
) -> List[CombinationResult]:
    return list(results[: max(0, top_n)])


def analyze(
    bidders: Sequence[Bidder],
    config: AnalysisConfig,
    contractor_id: Optional[int] = None,
    selection: Optional[Iterable[AlternateItem]] = None,
) -> BidAnalysis:
    """Compute every aggregate view from a single enumeration.

    When ``selection`` is given, items outside the configured universe and
    excluded pairs are dropped before every bidder is ranked for it.
    """

    combinations = all_combinations(bidders, config)
    filtered = budget_filtered(combinations, config.budget_cap)
    if config.has_budget_cap:
        logger.info(
            "Budget cap %.2f keeps %d of %d combinations",
            config.budget_cap,
            len(filtered),
            len(combinations),
        )

    current_selection: Optional[Tuple[AlternateItem, ...]] = None
    current: List[BidTotal] = []
    if selection is not None:
        universe = build_universe(config.alternate_count, config.special_enabled)
        reconciled = reconcile_selection(selection, universe, rules_for(config))
        current_selection = tuple(sorted(reconciled, key=item_sort_key))
        current = rank_bidders(bidders, current_selection)

    metadata = {
        "bidder_count": len(bidders),
        "alternate_count": config.alternate_count,
        "special_enabled": config.special_enabled,
        "exclusion_rules": len(rules_for(config)),
        "combination_count": len(combinations),
        "filtered_count": len(filtered),
        "budget_cap": config.budget_cap,
        "top_n": config.top_n,
    }

    return BidAnalysis(
        combinations=combinations,
        filtered=filtered,
        top=top_combinations(filtered, config.top_n),
        win_rates=win_rate_statistics(bidders, filtered),
        frontier=scope_cost_frontier(filtered),
        contractor=contractor_combinations(filtered, contractor_id),
        contractor_id=contractor_id,
        selection=current_selection,
        current=current,
        metadata=metadata,
    )


__all__ = [
    "BidAnalysis",
    "CombinationResult",
    "FrontierPoint",
    "WinRate",
    "all_combinations",
    "analyze",
    "budget_filtered",
    "contractor_combinations",
    "scope_cost_frontier",
    "top_combinations",
    "win_rate_statistics",
]
