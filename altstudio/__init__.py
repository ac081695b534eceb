"""Alternates Bid Studio core package.

This package evaluates competitive construction bids made of a base bid plus
optional priced alternates.  For every valid combination of alternates it
ranks the bidders and derives win rates, a scope/cost frontier and
budget-capped views.  The command line interface shipped with this repository
is one consumer; any user interface can build on the same functions.
"""

from .alternates import (
    SPECIAL,
    ExclusionRule,
    NumberedAlternate,
    SpecialAlternate,
    build_exclusion_rules,
    build_universe,
    enumerate_selections,
    toggle_alternate,
)
from .analysis import (
    BidAnalysis,
    CombinationResult,
    FrontierPoint,
    WinRate,
    all_combinations,
    analyze,
    budget_filtered,
    contractor_combinations,
    scope_cost_frontier,
    top_combinations,
    win_rate_statistics,
)
from .bidders import Bidder, coerce_numeric, coerce_price, next_bidder_id, resize_bidders
from .config import (
    AnalysisConfig,
    ConfigurationError,
    OutputConfig,
    Scenario,
    load_scenario,
)
from .io import load_bidders, write_template
from .pricing import BidTotal, bidder_total, rank_bidders
from .reporting import export_analysis

__all__ = [
    "AnalysisConfig",
    "BidAnalysis",
    "BidTotal",
    "Bidder",
    "CombinationResult",
    "ConfigurationError",
    "ExclusionRule",
    "FrontierPoint",
    "NumberedAlternate",
    "OutputConfig",
    "SPECIAL",
    "Scenario",
    "SpecialAlternate",
    "WinRate",
    "all_combinations",
    "analyze",
    "bidder_total",
    "budget_filtered",
    "build_exclusion_rules",
    "build_universe",
    "coerce_numeric",
    "coerce_price",
    "contractor_combinations",
    "enumerate_selections",
    "export_analysis",
    "load_bidders",
    "load_scenario",
    "next_bidder_id",
    "rank_bidders",
    "resize_bidders",
    "scope_cost_frontier",
    "toggle_alternate",
    "top_combinations",
    "win_rate_statistics",
    "write_template",
]
