"""Tabular views of an analysis and exporters that write them to disk."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import Dict, Sequence

import pandas as pd

from .analysis import BidAnalysis, CombinationResult, FrontierPoint, WinRate
from .config import OutputConfig
from .pricing import BidTotal

logger = logging.getLogger(__name__)

ANALYSIS_COLUMNS = [
    "Base Bid & Alternate Combination",
    "Winning Contractor",
    "Total Dollar Amount",
    "Difference from Next Lowest",
]


def combinations_frame(results: Sequence[CombinationResult]) -> pd.DataFrame:
    rows = [
        {
            "Base Bid & Alternate Combination": result.label,
            "Winning Contractor": result.winner.name,
            "Total Dollar Amount": result.winner.total,
            "Difference from Next Lowest": result.margin,
        }
        for result in results
    ]
    return pd.DataFrame(rows, columns=ANALYSIS_COLUMNS)


def win_rates_frame(win_rates: Sequence[WinRate]) -> pd.DataFrame:
    columns = ["bidder_id", "contractor", "wins", "win_pct"]
    rows = [
        {
            "bidder_id": stat.bidder_id,
            "contractor": stat.name,
            "wins": stat.wins,
            "win_pct": stat.percentage,
        }
        for stat in win_rates
    ]
    return pd.DataFrame(rows, columns=columns)


def bid_totals_frame(bids: Sequence[BidTotal]) -> pd.DataFrame:
    columns = ["rank", "bidder_id", "contractor", "total"]
    rows = [
        {"rank": rank, "bidder_id": bid.bidder_id, "contractor": bid.name, "total": bid.total}
        for rank, bid in enumerate(bids, start=1)
    ]
    return pd.DataFrame(rows, columns=columns)


def frontier_frame(frontier: Sequence[FrontierPoint]) -> pd.DataFrame:
    columns = ["alternates_selected", "combination", "winning_contractor", "winning_total"]
    rows = [
        {
            "alternates_selected": point.size,
            "combination": point.combination.label,
            "winning_contractor": point.combination.winner.name,
            "winning_total": point.combination.winner.total,
        }
        for point in frontier
    ]
    return pd.DataFrame(rows, columns=columns)


def export_analysis(analysis: BidAnalysis, output: OutputConfig) -> Dict[str, Path]:
    """Persist analysis artefacts to the configured output directory."""

    output_dir = output.directory
    output_dir.mkdir(parents=True, exist_ok=True)
    logger.info("Writing reports to %s", output_dir)

    paths: Dict[str, Path] = {}

    analysis_path = output_dir / output.analysis_report
    combinations_frame(analysis.filtered).to_csv(analysis_path, index=False)
    paths["analysis"] = analysis_path

    win_rate_path = output_dir / output.win_rate_report
    win_rates_frame(analysis.win_rates).to_csv(win_rate_path, index=False)
    paths["win_rates"] = win_rate_path

    frontier_path = output_dir / output.frontier_report
    frontier_frame(analysis.frontier).to_csv(frontier_path, index=False)
    paths["frontier"] = frontier_path

    audit_payload = dict(analysis.metadata)
    audit_payload["generated_at"] = datetime.now(timezone.utc).isoformat()
    audit_payload["win_rates"] = win_rates_frame(analysis.win_rates).to_dict(orient="records")
    if analysis.selection is not None:
        audit_payload["current_selection"] = bid_totals_frame(analysis.current).to_dict(orient="records")
    audit_path = output_dir / output.audit_log
    with audit_path.open("w", encoding="utf-8") as handle:
        json.dump(audit_payload, handle, ensure_ascii=False, indent=2)
    paths["audit"] = audit_path

    return paths


__all__ = [
    "ANALYSIS_COLUMNS",
    "bid_totals_frame",
    "combinations_frame",
    "export_analysis",
    "frontier_frame",
    "win_rates_frame",
]
