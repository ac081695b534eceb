"""Command line interface for the alternates bid analysis."""

from __future__ import annotations

import argparse
import logging
from dataclasses import replace
from pathlib import Path
from typing import Iterable, List, Optional, Sequence

from tabulate import tabulate

from .alternates import (
    SPECIAL,
    AlternateItem,
    NumberedAlternate,
    Selection,
    describe_selection,
    rules_for,
    toggle_alternate,
)
from .analysis import BidAnalysis, analyze
from .bidders import Bidder, resize_bidders
from .config import AnalysisConfig, ConfigurationError, Scenario, load_scenario
from .io import load_bidders, write_template
from .reporting import (
    bid_totals_frame,
    combinations_frame,
    export_analysis,
    frontier_frame,
    win_rates_frame,
)

logger = logging.getLogger(__name__)

DEFAULT_SCENARIO_PATH = Path("config/scenario.yaml")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Find the winning bidder for every combination of bid alternates"
    )
    parser.add_argument("--scenario", type=Path, default=DEFAULT_SCENARIO_PATH, help="Path to YAML scenario")
    parser.add_argument("--bids", type=Path, help="CSV/Excel bid sheet replacing the scenario bidders")
    parser.add_argument("--alternates", type=int, help="Number of numbered alternates")
    parser.add_argument(
        "--special",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Enable or disable the special alternate",
    )
    parser.add_argument(
        "--exclude-third-fourth",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Never select the third and fourth alternates together",
    )
    parser.add_argument(
        "--exclude-special-second",
        action=argparse.BooleanOptionalAction,
        default=None,
        help="Never select the second alternate together with the special alternate",
    )
    parser.add_argument("--budget-cap", type=float, help="Drop combinations whose winning total exceeds this amount")
    parser.add_argument("--top-n", type=int, help="Number of cheapest combinations to display")
    parser.add_argument("--contractor", help="Contractor name or id whose winning combinations to list")
    parser.add_argument(
        "--select",
        action="append",
        metavar="ALTERNATE",
        help="Toggle an alternate into the current selection (1-based number or 'special'); repeatable",
    )
    parser.add_argument("--template", type=Path, help="Write a blank CSV bid sheet to this path and exit")
    parser.add_argument("--output-dir", type=Path, help="Directory for generated reports")
    parser.add_argument("--log-level", default="INFO", help="Logging level (DEBUG, INFO, WARNING)")
    parser.add_argument("--quiet", action="store_true", help="Suppress console summary output")
    return parser


def main(argv: Optional[Iterable[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )

    try:
        scenario = load_scenario(args.scenario)
        scenario = _apply_overrides(scenario, args)
    except Exception as exc:
        logger.error("Failed to load scenario: %s", exc)
        return 1

    if args.template:
        special_label = scenario.analysis.special_label if scenario.analysis.special_enabled else None
        try:
            write_template(_resolve_override_path(args.template), scenario.analysis.alternate_count, special_label)
        except OSError as exc:
            logger.error("Failed to write bid sheet template: %s", exc)
            return 1
        return 0

    try:
        selection = _build_selection(args.select, scenario.analysis)
    except ConfigurationError as exc:
        logger.error("Invalid selection: %s", exc)
        return 1

    if args.bids:
        try:
            scenario.bidders = load_bidders(
                _resolve_override_path(args.bids),
                scenario.analysis.alternate_count,
                scenario.analysis.special_label,
            )
        except Exception as exc:
            logger.exception("Failed to load bid sheet: %s", exc)
            return 1

    if not scenario.bidders:
        logger.warning("No bidders provided in scenario")
        return 0

    contractor_id = _resolve_contractor(scenario.bidders, args.contractor)
    result = analyze(
        scenario.bidders,
        scenario.analysis,
        contractor_id=contractor_id,
        selection=selection,
    )

    try:
        export_analysis(result, scenario.output)
    except Exception as exc:
        logger.exception("Failed to export analysis results: %s", exc)
        return 1

    if not args.quiet:
        _print_summary(result, scenario.analysis)

    return 0


def _apply_overrides(scenario: Scenario, args: argparse.Namespace) -> Scenario:
    changes = {}
    if args.alternates is not None:
        changes["alternate_count"] = args.alternates
    if args.special is not None:
        changes["special_enabled"] = args.special
    if args.exclude_third_fourth is not None:
        changes["exclude_third_fourth"] = args.exclude_third_fourth
    if args.exclude_special_second is not None:
        changes["exclude_special_with_second"] = args.exclude_special_second
    if args.budget_cap is not None:
        changes["budget_cap"] = args.budget_cap
    if args.top_n is not None:
        changes["top_n"] = args.top_n

    if changes:
        scenario.analysis = replace(scenario.analysis, **changes)
    if "alternate_count" in changes:
        scenario.bidders = resize_bidders(scenario.bidders, scenario.analysis.alternate_count)

    if args.output_dir:
        scenario.output.directory = _resolve_override_path(args.output_dir)
    return scenario


def _build_selection(
    tokens: Optional[List[str]], config: AnalysisConfig
) -> Optional[Selection]:
    if not tokens:
        return None
    rules = rules_for(config)
    selection: Selection = frozenset()
    for token in tokens:
        selection = toggle_alternate(selection, _parse_alternate(token, config), rules)
    return selection


def _parse_alternate(token: str, config: AnalysisConfig) -> AlternateItem:
    text = token.strip()
    if text.casefold() in {"special", config.special_label.casefold()}:
        if not config.special_enabled:
            raise ConfigurationError("The special alternate is not enabled")
        return SPECIAL
    try:
        number = int(text)
    except ValueError as exc:
        raise ConfigurationError(f"Unknown alternate '{token}'") from exc
    if not 1 <= number <= config.alternate_count:
        raise ConfigurationError(
            f"Alternate {number} is outside 1..{config.alternate_count}"
        )
    return NumberedAlternate(number - 1)


def _resolve_contractor(bidders: Sequence[Bidder], value: Optional[str]) -> Optional[int]:
    if not value:
        return None
    text = value.strip()
    for bidder in bidders:
        if str(bidder.id) == text or bidder.name.casefold() == text.casefold():
            return bidder.id
    logger.warning("Contractor '%s' not found among bidders", value)
    return None


def _resolve_override_path(path: Path) -> Path:
    path = Path(path).expanduser()
    if path.is_absolute():
        return path
    return (Path.cwd() / path).resolve()


def _print_summary(result: BidAnalysis, config: AnalysisConfig) -> None:
    if not result.filtered:
        print("No combinations fit the budget cap.")
    else:
        print(f"Top {len(result.top)} of {len(result.filtered)} combinations:")
        print(_table(combinations_frame(result.top)))

    print("\nWinning percentage by contractor:")
    print(_table(win_rates_frame(result.win_rates)))

    if result.frontier:
        print("\nScope/cost frontier:")
        print(_table(frontier_frame(result.frontier)))

    if result.selection is not None:
        print(f"\nCurrent selection: {describe_selection(result.selection, config)}")
        print(_table(bid_totals_frame(result.current)))

    if result.contractor_id is not None:
        print(f"\nCombinations won by contractor #{result.contractor_id}: {len(result.contractor)}")
        if result.contractor:
            print(_table(combinations_frame(result.contractor)))


def _table(frame) -> str:
    return tabulate(frame, headers="keys", tablefmt="github", showindex=False, floatfmt=",.2f")


if __name__ == "__main__":  # pragma: no cover - manual execution entry point
    raise SystemExit(main())
