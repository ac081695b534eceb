"""Configuration loading utilities for Alternates Bid Studio."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

import yaml

from .bidders import Bidder, coerce_price

DEFAULT_SPECIAL_LABEL = "Alt 2A"


class ConfigurationError(ValueError):
    """Raised when a scenario or analysis configuration is invalid."""


def default_label(index: int) -> str:
    return f"Alt {index + 1}"


def resize_labels(labels: Sequence[str], count: int) -> List[str]:
    """Return ``count`` labels, keeping existing entries and filling the rest."""

    count = max(0, int(count))
    resized: List[str] = []
    for index in range(count):
        label = labels[index] if index < len(labels) else None
        resized.append(str(label) if label else default_label(index))
    return resized


@dataclass(frozen=True)
class AnalysisConfig:
    """Settings that drive the combination analysis.

    ``alternate_count`` and ``top_n`` must be non-negative; anything else is
    rejected with :class:`ConfigurationError`.  ``budget_cap`` of ``None`` disables
    budget filtering; any number, zero or negative included, is a real cap.
    """

    alternate_count: int = 2
    special_enabled: bool = False
    exclude_third_fourth: bool = False
    exclude_special_with_second: bool = False
    budget_cap: Optional[float] = None
    top_n: int = 10
    alternate_labels: Tuple[str, ...] = ()
    special_label: str = DEFAULT_SPECIAL_LABEL

    def __post_init__(self) -> None:
        if self.alternate_count < 0:
            raise ConfigurationError(
                f"alternate_count must be non-negative, got {self.alternate_count}"
            )
        if self.top_n < 0:
            raise ConfigurationError(f"top_n must be non-negative, got {self.top_n}")
        labels = tuple(resize_labels(self.alternate_labels, self.alternate_count))
        object.__setattr__(self, "alternate_labels", labels)

    def label_for(self, index: int) -> str:
        if 0 <= index < len(self.alternate_labels):
            return self.alternate_labels[index]
        return default_label(index)

    @property
    def has_budget_cap(self) -> bool:
        return self.budget_cap is not None


@dataclass
class OutputConfig:
    """Paths describing where reports should be written."""

    directory: Path = Path("output")
    analysis_report: str = "bid_analysis.csv"
    win_rate_report: str = "win_rates.csv"
    frontier_report: str = "frontier.csv"
    audit_log: str = "analysis_audit.json"

    def resolved(self, base_path: Path) -> "OutputConfig":
        directory = _resolve_path(self.directory, base_path)
        return OutputConfig(
            directory=directory,
            analysis_report=self.analysis_report,
            win_rate_report=self.win_rate_report,
            frontier_report=self.frontier_report,
            audit_log=self.audit_log,
        )


@dataclass
class Scenario:
    """Container for everything a single analysis run needs."""

    analysis: AnalysisConfig
    bidders: List[Bidder] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)

    def resolved(self, base_path: Path) -> "Scenario":
        return Scenario(
            analysis=self.analysis,
            bidders=list(self.bidders),
            output=self.output.resolved(base_path),
        )


def load_scenario(path: Path) -> Scenario:
    """Load a :class:`Scenario` from a YAML file."""

    scenario_path = Path(path).expanduser()
    if not scenario_path.exists():
        raise FileNotFoundError(f"Scenario file '{scenario_path}' does not exist")

    with scenario_path.open("r", encoding="utf-8") as stream:
        raw_scenario: Mapping[str, Any] = yaml.safe_load(stream) or {}

    if "analysis" not in raw_scenario:
        raise ConfigurationError("Scenario must include the 'analysis' section")

    analysis = _parse_analysis_section(raw_scenario["analysis"] or {})

    bidder_entries = raw_scenario.get("bidders") or []
    if not isinstance(bidder_entries, list):
        raise ConfigurationError("bidders must be a list of bidder descriptors")
    bidders = [
        _parse_bidder(entry, position, analysis.alternate_count)
        for position, entry in enumerate(bidder_entries, start=1)
    ]
    ids = [bidder.id for bidder in bidders]
    if len(ids) != len(set(ids)):
        raise ConfigurationError("Bidder ids must be unique")

    output = OutputConfig(**_parse_output_section(raw_scenario.get("output") or {}))

    scenario = Scenario(analysis=analysis, bidders=bidders, output=output)
    return scenario.resolved(scenario_path.parent)


def _parse_analysis_section(section: Mapping[str, Any]) -> AnalysisConfig:
    if not isinstance(section, Mapping):
        raise ConfigurationError("analysis must be a mapping")

    known = {
        "alternate_count",
        "special_enabled",
        "exclude_third_fourth",
        "exclude_special_with_second",
        "budget_cap",
        "top_n",
        "alternate_labels",
        "special_label",
    }
    unknown = sorted(set(section) - known)
    if unknown:
        raise ConfigurationError(f"Unknown analysis settings: {', '.join(unknown)}")

    parsed: Dict[str, Any] = {}
    try:
        if "alternate_count" in section:
            parsed["alternate_count"] = int(section["alternate_count"])
        if "top_n" in section:
            parsed["top_n"] = int(section["top_n"])
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Invalid integer setting: {exc}") from exc

    for key in ("special_enabled", "exclude_third_fourth", "exclude_special_with_second"):
        if key in section:
            value = section[key]
            if not isinstance(value, bool):
                raise ConfigurationError(f"{key} must be true or false, got {value!r}")
            parsed[key] = value

    cap = section.get("budget_cap")
    if cap not in (None, ""):
        parsed["budget_cap"] = coerce_price(cap)

    labels = section.get("alternate_labels")
    if labels is not None:
        if not isinstance(labels, list):
            raise ConfigurationError("alternate_labels must be a list")
        parsed["alternate_labels"] = tuple(str(label) for label in labels)

    if section.get("special_label"):
        parsed["special_label"] = str(section["special_label"])

    return AnalysisConfig(**parsed)


def _parse_bidder(entry: Any, position: int, alternate_count: int) -> Bidder:
    if not isinstance(entry, Mapping):
        raise ConfigurationError(f"Bidder #{position} must be a mapping")

    name = str(entry.get("name") or f"Contractor {position}")
    raw_alternates = entry.get("alternates") or []
    if not isinstance(raw_alternates, list):
        raise ConfigurationError(f"Bidder '{name}' alternates must be a list")

    alternates = tuple(
        coerce_price(raw_alternates[index]) if index < len(raw_alternates) else 0.0
        for index in range(alternate_count)
    )
    raw_id = entry.get("id", position)
    try:
        bidder_id = int(raw_id)
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(f"Bidder '{name}' has an invalid id: {raw_id!r}") from exc

    return Bidder(
        id=bidder_id,
        name=name,
        base_price=coerce_price(entry.get("base_price")),
        alternates=alternates,
        special_price=coerce_price(entry.get("special_price")),
    )


def _parse_output_section(section: Mapping[str, Any]) -> Dict[str, Any]:
    parsed: Dict[str, Any] = {}
    if "directory" in section:
        parsed["directory"] = Path(section["directory"])
    for key in ("analysis_report", "win_rate_report", "frontier_report", "audit_log"):
        if key in section:
            parsed[key] = section[key]
    return parsed


def _resolve_path(path: Path, base_path: Path) -> Path:
    expanded = Path(path).expanduser()
    if expanded.is_absolute():
        return expanded
    return (base_path / expanded).resolve()


__all__ = [
    "AnalysisConfig",
    "ConfigurationError",
    "OutputConfig",
    "Scenario",
    "default_label",
    "load_scenario",
    "resize_labels",
]
