"""Alternate items, exclusion rules and enumeration of valid selections.

The selectable universe is the numbered alternates ``0..n-1`` followed by the
optional special alternate.  Every subset of that universe is a candidate
selection; subsets holding both members of an active :class:`ExclusionRule`
are skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, FrozenSet, Iterable, Iterator, List, Sequence, Tuple, Union

if TYPE_CHECKING:
    from .config import AnalysisConfig

logger = logging.getLogger(__name__)

# Above this the 2^m enumeration stops being interactive.
MAX_UNIVERSE_SIZE = 20

BASE_ONLY_LABEL = "Base Bid Only"


@dataclass(frozen=True)
class NumberedAlternate:
    """A numbered alternate slot, zero-based."""

    index: int


@dataclass(frozen=True)
class SpecialAlternate:
    """The special alternate variant (``Alt 2A`` by default)."""


SPECIAL = SpecialAlternate()

AlternateItem = Union[NumberedAlternate, SpecialAlternate]
Selection = FrozenSet[AlternateItem]


@dataclass(frozen=True)
class ExclusionRule:
    """Two alternates that may never be selected together."""

    first: AlternateItem
    second: AlternateItem

    def violated_by(self, selection: Iterable[AlternateItem]) -> bool:
        items = set(selection)
        return self.first in items and self.second in items

    def involves(self, item: AlternateItem) -> bool:
        return item == self.first or item == self.second

    def partner(self, item: AlternateItem) -> AlternateItem:
        return self.second if item == self.first else self.first


def item_sort_key(item: AlternateItem) -> Tuple[int, int]:
    if isinstance(item, NumberedAlternate):
        return (0, item.index)
    return (1, 0)


def build_universe(alternate_count: int, special_enabled: bool) -> List[AlternateItem]:
    """Return all selectable items in bit order."""

    universe: List[AlternateItem] = [
        NumberedAlternate(index) for index in range(max(0, alternate_count))
    ]
    if special_enabled:
        universe.append(SPECIAL)
    return universe


def build_exclusion_rules(
    alternate_count: int,
    special_enabled: bool,
    exclude_third_fourth: bool,
    exclude_special_with_second: bool = False,
) -> List[ExclusionRule]:
    """Return the exclusion rules that apply to the current universe."""

    rules: List[ExclusionRule] = []
    if special_enabled and exclude_special_with_second and alternate_count >= 2:
        rules.append(ExclusionRule(NumberedAlternate(1), SPECIAL))
    if exclude_third_fourth and alternate_count >= 4:
        rules.append(ExclusionRule(NumberedAlternate(2), NumberedAlternate(3)))
    return rules


def rules_for(config: "AnalysisConfig") -> List[ExclusionRule]:
    return build_exclusion_rules(
        config.alternate_count,
        config.special_enabled,
        config.exclude_third_fourth,
        config.exclude_special_with_second,
    )


def is_valid_selection(
    selection: Iterable[AlternateItem], rules: Sequence[ExclusionRule]
) -> bool:
    items = set(selection)
    return not any(rule.violated_by(items) for rule in rules)


def enumerate_selections(
    universe: Sequence[AlternateItem], rules: Sequence[ExclusionRule]
) -> Iterator[Tuple[AlternateItem, ...]]:
    """Yield every valid subset of ``universe`` in increasing bit-mask order.

    Position ``i`` of ``universe`` maps to bit ``i``; each subset is yielded as
    a tuple in universe order.
    """

    size = len(universe)
    if size > MAX_UNIVERSE_SIZE:
        logger.warning(
            "Enumerating %d alternates yields %d candidate selections", size, 1 << size
        )

    for mask in range(1 << size):
        combo = tuple(universe[bit] for bit in range(size) if mask & (1 << bit))
        if is_valid_selection(combo, rules):
            yield combo


def toggle_alternate(
    selection: Iterable[AlternateItem],
    item: AlternateItem,
    rules: Sequence[ExclusionRule],
) -> Selection:
    """Switch ``item`` on or off, dropping any alternate it excludes."""

    current = set(selection)
    if item in current:
        current.discard(item)
        return frozenset(current)

    current.add(item)
    for rule in rules:
        if rule.involves(item) and rule.violated_by(current):
            current.discard(rule.partner(item))
    return frozenset(current)


def reconcile_selection(
    selection: Iterable[AlternateItem],
    universe: Sequence[AlternateItem],
    rules: Sequence[ExclusionRule],
) -> Selection:
    """Drop items outside ``universe`` and resolve rule conflicts.

    When both members of a rule are present the second one is removed.
    """

    available = set(universe)
    current = {item for item in selection if item in available}
    for rule in rules:
        if rule.violated_by(current):
            current.discard(rule.second)
    return frozenset(current)


def describe_selection(
    selection: Iterable[AlternateItem], config: "AnalysisConfig"
) -> str:
    """Return a label such as ``"Base + Alt 1, Alt 2A"``."""

    ordered = sorted(set(selection), key=item_sort_key)
    if not ordered:
        return BASE_ONLY_LABEL
    labels = [
        config.special_label if item == SPECIAL else config.label_for(item.index)
        for item in ordered
    ]
    return "Base + " + ", ".join(labels)


__all__ = [
    "AlternateItem",
    "BASE_ONLY_LABEL",
    "ExclusionRule",
    "MAX_UNIVERSE_SIZE",
    "NumberedAlternate",
    "SPECIAL",
    "Selection",
    "SpecialAlternate",
    "build_exclusion_rules",
    "build_universe",
    "describe_selection",
    "enumerate_selections",
    "is_valid_selection",
    "item_sort_key",
    "reconcile_selection",
    "rules_for",
    "toggle_alternate",
]
