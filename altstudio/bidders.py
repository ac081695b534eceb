"""Bidder records and helpers that keep them consistent with the configuration."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Iterable, List, Sequence, Tuple

import numpy as np
import pandas as pd


@dataclass(frozen=True)
class Bidder:
    """A contractor's base bid together with its priced alternates."""

    id: int
    name: str
    base_price: float = 0.0
    alternates: Tuple[float, ...] = field(default_factory=tuple)
    special_price: float = 0.0

    def alternate_price(self, index: int) -> float:
        if 0 <= index < len(self.alternates):
            return self.alternates[index]
        return 0.0


def coerce_numeric(values: Any) -> pd.Series:
    """Coerce price text such as ``"$1,250"`` into floats; anything else becomes ``0``."""

    if not isinstance(values, pd.Series):
        values = pd.Series(values, dtype=object)
    if values.empty:
        return pd.Series(dtype=float)

    cleaned = values.astype(str)
    cleaned = cleaned.str.replace(r"[$,\s]", "", regex=True)
    numbers = pd.to_numeric(cleaned, errors="coerce")
    numbers = numbers.replace([np.inf, -np.inf], np.nan)
    return numbers.fillna(0.0).astype(float)


def coerce_price(value: Any) -> float:
    """Single-value form of :func:`coerce_numeric`."""

    return float(coerce_numeric(pd.Series([value], dtype=object)).iloc[0])


def resize_bidders(bidders: Iterable[Bidder], alternate_count: int) -> List[Bidder]:
    """Return copies of ``bidders`` whose alternate prices match ``alternate_count``.

    Existing slots keep their index; new slots are zero and surplus slots are
    dropped.
    """

    count = max(0, int(alternate_count))
    resized: List[Bidder] = []
    for bidder in bidders:
        alternates = tuple(bidder.alternate_price(index) for index in range(count))
        resized.append(replace(bidder, alternates=alternates))
    return resized


def next_bidder_id(bidders: Sequence[Bidder]) -> int:
    return max((bidder.id for bidder in bidders), default=0) + 1


__all__ = ["Bidder", "coerce_numeric", "coerce_price", "next_bidder_id", "resize_bidders"]
