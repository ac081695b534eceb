"""IO helpers that turn spreadsheet rows into bidder records."""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import numpy as np
import pandas as pd

from .bidders import Bidder, coerce_numeric
from .config import DEFAULT_SPECIAL_LABEL, default_label

logger = logging.getLogger(__name__)

NAME_HEADERS: Sequence[str] = ("contractor", "name", "contractor name")
BASE_HEADERS: Sequence[str] = ("base", "base bid", "base ($)")

TEMPLATE_NAME_HEADER = "Contractor"
TEMPLATE_BASE_HEADER = "Base Bid"
TEMPLATE_BLANK_ROWS = 3


def load_bidders(
    path: Path,
    alternate_count: int,
    special_label: str = DEFAULT_SPECIAL_LABEL,
) -> List[Bidder]:
    """Load bidder records from a CSV or Excel sheet."""

    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"Bid sheet '{path}' does not exist")

    ext = path.suffix.lower()
    logger.info("Loading bidders from %s", path)
    if ext in {".csv", ".txt"}:
        frame = pd.read_csv(path, dtype=str)
    elif ext in {".xlsx", ".xls"}:
        frame = pd.read_excel(path, dtype=str)
    else:
        raise ValueError(f"Unsupported file extension '{ext}' for bid sheet '{path}'")

    return bidders_from_frame(frame, alternate_count, special_label)


def bidders_from_frame(
    frame: pd.DataFrame,
    alternate_count: int,
    special_label: str = DEFAULT_SPECIAL_LABEL,
) -> List[Bidder]:
    """Map the rows of ``frame`` onto :class:`Bidder` records.

    Slot ``i`` is read from the ``Alt {i+1}`` column and the special price from
    the column titled ``special_label``.  Rows without a contractor name are
    skipped.
    """

    count = max(0, int(alternate_count))
    lookup = {
        _normalise_header(column): column
        for column in frame.columns
        if isinstance(column, str)
    }

    name_column = _find_column(lookup, NAME_HEADERS)
    if name_column is None:
        logger.warning("No contractor name column found; no bidders imported")
        return []
    base_column = _find_column(lookup, BASE_HEADERS)
    alternate_columns = [
        lookup.get(_normalise_header(default_label(index))) for index in range(count)
    ]
    special_column = lookup.get(_normalise_header(special_label))

    names = frame[name_column].fillna("").astype(str).str.strip()
    base = _numeric_column(frame, base_column)
    alternates = [_numeric_column(frame, column) for column in alternate_columns]
    special = _numeric_column(frame, special_column)

    bidders: List[Bidder] = []
    for row in range(len(frame)):
        name = names.iloc[row]
        if not name or name.lower() == "nan":
            logger.debug("Skipping row %d without a contractor name", row)
            continue
        bidders.append(
            Bidder(
                id=len(bidders) + 1,
                name=name,
                base_price=float(base[row]),
                alternates=tuple(float(column[row]) for column in alternates),
                special_price=float(special[row]),
            )
        )

    logger.info("Imported %d bidders with %d alternates", len(bidders), count)
    return bidders


def template_frame(
    alternate_count: int,
    special_label: Optional[str] = None,
    rows: int = TEMPLATE_BLANK_ROWS,
) -> pd.DataFrame:
    """Blank bid sheet whose headers :func:`bidders_from_frame` recognises."""

    headers = [TEMPLATE_NAME_HEADER, TEMPLATE_BASE_HEADER]
    headers.extend(default_label(index) for index in range(max(0, int(alternate_count))))
    if special_label:
        headers.append(special_label)
    return pd.DataFrame([[""] * len(headers) for _ in range(max(0, rows))], columns=headers)


def write_template(
    path: Path,
    alternate_count: int,
    special_label: Optional[str] = None,
) -> Path:
    """Write a blank CSV bid sheet for ``alternate_count`` alternates."""

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    template_frame(alternate_count, special_label).to_csv(path, index=False)
    logger.info("Wrote bid sheet template to %s", path)
    return path


def _numeric_column(frame: pd.DataFrame, column: Optional[str]) -> np.ndarray:
    if column is None:
        return np.zeros(len(frame), dtype=float)
    return coerce_numeric(frame[column]).to_numpy()


def _find_column(lookup: Dict[str, str], candidates: Sequence[str]) -> Optional[str]:
    for candidate in candidates:
        column = lookup.get(_normalise_header(candidate))
        if column is not None:
            return column
    return None


def _normalise_header(value: Any) -> str:
    text = "" if value is None else str(value)
    text = text.strip().lower()
    text = re.sub(r"\s+", " ", text)
    return text


__all__ = ["bidders_from_frame", "coerce_numeric", "load_bidders", "template_frame", "write_template"]
