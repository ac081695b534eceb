from __future__ import annotations

import math

import pandas as pd
import pytest

from altstudio.bidders import Bidder, coerce_numeric, coerce_price, next_bidder_id, resize_bidders


def test_resize_pads_and_truncates_without_reindexing(bidders) -> None:
    grown = resize_bidders(bidders, 4)
    assert grown[0].alternates == (5000, 3000, 0.0, 0.0)
    assert grown[2].alternates == (6000, 3500, 0.0, 0.0)

    shrunk = resize_bidders(grown, 1)
    assert shrunk[1].alternates == (4500,)
    assert resize_bidders(bidders, -3)[0].alternates == ()


def test_resize_returns_new_records(bidders) -> None:
    resized = resize_bidders(bidders, 3)
    assert bidders[0].alternates == (5000, 3000)
    assert resized[0].name == bidders[0].name
    assert resized[0].special_price == bidders[0].special_price


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("$1,250", 1250.0),
        (" 98 000 ", 98000.0),
        ("12.5", 12.5),
        ("n/a", 0.0),
        ("", 0.0),
        (None, 0.0),
        (math.nan, 0.0),
        (42, 42.0),
    ],
)
def test_coerce_price(raw, expected) -> None:
    assert coerce_price(raw) == pytest.approx(expected)


def test_next_bidder_id() -> None:
    assert next_bidder_id([]) == 1
    assert next_bidder_id([Bidder(id=4, name="A"), Bidder(id=2, name="B")]) == 5


def test_alternate_price_out_of_range_is_zero() -> None:
    bidder = Bidder(id=1, name="A", alternates=(10,))
    assert bidder.alternate_price(0) == 10
    assert bidder.alternate_price(1) == 0
    assert bidder.alternate_price(-1) == 0


def test_scalar_and_column_coercion_agree() -> None:
    raw = ["1_000", "$2,500", "1e3", "inf", True, None]
    column = coerce_numeric(pd.Series(raw, dtype=object)).tolist()

    assert [coerce_price(value) for value in raw] == column
    assert column == pytest.approx([0.0, 2500.0, 1000.0, 0.0, 0.0, 0.0])
