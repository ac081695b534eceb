from __future__ import annotations

from pathlib import Path

import pandas as pd
import pytest

from altstudio.io import bidders_from_frame, coerce_numeric, load_bidders, template_frame, write_template


def test_bidders_from_frame_maps_headers() -> None:
    frame = pd.DataFrame(
        {
            "Contractor": ["Alpha", "", "Gamma"],
            "Base Bid": ["$100,000", "5", "98000"],
            "Alt 1": ["5,000", "1", None],
            "Alt 2": ["3000", "1", "3500"],
            "Alt 2A": ["4000", "1", "abc"],
        }
    )

    bidders = bidders_from_frame(frame, alternate_count=3)

    assert [bidder.name for bidder in bidders] == ["Alpha", "Gamma"]
    assert [bidder.id for bidder in bidders] == [1, 2]
    assert bidders[0].base_price == pytest.approx(100000)
    assert bidders[0].alternates == (5000, 3000, 0.0)
    assert bidders[0].special_price == pytest.approx(4000)
    assert bidders[1].alternates == (0.0, 3500, 0.0)
    assert bidders[1].special_price == 0.0


def test_bidders_from_frame_without_name_column() -> None:
    frame = pd.DataFrame({"Base": [1, 2]})
    assert bidders_from_frame(frame, alternate_count=1) == []


def test_load_bidders_from_csv(tmp_path: Path) -> None:
    csv_path = tmp_path / "bids.csv"
    pd.DataFrame(
        {
            "Name": ["North", "South"],
            "Base": [200000, 199000],
            "Alt 1": [1000, 1500],
            "Paving Option": [700, 650],
        }
    ).to_csv(csv_path, index=False)

    bidders = load_bidders(csv_path, alternate_count=2, special_label="Paving Option")

    assert [bidder.name for bidder in bidders] == ["North", "South"]
    assert bidders[1].alternates == (1500, 0.0)
    assert bidders[1].special_price == pytest.approx(650)


def test_load_bidders_rejects_unknown_extension(tmp_path: Path) -> None:
    path = tmp_path / "bids.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(ValueError):
        load_bidders(path, alternate_count=2)


def test_load_bidders_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        load_bidders(tmp_path / "absent.csv", alternate_count=2)


def test_coerce_numeric_defaults_to_zero() -> None:
    coerced = coerce_numeric(pd.Series(["$1,234.50", " 12 ", None, "-", "x"]))
    assert coerced.tolist() == pytest.approx([1234.5, 12.0, 0.0, 0.0, 0.0])


def test_template_headers_match_importer() -> None:
    frame = template_frame(3, special_label="Alt 2A")
    assert list(frame.columns) == ["Contractor", "Base Bid", "Alt 1", "Alt 2", "Alt 3", "Alt 2A"]
    assert len(frame) == 3
    assert list(template_frame(1).columns) == ["Contractor", "Base Bid", "Alt 1"]


def test_template_round_trips_through_loader(tmp_path: Path) -> None:
    path = write_template(tmp_path / "sheets" / "template.csv", 2, special_label="Alt 2A")
    assert load_bidders(path, alternate_count=2) == []

    filled = pd.read_csv(path, dtype=str)
    filled.loc[0] = ["Alpha", "100000", "5000", "3000", "4000"]
    filled.to_csv(path, index=False)

    bidders = load_bidders(path, alternate_count=2)
    assert len(bidders) == 1
    assert bidders[0].name == "Alpha"
    assert bidders[0].alternates == (5000, 3000)
    assert bidders[0].special_price == pytest.approx(4000)
