from __future__ import annotations

from pathlib import Path
from typing import List
import sys

import pytest

# Ensure project root is on sys.path for absolute imports
ROOT = Path(__file__).resolve().parent.parent
if str(ROOT) not in sys.path:
    sys.path.append(str(ROOT))

from altstudio.bidders import Bidder
from altstudio.config import AnalysisConfig


@pytest.fixture(scope="session")
def scenario_path() -> Path:
    return ROOT / "config" / "scenario.yaml"


@pytest.fixture
def bidders() -> List[Bidder]:
    return [
        Bidder(id=1, name="Contractor A", base_price=100000, alternates=(5000, 3000), special_price=4000),
        Bidder(id=2, name="Contractor B", base_price=105000, alternates=(4500, 2500), special_price=3500),
        Bidder(id=3, name="Contractor C", base_price=98000, alternates=(6000, 3500), special_price=4200),
    ]


@pytest.fixture
def config() -> AnalysisConfig:
    return AnalysisConfig(alternate_count=2)


@pytest.fixture
def four_alt_bidders() -> List[Bidder]:
    return [
        Bidder(id=1, name="North", base_price=200000, alternates=(1000, 2000, 3000, 4000), special_price=500),
        Bidder(id=2, name="South", base_price=199000, alternates=(1500, 2500, 3500, 4500), special_price=900),
    ]
