from datetime import datetime, timezone
from pathlib import Path

import pytest

from caseintake.clock import FixedClock
from caseintake.repository import FixtureDataset

FIXTURE = Path(__file__).resolve().parents[1] / "data" / "fixtures" / "mock_dataset.json"
NOW = datetime(2024, 1, 15, tzinfo=timezone.utc)


@pytest.fixture
def dataset() -> FixtureDataset:
    return FixtureDataset.load(FIXTURE)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(NOW)
