from __future__ import annotations

from datetime import datetime

import pytest

from recurring import Cron, Series, cron


@pytest.fixture
def noon_and_evening() -> Cron:
    """12:05, 12:10, 18:05 and 18:10 on every day."""
    return cron(hours=(12, 18), minutes=(5, 10), seconds=0)


@pytest.fixture
def july_series(noon_and_evening: Cron) -> Series:
    """`noon_and_evening` over [2025-07-01, 2025-07-10)."""
    return Series((datetime(2025, 7, 1), datetime(2025, 7, 10)), noon_and_evening)
