from __future__ import annotations

from datetime import date

import pytest

from fairway.core.errors import BadRequestError
from fairway.shared.time import parse_time_window

TODAY = date(2026, 10, 19)


def test_parse_days_window() -> None:
    assert parse_time_window("30d", today=TODAY) == (date(2026, 9, 19), TODAY)


def test_parse_months_window() -> None:
    assert parse_time_window("2m", today=TODAY) == (date(2026, 8, 20), TODAY)


@pytest.mark.parametrize("window", ["bad", "0d", "-3m", "12y", "d"])
def test_parse_rejects_unsupported_windows(window: str) -> None:
    with pytest.raises(BadRequestError):
        parse_time_window(window, today=TODAY)
