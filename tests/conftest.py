"""Shared fixtures: an in-memory price provider for deterministic runs."""
from __future__ import annotations

from datetime import date

import pytest

from stratlab.core.exceptions import DataError
from stratlab.core.types import PriceBar
from stratlab.data.provider import PriceSeriesProvider


class StaticPriceProvider(PriceSeriesProvider):
    """Serves fixed bars per symbol; unknown symbols yield an empty series."""

    def __init__(
        self,
        series: dict[str, list[PriceBar]],
        failing: frozenset[str] = frozenset(),
    ) -> None:
        self._series = series
        self._failing = failing
        self.requests: list[tuple[str, date, date]] = []

    def available_symbols(self) -> list[str]:
        return sorted(self._series)

    def get_series(self, symbol: str, start: date, end: date) -> list[PriceBar]:
        self.requests.append((symbol, start, end))
        if symbol in self._failing:
            raise DataError(symbol, "upstream unavailable")
        return [b for b in self._series.get(symbol, []) if start <= b.date <= end]


@pytest.fixture
def static_provider():
    """Factory fixture: ``static_provider({"AAPL": bars}, failing={"MSFT"})``."""

    def _factory(series, failing=()):
        return StaticPriceProvider(series, frozenset(failing))

    return _factory
