"""Unit tests for concurrent series fetching and provider construction."""
import logging
from datetime import date

import pytest

from stratlab.core.config import ProviderConfig
from stratlab.core.exceptions import DataError
from stratlab.core.types import PriceBar
from stratlab.data.csv_store import CsvPriceProvider
from stratlab.data.factory import build_provider
from stratlab.data.provider import PriceSeriesProvider, fetch_series
from stratlab.data.synthetic import SyntheticPriceProvider

START = date(2024, 1, 1)
END = date(2024, 1, 31)


def _make_bar(day: int, close: float) -> PriceBar:
    return PriceBar(date(2024, 1, day), close, close, close, close, 1000)


class _BrokenProvider(PriceSeriesProvider):
    def available_symbols(self) -> list[str]:
        return []

    def get_series(self, symbol, start, end):
        raise ConnectionError("socket closed")


class TestFetchSeries:
    def test_returns_series_in_symbol_order(self, static_provider):
        provider = static_provider(
            {"AAPL": [_make_bar(2, 100)], "MSFT": [_make_bar(2, 300)], "NVDA": [_make_bar(2, 700)]}
        )
        result = fetch_series(provider, ["NVDA", "AAPL", "MSFT"], START, END)
        assert list(result) == ["NVDA", "AAPL", "MSFT"]
        assert result["MSFT"][0].close == 300
        assert sorted(r[0] for r in provider.requests) == ["AAPL", "MSFT", "NVDA"]

    def test_passes_window_to_provider(self, static_provider):
        provider = static_provider({"AAPL": [_make_bar(2, 100)]})
        fetch_series(provider, ["AAPL"], START, END)
        assert provider.requests == [("AAPL", START, END)]

    def test_empty_series_is_allowed(self, static_provider, caplog):
        caplog.set_level(logging.WARNING, logger="stratlab")
        result = fetch_series(static_provider({}), ["AAPL"], START, END)
        assert result == {"AAPL": []}
        assert "No price data for AAPL" in caplog.text

    def test_data_error_propagates(self, static_provider):
        provider = static_provider({"AAPL": [_make_bar(2, 100)]}, failing={"MSFT"})
        with pytest.raises(DataError) as exc_info:
            fetch_series(provider, ["AAPL", "MSFT"], START, END)
        assert exc_info.value.symbol == "MSFT"

    def test_other_errors_wrapped_in_data_error(self):
        with pytest.raises(DataError) as exc_info:
            fetch_series(_BrokenProvider(), ["AAPL"], START, END, max_workers=1)
        assert exc_info.value.symbol == "AAPL"
        assert "socket closed" in exc_info.value.reason
        assert isinstance(exc_info.value.__cause__, ConnectionError)


class TestBuildProvider:
    def test_synthetic_default(self):
        assert isinstance(build_provider(ProviderConfig()), SyntheticPriceProvider)

    def test_csv(self, tmp_path):
        provider = build_provider(ProviderConfig(type="csv", data_dir=str(tmp_path)))
        assert isinstance(provider, CsvPriceProvider)
