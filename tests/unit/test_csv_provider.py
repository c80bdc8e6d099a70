"""Unit tests for the CSV price provider."""
from datetime import date

import pytest

from stratlab.core.exceptions import DataError
from stratlab.data.csv_store import CsvPriceProvider

_AAPL_CSV = """Date,Open,High,Low,Close,Volume
2024-01-04,102,104,101,103,1300
2024-01-02,100,101,99,100.5,1000
2024-01-03,100,102,99,101,1100
2024-01-03,101,103,100,102,1200
2024-01-06,103,105,102,104,900
2024-01-08,104,106,103,105,1400
"""


@pytest.fixture
def data_dir(tmp_path):
    (tmp_path / "AAPL.csv").write_text(_AAPL_CSV)
    (tmp_path / "MSFT.csv").write_text("date,open,high,low,close,volume\n2024-01-02,300,301,299,300,5\n")
    (tmp_path / "notes.txt").write_text("ignored")
    return tmp_path


class TestCsvPriceProvider:
    def test_loads_sorted_weekday_bars(self, data_dir):
        bars = CsvPriceProvider(data_dir).get_series("AAPL", date(2024, 1, 1), date(2024, 1, 31))
        assert [b.date for b in bars] == [
            date(2024, 1, 2), date(2024, 1, 3), date(2024, 1, 4), date(2024, 1, 8),
        ]

    def test_duplicate_date_keeps_last_row(self, data_dir):
        bars = CsvPriceProvider(data_dir).get_series("AAPL", date(2024, 1, 3), date(2024, 1, 3))
        assert len(bars) == 1
        assert bars[0].close == 102.0
        assert bars[0].volume == 1200.0

    def test_window_is_inclusive(self, data_dir):
        bars = CsvPriceProvider(data_dir).get_series("AAPL", date(2024, 1, 2), date(2024, 1, 4))
        assert [b.date.day for b in bars] == [2, 3, 4]

    def test_values_are_floats(self, data_dir):
        bar = CsvPriceProvider(data_dir).get_series("AAPL", date(2024, 1, 2), date(2024, 1, 2))[0]
        assert (bar.open, bar.high, bar.low, bar.close, bar.volume) == (100.0, 101.0, 99.0, 100.5, 1000.0)
        assert isinstance(bar.date, date)

    def test_empty_window(self, data_dir):
        assert CsvPriceProvider(data_dir).get_series("AAPL", date(2023, 1, 1), date(2023, 1, 31)) == []

    def test_missing_file_raises_data_error(self, data_dir):
        with pytest.raises(DataError) as exc_info:
            CsvPriceProvider(data_dir).get_series("TSLA", date(2024, 1, 1), date(2024, 1, 31))
        assert exc_info.value.symbol == "TSLA"

    def test_missing_columns_raise_data_error(self, tmp_path):
        (tmp_path / "BAD.csv").write_text("date,close\n2024-01-02,10\n")
        with pytest.raises(DataError, match="missing columns"):
            CsvPriceProvider(tmp_path).get_series("BAD", date(2024, 1, 1), date(2024, 1, 31))

    def test_available_symbols(self, data_dir):
        assert CsvPriceProvider(data_dir).available_symbols() == ["AAPL", "MSFT"]

    def test_available_symbols_missing_dir(self, tmp_path):
        assert CsvPriceProvider(tmp_path / "absent").available_symbols() == []
