"""
Unit tests for the CSV price file reader.
"""

import dataclasses
import io
from datetime import datetime, timedelta, timezone

import pytest

from conftest import BTC_ROWS, csv_content
from crypto_recommender.domain.exceptions import DataProcessingError
from crypto_recommender.infrastructure.csv_files.csv_price_reader import CsvPriceFileReader


class TestCsvPriceFileReader:
    """Test suite for CsvPriceFileReader."""

    def test_parses_rows_after_header(self, utc_reader):
        """Each data line becomes one record; the header is skipped."""
        prices = utc_reader.read("BTC", io.StringIO(csv_content("BTC", BTC_ROWS)))

        assert len(prices) == 5
        first = prices[0]
        assert first.timestamp == datetime(2022, 1, 1, 4, 0, tzinfo=timezone.utc)
        assert first.symbol == "BTC"
        assert first.price == 46813.21
        assert [p.price for p in prices] == [p for _, p in BTC_ROWS]

    def test_symbol_is_upper_cased(self, utc_reader):
        prices = utc_reader.read("btc", io.StringIO(csv_content("btc", BTC_ROWS[:1])))
        assert prices[0].symbol == "BTC"

    def test_second_column_is_ignored(self, utc_reader):
        content = "timestamp,symbol,price\n1641009600000,ANYTHING,10.5\n"
        prices = utc_reader.read("XRP", io.StringIO(content))
        assert prices[0].symbol == "XRP"
        assert prices[0].price == 10.5

    def test_header_only_yields_empty_series(self, utc_reader):
        assert utc_reader.read("BTC", io.StringIO("timestamp,symbol,price\n")) == []

    def test_empty_stream_yields_empty_series(self, utc_reader):
        assert utc_reader.read("BTC", io.StringIO("")) == []

    def test_trailing_blank_lines_are_skipped(self, utc_reader):
        content = "timestamp,symbol,price\n1641009600000,BTC,1.0\n1641020400000,BTC,2.0\n\n\n"
        prices = utc_reader.read("BTC", io.StringIO(content))
        assert [p.price for p in prices] == [1.0, 2.0]

    def test_blank_line_before_data_raises(self, utc_reader):
        content = "timestamp,symbol,price\n1641009600000,BTC,1.0\n\n1641020400000,BTC,2.0\n"
        with pytest.raises(DataProcessingError, match="line 3: blank line"):
            utc_reader.read("BTC", io.StringIO(content))

    def test_millisecond_precision_is_kept(self, utc_reader):
        content = "timestamp,symbol,price\n1641009600123,BTC,1.0\n"
        prices = utc_reader.read("BTC", io.StringIO(content))
        assert prices[0].timestamp.microsecond == 123000

    def test_unparsable_price_raises(self, utc_reader):
        content = "timestamp,symbol,price\n1641009600000,BTC,1.0\n1641020400000,BTC,abc\n"
        with pytest.raises(DataProcessingError, match="Error processing crypto data for symbol: BTC") as info:
            utc_reader.read("BTC", io.StringIO(content))
        assert info.value.symbol == "BTC"
        assert "line 3" in str(info.value)

    def test_unparsable_timestamp_raises(self, utc_reader):
        content = "timestamp,symbol,price\n2022-01-01,BTC,1.0\n"
        with pytest.raises(DataProcessingError):
            utc_reader.read("BTC", io.StringIO(content))

    def test_missing_price_field_raises(self, utc_reader):
        content = "timestamp,symbol,price\n1641009600000,BTC\n"
        with pytest.raises(DataProcessingError, match="expected 3 fields"):
            utc_reader.read("BTC", io.StringIO(content))

    @pytest.mark.parametrize("value", ["nan", "inf", "-inf", "Infinity"])
    def test_non_numeric_price_spellings_raise(self, utc_reader, value):
        content = f"timestamp,symbol,price\n1641009600000,BTC,{value}\n"
        with pytest.raises(DataProcessingError, match="malformed price"):
            utc_reader.read("BTC", io.StringIO(content))

    def test_overflowing_price_raises(self, utc_reader):
        content = "timestamp,symbol,price\n1641009600000,BTC,1e999\n"
        with pytest.raises(DataProcessingError, match="non-finite"):
            utc_reader.read("BTC", io.StringIO(content))

    @pytest.mark.parametrize(
        "row, fault",
        [
            ("1_641_009_600_000,BTC,46813.21", "malformed timestamp"),
            ("1641009600000,BTC,4_6813.21", "malformed price"),
            ("1_641_009_600_000,BTC,4_6813.21", "malformed timestamp"),
            ("1641009600000.0,BTC,46813.21", "malformed timestamp"),
            ("1641009600000,BTC,46813.21.5", "malformed price"),
        ],
    )
    def test_underscore_grouped_numbers_raise(self, utc_reader, row, fault):
        """Only plain ASCII numerals are accepted, not Python literal syntax."""
        with pytest.raises(DataProcessingError, match=fault):
            utc_reader.read("BTC", io.StringIO(f"timestamp,symbol,price\n{row}\n"))

    def test_signed_and_exponent_prices_are_accepted(self, utc_reader):
        content = "timestamp,symbol,price\n1641009600000,BTC,+4.68e4\n1641020400000,BTC,.5\n"
        assert [p.price for p in utc_reader.read("BTC", io.StringIO(content))] == [46800.0, 0.5]

    def test_zero_price_is_kept_at_ingestion(self, utc_reader):
        """Sentinel prices are filtered by the statistics, not by the reader."""
        content = "timestamp,symbol,price\n1641009600000,BTC,0\n"
        assert utc_reader.read("BTC", io.StringIO(content))[0].price == 0.0

    def test_configured_zone_is_applied(self):
        reader = CsvPriceFileReader(tz=timezone(timedelta(hours=-5)))
        stamp = reader.to_datetime(1641009600000)
        assert stamp.utcoffset() == timedelta(hours=-5)
        assert stamp.date().isoformat() == "2021-12-31"

    def test_default_zone_is_local_and_aware(self):
        stamp = CsvPriceFileReader().to_datetime(1641009600000)
        assert stamp.tzinfo is not None
        assert stamp == datetime(2022, 1, 1, 4, 0, tzinfo=timezone.utc)

    def test_read_file(self, tmp_path, utc_reader, write_price_file):
        path = write_price_file(tmp_path, "BTC", BTC_ROWS)
        assert len(utc_reader.read_file("BTC", path)) == 5

    def test_records_are_immutable(self, utc_reader):
        price = utc_reader.read("BTC", io.StringIO(csv_content("BTC", BTC_ROWS[:1])))[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            price.price = 1.0
