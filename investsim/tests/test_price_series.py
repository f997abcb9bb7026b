"""Tests for the price CSV parser and the yearly densifier."""

from unittest.mock import patch

import pandas as pd
import pytest

from investsim.parsers.price_series import (
    PriceSeries,
    densify,
    find_price_column,
    load_price_series,
    parse_price_csv,
)

RAW = """Date,Open,Close
Ticker,INFY,INFY
Date,,
2000-01-15,90,100
2000-06-15,95,110
2002-03-01,120,130
abc,1,50
2001-01-01,1,-5
1985-01-01,1,10
"""


class TestFindPriceColumn:
    def test_close_column(self):
        assert find_price_column(["Date", "Open", "Close"]) == 2

    def test_nav_column(self):
        assert find_price_column(["Date", "Scheme", "NAV"]) == 2

    def test_price_case_insensitive(self):
        assert find_price_column(["date", "PRICE"]) == 1

    def test_fallback_column_one(self):
        assert find_price_column(["Date", "Value", "Volume"]) == 1


class TestParsePriceCsv:
    def test_bad_rows_dropped(self):
        frame = parse_price_csv(RAW, "INFY")
        assert list(frame["year"]) == [2000, 2000, 2002]
        assert list(frame["price"]) == [100.0, 110.0, 130.0]

    def test_header_block_always_skipped(self):
        # Row 2 holds a perfectly valid data row; it is still metadata
        text = "Date,Close\n2000-01-01,1\n2000-02-01,2\n2001-01-01,50\n2002-01-01,60\n"
        frame = parse_price_csv(text)
        assert list(frame["price"]) == [50.0, 60.0]

    def test_only_header_block(self):
        assert parse_price_csv("Date,Close\nx,y\nz,w\n").empty

    def test_thousands_separator(self):
        text = 'Date,Close\nmeta\nmeta\n2010-01-01,"1,250.50"\n'
        frame = parse_price_csv(text)
        assert frame["price"].iloc[0] == pytest.approx(1250.5)


class TestDensify:
    def test_mean_and_forward_fill(self):
        series = densify(parse_price_csv(RAW, "INFY"), "INFY")
        assert series == PriceSeries(prices=(105.0, 105.0, 130.0), start_year=2000, end_year=2002)

    def test_rounds_to_two_decimals(self):
        frame = pd.DataFrame({"year": [2000, 2000, 2001], "price": [1.111, 1.113, 2.0]})
        assert densify(frame).prices[0] == 1.11

    def test_single_year_rejected(self):
        frame = pd.DataFrame({"year": [2000, 2000], "price": [1.0, 2.0]})
        assert densify(frame) is None

    def test_empty_rejected(self):
        frame = pd.DataFrame({"year": pd.Series(dtype="int64"), "price": pd.Series(dtype="float64")})
        assert densify(frame) is None

    def test_no_gaps(self, price_csv):
        series = load_price_series(price_csv({1995: 10.0, 2001: 20.0, 2004: 40.0}))
        assert len(series.prices) == 2004 - 1995 + 1
        assert series.prices[:6] == (10.0,) * 6
        assert series.prices[6:9] == (20.0,) * 3
        assert series.prices[-1] == 40.0


class TestLoadPriceSeries:
    def test_missing_content(self):
        assert load_price_series(None) is None
        assert load_price_series("") is None

    def test_length_invariant(self):
        with pytest.raises(ValueError):
            PriceSeries(prices=(1.0,), start_year=2000, end_year=2001)

    def test_mixed_utc_offsets(self):
        content = ("Date,Close\nx\ny\n"
                   "2015-06-30T00:00:00+05:30,100\n"
                   "2016-06-30,110\n"
                   "2017-06-30T00:00:00Z,120\n")
        assert load_price_series(content, "mixed.csv") == PriceSeries((100.0, 110.0, 120.0), 2015, 2017)

    def test_parse_failure_is_none(self, price_csv):
        with patch("investsim.parsers.price_series.pd.to_datetime", side_effect=ValueError("bad")):
            assert load_price_series(price_csv({2000: 1.0, 2001: 2.0})) is None
