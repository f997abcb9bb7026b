"""Tests for the asset timeline parser."""

from investsim.data_source import InMemoryDataSource
from investsim.parsers.timeline_index import (
    TimelineEntry,
    load_timeline,
    parse_timeline,
    parse_timeline_csv,
)


class TestParseTimeline:
    def test_builds_nested_index(self):
        index = parse_timeline([
            ("Indian_Stocks", "INFY", "1996", "2025", "7000"),
            ("Crypto_Assets", "BTC", "2015", "2025", "3650"),
        ])
        assert set(index) == {"Indian_Stocks", "Crypto_Assets"}
        assert index["Crypto_Assets"]["BTC"] == TimelineEntry("Crypto_Assets", "BTC", 2015, 2025, 3650)

    def test_short_rows_skipped(self):
        index = parse_timeline([
            ("Indian_Stocks", "INFY", "1996", "2025"),
            ("Indian_Stocks", "TCS", "2004", "2025", "5000"),
        ])
        assert list(index["Indian_Stocks"]) == ["TCS"]

    def test_non_numeric_years_skipped(self):
        index = parse_timeline([("Forex", "USDINR", "n/a", "2025", "10")])
        assert index == {}

    def test_first_after_last_skipped(self):
        index = parse_timeline([("Forex", "USDINR", "2020", "2010", "10")])
        assert index == {}

    def test_whitespace_trimmed(self):
        index = parse_timeline([(" REIT ", " EMBASSY ", " 2019 ", "2025", "1500")])
        assert index["REIT"]["EMBASSY"].first_year == 2019


class TestParseCsv:
    def test_header_row_skipped(self):
        text = (
            "category,asset,first_year,last_year,total_records\n"
            "Gold_Investments,Physical_Gold,1990,2025,9000\n"
        )
        index = parse_timeline_csv(text)
        assert list(index) == ["Gold_Investments"]

    def test_blank_lines_ignored(self):
        text = "category,asset,first_year,last_year,total_records\n\nForex,USDINR,1995,2025,7000\n\n"
        assert "USDINR" in parse_timeline_csv(text)["Forex"]


class TestEntry:
    def test_covers(self):
        entry = TimelineEntry("Forex", "USDINR", 1995, 2025, 1)
        assert entry.covers(1995, 2015)
        assert not entry.covers(1990, 2010)
        assert not entry.covers(2010, 2030)

    def test_overlaps(self):
        entry = TimelineEntry("Crypto_Assets", "BTC", 2015, 2025, 1)
        assert entry.overlaps(2002, 2022)
        assert entry.overlaps(2025, 2030)
        assert not entry.overlaps(1990, 2010)


class TestLoadTimeline:
    def test_missing_source_gives_empty_index(self):
        assert load_timeline(InMemoryDataSource()) == {}

    def test_loads_from_source(self, data_source):
        index = load_timeline(data_source)
        assert index["Crypto_Assets"]["ETH"].first_year == 2017
        assert "Asset_Timeline.csv" in data_source.reads
