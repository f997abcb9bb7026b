"""Shared test data: a small but complete data tree served from memory."""

from __future__ import annotations

import pytest

from investsim.data_source import InMemoryDataSource
from investsim.game.asset_loader import LoadedInstrument

TIMELINE_ROWS = [
    ("Indian_Stocks", "INFY", 1996, 2025),
    ("Indian_Stocks", "TCS", 2004, 2025),
    ("Indian_Stocks", "WIPRO", 1995, 2025),
    ("Mutual_Funds", "SBI_Bluechip", 2006, 2025),
    ("Index_Funds", "NIFTYBEES", 2002, 2025),
    ("Gold_Investments", "Physical_Gold", 1990, 2025),
    ("Commodities", "SILVER", 1990, 2025),
    ("Crypto_Assets", "BTC", 2015, 2025),
    ("Crypto_Assets", "ETH", 2017, 2025),
    ("REIT", "EMBASSY", 2019, 2025),
    ("REIT", "MINDSPACE", 2020, 2025),
    ("Forex", "USDINR", 1995, 2025),
]


def make_price_csv(points: dict[int, float]) -> str:
    """Price file text: 3 header lines, then one mid-year close per entry."""
    lines = ["Date,Close", "Ticker,X", "Date,"]
    lines += [f"{year}-06-30,{price}" for year, price in sorted(points.items())]
    return "\n".join(lines) + "\n"


def make_timeline_csv(rows) -> str:
    lines = ["category,asset,first_year,last_year,total_records"]
    lines += [f"{cat},{inst},{first},{last},{(last - first + 1) * 250}"
              for cat, inst, first, last in rows]
    return "\n".join(lines) + "\n"


def build_files(rows=TIMELINE_ROWS) -> dict[str, str]:
    files = {"Asset_Timeline.csv": make_timeline_csv(rows)}
    for cat, inst, first, last in rows:
        files[f"{cat}/{inst}.csv"] = make_price_csv(
            {y: 100.0 + (y - first) * 10 for y in range(first, last + 1)}
        )
    files["Fixed_Deposits/fd_rates.csv"] = (
        "year,1Y,2Y,3Y,5Y\n"
        "1990,10.0,10.5,11.0,11.0\n"
        "2000,8.0,8.5,9.0,9.0\n"
        "2010,7.0,7.5,8.0,8.0\n"
    )
    return files


@pytest.fixture
def price_csv():
    return make_price_csv


@pytest.fixture
def timeline_csv():
    return make_timeline_csv


@pytest.fixture
def data_files() -> dict[str, str]:
    return build_files()


@pytest.fixture
def data_source(data_files) -> InMemoryDataSource:
    return InMemoryDataSource(data_files)


@pytest.fixture
def make_instrument():
    def _make(instrument_id: str, category: str, prices, start_year: int,
              display_name: str | None = None) -> LoadedInstrument:
        prices = tuple(float(p) for p in prices)
        return LoadedInstrument(
            id=instrument_id,
            display_name=display_name or instrument_id,
            category=category,
            csv_file=f"{instrument_id}.csv",
            prices=prices,
            data_start_year=start_year,
            data_end_year=start_year + len(prices) - 1,
        )
    return _make
