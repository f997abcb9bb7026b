"""
Instrument price CSV parser and yearly densifier.

Price files quirks:
- The first 3 lines are a fixed header/metadata block and are always skipped
- Line 0 is still used to find the price column (name containing
  "close", "price" or "nav"); column 1 otherwise
- Column 0 is the date, in whatever format the exporter felt like
- Bad rows (unparsable date, non-positive price, year outside 1990-2030)
  are dropped silently

The game runs at annual resolution, so the raw observations are collapsed to
one price per calendar year: same-year observations are averaged, years with
no observation inherit the previous year's value.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass

import numpy as np
import pandas as pd

from investsim import config

logger = logging.getLogger(__name__)

HEADER_ROWS = 3
DATE_COLUMN = 0
DEFAULT_PRICE_COLUMN = 1
_PRICE_COLUMN_HINTS = ("close", "price", "nav")


@dataclass(frozen=True)
class PriceSeries:
    """Dense annual prices; ``prices[0]`` is the price for ``start_year``."""

    prices: tuple[float, ...]
    start_year: int
    end_year: int

    def __post_init__(self) -> None:
        if len(self.prices) != self.end_year - self.start_year + 1:
            raise ValueError(
                f"{len(self.prices)} prices for {self.start_year}-{self.end_year}"
            )


def find_price_column(header: list[str]) -> int:
    """Index of the close/price/NAV column, falling back to column 1."""
    lower = [h.strip().lower() for h in header]
    for i, h in enumerate(lower):
        if i == DATE_COLUMN:
            continue
        if any(hint in h for hint in _PRICE_COLUMN_HINTS):
            return i
    return DEFAULT_PRICE_COLUMN


def parse_price_csv(content: str, name: str = "<csv>") -> pd.DataFrame:
    """Parse raw price CSV text into a ``(year, price)`` DataFrame.

    Returns an empty frame when nothing usable is found.
    """
    empty = pd.DataFrame({"year": pd.Series(dtype="int64"), "price": pd.Series(dtype="float64")})

    lines = [line for line in content.strip().splitlines() if line.strip()]
    if len(lines) <= HEADER_ROWS:
        logger.warning("%s: not enough data lines (%d)", name, len(lines))
        return empty

    rows = list(csv.reader(io.StringIO("\n".join(lines))))
    price_col = find_price_column(rows[0])

    dates: list[str] = []
    prices: list[str] = []
    for row in rows[HEADER_ROWS:]:
        if len(row) <= max(DATE_COLUMN, price_col):
            continue
        date_str, price_str = row[DATE_COLUMN].strip(), row[price_col].strip()
        if not date_str or not price_str:
            continue
        dates.append(date_str)
        prices.append(price_str.replace(",", ""))

    if not dates:
        logger.warning("%s: no data rows after header block", name)
        return empty

    frame = pd.DataFrame({
        "date": pd.to_datetime(pd.Series(dates), errors="coerce", format="mixed", utc=True),
        "price": pd.to_numeric(pd.Series(prices), errors="coerce"),
    })
    frame = frame.dropna()
    frame = frame[frame["price"] > 0]
    frame = frame.assign(year=frame["date"].dt.year.astype("int64"))
    frame = frame[(frame["year"] >= config.PRICE_MIN_YEAR) & (frame["year"] <= config.PRICE_MAX_YEAR)]

    return frame[["year", "price"]].reset_index(drop=True)


def densify(observations: pd.DataFrame, name: str = "<series>") -> PriceSeries | None:
    """Collapse raw observations to one price per year with no gaps.

    Returns None when there are no observations or fewer than two distinct
    years (a single point can't be interpolated).
    """
    if observations.empty:
        logger.warning("%s: no valid data rows", name)
        return None

    yearly = observations.groupby("year")["price"].mean().round(2)
    if len(yearly) < 2:
        logger.warning("%s: only %d distinct year(s), need 2", name, len(yearly))
        return None

    start_year, end_year = int(yearly.index.min()), int(yearly.index.max())
    dense = yearly.reindex(range(start_year, end_year + 1)).ffill()

    prices = tuple(float(p) for p in np.asarray(dense.values, dtype=float))
    logger.debug("%s: %d years (%d-%d), %d rows", name, len(prices), start_year, end_year,
                 len(observations))
    return PriceSeries(prices=prices, start_year=start_year, end_year=end_year)


def load_price_series(content: str | None, name: str = "<csv>") -> PriceSeries | None:
    """Parse + densify in one go. None for missing or unusable content."""
    if not content:
        return None
    try:
        observations = parse_price_csv(content, name)
    except (csv.Error, ValueError, TypeError) as e:
        logger.warning("%s: unreadable price data: %s", name, e)
        return None
    return densify(observations, name)
