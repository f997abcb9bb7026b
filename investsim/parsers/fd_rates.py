"""
Fixed deposit interest rates by year and tenor.

Source file is ``Fixed_Deposits/fd_rates.csv``:

    year,1Y,2Y,3Y,5Y
    1995,11.0,11.5,12.0,12.0
    ...

Header names are matched to tenors when they look like one ("1Y", "1 year",
"fd_1y", ...); otherwise columns 1-4 are taken as 1Y/2Y/3Y/5Y. Years missing
between recorded ones inherit the previous year's rate. An unreadable file
falls back to a flat constant table.
"""

from __future__ import annotations

import csv
import io
import logging
import re
from dataclasses import dataclass, field

from investsim import config
from investsim.data_source import DataSource

logger = logging.getLogger(__name__)

TENORS: tuple[str, ...] = ("1Y", "2Y", "3Y", "5Y")
TENOR_MONTHS: dict[str, int] = {"1Y": 12, "2Y": 24, "3Y": 36, "5Y": 60}

FALLBACK_FD_RATES: dict[str, float] = {"1Y": 6.5, "2Y": 7.0, "3Y": 7.5, "5Y": 7.5}

_TENOR_HEADER_RE = re.compile(r"(\d+)\s*(?:y|yr|year|years)\b", re.IGNORECASE)


@dataclass(frozen=True)
class FDRates:
    """Annual FD rates (% p.a.) per tenor, dense over ``[first_year, last_year]``."""

    by_tenor: dict[str, dict[int, float]] = field(default_factory=dict)
    fallback: dict[str, float] = field(default_factory=dict)

    @property
    def is_fallback(self) -> bool:
        return not self.by_tenor

    def rate(self, tenor: str, year: int) -> float:
        """Rate for ``tenor`` in absolute ``year``.

        After the last recorded year the last rate carries forward; before the
        first recorded year there is nothing to carry, so the default applies.
        """
        if tenor not in TENORS:
            raise ValueError(f"Unknown FD tenor {tenor!r}")

        series = self.by_tenor.get(tenor)
        if not series:
            return self.fallback.get(tenor, config.DEFAULT_FD_RATE)

        if year in series:
            return series[year]
        last_year = max(series)
        if year > last_year:
            return series[last_year]
        return config.DEFAULT_FD_RATE


def _tenor_columns(header: list[str]) -> dict[str, int]:
    columns: dict[str, int] = {}
    for i, h in enumerate(header[1:], start=1):
        m = _TENOR_HEADER_RE.search(h)
        if m:
            tenor = f"{int(m.group(1))}Y"
            if tenor in TENORS and tenor not in columns:
                columns[tenor] = i
    if not columns:
        columns = {tenor: i + 1 for i, tenor in enumerate(TENORS)}
    return columns


def _to_float(value: str) -> float | None:
    try:
        f = float(value.strip().rstrip("%"))
    except (ValueError, AttributeError):
        return None
    return f if f == f else None  # NaN check


def parse_fd_rates_csv(content: str) -> FDRates:
    """Parse the FD rate CSV. Rows with a non-numeric year are skipped."""
    rows = [r for r in csv.reader(io.StringIO(content.strip())) if any(c.strip() for c in r)]
    if len(rows) < 2:
        return FDRates(fallback=dict(FALLBACK_FD_RATES))

    columns = _tenor_columns(rows[0])
    raw: dict[str, dict[int, float]] = {tenor: {} for tenor in columns}

    for row in rows[1:]:
        try:
            year = int(float(row[0].strip()))
        except (ValueError, IndexError):
            continue
        for tenor, idx in columns.items():
            if idx < len(row):
                value = _to_float(row[idx])
                if value is not None:
                    raw[tenor][year] = value

    by_tenor: dict[str, dict[int, float]] = {}
    for tenor, series in raw.items():
        if not series:
            continue
        dense: dict[int, float] = {}
        last = None
        for year in range(min(series), max(series) + 1):
            last = series.get(year, last)
            dense[year] = last
        by_tenor[tenor] = dense

    return FDRates(by_tenor=by_tenor, fallback=dict(FALLBACK_FD_RATES))


def load_fd_rates(source: DataSource) -> FDRates:
    """Fetch and parse FD rates; the constant table on any failure."""
    text = source.read_text(config.FD_RATES_FILE)
    if not text:
        logger.warning("FD rates unavailable, using fallback table")
        return FDRates(fallback=dict(FALLBACK_FD_RATES))
    try:
        rates = parse_fd_rates_csv(text)
    except csv.Error as e:
        logger.warning("FD rates not valid CSV (%s), using fallback table", e)
        return FDRates(fallback=dict(FALLBACK_FD_RATES))

    if rates.is_fallback:
        logger.warning("FD rates file had no usable rows, using fallback table")
    else:
        logger.info("FD rates loaded for tenors %s", ", ".join(sorted(rates.by_tenor)))
    return rates
