"""
Asset timeline index: which instruments have real price data, and for which years.

Source file is ``Asset_Timeline.csv``:

    category,asset,first_year,last_year,total_records
    Indian_Stocks,INFY,1996,2025,7212
    Crypto_Assets,BTC,2015,2025,3650
    ...

The parsed index maps ``timeline category -> instrument id -> TimelineEntry``.
It is read-only once built. An unreadable source gives an empty index so the
rest of the pipeline degrades to "nothing available" instead of crashing.
"""

from __future__ import annotations

import csv
import io
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from investsim import config
from investsim.data_source import DataSource

logger = logging.getLogger(__name__)

TimelineIndex = dict[str, dict[str, "TimelineEntry"]]


@dataclass(frozen=True)
class TimelineEntry:
    """Recorded data coverage for one instrument."""

    category: str  # timeline category, e.g. "Indian_Stocks"
    instrument_id: str
    first_year: int
    last_year: int
    record_count: int

    def covers(self, start_year: int, end_year: int) -> bool:
        """True when the recorded range contains ``[start_year, end_year]``."""
        return self.first_year <= start_year and self.last_year >= end_year

    def overlaps(self, start_year: int, end_year: int) -> bool:
        """True when any recorded year falls inside ``[start_year, end_year]``."""
        return self.first_year <= end_year and self.last_year >= start_year


def _to_int(value: str) -> int | None:
    try:
        return int(float(value.strip()))
    except (ValueError, AttributeError):
        return None


def parse_timeline(rows: Iterable[Sequence[str]]) -> TimelineIndex:
    """Build the index from ``(category, id, first, last, count)`` rows.

    Rows with fewer than 5 fields, non-numeric years, or ``first > last``
    are skipped. The caller is responsible for dropping any header row.
    """
    timeline: TimelineIndex = {}
    skipped = 0

    for row in rows:
        if len(row) < 5:
            skipped += 1
            continue

        category, instrument_id = row[0].strip(), row[1].strip()
        first_year, last_year, count = _to_int(row[2]), _to_int(row[3]), _to_int(row[4])
        if not category or not instrument_id or first_year is None or last_year is None:
            skipped += 1
            continue
        if first_year > last_year:
            logger.warning("Timeline row %s/%s has first_year %d > last_year %d, skipping",
                           category, instrument_id, first_year, last_year)
            skipped += 1
            continue

        timeline.setdefault(category, {})[instrument_id] = TimelineEntry(
            category=category,
            instrument_id=instrument_id,
            first_year=first_year,
            last_year=last_year,
            record_count=count or 0,
        )

    if skipped:
        logger.debug("Timeline: skipped %d malformed rows", skipped)
    return timeline


def parse_timeline_csv(content: str) -> TimelineIndex:
    """Parse the CSV text of ``Asset_Timeline.csv`` (header row skipped)."""
    reader = csv.reader(io.StringIO(content.strip()))
    rows = [row for row in reader if any(cell.strip() for cell in row)]
    return parse_timeline(rows[1:])


def load_timeline(source: DataSource) -> TimelineIndex:
    """Fetch and parse the timeline. Never raises; empty index on failure."""
    text = source.read_text(config.TIMELINE_FILE)
    if not text:
        logger.error("Asset timeline unavailable from %r", source)
        return {}

    try:
        timeline = parse_timeline_csv(text)
    except csv.Error as e:
        logger.error("Asset timeline is not valid CSV: %s", e)
        return {}

    logger.info("Asset timeline loaded: %s",
                ", ".join(f"{cat} ({len(entries)})" for cat, entries in timeline.items()))
    return timeline
