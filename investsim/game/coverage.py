"""Timeline coverage checks for candidate instruments."""

from __future__ import annotations

import logging
from typing import Iterable

from investsim.game.catalog import InstrumentDescriptor
from investsim.parsers.timeline_index import TimelineIndex

logger = logging.getLogger(__name__)


def filter_by_coverage(
    instruments: Iterable[InstrumentDescriptor],
    category: str,
    window_start: int,
    timeline: TimelineIndex,
    years_needed: int,
) -> list[InstrumentDescriptor]:
    """Instruments whose recorded range covers ``[window_start, window_start + years_needed]``.

    ``category`` is the timeline category (data folder) name. Instruments
    missing from the timeline are dropped with a log line. Input order is kept.
    """
    entries = timeline.get(category, {})
    end_year = window_start + years_needed
    passed = []
    for inst in instruments:
        entry = entries.get(inst.id)
        if entry is None:
            logger.info("%s/%s not in asset timeline, skipping", category, inst.id)
            continue
        if entry.covers(window_start, end_year):
            passed.append(inst)
    return passed


def filter_by_overlap(
    instruments: Iterable[InstrumentDescriptor],
    category: str,
    start_year: int,
    end_year: int,
    timeline: TimelineIndex,
) -> list[InstrumentDescriptor]:
    """Instruments with at least one recorded year inside ``[start_year, end_year]``.

    This is the admission rule the asset loader uses: a category may be
    introduced mid-window, so full coverage from the window start is not required.
    """
    entries = timeline.get(category, {})
    passed = []
    for inst in instruments:
        entry = entries.get(inst.id)
        if entry is None:
            logger.info("%s/%s not in asset timeline, skipping", category, inst.id)
            continue
        if entry.overlaps(start_year, end_year):
            passed.append(inst)
        else:
            logger.debug("%s/%s data %d-%d outside window %d-%d", category, inst.id,
                         entry.first_year, entry.last_year, start_year, end_year)
    return passed
