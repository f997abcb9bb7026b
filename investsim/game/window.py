"""
Game window resolution.

The run covers 20 historical years. The window is anchored on the latest
year at which any selected category becomes available, plus a 5 year
buffer so the last category still has time to be played, and clamped to
the 1990-2025 history we have data for.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable

from investsim import config
from investsim.game.categories import CATEGORY_SPECS
from investsim.game.selector import CategorySelection
from investsim.parsers.timeline_index import TimelineIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameWindow:
    start_year: int
    end_year: int

    @property
    def span(self) -> int:
        return self.end_year - self.start_year

    def year_at(self, elapsed_months: int) -> int:
        """Absolute calendar year for a game month."""
        return self.start_year + elapsed_months // 12


def category_earliest_year(key: str, timeline: TimelineIndex) -> int:
    """Earliest availability of one category, 1990 when the timeline has nothing."""
    year = CATEGORY_SPECS[key].timeline_earliest_year(timeline)
    if year is None:
        logger.info("No timeline data for %s, assuming %d", key, config.HISTORY_START_YEAR)
        return config.HISTORY_START_YEAR
    return year


def latest_introduction_year(selection: Iterable[CategorySelection],
                             timeline: TimelineIndex) -> int:
    """The bottleneck year: max over the selected categories' earliest years."""
    latest = config.HISTORY_START_YEAR
    for sel in selection:
        year = category_earliest_year(sel.key, timeline)
        logger.debug("%s available from %d", sel.key, year)
        latest = max(latest, year)
    return latest


def window_for(latest_intro_year: int) -> GameWindow:
    end_year = min(latest_intro_year + config.BUFFER_YEARS, config.HISTORY_END_YEAR)
    start_year = max(config.HISTORY_START_YEAR, end_year - config.GAME_YEARS)
    if end_year - start_year < config.GAME_YEARS:
        end_year = min(config.HISTORY_END_YEAR, start_year + config.GAME_YEARS)
    return GameWindow(start_year=start_year, end_year=end_year)


def resolve_window(selection: Iterable[CategorySelection], timeline: TimelineIndex) -> GameWindow:
    latest = latest_introduction_year(selection, timeline)
    window = window_for(latest)
    logger.info("Game window %d-%d (latest category introduction %d)",
                window.start_year, window.end_year, latest)
    return window
