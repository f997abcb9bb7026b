"""
Per-category capability table.

Each optional asset category is described once here: where its data lives,
how its earliest-availability year is derived, how many instruments a run
loads, and what the unlock announcement says. The window resolver, asset
loader and unlock scheduler iterate over this table instead of switching on
category keys.

Earliest-year rules:
- MIN: the category is available as soon as any instrument has data
  (stocks, funds, gold, commodities, forex)
- MAX: progressive categories need every sub-instrument tradable before the
  category counts as available (crypto: BTC+ETH, REIT: Embassy+Mindspace)
"""

from __future__ import annotations

import random
from dataclasses import dataclass, field
from typing import Iterable, Optional

from investsim import config
from investsim.game import catalog
from investsim.game.catalog import InstrumentDescriptor
from investsim.parsers.timeline_index import TimelineIndex

EARLIEST_MIN = "min"
EARLIEST_MAX = "max"

PICK_RANDOM = "random"  # random sample of the eligible instruments
PICK_FIRST = "first"    # catalog order


@dataclass(frozen=True)
class CategorySpec:
    key: str
    name: str
    timeline_category: str
    earliest_rule: str
    unlock_message: str
    min_count: Optional[int] = None  # None = load every eligible instrument
    max_count: Optional[int] = None
    pick: str = PICK_RANDOM
    # Progressive categories announce each sub-instrument separately
    sub_unlock_messages: dict[str, str] = field(default_factory=dict)
    # Stocks: any instrument in the timeline is tradable, catalog only adds names
    discover_from_timeline: bool = False

    @property
    def progressive(self) -> bool:
        return self.earliest_rule == EARLIEST_MAX

    @property
    def folder(self) -> str:
        return self.timeline_category

    def instruments(self, timeline: TimelineIndex) -> list[InstrumentDescriptor]:
        """Candidate instruments for this category, in catalog order."""
        known = list(catalog.CATALOG.get(self.key, ()))
        if not self.discover_from_timeline:
            return known

        entries = timeline.get(self.timeline_category, {})
        known_ids = {inst.id for inst in known}
        extra = [
            InstrumentDescriptor(
                id=instrument_id,
                display_name=instrument_id,
                category=self.key,
                csv_file=f"{instrument_id}.csv",
                sector="Other",
            )
            for instrument_id in entries
            if instrument_id not in known_ids
        ]
        return known + extra

    def earliest_year(self, first_years: Iterable[int]) -> Optional[int]:
        """Earliest availability year from the instruments' first data years.

        Years outside the playable history are ignored. None when nothing is left.
        """
        valid = [y for y in first_years
                 if config.HISTORY_START_YEAR <= y <= config.HISTORY_END_YEAR]
        if not valid:
            return None
        return max(valid) if self.earliest_rule == EARLIEST_MAX else min(valid)

    def timeline_earliest_year(self, timeline: TimelineIndex) -> Optional[int]:
        entries = timeline.get(self.timeline_category, {})
        return self.earliest_year(e.first_year for e in entries.values())

    def load_count(self, eligible: int, rng: random.Random) -> int:
        """How many of ``eligible`` instruments a run loads."""
        if self.max_count is None:
            return eligible
        if self.min_count is not None and self.min_count < self.max_count:
            target = rng.randint(self.min_count, self.max_count)
        else:
            target = self.max_count
        return min(target, eligible)

    def pick_instruments(self, eligible: list[InstrumentDescriptor],
                         rng: random.Random) -> list[InstrumentDescriptor]:
        count = self.load_count(len(eligible), rng)
        if count >= len(eligible):
            return list(eligible)
        if self.pick == PICK_FIRST:
            return list(eligible[:count])
        return rng.sample(eligible, count)


# ---------------------------------------------------------------------------
# The table
# ---------------------------------------------------------------------------

CATEGORY_SPECS: dict[str, CategorySpec] = {
    spec.key: spec for spec in (
        CategorySpec(
            key=catalog.STOCKS,
            name="Stocks",
            timeline_category=catalog.TIMELINE_CATEGORY[catalog.STOCKS],
            earliest_rule=EARLIEST_MIN,
            unlock_message="Stock market access unlocked",
            min_count=2,
            max_count=4,
            discover_from_timeline=True,
        ),
        CategorySpec(
            key=catalog.MUTUAL_FUNDS,
            name="Mutual Funds",
            timeline_category=catalog.TIMELINE_CATEGORY[catalog.MUTUAL_FUNDS],
            earliest_rule=EARLIEST_MIN,
            unlock_message="Mutual Funds now available",
            max_count=3,
        ),
        CategorySpec(
            key=catalog.INDEX_FUNDS,
            name="Index Funds",
            timeline_category=catalog.TIMELINE_CATEGORY[catalog.INDEX_FUNDS],
            earliest_rule=EARLIEST_MIN,
            unlock_message="Index Funds now available",
            max_count=2,
        ),
        CategorySpec(
            key=catalog.GOLD,
            name="Gold",
            timeline_category=catalog.TIMELINE_CATEGORY[catalog.GOLD],
            earliest_rule=EARLIEST_MIN,
            unlock_message="Gold investment unlocked",
            max_count=1,
            pick=PICK_FIRST,
        ),
        CategorySpec(
            key=catalog.COMMODITIES,
            name="Commodities",
            timeline_category=catalog.TIMELINE_CATEGORY[catalog.COMMODITIES],
            earliest_rule=EARLIEST_MIN,
            unlock_message="Commodity trading unlocked",
            max_count=3,
        ),
        CategorySpec(
            key=catalog.CRYPTO,
            name="Cryptocurrency",
            timeline_category=catalog.TIMELINE_CATEGORY[catalog.CRYPTO],
            earliest_rule=EARLIEST_MAX,
            unlock_message="Cryptocurrency trading unlocked",
            sub_unlock_messages={
                "BTC": "Cryptocurrency trading unlocked (Bitcoin)",
                "ETH": "New cryptocurrency available (Ethereum)",
            },
        ),
        CategorySpec(
            key=catalog.REIT,
            name="REITs",
            timeline_category=catalog.TIMELINE_CATEGORY[catalog.REIT],
            earliest_rule=EARLIEST_MAX,
            unlock_message="REIT investment unlocked",
            sub_unlock_messages={
                "EMBASSY": "REIT investment unlocked (Embassy)",
                "MINDSPACE": "New REIT available (Mindspace)",
            },
        ),
        CategorySpec(
            key=catalog.FOREX,
            name="Foreign Exchange",
            timeline_category=catalog.TIMELINE_CATEGORY[catalog.FOREX],
            earliest_rule=EARLIEST_MIN,
            unlock_message="Forex trading unlocked",
        ),
    )
}


def get_spec(key: str) -> CategorySpec:
    try:
        return CATEGORY_SPECS[key]
    except KeyError:
        raise KeyError(f"Unknown asset category {key!r}") from None
