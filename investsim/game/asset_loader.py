"""
Asset loader: picks the instruments for a run and attaches their price series.

For every selected category:
1. Candidates come from the category table (stocks are also discovered
   straight from the timeline).
2. Candidates whose recorded data overlaps the window are eligible.
3. A category-specific count of them is picked with the run's RNG.
4. Each picked instrument's CSV is fetched and densified to one price per
   year. Instruments with unusable data are dropped.

Fetches are independent of each other and run on a thread pool. Results are
collected back in pick order, so the loaded set does not depend on which
fetch finishes first.
"""

from __future__ import annotations

import logging
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from typing import Callable, Iterable, Optional

from investsim import config
from investsim.data_source import DataSource, load_filename_mapping, resolve_filename
from investsim.errors import NoTradableInstrumentsError, SessionSupersededError
from investsim.game.catalog import InstrumentDescriptor
from investsim.game.categories import CATEGORY_SPECS, CategorySpec
from investsim.game.coverage import filter_by_overlap
from investsim.game.selector import CategorySelection
from investsim.game.window import GameWindow
from investsim.parsers.price_series import PriceSeries, load_price_series
from investsim.parsers.timeline_index import TimelineIndex

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LoadedInstrument:
    """An instrument with its dense annual prices; ``prices[0]`` is ``data_start_year``."""

    id: str
    display_name: str
    category: str
    csv_file: str
    prices: tuple[float, ...]
    data_start_year: int
    data_end_year: int
    sector: Optional[str] = None

    def __post_init__(self) -> None:
        if len(self.prices) != self.data_end_year - self.data_start_year + 1:
            raise ValueError(f"{self.id}: {len(self.prices)} prices for "
                             f"{self.data_start_year}-{self.data_end_year}")

    @classmethod
    def from_series(cls, descriptor: InstrumentDescriptor, series: PriceSeries) -> "LoadedInstrument":
        return cls(
            id=descriptor.id,
            display_name=descriptor.display_name,
            category=descriptor.category,
            csv_file=descriptor.csv_file,
            sector=descriptor.sector,
            prices=series.prices,
            data_start_year=series.start_year,
            data_end_year=series.end_year,
        )


def eligible_instruments(spec: CategorySpec, window: GameWindow,
                         timeline: TimelineIndex) -> list[InstrumentDescriptor]:
    return filter_by_overlap(spec.instruments(timeline), spec.timeline_category,
                             window.start_year, window.end_year, timeline)


def fetch_instrument(source: DataSource, descriptor: InstrumentDescriptor, folder: str,
                     mapping: dict[str, dict[str, str]]) -> LoadedInstrument | None:
    """Fetch and densify one instrument. None when the data is unusable."""
    filename = resolve_filename(mapping, folder, descriptor.csv_file)
    path = f"{folder}/{filename}"
    series = load_price_series(source.read_text(path), path)
    if series is None:
        logger.warning("Rejected %s: no usable price data in %s", descriptor.id, path)
        return None
    return LoadedInstrument.from_series(descriptor, series)


def load_assets(
    window: GameWindow,
    selection: Iterable[CategorySelection],
    timeline: TimelineIndex,
    source: DataSource,
    rng: random.Random | None = None,
    max_workers: int = config.LOAD_WORKERS,
    is_current: Callable[[], bool] | None = None,
) -> dict[str, list[LoadedInstrument]]:
    """Load the run's instruments, keyed by category.

    Categories that end up empty are left out of the result.

    Raises:
        NoTradableInstrumentsError: nothing loaded in any category.
        SessionSupersededError: ``is_current`` reported False once fetching
            finished; the partial results are discarded.
    """
    rng = rng or random.Random()
    mapping = load_filename_mapping(source)

    # Picking happens up front and in selection order so the RNG stream
    # does not depend on fetch timing.
    picks: list[tuple[str, str, InstrumentDescriptor]] = []
    for sel in selection:
        spec = CATEGORY_SPECS[sel.key]
        eligible = eligible_instruments(spec, window, timeline)
        chosen = spec.pick_instruments(eligible, rng)
        logger.info("%s: %d eligible, picked %s", sel.key, len(eligible),
                    [inst.id for inst in chosen])
        picks.extend((sel.key, spec.folder, inst) for inst in chosen)

    assets: dict[str, list[LoadedInstrument]] = {}
    if picks:
        workers = max(1, min(max_workers, len(picks)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            futures = [
                (key, pool.submit(fetch_instrument, source, inst, folder, mapping))
                for key, folder, inst in picks
            ]
            for key, future in futures:
                loaded = future.result()
                if loaded is not None:
                    assets.setdefault(key, []).append(loaded)

    if is_current is not None and not is_current():
        raise SessionSupersededError("A newer session started while assets were loading")

    total = sum(len(v) for v in assets.values())
    if total == 0:
        logger.error("No tradable instruments loaded for window %d-%d",
                     window.start_year, window.end_year)
        raise NoTradableInstrumentsError(
            f"No tradable instruments for {window.start_year}-{window.end_year}"
        )

    logger.info("Loaded %d instruments: %s", total,
                ", ".join(f"{k} ({len(v)})" for k, v in assets.items()))
    return assets
