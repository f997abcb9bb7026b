"""
Game session: everything a run needs, built once at setup.

    selection -> timeline -> window -> assets -> schedule

``start_session`` runs the pipeline and returns a ``SessionStartResult``
instead of raising, so a run with nothing to trade is reported to the
player as an ordinary failed start. ``SessionManager`` keeps the current
session and throws away any load that was overtaken by a newer one.
"""

from __future__ import annotations

import itertools
import logging
import random
import threading
import uuid
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Callable, Mapping, Optional

from investsim.data_source import DataSource, default_data_source
from investsim.errors import NoTradableInstrumentsError, SessionSupersededError
from investsim.game import catalog
from investsim.game.asset_loader import LoadedInstrument, load_assets
from investsim.game.price_resolver import price_history, resolve_price
from investsim.game.scheduler import UnlockEvent, schedule_events
from investsim.game.selector import CategorySelection, select_categories
from investsim.game.window import GameWindow, resolve_window
from investsim.parsers.fd_rates import FDRates, load_fd_rates
from investsim.parsers.timeline_index import load_timeline

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSession:
    window: GameWindow
    selection: tuple[CategorySelection, ...]
    assets: Mapping[str, tuple[LoadedInstrument, ...]]
    schedule: Mapping[int, UnlockEvent]
    fd_rates: FDRates
    session_id: str = field(default_factory=lambda: uuid.uuid4().hex)

    @property
    def gold(self) -> Optional[LoadedInstrument]:
        instruments = self.assets.get(catalog.GOLD)
        return instruments[0] if instruments else None

    @property
    def instruments(self) -> dict[str, LoadedInstrument]:
        return {inst.id: inst for group in self.assets.values() for inst in group}

    def instrument(self, instrument_id: str) -> Optional[LoadedInstrument]:
        for group in self.assets.values():
            for inst in group:
                if inst.id == instrument_id:
                    return inst
        return None

    def resolve_price(self, instrument_id: str, elapsed_months: int) -> float:
        """Price of an instrument in this session; 0.0 for an unknown id."""
        inst = self.instrument(instrument_id)
        if inst is None:
            logger.warning("Price requested for unknown instrument %s", instrument_id)
            return 0.0
        return resolve_price(inst, self.window.start_year, elapsed_months)

    def price_history(self, instrument_id: str, upto_month: int) -> list[float]:
        inst = self.instrument(instrument_id)
        if inst is None:
            return []
        return price_history(inst, self.window.start_year, upto_month)

    def fd_rate(self, tenor: str, elapsed_months: int) -> float:
        return self.fd_rates.rate(tenor, self.window.year_at(elapsed_months))


@dataclass(frozen=True)
class SessionStartResult:
    ok: bool
    session: Optional[GameSession] = None
    error: Optional[str] = None


def build_session(source: DataSource, rng: random.Random,
                  is_current: Callable[[], bool] | None = None) -> GameSession:
    """Run the setup pipeline. Raises on the fatal cases; see ``start_session``."""
    selection = select_categories(rng)
    timeline = load_timeline(source)
    window = resolve_window(selection, timeline)
    assets = load_assets(window, selection, timeline, source, rng, is_current=is_current)
    schedule = schedule_events(window, assets, rng)
    fd_rates = load_fd_rates(source)

    return GameSession(
        window=window,
        selection=tuple(selection),
        assets=MappingProxyType({k: tuple(v) for k, v in assets.items()}),
        schedule=schedule,
        fd_rates=fd_rates,
    )


def start_session(source: DataSource | None = None, rng: random.Random | None = None,
                  is_current: Callable[[], bool] | None = None) -> SessionStartResult:
    source = source or default_data_source()
    rng = rng or random.Random()
    try:
        session = build_session(source, rng, is_current=is_current)
    except NoTradableInstrumentsError as e:
        logger.error("Session start failed: %s", e)
        return SessionStartResult(ok=False, error=str(e))
    except SessionSupersededError as e:
        logger.info("Session load discarded: %s", e)
        return SessionStartResult(ok=False, error=str(e))

    logger.info("Session %s ready: window %d-%d, %d instruments, %d events",
                session.session_id, session.window.start_year, session.window.end_year,
                len(session.instruments), len(session.schedule))
    return SessionStartResult(ok=True, session=session)


class SessionManager:
    """Holds the current session.

    Every ``start()`` takes a new generation number. A load that finishes
    after a newer ``start()`` began never replaces the current session.
    """

    def __init__(self, source: DataSource | None = None) -> None:
        self.source = source
        self.current: Optional[GameSession] = None
        self._generations = itertools.count(1)
        self._generation = 0
        self._lock = threading.Lock()

    @property
    def generation(self) -> int:
        return self._generation

    def start(self, rng: random.Random | None = None) -> SessionStartResult:
        with self._lock:
            generation = next(self._generations)
            self._generation = generation

        def is_current() -> bool:
            return self._generation == generation

        result = start_session(self.source, rng, is_current=is_current)

        with self._lock:
            if not is_current():
                return SessionStartResult(ok=False, error="superseded by a newer session")
            if result.ok:
                self.current = result.session
        return result
