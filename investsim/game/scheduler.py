"""
Unlock scheduler.

Builds the run's event timeline once, at session start:

- month 0: savings, month 1: fixed deposits
- one unlock per loaded category at month 0 of the year its data begins
  (relative to the window start). Progressive categories (crypto, REIT)
  unlock per instrument instead.
- random gain/loss life events in years nobody else uses

The scheduler works in years: a year holding any event is occupied, and a
colliding unlock moves forward to the next free year. Unlocks that can't
find a free year before the end of the game are dropped.

The result is a read-only ``{month: UnlockEvent}`` mapping.
"""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Optional

from investsim import config
from investsim.game import catalog
from investsim.game.asset_loader import LoadedInstrument
from investsim.game.categories import CATEGORY_SPECS
from investsim.game.life_events import GAIN_EVENTS, LOSS_EVENTS, LifeEvent
from investsim.game.window import GameWindow

logger = logging.getLogger(__name__)

UNLOCK = "unlock"
GAIN = "gain"
LOSS = "loss"

SAVINGS_MESSAGE = "Savings Account ready"
FIXED_DEPOSITS_MESSAGE = "Fixed Deposits now available"

LOSS_PROBABILITY = 0.6
FIRST_LIFE_EVENT_MONTHS = (24, 35)
LIFE_EVENT_GAP_MONTHS = (24, 36)


@dataclass(frozen=True)
class UnlockEvent:
    month: int
    type: str
    message: str
    category: Optional[str] = None
    subkey: Optional[str] = None  # instrument id for progressive unlocks
    amount: Optional[float] = None


@dataclass(frozen=True)
class _PendingUnlock:
    year: int  # absolute
    category: str
    subkey: Optional[str]
    message: str


def _pending_unlocks(loaded: Mapping[str, list[LoadedInstrument]]) -> list[_PendingUnlock]:
    pending = []
    for key, instruments in loaded.items():
        if not instruments:
            continue
        spec = CATEGORY_SPECS.get(key)
        if spec is None:
            logger.warning("No category entry for loaded key %s, not scheduling", key)
            continue
        if spec.progressive:
            for inst in instruments:
                message = spec.sub_unlock_messages.get(inst.id, spec.unlock_message)
                pending.append(_PendingUnlock(inst.data_start_year, key, inst.id, message))
        else:
            year = min(inst.data_start_year for inst in instruments)
            pending.append(_PendingUnlock(year, key, None, spec.unlock_message))
    # Stable: ties keep category/catalog order, so BTC still precedes ETH
    return sorted(pending, key=lambda p: p.year)


def _free_year(offset: int, occupied: set[int]) -> int | None:
    while offset < config.GAME_YEARS:
        if offset not in occupied:
            return offset
        offset += 1
    return None


class _Pool:
    """Draws without replacement until empty, then with replacement."""

    def __init__(self, events: tuple[LifeEvent, ...], rng: random.Random) -> None:
        self._all = events
        self._left = list(events)
        self._rng = rng

    def draw(self) -> LifeEvent:
        if self._left:
            return self._left.pop(self._rng.randrange(len(self._left)))
        return self._rng.choice(self._all)


def schedule_events(
    window: GameWindow,
    loaded: Mapping[str, list[LoadedInstrument]],
    rng: random.Random | None = None,
) -> Mapping[int, UnlockEvent]:
    """Build the full event schedule for a run."""
    rng = rng or random.Random()

    events: dict[int, UnlockEvent] = {
        0: UnlockEvent(month=0, type=UNLOCK, category=catalog.SAVINGS, message=SAVINGS_MESSAGE),
        1: UnlockEvent(month=1, type=UNLOCK, category=catalog.FIXED_DEPOSITS,
                       message=FIXED_DEPOSITS_MESSAGE),
    }
    occupied = {0}

    for unlock in _pending_unlocks(loaded):
        offset = max(0, unlock.year - window.start_year)
        label = unlock.subkey or unlock.category
        if window.start_year + offset > window.end_year:
            logger.info("Dropping %s unlock: data starts %d, after window end %d",
                        label, unlock.year, window.end_year)
            continue

        slot = _free_year(offset, occupied)
        if slot is None:
            logger.warning("Dropping %s unlock: no free year from offset %d", label, offset)
            continue
        if slot != offset:
            logger.debug("%s unlock moved from year %d to %d", label, offset, slot)

        occupied.add(slot)
        month = slot * 12
        events[month] = UnlockEvent(month=month, type=UNLOCK, category=unlock.category,
                                    subkey=unlock.subkey, message=unlock.message)

    losses = _Pool(LOSS_EVENTS, rng)
    gains = _Pool(GAIN_EVENTS, rng)
    life_events = 0
    month = rng.randint(*FIRST_LIFE_EVENT_MONTHS)
    while month < config.TOTAL_MONTHS:
        year = month // 12
        if year not in occupied:
            if rng.random() < LOSS_PROBABILITY:
                kind, event = LOSS, losses.draw()
            else:
                kind, event = GAIN, gains.draw()
            slot = year * 12
            events[slot] = UnlockEvent(month=slot, type=kind, message=event.message,
                                       amount=event.amount)
            occupied.add(year)
            life_events += 1
        month += rng.randint(*LIFE_EVENT_GAP_MONTHS)

    logger.info("Scheduled %d events (%d life events)", len(events), life_events)
    return MappingProxyType(dict(sorted(events.items())))
