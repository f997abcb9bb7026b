"""
Run controller: the month clock.

One ``advance_month()`` is one tick: interest accrues, the clock moves,
the event scheduled for the new month is applied and net worth is
recorded. Unlocks and life events pause the run until the player (or
the UI) calls ``resume()``. A loss the player can't cover becomes a
pending expense and the run stays paused until it is settled.

``run()`` is the timer loop: it sleeps one month duration between ticks
and never arms the next tick before the previous one has been applied.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Optional

from investsim import config
from investsim.errors import InsufficientFundsError, InvestSimError, UnknownInstrumentError
from investsim.game import catalog
from investsim.game.categories import CATEGORY_SPECS
from investsim.game.portfolio import FixedDeposit, Portfolio
from investsim.game.scheduler import GAIN, LOSS, UNLOCK, UnlockEvent
from investsim.game.session import GameSession

logger = logging.getLogger(__name__)


class RunStateError(InvestSimError):
    """Tick or trade requested while the run can't accept it."""


@dataclass(frozen=True)
class NetWorthPoint:
    month: int
    net_worth: float


class RunController:
    def __init__(self, session: GameSession, portfolio: Portfolio | None = None,
                 pause_on_events: bool = True) -> None:
        self.session = session
        self.portfolio = portfolio or Portfolio()
        self.pause_on_events = pause_on_events

        self.month = 0
        self.started = False
        self.paused = False
        self.unlocked: set[str] = set()
        self.unlocked_instruments: set[str] = set()
        self.pending_expense: Optional[UnlockEvent] = None
        self.events: list[UnlockEvent] = []
        self.history: list[NetWorthPoint] = []

    # -- state --------------------------------------------------------------

    @property
    def finished(self) -> bool:
        return self.month >= config.TOTAL_MONTHS

    @property
    def absolute_year(self) -> int:
        return self.session.window.year_at(self.month)

    def price(self, instrument_id: str) -> float:
        return self.session.resolve_price(instrument_id, self.month)

    def net_worth(self) -> float:
        return self.portfolio.net_worth(self.price)

    def is_tradable(self, instrument_id: str) -> bool:
        inst = self.session.instrument(instrument_id)
        if inst is None or inst.category not in self.unlocked:
            return False
        spec = CATEGORY_SPECS.get(inst.category)
        if spec is not None and spec.progressive:
            return instrument_id in self.unlocked_instruments
        return True

    # -- clock --------------------------------------------------------------

    def start(self) -> Optional[UnlockEvent]:
        """Begin the run and apply the month 0 event."""
        if self.started:
            raise RunStateError("Run already started")
        self.started = True
        event = self._dispatch(self.month)
        self._record()
        return event

    def advance_month(self) -> Optional[UnlockEvent]:
        if not self.started:
            raise RunStateError("Run not started")
        if self.paused:
            raise RunStateError(f"Run paused at month {self.month}")
        if self.finished:
            raise RunStateError("Run finished")

        next_month = self.month + 1
        self.portfolio.apply_month(next_month)
        self.month = next_month
        event = self._dispatch(self.month)
        self._record()

        if self.finished:
            logger.info("Run finished: net worth %.2f", self.history[-1].net_worth)
        return event

    def resume(self) -> None:
        if self.pending_expense is not None:
            raise RunStateError(
                f"Pending expense of {-self.pending_expense.amount:.2f} must be paid first")
        self.paused = False

    def run(self, sleep: Callable[[float], None] = time.sleep,
            month_duration_ms: int = config.MONTH_DURATION_MS) -> int:
        """Tick until the run pauses or finishes. Returns the current month."""
        if not self.started:
            self.start()
        while not self.finished and not self.paused:
            sleep(month_duration_ms / 1000)
            self.advance_month()
        return self.month

    def _record(self) -> None:
        self.history.append(NetWorthPoint(self.month, self.net_worth()))

    # -- events -------------------------------------------------------------

    def _dispatch(self, month: int) -> Optional[UnlockEvent]:
        event = self.session.schedule.get(month)
        if event is None:
            return None

        self.events.append(event)
        if event.type == UNLOCK:
            self._apply_unlock(event)
        elif event.type == GAIN:
            self.portfolio.add_cash(event.amount or 0.0)
            logger.info("Month %d: %s (+%.0f)", month, event.message, event.amount or 0.0)
        elif event.type == LOSS:
            self._apply_loss(event)
        else:
            logger.warning("Month %d: unknown event type %r", month, event.type)
            return event

        if self.pause_on_events:
            self.paused = True
        return event

    def _apply_unlock(self, event: UnlockEvent) -> None:
        if event.category:
            self.unlocked.add(event.category)
        if event.subkey:
            self.unlocked_instruments.add(event.subkey)
        logger.info("Month %d: %s", event.month, event.message)

    def _apply_loss(self, event: UnlockEvent) -> None:
        cost = -(event.amount or 0.0)
        if cost <= self.portfolio.cash:
            self.portfolio.add_cash(-cost)
            logger.info("Month %d: %s (-%.0f)", event.month, event.message, cost)
            return
        self.pending_expense = event
        self.paused = True
        logger.info("Month %d: %s, %.0f needed but only %.2f in cash",
                    event.month, event.message, cost, self.portfolio.cash)

    def settle_pending_expense(self) -> None:
        """Pay the pending loss out of cash once the player has raised it."""
        event = self.pending_expense
        if event is None:
            return
        cost = -(event.amount or 0.0)
        if cost > self.portfolio.cash:
            raise InsufficientFundsError(
                f"{event.message}: need {cost:.2f}, have {self.portfolio.cash:.2f}")
        self.portfolio.add_cash(-cost)
        self.pending_expense = None
        logger.info("Pending expense paid: %s (-%.0f)", event.message, cost)

    # -- player actions -----------------------------------------------------

    def _require_unlocked(self, category: str) -> None:
        if category not in self.unlocked:
            raise RunStateError(f"{category} is not unlocked yet")

    def buy(self, instrument_id: str, amount: float) -> float:
        if self.session.instrument(instrument_id) is None:
            raise UnknownInstrumentError(instrument_id)
        if not self.is_tradable(instrument_id):
            raise RunStateError(f"{instrument_id} is not unlocked yet")
        return self.portfolio.buy(instrument_id, amount, self.price(instrument_id))

    def sell(self, instrument_id: str, units: float) -> float:
        if self.session.instrument(instrument_id) is None:
            raise UnknownInstrumentError(instrument_id)
        return self.portfolio.sell(instrument_id, units, self.price(instrument_id))

    def deposit_savings(self, amount: float) -> None:
        self._require_unlocked(catalog.SAVINGS)
        self.portfolio.deposit_savings(amount)

    def withdraw_savings(self, amount: float) -> None:
        self.portfolio.withdraw_savings(amount)

    def open_fixed_deposit(self, amount: float, tenor: str) -> FixedDeposit:
        self._require_unlocked(catalog.FIXED_DEPOSITS)
        roi = self.session.fd_rate(tenor, self.month)
        return self.portfolio.open_fixed_deposit(amount, tenor, roi, self.month)

    def withdraw_fixed_deposit(self, index: int) -> float:
        """Close the ``index``-th open deposit now, early-withdrawal penalty included."""
        deposits = self.portfolio.fixed_deposits
        if not 0 <= index < len(deposits):
            raise RunStateError(f"No fixed deposit at position {index}")
        return self.portfolio.withdraw_fixed_deposit(deposits[index], self.month)
