"""
Player portfolio: pocket cash, savings, fixed deposits and unit holdings.

The portfolio knows nothing about the calendar or prices. The run
controller tells it when a month passes and supplies prices when needed.
Amounts are rupees.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable

from investsim import config
from investsim.errors import InsufficientFundsError
from investsim.parsers.fd_rates import TENOR_MONTHS

logger = logging.getLogger(__name__)

EARLY_WITHDRAWAL_PENALTY = 0.5  # % of principal per remaining month


@dataclass
class FixedDeposit:
    amount: float
    tenor: str
    roi: float  # % p.a., simple interest
    start_month: int
    accrued: float = 0.0

    @property
    def months(self) -> int:
        return TENOR_MONTHS[self.tenor]

    @property
    def maturity_month(self) -> int:
        return self.start_month + self.months

    @property
    def monthly_interest(self) -> float:
        return self.amount * self.roi / 100 / 12

    @property
    def maturity_value(self) -> float:
        return round(self.amount + self.amount * self.roi / 100 * self.months / 12, 2)

    @property
    def current_value(self) -> float:
        return round(self.amount + self.accrued, 2)

    def withdrawal_value(self, month: int) -> float:
        """Cash returned if the deposit is closed at ``month``.

        Before maturity the interest accrued so far is paid, less a penalty of
        0.5% of the principal per remaining month.
        """
        remaining = self.maturity_month - month
        if remaining <= 0:
            return self.maturity_value
        penalty = self.amount * EARLY_WITHDRAWAL_PENALTY / 100 * remaining
        return round(self.amount + self.accrued - penalty, 2)


@dataclass
class Holding:
    instrument_id: str
    units: float = 0.0
    invested: float = 0.0  # cash paid for the units still held


@dataclass
class Portfolio:
    cash: float = config.STARTING_CASH
    savings: float = 0.0
    savings_roi: float = config.SAVINGS_ROI
    fixed_deposits: list[FixedDeposit] = field(default_factory=list)
    holdings: dict[str, Holding] = field(default_factory=dict)

    # -- cash ---------------------------------------------------------------

    def _spend(self, amount: float, what: str) -> None:
        if amount <= 0:
            raise ValueError(f"{what}: amount must be positive, got {amount}")
        if amount > self.cash + 1e-9:
            raise InsufficientFundsError(f"{what}: need {amount:.2f}, have {self.cash:.2f}")
        self.cash = round(self.cash - amount, 2)

    def add_cash(self, amount: float) -> None:
        self.cash = round(self.cash + amount, 2)

    # -- savings ------------------------------------------------------------

    def deposit_savings(self, amount: float) -> None:
        self._spend(amount, "savings deposit")
        self.savings = round(self.savings + amount, 2)

    def withdraw_savings(self, amount: float) -> None:
        if amount <= 0:
            raise ValueError(f"savings withdrawal: amount must be positive, got {amount}")
        if amount > self.savings + 1e-9:
            raise InsufficientFundsError(
                f"savings withdrawal: need {amount:.2f}, have {self.savings:.2f}")
        self.savings = round(self.savings - amount, 2)
        self.add_cash(amount)

    # -- fixed deposits -----------------------------------------------------

    def open_fixed_deposit(self, amount: float, tenor: str, roi: float,
                           month: int) -> FixedDeposit:
        if tenor not in TENOR_MONTHS:
            raise ValueError(f"Unknown FD tenor {tenor!r}")
        self._spend(amount, "fixed deposit")
        fd = FixedDeposit(amount=amount, tenor=tenor, roi=roi, start_month=month)
        self.fixed_deposits.append(fd)
        logger.info("FD opened: %.2f for %s at %.2f%% (matures month %d)",
                    amount, tenor, roi, fd.maturity_month)
        return fd

    def withdraw_fixed_deposit(self, fd: FixedDeposit, month: int) -> float:
        """Close ``fd`` at ``month`` and pay its value into cash. Returns the payout."""
        if fd not in self.fixed_deposits:
            raise ValueError("Fixed deposit is not held in this portfolio")
        payout = fd.withdrawal_value(month)
        self.fixed_deposits.remove(fd)
        self.add_cash(payout)
        if month < fd.maturity_month:
            logger.info("FD closed early at month %d: %.2f returned (penalty for %d months)",
                        month, payout, fd.maturity_month - month)
        else:
            logger.info("FD closed: %.2f returned to cash", payout)
        return payout

    # -- holdings -----------------------------------------------------------

    def buy(self, instrument_id: str, amount: float, price: float) -> float:
        """Spend ``amount`` cash on units at ``price``. Returns units bought."""
        if price <= 0:
            raise ValueError(f"{instrument_id}: no price available")
        self._spend(amount, f"buy {instrument_id}")
        units = amount / price
        holding = self.holdings.setdefault(instrument_id, Holding(instrument_id))
        holding.units += units
        holding.invested = round(holding.invested + amount, 2)
        return units

    def sell(self, instrument_id: str, units: float, price: float) -> float:
        """Sell ``units`` at ``price``. Returns the cash received."""
        holding = self.holdings.get(instrument_id)
        if units <= 0:
            raise ValueError(f"sell {instrument_id}: units must be positive, got {units}")
        if holding is None or units > holding.units + 1e-9:
            held = holding.units if holding else 0.0
            raise InsufficientFundsError(f"sell {instrument_id}: have {held} units, asked {units}")

        fraction = min(1.0, units / holding.units)
        holding.invested = round(holding.invested * (1 - fraction), 2)
        holding.units -= units
        if holding.units <= 1e-9:
            del self.holdings[instrument_id]

        proceeds = round(units * price, 2)
        self.add_cash(proceeds)
        return proceeds

    # -- time ---------------------------------------------------------------

    def apply_month(self, month: int) -> list[FixedDeposit]:
        """Accrue one month of interest; ``month`` is the month being entered.

        Returns the deposits that matured (their value is back in cash).
        """
        if self.savings > 0:
            self.savings = float(round(self.savings * (1 + self.savings_roi / 100 / 12)))

        matured = []
        for fd in self.fixed_deposits:
            if month >= fd.maturity_month:
                matured.append(fd)
            else:
                fd.accrued += fd.monthly_interest
        for fd in matured:
            self.fixed_deposits.remove(fd)
            self.add_cash(fd.maturity_value)
            logger.info("FD matured: %.2f returned to cash", fd.maturity_value)
        return matured

    # -- valuation ----------------------------------------------------------

    def holdings_value(self, price_of: Callable[[str], float]) -> float:
        return sum(h.units * price_of(h.instrument_id) for h in self.holdings.values())

    def net_worth(self, price_of: Callable[[str], float]) -> float:
        fds = sum(fd.current_value for fd in self.fixed_deposits)
        return round(self.cash + self.savings + fds + self.holdings_value(price_of), 2)
