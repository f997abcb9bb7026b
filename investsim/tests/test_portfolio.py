"""Tests for the player portfolio."""

import pytest

from investsim.errors import InsufficientFundsError
from investsim.game.portfolio import Portfolio


class TestCash:
    def test_starting_cash(self):
        assert Portfolio().cash == 50_000.0

    def test_buy_and_sell(self):
        p = Portfolio()
        units = p.buy("INFY", 10_000, 250.0)
        assert units == 40
        assert p.cash == 40_000
        proceeds = p.sell("INFY", 20, 300.0)
        assert proceeds == 6_000
        assert p.cash == 46_000
        assert p.holdings["INFY"].units == 20
        assert p.holdings["INFY"].invested == 5_000

    def test_sell_everything_removes_holding(self):
        p = Portfolio()
        units = p.buy("BTC", 1_000, 100.0)
        p.sell("BTC", units, 100.0)
        assert "BTC" not in p.holdings

    def test_overspend(self):
        with pytest.raises(InsufficientFundsError):
            Portfolio(cash=100).buy("INFY", 200, 10.0)

    def test_oversell(self):
        p = Portfolio()
        p.buy("INFY", 1_000, 10.0)
        with pytest.raises(InsufficientFundsError):
            p.sell("INFY", 101, 10.0)

    def test_no_price(self):
        with pytest.raises(ValueError):
            Portfolio().buy("INFY", 1_000, 0.0)


class TestSavings:
    def test_monthly_compounding(self):
        p = Portfolio()
        p.deposit_savings(10_000)
        p.apply_month(1)
        assert p.savings == 10_033
        p.apply_month(2)
        assert p.savings == round(10_033 * (1 + 0.04 / 12))

    def test_withdraw(self):
        p = Portfolio()
        p.deposit_savings(10_000)
        p.withdraw_savings(4_000)
        assert p.savings == 6_000
        assert p.cash == 44_000
        with pytest.raises(InsufficientFundsError):
            p.withdraw_savings(7_000)


class TestFixedDeposits:
    def test_simple_interest_paid_at_maturity(self):
        p = Portfolio()
        fd = p.open_fixed_deposit(12_000, "1Y", 10.0, month=0)
        assert fd.maturity_month == 12
        assert p.cash == 38_000
        for month in range(1, 12):
            assert p.apply_month(month) == []
        assert fd.current_value == pytest.approx(13_100)
        matured = p.apply_month(12)
        assert matured == [fd]
        assert p.fixed_deposits == []
        assert p.cash == 51_200

    def test_early_withdrawal_penalty(self):
        p = Portfolio()
        fd = p.open_fixed_deposit(12_000, "1Y", 10.0, month=0)
        for month in range(1, 7):
            p.apply_month(month)
        # 600 accrued, 6 months left: penalty 12000 * 0.5% * 6 = 360
        assert fd.withdrawal_value(6) == pytest.approx(12_240)
        assert p.withdraw_fixed_deposit(fd, month=6) == pytest.approx(12_240)
        assert p.fixed_deposits == []
        assert p.cash == pytest.approx(38_000 + 12_240)

    def test_withdraw_at_maturity_has_no_penalty(self):
        p = Portfolio()
        fd = p.open_fixed_deposit(10_000, "2Y", 8.0, month=0)
        for month in range(1, 24):
            p.apply_month(month)
        assert p.withdraw_fixed_deposit(fd, month=24) == fd.maturity_value == 11_600
        assert p.fixed_deposits == []
        assert p.cash == 51_600

    def test_withdraw_unknown_deposit(self):
        p = Portfolio()
        fd = Portfolio().open_fixed_deposit(1_000, "1Y", 7.0, month=0)
        with pytest.raises(ValueError):
            p.withdraw_fixed_deposit(fd, month=3)

    def test_unknown_tenor(self):
        with pytest.raises(ValueError):
            Portfolio().open_fixed_deposit(1_000, "4Y", 7.0, month=0)


class TestNetWorth:
    def test_includes_everything(self):
        p = Portfolio()
        p.deposit_savings(10_000)
        p.open_fixed_deposit(10_000, "2Y", 7.0, month=0)
        p.buy("INFY", 10_000, 100.0)
        prices = {"INFY": 150.0}
        assert p.net_worth(prices.get) == 20_000 + 10_000 + 10_000 + 15_000
