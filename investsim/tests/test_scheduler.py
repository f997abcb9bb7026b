"""Tests for the unlock and life event scheduler."""

import random

import pytest

from investsim.game import catalog
from investsim.game.life_events import GAIN_EVENTS, LOSS_EVENTS
from investsim.game.scheduler import GAIN, LOSS, UNLOCK, _Pool, schedule_events
from investsim.game.window import GameWindow

WINDOW = GameWindow(2000, 2020)


class TestFixedUnlocks:
    def test_savings_and_fixed_deposits(self):
        schedule = schedule_events(WINDOW, {}, random.Random(0))
        assert schedule[0].category == catalog.SAVINGS
        assert schedule[0].message == "Savings Account ready"
        assert schedule[1].category == catalog.FIXED_DEPOSITS
        assert schedule[1].type == UNLOCK


class TestCategoryUnlocks:
    def test_month_zero_aligned(self, make_instrument):
        loaded = {catalog.GOLD: [make_instrument("Physical_Gold", catalog.GOLD, [1] * 20, 2005)]}
        schedule = schedule_events(WINDOW, loaded, random.Random(0))
        assert schedule[60].category == catalog.GOLD
        assert schedule[60].message == "Gold investment unlocked"

    def test_year_zero_taken_by_savings(self, make_instrument):
        loaded = {catalog.STOCKS: [make_instrument("INFY", catalog.STOCKS, [1] * 30, 1996)]}
        schedule = schedule_events(WINDOW, loaded, random.Random(0))
        assert schedule[12].category == catalog.STOCKS

    def test_category_uses_earliest_instrument(self, make_instrument):
        loaded = {catalog.STOCKS: [
            make_instrument("TCS", catalog.STOCKS, [1] * 10, 2008),
            make_instrument("INFY", catalog.STOCKS, [1] * 10, 2004),
        ]}
        schedule = schedule_events(WINDOW, loaded, random.Random(0))
        assert schedule[48].category == catalog.STOCKS

    def test_collision_moves_to_next_year(self, make_instrument):
        loaded = {
            catalog.GOLD: [make_instrument("Physical_Gold", catalog.GOLD, [1] * 10, 2003)],
            catalog.COMMODITIES: [make_instrument("SILVER", catalog.COMMODITIES, [1] * 10, 2003)],
        }
        schedule = schedule_events(WINDOW, loaded, random.Random(0))
        assert schedule[36].category == catalog.GOLD
        assert schedule[48].category == catalog.COMMODITIES

    def test_progressive_sub_unlocks(self, make_instrument):
        loaded = {catalog.CRYPTO: [
            make_instrument("BTC", catalog.CRYPTO, [1] * 10, 2010),
            make_instrument("ETH", catalog.CRYPTO, [1] * 8, 2012),
        ]}
        schedule = schedule_events(WINDOW, loaded, random.Random(0))
        assert schedule[120].subkey == "BTC"
        assert schedule[120].message == "Cryptocurrency trading unlocked (Bitcoin)"
        assert schedule[144].subkey == "ETH"
        assert schedule[144].message == "New cryptocurrency available (Ethereum)"
        assert schedule[144].category == catalog.CRYPTO

    def test_progressive_same_year_keeps_order(self, make_instrument):
        loaded = {catalog.REIT: [
            make_instrument("EMBASSY", catalog.REIT, [1] * 5, 2010),
            make_instrument("MINDSPACE", catalog.REIT, [1] * 5, 2010),
        ]}
        schedule = schedule_events(WINDOW, loaded, random.Random(0))
        assert schedule[120].subkey == "EMBASSY"
        assert schedule[132].subkey == "MINDSPACE"

    def test_after_window_end_dropped(self, make_instrument):
        loaded = {catalog.FOREX: [make_instrument("USDINR", catalog.FOREX, [1] * 3, 2022)]}
        schedule = schedule_events(WINDOW, loaded, random.Random(0))
        assert all(e.category != catalog.FOREX for e in schedule.values())

    def test_no_free_year_dropped(self, make_instrument):
        loaded = {
            catalog.GOLD: [make_instrument("Physical_Gold", catalog.GOLD, [1] * 3, 2019)],
            catalog.COMMODITIES: [make_instrument("SILVER", catalog.COMMODITIES, [1] * 3, 2019)],
        }
        schedule = schedule_events(WINDOW, loaded, random.Random(0))
        assert schedule[228].category == catalog.GOLD
        assert all(e.category != catalog.COMMODITIES for e in schedule.values())


class TestLifeEvents:
    def _schedule(self, seed, make_instrument):
        loaded = {
            catalog.STOCKS: [make_instrument("INFY", catalog.STOCKS, [1] * 30, 1996)],
            catalog.CRYPTO: [
                make_instrument("BTC", catalog.CRYPTO, [1] * 10, 2010),
                make_instrument("ETH", catalog.CRYPTO, [1] * 8, 2012),
            ],
        }
        return schedule_events(WINDOW, loaded, random.Random(seed))

    def test_one_event_per_year(self, make_instrument):
        for seed in range(30):
            schedule = self._schedule(seed, make_instrument)
            years = [m // 12 for m in schedule if m >= 12]
            assert len(years) == len(set(years))
            assert all(0 <= m < 240 for m in schedule)
            assert all(e.month == m for m, e in schedule.items())

    def test_life_event_shape(self, make_instrument):
        losses = {e.message: e.amount for e in LOSS_EVENTS}
        gains = {e.message: e.amount for e in GAIN_EVENTS}
        for seed in range(30):
            for month, event in self._schedule(seed, make_instrument).items():
                if event.type == LOSS:
                    assert losses[event.message] == event.amount < 0
                elif event.type == GAIN:
                    assert gains[event.message] == event.amount > 0
                else:
                    continue
                assert month % 12 == 0
                assert month >= 24

    def test_life_events_happen(self, make_instrument):
        kinds = set()
        for seed in range(30):
            kinds |= {e.type for e in self._schedule(seed, make_instrument).values()}
        assert {GAIN, LOSS, UNLOCK} <= kinds

    def test_unlocks_not_displaced(self, make_instrument):
        schedule = self._schedule(5, make_instrument)
        assert schedule[12].category == catalog.STOCKS
        assert schedule[120].subkey == "BTC"
        assert schedule[144].subkey == "ETH"

    def test_deterministic(self, make_instrument):
        assert dict(self._schedule(9, make_instrument)) == dict(self._schedule(9, make_instrument))

    def test_schedule_is_read_only(self, make_instrument):
        schedule = self._schedule(1, make_instrument)
        with pytest.raises(TypeError):
            schedule[239] = schedule[0]


class TestPool:
    def test_without_replacement_until_exhausted(self):
        pool = _Pool(GAIN_EVENTS, random.Random(2))
        first = [pool.draw() for _ in GAIN_EVENTS]
        assert sorted(e.message for e in first) == sorted(e.message for e in GAIN_EVENTS)
        assert pool.draw() in GAIN_EVENTS
