"""Pure price queries over a loaded instrument's annual series.

Prices are annual. Inside a year the price moves linearly from this year's
value toward next year's; outside the recorded range it is pinned to the
first or last value (no extrapolation).

Usage:
    from investsim.game.price_resolver import resolve_price

    price = resolve_price(instrument, window.start_year, elapsed_months=30)
"""

from __future__ import annotations

from investsim.game.asset_loader import LoadedInstrument


def resolve_price(instrument: LoadedInstrument, window_start_year: int,
                  elapsed_months: int) -> float:
    """Interpolated price of ``instrument`` at game month ``elapsed_months``."""
    prices = instrument.prices
    absolute_year = window_start_year + elapsed_months // 12
    month_in_year = elapsed_months % 12

    index = absolute_year - instrument.data_start_year
    if index < 0:
        return prices[0]
    index = min(index, len(prices) - 1)

    if index + 1 < len(prices):
        current, following = prices[index], prices[index + 1]
        return round(current + (following - current) * month_in_year / 12, 2)
    return prices[index]


def price_history(instrument: LoadedInstrument, window_start_year: int,
                  upto_month: int, from_month: int = 0) -> list[float]:
    """Prices for months ``from_month..upto_month`` inclusive (sparkline data)."""
    if upto_month < from_month:
        return []
    return [resolve_price(instrument, window_start_year, m)
            for m in range(max(0, from_month), upto_month + 1)]
