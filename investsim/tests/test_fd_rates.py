"""Tests for the FD rate table."""

import pytest

from investsim.data_source import InMemoryDataSource
from investsim.parsers.fd_rates import FALLBACK_FD_RATES, load_fd_rates, parse_fd_rates_csv

CSV = """year,1Y,2Y,3Y,5Y
2000,9.0,9.5,10.0,10.0
2002,8.0,8.5,9.0,9.0
"""


class TestParse:
    def test_exact_year(self):
        rates = parse_fd_rates_csv(CSV)
        assert rates.rate("3Y", 2000) == 10.0
        assert rates.rate("5Y", 2002) == 9.0

    def test_missing_year_forward_filled(self):
        assert parse_fd_rates_csv(CSV).rate("1Y", 2001) == 9.0

    def test_after_last_year_carries(self):
        assert parse_fd_rates_csv(CSV).rate("2Y", 2020) == 8.5

    def test_before_first_year_default(self):
        assert parse_fd_rates_csv(CSV).rate("1Y", 1995) == 6.5

    def test_named_headers(self):
        text = "Year,FD 5 Years,FD 1 Year\n2010,7.5,6.0\n"
        rates = parse_fd_rates_csv(text)
        assert rates.rate("1Y", 2010) == 6.0
        assert rates.rate("5Y", 2010) == 7.5
        # No 2Y column at all: constant table
        assert rates.rate("2Y", 2010) == FALLBACK_FD_RATES["2Y"]

    def test_positional_headers(self):
        rates = parse_fd_rates_csv("yr,a,b,c,d\n2010,1,2,3,4\n")
        assert [rates.rate(t, 2010) for t in ("1Y", "2Y", "3Y", "5Y")] == [1, 2, 3, 4]

    def test_unknown_tenor(self):
        with pytest.raises(ValueError):
            parse_fd_rates_csv(CSV).rate("4Y", 2000)


class TestLoad:
    def test_unreadable_source_uses_fallback(self):
        rates = load_fd_rates(InMemoryDataSource())
        assert rates.is_fallback
        assert rates.rate("2Y", 2000) == 7.0

    def test_loads_from_source(self, data_source):
        rates = load_fd_rates(data_source)
        assert not rates.is_fallback
        assert rates.rate("1Y", 2005) == 8.0
