from .timeline_index import TimelineEntry, TimelineIndex, parse_timeline, parse_timeline_csv, load_timeline
from .price_series import PriceSeries, parse_price_csv, densify, load_price_series
from .fd_rates import FDRates, TENORS, TENOR_MONTHS, FALLBACK_FD_RATES, parse_fd_rates_csv, load_fd_rates
