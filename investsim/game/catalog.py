"""
Static instrument catalog.

Every tradable instrument the game knows about, grouped by the timeline
category (= data folder) it lives in. The catalog is never mutated; whether
an instrument actually shows up in a run depends on the asset timeline.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

# ---------------------------------------------------------------------------
# Category keys
# ---------------------------------------------------------------------------

SAVINGS = "savings"
FIXED_DEPOSITS = "fixed_deposits"
STOCKS = "stocks"
MUTUAL_FUNDS = "mutual_funds"
INDEX_FUNDS = "index_funds"
GOLD = "gold"
COMMODITIES = "commodities"
CRYPTO = "crypto"
REIT = "reit"
FOREX = "forex"

# Timeline category names as they appear in Asset_Timeline.csv (also the folder names)
TIMELINE_CATEGORY: dict[str, str] = {
    STOCKS: "Indian_Stocks",
    MUTUAL_FUNDS: "Mutual_Funds",
    INDEX_FUNDS: "Index_Funds",
    GOLD: "Gold_Investments",
    COMMODITIES: "Commodities",
    CRYPTO: "Crypto_Assets",
    REIT: "REIT",
    FOREX: "Forex",
}


@dataclass(frozen=True)
class InstrumentDescriptor:
    """A tradable instrument as the catalog defines it."""

    id: str
    display_name: str
    category: str  # category key, e.g. "stocks"
    csv_file: str
    sector: Optional[str] = None


def _make(category: str, rows: list[tuple]) -> tuple[InstrumentDescriptor, ...]:
    out = []
    for row in rows:
        instrument_id, name = row[0], row[1]
        sector = row[2] if len(row) > 2 else None
        out.append(InstrumentDescriptor(
            id=instrument_id,
            display_name=name,
            category=category,
            csv_file=f"{instrument_id}.csv",
            sector=sector,
        ))
    return tuple(out)


STOCK_INSTRUMENTS = _make(STOCKS, [
    # Large caps
    ("TATAMOTORS", "Tata Motors", "Auto"),
    ("INFY", "Infosys", "IT"),
    ("WIPRO", "Wipro", "IT"),
    ("HDFCBANK", "HDFC Bank", "Banking"),
    ("SBIN", "State Bank of India", "Banking"),
    ("RELIANCE", "Reliance Industries", "Energy"),
    ("ONGC", "ONGC", "Energy"),
    ("TCS", "Tata Consultancy Services", "IT"),
    ("ICICIBANK", "ICICI Bank", "Banking"),
    ("BAJFINANCE", "Bajaj Finance", "Finance"),
    ("MARUTI", "Maruti Suzuki", "Auto"),
    ("AXISBANK", "Axis Bank", "Banking"),
    ("KOTAKBANK", "Kotak Mahindra Bank", "Banking"),
    ("HINDUNILVR", "Hindustan Unilever", "FMCG"),
    ("ITC", "ITC Limited", "FMCG"),
    ("BHARTIARTL", "Bharti Airtel", "Telecom"),
    ("TITAN", "Titan Company", "Consumer"),
    ("ASIANPAINT", "Asian Paints", "Consumer"),
    ("LT", "Larsen & Toubro", "Infrastructure"),
    ("SUNPHARMA", "Sun Pharma", "Pharma"),
    ("M&M", "Mahindra & Mahindra", "Auto"),
    ("TATACONSUM", "Tata Consumer Products", "FMCG"),
    ("TATASTEEL", "Tata Steel", "Metals"),
    ("HINDALCO", "Hindalco Industries", "Metals"),
    ("GAIL", "GAIL India", "Energy"),
    ("HCLTECH", "HCL Technologies", "IT"),
    ("INDUSINDBK", "IndusInd Bank", "Banking"),
    ("BAJAJFINSV", "Bajaj Finserv", "Finance"),
    ("BAJAJ-AUTO", "Bajaj Auto", "Auto"),
    ("HEROMOTOCO", "Hero MotoCorp", "Auto"),
    ("NESTLEIND", "Nestle India", "FMCG"),
    ("APOLLOHOSP", "Apollo Hospitals", "Healthcare"),
    ("ULTRACEMCO", "UltraTech Cement", "Cement"),
    ("GRASIM", "Grasim Industries", "Diversified"),
    ("ADANIENT", "Adani Enterprises", "Diversified"),
    ("BEL", "Bharat Electronics", "Defense"),
    ("TRENT", "Trent Limited", "Retail"),
    ("JSWSTEEL", "JSW Steel", "Metals"),
    ("NTPC", "NTPC Limited", "Power"),
    ("TECHM", "Tech Mahindra", "IT"),
    ("POWERGRID", "Power Grid Corporation", "Power"),
    ("ADANIPORTS", "Adani Ports", "Infrastructure"),
    ("INDIGO", "InterGlobe Aviation (IndiGo)", "Aviation"),
    ("SBILIFE", "SBI Life Insurance", "Insurance"),
    # Mid/small caps whose data files use their full names
    ("Ashok Leyland", "Ashok Leyland", "Auto"),
    ("Zee Entertainment", "Zee Entertainment", "Media"),
    ("Yes Bank", "Yes Bank", "Banking"),
    ("Suzlon Energy", "Suzlon Energy", "Power"),
    ("Vodafone Idea", "Vodafone Idea", "Telecom"),
    ("Adani Power", "Adani Power", "Power"),
    ("Hindustan Copper", "Hindustan Copper", "Metals"),
    ("Manappuram Finance", "Manappuram Finance", "Finance"),
    ("Railtel Corporation", "Railtel Corporation", "Telecom"),
])

INDEX_FUND_INSTRUMENTS = _make(INDEX_FUNDS, [
    ("NIFTYBEES", "Nifty BeES"),
    ("UTINIFTETF", "UTI Nifty ETF"),
    ("HDFCNIFETF", "HDFC Nifty ETF"),
    ("SETFNIF50", "SETF Nifty 50"),
    ("ICICIB22", "ICICI Nifty Bank"),
])

MUTUAL_FUND_INSTRUMENTS = _make(MUTUAL_FUNDS, [
    ("SBI_Bluechip", "SBI Bluechip Fund"),
    ("ICICI_Bluechip", "ICICI Bluechip Fund"),
    ("Nippon_SmallCap", "Nippon SmallCap Fund"),
    ("Axis_Midcap", "Axis Midcap Fund"),
    ("Kotak_Emerging", "Kotak Emerging Equity"),
    ("PGIM_Midcap", "PGIM Midcap Fund"),
    ("HDFC_SmallCap", "HDFC SmallCap Fund"),
])

COMMODITY_INSTRUMENTS = _make(COMMODITIES, [
    ("SILVER", "Silver"),
    ("CRUDEOIL_WTI", "Crude Oil WTI"),
    ("COPPER", "Copper"),
    ("NATURALGAS", "Natural Gas"),
    ("WHEAT", "Wheat"),
    ("COTTON", "Cotton"),
    ("BRENT", "Brent Crude"),
    ("ALUMINIUM", "Aluminium"),
])

# Order matters for the progressive categories: first one unlocks the category
CRYPTO_INSTRUMENTS = _make(CRYPTO, [
    ("BTC", "Bitcoin"),
    ("ETH", "Ethereum"),
])

REIT_INSTRUMENTS = _make(REIT, [
    ("EMBASSY", "Embassy REIT"),
    ("MINDSPACE", "Mindspace REIT"),
])

GOLD_INSTRUMENTS = _make(GOLD, [
    ("Physical_Gold", "Physical Gold"),
    ("Digital_Gold", "Digital Gold"),
])

FOREX_INSTRUMENTS = _make(FOREX, [
    ("USDINR", "USD/INR"),
    ("EURINR", "EUR/INR"),
    ("GBPINR", "GBP/INR"),
])

CATALOG: dict[str, tuple[InstrumentDescriptor, ...]] = {
    STOCKS: STOCK_INSTRUMENTS,
    MUTUAL_FUNDS: MUTUAL_FUND_INSTRUMENTS,
    INDEX_FUNDS: INDEX_FUND_INSTRUMENTS,
    GOLD: GOLD_INSTRUMENTS,
    COMMODITIES: COMMODITY_INSTRUMENTS,
    CRYPTO: CRYPTO_INSTRUMENTS,
    REIT: REIT_INSTRUMENTS,
    FOREX: FOREX_INSTRUMENTS,
}


def find_instrument(category: str, instrument_id: str) -> InstrumentDescriptor | None:
    for inst in CATALOG.get(category, ()):
        if inst.id == instrument_id:
            return inst
    return None
