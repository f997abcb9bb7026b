from .catalog import InstrumentDescriptor, CATALOG, find_instrument
from .categories import CategorySpec, CATEGORY_SPECS, get_spec
from .coverage import filter_by_coverage, filter_by_overlap
from .selector import CategorySelection, select_categories
from .window import GameWindow, resolve_window, latest_introduction_year
from .asset_loader import LoadedInstrument, load_assets
from .scheduler import UnlockEvent, schedule_events
from .price_resolver import resolve_price, price_history
from .session import GameSession, SessionStartResult, SessionManager, start_session
from .portfolio import Portfolio, FixedDeposit
from .run_controller import RunController
