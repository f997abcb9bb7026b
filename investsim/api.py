"""FastAPI adapter for the simulation core.

The UI and multiplayer layers drive runs over HTTP:

    POST /sessions                               start a run (422 if nothing to trade)
    GET  /sessions/{id}                          window, categories, instruments, schedule
    GET  /sessions/{id}/prices/{instrument_id}   price at ?month= (defaults to current)
    POST /sessions/{id}/advance                  one month tick
    POST /sessions/{id}/resume                   clear the pause after an event
    POST /sessions/{id}/settle                   pay a pending expense
    DELETE /sessions/{id}                     drop a finished or abandoned run

    POST /sessions/{id}/buy                      {instrument_id, amount}
    POST /sessions/{id}/sell                     {instrument_id, units}
    POST /sessions/{id}/savings/deposit          {amount}
    POST /sessions/{id}/savings/withdraw         {amount}
    POST /sessions/{id}/fixed-deposits           {amount, tenor}
    POST /sessions/{id}/fixed-deposits/{index}/withdraw

Trades answer 409 when the run or the wallet can't take them, 404 for an
unknown instrument and 422 for a malformed amount. Sessions live in process
memory only; past config.MAX_SESSIONS the oldest run is dropped.
"""

from __future__ import annotations

import logging
import random
from typing import Any, Callable, Optional

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from investsim import __version__, config
from investsim.data_source import DataSource, default_data_source
from investsim.errors import InsufficientFundsError, UnknownInstrumentError
from investsim.game.run_controller import RunController, RunStateError
from investsim.game.scheduler import UnlockEvent
from investsim.game.session import start_session

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="InvestSim",
    description="Historical investing simulation core",
    version=__version__,
)

_runs: dict[str, RunController] = {}


def get_data_source() -> DataSource:
    return default_data_source()


# ─── Models ──────────────────────────────────────────────────────────────────


class StartSessionRequest(BaseModel):
    seed: Optional[int] = None
    pause_on_events: bool = True


class EventModel(BaseModel):
    month: int
    type: str
    message: str
    category: Optional[str] = None
    subkey: Optional[str] = None
    amount: Optional[float] = None


class InstrumentModel(BaseModel):
    id: str
    display_name: str
    category: str
    sector: Optional[str] = None
    data_start_year: int
    data_end_year: int


class FixedDepositModel(BaseModel):
    amount: float
    tenor: str
    roi: float
    start_month: int
    maturity_month: int
    current_value: float


class RunStateModel(BaseModel):
    month: int
    year: int
    paused: bool
    finished: bool
    cash: float
    savings: float
    net_worth: float
    unlocked: list[str]
    pending_expense: Optional[EventModel] = None
    fixed_deposits: list[FixedDepositModel] = []
    holdings: dict[str, float] = {}


class SessionModel(BaseModel):
    session_id: str
    start_year: int
    end_year: int
    categories: list[str]
    instruments: list[InstrumentModel]
    schedule: list[EventModel]
    state: RunStateModel


class TradeRequest(BaseModel):
    instrument_id: str
    amount: float


class SellRequest(BaseModel):
    instrument_id: str
    units: float


class AmountRequest(BaseModel):
    amount: float


class FixedDepositRequest(BaseModel):
    amount: float
    tenor: str


class TickModel(BaseModel):
    event: Optional[EventModel] = None
    state: RunStateModel


# ─── Helpers ─────────────────────────────────────────────────────────────────


def _event(event: Optional[UnlockEvent]) -> Optional[EventModel]:
    if event is None:
        return None
    return EventModel(month=event.month, type=event.type, message=event.message,
                      category=event.category, subkey=event.subkey, amount=event.amount)


def _state(run: RunController) -> RunStateModel:
    return RunStateModel(
        month=run.month,
        year=run.absolute_year,
        paused=run.paused,
        finished=run.finished,
        cash=run.portfolio.cash,
        savings=run.portfolio.savings,
        net_worth=run.net_worth(),
        unlocked=sorted(run.unlocked | run.unlocked_instruments),
        pending_expense=_event(run.pending_expense),
        fixed_deposits=[
            FixedDepositModel(amount=fd.amount, tenor=fd.tenor, roi=fd.roi,
                              start_month=fd.start_month, maturity_month=fd.maturity_month,
                              current_value=fd.current_value)
            for fd in run.portfolio.fixed_deposits
        ],
        holdings={k: h.units for k, h in run.portfolio.holdings.items()},
    )


def _session_model(run: RunController) -> SessionModel:
    session = run.session
    return SessionModel(
        session_id=session.session_id,
        start_year=session.window.start_year,
        end_year=session.window.end_year,
        categories=[s.key for s in session.selection],
        instruments=[
            InstrumentModel(id=i.id, display_name=i.display_name, category=i.category,
                            sector=i.sector, data_start_year=i.data_start_year,
                            data_end_year=i.data_end_year)
            for i in session.instruments.values()
        ],
        schedule=[_event(e) for e in session.schedule.values()],
        state=_state(run),
    )


def _not_found(session_id: str) -> JSONResponse:
    return JSONResponse({"error": f"Session not found: {session_id}"}, status_code=404)


def _act(session_id: str, action: Callable[[RunController], Any]) -> Any:
    run = _runs.get(session_id)
    if run is None:
        return _not_found(session_id)
    try:
        action(run)
    except UnknownInstrumentError as e:
        return JSONResponse({"error": f"Unknown instrument: {e}"}, status_code=404)
    except (RunStateError, InsufficientFundsError) as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    except ValueError as e:
        return JSONResponse({"error": str(e)}, status_code=422)
    return _state(run)


# ─── Endpoints ───────────────────────────────────────────────────────────────


@app.get("/health")
def health() -> dict[str, Any]:
    return {
        "status": "ok",
        "version": __version__,
        "data": config.DATA_URL or str(config.DATA_DIR),
        "sessions": len(_runs),
    }


@app.post("/sessions")
def create_session(req: Optional[StartSessionRequest] = None) -> Any:
    req = req or StartSessionRequest()
    rng = random.Random(req.seed) if req.seed is not None else None

    result = start_session(get_data_source(), rng)
    if not result.ok:
        return JSONResponse({"error": result.error}, status_code=422)

    run = RunController(result.session, pause_on_events=req.pause_on_events)
    run.start()
    while _runs and len(_runs) >= config.MAX_SESSIONS:
        evicted = next(iter(_runs))
        del _runs[evicted]
        logger.info("[API] Session %s evicted (limit %d)", evicted, config.MAX_SESSIONS)
    _runs[result.session.session_id] = run
    logger.info("[API] Session %s started", result.session.session_id)
    return _session_model(run)


@app.get("/sessions/{session_id}")
def get_session(session_id: str) -> Any:
    run = _runs.get(session_id)
    if run is None:
        return _not_found(session_id)
    return _session_model(run)


@app.get("/sessions/{session_id}/prices/{instrument_id}")
def get_price(session_id: str, instrument_id: str, month: Optional[int] = None) -> Any:
    run = _runs.get(session_id)
    if run is None:
        return _not_found(session_id)
    if run.session.instrument(instrument_id) is None:
        return JSONResponse({"error": f"Unknown instrument: {instrument_id}"}, status_code=404)

    m = run.month if month is None else month
    return {
        "instrument_id": instrument_id,
        "month": m,
        "price": run.session.resolve_price(instrument_id, m),
    }


@app.post("/sessions/{session_id}/advance")
def advance(session_id: str) -> Any:
    run = _runs.get(session_id)
    if run is None:
        return _not_found(session_id)
    try:
        event = run.advance_month()
    except RunStateError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    return TickModel(event=_event(event), state=_state(run))


@app.post("/sessions/{session_id}/resume")
def resume(session_id: str) -> Any:
    run = _runs.get(session_id)
    if run is None:
        return _not_found(session_id)
    try:
        run.resume()
    except RunStateError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    return _state(run)


@app.post("/sessions/{session_id}/settle")
def settle(session_id: str) -> Any:
    run = _runs.get(session_id)
    if run is None:
        return _not_found(session_id)
    try:
        run.settle_pending_expense()
    except InsufficientFundsError as e:
        return JSONResponse({"error": str(e)}, status_code=409)
    return _state(run)


@app.delete("/sessions/{session_id}")
def delete_session(session_id: str) -> Any:
    if _runs.pop(session_id, None) is None:
        return _not_found(session_id)
    logger.info("[API] Session %s deleted", session_id)
    return {"deleted": session_id}


# ─── Trades ──────────────────────────────────────────────────────────────────


@app.post("/sessions/{session_id}/buy")
def buy(session_id: str, req: TradeRequest) -> Any:
    return _act(session_id, lambda run: run.buy(req.instrument_id, req.amount))


@app.post("/sessions/{session_id}/sell")
def sell(session_id: str, req: SellRequest) -> Any:
    return _act(session_id, lambda run: run.sell(req.instrument_id, req.units))


@app.post("/sessions/{session_id}/savings/deposit")
def deposit_savings(session_id: str, req: AmountRequest) -> Any:
    return _act(session_id, lambda run: run.deposit_savings(req.amount))


@app.post("/sessions/{session_id}/savings/withdraw")
def withdraw_savings(session_id: str, req: AmountRequest) -> Any:
    return _act(session_id, lambda run: run.withdraw_savings(req.amount))


@app.post("/sessions/{session_id}/fixed-deposits")
def open_fixed_deposit(session_id: str, req: FixedDepositRequest) -> Any:
    return _act(session_id, lambda run: run.open_fixed_deposit(req.amount, req.tenor))


@app.post("/sessions/{session_id}/fixed-deposits/{index}/withdraw")
def withdraw_fixed_deposit(session_id: str, index: int) -> Any:
    return _act(session_id, lambda run: run.withdraw_fixed_deposit(index))
