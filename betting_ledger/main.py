"""
FastAPI application – Betting Ledger.

Thin action/query surface over one BettingStore. Single user, no auth.
"""

import logging
from contextlib import asynccontextmanager
from datetime import UTC, datetime

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from betting_ledger.config import settings
from betting_ledger.errors import (
    BettingError,
    EventNotFound,
    InsufficientBalance,
    InvalidAmount,
    InvalidPrediction,
    InvalidStatusTransition,
    OddsMismatch,
)
from betting_ledger.models import (
    AmountRequest,
    BetStatus,
    DepositRequest,
    EventStatusRequest,
    PlaceBetRequest,
    ResolveBetRequest,
    ResolveOutcome,
    StatusUpdate,
)
from betting_ledger.persistence import StatePersistence
from betting_ledger.stats import format_win_rate
from betting_ledger.store import BettingStore

logger = logging.getLogger(__name__)

ERROR_STATUS: dict[type[BettingError], int] = {
    InvalidAmount: 400,
    InsufficientBalance: 400,
    InvalidPrediction: 400,
    OddsMismatch: 400,
    EventNotFound: 404,
    InvalidStatusTransition: 409,
}


def build_store() -> BettingStore:
    """Create the process store backed by the configured database."""
    persistence = StatePersistence(
        key=settings.STORE_KEY,
        db_path=settings.DB_PATH,
        initial_balance=settings.INITIAL_BALANCE,
    )
    return BettingStore(persistence=persistence)


def _dump(model) -> dict:
    return model.model_dump(mode="json", by_alias=True)


def _error(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": code, "detail": message})


# ── Lifespan ──────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    # Startup
    logging.basicConfig(
        level=settings.LOG_LEVEL,
        format="%(asctime)s  %(levelname)-8s  %(name)s  %(message)s",
    )
    store = build_store()
    state = store.load_user_data()
    logger.info(
        "Store loaded: %d events, %d bets, balance %.2f",
        len(state.events), len(state.bets), state.user.balance,
    )
    app.state.store = store

    yield

    # Shutdown
    store.save_user_data()


# ── App ───────────────────────────────────────────────────────────────

app = FastAPI(
    title="Betting Ledger",
    description="Demo sports-betting ledger: events, bets, wallet and stats",
    version="1.0.0",
    lifespan=lifespan,
)


def get_store(request: Request) -> BettingStore:
    return request.app.state.store


@app.exception_handler(BettingError)
async def betting_error_handler(request: Request, exc: BettingError):
    return _error(ERROR_STATUS.get(type(exc), 400), exc.code, exc.message)


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    # Rejected input is left out; it may be NaN, which JSON cannot carry
    errors = [{"loc": list(e["loc"]), "msg": e["msg"], "type": e["type"]} for e in exc.errors()]
    return JSONResponse(status_code=422, content={"error": "validation_error", "detail": errors})


# ── API routes ────────────────────────────────────────────────────────

@app.get("/api/health")
async def api_health():
    return {"ok": True, "service": "betting-ledger", "timestamp": datetime.now(UTC).isoformat()}


@app.get("/api/state")
async def api_state(request: Request):
    """Full persisted state plus the transient loading/error flags."""
    store = get_store(request)
    return {
        **_dump(store.snapshot()),
        "loading": _dump(store.loading),
        "error": _dump(store.error),
    }


@app.get("/api/status")
async def api_status(request: Request):
    store = get_store(request)
    return {
        "loading": _dump(store.loading),
        "error": _dump(store.error),
        "is_loading": store.status.is_loading,
        "has_errors": store.status.has_errors,
    }


@app.post("/api/status/clear-errors")
async def api_clear_errors(request: Request):
    return {"error": _dump(get_store(request).clear_errors())}


# ── Events ────────────────────────────────────────────────────────────

@app.get("/api/events")
async def api_events(request: Request):
    events = get_store(request).events
    return {"events": [_dump(e) for e in events], "count": len(events)}


@app.post("/api/events/load")
async def api_load_events(request: Request):
    """Replace the catalog with generated demo events."""
    store = get_store(request)
    events = await store.load_events()
    return {"events": [_dump(e) for e in events], "count": len(events), "error": store.error.events}


@app.post("/api/events/{event_id}/status")
async def api_update_event_status(event_id: str, body: EventStatusRequest, request: Request):
    outcome = get_store(request).update_event_status(event_id, body.status)
    if outcome == StatusUpdate.NOT_FOUND:
        return _error(404, "event_not_found", f"Event not found: {event_id}")
    return {"event_id": event_id, "status": body.status.value, "outcome": outcome.value}


# ── Bets ──────────────────────────────────────────────────────────────

@app.get("/api/bets")
async def api_get_bets(request: Request, status: BetStatus | None = Query(None)):
    store = get_store(request)
    bets = store.get_bets_by_status(status)
    return {"bets": [_dump(b) for b in bets], "count": len(bets)}


@app.post("/api/bets", status_code=201)
async def api_place_bet(body: PlaceBetRequest, request: Request):
    store = get_store(request)
    bet = store.place_bet(body)
    return {"bet": _dump(bet), "user": _dump(store.user)}


@app.post("/api/bets/{bet_id}/resolve")
async def api_resolve_bet(bet_id: str, body: ResolveBetRequest, request: Request):
    result = get_store(request).resolve_bet(bet_id, body.result)
    if result.outcome == ResolveOutcome.NOT_FOUND:
        return _error(404, "bet_not_found", f"Bet not found: {bet_id}")
    if result.outcome == ResolveOutcome.ALREADY_SETTLED:
        return _error(409, "already_settled", f"Bet {bet_id} is already {result.bet.status.value}")
    return _dump(result)


@app.get("/api/stats")
async def api_stats(request: Request):
    stats = get_store(request).get_betting_stats()
    return {**_dump(stats), "winRateDisplay": format_win_rate(stats)}


# ── Balance ───────────────────────────────────────────────────────────

@app.get("/api/balance")
async def api_balance(request: Request):
    return _dump(get_store(request).user)


@app.post("/api/balance/deposit")
async def api_deposit(body: DepositRequest, request: Request):
    return _dump(get_store(request).deposit_balance(body.amount))


@app.post("/api/balance/withdraw")
async def api_withdraw(body: AmountRequest, request: Request):
    store = get_store(request)
    if not store.withdraw_balance(body.amount):
        return _error(400, "withdraw_rejected", f"Cannot withdraw {body.amount} from balance {store.user.balance:.2f}")
    return _dump(store.user)


# ── Persistence ───────────────────────────────────────────────────────

@app.post("/api/save")
async def api_save(request: Request):
    return {"saved": get_store(request).save_user_data()}


@app.post("/api/reset")
async def api_reset(request: Request):
    return _dump(get_store(request).reset_store())
