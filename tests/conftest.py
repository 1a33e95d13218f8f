"""Shared fixtures for the Betting Ledger test suite."""

from datetime import datetime

import pytest

from betting_ledger.config import Settings
from betting_ledger.events import EventRegistry
from betting_ledger.ledger import BetLedger
from betting_ledger.models import (
    CreateBetRequest,
    EventOdds,
    EventStatus,
    SportEvent,
    SportType,
    User,
)
from betting_ledger.persistence import StatePersistence
from betting_ledger.store import BettingStore
from betting_ledger.wallet import Wallet


# ── Settings ──────────────────────────────────────────────────────────

@pytest.fixture
def test_settings(tmp_path):
    """Settings with no delay, autosave off and a throwaway database path."""
    s = Settings()
    s.DB_PATH = str(tmp_path / "betting.db")
    s.STORE_KEY = "betting-store"
    s.INITIAL_BALANCE = 100.0
    s.LOAD_EVENTS_DELAY = 0.0
    s.DEMO_EVENT_COUNT = 8
    s.AUTOSAVE = False
    s.TRUST_CALLER_ODDS = False
    s.STRICT_EVENT_TRANSITIONS = False
    return s


# ── Sample Events ─────────────────────────────────────────────────────

@pytest.fixture
def football_event():
    return SportEvent(
        id="E1",
        home_team="Flamengo",
        away_team="Palmeiras",
        date=datetime(2026, 11, 1, 18, 30, 0, 123456),
        odds=EventOdds(home=2.5, draw=3.2, away=2.8),
        sport=SportType.FOOTBALL,
        status=EventStatus.UPCOMING,
    )


@pytest.fixture
def tennis_event():
    """No draw odds."""
    return SportEvent(
        id="E2",
        home_team="Carlos Alcaraz",
        away_team="Jannik Sinner",
        date=datetime(2026, 11, 2, 14, 0, 0),
        odds=EventOdds(home=1.8, away=2.05),
        sport=SportType.TENNIS,
        status=EventStatus.LIVE,
    )


@pytest.fixture
def events(football_event, tennis_event):
    return [football_event, tennis_event]


# ── Bet requests ──────────────────────────────────────────────────────

@pytest.fixture
def home_bet_request():
    """50 on E1 home at 2.5 (potential win 125)."""
    return CreateBetRequest(event_id="E1", amount=50, odds=2.5, prediction="home")


# ── Ledger components ─────────────────────────────────────────────────

@pytest.fixture
def registry(events):
    return EventRegistry(events)


@pytest.fixture
def wallet():
    return Wallet(User(balance=100.0))


@pytest.fixture
def ledger(registry, wallet):
    return BetLedger(registry, wallet)


# ── Stores ────────────────────────────────────────────────────────────

@pytest.fixture
def persistence(test_settings):
    return StatePersistence(
        key=test_settings.STORE_KEY,
        db_path=test_settings.DB_PATH,
        initial_balance=test_settings.INITIAL_BALANCE,
    )


@pytest.fixture
def store(test_settings, events):
    """Memory-only store seeded with the sample events."""
    s = BettingStore(config=test_settings)
    s.set_events(events)
    return s


@pytest.fixture
def persistent_store(test_settings, persistence, events):
    """Store with autosave into a temporary database."""
    s = BettingStore(persistence=persistence, config=test_settings, autosave=True)
    s.set_events(events)
    return s
