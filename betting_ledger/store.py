"""
Betting store — the single coordinating object over the event registry,
wallet, bet ledger, status tracker and persistence.

Every mutation runs under one lock, fully commits in memory, and only then
is persisted (when autosave is on) and announced to subscribers. A crash
between the in-memory commit and the save loses that last transition.
"""

import asyncio
import logging
import sqlite3
import threading
from collections.abc import Callable

from betting_ledger.config import Settings, settings as default_settings
from betting_ledger.demo_data import generate_all_events
from betting_ledger.events import EventRegistry
from betting_ledger.ledger import BetLedger
from betting_ledger.models import (
    Bet,
    BetResult,
    BetStatus,
    BettingStats,
    CreateBetRequest,
    ErrorState,
    EventStatus,
    LoadingState,
    PersistedState,
    ResolveResult,
    SportEvent,
    StatusUpdate,
    User,
)
from betting_ledger.persistence import StatePersistence, initial_state
from betting_ledger.stats import compute_betting_stats
from betting_ledger.status import StatusTracker
from betting_ledger.wallet import Wallet

logger = logging.getLogger(__name__)

Listener = Callable[[str, PersistedState], None]
EventGenerator = Callable[[int], list[SportEvent]]


class BettingStore:
    """
    Explicit, constructible store. Create one per process (or per test).

    Args:
        persistence: where state is saved; None keeps the store memory-only.
        config: settings object; defaults to the module-level settings.
        autosave: persist after each committed mutation. Defaults to
            config.AUTOSAVE. Ignored without persistence.
        state: starting state; defaults to the initial state.
    """

    def __init__(
        self,
        persistence: StatePersistence | None = None,
        config: Settings | None = None,
        autosave: bool | None = None,
        state: PersistedState | None = None,
    ):
        self.config = config or default_settings
        self.persistence = persistence
        self.autosave = self.config.AUTOSAVE if autosave is None else autosave
        self.status = StatusTracker()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        self.registry = EventRegistry(strict_transitions=self.config.STRICT_EVENT_TRANSITIONS)
        self.wallet = Wallet(initial_state(self.config.INITIAL_BALANCE).user)
        self.ledger = BetLedger(
            self.registry,
            self.wallet,
            trust_caller_odds=self.config.TRUST_CALLER_ODDS,
        )
        self._apply(state or initial_state(self.config.INITIAL_BALANCE))

    # ------------------------------------------------------------------
    # State access
    # ------------------------------------------------------------------

    @property
    def events(self) -> list[SportEvent]:
        return self.registry.all()

    @property
    def bets(self) -> list[Bet]:
        return self.ledger.all()

    @property
    def user(self) -> User:
        return self.wallet.snapshot()

    @property
    def loading(self) -> LoadingState:
        return self.status.loading.model_copy()

    @property
    def error(self) -> ErrorState:
        return self.status.error.model_copy()

    def snapshot(self) -> PersistedState:
        """Deep copy of everything that is persisted."""
        with self._lock:
            return PersistedState(
                events=self.registry.all(),
                bets=self.ledger.all(),
                user=self.wallet.snapshot(),
            )

    def _apply(self, state: PersistedState):
        self.registry.set_events(state.events)
        self.ledger.replace_all(state.bets)
        self.wallet.replace(state.user)

    # ------------------------------------------------------------------
    # Change notification
    # ------------------------------------------------------------------

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call listener(action, snapshot) after every committed mutation. Returns an unsubscribe function."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, action: str):
        if self.autosave and self.persistence is not None:
            self.save_user_data()
        self._notify(action)

    def _notify(self, action: str):
        if not self._listeners:
            return
        snap = self.snapshot()
        for listener in list(self._listeners):
            try:
                listener(action, snap)
            except Exception:
                logger.exception("Store listener failed on '%s'", action)

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------

    async def load_events(self, generator: EventGenerator | None = None) -> list[SportEvent]:
        """
        Replace the catalog with freshly generated demo events.

        Failures are recorded in error.events and logged, not raised.
        """
        generator = generator or generate_all_events
        try:
            with self.status.track("events"):
                await asyncio.sleep(self.config.LOAD_EVENTS_DELAY)
                events = generator(self.config.DEMO_EVENT_COUNT)
                self.set_events(events)
        except Exception as e:
            logger.error("Error loading events: %s", e)
            self.status.set_error("events", f"Error loading sporting events: {e}")
        return self.events

    def set_events(self, events: list[SportEvent]) -> list[SportEvent]:
        with self._lock:
            result = self.registry.set_events(events)
            self._commit("set_events")
        return result

    def update_event_status(self, event_id: str, status: EventStatus) -> StatusUpdate:
        with self._lock:
            outcome = self.registry.update_event_status(event_id, status)
            if outcome == StatusUpdate.UPDATED:
                self._commit("update_event_status")
        return outcome

    # ------------------------------------------------------------------
    # Bets
    # ------------------------------------------------------------------

    def place_bet(self, request: CreateBetRequest | dict) -> Bet:
        """
        Place a bet. Precondition failures are recorded in error.bets and re-raised.
        """
        with self._lock, self.status.track("bets"):
            if not isinstance(request, CreateBetRequest):
                request = CreateBetRequest.model_validate(request)
            bet = self.ledger.place_bet(request)
            self._commit("place_bet")
        return bet

    def resolve_bet(self, bet_id: str, result: BetResult) -> ResolveResult:
        with self._lock:
            outcome = self.ledger.resolve_bet(bet_id, result)
            if outcome.changed:
                self._commit("resolve_bet")
        return outcome

    def get_bets_by_status(self, status: BetStatus | None = None) -> list[Bet]:
        return self.ledger.get_bets_by_status(status)

    def get_betting_stats(self) -> BettingStats:
        return compute_betting_stats(self.ledger.all())

    # ------------------------------------------------------------------
    # Balance
    # ------------------------------------------------------------------

    def update_balance(self, delta: float) -> User:
        with self._lock:
            user = self.wallet.update_balance(delta)
            self._commit("update_balance")
        return user

    def deposit_balance(self, amount: float) -> User:
        """Deposit funds. InvalidAmount is recorded in error.balance and re-raised."""
        with self._lock, self.status.track("balance"):
            user = self.wallet.deposit(amount)
            logger.info("Deposited %.2f, balance now %.2f", amount, user.balance)
            self._commit("deposit_balance")
        return user

    def withdraw_balance(self, amount: float) -> bool:
        with self._lock:
            ok = self.wallet.withdraw(amount)
            if ok:
                logger.info("Withdrew %.2f, balance now %.2f", amount, self.wallet.balance)
                self._commit("withdraw_balance")
        return ok

    def can_afford_bet(self, amount: float) -> bool:
        return self.wallet.can_afford(amount)

    # ------------------------------------------------------------------
    # Persistence
    # ------------------------------------------------------------------

    def load_user_data(self) -> PersistedState:
        """Replace in-memory state with the saved document (or the initial state)."""
        with self._lock:
            if self.persistence is None:
                state = initial_state(self.config.INITIAL_BALANCE)
            else:
                try:
                    state = self.persistence.load()
                except sqlite3.Error as e:
                    logger.error("Error reading saved store, using initial state: %s", e)
                    state = initial_state(self.config.INITIAL_BALANCE)
            self._apply(state)
            self._notify("load_user_data")
            return self.snapshot()

    def save_user_data(self) -> bool:
        """Write events, bets and user to storage. Returns False if the write failed."""
        if self.persistence is None:
            return False
        with self._lock:
            try:
                self.persistence.save(self.registry.all(), self.ledger.all(), self.wallet.snapshot())
            except (sqlite3.Error, OSError) as e:
                logger.error("Error saving store: %s", e)
                return False
        return True

    def reset_store(self) -> PersistedState:
        """Back to the initial state, in memory and in storage."""
        with self._lock:
            self._apply(initial_state(self.config.INITIAL_BALANCE))
            self.status.reset()
            if self.persistence is not None:
                try:
                    self.persistence.clear()
                except sqlite3.Error as e:
                    logger.error("Error clearing saved store: %s", e)
            self._notify("reset_store")
            return self.snapshot()

    # ------------------------------------------------------------------
    # Loading / error flags
    # ------------------------------------------------------------------

    def set_loading(self, domain: str, value: bool) -> LoadingState:
        return self.status.set_loading(domain, value)

    def set_error(self, domain: str, message: str | None) -> ErrorState:
        return self.status.set_error(domain, message)

    def clear_errors(self) -> ErrorState:
        return self.status.clear_errors()
