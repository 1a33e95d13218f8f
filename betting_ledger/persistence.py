"""
Persistence adapter — serializes {events, bets, user} to the key-value slot
and restores it on startup.

The document layout is ``{"state": {"events": [...], "bets": [...], "user": {...}}}``
with camelCase keys and ISO-8601 dates. Loading/error flags are never written.
A missing or unreadable document falls back to the initial state.
"""

import json
import logging

from pydantic import ValidationError

from betting_ledger.config import settings
from betting_ledger.database import delete_value, get_value, init_db, put_value
from betting_ledger.errors import CorruptedPersistedState
from betting_ledger.models import Bet, PersistedDocument, PersistedState, SportEvent, User

logger = logging.getLogger(__name__)


def initial_user(balance: float | None = None) -> User:
    return User(
        balance=settings.INITIAL_BALANCE if balance is None else balance,
        total_bets=0,
        total_wins=0,
        total_losses=0,
    )


def initial_state(balance: float | None = None) -> PersistedState:
    return PersistedState(events=[], bets=[], user=initial_user(balance))


def serialize_state(events: list[SportEvent], bets: list[Bet], user: User) -> str:
    doc = PersistedDocument(state=PersistedState(events=events, bets=bets, user=user))
    return json.dumps(doc.model_dump(mode="json", by_alias=True, exclude_none=True))


def deserialize_state(raw: str) -> PersistedState:
    """
    Parse a stored document.

    Raises:
        CorruptedPersistedState: the text is not JSON, or does not match
            the document layout.
    """
    try:
        data = json.loads(raw)
    except (TypeError, ValueError) as e:
        raise CorruptedPersistedState(f"Stored state is not valid JSON: {e}") from e

    if not isinstance(data, dict) or "state" not in data:
        raise CorruptedPersistedState("Stored state has no 'state' envelope")

    try:
        return PersistedDocument.model_validate(data).state
    except ValidationError as e:
        raise CorruptedPersistedState(f"Stored state does not match the expected layout: {e}") from e


class StatePersistence:
    """Saves and restores one store document under a fixed key."""

    def __init__(self, key: str | None = None, db_path: str | None = None, initial_balance: float | None = None):
        self.key = key or settings.STORE_KEY
        self.db_path = db_path or settings.DB_PATH
        self.initial_balance = initial_balance
        init_db(self.db_path)

    def save(self, events: list[SportEvent], bets: list[Bet], user: User):
        put_value(self.key, serialize_state(events, bets, user), self.db_path)
        logger.debug("Saved store '%s': %d events, %d bets", self.key, len(events), len(bets))

    def load(self) -> PersistedState:
        """Return the stored state, or the initial state if there is none or it is unreadable."""
        raw = get_value(self.key, self.db_path)
        if raw is None:
            logger.info("No saved store under '%s', starting fresh", self.key)
            return initial_state(self.initial_balance)
        try:
            return deserialize_state(raw)
        except CorruptedPersistedState as e:
            logger.error("Error loading store '%s', resetting to initial state: %s", self.key, e)
            return initial_state(self.initial_balance)

    def clear(self) -> bool:
        removed = delete_value(self.key, self.db_path)
        logger.info("Cleared saved store '%s'", self.key)
        return removed
