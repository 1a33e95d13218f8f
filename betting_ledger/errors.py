"""
Error taxonomy for the betting ledger.

User-action precondition failures (placing a bet, depositing) raise one of
these. Persistence anomalies are raised internally and recovered by the
persistence layer.
"""


class BettingError(Exception):
    """Base class for all ledger errors."""

    code = "betting_error"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.__class__.__doc__)
        self.message = message or self.__class__.__doc__


class InsufficientBalance(BettingError):
    """Insufficient balance for this bet."""

    code = "insufficient_balance"

    def __init__(self, amount: float, balance: float):
        super().__init__(f"Insufficient balance: bet of {amount:.2f} exceeds balance of {balance:.2f}")
        self.amount = amount
        self.balance = balance


class EventNotFound(BettingError):
    """Event not found."""

    code = "event_not_found"

    def __init__(self, event_id: str):
        super().__init__(f"Event not found: {event_id}")
        self.event_id = event_id


class InvalidAmount(BettingError):
    """Amount must be a finite number, and positive where money moves in or out."""

    code = "invalid_amount"

    def __init__(self, amount: float):
        super().__init__(f"Invalid amount: {amount}")
        self.amount = amount


class InvalidPrediction(BettingError):
    """Prediction is not offered for this event."""

    code = "invalid_prediction"

    def __init__(self, event_id: str, prediction: str):
        super().__init__(f"Prediction '{prediction}' is not offered for event {event_id}")
        self.event_id = event_id
        self.prediction = prediction


class OddsMismatch(BettingError):
    """Requested odds do not match the event's current odds."""

    code = "odds_mismatch"

    def __init__(self, requested: float, current: float):
        super().__init__(f"Requested odds {requested} do not match current odds {current}")
        self.requested = requested
        self.current = current


class InvalidStatusTransition(BettingError):
    """Event status can only move forward."""

    code = "invalid_status_transition"

    def __init__(self, event_id: str, current: str, requested: str):
        super().__init__(f"Event {event_id} cannot move from '{current}' to '{requested}'")
        self.event_id = event_id
        self.current = current
        self.requested = requested


class CorruptedPersistedState(BettingError):
    """Persisted store data could not be parsed."""

    code = "corrupted_persisted_state"
