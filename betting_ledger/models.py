"""
Pydantic models for the Betting Ledger.

Field names are snake_case; the persisted document and the HTTP surface use
the camelCase aliases (``homeTeam``, ``potentialWin``...). Both spellings are
accepted on input.
"""

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator


class SportType(str, Enum):
    FOOTBALL = "football"
    BASKETBALL = "basketball"
    TENNIS = "tennis"
    VOLLEYBALL = "volleyball"


class EventStatus(str, Enum):
    UPCOMING = "upcoming"
    LIVE = "live"
    FINISHED = "finished"

    @property
    def rank(self) -> int:
        """Position in the upcoming -> live -> finished lifecycle."""
        return list(EventStatus).index(self)


class BetStatus(str, Enum):
    ACTIVE = "active"
    WON = "won"
    LOST = "lost"


class BetPrediction(str, Enum):
    HOME = "home"
    DRAW = "draw"
    AWAY = "away"


class BetResult(str, Enum):
    WON = "won"
    LOST = "lost"


class _Model(BaseModel):
    model_config = ConfigDict(populate_by_name=True, allow_inf_nan=False)


def _naive(value: datetime) -> datetime:
    # Aware inputs are normalised to naive UTC
    if value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ═══════════════════════════════════════════════════════════════════════
# Events
# ═══════════════════════════════════════════════════════════════════════

class EventOdds(_Model):
    """Decimal odds for each outcome of an event."""
    home: float = Field(gt=1.0)
    away: float = Field(gt=1.0)
    draw: float | None = Field(default=None, gt=1.0)  # only for sports with a draw

    def for_prediction(self, prediction: BetPrediction) -> float | None:
        if prediction == BetPrediction.HOME:
            return self.home
        if prediction == BetPrediction.AWAY:
            return self.away
        return self.draw


class SportEvent(_Model):
    """A sporting fixture with odds and a lifecycle status."""
    id: str = Field(min_length=1)
    home_team: str = Field(alias="homeTeam")
    away_team: str = Field(alias="awayTeam")
    date: datetime  # scheduled start, naive
    odds: EventOdds
    sport: SportType
    status: EventStatus = EventStatus.UPCOMING

    @field_validator("date")
    @classmethod
    def normalise_date(cls, value: datetime) -> datetime:
        return _naive(value)

    @property
    def supports_draw(self) -> bool:
        return self.odds.draw is not None

    @property
    def name(self) -> str:
        return f"{self.home_team} vs {self.away_team}"


class StatusUpdate(str, Enum):
    UPDATED = "updated"
    NOT_FOUND = "not_found"


# ═══════════════════════════════════════════════════════════════════════
# Bets
# ═══════════════════════════════════════════════════════════════════════

class CreateBetRequest(_Model):
    """What a caller submits to place a bet."""
    event_id: str = Field(alias="eventId", min_length=1)
    amount: float = Field(gt=0)
    odds: float = Field(gt=1.0)
    prediction: BetPrediction


class Bet(_Model):
    """A wager placed against an event outcome."""
    id: str
    event_id: str = Field(alias="eventId")
    event: SportEvent  # snapshot taken at placement time
    amount: float = Field(gt=0)
    odds: float
    prediction: BetPrediction
    status: BetStatus = BetStatus.ACTIVE
    created_at: datetime = Field(alias="createdAt")
    potential_win: float = Field(alias="potentialWin")  # amount * odds, fixed at creation

    @field_validator("created_at")
    @classmethod
    def normalise_created_at(cls, value: datetime) -> datetime:
        return _naive(value)

    @property
    def is_settled(self) -> bool:
        return self.status != BetStatus.ACTIVE


class ResolveOutcome(str, Enum):
    RESOLVED = "resolved"
    NOT_FOUND = "not_found"
    ALREADY_SETTLED = "already_settled"


# ═══════════════════════════════════════════════════════════════════════
# Wallet
# ═══════════════════════════════════════════════════════════════════════

class User(_Model):
    """The user's wallet: balance plus lifetime bet counters."""
    balance: float = Field(ge=0)
    total_bets: int = Field(default=0, ge=0, alias="totalBets")
    total_wins: int = Field(default=0, ge=0, alias="totalWins")
    total_losses: int = Field(default=0, ge=0, alias="totalLosses")


class ResolveResult(_Model):
    """Outcome of a resolve_bet call, with the state it left behind."""
    outcome: ResolveOutcome
    bet: Bet | None = None
    user: User

    @property
    def changed(self) -> bool:
        return self.outcome == ResolveOutcome.RESOLVED


# ═══════════════════════════════════════════════════════════════════════
# Derived stats
# ═══════════════════════════════════════════════════════════════════════

class BettingStats(_Model):
    """Aggregate figures recomputed from the bet ledger."""
    total_bets: int = Field(default=0, alias="totalBets")
    active_bets: int = Field(default=0, alias="activeBets")
    won_bets: int = Field(default=0, alias="wonBets")
    lost_bets: int = Field(default=0, alias="lostBets")
    total_winnings: float = Field(default=0.0, alias="totalWinnings")  # sum of potential_win, won bets
    total_losses: float = Field(default=0.0, alias="totalLosses")  # sum of amount, lost bets
    win_rate: float | None = Field(default=None, alias="winRate")  # percent; None = no resolved bets
    net_profit: float = Field(default=0.0, alias="netProfit")
    roi: float | None = None  # percent of resolved stake

    @property
    def resolved_bets(self) -> int:
        return self.won_bets + self.lost_bets

    @property
    def has_resolved_bets(self) -> bool:
        return self.resolved_bets > 0


# ═══════════════════════════════════════════════════════════════════════
# Request status (never persisted)
# ═══════════════════════════════════════════════════════════════════════

class LoadingState(_Model):
    events: bool = False
    bets: bool = False
    balance: bool = False


class ErrorState(_Model):
    events: str | None = None
    bets: str | None = None
    balance: str | None = None


# ═══════════════════════════════════════════════════════════════════════
# Persisted document
# ═══════════════════════════════════════════════════════════════════════

class PersistedState(_Model):
    """Everything that survives a restart."""
    events: list[SportEvent] = Field(default_factory=list)
    bets: list[Bet] = Field(default_factory=list)
    user: User


class PersistedDocument(_Model):
    """Envelope written to durable storage: ``{"state": {...}}``."""
    state: PersistedState


# ═══════════════════════════════════════════════════════════════════════
# HTTP request bodies
# ═══════════════════════════════════════════════════════════════════════

class AmountRequest(_Model):
    amount: float  # sign is checked by the wallet, not here


class DepositRequest(_Model):
    """Deposit limits applied at the HTTP surface; the wallet itself has no cap."""
    amount: float = Field(ge=10, le=5000)

    @field_validator("amount")
    @classmethod
    def at_most_two_decimals(cls, value: float) -> float:
        if round(value, 2) != value:
            raise ValueError("amount must have at most 2 decimal places")
        return value


class PlaceBetRequest(CreateBetRequest):
    """Bet limits applied at the HTTP surface."""
    amount: float = Field(ge=1, le=1000)
    odds: float = Field(ge=1.01, le=50)


class EventStatusRequest(_Model):
    status: EventStatus


class ResolveBetRequest(_Model):
    result: BetResult
