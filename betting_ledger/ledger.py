"""
Bet ledger — places wagers against events and settles them.

A bet moves active -> won or active -> lost exactly once. Placing a bet
debits the wallet; winning credits the potential win that was fixed when
the bet was placed. Losing credits nothing.
"""

import logging
import random
import string
import time
from datetime import datetime

from betting_ledger.errors import EventNotFound, InsufficientBalance, InvalidPrediction, OddsMismatch
from betting_ledger.events import EventRegistry
from betting_ledger.models import (
    Bet,
    BetResult,
    BetStatus,
    CreateBetRequest,
    ResolveOutcome,
    ResolveResult,
)
from betting_ledger.wallet import Wallet

logger = logging.getLogger(__name__)

ODDS_TOLERANCE = 1e-9

_ID_ALPHABET = string.ascii_lowercase + string.digits


def new_bet_id() -> str:
    """bet_<epoch millis>_<9 random base36 chars>"""
    suffix = "".join(random.choices(_ID_ALPHABET, k=9))
    return f"bet_{int(time.time() * 1000)}_{suffix}"


def calculate_potential_win(amount: float, odds: float) -> float:
    return amount * odds


class BetLedger:
    """Owns the list of bets, in insertion order."""

    def __init__(
        self,
        registry: EventRegistry,
        wallet: Wallet,
        bets: list[Bet] | None = None,
        trust_caller_odds: bool = False,
    ):
        self.registry = registry
        self.wallet = wallet
        self.trust_caller_odds = trust_caller_odds
        self._bets: list[Bet] = list(bets or [])

    # ------------------------------------------------------------------
    # Placement
    # ------------------------------------------------------------------

    def place_bet(self, request: CreateBetRequest) -> Bet:
        """
        Validate and record a new active bet.

        Raises:
            InsufficientBalance: amount is not affordable.
            EventNotFound: no event with request.event_id.
            InvalidPrediction: draw requested on an event without draw odds.
            OddsMismatch: requested odds differ from the event's (unless
                trust_caller_odds is set).
        """
        if not self.wallet.can_afford(request.amount):
            raise InsufficientBalance(request.amount, self.wallet.balance)

        event = self.registry.get(request.event_id)
        if event is None:
            raise EventNotFound(request.event_id)

        current_odds = event.odds.for_prediction(request.prediction)
        if current_odds is None:
            raise InvalidPrediction(event.id, request.prediction.value)

        odds = self._resolve_odds(request.odds, current_odds)

        bet = Bet(
            id=new_bet_id(),
            event_id=event.id,
            event=event,  # registry.get returns a copy
            amount=request.amount,
            odds=odds,
            prediction=request.prediction,
            status=BetStatus.ACTIVE,
            created_at=datetime.now(),
            potential_win=calculate_potential_win(request.amount, odds),
        )

        # Checks are done; nothing below can fail
        self.wallet.debit_for_bet(bet.amount)
        self._bets.append(bet)

        logger.info(
            "Placed bet %s: %.2f on %s (%s @ %.2f), potential win %.2f",
            bet.id, bet.amount, event.name, bet.prediction.value, bet.odds, bet.potential_win,
        )
        return bet.model_copy(deep=True)

    def _resolve_odds(self, requested: float, current: float) -> float:
        if self.trust_caller_odds:
            return requested
        if abs(requested - current) > ODDS_TOLERANCE:
            raise OddsMismatch(requested, current)
        return current

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def resolve_bet(self, bet_id: str, result: BetResult) -> ResolveResult:
        """Settle an active bet. Unknown or already-settled bets are left alone."""
        result = BetResult(result)
        bet = self._find(bet_id)
        if bet is None:
            logger.info("Resolve ignored, unknown bet %s", bet_id)
            return ResolveResult(outcome=ResolveOutcome.NOT_FOUND, user=self.wallet.snapshot())

        if bet.is_settled:
            logger.info("Resolve ignored, bet %s already %s", bet_id, bet.status.value)
            return ResolveResult(
                outcome=ResolveOutcome.ALREADY_SETTLED,
                bet=bet.model_copy(deep=True),
                user=self.wallet.snapshot(),
            )

        if result == BetResult.WON:
            bet.status = BetStatus.WON
            self.wallet.credit_win(bet.potential_win)
        else:
            bet.status = BetStatus.LOST
            self.wallet.record_loss()

        logger.info("Resolved bet %s as %s", bet.id, bet.status.value)
        return ResolveResult(
            outcome=ResolveOutcome.RESOLVED,
            bet=bet.model_copy(deep=True),
            user=self.wallet.snapshot(),
        )

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------

    def get_bets_by_status(self, status: BetStatus | None = None) -> list[Bet]:
        """Copies of the bets with the given status, or of all bets."""
        if status is None:
            return self.all()
        status = BetStatus(status)
        return [b.model_copy(deep=True) for b in self._bets if b.status == status]

    def _find(self, bet_id: str) -> Bet | None:
        for bet in self._bets:
            if bet.id == bet_id:
                return bet
        return None

    def get(self, bet_id: str) -> Bet | None:
        bet = self._find(bet_id)
        return bet.model_copy(deep=True) if bet is not None else None

    def all(self) -> list[Bet]:
        return [b.model_copy(deep=True) for b in self._bets]

    def replace_all(self, bets: list[Bet]) -> list[Bet]:
        self._bets = [b.model_copy(deep=True) for b in bets]
        return self.all()

    def __len__(self) -> int:
        return len(self._bets)
