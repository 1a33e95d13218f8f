"""
Wallet: the user's balance and lifetime bet counters.

The balance never goes below zero and is never NaN or infinite.
"""

import logging
import math

from betting_ledger.errors import InvalidAmount
from betting_ledger.models import User

logger = logging.getLogger(__name__)


class Wallet:
    """Holds a User record and applies balance arithmetic to it."""

    def __init__(self, user: User):
        self._user = user.model_copy()

    @property
    def balance(self) -> float:
        return self._user.balance

    def snapshot(self) -> User:
        return self._user.model_copy()

    def replace(self, user: User) -> User:
        self._user = user.model_copy()
        return self.snapshot()

    # ── Caller-facing operations ──────────────────────────────────────

    def update_balance(self, delta: float) -> User:
        """Add delta to the balance, flooring at zero."""
        if not math.isfinite(delta):
            raise InvalidAmount(delta)
        new_balance = self._user.balance + delta
        if new_balance < 0:
            logger.info("Balance adjustment %.2f clamped at zero", delta)
            new_balance = 0.0
        self._user.balance = new_balance
        return self.snapshot()

    def deposit(self, amount: float) -> User:
        if not math.isfinite(amount) or amount <= 0:
            raise InvalidAmount(amount)
        self._user.balance += amount
        return self.snapshot()

    def withdraw(self, amount: float) -> bool:
        """Take amount out of the wallet. Returns False (and changes nothing) if not possible."""
        if not self.can_afford(amount):
            return False
        self._user.balance -= amount
        return True

    def can_afford(self, amount: float) -> bool:
        return math.isfinite(amount) and 0 < amount <= self._user.balance

    # ── Ledger hooks ──────────────────────────────────────────────────

    def debit_for_bet(self, amount: float) -> None:
        self._user.balance -= amount
        self._user.total_bets += 1

    def credit_win(self, amount: float) -> None:
        self._user.balance += amount
        self._user.total_wins += 1

    def record_loss(self) -> None:
        self._user.total_losses += 1
