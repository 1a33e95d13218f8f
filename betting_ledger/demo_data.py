"""
Demo data generator — synthetic events and bets for seeding the store.

Not part of the ledger's correctness; it only has to produce well-formed
events with unique ids and odds above 1.0.
"""

import random
import time
from datetime import datetime, timedelta

from betting_ledger.ledger import calculate_potential_win, new_bet_id
from betting_ledger.models import (
    Bet,
    BetPrediction,
    BetStatus,
    EventOdds,
    EventStatus,
    SportEvent,
    SportType,
)

PARTICIPANTS: dict[SportType, list[str]] = {
    SportType.FOOTBALL: [
        "Flamengo", "Palmeiras", "Corinthians", "São Paulo", "Santos", "Grêmio",
        "Internacional", "Atlético-MG", "Cruzeiro", "Botafogo", "Vasco", "Fluminense",
    ],
    SportType.BASKETBALL: [
        "Lakers", "Warriors", "Celtics", "Heat", "Nets", "Bucks",
        "Suns", "Nuggets", "Clippers", "Mavericks", "Bulls", "Knicks",
    ],
    SportType.TENNIS: [
        "Novak Djokovic", "Carlos Alcaraz", "Daniil Medvedev", "Jannik Sinner",
        "Alexander Zverev", "Andrey Rublev", "Casper Ruud", "Taylor Fritz",
    ],
    SportType.VOLLEYBALL: [
        "Sada Cruzeiro", "Taubaté", "Minas", "Sesi-SP", "Campinas", "Osasco",
        "Praia Clube", "Bauru",
    ],
}

DEFAULT_STATUS_DISTRIBUTION = {"upcoming": 0.6, "live": 0.2, "finished": 0.2}

# Sports without a draw outcome
NO_DRAW_SPORTS = {SportType.TENNIS}


class DemoDataGenerator:
    """Generate sample events and bets. Pass a seeded Random for repeatable output."""

    def __init__(self, rng: random.Random | None = None, now: datetime | None = None):
        self.rng = rng or random.Random()
        self.now = now or datetime.now()
        self._counter = 0

    def generate_odds(self, sport: SportType) -> EventOdds:
        home = round(self.rng.uniform(1.5, 4.0), 2)
        away = round(self.rng.uniform(1.5, 4.0), 2)
        if sport in NO_DRAW_SPORTS:
            return EventOdds(home=home, away=away)
        draw = round(self.rng.uniform(2.5, 4.5), 2)
        return EventOdds(home=home, away=away, draw=draw)

    def _date_around(self, days_from_now: float, variance_hours: float) -> datetime:
        offset = timedelta(days=days_from_now, hours=(self.rng.random() - 0.5) * variance_hours)
        return self.now + offset

    def _pick_status(self, distribution: dict[str, float]) -> tuple[EventStatus, datetime]:
        roll = self.rng.random()
        if roll < distribution["finished"]:
            return EventStatus.FINISHED, self._date_around(-self.rng.random() * 7 - 0.5, 12)
        if roll < distribution["finished"] + distribution["live"]:
            return EventStatus.LIVE, self._date_around(0, 2)
        return EventStatus.UPCOMING, self._date_around(self.rng.random() * 14 + 0.5, 12)

    def _event_id(self, sport: SportType) -> str:
        self._counter += 1
        suffix = "".join(self.rng.choices("abcdefghijklmnopqrstuvwxyz0123456789", k=9))
        return f"{sport.value}_{int(time.time() * 1000)}_{self._counter}_{suffix}"

    def events_for_sport(
        self,
        sport: SportType,
        count: int,
        status_distribution: dict[str, float] | None = None,
    ) -> list[SportEvent]:
        distribution = status_distribution or DEFAULT_STATUS_DISTRIBUTION
        participants = PARTICIPANTS[sport]
        events = []
        for _ in range(count):
            home, away = self.rng.sample(participants, 2)
            status, date = self._pick_status(distribution)
            events.append(SportEvent(
                id=self._event_id(sport),
                home_team=home,
                away_team=away,
                date=date,
                odds=self.generate_odds(sport),
                sport=sport,
                status=status,
            ))
        return events

    def all_events(self, total: int = 30) -> list[SportEvent]:
        """Spread total events across every sport, sorted by date."""
        sports = list(SportType)
        per_sport, remainder = divmod(total, len(sports))
        events: list[SportEvent] = []
        for i, sport in enumerate(sports):
            events.extend(self.events_for_sport(sport, per_sport + (1 if i < remainder else 0)))
        return sorted(events, key=lambda e: e.date)

    def scenario_events(self) -> list[SportEvent]:
        """A fixed spread of statuses: two of each per sport."""
        events = []
        for sport in SportType:
            events.extend(self.events_for_sport(sport, 2, {"upcoming": 1.0, "live": 0.0, "finished": 0.0}))
            events.extend(self.events_for_sport(sport, 2, {"upcoming": 0.0, "live": 1.0, "finished": 0.0}))
            events.extend(self.events_for_sport(sport, 2, {"upcoming": 0.0, "live": 0.0, "finished": 1.0}))
        return events

    def bet_amount(self) -> float:
        # More small bets than large ones
        ranges = [(0.4, 5, 25), (0.3, 25, 100), (0.2, 100, 250), (0.1, 250, 500)]
        roll = self.rng.random()
        cumulative = 0.0
        for weight, low, high in ranges:
            cumulative += weight
            if roll <= cumulative:
                return float(self.rng.randint(low, high))
        return float(self.rng.randint(5, 500))

    def prediction_for(self, event: SportEvent) -> BetPrediction:
        options = [BetPrediction.HOME, BetPrediction.AWAY]
        if event.supports_draw:
            options.append(BetPrediction.DRAW)
        return self.rng.choice(options)

    def bets(self, events: list[SportEvent], count: int) -> list[Bet]:
        """
        Sample bets on the given events. Bets on finished events are settled
        at random; others stay active. These bets bypass the wallet, so they
        are only for display fixtures, never for seeding a live ledger.
        """
        if not events:
            return []
        bets = []
        for _ in range(count):
            event = self.rng.choice(events)
            prediction = self.prediction_for(event)
            odds = event.odds.for_prediction(prediction)
            amount = self.bet_amount()
            if event.status == EventStatus.FINISHED:
                status = self.rng.choice([BetStatus.WON, BetStatus.LOST])
            else:
                status = BetStatus.ACTIVE
            bets.append(Bet(
                id=new_bet_id(),
                event_id=event.id,
                event=event.model_copy(deep=True),
                amount=amount,
                odds=odds,
                prediction=prediction,
                status=status,
                created_at=event.date - timedelta(days=self.rng.random() * 7),
                potential_win=calculate_potential_win(amount, odds),
            ))
        return bets


def generate_all_events(total: int = 30) -> list[SportEvent]:
    return DemoDataGenerator().all_events(total)
