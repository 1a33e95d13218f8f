"""Betting ledger: events, bets, wallet and stats for a demo sportsbook."""
