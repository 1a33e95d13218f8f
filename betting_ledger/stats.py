"""
Betting statistics, recomputed from the bet list on every call.
"""

from betting_ledger.models import Bet, BetStatus, BettingStats


def compute_betting_stats(bets: list[Bet]) -> BettingStats:
    """
    Aggregate counts, money totals and win rate.

    win_rate and roi are None when no bet has been resolved, so callers can
    tell "no data" apart from a real 0%.
    """
    active = [b for b in bets if b.status == BetStatus.ACTIVE]
    won = [b for b in bets if b.status == BetStatus.WON]
    lost = [b for b in bets if b.status == BetStatus.LOST]

    total_winnings = sum(b.potential_win for b in won)
    total_losses = sum(b.amount for b in lost)
    net_profit = sum(b.potential_win - b.amount for b in won) - total_losses
    resolved_stake = sum(b.amount for b in won) + total_losses

    resolved = len(won) + len(lost)
    win_rate = len(won) / resolved * 100 if resolved > 0 else None
    roi = net_profit / resolved_stake * 100 if resolved_stake > 0 else None

    return BettingStats(
        total_bets=len(bets),
        active_bets=len(active),
        won_bets=len(won),
        lost_bets=len(lost),
        total_winnings=total_winnings,
        total_losses=total_losses,
        win_rate=win_rate,
        net_profit=net_profit,
        roi=roi,
    )


def format_win_rate(stats: BettingStats) -> str:
    if stats.win_rate is None:
        return "N/A"
    return f"{stats.win_rate:.1f}%"
