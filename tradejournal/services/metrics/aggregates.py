"""Aggregate statistics over a list of closed trades.

Every function here accepts an empty list and returns its identity value.
Zero denominators are guarded, so no NaN or inf ever reaches a report.
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence

from tradejournal.services.metrics.calculations import calculate_pnl, get_trade_metrics
from tradejournal.services.metrics.types import StreakStats, TradeRecord, TradeStatus, round_half_up

# Reported profit factor when there are profits but no losses
PROFIT_FACTOR_CAP = 100.0

# Reported recovery factor when there is profit but no drawdown
RECOVERY_FACTOR_CAP = 10.0

_WIN_STATUSES = {TradeStatus.WIN, TradeStatus.SMALL_WIN}
_LOSS_STATUSES = {TradeStatus.LOSS, TradeStatus.SMALL_LOSS}


def closed_trades(trades: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Trades with an exit price, in input order."""
    return [t for t in trades if t.is_closed]


def net_pnl(trades: Iterable[TradeRecord], commission_per_unit: float = 0.0) -> float:
    return sum(calculate_pnl(t, commission_per_unit) for t in trades)


def win_rate(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> float:
    """Percentage of winners among trades with non-zero P&L. Breakeven is ignored."""
    pnls = [calculate_pnl(t, commission_per_unit) for t in trades]
    decided = [p for p in pnls if p != 0]
    if not decided:
        return 0.0
    wins = sum(1 for p in decided if p > 0)
    return wins / len(decided) * 100


def status_win_rate(trades: Sequence[TradeRecord]) -> float:
    """Win percentage by user-assigned status; Break Even trades are ignored."""
    wins = sum(1 for t in trades if t.status in _WIN_STATUSES)
    losses = sum(1 for t in trades if t.status in _LOSS_STATUSES)
    if wins + losses == 0:
        return 0.0
    return wins / (wins + losses) * 100


def status_counts(trades: Sequence[TradeRecord]) -> tuple[int, int, int]:
    """(wins, losses, break-evens) by status label."""
    wins = sum(1 for t in trades if t.status in _WIN_STATUSES)
    losses = sum(1 for t in trades if t.status in _LOSS_STATUSES)
    return wins, losses, len(trades) - wins - losses


def gross_stats(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> tuple[float, float]:
    """(gross_profit, gross_loss), both non-negative."""
    gross_profit = 0.0
    gross_loss = 0.0
    for t in trades:
        pnl = calculate_pnl(t, commission_per_unit)
        if pnl > 0:
            gross_profit += pnl
        elif pnl < 0:
            gross_loss += abs(pnl)
    return gross_profit, gross_loss


def profit_factor(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> float:
    """Gross profit / gross loss, rounded to 2. Capped at PROFIT_FACTOR_CAP when lossless."""
    gross_profit, gross_loss = gross_stats(trades, commission_per_unit)
    if gross_loss == 0:
        return PROFIT_FACTOR_CAP if gross_profit > 0 else 0.0
    return round_half_up(gross_profit / gross_loss)


def avg_win_loss(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> tuple[float, float]:
    """(avg_win, avg_loss). avg_loss is negative; either is 0 when its class is empty."""
    pnls = [calculate_pnl(t, commission_per_unit) for t in trades]
    wins = [p for p in pnls if p > 0]
    losses = [p for p in pnls if p < 0]
    avg_win = sum(wins) / len(wins) if wins else 0.0
    avg_loss = sum(losses) / len(losses) if losses else 0.0
    return avg_win, avg_loss


def extremes(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> tuple[float, float]:
    """(largest_win, largest_loss). 0 when there is no winner / loser."""
    largest_win = 0.0
    largest_loss = 0.0
    for t in trades:
        pnl = calculate_pnl(t, commission_per_unit)
        largest_win = max(largest_win, pnl)
        largest_loss = min(largest_loss, pnl)
    return largest_win, largest_loss


def sort_by_close(trades: Iterable[TradeRecord]) -> list[TradeRecord]:
    """Chronological by exit time, falling back to entry time for open trades."""
    return sorted(trades, key=lambda t: t.close_time)


def sort_by_entry(trades: Iterable[TradeRecord]) -> list[TradeRecord]:
    return sorted(trades, key=lambda t: t.entry_time)


def drawdown_from_pnls(pnls: Iterable[float]) -> float:
    """Most negative (equity - running peak) over a P&L sequence. Never positive.

    Equity starts at 0, so a losing first trade is already a drawdown.
    """
    equity = 0.0
    peak = 0.0
    max_dd = 0.0
    for pnl in pnls:
        equity += pnl
        if equity > peak:
            peak = equity
        max_dd = min(max_dd, equity - peak)
    return max_dd


def max_drawdown(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> float:
    """Largest peak-to-trough decline of the cumulative P&L curve, as a value <= 0."""
    return drawdown_from_pnls(calculate_pnl(t, commission_per_unit) for t in sort_by_close(trades))


def recovery_factor(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> float:
    """Net P&L per unit of max drawdown, rounded to 2."""
    total = net_pnl(trades, commission_per_unit)
    dd = abs(max_drawdown(trades, commission_per_unit))
    if dd == 0:
        return RECOVERY_FACTOR_CAP if total > 0 else 0.0
    return round_half_up(total / dd)


def _walk_streaks(values: Sequence[float]) -> tuple[int, int, int]:
    """(current, max_win, max_loss) over chronological P&L values.

    Current is signed: +n for a trailing run of n wins, -n for losses.
    A zero value resets both counters without starting a new run.
    """
    max_win = max_loss = 0
    wins = losses = 0
    for v in values:
        if v > 0:
            wins += 1
            losses = 0
            max_win = max(max_win, wins)
        elif v < 0:
            losses += 1
            wins = 0
            max_loss = max(max_loss, losses)
        else:
            wins = losses = 0
    return wins - losses, max_win, max_loss


def daily_pnl_map(trades: Iterable[TradeRecord], commission_per_unit: float = 0.0) -> dict[str, float]:
    """Calendar day (entry wall-clock, YYYY-MM-DD) -> summed P&L, ascending by day."""
    days: dict[str, float] = defaultdict(float)
    for t in trades:
        days[t.entry_time.date().isoformat()] += calculate_pnl(t, commission_per_unit)
    return dict(sorted(days.items()))


def streaks(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> StreakStats:
    """Trade streaks and day streaks (trades summed per calendar day first)."""
    if not trades:
        return StreakStats()

    trade_pnls = [calculate_pnl(t, commission_per_unit) for t in sort_by_entry(trades)]
    current_trade, max_trade_win, max_trade_loss = _walk_streaks(trade_pnls)

    day_pnls = list(daily_pnl_map(trades, commission_per_unit).values())
    current_day, max_day_win, max_day_loss = _walk_streaks(day_pnls)

    return StreakStats(
        current_day_streak=current_day,
        max_day_win_streak=max_day_win,
        max_day_loss_streak=max_day_loss,
        current_trade_streak=current_trade,
        max_trade_win_streak=max_trade_win,
        max_trade_loss_streak=max_trade_loss,
    )


def max_consecutive_losses(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> int:
    """Longest run of losing trades; breakeven and winning trades end a run."""
    longest = run = 0
    for t in sort_by_entry(trades):
        if calculate_pnl(t, commission_per_unit) < 0:
            run += 1
            longest = max(longest, run)
        else:
            run = 0
    return longest


def avg_actual_risk_pct(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> float:
    """Mean actual-risk percentage over trades that have an initial risk. Others are skipped."""
    pcts = []
    for t in trades:
        m = get_trade_metrics(t, commission_per_unit)
        if m.initial_risk_amount > 0:
            pcts.append(m.actual_risk_percent)
    return sum(pcts) / len(pcts) if pcts else 0.0
