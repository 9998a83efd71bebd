"""Calendar-day statistics: equity curve and the performance summary.

A trade belongs to the calendar day of its entry (wall-clock).
"""

from collections import defaultdict
from collections.abc import Sequence
from dataclasses import dataclass
from datetime import date, timedelta

from tradejournal.services.metrics.aggregates import (
    avg_actual_risk_pct,
    avg_win_loss,
    closed_trades,
    daily_pnl_map,
    drawdown_from_pnls,
    max_consecutive_losses,
    max_drawdown,
    net_pnl,
    profit_factor,
    sort_by_close,
    win_rate,
)
from tradejournal.services.metrics.calculations import calculate_pnl, calculate_r_multiple
from tradejournal.services.metrics.types import TradeRecord, round_half_up


@dataclass
class EquityPoint:
    date: str  # YYYY-MM-DD
    daily_pnl: float
    cumulative_pnl: float
    drawdown: float  # cumulative - running peak, <= 0
    has_trades: bool

    def to_dict(self) -> dict:
        return {
            "date": self.date,
            "daily_pnl": round_half_up(self.daily_pnl, 2),
            "cumulative_pnl": round_half_up(self.cumulative_pnl, 2),
            "drawdown": round_half_up(self.drawdown, 2),
            "has_trades": self.has_trades,
        }


@dataclass
class PerformanceSummary:
    total_pnl: float = 0.0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    expectancy: float = 0.0
    avg_net_trade_pnl: float = 0.0

    logged_days: int = 0
    avg_daily_pnl: float = 0.0
    daily_win_pct: float = 0.0
    avg_daily_win: float = 0.0
    avg_daily_loss: float = 0.0
    avg_daily_rr: float = 0.0

    avg_trade_win: float = 0.0
    avg_trade_loss: float = 0.0
    avg_trade_rr: float = 0.0
    total_r: float = 0.0
    avg_r: float = 0.0

    max_drawdown: float = 0.0
    max_intraday_drawdown: float = 0.0
    avg_intraday_drawdown: float = 0.0

    avg_hold_minutes: float = 0.0
    avg_actual_risk_pct: float = 0.0
    max_consecutive_losses: int = 0
    avg_trades_per_day: float = 0.0

    def to_dict(self) -> dict:
        counts = {"logged_days", "max_consecutive_losses"}
        return {
            name: value if name in counts else round_half_up(value, 2)
            for name, value in self.__dict__.items()
        }


def daily_pnl(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> dict[str, float]:
    """Closed-trade P&L per calendar day, ascending."""
    return daily_pnl_map(closed_trades(trades), commission_per_unit)


def equity_curve(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> list[EquityPoint]:
    """One point per calendar day between the first and last trading day, gaps included."""
    days = daily_pnl(trades, commission_per_unit)
    if not days:
        return []

    first = date.fromisoformat(next(iter(days)))
    last = date.fromisoformat(next(reversed(days)))

    points = []
    cumulative = 0.0
    peak = 0.0
    day = first
    while day <= last:
        key = day.isoformat()
        pnl = days.get(key, 0.0)
        cumulative += pnl
        peak = max(peak, cumulative)
        points.append(
            EquityPoint(
                date=key,
                daily_pnl=pnl,
                cumulative_pnl=cumulative,
                drawdown=cumulative - peak,
                has_trades=key in days,
            )
        )
        day += timedelta(days=1)
    return points


def _intraday_drawdowns(trades: Sequence[TradeRecord], commission_per_unit: float) -> list[float]:
    by_day: dict[str, list[TradeRecord]] = defaultdict(list)
    for t in trades:
        by_day[t.entry_time.date().isoformat()].append(t)
    return [
        drawdown_from_pnls(calculate_pnl(t, commission_per_unit) for t in sort_by_close(day_trades))
        for day_trades in by_day.values()
    ]


def performance_summary(
    trades: Sequence[TradeRecord], commission_per_unit: float = 0.0
) -> PerformanceSummary:
    """Trade-level and day-level performance over the closed trades."""
    closed = closed_trades(trades)
    if not closed:
        return PerformanceSummary()

    count = len(closed)
    total = net_pnl(closed, commission_per_unit)
    wr = win_rate(closed, commission_per_unit)
    avg_win, avg_loss = avg_win_loss(closed, commission_per_unit)

    day_pnls = list(daily_pnl_map(closed, commission_per_unit).values())
    winning_days = [p for p in day_pnls if p > 0]
    losing_days = [p for p in day_pnls if p < 0]
    avg_daily_win = sum(winning_days) / len(winning_days) if winning_days else 0.0
    avg_daily_loss = sum(losing_days) / len(losing_days) if losing_days else 0.0

    intraday = _intraday_drawdowns(closed, commission_per_unit)

    total_r = sum(calculate_r_multiple(t, commission_per_unit) or 0.0 for t in closed)
    durations = [t.duration_minutes for t in closed if t.duration_minutes is not None]

    return PerformanceSummary(
        total_pnl=total,
        win_rate=wr,
        profit_factor=profit_factor(closed, commission_per_unit),
        expectancy=(wr / 100) * avg_win + (1 - wr / 100) * avg_loss,
        avg_net_trade_pnl=total / count,
        logged_days=len(day_pnls),
        avg_daily_pnl=sum(day_pnls) / len(day_pnls),
        daily_win_pct=len(winning_days) / len(day_pnls) * 100,
        avg_daily_win=avg_daily_win,
        avg_daily_loss=avg_daily_loss,
        avg_daily_rr=abs(avg_daily_win / avg_daily_loss) if avg_daily_loss != 0 else 0.0,
        avg_trade_win=avg_win,
        avg_trade_loss=avg_loss,
        avg_trade_rr=abs(avg_win / avg_loss) if avg_loss != 0 else 0.0,
        total_r=total_r,
        avg_r=total_r / count,
        max_drawdown=max_drawdown(closed, commission_per_unit),
        max_intraday_drawdown=min(intraday),
        avg_intraday_drawdown=sum(intraday) / len(intraday),
        avg_hold_minutes=sum(durations) / len(durations) if durations else 0.0,
        avg_actual_risk_pct=avg_actual_risk_pct(closed, commission_per_unit),
        max_consecutive_losses=max_consecutive_losses(closed, commission_per_unit),
        avg_trades_per_day=count / len(day_pnls),
    )
