"""Dashboard overview: headline numbers, streaks, score and equity curve."""

from collections.abc import Sequence
from dataclasses import dataclass, field

from tradejournal.services.metrics.aggregates import (
    avg_win_loss,
    closed_trades,
    extremes,
    gross_stats,
    max_drawdown,
    net_pnl,
    profit_factor,
    recovery_factor,
    status_counts,
    status_win_rate,
    streaks,
    win_rate,
)
from tradejournal.services.metrics.daily import EquityPoint, equity_curve
from tradejournal.services.metrics.score import ScoreBreakdown, performance_score
from tradejournal.services.metrics.types import StreakStats, TradeRecord, round_half_up


@dataclass
class Overview:
    count: int = 0
    net_pnl: float = 0.0
    win_rate: float = 0.0
    status_win_rate: float = 0.0
    wins_count: int = 0
    losses_count: int = 0
    break_even_count: int = 0
    gross_profit: float = 0.0
    gross_loss: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    profit_factor: float = 0.0
    largest_win: float = 0.0
    largest_loss: float = 0.0
    max_drawdown: float = 0.0
    recovery_factor: float = 0.0
    streaks: StreakStats = field(default_factory=StreakStats)
    score: ScoreBreakdown = field(default_factory=ScoreBreakdown)
    equity_curve: list[EquityPoint] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "count": self.count,
            "net_pnl": round_half_up(self.net_pnl, 2),
            "win_rate": round_half_up(self.win_rate, 1),
            "status_win_rate": round_half_up(self.status_win_rate, 1),
            "wins_count": self.wins_count,
            "losses_count": self.losses_count,
            "break_even_count": self.break_even_count,
            "gross_profit": round_half_up(self.gross_profit, 2),
            "gross_loss": round_half_up(self.gross_loss, 2),
            "avg_win": round_half_up(self.avg_win, 2),
            "avg_loss": round_half_up(self.avg_loss, 2),
            "profit_factor": round_half_up(self.profit_factor, 2),
            "largest_win": round_half_up(self.largest_win, 2),
            "largest_loss": round_half_up(self.largest_loss, 2),
            "max_drawdown": round_half_up(self.max_drawdown, 2),
            "recovery_factor": round_half_up(self.recovery_factor, 2),
            "streaks": self.streaks.to_dict(),
            "score": self.score.to_dict(),
            "equity_curve": [p.to_dict() for p in self.equity_curve],
        }


def build_overview(
    trades: Sequence[TradeRecord],
    commission_per_unit: float = 0.0,
    max_drawdown_goal: float = 0.0,
) -> Overview:
    """Everything the dashboard shows, computed over the closed trades."""
    closed = closed_trades(trades)
    gross_profit, gross_loss = gross_stats(closed, commission_per_unit)
    avg_win, avg_loss = avg_win_loss(closed, commission_per_unit)
    largest_win, largest_loss = extremes(closed, commission_per_unit)
    wins, losses, break_evens = status_counts(closed)

    return Overview(
        count=len(closed),
        net_pnl=net_pnl(closed, commission_per_unit),
        win_rate=win_rate(closed, commission_per_unit),
        status_win_rate=status_win_rate(closed),
        wins_count=wins,
        losses_count=losses,
        break_even_count=break_evens,
        gross_profit=gross_profit,
        gross_loss=gross_loss,
        avg_win=avg_win,
        avg_loss=avg_loss,
        profit_factor=profit_factor(closed, commission_per_unit),
        largest_win=largest_win,
        largest_loss=largest_loss,
        max_drawdown=max_drawdown(closed, commission_per_unit),
        recovery_factor=recovery_factor(closed, commission_per_unit),
        streaks=streaks(closed, commission_per_unit),
        score=performance_score(closed, commission_per_unit, max_drawdown_goal),
        equity_curve=equity_curve(closed, commission_per_unit),
    )
