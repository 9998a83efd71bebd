"""Engine data structures. Every derived value is recomputed per call, never stored."""

from dataclasses import dataclass, field
from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum


class TradeDirection(str, Enum):
    LONG = "Long"
    SHORT = "Short"


class TradeStatus(str, Enum):
    """User-assigned outcome label, independent of the computed P&L sign."""

    WIN = "Win"
    SMALL_WIN = "Small Win"
    BREAK_EVEN = "Break Even"
    SMALL_LOSS = "Small Loss"
    LOSS = "Loss"


def round_half_up(value: float, places: int = 2) -> float:
    """Round with exact halves going away from zero (6.125 -> 6.13, -0.125 -> -0.13)."""
    quantum = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(quantum, rounding=ROUND_HALF_UP))


def parse_wall_clock(iso: str) -> datetime:
    """Parse an ISO-8601 timestamp as a literal wall-clock time.

    A trailing "Z" (or any UTC offset) is discarded rather than converted:
    stored timestamps are treated as already being in the trader's own
    session timezone.
    """
    raw = iso[:-1] if iso.endswith("Z") else iso
    return datetime.fromisoformat(raw).replace(tzinfo=None)


@dataclass(frozen=True)
class TradeRecord:
    """Read-only view of a journal trade for a single computation pass."""

    id: str
    symbol: str
    direction: TradeDirection
    quantity: float
    entry_price: float
    entry_date: str  # ISO-8601
    status: TradeStatus = TradeStatus.BREAK_EVEN
    exit_price: float | None = None  # None while the trade is open
    exit_date: str | None = None
    initial_stop_loss: float | None = None
    take_profit_target: float | None = None
    highest_price_reached: float | None = None
    lowest_price_reached: float | None = None
    best_exit_price: float | None = None
    commission: float = 0.0
    playbook_id: str | None = None
    tags: tuple[str, ...] = ()
    rules_followed: tuple[str, ...] = ()

    @property
    def is_closed(self) -> bool:
        return self.exit_price is not None

    @property
    def entry_time(self) -> datetime:
        return parse_wall_clock(self.entry_date)

    @property
    def exit_time(self) -> datetime | None:
        return parse_wall_clock(self.exit_date) if self.exit_date else None

    @property
    def close_time(self) -> datetime:
        """Exit time, falling back to entry time. Used for equity ordering."""
        return self.exit_time or self.entry_time

    @property
    def duration_minutes(self) -> float | None:
        if self.exit_time is None:
            return None
        return (self.exit_time - self.entry_time).total_seconds() / 60


@dataclass
class TradeMetrics:
    """Risk and best-case figures for one trade, in account currency."""

    initial_risk_amount: float
    actual_risk_amount: float
    actual_risk_percent: float
    best_pnl: float
    best_rr: float

    def to_dict(self) -> dict:
        return {
            "initial_risk_amount": round_half_up(self.initial_risk_amount, 2),
            "actual_risk_amount": round_half_up(self.actual_risk_amount, 2),
            "actual_risk_percent": round_half_up(self.actual_risk_percent, 2),
            "best_pnl": round_half_up(self.best_pnl, 2),
            "best_rr": round_half_up(self.best_rr, 2),
        }


@dataclass
class StreakStats:
    """Signed current streaks (+wins / -losses) and the longest runs seen."""

    current_day_streak: int = 0
    max_day_win_streak: int = 0
    max_day_loss_streak: int = 0
    current_trade_streak: int = 0
    max_trade_win_streak: int = 0
    max_trade_loss_streak: int = 0

    def to_dict(self) -> dict:
        return {
            "current_day_streak": self.current_day_streak,
            "max_day_win_streak": self.max_day_win_streak,
            "max_day_loss_streak": self.max_day_loss_streak,
            "current_trade_streak": self.current_trade_streak,
            "max_trade_win_streak": self.max_trade_win_streak,
            "max_trade_loss_streak": self.max_trade_loss_streak,
        }


@dataclass
class AggregateRow:
    """Statistics for the trades that fall into one bucket."""

    label: str
    sort_index: int
    count: int = 0
    net_pnl: float = 0.0
    win_rate: float = 0.0
    profit_factor: float = 0.0
    avg_win: float = 0.0
    avg_loss: float = 0.0
    total_r: float = 0.0
    avg_r: float = 0.0
    max_drawdown: float = 0.0
    avg_drawdown: float = 0.0
    avg_win_loss_rr: float = 0.0
    avg_actual_risk_pct: float = 0.0

    def to_dict(self) -> dict:
        return {
            "label": self.label,
            "sort_index": self.sort_index,
            "count": self.count,
            "net_pnl": round_half_up(self.net_pnl, 2),
            "win_rate": round_half_up(self.win_rate, 1),
            "profit_factor": round_half_up(self.profit_factor, 2),
            "avg_win": round_half_up(self.avg_win, 2),
            "avg_loss": round_half_up(self.avg_loss, 2),
            "total_r": round_half_up(self.total_r, 2),
            "avg_r": round_half_up(self.avg_r, 2),
            "max_drawdown": round_half_up(self.max_drawdown, 2),
            "avg_drawdown": round_half_up(self.avg_drawdown, 2),
            "avg_win_loss_rr": round_half_up(self.avg_win_loss_rr, 2),
            "avg_actual_risk_pct": round_half_up(self.avg_actual_risk_pct, 1),
        }


@dataclass
class CrossCell:
    pnl: float
    win_rate: float
    count: int

    def to_dict(self) -> dict:
        return {"pnl": round_half_up(self.pnl, 2), "win_rate": round_half_up(self.win_rate, 1), "count": self.count}


@dataclass
class CrossRow:
    """One bucket row of a cross-tabulation. A None cell means no matching trades."""

    row_key: str
    cells: dict[str, CrossCell | None] = field(default_factory=dict)

    def to_dict(self) -> dict:
        return {
            "row_key": self.row_key,
            "cells": {col: cell.to_dict() if cell else None for col, cell in self.cells.items()},
        }


@dataclass
class CrossTable:
    matrix: list[CrossRow]
    cols: list[str]

    def to_dict(self) -> dict:
        return {"cols": self.cols, "matrix": [row.to_dict() for row in self.matrix]}
