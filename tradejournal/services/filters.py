"""Global trade filter applied before every report.

The date range always narrows the set. The remaining active categories are
combined with AND or OR (`filter_logic`), and `exclude_mode` inverts the
combined match, keeping only trades that do NOT match.
"""

import math
from collections.abc import Callable, Sequence
from datetime import date
from typing import Literal

from pydantic import BaseModel, Field, field_validator

from tradejournal.services.metrics.calculations import calculate_pnl, calculate_r_multiple
from tradejournal.services.metrics.types import TradeDirection, TradeRecord, TradeStatus

_HHMM = r"^([01]\d|2[0-3]):[0-5]\d$"


class TradeFilter(BaseModel):
    """Filter state. Every field is optional; the default keeps all trades."""

    start_date: date | None = None
    end_date: date | None = None

    status: list[TradeStatus] = Field(default_factory=list)
    direction: list[TradeDirection] = Field(default_factory=list)
    strategy_ids: list[str] = Field(default_factory=list)
    rule_ids: list[str] = Field(default_factory=list)
    tag_ids: list[str] = Field(default_factory=list)
    days_of_week: list[int] = Field(default_factory=list, description="0 = Sunday ... 6 = Saturday")

    start_time: str | None = Field(None, pattern=_HHMM)
    end_time: str | None = Field(None, pattern=_HHMM)
    exit_start_time: str | None = Field(None, pattern=_HHMM)
    exit_end_time: str | None = Field(None, pattern=_HHMM)

    min_duration: float | None = Field(None, description="Minutes")
    max_duration: float | None = None
    min_volume: float | None = None
    max_volume: float | None = None
    min_pnl: float | None = None
    max_pnl: float | None = None
    min_rr: float | None = None
    max_rr: float | None = None
    min_sl_size: float | None = Field(None, description="Entry-to-stop distance in points")
    max_sl_size: float | None = None
    min_actual_risk: float | None = Field(None, description="Adverse move in points")
    max_actual_risk: float | None = None
    min_actual_risk_pct: float | None = Field(None, description="Adverse move as % of stop distance")
    max_actual_risk_pct: float | None = None

    include_rules: bool = False
    exclude_mode: bool = False
    filter_logic: Literal["AND", "OR"] = "AND"

    @field_validator("strategy_ids", "rule_ids", "tag_ids", mode="before")
    @classmethod
    def _ids_as_strings(cls, v):
        return [str(i) for i in v] if isinstance(v, list) else v

    @field_validator("days_of_week")
    @classmethod
    def _valid_days(cls, v: list[int]) -> list[int]:
        for day in v:
            if not 0 <= day <= 6:
                raise ValueError(f"day of week must be 0-6, got {day}")
        return v


def _in_range(value: float, lo: float | None, hi: float | None) -> bool:
    if math.isnan(value):
        return False
    if lo is not None and value < lo:
        return False
    if hi is not None and value > hi:
        return False
    return True


def _ranged(lo: float | None, hi: float | None) -> bool:
    return lo is not None or hi is not None


def _adverse_points(t: TradeRecord) -> float:
    if t.direction == TradeDirection.LONG:
        low = t.lowest_price_reached if t.lowest_price_reached is not None else t.entry_price
        return t.entry_price - low
    high = t.highest_price_reached if t.highest_price_reached is not None else t.entry_price
    return high - t.entry_price


def _stop_distance(t: TradeRecord) -> float:
    if t.initial_stop_loss is None:
        return math.nan
    return abs(t.entry_price - t.initial_stop_loss)


def _clock(t: TradeRecord, exit_side: bool = False) -> str | None:
    moment = t.exit_time if exit_side else t.entry_time
    return moment.strftime("%H:%M") if moment else None


def _within_window(clock: str | None, start: str | None, end: str | None) -> bool:
    if clock is None:
        return False
    if start and clock < start:
        return False
    if end and clock > end:
        return False
    return True


def _multi_match(selected: list[str], present: Sequence[str], logic: str) -> bool:
    if logic == "AND":
        return all(i in present for i in selected)
    return any(i in present for i in selected)


def _categories(f: TradeFilter, commission_per_unit: float) -> list[Callable[[TradeRecord], bool]]:
    """One predicate per active filter category."""
    checks: list[Callable[[TradeRecord], bool]] = []

    if f.status:
        checks.append(lambda t: t.status in f.status)
    if f.direction:
        checks.append(lambda t: t.direction in f.direction)
    if f.strategy_ids:
        checks.append(lambda t: t.playbook_id is not None and t.playbook_id in f.strategy_ids)
    if f.include_rules and f.rule_ids:
        checks.append(lambda t: _multi_match(f.rule_ids, t.rules_followed, f.filter_logic))
    if f.tag_ids:
        checks.append(lambda t: _multi_match(f.tag_ids, t.tags, f.filter_logic))

    if _ranged(f.min_volume, f.max_volume):
        checks.append(lambda t: _in_range(t.quantity, f.min_volume, f.max_volume))
    if _ranged(f.min_pnl, f.max_pnl):
        checks.append(lambda t: _in_range(calculate_pnl(t, commission_per_unit), f.min_pnl, f.max_pnl))
    if _ranged(f.min_rr, f.max_rr):
        checks.append(
            lambda t: _in_range(calculate_r_multiple(t, commission_per_unit) or 0.0, f.min_rr, f.max_rr)
        )
    if _ranged(f.min_sl_size, f.max_sl_size):
        checks.append(lambda t: _in_range(_stop_distance(t), f.min_sl_size, f.max_sl_size))
    if _ranged(f.min_actual_risk, f.max_actual_risk):
        checks.append(lambda t: _in_range(_adverse_points(t), f.min_actual_risk, f.max_actual_risk))
    if _ranged(f.min_actual_risk_pct, f.max_actual_risk_pct):

        def _risk_pct(t: TradeRecord) -> bool:
            distance = _stop_distance(t)
            if math.isnan(distance) or distance == 0:
                return False
            pct = _adverse_points(t) / distance * 100
            return _in_range(pct, f.min_actual_risk_pct, f.max_actual_risk_pct)

        checks.append(_risk_pct)

    if f.days_of_week:
        # weekday() is Monday=0; the filter counts from Sunday=0
        checks.append(lambda t: (t.entry_time.weekday() + 1) % 7 in f.days_of_week)
    if f.start_time or f.end_time:
        checks.append(lambda t: _within_window(_clock(t), f.start_time, f.end_time))
    if f.exit_start_time or f.exit_end_time:
        checks.append(lambda t: _within_window(_clock(t, exit_side=True), f.exit_start_time, f.exit_end_time))
    if _ranged(f.min_duration, f.max_duration):

        def _duration(t: TradeRecord) -> bool:
            minutes = t.duration_minutes
            if minutes is None:
                return False
            return _in_range(math.floor(minutes), f.min_duration, f.max_duration)

        checks.append(_duration)

    return checks


def active_filter_count(f: TradeFilter) -> int:
    """Number of active filter categories (the date range is not counted)."""
    return len(_categories(f, 0.0))


def _in_date_range(t: TradeRecord, f: TradeFilter) -> bool:
    day = t.entry_time.date()
    if f.start_date and day < f.start_date:
        return False
    if f.end_date and day > f.end_date:
        return False
    return True


def apply_filters(
    trades: Sequence[TradeRecord],
    f: TradeFilter | None,
    commission_per_unit: float = 0.0,
) -> list[TradeRecord]:
    """Trades that pass the filter, in input order."""
    if f is None:
        return list(trades)

    result = [t for t in trades if _in_date_range(t, f)]
    checks = _categories(f, commission_per_unit)
    if not checks:
        return result

    combine = all if f.filter_logic == "AND" else any
    return [t for t in result if combine(check(t) for check in checks) != f.exclude_mode]
