"""Time-bucketed breakdowns: by weekday, month, hour of entry, or holding time.

Rows are padded so every label of a bucket type is always present, in a fixed
order, whether or not any trade falls into it.
"""

from collections import defaultdict
from collections.abc import Sequence
from enum import Enum

from tradejournal.services.metrics.aggregates import (
    avg_actual_risk_pct,
    avg_win_loss,
    closed_trades,
    max_drawdown,
    net_pnl,
    profit_factor,
    sort_by_close,
    win_rate,
)
from tradejournal.services.metrics.calculations import calculate_pnl, calculate_r_multiple
from tradejournal.services.metrics.types import AggregateRow, TradeRecord


class BucketType(str, Enum):
    DAY = "day"
    MONTH = "month"
    TIME = "time"
    DURATION = "duration"


WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday"]
_ALL_DAYS = WEEKDAYS + ["Saturday", "Sunday"]  # datetime.weekday() order

MONTHS = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]

PRE_MARKET_LABEL = "04:00 - 08:00"
_PRE_MARKET_HOURS = range(4, 8)

# (upper bound in minutes, label); the first bound is exclusive, the rest inclusive
DURATION_BUCKETS: list[tuple[float, str]] = [
    (1, "< 1m"),
    (2, "1m - 2m"),
    (5, "2m - 5m"),
    (10, "5m - 10m"),
    (30, "10m - 30m"),
    (60, "30m - 1h"),
    (120, "1h - 2h"),
    (240, "2h - 4h"),
]
LONG_DURATION_LABEL = "> 4h"
UNKNOWN_DURATION_LABEL = "Unknown"


def _hour_labels() -> list[str]:
    labels = []
    for hour in range(24):
        if hour in _PRE_MARKET_HOURS:
            if PRE_MARKET_LABEL not in labels:
                labels.append(PRE_MARKET_LABEL)
        else:
            labels.append(f"{hour:02d}:00")
    return labels


HOURS = _hour_labels()
DURATIONS = [label for _, label in DURATION_BUCKETS] + [LONG_DURATION_LABEL]


def bucket_labels(bucket_type: BucketType | str) -> list[str]:
    """Every label for a bucket type, in display order."""
    bucket_type = BucketType(bucket_type)
    if bucket_type == BucketType.DAY:
        return list(WEEKDAYS)
    if bucket_type == BucketType.MONTH:
        return list(MONTHS)
    if bucket_type == BucketType.TIME:
        return list(HOURS)
    return list(DURATIONS)


def duration_label(minutes: float) -> str:
    if minutes < DURATION_BUCKETS[0][0]:
        return DURATION_BUCKETS[0][1]
    for upper, label in DURATION_BUCKETS[1:]:
        if minutes <= upper:
            return label
    return LONG_DURATION_LABEL


def bucket_key(trade: TradeRecord, bucket_type: BucketType | str) -> str | None:
    """The bucket a trade belongs to, or None when it has no place in this grouping.

    Weekend entries have no weekday bucket. Open-ended trades map to the
    "Unknown" duration, which is not part of the padded output.
    """
    bucket_type = BucketType(bucket_type)
    entry = trade.entry_time

    if bucket_type == BucketType.DAY:
        day = _ALL_DAYS[entry.weekday()]
        return day if day in WEEKDAYS else None
    if bucket_type == BucketType.MONTH:
        return MONTHS[entry.month - 1]
    if bucket_type == BucketType.TIME:
        if entry.hour in _PRE_MARKET_HOURS:
            return PRE_MARKET_LABEL
        return f"{entry.hour:02d}:00"

    minutes = trade.duration_minutes
    if minutes is None:
        return UNKNOWN_DURATION_LABEL
    return duration_label(minutes)


def group_by_bucket(
    trades: Sequence[TradeRecord], bucket_type: BucketType | str
) -> dict[str, list[TradeRecord]]:
    """Map each padded label to its trades (possibly empty)."""
    labels = bucket_labels(bucket_type)
    grouped: dict[str, list[TradeRecord]] = defaultdict(list)
    for t in trades:
        key = bucket_key(t, bucket_type)
        if key is not None:
            grouped[key].append(t)
    return {label: grouped.get(label, []) for label in labels}


def avg_loss_run(trades: Sequence[TradeRecord], commission_per_unit: float = 0.0) -> float:
    """Average summed loss of each consecutive run of losing trades (<= 0).

    Runs are taken in close order. A non-losing trade ends a run; a run still
    open at the end of the list counts too.
    """
    run_totals = []
    current = 0.0
    in_run = False
    for t in sort_by_close(trades):
        pnl = calculate_pnl(t, commission_per_unit)
        if pnl < 0:
            current += pnl
            in_run = True
        elif in_run:
            run_totals.append(current)
            current = 0.0
            in_run = False
    if in_run:
        run_totals.append(current)
    return sum(run_totals) / len(run_totals) if run_totals else 0.0


def build_row(
    label: str, sort_index: int, trades: Sequence[TradeRecord], commission_per_unit: float = 0.0
) -> AggregateRow:
    """Aggregate one bucket's trades into a report row."""
    count = len(trades)
    if count == 0:
        return AggregateRow(label=label, sort_index=sort_index)

    avg_win, avg_loss = avg_win_loss(trades, commission_per_unit)
    total_r = sum(calculate_r_multiple(t, commission_per_unit) or 0.0 for t in trades)

    return AggregateRow(
        label=label,
        sort_index=sort_index,
        count=count,
        net_pnl=net_pnl(trades, commission_per_unit),
        win_rate=win_rate(trades, commission_per_unit),
        profit_factor=profit_factor(trades, commission_per_unit),
        avg_win=avg_win,
        avg_loss=avg_loss,
        total_r=total_r,
        avg_r=total_r / count,
        max_drawdown=max_drawdown(trades, commission_per_unit),
        avg_drawdown=avg_loss_run(trades, commission_per_unit),
        avg_win_loss_rr=abs(avg_win / avg_loss) if avg_loss != 0 else 0.0,
        avg_actual_risk_pct=avg_actual_risk_pct(trades, commission_per_unit),
    )


def aggregate_by_bucket(
    trades: Sequence[TradeRecord],
    bucket_type: BucketType | str,
    commission_per_unit: float = 0.0,
) -> list[AggregateRow]:
    """One row per label of `bucket_type`, computed over the closed trades only."""
    grouped = group_by_bucket(closed_trades(trades), bucket_type)
    return [
        build_row(label, index, group, commission_per_unit)
        for index, (label, group) in enumerate(grouped.items())
    ]
