"""Trade metrics engine.

Pure functions over lists of TradeRecord. No I/O, no shared state: every
report is recomputed from the (trades, commission_per_unit) pair it is given.
"""

from tradejournal.services.metrics.buckets import BucketType, aggregate_by_bucket
from tradejournal.services.metrics.calculations import (
    calculate_pnl,
    calculate_r_multiple,
    get_trade_metrics,
)
from tradejournal.services.metrics.cross import CrossDimension, cross_tabulate
from tradejournal.services.metrics.multiplier import resolve_multiplier
from tradejournal.services.metrics.types import (
    AggregateRow,
    TradeDirection,
    TradeMetrics,
    TradeRecord,
    TradeStatus,
)

__all__ = [
    "AggregateRow",
    "BucketType",
    "CrossDimension",
    "TradeDirection",
    "TradeMetrics",
    "TradeRecord",
    "TradeStatus",
    "aggregate_by_bucket",
    "calculate_pnl",
    "calculate_r_multiple",
    "cross_tabulate",
    "get_trade_metrics",
    "resolve_multiplier",
]
