"""Per-trade P&L, R-multiple, excursion and risk figures.

All money values are in account currency (points * quantity * multiplier).
Commission follows one either/or policy everywhere: a positive global
per-unit rate replaces the trade's recorded commission entirely.
"""

from tradejournal.services.metrics.multiplier import resolve_multiplier
from tradejournal.services.metrics.types import (
    TradeDirection,
    TradeMetrics,
    TradeRecord,
    TradeStatus,
    round_half_up,
)

_STATUS_WEIGHTS: dict[TradeStatus, int] = {
    TradeStatus.WIN: 5,
    TradeStatus.SMALL_WIN: 4,
    TradeStatus.BREAK_EVEN: 3,
    TradeStatus.SMALL_LOSS: 2,
    TradeStatus.LOSS: 1,
}


def status_weight(status: TradeStatus | str) -> int:
    """Sort weight for a status label, best outcome highest. Unknown labels are 0."""
    try:
        return _STATUS_WEIGHTS[TradeStatus(status)]
    except ValueError:
        return 0


def total_commission(trade: TradeRecord, commission_per_unit: float = 0.0) -> float:
    """Commission charged on the trade under the global override policy."""
    if commission_per_unit > 0:
        return trade.quantity * commission_per_unit
    return trade.commission or 0.0


def _points_to_money(trade: TradeRecord, points: float) -> float:
    return points * trade.quantity * resolve_multiplier(trade.symbol)


def calculate_pnl(trade: TradeRecord, commission_per_unit: float = 0.0) -> float:
    """Net realized P&L, rounded to cents. Open and zero-size trades are 0."""
    if trade.exit_price is None or trade.quantity <= 0:
        return 0.0

    raw = _points_to_money(trade, trade.exit_price - trade.entry_price)
    gross = raw if trade.direction == TradeDirection.LONG else -raw
    return round_half_up(gross - total_commission(trade, commission_per_unit))


def initial_risk_amount(trade: TradeRecord, commission_per_unit: float = 0.0) -> float:
    """Money lost if the initial stop is hit, including commission. 0 without a stop."""
    if trade.initial_stop_loss is None or trade.quantity <= 0:
        return 0.0
    distance = abs(trade.entry_price - trade.initial_stop_loss)
    if distance == 0:
        return 0.0
    return _points_to_money(trade, distance) + total_commission(trade, commission_per_unit)


def calculate_r_multiple(trade: TradeRecord, commission_per_unit: float = 0.0) -> float | None:
    """Net P&L as a multiple of initial risk, rounded to 2 decimals.

    None when the trade is open, has no stop loss, or the stop sits on the entry.
    """
    if trade.exit_price is None:
        return None
    risk = initial_risk_amount(trade, commission_per_unit)
    if risk <= 0:
        return None
    return round_half_up(calculate_pnl(trade, commission_per_unit) / risk)


def get_trade_metrics(trade: TradeRecord, commission_per_unit: float = 0.0) -> TradeMetrics:
    """Initial vs actual risk and best-case outcome for one trade.

    Missing excursion prices fall back to the entry price, so a trade with
    no recorded extremes has zero actual risk and zero best P&L. A zero or
    negative quantity gives all-zero metrics.
    """
    if trade.quantity <= 0:
        return TradeMetrics(0.0, 0.0, 0.0, 0.0, 0.0)

    entry = trade.entry_price
    initial_risk = initial_risk_amount(trade, commission_per_unit)

    if trade.direction == TradeDirection.LONG:
        adverse = entry - (trade.lowest_price_reached if trade.lowest_price_reached is not None else entry)
        best_exit = _first_defined(trade.best_exit_price, trade.highest_price_reached, entry)
        best_points = best_exit - entry
    else:
        adverse = (trade.highest_price_reached if trade.highest_price_reached is not None else entry) - entry
        best_exit = _first_defined(trade.best_exit_price, trade.lowest_price_reached, entry)
        best_points = entry - best_exit

    actual_risk = max(0.0, _points_to_money(trade, adverse))
    best_pnl = _points_to_money(trade, best_points)

    return TradeMetrics(
        initial_risk_amount=initial_risk,
        actual_risk_amount=actual_risk,
        actual_risk_percent=actual_risk / initial_risk * 100 if initial_risk > 0 else 0.0,
        best_pnl=best_pnl,
        best_rr=best_pnl / initial_risk if initial_risk > 0 else 0.0,
    )


def calculate_net_mfe(trade: TradeRecord, commission_per_unit: float = 0.0) -> float:
    """Max favorable excursion in money, net of commission. 0 for zero-size trades."""
    if trade.quantity <= 0:
        return 0.0
    if trade.direction == TradeDirection.LONG:
        extreme = trade.highest_price_reached
        points = extreme - trade.entry_price if extreme is not None else 0.0
    else:
        extreme = trade.lowest_price_reached
        points = trade.entry_price - extreme if extreme is not None else 0.0
    return round_half_up(_points_to_money(trade, points) - total_commission(trade, commission_per_unit))


def calculate_net_mae(trade: TradeRecord, commission_per_unit: float = 0.0) -> float:
    """Max adverse excursion as the P&L at the worst point (usually negative), net of commission."""
    if trade.quantity <= 0:
        return 0.0
    if trade.direction == TradeDirection.LONG:
        extreme = trade.lowest_price_reached
        points = extreme - trade.entry_price if extreme is not None else 0.0
    else:
        extreme = trade.highest_price_reached
        points = trade.entry_price - extreme if extreme is not None else 0.0
    return round_half_up(_points_to_money(trade, points) - total_commission(trade, commission_per_unit))


def _first_defined(*values: float | None) -> float:
    for v in values:
        if v is not None:
            return v
    raise ValueError("no defined value")
