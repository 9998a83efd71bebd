"""Composite 0-100 performance score.

Six components, each scored 0-100, then weighted:

    Win %          15%   win_rate / 60 * 100, capped at 100
    Profit Factor  25%   piecewise map (see _ratio_score)
    RR             20%   avg win / |avg loss|, same map
    Recovery       10%   net P&L / max drawdown, range table
    Max DD         20%   100 - 25x - 125x^2, x = |max drawdown| / goal
    Consistency    10%   100 - stdev(non-zero P&Ls) / net P&L * 100
"""

import math
from collections.abc import Sequence
from dataclasses import dataclass, field

from tradejournal.services.metrics.aggregates import (
    RECOVERY_FACTOR_CAP,
    avg_win_loss,
    closed_trades,
    max_drawdown,
    net_pnl,
    profit_factor,
    win_rate,
)
from tradejournal.services.metrics.calculations import calculate_pnl
from tradejournal.services.metrics.types import TradeRecord, round_half_up

WEIGHTS: dict[str, float] = {
    "Win %": 0.15,
    "Profit Factor": 0.25,
    "RR": 0.20,
    "Recovery": 0.10,
    "Max DD": 0.20,
    "Consistency": 0.10,
}

# (min, max, score at min, score at max), highest band first
_RECOVERY_BANDS: list[tuple[float, float, float, float]] = [
    (3.5, 9999, 100, 100),
    (3.0, 3.49, 70, 99),
    (2.5, 2.99, 60, 69),
    (2.0, 2.49, 50, 59),
    (1.5, 1.99, 30, 49),
    (1.0, 1.49, 1, 29),
]


@dataclass
class ScoreBreakdown:
    score: float = 0.0
    components: dict[str, float] = field(default_factory=lambda: {name: 0.0 for name in WEIGHTS})

    def to_dict(self) -> dict:
        return {
            "score": self.score,
            "details": [
                {"subject": name, "value": value, "full_mark": 100}
                for name, value in self.components.items()
            ],
        }


def _ratio_score(x: float) -> float:
    if x >= 2.6:
        return 100.0
    if x >= 2.0:
        return (100 / 3) * x + 40 / 3
    if x >= 1.0:
        return 50 * x - 20
    if x >= 0.5:
        return 60 * x - 30
    return 0.0


def _interpolate(x: float, lo: float, hi: float, score_lo: float, score_hi: float) -> float:
    if hi == lo:
        return score_hi
    return score_lo + (x - lo) / (hi - lo) * (score_hi - score_lo)


def _recovery_score(x: float) -> float:
    for lo, hi, score_lo, score_hi in _RECOVERY_BANDS:
        if lo <= x <= hi:
            return _interpolate(x, lo, hi, score_lo, score_hi)
    # Values between band edges (e.g. 3.495) or beyond the top band
    if x >= _RECOVERY_BANDS[0][1]:
        return 100.0
    return 0.0


def _drawdown_score(max_dd: float, goal: float) -> float:
    if goal > 0:
        x = abs(max_dd) / goal
        return max(0.0, 100 - 25 * x - 125 * x ** 2)
    return 100.0 if max_dd == 0 else 0.0


def _consistency_score(pnls: list[float], total: float) -> float:
    if total <= 0:
        return 0.0
    relevant = [p for p in pnls if p != 0]
    if not relevant:
        return 0.0
    mean = sum(relevant) / len(relevant)
    std = math.sqrt(sum((p - mean) ** 2 for p in relevant) / len(relevant))
    return max(100 - std / total * 100, 0.0)


def performance_score(
    trades: Sequence[TradeRecord],
    commission_per_unit: float = 0.0,
    max_drawdown_goal: float = 0.0,
) -> ScoreBreakdown:
    """Score the closed trades in `trades`. No closed trades scores 0 everywhere."""
    closed = closed_trades(trades)
    if not closed:
        return ScoreBreakdown()

    pnls = [calculate_pnl(t, commission_per_unit) for t in closed]
    total = net_pnl(closed, commission_per_unit)
    max_dd = max_drawdown(closed, commission_per_unit)

    avg_win, avg_loss = avg_win_loss(closed, commission_per_unit)
    rr = avg_win / abs(avg_loss) if avg_loss != 0 else 0.0

    if max_dd != 0:
        recovery = total / abs(max_dd)
    else:
        recovery = RECOVERY_FACTOR_CAP if total > 0 else 0.0

    components = {
        "Win %": min(win_rate(closed, commission_per_unit) / 60 * 100, 100.0),
        "Profit Factor": _ratio_score(profit_factor(closed, commission_per_unit)),
        "RR": _ratio_score(rr),
        "Recovery": _recovery_score(recovery),
        "Max DD": _drawdown_score(max_dd, max_drawdown_goal),
        "Consistency": _consistency_score(pnls, total),
    }
    weighted = sum(components[name] * weight for name, weight in WEIGHTS.items())

    return ScoreBreakdown(
        score=round_half_up(weighted, 1),
        components={name: round_half_up(value, 1) for name, value in components.items()},
    )
