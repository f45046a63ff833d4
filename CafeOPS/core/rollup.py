"""
Rollups and break-even projection.

Pure aggregation math shared by the service (dashboard metrics) and the
store (rebuilding rollups from the event log):
- sums of tick events, per day and all time,
- remaining capital and recovery percentage,
- average daily profit with a cold-start projection,
- break-even ETA and the intraday cumulative series.
"""

import math
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional, Sequence

from CafeOPS.core.clock import format_clock_label, to_local
from CafeOPS.core.results import BreakEven, SeriesPoint
from CafeOPS.domain.records import METRIC_FIELDS, MetricTotals, TickEvent
from CafeOPS.domain.scenario import CAFE_CONFIG, ScenarioConfig


def add_totals(total: MetricTotals, delta: MetricTotals) -> MetricTotals:
    """Elementwise sum of two sets of metrics (keeps the type of ``total``)."""
    update = {name: getattr(total, name) + getattr(delta, name) for name in METRIC_FIELDS}
    return total.model_copy(update=update)


def sum_events(events: Iterable[MetricTotals]) -> MetricTotals:
    """Sum of the deltas of ``events``; the order of application does not matter."""
    total = MetricTotals()
    for event in events:
        total = add_totals(total, event)
    return total


def sum_events_by_date(events: Iterable[TickEvent]) -> Dict[str, MetricTotals]:
    """Group the event log by business date and sum each group."""
    by_date: Dict[str, MetricTotals] = {}
    for event in events:
        by_date[event.business_date] = add_totals(
            by_date.get(event.business_date, MetricTotals()), event
        )
    return by_date


# ------------------------------
# Capital recovery
# ------------------------------


def remaining_capital(initial_capital_cost: float, cumulative_profit: float) -> float:
    """Capital still to recover, clamped at 0."""
    return max(0.0, initial_capital_cost - cumulative_profit)


def recovery_percent(initial_capital_cost: float, remaining: float) -> float:
    return (initial_capital_cost - remaining) / initial_capital_cost * 100.0


def projected_daily_profit(scenario: str, config: ScenarioConfig = CAFE_CONFIG) -> float:
    """Cold-start estimate of the daily profit, before any history exists.

    Runs a fixed nominal schedule (``projection.nominal_ticks`` ticks of
    ``projection.tick_revenue`` revenue scaled by the scenario multiplier,
    minus cost of goods, fees, labour and fixed costs) and floors the result.
    """
    p = config.projection
    mult = config.scenario_multiplier(scenario)
    per_tick = (
        p.tick_revenue * mult
        - p.tick_revenue * config.cogs_rate
        - p.tick_revenue * config.fee_percent
        - p.tick_labour
        - p.tick_fixed
    )
    return max(p.floor, per_tick * p.nominal_ticks / p.divisor)


def average_daily_profit(
    recent_profits: Sequence[float],
    scenario: str,
    config: ScenarioConfig = CAFE_CONFIG,
) -> float:
    """Mean of the recent daily profits, or the projection when history is too short."""
    if len(recent_profits) >= config.break_even.min_history_days:
        return float(sum(recent_profits)) / len(recent_profits)
    return projected_daily_profit(scenario, config)


def break_even(
    remaining: float,
    avg_daily_profit: float,
    today: date,
    config: ScenarioConfig = CAFE_CONFIG,
) -> BreakEven:
    """Break-even projection.

    Args:
        remaining: Capital still to recover (>= 0).
        avg_daily_profit: Average daily profit used for the projection.
        today: Date the ETA is counted from.
        config: Parameter bundle (payback horizon).

    Returns:
        BreakEven with ``eta_days = ceil(remaining / avg)`` when the average
        is positive; otherwise ``eta_days`` and ``eta_date`` are None and
        ``on_track`` is False.

    Example:
        remaining=2400, avg=120 -> eta_days=20.
    """
    on_track = avg_daily_profit > 0
    eta_days: Optional[int] = None
    eta_date: Optional[str] = None
    if on_track:
        eta_days = math.ceil(remaining / avg_daily_profit)
        eta_date = (today + timedelta(days=eta_days)).isoformat()
    return BreakEven(
        eta_days=eta_days,
        eta_date=eta_date,
        avg_daily_profit=avg_daily_profit,
        on_track=on_track,
        needed_daily_for_12_months=remaining / config.break_even.payback_days,
    )


# ------------------------------
# Intraday series
# ------------------------------


def intraday_series(
    events: Iterable[TickEvent], config: ScenarioConfig = CAFE_CONFIG
) -> List[SeriesPoint]:
    """Running totals of revenue, profit and transactions over the day's ordered events."""
    series: List[SeriesPoint] = []
    revenue = profit = 0.0
    transactions = 0
    for event in events:
        revenue += event.revenue
        profit += event.profit
        transactions += event.transactions
        local_ts = to_local(datetime.fromisoformat(event.ts), config)
        series.append(
            SeriesPoint(
                ts=format_clock_label(local_ts),
                revenue=revenue,
                profit=profit,
                transactions=transactions,
            )
        )
    return series
