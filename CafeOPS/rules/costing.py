"""
Cost rules of a tick: ticket prices, cost of goods, payment fees, tips,
fixed-cost allocation and the drink-mix split.

All amounts are float dollars; no currency rounding happens here.
"""

import math
from datetime import datetime
from typing import Dict

import numpy as np

from CafeOPS.core.clock import days_in_month, is_open, is_weekend, ticks_per_business_day
from CafeOPS.domain.scenario import CAFE_CONFIG, DrinkMixModel, ScenarioConfig


def base_ticket(now: datetime, config: ScenarioConfig = CAFE_CONFIG) -> float:
    return config.avg_ticket_weekend if is_weekend(now) else config.avg_ticket_weekday


def draw_revenue(
    now: datetime,
    transactions: int,
    rng: np.random.Generator,
    config: ScenarioConfig = CAFE_CONFIG,
) -> float:
    """Sum of ``transactions`` ticket prices.

    Each ticket is the base ticket plus a uniform variance in
    ``[-ticket_variance, +ticket_variance]``, floored at ``min_ticket``.
    """
    if transactions <= 0:
        return 0.0
    variance = rng.uniform(-config.ticket_variance, config.ticket_variance, size=transactions)
    tickets = np.maximum(config.min_ticket, base_ticket(now, config) + variance)
    return float(tickets.sum())


def cost_of_goods(revenue: float, config: ScenarioConfig = CAFE_CONFIG) -> float:
    return revenue * config.cogs_rate


def payment_fees(revenue: float, transactions: int, config: ScenarioConfig = CAFE_CONFIG) -> float:
    """Card processing: percentage of revenue plus a fixed fee per swipe."""
    return revenue * config.fee_percent + transactions * config.fee_fixed


def draw_tips(
    transactions: int,
    rush: float,
    rng: np.random.Generator,
    config: ScenarioConfig = CAFE_CONFIG,
) -> float:
    """Per-transaction tip drawn once for the tick, boosted during rushes."""
    if transactions == 0:
        return 0.0
    tips = config.tips
    per_transaction = rng.uniform(tips.base_min, tips.base_max)
    if rush > tips.rush_threshold:
        per_transaction *= tips.rush_multiplier
    return float(per_transaction) * transactions


def fixed_cost_per_tick(now: datetime, config: ScenarioConfig = CAFE_CONFIG) -> float:
    """Monthly fixed costs spread evenly over every open tick of the month.

    Closed ticks carry no allocation.

    Example:
        3 560 $/month, 31 days, 54 ticks/day -> ~2.13 $ per open tick.
    """
    if not is_open(now, config):
        return 0.0
    return config.monthly_fixed_total / days_in_month(now) / ticks_per_business_day(now, config)


def _round_half_up(x: float) -> int:
    return int(math.floor(x + 0.5))


def split_drink_mix(transactions: int, mix: DrinkMixModel = CAFE_CONFIG.drink_mix) -> Dict[str, int]:
    """Split a transaction count into coffee / tea / other.

    Coffee and tea are rounded (half-up), other takes the exact remainder,
    so the three parts always sum to ``transactions``.

    >>> split_drink_mix(7)
    {'coffee': 5, 'tea': 1, 'other': 1}
    """
    total = max(0, int(transactions))
    coffee = min(total, _round_half_up(total * mix.coffee))
    tea = min(total - coffee, _round_half_up(total * mix.tea))
    return {"coffee": coffee, "tea": tea, "other": total - coffee - tea}
