"""
Tick engine: one stochastic slice of café activity for ``now``.

The slice is a pure function of its inputs and of the random generator
it is handed; nothing is read from or written to the store here.
"""

from datetime import datetime

import numpy as np

from CafeOPS.core.results import DrinkMix, TickSlice
from CafeOPS.domain.scenario import CAFE_CONFIG, ScenarioConfig
from CafeOPS.rules.costing import (
    cost_of_goods,
    draw_revenue,
    draw_tips,
    fixed_cost_per_tick,
    payment_fees,
    split_drink_mix,
)
from CafeOPS.rules.demand import discretize, expected_transactions, rush_at
from CafeOPS.rules.labour import owner_salary_per_tick, staffing, wage_cost


def simulate_tick(
    now: datetime,
    scenario: str,
    day_modifier: float,
    include_owner_salary: bool,
    rng: np.random.Generator,
    config: ScenarioConfig = CAFE_CONFIG,
) -> TickSlice:
    """Simulate one 15-minute tick of café activity.

    Steps:
    1. Expected volume from the rush curve, weekday base rate, scenario
       multiplier, day modifier and noise (0 when closed).
    2. Discretization (floor + Bernoulli on the remainder).
    3. Revenue from per-transaction ticket draws.
    4-5. Cost of goods and payment fees.
    6. Tips, boosted during rushes.
    7. Wages of the staff on duty, plus the owner's share if enabled.
    8. Fixed-cost allocation.
    9. Profit = revenue - cogs - fees - fixed - (wages + tips + owner).
    10. Drink-mix split of the transactions.

    Args:
        now: Local instant of the tick.
        scenario: Scenario name, key of ``config.scenarios``.
        day_modifier: Multiplier fixed for the business day.
        include_owner_salary: Adds the owner's daily salary share to wages.
        rng: Random source; seed it for reproducible slices.
        config: Parameter bundle.

    Returns:
        TickSlice with every metric populated.
    """
    expected = expected_transactions(now, scenario, day_modifier, rng, config)
    transactions = discretize(expected, rng)

    revenue = draw_revenue(now, transactions, rng, config)
    cogs = cost_of_goods(revenue, config)
    fees = payment_fees(revenue, transactions, config)
    tips = draw_tips(transactions, rush_at(now), rng, config)

    wages = wage_cost(staffing(now, config), config)
    owner = owner_salary_per_tick(now, include_owner_salary, config)
    fixed = fixed_cost_per_tick(now, config)

    profit = revenue - cogs - fees - fixed - (wages + tips + owner)

    return TickSlice(
        transactions=transactions,
        revenue=revenue,
        cogs=cogs,
        fees=fees,
        wages=wages + owner,
        tips=tips,
        fixed=fixed,
        profit=profit,
        drink_mix=DrinkMix(**split_drink_mix(transactions, config.drink_mix)),
    )
