# CafeOPS/rules/labour.py
"""Coarse staffing schedule and labour cost per tick."""

from datetime import datetime

from CafeOPS.core.clock import is_open, minute_of_day, open_window, ticks_per_business_day
from CafeOPS.domain.scenario import CAFE_CONFIG, ScenarioConfig
from CafeOPS.domain.staff import CLOSED, EDGE_SHIFT, FULL_SHIFT, Staffing

# Minutes after opening / before closing covered by the reduced edge shift
EDGE_WINDOW_MINUTES = 60


def staffing(now: datetime, config: ScenarioConfig = CAFE_CONFIG) -> Staffing:
    """Staff on duty at ``now``.

    1 barista + 1 lead during the first and last open hour, 2 baristas +
    1 lead otherwise, nobody when closed.

    Example:
        >>> from datetime import datetime
        >>> staffing(datetime(2026, 10, 21, 6, 45))   # Wednesday, opens 06:30
        Staffing(baristas=1, leads=1)
        >>> staffing(datetime(2026, 10, 21, 10, 0))
        Staffing(baristas=2, leads=1)
    """
    if not is_open(now, config):
        return CLOSED
    window = open_window(now, config)
    minute = minute_of_day(now)
    edge = (
        minute < window.open_minute + EDGE_WINDOW_MINUTES
        or minute >= window.close_minute - EDGE_WINDOW_MINUTES
    )
    return EDGE_SHIFT if edge else FULL_SHIFT


def wage_cost(team: Staffing, config: ScenarioConfig = CAFE_CONFIG) -> float:
    """Hourly team cost prorated to one tick (x0.25 for 15-minute ticks)."""
    return team.hourly_cost(config.wages) * (config.tick_minutes / 60.0)


def owner_salary_per_tick(
    now: datetime, include_owner_salary: bool, config: ScenarioConfig = CAFE_CONFIG
) -> float:
    """Owner's daily salary spread over the open ticks of the day."""
    if not include_owner_salary or not is_open(now, config):
        return 0.0
    return config.owner_salary_daily / ticks_per_business_day(now, config)
