"""
Demand model: how many transactions a tick is expected to carry.

Rules implemented:
- Smooth rush curve over the minute of day: a morning peak, a smaller
  afternoon bump and a midday dip, floored so the shop is never empty.
- Weekends are slightly flatter (tilt).
- Expected volume = base rate of the weekday class x rush x scenario
  multiplier x day modifier x bounded noise.
- Fractional volume is discretized with a Bernoulli trial on the
  remainder so the long-run mean is preserved.
"""

from datetime import datetime

import numpy as np

from CafeOPS.core.clock import is_open, is_weekend, minute_of_day, weekday_class
from CafeOPS.domain.scenario import CAFE_CONFIG, ScenarioConfig

# ------------------------------
# Rush curve parameters (minutes of day)
# ------------------------------

RUSH_BASELINE = 0.55
MORNING_PEAK = (8 * 60, 100.0, 1.0)  # (center, width, weight)
AFTERNOON_BUMP = (15 * 60, 140.0, 0.45)
MIDDAY_DIP = (12 * 60, 100.0, 0.18)
RUSH_FLOOR = 0.2
WEEKEND_TILT = 0.92


def _bump(minute: float, center: float, width: float) -> float:
    return float(np.exp(-(((minute - center) / width) ** 2)))


def rush_factor(minute: int, weekend: bool = False) -> float:
    """Relative demand intensity at minute ``minute`` of the day.

    Args:
        minute: Minute of day (0-1439).
        weekend: Applies the weekend tilt when True.

    Returns:
        Curve value, never below ``RUSH_FLOOR``. Around 1.55 at the 8:00
        weekday peak, around 0.46 in the noon dip.
    """
    center, width, weight = MORNING_PEAK
    morning = weight * _bump(minute, center, width)
    center, width, weight = AFTERNOON_BUMP
    afternoon = weight * _bump(minute, center, width)
    center, width, weight = MIDDAY_DIP
    dip = weight * _bump(minute, center, width)
    tilt = WEEKEND_TILT if weekend else 1.0
    return max(RUSH_FLOOR, (RUSH_BASELINE + morning + afternoon - dip) * tilt)


def rush_at(now: datetime) -> float:
    return rush_factor(minute_of_day(now), is_weekend(now))


def expected_transactions(
    now: datetime,
    scenario: str,
    day_modifier: float,
    rng: np.random.Generator,
    config: ScenarioConfig = CAFE_CONFIG,
) -> float:
    """Fractional number of transactions expected for the tick at ``now``.

    Zero when the shop is closed; the noise factor is only drawn when open.
    """
    if not is_open(now, config):
        return 0.0
    base = config.base_transactions[weekday_class(now)]
    low, high = config.noise_range
    noise = rng.uniform(low, high)
    expected = base * rush_at(now) * config.scenario_multiplier(scenario) * day_modifier * noise
    return max(0.0, float(expected))


def discretize(expected: float, rng: np.random.Generator) -> int:
    """Integer floor plus one Bernoulli trial on the fractional remainder."""
    whole = int(np.floor(expected))
    fraction = expected - whole
    return whole + (1 if rng.random() < fraction else 0)


def draw_day_modifier(rng: np.random.Generator, config: ScenarioConfig = CAFE_CONFIG) -> float:
    """Day-to-day demand variance, drawn once when a business day is created."""
    low, high = config.day_modifier_range
    return float(rng.uniform(low, high))
