import doctest

import numpy as np
import pytest

from CafeOPS import utils as utils_module
from CafeOPS.core import clock as clock_module
from CafeOPS.rules import costing as costing_module
from CafeOPS.rules import labour as labour_module
from CafeOPS.domain.scenario import DrinkMixModel
from CafeOPS.domain.staff import Staffing
from CafeOPS.rules.costing import (
    cost_of_goods,
    draw_revenue,
    draw_tips,
    fixed_cost_per_tick,
    payment_fees,
    split_drink_mix,
)
from CafeOPS.rules.demand import (
    RUSH_FLOOR,
    discretize,
    draw_day_modifier,
    expected_transactions,
    rush_factor,
)
from CafeOPS.rules.labour import owner_salary_per_tick, staffing, wage_cost
from tests.conftest import local

# ---------- demand ----------


def test_rush_curve_shape():
    peak = rush_factor(8 * 60)
    noon = rush_factor(12 * 60)
    afternoon = rush_factor(15 * 60)
    assert peak == pytest.approx(1.55, abs=0.01)
    assert noon < afternoon < peak
    assert rush_factor(8 * 60, weekend=True) == pytest.approx(peak * 0.92)


def test_rush_curve_is_floored():
    assert all(rush_factor(m) >= RUSH_FLOOR for m in range(0, 24 * 60, 5))


def test_expected_transactions_zero_when_closed(rng):
    assert expected_transactions(local(2026, 10, 21, 21, 0), "Base", 1.0, rng) == 0.0


def test_expected_transactions_scales_with_scenario(config):
    now = local(2026, 10, 21, 8, 0)
    base = expected_transactions(now, "Base", 1.0, np.random.default_rng(5), config)
    optimistic = expected_transactions(now, "Optimistic", 1.0, np.random.default_rng(5), config)
    assert optimistic == pytest.approx(base * 1.26)
    # 11 tx/tick x 1.55 rush x noise in [0.9, 1.15)
    assert 11 * 1.5 * 0.9 <= base <= 11 * 1.56 * 1.15


def test_expected_transactions_unknown_scenario(rng):
    with pytest.raises(ValueError):
        expected_transactions(local(2026, 10, 21, 8, 0), "Moonshot", 1.0, rng)


def test_discretize_preserves_mean():
    rng = np.random.default_rng(42)
    draws = [discretize(2.3, rng) for _ in range(20_000)]
    assert set(draws) == {2, 3}
    assert np.mean(draws) == pytest.approx(2.3, abs=0.02)


def test_discretize_whole_numbers(rng):
    assert discretize(0.0, rng) == 0
    assert discretize(4.0, rng) == 4


def test_day_modifier_range(rng, config):
    low, high = config.day_modifier_range
    values = [draw_day_modifier(rng, config) for _ in range(500)]
    assert all(low <= v < high for v in values)


# ---------- labour ----------


def test_staffing_schedule():
    assert staffing(local(2026, 10, 21, 5, 0)) == Staffing(0, 0)
    assert staffing(local(2026, 10, 21, 6, 30)) == Staffing(1, 1)
    assert staffing(local(2026, 10, 21, 7, 29)) == Staffing(1, 1)
    assert staffing(local(2026, 10, 21, 7, 30)) == Staffing(2, 1)
    assert staffing(local(2026, 10, 21, 18, 59)) == Staffing(2, 1)
    assert staffing(local(2026, 10, 21, 19, 0)) == Staffing(1, 1)
    assert staffing(local(2026, 10, 24, 15, 30)) == Staffing(1, 1)  # Saturday closes 16:00


def test_wage_cost_per_quarter_hour():
    assert wage_cost(Staffing(2, 1)) == pytest.approx((2 * 13.5 + 23.0) * 0.25)
    assert wage_cost(Staffing(1, 1)) == pytest.approx((13.5 + 23.0) * 0.25)
    assert wage_cost(Staffing(0, 0)) == 0.0


def test_owner_salary_per_tick():
    open_now = local(2026, 10, 21, 10, 0)
    assert owner_salary_per_tick(open_now, True) == pytest.approx(210 / 54)
    assert owner_salary_per_tick(open_now, False) == 0.0
    assert owner_salary_per_tick(local(2026, 10, 21, 22, 0), True) == 0.0


# ---------- costing ----------


def test_cogs_and_fees():
    assert cost_of_goods(100.0) == pytest.approx(30.0)
    assert payment_fees(100.0, 10) == pytest.approx(100.0 * 0.029 + 10 * 0.30)


def test_revenue_bounds(rng, config):
    now = local(2026, 10, 21, 9, 0)
    revenue = draw_revenue(now, 50, rng, config)
    assert 50 * (8.5 - 2.0) <= revenue <= 50 * (8.5 + 2.0)
    assert draw_revenue(now, 0, rng, config) == 0.0


def test_revenue_ticket_floor(rng, config):
    wide = config.model_copy(update={"ticket_variance": 20.0})
    revenue = draw_revenue(local(2026, 10, 21, 9, 0), 200, rng, wide)
    assert revenue >= 200 * config.min_ticket


def test_weekend_ticket_is_higher(config):
    weekday = draw_revenue(local(2026, 10, 21, 9), 100, np.random.default_rng(3), config)
    weekend = draw_revenue(local(2026, 10, 24, 9), 100, np.random.default_rng(3), config)
    assert weekend - weekday == pytest.approx(100 * (9.25 - 8.5))


def test_tips(rng):
    assert draw_tips(0, 2.0, rng) == 0.0
    calm = draw_tips(10, 1.0, np.random.default_rng(9))
    rush = draw_tips(10, 1.5, np.random.default_rng(9))
    assert 10 * 0.75 <= calm <= 10 * 1.75
    assert rush == pytest.approx(calm * 1.15)


def test_fixed_cost_spread_over_open_ticks(config):
    now = local(2026, 10, 21, 9, 0)
    per_tick = fixed_cost_per_tick(now, config)
    assert per_tick == pytest.approx(config.monthly_fixed_total / 31 / 54)
    assert per_tick * 54 * 31 == pytest.approx(config.monthly_fixed_total)
    assert fixed_cost_per_tick(local(2026, 10, 21, 23, 0), config) == 0.0


def test_drink_mix_sums_to_transactions():
    assert split_drink_mix(0) == {"coffee": 0, "tea": 0, "other": 0}
    for transactions in range(1, 150):
        mix = split_drink_mix(transactions)
        assert mix["coffee"] + mix["tea"] + mix["other"] == transactions
        assert min(mix.values()) >= 0


def test_drink_mix_remainder_with_skewed_ratios():
    skewed = DrinkMixModel(coffee=0.55, tea=0.45, other=0.0)
    for n in range(0, 50):
        mix = split_drink_mix(n, skewed)
        assert sum(mix.values()) == n
        assert mix["other"] >= 0


def test_drink_mix_rejects_bad_proportions():
    with pytest.raises(ValueError):
        DrinkMixModel(coffee=0.7, tea=0.2, other=0.2)


@pytest.mark.parametrize("module", [labour_module, costing_module, clock_module, utils_module])
def test_docstring_examples(module):
    result = doctest.testmod(module)
    assert result.attempted > 0
    assert result.failed == 0
