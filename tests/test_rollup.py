import random
from datetime import date

import pytest

from CafeOPS.core.rollup import (
    add_totals,
    average_daily_profit,
    break_even,
    intraday_series,
    projected_daily_profit,
    recovery_percent,
    remaining_capital,
    sum_events,
    sum_events_by_date,
)
from CafeOPS.domain.records import DailyRollup, MetricTotals, TickEvent


def _event(business_date, ts, transactions, revenue, profit, **extra):
    return TickEvent(
        business_date=business_date,
        ts=ts,
        transactions=transactions,
        revenue=revenue,
        profit=profit,
        **extra,
    )


@pytest.fixture
def events():
    return [
        _event("2026-10-21", "2026-10-21T13:00:00+00:00", 12, 104.0, 20.5, cogs=31.2, fees=6.6),
        _event("2026-10-21", "2026-10-21T13:15:00+00:00", 9, 80.25, 12.0, wages=12.5, tips=9.0),
        _event("2026-10-21", "2026-10-21T13:30:00+00:00", 0, 0.0, -14.6, fixed=2.1),
        _event("2026-10-22", "2026-10-22T12:00:00+00:00", 15, 130.0, 30.0),
    ]


def test_sum_is_order_independent(events):
    expected = sum_events(events)
    shuffled = list(events)
    for seed in range(5):
        random.Random(seed).shuffle(shuffled)
        total = sum_events(shuffled)
        assert total.transactions == expected.transactions
        for name in ("revenue", "cogs", "fees", "wages", "tips", "fixed", "profit"):
            assert getattr(total, name) == pytest.approx(getattr(expected, name))


def test_sum_matches_elementwise(events):
    total = sum_events(events)
    assert total.transactions == 36
    assert total.revenue == pytest.approx(314.25)
    assert total.profit == pytest.approx(47.9)
    assert total.cogs == pytest.approx(31.2)
    assert total.fixed == pytest.approx(2.1)


def test_add_totals_keeps_rollup_type():
    rollup = DailyRollup(business_date="2026-10-21", transactions=3, revenue=25.0)
    updated = add_totals(rollup, MetricTotals(transactions=2, revenue=10.0))
    assert isinstance(updated, DailyRollup)
    assert updated.business_date == "2026-10-21"
    assert (updated.transactions, updated.revenue) == (5, 35.0)


def test_sum_by_date(events):
    by_date = sum_events_by_date(events)
    assert set(by_date) == {"2026-10-21", "2026-10-22"}
    assert by_date["2026-10-21"].transactions == 21
    assert by_date["2026-10-22"].profit == pytest.approx(30.0)


def test_remaining_capital_is_clamped():
    assert remaining_capital(75_000, 1_000) == 74_000
    assert remaining_capital(75_000, 75_000) == 0.0
    assert remaining_capital(75_000, 1_000_000) == 0.0


def test_recovery_percent():
    assert recovery_percent(75_000, 60_000) == pytest.approx(20.0)
    assert recovery_percent(75_000, 0.0) == pytest.approx(100.0)


def test_break_even_from_history(config):
    avg = average_daily_profit([100, 120, 140], "Base", config)
    assert avg == pytest.approx(120.0)
    be = break_even(2400.0, avg, date(2026, 10, 21), config)
    assert be.eta_days == 20
    assert be.eta_date == "2026-11-10"
    assert be.on_track is True
    assert be.needed_daily_for_12_months == pytest.approx(2400.0 / 365)


def test_break_even_rounds_up():
    assert break_even(2401.0, 120.0, date(2026, 10, 21)).eta_days == 21


@pytest.mark.parametrize("avg", [0.0, -35.5])
def test_break_even_not_on_track(avg):
    be = break_even(5000.0, avg, date(2026, 10, 21))
    assert be.eta_days is None
    assert be.eta_date is None
    assert be.on_track is False
    assert be.needed_daily_for_12_months == pytest.approx(5000.0 / 365)


def test_cold_start_uses_projection(config):
    assert average_daily_profit([], "Base", config) == projected_daily_profit("Base", config)
    assert average_daily_profit([500.0, 80.0], "Base", config) == projected_daily_profit("Base", config)


def test_projected_daily_profit(config):
    per_tick = 74 * 1.0 - 74 * 0.30 - 74 * 0.029 - 16 - 12
    assert projected_daily_profit("Base", config) == pytest.approx(per_tick * 56 / 3)
    assert projected_daily_profit("Optimistic", config) > projected_daily_profit("Base", config)


def test_projected_daily_profit_floor(config):
    expensive = config.model_copy(
        update={"projection": config.projection.model_copy(update={"tick_labour": 500.0})}
    )
    assert projected_daily_profit("Base", expensive) == pytest.approx(120.0)


def test_intraday_series(events):
    series = intraday_series(events[:3])
    assert [p.ts for p in series] == ["8:00 AM", "8:15 AM", "8:30 AM"]
    assert [p.transactions for p in series] == [12, 21, 21]
    assert series[-1].revenue == pytest.approx(184.25)
    assert series[-1].profit == pytest.approx(17.9)
    assert intraday_series([]) == []
