# CafeOPS/ui/dashboard_view.py

from datetime import datetime

from CafeOPS.core.clock import format_last_updated, to_local
from CafeOPS.core.errors import Failure
from CafeOPS.core.results import MetricsSnapshot, TickOutcome
from CafeOPS.domain.records import Settings
from CafeOPS.domain.scenario import CAFE_CONFIG, ScenarioConfig
from CafeOPS.ui.console_style import bold, cyan, red, signed

# ---------- Formatting helpers ----------


def format_to_dollars(x: float) -> str:
    try:
        value = float(x)
    except (TypeError, ValueError):
        return f"${x}"
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.2f}"


def _pct(a: float, b: float) -> str:
    if b <= 0:
        return "—"
    v = max(0.0, min(1.0, float(a) / float(b))) * 100.0
    return f"{v:5.1f}%"


def _bar(current: float, maxv: float, width: int = 24, fill_char: str = "█") -> str:
    if maxv <= 0:
        return " " * width
    ratio = max(0.0, min(1.0, float(current) / float(maxv)))
    n = int(round(ratio * width))
    return fill_char * n + "·" * (width - n)


# ---------- Views ----------


def print_tick_outcome(outcome: TickOutcome) -> None:
    if outcome.status == "skipped":
        print(f"⏸  Tick skipped: {outcome.reason}")
        return
    s = outcome.slice
    print(
        f"✔ Tick {outcome.business_date}: {s.transactions} tx, "
        f"revenue {format_to_dollars(s.revenue)}, "
        f"profit {signed(format_to_dollars(s.profit), s.profit)}"
    )


def print_settings(settings: Settings) -> None:
    owner = "included" if settings.include_owner_salary else "excluded"
    print(f"Scenario     : {bold(settings.scenario)}")
    print(f"Owner salary : {owner} ({format_to_dollars(settings.owner_salary_daily)}/day)")
    print(f"Capital cost : {format_to_dollars(settings.initial_capital_cost)}")


def print_failure(failure: Failure) -> None:
    print(red(f"✖ {failure.kind}: {failure.message}"))


def print_dashboard(snapshot: MetricsSnapshot, config: ScenarioConfig = CAFE_CONFIG) -> None:
    """Print the dashboard for one metrics snapshot."""
    today = snapshot.today
    all_time = snapshot.all_time
    be = snapshot.break_even
    updated = format_last_updated(to_local(datetime.fromisoformat(snapshot.last_updated), config))

    print("\n" + "=" * 56)
    print(bold(f"☕ Business day {snapshot.business_date}") + f"  (updated {updated})")
    print(f"Scenario: {cyan(snapshot.settings.scenario)}")
    print("=" * 56)

    print(bold("Today"))
    print(f"  Transactions : {today.transactions}")
    print(f"  Revenue      : {format_to_dollars(today.revenue)}")
    print(f"  COGS         : {format_to_dollars(today.cogs)}")
    print(f"  Fees         : {format_to_dollars(today.fees)}")
    print(f"  Wages        : {format_to_dollars(today.wages)}")
    print(f"  Tips         : {format_to_dollars(today.tips)}")
    print(f"  Fixed        : {format_to_dollars(today.fixed)}")
    print(f"  Profit       : {signed(format_to_dollars(today.profit), today.profit)}")
    mix = today.drink_mix
    print(f"  Drink mix    : coffee {mix.coffee} · tea {mix.tea} · other {mix.other}")

    print(bold("All time"))
    print(f"  Revenue      : {format_to_dollars(all_time.cumulative_revenue)}")
    print(
        f"  Profit       : "
        f"{signed(format_to_dollars(all_time.cumulative_profit), all_time.cumulative_profit)}"
    )
    capital = all_time.recovered_capital + all_time.remaining_capital
    print(
        f"  Recovered    : {_bar(all_time.recovered_capital, capital)} "
        f"{_pct(all_time.recovered_capital, capital)} "
        f"({format_to_dollars(all_time.remaining_capital)} left)"
    )

    print(bold("Break-even"))
    print(f"  Avg daily profit : {format_to_dollars(be.avg_daily_profit)}")
    if be.on_track:
        print(f"  ETA              : {be.eta_days} days ({be.eta_date})")
    else:
        print(red("  Not on track"))
        print(f"  Needed per day for 12-month payback : {format_to_dollars(be.needed_daily_for_12_months)}")

    if snapshot.series:
        last = snapshot.series[-1]
        print(
            f"Series: {len(snapshot.series)} points, last at {last.ts} "
            f"(revenue {format_to_dollars(last.revenue)}, {last.transactions} tx)"
        )
    print("=" * 56 + "\n")
