from typing import List, Literal, Optional

from pydantic import BaseModel

from CafeOPS.domain.records import MetricTotals, Settings


class DrinkMix(BaseModel):
    coffee: int = 0
    tea: int = 0
    other: int = 0


class TickSlice(MetricTotals):
    """Snapshot of one simulated tick (``wages`` includes the owner's share)."""

    drink_mix: DrinkMix


class TickOutcome(BaseModel):
    """Result of ``process_tick``: either a recorded slice or a debounce skip."""

    status: Literal["ok", "skipped"]
    business_date: Optional[str] = None
    slice: Optional[TickSlice] = None
    reason: Optional[str] = None


class TodayTotals(MetricTotals):
    drink_mix: DrinkMix


class AllTimeTotals(BaseModel):
    cumulative_profit: float
    cumulative_transactions: int
    cumulative_revenue: float
    updated_at: str
    remaining_capital: float
    recovered_capital: float
    recovery_percent: float


class BreakEven(BaseModel):
    eta_days: Optional[int]
    eta_date: Optional[str]
    avg_daily_profit: float
    on_track: bool
    needed_daily_for_12_months: float


class SeriesPoint(BaseModel):
    ts: str
    revenue: float
    profit: float
    transactions: int


class MetricsSnapshot(BaseModel):
    """Everything the dashboard needs for one refresh."""

    business_date: str
    last_updated: str
    settings: Settings
    today: TodayTotals
    all_time: AllTimeTotals
    break_even: BreakEven
    series: List[SeriesPoint]
