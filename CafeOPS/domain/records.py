"""
Persisted records exchanged with the store.

The store never hands ORM instances to the rest of the code: it converts
rows into these Pydantic records.
"""

from typing import Dict, Optional

from pydantic import BaseModel, ConfigDict, StrictBool

from CafeOPS.domain.scenario import TipModel

# Additive metrics carried by a tick event and summed by the rollups.
METRIC_FIELDS = (
    "transactions",
    "revenue",
    "cogs",
    "fees",
    "wages",
    "tips",
    "fixed",
    "profit",
)


class Settings(BaseModel):
    """Active configuration snapshot plus the two user-editable fields."""

    timezone: str
    day_reset_hour: int
    scenario: str
    include_owner_salary: bool
    initial_capital_cost: float
    avg_ticket: float
    cogs_rate: float
    fee_percent: float
    fee_fixed: float
    monthly_fixed_costs: Dict[str, float]
    wage_barista: float
    wage_lead: float
    tip_model: TipModel
    owner_salary_daily: float
    created_at: str
    updated_at: str


class SettingsPatch(BaseModel):
    """Partial update accepted by ``patch_settings``."""

    model_config = ConfigDict(extra="forbid")

    scenario: Optional[str] = None
    include_owner_salary: Optional[StrictBool] = None


class BusinessDay(BaseModel):
    business_date: str
    day_of_week: int
    scenario_used: str
    day_modifier: float
    open_ticks_count: int
    last_tick_at: Optional[str] = None
    created_at: str


class MetricTotals(BaseModel):
    """Running sums of every tick metric."""

    transactions: int = 0
    revenue: float = 0.0
    cogs: float = 0.0
    fees: float = 0.0
    wages: float = 0.0
    tips: float = 0.0
    fixed: float = 0.0
    profit: float = 0.0


class DailyRollup(MetricTotals):
    business_date: str


class TickEvent(MetricTotals):
    """One immutable simulated slice, as stored in the event log."""

    id: Optional[int] = None
    business_date: str
    ts: str


class AllTimeRollup(BaseModel):
    cumulative_profit: float = 0.0
    cumulative_transactions: int = 0
    cumulative_revenue: float = 0.0
    updated_at: str
