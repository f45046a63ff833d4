"""
Cost and scenario configuration of the café.

Every parameter the simulation reads lives here: ticket prices, cost
rates, wages, fixed costs, tip model, drink mix, opening hours and the
scenario multipliers applied to the expected transaction volume.
The values are loaded from ``data/cafe_config.json`` and validated
through Pydantic.
"""

import math
from enum import Enum
from typing import Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from CafeOPS.config import config_path
from CafeOPS.utils import load_and_validate, parse_hhmm


class WeekdayClass(str, Enum):
    """Opening schedules are defined per class of day, not per weekday."""

    WEEKDAY = "weekday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"


class _Frozen(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class OpenWindow(_Frozen):
    open: str
    close: str

    @field_validator("open", "close")
    @classmethod
    def _check_hhmm(cls, value: str) -> str:
        parse_hhmm(value)
        return value

    @property
    def open_minute(self) -> int:
        hour, minute = parse_hhmm(self.open)
        return hour * 60 + minute

    @property
    def close_minute(self) -> int:
        hour, minute = parse_hhmm(self.close)
        return hour * 60 + minute

    @model_validator(mode="after")
    def _check_order(self) -> "OpenWindow":
        if self.close_minute <= self.open_minute:
            raise ValueError(f"close ({self.close}) must be after open ({self.open})")
        return self


class TipModel(_Frozen):
    base_min: float = Field(ge=0)
    base_max: float = Field(ge=0)
    rush_multiplier: float = Field(gt=0)
    rush_threshold: float = Field(gt=0, description="Rush curve level above which tips are boosted")

    @model_validator(mode="after")
    def _check_range(self) -> "TipModel":
        if self.base_max < self.base_min:
            raise ValueError("tips.base_max must be >= tips.base_min")
        return self


class DrinkMixModel(_Frozen):
    """Share of transactions per drink category; ``other`` absorbs rounding."""

    coffee: float = Field(ge=0, le=1)
    tea: float = Field(ge=0, le=1)
    other: float = Field(ge=0, le=1)

    @model_validator(mode="after")
    def _check_sum(self) -> "DrinkMixModel":
        total = self.coffee + self.tea + self.other
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"drink_mix proportions must sum to 1 (got {total})")
        return self


class Wages(_Frozen):
    """Hourly wage per role."""

    barista: float = Field(ge=0)
    lead: float = Field(ge=0)


class BreakEvenParams(_Frozen):
    history_days: int = Field(ge=1)
    min_history_days: int = Field(ge=1)
    payback_days: int = Field(ge=1)


class ProjectionParams(_Frozen):
    """Nominal schedule used to estimate daily profit before any history exists."""

    nominal_ticks: int = Field(ge=1)
    tick_revenue: float
    tick_labour: float
    tick_fixed: float
    divisor: float = Field(gt=0)
    floor: float


class ScenarioConfig(_Frozen):
    """
    Immutable parameter bundle read by the calendar, the simulator and the
    rollup engine.

    Example scenarios:
    {
        "Conservative": 0.82,
        "Base": 1.0,
        "Base+": 1.12,
        "Optimistic": 1.26
    }
    """

    timezone: str
    day_reset_hour: int = Field(ge=0, le=23)
    tick_minutes: int = Field(gt=0)
    debounce_minutes: float = Field(ge=0)

    avg_ticket_weekday: float = Field(gt=0)
    avg_ticket_weekend: float = Field(gt=0)
    ticket_variance: float = Field(ge=0)
    min_ticket: float = Field(ge=0)

    cogs_rate: float = Field(ge=0, le=1)
    fee_percent: float = Field(ge=0, le=1)
    fee_fixed: float = Field(ge=0)

    initial_capital_cost: float = Field(gt=0)
    monthly_fixed_costs: Dict[str, float]
    wages: Wages
    owner_salary_daily: float = Field(ge=0)
    tips: TipModel
    drink_mix: DrinkMixModel

    open_hours: Dict[WeekdayClass, OpenWindow]
    base_transactions: Dict[WeekdayClass, float]
    scenarios: Dict[str, float]
    default_scenario: str

    day_modifier_range: Tuple[float, float]
    noise_range: Tuple[float, float]
    break_even: BreakEvenParams
    projection: ProjectionParams

    @field_validator("scenarios")
    @classmethod
    def _positive_multipliers(cls, value: Dict[str, float]) -> Dict[str, float]:
        if not value:
            raise ValueError("at least one scenario is required")
        for name, mult in value.items():
            if mult <= 0:
                raise ValueError(f"scenario {name!r} multiplier must be > 0")
        return value

    @model_validator(mode="after")
    def _check_consistency(self) -> "ScenarioConfig":
        missing = set(WeekdayClass) - set(self.open_hours)
        if missing:
            raise ValueError(f"open_hours missing {sorted(m.value for m in missing)}")
        missing = set(WeekdayClass) - set(self.base_transactions)
        if missing:
            raise ValueError(f"base_transactions missing {sorted(m.value for m in missing)}")
        if self.default_scenario not in self.scenarios:
            raise ValueError(f"default_scenario {self.default_scenario!r} is not a known scenario")
        for low, high in (self.day_modifier_range, self.noise_range):
            if not 0 < low <= high:
                raise ValueError(f"invalid range ({low}, {high})")
        return self

    @property
    def monthly_fixed_total(self) -> float:
        return float(sum(self.monthly_fixed_costs.values()))

    def scenario_multiplier(self, scenario: str) -> float:
        try:
            return self.scenarios[scenario]
        except KeyError:
            raise ValueError(f"Unknown scenario: {scenario!r}") from None


def load_cafe_config(json_path=None) -> ScenarioConfig:
    """Load the café configuration from JSON and validate it through Pydantic."""
    return load_and_validate(json_path or config_path(), ScenarioConfig)


CAFE_CONFIG: ScenarioConfig = load_cafe_config()
