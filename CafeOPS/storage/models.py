"""
SQLAlchemy tables of the café store.

Five tables: settings (single row), days, daily_rollups, tick_events
(append-only log) and all_time_rollup (single row).  Timestamps are
ISO-8601 strings; tick_events.ts is UTC so it sorts lexically.
"""

from typing import Optional

from sqlalchemy import Float, Index, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

SINGLETON_ID = 1


class Base(DeclarativeBase):
    pass


class SettingsRow(Base):
    __tablename__ = "settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    timezone: Mapped[str] = mapped_column(String(64), nullable=False)
    day_reset_hour: Mapped[int] = mapped_column(Integer, nullable=False)
    scenario: Mapped[str] = mapped_column(String(64), nullable=False)
    include_owner_salary: Mapped[bool] = mapped_column(nullable=False, default=False)
    initial_capital_cost: Mapped[float] = mapped_column(Float, nullable=False)
    avg_ticket: Mapped[float] = mapped_column(Float, nullable=False)
    cogs_rate: Mapped[float] = mapped_column(Float, nullable=False)
    fee_percent: Mapped[float] = mapped_column(Float, nullable=False)
    fee_fixed: Mapped[float] = mapped_column(Float, nullable=False)
    monthly_fixed_costs_json: Mapped[str] = mapped_column(Text, nullable=False)
    wage_barista: Mapped[float] = mapped_column(Float, nullable=False)
    wage_lead: Mapped[float] = mapped_column(Float, nullable=False)
    tip_model_json: Mapped[str] = mapped_column(Text, nullable=False)
    owner_salary_daily: Mapped[float] = mapped_column(Float, nullable=False)
    created_at: Mapped[str] = mapped_column(String(40), nullable=False)
    updated_at: Mapped[str] = mapped_column(String(40), nullable=False)


class BusinessDayRow(Base):
    __tablename__ = "days"

    business_date: Mapped[str] = mapped_column(String(10), primary_key=True)
    day_of_week: Mapped[int] = mapped_column(Integer, nullable=False)
    scenario_used: Mapped[str] = mapped_column(String(64), nullable=False)
    day_modifier: Mapped[float] = mapped_column(Float, nullable=False)
    open_ticks_count: Mapped[int] = mapped_column(Integer, nullable=False)
    last_tick_at: Mapped[Optional[str]] = mapped_column(String(40))
    created_at: Mapped[str] = mapped_column(String(40), nullable=False)

    def __repr__(self):
        return f"<BusinessDay {self.business_date} x{self.day_modifier:.3f}>"


class TickEventRow(Base):
    __tablename__ = "tick_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    business_date: Mapped[str] = mapped_column(String(10), nullable=False)
    ts: Mapped[str] = mapped_column(String(40), nullable=False)
    transactions_delta: Mapped[int] = mapped_column(Integer, nullable=False)
    revenue_delta: Mapped[float] = mapped_column(Float, nullable=False)
    cogs_delta: Mapped[float] = mapped_column(Float, nullable=False)
    fees_delta: Mapped[float] = mapped_column(Float, nullable=False)
    wages_delta: Mapped[float] = mapped_column(Float, nullable=False)
    tips_delta: Mapped[float] = mapped_column(Float, nullable=False)
    fixed_delta: Mapped[float] = mapped_column(Float, nullable=False)
    profit_delta: Mapped[float] = mapped_column(Float, nullable=False)

    __table_args__ = (Index("idx_tick_events_date_ts", "business_date", "ts"),)


class DailyRollupRow(Base):
    __tablename__ = "daily_rollups"

    business_date: Mapped[str] = mapped_column(String(10), primary_key=True)
    transactions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    revenue: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    cogs: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    fees: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    wages: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    tips: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    fixed: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    profit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)


class AllTimeRollupRow(Base):
    __tablename__ = "all_time_rollup"

    id: Mapped[int] = mapped_column(Integer, primary_key=True)
    cumulative_profit: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    cumulative_transactions: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    cumulative_revenue: Mapped[float] = mapped_column(Float, nullable=False, default=0.0)
    updated_at: Mapped[str] = mapped_column(String(40), nullable=False)
