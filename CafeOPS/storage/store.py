"""
Persistence collaborator of the rollup engine.

Every public method is one transaction (``sessionmaker.begin()``) and
returns Pydantic records from ``CafeOPS.domain.records``.  Errors raised
by SQLAlchemy are not caught here: they reach the caller unchanged.
"""

import json
import logging
from datetime import datetime, timezone
from pathlib import Path
from typing import List, Optional

from sqlalchemy import create_engine, delete, select, update
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import sessionmaker

from CafeOPS.core.rollup import sum_events_by_date
from CafeOPS.domain.records import (
    METRIC_FIELDS,
    AllTimeRollup,
    BusinessDay,
    DailyRollup,
    MetricTotals,
    Settings,
    TickEvent,
)
from CafeOPS.domain.scenario import CAFE_CONFIG, ScenarioConfig
from CafeOPS.storage.models import (
    SINGLETON_ID,
    AllTimeRollupRow,
    Base,
    BusinessDayRow,
    DailyRollupRow,
    SettingsRow,
    TickEventRow,
)

logger = logging.getLogger(__name__)


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


# ------------------------------
# Row -> record conversion
# ------------------------------


def _settings_record(row: SettingsRow) -> Settings:
    return Settings(
        timezone=row.timezone,
        day_reset_hour=row.day_reset_hour,
        scenario=row.scenario,
        include_owner_salary=bool(row.include_owner_salary),
        initial_capital_cost=row.initial_capital_cost,
        avg_ticket=row.avg_ticket,
        cogs_rate=row.cogs_rate,
        fee_percent=row.fee_percent,
        fee_fixed=row.fee_fixed,
        monthly_fixed_costs=json.loads(row.monthly_fixed_costs_json),
        wage_barista=row.wage_barista,
        wage_lead=row.wage_lead,
        tip_model=json.loads(row.tip_model_json),
        owner_salary_daily=row.owner_salary_daily,
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def _day_record(row: BusinessDayRow) -> BusinessDay:
    return BusinessDay(
        business_date=row.business_date,
        day_of_week=row.day_of_week,
        scenario_used=row.scenario_used,
        day_modifier=row.day_modifier,
        open_ticks_count=row.open_ticks_count,
        last_tick_at=row.last_tick_at,
        created_at=row.created_at,
    )


def _rollup_record(row: DailyRollupRow) -> DailyRollup:
    return DailyRollup(
        business_date=row.business_date,
        **{name: getattr(row, name) for name in METRIC_FIELDS},
    )


def _event_record(row: TickEventRow) -> TickEvent:
    return TickEvent(
        id=row.id,
        business_date=row.business_date,
        ts=row.ts,
        **{name: getattr(row, f"{name}_delta") for name in METRIC_FIELDS},
    )


def _all_time_record(row: AllTimeRollupRow) -> AllTimeRollup:
    return AllTimeRollup(
        cumulative_profit=row.cumulative_profit,
        cumulative_transactions=row.cumulative_transactions,
        cumulative_revenue=row.cumulative_revenue,
        updated_at=row.updated_at,
    )


class CafeStore:
    """SQLAlchemy implementation of the café persistence interface."""

    def __init__(self, engine: Engine):
        self.engine = engine
        self._session_factory = sessionmaker(bind=engine, expire_on_commit=False)

    @classmethod
    def from_url(cls, url: str, **engine_kwargs) -> "CafeStore":
        """Build a store from a SQLAlchemy URL, creating the SQLite folder if needed."""
        parsed = make_url(url)
        if parsed.get_backend_name() == "sqlite" and parsed.database not in (None, "", ":memory:"):
            Path(parsed.database).parent.mkdir(parents=True, exist_ok=True)
        return cls(create_engine(url, **engine_kwargs))

    def _begin(self):
        return self._session_factory.begin()

    # ------------------------------
    # Schema & first run
    # ------------------------------

    def create_schema(self) -> None:
        Base.metadata.create_all(self.engine)
        logger.debug("Schema ensured on %s", self.engine.url)

    def ensure_defaults_on_first_run(self, config: ScenarioConfig = CAFE_CONFIG) -> None:
        """Insert the Settings and AllTimeRollup singletons when absent."""
        now = utc_now_iso()
        with self._begin() as session:
            if session.get(SettingsRow, SINGLETON_ID) is None:
                session.add(
                    SettingsRow(
                        id=SINGLETON_ID,
                        timezone=config.timezone,
                        day_reset_hour=config.day_reset_hour,
                        scenario=config.default_scenario,
                        include_owner_salary=False,
                        initial_capital_cost=config.initial_capital_cost,
                        avg_ticket=config.avg_ticket_weekday,
                        cogs_rate=config.cogs_rate,
                        fee_percent=config.fee_percent,
                        fee_fixed=config.fee_fixed,
                        monthly_fixed_costs_json=json.dumps(config.monthly_fixed_costs),
                        wage_barista=config.wages.barista,
                        wage_lead=config.wages.lead,
                        tip_model_json=config.tips.model_dump_json(),
                        owner_salary_daily=config.owner_salary_daily,
                        created_at=now,
                        updated_at=now,
                    )
                )
                logger.info("Default settings created (scenario=%s)", config.default_scenario)
            if session.get(AllTimeRollupRow, SINGLETON_ID) is None:
                session.add(AllTimeRollupRow(id=SINGLETON_ID, updated_at=now))

    # ------------------------------
    # Settings
    # ------------------------------

    def get_settings(self) -> Optional[Settings]:
        with self._begin() as session:
            row = session.get(SettingsRow, SINGLETON_ID)
            return _settings_record(row) if row is not None else None

    def update_settings(
        self,
        scenario: Optional[str] = None,
        include_owner_salary: Optional[bool] = None,
    ) -> None:
        values = {}
        if scenario is not None:
            values["scenario"] = scenario
        if include_owner_salary is not None:
            values["include_owner_salary"] = include_owner_salary
        if not values:
            return
        values["updated_at"] = utc_now_iso()
        with self._begin() as session:
            session.execute(
                update(SettingsRow).where(SettingsRow.id == SINGLETON_ID).values(**values)
            )

    # ------------------------------
    # Business days
    # ------------------------------

    def get_business_day(self, business_date: str) -> Optional[BusinessDay]:
        with self._begin() as session:
            row = session.get(BusinessDayRow, business_date)
            return _day_record(row) if row is not None else None

    def create_business_day_if_absent(
        self,
        business_date: str,
        scenario: str,
        day_of_week: int,
        open_ticks_count: int,
        day_modifier: float,
    ) -> BusinessDay:
        """Create the day and its zeroed rollup; an existing day is returned untouched."""
        with self._begin() as session:
            row = session.get(BusinessDayRow, business_date)
            if row is None:
                row = BusinessDayRow(
                    business_date=business_date,
                    day_of_week=day_of_week,
                    scenario_used=scenario,
                    day_modifier=day_modifier,
                    open_ticks_count=open_ticks_count,
                    last_tick_at=None,
                    created_at=utc_now_iso(),
                )
                session.add(row)
                logger.info(
                    "New business day %s (scenario=%s, modifier=%.3f)",
                    business_date,
                    scenario,
                    day_modifier,
                )
            if session.get(DailyRollupRow, business_date) is None:
                session.add(_zeroed_rollup(business_date))
            session.flush()
            return _day_record(row)

    def set_last_tick(self, business_date: str, timestamp: str) -> None:
        with self._begin() as session:
            session.execute(
                update(BusinessDayRow)
                .where(BusinessDayRow.business_date == business_date)
                .values(last_tick_at=timestamp)
            )

    # ------------------------------
    # Tick events & rollups
    # ------------------------------

    def append_tick_event(self, business_date: str, ts: str, delta: MetricTotals) -> TickEvent:
        """Insert the event and increment both rollups in the same transaction.

        A missing DailyRollup for ``business_date`` is created zeroed first,
        so every event is counted by a rollup.
        """
        with self._begin() as session:
            if session.get(DailyRollupRow, business_date) is None:
                session.add(_zeroed_rollup(business_date))
                session.flush()
            row = TickEventRow(
                business_date=business_date,
                ts=ts,
                **{f"{name}_delta": getattr(delta, name) for name in METRIC_FIELDS},
            )
            session.add(row)
            session.execute(
                update(DailyRollupRow)
                .where(DailyRollupRow.business_date == business_date)
                .values(
                    {
                        name: getattr(DailyRollupRow, name) + getattr(delta, name)
                        for name in METRIC_FIELDS
                    }
                )
            )
            session.execute(
                update(AllTimeRollupRow)
                .where(AllTimeRollupRow.id == SINGLETON_ID)
                .values(
                    cumulative_profit=AllTimeRollupRow.cumulative_profit + delta.profit,
                    cumulative_transactions=AllTimeRollupRow.cumulative_transactions
                    + delta.transactions,
                    cumulative_revenue=AllTimeRollupRow.cumulative_revenue + delta.revenue,
                    updated_at=ts,
                )
            )
            session.flush()
            return _event_record(row)

    def get_daily_rollup(self, business_date: str) -> Optional[DailyRollup]:
        with self._begin() as session:
            row = session.get(DailyRollupRow, business_date)
            return _rollup_record(row) if row is not None else None

    def get_tick_events_ordered(self, business_date: str) -> List[TickEvent]:
        with self._begin() as session:
            rows = session.scalars(
                select(TickEventRow)
                .where(TickEventRow.business_date == business_date)
                .order_by(TickEventRow.ts, TickEventRow.id)
            )
            return [_event_record(row) for row in rows]

    def get_all_time_rollup(self) -> Optional[AllTimeRollup]:
        with self._begin() as session:
            row = session.get(AllTimeRollupRow, SINGLETON_ID)
            return _all_time_record(row) if row is not None else None

    def get_recent_daily_profits(self, n: int) -> List[float]:
        """Profit of the ``n`` most recent business dates, newest first."""
        with self._begin() as session:
            profits = session.scalars(
                select(DailyRollupRow.profit)
                .order_by(DailyRollupRow.business_date.desc())
                .limit(n)
            )
            return [float(p) for p in profits]

    def rebuild_rollups(self) -> int:
        """Recompute every DailyRollup and the AllTimeRollup from the event log.

        Days without events keep a zeroed rollup.  Returns the number of
        events replayed.
        """
        with self._begin() as session:
            events = [
                _event_record(row)
                for row in session.scalars(select(TickEventRow).order_by(TickEventRow.id))
            ]
            by_date = sum_events_by_date(events)
            day_dates = set(session.scalars(select(BusinessDayRow.business_date)))

            session.execute(delete(DailyRollupRow))
            for business_date in sorted(day_dates | set(by_date)):
                totals = by_date.get(business_date, MetricTotals())
                session.add(
                    DailyRollupRow(
                        business_date=business_date,
                        **{name: getattr(totals, name) for name in METRIC_FIELDS},
                    )
                )

            all_time = session.get(AllTimeRollupRow, SINGLETON_ID)
            if all_time is None:
                all_time = AllTimeRollupRow(id=SINGLETON_ID)
                session.add(all_time)
            all_time.cumulative_profit = sum(t.profit for t in by_date.values())
            all_time.cumulative_transactions = sum(t.transactions for t in by_date.values())
            all_time.cumulative_revenue = sum(t.revenue for t in by_date.values())
            all_time.updated_at = events[-1].ts if events else utc_now_iso()

        logger.info("Rollups rebuilt from %d tick events over %d days", len(events), len(by_date))
        return len(events)


def _zeroed_rollup(business_date: str) -> DailyRollupRow:
    return DailyRollupRow(
        business_date=business_date,
        **{name: (0 if name == "transactions" else 0.0) for name in METRIC_FIELDS},
    )
