"""
Rollup engine: the three operations exposed to the routes / CLI.

- ``process_tick``          : simulate and record one tick (debounced)
- ``get_dashboard_metrics`` : today's totals, all-time totals, break-even
- ``patch_settings``        : change the scenario or the owner-salary flag

Single-writer model: the debounce is checked against persisted state and
is not a lock; two processes racing inside the window may both record.
"""

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Callable, Mapping, Optional

import numpy as np
from pydantic import ValidationError

from CafeOPS.core.clock import (
    business_date,
    now_local,
    ticks_per_business_day,
    to_local,
)
from CafeOPS.core.errors import InvalidSettingsError, SettingsMissingError
from CafeOPS.core.results import (
    AllTimeTotals,
    DrinkMix,
    MetricsSnapshot,
    TickOutcome,
    TodayTotals,
)
from CafeOPS.core.rollup import (
    average_daily_profit,
    break_even,
    intraday_series,
    recovery_percent,
    remaining_capital,
)
from CafeOPS.core.tick import simulate_tick
from CafeOPS.domain.records import METRIC_FIELDS, BusinessDay, Settings, SettingsPatch
from CafeOPS.domain.scenario import CAFE_CONFIG, ScenarioConfig
from CafeOPS.rules.costing import split_drink_mix
from CafeOPS.rules.demand import draw_day_modifier
if TYPE_CHECKING:
    from CafeOPS.storage.store import CafeStore

logger = logging.getLogger(__name__)


class CafeService:
    """Tick processing and dashboard metrics on top of a ``CafeStore``.

    Args:
        store: Persistence collaborator.
        config: Parameter bundle.
        rng: Random source for day modifiers and ticks (seed it in tests).
        clock: Returns the current local instant; defaults to ``now_local``.
    """

    def __init__(
        self,
        store: "CafeStore",
        config: ScenarioConfig = CAFE_CONFIG,
        rng: Optional[np.random.Generator] = None,
        clock: Optional[Callable[[], datetime]] = None,
    ):
        self.store = store
        self.config = config
        self.rng = rng if rng is not None else np.random.default_rng()
        self.clock = clock or (lambda: now_local(config))

    def bootstrap(self) -> None:
        """Create the schema and the singleton rows on first run."""
        self.store.create_schema()
        self.store.ensure_defaults_on_first_run(self.config)

    # ------------------------------
    # Helpers
    # ------------------------------

    def _now(self) -> datetime:
        return to_local(self.clock(), self.config)

    def _require_settings(self) -> Settings:
        settings = self.store.get_settings()
        if settings is None:
            raise SettingsMissingError("Settings missing: run bootstrap() first")
        return settings

    def _ensure_day(self, now: datetime, settings: Settings) -> BusinessDay:
        day_key = business_date(now, self.config)
        existing = self.store.get_business_day(day_key)
        if existing is not None:
            return existing
        # Before the reset hour, now falls on the next calendar day
        day_start = datetime.fromisoformat(day_key)
        return self.store.create_business_day_if_absent(
            business_date=day_key,
            scenario=settings.scenario,
            day_of_week=day_start.isoweekday(),
            open_ticks_count=ticks_per_business_day(day_start, self.config),
            day_modifier=draw_day_modifier(self.rng, self.config),
        )

    # ------------------------------
    # API
    # ------------------------------

    def process_tick(self) -> TickOutcome:
        """Simulate and record one tick unless the previous one is too recent."""
        settings = self._require_settings()
        now = self._now()
        day = self._ensure_day(now, settings)

        if day.last_tick_at:
            last_tick = to_local(datetime.fromisoformat(day.last_tick_at), self.config)
            elapsed_minutes = (now - last_tick).total_seconds() / 60.0
            if elapsed_minutes < self.config.debounce_minutes:
                logger.debug(
                    "Tick skipped for %s (%.1f min since last tick)",
                    day.business_date,
                    elapsed_minutes,
                )
                return TickOutcome(
                    status="skipped",
                    reason=(
                        f"Tick already processed in last "
                        f"{self.config.debounce_minutes:g} minutes."
                    ),
                )

        tick_slice = simulate_tick(
            now=now,
            scenario=settings.scenario,
            day_modifier=day.day_modifier,
            include_owner_salary=settings.include_owner_salary,
            rng=self.rng,
            config=self.config,
        )
        ts = now.astimezone(timezone.utc).isoformat(timespec="seconds")
        self.store.append_tick_event(day.business_date, ts, tick_slice)
        self.store.set_last_tick(day.business_date, now.isoformat(timespec="seconds"))

        logger.info(
            "Tick %s %s: %d tx, revenue %.2f, profit %.2f",
            day.business_date,
            now.strftime("%H:%M"),
            tick_slice.transactions,
            tick_slice.revenue,
            tick_slice.profit,
        )
        return TickOutcome(status="ok", business_date=day.business_date, slice=tick_slice)

    def get_dashboard_metrics(self) -> MetricsSnapshot:
        """Snapshot of today's and all-time metrics plus the break-even projection."""
        settings = self._require_settings()
        now = self._now()
        day = self._ensure_day(now, settings)

        rollup = self.store.get_daily_rollup(day.business_date)
        events = self.store.get_tick_events_ordered(day.business_date)
        all_time = self.store.get_all_time_rollup()
        if all_time is None:
            raise SettingsMissingError("All-time rollup missing: run bootstrap() first")
        recent_profits = self.store.get_recent_daily_profits(self.config.break_even.history_days)

        initial = settings.initial_capital_cost
        remaining = remaining_capital(initial, all_time.cumulative_profit)
        avg_daily = average_daily_profit(recent_profits, settings.scenario, self.config)

        today_values = {name: getattr(rollup, name) for name in METRIC_FIELDS} if rollup else {}
        drink_mix = split_drink_mix(today_values.get("transactions", 0), self.config.drink_mix)

        return MetricsSnapshot(
            business_date=day.business_date,
            last_updated=day.last_tick_at or now.isoformat(timespec="seconds"),
            settings=settings,
            today=TodayTotals(**today_values, drink_mix=DrinkMix(**drink_mix)),
            all_time=AllTimeTotals(
                **all_time.model_dump(),
                remaining_capital=remaining,
                recovered_capital=initial - remaining,
                recovery_percent=recovery_percent(initial, remaining),
            ),
            break_even=break_even(remaining, avg_daily, now.date(), self.config),
            series=intraday_series(events, self.config),
        )

    def patch_settings(self, payload: Mapping) -> Settings:
        """Validate and apply a partial settings update.

        Raises:
            InvalidSettingsError: Unknown key, non-boolean flag or unknown
                scenario; nothing is written in that case.
        """
        try:
            patch = SettingsPatch.model_validate(dict(payload))
        except (TypeError, ValueError, ValidationError) as exc:
            raise InvalidSettingsError(f"Malformed settings patch: {exc}") from exc
        if patch.scenario is not None and patch.scenario not in self.config.scenarios:
            known = ", ".join(self.config.scenarios)
            raise InvalidSettingsError(f"Unknown scenario {patch.scenario!r} (expected one of: {known})")

        self._require_settings()
        self.store.update_settings(
            scenario=patch.scenario,
            include_owner_salary=patch.include_owner_salary,
        )
        logger.info("Settings updated: %s", patch.model_dump(exclude_none=True))
        return self._require_settings()

