"""
Replay one full business day (a tick every 15 minutes from the reset hour)
against a throwaway SQLite file, then print the dashboard.
"""

import tempfile
from datetime import datetime, timedelta
from pathlib import Path
from zoneinfo import ZoneInfo

import numpy as np

from CafeOPS.core.service import CafeService
from CafeOPS.domain.scenario import CAFE_CONFIG
from CafeOPS.storage.store import CafeStore
from CafeOPS.ui.dashboard_view import print_dashboard


def run(day: str = "2026-10-21", scenario: str = "Base+", seed: int = 7):
    config = CAFE_CONFIG
    start = datetime.fromisoformat(day).replace(
        hour=config.day_reset_hour, tzinfo=ZoneInfo(config.timezone)
    )
    current = {"now": start}

    with tempfile.TemporaryDirectory() as tmp:
        store = CafeStore.from_url(f"sqlite:///{Path(tmp) / 'demo.db'}")
        service = CafeService(
            store,
            config=config,
            rng=np.random.default_rng(seed),
            clock=lambda: current["now"],
        )
        service.bootstrap()
        service.patch_settings({"scenario": scenario})

        recorded = 0
        while current["now"] < start + timedelta(days=1):
            if service.process_tick().status == "ok":
                recorded += 1
            current["now"] += timedelta(minutes=config.tick_minutes)
        print(f"✔ {recorded} ticks recorded for {day} ({scenario})")

        current["now"] -= timedelta(minutes=config.tick_minutes)
        print_dashboard(service.get_dashboard_metrics(), config)
        store.engine.dispose()


if __name__ == "__main__":
    run()
