from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

import numpy as np
import pytest

from CafeOPS.core.service import CafeService
from CafeOPS.domain.scenario import CAFE_CONFIG
from CafeOPS.storage.store import CafeStore

CHICAGO = ZoneInfo(CAFE_CONFIG.timezone)


def local(year, month, day, hour=0, minute=0):
    return datetime(year, month, day, hour, minute, tzinfo=CHICAGO)


class FakeClock:
    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **delta) -> None:
        self.now += timedelta(**delta)


@pytest.fixture
def config():
    return CAFE_CONFIG


@pytest.fixture
def rng():
    return np.random.default_rng(1234)


@pytest.fixture
def bare_store(tmp_path):
    store = CafeStore.from_url(f"sqlite:///{tmp_path / 'cafe.db'}")
    yield store
    store.engine.dispose()


@pytest.fixture
def store(bare_store, config):
    bare_store.create_schema()
    bare_store.ensure_defaults_on_first_run(config)
    return bare_store


@pytest.fixture
def clock():
    # Wednesday, mid-morning
    return FakeClock(local(2026, 10, 21, 9, 0))


@pytest.fixture
def service(store, config, rng, clock):
    return CafeService(store, config=config, rng=rng, clock=clock)
