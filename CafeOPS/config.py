"""
Runtime configuration read from the environment.

- ``CAFEOPS_CONFIG``        : path to an alternative cafe_config.json
- ``CAFEOPS_DATABASE_URL``  : SQLAlchemy URL of the store
- ``CAFEOPS_LOG_LEVEL``     : log level used by the CLI
"""

import os
from pathlib import Path

from CafeOPS.data import get_CAFE_CONFIG_PATH

DEFAULT_CONFIG_PATH = get_CAFE_CONFIG_PATH()
DEFAULT_DATABASE_URL = "sqlite:///data/dashboard.db"


def config_path() -> Path:
    return Path(os.environ.get("CAFEOPS_CONFIG", DEFAULT_CONFIG_PATH))


def database_url() -> str:
    return os.environ.get("CAFEOPS_DATABASE_URL", DEFAULT_DATABASE_URL)


def log_level() -> str:
    return os.environ.get("CAFEOPS_LOG_LEVEL", "INFO").upper()
