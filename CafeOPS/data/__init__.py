"""
Data entry point: JSON parameter files for the café.
Exposes getters rather than globals computed at import time.
"""

from pathlib import Path

DATA_DIR = Path(__file__).parent


def get_CAFE_CONFIG_PATH() -> Path:
    return DATA_DIR / "cafe_config.json"
