import json
from pathlib import Path
from typing import Tuple, Type, TypeVar

from pydantic import BaseModel

M = TypeVar("M", bound=BaseModel)


def load_and_validate(data_path: Path, model: Type[M]) -> M:
    """
    Load and validate model data from data_path.
    Returns a validated model instance.
    """
    data_path = Path(data_path)
    if not data_path.exists():
        raise FileNotFoundError(f"Config data file not found: {data_path}")

    with data_path.open("r", encoding="utf-8") as f:
        raw_data = json.load(f)
        return model.model_validate(raw_data)


def parse_hhmm(value: str) -> Tuple[int, int]:
    """Parse an ``"HH:MM"`` string into ``(hour, minute)``.

    >>> parse_hhmm("06:30")
    (6, 30)
    """
    hour_str, minute_str = value.split(":")
    hour, minute = int(hour_str), int(minute_str)
    if not (0 <= hour <= 24 and 0 <= minute < 60):
        raise ValueError(f"Invalid time of day: {value!r}")
    return hour, minute
