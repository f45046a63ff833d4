"""
Domain objects for CafeOPS.

The domain layer holds the configuration bundle, the staff roles and the
records persisted by the store.  These classes are Pydantic models or
plain dataclasses to ease unit testing and avoid any side effects.
"""

from .records import AllTimeRollup, BusinessDay, DailyRollup, Settings, TickEvent
from .scenario import CAFE_CONFIG, ScenarioConfig, WeekdayClass
from .staff import Role, Staffing

__all__ = [
    "AllTimeRollup",
    "BusinessDay",
    "CAFE_CONFIG",
    "DailyRollup",
    "Role",
    "ScenarioConfig",
    "Settings",
    "Staffing",
    "TickEvent",
    "WeekdayClass",
]
