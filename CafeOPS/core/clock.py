"""
Business clock of the café.

Maps a local instant to a business date (the day boundary is shifted by
the reset hour), tells whether the shop is open and how many ticks fit in
the day's opening window.
"""

from datetime import datetime, timedelta
from zoneinfo import ZoneInfo

from CafeOPS.domain.scenario import CAFE_CONFIG, OpenWindow, ScenarioConfig, WeekdayClass


def now_local(config: ScenarioConfig = CAFE_CONFIG) -> datetime:
    """Current instant in the café's timezone."""
    return datetime.now(ZoneInfo(config.timezone))


def to_local(dt: datetime, config: ScenarioConfig = CAFE_CONFIG) -> datetime:
    """Convert an aware datetime to the café's timezone (naive ones are assumed local)."""
    tz = ZoneInfo(config.timezone)
    if dt.tzinfo is None:
        return dt.replace(tzinfo=tz)
    return dt.astimezone(tz)


def weekday_class(now: datetime) -> WeekdayClass:
    """Monday-Friday share a schedule; Saturday and Sunday have their own."""
    weekday = now.isoweekday()
    if weekday <= 5:
        return WeekdayClass.WEEKDAY
    if weekday == 6:
        return WeekdayClass.SATURDAY
    return WeekdayClass.SUNDAY


def is_weekend(now: datetime) -> bool:
    return now.isoweekday() >= 6


def minute_of_day(now: datetime) -> int:
    return now.hour * 60 + now.minute


def open_window(now: datetime, config: ScenarioConfig = CAFE_CONFIG) -> OpenWindow:
    return config.open_hours[weekday_class(now)]


def business_date(now: datetime, config: ScenarioConfig = CAFE_CONFIG) -> str:
    """ISO business date of ``now``.

    Before ``day_reset_hour`` the instant still belongs to the previous
    business day, e.g. 02:30 on the 15th is booked on the 14th when the
    reset hour is 4.

    >>> from datetime import datetime
    >>> business_date(datetime(2026, 3, 15, 2, 30))
    '2026-03-14'
    """
    shifted = now - timedelta(days=1) if now.hour < config.day_reset_hour else now
    return shifted.date().isoformat()


def is_open(now: datetime, config: ScenarioConfig = CAFE_CONFIG) -> bool:
    """Open on ``[open, close)`` of the weekday class window."""
    window = open_window(now, config)
    minute = minute_of_day(now)
    return window.open_minute <= minute < window.close_minute


def ticks_per_business_day(now: datetime, config: ScenarioConfig = CAFE_CONFIG) -> int:
    """Number of whole ticks between open and close for ``now``'s weekday class."""
    window = open_window(now, config)
    return (window.close_minute - window.open_minute) // config.tick_minutes


def days_in_month(now: datetime) -> int:
    first_of_next = (now.replace(day=28) + timedelta(days=4)).replace(day=1)
    return (first_of_next - timedelta(days=1)).day


def format_clock_label(dt: datetime) -> str:
    """``h:mm AM`` label used by the intraday series."""
    hour = dt.hour % 12 or 12
    suffix = "AM" if dt.hour < 12 else "PM"
    return f"{hour}:{dt.minute:02d} {suffix}"


def format_last_updated(dt: datetime) -> str:
    """``Mon d, h:mm AM`` label shown next to the last tick."""
    return f"{dt.strftime('%b')} {dt.day}, {format_clock_label(dt)}"
