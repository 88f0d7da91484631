import json
from collections.abc import Iterable
from collections.abc import Mapping
from datetime import date
from datetime import datetime
from datetime import timedelta
from typing import NamedTuple

from anki_heatmap.clients.ankiconnect_client import ReviewEvent


DailyCalendar = dict[date, int]


class GridLayout(NamedTuple):
    """Week-major grid shape; `day_of_week` is 0 for Sunday."""

    weeks: int
    day_of_week: int

    @property
    def window_days(self) -> int:
        return self.weeks * 7 - (7 - self.day_of_week)


def as_calendar_day(value: date | datetime) -> date:
    """Strip the time of day so days compare as pure dates."""

    if isinstance(value, datetime):
        return value.date()
    return value


def sunday_based_weekday(day: date) -> int:
    return (day.weekday() + 1) % 7


def build_date_window(anchor: date | datetime, window_days: int) -> list[date]:
    """Return `window_days + 1` ascending days ending at `anchor`."""

    if window_days < 0:
        raise ValueError("window_days must not be negative")

    end_day = as_calendar_day(anchor)
    start_day = end_day - timedelta(days=window_days)
    return [start_day + timedelta(days=offset) for offset in range(window_days + 1)]


def empty_calendar(days: Iterable[date]) -> DailyCalendar:
    return {day: 0 for day in days}


def merge_review_events(
    calendar: Mapping[date, int],
    events: Iterable[ReviewEvent | tuple[date, int]],
) -> DailyCalendar:
    """Overlay sparse events onto a dense calendar.

    Later events for the same day replace earlier ones. Events outside the
    calendar's range are dropped.
    """

    merged = dict(calendar)
    for day, count in events:
        if day in merged:
            merged[day] = count
    return merged


def events_in_window(
    events: Iterable[ReviewEvent],
    anchor: date | datetime,
    window_days: int,
) -> DailyCalendar:
    """Collect events within the trailing window into a sparse calendar."""

    end_day = as_calendar_day(anchor)
    start_day = end_day - timedelta(days=window_days)

    selected: DailyCalendar = {}
    for day, count in events:
        if start_day <= day <= end_day:
            selected[day] = count
    return dict(sorted(selected.items()))


def calendar_to_snapshot(calendar: Mapping[date, int]) -> dict[str, int]:
    return {day.isoformat(): count for day, count in calendar.items()}


def dump_snapshot(calendar: Mapping[date, int]) -> str:
    return json.dumps(calendar_to_snapshot(calendar))


def load_snapshot(raw_value: str) -> DailyCalendar:
    """Parse a stored snapshot, skipping entries that are not `date: count`."""

    payload = json.loads(raw_value)
    if not isinstance(payload, dict):
        raise ValueError("Snapshot is not a JSON object")

    calendar: DailyCalendar = {}
    for raw_day, raw_count in payload.items():
        if not isinstance(raw_count, int) or isinstance(raw_count, bool):
            continue
        try:
            calendar[date.fromisoformat(raw_day)] = raw_count
        except ValueError:
            continue
    return calendar
