import logging
from datetime import date
from datetime import datetime
from typing import TypeVar

import httpx

from anki_heatmap.clients.ankiconnect_client import fetch_reviews_by_day
from anki_heatmap.services.calendar_service import DailyCalendar
from anki_heatmap.services.calendar_service import GridLayout
from anki_heatmap.services.calendar_service import as_calendar_day
from anki_heatmap.services.calendar_service import build_date_window
from anki_heatmap.services.calendar_service import dump_snapshot
from anki_heatmap.services.calendar_service import empty_calendar
from anki_heatmap.services.calendar_service import events_in_window
from anki_heatmap.services.calendar_service import load_snapshot
from anki_heatmap.services.calendar_service import merge_review_events
from anki_heatmap.services.calendar_service import sunday_based_weekday
from anki_heatmap.services.grid_renderer import GridRenderer
from anki_heatmap.stores import ANKICONNECT_URL_KEY
from anki_heatmap.stores import SNAPSHOT_KEY
from anki_heatmap.stores import SecretStore
from anki_heatmap.stores import SnapshotStore


logger = logging.getLogger(__name__)

WIDGET_FAMILY_WEEKS = {"small": 7, "medium": 17}

RenderT = TypeVar("RenderT")


class HeatmapError(Exception):
    """Base class for errors shown to the user in place of the grid."""


class MissingConfigurationError(HeatmapError):
    """Raised when no AnkiConnect URL has been stored."""


class UnsupportedLayoutError(HeatmapError):
    """Raised when a widget family has no grid layout."""


def layout_for_family(family: str, anchor: date | datetime) -> GridLayout:
    """Pick the grid layout for a widget family anchored at `anchor`."""

    weeks = WIDGET_FAMILY_WEEKS.get(family)
    if weeks is None:
        raise UnsupportedLayoutError(
            "This widget only supports small and medium families. "
            "Please select one of those variations."
        )
    day_of_week = sunday_based_weekday(as_calendar_day(anchor))
    return GridLayout(weeks=weeks, day_of_week=day_of_week)


def get_ankiconnect_url(secret_store: SecretStore) -> str:
    url = secret_store.get(ANKICONNECT_URL_KEY)
    if not url:
        raise MissingConfigurationError("No URL for ankiconnect provided")
    return url


def load_stored_snapshot(snapshot_store: SnapshotStore) -> DailyCalendar | None:
    """Return the persisted snapshot, or None when missing or unreadable."""

    if not snapshot_store.contains(SNAPSHOT_KEY):
        return None

    raw_value = snapshot_store.get(SNAPSHOT_KEY)
    if raw_value is None:
        return None

    try:
        return load_snapshot(raw_value)
    except ValueError:
        logger.warning("Stored review snapshot is unreadable; ignoring it")
        return None


def fetch_with_fallback(
    url: str,
    snapshot_store: SnapshotStore,
    anchor: date | datetime,
    window_days: int,
    timeout: float,
    today: date | None = None,
) -> DailyCalendar:
    """Fetch in-window review counts, falling back to the last snapshot.

    A successful fetch overwrites the snapshot with the window ending at
    `today`, whatever `anchor` is being displayed. When the fetch fails the
    stored snapshot is returned as-is, or an empty calendar if none exists.
    """

    try:
        events = fetch_reviews_by_day(url, timeout=timeout)
    except (httpx.HTTPError, ValueError) as exc:
        logger.warning("Failed to fetch reviews from AnkiConnect: %s", exc)
        snapshot = load_stored_snapshot(snapshot_store)
        if snapshot is None:
            return {}
        logger.info("Using fallback snapshot with %d days", len(snapshot))
        return snapshot

    snapshot = events_in_window(
        events, anchor=today or date.today(), window_days=window_days
    )
    snapshot_store.set(SNAPSHOT_KEY, dump_snapshot(snapshot))
    logger.info("Stored review snapshot with %d days", len(snapshot))
    return events_in_window(events, anchor=anchor, window_days=window_days)


def build_review_calendar(
    url: str,
    snapshot_store: SnapshotStore,
    anchor: date | datetime,
    window_days: int,
    snapshot_window_days: int,
    timeout: float,
) -> DailyCalendar:
    """Build the dense calendar for the trailing window ending at `anchor`."""

    reviews = fetch_with_fallback(
        url,
        snapshot_store,
        anchor=anchor,
        window_days=snapshot_window_days,
        timeout=timeout,
    )
    dense = empty_calendar(build_date_window(anchor, window_days))
    return merge_review_events(dense, reviews.items())


def build_widget(
    family: str,
    secret_store: SecretStore,
    snapshot_store: SnapshotStore,
    renderer: GridRenderer[RenderT],
    anchor: date | datetime,
    snapshot_window_days: int,
    timeout: float,
) -> RenderT:
    url = get_ankiconnect_url(secret_store)
    layout = layout_for_family(family, anchor)
    calendar = build_review_calendar(
        url,
        snapshot_store,
        anchor=anchor,
        window_days=layout.window_days,
        snapshot_window_days=snapshot_window_days,
        timeout=timeout,
    )
    return renderer.render(calendar, layout)


def render_widget(
    family: str,
    secret_store: SecretStore,
    snapshot_store: SnapshotStore,
    renderer: GridRenderer[RenderT],
    anchor: date | datetime,
    snapshot_window_days: int,
    timeout: float,
) -> RenderT:
    """Build the widget, converting any failure into the error widget."""

    try:
        return build_widget(
            family,
            secret_store,
            snapshot_store,
            renderer,
            anchor=anchor,
            snapshot_window_days=snapshot_window_days,
            timeout=timeout,
        )
    except HeatmapError as exc:
        return renderer.render_error(str(exc))
    except Exception as exc:
        logger.exception("Widget rendering failed")
        return renderer.render_error(str(exc) or exc.__class__.__name__)
