from collections.abc import Mapping
from datetime import date
from typing import Any
from typing import NamedTuple

import httpx


ANKICONNECT_VERSION = 6


class AnkiConnectError(ValueError):
    """Raised when AnkiConnect answers with an error or an unusable body."""


class ReviewEvent(NamedTuple):
    """Number of cards reviewed on one calendar day."""

    day: date
    count: int


def invoke(url: str, action: str, timeout: float, **params: Any) -> Any:
    """Call a single AnkiConnect action and return its `result` value."""

    body: dict[str, Any] = {"action": action, "version": ANKICONNECT_VERSION}
    if params:
        body["params"] = params

    response = httpx.post(
        url,
        json=body,
        headers={"Content-Type": "application/json"},
        timeout=timeout,
    )
    response.raise_for_status()

    payload: Any = response.json()
    if not isinstance(payload, Mapping):
        raise AnkiConnectError("AnkiConnect response is invalid")

    error = payload.get("error")
    if error:
        raise AnkiConnectError(str(error))

    result = payload.get("result")
    if result is None:
        raise AnkiConnectError("No data available.")

    return result


def parse_review_events(result: Any) -> list[ReviewEvent]:
    """Convert `[[date, count], ...]` pairs, skipping malformed items."""

    if not isinstance(result, list):
        raise AnkiConnectError("AnkiConnect review result is not a list")

    events: list[ReviewEvent] = []
    for item in result:
        if not isinstance(item, (list, tuple)) or len(item) != 2:
            continue
        raw_day, raw_count = item
        if raw_count is None:
            raw_count = 0
        if not isinstance(raw_day, str) or not isinstance(raw_count, int):
            continue
        if isinstance(raw_count, bool) or raw_count < 0:
            continue

        try:
            parsed_day = date.fromisoformat(raw_day)
        except ValueError:
            continue

        events.append(ReviewEvent(day=parsed_day, count=raw_count))

    return events


def fetch_reviews_by_day(url: str, timeout: float) -> list[ReviewEvent]:
    """Fetch per-day review counts from AnkiConnect."""

    result = invoke(url, "getNumCardsReviewedByDay", timeout=timeout)
    return parse_review_events(result)
