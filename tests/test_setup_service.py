import pytest

from anki_heatmap.services.setup_service import InvalidAnkiConnectURLError
from anki_heatmap.services.setup_service import prompt_for_ankiconnect_url
from anki_heatmap.services.setup_service import validate_ankiconnect_url
from anki_heatmap.stores import ANKICONNECT_URL_KEY
from anki_heatmap.stores import MemoryStore


def scripted(answers: list[str | None], seen: list[str]):
    replies = iter(answers)

    def ask(current: str) -> str | None:
        seen.append(current)
        return next(replies)

    return ask


def test_validate_requires_http_prefix() -> None:
    assert validate_ankiconnect_url("  http://192.168.1.5:8765 ") == "http://192.168.1.5:8765"

    with pytest.raises(InvalidAnkiConnectURLError):
        validate_ankiconnect_url("192.168.1.5:8765")


def test_prompt_retries_until_valid_url() -> None:
    store = MemoryStore()
    seen: list[str] = []

    stored = prompt_for_ankiconnect_url(
        store, scripted(["localhost:8765", "http://localhost:8765"], seen)
    )

    assert stored is True
    assert store.get(ANKICONNECT_URL_KEY) == "http://localhost:8765"
    assert seen == ["", "localhost:8765"]


def test_prompt_offers_current_url() -> None:
    store = MemoryStore({ANKICONNECT_URL_KEY: "http://old:8765"})
    seen: list[str] = []

    prompt_for_ankiconnect_url(store, scripted([None], seen))

    assert seen == ["http://old:8765"]
    assert store.get(ANKICONNECT_URL_KEY) == "http://old:8765"


def test_prompt_gives_up_after_max_attempts() -> None:
    store = MemoryStore()
    seen: list[str] = []

    stored = prompt_for_ankiconnect_url(
        store, scripted(["a", "b", "c", "http://x"], seen), max_attempts=3
    )

    assert stored is False
    assert len(seen) == 3
    assert not store.contains(ANKICONNECT_URL_KEY)
