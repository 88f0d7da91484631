import logging
from collections.abc import Callable

from anki_heatmap.stores import ANKICONNECT_URL_KEY
from anki_heatmap.stores import SecretStore


logger = logging.getLogger(__name__)

MAX_SETUP_ATTEMPTS = 3


class InvalidAnkiConnectURLError(ValueError):
    """Raised when the entered endpoint is not an http(s) URL."""


def validate_ankiconnect_url(url: str) -> str:
    cleaned = url.strip()
    if not cleaned.startswith("http"):
        raise InvalidAnkiConnectURLError("AnkiConnect URL must start with http")
    return cleaned


def prompt_for_ankiconnect_url(
    secret_store: SecretStore,
    ask: Callable[[str], str | None],
    max_attempts: int = MAX_SETUP_ATTEMPTS,
) -> bool:
    """Ask for the AnkiConnect URL until a valid one is stored.

    `ask` receives the currently stored URL (or "") and returns the entered
    text, or None when the user cancels. Returns False on cancel or once
    `max_attempts` invalid entries have been made.
    """

    current = secret_store.get(ANKICONNECT_URL_KEY) or ""

    for _ in range(max_attempts):
        entered = ask(current)
        if entered is None:
            logger.info("Setup cancelled")
            return False

        try:
            url = validate_ankiconnect_url(entered)
        except InvalidAnkiConnectURLError:
            logger.error("Invalid URL: %r", entered)
            current = entered
            continue

        secret_store.set(ANKICONNECT_URL_KEY, url)
        logger.info("URL stored successfully")
        return True

    logger.warning("Giving up after %d invalid URLs", max_attempts)
    return False
