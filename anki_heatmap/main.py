from fastapi import FastAPI

from anki_heatmap.api.routes.config import router as config_router
from anki_heatmap.api.routes.heatmap import router as heatmap_router
from anki_heatmap.core.middleware import AnkiConnectThrottleMiddleware
from anki_heatmap.core.observability import configure_logging
from anki_heatmap.core.observability import init_sentry
from anki_heatmap.settings import Settings


def create_app() -> FastAPI:
    """Build the FastAPI application from current settings."""

    settings = Settings()
    configure_logging(settings)
    init_sentry(settings)

    app = FastAPI(title="Anki Review Heatmap")
    app.add_middleware(
        AnkiConnectThrottleMiddleware,
        requests_per_window=settings.rate_limit_per_minute,
        window_seconds=settings.rate_limit_window_seconds,
    )
    app.include_router(heatmap_router)
    app.include_router(config_router)
    return app


app = create_app()
