from datetime import date
from datetime import timedelta

from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Query
from fastapi.responses import Response
from sqlalchemy import text
from sqlalchemy.orm import Session

from anki_heatmap.api.dependencies import get_secret_store
from anki_heatmap.api.dependencies import get_settings
from anki_heatmap.api.dependencies import get_snapshot_store
from anki_heatmap.api.schemas.heatmap import CalendarDay
from anki_heatmap.api.schemas.heatmap import CalendarResponse
from anki_heatmap.api.schemas.heatmap import WidgetPayload
from anki_heatmap.db import get_db
from anki_heatmap.services.colour_service import resolve_colour_scheme
from anki_heatmap.services.colour_service import review_bucket
from anki_heatmap.services.grid_renderer import JsonGridRenderer
from anki_heatmap.services.grid_renderer import SvgGridRenderer
from anki_heatmap.services.heatmap_service import MissingConfigurationError
from anki_heatmap.services.heatmap_service import build_review_calendar
from anki_heatmap.services.heatmap_service import get_ankiconnect_url
from anki_heatmap.services.heatmap_service import render_widget
from anki_heatmap.settings import Settings
from anki_heatmap.stores import SecretStore
from anki_heatmap.stores import SnapshotStore


router = APIRouter()


@router.get("/")
async def root() -> dict[str, str]:
    """Return a basic service greeting."""

    return {"message": "Anki Review Heatmap"}


@router.get("/health/live")
def health_live() -> dict[str, str]:
    """Return liveness probe response for health checks."""

    return {"status": "ok"}


@router.get("/health/db")
def health_db(db: Session = Depends(get_db)) -> dict[str, str]:
    try:
        db.execute(text("SELECT 1"))
    except Exception as exc:
        raise HTTPException(
            status_code=500, detail="Database connection failed"
        ) from exc

    return {"status": "ok"}


@router.get("/heatmap", response_model=CalendarResponse)
def get_review_calendar(
    days: int = Query(default=7 * 17, ge=0, le=366),
    anchor: date | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    secret_store: SecretStore = Depends(get_secret_store),
    snapshot_store: SnapshotStore = Depends(get_snapshot_store),
) -> CalendarResponse:
    """Return the dense review calendar for the trailing `days` window."""

    to_date = anchor or date.today()

    try:
        url = get_ankiconnect_url(secret_store)
    except MissingConfigurationError as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    calendar = build_review_calendar(
        url,
        snapshot_store,
        anchor=to_date,
        window_days=days,
        snapshot_window_days=max(days, settings.snapshot_window_days),
        timeout=settings.ankiconnect_timeout_seconds,
    )

    return CalendarResponse(
        from_date=to_date - timedelta(days=days),
        to_date=to_date,
        total=sum(calendar.values()),
        days=[
            CalendarDay(date=day, count=count, level=review_bucket(count).level)
            for day, count in calendar.items()
        ],
    )


@router.get("/widget/{family}.svg")
def get_widget_svg(
    family: str,
    scheme: str | None = Query(default=None),
    dark: bool = Query(default=False),
    anchor: date | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    secret_store: SecretStore = Depends(get_secret_store),
    snapshot_store: SnapshotStore = Depends(get_snapshot_store),
) -> Response:
    """Return the widget drawn as SVG."""

    renderer = SvgGridRenderer(
        resolve_colour_scheme(scheme or settings.colour_scheme),
        mode=settings.colour_mode,
        dark=dark,
    )
    svg = render_widget(
        family,
        secret_store,
        snapshot_store,
        renderer,
        anchor=anchor or date.today(),
        snapshot_window_days=settings.snapshot_window_days,
        timeout=settings.ankiconnect_timeout_seconds,
    )
    return Response(content=svg, media_type="image/svg+xml")


@router.get("/widget/{family}", response_model=WidgetPayload)
def get_widget(
    family: str,
    scheme: str | None = Query(default=None),
    dark: bool = Query(default=False),
    anchor: date | None = Query(default=None),
    settings: Settings = Depends(get_settings),
    secret_store: SecretStore = Depends(get_secret_store),
    snapshot_store: SnapshotStore = Depends(get_snapshot_store),
) -> WidgetPayload:
    """Return the widget grid, or its error payload, for a widget family."""

    renderer = JsonGridRenderer(
        resolve_colour_scheme(scheme or settings.colour_scheme),
        mode=settings.colour_mode,
        dark=dark,
    )
    return render_widget(
        family,
        secret_store,
        snapshot_store,
        renderer,
        anchor=anchor or date.today(),
        snapshot_window_days=settings.snapshot_window_days,
        timeout=settings.ankiconnect_timeout_seconds,
    )
