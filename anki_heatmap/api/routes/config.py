from fastapi import APIRouter
from fastapi import Depends
from fastapi import HTTPException
from fastapi import Response

from anki_heatmap.api.dependencies import get_secret_store
from anki_heatmap.api.dependencies import get_snapshot_store
from anki_heatmap.api.schemas.heatmap import AnkiConnectConfig
from anki_heatmap.api.schemas.heatmap import AnkiConnectStatus
from anki_heatmap.services.calendar_service import calendar_to_snapshot
from anki_heatmap.services.heatmap_service import load_stored_snapshot
from anki_heatmap.services.setup_service import InvalidAnkiConnectURLError
from anki_heatmap.services.setup_service import validate_ankiconnect_url
from anki_heatmap.stores import ANKICONNECT_URL_KEY
from anki_heatmap.stores import SNAPSHOT_KEY
from anki_heatmap.stores import SecretStore
from anki_heatmap.stores import SnapshotStore


router = APIRouter()


@router.get("/config/ankiconnect")
def get_ankiconnect_status(
    secret_store: SecretStore = Depends(get_secret_store),
) -> AnkiConnectStatus:
    return AnkiConnectStatus(configured=secret_store.contains(ANKICONNECT_URL_KEY))


@router.put("/config/ankiconnect")
def set_ankiconnect_url(
    payload: AnkiConnectConfig,
    secret_store: SecretStore = Depends(get_secret_store),
) -> AnkiConnectStatus:
    """Validate and store the AnkiConnect endpoint URL."""

    try:
        url = validate_ankiconnect_url(payload.url)
    except InvalidAnkiConnectURLError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc

    secret_store.set(ANKICONNECT_URL_KEY, url)
    return AnkiConnectStatus(configured=True)


@router.delete("/config/ankiconnect", status_code=204)
def remove_ankiconnect_url(
    secret_store: SecretStore = Depends(get_secret_store),
) -> Response:
    secret_store.remove(ANKICONNECT_URL_KEY)
    return Response(status_code=204)


@router.get("/snapshot")
def get_snapshot(
    snapshot_store: SnapshotStore = Depends(get_snapshot_store),
) -> dict[str, int]:
    """Return the last successfully fetched review counts."""

    snapshot = load_stored_snapshot(snapshot_store)
    if snapshot is None:
        raise HTTPException(status_code=404, detail="snapshot not found")
    return calendar_to_snapshot(snapshot)


@router.delete("/snapshot", status_code=204)
def remove_snapshot(
    snapshot_store: SnapshotStore = Depends(get_snapshot_store),
) -> Response:
    snapshot_store.remove(SNAPSHOT_KEY)
    return Response(status_code=204)
