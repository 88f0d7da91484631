from fastapi import Depends
from sqlalchemy.orm import Session

from anki_heatmap.db import get_db
from anki_heatmap.settings import Settings
from anki_heatmap.stores import SqlSecretStore
from anki_heatmap.stores import SqlSnapshotStore


def get_settings() -> Settings:
    return Settings()


def get_secret_store(db: Session = Depends(get_db)) -> SqlSecretStore:
    return SqlSecretStore(db)


def get_snapshot_store(db: Session = Depends(get_db)) -> SqlSnapshotStore:
    return SqlSnapshotStore(db)
