from typing import Protocol

from sqlalchemy import delete
from sqlalchemy import select
from sqlalchemy.orm import Session

from anki_heatmap.models import ReviewSnapshot
from anki_heatmap.models import StoredSecret


ANKICONNECT_URL_KEY = "anki.widget.ankiconnect.url"
SNAPSHOT_KEY = "anki.widget.lastSuccess"


class SecretStore(Protocol):
    """Credential storage for the configured AnkiConnect endpoint."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def contains(self, key: str) -> bool: ...

    def remove(self, key: str) -> None: ...


class SnapshotStore(Protocol):
    """Storage for the last successfully fetched review snapshot."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def contains(self, key: str) -> bool: ...

    def remove(self, key: str) -> None: ...


class _SqlKeyValueStore:
    model: type[StoredSecret] | type[ReviewSnapshot]

    def __init__(self, db: Session) -> None:
        self.db = db

    def get(self, key: str) -> str | None:
        return self.db.scalar(select(self.model.value).where(self.model.key == key))

    def set(self, key: str, value: str) -> None:
        record = self.db.scalar(select(self.model).where(self.model.key == key))
        if record is None:
            self.db.add(self.model(key=key, value=value))
        else:
            record.value = value
        self.db.commit()

    def contains(self, key: str) -> bool:
        return self.get(key) is not None

    def remove(self, key: str) -> None:
        self.db.execute(delete(self.model).where(self.model.key == key))
        self.db.commit()


class SqlSecretStore(_SqlKeyValueStore):
    model = StoredSecret


class SqlSnapshotStore(_SqlKeyValueStore):
    model = ReviewSnapshot


class MemoryStore:
    """Dict-backed store satisfying both store protocols."""

    def __init__(self, values: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(values or {})

    def get(self, key: str) -> str | None:
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        self.values[key] = value

    def contains(self, key: str) -> bool:
        return key in self.values

    def remove(self, key: str) -> None:
        self.values.pop(key, None)
