from collections.abc import Generator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase
from sqlalchemy.orm import sessionmaker
from sqlalchemy.orm import Session

from anki_heatmap.settings import Settings


class Base(DeclarativeBase):
    pass


def get_database_url() -> str:
    settings = Settings()
    if not settings.database_url:
        raise RuntimeError("DATABASE_URL is not set")
    return settings.database_url


def _connect_args(database_url: str) -> dict[str, object]:
    # SQLite connections are shared across FastAPI's threadpool workers.
    if database_url.startswith("sqlite"):
        return {"check_same_thread": False}
    return {}


database_url = get_database_url()
engine = create_engine(database_url, connect_args=_connect_args(database_url))
SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)


def init_db() -> None:
    """Create missing tables on the configured engine."""

    # Registers the mapped tables on Base.metadata.
    import anki_heatmap.models  # noqa: F401

    Base.metadata.create_all(bind=engine)


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
