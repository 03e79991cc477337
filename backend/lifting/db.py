from typing import Any, Iterator

from sqlalchemy import create_engine
from sqlalchemy.orm import DeclarativeBase, Session, sessionmaker
from .settings import get_settings

settings = get_settings()


def engine_options(url: str) -> dict[str, Any]:
    """Keyword arguments for create_engine, per backend."""
    options: dict[str, Any] = {"pool_pre_ping": True}
    if url.startswith("sqlite"):
        # tests run on a SQLite file (tests/conftest.py sets DB_URL) and
        # TestClient serves each request from a worker thread
        options["connect_args"] = {"check_same_thread": False}
    return options


engine = create_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))

# every model in lifting.models inherits from this
class Base(DeclarativeBase):
    pass

# services commit explicitly; repositories only flush
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

def get_db() -> Iterator[Session]:
    """One session per request, closed when the response is done."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
