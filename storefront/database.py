# storefront/database.py
from sqlmodel import SQLModel, create_engine, Session

from storefront.core.config import get_settings


def _engine_options(url: str) -> tuple[str, dict]:
    """
    Per-backend engine tuning.

    SQLite (local runs, tests): sync routes hit the same connection from
    threadpool workers, so the thread check is off.

    Postgres: TLS required, stale pooled connections are pinged first.
    """
    if url.startswith("sqlite"):
        return url, {"connect_args": {"check_same_thread": False}}

    if "sslmode=" not in url:
        url += ("&" if "?" in url else "?") + "sslmode=require"
    return url, {"pool_pre_ping": True}


_url, _options = _engine_options(get_settings().DATABASE_URL)
engine = create_engine(_url, echo=False, **_options)


def create_db_and_tables() -> None:
    """Create missing tables. Run once at startup."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Request-scoped session dependency.

    Repositories commit through it; nothing is rolled back across calls.
    """
    with Session(engine) as session:
        yield session
