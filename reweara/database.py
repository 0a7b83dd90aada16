# reweara/database.py
from typing import Any

from sqlmodel import SQLModel, create_engine, Session

from reweara.core.config import get_settings

settings = get_settings()


def _engine_options(url: str) -> tuple[str, dict[str, Any]]:
    """
    Per-backend engine tweaks.

    Postgres (production): force TLS unless the URL already picks an sslmode.
    SQLite (local dev, tests): FastAPI runs sync routes on a threadpool, so
    one connection may be used from several threads.
    """
    options: dict[str, Any] = {"pool_pre_ping": True}

    if url.startswith("postgresql") and "sslmode=" not in url:
        url += ("&" if "?" in url else "?") + "sslmode=require"
    elif url.startswith("sqlite"):
        options["connect_args"] = {"check_same_thread": False}

    return url, options


db_url, engine_options = _engine_options(settings.DATABASE_URL)
engine = create_engine(db_url, echo=False, **engine_options)


def create_db_and_tables() -> None:
    """Create every table registered on SQLModel.metadata (idempotent)."""
    SQLModel.metadata.create_all(engine)


def get_session():
    """
    Request-scoped session dependency:

        @router.get("/cart")
        def get_cart(session: Session = Depends(get_session)): ...
    """
    with Session(engine) as session:
        yield session
