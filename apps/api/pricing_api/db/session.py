"""
Database engine and per-request session management.
"""
from typing import Any, Dict, Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import make_url
from sqlalchemy.orm import sessionmaker, Session

from pricing_api.core.config import get_settings

settings = get_settings()


def engine_options(database_url: str) -> Dict[str, Any]:
    """
    Engine keyword arguments for the given URL.

    SQLite connections are shared across FastAPI's worker threads, so the
    same-thread check is disabled for local development databases.
    """
    if make_url(database_url).get_backend_name() == "sqlite":
        return {"connect_args": {"check_same_thread": False}}
    return {"pool_pre_ping": True}


engine = create_engine(settings.DATABASE_URL, **engine_options(settings.DATABASE_URL))
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db() -> Generator[Session, None, None]:
    """Dependency that provides a database session."""
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()
