"""Database engine and session management."""
from collections.abc import Generator
from contextlib import contextmanager

from sqlalchemy.engine import Engine
from sqlmodel import Session, create_engine

from fatefi.config import settings
from fatefi.db.models import (  # noqa: F401  # pylint: disable=unused-import
    Nonce, Prediction, PriceSnapshot, SQLModel, TarotDraw, User)


def make_engine(url: str, *, echo: bool = False) -> Engine:
    """Create an engine; SQLite connections may be shared across threads."""
    if url.startswith("sqlite"):
        return create_engine(
            url, echo=echo, connect_args={"check_same_thread": False}
        )
    return create_engine(
        url,
        echo=echo,
        pool_pre_ping=True,
        pool_size=5,
        max_overflow=10,
    )


DATABASE_URL = settings.database_url

# Synchronous engine for SQLModel (sync sessions)
engine = make_engine(DATABASE_URL, echo=settings.sql_echo)


@contextmanager
def get_session(bind: Engine | None = None) -> Generator[Session, None, None]:
    """Yield a database session; commits on success, rolls back on error."""
    session = Session(bind or engine, expire_on_commit=False)
    try:
        yield session
        session.commit()
    except Exception:
        session.rollback()
        raise
    finally:
        session.close()


def init_db(bind: Engine | None = None) -> None:
    """Create all tables. Safe to call on startup (idempotent for existing tables)."""
    SQLModel.metadata.create_all(bind or engine)
