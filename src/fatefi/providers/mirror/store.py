"""Best-effort mirror of daily price snapshots to a remote database.

The local store is authoritative. Every mirror call swallows and logs its own
failures so price tracking and resolution never depend on the remote side.
"""
import asyncio
import logging
import threading

from sqlalchemy import func, insert, select, update
from sqlalchemy.engine import Engine
from sqlmodel import create_engine

from fatefi.providers.mirror.models import (MarketSnapshot,
                                            market_day_snapshots,
                                            mirror_metadata)

logger = logging.getLogger(__name__)


class MirrorStore:
    """Upsert-by-date mirror of ``MarketSnapshot`` rows."""

    def __init__(
        self,
        url: str | None = None,
        *,
        timeout: float = 10.0,
        engine: Engine | None = None,
    ) -> None:
        """Initialize the mirror.

        Args:
            url: Database URL. Empty/None disables the mirror unless engine is given.
            timeout: Seconds allowed for one mirror call.
            engine: Pre-built engine (tests pass an in-memory SQLite engine).
        """
        self._url = url or ""
        self._timeout = timeout
        self._engine = engine
        self._schema_ready = False
        self._lock = threading.Lock()

    @property
    def enabled(self) -> bool:
        return self._engine is not None or bool(self._url)

    def _get_engine(self) -> Engine:
        with self._lock:
            if self._engine is None:
                connect_args = {}
                if self._url.startswith("postgresql"):
                    connect_args["connect_timeout"] = int(self._timeout)
                self._engine = create_engine(
                    self._url, pool_pre_ping=True, connect_args=connect_args
                )
            if not self._schema_ready:
                mirror_metadata.create_all(self._engine)
                self._schema_ready = True
            return self._engine

    def upsert(self, snapshot: MarketSnapshot) -> None:
        """Insert or replace the row for snapshot.date. Raises on failure."""
        values = snapshot.model_dump(exclude={"date"})
        with self._get_engine().begin() as conn:
            result = conn.execute(
                update(market_day_snapshots)
                .where(market_day_snapshots.c.date == snapshot.date)
                .values(**values, updated_at=func.now())
            )
            if result.rowcount == 0:
                conn.execute(
                    insert(market_day_snapshots).values(date=snapshot.date, **values)
                )

    def get_day(self, date: str) -> MarketSnapshot | None:
        """Read one day's row. Raises on failure."""
        with self._get_engine().connect() as conn:
            row = conn.execute(
                select(market_day_snapshots).where(market_day_snapshots.c.date == date)
            ).mappings().first()
        return MarketSnapshot.model_validate(dict(row)) if row else None

    async def safe_upsert(self, snapshot: MarketSnapshot) -> bool:
        """Mirror a snapshot off the event loop; log and return False on any failure."""
        if not self.enabled:
            return False
        try:
            await asyncio.wait_for(
                asyncio.to_thread(self.upsert, snapshot), timeout=self._timeout
            )
            return True
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Mirror upsert failed for %s: %s", snapshot.date, exc)
            return False

    async def safe_get_day(self, date: str) -> MarketSnapshot | None:
        """Read a snapshot from the mirror; None when disabled, missing, or failing."""
        if not self.enabled:
            return None
        try:
            return await asyncio.wait_for(
                asyncio.to_thread(self.get_day, date), timeout=self._timeout
            )
        except Exception as exc:  # pylint: disable=broad-except
            logger.warning("Mirror read failed for %s: %s", date, exc)
            return None

    def close(self) -> None:
        if self._engine is not None:
            self._engine.dispose()
