"""SQLite-backed recommendation store.

Persists the most recent recommendation list and affinity profile as JSON
snapshots in a local SQLite database (``data/recommendations.db`` by
default).  Uses ``aiosqlite`` for async I/O.

Every public method is best-effort: storage or decoding failures are
logged and surface as ``None`` / no-op, never as exceptions.
"""

from __future__ import annotations

from collections.abc import Callable
from datetime import date
from pathlib import Path

import aiosqlite
import structlog
from pydantic import TypeAdapter, ValidationError

from showrec.interfaces.recommendation_store import IRecommendationStore
from showrec.models.profile import AffinityProfile
from showrec.models.recommendation import Recommendation
from showrec.utils.datetime_helpers import is_event_date_past
from showrec.utils.errors import PersistenceError

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/recommendations.db")

_RECOMMENDATIONS_KEY = "recommendations"
_PROFILE_KEY = "user_profile"

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS snapshots (
    name        TEXT PRIMARY KEY,
    payload     TEXT NOT NULL,
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_UPSERT_SQL = """\
INSERT INTO snapshots (name, payload)
VALUES (?, ?)
ON CONFLICT(name)
DO UPDATE SET payload    = excluded.payload,
              updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_SELECT_SQL = "SELECT payload FROM snapshots WHERE name = ?;"
_DELETE_SQL = "DELETE FROM snapshots WHERE name = ?;"

_RECOMMENDATION_LIST = TypeAdapter(list[Recommendation])


class SQLiteRecommendationStore(IRecommendationStore):
    """SQLite persistence for the last recommendation list and profile.

    Parameters
    ----------
    db_path:
        Database file; parent directories are created on initialise.
    today:
        Returns "today" for the past-date filter, injectable for tests.
    """

    def __init__(
        self,
        db_path: str | Path = _DEFAULT_DB_PATH,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._db_path = Path(db_path)
        self._today = today
        self._initialized = False

    async def initialize(self) -> None:
        """Create the snapshots table if it doesn't exist."""
        try:
            self._db_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_CREATE_TABLE_SQL)
                await db.commit()
        except (aiosqlite.Error, OSError) as exc:
            logger.error("recommendation_store_init_failed", path=str(self._db_path), error=str(exc))
            return
        self._initialized = True
        logger.info("recommendation_store_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # Recommendation list
    # ------------------------------------------------------------------

    async def save_list(self, recommendations: list[Recommendation]) -> None:
        try:
            payload = _RECOMMENDATION_LIST.dump_json(recommendations).decode("utf-8")
            await self._write(_RECOMMENDATIONS_KEY, payload)
        except (PersistenceError, ValueError) as exc:
            logger.error("recommendation_store_save_failed", error=str(exc))
            return
        logger.info("recommendations_saved", count=len(recommendations))

    async def load_list(self) -> list[Recommendation] | None:
        try:
            payload = await self._read(_RECOMMENDATIONS_KEY)
            if payload is None:
                return None
            recommendations = _RECOMMENDATION_LIST.validate_json(payload)
        except (PersistenceError, ValidationError, ValueError) as exc:
            logger.error("recommendation_store_load_failed", error=str(exc))
            return None

        today = self._today()
        fresh = [
            r for r in recommendations
            if not r.event_date or not is_event_date_past(r.event_date, today)
        ]
        logger.debug(
            "recommendations_loaded",
            stored=len(recommendations),
            dropped_past=len(recommendations) - len(fresh),
        )
        return fresh

    async def clear(self) -> None:
        try:
            await self._delete(_RECOMMENDATIONS_KEY)
        except PersistenceError as exc:
            logger.error("recommendation_store_clear_failed", error=str(exc))

    # ------------------------------------------------------------------
    # Profile
    # ------------------------------------------------------------------

    async def save_profile(self, profile: AffinityProfile) -> None:
        try:
            await self._write(_PROFILE_KEY, profile.model_dump_json())
        except (PersistenceError, ValueError) as exc:
            logger.error("profile_save_failed", error=str(exc))

    async def load_profile(self) -> AffinityProfile | None:
        try:
            payload = await self._read(_PROFILE_KEY)
            if payload is None:
                return None
            return AffinityProfile.model_validate_json(payload)
        except (PersistenceError, ValidationError, ValueError) as exc:
            logger.error("profile_load_failed", error=str(exc))
            return None

    async def clear_profile(self) -> None:
        try:
            await self._delete(_PROFILE_KEY)
        except PersistenceError as exc:
            logger.error("profile_clear_failed", error=str(exc))

    def get_provider_name(self) -> str:
        return "sqlite_store"

    # ------------------------------------------------------------------
    # Raw snapshot I/O
    # ------------------------------------------------------------------

    async def _ensure_initialized(self) -> None:
        if not self._initialized:
            await self.initialize()
        if not self._initialized:
            raise PersistenceError(
                message=f"Store at {self._db_path} is not usable",
                provider_name=self.get_provider_name(),
            )

    async def _write(self, name: str, payload: str) -> None:
        await self._ensure_initialized()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_UPSERT_SQL, (name, payload))
                await db.commit()
        except (aiosqlite.Error, OSError) as exc:
            raise PersistenceError(message=str(exc), provider_name=self.get_provider_name()) from exc

    async def _read(self, name: str) -> str | None:
        await self._ensure_initialized()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(_SELECT_SQL, (name,))
                row = await cursor.fetchone()
        except (aiosqlite.Error, OSError) as exc:
            raise PersistenceError(message=str(exc), provider_name=self.get_provider_name()) from exc
        return row[0] if row is not None else None

    async def _delete(self, name: str) -> None:
        await self._ensure_initialized()
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                await db.execute(_DELETE_SQL, (name,))
                await db.commit()
        except (aiosqlite.Error, OSError) as exc:
            raise PersistenceError(message=str(exc), provider_name=self.get_provider_name()) from exc
