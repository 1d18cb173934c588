"""SQLite-backed artist identity store.

Holds the canonical artist records (id, display name, short bio) and, on
each record, the persisted network document (``webmapdata``, JSON text).
Uses ``aiosqlite`` for async I/O, ``rapidfuzz`` to rank disambiguation
options.

Records are loaded with :meth:`SQLiteIdentityStore.import_artists` (see
``python -m src.cli seed``); the network builder never creates one.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Iterable

import aiosqlite
import structlog

from src.interfaces.identity_store import IIdentityStore
from src.models.network import ArtistIdentity, ArtistOption
from src.utils.errors import CacheWriteFailedError
from src.utils.text_normalizer import clean_name, rank_by_similarity

logger = structlog.get_logger(logger_name=__name__)

_DEFAULT_DB_PATH = Path("data/artists.db")
_OPTION_PREFILTER_LIMIT = 200

_CREATE_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS artists (
    id          TEXT PRIMARY KEY,
    name        TEXT NOT NULL,
    bio         TEXT,
    webmapdata  TEXT,
    updated_at  TEXT NOT NULL DEFAULT (strftime('%Y-%m-%dT%H:%M:%fZ', 'now'))
);
"""

_CREATE_INDICES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_artists_name ON artists(name);",
    "CREATE INDEX IF NOT EXISTS idx_artists_name_nocase ON artists(name COLLATE NOCASE);",
]

_UPSERT_SQL = """\
INSERT INTO artists (id, name, bio)
VALUES (?, ?, ?)
ON CONFLICT(id)
DO UPDATE SET name       = excluded.name,
              bio        = excluded.bio,
              updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now');
"""

_WRITE_NETWORK_SQL = """\
UPDATE artists
SET webmapdata = ?,
    updated_at = strftime('%Y-%m-%dT%H:%M:%fZ', 'now')
WHERE id = ?;
"""


class SQLiteIdentityStore(IIdentityStore):
    """Artist identities and per-artist network documents in SQLite."""

    def __init__(self, db_path: str | Path = _DEFAULT_DB_PATH) -> None:
        self._db_path = Path(db_path)

    async def initialize(self) -> None:
        """Create the artists table and indices if they don't exist."""
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_CREATE_TABLE_SQL)
            for idx_sql in _CREATE_INDICES_SQL:
                await db.execute(idx_sql)
            await db.commit()
        logger.info("identity_db_initialized", path=str(self._db_path))

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    async def get_by_name(self, name: str) -> ArtistIdentity | None:
        """Exact name match first, then case-insensitive."""
        name = clean_name(name)
        if not name:
            return None
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT id, name FROM artists WHERE name = ? LIMIT 1", (name,)
            )
            row = await cursor.fetchone()
            if row is None:
                cursor = await db.execute(
                    "SELECT id, name FROM artists WHERE LOWER(name) = LOWER(?) "
                    "ORDER BY name LIMIT 1",
                    (name,),
                )
                row = await cursor.fetchone()
        if row is None:
            return None
        return ArtistIdentity(name=row["name"], canonical_id=row["id"])

    async def get_by_id(self, canonical_id: str) -> ArtistIdentity | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT id, name FROM artists WHERE id = ?", (canonical_id,)
            )
            row = await cursor.fetchone()
        if row is None:
            return None
        return ArtistIdentity(name=row["name"], canonical_id=row["id"])

    async def search_options(self, query: str, limit: int = 10) -> list[ArtistOption]:
        """Artists whose names contain *query*, ranked by fuzzy similarity."""
        query = clean_name(query)
        if not query:
            return []
        async with aiosqlite.connect(str(self._db_path)) as db:
            db.row_factory = aiosqlite.Row
            cursor = await db.execute(
                "SELECT id, name, bio FROM artists WHERE LOWER(name) LIKE LOWER(?) LIMIT ?",
                (f"%{query}%", _OPTION_PREFILTER_LIMIT),
            )
            rows = await cursor.fetchall()

        by_name: dict[str, list[ArtistOption]] = {}
        for row in rows:
            by_name.setdefault(row["name"], []).append(
                ArtistOption(id=row["id"], name=row["name"], bio=row["bio"])
            )
        scores = dict(rank_by_similarity(query, list(by_name), limit=len(by_name)))
        lowered = query.lower()

        def _rank(name: str) -> tuple[int, float]:
            if name == query:
                tier = 0
            elif name.lower() == lowered:
                tier = 1
            elif name.lower().startswith(lowered):
                tier = 2
            else:
                tier = 3
            return tier, -scores.get(name, 0.0)

        options = [opt for name in sorted(by_name, key=_rank) for opt in by_name[name]]
        logger.debug("artist_options_ranked", query=query, options=min(len(options), limit))
        return options[:limit]

    # ------------------------------------------------------------------
    # Network documents
    # ------------------------------------------------------------------

    async def read_network(self, canonical_id: str) -> dict[str, Any] | None:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "SELECT webmapdata FROM artists WHERE id = ?", (canonical_id,)
            )
            row = await cursor.fetchone()
        if row is None or not row[0]:
            return None
        try:
            document = json.loads(row[0])
        except json.JSONDecodeError:
            logger.warning("network_document_corrupt", canonical_id=canonical_id)
            return None
        return document if isinstance(document, dict) else None

    async def write_network(self, canonical_id: str, document: dict[str, Any]) -> bool:
        try:
            async with aiosqlite.connect(str(self._db_path)) as db:
                cursor = await db.execute(
                    _WRITE_NETWORK_SQL, (json.dumps(document), canonical_id)
                )
                await db.commit()
                written = cursor.rowcount > 0
        except aiosqlite.Error as exc:
            raise CacheWriteFailedError(
                message=f"Could not persist network for {canonical_id}: {exc}",
                provider_name="sqlite",
            ) from exc
        logger.info("network_document_written", canonical_id=canonical_id, written=written)
        return written

    async def clear_network(self, canonical_id: str) -> bool:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute(
                "UPDATE artists SET webmapdata = NULL WHERE id = ? AND webmapdata IS NOT NULL",
                (canonical_id,),
            )
            await db.commit()
            cleared = cursor.rowcount > 0
        logger.info("network_document_cleared", canonical_id=canonical_id, cleared=cleared)
        return cleared

    # ------------------------------------------------------------------
    # Maintenance
    # ------------------------------------------------------------------

    async def upsert_artist(self, canonical_id: str, name: str, bio: str | None = None) -> None:
        """Create or rename one artist record.  Any network document is kept."""
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.execute(_UPSERT_SQL, (canonical_id, clean_name(name), bio))
            await db.commit()

    async def import_artists(self, records: Iterable[dict[str, Any]]) -> int:
        """Bulk-load ``{"id", "name", "bio"?}`` records.  Returns rows written.

        Records missing an id or a name are skipped.
        """
        rows = [
            (str(r["id"]), clean_name(str(r["name"])), r.get("bio") or None)
            for r in records
            if r.get("id") and r.get("name") and clean_name(str(r["name"]))
        ]
        if not rows:
            return 0
        async with aiosqlite.connect(str(self._db_path)) as db:
            await db.executemany(_UPSERT_SQL, rows)
            await db.commit()
        logger.info("artists_imported", count=len(rows))
        return len(rows)

    async def count(self) -> int:
        async with aiosqlite.connect(str(self._db_path)) as db:
            cursor = await db.execute("SELECT COUNT(*) FROM artists")
            row = await cursor.fetchone()
        return int(row[0]) if row else 0
