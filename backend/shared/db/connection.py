"""SQLite database connection and schema management."""

import json
import os
import sqlite3
from datetime import UTC, datetime
from pathlib import Path
from uuid import uuid4

import structlog

from shared.dal.collections import COLLECTIONS, get_collection, validate_create
from shared.errors import PortfolioError

logger = structlog.get_logger()

_DB_FILE_PERMISSIONS = 0o600

# One schema-light table per registered collection. Table names come only
# from the collection registry, never from request input.
_TABLE_SQL = """\
CREATE TABLE IF NOT EXISTS {name} (
    id TEXT PRIMARY KEY,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL,
    data TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS idx_{name}_created_at
    ON {name} (created_at);
"""


def utc_timestamp() -> str:
    return datetime.now(tz=UTC).isoformat()


class Database:
    """SQLite database wrapper with schema management and seed import support."""

    def __init__(self, path: str | Path) -> None:
        self._path = str(path)
        self._conn: sqlite3.Connection | None = None

    @property
    def connection(self) -> sqlite3.Connection:
        """Return the active connection or raise if disconnected."""
        if self._conn is None:
            raise RuntimeError("Database is not connected")
        return self._conn

    def connect(self) -> None:
        """Open the database, apply pragmas, create schema, and harden file permissions."""
        parent = Path(self._path).parent
        parent.mkdir(parents=True, exist_ok=True)

        self._conn = sqlite3.connect(self._path, check_same_thread=False)
        self._conn.execute("PRAGMA journal_mode=WAL")
        self._conn.execute("PRAGMA foreign_keys=ON")
        self._conn.execute("PRAGMA busy_timeout=5000")
        self._conn.executescript("".join(_TABLE_SQL.format(name=name) for name in COLLECTIONS))

        self._harden_permissions()

    def close(self) -> None:
        """Close the database connection."""
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def seed_from_json(self, seed_path: str | None) -> int:
        """Load initial content from a JSON file of ``{collection: [record, ...]}``.

        Returns the number of records inserted. Skips seeding when the path is
        None, the file does not exist, or any collection already has data.
        Every record is validated against its collection schema, and the whole
        import runs in a single transaction; any failure causes a full rollback.
        """
        if seed_path is None:
            return 0

        json_path = Path(seed_path)
        if not json_path.exists():
            return 0

        conn = self.connection
        for name in COLLECTIONS:
            row = conn.execute(f"SELECT COUNT(*) FROM {name}").fetchone()  # noqa: S608
            if row[0] > 0:
                logger.info("content tables already have data, skipping seed", collection=name)
                return 0

        rows = self._parse_seed_json(json_path, seed_path)
        self._insert_seed_rows(conn, rows)

        logger.info("seeded content from file", count=len(rows), path=seed_path)
        return len(rows)

    def _parse_seed_json(self, json_path: Path, display_path: str) -> list[tuple[str, dict]]:
        """Parse and validate the seed file into (collection, fields) pairs."""
        try:
            raw = json_path.read_text(encoding="utf-8")
        except OSError as exc:
            msg = f"Failed to read seed file: {display_path}"
            raise OSError(msg) from exc

        try:
            data = json.loads(raw)
        except (json.JSONDecodeError, ValueError) as exc:
            msg = f"Malformed JSON in seed file: {display_path}"
            raise OSError(msg) from exc

        if not isinstance(data, dict):
            msg = f"Expected JSON object at root in {display_path}"
            raise OSError(msg)

        rows: list[tuple[str, dict]] = []
        for name, records in data.items():
            if not isinstance(records, list):
                msg = f"Expected a list of records for '{name}' in {display_path}"
                raise OSError(msg)
            try:
                collection = get_collection(name)
                rows.extend((name, validate_create(collection, record)) for record in records)
            except PortfolioError as exc:
                msg = f"Invalid seed data for '{name}' in {display_path}: {exc.public_message}"
                raise OSError(msg) from exc

        return rows

    @staticmethod
    def _insert_seed_rows(conn: sqlite3.Connection, rows: list[tuple[str, dict]]) -> None:
        """Insert all seed rows in a single transaction."""
        try:
            conn.execute("BEGIN")
            for name, fields in rows:
                now = utc_timestamp()
                conn.execute(
                    f"INSERT INTO {name} (id, created_at, updated_at, data) VALUES (?, ?, ?, ?)",  # noqa: S608
                    (str(uuid4()), now, now, json.dumps(fields)),
                )
            conn.execute("COMMIT")
        except Exception:
            conn.execute("ROLLBACK")
            raise

    def _harden_permissions(self) -> None:
        """Set restrictive file permissions on POSIX systems (best effort).

        Hardens the main DB file and WAL/SHM sibling files created by WAL mode.
        """
        if os.name != "posix":  # pragma: no cover
            return
        for suffix in ("", "-wal", "-shm"):
            p = Path(self._path + suffix)
            if p.exists():
                try:
                    p.chmod(_DB_FILE_PERMISSIONS)
                except OSError:
                    logger.warning("could not set file permissions", permissions=oct(_DB_FILE_PERMISSIONS), path=str(p))
