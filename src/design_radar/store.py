"""
SQLite snapshot store.
Keeps canonical documents per Figma file so the next check has something to diff against.
"""
import sqlite3
import logging
from contextlib import closing, contextmanager
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Iterator, Optional

from . import codec

logger = logging.getLogger(__name__)


@dataclass
class Snapshot:
    """A stored canonical document"""
    file_key: str
    version: str
    file_name: str
    payload: str
    created_at: str

    @property
    def document(self) -> Dict[str, Any]:
        return codec.decode(self.payload)


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class SnapshotStore:
    """Snapshot and tracked-file tables in one SQLite database."""

    def __init__(self, db_path: str):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_db()

    @contextmanager
    def _connect(self) -> Iterator[sqlite3.Connection]:
        with closing(sqlite3.connect(self.db_path)) as conn:
            with conn:
                yield conn

    def _init_db(self) -> None:
        """Initialize database schema."""
        with self._connect() as conn:
            conn.execute('''
                CREATE TABLE IF NOT EXISTS snapshots (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    file_key TEXT NOT NULL,
                    version TEXT NOT NULL,
                    file_name TEXT NOT NULL,
                    payload TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    UNIQUE(file_key, version)
                )
            ''')
            conn.execute('''
                CREATE TABLE IF NOT EXISTS tracked_files (
                    file_key TEXT PRIMARY KEY,
                    file_name TEXT,
                    last_version TEXT,
                    last_checked_at TEXT
                )
            ''')
            conn.execute('''
                CREATE INDEX IF NOT EXISTS idx_snapshots_file_key
                ON snapshots(file_key, created_at)
            ''')

    # Snapshots

    def save_snapshot(self, file_key: str, version: str, file_name: str,
                      document: Dict[str, Any]) -> None:
        payload = codec.encode(document)
        with self._connect() as conn:
            conn.execute(
                '''INSERT OR REPLACE INTO snapshots
                   (file_key, version, file_name, payload, created_at)
                   VALUES (?, ?, ?, ?, ?)''',
                (file_key, version, file_name or '', payload, _now())
            )
        logger.info(f"Saved snapshot {file_key}@{version} ({len(payload)} chars)")

    def get_latest_snapshot(self, file_key: str) -> Optional[Snapshot]:
        with self._connect() as conn:
            row = conn.execute(
                '''SELECT file_key, version, file_name, payload, created_at
                   FROM snapshots
                   WHERE file_key = ?
                   ORDER BY created_at DESC, id DESC
                   LIMIT 1''',
                (file_key,)
            ).fetchone()
        return Snapshot(*row) if row else None

    # Tracked files

    def get_last_version(self, file_key: str) -> Optional[str]:
        with self._connect() as conn:
            row = conn.execute(
                'SELECT last_version FROM tracked_files WHERE file_key = ?',
                (file_key,)
            ).fetchone()
        return row[0] if row else None

    def update_tracked_file(self, file_key: str, file_name: str, version: str) -> None:
        with self._connect() as conn:
            conn.execute(
                '''INSERT INTO tracked_files (file_key, file_name, last_version, last_checked_at)
                   VALUES (?, ?, ?, ?)
                   ON CONFLICT(file_key)
                   DO UPDATE SET file_name = excluded.file_name,
                                 last_version = excluded.last_version,
                                 last_checked_at = excluded.last_checked_at''',
                (file_key, file_name, version, _now())
            )

    # Cleanup

    def clean_old_snapshots(self, file_key: str, keep_count: int = 10) -> int:
        """Delete all but the newest ``keep_count`` snapshots of a file."""
        with self._connect() as conn:
            cursor = conn.execute(
                '''DELETE FROM snapshots
                   WHERE file_key = ? AND id NOT IN (
                       SELECT id FROM snapshots WHERE file_key = ?
                       ORDER BY created_at DESC, id DESC LIMIT ?
                   )''',
                (file_key, file_key, keep_count)
            )
            deleted_count = cursor.rowcount

        if deleted_count:
            logger.info(f"Cleaned up {deleted_count} old snapshots of {file_key}")
        return deleted_count

    def count_snapshots(self, file_key: str) -> int:
        with self._connect() as conn:
            return conn.execute(
                'SELECT COUNT(*) FROM snapshots WHERE file_key = ?', (file_key,)
            ).fetchone()[0]
