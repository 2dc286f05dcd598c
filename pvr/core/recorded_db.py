"""SQLite stores for recorded programs and their files"""

import sqlite3
import logging
from pathlib import Path
from typing import List, Optional
from contextlib import contextmanager

from pvr.core.exceptions import RowNotFoundError
from pvr.core.models import DropLogFile, Recorded, RecordedHistory, Thumbnail, VideoFile

logger = logging.getLogger(__name__)


class RecordedDatabase:
    """SQLite database holding recorded programs, their files and history

    Children reference their owner through a plain recorded_id column.
    There are no database-level cascades; owners delete their children
    explicitly.
    """

    def __init__(self, db_path: Path):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_database()

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections"""
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row
        try:
            yield conn
            conn.commit()
        except Exception as e:
            conn.rollback()
            raise e
        finally:
            conn.close()

    def _init_database(self):
        """Initialize database schema"""
        with self._get_connection() as conn:
            cursor = conn.cursor()

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recorded (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL DEFAULT '',
                    is_recording INTEGER NOT NULL DEFAULT 0,
                    reserve_id INTEGER,
                    is_protected INTEGER NOT NULL DEFAULT 0,
                    start_at INTEGER,
                    end_at INTEGER,
                    drop_log_file_id INTEGER UNIQUE,
                    created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS video_file (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    recorded_id INTEGER NOT NULL,
                    parent_directory_name TEXT NOT NULL,
                    file_path TEXT NOT NULL,
                    type TEXT NOT NULL,
                    name TEXT NOT NULL,
                    size INTEGER NOT NULL DEFAULT 0,
                    UNIQUE(parent_directory_name, file_path)
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_video_file_recorded
                ON video_file(recorded_id)
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS thumbnail (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    recorded_id INTEGER NOT NULL,
                    file_path TEXT NOT NULL UNIQUE
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_thumbnail_recorded
                ON thumbnail(recorded_id)
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS drop_log_file (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    file_path TEXT NOT NULL UNIQUE,
                    error_cnt INTEGER NOT NULL DEFAULT 0,
                    drop_cnt INTEGER NOT NULL DEFAULT 0,
                    scrambling_cnt INTEGER NOT NULL DEFAULT 0
                )
            """)

            cursor.execute("""
                CREATE TABLE IF NOT EXISTS recorded_history (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    channel_id INTEGER,
                    end_at INTEGER NOT NULL
                )
            """)

            cursor.execute("""
                CREATE INDEX IF NOT EXISTS idx_recorded_history_end_at
                ON recorded_history(end_at)
            """)

            logger.info(f"Database initialized at {self.db_path}")


class RecordedStore:
    """Recorded rows, loaded together with their children"""

    def __init__(self, db: RecordedDatabase):
        self.db = db

    def insert_once(self, recorded: Recorded) -> int:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO recorded
                (name, is_recording, reserve_id, is_protected, start_at, end_at, drop_log_file_id)
                VALUES (?, ?, ?, ?, ?, ?, ?)
            """, (
                recorded.name, int(recorded.is_recording), recorded.reserve_id,
                int(recorded.is_protected), recorded.start_at, recorded.end_at,
                recorded.drop_log_file_id
            ))
            return cursor.lastrowid

    def find_id(self, recorded_id: int) -> Optional[Recorded]:
        """Get a recorded program with thumbnails, video files and drop log"""
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM recorded WHERE id = ?", (recorded_id,))
            row = cursor.fetchone()
            if row is None:
                return None

            recorded = Recorded.from_row(row)

            cursor.execute(
                "SELECT * FROM thumbnail WHERE recorded_id = ? ORDER BY id ASC",
                (recorded_id,)
            )
            recorded.thumbnails = [Thumbnail.from_row(r) for r in cursor.fetchall()]

            cursor.execute(
                "SELECT * FROM video_file WHERE recorded_id = ? ORDER BY id ASC",
                (recorded_id,)
            )
            recorded.video_files = [VideoFile.from_row(r) for r in cursor.fetchall()]

            if recorded.drop_log_file_id is not None:
                cursor.execute(
                    "SELECT * FROM drop_log_file WHERE id = ?",
                    (recorded.drop_log_file_id,)
                )
                drop_row = cursor.fetchone()
                if drop_row is not None:
                    recorded.drop_log_file = DropLogFile.from_row(drop_row)

            return recorded

    def delete_once(self, recorded_id: int) -> None:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM recorded WHERE id = ?", (recorded_id,))
            if cursor.rowcount == 0:
                raise RowNotFoundError(f"recorded {recorded_id} does not exist", operation="delete_recorded")

    def change_protect(self, recorded_id: int, is_protect: bool) -> None:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE recorded SET is_protected = ? WHERE id = ?",
                (int(is_protect), recorded_id)
            )
            if cursor.rowcount == 0:
                raise RowNotFoundError(f"recorded {recorded_id} does not exist", operation="change_protect")

    def remove_drop_log_file_id(self, drop_log_file_id: int) -> int:
        """Clear the back-reference to a drop log; returns number of owners updated"""
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE recorded SET drop_log_file_id = NULL WHERE drop_log_file_id = ?",
                (drop_log_file_id,)
            )
            return cursor.rowcount


class VideoFileStore:
    """Video file rows"""

    def __init__(self, db: RecordedDatabase):
        self.db = db

    def insert_once(self, video_file: VideoFile) -> int:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO video_file
                (recorded_id, parent_directory_name, file_path, type, name, size)
                VALUES (?, ?, ?, ?, ?, ?)
            """, (
                video_file.recorded_id, video_file.parent_directory_name, video_file.file_path,
                video_file.type, video_file.name, video_file.size
            ))
            return cursor.lastrowid

    def find_id(self, video_file_id: int) -> Optional[VideoFile]:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM video_file WHERE id = ?", (video_file_id,))
            row = cursor.fetchone()
            return VideoFile.from_row(row) if row is not None else None

    def find_all(self) -> List[VideoFile]:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM video_file ORDER BY id ASC")
            return [VideoFile.from_row(row) for row in cursor.fetchall()]

    def delete_once(self, video_file_id: int) -> None:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM video_file WHERE id = ?", (video_file_id,))
            if cursor.rowcount == 0:
                raise RowNotFoundError(f"video file {video_file_id} does not exist", operation="delete_video_file")

    def delete_recorded_id(self, recorded_id: int) -> int:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM video_file WHERE recorded_id = ?", (recorded_id,))
            return cursor.rowcount

    def update_size(self, video_file_id: int, size: int) -> None:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "UPDATE video_file SET size = ? WHERE id = ?",
                (size, video_file_id)
            )
            if cursor.rowcount == 0:
                raise RowNotFoundError(f"video file {video_file_id} does not exist", operation="update_size")


class ThumbnailStore:
    """Thumbnail rows"""

    def __init__(self, db: RecordedDatabase):
        self.db = db

    def insert_once(self, thumbnail: Thumbnail) -> int:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO thumbnail (recorded_id, file_path) VALUES (?, ?)",
                (thumbnail.recorded_id, thumbnail.file_path)
            )
            return cursor.lastrowid

    def delete_recorded_id(self, recorded_id: int) -> int:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM thumbnail WHERE recorded_id = ?", (recorded_id,))
            return cursor.rowcount


class DropLogFileStore:
    """Drop log rows"""

    def __init__(self, db: RecordedDatabase):
        self.db = db

    def insert_once(self, drop_log_file: DropLogFile) -> int:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("""
                INSERT INTO drop_log_file (file_path, error_cnt, drop_cnt, scrambling_cnt)
                VALUES (?, ?, ?, ?)
            """, (
                drop_log_file.file_path, drop_log_file.error_cnt,
                drop_log_file.drop_cnt, drop_log_file.scrambling_cnt
            ))
            return cursor.lastrowid

    def find_id(self, drop_log_file_id: int) -> Optional[DropLogFile]:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM drop_log_file WHERE id = ?", (drop_log_file_id,))
            row = cursor.fetchone()
            return DropLogFile.from_row(row) if row is not None else None

    def find_all(self) -> List[DropLogFile]:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT * FROM drop_log_file ORDER BY id ASC")
            return [DropLogFile.from_row(row) for row in cursor.fetchall()]

    def delete_once(self, drop_log_file_id: int) -> None:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM drop_log_file WHERE id = ?", (drop_log_file_id,))
            if cursor.rowcount == 0:
                raise RowNotFoundError(f"drop log {drop_log_file_id} does not exist", operation="delete_drop_log_file")


class RecordedHistoryStore:
    """Recorded history rows (retention is independent of recorded rows)"""

    def __init__(self, db: RecordedDatabase):
        self.db = db

    def insert_once(self, history: RecordedHistory) -> int:
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute(
                "INSERT INTO recorded_history (name, channel_id, end_at) VALUES (?, ?, ?)",
                (history.name, history.channel_id, history.end_at)
            )
            return cursor.lastrowid

    def delete(self, before_ms: int) -> int:
        """Delete history rows that ended before the given epoch milliseconds"""
        with self.db._get_connection() as conn:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM recorded_history WHERE end_at < ?", (before_ms,))
            return cursor.rowcount
