"""
SQLite storage module for the Pomodoro Timer application.
Persists the JSON-serialized configuration under a fixed settings key.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, Union

from .errors import ConfigLoadError, ConfigSaveError

logger = logging.getLogger(__name__)

APP_DIR_NAME = 'PomodoroTimer'
DB_FILENAME = 'pomodoro_timer.db'

# Settings row holding the serialized Configuration
CONFIG_KEY = 'pomodoroSettings'

IN_MEMORY = ':memory:'


def get_app_data_dir(create: bool = True) -> Path:
    """
    Get the appropriate application data directory based on OS.

    Args:
        create: Create the directory if it doesn't exist.

    Raises:
        OSError: if the directory cannot be created.
    """
    if os.name == 'nt':  # Windows
        base = Path(os.environ.get('APPDATA', Path.home()))
    elif os.name == 'posix':
        # macOS uses ~/Library/Application Support, Linux uses ~/.local/share
        if os.uname().sysname == 'Darwin':
            base = Path.home() / 'Library' / 'Application Support'
        else:
            base = Path(os.environ.get('XDG_DATA_HOME', Path.home() / '.local' / 'share'))
    else:
        base = Path.home()

    app_dir = base / APP_DIR_NAME
    if create:
        app_dir.mkdir(parents=True, exist_ok=True)
    return app_dir


class Storage:
    """
    Database storage manager.
    Reads and writes the configuration row of the settings table.
    """

    def __init__(self, db_path: Union[str, Path]):
        """
        Initialize storage with database path.

        The database is not touched until the first read or write, so a
        bad path never prevents the timer from starting.

        Args:
            db_path: Path for the database file, or ':memory:'.
        """
        self.db_path = str(db_path)
        # An in-memory database lives only as long as its connection
        self._shared_conn: Optional[sqlite3.Connection] = None

    @contextmanager
    def _get_connection(self):
        """Context manager for database connections."""
        conn = self._connect()
        try:
            self._init_database(conn)
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            if conn is not self._shared_conn:
                conn.close()

    def _connect(self) -> sqlite3.Connection:
        if self.db_path != IN_MEMORY:
            conn = sqlite3.connect(self.db_path)
        elif self._shared_conn is None:
            conn = self._shared_conn = sqlite3.connect(self.db_path)
        else:
            return self._shared_conn
        conn.row_factory = sqlite3.Row
        return conn

    def close(self):
        """Release the in-memory database, if one is open."""
        if self._shared_conn is not None:
            self._shared_conn.close()
            self._shared_conn = None

    def _init_database(self, conn: sqlite3.Connection):
        """Initialize database schema if the table doesn't exist."""
        conn.execute('''
            CREATE TABLE IF NOT EXISTS settings (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL
            )
        ''')

    def read_config(self) -> Optional[str]:
        """
        Read the serialized configuration.

        Returns:
            The stored JSON text, or None if nothing has been saved.

        Raises:
            ConfigLoadError: if the database cannot be read.
        """
        try:
            with self._get_connection() as conn:
                row = conn.execute(
                    'SELECT value FROM settings WHERE key = ?', (CONFIG_KEY,)
                ).fetchone()
        except sqlite3.Error as e:
            raise ConfigLoadError(f"could not read {self.db_path}: {e}") from e
        return row['value'] if row else None

    def write_config(self, text: str):
        """
        Store the serialized configuration, replacing any previous value.

        Raises:
            ConfigSaveError: if the database cannot be written.
        """
        try:
            with self._get_connection() as conn:
                conn.execute('''
                    INSERT OR REPLACE INTO settings (key, value)
                    VALUES (?, ?)
                ''', (CONFIG_KEY, text))
        except sqlite3.Error as e:
            raise ConfigSaveError(f"could not write {self.db_path}: {e}") from e
        logger.debug("Saved configuration to %s", self.db_path)
