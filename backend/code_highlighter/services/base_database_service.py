"""
Base Database Service Module

This module provides shared database utilities and connection management
for the services that keep highlight state in SQLite.
"""

import logging
import os
import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from typing import Iterator

# Configure logger for this module
logger = logging.getLogger(__name__)


class BaseDatabaseService:
    """
    Base class providing shared database utilities and connection management.

    This class handles connection management, directory creation, and
    timestamp helpers used by specialized service classes.
    """

    def __init__(self, db_path: str = "data/highlights.db"):
        """
        Initialize the base database service.

        Args:
            db_path (str): Path to the SQLite database file. Defaults to "data/highlights.db"
                          The directory will be created if it doesn't exist.
        """
        self.db_path = db_path
        self._ensure_data_dir()

    def _ensure_data_dir(self):
        """
        Ensure the data directory exists for the database file.

        Creates the directory structure if it doesn't exist. This prevents
        database connection errors when the data directory is missing.
        """
        data_dir = os.path.dirname(self.db_path)
        if data_dir and not os.path.exists(data_dir):
            os.makedirs(data_dir)

    @contextmanager
    def get_connection(self) -> Iterator[sqlite3.Connection]:
        """
        Context manager for database connections.

        Commits on success, rolls back on error and always closes the connection.
        """
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row  # Enable column access by name
        try:
            yield conn
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    def get_current_timestamp(self) -> str:
        """
        Get current timestamp for database operations.

        Returns:
            str: Current timestamp in SQLite format
        """
        return datetime.now().strftime("%Y-%m-%d %H:%M:%S")

    def get_current_timestamp_iso(self) -> str:
        """
        Get the current UTC time as an ISO 8601 string with millisecond precision.

        Returns:
            str: Timestamp such as "2025-12-11T11:08:40.123Z"
        """
        now = datetime.now(timezone.utc)
        return now.strftime("%Y-%m-%dT%H:%M:%S.") + f"{now.microsecond // 1000:03d}Z"
