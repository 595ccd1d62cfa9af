"""
Workspace State Service Module

This module provides a durable key/value slot backed by SQLite. Each key holds
one JSON document; the highlight store is saved under a single fixed key.

Schema:
    workspace_state (
        key TEXT PRIMARY KEY,
        value TEXT NOT NULL,
        updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
    )
"""

import json
import logging
from typing import Any

from .base_database_service import BaseDatabaseService

# Configure logger for this module
logger = logging.getLogger(__name__)


class WorkspaceStateService(BaseDatabaseService):
    """
    Service class for reading and writing JSON values by key.

    Reads degrade to None on missing or undecodable data. Writes log and
    re-raise so the caller's command boundary can report the failure.
    """

    def __init__(self, db_path: str = "data/highlights.db"):
        """
        Initialize the workspace state service.

        Args:
            db_path (str): Path to the SQLite database file
        """
        super().__init__(db_path)
        self._init_table()

    def _init_table(self) -> None:
        """Ensure the workspace_state table exists."""
        with self.get_connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS workspace_state (
                    key TEXT PRIMARY KEY,                 -- Logical slot name
                    value TEXT NOT NULL,                  -- JSON encoded value
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP  -- Last write
                )
            """)

    def get(self, key: str) -> Any:
        """
        Read the value stored under ``key``.

        Args:
            key (str): Slot name

        Returns:
            Any: Decoded JSON value, or None if the slot is empty or unreadable
        """
        try:
            with self.get_connection() as conn:
                row = conn.execute(
                    "SELECT value FROM workspace_state WHERE key = ?", (key,)
                ).fetchone()
        except Exception as e:
            logger.error(f"Error reading workspace state '{key}': {e}")
            return None

        if row is None:
            return None

        try:
            return json.loads(row["value"])
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Invalid JSON stored in workspace state '{key}'")
            return None

    def update(self, key: str, value: Any) -> None:
        """
        Store ``value`` under ``key``, replacing the previous value.

        Writing the same value again leaves the slot unchanged, so the call can be
        repeated freely.

        Args:
            key (str): Slot name
            value (Any): JSON serializable value

        Raises:
            Exception: Any serialization or database error, after logging it
        """
        try:
            payload = json.dumps(value)
            with self.get_connection() as conn:
                conn.execute(
                    """
                    INSERT INTO workspace_state (key, value, updated_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        updated_at = excluded.updated_at
                    """,
                    (key, payload, self.get_current_timestamp()),
                )
        except Exception as e:
            logger.error(f"Error writing workspace state '{key}': {e}")
            raise
