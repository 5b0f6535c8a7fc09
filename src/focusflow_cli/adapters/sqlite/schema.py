"""Database schema definitions for the local timer store."""

from __future__ import annotations

import sqlite3

# Schema version tracking
SCHEMA_VERSION = 1

CREATE_SCHEMA_VERSION_TABLE = """
CREATE TABLE IF NOT EXISTS schema_version (
    version INTEGER PRIMARY KEY,
    applied_at DATETIME NOT NULL
)
"""

# Single-row table: the id column is pinned to 1
CREATE_TIMER_STATE_TABLE = """
CREATE TABLE IF NOT EXISTS timer_state (
    id INTEGER PRIMARY KEY CHECK (id = 1),
    status TEXT NOT NULL,
    time_remaining INTEGER NOT NULL CHECK (time_remaining >= 0),
    sessions_completed INTEGER NOT NULL DEFAULT 0 CHECK (sessions_completed >= 0),
    active_since TEXT,
    updated_at DATETIME NOT NULL
)
"""

# Append-only session history
CREATE_SESSIONS_TABLE = """
CREATE TABLE IF NOT EXISTS pomodoro_sessions (
    id TEXT PRIMARY KEY,
    started_at TEXT NOT NULL,
    completed_at TEXT NOT NULL,
    type TEXT NOT NULL DEFAULT 'work',
    duration INTEGER NOT NULL,
    created_at DATETIME NOT NULL
)
"""

CREATE_SESSION_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_sessions_started ON pomodoro_sessions(started_at)",
]

ALL_TABLES = [
    CREATE_SCHEMA_VERSION_TABLE,
    CREATE_TIMER_STATE_TABLE,
    CREATE_SESSIONS_TABLE,
]


def create_schema(connection: sqlite3.Connection) -> None:
    """Create all tables and indexes. Safe to call on an existing database."""
    cursor = connection.cursor()

    for create_statement in ALL_TABLES:
        cursor.execute(create_statement)

    for index_statement in CREATE_SESSION_INDEXES:
        cursor.execute(index_statement)

    cursor.execute(
        "INSERT OR IGNORE INTO schema_version (version, applied_at) VALUES (?, datetime('now'))",
        (SCHEMA_VERSION,),
    )

    connection.commit()


def get_schema_version(connection: sqlite3.Connection) -> int:
    """Get current schema version, or 0 if not initialized."""
    try:
        result = connection.execute("SELECT MAX(version) FROM schema_version").fetchone()
        return result[0] if result[0] is not None else 0
    except sqlite3.Error:
        return 0
