"""
SQLite foundation for stored blocks.
A block is one data_header row plus one data_body row, written together.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator, Optional

from . import config
from .schema import BlockType


@contextmanager
def get_db(db_path: Optional[str] = None) -> Generator[sqlite3.Connection, None, None]:
    """Get a SQLite database connection."""
    conn = sqlite3.connect(db_path or config.DB_PATH)
    conn.execute("PRAGMA foreign_keys = ON")
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: Optional[str] = None):
    """Initialize the database with required tables."""
    config.ensure_db_directory(db_path)
    allowed = ", ".join(f"'{value}'" for value in BlockType.values())

    with get_db(db_path) as conn:
        cursor = conn.cursor()

        cursor.execute(f'''
            CREATE TABLE IF NOT EXISTS data_header (
                header_id INTEGER PRIMARY KEY AUTOINCREMENT,
                name TEXT NOT NULL UNIQUE,
                block_type TEXT NOT NULL CHECK (block_type IN ({allowed})),
                created_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        ''')

        cursor.execute('''
            CREATE TABLE IF NOT EXISTS data_body (
                body_id INTEGER PRIMARY KEY AUTOINCREMENT,
                header_id INTEGER NOT NULL UNIQUE REFERENCES data_header(header_id),
                payload TEXT NOT NULL,
                checksum TEXT
            )
        ''')

        cursor.execute('CREATE INDEX IF NOT EXISTS idx_data_header_block_type ON data_header(block_type)')

        conn.commit()


def health_check(db_path: Optional[str] = None) -> bool:
    """Check database health."""
    try:
        with get_db(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table';")
            table_names = [row[0] for row in cursor.fetchall()]
            return all(table in table_names for table in ('data_header', 'data_body'))
    except sqlite3.Error:
        return False
