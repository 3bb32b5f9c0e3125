"""
Envelope store - SQLite persistence for data blocks.
Header and body rows are written in one transaction and read back together.
"""

import sqlite3
from typing import List, Optional

from util.logging import logger

from .db import get_db, init_db
from .errors import DuplicateBlockName, PersistenceFailure
from .mapper import body_to_entity, header_to_entity
from .schema import BlockType, DataBody, DataBodyEntity, DataHeader, DataHeaderEntity

_SELECT_BLOCKS = '''
    SELECT h.header_id, h.name, h.block_type, h.created_at,
           b.body_id, b.payload, b.checksum
    FROM data_header h
    JOIN data_body b ON b.header_id = h.header_id
'''


def _row_to_entity(row) -> DataBodyEntity:
    header_id, name, block_type, created_at, body_id, payload, checksum = row
    header = DataHeaderEntity(
        header_id=header_id,
        name=name,
        block_type=block_type,
        created_at=created_at,
    )
    return DataBodyEntity(header=header, payload=payload, checksum=checksum, body_id=body_id)


class EnvelopeStore:
    """Durable storage for blocks keyed by name."""

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path
        init_db(db_path)

    def save(self, header: DataHeader, body: DataBody, checksum: Optional[str] = None) -> None:
        """Persist a header/body pair. Duplicate names are rejected, never overwritten."""
        header_entity = header_to_entity(header)
        body_entity = body_to_entity(body, header_entity, checksum)

        try:
            with get_db(self.db_path) as conn:
                try:
                    cursor = conn.cursor()
                    cursor.execute(
                        "INSERT INTO data_header (name, block_type) VALUES (?, ?)",
                        (header_entity.name, header_entity.block_type)
                    )
                    header_entity.header_id = cursor.lastrowid
                    cursor.execute(
                        "INSERT INTO data_body (header_id, payload, checksum) VALUES (?, ?, ?)",
                        (header_entity.header_id, body_entity.payload, body_entity.checksum)
                    )
                    conn.commit()
                except sqlite3.Error:
                    conn.rollback()
                    raise
        except sqlite3.IntegrityError as e:
            if "data_header.name" in str(e):
                raise DuplicateBlockName(header.name) from e
            raise PersistenceFailure(f"Constraint violated saving block '{header.name}': {e}") from e
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Database error saving block '{header.name}': {e}") from e

        logger.log_persistence(header.name)

    def find_by_block_type(self, block_type) -> List[DataBodyEntity]:
        """Return every stored block carrying the given tag, oldest first."""
        tag = BlockType.parse(block_type)
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    _SELECT_BLOCKS + " WHERE h.block_type = ? ORDER BY h.header_id",
                    (tag.value,)
                )
                return [_row_to_entity(row) for row in cursor.fetchall()]
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Database error querying block type {tag.value}: {e}") from e

    def get(self, name: str) -> Optional[DataBodyEntity]:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(_SELECT_BLOCKS + " WHERE h.name = ?", (name,))
                row = cursor.fetchone()
                return _row_to_entity(row) if row else None
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Database error reading block '{name}': {e}") from e

    def update_block_type(self, name: str, new_type) -> bool:
        """Change the tag of a named block. Returns False when no block has that name."""
        tag = BlockType.parse(new_type)
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute(
                    "UPDATE data_header SET block_type = ? WHERE name = ?",
                    (tag.value, name)
                )
                conn.commit()
                return cursor.rowcount > 0
        except sqlite3.Error as e:
            raise PersistenceFailure(f"Database error updating block '{name}': {e}") from e

    def count(self) -> int:
        try:
            with get_db(self.db_path) as conn:
                cursor = conn.cursor()
                cursor.execute("SELECT COUNT(*) FROM data_header")
                return cursor.fetchone()[0]
        except sqlite3.Error as e:
            logger.error(f"Failed to count blocks: {e}")
            return 0
