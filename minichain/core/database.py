"""minichain.core.database

SQLite-backed ordered record store.

One table, five columns, no UPDATE and no DELETE anywhere in this module.
The only way in is INSERT.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path

from minichain.core.exceptions import BlockStoreError, StoreUnavailableError
from minichain.core.models import Block

SCHEMA = """
-- ============================================================
-- Blocks (hash chain, append-only)
-- ============================================================
CREATE TABLE IF NOT EXISTS blocks (
    sequence INTEGER PRIMARY KEY,
    created_at TEXT NOT NULL,
    payload TEXT NOT NULL,
    predecessor_digest TEXT NOT NULL,
    digest TEXT NOT NULL
);
"""

_COLUMNS = "sequence, created_at, payload, predecessor_digest, digest"


@dataclass
class Database:
    """SQLite ledger store."""

    db_path: Path

    def __post_init__(self) -> None:
        self.db_path = Path(self.db_path)
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StoreUnavailableError(f"cannot create data directory: {self.db_path.parent}") from e
        try:
            self.conn = sqlite3.connect(self.db_path, check_same_thread=False)
            self.conn.row_factory = sqlite3.Row
            self._init_schema()
        except sqlite3.Error as e:
            raise StoreUnavailableError(f"cannot open ledger database {self.db_path}: {e}") from e

    def close(self) -> None:
        self.conn.close()

    def _init_schema(self) -> None:
        with self.conn:
            self.conn.executescript(SCHEMA)
            self.conn.execute("PRAGMA journal_mode=WAL")
            self.conn.execute("PRAGMA synchronous=NORMAL")

    def insert(self, block: Block) -> None:
        try:
            with self.conn:
                self.conn.execute(
                    f"INSERT INTO blocks ({_COLUMNS}) VALUES (?, ?, ?, ?, ?)",
                    (
                        block.sequence,
                        block.created_at,
                        block.payload,
                        block.predecessor_digest,
                        block.digest,
                    ),
                )
        except sqlite3.IntegrityError as e:
            raise BlockStoreError(f"block {block.sequence} rejected: {e}") from e
        except UnicodeEncodeError as e:
            # SQLite TEXT is UTF-8; a lone surrogate cannot be bound.
            raise BlockStoreError(f"block {block.sequence} rejected: text is not valid UTF-8") from e
        except sqlite3.Error as e:
            raise StoreUnavailableError(str(e)) from e

    def select_all(self) -> list[Block]:
        rows = self._fetch(f"SELECT {_COLUMNS} FROM blocks ORDER BY sequence ASC")
        return [self._row_to_block(r) for r in rows]

    def select_last(self) -> Block | None:
        rows = self._fetch(f"SELECT {_COLUMNS} FROM blocks ORDER BY sequence DESC LIMIT 1")
        return self._row_to_block(rows[0]) if rows else None

    def count(self) -> int:
        rows = self._fetch("SELECT COUNT(*) FROM blocks")
        return int(rows[0][0])

    def _fetch(self, query: str) -> list[sqlite3.Row]:
        try:
            return self.conn.execute(query).fetchall()
        except sqlite3.Error as e:
            raise StoreUnavailableError(str(e)) from e

    @staticmethod
    def _row_to_block(row: sqlite3.Row) -> Block:
        return Block(
            sequence=int(row["sequence"]),
            created_at=str(row["created_at"]),
            payload=str(row["payload"]),
            predecessor_digest=str(row["predecessor_digest"]),
            digest=str(row["digest"]),
        )
