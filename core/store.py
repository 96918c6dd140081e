# =============================================================================
# core/store.py  —  Record Store (the single rent_roll table)
# =============================================================================
#
# WHAT THIS MODULE DOES:
#   Owns the SQLite database that holds the rent roll:
#     - bootstraps the schema (table, constraints, indexes)
#     - executes parameterized queries and returns rows as dicts
#     - bulk-loads records with upsert-by-unit semantics
#
# WHAT IT DOES NOT DO:
#   It never decides WHAT to query.  That's the query builder's job.  The
#   store just runs what it is given and reports the engine's verdict.
#
# TRANSACTIONS:
#   The connection runs in autocommit mode.  Reads need no transaction, and
#   a raw pass-through statement takes effect exactly as the engine runs it.
#   Bulk loads run inside a savepoint so a batch is all-or-nothing.
# =============================================================================

import logging
import sqlite3
from pathlib import Path
from typing import Any, Iterable, Sequence

from core.errors import IntegrityError, QueryError
from core.loader import read_jsonl, to_unit_record
from core.models import UnitRecord, UnitStatus

logger = logging.getLogger(__name__)

TABLE = "rent_roll"

_STATUS_CHECK = ", ".join(f"'{code}'" for code in UnitStatus.codes())

_CREATE_TABLE = f"""
CREATE TABLE IF NOT EXISTS {TABLE} (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    unit INTEGER NOT NULL UNIQUE,
    name TEXT NOT NULL,
    type TEXT NOT NULL,
    sq_ft INTEGER,
    monthly_rent REAL,
    deposit REAL,
    moved_in TEXT,
    lease_ends TEXT,
    status TEXT NOT NULL CHECK (status IN ({_STATUS_CHECK})),
    created_at DATETIME DEFAULT CURRENT_TIMESTAMP,
    updated_at DATETIME DEFAULT CURRENT_TIMESTAMP
)
"""

_CREATE_INDEXES = (
    f"CREATE INDEX IF NOT EXISTS idx_unit ON {TABLE}(unit)",
    f"CREATE INDEX IF NOT EXISTS idx_status ON {TABLE}(status)",
    f"CREATE INDEX IF NOT EXISTS idx_type ON {TABLE}(type)",
)

# Upsert keyed on unit.  created_at survives a reload; updated_at does not.
_UPSERT = f"""
INSERT INTO {TABLE} (
    unit, name, type, sq_ft, monthly_rent, deposit,
    moved_in, lease_ends, status, updated_at
) VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, CURRENT_TIMESTAMP)
ON CONFLICT(unit) DO UPDATE SET
    name = excluded.name,
    type = excluded.type,
    sq_ft = excluded.sq_ft,
    monthly_rent = excluded.monthly_rent,
    deposit = excluded.deposit,
    moved_in = excluded.moved_in,
    lease_ends = excluded.lease_ends,
    status = excluded.status,
    updated_at = CURRENT_TIMESTAMP
"""


class RentRollStore:
    """SQLite-backed store for UnitRecords.

    Usable as a context manager; the connection is closed on exit.

    Example:
        with RentRollStore(":memory:") as store:
            store.load_records(records)
            rows = store.execute("SELECT * FROM rent_roll WHERE unit = ?", [101])
    """

    def __init__(self, db_path: str | Path = "rent_roll.db"):
        self.db_path = str(db_path)
        self._conn = sqlite3.connect(self.db_path, isolation_level=None, check_same_thread=False)
        self._conn.row_factory = sqlite3.Row
        self._create_schema()

    def _create_schema(self) -> None:
        self._conn.execute(_CREATE_TABLE)
        for statement in _CREATE_INDEXES:
            self._conn.execute(statement)
        logger.debug("Schema ready in %s", self.db_path)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------
    def execute(self, query: str, params: Sequence[Any] = ()) -> list[dict[str, Any]]:
        """Run one statement and return its rows as column → value dicts.

        Raises:
            QueryError: the engine rejected the statement.  The engine's own
                message is kept as the diagnostic.
        """
        try:
            cursor = self._conn.execute(query, tuple(params))
            rows = cursor.fetchall()
        except (sqlite3.Error, sqlite3.Warning) as exc:
            message = str(exc)
            logger.debug("Query rejected: %s", message)
            raise QueryError(f"SQL execution failed: {message}", diagnostic=message) from exc
        return [dict(row) for row in rows]

    def count(self) -> int:
        return self.execute(f"SELECT COUNT(*) AS count FROM {TABLE}")[0]["count"]

    # -------------------------------------------------------------------------
    # Bulk load
    # -------------------------------------------------------------------------
    def load_records(self, records: Iterable[UnitRecord | dict]) -> int:
        """Upsert a batch of records keyed by unit number.

        Accepts UnitRecords or source-shaped dicts (as read from JSONL).  The
        batch is validated and written in one transaction: if any record is
        invalid, nothing from the batch is kept.

        Returns:
            The number of records written.

        Raises:
            IntegrityError: a record failed validation or a table constraint.
        """
        batch = [r if isinstance(r, UnitRecord) else to_unit_record(r) for r in records]
        statuses = []
        for record in batch:
            try:
                statuses.append(UnitStatus(record.status))
            except ValueError:
                raise IntegrityError(f"Unit {record.unit}: invalid status {record.status!r}") from None

        # SAVEPOINT nests inside any transaction a pass-through statement left
        # open.  With none open, RELEASE commits the batch.
        try:
            self._conn.execute("SAVEPOINT bulk_load")
            for record, status in zip(batch, statuses):
                self._conn.execute(_UPSERT, (
                    record.unit,
                    record.name,
                    record.type,
                    record.sq_ft,
                    record.monthly_rent,
                    record.deposit,
                    record.moved_in,
                    record.lease_ends,
                    status.value,
                ))
        except sqlite3.Error as exc:
            if self._conn.in_transaction:
                self._conn.execute("ROLLBACK TO bulk_load")
                self._conn.execute("RELEASE bulk_load")
            raise IntegrityError(f"Bulk load failed: {exc}", diagnostic=str(exc)) from exc
        self._conn.execute("RELEASE bulk_load")

        logger.info("Upserted %d records into %s", len(batch), self.db_path)
        return len(batch)

    def load_jsonl(self, path: str | Path) -> int:
        """Read a JSONL file of source records and upsert them as one batch."""
        return self.load_records(read_jsonl(path))

    # -------------------------------------------------------------------------
    # Lifecycle
    # -------------------------------------------------------------------------
    def close(self) -> None:
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    def __enter__(self) -> "RentRollStore":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
