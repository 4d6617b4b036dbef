"""SQLite-backed record of attachments present in the export tree."""

from __future__ import annotations

import sqlite3
from datetime import UTC, datetime
from pathlib import Path

import sqlite_utils

from .errors import LedgerError
from .models import DownloadOutcome


class ExportLedger:
    """Store item+attachment IDs with the checksum of the file on disk.

    The connection is not shared across threads; record outcomes from the
    thread that opened the ledger. SQLite failures surface as ``LedgerError``.
    """

    TABLE = "exported_attachments"

    def __init__(self, db_path: Path) -> None:
        self.db_path = db_path
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        try:
            self.db = sqlite_utils.Database(str(db_path))
            self._ensure_schema()
        except sqlite3.DatabaseError as exc:
            raise LedgerError(f"Cannot open export ledger {db_path}: {exc}") from exc

    def _ensure_schema(self) -> None:
        self.db[self.TABLE].create(
            {
                "item_id": str,
                "attachment_id": str,
                "file_name": str,
                "path": str,
                "size": int,
                "checksum": str,
                "exported_at": str,
            },
            pk=("item_id", "attachment_id"),
            if_not_exists=True,
        )

    def seen(self, item_id: str, attachment_id: str) -> bool:
        table = self.db[self.TABLE]
        try:
            count = table.count_where(
                "item_id = ? and attachment_id = ?", [item_id, attachment_id]
            )
        except sqlite3.DatabaseError as exc:
            raise LedgerError(f"Cannot read export ledger {self.db_path}: {exc}") from exc
        return count > 0

    def record(self, outcome: DownloadOutcome) -> None:
        job = outcome.job
        try:
            self.db[self.TABLE].upsert(
                {
                    "item_id": job.parent_item_id,
                    "attachment_id": job.attachment_id,
                    "file_name": job.file_name,
                    "path": str(outcome.path),
                    "size": job.size,
                    "checksum": outcome.checksum,
                    "exported_at": datetime.now(tz=UTC).isoformat(),
                },
                pk=("item_id", "attachment_id"),
            )
        except sqlite3.DatabaseError as exc:
            raise LedgerError(f"Cannot update export ledger {self.db_path}: {exc}") from exc
