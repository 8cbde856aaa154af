# Copyright 2025 Softwell S.r.l. - SPDX-License-Identifier: Apache-2.0
"""Mail log table manager: the append-only audit trail.

One row per dispatch attempt. Rows are inserted by the Mailer and never
updated or deleted here; retention belongs to whoever consumes the trail.
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Any

from ..models import AuditRecord, MailStatus
from ..sql import DbAdapter

SCHEMA = """
CREATE TABLE IF NOT EXISTS mail_logs (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    category TEXT NOT NULL,
    organization_id INTEGER NOT NULL,
    status TEXT NOT NULL,
    content TEXT,
    error TEXT,
    inserted_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS mail_logs_organization_id_index ON mail_logs (organization_id);
CREATE INDEX IF NOT EXISTS mail_logs_category_index ON mail_logs (category);
CREATE INDEX IF NOT EXISTS mail_logs_status_index ON mail_logs (status);
"""


class MailLogTable:
    """Mail logs table.

    JSON-encoded field: content.
    """

    name = "mail_logs"

    def __init__(self, adapter: DbAdapter) -> None:
        self.adapter = adapter

    async def create_schema(self) -> None:
        """Create table and indexes if they do not exist."""
        await self.adapter.execute_script(SCHEMA)

    async def create(self, record: AuditRecord) -> AuditRecord:
        """Insert a record and return it with its generated id."""
        timestamp = record.inserted_at.isoformat()
        row_id = await self.adapter.insert(
            self.name,
            {
                "category": record.category,
                "organization_id": record.organization_id,
                "status": record.status.value,
                "content": json.dumps(record.content),
                "error": record.error,
                "inserted_at": timestamp,
                "updated_at": timestamp,
            },
        )
        return record.model_copy(update={"id": row_id})

    async def get(self, log_id: int) -> AuditRecord | None:
        """Fetch a record by id."""
        row = await self.adapter.fetch_one(
            "SELECT * FROM mail_logs WHERE id = :id", {"id": log_id}
        )
        return self._decode(row) if row else None

    async def list_all(
        self,
        *,
        category: str | None = None,
        organization_id: int | None = None,
        status: MailStatus | str | None = None,
        limit: int | None = None,
    ) -> list[AuditRecord]:
        """Return records matching the filters, oldest first."""
        where, params = self._where(category, organization_id, status)
        query = f"SELECT * FROM mail_logs{where} ORDER BY id"
        if limit is not None:
            query += " LIMIT :limit"
            params["limit"] = int(limit)
        rows = await self.adapter.fetch_all(query, params)
        return [self._decode(row) for row in rows]

    async def count(
        self,
        *,
        category: str | None = None,
        organization_id: int | None = None,
        status: MailStatus | str | None = None,
    ) -> int:
        """Count records matching the filters."""
        where, params = self._where(category, organization_id, status)
        row = await self.adapter.fetch_one(
            f"SELECT COUNT(*) AS cnt FROM mail_logs{where}", params
        )
        return int(row["cnt"]) if row else 0

    @staticmethod
    def _where(
        category: str | None,
        organization_id: int | None,
        status: MailStatus | str | None,
    ) -> tuple[str, dict[str, Any]]:
        params: dict[str, Any] = {}
        if category is not None:
            params["category"] = category
        if organization_id is not None:
            params["organization_id"] = organization_id
        if status is not None:
            params["status"] = MailStatus(status).value
        if not params:
            return "", params
        return " WHERE " + " AND ".join(f"{k} = :{k}" for k in params), params

    @staticmethod
    def _decode(row: dict[str, Any]) -> AuditRecord:
        return AuditRecord(
            id=row["id"],
            category=row["category"],
            organization_id=row["organization_id"],
            status=MailStatus(row["status"]),
            content=json.loads(row["content"]) if row["content"] else {},
            error=row["error"],
            inserted_at=datetime.fromisoformat(row["inserted_at"]),
        )


__all__ = ["MailLogTable"]
