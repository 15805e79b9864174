"""Two-tier summary persistence: in-process cache in front of a durable SQL store."""

from __future__ import annotations

import asyncio
import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from sqlalchemy import func, select
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine, async_sessionmaker

from qa_summary.config import settings
from qa_summary.models.summary import SummaryRecord
from qa_summary.storage.db import Base, SummaryRow, get_async_engine

logger = logging.getLogger(__name__)

UPSERT_COLUMNS = (
    "doc_id",
    "title",
    "mode",
    "model",
    "prompt_hash",
    "citations",
    "confidence",
    "request_id",
    "summary",
    "guardrails",
)

DURABLE_STORE_ERRORS = (SQLAlchemyError, OSError)


def record_to_row_values(record: SummaryRecord) -> Dict[str, Any]:
    payload = record.model_dump(mode="json", by_alias=True)
    return {
        "summary_id": record.summary_id,
        "doc_id": record.doc_id,
        "title": record.title,
        "mode": payload["mode"],
        "model": record.model,
        "prompt_hash": record.prompt_hash,
        "citations": payload["citations"],
        "confidence": record.confidence,
        "created_at": datetime.fromisoformat(record.created_at),
        "request_id": record.request_id,
        "summary": record.summary,
        "guardrails": payload["guardrails"],
    }


def isoformat_utc(value: datetime) -> str:
    """SQLite hands back naive datetimes; they are stored as UTC."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return value.isoformat()


def row_to_record(row: SummaryRow) -> SummaryRecord:
    return SummaryRecord.model_validate(
        {
            "summary_id": row.summary_id,
            "doc_id": row.doc_id,
            "title": row.title or "",
            "mode": row.mode,
            "model": row.model,
            "prompt_hash": row.prompt_hash,
            "citations": row.citations,
            "confidence": round(row.confidence or 0.0, 2),
            "created_at": isoformat_utc(row.created_at),
            "request_id": row.request_id or "",
            "summary": row.summary,
            "guardrails": row.guardrails,
        }
    )


class SqlSummaryStore:
    """Durable store backed by the ``summaries`` table (Postgres in production)."""

    def __init__(self, engine: AsyncEngine) -> None:
        self.engine = engine
        self.session_factory = async_sessionmaker(engine, expire_on_commit=False)
        self._schema_attempted = False
        self._schema_lock = asyncio.Lock()

    async def ensure_schema(self) -> None:
        """Create the table at most once per store; a failure is logged and not retried.

        Concurrent callers wait for the first attempt to finish.
        """
        if self._schema_attempted:
            return
        async with self._schema_lock:
            if self._schema_attempted:
                return
            try:
                async with self.engine.begin() as conn:
                    await conn.run_sync(Base.metadata.create_all)
            except DURABLE_STORE_ERRORS as exc:
                logger.error("Failed to ensure summaries table exists: %s", exc)
            finally:
                self._schema_attempted = True

    def _insert(self):
        dialect = self.engine.dialect.name
        if dialect == "postgresql":
            return postgresql_insert
        if dialect == "sqlite":
            return sqlite_insert
        raise ValueError(f"Unsupported summaries store dialect: {dialect}")

    async def upsert(self, record: SummaryRecord) -> str:
        """Insert or update every column except ``created_at``.

        Returns the stored ``created_at``, which predates ``record`` on a re-save.
        """
        await self.ensure_schema()
        stmt = self._insert()(SummaryRow).values(**record_to_row_values(record))
        stmt = stmt.on_conflict_do_update(
            index_elements=["summary_id"],
            set_={
                **{column: stmt.excluded[column] for column in UPSERT_COLUMNS},
                "updated_at": func.now(),
            },
        )
        async with self.session_factory() as session:
            await session.execute(stmt)
            created_at = await session.scalar(
                select(SummaryRow.created_at).where(SummaryRow.summary_id == record.summary_id)
            )
            await session.commit()
        return isoformat_utc(created_at)

    async def get(self, summary_id: str) -> Optional[SummaryRecord]:
        async with self.session_factory() as session:
            row = await session.get(SummaryRow, summary_id)
        if row is None:
            return None
        return row_to_record(row)

    async def dispose(self) -> None:
        await self.engine.dispose()


class MemorySummaryCache:
    """Unbounded process-lifetime map of ``summary_id`` to record."""

    def __init__(self) -> None:
        self._records: Dict[str, SummaryRecord] = {}

    def get(self, summary_id: str) -> Optional[SummaryRecord]:
        return self._records.get(summary_id)

    def put(self, record: SummaryRecord) -> None:
        self._records[record.summary_id] = record

    def __contains__(self, summary_id: object) -> bool:
        return summary_id in self._records

    def __len__(self) -> int:
        return len(self._records)


class SummaryRepository:
    """Write-through to both tiers; read from the cache first, then the store.

    Durable-store failures are logged and never fail a save.
    """

    def __init__(
        self,
        cache: MemorySummaryCache | None = None,
        store: SqlSummaryStore | None = None,
    ) -> None:
        self.cache = cache or MemorySummaryCache()
        self.store = store
        if store is None:
            logger.warning("Durable store not configured; summaries are kept in memory only.")

    async def save(self, record: SummaryRecord) -> SummaryRecord:
        existing = self.cache.get(record.summary_id)
        if existing is not None:
            record = record.model_copy(update={"created_at": existing.created_at})
        self.cache.put(record)

        if self.store is not None:
            try:
                stored_created_at = await self.store.upsert(record)
            except DURABLE_STORE_ERRORS as exc:
                logger.error("Failed to persist summary %s to durable store: %s", record.summary_id, exc)
            else:
                if stored_created_at != record.created_at:
                    record = record.model_copy(update={"created_at": stored_created_at})
                    self.cache.put(record)
        return record

    async def get(self, summary_id: str) -> Optional[SummaryRecord]:
        record = self.cache.get(summary_id)
        if record is not None or self.store is None:
            return record
        try:
            record = await self.store.get(summary_id)
        except DURABLE_STORE_ERRORS as exc:
            logger.error("Failed to load summary %s from durable store: %s", summary_id, exc)
            return None
        if record is not None:
            self.cache.put(record)
        return record


def build_repository() -> SummaryRepository:
    """Repository wired from settings: durable tier only when ``DATABASE_URL`` is set."""
    store = SqlSummaryStore(get_async_engine()) if settings.durable_store_enabled else None
    return SummaryRepository(store=store)
