"""SQLAlchemy schema and engine for the durable ``summaries`` table."""

from __future__ import annotations

from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import JSON, DateTime, Float, Text, func
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.ext.asyncio import AsyncEngine, create_async_engine
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from qa_summary.config import settings

JSONType = JSON().with_variant(JSONB(), "postgresql")


class Base(DeclarativeBase):
    pass


class SummaryRow(Base):
    """One persisted summary; ``updated_at`` moves on every upsert, ``created_at`` never does."""

    __tablename__ = "summaries"

    summary_id: Mapped[str] = mapped_column(Text, primary_key=True)
    doc_id: Mapped[str] = mapped_column(Text, nullable=False)
    title: Mapped[Optional[str]] = mapped_column(Text)
    mode: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)
    model: Mapped[str] = mapped_column(Text, nullable=False)
    prompt_hash: Mapped[str] = mapped_column(Text, nullable=False)
    citations: Mapped[List[Dict[str, Any]]] = mapped_column(JSONType, nullable=False)
    confidence: Mapped[Optional[float]] = mapped_column(Float)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now()
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), nullable=False, server_default=func.now(), onupdate=func.now()
    )
    request_id: Mapped[Optional[str]] = mapped_column(Text)
    summary: Mapped[str] = mapped_column(Text, nullable=False)
    guardrails: Mapped[Dict[str, Any]] = mapped_column(JSONType, nullable=False)


def get_async_engine(database_url: Optional[str] = None) -> AsyncEngine:
    """Create the async engine; no connection is opened until first use."""
    url = database_url or settings.database_url
    if not url:
        raise ValueError("DATABASE_URL is not configured in the environment.")
    return create_async_engine(url, echo=settings.database_echo, pool_pre_ping=True)
