"""
Shared test fixtures for the summary pipeline test suite.

Provides: chunk/sentence builders, in-memory and SQLite-backed repositories,
a pipeline wired to fakes, and the canonical validation-plan request.
"""

from typing import Callable, Optional

import pytest
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

from qa_summary.models.api import SummaryRequest
from qa_summary.models.retrieval import RetrievedChunk
from qa_summary.models.summary import Sentence
from qa_summary.pipeline import SummaryPipeline
from qa_summary.storage.summary_store import MemorySummaryCache, SqlSummaryStore, SummaryRepository
from qa_summary.utils.tokenization import tokenize

VALIDATION_PLAN_CONTENT = (
    "Section 1. Overview.\n\nThis plan validates equipment.\n\n"
    "Section 2. Testing. IQ and OQ complete."
)


@pytest.fixture
def validation_plan_body() -> dict:
    """Request body for the canonical end-to-end scenario."""
    return {
        "document": {"content": VALIDATION_PLAN_CONTENT, "title": "Validation Plan"},
        "mode": {"role": "Auditor", "detail": "deep dive"},
        "query": "regulatory summary",
    }


@pytest.fixture
def validation_plan_request(validation_plan_body: dict) -> SummaryRequest:
    return SummaryRequest.model_validate(validation_plan_body)


@pytest.fixture
def make_chunk() -> Callable[..., RetrievedChunk]:
    """Build a scored chunk from plain text."""

    def _make(
        chunk_id: str,
        text: str,
        score: float = 1.0,
        section: str = "Introduction",
        page: int = 1,
        term_frequency: Optional[dict] = None,
    ) -> RetrievedChunk:
        tokens = tokenize(text)
        return RetrievedChunk(
            id=chunk_id,
            doc_id="doc",
            section=section,
            page=page,
            text=text,
            tokens=tokens,
            token_count=len(tokens),
            start_token=0,
            end_token=len(tokens),
            term_frequency=term_frequency or {},
            score=score,
        )

    return _make


@pytest.fixture
def make_sentence() -> Callable[..., Sentence]:
    def _make(
        text: str,
        chunk_id: str = "doc_c1",
        section: str = "Introduction",
        weight: float = 1.0,
        order: int = 0,
        raw_score: float = 1.0,
    ) -> Sentence:
        return Sentence(
            text=text,
            chunk_id=chunk_id,
            section=section,
            page=1,
            weight=weight,
            raw_score=raw_score,
            order=order,
        )

    return _make


@pytest.fixture
def memory_repository() -> SummaryRepository:
    """Repository with no durable tier."""
    return SummaryRepository(cache=MemorySummaryCache())


@pytest.fixture
def pipeline(memory_repository: SummaryRepository) -> SummaryPipeline:
    return SummaryPipeline(repository=memory_repository)


@pytest.fixture
async def sqlite_store():
    """
    SQL store bound to an in-memory SQLite database.

    Yields:
        SqlSummaryStore: store whose schema is created lazily on first upsert
    """
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    store = SqlSummaryStore(engine)
    yield store
    await engine.dispose()
