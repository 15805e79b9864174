"""Typed models shared across the application."""

from .api import (
    ChunkConfigPayload,
    Diagnostic,
    DocumentPayload,
    Filters,
    SummaryLookupResponse,
    SummaryMetrics,
    SummaryRequest,
    SummaryResponse,
)
from .chunk import Chunk, SearchIndex
from .document import ChunkConfig, Document, Paragraph
from .mode import Detail, DetailPlan, Lens, Mode, Query, RawMode, Role
from .retrieval import RetrievedChunk
from .summary import (
    Citation,
    GuardrailReport,
    GuardrailViolation,
    Orchestration,
    Sentence,
    SummaryRecord,
)

__all__ = [
    "Chunk",
    "ChunkConfig",
    "ChunkConfigPayload",
    "Citation",
    "Detail",
    "DetailPlan",
    "Diagnostic",
    "Document",
    "DocumentPayload",
    "Filters",
    "GuardrailReport",
    "GuardrailViolation",
    "Lens",
    "Mode",
    "Orchestration",
    "Paragraph",
    "Query",
    "RawMode",
    "RetrievedChunk",
    "Role",
    "SearchIndex",
    "Sentence",
    "SummaryLookupResponse",
    "SummaryMetrics",
    "SummaryRequest",
    "SummaryResponse",
    "SummaryRecord",
]
