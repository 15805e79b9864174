"""Request/response models for the public API."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .mode import RawMode
from .summary import SummaryRecord


class DocumentPayload(BaseModel):
    """Raw document as sent by the caller; both snake and camel spellings are accepted."""

    model_config = ConfigDict(extra="ignore")

    content: Optional[str] = None
    text: Optional[str] = None
    content_base64: Optional[str] = None
    content_type: Optional[str] = None
    id: Optional[str] = None
    doc_id: Optional[str] = None
    title: Optional[str] = None
    version: Optional[str] = None
    doc_type: Optional[str] = None
    type: Optional[str] = None
    effective_date: Optional[str] = None
    effectiveDate: Optional[str] = None
    owner: Optional[str] = None
    system_of_record: Optional[str] = None
    systemOfRecord: Optional[str] = None


class Filters(BaseModel):
    tags: Optional[List[Any]] = None
    sections: Optional[List[Any]] = None


class ChunkConfigPayload(BaseModel):
    """Unvalidated chunk bounds; non-numeric values fall back to defaults."""

    chunkSize: Optional[Any] = None
    chunkOverlap: Optional[Any] = None


class SummaryRequest(BaseModel):
    """Incoming summarization payload."""

    document: DocumentPayload = Field(default_factory=DocumentPayload)
    mode: Optional[RawMode] = None
    query: Optional[str] = None
    filters: Optional[Filters] = None
    chunkConfig: Optional[ChunkConfigPayload] = None
    summary_id: Optional[str] = None


class Diagnostic(BaseModel):
    """Stage-tagged event for caller-side logging and tracing."""

    stage: str
    message: str
    metadata: Dict[str, Any] = Field(default_factory=dict)


class SummaryMetrics(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    latency_ms: int = Field(alias="latencyMs")
    chunk_count: int = Field(alias="chunkCount")
    retrieved_count: int = Field(alias="retrievedCount")
    citation_density: float = Field(alias="citationDensity")
    confidence: float


class SummaryResponse(BaseModel):
    """Returned by a completed pipeline run."""

    summary: SummaryRecord
    diagnostics: List[Diagnostic] = Field(default_factory=list)
    metrics: SummaryMetrics


class SummaryLookupResponse(BaseModel):
    summary: SummaryRecord
