"""Document-level data models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict


class Document(BaseModel):
    """A normalized document, immutable once chunked."""

    model_config = ConfigDict(frozen=True)

    doc_id: str
    title: str = "Untitled Document"
    version: str = "1.0"
    doc_type: str = "Document"
    effective_date: str
    owner: str = "unknown"
    system_of_record: str = "unspecified"
    content: str


class ChunkConfig(BaseModel):
    """Per-request chunking bounds, already clamped."""

    chunk_size: int = 1200
    chunk_overlap: int = 180


class Paragraph(BaseModel):
    """Blank-line separated paragraph with its whitespace tokens."""

    text: str
    tokens: List[str]
    is_heading: bool = False
    order: int
