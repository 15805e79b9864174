"""Chunk-level models used for indexing and retrieval."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel, Field


class Chunk(BaseModel):
    """A token-bounded slice of one document."""

    id: str
    doc_id: str
    section: str
    page: int
    text: str
    tokens: List[str] = Field(default_factory=list)
    token_count: int
    start_token: int
    end_token: int
    term_frequency: Dict[str, int] = Field(default_factory=dict)


class SearchIndex(BaseModel):
    """Per-invocation lexical index over a document's chunks."""

    chunks: List[Chunk] = Field(default_factory=list)
    vocabulary: Dict[str, int] = Field(default_factory=dict)
    total_tokens: int = 0
