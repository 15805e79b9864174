"""Summary, citation and guardrail models."""

from __future__ import annotations

from typing import List

from pydantic import BaseModel, ConfigDict, Field

from .mode import Mode


class Sentence(BaseModel):
    """Extraction unit; lives only for the duration of one orchestration."""

    text: str
    chunk_id: str
    section: str
    page: int
    weight: float
    raw_score: float
    order: int


class Citation(BaseModel):
    """One citation per unique source chunk, numbered in first-seen order."""

    model_config = ConfigDict(populate_by_name=True)

    citation_number: int = Field(alias="citationNumber")
    chunk_id: str
    section: str
    page: int
    preview: str
    score: float


class GuardrailViolation(BaseModel):
    code: str
    message: str


class GuardrailReport(BaseModel):
    """Non-fatal guardrail outcome recorded with the summary."""

    model_config = ConfigDict(populate_by_name=True)

    violations: List[GuardrailViolation] = Field(default_factory=list)
    citation_density: float = Field(alias="citationDensity")


class Orchestration(BaseModel):
    """Result of extraction, selection, citation assignment and rendering."""

    sentences: List[Sentence] = Field(default_factory=list)
    citations: List[Citation] = Field(default_factory=list)
    summary_text: str = ""


class SummaryRecord(BaseModel):
    """Persisted summary; ``summary_id`` and ``doc_id`` never change once created."""

    model_config = ConfigDict(populate_by_name=True)

    summary_id: str
    doc_id: str
    title: str
    mode: Mode
    model: str
    prompt_hash: str
    citations: List[Citation] = Field(default_factory=list)
    confidence: float
    created_at: str
    request_id: str
    summary: str
    guardrails: GuardrailReport
