"""Summary mode models: who the summary is for and how deep it goes."""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class Role(str, Enum):
    """Audience the summary is written for."""

    AUDITOR = "Auditor"
    QA_LEAD = "QA Lead"
    ENGINEER = "Engineer"
    NEW_HIRE = "New Hire"

    @classmethod
    def parse(cls, value: Any) -> "Role":
        for role in cls:
            if value == role.value:
                return role
        if value:
            logger.warning("Unknown role %r; falling back to %s", value, cls.QA_LEAD.value)
        return cls.QA_LEAD


class Lens(str, Enum):
    """Topic the summary concentrates on."""

    REGULATORY = "Regulatory"
    RISK_CAPA = "Risk & CAPA"
    TRAINING = "Training"
    TIMELINE = "Timeline/Change log"
    TESTING_EVIDENCE = "Testing & Evidence"

    @classmethod
    def parse(cls, value: Any) -> "Lens":
        for lens in cls:
            if value == lens.value:
                return lens
        if value:
            logger.warning("Unknown lens %r; falling back to %s", value, cls.REGULATORY.value)
        return cls.REGULATORY


class Detail(str, Enum):
    """Summary depth."""

    BRIEF = "Brief"
    STANDARD = "Standard"
    DEEP_DIVE = "Deep Dive"

    @classmethod
    def parse(cls, value: Any) -> "Detail":
        """Prefix match: ``brief*`` and ``deep*`` are recognised, everything else is Standard."""
        if not value:
            return cls.STANDARD
        normalized = str(value).strip().lower()
        if normalized.startswith("brief"):
            return cls.BRIEF
        if normalized.startswith("deep"):
            return cls.DEEP_DIVE
        return cls.STANDARD


class Mode(BaseModel):
    """Resolved summary mode stored with every record."""

    role: Role = Role.QA_LEAD
    lens: Lens = Lens.REGULATORY
    detail: Detail = Detail.STANDARD


class Query(BaseModel):
    """Deduplicated lowercase term set used for lexical retrieval."""

    terms: List[str] = Field(default_factory=list)
    role: Role
    lens: Lens


class DetailPlan(BaseModel):
    target_sentences: int
    max_chunks: int


class RawMode(BaseModel):
    """Caller-supplied mode; values are resolved leniently by the query builder."""

    role: Optional[Any] = None
    lens: Optional[Any] = None
    detail: Optional[Any] = None
