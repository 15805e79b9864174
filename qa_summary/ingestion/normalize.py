"""Normalize raw document payloads into immutable ``Document`` objects."""

from __future__ import annotations

import hashlib
import logging
import re
from datetime import date
from typing import List, Tuple

from qa_summary.errors import DocumentValidationError
from qa_summary.ingestion.decode import decode_document_content
from qa_summary.models.api import DocumentPayload
from qa_summary.models.document import Document

logger = logging.getLogger(__name__)

# Every C0 control character except LF, which carries paragraph structure.
CONTROL_PATTERN = re.compile(r"[\x00-\x09\x0b-\x1f]+")
HORIZONTAL_SPACE_PATTERN = re.compile(r"[^\S\n]+")
LINE_EDGE_PATTERN = re.compile(r" *\n *")
BLANK_RUN_PATTERN = re.compile(r"\n{3,}")


def normalize_text(value: object) -> str:
    if not value or not isinstance(value, str):
        return ""
    text = value.replace("\r\n", "\n")
    text = CONTROL_PATTERN.sub(" ", text)
    text = HORIZONTAL_SPACE_PATTERN.sub(" ", text)
    text = LINE_EDGE_PATTERN.sub("\n", text)
    text = BLANK_RUN_PATTERN.sub("\n\n", text)
    return text.strip()


def generate_deterministic_id(text: str) -> str:
    """Content address: identical normalized content always yields the same id."""
    return hashlib.sha1(text.encode("utf-8")).hexdigest()[:16]


def _raw_content(payload: DocumentPayload) -> Tuple[str, List[str]]:
    if payload.content or payload.text:
        return payload.content or payload.text or "", []
    if payload.content_base64:
        return decode_document_content(payload.content_base64, payload.content_type)
    return "", []


def normalize_document(payload: DocumentPayload) -> Tuple[Document, List[str]]:
    """Return the normalized document and any decoding warnings."""
    raw, warnings = _raw_content(payload)
    text = normalize_text(raw)
    if not text:
        raise DocumentValidationError("Document content is required")

    document = Document(
        doc_id=payload.doc_id or payload.id or generate_deterministic_id(text),
        title=payload.title or "Untitled Document",
        version=payload.version or "1.0",
        doc_type=payload.doc_type or payload.type or "Document",
        effective_date=payload.effective_date or payload.effectiveDate or date.today().isoformat(),
        owner=payload.owner or "unknown",
        system_of_record=payload.system_of_record or payload.systemOfRecord or "unspecified",
        content=text,
    )
    logger.debug("Normalized document %s (%s chars)", document.doc_id, len(text))
    return document, warnings
