"""Decode base64 document payloads into plain text."""

from __future__ import annotations

import base64
import binascii
import logging
import re
from typing import Iterable, List, Optional, Tuple

import fitz

from qa_summary.errors import DocumentValidationError

logger = logging.getLogger(__name__)

TEXTUAL_MIME_INDICATORS = (
    "text/",
    "application/json",
    "application/xml",
    "application/xhtml+xml",
    "application/x-yaml",
    "application/yaml",
    "application/csv",
    "application/rtf",
)
BINARY_HINTS = ("msword", "officedocument", "octet-stream")

LOSSY_WARNING = (
    "Binary document converted using a lossy UTF-8 fallback. "
    "Consider uploading a text-friendly version for better summaries."
)
UNKNOWN_WARNING = (
    "Unknown content type decoded as UTF-8 text. "
    "Validate the extracted content before summarizing."
)

BINARY_ARTIFACT_PATTERN = re.compile(r"[\x00-\x1f\x7f-\x9f]+")


def normalize_block_text(text: str) -> str:
    parts = [line.strip() for line in text.splitlines() if line.strip()]
    return " ".join(parts)


def iter_page_paragraphs(page: fitz.Page) -> Iterable[str]:
    """Yield cleaned text blocks from a PDF page in reading order."""
    blocks = page.get_text("blocks")
    for block in sorted(blocks, key=lambda b: (b[1], b[0])):
        text = normalize_block_text(block[4])
        if text:
            yield text


def extract_pdf_text(data: bytes) -> str:
    """One paragraph per text block, separated by blank lines."""
    try:
        doc = fitz.open(stream=data, filetype="pdf")
    except RuntimeError as exc:
        raise DocumentValidationError(f"Unable to open PDF payload: {exc}") from exc
    paragraphs: List[str] = []
    try:
        for page in doc:
            paragraphs.extend(iter_page_paragraphs(page))
    finally:
        doc.close()
    logger.debug("Extracted %s paragraphs from PDF payload", len(paragraphs))
    return "\n\n".join(paragraphs)


def strip_binary_artifacts(text: str) -> str:
    return " ".join(BINARY_ARTIFACT_PATTERN.sub(" ", text).split())


def decode_document_content(content_base64: str, content_type: Optional[str] = None) -> Tuple[str, List[str]]:
    """Return ``(text, warnings)`` for an encoded payload."""
    try:
        data = base64.b64decode(content_base64, validate=False)
    except binascii.Error as exc:
        raise DocumentValidationError("Document payload is not valid base64") from exc

    normalized_type = (content_type or "").lower()
    decoded = data.decode("utf-8", errors="replace")

    if any(indicator in normalized_type for indicator in TEXTUAL_MIME_INDICATORS):
        return decoded, []

    if "pdf" in normalized_type:
        text = extract_pdf_text(data)
        if not text.strip():
            raise DocumentValidationError(
                "Unable to extract readable text from binary document. "
                "Download the file and provide a text version."
            )
        return text, []

    if any(hint in normalized_type for hint in BINARY_HINTS):
        sanitized = strip_binary_artifacts(decoded)
        if not sanitized:
            raise DocumentValidationError(
                "Unable to extract readable text from binary document. "
                "Download the file and provide a text version."
            )
        return sanitized, [LOSSY_WARNING]

    sanitized = strip_binary_artifacts(decoded)
    return sanitized or decoded, [UNKNOWN_WARNING]
