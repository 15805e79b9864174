"""Split a normalized document into overlapping, section-tagged chunks."""

from __future__ import annotations

import logging
import math
import re
from typing import Any, List, Optional

from qa_summary.config import settings
from qa_summary.ingestion.decode import normalize_block_text
from qa_summary.models.api import ChunkConfigPayload
from qa_summary.models.chunk import Chunk
from qa_summary.models.document import ChunkConfig, Document, Paragraph
from qa_summary.utils.tokenization import tokenize

logger = logging.getLogger(__name__)

PARAGRAPH_SPLIT_PATTERN = re.compile(r"\n{2,}")
HEADING_PATTERN = re.compile(r"^([0-9]+\.|#+|Section\s+\d+)", re.IGNORECASE)
HEADING_MARKER_PATTERN = re.compile(r"^#+\s*")
LABEL_END_PATTERN = re.compile(r"[.:]")
DEFAULT_SECTION = "Introduction"


def clamp_number(value: Any, minimum: int, maximum: int, fallback: int) -> int:
    """Clamp numeric input; anything that is not a real number yields ``fallback``."""
    if isinstance(value, bool) or not isinstance(value, (int, float)) or math.isnan(value):
        return fallback
    return int(min(max(value, minimum), maximum))


def build_chunk_config(raw: Optional[ChunkConfigPayload]) -> ChunkConfig:
    raw = raw or ChunkConfigPayload()
    return ChunkConfig(
        chunk_size=clamp_number(
            raw.chunkSize,
            settings.chunk_size_min,
            settings.chunk_size_max,
            settings.chunk_size_default,
        ),
        chunk_overlap=clamp_number(
            raw.chunkOverlap,
            settings.chunk_overlap_min,
            settings.chunk_overlap_max,
            settings.chunk_overlap_default,
        ),
    )


def is_heading(text: str) -> bool:
    return bool(HEADING_PATTERN.match(text))


def heading_label(text: str, current: str) -> str:
    """Heading text minus its ``#`` marker, cut at the first ``.`` or ``:``."""
    stripped = HEADING_MARKER_PATTERN.sub("", text)
    label = LABEL_END_PATTERN.split(stripped, maxsplit=1)[0].strip()
    return label or current


def split_paragraphs(content: str) -> List[Paragraph]:
    paragraphs: List[Paragraph] = []
    for raw in PARAGRAPH_SPLIT_PATTERN.split(content):
        text = normalize_block_text(raw)
        if not text:
            continue
        paragraphs.append(
            Paragraph(
                text=text,
                tokens=tokenize(text),
                is_heading=is_heading(text),
                order=len(paragraphs),
            )
        )
    return paragraphs


def page_for(token_cursor: int) -> int:
    # Half-up rounding, so a cursor of 200 lands on page 2.
    return max(1, math.floor(token_cursor / settings.page_token_span + 0.5) + 1)


def chunk_document(document: Document, config: ChunkConfig) -> List[Chunk]:
    """Accumulate paragraphs into chunks of at most ``chunk_size`` tokens.

    Headings are not chunk content; they update the running section label and
    flush the buffer when it is already more than half full. A single paragraph
    longer than ``chunk_size`` is never split.
    """
    chunks: List[Chunk] = []
    buffer: List[str] = []
    buffer_tokens = 0
    token_cursor = 0
    section = DEFAULT_SECTION

    def flush_buffer() -> None:
        nonlocal buffer, buffer_tokens, token_cursor
        if not buffer:
            return
        text = " ".join(buffer)
        tokens = tokenize(text)
        chunks.append(
            Chunk(
                id=f"{document.doc_id}_c{len(chunks) + 1}",
                doc_id=document.doc_id,
                section=section,
                page=page_for(token_cursor),
                text=text,
                tokens=tokens,
                token_count=len(tokens),
                start_token=token_cursor,
                end_token=token_cursor + len(tokens),
            )
        )
        token_cursor += max(len(tokens) - config.chunk_overlap, 0)
        buffer = []
        buffer_tokens = 0

    for paragraph in split_paragraphs(document.content):
        if paragraph.is_heading:
            if buffer_tokens > config.chunk_size * 0.5:
                flush_buffer()
            section = heading_label(paragraph.text, section)
            continue

        if buffer and buffer_tokens + len(paragraph.tokens) > config.chunk_size:
            flush_buffer()
        buffer.append(paragraph.text)
        buffer_tokens += len(paragraph.tokens)

    flush_buffer()
    logger.debug(
        "Chunked %s into %s chunks (size=%s, overlap=%s)",
        document.doc_id,
        len(chunks),
        config.chunk_size,
        config.chunk_overlap,
    )
    return chunks
