"""Build per-chunk term-frequency tables and the corpus vocabulary."""

from __future__ import annotations

import logging
from collections import Counter
from typing import List

from qa_summary.models.chunk import Chunk, SearchIndex
from qa_summary.utils.tokenization import normalize_term

logger = logging.getLogger(__name__)


def build_search_index(chunks: List[Chunk]) -> SearchIndex:
    """Attach ``term_frequency`` to every chunk in place and count the vocabulary."""
    vocabulary: Counter[str] = Counter()
    total_tokens = 0

    for chunk in chunks:
        frequency: Counter[str] = Counter()
        for token in chunk.tokens:
            normalized = normalize_term(token)
            if not normalized:
                continue
            frequency[normalized] += 1
            total_tokens += 1
        chunk.term_frequency = dict(frequency)
        vocabulary.update(frequency)

    logger.debug("Indexed %s chunks, %s terms, %s tokens", len(chunks), len(vocabulary), total_tokens)
    return SearchIndex(chunks=chunks, vocabulary=dict(vocabulary), total_tokens=total_tokens)
