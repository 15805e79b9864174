"""Term-frequency retriever over a single document's chunks."""

from __future__ import annotations

import logging
import math
from typing import List

from qa_summary.models.chunk import Chunk, SearchIndex
from qa_summary.models.mode import Query
from qa_summary.models.retrieval import RetrievedChunk
from qa_summary.utils.tokenization import normalize_term

logger = logging.getLogger(__name__)

COVERAGE_BONUS_CAP = 0.5
COVERAGE_BONUS_TOKENS = 1500


def score_chunk(chunk: Chunk, terms: List[str], total_tokens: int) -> float:
    """Sum of ``ln(1 + f)`` over matched terms plus a capped length bonus.

    Terms that normalize to the same index key count once.
    """
    if not terms:
        return chunk.token_count / max(1, total_tokens)

    score = 0.0
    for normalized in dict.fromkeys(normalize_term(term) for term in terms):
        if not normalized:
            continue
        frequency = chunk.term_frequency.get(normalized, 0)
        if frequency > 0:
            score += math.log(1 + frequency)

    coverage_bonus = min(COVERAGE_BONUS_CAP, chunk.token_count / COVERAGE_BONUS_TOKENS)
    return score + coverage_bonus


class LexicalRetriever:
    """Ranks indexed chunks against a query."""

    def __init__(self, index: SearchIndex) -> None:
        self.index = index

    def retrieve(self, query: Query, max_chunks: int) -> List[RetrievedChunk]:
        scored = [
            RetrievedChunk(
                **chunk.model_dump(),
                score=score_chunk(chunk, query.terms, self.index.total_tokens),
            )
            for chunk in self.index.chunks
        ]
        # sorted() is stable, so equal scores keep document order.
        ranked = sorted(scored, key=lambda chunk: chunk.score, reverse=True)
        top = ranked[: max(max_chunks, 1)]
        logger.debug("Retrieved %s of %s chunks for %s terms", len(top), len(scored), len(query.terms))
        return top
