"""Extractive sentence ranking, section-balanced selection and citation assignment."""

from __future__ import annotations

import logging
import re
from typing import Dict, List, Set

from qa_summary.models.mode import DetailPlan, Mode
from qa_summary.models.retrieval import RetrievedChunk
from qa_summary.models.summary import Citation, Orchestration, Sentence
from qa_summary.summary.rendering import render_summary

logger = logging.getLogger(__name__)

SENTENCE_SPLIT_PATTERN = re.compile(r"(?<=[.!?])\s+")
LENGTH_BONUS_CAP = 0.5
LENGTH_BONUS_CHARS = 500
PREVIEW_CHARS = 180


def extract_sentences(chunks: List[RetrievedChunk], limit: int) -> List[Sentence]:
    """Rank every sentence of the retrieved chunks by weight, keeping the top ``limit``."""
    sentences: List[Sentence] = []
    for chunk in chunks:
        for part in SENTENCE_SPLIT_PATTERN.split(chunk.text):
            text = part.strip()
            if not text:
                continue
            sentences.append(
                Sentence(
                    text=text,
                    chunk_id=chunk.id,
                    section=chunk.section,
                    page=chunk.page,
                    weight=chunk.score + min(LENGTH_BONUS_CAP, len(text) / LENGTH_BONUS_CHARS),
                    raw_score=chunk.score,
                    order=len(sentences),
                )
            )

    sentences.sort(key=lambda sentence: (-sentence.weight, sentence.order))
    return sentences[: max(limit, 1)]


def select_sentences(candidates: List[Sentence], target: int) -> List[Sentence]:
    """Pick up to ``target`` sentences, favouring unseen sections.

    The first half of the quota is taken in rank order; after that only
    sentences from sections not yet represented are accepted. Whatever quota
    remains is then back-filled from the skipped candidates in rank order.
    """
    selected: List[Sentence] = []
    skipped: List[Sentence] = []
    seen_sections: Set[str] = set()

    for sentence in candidates:
        if len(selected) >= target:
            break
        section_key = sentence.section.lower()
        if section_key not in seen_sections or len(selected) < target / 2:
            selected.append(sentence)
            seen_sections.add(section_key)
        else:
            skipped.append(sentence)

    for sentence in skipped:
        if len(selected) >= target:
            break
        selected.append(sentence)

    return selected[:target]


def build_citations(sentences: List[Sentence]) -> List[Citation]:
    citations: List[Citation] = []
    seen: Dict[str, Citation] = {}
    for sentence in sentences:
        if sentence.chunk_id in seen:
            continue
        citation = Citation(
            citation_number=len(seen) + 1,
            chunk_id=sentence.chunk_id,
            section=sentence.section,
            page=sentence.page,
            preview=sentence.text[:PREVIEW_CHARS],
            score=round(sentence.raw_score, 3),
        )
        seen[sentence.chunk_id] = citation
        citations.append(citation)
    return citations


def run_orchestration(chunks: List[RetrievedChunk], mode: Mode, plan: DetailPlan) -> Orchestration:
    candidates = extract_sentences(chunks, plan.target_sentences * 2)
    sentences = select_sentences(candidates, plan.target_sentences)
    citations = build_citations(sentences)
    summary_text = render_summary(sentences, citations, mode)
    logger.debug(
        "Selected %s of %s candidate sentences with %s citations",
        len(sentences),
        len(candidates),
        len(citations),
    )
    return Orchestration(sentences=sentences, citations=citations, summary_text=summary_text)
