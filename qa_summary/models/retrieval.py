"""Retrieval models."""

from __future__ import annotations

from .chunk import Chunk


class RetrievedChunk(Chunk):
    """Chunk extended with its lexical relevance score."""

    score: float = 0.0
