"""Lexical retrieval stack."""

from .lexical_index import build_search_index
from .lexical_retriever import LexicalRetriever, score_chunk
from .query_builder import build_mode, build_query

__all__ = ["LexicalRetriever", "build_mode", "build_query", "build_search_index", "score_chunk"]
