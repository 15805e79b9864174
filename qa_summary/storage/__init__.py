"""Summary persistence."""

from .summary_store import MemorySummaryCache, SqlSummaryStore, SummaryRepository, build_repository

__all__ = ["MemorySummaryCache", "SqlSummaryStore", "SummaryRepository", "build_repository"]
