"""Resolve the caller's mode and merge query terms with role and lens keywords."""

from __future__ import annotations

from typing import Iterable, List, Optional

from qa_summary.models.api import Filters
from qa_summary.models.mode import Detail, Lens, Mode, Query, RawMode, Role
from qa_summary.summary.profiles import lens_keywords, role_profile
from qa_summary.utils.tokenization import tokenize


def build_mode(raw: Optional[RawMode] = None) -> Mode:
    raw = raw or RawMode()
    return Mode(
        role=Role.parse(raw.role),
        lens=Lens.parse(raw.lens),
        detail=Detail.parse(raw.detail),
    )


def _filter_terms(filters: Optional[Filters]) -> Iterable[str]:
    if not filters:
        return []
    values = [*(filters.tags or []), *(filters.sections or [])]
    return [str(value).lower() for value in values]


def build_query(user_query: Optional[str], mode: Mode, filters: Optional[Filters] = None) -> Query:
    """Union of query tokens, role keywords, lens keywords and filter strings.

    Terms keep first-seen order so repeated runs score identically.
    """
    candidates: List[str] = [
        *tokenize((user_query or "").lower()),
        *role_profile(mode.role).keywords,
        *lens_keywords(mode.lens),
        *_filter_terms(filters),
    ]
    terms = list(dict.fromkeys(term.lower() for term in candidates if term))
    return Query(terms=terms, role=mode.role, lens=mode.lens)
