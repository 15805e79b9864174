"""Whitespace tokenization and index-term normalization shared by every stage."""

from __future__ import annotations

import re
from typing import List

NON_TERM_PATTERN = re.compile(r"[^a-z0-9]")


def tokenize(text: str) -> List[str]:
    """Split on whitespace, dropping empty tokens."""
    return text.split()


def normalize_term(token: str) -> str:
    """Lowercase a token and strip everything outside ``[a-z0-9]``."""
    return NON_TERM_PATTERN.sub("", token.lower())