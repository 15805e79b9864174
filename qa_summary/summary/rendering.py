"""Render selected sentences as a role-specific, sectioned summary."""

from __future__ import annotations

import re
from typing import Dict, List, Optional

from qa_summary.models.mode import Mode
from qa_summary.models.summary import Citation, Sentence
from qa_summary.summary.profiles import DEFAULT_GROUP_TITLE, role_profile

GLOSSARY_ACRONYM_PATTERN = re.compile(r"\b(QA|CAPA|SOP|IQ|OQ|PQ)\b")


def format_sentence(text: str, citation_number: Optional[int], tone: str) -> str:
    sentence = text
    if tone == "accessible":
        sentence = GLOSSARY_ACRONYM_PATTERN.sub(lambda match: f"{match.group(0)} (see glossary)", sentence)
    if citation_number is not None:
        return f"{sentence} [{citation_number}]"
    return sentence


def group_key(section_title: str) -> str:
    """Lowercased text before ``&``; a trailing space is kept."""
    return section_title.split("&")[0].lower()


def render_summary(sentences: List[Sentence], citations: List[Citation], mode: Mode) -> str:
    profile = role_profile(mode.role)
    citation_lookup = {citation.chunk_id: citation.citation_number for citation in citations}

    groups: Dict[str, List[str]] = {title: [] for title in profile.sections}
    default_bullets: List[str] = []

    for sentence in sentences:
        bullet = format_sentence(sentence.text, citation_lookup.get(sentence.chunk_id), profile.tone)
        section = sentence.section.lower()
        match = next((title for title in profile.sections if group_key(title) in section), None)
        if match:
            groups[match].append(bullet)
        else:
            default_bullets.append(bullet)

    ordered = [*groups.items(), (DEFAULT_GROUP_TITLE, default_bullets)]
    lines: List[str] = []
    for title, bullets in ordered:
        if not bullets:
            continue
        lines.append(f"### {title}")
        lines.extend(f"- {bullet}" for bullet in bullets)
        lines.append("")
    return "\n".join(lines).strip()
