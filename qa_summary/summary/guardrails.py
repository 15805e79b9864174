"""Post-render guardrails and the confidence score derived from them."""

from __future__ import annotations

import re
from typing import List

from qa_summary.models.mode import Mode
from qa_summary.models.summary import Citation, GuardrailReport, GuardrailViolation
from qa_summary.summary.profiles import role_profile

CITATION_MARKER_PATTERN = re.compile(r"\[[0-9]+\]")
SSN_PATTERN = re.compile(r"\b\d{3}-\d{2}-\d{4}\b")


def citation_density(summary_text: str, citations: List[Citation]) -> float:
    """Unique cited chunks per ``[n]`` marker; text without markers has density 0."""
    markers = CITATION_MARKER_PATTERN.findall(summary_text or "")
    if not markers:
        return 0.0
    return len(citations) / len(markers)


def run_guardrails(summary_text: str, citations: List[Citation], mode: Mode) -> GuardrailReport:
    """Evaluate the rendered summary. Violations are reported, never raised."""
    violations: List[GuardrailViolation] = []

    if not summary_text or not summary_text.strip():
        violations.append(GuardrailViolation(code="EMPTY_SUMMARY", message="Summary text is empty"))

    density = citation_density(summary_text, citations)
    minimum = role_profile(mode.role).min_citation_density
    if density < minimum:
        violations.append(
            GuardrailViolation(
                code="LOW_CITATION_DENSITY",
                message=f"Citation density {density:.2f} below threshold {minimum}",
            )
        )

    if SSN_PATTERN.search(summary_text or ""):
        violations.append(
            GuardrailViolation(code="PII_DETECTED", message="Potential PII detected in summary output")
        )

    return GuardrailReport(violations=violations, citation_density=density)


def calculate_confidence(citations: List[Citation], violations: List[GuardrailViolation]) -> float:
    """Bounded to [0, 0.9]: citations raise the base, violations apply a capped penalty."""
    base = 0.6 + min(0.3, len(citations) * 0.05) if citations else 0.4
    penalty = min(0.3, len(violations) * 0.1)
    return round(max(0.0, base - penalty), 2)
