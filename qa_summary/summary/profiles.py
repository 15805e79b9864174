"""Fixed role, lens and detail configuration tables."""

from __future__ import annotations

from typing import Dict, List

from pydantic import BaseModel

from qa_summary.models.mode import Detail, DetailPlan, Lens, Role


class RoleProfile(BaseModel):
    keywords: List[str]
    tone: str
    min_citation_density: float
    sections: List[str]


ROLE_PROFILES: Dict[Role, RoleProfile] = {
    Role.AUDITOR: RoleProfile(
        keywords=["compliance", "deviation", "capa", "audit", "signature", "approval", "validation"],
        tone="formal",
        min_citation_density=0.7,
        sections=["Compliance Obligations", "Deviations & CAPA", "Approvals & Timelines"],
    ),
    Role.QA_LEAD: RoleProfile(
        keywords=["risk", "mitigation", "owner", "due date", "change control", "blocker"],
        tone="pragmatic",
        min_citation_density=0.5,
        sections=["Risk Posture", "Mitigations & Owners", "Open Actions"],
    ),
    Role.ENGINEER: RoleProfile(
        keywords=["test", "defect", "environment", "configuration", "log", "pipeline"],
        tone="technical",
        min_citation_density=0.4,
        sections=["Testing Summary", "Defects & Evidence", "Environment Notes"],
    ),
    Role.NEW_HIRE: RoleProfile(
        keywords=["overview", "definition", "context", "role", "training"],
        tone="accessible",
        min_citation_density=0.4,
        sections=["Purpose & Scope", "Key Responsibilities", "Training Pointers"],
    ),
}

LENS_KEYWORDS: Dict[Lens, List[str]] = {
    Lens.REGULATORY: ["21 cfr 11", "annex 11", "part 820", "inspection", "submission"],
    Lens.RISK_CAPA: ["risk", "severity", "impact", "capa", "root cause"],
    Lens.TRAINING: ["training", "curriculum", "onboarding", "lesson"],
    Lens.TIMELINE: ["timeline", "change", "revision", "effective date"],
    Lens.TESTING_EVIDENCE: ["test", "iq", "oq", "pq", "evidence", "protocol"],
}

DETAIL_PLANS: Dict[Detail, DetailPlan] = {
    Detail.BRIEF: DetailPlan(target_sentences=4, max_chunks=8),
    Detail.STANDARD: DetailPlan(target_sentences=6, max_chunks=14),
    Detail.DEEP_DIVE: DetailPlan(target_sentences=10, max_chunks=24),
}

DEFAULT_GROUP_TITLE = "Key Insights"


def role_profile(role: Role) -> RoleProfile:
    return ROLE_PROFILES[role]


def lens_keywords(lens: Lens) -> List[str]:
    return LENS_KEYWORDS[lens]


def detail_plan(detail: Detail) -> DetailPlan:
    return DETAIL_PLANS[detail]
