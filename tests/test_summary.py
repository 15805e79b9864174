"""
Tests for sentence extraction, selection, citations, rendering and guardrails.

System role: Verification of the orchestrate and guardrails stages
"""

import pytest

from qa_summary.models.mode import DetailPlan, Mode, Role
from qa_summary.models.summary import Citation
from qa_summary.summary import calculate_confidence, render_summary, run_guardrails, run_orchestration
from qa_summary.summary.guardrails import citation_density
from qa_summary.summary.orchestrator import build_citations, extract_sentences, select_sentences
from qa_summary.summary.rendering import format_sentence, group_key


def make_citations(count: int) -> list:
    return [
        Citation(
            citation_number=n,
            chunk_id=f"doc_c{n}",
            section="Introduction",
            page=1,
            preview="preview",
            score=1.0,
        )
        for n in range(1, count + 1)
    ]


def violation_codes(report) -> list:
    return [violation.code for violation in report.violations]


class TestExtractSentences:
    """Test suite for extract_sentences()."""

    def test_should_rank_by_chunk_score_plus_length_bonus(self, make_chunk) -> None:
        chunks = [
            make_chunk("doc_c1", "Short. A much longer sentence here.", score=1.0),
            make_chunk("doc_c2", "Top.", score=2.0),
        ]

        sentences = extract_sentences(chunks, limit=3)

        assert [s.text for s in sentences] == ["Top.", "A much longer sentence here.", "Short."]
        assert sentences[0].weight == pytest.approx(2.0 + 4 / 500)
        assert sentences[1].raw_score == 1.0
        assert sentences[1].chunk_id == "doc_c1"

    def test_should_respect_limit(self, make_chunk) -> None:
        chunks = [make_chunk("doc_c1", "One. Two. Three. Four.")]

        assert len(extract_sentences(chunks, limit=2)) == 2
        assert len(extract_sentences(chunks, limit=0)) == 1

    def test_equal_weights_should_keep_source_order(self, make_chunk) -> None:
        chunks = [make_chunk("doc_c1", "Alpha. Bravo. Delta.")]

        sentences = extract_sentences(chunks, limit=10)

        assert [s.text for s in sentences] == ["Alpha.", "Bravo.", "Delta."]

    def test_length_bonus_should_be_capped(self, make_chunk) -> None:
        text = "x" * 900 + "."

        sentences = extract_sentences([make_chunk("doc_c1", text, score=0.0)], limit=1)

        assert sentences[0].weight == pytest.approx(0.5)


class TestSelectSentences:
    """Test suite for select_sentences()."""

    def test_should_favour_unseen_sections_after_half_quota(self, make_sentence) -> None:
        candidates = [make_sentence(f"A{i}", section="A", order=i) for i in range(6)]
        candidates += [make_sentence(f"B{i}", section="B", order=6 + i) for i in range(4)]

        selected = select_sentences(candidates, target=6)

        assert [s.text for s in selected] == ["A0", "A1", "A2", "B0", "A3", "A4"]

    def test_should_never_exceed_target(self, make_sentence) -> None:
        candidates = [make_sentence(f"S{i}", section=f"S{i}", order=i) for i in range(10)]

        assert len(select_sentences(candidates, target=4)) == 4

    def test_section_comparison_is_case_insensitive(self, make_sentence) -> None:
        candidates = [
            make_sentence("one", section="Scope"),
            make_sentence("two", section="scope"),
            make_sentence("three", section="SCOPE"),
            make_sentence("four", section="Records"),
        ]

        selected = select_sentences(candidates, target=2)

        assert [s.text for s in selected] == ["one", "four"]


class TestBuildCitations:
    """Test suite for build_citations()."""

    def test_should_number_unique_chunks_in_first_seen_order(self, make_sentence) -> None:
        sentences = [
            make_sentence("First.", chunk_id="doc_c2", raw_score=1.23456),
            make_sentence("Second.", chunk_id="doc_c1"),
            make_sentence("Third.", chunk_id="doc_c2"),
            make_sentence("y" * 300, chunk_id="doc_c3"),
        ]

        citations = build_citations(sentences)

        assert [(c.citation_number, c.chunk_id) for c in citations] == [
            (1, "doc_c2"),
            (2, "doc_c1"),
            (3, "doc_c3"),
        ]
        assert citations[0].preview == "First."
        assert citations[0].score == 1.235
        assert len(citations[2].preview) == 180

    def test_should_serialize_camel_case_number(self, make_sentence) -> None:
        citation = build_citations([make_sentence("Only.")])[0]

        assert citation.model_dump(by_alias=True)["citationNumber"] == 1


class TestRendering:
    """Test suite for render_summary() and its helpers."""

    def test_group_key_keeps_text_before_ampersand(self) -> None:
        assert group_key("Deviations & CAPA") == "deviations "
        assert group_key("Open Actions") == "open actions"

    def test_auditor_sections_with_default_group_last(self, make_sentence) -> None:
        sentences = [
            make_sentence("Y", chunk_id="doc_c2", section="Introduction"),
            make_sentence("X", chunk_id="doc_c1", section="Deviations and CAPA review"),
        ]
        citations = build_citations(
            [make_sentence("X", chunk_id="doc_c1"), make_sentence("Y", chunk_id="doc_c2")]
        )

        summary = render_summary(sentences, citations, Mode(role=Role.AUDITOR))

        assert summary == "### Deviations & CAPA\n- X [1]\n\n### Key Insights\n- Y [2]"

    def test_new_hire_tone_should_annotate_acronyms(self) -> None:
        assert (
            format_sentence("The QA team owns CAPA and SOPs.", 1, "accessible")
            == "The QA (see glossary) team owns CAPA (see glossary) and SOPs. [1]"
        )

    def test_other_tones_leave_text_untouched(self) -> None:
        assert format_sentence("The QA team.", 2, "formal") == "The QA team. [2]"

    def test_missing_citation_should_omit_marker(self) -> None:
        assert format_sentence("Plain.", None, "technical") == "Plain."

    def test_no_sentences_should_render_empty(self) -> None:
        assert render_summary([], [], Mode()) == ""


class TestRunOrchestration:
    def test_should_cite_every_rendered_chunk(self, make_chunk) -> None:
        chunks = [
            make_chunk("doc_c1", "Risk is tracked. Owners are named.", score=2.0, section="Risk Posture"),
            make_chunk("doc_c2", "Blockers are escalated.", score=1.0, section="Open Actions"),
        ]

        result = run_orchestration(chunks, Mode(role=Role.QA_LEAD), DetailPlan(target_sentences=4, max_chunks=8))

        assert len(result.sentences) == 3
        assert [c.chunk_id for c in result.citations] == ["doc_c1", "doc_c2"]
        assert result.summary_text == (
            "### Risk Posture\n- Owners are named. [1]\n- Risk is tracked. [1]\n\n"
            "### Open Actions\n- Blockers are escalated. [2]"
        )


class TestGuardrails:
    """Test suite for run_guardrails() and citation_density()."""

    def test_empty_summary_should_report_both_violations(self) -> None:
        report = run_guardrails("", [], Mode(role=Role.AUDITOR))

        assert violation_codes(report) == ["EMPTY_SUMMARY", "LOW_CITATION_DENSITY"]
        assert report.citation_density == 0.0

    @pytest.mark.parametrize("role", list(Role))
    def test_text_without_markers_should_be_low_density(self, role: Role) -> None:
        report = run_guardrails("A summary without markers.", make_citations(3), Mode(role=role))

        assert violation_codes(report) == ["LOW_CITATION_DENSITY"]

    def test_ssn_pattern_should_be_flagged(self) -> None:
        report = run_guardrails("Subject 123-45-6789 enrolled. [1]", make_citations(1), Mode(role=Role.AUDITOR))

        assert violation_codes(report) == ["PII_DETECTED"]
        assert report.citation_density == 1.0

    def test_low_density_message_includes_threshold(self) -> None:
        report = run_guardrails("a [1] b [1] c [1] d [1]", make_citations(1), Mode(role=Role.QA_LEAD))

        assert report.violations[0].message == "Citation density 0.25 below threshold 0.5"

    def test_density_is_citations_per_marker(self) -> None:
        assert citation_density("a [1] b [2] c [2]", make_citations(2)) == pytest.approx(2 / 3)
        assert citation_density("no markers", make_citations(2)) == 0.0

    def test_report_serializes_camel_case(self) -> None:
        report = run_guardrails("x [1]", make_citations(1), Mode())

        assert report.model_dump(by_alias=True) == {"violations": [], "citationDensity": 1.0}


class TestConfidence:
    """Test suite for calculate_confidence()."""

    @pytest.mark.parametrize(
        "citation_count, violation_count, expected",
        [
            (0, 0, 0.4),
            (1, 0, 0.65),
            (10, 0, 0.9),
            (0, 5, 0.1),
            (1, 1, 0.55),
        ],
    )
    def test_known_values(self, citation_count: int, violation_count: int, expected: float) -> None:
        violations = run_guardrails("", [], Mode()).violations[:1] * violation_count

        assert calculate_confidence(make_citations(citation_count), violations) == expected

    def test_always_within_bounds(self) -> None:
        violation = run_guardrails("", [], Mode()).violations[0]
        for citation_count in range(0, 12):
            for violation_count in range(0, 6):
                score = calculate_confidence(make_citations(citation_count), [violation] * violation_count)
                assert 0.0 <= score <= 0.9
