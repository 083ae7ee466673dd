"""
Tests for the document analysis orchestrator.
"""
import math

import pytest

from docintel.core.exceptions import ValidationError
from docintel.domain.schemas.analysis import ConsistencyType, Impact, Severity
from docintel.domain.schemas.options import (
    AnalysisScope,
    DocumentAnalysisRequest,
    SectionBoundary,
)
from docintel.services.intelligence import (
    DocumentAnalysisEngine,
    create_document_intelligence_engine,
)


WELL_FORMED = "# Introduction\nHello world.\n# Conclusion\nIn conclusion, good."
NO_FRAME = "# Alpha\nSome text here.\n# Beta\nMore text here.\n"


@pytest.fixture
def engine():
    return DocumentAnalysisEngine()


class TestStructuralAnalysis:
    """Test structural issues and flow."""

    @pytest.mark.asyncio
    async def test_well_formed_document(self, engine):
        """Test a document with introduction and conclusion has no issues."""
        result = await engine.analyze_document(DocumentAnalysisRequest(content=WELL_FORMED))

        assert [s.title for s in result.structure.sections] == ["Introduction", "Conclusion"]
        assert result.structure.structural_issues == []
        assert result.assessment.overall_score == 80
        assert result.assessment.confidence == 0.9
        assert result.assessment.improvement_urgency == Severity.LOW
        assert "Well-structured document with clear organization" in result.assessment.strengths

    @pytest.mark.asyncio
    async def test_missing_introduction_and_conclusion(self, engine):
        """Test both framing sections are reported missing."""
        result = await engine.analyze_document(DocumentAnalysisRequest(content=NO_FRAME))

        issues = result.structure.structural_issues
        assert [i.type for i in issues] == ["missing-introduction", "missing-conclusion"]
        assert all(i.severity == Severity.MEDIUM for i in issues)
        assert result.assessment.overall_score == 70
        assert result.assessment.confidence == 0.8
        assert result.assessment.improvement_urgency == Severity.MEDIUM
        assert result.assessment.areas_for_improvement == ["Document structure and organization"]

    @pytest.mark.asyncio
    async def test_single_section_has_no_issues(self, engine):
        """Test structural checks need more than one section."""
        result = await engine.analyze_document(DocumentAnalysisRequest(content="Just one paragraph."))

        assert result.structure.structural_issues == []

    @pytest.mark.asyncio
    async def test_weak_transition(self, engine):
        """Test unrelated adjacent sections get a weak transition."""
        result = await engine.analyze_document(DocumentAnalysisRequest(content=WELL_FORMED))

        transition = result.structure.flow_analysis.transitions[0]
        assert transition.transition_type == "weak"
        assert transition.issues == ["Weak connection between sections"]
        assert transition.suggested_improvement == "Add transitional sentence or improve logical flow"
        assert result.structure.flow_analysis.flow_score == 0.0

    @pytest.mark.asyncio
    async def test_max_issues_truncates_report_only(self, engine):
        """Test truncation leaves the score computed from every issue."""
        request = DocumentAnalysisRequest(content=NO_FRAME, max_issues=1)

        result = await engine.analyze_document(request)

        assert len(result.structure.structural_issues) == 1
        assert result.assessment.overall_score == 70


class TestRequestScope:
    """Test content resolution for scoped requests."""

    @pytest.mark.asyncio
    async def test_boundary_beyond_content(self, engine):
        """Test out-of-range boundaries are rejected."""
        request = DocumentAnalysisRequest(
            content="short",
            scope=AnalysisScope.SECTION,
            section_boundaries=[SectionBoundary(start_index=0, end_index=100)],
        )

        with pytest.raises(ValidationError) as exc_info:
            await engine.analyze_document(request)

        assert exc_info.value.details == {"field": "section_boundaries"}

    @pytest.mark.asyncio
    async def test_section_scope_slices_content(self, engine):
        """Test only the bounded text is analysed."""
        content = "# A\nalpha\n# B\nbeta\n"
        request = DocumentAnalysisRequest(
            content=content,
            scope=AnalysisScope.SECTION,
            section_boundaries=[SectionBoundary(start_index=0, end_index=10)],
        )

        result = await engine.analyze_document(request)

        assert [s.title for s in result.structure.sections] == ["A"]
        assert result.metadata.statistics.character_count == 10
        assert result.metadata.scope == AnalysisScope.SECTION

    @pytest.mark.asyncio
    async def test_full_document_ignores_boundaries(self, engine):
        """Test boundaries only apply to section and paragraph scope."""
        content = "# A\nalpha\n# B\nbeta\n"
        request = DocumentAnalysisRequest(
            content=content,
            section_boundaries=[SectionBoundary(start_index=0, end_index=10)],
        )

        result = await engine.analyze_document(request)

        assert len(result.structure.sections) == 2


class TestSuggestionsAndMetadata:
    """Test suggestions, statistics and insights."""

    @pytest.mark.asyncio
    async def test_suggestions_follow_issues(self, engine):
        """Test each structural issue becomes a suggestion."""
        result = await engine.analyze_document(DocumentAnalysisRequest(content=NO_FRAME))

        suggestions = result.suggestions.structural
        assert [s.description for s in suggestions] == [
            "Fix: Document lacks a clear introduction section",
            "Fix: Document lacks a clear conclusion section",
        ]
        assert all(s.type == "add-section" for s in suggestions)
        assert result.suggestions.priority == Impact.MEDIUM

    @pytest.mark.asyncio
    async def test_suggestions_disabled(self, engine):
        """Test no suggestions are produced when switched off."""
        request = DocumentAnalysisRequest(content=NO_FRAME, include_suggestions=False)

        result = await engine.analyze_document(request)

        assert result.suggestions.all() == []
        assert result.suggestions.priority == Impact.MEDIUM

    @pytest.mark.asyncio
    async def test_statistics(self, engine, report_text):
        """Test document statistics and reading time."""
        result = await engine.analyze_document(DocumentAnalysisRequest(content=report_text))

        statistics = result.metadata.statistics
        word_count = len(report_text.split())
        assert statistics.character_count == len(report_text)
        assert statistics.word_count == word_count
        assert statistics.paragraph_count == 5
        assert statistics.reading_time_minutes == math.ceil(word_count / 200)
        assert result.metadata.processing_time_ms >= 0

    @pytest.mark.asyncio
    async def test_key_themes(self, engine, report_text):
        """Test frequent long words become key themes."""
        result = await engine.analyze_document(DocumentAnalysisRequest(content=report_text))

        themes = result.insights.key_themes
        assert 0 < len(themes) <= 5
        assert themes[0].theme in ("migration", "billing")
        assert all(0 < theme.relevance <= 1 for theme in themes)


class TestFullPipeline:
    """Test running every engine together."""

    @pytest.mark.asyncio
    async def test_report(self, report_text):
        """Test the report bundles each engine's result."""
        engine = create_document_intelligence_engine()

        report = await engine.run_full_pipeline(report_text)

        assert len(report.analysis.structure.sections) == 5
        assert [c.type for c in report.consistency_checks][0] == ConsistencyType.TERMINOLOGY
        assert len(report.consistency_checks) == 6
        assert set(report.tone.section_tones) == {s.id for s in report.analysis.structure.sections}
        assert 0.0 <= report.structural_optimization.structural_quality_score <= 1.0
        assert report.summary.recommendations == [
            "Retire the legacy cluster",
            "Expand hourly sampling to search services",
            "Review capacity every quarter",
        ]

    def test_factory_builds_orchestrator(self):
        """Test the factory returns a ready orchestrator."""
        engine = create_document_intelligence_engine()

        assert isinstance(engine, DocumentAnalysisEngine)
        assert engine.tone_engine.scorer is engine.scorer
