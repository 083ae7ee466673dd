"""
Tests for the structural optimization engine.
"""
import pytest
from pydantic import ValidationError

from docintel.domain.schemas.analysis import (
    FlowIssueType,
    Impact,
    OptimizationType,
    StructuralFlowAnalysis,
    StructuralRecommendationType,
)
from docintel.domain.schemas.options import StructuralOptimizationOptions
from docintel.services.intelligence.extractor import document_offset
from docintel.services.intelligence.structure import StructuralOptimizationEngine


@pytest.fixture
def engine():
    return StructuralOptimizationEngine()


def paragraph(label, count=15):
    return " ".join(f"{label}{i}" for i in range(count)) + "."


class TestMergePass:
    """Test merging adjacent short sections."""

    def test_short_sections_merge(self, engine, make_section):
        """Test two short sections become one."""
        sections = [
            make_section("section-1", "A", "a"),
            make_section("section-2", "B", "b", start_index=1),
        ]

        result = engine.optimize_structure(sections)

        assert len(result.optimized_sections) == 1
        merged = result.optimized_sections[0]
        assert merged.id == "section-1-merged-section-2"
        assert merged.title == "A / B"
        assert merged.content == "a\n\nb"
        assert merged.start_index == 0
        assert merged.end_index == 2
        assert [o.type for o in result.applied_optimizations] == [OptimizationType.MERGE]

    def test_merges_chain(self, engine, make_section):
        """Test a merged section keeps absorbing short neighbours."""
        sections = [
            make_section("section-1", "A", "a"),
            make_section("section-2", "B", "b", start_index=1),
            make_section("section-3", "C", "c", start_index=2),
        ]

        result = engine.optimize_structure(sections)

        assert len(result.optimized_sections) == 1
        merged = result.optimized_sections[0]
        assert merged.id == "section-1-merged-section-2-merged-section-3"
        assert merged.title == "A / B / C"
        assert merged.content == "a\n\nb\n\nc"
        assert merged.end_index == 3
        assert [o.type for o in result.applied_optimizations] == [OptimizationType.MERGE] * 2

    def test_input_is_not_modified(self, engine, make_section):
        """Test the caller's list keeps its sections."""
        sections = [
            make_section("section-1", "A", "a"),
            make_section("section-2", "B", "b", start_index=1),
        ]

        engine.optimize_structure(sections)

        assert [s.id for s in sections] == ["section-1", "section-2"]

    def test_merging_disabled(self, engine, make_section):
        """Test no merge when the pass is switched off."""
        sections = [
            make_section("section-1", "A", "a"),
            make_section("section-2", "B", "b", start_index=1),
        ]

        result = engine.optimize_structure(sections, StructuralOptimizationOptions(allow_merging=False))

        assert len(result.optimized_sections) == 2
        assert result.applied_optimizations == []


class TestSplitPass:
    """Test splitting long sections at paragraph breaks."""

    @pytest.fixture
    def long_section(self, make_section):
        content = "\n\n".join(paragraph(label) for label in ("alpha", "beta", "gamma"))
        return make_section("section-1", "Body", content, start_index=10)

    def test_split_into_paragraphs(self, engine, long_section):
        """Test each paragraph becomes a part with a contiguous span."""
        options = StructuralOptimizationOptions(target_section_length=10)

        result = engine.optimize_structure([long_section], options)

        parts = result.optimized_sections
        assert [p.id for p in parts] == [f"section-1-part-{n}" for n in (1, 2, 3)]
        assert [p.title for p in parts] == [f"Body (Part {n})" for n in (1, 2, 3)]
        assert parts[0].start_index == long_section.start_index
        assert parts[-1].end_index == long_section.end_index
        for current, following in zip(parts, parts[1:]):
            assert current.end_index == following.start_index
        assert sum(p.word_count for p in parts) == long_section.word_count
        assert result.applied_optimizations[0].description == 'Split long section "Body" into 3 parts'

    def test_short_section_is_kept(self, engine, long_section):
        """Test sections within twice the target length stay whole."""
        result = engine.optimize_structure([long_section], StructuralOptimizationOptions(target_section_length=30))

        assert result.optimized_sections == [long_section]

    @pytest.mark.parametrize("separator", ["\n\n", "\n"])
    def test_split_keeps_preamble_offsets(self, engine, extractor, separator):
        """Test parts map their content back onto the document around the heading line."""
        text = paragraph("alpha") + separator + "# Body\n" + "\n\n".join(
            paragraph(label) for label in ("beta", "gamma")
        )
        sections, _ = extractor.extract(text)

        result = engine.optimize_structure(sections, StructuralOptimizationOptions(target_section_length=5))

        parts = result.optimized_sections
        assert len(parts) > 1
        for part in parts:
            for index, char in enumerate(part.content):
                assert text[document_offset(part, index)] == char


class TestReorderPass:
    """Test canonical reordering."""

    @pytest.fixture
    def sections(self, make_section):
        return [
            make_section("section-1", "Conclusion", "Closing words."),
            make_section("section-2", "Introduction", "Opening words.", start_index=14),
        ]

    def test_canonical_order(self, engine, sections):
        """Test the introduction moves ahead of the conclusion."""
        options = StructuralOptimizationOptions(allow_merging=False)

        result = engine.optimize_structure(sections, options)

        assert [s.title for s in result.optimized_sections] == ["Introduction", "Conclusion"]
        assert [o.type for o in result.applied_optimizations] == [OptimizationType.REORDER]

    def test_logical_flow_not_enforced(self, engine, sections):
        """Test no reordering without logical flow enforcement."""
        options = StructuralOptimizationOptions(allow_merging=False, enforce_logical_flow=False)

        result = engine.optimize_structure(sections, options)

        assert [s.title for s in result.optimized_sections] == ["Conclusion", "Introduction"]
        assert result.applied_optimizations == []


class TestFlowAnalysis:
    """Test flow scoring and issue detection."""

    def test_logical_progression(self, engine, make_section):
        """Test a known title progression scores fully."""
        sections = [
            make_section("section-1", "Introduction", "Opening words."),
            make_section("section-2", "Background", "Earlier work.", start_index=14),
        ]

        flow = engine.analyze_flow(sections)

        assert flow.logical_progression_score == 1.0
        assert list(flow.transition_quality) == ["section-1-section-2"]

    def test_flow_score_value(self, engine, make_section):
        """Test the flow score blends transitions and progression minus issue penalties."""
        sections = [
            make_section("section-1", "Introduction", "Alpha beta."),
            make_section("section-2", "Background", "Gamma delta.", start_index=11),
        ]

        flow = engine.analyze_flow(sections)

        # No shared terms, full logical connection, no transitional phrases
        assert flow.transition_quality["section-1-section-2"] == pytest.approx(0.4)
        abrupt = [i for i in flow.flow_issues if i.type == FlowIssueType.ABRUPT_TRANSITION]
        assert [i.severity for i in abrupt] == [Impact.MEDIUM]
        # Penalties: medium transition 0.15 plus high logical gap 0.3
        assert flow.flow_score == pytest.approx((0.4 * 0.6 + 1.0 * 0.4) * (1 - 0.45))

    def test_weak_transition_is_high_severity(self, engine, make_section):
        """Test transitions below 0.3 are high severity and penalties cap at 0.5."""
        sections = [
            make_section("section-1", "Notes", "Alpha beta."),
            make_section("section-2", "Misc", "Alpha gamma.", start_index=11),
        ]

        flow = engine.analyze_flow(sections)

        score = flow.transition_quality["section-1-section-2"]
        assert score == pytest.approx(0.4 / 3)
        abrupt = [i for i in flow.flow_issues if i.type == FlowIssueType.ABRUPT_TRANSITION]
        assert [i.severity for i in abrupt] == [Impact.HIGH]
        assert flow.logical_progression_score == 0.0
        assert flow.flow_score == pytest.approx(score * 0.6 * 0.5)

    @pytest.mark.parametrize(
        "first_content, second_content, severity",
        [
            ("alpha bravo charlie delta echo.", "alpha bravo charlie delta echo.", Impact.HIGH),
            ("alpha bravo charlie delta.", "alpha bravo charlie delta echo.", Impact.MEDIUM),
            (
                "alpha bravo charlie delta golf hotel india kilo lima.",
                "alpha bravo charlie delta golf hotel india mike.",
                None,
            ),
        ],
    )
    def test_redundant_content(self, engine, make_section, first_content, second_content, severity):
        """Test similarity above 0.7 is redundant and above 0.8 is high severity."""
        sections = [
            make_section("section-1", "Notes", first_content),
            make_section("section-2", "Misc", second_content, start_index=len(first_content)),
        ]

        flow = engine.analyze_flow(sections)

        redundant = [i for i in flow.flow_issues if i.type == FlowIssueType.REDUNDANT_CONTENT]
        assert [i.severity for i in redundant] == ([severity] if severity else [])

    def test_inconsistent_numbering(self, engine, make_section):
        """Test mixing numbered and plain headings is a hierarchy issue."""
        sections = [
            make_section("section-1", "1. Introduction", "Opening words."),
            make_section("section-2", "Results", "Findings.", start_index=14),
        ]

        flow = engine.analyze_flow(sections)

        issue_types = [issue.type for issue in flow.flow_issues]
        assert FlowIssueType.POOR_HIERARCHY in issue_types

    def test_missing_expected_sections(self, engine, make_section):
        """Test absent standard sections are a logical gap."""
        flow = engine.analyze_flow([make_section("section-1", "Notes", "Some notes.")])

        gaps = [issue for issue in flow.flow_issues if issue.type == FlowIssueType.LOGICAL_GAP]
        assert len(gaps) == 1
        assert gaps[0].description == (
            "Missing expected sections: introduction, methodology, results, discussion, conclusion"
        )
        assert gaps[0].severity == Impact.HIGH

    def test_complete_outline_has_no_gap(self, engine, make_section):
        """Test the standard outline has no logical gap."""
        titles = ["Introduction", "Methodology", "Results", "Discussion", "Conclusion"]
        sections = [make_section(f"section-{i}", title, f"Text {i}.") for i, title in enumerate(titles)]

        flow = engine.analyze_flow(sections)

        assert all(issue.type != FlowIssueType.LOGICAL_GAP for issue in flow.flow_issues)


class TestStructuralQuality:
    """Test quality scores and recommendations."""

    def test_empty_document(self, engine):
        """Test an empty section list has full quality."""
        result = engine.optimize_structure([])

        assert result.optimized_sections == []
        assert result.structural_quality_score == 1.0
        assert result.flow_improvement_score == 0.0

    def test_quality_range(self, engine, report_sections):
        """Test quality and improvement scores stay in [0, 1]."""
        result = engine.optimize_structure(report_sections)

        assert 0.0 <= result.structural_quality_score <= 1.0
        assert 0.0 <= result.flow_improvement_score <= 1.0

    def test_quality_value(self, engine, make_section):
        """Test quality weighs length balance, hierarchy and flow."""
        sections = [
            make_section("section-1", "A", "one", level=1),
            make_section("section-2", "B", "two three four", start_index=3, level=3),
        ]
        flow = StructuralFlowAnalysis(
            flow_score=0.5, flow_issues=[], transition_quality={}, logical_progression_score=1.0
        )

        quality = engine.calculate_structural_quality(sections, flow)

        # Word counts 1 and 3 give a variation coefficient of 0.5; the level skip costs 0.1
        assert quality == pytest.approx(0.5 * 0.3 + 0.9 * 0.3 + 0.5 * 0.4)

    def test_hierarchy_progression_fraction(self, engine, make_section):
        """Test hierarchy scores the share of non-decreasing level steps."""
        sections = [
            make_section("section-1", "A", "x", level=2),
            make_section("section-2", "B", "y", start_index=1, level=1),
            make_section("section-3", "C", "z", start_index=2, level=2),
        ]
        flow = StructuralFlowAnalysis(
            flow_score=0.0, flow_issues=[], transition_quality={}, logical_progression_score=0.0
        )

        quality = engine.calculate_structural_quality(sections, flow)

        assert quality == pytest.approx(1.0 * 0.3 + 0.5 * 0.3)

    def test_flow_improvement_value(self, engine, make_section):
        """Test improvement is the gained share of the remaining quality headroom."""
        sections = [
            make_section("section-1", "Background", "Closing words."),
            make_section("section-2", "Introduction", "Opening words.", start_index=14),
        ]

        result = engine.optimize_structure(sections, StructuralOptimizationOptions(allow_merging=False))

        # Before: transition 0.4/3 with capped penalties; after: 0.4/3 + 0.4 with one gap penalty
        original = 0.3 + 0.3 + 0.4 * ((0.4 / 3) * 0.6 * 0.5)
        optimized = 0.3 + 0.3 + 0.4 * (((0.4 / 3 + 0.4) * 0.6 + 0.4) * 0.7)
        assert [s.title for s in result.optimized_sections] == ["Introduction", "Background"]
        assert result.structural_quality_score == pytest.approx(optimized)
        assert result.flow_improvement_score == pytest.approx((optimized - original) / (1 - original))
        assert result.flow_improvement_score > 0

    def test_minimum_sections_recommendation(self, engine, make_section):
        """Test too few sections produce a split recommendation."""
        result = engine.optimize_structure([make_section("section-1", "Notes", "Some notes.")])

        descriptions = [
            r.description for r in result.recommendations
            if r.type == StructuralRecommendationType.SPLIT_SECTION
        ]
        assert "Document has only 1 sections, below minimum of 3" in descriptions

    def test_invalid_target_length(self):
        """Test option ranges are validated."""
        with pytest.raises(ValidationError):
            StructuralOptimizationOptions(target_section_length=0)
