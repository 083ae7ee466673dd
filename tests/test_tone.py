"""
Tests for the tone control engine.
"""
import itertools

import pytest

from docintel.domain.schemas.analysis import ToneRecommendationType
from docintel.domain.schemas.document import Appropriateness, ToneType
from docintel.domain.schemas.options import ToneControlOptions
from docintel.services.intelligence.tone import ToneControlEngine


@pytest.fixture
def engine():
    return ToneControlEngine()


FORMAL_TEXT = "Therefore the plan holds. However, moreover, we proceed."
INFORMAL_TEXT = "It was really cool stuff, just awesome."
NEUTRAL_TEXT = "The table has four legs."


class TestSectionTone:
    """Test single-section tone classification."""

    @pytest.mark.parametrize("content,expected", [
        (FORMAL_TEXT, ToneType.FORMAL),
        (INFORMAL_TEXT, ToneType.INFORMAL),
        (NEUTRAL_TEXT, ToneType.NEUTRAL),
        ("You should recommend this option.", ToneType.PERSUASIVE),
        ("Therefore the research evidence holds. However, we proceed.", ToneType.ACADEMIC),
    ])
    def test_primary_tone(self, engine, make_section, content, expected):
        """Test the primary tone rules."""
        tone = engine.analyze_section_tone(make_section("s1", "Body", content))

        assert tone.primary_tone == expected
        assert tone.consistency_score == 0.8

    def test_secondary_tones(self, engine, make_section):
        """Test secondary tones come from indicator words."""
        tone = engine.analyze_section_tone(make_section("s1", "Body", FORMAL_TEXT))

        assert "formal" in tone.secondary_tones
        assert "critical" in tone.secondary_tones

    @pytest.mark.parametrize("title,content,expected", [
        ("Summary", INFORMAL_TEXT, Appropriateness.POOR),
        ("Summary", FORMAL_TEXT, Appropriateness.EXCELLENT),
        ("Results", INFORMAL_TEXT, Appropriateness.INAPPROPRIATE),
        ("Background", INFORMAL_TEXT, Appropriateness.ADEQUATE),
        ("Misc", INFORMAL_TEXT, Appropriateness.ADEQUATE),
    ])
    def test_appropriateness(self, engine, make_section, title, content, expected):
        """Test appropriateness follows the section title."""
        tone = engine.analyze_section_tone(make_section("s1", title, content))

        assert tone.appropriateness == expected


class TestShiftMagnitude:
    """Test tone shift magnitudes."""

    def test_symmetry(self, engine):
        """Test magnitude(a, b) equals magnitude(b, a)."""
        for first, second in itertools.product(ToneType, repeat=2):
            assert engine.shift_magnitude(first, second) == engine.shift_magnitude(second, first)

    def test_extremes(self, engine):
        """Test formal and informal are the furthest apart."""
        assert engine.shift_magnitude(ToneType.FORMAL, ToneType.INFORMAL) == 1.0
        assert engine.shift_magnitude(ToneType.FORMAL, ToneType.FORMAL) == 0.0

    def test_unranked_tones_count_as_neutral(self, engine):
        """Test tones off the formality scale sit at neutral."""
        assert engine.shift_magnitude(ToneType.DESCRIPTIVE, ToneType.NEUTRAL) == 0.0


class TestToneAnalysis:
    """Test document-level tone analysis."""

    def test_inappropriate_shift(self, engine, make_section):
        """Test a formal-to-informal shift is flagged."""
        sections = [
            make_section("s1", "Introduction", FORMAL_TEXT),
            make_section("s2", "Discussion", INFORMAL_TEXT, start_index=len(FORMAL_TEXT)),
        ]

        result = engine.analyze_tone(sections)

        assert len(result.tone_shifts) == 1
        shift = result.tone_shifts[0]
        assert shift.from_tone == ToneType.FORMAL
        assert shift.to_tone == ToneType.INFORMAL
        assert not shift.is_appropriate
        assert shift.magnitude == 1.0
        assert shift.explanation.startswith("Inappropriate tone shift from formal to informal")

        consistency = [
            r for r in result.recommendations
            if r.type == ToneRecommendationType.CONSISTENCY_IMPROVEMENT
        ]
        assert consistency[0].section_id == "s1"

    def test_shift_into_conclusion_is_appropriate(self, engine, make_section):
        """Test becoming formal in a conclusion is accepted."""
        sections = [
            make_section("s1", "Notes", INFORMAL_TEXT),
            make_section("s2", "Conclusion", FORMAL_TEXT, start_index=len(INFORMAL_TEXT)),
        ]

        result = engine.analyze_tone(sections)

        assert result.tone_shifts[0].is_appropriate

    def test_consistent_document(self, engine, make_section):
        """Test a single-tone document has no shifts."""
        sections = [
            make_section("s1", "Part one", NEUTRAL_TEXT),
            make_section("s2", "Part two", NEUTRAL_TEXT, start_index=len(NEUTRAL_TEXT)),
        ]

        result = engine.analyze_tone(sections)

        assert result.tone_shifts == []
        assert result.overall_tone.primary_tone == ToneType.NEUTRAL
        assert result.consistency_score == pytest.approx(0.86)
        assert result.target_match_score == pytest.approx(0.91)
        assert result.recommendations == []

    def test_target_mismatch(self, engine, make_section):
        """Test a recommendation when the document misses the target tone."""
        sections = [make_section("s1", "Part one", NEUTRAL_TEXT)]

        result = engine.analyze_tone(sections, ToneControlOptions(target_tone=ToneType.FORMAL))

        assert result.target_match_score == pytest.approx(0.21)
        assert result.recommendations[-1].description == (
            "Overall document tone (neutral) does not match target tone (formal)"
        )

    def test_too_many_shifts(self, engine, make_section):
        """Test exceeding the shift budget is reported."""
        texts = [FORMAL_TEXT, NEUTRAL_TEXT] * 3
        sections = [make_section(f"s{i}", f"Part {i}", text) for i, text in enumerate(texts)]

        result = engine.analyze_tone(sections, ToneControlOptions(max_tone_shifts=2))

        assert len(result.tone_shifts) == 5
        assert any("exceeding maximum of 2" in r.description for r in result.recommendations)

    def test_empty_document(self, engine):
        """Test no sections give a neutral, fully consistent result."""
        result = engine.analyze_tone([])

        assert result.overall_tone.primary_tone == ToneType.NEUTRAL
        assert result.consistency_score == 1.0
        assert result.tone_shifts == []


class TestToneAdjustment:
    """Test tone substitution."""

    def test_formal_to_informal(self, engine, make_section):
        """Test formal connectives are replaced."""
        section = make_section("s1", "Body", "Therefore we stop.")

        adjusted = engine.adjust_tone([section], ToneControlOptions(target_tone=ToneType.INFORMAL))

        assert adjusted[0].content == "So we stop."
        assert adjusted[0].tone is not None
        assert section.content == "Therefore we stop."

    def test_matching_sections_are_untouched(self, engine, make_section):
        """Test sections already at the target are returned as they are."""
        section = make_section("s1", "Body", NEUTRAL_TEXT)

        adjusted = engine.adjust_tone([section], ToneControlOptions(target_tone=ToneType.NEUTRAL))

        assert adjusted[0] is section
