"""
Tone control across document sections.

Classifies each section's register, aggregates a document tone, detects
shifts between adjacent sections and recommends adjustments towards a
target tone. ``adjust_tone`` applies the fixed word-substitution tables
for the supported tone transitions.
"""

from collections import Counter
from typing import Dict, List, Optional

import structlog

from docintel.domain.schemas.analysis import (
    ChangeImpact,
    Impact,
    ToneAnalysisResult,
    ToneRecommendation,
    ToneRecommendationType,
    ToneShift,
)
from docintel.domain.schemas.document import (
    Appropriateness,
    EmotionalTone,
    Section,
    ToneAnalysis,
    ToneType,
)
from docintel.domain.schemas.options import ToneControlOptions
from .lexicon import DEFAULT_LEXICON, Lexicon
from .readability import ReadabilityScorer
from .text import any_term, replace_term

logger = structlog.get_logger(__name__)

SECTION_CONSISTENCY = 0.8
MAX_ORDINAL_DISTANCE = 5
MINOR_SHIFT_MAGNITUDE = 0.3
SHIFT_PENALTY_WEIGHT = 0.2
FORMALITY_MATCH_PLACEHOLDER = 0.7

APPROPRIATE_LEVELS = (Appropriateness.EXCELLENT, Appropriateness.GOOD, Appropriateness.ADEQUATE)

# Lower bound of the appropriate-section ratio for each overall rating
OVERALL_APPROPRIATENESS_BANDS = (
    (0.9, Appropriateness.EXCELLENT),
    (0.7, Appropriateness.GOOD),
    (0.5, Appropriateness.ADEQUATE),
    (0.3, Appropriateness.POOR),
)


class ToneControlEngine:
    """
    Analyzes and adjusts tone across document sections.

    Section tones are derived from formality and emotional scores plus
    marker words, then combined into a document tone, shift list and
    prioritized recommendations.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None, scorer: Optional[ReadabilityScorer] = None):
        self.logger = structlog.get_logger(__name__)
        self.lexicon = lexicon or DEFAULT_LEXICON
        self.scorer = scorer or ReadabilityScorer(self.lexicon)
        self._initialize_expectations()

    def _initialize_expectations(self) -> None:
        """Expected tones for section types, keyed by title keywords."""
        self.formal_tones = {ToneType.FORMAL, ToneType.NEUTRAL, ToneType.ACADEMIC}
        self.analytical_tones = {ToneType.ACADEMIC, ToneType.FORMAL}
        self.casual_tones = {ToneType.INFORMAL, ToneType.CONVERSATIONAL}

    def analyze_tone(
        self,
        sections: List[Section],
        options: Optional[ToneControlOptions] = None,
    ) -> ToneAnalysisResult:
        """
        Analyze tone across document sections.

        Args:
            sections: Sections in document order
            options: Tone targets; defaults apply when omitted

        Returns:
            Section tones, overall tone, shifts and recommendations
        """
        options = options or ToneControlOptions()

        section_tones: Dict[str, ToneAnalysis] = {
            section.id: self.analyze_section_tone(section) for section in sections
        }
        overall_tone = self._calculate_overall_tone(list(section_tones.values()))
        tone_shifts = self._detect_tone_shifts(sections, section_tones)
        consistency_score = self._calculate_consistency_score(section_tones, tone_shifts)
        recommendations = self._generate_recommendations(
            sections, section_tones, overall_tone, tone_shifts, options
        )

        tone_match = 1.0 if overall_tone.primary_tone == options.target_tone else 0.0
        target_match_score = tone_match * 0.7 + FORMALITY_MATCH_PLACEHOLDER * 0.3

        self.logger.debug(
            "Tone analysis completed",
            section_count=len(sections),
            overall_tone=overall_tone.primary_tone.value,
            shift_count=len(tone_shifts),
            recommendation_count=len(recommendations),
        )

        return ToneAnalysisResult(
            overall_tone=overall_tone,
            section_tones=section_tones,
            consistency_score=consistency_score,
            tone_shifts=tone_shifts,
            recommendations=recommendations,
            target_match_score=target_match_score,
        )

    def adjust_tone(self, sections: List[Section], options: ToneControlOptions) -> List[Section]:
        """
        Rewrite sections whose tone differs from the target.

        Returns new sections; adjusted ones carry their re-analysed tone.
        """
        adjusted: List[Section] = []
        for section in sections:
            current = self.analyze_section_tone(section)
            if current.primary_tone == options.target_tone:
                adjusted.append(section)
                continue

            content = self._adjust_content(section.content, current.primary_tone, options.target_tone)
            updated = section.model_copy(update={"content": content})
            adjusted.append(updated.model_copy(update={"tone": self.analyze_section_tone(updated)}))

        return adjusted

    def analyze_section_tone(self, section: Section) -> ToneAnalysis:
        """Tone of a single section."""
        content = section.content
        formality = self.scorer.calculate_formality(content)
        emotional_tone = self.scorer.analyze_emotional_tone(content)
        primary_tone = self._determine_primary_tone(content, formality, emotional_tone)

        return ToneAnalysis(
            primary_tone=primary_tone,
            secondary_tones=self._identify_secondary_tones(content),
            consistency_score=SECTION_CONSISTENCY,
            appropriateness=self._determine_appropriateness(primary_tone, section),
            emotional_tone=emotional_tone,
        )

    def shift_magnitude(self, from_tone: ToneType, to_tone: ToneType) -> float:
        """Distance between two tones on the formality scale, in [0, 1]."""
        ordinals = self.lexicon.tone_ordinals
        neutral = ordinals[ToneType.NEUTRAL.value]
        from_value = ordinals.get(ToneType(from_tone).value, neutral)
        to_value = ordinals.get(ToneType(to_tone).value, neutral)
        return abs(from_value - to_value) / MAX_ORDINAL_DISTANCE

    def _determine_primary_tone(
        self,
        text: str,
        formality: float,
        emotional_tone: Optional[EmotionalTone],
    ) -> ToneType:
        if any_term(text, self.lexicon.academic_markers) and formality > 7:
            return ToneType.ACADEMIC
        if any_term(text, self.lexicon.persuasive_markers):
            return ToneType.PERSUASIVE
        if formality > 7:
            return ToneType.FORMAL
        if formality < 3:
            return ToneType.INFORMAL
        if 5 <= formality <= 7 and any_term(text, self.lexicon.conversational_markers):
            return ToneType.CONVERSATIONAL
        return ToneType.NEUTRAL

    def _identify_secondary_tones(self, text: str) -> List[str]:
        return [
            tone for tone, indicators in self.lexicon.secondary_tone_indicators
            if any_term(text, indicators)
        ]

    def _determine_appropriateness(self, tone: ToneType, section: Section) -> Appropriateness:
        title = section.title.lower()

        if any(keyword in title for keyword in self.lexicon.summary_expected_titles):
            if tone in self.formal_tones:
                return Appropriateness.EXCELLENT
            if tone in self.casual_tones:
                return Appropriateness.POOR

        if any(keyword in title for keyword in self.lexicon.open_titles):
            return Appropriateness.ADEQUATE

        if any(keyword in title for keyword in self.lexicon.analytical_titles):
            if tone in self.analytical_tones:
                return Appropriateness.EXCELLENT
            if tone in self.casual_tones:
                return Appropriateness.INAPPROPRIATE

        return Appropriateness.ADEQUATE

    def _calculate_overall_tone(self, section_tones: List[ToneAnalysis]) -> ToneAnalysis:
        if not section_tones:
            return ToneAnalysis(
                primary_tone=ToneType.NEUTRAL,
                secondary_tones=[],
                consistency_score=1.0,
                appropriateness=Appropriateness.ADEQUATE,
            )

        # most_common keeps first-seen order among equal counts
        primary_tone = Counter(tone.primary_tone for tone in section_tones).most_common(1)[0][0]

        secondary_tones = list(dict.fromkeys(
            secondary for tone in section_tones for secondary in tone.secondary_tones
        ))
        consistency = sum(tone.consistency_score for tone in section_tones) / len(section_tones)

        appropriate = sum(1 for tone in section_tones if tone.appropriateness in APPROPRIATE_LEVELS)
        ratio = appropriate / len(section_tones)
        appropriateness = next(
            (level for lower_bound, level in OVERALL_APPROPRIATENESS_BANDS if ratio >= lower_bound),
            Appropriateness.INAPPROPRIATE,
        )

        return ToneAnalysis(
            primary_tone=primary_tone,
            secondary_tones=secondary_tones,
            consistency_score=consistency,
            appropriateness=appropriateness,
        )

    def _detect_tone_shifts(
        self,
        sections: List[Section],
        section_tones: Dict[str, ToneAnalysis],
    ) -> List[ToneShift]:
        shifts: List[ToneShift] = []
        for current, following in zip(sections, sections[1:]):
            from_tone = section_tones[current.id].primary_tone
            to_tone = section_tones[following.id].primary_tone
            if from_tone == to_tone:
                continue

            magnitude = self.shift_magnitude(from_tone, to_tone)
            is_appropriate = self._is_shift_appropriate(following, from_tone, to_tone)
            shifts.append(
                ToneShift(
                    from_section_id=current.id,
                    to_section_id=following.id,
                    from_tone=from_tone,
                    to_tone=to_tone,
                    magnitude=magnitude,
                    is_appropriate=is_appropriate,
                    explanation=self._explain_shift(
                        current, following, from_tone, to_tone, magnitude, is_appropriate
                    ),
                )
            )
        return shifts

    @staticmethod
    def _is_shift_appropriate(
        to_section: Section,
        from_tone: ToneType,
        to_tone: ToneType,
    ) -> bool:
        to_title = to_section.title.lower()

        if from_tone == ToneType.FORMAL and to_tone == ToneType.INFORMAL:
            return False
        if from_tone == ToneType.INFORMAL and to_tone == ToneType.FORMAL:
            return "conclusion" in to_title or "summary" in to_title
        if to_tone == ToneType.ACADEMIC and "analysis" in to_title:
            return True
        # Remaining shifts, minor or not, are accepted
        return True

    @staticmethod
    def _explain_shift(
        from_section: Section,
        to_section: Section,
        from_tone: ToneType,
        to_tone: ToneType,
        magnitude: float,
        is_appropriate: bool,
    ) -> str:
        between = f'between "{from_section.title}" and "{to_section.title}"'
        if not is_appropriate:
            return (
                f"Inappropriate tone shift from {from_tone.value} to {to_tone.value} {between}. "
                "Consider adjusting tone for consistency."
            )
        if magnitude < MINOR_SHIFT_MAGNITUDE:
            return (
                f"Minor tone shift from {from_tone.value} to {to_tone.value} {between} "
                "is natural and appropriate."
            )
        return (
            f"Significant tone shift from {from_tone.value} to {to_tone.value} {between} "
            "is appropriate for this document structure."
        )

    @staticmethod
    def _calculate_consistency_score(
        section_tones: Dict[str, ToneAnalysis],
        tone_shifts: List[ToneShift],
    ) -> float:
        if not section_tones:
            return 1.0

        average = sum(tone.consistency_score for tone in section_tones.values()) / len(section_tones)
        penalty = sum(shift.magnitude * SHIFT_PENALTY_WEIGHT for shift in tone_shifts if not shift.is_appropriate)
        score = average * 0.7 + (1 - min(1.0, penalty)) * 0.3
        return max(0.0, min(1.0, score))

    def _generate_recommendations(
        self,
        sections: List[Section],
        section_tones: Dict[str, ToneAnalysis],
        overall_tone: ToneAnalysis,
        tone_shifts: List[ToneShift],
        options: ToneControlOptions,
    ) -> List[ToneRecommendation]:
        titles = {section.id: section.title for section in sections}
        recommendations: List[ToneRecommendation] = []

        for shift in tone_shifts:
            if shift.is_appropriate:
                continue
            recommendations.append(
                ToneRecommendation(
                    type=ToneRecommendationType.CONSISTENCY_IMPROVEMENT,
                    section_id=shift.from_section_id,
                    description=f"Inappropriate tone shift from {shift.from_tone.value} to {shift.to_tone.value}",
                    suggested_action=(
                        f'Adjust tone in section "{titles[shift.from_section_id]}" '
                        "to better match the following section"
                    ),
                    priority=Impact.MEDIUM,
                    expected_impact=ChangeImpact.MODERATE,
                )
            )

        for section_id, tone in section_tones.items():
            if tone.appropriateness not in (Appropriateness.POOR, Appropriateness.INAPPROPRIATE):
                continue
            recommendations.append(
                ToneRecommendation(
                    type=ToneRecommendationType.TONE_ADJUSTMENT,
                    section_id=section_id,
                    description=(
                        f'Tone "{tone.primary_tone.value}" is {tone.appropriateness.value} '
                        f'for section "{titles[section_id]}"'
                    ),
                    suggested_action="Adjust tone to be more appropriate for this section type",
                    priority=Impact.HIGH,
                    expected_impact=ChangeImpact.MAJOR,
                )
            )

        if overall_tone.primary_tone != options.target_tone:
            recommendations.append(
                ToneRecommendation(
                    type=ToneRecommendationType.TONE_ADJUSTMENT,
                    description=(
                        f"Overall document tone ({overall_tone.primary_tone.value}) does not match "
                        f"target tone ({options.target_tone.value})"
                    ),
                    suggested_action=f"Adjust document tone to match target tone {options.target_tone.value}",
                    priority=Impact.HIGH if options.enforce_consistency else Impact.MEDIUM,
                    expected_impact=ChangeImpact.MAJOR,
                )
            )

        if len(tone_shifts) > options.max_tone_shifts and not options.allow_mixed_tones:
            recommendations.append(
                ToneRecommendation(
                    type=ToneRecommendationType.CONSISTENCY_IMPROVEMENT,
                    description=(
                        f"Document has {len(tone_shifts)} tone shifts, "
                        f"exceeding maximum of {options.max_tone_shifts}"
                    ),
                    suggested_action="Reduce number of tone shifts for better consistency",
                    priority=Impact.MEDIUM,
                    expected_impact=ChangeImpact.MODERATE,
                )
            )

        return recommendations

    def _adjust_content(self, content: str, current: ToneType, target: ToneType) -> str:
        substitutions = self.lexicon.tone_adjustments.get((current.value, ToneType(target).value), ())
        for find, replace in substitutions:
            content, _ = replace_term(content, find, replace)
        return content
