"""
Structural optimization of section lists.

Scores the flow between adjacent sections and the overall structural
quality, then improves the structure with three optional passes applied
in a fixed order:
- Merge adjacent short sections
- Split long sections at paragraph boundaries
- Reorder sections into the canonical document order

The caller's section list is never modified; every pass returns a new list.
"""

import re
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np
import structlog

from docintel.domain.schemas.analysis import (
    AppliedOptimization,
    ChangeImpact,
    FlowIssue,
    FlowIssueType,
    Impact,
    OptimizationType,
    StructuralFlowAnalysis,
    StructuralOptimizationResult,
    StructuralRecommendation,
    StructuralRecommendationType,
)
from docintel.domain.schemas.document import Section
from docintel.domain.schemas.options import StructuralOptimizationOptions
from .extractor import document_offset
from .lexicon import DEFAULT_LEXICON, Lexicon
from .text import PARAGRAPH_BREAK, contains_term, jaccard, unique_terms

logger = structlog.get_logger(__name__)

PassResult = Tuple[List[Section], List[AppliedOptimization]]

THEMATIC_TERM_LIMIT = 50
REDUNDANCY_TERM_LIMIT = 10
TRANSITION_WINDOW = 200
SHORT_SECTION_WORDS = 100
MIN_RECOMMENDED_WORDS = 50
UNMATCHED_BUCKET = 100

SEVERITY_PENALTIES = {Impact.HIGH: 0.3, Impact.MEDIUM: 0.15, Impact.LOW: 0.05}
NUMBERED_TITLE = re.compile(r"^(\d+\.|[A-Z]\.)")


class StructuralOptimizationEngine:
    """
    Analyzes section flow and applies merge, split and reorder passes.

    Each pass reads the previous pass's output. Passes are listed in an
    ordered dispatch table together with the option flag that enables them.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.logger = structlog.get_logger(__name__)
        self.lexicon = lexicon or DEFAULT_LEXICON
        self._passes: Tuple[Tuple[OptimizationType, str, Callable[..., PassResult]], ...] = (
            (OptimizationType.MERGE, "allow_merging", self._merge_pass),
            (OptimizationType.SPLIT, "allow_splitting", self._split_pass),
            (OptimizationType.REORDER, "allow_reordering", self._reorder_pass),
        )

    def optimize_structure(
        self,
        sections: List[Section],
        options: Optional[StructuralOptimizationOptions] = None,
    ) -> StructuralOptimizationResult:
        """
        Optimize document structure.

        Args:
            sections: Sections in document order
            options: Pass toggles and targets; defaults apply when omitted

        Returns:
            Optimized sections, the applied optimizations, quality scores and
            recommendations for the optimized structure
        """
        options = options or StructuralOptimizationOptions()

        original_quality = self.calculate_structural_quality(sections, self.analyze_flow(sections))

        optimized = list(sections)
        applied: List[AppliedOptimization] = []
        for optimization_type, flag, run_pass in self._passes:
            if not getattr(options, flag):
                continue
            optimized, pass_optimizations = run_pass(optimized, options)
            applied.extend(pass_optimizations)
            self.logger.debug(
                "Optimization pass completed",
                optimization=optimization_type.value,
                applied=len(pass_optimizations),
                section_count=len(optimized),
            )

        optimized_flow = self.analyze_flow(optimized)
        optimized_quality = self.calculate_structural_quality(optimized, optimized_flow)

        return StructuralOptimizationResult(
            optimized_sections=optimized,
            applied_optimizations=applied,
            structural_quality_score=optimized_quality,
            flow_improvement_score=self._flow_improvement(original_quality, optimized_quality),
            recommendations=self._generate_recommendations(optimized, optimized_flow, options),
        )

    def analyze_flow(self, sections: List[Section]) -> StructuralFlowAnalysis:
        """Score transitions between adjacent sections and collect flow issues."""
        flow_issues: List[FlowIssue] = []
        transition_quality: Dict[str, float] = {}
        logical_scores: List[float] = []

        for current, following in zip(sections, sections[1:]):
            logical = self._logical_connection(current, following)
            score = (
                self._thematic_continuity(current, following) * 0.4
                + logical * 0.4
                + self._transitional_phrases(current, following) * 0.2
            )
            transition_quality[f"{current.id}-{following.id}"] = score
            logical_scores.append(logical)

            if score < 0.5:
                flow_issues.append(
                    FlowIssue(
                        type=FlowIssueType.ABRUPT_TRANSITION,
                        description=f'Abrupt transition from "{current.title}" to "{following.title}"',
                        section_ids=[current.id, following.id],
                        severity=Impact.HIGH if score < 0.3 else Impact.MEDIUM,
                        suggested_fix="Add transitional content or reorder sections for better flow",
                    )
                )

        logical_progression = float(np.mean(logical_scores)) if logical_scores else 1.0

        flow_issues.extend(self._detect_logical_gaps(sections))
        flow_issues.extend(self._detect_redundant_content(sections))
        flow_issues.extend(self._detect_numbering_issues(sections))

        return StructuralFlowAnalysis(
            flow_score=self._flow_score(transition_quality, logical_progression, flow_issues),
            flow_issues=flow_issues,
            transition_quality=transition_quality,
            logical_progression_score=logical_progression,
        )

    def calculate_structural_quality(self, sections: List[Section], flow: StructuralFlowAnalysis) -> float:
        """Weighted blend of length balance, hierarchy and flow, in [0, 1]."""
        if not sections:
            return 1.0
        return (
            self._length_balance(sections) * 0.3
            + self._hierarchy_score(sections) * 0.3
            + flow.flow_score * 0.4
        )

    # ------------------------------------------------------------------
    # Flow scoring
    # ------------------------------------------------------------------

    def _key_terms(self, text: str, limit: int) -> List[str]:
        return unique_terms(text, self.lexicon.stop_words, min_length=3, limit=limit)

    def _thematic_continuity(self, first: Section, second: Section) -> float:
        first_terms = self._key_terms(first.content, THEMATIC_TERM_LIMIT)
        second_terms = self._key_terms(second.content, THEMATIC_TERM_LIMIT)
        if not first_terms and not second_terms:
            return 0.5
        return jaccard(first_terms, second_terms)

    def _logical_connection(self, first: Section, second: Section) -> float:
        first_title = first.title.lower()
        second_title = second.title.lower()
        for source, target in self.lexicon.logical_progressions:
            if source in first_title and target in second_title:
                return 1.0

        indicator_count = sum(
            1 for indicator in self.lexicon.logical_indicators
            if contains_term(first.content, indicator) or contains_term(second.content, indicator)
        )
        return min(1.0, indicator_count / 3)

    def _transitional_phrases(self, first: Section, second: Section) -> float:
        ending = first.content[-TRANSITION_WINDOW:]
        opening = second.content[:TRANSITION_WINDOW]
        phrase_count = sum(
            1 for phrase in self.lexicon.transitional_phrases
            if contains_term(ending, phrase) or contains_term(opening, phrase)
        )
        return min(1.0, phrase_count / 5)

    def _detect_logical_gaps(self, sections: List[Section]) -> List[FlowIssue]:
        titles = [section.title.lower() for section in sections]
        missing = [
            expected for expected in self.lexicon.expected_sections
            if not any(expected in title for title in titles)
        ]
        if not missing:
            return []

        names = ", ".join(missing)
        return [
            FlowIssue(
                type=FlowIssueType.LOGICAL_GAP,
                description=f"Missing expected sections: {names}",
                section_ids=[],
                severity=Impact.HIGH if len(missing) > 2 else Impact.MEDIUM,
                suggested_fix=f"Consider adding sections: {names}",
            )
        ]

    def _detect_redundant_content(self, sections: List[Section]) -> List[FlowIssue]:
        issues: List[FlowIssue] = []
        terms = [self._key_terms(section.content, REDUNDANCY_TERM_LIMIT) for section in sections]

        for i, first in enumerate(sections):
            for j in range(i + 1, len(sections)):
                similarity = jaccard(terms[i], terms[j])
                if similarity <= 0.7:
                    continue
                second = sections[j]
                issues.append(
                    FlowIssue(
                        type=FlowIssueType.REDUNDANT_CONTENT,
                        description=f'High content similarity between "{first.title}" and "{second.title}"',
                        section_ids=[first.id, second.id],
                        severity=Impact.HIGH if similarity > 0.8 else Impact.MEDIUM,
                        suggested_fix="Consider merging or removing redundant content",
                    )
                )
        return issues

    @staticmethod
    def _detect_numbering_issues(sections: List[Section]) -> List[FlowIssue]:
        numbered = [bool(NUMBERED_TITLE.match(section.title)) for section in sections]
        if not (any(numbered) and not all(numbered)):
            return []
        return [
            FlowIssue(
                type=FlowIssueType.POOR_HIERARCHY,
                description="Inconsistent heading numbering",
                section_ids=[section.id for section in sections],
                severity=Impact.MEDIUM,
                suggested_fix="Use consistent numbering or remove numbers from all headings",
            )
        ]

    @staticmethod
    def _flow_score(
        transition_quality: Dict[str, float],
        logical_progression: float,
        flow_issues: List[FlowIssue],
    ) -> float:
        if not transition_quality:
            return 1.0

        average_transition = float(np.mean(list(transition_quality.values())))
        penalty = min(0.5, sum(SEVERITY_PENALTIES[issue.severity] for issue in flow_issues))
        base = average_transition * 0.6 + logical_progression * 0.4
        return max(0.0, min(1.0, base * (1 - penalty)))

    @staticmethod
    def _length_balance(sections: List[Section]) -> float:
        """One minus the coefficient of variation of section word counts."""
        if len(sections) < 2:
            return 1.0
        counts = np.array([section.word_count for section in sections], dtype=float)
        mean = counts.mean()
        cv = counts.std() / mean if mean > 0 else 0.0
        return max(0.0, 1.0 - float(cv))

    @staticmethod
    def _hierarchy_score(sections: List[Section]) -> float:
        if len(sections) < 2:
            return 1.0

        levels = [section.level for section in sections]
        pairs = list(zip(levels, levels[1:]))
        skip_penalty = 0.1 * sum(1 for a, b in pairs if abs(b - a) > 1)
        progression = sum(1 for a, b in pairs if b >= a) / len(pairs)
        return max(0.0, min(1.0, progression * (1 - skip_penalty)))

    @staticmethod
    def _flow_improvement(original: float, optimized: float) -> float:
        if original >= optimized:
            return 0.0
        if original == 1:
            return 1.0
        return (optimized - original) / (1 - original)

    # ------------------------------------------------------------------
    # Passes
    # ------------------------------------------------------------------

    def _merge_pass(self, sections: List[Section], options: StructuralOptimizationOptions) -> PassResult:
        """Merge adjacent sections that are both under the short-section limit."""
        merged_sections = list(sections)
        applied: List[AppliedOptimization] = []

        i = 0
        while i < len(merged_sections) - 1:
            current, following = merged_sections[i], merged_sections[i + 1]
            if current.word_count >= SHORT_SECTION_WORDS or following.word_count >= SHORT_SECTION_WORDS:
                i += 1
                continue

            merged_sections[i:i + 2] = [self._merge_sections(current, following)]
            applied.append(
                AppliedOptimization(
                    type=OptimizationType.MERGE,
                    description=f'Merged short sections "{current.title}" and "{following.title}"',
                    section_ids=[current.id, following.id],
                    impact=ChangeImpact.MODERATE,
                    rationale=(
                        f"Both sections were very short (<{SHORT_SECTION_WORDS} words). "
                        "Merging improves readability."
                    ),
                )
            )
            # Stay on the merged section so it can absorb the next one

        return merged_sections, applied

    @staticmethod
    def _merge_sections(first: Section, second: Section) -> Section:
        return Section(
            id=f"{first.id}-merged-{second.id}",
            title=f"{first.title} / {second.title}",
            content=f"{first.content}\n\n{second.content}",
            start_index=first.start_index,
            end_index=second.end_index,
            level=min(first.level, second.level),
            parent_id=first.parent_id or second.parent_id,
            child_ids=[*first.child_ids, *second.child_ids],
            key_topics=list(dict.fromkeys([*first.key_topics, *second.key_topics])),
            summary=first.summary or second.summary,
            tone=first.tone or second.tone,
            readability=first.readability or second.readability,
        )

    def _split_pass(self, sections: List[Section], options: StructuralOptimizationOptions) -> PassResult:
        """Split sections longer than twice the target length at paragraph breaks."""
        split_sections: List[Section] = []
        applied: List[AppliedOptimization] = []

        for section in sections:
            word_count = section.word_count
            paragraphs = self._paragraph_offsets(section.content)
            if word_count <= options.target_section_length * 2 or len(paragraphs) < 2:
                split_sections.append(section)
                continue

            split_sections.extend(self._split_section(section, paragraphs))
            applied.append(
                AppliedOptimization(
                    type=OptimizationType.SPLIT,
                    description=f'Split long section "{section.title}" into {len(paragraphs)} parts',
                    section_ids=[section.id],
                    impact=ChangeImpact.MODERATE,
                    rationale=f"Section was too long ({word_count} words). Splitting improves readability.",
                )
            )

        return split_sections, applied

    @staticmethod
    def _paragraph_offsets(content: str) -> List[Tuple[int, str]]:
        """Non-blank paragraphs with their offsets into the content."""
        paragraphs = []
        position = 0
        for match in PARAGRAPH_BREAK.finditer(content):
            paragraphs.append((position, content[position:match.start()]))
            position = match.end()
        paragraphs.append((position, content[position:]))
        return [(offset, text) for offset, text in paragraphs if text.strip()]

    @staticmethod
    def _split_section(section: Section, paragraphs: List[Tuple[int, str]]) -> List[Section]:
        """Partition the section span among its paragraphs."""
        # The first part also keeps any leading blank lines
        first_offset, first_text = paragraphs[0]
        paragraphs = [(0, section.content[:first_offset] + first_text), *paragraphs[1:]]

        starts = [section.start_index] + [document_offset(section, offset) for offset, _ in paragraphs[1:]]
        ends = starts[1:] + [section.end_index]

        parts = []
        for n, ((offset, text), start, end) in enumerate(zip(paragraphs, starts, ends), start=1):
            if offset < section.heading_offset < offset + len(text):
                # Preamble paragraph running into the heading line
                heading_offset = section.heading_offset - offset
                heading_length = section.heading_length
            else:
                heading_offset = 0
                heading_length = document_offset(section, offset) - start
            parts.append(
                Section(
                    id=f"{section.id}-part-{n}",
                    title=f"{section.title} (Part {n})",
                    content=text,
                    start_index=start,
                    end_index=end,
                    level=section.level,
                    parent_id=section.parent_id,
                    child_ids=[],
                    key_topics=list(section.key_topics),
                    tone=section.tone,
                    readability=section.readability,
                    heading_offset=heading_offset,
                    heading_length=heading_length,
                )
            )
        return parts

    def _reorder_pass(self, sections: List[Section], options: StructuralOptimizationOptions) -> PassResult:
        """Stable-sort sections into canonical document order."""
        if not options.enforce_logical_flow or len(sections) < 2:
            return sections, []

        buckets = [self._order_bucket(section, index) for index, section in enumerate(sections)]
        order = sorted(range(len(sections)), key=lambda index: buckets[index])
        if order == list(range(len(sections))):
            return sections, []

        reordered = [sections[index] for index in order]
        return reordered, [
            AppliedOptimization(
                type=OptimizationType.REORDER,
                description="Reordered sections for better logical flow",
                section_ids=[section.id for section in sections],
                impact=ChangeImpact.MODERATE,
                rationale="Sections were reordered to follow a more logical progression.",
            )
        ]

    def _order_bucket(self, section: Section, index: int) -> int:
        title = section.title.lower()
        for bucket, keywords in self.lexicon.canonical_order:
            if any(keyword in title for keyword in keywords):
                return bucket
        return UNMATCHED_BUCKET + index

    # ------------------------------------------------------------------
    # Recommendations
    # ------------------------------------------------------------------

    def _generate_recommendations(
        self,
        sections: List[Section],
        flow: StructuralFlowAnalysis,
        options: StructuralOptimizationOptions,
    ) -> List[StructuralRecommendation]:
        recommendations: List[StructuralRecommendation] = []

        for issue in flow.flow_issues:
            if issue.severity not in (Impact.HIGH, Impact.MEDIUM):
                continue
            if issue.type == FlowIssueType.REDUNDANT_CONTENT:
                recommendation_type = StructuralRecommendationType.MERGE_SECTIONS
            elif issue.type == FlowIssueType.POOR_HIERARCHY:
                recommendation_type = StructuralRecommendationType.IMPROVE_HIERARCHY
            else:
                recommendation_type = StructuralRecommendationType.IMPROVE_FLOW
            recommendations.append(
                StructuralRecommendation(
                    type=recommendation_type,
                    description=issue.description,
                    suggested_action=issue.suggested_fix,
                    priority=issue.severity,
                    expected_impact=ChangeImpact.MODERATE,
                    section_ids=list(issue.section_ids),
                )
            )

        if len(sections) > options.max_sections:
            recommendations.append(
                StructuralRecommendation(
                    type=StructuralRecommendationType.MERGE_SECTIONS,
                    description=(
                        f"Document has {len(sections)} sections, exceeding maximum of {options.max_sections}"
                    ),
                    suggested_action="Merge related sections to reduce total count",
                    priority=Impact.MEDIUM,
                    expected_impact=ChangeImpact.MODERATE,
                )
            )
        if len(sections) < options.min_sections:
            recommendations.append(
                StructuralRecommendation(
                    type=StructuralRecommendationType.SPLIT_SECTION,
                    description=(
                        f"Document has only {len(sections)} sections, below minimum of {options.min_sections}"
                    ),
                    suggested_action="Split long sections to create more logical divisions",
                    priority=Impact.LOW,
                    expected_impact=ChangeImpact.MINOR,
                )
            )

        for section in sections:
            word_count = section.word_count
            if word_count > options.target_section_length * 1.5:
                recommendations.append(
                    StructuralRecommendation(
                        type=StructuralRecommendationType.SPLIT_SECTION,
                        description=f'Section "{section.title}" is very long ({word_count} words)',
                        suggested_action="Consider splitting this section for better readability",
                        priority=Impact.MEDIUM,
                        expected_impact=ChangeImpact.MODERATE,
                        section_ids=[section.id],
                    )
                )
            if word_count < MIN_RECOMMENDED_WORDS and len(sections) > 1:
                recommendations.append(
                    StructuralRecommendation(
                        type=StructuralRecommendationType.MERGE_SECTIONS,
                        description=f'Section "{section.title}" is very short ({word_count} words)',
                        suggested_action="Consider merging with adjacent section",
                        priority=Impact.LOW,
                        expected_impact=ChangeImpact.MINOR,
                        section_ids=[section.id],
                    )
                )

        return recommendations
