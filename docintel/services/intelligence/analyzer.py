"""
Document Analysis Engine.

Entry point of the document intelligence pipeline:
- Structural analysis (sections, hierarchy, structural issues, flow)
- Content quality assessment (readability, tone, clarity)
- Insights (key themes, arguments, logical flow, audience fit)
- Actionable suggestions and an overall assessment

``run_full_pipeline`` additionally runs the consistency, tone, structural
optimization and summary engines over the extracted sections.
"""

import math
import time
from collections import Counter
from datetime import datetime, timezone
from typing import List, Optional

import numpy as np
import structlog

from docintel.core.config import settings
from docintel.core.exceptions import ValidationError
from docintel.core.logging import log_error_details, log_performance_metrics
from docintel.domain.schemas.analysis import Impact, Severity
from docintel.domain.schemas.document import ReadabilityAssessment, Section
from docintel.domain.schemas.options import (
    AnalysisScope,
    DocumentAnalysisRequest,
    StructuralOptimizationOptions,
    SummaryOptions,
    ToneControlOptions,
)
from docintel.domain.schemas.report import (
    AnalysisMetadata,
    Assessment,
    AudienceAssessment,
    ClarityAssessment,
    DocumentAnalysisResult,
    DocumentIntelligenceReport,
    DocumentStatistics,
    DocumentStructure,
    FlowAnalysis,
    InsightAnalysis,
    JargonAnalysis,
    KeyTheme,
    LogicalFlowAssessment,
    LogicalProgression,
    MainArgument,
    QualityAnalysis,
    SentenceComplexity,
    StructuralIssue,
    Suggestion,
    SuggestionSet,
    TransitionAnalysis,
)
from .consistency import CrossSectionConsistencyEngine
from .extractor import SectionExtractor
from .lexicon import DEFAULT_LEXICON, Lexicon
from .readability import ReadabilityScorer
from .structure import StructuralOptimizationEngine
from .summary import AutoSummaryEngine
from .text import jaccard, split_paragraphs, split_sentences, tokens, words
from .tone import ToneControlEngine

logger = structlog.get_logger(__name__)

BASE_SCORE = 80
ISSUE_PENALTY = 5
LONG_SECTION_FACTOR = 3
SHORT_SECTION_FACTOR = 0.1
FLOW_WORD_LIMIT = 50
THEME_LIMIT = 5
SEQUENTIAL_THRESHOLD = 0.7
ADDITIVE_THRESHOLD = 0.4
WEAK_CONNECTION_THRESHOLD = 0.5
PLACEHOLDER_CLARITY_SCORE = 75

# (maximum issue count, confidence)
CONFIDENCE_BANDS = ((0, 0.9), (2, 0.8), (5, 0.7))
FALLBACK_CONFIDENCE = 0.6


class DocumentAnalysisEngine:
    """
    Document analysis orchestrator.

    Runs the structural, quality and insight passes over a request's content
    and folds their findings into suggestions and a scored assessment.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.logger = structlog.get_logger(__name__)
        self.lexicon = lexicon or DEFAULT_LEXICON

        self.extractor = SectionExtractor(self.lexicon)
        self.scorer = ReadabilityScorer(self.lexicon)
        self.consistency_engine = CrossSectionConsistencyEngine(self.lexicon)
        self.tone_engine = ToneControlEngine(self.lexicon, scorer=self.scorer)
        self.structure_engine = StructuralOptimizationEngine(self.lexicon)
        self.summary_engine = AutoSummaryEngine(self.lexicon)

    async def analyze_document(self, request: DocumentAnalysisRequest) -> DocumentAnalysisResult:
        """
        Perform structural, quality and insight analysis on a document.

        Args:
            request: Analysis request carrying the content and options

        Returns:
            Complete analysis result

        Raises:
            ValidationError: If a section boundary lies outside the content
        """
        start_time = time.time()

        try:
            self.logger.info(
                "Starting document analysis",
                scope=request.scope.value,
                depth=request.depth.value,
                content_length=len(request.content),
            )

            text = self._resolve_content(request)

            # Structure
            sections, hierarchy = self.extractor.extract(text)
            structural_issues = self._detect_structural_issues(sections)
            structure = DocumentStructure(
                sections=sections,
                hierarchy=hierarchy,
                structural_issues=structural_issues,
                flow_analysis=self._analyze_flow(sections),
            )

            quality = self._analyze_quality(text)
            insights = self._extract_insights(text, sections)

            suggestions = (
                self._generate_suggestions(structural_issues)
                if request.include_suggestions
                else SuggestionSet()
            )
            assessment = self._create_assessment(structural_issues, quality, suggestions)

            # Scoring above sees every issue; only the report is truncated
            if request.max_issues is not None:
                structure.structural_issues = structural_issues[:request.max_issues]

            processing_time_ms = (time.time() - start_time) * 1000

            result = DocumentAnalysisResult(
                metadata=AnalysisMetadata(
                    timestamp=datetime.now(timezone.utc),
                    scope=request.scope,
                    depth=request.depth,
                    processing_time_ms=processing_time_ms,
                    statistics=self._calculate_statistics(text),
                ),
                structure=structure,
                quality=quality,
                insights=insights,
                suggestions=suggestions,
                assessment=assessment,
            )

            self.logger.info(
                "Document analysis completed",
                **log_performance_metrics(
                    "analyze_document",
                    processing_time_ms,
                    section_count=len(sections),
                    issue_count=len(structural_issues),
                    overall_score=assessment.overall_score,
                ),
            )

            return result

        except Exception as e:
            self.logger.error("Error in document analysis", **log_error_details(e))
            raise

    async def run_full_pipeline(
        self,
        text: str,
        tone_options: Optional[ToneControlOptions] = None,
        structure_options: Optional[StructuralOptimizationOptions] = None,
        summary_options: Optional[SummaryOptions] = None,
    ) -> DocumentIntelligenceReport:
        """
        Run every engine over a document.

        Args:
            text: Full document text
            tone_options: Options for the tone control engine
            structure_options: Options for the structural optimization engine
            summary_options: Options for the summary engine

        Returns:
            Report bundling the analysis with the consistency, tone,
            structural optimization and summary results
        """
        start_time = time.time()

        analysis = await self.analyze_document(DocumentAnalysisRequest(content=text))
        sections = analysis.structure.sections

        try:
            report = DocumentIntelligenceReport(
                analysis=analysis,
                consistency_checks=self.consistency_engine.analyze_consistency(sections),
                tone=self.tone_engine.analyze_tone(sections, tone_options),
                structural_optimization=self.structure_engine.optimize_structure(
                    sections, structure_options
                ),
                summary=self.summary_engine.generate_document_summary(sections, summary_options),
            )
        except Exception as e:
            self.logger.error("Error in document intelligence pipeline", **log_error_details(e))
            raise

        self.logger.info(
            "Document intelligence pipeline completed",
            **log_performance_metrics(
                "run_full_pipeline",
                (time.time() - start_time) * 1000,
                section_count=len(sections),
                inconsistency_count=sum(
                    len(check.inconsistencies) for check in report.consistency_checks
                ),
            ),
        )
        return report

    def _resolve_content(self, request: DocumentAnalysisRequest) -> str:
        """Text under analysis: boundary slices for section and paragraph scope."""
        scoped = request.scope in (AnalysisScope.SECTION, AnalysisScope.PARAGRAPH)
        if not scoped or not request.section_boundaries:
            return request.content

        length = len(request.content)
        for boundary in request.section_boundaries:
            if boundary.end_index > length:
                raise ValidationError(
                    f"Section boundary {boundary.start_index}-{boundary.end_index} "
                    f"exceeds content length {length}",
                    field="section_boundaries",
                )

        return "\n\n".join(
            request.content[b.start_index:b.end_index] for b in request.section_boundaries
        )

    def _calculate_statistics(self, content: str) -> DocumentStatistics:
        word_count = len(words(content))
        return DocumentStatistics(
            character_count=len(content),
            word_count=word_count,
            sentence_count=len(split_sentences(content)),
            paragraph_count=len(split_paragraphs(content)),
            reading_time_minutes=math.ceil(word_count / settings.READING_WORDS_PER_MINUTE),
        )

    def _title_has(self, section: Section, terms) -> bool:
        title = section.title.lower()
        return any(term in title for term in terms)

    def _detect_structural_issues(self, sections: List[Section]) -> List[StructuralIssue]:
        issues: List[StructuralIssue] = []
        if len(sections) <= 1:
            return issues

        if not any(self._title_has(s, self.lexicon.introduction_titles) for s in sections):
            issues.append(
                StructuralIssue(
                    type="missing-introduction",
                    description="Document lacks a clear introduction section",
                    severity=Severity.MEDIUM,
                    suggested_fix="Add an introduction section to provide context and overview",
                    confidence=0.8,
                )
            )

        if not any(self._title_has(s, self.lexicon.conclusion_titles) for s in sections):
            issues.append(
                StructuralIssue(
                    type="missing-conclusion",
                    description="Document lacks a clear conclusion section",
                    severity=Severity.MEDIUM,
                    suggested_fix="Add a conclusion section to summarize key points and findings",
                    confidence=0.8,
                )
            )

        average_length = float(np.mean([len(s.content) for s in sections]))
        for section in sections:
            length = len(section.content)
            if length > average_length * LONG_SECTION_FACTOR:
                issues.append(
                    StructuralIssue(
                        type="section-too-long",
                        description=f'Section "{section.title}" is significantly longer than average',
                        severity=Severity.LOW,
                        suggested_fix="Consider splitting this section into multiple subsections",
                        confidence=0.7,
                        section_id=section.id,
                    )
                )
            if 0 < length < average_length * SHORT_SECTION_FACTOR:
                issues.append(
                    StructuralIssue(
                        type="section-too-short",
                        description=f'Section "{section.title}" is very short',
                        severity=Severity.LOW,
                        suggested_fix="Consider merging with adjacent section or expanding content",
                        confidence=0.6,
                        section_id=section.id,
                    )
                )

        return issues

    def _analyze_flow(self, sections: List[Section]) -> FlowAnalysis:
        transitions: List[TransitionAnalysis] = []

        for from_section, to_section in zip(sections, sections[1:]):
            connection = self._section_connection(from_section.content, to_section.content)
            weak = connection < WEAK_CONNECTION_THRESHOLD

            if connection > SEQUENTIAL_THRESHOLD:
                transition_type = "sequential"
            elif connection > ADDITIVE_THRESHOLD:
                transition_type = "additive"
            else:
                transition_type = "weak"

            transitions.append(
                TransitionAnalysis(
                    from_section_id=from_section.id,
                    to_section_id=to_section.id,
                    quality_score=connection * 100,
                    transition_type=transition_type,
                    issues=["Weak connection between sections"] if weak else [],
                    suggested_improvement=(
                        "Add transitional sentence or improve logical flow" if weak else None
                    ),
                )
            )

        flow_score = (
            float(np.mean([t.quality_score for t in transitions])) if transitions else 100.0
        )

        return FlowAnalysis(
            flow_score=flow_score,
            transitions=transitions,
            logical_progression=LogicalProgression(coherence_score=flow_score),
        )

    def _section_connection(self, first: str, second: str) -> float:
        """Jaccard overlap of the leading meaningful words of two sections."""
        first_words = [t for t in tokens(first) if len(t) > 3][:FLOW_WORD_LIMIT]
        second_words = [t for t in tokens(second) if len(t) > 3][:FLOW_WORD_LIMIT]
        return jaccard(first_words, second_words)

    def _analyze_quality(self, text: str) -> QualityAnalysis:
        return QualityAnalysis(
            readability=self.scorer.calculate_readability(text),
            tone=self.scorer.analyze_tone(text),
            clarity=self._assess_clarity(text),
            consistency=[],
            redundancies=[],
        )

    def _assess_clarity(self, text: str) -> ClarityAssessment:
        # Fixed baseline until sentence-level clarity scoring lands
        return ClarityAssessment(
            clarity_score=PLACEHOLDER_CLARITY_SCORE,
            sentence_complexity=SentenceComplexity(
                average_sentence_length=15,
                long_sentence_count=2,
                very_long_sentence_count=0,
                short_sentence_count=8,
                sentence_length_variation=5.2,
                complex_sentence_percentage=30,
                passive_voice_percentage=15,
                impact="neutral",
            ),
            jargon_usage=JargonAnalysis(
                jargon_terms=[],
                jargon_density=0.1,
                appropriateness="appropriate",
                alternatives=[],
            ),
            ambiguities=[],
            concrete_abstract_ratio=0.7,
        )

    def _extract_insights(self, text: str, sections: List[Section]) -> InsightAnalysis:
        section_ids = [s.id for s in sections]
        return InsightAnalysis(
            key_themes=self._extract_key_themes(text, section_ids),
            main_arguments=[
                MainArgument(
                    argument="The document presents a coherent analysis of the subject matter",
                    strength="moderate",
                    evidence_support="adequate",
                    logical_coherence="medium",
                    sections=section_ids,
                    counterarguments_addressed=False,
                    strengthening_suggestions=[
                        "Provide more specific evidence",
                        "Address potential counterarguments",
                    ],
                )
            ],
            evidence_analysis=[],
            logical_flow=LogicalFlowAssessment(
                overall_coherence=75,
                argument_chain_completeness="partial",
                logical_fallacies=[],
                reasoning_quality="adequate",
                assumptions=[],
                implications_explored="some",
            ),
            audience_appropriateness=AudienceAssessment(
                target_audience="General educated audience",
                appropriateness="appropriate",
                knowledge_level_match="appropriate",
                interest_level="moderate",
                accessibility="good",
                cultural_appropriateness="good",
                targeting_suggestions=[],
            ),
        )

    def _extract_key_themes(self, text: str, section_ids: List[str]) -> List[KeyTheme]:
        stop_words = set(self.lexicon.theme_stop_words)
        eligible = [t for t in tokens(text) if len(t) > 4 and t not in stop_words]
        frequency = Counter(eligible)

        return [
            KeyTheme(theme=theme, relevance=count / len(eligible), sections=list(section_ids))
            for theme, count in frequency.most_common(THEME_LIMIT)
        ]

    def _generate_suggestions(self, structural_issues: List[StructuralIssue]) -> SuggestionSet:
        structural = [
            Suggestion(
                type="add-section",
                description=f"Fix: {issue.description}",
                explanation=issue.suggested_fix,
                priority=issue.severity,
                expected_impact=Impact.MEDIUM,
                difficulty="easy",
                confidence=issue.confidence,
                section_id=issue.section_id,
            )
            for issue in structural_issues
        ]

        suggestions = SuggestionSet(structural=structural, content=[], style=[], flow=[])
        suggestions.priority = self._suggestion_priority(suggestions.all())
        return suggestions

    def _suggestion_priority(self, suggestions: List[Suggestion]) -> Impact:
        priorities = {s.priority for s in suggestions}
        if priorities & {Severity.CRITICAL, Severity.HIGH}:
            return Impact.HIGH
        if Severity.MEDIUM in priorities:
            return Impact.MEDIUM
        return Impact.LOW

    def _create_assessment(
        self,
        structural_issues: List[StructuralIssue],
        quality: QualityAnalysis,
        suggestions: SuggestionSet,
    ) -> Assessment:
        issue_count = len(structural_issues)
        overall_score = max(0, min(100, BASE_SCORE - issue_count * ISSUE_PENALTY))

        return Assessment(
            overall_score=overall_score,
            strengths=self._identify_strengths(structural_issues, quality),
            areas_for_improvement=self._identify_improvement_areas(suggestions),
            improvement_urgency=self._improvement_urgency(structural_issues, suggestions),
            confidence=self._assessment_confidence(issue_count),
        )

    def _identify_strengths(
        self, structural_issues: List[StructuralIssue], quality: QualityAnalysis
    ) -> List[str]:
        strengths: List[str] = []

        if not structural_issues:
            strengths.append("Well-structured document with clear organization")

        if quality.readability.assessment in (ReadabilityAssessment.STANDARD, ReadabilityAssessment.EASY):
            strengths.append("Good readability level appropriate for target audience")

        if quality.clarity.clarity_score > 70:
            strengths.append("Clear and understandable writing style")

        return strengths or ["Document shows basic competence in organization and communication"]

    def _identify_improvement_areas(self, suggestions: SuggestionSet) -> List[str]:
        areas: List[str] = []
        if suggestions.structural:
            areas.append("Document structure and organization")
        if suggestions.content:
            areas.append("Content development and argumentation")
        if suggestions.style:
            areas.append("Writing style and clarity")
        if suggestions.flow:
            areas.append("Logical flow and transitions")
        return areas or ["Minor refinements in clarity and structure"]

    def _improvement_urgency(
        self, structural_issues: List[StructuralIssue], suggestions: SuggestionSet
    ) -> Severity:
        severities = {issue.severity for issue in structural_issues}
        if Severity.CRITICAL in severities:
            return Severity.CRITICAL

        all_suggestions = suggestions.all()
        priorities = {s.priority for s in all_suggestions}
        if Severity.HIGH in severities or priorities & {Severity.HIGH, Severity.CRITICAL}:
            return Severity.HIGH
        if Severity.MEDIUM in priorities or len(all_suggestions) > 5:
            return Severity.MEDIUM
        return Severity.LOW

    def _assessment_confidence(self, issue_count: int) -> float:
        for max_issues, confidence in CONFIDENCE_BANDS:
            if issue_count <= max_issues:
                return confidence
        return FALLBACK_CONFIDENCE
