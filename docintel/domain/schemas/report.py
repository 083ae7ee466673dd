"""
Aggregated report schemas for the document analysis orchestrator.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional

from docintel.domain.schemas.analysis import (
    ConsistencyCheck,
    DocumentSummaryResult,
    Hierarchy,
    Impact,
    Severity,
    StructuralOptimizationResult,
    ToneAnalysisResult,
)
from docintel.domain.schemas.document import ReadabilityScores, Section, ToneAnalysis
from docintel.domain.schemas.options import AnalysisDepth, AnalysisScope


@dataclass
class DocumentStatistics:
    character_count: int
    word_count: int
    sentence_count: int
    paragraph_count: int
    reading_time_minutes: int


@dataclass
class AnalysisMetadata:
    timestamp: datetime
    scope: AnalysisScope
    depth: AnalysisDepth
    processing_time_ms: float
    statistics: DocumentStatistics


@dataclass
class StructuralIssue:
    """Document-level structural problem found by the orchestrator."""
    type: str
    description: str
    severity: Severity
    suggested_fix: str
    confidence: float
    section_id: Optional[str] = None


@dataclass
class TransitionAnalysis:
    from_section_id: str
    to_section_id: str
    quality_score: float
    transition_type: str
    issues: List[str] = field(default_factory=list)
    suggested_improvement: Optional[str] = None


@dataclass
class LogicalProgression:
    coherence_score: float
    flow_type: str = "topical"
    logical_gaps: List[str] = field(default_factory=list)
    argument_strength: str = "moderate"
    evidence_support: str = "adequate"


@dataclass
class FlowAnalysis:
    """Keyword-overlap flow between adjacent sections, scored in [0, 100]."""
    flow_score: float
    transitions: List[TransitionAnalysis]
    logical_progression: LogicalProgression


@dataclass
class DocumentStructure:
    sections: List[Section]
    hierarchy: Hierarchy
    structural_issues: List[StructuralIssue]
    flow_analysis: FlowAnalysis


@dataclass
class SentenceComplexity:
    average_sentence_length: float
    long_sentence_count: int
    very_long_sentence_count: int
    short_sentence_count: int
    sentence_length_variation: float
    complex_sentence_percentage: float
    passive_voice_percentage: float
    impact: str


@dataclass
class JargonAnalysis:
    jargon_terms: List[str]
    jargon_density: float
    appropriateness: str
    alternatives: List[str]


@dataclass
class ClarityAssessment:
    clarity_score: float
    sentence_complexity: SentenceComplexity
    jargon_usage: JargonAnalysis
    ambiguities: List[str]
    concrete_abstract_ratio: float


@dataclass
class RedundancyDetection:
    text: str
    section_ids: List[str]
    similarity: float


@dataclass
class QualityAnalysis:
    readability: ReadabilityScores
    tone: ToneAnalysis
    clarity: ClarityAssessment
    consistency: List[ConsistencyCheck]
    redundancies: List[RedundancyDetection]


@dataclass
class KeyTheme:
    theme: str
    relevance: float
    sections: List[str]
    development: str = "adequate"


@dataclass
class MainArgument:
    argument: str
    strength: str
    evidence_support: str
    logical_coherence: str
    sections: List[str]
    counterarguments_addressed: bool
    strengthening_suggestions: List[str]


@dataclass
class EvidenceAnalysis:
    claim: str
    evidence: List[str]
    strength: str


@dataclass
class LogicalFlowAssessment:
    overall_coherence: float
    argument_chain_completeness: str
    logical_fallacies: List[str]
    reasoning_quality: str
    assumptions: List[str]
    implications_explored: str


@dataclass
class AudienceAssessment:
    target_audience: str
    appropriateness: str
    knowledge_level_match: str
    interest_level: str
    accessibility: str
    cultural_appropriateness: str
    targeting_suggestions: List[str]


@dataclass
class InsightAnalysis:
    key_themes: List[KeyTheme]
    main_arguments: List[MainArgument]
    evidence_analysis: List[EvidenceAnalysis]
    logical_flow: LogicalFlowAssessment
    audience_appropriateness: AudienceAssessment


@dataclass
class Suggestion:
    """Actionable improvement suggestion."""
    type: str
    description: str
    explanation: str
    priority: Severity
    expected_impact: Impact = Impact.MEDIUM
    difficulty: str = "easy"
    confidence: float = 0.8
    section_id: Optional[str] = None


@dataclass
class SuggestionSet:
    structural: List[Suggestion] = field(default_factory=list)
    content: List[Suggestion] = field(default_factory=list)
    style: List[Suggestion] = field(default_factory=list)
    flow: List[Suggestion] = field(default_factory=list)
    priority: Impact = Impact.MEDIUM

    def all(self) -> List[Suggestion]:
        return [*self.structural, *self.content, *self.style, *self.flow]


@dataclass
class Assessment:
    overall_score: float
    strengths: List[str]
    areas_for_improvement: List[str]
    improvement_urgency: Severity
    confidence: float


@dataclass
class DocumentAnalysisResult:
    """Aggregated output of the document analysis orchestrator."""
    metadata: AnalysisMetadata
    structure: DocumentStructure
    quality: QualityAnalysis
    insights: InsightAnalysis
    suggestions: SuggestionSet
    assessment: Assessment


@dataclass
class DocumentIntelligenceReport:
    """Every engine's output for one document."""
    analysis: DocumentAnalysisResult
    consistency_checks: List[ConsistencyCheck]
    tone: ToneAnalysisResult
    structural_optimization: StructuralOptimizationResult
    summary: DocumentSummaryResult
