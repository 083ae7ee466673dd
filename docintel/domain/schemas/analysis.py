"""
Result records produced by the analysis engines.

Engines return plain dataclasses; they are built once per call and never
mutated after being handed back to the caller.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, List, Optional

from docintel.domain.schemas.document import Section, ToneAnalysis, ToneType


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class Impact(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class ChangeImpact(str, Enum):
    MINOR = "minor"
    MODERATE = "moderate"
    MAJOR = "major"


# ---------------------------------------------------------------------------
# Hierarchy
# ---------------------------------------------------------------------------

@dataclass
class HierarchyIssue:
    """Problem in the heading structure."""
    type: str
    description: str
    section_id: str
    severity: Severity
    suggested_fix: str


@dataclass
class Hierarchy:
    """Parent/child tree over extracted sections."""
    root_sections: List[Section]
    max_depth: int
    is_balanced: bool
    issues: List[HierarchyIssue] = field(default_factory=list)


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------

class ConsistencyType(str, Enum):
    TERMINOLOGY = "terminology"
    FORMATTING = "formatting"
    STYLE = "style"
    FACTUAL = "factual"
    TEMPORAL = "temporal"
    NUMERICAL = "numerical"


class ConsistencyResult(str, Enum):
    CONSISTENT = "consistent"
    INCONSISTENT = "inconsistent"
    MIXED = "mixed"


@dataclass(frozen=True)
class TextSpan:
    start_index: int
    end_index: int


@dataclass
class TextOccurrence:
    text: str
    location: TextSpan


@dataclass
class Inconsistency:
    """A pair of conflicting occurrences."""
    type: ConsistencyType
    first_occurrence: TextOccurrence
    second_occurrence: TextOccurrence
    suggested_correction: str


@dataclass
class ConsistencyCheck:
    """Outcome of one consistency check across all sections."""
    type: ConsistencyType
    result: ConsistencyResult
    inconsistencies: List[Inconsistency] = field(default_factory=list)
    impact: Impact = Impact.LOW

    @property
    def is_consistent(self) -> bool:
        return self.result == ConsistencyResult.CONSISTENT


# ---------------------------------------------------------------------------
# Tone control
# ---------------------------------------------------------------------------

class ToneRecommendationType(str, Enum):
    TONE_ADJUSTMENT = "tone-adjustment"
    CONSISTENCY_IMPROVEMENT = "consistency-improvement"
    EMOTIONAL_TONE_ADJUSTMENT = "emotional-tone-adjustment"
    FORMALITY_ADJUSTMENT = "formality-adjustment"


@dataclass
class ToneShift:
    """Change of primary tone between adjacent sections."""
    from_section_id: str
    to_section_id: str
    from_tone: ToneType
    to_tone: ToneType
    magnitude: float
    is_appropriate: bool
    explanation: str


@dataclass
class ToneRecommendation:
    type: ToneRecommendationType
    description: str
    suggested_action: str
    priority: Impact
    expected_impact: ChangeImpact
    section_id: Optional[str] = None


@dataclass
class ToneAnalysisResult:
    """Tone analysis across a document's sections."""
    overall_tone: ToneAnalysis
    section_tones: Dict[str, ToneAnalysis]
    consistency_score: float
    tone_shifts: List[ToneShift]
    recommendations: List[ToneRecommendation]
    target_match_score: float


# ---------------------------------------------------------------------------
# Structural optimization
# ---------------------------------------------------------------------------

class OptimizationType(str, Enum):
    MERGE = "merge"
    SPLIT = "split"
    REORDER = "reorder"
    HIERARCHY_CHANGE = "hierarchy-change"
    FLOW_IMPROVEMENT = "flow-improvement"


class FlowIssueType(str, Enum):
    ABRUPT_TRANSITION = "abrupt-transition"
    LOGICAL_GAP = "logical-gap"
    REDUNDANT_CONTENT = "redundant-content"
    MISSING_TRANSITION = "missing-transition"
    POOR_HIERARCHY = "poor-hierarchy"


class StructuralRecommendationType(str, Enum):
    MERGE_SECTIONS = "merge-sections"
    SPLIT_SECTION = "split-section"
    REORDER_SECTIONS = "reorder-sections"
    IMPROVE_HIERARCHY = "improve-hierarchy"
    IMPROVE_FLOW = "improve-flow"


@dataclass
class AppliedOptimization:
    type: OptimizationType
    description: str
    section_ids: List[str]
    impact: ChangeImpact
    rationale: str


@dataclass
class FlowIssue:
    type: FlowIssueType
    description: str
    section_ids: List[str]
    severity: Impact
    suggested_fix: str


@dataclass
class StructuralFlowAnalysis:
    """Flow between adjacent sections, scored in [0, 1]."""
    flow_score: float
    flow_issues: List[FlowIssue]
    transition_quality: Dict[str, float]
    logical_progression_score: float


@dataclass
class StructuralRecommendation:
    type: StructuralRecommendationType
    description: str
    suggested_action: str
    priority: Impact
    expected_impact: ChangeImpact
    section_ids: List[str] = field(default_factory=list)


@dataclass
class StructuralOptimizationResult:
    optimized_sections: List[Section]
    applied_optimizations: List[AppliedOptimization]
    structural_quality_score: float
    flow_improvement_score: float
    recommendations: List[StructuralRecommendation]


# ---------------------------------------------------------------------------
# Summaries
# ---------------------------------------------------------------------------

@dataclass
class SummaryStatistics:
    word_count: int
    compression_ratio: float
    key_point_count: int
    coverage: float


@dataclass
class GeneratedSummary:
    """Extractive summary of a section or document."""
    summary: str
    key_points: List[str]
    statistics: SummaryStatistics
    tone: ToneAnalysis
    confidence: float
    sections_covered: Optional[List[str]] = None


@dataclass
class DocumentSummaryResult:
    executive_summary: GeneratedSummary
    section_summaries: Dict[str, GeneratedSummary]
    full_document_summary: GeneratedSummary
    key_themes: List[str]
    main_conclusions: List[str]
    recommendations: Optional[List[str]] = None


# ---------------------------------------------------------------------------
# Rewrites
# ---------------------------------------------------------------------------

class RewriteChangeType(str, Enum):
    TONE_ADJUSTMENT = "tone-adjustment"
    CLARITY_IMPROVEMENT = "clarity-improvement"
    CONCISENESS = "conciseness"
    JARGON_REDUCTION = "jargon-reduction"
    SENTENCE_RESTRUCTURING = "sentence-restructuring"
    WORD_REPLACEMENT = "word-replacement"


@dataclass
class RewriteChange:
    type: RewriteChangeType
    original_segment: str
    rewritten_segment: str
    explanation: str
    impact: ChangeImpact


@dataclass
class RewriteStatistics:
    word_reduction_percent: float
    sentence_count_change: int
    avg_sentence_length_change: float
    readability_improvement: float = 0.0
    clarity_improvement: float = 0.0


@dataclass
class RewriteResult:
    original_text: str
    rewritten_text: str
    changes: List[RewriteChange]
    statistics: RewriteStatistics
    tone_before: ToneAnalysis
    tone_after: ToneAnalysis
    confidence: float
