"""
Request and per-pass configuration schemas.

Every option record validates its ranges on construction, so engines can
assume well-formed configuration.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, model_validator

from docintel.core.config import settings
from docintel.domain.schemas.document import EmotionalValence, ToneType


class AnalysisScope(str, Enum):
    """Portion of the document an analysis request covers."""
    FULL_DOCUMENT = "full-document"
    SECTION = "section"
    PARAGRAPH = "paragraph"
    CROSS_SECTION = "cross-section"


class AnalysisDepth(str, Enum):
    """Requested analysis depth."""
    SURFACE = "surface"
    STANDARD = "standard"
    DEEP = "deep"
    EXHAUSTIVE = "exhaustive"


class TargetAudience(str, Enum):
    """Intended readership."""
    GENERAL = "general"
    TECHNICAL = "technical"
    EXECUTIVE = "executive"
    ACADEMIC = "academic"


class DetailLevel(str, Enum):
    """Summary detail levels."""
    BRIEF = "brief"
    STANDARD = "standard"
    DETAILED = "detailed"
    COMPREHENSIVE = "comprehensive"


class ClarityLevel(str, Enum):
    SIMPLIFIED = "simplified"
    STANDARD = "standard"
    TECHNICAL = "technical"


class ConcisenessLevel(str, Enum):
    VERBOSE = "verbose"
    BALANCED = "balanced"
    CONCISE = "concise"
    VERY_CONCISE = "very-concise"


class SectionBoundary(BaseModel):
    """Half-open character range within the request content."""
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)

    @model_validator(mode="after")
    def check_order(self) -> "SectionBoundary":
        if self.end_index < self.start_index:
            raise ValueError("end_index must not precede start_index")
        return self


class DocumentAnalysisRequest(BaseModel):
    """Input to the document analysis orchestrator."""
    content: str
    scope: AnalysisScope = AnalysisScope.FULL_DOCUMENT
    depth: AnalysisDepth = AnalysisDepth.STANDARD
    section_boundaries: Optional[List[SectionBoundary]] = None
    focus_areas: List[str] = Field(default_factory=list)
    include_suggestions: bool = True
    include_confidence: bool = True
    max_issues: Optional[int] = Field(default=None, ge=0)


class ToneControlOptions(BaseModel):
    """Tone analysis targets."""
    target_tone: ToneType = Field(default_factory=lambda: ToneType(settings.DEFAULT_TARGET_TONE))
    target_emotional_tone: Optional[EmotionalValence] = None
    target_formality_level: float = Field(default=5, ge=0, le=10, description="Formality on a 0-10 scale")
    enforce_consistency: bool = True
    allow_mixed_tones: bool = False
    max_tone_shifts: int = Field(default_factory=lambda: settings.DEFAULT_MAX_TONE_SHIFTS, ge=0)
    target_audience: TargetAudience = TargetAudience.GENERAL


class StructuralOptimizationOptions(BaseModel):
    """Toggles and targets for the structural optimization passes."""
    allow_merging: bool = True
    allow_splitting: bool = True
    allow_reordering: bool = True
    max_sections: int = Field(default_factory=lambda: settings.DEFAULT_MAX_SECTIONS, ge=1)
    min_sections: int = Field(default_factory=lambda: settings.DEFAULT_MIN_SECTIONS, ge=0)
    target_section_length: int = Field(
        default_factory=lambda: settings.DEFAULT_TARGET_SECTION_LENGTH,
        ge=1,
        description="Target average section length in words",
    )
    enforce_logical_flow: bool = True
    preserve_original_structure: bool = True


class SummaryOptions(BaseModel):
    """
    Summary generation options.

    ``target_length`` left unset resolves to the document or section default
    from settings, depending on what is being summarised.
    """
    target_length: Optional[int] = Field(default=None, ge=1, description="Target length in words")
    detail_level: DetailLevel = DetailLevel.STANDARD
    preserve_tone: bool = True
    include_key_points: bool = True
    include_statistics: bool = True
    target_audience: TargetAudience = TargetAudience.GENERAL
    language: str = "en"


class RewriteOptions(BaseModel):
    """Rewrite targets."""
    target_tone: ToneType = ToneType.NEUTRAL
    clarity_level: ClarityLevel = ClarityLevel.STANDARD
    conciseness_level: ConcisenessLevel = ConcisenessLevel.BALANCED
    preserve_terminology: bool = True
    maintain_structure: bool = True
    target_audience: TargetAudience = TargetAudience.GENERAL
    language: str = "en"
    max_iterations: int = Field(default_factory=lambda: settings.DEFAULT_MAX_REWRITE_ITERATIONS, ge=0)
