"""
Domain schemas for analysed documents.

Defines the section record produced by extraction together with the
tone and readability values that can be cached on it.
"""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field


class ToneType(str, Enum):
    """Categorical register of a piece of text."""
    FORMAL = "formal"
    INFORMAL = "informal"
    ACADEMIC = "academic"
    CONVERSATIONAL = "conversational"
    PERSUASIVE = "persuasive"
    DESCRIPTIVE = "descriptive"
    INSTRUCTIVE = "instructive"
    ANALYTICAL = "analytical"
    CRITICAL = "critical"
    OPTIMISTIC = "optimistic"
    PESSIMISTIC = "pessimistic"
    NEUTRAL = "neutral"


class Appropriateness(str, Enum):
    """How well a tone fits its section or document."""
    EXCELLENT = "excellent"
    GOOD = "good"
    ADEQUATE = "adequate"
    POOR = "poor"
    INAPPROPRIATE = "inappropriate"


class EmotionalValence(str, Enum):
    """Overall emotional direction of text."""
    POSITIVE = "positive"
    NEGATIVE = "negative"
    NEUTRAL = "neutral"
    MIXED = "mixed"


class ReadabilityAssessment(str, Enum):
    """Flesch reading-ease bands."""
    VERY_EASY = "very-easy"
    EASY = "easy"
    FAIRLY_EASY = "fairly-easy"
    STANDARD = "standard"
    FAIRLY_DIFFICULT = "fairly-difficult"
    DIFFICULT = "difficult"
    VERY_DIFFICULT = "very-difficult"


class EmotionalTone(BaseModel):
    """Emotional colouring of a text."""
    model_config = ConfigDict(frozen=True)

    valence: EmotionalValence
    intensity: float = Field(..., ge=0.0, le=1.0)
    dominant_emotions: List[str] = Field(default_factory=list)
    consistency: float = Field(default=0.8, ge=0.0, le=1.0)


class ToneAnalysis(BaseModel):
    """Tone classification of a section, summary or whole document."""
    model_config = ConfigDict(frozen=True)

    primary_tone: ToneType
    secondary_tones: List[str] = Field(default_factory=list)
    consistency_score: float = Field(..., ge=0.0, le=1.0)
    appropriateness: Appropriateness = Appropriateness.ADEQUATE
    emotional_tone: Optional[EmotionalTone] = None


class ReadabilityScores(BaseModel):
    """Standard readability indices for a text."""
    model_config = ConfigDict(frozen=True)

    flesch_reading_ease: float = Field(..., ge=0.0, le=100.0)
    flesch_kincaid_grade_level: float = Field(..., ge=1.0, le=12.0)
    gunning_fog_index: float = Field(..., ge=1.0)
    coleman_liau_index: float = Field(..., ge=1.0)
    smog_index: float = Field(..., ge=1.0)
    automated_readability_index: float = Field(..., ge=1.0)
    dale_chall_score: float = Field(..., ge=1.0)
    assessment: ReadabilityAssessment
    target_audience_level: str


class Section(BaseModel):
    """
    Contiguous span of a document with a title and hierarchy level.

    Spans are half-open: ``start_index`` is the first character covered
    and ``end_index`` is one past the last.
    """
    model_config = ConfigDict(frozen=True)

    id: str
    title: str
    content: str = ""
    start_index: int = Field(..., ge=0)
    end_index: int = Field(..., ge=0)
    level: int = Field(default=1, ge=1, description="Heading level (1 is top)")
    parent_id: Optional[str] = None
    child_ids: List[str] = Field(default_factory=list)
    key_topics: List[str] = Field(default_factory=list)
    summary: Optional[str] = None
    tone: Optional[ToneAnalysis] = None
    readability: Optional[ReadabilityScores] = None
    heading_offset: int = Field(default=0, ge=0, description="Content offset where the heading line was cut out")
    heading_length: int = Field(default=0, ge=0, description="Characters of the heading line inside the span")

    @property
    def word_count(self) -> int:
        """Number of whitespace-separated words in the content."""
        return len(self.content.split())

    @property
    def span_length(self) -> int:
        return self.end_index - self.start_index
