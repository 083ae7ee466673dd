"""
Readability and tone scoring for arbitrary text.

Provides the per-text measurements the other engines build on:
- Formality on a 0-10 scale from formal and informal marker counts
- Emotional valence and intensity from positive and negative word counts
- Flesch, Flesch-Kincaid, Gunning Fog, Coleman-Liau, SMOG, ARI and Dale-Chall indices
- A quick document-level tone classification
"""

import math
from typing import Optional

import structlog

from docintel.domain.schemas.document import (
    Appropriateness,
    EmotionalTone,
    EmotionalValence,
    ReadabilityAssessment,
    ReadabilityScores,
    ToneAnalysis,
    ToneType,
)
from .lexicon import DEFAULT_LEXICON, Lexicon
from .text import count_occurrences, count_syllables, split_sentences, tokens, words

logger = structlog.get_logger(__name__)

NEUTRAL_FORMALITY = 5.0
ACADEMIC_MARKER_THRESHOLD = 5
COMPLEX_WORD_SYLLABLES = 3
LONG_WORD_LENGTH = 6

# Lower bound of Flesch reading ease for each band
ASSESSMENT_BANDS = (
    (90, ReadabilityAssessment.VERY_EASY),
    (80, ReadabilityAssessment.EASY),
    (70, ReadabilityAssessment.FAIRLY_EASY),
    (60, ReadabilityAssessment.STANDARD),
    (50, ReadabilityAssessment.FAIRLY_DIFFICULT),
    (30, ReadabilityAssessment.DIFFICULT),
)

AUDIENCE_LEVELS = {
    ReadabilityAssessment.VERY_EASY: "Elementary school",
    ReadabilityAssessment.EASY: "Middle school",
    ReadabilityAssessment.FAIRLY_EASY: "High school",
    ReadabilityAssessment.STANDARD: "College",
    ReadabilityAssessment.FAIRLY_DIFFICULT: "University",
    ReadabilityAssessment.DIFFICULT: "Graduate",
    ReadabilityAssessment.VERY_DIFFICULT: "Expert",
}


def assess_reading_ease(flesch_reading_ease: float) -> ReadabilityAssessment:
    """Map a Flesch reading-ease score onto its assessment band."""
    for lower_bound, assessment in ASSESSMENT_BANDS:
        if flesch_reading_ease >= lower_bound:
            return assessment
    return ReadabilityAssessment.VERY_DIFFICULT


class ReadabilityScorer:
    """
    Scores formality, emotion and readability of a piece of text.

    Every method is a pure function of its input and the lexicon, so one
    scorer can be shared between engines.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.logger = structlog.get_logger(__name__)
        self.lexicon = lexicon or DEFAULT_LEXICON

    def calculate_formality(self, text: str) -> float:
        """
        Formality in [0, 10].

        Returns the share of formal markers among all formal and informal
        markers, scaled to 10, or 5 when the text has neither.
        """
        formal_count = count_occurrences(text, self.lexicon.formal_indicators)
        informal_count = count_occurrences(text, self.lexicon.informal_indicators)

        total = formal_count + informal_count
        if total == 0:
            return NEUTRAL_FORMALITY

        return min(10.0, max(0.0, formal_count / total * 10))

    def analyze_emotional_tone(self, text: str) -> Optional[EmotionalTone]:
        """Emotional valence of the text, or None when no emotional words occur."""
        positive_count = count_occurrences(text, self.lexicon.positive_words)
        negative_count = count_occurrences(text, self.lexicon.negative_words)

        total = positive_count + negative_count
        if total == 0:
            return None

        if positive_count > negative_count * 2:
            valence = EmotionalValence.POSITIVE
        elif negative_count > positive_count * 2:
            valence = EmotionalValence.NEGATIVE
        elif positive_count > 0 and negative_count > 0:
            valence = EmotionalValence.MIXED
        else:
            valence = EmotionalValence.NEUTRAL

        dominant_emotions = []
        if positive_count > 0:
            dominant_emotions.append("positive")
        if negative_count > 0:
            dominant_emotions.append("negative")

        density = total / max(len(tokens(text)), 1)

        return EmotionalTone(
            valence=valence,
            intensity=min(1.0, density * 10),
            dominant_emotions=dominant_emotions,
            consistency=0.8,
        )

    def calculate_readability(self, text: str) -> ReadabilityScores:
        """Calculate the standard readability indices for the text."""
        text_words = words(text)
        sentences = split_sentences(text)

        if not text_words or not sentences:
            return self._neutral_readability()

        word_count = len(text_words)
        sentence_count = len(sentences)
        syllables = [count_syllables(word) for word in text_words]
        polysyllables = sum(1 for count in syllables if count >= COMPLEX_WORD_SYLLABLES)
        long_words = sum(1 for word in text_words if len(word) > LONG_WORD_LENGTH)
        letters = sum(1 for char in text if char.isalnum())

        avg_sentence_length = word_count / sentence_count
        avg_syllables_per_word = sum(syllables) / word_count
        letters_per_word = letters / word_count

        flesch_reading_ease = max(0.0, min(
            100.0, 206.835 - (1.015 * avg_sentence_length) - (84.6 * avg_syllables_per_word)
        ))
        flesch_kincaid = max(1.0, min(
            12.0, (0.39 * avg_sentence_length) + (11.8 * avg_syllables_per_word) - 15.59
        ))
        gunning_fog = max(1.0, 0.4 * (avg_sentence_length + 100 * long_words / word_count))
        coleman_liau = max(
            1.0,
            (5.88 * letters_per_word) - (29.6 * sentence_count / word_count) - 15.8,
        )
        smog = max(1.0, 1.043 * math.sqrt(polysyllables * 30 / sentence_count) + 3.1291)
        automated_readability = max(
            1.0,
            (4.71 * letters_per_word) + (0.5 * avg_sentence_length) - 21.43,
        )
        dale_chall = max(
            1.0,
            0.1579 * (polysyllables / word_count * 100) + (0.0496 * avg_sentence_length) + 3.6365,
        )

        assessment = assess_reading_ease(flesch_reading_ease)

        return ReadabilityScores(
            flesch_reading_ease=flesch_reading_ease,
            flesch_kincaid_grade_level=flesch_kincaid,
            gunning_fog_index=gunning_fog,
            coleman_liau_index=coleman_liau,
            smog_index=smog,
            automated_readability_index=automated_readability,
            dale_chall_score=dale_chall,
            assessment=assessment,
            target_audience_level=AUDIENCE_LEVELS[assessment],
        )

    def analyze_tone(self, text: str) -> ToneAnalysis:
        """Quick document-level tone classification."""
        formal_count = count_occurrences(text, self.lexicon.quick_formal_words)
        informal_count = count_occurrences(text, self.lexicon.quick_informal_words)
        academic_count = count_occurrences(text, self.lexicon.quick_academic_words)

        if academic_count > ACADEMIC_MARKER_THRESHOLD:
            primary_tone = ToneType.ACADEMIC
        elif formal_count > informal_count:
            primary_tone = ToneType.FORMAL
        elif informal_count > formal_count:
            primary_tone = ToneType.INFORMAL
        else:
            primary_tone = ToneType.NEUTRAL

        return ToneAnalysis(
            primary_tone=primary_tone,
            secondary_tones=[],
            consistency_score=0.8,
            appropriateness=Appropriateness.ADEQUATE,
        )

    def _neutral_readability(self) -> ReadabilityScores:
        assessment = assess_reading_ease(60.0)
        return ReadabilityScores(
            flesch_reading_ease=60.0,
            flesch_kincaid_grade_level=8.0,
            gunning_fog_index=8.0,
            coleman_liau_index=8.0,
            smog_index=8.0,
            automated_readability_index=8.0,
            dale_chall_score=8.0,
            assessment=assessment,
            target_audience_level=AUDIENCE_LEVELS[assessment],
        )
