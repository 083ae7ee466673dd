"""
Rule-based text rewriting.

Rewrites run in bounded iterations. Each iteration applies tone adjustment
towards the target tone followed by the clarity, conciseness and jargon
passes, and the loop stops early once an iteration changes nothing.
"""

from typing import Dict, List, Optional, Tuple

import structlog

from docintel.domain.schemas.analysis import (
    ChangeImpact,
    RewriteChange,
    RewriteChangeType,
    RewriteResult,
    RewriteStatistics,
)
from docintel.domain.schemas.document import Section, ToneType
from docintel.domain.schemas.options import (
    ClarityLevel,
    ConcisenessLevel,
    RewriteOptions,
    TargetAudience,
)
from .lexicon import DEFAULT_LEXICON, Lexicon, Pairs
from .readability import ReadabilityScorer
from .text import match_case, replace_term, split_sentences, term_pattern, words

logger = structlog.get_logger(__name__)

REWRITE_CONFIDENCE = 0.8

# (substitution pairs, explanation) applied in order
ToneTable = List[Tuple[Pairs, str]]


class AutoRewriteEngine:
    """
    Iterative rewrite engine.

    Tone changes are whole-word, case-insensitive substitutions from fixed
    tables; every replaced occurrence is reported as a ``RewriteChange``.
    """

    def __init__(
        self,
        lexicon: Optional[Lexicon] = None,
        scorer: Optional[ReadabilityScorer] = None,
    ):
        self.logger = structlog.get_logger(__name__)
        self.lexicon = lexicon or DEFAULT_LEXICON
        self.scorer = scorer or ReadabilityScorer(self.lexicon)
        self._tone_tables = self._initialize_tone_tables()

    def _initialize_tone_tables(self) -> Dict[ToneType, ToneTable]:
        """Substitution tables for each supported target tone."""
        return {
            ToneType.FORMAL: [
                (self.lexicon.contractions, "Replaced informal contraction with formal equivalent"),
                (self.lexicon.informal_phrases, "Replaced informal phrase with formal equivalent"),
            ],
            ToneType.INFORMAL: [
                (self.lexicon.expansions, "Replaced formal phrase with informal contraction"),
            ],
            ToneType.ACADEMIC: [
                (self.lexicon.academic_verbs, "Replaced common term with academic equivalent"),
            ],
            ToneType.PERSUASIVE: [
                (self.lexicon.persuasive_adjectives, "Replaced neutral adjective with persuasive equivalent"),
            ],
            ToneType.CONVERSATIONAL: [],
        }

    def rewrite_section(
        self,
        section: Section,
        options: Optional[RewriteOptions] = None,
    ) -> RewriteResult:
        """Rewrite a section's content."""
        return self.rewrite_text(section.content, options)

    def rewrite_text(
        self,
        text: str,
        options: Optional[RewriteOptions] = None,
    ) -> RewriteResult:
        """
        Rewrite text towards the requested tone, clarity and conciseness.

        Args:
            text: Text to rewrite
            options: Rewrite options

        Returns:
            Rewrite result with the changes applied, statistics and the
            tone before and after rewriting
        """
        options = options or RewriteOptions()
        rewritten = text
        changes: List[RewriteChange] = []

        tone_before = self.scorer.analyze_tone(text)

        for iteration in range(options.max_iterations):
            iteration_changes: List[RewriteChange] = []

            if (
                options.target_tone != ToneType.NEUTRAL
                and tone_before.primary_tone != options.target_tone
            ):
                rewritten, tone_changes = self._adjust_tone(rewritten, options.target_tone)
                iteration_changes.extend(tone_changes)

            if options.clarity_level != ClarityLevel.TECHNICAL:
                rewritten, clarity_changes = self._improve_clarity(rewritten, options)
                iteration_changes.extend(clarity_changes)

            if options.conciseness_level != ConcisenessLevel.VERBOSE:
                rewritten, concise_changes = self._improve_conciseness(rewritten, options)
                iteration_changes.extend(concise_changes)

            if options.target_audience in (TargetAudience.GENERAL, TargetAudience.EXECUTIVE):
                rewritten, jargon_changes = self._reduce_jargon(rewritten, options)
                iteration_changes.extend(jargon_changes)

            changes.extend(iteration_changes)

            self.logger.debug(
                "Rewrite iteration complete",
                iteration=iteration + 1,
                change_count=len(iteration_changes),
            )

            if not iteration_changes:
                break

        return RewriteResult(
            original_text=text,
            rewritten_text=rewritten,
            changes=changes,
            statistics=self._calculate_statistics(text, rewritten),
            tone_before=tone_before,
            tone_after=self.scorer.analyze_tone(rewritten),
            confidence=REWRITE_CONFIDENCE,
        )

    def _adjust_tone(self, text: str, target_tone: ToneType) -> Tuple[str, List[RewriteChange]]:
        changes: List[RewriteChange] = []
        for pairs, explanation in self._tone_tables.get(target_tone, []):
            for find, replace in pairs:
                for match in term_pattern(find).finditer(text):
                    changes.append(
                        RewriteChange(
                            type=RewriteChangeType.TONE_ADJUSTMENT,
                            original_segment=match.group(0),
                            rewritten_segment=match_case(match.group(0), replace),
                            explanation=explanation,
                            impact=ChangeImpact.MINOR,
                        )
                    )
                text, _ = replace_term(text, find, replace)
        return text, changes

    def _improve_clarity(
        self, text: str, options: RewriteOptions
    ) -> Tuple[str, List[RewriteChange]]:
        # No clarity rules yet; sentence restructuring needs a parser
        return text, []

    def _improve_conciseness(
        self, text: str, options: RewriteOptions
    ) -> Tuple[str, List[RewriteChange]]:
        return text, []

    def _reduce_jargon(
        self, text: str, options: RewriteOptions
    ) -> Tuple[str, List[RewriteChange]]:
        return text, []

    def _calculate_statistics(self, original: str, rewritten: str) -> RewriteStatistics:
        original_words = len(words(original))
        rewritten_words = len(words(rewritten))
        original_sentences = len(split_sentences(original))
        rewritten_sentences = len(split_sentences(rewritten))

        word_reduction = (
            (original_words - rewritten_words) / original_words * 100
            if original_words
            else 0.0
        )
        original_avg = original_words / max(1, original_sentences)
        rewritten_avg = rewritten_words / max(1, rewritten_sentences)

        return RewriteStatistics(
            word_reduction_percent=word_reduction,
            sentence_count_change=rewritten_sentences - original_sentences,
            avg_sentence_length_change=rewritten_avg - original_avg,
        )
