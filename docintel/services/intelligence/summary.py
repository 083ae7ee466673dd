"""
Extractive summarisation for sections and whole documents.

Summaries are assembled from the highest-scoring sentences of the source
text, then cleaned up, adjusted for the target audience and trimmed to the
target word count. Document summaries add an executive summary, key themes,
main conclusions and recommendations drawn from well-known section titles.
"""

import re
from typing import Dict, List, Optional, Sequence

import numpy as np
import structlog

from docintel.core.config import settings
from docintel.domain.schemas.analysis import (
    DocumentSummaryResult,
    GeneratedSummary,
    SummaryStatistics,
)
from docintel.domain.schemas.document import (
    Appropriateness,
    Section,
    ToneAnalysis,
    ToneType,
)
from docintel.domain.schemas.options import SummaryOptions, TargetAudience
from .lexicon import DEFAULT_LEXICON, Lexicon
from .text import (
    DIGIT,
    any_term,
    count_occurrences,
    ends_with_terminal,
    replace_term,
    split_sentences,
    term_pattern,
    words,
)

logger = structlog.get_logger(__name__)

EXECUTIVE_SUMMARY_MAX_LENGTH = 150
EXECUTIVE_INTRO_TITLES = ("introduction", "executive")
KEY_POINT_LIMIT = 5
KEY_THEME_LIMIT = 5
CONCLUSION_LIMIT = 3
RECOMMENDATION_LIMIT = 5
SHORT_SUMMARY_RATIO = 0.7
SUMMARY_TONE_THRESHOLD = 2

KEY_POINT_PATTERNS = (
    re.compile(r"^[ \t]*•[ \t]*(.+)$", re.MULTILINE),
    re.compile(r"^[ \t]*-[ \t]+(.+)$", re.MULTILINE),
    re.compile(r"^[ \t]*\d+\.[ \t]*(.+)$", re.MULTILINE),
    re.compile(r"^[ \t]*\*[ \t]+(.+)$", re.MULTILINE),
    re.compile(
        r"(?:key|important|critical|essential|significant|major)\s+"
        r"(?:point|takeaway|finding|result):?\s*(.+)",
        re.IGNORECASE,
    ),
)
RECOMMENDATION_ITEM = re.compile(r"^[ \t]*(?:•|\d+\.|-|\*)[ \t]*(.+)$", re.MULTILINE)
MISSING_SPACE_AFTER_PUNCTUATION = re.compile(r"([.!?])([A-Za-z])")
WHITESPACE_RUN = re.compile(r"\s+")
TERMINAL_MARKS = ".!?"


class AutoSummaryEngine:
    """
    Rule-based extractive summary engine.

    Sentences are ranked by position, numbers, conclusion and importance
    markers and length; the top sentences are kept in their original order.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.logger = structlog.get_logger(__name__)
        self.lexicon = lexicon or DEFAULT_LEXICON

    def generate_section_summary(
        self,
        section: Section,
        options: Optional[SummaryOptions] = None,
    ) -> GeneratedSummary:
        """
        Summarise a single section.

        Args:
            section: Section to summarise
            options: Summary options; the target length defaults to the
                section summary length from settings

        Returns:
            Generated summary covering the section
        """
        options = options or SummaryOptions()
        target_length = options.target_length or settings.DEFAULT_SECTION_SUMMARY_LENGTH
        return self._summarize(section.content, options, target_length, section)

    def generate_document_summary(
        self,
        sections: List[Section],
        options: Optional[SummaryOptions] = None,
    ) -> DocumentSummaryResult:
        """
        Summarise a whole document.

        Args:
            sections: Document sections in document order
            options: Summary options; the target length defaults to the
                document summary length from settings

        Returns:
            Executive, per-section and full-document summaries together
            with key themes, main conclusions and recommendations
        """
        options = options or SummaryOptions()
        target_length = options.target_length or settings.DEFAULT_DOCUMENT_SUMMARY_LENGTH

        self.logger.info(
            "Generating document summary",
            section_count=len(sections),
            target_length=target_length,
            detail_level=options.detail_level.value,
        )

        result = DocumentSummaryResult(
            executive_summary=self._executive_summary(sections, options, target_length),
            section_summaries=self._section_summaries(sections, options),
            full_document_summary=self._summarize(
                self._document_content(sections), options, target_length
            ),
            key_themes=self._key_themes(sections),
            main_conclusions=self._main_conclusions(sections),
            recommendations=self._recommendations(sections),
        )

        self.logger.debug(
            "Document summary generated",
            summary_words=result.full_document_summary.statistics.word_count,
            theme_count=len(result.key_themes),
            conclusion_count=len(result.main_conclusions),
        )
        return result

    def extract_key_sentences(self, content: str, max_sentences: int) -> List[str]:
        """
        Top-scoring sentences in their original order, each ending in ".".

        Ties keep document order.
        """
        sentences = split_sentences(content)
        if len(sentences) <= max_sentences:
            return [s.strip() + "." for s in sentences]

        scored = [
            (index, self._score_sentence(sentence, index, len(sentences)))
            for index, sentence in enumerate(sentences)
        ]
        top = sorted(scored, key=lambda item: -item[1])[:max_sentences]
        return [sentences[index].strip() + "." for index, _ in sorted(top)]

    def extract_key_points(self, content: str, max_points: int) -> List[str]:
        """Bulleted, numbered or flagged points, else the key sentences."""
        points: List[str] = []
        for pattern in KEY_POINT_PATTERNS:
            for match in pattern.finditer(content):
                point = match.group(1).strip()
                if point:
                    points.append(point)

        if not points:
            fallback = self.extract_key_sentences(content, min(KEY_POINT_LIMIT, max_points))
            return [self._strip_period(s) for s in fallback]

        return list(dict.fromkeys(points))[:max_points]

    def _score_sentence(self, sentence: str, index: int, total: int) -> int:
        score = 0
        if index == 0:
            score += 3
        if index == total - 1:
            score += 2
        if DIGIT.search(sentence):
            score += 2
        if any_term(sentence, self.lexicon.conclusion_markers):
            score += 2
        if any_term(sentence, self.lexicon.importance_markers):
            score += 1
        if 8 < len(words(sentence)) < 30:
            score += 1
        return score

    def _summarize(
        self,
        content: str,
        options: SummaryOptions,
        target_length: int,
        context_section: Optional[Section] = None,
    ) -> GeneratedSummary:
        sentence_limit = self.lexicon.detail_sentence_counts[options.detail_level.value]
        key_sentences = self.extract_key_sentences(content, sentence_limit)
        key_points = (
            self.extract_key_points(content, KEY_POINT_LIMIT)
            if options.include_key_points
            else []
        )

        summary = self._construct_summary(key_sentences, options, target_length)

        original_word_count = len(words(content))
        summary_word_count = len(words(summary))
        compression_ratio = summary_word_count / original_word_count if original_word_count else 0.0

        return GeneratedSummary(
            summary=summary,
            key_points=key_points,
            statistics=SummaryStatistics(
                word_count=summary_word_count,
                compression_ratio=compression_ratio,
                key_point_count=len(key_points),
                coverage=self._estimate_coverage(content, key_sentences),
            ),
            tone=self._summary_tone(summary),
            confidence=self._summary_confidence(content, summary, key_points),
            sections_covered=[context_section.id] if context_section else None,
        )

    def _construct_summary(
        self,
        key_sentences: List[str],
        options: SummaryOptions,
        target_length: int,
    ) -> str:
        summary = " ".join(key_sentences)

        if options.preserve_tone:
            summary = self._ensure_readability(summary)

        summary = self._adjust_for_audience(summary, options.target_audience)
        return self._control_length(summary, key_sentences, target_length).strip()

    def _control_length(self, summary: str, key_sentences: List[str], target_length: int) -> str:
        summary_words = words(summary)

        if len(summary_words) > target_length:
            summary = " ".join(summary_words[:target_length])
            if not ends_with_terminal(summary):
                last_terminal = max(summary.rfind(mark) for mark in TERMINAL_MARKS)
                if last_terminal > 0:
                    summary = summary[:last_terminal + 1]
                else:
                    summary += "."
        elif len(summary_words) < target_length * SHORT_SUMMARY_RATIO and len(key_sentences) > 1:
            extended = f"{summary} {self.lexicon.continuity_sentence}"
            if len(words(extended)) <= target_length:
                summary = extended

        return summary

    def _ensure_readability(self, text: str) -> str:
        improved = WHITESPACE_RUN.sub(" ", text)
        improved = MISSING_SPACE_AFTER_PUNCTUATION.sub(r"\1 \2", improved)
        if improved:
            improved = improved[0].upper() + improved[1:]
        return improved

    def _adjust_for_audience(self, text: str, audience: TargetAudience) -> str:
        if audience == TargetAudience.EXECUTIVE:
            return self._make_concise(text)
        if audience == TargetAudience.TECHNICAL:
            return text
        if audience == TargetAudience.ACADEMIC:
            return self._substitute(text, self.lexicon.contractions)
        return self._substitute(text, self.lexicon.plain_words)

    def _make_concise(self, text: str) -> str:
        concise = text
        for filler in self.lexicon.filler_phrases:
            concise = term_pattern(filler).sub("", concise)

        # Redundant pairs keep their first word
        for phrase in self.lexicon.redundant_phrases:
            concise = term_pattern(phrase).sub(lambda match: match.group(0).split()[0], concise)

        return WHITESPACE_RUN.sub(" ", concise).strip()

    def _substitute(self, text: str, pairs: Sequence) -> str:
        for find, replace in pairs:
            text, _ = replace_term(text, find, replace)
        return text

    def _summary_tone(self, text: str) -> ToneAnalysis:
        counts = {
            ToneType.FORMAL: count_occurrences(text, self.lexicon.summary_formal_words),
            ToneType.INFORMAL: count_occurrences(text, self.lexicon.summary_informal_words),
            ToneType.ACADEMIC: count_occurrences(text, self.lexicon.summary_academic_words),
            ToneType.PERSUASIVE: count_occurrences(text, self.lexicon.summary_persuasive_words),
        }

        if counts[ToneType.ACADEMIC] > SUMMARY_TONE_THRESHOLD:
            primary_tone = ToneType.ACADEMIC
        elif counts[ToneType.PERSUASIVE] > SUMMARY_TONE_THRESHOLD:
            primary_tone = ToneType.PERSUASIVE
        elif counts[ToneType.FORMAL] > counts[ToneType.INFORMAL]:
            primary_tone = ToneType.FORMAL
        elif counts[ToneType.INFORMAL] > counts[ToneType.FORMAL]:
            primary_tone = ToneType.INFORMAL
        else:
            primary_tone = ToneType.NEUTRAL

        return ToneAnalysis(
            primary_tone=primary_tone,
            secondary_tones=[tone.value for tone, count in counts.items() if count > 0],
            consistency_score=0.8,
            appropriateness=Appropriateness.ADEQUATE,
        )

    def _estimate_coverage(self, content: str, key_sentences: List[str]) -> float:
        if not key_sentences:
            return 0.0
        original_sentences = split_sentences(content)
        if not original_sentences:
            return 0.0

        sentence_coverage = len(key_sentences) / len(original_sentences)
        original_words = len(words(content))
        key_words = len(words(" ".join(key_sentences)))
        word_coverage = key_words / original_words if original_words else 0.0

        return sentence_coverage * 0.7 + word_coverage * 0.3

    def _summary_confidence(self, content: str, summary: str, key_points: List[str]) -> float:
        confidence = 0.7

        original_word_count = len(words(content))
        if original_word_count > 0:
            compression_ratio = len(words(summary)) / original_word_count
            if 0.1 <= compression_ratio <= 0.3:
                confidence += 0.1
            elif 0.3 < compression_ratio <= 0.5:
                confidence += 0.05
            elif compression_ratio < 0.1:
                confidence -= 0.05
            else:
                confidence -= 0.1

        if len(key_points) >= 3:
            confidence += 0.1
        elif key_points:
            confidence += 0.05
        else:
            confidence -= 0.05

        if ends_with_terminal(summary):
            confidence += 0.05

        sentences = split_sentences(summary)
        if len(sentences) > 1:
            variance = float(np.var([len(words(s)) for s in sentences]))
            if 5 < variance < 50:
                confidence += 0.05

        return max(0.0, min(1.0, confidence))

    def _executive_summary(
        self,
        sections: List[Section],
        options: SummaryOptions,
        target_length: int,
    ) -> GeneratedSummary:
        intro = next(
            (
                s for s in sections
                if self._title_has(s, EXECUTIVE_INTRO_TITLES) or s.level == 1
            ),
            None,
        )
        conclusion = next(
            (s for s in sections if self._title_has(s, self.lexicon.conclusion_titles)),
            None,
        )
        key_sections = [s for s in sections if s.key_topics][:3]

        parts: List[str] = []
        if intro:
            parts.append(" ".join(self.extract_key_sentences(intro.content, 2)))
        for section in key_sections:
            points = self.extract_key_points(section.content, 2)
            if points:
                parts.append(" ".join(points))
        if conclusion:
            parts.append(" ".join(self.extract_key_sentences(conclusion.content, 2)))

        content = " ".join(parts)
        if not content.strip() and sections:
            first, last = sections[0], sections[-1]
            content = " ".join(self.extract_key_sentences(first.content, 2))
            if last is not first:
                content += " " + " ".join(self.extract_key_sentences(last.content, 2))

        return self._summarize(
            content,
            options,
            min(target_length, EXECUTIVE_SUMMARY_MAX_LENGTH),
        )

    def _section_summaries(
        self,
        sections: List[Section],
        options: SummaryOptions,
    ) -> Dict[str, GeneratedSummary]:
        return {
            section.id: self.generate_section_summary(section, options)
            for section in sections
        }

    def _document_content(self, sections: List[Section]) -> str:
        ordered = sorted(sections, key=lambda s: s.start_index)
        return "\n\n".join(section.content for section in ordered)

    def _key_themes(self, sections: List[Section]) -> List[str]:
        themes = [topic for section in sections for topic in section.key_topics]
        if not themes:
            themes = [section.title for section in sections if len(section.title) > 3]
        return list(dict.fromkeys(themes))[:KEY_THEME_LIMIT]

    def _main_conclusions(self, sections: List[Section]) -> List[str]:
        conclusions: List[str] = []
        for section in sections:
            if self._title_has(section, self.lexicon.finding_titles):
                conclusions.extend(
                    self._strip_period(s) for s in self.extract_key_sentences(section.content, 3)
                )

        if not conclusions and sections:
            conclusions.extend(
                self._strip_period(s) for s in self.extract_key_sentences(sections[-1].content, 2)
            )

        return conclusions[:CONCLUSION_LIMIT]

    def _recommendations(self, sections: List[Section]) -> Optional[List[str]]:
        recommendations: List[str] = []
        for section in sections:
            if not self._title_has(section, self.lexicon.recommendation_titles):
                continue

            items = [
                match.group(1).strip()
                for match in RECOMMENDATION_ITEM.finditer(section.content)
                if match.group(1).strip()
            ]
            if not items:
                items = [
                    self._strip_period(s)
                    for s in self.extract_key_sentences(section.content, 3)
                ]
            recommendations.extend(items)

        return recommendations[:RECOMMENDATION_LIMIT] or None

    @staticmethod
    def _title_has(section: Section, terms: Sequence[str]) -> bool:
        title = section.title.lower()
        return any(term in title for term in terms)

    @staticmethod
    def _strip_period(sentence: str) -> str:
        return sentence[:-1] if sentence.endswith(".") else sentence
