"""
Cross-section consistency detection.

Runs six independent checks over the full section list:
- Terminology: one concept written with several word forms
- Formatting: mixed heading capitalisation or mixed list styles
- Style: formal and informal sections in the same document
- Factual: statements that negate or contradict each other
- Temporal: similar events placed in different years
- Numerical: the same measurement reported with different values
"""

import re
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import structlog

from docintel.domain.schemas.analysis import (
    ConsistencyCheck,
    ConsistencyResult,
    ConsistencyType,
    Impact,
    Inconsistency,
    TextOccurrence,
    TextSpan,
)
from docintel.domain.schemas.document import Section
from .extractor import document_span
from .lexicon import DEFAULT_LEXICON, Lexicon
from .text import (
    DIGIT,
    SENTENCE_BREAK,
    any_term,
    contains_term,
    count_present,
    find_term,
    snippet,
    tokens,
)

logger = structlog.get_logger(__name__)

CHECK_ORDER = (
    ConsistencyType.TERMINOLOGY,
    ConsistencyType.FORMATTING,
    ConsistencyType.STYLE,
    ConsistencyType.FACTUAL,
    ConsistencyType.TEMPORAL,
    ConsistencyType.NUMERICAL,
)

NUMBER_PATTERN = re.compile(r"\b\d+(?:\.\d+)?\b")
YEAR_PATTERN = re.compile(r"\d{4}")
BULLET_PATTERN = re.compile(r"•|- |\* ")
NUMBERED_PATTERN = re.compile(r"\d+\.\s")

MIN_TERM_LENGTH = 4
MIN_STATEMENT_LENGTH = 10
NEGATION_PREFIX_LENGTH = 10
UNIT_WINDOW = 10
EVENT_OVERLAP_THRESHOLD = 0.3
NUMERICAL_DIFF_THRESHOLD = 10.0
TIMELINE_GAP_THRESHOLD = 365

EMPTY_SPAN = TextSpan(start_index=0, end_index=0)


@dataclass
class _Fragment:
    """Sentence fragment with its document span."""
    text: str
    start: int
    end: int


@dataclass
class _Measurement:
    value: float
    unit: str
    context: str
    location: TextSpan


def _sentence_fragments(section: Section) -> List[_Fragment]:
    content = section.content
    bounds = []
    position = 0
    for match in SENTENCE_BREAK.finditer(content):
        bounds.append((position, match.start()))
        position = match.end()
    bounds.append((position, len(content)))
    return [
        _Fragment(content[start:end], *document_span(section, start, end))
        for start, end in bounds
    ]


def _format_number(value: float) -> str:
    return str(int(value)) if value.is_integer() else str(value)


def _occurrence(text: str, start: int, end: int) -> TextOccurrence:
    return TextOccurrence(text=text, location=TextSpan(start_index=start, end_index=end))


class CrossSectionConsistencyEngine:
    """
    Detects inconsistencies across document sections.

    Checks are dispatched through a type-to-function table so each can be
    run alone with ``run_check``. Pairwise scans iterate in ascending index
    order, so repeated runs report identical, identically ordered pairs.
    """

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.logger = structlog.get_logger(__name__)
        self.lexicon = lexicon or DEFAULT_LEXICON
        self._initialize_patterns()
        self._checks: Dict[ConsistencyType, Callable[[List[Section]], ConsistencyCheck]] = {
            ConsistencyType.TERMINOLOGY: self._check_terminology,
            ConsistencyType.FORMATTING: self._check_formatting,
            ConsistencyType.STYLE: self._check_style,
            ConsistencyType.FACTUAL: self._check_factual,
            ConsistencyType.TEMPORAL: self._check_temporal,
            ConsistencyType.NUMERICAL: self._check_numerical,
        }

    def _initialize_patterns(self) -> None:
        """Compile suffix, date and unit patterns from the lexicon."""
        self.suffix_pattern = re.compile(self.lexicon.term_suffix_pattern)
        months = "|".join(self.lexicon.months)
        self.time_patterns = [
            re.compile(r"\b(in|during|on)\s+\d{4}\b", re.IGNORECASE),
            re.compile(rf"\b({months})\s+\d{{4}}\b", re.IGNORECASE),
            re.compile(r"\b\d{1,2}/\d{1,2}/\d{4}\b"),
            re.compile(r"\b(before|after|since|until)\s+\d{4}\b", re.IGNORECASE),
        ]
        # Alphabetic units must stand alone; symbols may touch the number
        self.unit_patterns = [
            (unit, re.compile(rf"(?<![A-Za-z]){re.escape(unit)}(?![A-Za-z])" if unit.isalpha() else re.escape(unit)))
            for unit in self.lexicon.measurement_units
        ]

    def analyze_consistency(self, sections: List[Section]) -> List[ConsistencyCheck]:
        """Run all six checks in their fixed order."""
        checks = [self._checks[check_type](sections) for check_type in CHECK_ORDER]

        self.logger.debug(
            "Consistency analysis completed",
            section_count=len(sections),
            inconsistency_count=sum(len(check.inconsistencies) for check in checks),
        )
        return checks

    def run_check(self, check_type: ConsistencyType, sections: List[Section]) -> ConsistencyCheck:
        """Run a single consistency check."""
        return self._checks[ConsistencyType(check_type)](sections)

    def _build_check(
        self,
        check_type: ConsistencyType,
        inconsistencies: List[Inconsistency],
        impact: Impact,
    ) -> ConsistencyCheck:
        return ConsistencyCheck(
            type=check_type,
            result=ConsistencyResult.INCONSISTENT if inconsistencies else ConsistencyResult.CONSISTENT,
            inconsistencies=inconsistencies,
            impact=impact,
        )

    # ------------------------------------------------------------------
    # Terminology
    # ------------------------------------------------------------------

    def _check_terminology(self, sections: List[Section]) -> ConsistencyCheck:
        inconsistencies: List[Inconsistency] = []

        for variations in self._extract_term_variations(sections).values():
            preferred = min(variations, key=len)
            for i, first in enumerate(variations):
                for second in variations[i + 1:]:
                    first_occurrence = self._find_term_occurrence(sections, first)
                    second_occurrence = self._find_term_occurrence(sections, second)
                    if first_occurrence is None or second_occurrence is None:
                        continue
                    inconsistencies.append(
                        Inconsistency(
                            type=ConsistencyType.TERMINOLOGY,
                            first_occurrence=first_occurrence,
                            second_occurrence=second_occurrence,
                            suggested_correction=f'Use consistent terminology: prefer "{preferred}"',
                        )
                    )

        if len(inconsistencies) > 3:
            impact = Impact.HIGH
        elif inconsistencies:
            impact = Impact.MEDIUM
        else:
            impact = Impact.LOW
        return self._build_check(ConsistencyType.TERMINOLOGY, inconsistencies, impact)

    def _extract_term_variations(self, sections: List[Section]) -> Dict[str, List[str]]:
        """Group words sharing a suffix-stripped base; keep groups with several forms."""
        term_map: Dict[str, List[str]] = {}
        for section in sections:
            for word in tokens(section.content):
                if len(word) <= MIN_TERM_LENGTH:
                    continue
                base = self.suffix_pattern.sub("", word, count=1)
                variants = term_map.setdefault(base, [])
                if word not in variants:
                    variants.append(word)
        return {base: variants for base, variants in term_map.items() if len(variants) > 1}

    def _find_term_occurrence(self, sections: List[Section], term: str) -> Optional[TextOccurrence]:
        for section in sections:
            match = find_term(section.content, term)
            if match:
                return _occurrence(match.group(0), *document_span(section, match.start(), match.end()))
        return None

    # ------------------------------------------------------------------
    # Formatting
    # ------------------------------------------------------------------

    def _check_formatting(self, sections: List[Section]) -> ConsistencyCheck:
        inconsistencies: List[Inconsistency] = []

        titles = [section.title for section in sections if section.title]
        styles = {self._heading_style(title) for title in titles}
        if len(styles) > 1:
            inconsistencies.append(
                Inconsistency(
                    type=ConsistencyType.FORMATTING,
                    first_occurrence=TextOccurrence(text=titles[0], location=EMPTY_SPAN),
                    second_occurrence=TextOccurrence(text=titles[1], location=EMPTY_SPAN),
                    suggested_correction="Use consistent heading styles (same capitalization, punctuation)",
                )
            )

        bullet = self._find_list_item(sections, BULLET_PATTERN)
        numbered = self._find_list_item(sections, NUMBERED_PATTERN)
        if bullet and numbered:
            inconsistencies.append(
                Inconsistency(
                    type=ConsistencyType.FORMATTING,
                    first_occurrence=bullet,
                    second_occurrence=numbered,
                    suggested_correction="Use consistent list formatting (bullets vs numbers, indentation)",
                )
            )

        return self._build_check(ConsistencyType.FORMATTING, inconsistencies, Impact.MEDIUM)

    @staticmethod
    def _heading_style(title: str) -> str:
        if title == title.upper():
            return "ALL_CAPS"
        if title[:1].isupper() and any(char.islower() for char in title):
            return "Title_Case"
        if title[:1].islower():
            return "sentence_case"
        return "mixed"

    @staticmethod
    def _find_list_item(sections: List[Section], pattern: re.Pattern) -> Optional[TextOccurrence]:
        """Line holding the first list marker matching the pattern."""
        for section in sections:
            match = pattern.search(section.content)
            if match:
                content = section.content
                line_start = content.rfind("\n", 0, match.start()) + 1
                line_end = content.find("\n", match.start())
                if line_end == -1:
                    line_end = len(content)
                return _occurrence(
                    content[line_start:line_end].strip(),
                    *document_span(section, line_start, line_end),
                )
        return None

    # ------------------------------------------------------------------
    # Style
    # ------------------------------------------------------------------

    def _check_style(self, sections: List[Section]) -> ConsistencyCheck:
        formal_example: Optional[TextOccurrence] = None
        informal_example: Optional[TextOccurrence] = None

        for section in sections:
            formal_matches = count_present(section.content, self.lexicon.style_formal_words)
            informal_matches = count_present(section.content, self.lexicon.style_informal_words)

            if formal_matches > informal_matches and formal_example is None:
                formal_example = self._marker_snippet(section, self.lexicon.style_formal_words)
            if informal_matches > formal_matches and informal_example is None:
                informal_example = self._marker_snippet(section, self.lexicon.style_informal_words)

        inconsistencies: List[Inconsistency] = []
        if formal_example and informal_example:
            inconsistencies.append(
                Inconsistency(
                    type=ConsistencyType.STYLE,
                    first_occurrence=formal_example,
                    second_occurrence=informal_example,
                    suggested_correction="Maintain consistent tone throughout document",
                )
            )
        return self._build_check(ConsistencyType.STYLE, inconsistencies, Impact.MEDIUM)

    def _marker_snippet(self, section: Section, markers: Tuple[str, ...]) -> Optional[TextOccurrence]:
        for marker in markers:
            match = find_term(section.content, marker)
            if match:
                text = snippet(section.content, match.start(), len(match.group(0)))
                return _occurrence(text, *document_span(section, match.start(), match.end()))
        return None

    # ------------------------------------------------------------------
    # Factual
    # ------------------------------------------------------------------

    def _check_factual(self, sections: List[Section]) -> ConsistencyCheck:
        statements = self._extract_factual_statements(sections)
        inconsistencies: List[Inconsistency] = []

        for i, first in enumerate(statements):
            for second in statements[i + 1:]:
                if self._are_contradictory(first.text.lower(), second.text.lower()):
                    inconsistencies.append(
                        Inconsistency(
                            type=ConsistencyType.FACTUAL,
                            first_occurrence=_occurrence(first.text, first.start, first.end),
                            second_occurrence=_occurrence(second.text, second.start, second.end),
                            suggested_correction="Review and reconcile contradictory statements",
                        )
                    )

        return self._build_check(ConsistencyType.FACTUAL, inconsistencies, Impact.HIGH)

    def _extract_factual_statements(self, sections: List[Section]) -> List[_Fragment]:
        statements = []
        for section in sections:
            for fragment in _sentence_fragments(section):
                sentence = fragment.text.strip()
                if len(sentence) <= MIN_STATEMENT_LENGTH:
                    continue
                if DIGIT.search(sentence) or any_term(sentence, self.lexicon.strong_verbs):
                    offset = fragment.text.index(sentence)
                    start = fragment.start + offset
                    statements.append(_Fragment(sentence, start, start + len(sentence)))
        return statements

    def _are_contradictory(self, first: str, second: str) -> bool:
        if self._negation_overlap(first, second) or self._negation_overlap(second, first):
            return True

        for word, opposite in (("always", "never"), ("all", "none")):
            if (contains_term(first, word) and contains_term(second, opposite)) or (
                contains_term(first, opposite) and contains_term(second, word)
            ):
                return True

        return False

    def _negation_overlap(self, negated: str, plain: str) -> bool:
        """A negated statement whose remainder shares its opening with a plain one."""
        for negation in self.lexicon.negation_words:
            match = find_term(negated, negation)
            if match is None or contains_term(plain, negation):
                continue
            base = " ".join((negated[:match.start()] + negated[match.end():]).split())
            other = plain.strip()
            if other[:NEGATION_PREFIX_LENGTH] in base or base[:NEGATION_PREFIX_LENGTH] in other:
                return True
        return False

    # ------------------------------------------------------------------
    # Temporal
    # ------------------------------------------------------------------

    def _check_temporal(self, sections: List[Section]) -> ConsistencyCheck:
        timeline = self._extract_timeline(sections)
        inconsistencies: List[Inconsistency] = []

        for i, (first, first_year) in enumerate(timeline):
            for second, second_year in timeline[i + 1:]:
                if not self._are_similar_events(first.text, second.text):
                    continue
                # Years are compared directly against a day threshold
                if abs(first_year - second_year) > TIMELINE_GAP_THRESHOLD:
                    inconsistencies.append(
                        Inconsistency(
                            type=ConsistencyType.TEMPORAL,
                            first_occurrence=_occurrence(first.text.strip(), first.start, first.end),
                            second_occurrence=_occurrence(second.text.strip(), second.start, second.end),
                            suggested_correction="Ensure chronological consistency in timeline",
                        )
                    )

        return self._build_check(ConsistencyType.TEMPORAL, inconsistencies, Impact.MEDIUM)

    def _extract_timeline(self, sections: List[Section]) -> List[Tuple[_Fragment, int]]:
        timeline = []
        for section in sections:
            for fragment in _sentence_fragments(section):
                for pattern in self.time_patterns:
                    match = pattern.search(fragment.text)
                    if match:
                        year = YEAR_PATTERN.search(match.group(0))
                        timeline.append((fragment, int(year.group(0))))
                        break
        return timeline

    @staticmethod
    def _are_similar_events(first: str, second: str) -> bool:
        first_words = [word for word in tokens(first) if len(word) > 3]
        second_words = [word for word in tokens(second) if len(word) > 3]

        overlap = sum(1 for word in first_words if word in second_words)
        total_unique = len(set(first_words) | set(second_words))
        return overlap > 0 and overlap / total_unique > EVENT_OVERLAP_THRESHOLD

    # ------------------------------------------------------------------
    # Numerical
    # ------------------------------------------------------------------

    def _check_numerical(self, sections: List[Section]) -> ConsistencyCheck:
        measurements = self._extract_measurements(sections)
        inconsistencies: List[Inconsistency] = []

        for i, first in enumerate(measurements):
            for second in measurements[i + 1:]:
                if first.unit != second.unit or not self._are_similar_contexts(first.context, second.context):
                    continue

                diff = abs(first.value - second.value)
                average = (first.value + second.value) / 2
                percent_diff = diff / average * 100 if average > 0 else 0.0
                if percent_diff <= NUMERICAL_DIFF_THRESHOLD:
                    continue

                first_text = f"{_format_number(first.value)}{first.unit}"
                second_text = f"{_format_number(second.value)}{second.unit}"
                description = f"{first_text} vs {second_text} ({percent_diff:.1f}% difference)"
                inconsistencies.append(
                    Inconsistency(
                        type=ConsistencyType.NUMERICAL,
                        first_occurrence=TextOccurrence(text=first_text, location=first.location),
                        second_occurrence=TextOccurrence(text=second_text, location=second.location),
                        suggested_correction=f"Verify numerical data: {description}",
                    )
                )

        return self._build_check(ConsistencyType.NUMERICAL, inconsistencies, Impact.HIGH)

    def _extract_measurements(self, sections: List[Section]) -> List[_Measurement]:
        """Numbers with a unit in the surrounding window, in document order."""
        measurements = []
        for section in sections:
            content = section.content
            fragments = _sentence_fragments(section)

            for match in NUMBER_PATTERN.finditer(content):
                window = content[max(0, match.start() - UNIT_WINDOW):match.end() + UNIT_WINDOW]
                unit = next((name for name, pattern in self.unit_patterns if pattern.search(window)), None)
                if unit is None:
                    continue

                position, end = document_span(section, match.start(), match.end())
                context = next(
                    (f.text for f in fragments if f.start <= position <= f.end),
                    window,
                )
                measurements.append(
                    _Measurement(
                        value=float(match.group(0)),
                        unit=unit,
                        context=context,
                        location=TextSpan(start_index=position, end_index=end),
                    )
                )
        return measurements

    @staticmethod
    def _are_similar_contexts(first: str, second: str) -> bool:
        first_words = [word for word in tokens(first) if len(word) > 3]
        second_words = set(word for word in tokens(second) if len(word) > 3)
        return sum(1 for word in first_words if word in second_words) >= 2
