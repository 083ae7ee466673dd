"""
Section extraction and hierarchy construction.

Turns raw text into an ordered list of sections whose spans partition the
document, then links them into a parent/child tree by heading level:
- Markdown-style ``#`` headings and short all-caps lines start sections
- Text before the first heading joins the first section
- Headingless text becomes a single "Document" section
- Skipped heading levels are reported as hierarchy issues
"""

import re
from collections import Counter
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

import structlog

from docintel.domain.schemas.analysis import Hierarchy, HierarchyIssue, Severity
from docintel.domain.schemas.document import Section
from .lexicon import DEFAULT_LEXICON, Lexicon
from .text import top_terms

logger = structlog.get_logger(__name__)

HEADING_MARKER = re.compile(r"^(#{1,6})\s")
MAX_CAPS_HEADING_LENGTH = 100
KEY_TOPIC_LIMIT = 5


def document_offset(section: Section, index: int) -> int:
    """
    Document offset of a position in a section's content.

    Content before ``heading_offset`` (preamble) maps straight onto the
    span; later content sits after the heading line.
    """
    if index < section.heading_offset:
        return section.start_index + index
    return section.start_index + section.heading_length + index


def document_span(section: Section, start: int, end: int) -> Tuple[int, int]:
    """Half-open document span of ``content[start:end]``."""
    begin = document_offset(section, start)
    if end <= start:
        return begin, begin
    return begin, document_offset(section, end - 1) + 1


@dataclass
class _HeadingLine:
    offset: int
    body_offset: int
    title: str
    level: int


class SectionExtractor:
    """Segments text into sections and builds the section hierarchy."""

    def __init__(self, lexicon: Optional[Lexicon] = None):
        self.logger = structlog.get_logger(__name__)
        self.lexicon = lexicon or DEFAULT_LEXICON
        self._topic_stop_words = frozenset(self.lexicon.stop_words + self.lexicon.theme_stop_words)

    def extract(self, text: str) -> Tuple[List[Section], Hierarchy]:
        """Extract sections and link them into a hierarchy."""
        return self.build_hierarchy(self.extract_sections(text))

    def extract_sections(self, text: str) -> List[Section]:
        """
        Split text into sections.

        Spans are half-open and contiguous: the first section starts at 0,
        every other section starts at its heading line, and each ends where
        the next begins. Always returns at least one section.
        """
        headings = self._find_headings(text)

        if not headings:
            sections = [
                Section(
                    id="section-1",
                    title="Document",
                    content=text,
                    start_index=0,
                    end_index=len(text),
                    level=1,
                    key_topics=self._key_topics(text),
                )
            ]
        else:
            sections = []
            for i, heading in enumerate(headings):
                start = 0 if i == 0 else heading.offset
                end = headings[i + 1].offset if i + 1 < len(headings) else len(text)
                # Preamble before the first heading stays with the first section
                content = text[start:heading.offset] + text[heading.body_offset:end]
                sections.append(
                    Section(
                        id=f"section-{i + 1}",
                        title=heading.title,
                        content=content,
                        start_index=start,
                        end_index=end,
                        level=heading.level,
                        key_topics=self._key_topics(content),
                        heading_offset=heading.offset - start,
                        heading_length=heading.body_offset - heading.offset,
                    )
                )

        self.logger.debug(
            "Sections extracted",
            section_count=len(sections),
            heading_count=len(headings),
            text_length=len(text),
        )
        return sections

    def build_hierarchy(self, sections: List[Section]) -> Tuple[List[Section], Hierarchy]:
        """
        Link sections into a parent/child tree.

        Section j is a direct child of section i when it sits exactly one
        level deeper and no section at or above i's level comes between them.
        Returns linked copies of the sections together with the hierarchy.
        """
        child_map: Dict[str, List[str]] = {}
        parent_map: Dict[str, str] = {}

        for i, section in enumerate(sections):
            children: List[str] = []
            for candidate in sections[i + 1:]:
                if candidate.level <= section.level:
                    break
                if candidate.level == section.level + 1:
                    children.append(candidate.id)
                    parent_map[candidate.id] = section.id
            child_map[section.id] = children

        linked = [
            section.model_copy(
                update={
                    "child_ids": child_map.get(section.id, []),
                    "parent_id": parent_map.get(section.id),
                }
            )
            for section in sections
        ]

        hierarchy = Hierarchy(
            root_sections=[s for s in linked if s.level == 1],
            max_depth=max([s.level for s in linked] + [1]),
            is_balanced=self._check_balance(linked),
            issues=self._detect_hierarchy_issues(linked),
        )
        return linked, hierarchy

    def _find_headings(self, text: str) -> List[_HeadingLine]:
        headings: List[_HeadingLine] = []
        offset = 0
        for line in text.splitlines(keepends=True):
            stripped = line.strip()
            level = self._heading_level(stripped)
            if level is not None:
                headings.append(
                    _HeadingLine(
                        offset=offset,
                        body_offset=offset + len(line),
                        title=HEADING_MARKER.sub("", stripped, count=1).strip(),
                        level=level,
                    )
                )
            offset += len(line)
        return headings

    def _heading_level(self, stripped: str) -> Optional[int]:
        marker = HEADING_MARKER.match(stripped)
        if marker:
            return len(marker.group(1))
        # Short all-caps line with at least one letter
        if (
            stripped
            and len(stripped) < MAX_CAPS_HEADING_LENGTH
            and stripped == stripped.upper()
            and stripped != stripped.lower()
        ):
            return 1
        return None

    def _key_topics(self, content: str) -> List[str]:
        return top_terms(content, self._topic_stop_words, min_length=4, limit=KEY_TOPIC_LIMIT)

    def _check_balance(self, sections: List[Section]) -> bool:
        """No level may hold more than three times the per-level average."""
        level_counts = Counter(section.level for section in sections)
        if not level_counts:
            return True
        average = len(sections) / len(level_counts)
        return all(count <= average * 3 for count in level_counts.values())

    def _detect_hierarchy_issues(self, sections: List[Section]) -> List[HierarchyIssue]:
        issues: List[HierarchyIssue] = []
        for prev, curr in zip(sections, sections[1:]):
            if curr.level > prev.level + 1:
                issues.append(
                    HierarchyIssue(
                        type="heading-skipped-level",
                        description=f"Heading level jumps from {prev.level} to {curr.level}",
                        section_id=curr.id,
                        severity=Severity.MEDIUM,
                        suggested_fix=f"Consider using level {prev.level + 1} instead of {curr.level}",
                    )
                )
        return issues
