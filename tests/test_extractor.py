"""
Tests for section extraction and hierarchy building.
"""
import pytest

from docintel.domain.schemas.analysis import Severity
from docintel.services.intelligence.extractor import SectionExtractor, document_offset, document_span


class TestSectionExtraction:
    """Test splitting text into sections."""

    def test_markdown_headings(self, extractor):
        """Test two level-1 markdown headings."""
        text = "# Introduction\nHello world.\n# Conclusion\nIn conclusion, good."

        sections, hierarchy = extractor.extract(text)

        assert [s.title for s in sections] == ["Introduction", "Conclusion"]
        assert all(s.level == 1 for s in sections)
        assert sections[0].content == "Hello world.\n"
        assert sections[1].content == "In conclusion, good."
        assert hierarchy.is_balanced
        assert hierarchy.issues == []

    def test_headingless_text(self, extractor):
        """Test text without headings becomes one Document section."""
        text = " ".join(f"word{i}" for i in range(40)) + "."

        sections = extractor.extract_sections(text)

        assert len(sections) == 1
        assert sections[0].title == "Document"
        assert sections[0].level == 1
        assert sections[0].start_index == 0
        assert sections[0].end_index == len(text)
        assert sections[0].content == text

    def test_empty_text(self, extractor):
        """Test empty input yields one empty section."""
        sections = extractor.extract_sections("")

        assert len(sections) == 1
        assert sections[0].content == ""
        assert sections[0].span_length == 0

    def test_caps_heading(self, extractor):
        """Test short all-caps lines start a level-1 section."""
        sections = extractor.extract_sections("OVERVIEW\nSome text here.\n")

        assert sections[0].title == "OVERVIEW"
        assert sections[0].level == 1
        assert sections[0].content == "Some text here.\n"

    def test_numeric_line_is_not_heading(self, extractor):
        """Test lines without letters never count as headings."""
        sections = extractor.extract_sections("2024\nplain text follows.\n")

        assert len(sections) == 1
        assert sections[0].title == "Document"

    def test_preamble_joins_first_section(self, extractor):
        """Test text before the first heading stays in the first section."""
        text = "Preface line.\n# Intro\nBody."

        sections = extractor.extract_sections(text)

        assert len(sections) == 1
        assert sections[0].title == "Intro"
        assert sections[0].start_index == 0
        assert sections[0].content == "Preface line.\nBody."

    def test_heading_levels(self, extractor):
        """Test the number of hash marks sets the level."""
        sections = extractor.extract_sections("# One\na\n## Two\nb\n### Three\nc\n")

        assert [s.level for s in sections] == [1, 2, 3]

    def test_key_topics(self, extractor):
        """Test key topics are the most frequent long words."""
        sections = extractor.extract_sections(
            "# Topic\nDatabase migration changed the database migration schema."
        )

        assert sections[0].key_topics[:2] == ["database", "migration"]
        assert "schema" in sections[0].key_topics


class TestSectionCoverage:
    """Test that section spans partition the document."""

    @pytest.mark.parametrize("text", [
        "",
        "plain text only",
        "# Introduction\nHello world.\n# Conclusion\nIn conclusion, good.",
        "Preamble.\n\n# A\nalpha\n## B\nbeta\n\nSUMMARY\nend",
    ])
    def test_spans_partition_text(self, extractor, text):
        """Test spans cover [0, len) with no gaps or overlaps."""
        sections = extractor.extract_sections(text)

        assert len(sections) >= 1
        assert sections[0].start_index == 0
        for current, following in zip(sections, sections[1:]):
            assert current.end_index == following.start_index
        assert sections[-1].end_index == len(text)

    def test_report_partition(self, report_sections, report_text):
        """Test the sample report is fully covered."""
        assert len(report_sections) == 5
        assert report_sections[0].start_index == 0
        assert report_sections[-1].end_index == len(report_text)

    def test_offsets_locate_body(self, report_sections, report_text):
        """Test content offsets map onto the section body."""
        for section in report_sections:
            start = document_offset(section, 0)
            assert report_text[start:start + len(section.content)] == section.content

    def test_preamble_offsets(self, extractor):
        """Test preamble and body offsets both map back onto the text."""
        text = "Preface line.\n# Intro\nBody text."
        section = extractor.extract_sections(text)[0]

        preface = section.content.index("Preface")
        body = section.content.index("Body")
        assert document_offset(section, preface) == text.index("Preface")
        assert document_offset(section, body) == text.index("Body")
        assert document_span(section, 0, len(section.content)) == (0, len(text))
        for start in range(len(section.content)):
            assert text[document_offset(section, start)] == section.content[start]

    def test_extraction_is_idempotent(self, extractor, report_text):
        """Test repeated extraction yields identical sections."""
        first, _ = extractor.extract(report_text)
        second, _ = extractor.extract(report_text)

        assert first == second


class TestHierarchy:
    """Test parent/child linking."""

    @pytest.fixture
    def nested_text(self):
        return "# A\ntext\n## B\ntext\n## C\ntext\n# D\ntext\n"

    def test_children_and_parents(self, extractor, nested_text):
        """Test direct children are linked both ways."""
        sections, hierarchy = extractor.extract(nested_text)
        by_title = {s.title: s for s in sections}

        assert by_title["A"].child_ids == [by_title["B"].id, by_title["C"].id]
        assert by_title["B"].parent_id == by_title["A"].id
        assert by_title["D"].child_ids == []
        assert [s.title for s in hierarchy.root_sections] == ["A", "D"]
        assert hierarchy.max_depth == 2

    def test_hierarchy_validity(self, extractor, nested_text):
        """Test every child sits one level below its parent."""
        sections, _ = extractor.extract(nested_text)
        by_id = {s.id: s for s in sections}

        for section in sections:
            for child_id in section.child_ids:
                child = by_id[child_id]
                assert child.level == section.level + 1
                assert child.parent_id == section.id

    def test_skipped_level_issue(self, extractor):
        """Test skipped heading levels are reported."""
        _, hierarchy = extractor.extract("# A\nx\n### C\ny\n")

        assert len(hierarchy.issues) == 1
        issue = hierarchy.issues[0]
        assert issue.type == "heading-skipped-level"
        assert issue.description == "Heading level jumps from 1 to 3"
        assert issue.suggested_fix == "Consider using level 2 instead of 3"
        assert issue.severity == Severity.MEDIUM
        assert issue.section_id == "section-2"

    def test_unbalanced_hierarchy(self):
        """Test one crowded level marks the hierarchy unbalanced."""
        text = (
            "# Top\nx\n"
            + "".join(f"## Sub {i}\ny\n" for i in range(20))
            + "### Deep\nz\n#### Deeper\nw\n"
        )

        _, hierarchy = SectionExtractor().extract(text)

        assert not hierarchy.is_balanced
