"""
Shared sample documents and engine fixtures.
"""
import pytest

from docintel.domain.schemas.document import Section
from docintel.services.intelligence.extractor import SectionExtractor


REPORT_TEXT = """# Introduction
This report reviews the quarterly platform migration. The migration moved billing services to the new cluster.

# Methodology
We measured latency across every billing service. Each service was sampled hourly during the migration window.

# Results
Latency dropped 40% after the migration. Error rates fell from 2% to 1% across the billing services.

# Recommendations
- Retire the legacy cluster
- Expand hourly sampling to search services
- Review capacity every quarter

# Conclusion
Therefore the migration met its goals. The billing platform is faster and more reliable.
"""


@pytest.fixture
def report_text():
    """Five-section markdown report."""
    return REPORT_TEXT


@pytest.fixture
def extractor():
    return SectionExtractor()


@pytest.fixture
def report_sections(extractor, report_text):
    """Linked sections of the sample report."""
    sections, _ = extractor.extract(report_text)
    return sections


@pytest.fixture
def make_section():
    """Factory for standalone sections with contiguous spans."""
    def _make(section_id, title, content, start_index=0, level=1, **kwargs):
        return Section(
            id=section_id,
            title=title,
            content=content,
            start_index=start_index,
            end_index=start_index + len(content),
            level=level,
            **kwargs,
        )
    return _make
