"""
Document Intelligence Layer.

This module provides rule-based document analysis capabilities including:
- Section extraction and hierarchy building
- Readability and tone scoring
- Cross-section consistency checks
- Tone control and structural optimization
- Extractive summaries and iterative rewrites
"""

from typing import Optional

from .analyzer import DocumentAnalysisEngine
from .consistency import CrossSectionConsistencyEngine
from .extractor import SectionExtractor
from .lexicon import DEFAULT_LEXICON, Lexicon
from .readability import ReadabilityScorer
from .rewrite import AutoRewriteEngine
from .structure import StructuralOptimizationEngine
from .summary import AutoSummaryEngine
from .tone import ToneControlEngine


def create_document_intelligence_engine(lexicon: Optional[Lexicon] = None) -> DocumentAnalysisEngine:
    """Build the orchestrator with every engine sharing one lexicon."""
    return DocumentAnalysisEngine(lexicon=lexicon)


__all__ = [
    "AutoRewriteEngine",
    "AutoSummaryEngine",
    "CrossSectionConsistencyEngine",
    "DEFAULT_LEXICON",
    "DocumentAnalysisEngine",
    "Lexicon",
    "ReadabilityScorer",
    "SectionExtractor",
    "StructuralOptimizationEngine",
    "ToneControlEngine",
    "create_document_intelligence_engine",
]
