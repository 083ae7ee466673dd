"""
Domain schemas for docintel.
"""

from .document import *
from .options import *
from .analysis import *
from .report import *

__all__ = [
    # Document schemas
    "ToneType",
    "Appropriateness",
    "EmotionalValence",
    "ReadabilityAssessment",
    "EmotionalTone",
    "ToneAnalysis",
    "ReadabilityScores",
    "Section",

    # Options
    "AnalysisScope",
    "AnalysisDepth",
    "TargetAudience",
    "DetailLevel",
    "ClarityLevel",
    "ConcisenessLevel",
    "SectionBoundary",
    "DocumentAnalysisRequest",
    "ToneControlOptions",
    "StructuralOptimizationOptions",
    "SummaryOptions",
    "RewriteOptions",

    # Engine results
    "Severity",
    "Impact",
    "ChangeImpact",
    "HierarchyIssue",
    "Hierarchy",
    "ConsistencyType",
    "ConsistencyResult",
    "TextSpan",
    "TextOccurrence",
    "Inconsistency",
    "ConsistencyCheck",
    "ToneRecommendationType",
    "ToneShift",
    "ToneRecommendation",
    "ToneAnalysisResult",
    "OptimizationType",
    "FlowIssueType",
    "StructuralRecommendationType",
    "AppliedOptimization",
    "FlowIssue",
    "StructuralFlowAnalysis",
    "StructuralRecommendation",
    "StructuralOptimizationResult",
    "SummaryStatistics",
    "GeneratedSummary",
    "DocumentSummaryResult",
    "RewriteChangeType",
    "RewriteChange",
    "RewriteStatistics",
    "RewriteResult",

    # Report schemas
    "DocumentStatistics",
    "AnalysisMetadata",
    "StructuralIssue",
    "TransitionAnalysis",
    "LogicalProgression",
    "FlowAnalysis",
    "DocumentStructure",
    "SentenceComplexity",
    "JargonAnalysis",
    "ClarityAssessment",
    "RedundancyDetection",
    "QualityAnalysis",
    "KeyTheme",
    "MainArgument",
    "EvidenceAnalysis",
    "LogicalFlowAssessment",
    "AudienceAssessment",
    "InsightAnalysis",
    "Suggestion",
    "SuggestionSet",
    "Assessment",
    "DocumentAnalysisResult",
    "DocumentIntelligenceReport",
]
