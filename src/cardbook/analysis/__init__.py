"""External spending analysis engine."""

from cardbook.analysis.engine import AnalysisEngine, GroqAnalysisEngine, get_analysis_engine

__all__ = ["AnalysisEngine", "GroqAnalysisEngine", "get_analysis_engine"]
