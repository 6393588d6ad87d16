"""
CO2DE Meter - energy and carbon estimates for source code.
"""

__version__ = "5.0.0"

from typing import Optional

from co2de_meter.models import (
    AnalysisResult,
    ComplexityProfile,
    EnergyMetrics,
    EnvironmentContext,
    Review,
    SourceUnit,
)
from co2de_meter.analyzer import SyntaxAnalyzer
from co2de_meter.calculator import EnergyCalculator, aggregate, make_source_unit
from co2de_meter.classifier import LanguageClassifier
from co2de_meter.environment import EnvironmentProvider
from co2de_meter.pipeline import AnalysisPipeline, read_source
from co2de_meter.review import ReviewSynthesizer, fallback_review
from co2de_meter.scoring import ComplexityScorer

__all__ = [
    "AnalysisResult",
    "ComplexityProfile",
    "EnergyMetrics",
    "EnvironmentContext",
    "Review",
    "SourceUnit",
    "SyntaxAnalyzer",
    "EnergyCalculator",
    "LanguageClassifier",
    "EnvironmentProvider",
    "AnalysisPipeline",
    "ReviewSynthesizer",
    "ComplexityScorer",
    "aggregate",
    "fallback_review",
    "analyze_source",
    "analyze_file",
    "analyze_files",
]


def analyze_source(
    source_code: str,
    filename: str = "<string>.js",
    region: Optional[str] = None,
    hardware: Optional[str] = None,
    local_hour: Optional[int] = None,
    synthesizer: Optional[ReviewSynthesizer] = None,
) -> AnalysisResult:
    """Analyze source text and return metrics with a review."""
    pipeline = AnalysisPipeline(synthesizer=synthesizer)
    unit = make_source_unit(filename, source_code)
    return pipeline.run(unit, region=region, hardware=hardware, local_hour=local_hour)


def analyze_file(filepath, **kwargs) -> AnalysisResult:
    """Analyze a file on disk and return metrics with a review."""
    synthesizer = kwargs.pop("synthesizer", None)
    pipeline = AnalysisPipeline(synthesizer=synthesizer)
    return pipeline.run(read_source(filepath), **kwargs)


def analyze_files(filepaths, max_workers: int = 4, **kwargs) -> AnalysisResult:
    """Analyze several files concurrently and return aggregate metrics with a review."""
    synthesizer = kwargs.pop("synthesizer", None)
    pipeline = AnalysisPipeline(synthesizer=synthesizer, max_workers=max_workers)
    return pipeline.run_many([read_source(p) for p in filepaths], **kwargs)
