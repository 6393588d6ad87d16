"""
Energy/Carbon Calculator.

    energy = (bytes / 1024) × 0.0001 × complexity × memPressure
             × language × hardware × region × (1 + lines / 1000)
    carbon = energy × gridIntensity
"""

import logging
import math
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from co2de_meter import rules
from co2de_meter.analyzer import SyntaxAnalyzer
from co2de_meter.classifier import LanguageClassifier
from co2de_meter.environment import EnvironmentProvider, current_local_hour
from co2de_meter.errors import InvalidInputError
from co2de_meter.models import (
    AnalysisBranch,
    AnalysisStage,
    ComplexityProfile,
    EnergyMetrics,
    RawCounts,
    SourceUnit,
)
from co2de_meter.scoring import ComplexityScorer
from co2de_meter.utils import round_half_up, to_number

logger = logging.getLogger(__name__)

MIXED_LANGUAGE = "mixed"


@dataclass(frozen=True)
class Measurement:
    """Metrics for one source unit and the analyzer branch that produced them."""

    metrics: EnergyMetrics
    branch: AnalysisBranch
    file_name: str = ""


def count_lines(content: Optional[str], file_size: float) -> int:
    """Newline-delimited lines, or ~50 bytes per line when content is absent."""
    if content is not None:
        return len(content.split("\n"))
    return int(math.ceil(file_size / rules.BYTES_PER_LINE_ESTIMATE))


def make_source_unit(
    file_name: str,
    content: Optional[str] = None,
    file_size: Any = None,
    classifier: Optional[LanguageClassifier] = None,
) -> SourceUnit:
    """Capture one file; size defaults to the UTF-8 byte length of content."""
    if content is None and file_size is None:
        raise InvalidInputError(f"{file_name or '<unnamed>'}: no content and no size")
    classifier = classifier or LanguageClassifier()
    if file_size is None:
        size = float(len(content.encode("utf-8")))
    else:
        size = max(0.0, to_number(file_size))
    return SourceUnit(
        name=file_name or "",
        size=size,
        content=content,
        language=classifier.classify(file_name).tag,
    )


class EnergyCalculator:
    """
    Combines language, complexity, hardware and region factors into energy and carbon.
    All collaborators are injected; defaults use the built-in tables.
    """

    def __init__(
        self,
        classifier: Optional[LanguageClassifier] = None,
        analyzer: Optional[SyntaxAnalyzer] = None,
        scorer: Optional[ComplexityScorer] = None,
        environment: Optional[EnvironmentProvider] = None,
        energy_per_kb: float = rules.ENERGY_PER_KB,
    ):
        self.classifier = classifier or LanguageClassifier()
        self.analyzer = analyzer or SyntaxAnalyzer()
        self.scorer = scorer or ComplexityScorer()
        self.environment = environment or EnvironmentProvider()
        self.energy_per_kb = energy_per_kb

    def profile(
        self, content: Optional[str], language: str, label: str = "<string>"
    ) -> Tuple[ComplexityProfile, AnalysisBranch]:
        """Parse and score content; absent content yields the neutral profile."""
        if content is None:
            counts = RawCounts(branch=AnalysisBranch.NONE)
        else:
            counts = self.analyzer.analyze(content, language)
        logger.debug("analysis branch %s for %s", counts.branch.value, language)
        logger.debug("%s: %s", label, AnalysisStage.SCORING.value)
        return self.scorer.score(counts), counts.branch

    def compute(
        self,
        file_size: Any,
        file_name: str,
        content: Optional[str] = None,
        region: Optional[str] = None,
        hardware: Optional[str] = None,
        local_hour: Optional[int] = None,
    ) -> EnergyMetrics:
        unit = make_source_unit(file_name, content, file_size, self.classifier)
        return self.measure(unit, region, hardware, local_hour).metrics

    def measure(
        self,
        unit: SourceUnit,
        region: Optional[str] = None,
        hardware: Optional[str] = None,
        local_hour: Optional[int] = None,
    ) -> Measurement:
        size = max(0.0, to_number(unit.size))
        line_count = count_lines(unit.content, size)
        language = self.classifier.classify(unit.name)
        label = unit.name or "<string>"
        profile, branch = self.profile(unit.content, language.tag, label)
        logger.debug("%s: %s", label, AnalysisStage.CALCULATING.value)
        context = self.environment.resolve(region, hardware)

        base_energy = (size / 1024) * self.energy_per_kb
        energy = (
            base_energy
            * profile.complexity
            * profile.mem_pressure
            * language.multiplier
            * context.hardware_factor
            * context.region_factor
            * (1 + line_count / 1000)
        )
        energy = round_half_up(max(0.0, energy), 3)

        grid_intensity = self.environment.grid_intensity_now(region, local_hour)
        carbon = round_half_up(max(0.0, energy * grid_intensity), 2)

        metrics = EnergyMetrics(
            energy=energy,
            carbon=carbon,
            grid_intensity=grid_intensity,
            line_count=line_count,
            complexity=round_half_up(profile.complexity, 2),
            mem_pressure=round_half_up(profile.mem_pressure, 2),
            recursion_detected=profile.recursion_detected,
            language=language.tag,
        )
        return Measurement(metrics=metrics, branch=branch, file_name=unit.name)

    def measure_many(
        self,
        units: Sequence[SourceUnit],
        region: Optional[str] = None,
        hardware: Optional[str] = None,
        local_hour: Optional[int] = None,
        max_workers: int = 4,
    ) -> List[Measurement]:
        """
        One parse+score+calculate cycle per unit, run concurrently.
        Results come back in input order regardless of completion order.
        """
        if not units:
            return []
        # every unit shares the same hour so the aggregate has a single intensity
        hour = current_local_hour() if local_hour is None else local_hour
        results: List[Optional[Measurement]] = [None] * len(units)
        workers = max(1, min(max_workers, len(units)))

        with ThreadPoolExecutor(max_workers=workers) as executor:
            futures = {
                executor.submit(self.measure, unit, region, hardware, hour): index
                for index, unit in enumerate(units)
            }
            for future in as_completed(futures):
                results[futures[future]] = future.result()

        return [result for result in results if result is not None]


def aggregate(metrics: Sequence[EnergyMetrics]) -> EnergyMetrics:
    """
    Combine per-file metrics: energy, carbon and lines are summed, complexity is
    the max, memory pressure the mean, recursion the logical OR.
    """
    if not metrics:
        raise InvalidInputError("cannot aggregate an empty set of metrics")

    languages = {m.language for m in metrics}
    return EnergyMetrics(
        energy=round_half_up(sum(m.energy for m in metrics), 3),
        carbon=round_half_up(sum(m.carbon for m in metrics), 2),
        grid_intensity=metrics[0].grid_intensity,
        line_count=sum(m.line_count for m in metrics),
        complexity=max(m.complexity for m in metrics),
        mem_pressure=round_half_up(sum(m.mem_pressure for m in metrics) / len(metrics), 2),
        recursion_detected=any(m.recursion_detected for m in metrics),
        language=languages.pop() if len(languages) == 1 else MIXED_LANGUAGE,
    )
