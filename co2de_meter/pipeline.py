"""
Analysis pipeline: Parsing -> Scoring -> Calculating -> Reviewing -> Complete.
Scoring and Calculating are logged by the calculator for each unit.
"""

import logging
import threading
from pathlib import Path
from typing import Hashable, Optional, Sequence, Union

from co2de_meter.calculator import EnergyCalculator, Measurement, aggregate, make_source_unit
from co2de_meter.errors import InvalidInputError
from co2de_meter.models import AnalysisBranch, AnalysisResult, AnalysisStage, SourceUnit
from co2de_meter.review import ReviewSynthesizer
from co2de_meter.session import GenerationGate

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


def read_source(path: PathLike) -> SourceUnit:
    """Read a file into a SourceUnit; size is the on-disk byte count."""
    path = Path(path)
    data = path.read_bytes()
    content = data.decode("utf-8", errors="replace")
    return make_source_unit(str(path), content, len(data))


def _combined_branch(measurements: Sequence[Measurement]) -> AnalysisBranch:
    branches = {m.branch for m in measurements}
    if AnalysisBranch.AST in branches:
        return AnalysisBranch.AST
    if AnalysisBranch.REGEX in branches:
        return AnalysisBranch.REGEX
    return AnalysisBranch.NONE


class AnalysisPipeline:
    """Runs the calculator and the review synthesizer for one request."""

    def __init__(
        self,
        calculator: Optional[EnergyCalculator] = None,
        synthesizer: Optional[ReviewSynthesizer] = None,
        max_workers: int = 4,
    ):
        self.calculator = calculator or EnergyCalculator()
        self.synthesizer = synthesizer or ReviewSynthesizer()
        self.max_workers = max_workers
        self.gate = GenerationGate()

    def _stage(self, stage: AnalysisStage, label: str) -> None:
        logger.debug("%s: %s", label, stage.value)

    def run(
        self,
        unit: SourceUnit,
        region: Optional[str] = None,
        hardware: Optional[str] = None,
        local_hour: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
    ) -> AnalysisResult:
        label = unit.name or "<string>"
        self._stage(AnalysisStage.PARSING, label)
        measurement = self.calculator.measure(unit, region, hardware, local_hour)
        return self._review(
            [measurement], measurement.metrics, unit.content, region, hardware, cancel_event, label
        )

    def run_many(
        self,
        units: Sequence[SourceUnit],
        region: Optional[str] = None,
        hardware: Optional[str] = None,
        local_hour: Optional[int] = None,
        cancel_event: Optional[threading.Event] = None,
        key: Hashable = None,
    ) -> Optional[AnalysisResult]:
        """
        Measure every unit concurrently and combine once all are done.
        Returns None when a newer run for the same key was started meanwhile.
        """
        if not units:
            raise InvalidInputError("no files to analyze")
        generation = self.gate.begin(key)
        label = f"{len(units)} files"

        self._stage(AnalysisStage.PARSING, label)
        measurements = self.calculator.measure_many(
            units, region, hardware, local_hour, max_workers=self.max_workers
        )
        if not self.gate.accept(key, generation):
            return None

        self._stage(AnalysisStage.CALCULATING, label)
        metrics = aggregate([m.metrics for m in measurements])
        content = "\n".join(unit.content for unit in units if unit.content)
        result = self._review(measurements, metrics, content, region, hardware, cancel_event, label)
        if not self.gate.accept(key, generation):
            return None
        return result

    def _review(self, measurements, metrics, content, region, hardware, cancel_event, label) -> AnalysisResult:
        self._stage(AnalysisStage.REVIEWING, label)
        outcome = self.synthesizer.synthesize(content, metrics, cancel_event)
        self._stage(AnalysisStage.COMPLETE, label)
        return AnalysisResult(
            metrics=metrics,
            review=outcome.review,
            environment=self.calculator.environment.resolve(region, hardware),
            branch=_combined_branch(measurements),
            file_names=tuple(m.file_name for m in measurements),
            review_source=outcome.source,
        )

