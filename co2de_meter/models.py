"""
Data models for the CO2DE energy meter.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class AnalysisStage(str, Enum):
    """Stages of a single analysis request."""

    IDLE = "idle"
    PARSING = "parsing"
    SCORING = "scoring"
    CALCULATING = "calculating"
    REVIEWING = "reviewing"
    COMPLETE = "complete"


class AnalysisBranch(str, Enum):
    """Which analyzer produced the raw counts."""

    AST = "ast"
    REGEX = "regex"
    NONE = "none"  # no content, size-only estimate


@dataclass(frozen=True)
class Language:
    """Resolved language tag and its energy multiplier."""

    tag: str
    multiplier: float


@dataclass(frozen=True)
class SourceUnit:
    """One analyzed file, captured once per upload or editor snapshot."""

    name: str
    size: Optional[float]
    content: Optional[str]
    language: str


@dataclass(frozen=True)
class RawCounts:
    """Counters collected by a single pass of the syntax analyzer."""

    loop_count: float = 0.0
    nested_loop_bonus: float = 0.0
    recursion_bonus: float = 0.0
    allocation_count: float = 0.0
    recursion_detected: bool = False
    branch: AnalysisBranch = AnalysisBranch.AST


@dataclass(frozen=True)
class ComplexityProfile:
    """Bounded complexity signals for one source unit."""

    complexity: float = 1.0
    mem_pressure: float = 1.0
    recursion_detected: bool = False


@dataclass(frozen=True)
class RegionProfile:
    """PUE factor, baseline grid intensity and lowest-carbon hour of a region."""

    key: str
    label: str
    factor: float
    intensity: int  # gCO2e/kWh
    best_hour: int  # 0-23 local time


@dataclass(frozen=True)
class HardwareProfile:
    """Relative power draw of a hardware class."""

    key: str
    label: str
    factor: float


@dataclass(frozen=True)
class EnvironmentContext:
    """A (region, hardware) pair resolved against the lookup tables."""

    region: RegionProfile
    hardware: HardwareProfile

    @property
    def region_factor(self) -> float:
        return self.region.factor

    @property
    def hardware_factor(self) -> float:
        return self.hardware.factor


@dataclass(frozen=True)
class EnergyMetrics:
    """
    Final computed record for one source unit or an aggregate of several.

    energy is in kWh, carbon in gCO2e, grid_intensity in gCO2e/kWh.
    """

    energy: float
    carbon: float
    grid_intensity: int
    line_count: int
    complexity: float
    mem_pressure: float
    recursion_detected: bool
    language: str

    energy_unit: str = field(default="kWh", init=False)
    co2_unit: str = field(default="gCO2e", init=False)


class Review(BaseModel):
    """Sustainability review: a 1-10 score and three narrative fields."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    score: int = Field(strict=True, ge=1, le=10, description="Energy efficiency score, 10 is best.")
    bottleneck: str = Field(min_length=1, description="Main energy bottleneck.")
    optimization: str = Field(min_length=1, description="Suggested optimization.")
    improvement: str = Field(min_length=1, description="Expected improvement.")


@dataclass(frozen=True)
class CarbonProjection:
    """Per-execution metrics scaled to a time period."""

    label: str
    period: str
    executions: int
    energy: float  # kWh
    co2: float  # kg CO2e
    trees: int
    equivalent: str


@dataclass(frozen=True)
class ProjectionSummary:
    """Projections for every time scale plus GHG protocol scopes (kg CO2e)."""

    projections: Tuple[CarbonProjection, ...]
    scope1: float
    scope2: float
    scope3: float

    def by_period(self, period: str) -> Optional[CarbonProjection]:
        for projection in self.projections:
            if projection.period == period:
                return projection
        return None


@dataclass(frozen=True)
class AnalysisResult:
    """Metrics and review for one request, with the context they were computed in."""

    metrics: EnergyMetrics
    review: Review
    environment: EnvironmentContext
    branch: AnalysisBranch
    file_names: Tuple[str, ...] = ()
    review_source: str = "fallback"
