"""
Report Generator - text and JSON output, flattened persistence record, badge tier.
"""

import json
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from co2de_meter import __version__
from co2de_meter.models import AnalysisResult, EnergyMetrics, ProjectionSummary, Review
from co2de_meter.projections import DEFAULT_EXECUTIONS_PER_DAY, project

ENGINE_VERSION = f"{__version__}-delta"


def badge_tier(score: int) -> str:
    """Visual grade tier for a 1-10 review score."""
    if score >= 8:
        return "top"
    if score >= 6:
        return "mid"
    return "low"


def metrics_to_dict(metrics: EnergyMetrics) -> Dict[str, Any]:
    """Convert EnergyMetrics to dictionary."""
    return {
        "estimatedEnergy": metrics.energy,
        "estimatedCO2": metrics.carbon,
        "energyUnit": metrics.energy_unit,
        "co2Unit": metrics.co2_unit,
        "gridIntensity": metrics.grid_intensity,
        "lineCount": metrics.line_count,
        "complexity": metrics.complexity,
        "memPressure": metrics.mem_pressure,
        "recursionDetected": metrics.recursion_detected,
        "language": metrics.language,
    }


def review_to_dict(review: Review) -> Dict[str, Any]:
    """Convert Review to dictionary."""
    return {
        "score": review.score,
        "bottleneck": review.bottleneck,
        "optimization": review.optimization,
        "improvement": review.improvement,
    }


def projections_to_dict(summary: ProjectionSummary) -> Dict[str, Any]:
    """Flatten projections to the kg CO2e per period layout."""
    result: Dict[str, Any] = {p.period: p.co2 for p in summary.projections}
    annual = summary.by_period("annual")
    result["treesToOffset"] = annual.trees if annual else 0
    result["scope2"] = summary.scope2
    result["scope3"] = summary.scope3
    return result


def to_dict(result: AnalysisResult, executions_per_day: int = DEFAULT_EXECUTIONS_PER_DAY) -> Dict[str, Any]:
    """Serialize a result to a dict for JSON / IDE integration."""
    env = result.environment
    return {
        "files": list(result.file_names),
        "metrics": metrics_to_dict(result.metrics),
        "review": review_to_dict(result.review),
        "reviewSource": result.review_source,
        "analysis": result.branch.value,
        "badgeTier": badge_tier(result.review.score),
        "environment": {
            "region": env.region.key,
            "hardwareProfile": env.hardware.key,
            "pueFactor": env.region_factor,
            "hardwareFactor": env.hardware_factor,
            "baselineIntensity": env.region.intensity,
            "bestHour": env.region.best_hour,
        },
        "carbonProjections": projections_to_dict(project(result.metrics, executions_per_day)),
        "executionsPerDay": executions_per_day,
    }


def to_record(
    result: AnalysisResult,
    file_name: str = "",
    file_size: float = 0,
    executions_per_day: int = DEFAULT_EXECUTIONS_PER_DAY,
    created_at: Optional[datetime] = None,
) -> Dict[str, Any]:
    """
    Flattened analysis document for the persistence layer.
    Only plain JSON values; the single nested object is carbonProjections.
    """
    created_at = created_at or datetime.now(timezone.utc)
    metrics = result.metrics
    review = result.review
    env = result.environment
    return {
        "createdAt": created_at.isoformat(),
        "engineVersion": ENGINE_VERSION,
        "fileName": file_name or (result.file_names[0] if result.file_names else ""),
        "fileSize": file_size,
        "lineCount": metrics.line_count,
        "language": metrics.language,
        "estimatedEnergy": metrics.energy,
        "estimatedCO2": metrics.carbon,
        "score": review.score,
        "region": env.region.key,
        "hardwareProfile": env.hardware.key,
        "gridIntensity": metrics.grid_intensity,
        "pueFactor": env.region_factor,
        "complexity": metrics.complexity,
        "memPressure": metrics.mem_pressure,
        "recursionDetected": metrics.recursion_detected,
        "bottleneck": review.bottleneck,
        "optimization": review.optimization,
        "improvement": review.improvement,
        "carbonProjections": projections_to_dict(project(metrics, executions_per_day)),
        "executionsPerDay": executions_per_day,
    }


def format_text(
    result: AnalysisResult,
    executions_per_day: int = DEFAULT_EXECUTIONS_PER_DAY,
    extra: Optional[Dict[str, Any]] = None,
) -> str:
    """Produce human-readable text report."""
    metrics = result.metrics
    review = result.review
    env = result.environment
    files = ", ".join(result.file_names) or "<string>"
    lines = [
        "=" * 60,
        "CO2DE METER - ENERGY ANALYSIS REPORT",
        "=" * 60,
        f"File: {files}",
        f"Language: {metrics.language}",
        f"Lines: {metrics.line_count}",
        f"Estimated Energy: {metrics.energy} {metrics.energy_unit}",
        f"Estimated Carbon: {metrics.carbon} {metrics.co2_unit}",
        f"Review Score: {review.score}/10 ({badge_tier(review.score)} tier)",
        "=" * 60,
        "",
        "Heuristics:",
        f"  • Complexity Factor: {metrics.complexity}",
        f"  • Memory Pressure: {metrics.mem_pressure}",
        f"  • Recursion Detected: {'yes' if metrics.recursion_detected else 'no'}",
        f"  • Analysis: {result.branch.value}",
    ]
    for key, value in (extra or {}).items():
        lines.append(f"  • {key}: {value}")

    lines += [
        "",
        "Environment:",
        f"  • Region: {env.region.label} (PUE {env.region_factor})",
        f"  • Hardware: {env.hardware.label} ({env.hardware_factor}x)",
        f"  • Grid Intensity: {metrics.grid_intensity} gCO2e/kWh",
        f"  • Lowest-carbon hour: {env.region.best_hour:02d}:00",
        "",
        f"Review ({result.review_source}):",
        f"  • Bottleneck: {review.bottleneck}",
        f"  • Optimization: {review.optimization}",
        f"  • Improvement: {review.improvement}",
        "",
        f"Projections ({executions_per_day} executions/day):",
    ]
    for p in project(metrics, executions_per_day).projections:
        lines.append(f"  • {p.label}: {p.energy:.3f} kWh, {p.co2:.3f} kg CO2e ≈ {p.equivalent}")

    return "\n".join(lines)


def format_json(result: AnalysisResult, indent: int = 2, **kwargs) -> str:
    """Produce JSON string for IDE/CI integration."""
    return json.dumps(to_dict(result, **kwargs), indent=indent)


class ReportGenerator:
    """
    Generates reports in text or JSON format.
    """

    @staticmethod
    def text(result: AnalysisResult, **kwargs) -> str:
        """Generate text report."""
        return format_text(result, **kwargs)

    @staticmethod
    def json(result: AnalysisResult, indent: int = 2, **kwargs) -> str:
        """Generate JSON report."""
        return format_json(result, indent=indent, **kwargs)

    @staticmethod
    def to_dict(result: AnalysisResult, **kwargs) -> Dict[str, Any]:
        """Convert result to dictionary."""
        return to_dict(result, **kwargs)

    @staticmethod
    def to_record(result: AnalysisResult, **kwargs) -> Dict[str, Any]:
        """Convert result to the flattened persistence record."""
        return to_record(result, **kwargs)
