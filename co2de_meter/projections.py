"""
Carbon projections: per-execution metrics scaled to days, weeks, months and years.

Reference factors:
- 1 tree absorbs ~21.77 kg CO2 per year
- a car emits ~0.21 kg CO2 per km
- a smartphone charge is ~2 g CO2e
- a short flight is ~90 kg CO2e
- an average household uses ~8.5 kg CO2e per day
"""

import math
from typing import List, Tuple

from co2de_meter.models import CarbonProjection, EnergyMetrics, ProjectionSummary
from co2de_meter.utils import round_half_up

DEFAULT_EXECUTIONS_PER_DAY = 100

TREE_KG_PER_YEAR = 21.77
CAR_KG_PER_KM = 0.21
PHONE_CHARGE_G = 2
SHORT_FLIGHT_KG = 90
HOUSEHOLD_KG_PER_DAY = 8.5
SCOPE3_SHARE = 0.15

# (label, period, days)
TIME_SCALES: Tuple[Tuple[str, str, int], ...] = (
    ("24_Hours", "daily", 1),
    ("1_Week", "weekly", 7),
    ("1_Month", "monthly", 30),
    ("6_Months", "biannual", 180),
    ("1_Year", "annual", 365),
)


def real_world_equivalent(co2_kg: float) -> str:
    if co2_kg < 1:
        return f"{int(round_half_up(co2_kg * 1000 / PHONE_CHARGE_G))} smartphone charges"
    if co2_kg < 10:
        return f"{int(round_half_up(co2_kg / CAR_KG_PER_KM))} km by car"
    if co2_kg < 100:
        return f"{co2_kg / SHORT_FLIGHT_KG:.1f} short flights"
    return f"{int(round_half_up(co2_kg / HOUSEHOLD_KG_PER_DAY))} days of home energy"


def trees_to_offset(co2_kg: float, days: int) -> int:
    """Trees needed to absorb co2_kg within the given number of days (at least 1)."""
    per_year = co2_kg / TREE_KG_PER_YEAR
    return max(1, int(math.ceil(per_year * (365 / days))))


def project(metrics: EnergyMetrics, executions_per_day: int = DEFAULT_EXECUTIONS_PER_DAY) -> ProjectionSummary:
    executions_per_day = max(0, int(executions_per_day))
    projections: List[CarbonProjection] = []
    for label, period, days in TIME_SCALES:
        executions = executions_per_day * days
        co2_kg = metrics.carbon * executions / 1000
        projections.append(
            CarbonProjection(
                label=label,
                period=period,
                executions=executions,
                energy=metrics.energy * executions,
                co2=co2_kg,
                trees=trees_to_offset(co2_kg, days),
                equivalent=real_world_equivalent(co2_kg),
            )
        )

    scope2 = projections[-1].co2
    return ProjectionSummary(
        projections=tuple(projections),
        scope1=0.0,
        scope2=scope2,
        scope3=scope2 * SCOPE3_SHARE,
    )
