"""
Weighting constants and lookup tables for energy estimation.
Tables are read-only; build a new EnvironmentTables to override them.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping

from co2de_meter.models import HardwareProfile, RegionProfile

# nominal kWh per KB of source at baseline complexity
ENERGY_PER_KB = 0.0001
BYTES_PER_LINE_ESTIMATE = 50

# AST walk weights
LOOP_WEIGHT = 1.0
HIGHER_ORDER_CALL_WEIGHT = 0.5
NESTED_LOOP_BONUS = 0.8
RECURSION_BONUS = 1.5
ALLOCATION_WEIGHT = 0.2

# Complexity scorer
LOOP_COMPLEXITY_FACTOR = 0.15
AST_COMPLEXITY_CAP = 5.0
REGEX_COMPLEXITY_CAP = 3.0
MEM_PRESSURE_CAP = 2.5

HIGHER_ORDER_METHODS = frozenset({"map", "filter", "forEach", "reduce", "push", "concat"})
REGEX_LOOP_KEYWORDS = ("for", "while", "do", "forEach", "map", "filter", "reduce")

# Time of day grid adjustment, night window is 22:00-05:59 inclusive
NIGHT_START_HOUR = 22
NIGHT_END_HOUR = 5
NIGHT_INTENSITY_FACTOR = 0.75
DAY_INTENSITY_FACTOR = 1.15

DEFAULT_LANGUAGE = "js"
DEFAULT_LANGUAGE_MULTIPLIER = 1.0
DEFAULT_REGION = "europe"
DEFAULT_HARDWARE = "laptop"

LANGUAGE_MULTIPLIERS: Mapping[str, float] = MappingProxyType({
    "js": 1.0,
    "mjs": 1.0,
    "cjs": 1.0,
    "jsx": 1.05,
    "ts": 1.1,
    "tsx": 1.15,
    "py": 1.8,
    "rs": 0.4,
    "go": 0.6,
    "cpp": 0.35,
    "java": 1.4,
    "swift": 0.9,
    "kt": 1.25,
    "kotlin": 1.25,
})

# Languages with a parser available for the syntax walk
AST_LANGUAGES = frozenset({"js", "mjs", "cjs", "jsx", "ts", "tsx"})

REGIONS: Mapping[str, RegionProfile] = MappingProxyType({
    "north-america": RegionProfile("north-america", "North America", 1.15, 450, 4),
    "europe": RegionProfile("europe", "Europe", 1.1, 320, 3),
    "asia": RegionProfile("asia", "Asia Pacific", 1.35, 580, 2),
    "australia": RegionProfile("australia", "Australia", 1.25, 620, 13),
    "nordics": RegionProfile("nordics", "Nordics", 1.08, 120, 1),
})

HARDWARE_PROFILES: Mapping[str, HardwareProfile] = MappingProxyType({
    "mobile": HardwareProfile("mobile", "Mobile / Edge", 0.4),
    "laptop": HardwareProfile("laptop", "Laptop / Workstation", 1.0),
    "server": HardwareProfile("server", "Server / Cloud", 2.5),
})


@dataclass(frozen=True)
class EnvironmentTables:
    """Region and hardware tables with their fallback keys."""

    regions: Mapping[str, RegionProfile] = field(default_factory=lambda: REGIONS)
    hardware: Mapping[str, HardwareProfile] = field(default_factory=lambda: HARDWARE_PROFILES)
    default_region: str = DEFAULT_REGION
    default_hardware: str = DEFAULT_HARDWARE


DEFAULT_TABLES = EnvironmentTables()
