"""
Environmental Factor Provider - region and hardware lookups, time-of-day grid intensity.
"""

from datetime import datetime
from typing import Optional

from co2de_meter import rules
from co2de_meter.models import EnvironmentContext, HardwareProfile, RegionProfile
from co2de_meter.rules import EnvironmentTables
from co2de_meter.utils import round_half_up


def is_night_hour(hour: int) -> bool:
    """True for 22:00-05:59 local time."""
    return hour >= rules.NIGHT_START_HOUR or hour <= rules.NIGHT_END_HOUR


def current_local_hour() -> int:
    return datetime.now().hour


class EnvironmentProvider:
    """Resolves region/hardware keys; unknown keys fall back to the table defaults."""

    def __init__(self, tables: EnvironmentTables = rules.DEFAULT_TABLES):
        self.tables = tables

    def resolve_region(self, key: Optional[str]) -> RegionProfile:
        region = self.tables.regions.get(_normalize(key))
        if region is None:
            return self.tables.regions[self.tables.default_region]
        return region

    def resolve_hardware(self, key: Optional[str]) -> HardwareProfile:
        hardware = self.tables.hardware.get(_normalize(key))
        if hardware is None:
            return self.tables.hardware[self.tables.default_hardware]
        return hardware

    def resolve(self, region: Optional[str], hardware: Optional[str]) -> EnvironmentContext:
        return EnvironmentContext(
            region=self.resolve_region(region),
            hardware=self.resolve_hardware(hardware),
        )

    def grid_intensity_now(self, region: Optional[str], local_hour: Optional[int] = None) -> int:
        """
        Baseline intensity scaled by 0.75 overnight and 1.15 during the day,
        rounded to the nearest integer.
        """
        profile = self.resolve_region(region)
        hour = current_local_hour() if local_hour is None else int(local_hour) % 24
        factor = rules.NIGHT_INTENSITY_FACTOR if is_night_hour(hour) else rules.DAY_INTENSITY_FACTOR
        return int(round_half_up(profile.intensity * factor))


def _normalize(key: Optional[str]) -> str:
    if not isinstance(key, str):
        return ""
    return key.strip().lower()
