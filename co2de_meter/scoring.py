"""
Complexity Scorer.
Turns raw analyzer counts into bounded complexity and memory pressure factors.
"""

from co2de_meter import rules
from co2de_meter.models import AnalysisBranch, ComplexityProfile, RawCounts


class ComplexityScorer:
    """
    AST counts:   complexity  = 1 + loops × 0.15 + nesting + recursion  (≤ 5.0)
                  memPressure = 1 + allocations                         (≤ 2.5)
    Keyword counts: complexity = 1 + loops × 0.15 (≤ 3.0), memPressure = 1.0
    """

    def __init__(
        self,
        loop_factor: float = rules.LOOP_COMPLEXITY_FACTOR,
        ast_cap: float = rules.AST_COMPLEXITY_CAP,
        regex_cap: float = rules.REGEX_COMPLEXITY_CAP,
        mem_cap: float = rules.MEM_PRESSURE_CAP,
    ):
        self.loop_factor = loop_factor
        self.ast_cap = ast_cap
        self.regex_cap = regex_cap
        self.mem_cap = mem_cap

    def score(self, counts: RawCounts) -> ComplexityProfile:
        if counts.branch == AnalysisBranch.REGEX:
            complexity = _clamp(1.0 + counts.loop_count * self.loop_factor, self.regex_cap)
            return ComplexityProfile(complexity=complexity, mem_pressure=1.0)

        if counts.branch == AnalysisBranch.NONE:
            return ComplexityProfile()

        complexity = (
            1.0
            + counts.loop_count * self.loop_factor
            + counts.nested_loop_bonus
            + counts.recursion_bonus
        )
        mem_pressure = 1.0 + counts.allocation_count
        return ComplexityProfile(
            complexity=_clamp(complexity, self.ast_cap),
            mem_pressure=_clamp(mem_pressure, self.mem_cap),
            recursion_detected=counts.recursion_detected,
        )


def _clamp(value: float, upper: float) -> float:
    return max(1.0, min(value, upper))
