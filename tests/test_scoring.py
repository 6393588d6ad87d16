"""Tests for the complexity scorer."""

import pytest

from co2de_meter.models import AnalysisBranch, ComplexityProfile, RawCounts
from co2de_meter.scoring import ComplexityScorer


@pytest.fixture
def scorer() -> ComplexityScorer:
    return ComplexityScorer()


def test_empty_counts_score_baseline(scorer) -> None:
    assert scorer.score(RawCounts()) == ComplexityProfile(1.0, 1.0, False)


def test_ast_formula(scorer) -> None:
    counts = RawCounts(
        loop_count=4,
        nested_loop_bonus=0.8,
        recursion_bonus=1.5,
        allocation_count=0.4,
        recursion_detected=True,
    )
    profile = scorer.score(counts)
    assert profile.complexity == pytest.approx(1.0 + 0.6 + 0.8 + 1.5)
    assert profile.mem_pressure == pytest.approx(1.4)
    assert profile.recursion_detected


def test_ast_caps(scorer) -> None:
    profile = scorer.score(RawCounts(loop_count=100, allocation_count=10))
    assert profile.complexity == 5.0
    assert profile.mem_pressure == 2.5


def test_regex_branch_caps_at_three_and_ignores_memory(scorer) -> None:
    profile = scorer.score(RawCounts(loop_count=40, allocation_count=5, branch=AnalysisBranch.REGEX))
    assert profile.complexity == 3.0
    assert profile.mem_pressure == 1.0
    assert not profile.recursion_detected


def test_regex_branch_formula(scorer) -> None:
    profile = scorer.score(RawCounts(loop_count=2, branch=AnalysisBranch.REGEX))
    assert profile.complexity == pytest.approx(1.3)


def test_no_content_branch_is_neutral(scorer) -> None:
    assert scorer.score(RawCounts(loop_count=9, branch=AnalysisBranch.NONE)) == ComplexityProfile()


@pytest.mark.parametrize("loops", [0, 1, 3, 7, 20, 50])
def test_bounds_hold(scorer, loops) -> None:
    for branch, cap in ((AnalysisBranch.AST, 5.0), (AnalysisBranch.REGEX, 3.0)):
        profile = scorer.score(RawCounts(loop_count=loops, allocation_count=loops / 10, branch=branch))
        assert 1.0 <= profile.complexity <= cap
        assert 1.0 <= profile.mem_pressure <= 2.5
