"""Tests for the review synthesizer and the deterministic fallback."""

import threading

import pytest

from co2de_meter.errors import (
    ReviewSynthesisError,
    ReviewValidationError,
    ReviewerUnavailableError,
)
from co2de_meter.review import (
    BOTTLENECK_HIGH,
    BOTTLENECK_LOW,
    FALLBACK_SOURCE,
    OPTIMIZATION_DEFAULT,
    OPTIMIZATION_NESTED,
    OPTIMIZATION_RECURSION,
    ReviewSynthesizer,
    fallback_review,
    truncate_source,
    validate_review,
)


def test_fallback_for_high_complexity(make_metrics) -> None:
    review = fallback_review(make_metrics(complexity=3.5))
    assert review.score == 3
    assert review.bottleneck == BOTTLENECK_HIGH
    assert review.optimization == OPTIMIZATION_NESTED
    assert "18% Energy reduction possible." in review.improvement


def test_fallback_for_baseline(make_metrics) -> None:
    review = fallback_review(make_metrics(complexity=1.0))
    assert review.score == 8
    assert review.bottleneck == BOTTLENECK_LOW
    assert review.optimization == OPTIMIZATION_DEFAULT
    assert "5% Energy reduction possible." in review.improvement


def test_fallback_prefers_recursion_message(make_metrics) -> None:
    review = fallback_review(make_metrics(complexity=2.5, recursion_detected=True))
    assert review.optimization == OPTIMIZATION_RECURSION
    assert review.score == 5


@pytest.mark.parametrize("complexity", [1.0, 1.49, 2.0, 2.01, 3.0, 4.75, 5.0])
def test_fallback_score_in_range(make_metrics, complexity) -> None:
    review = fallback_review(make_metrics(complexity=complexity))
    assert 1 <= review.score <= 10
    assert review.bottleneck and review.optimization and review.improvement


def test_fallback_at_cap_scores_one(make_metrics) -> None:
    assert fallback_review(make_metrics(complexity=5.0)).score == 1


def test_validate_review_accepts_valid(valid_review_payload) -> None:
    review = validate_review(valid_review_payload)
    assert review.score == 7


def test_validate_review_ignores_extra_fields(valid_review_payload) -> None:
    payload = dict(valid_review_payload, dependencies=[{"name": "lodash"}])
    assert validate_review(payload).bottleneck == valid_review_payload["bottleneck"]


@pytest.mark.parametrize(
    "patch",
    [
        {"score": 11},
        {"score": 0},
        {"score": 6.5},
        {"score": True},
        {"score": "7"},
        {"bottleneck": ""},
        {"improvement": None},
    ],
)
def test_validate_review_rejects_bad_fields(valid_review_payload, patch) -> None:
    with pytest.raises(ReviewValidationError):
        validate_review(dict(valid_review_payload, **patch))


def test_validate_review_rejects_missing_field(valid_review_payload) -> None:
    del valid_review_payload["optimization"]
    with pytest.raises(ReviewValidationError):
        validate_review(valid_review_payload)


def test_validate_review_rejects_non_object() -> None:
    with pytest.raises(ReviewValidationError):
        validate_review(["score", 7])


def test_first_valid_provider_wins(make_metrics, fake_provider, valid_review_payload) -> None:
    broken = fake_provider("broken", error=ReviewerUnavailableError("timeout"))
    malformed = fake_provider("malformed", payload={"score": 42})
    good = fake_provider("good", payload=valid_review_payload)
    never = fake_provider("never", payload=valid_review_payload)

    outcome = ReviewSynthesizer([broken, malformed, good, never]).synthesize("x = 1", make_metrics())

    assert outcome.source == "good"
    assert outcome.review.score == 7
    assert len(outcome.errors) == 2
    assert outcome.errors[0].startswith("broken:")
    assert never.calls == []


def test_exhausted_providers_fall_back(make_metrics, fake_provider) -> None:
    providers = [fake_provider("a", error=RuntimeError("boom")), fake_provider("b", payload="not json")]
    outcome = ReviewSynthesizer(providers).synthesize("code", make_metrics(complexity=3.5))
    assert outcome.is_fallback
    assert outcome.review == fallback_review(make_metrics(complexity=3.5))
    assert len(outcome.errors) == 2


def test_no_providers_uses_fallback(make_metrics) -> None:
    outcome = ReviewSynthesizer().synthesize("code", make_metrics())
    assert outcome.source == FALLBACK_SOURCE
    assert outcome.errors == []


def test_fallback_disabled_raises_with_details(make_metrics, fake_provider) -> None:
    providers = [
        fake_provider("a", error=ReviewerUnavailableError("503")),
        fake_provider("b", payload={"score": 3}),
    ]
    with pytest.raises(ReviewSynthesisError) as info:
        ReviewSynthesizer(providers, allow_fallback=False).review("code", make_metrics())
    assert len(info.value.errors) == 2
    assert "a: 503" in str(info.value)


def test_fallback_disabled_without_providers_raises(make_metrics) -> None:
    with pytest.raises(ReviewSynthesisError):
        ReviewSynthesizer(allow_fallback=False).review("code", make_metrics())


def test_cancelled_review_skips_providers(make_metrics, fake_provider, valid_review_payload) -> None:
    provider = fake_provider("good", payload=valid_review_payload)
    cancel = threading.Event()
    cancel.set()
    outcome = ReviewSynthesizer([provider]).synthesize("code", make_metrics(), cancel_event=cancel)
    assert outcome.is_fallback
    assert provider.calls == []


def test_source_is_truncated(make_metrics, fake_provider, valid_review_payload) -> None:
    provider = fake_provider("good", payload=valid_review_payload)
    ReviewSynthesizer([provider], max_chars=50_000).review("a" * 25_000, make_metrics())
    assert len(provider.calls[0]) == 10_000


def test_truncate_source_handles_missing_content() -> None:
    assert truncate_source(None) == ""
    assert truncate_source("abcdef", 3) == "abc"
