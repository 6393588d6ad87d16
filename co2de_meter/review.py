"""
Review Synthesizer.
Delegates to external reviewers in priority order and falls back to a
deterministic review derived from the computed metrics.
"""

import logging
import math
import threading
from dataclasses import dataclass, field
from typing import Any, List, Optional, Protocol, Sequence

from pydantic import ValidationError

from co2de_meter.config import MAX_REVIEW_CHARS
from co2de_meter.errors import ReviewSynthesisError, ReviewValidationError
from co2de_meter.models import EnergyMetrics, Review
from co2de_meter.utils import round_half_up

logger = logging.getLogger(__name__)

FALLBACK_SOURCE = "fallback"

HIGH_COMPLEXITY_THRESHOLD = 2.0

BOTTLENECK_HIGH = "High computational complexity from loops, nested iteration or recursive calls."
BOTTLENECK_LOW = "No major computational bottleneck detected."

OPTIMIZATION_RECURSION = "Replace recursion with iteration or memoization to avoid repeated call-stack work."
OPTIMIZATION_NESTED = "Flatten nested logic and combine passes over the same data to cut redundant iterations."
OPTIMIZATION_DEFAULT = "Code is reasonably efficient; cache repeated lookups and avoid redundant allocations."


class ReviewProvider(Protocol):
    """An external reviewer. Returns the raw decoded JSON object."""

    name: str

    def request_review(self, source_text: str, metrics: EnergyMetrics) -> Any:
        ...


@dataclass(frozen=True)
class ReviewOutcome:
    """The accepted review, who produced it, and the provider errors on the way."""

    review: Review
    source: str
    errors: List[str] = field(default_factory=list)

    @property
    def is_fallback(self) -> bool:
        return self.source == FALLBACK_SOURCE


def fallback_review(metrics: EnergyMetrics) -> Review:
    """Deterministic review computed from the metrics alone."""
    complexity = metrics.complexity
    score = max(1, min(10, 10 - int(math.floor(complexity * 2))))

    high = complexity > HIGH_COMPLEXITY_THRESHOLD
    bottleneck = BOTTLENECK_HIGH if high else BOTTLENECK_LOW

    if metrics.recursion_detected:
        optimization = OPTIMIZATION_RECURSION
    elif high:
        optimization = OPTIMIZATION_NESTED
    else:
        optimization = OPTIMIZATION_DEFAULT

    percent = int(round_half_up(complexity * 5))
    improvement = f"Estimated {percent}% Energy reduction possible."

    return Review(
        score=score,
        bottleneck=bottleneck,
        optimization=optimization,
        improvement=improvement,
    )


def validate_review(payload: Any) -> Review:
    """Validate a reviewer payload against the Review shape."""
    if not isinstance(payload, dict):
        raise ReviewValidationError(
            f"review must be a JSON object, got {type(payload).__name__}", payload
        )
    try:
        return Review.model_validate(payload)
    except ValidationError as exc:
        raise ReviewValidationError(f"invalid review: {exc}", payload) from exc


def truncate_source(content: Optional[str], max_chars: int = MAX_REVIEW_CHARS) -> str:
    limit = max(0, min(max_chars, MAX_REVIEW_CHARS))
    return (content or "")[:limit]


class ReviewSynthesizer:
    """
    Tries each provider once, in order; the first structurally valid review wins.
    With allow_fallback, exhaustion (or cancellation) yields fallback_review;
    otherwise ReviewSynthesisError carries every provider's error.
    """

    def __init__(
        self,
        providers: Optional[Sequence[ReviewProvider]] = None,
        allow_fallback: bool = True,
        max_chars: int = MAX_REVIEW_CHARS,
    ):
        self.providers = list(providers or [])
        self.allow_fallback = allow_fallback
        self.max_chars = max_chars

    def review(
        self,
        content: Optional[str],
        metrics: EnergyMetrics,
        cancel_event: Optional[threading.Event] = None,
    ) -> Review:
        return self.synthesize(content, metrics, cancel_event).review

    def synthesize(
        self,
        content: Optional[str],
        metrics: EnergyMetrics,
        cancel_event: Optional[threading.Event] = None,
    ) -> ReviewOutcome:
        source_text = truncate_source(content, self.max_chars)
        errors: List[str] = []

        for provider in self.providers:
            if cancel_event is not None and cancel_event.is_set():
                errors.append("review cancelled")
                break
            try:
                payload = provider.request_review(source_text, metrics)
                review = validate_review(payload)
            except Exception as e:  # any provider failure moves on to the next provider
                logger.warning("Reviewer %s failed, trying next: %s", provider.name, e)
                errors.append(f"{provider.name}: {e}")
                continue
            return ReviewOutcome(review=review, source=provider.name, errors=errors)

        if not self.allow_fallback:
            raise ReviewSynthesisError(errors)

        if self.providers:
            logger.warning("No reviewer produced a valid review, using fallback")
        return ReviewOutcome(review=fallback_review(metrics), source=FALLBACK_SOURCE, errors=errors)
