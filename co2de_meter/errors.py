"""
Exceptions raised by the CO2DE energy meter.
"""

from typing import List, Optional


class Co2deError(Exception):
    """Base class for meter errors."""


class InvalidInputError(Co2deError, ValueError):
    """Neither file content nor file size was supplied."""


class ReviewValidationError(Co2deError, ValueError):
    """A reviewer response does not match the Review shape."""

    def __init__(self, message: str, payload: Optional[object] = None):
        super().__init__(message)
        self.payload = payload


class ReviewerUnavailableError(Co2deError):
    """A single review provider could not produce a response."""


class ReviewSynthesisError(Co2deError):
    """Every review provider failed and the deterministic fallback was disabled."""

    def __init__(self, errors: List[str]):
        detail = " | ".join(errors) if errors else "no review providers configured"
        super().__init__(f"All review providers exhausted: {detail}")
        self.errors = list(errors)
