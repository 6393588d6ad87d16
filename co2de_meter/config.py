"""
Runtime settings, read from the environment.
"""

import math
import os
from functools import lru_cache
from typing import List, Optional

from pydantic import BaseModel, Field

from co2de_meter import rules

DEFAULT_REVIEW_MODELS = [
    "deepseek/deepseek-r1-distill-llama-70b:free",
    "google/gemini-2.0-flash-lite-preview-02-05:free",
    "microsoft/phi-3-medium-128k-instruct:free",
    "meta-llama/llama-3.3-70b-instruct:free",
    "google/gemini-2.0-flash-exp:free",
]

MAX_REVIEW_CHARS = 10_000


class Settings(BaseModel):
    """Runtime configuration for the meter and its external reviewer."""

    openrouter_api_key: Optional[str] = Field(
        default=None,
        description="API key for the reviewer endpoint; without it the fallback review is used.",
    )
    review_base_url: str = Field(
        default="https://openrouter.ai/api/v1",
        description="OpenAI-compatible chat completion endpoint.",
    )
    review_models: List[str] = Field(
        default_factory=lambda: list(DEFAULT_REVIEW_MODELS),
        description="Reviewer models, tried in order until one returns a valid review.",
    )
    review_timeout_sec: float = Field(default=30.0, gt=0)
    review_max_chars: int = Field(default=MAX_REVIEW_CHARS, ge=1, le=MAX_REVIEW_CHARS)
    default_region: str = rules.DEFAULT_REGION
    default_hardware: str = rules.DEFAULT_HARDWARE

    @property
    def reviewer_configured(self) -> bool:
        return bool(self.openrouter_api_key) and bool(self.review_models)

    @classmethod
    def from_env(cls) -> "Settings":
        models = os.getenv("CO2DE_REVIEW_MODELS", "")
        return cls(
            openrouter_api_key=os.getenv("OPENROUTER_API_KEY") or None,
            review_base_url=os.getenv("CO2DE_REVIEW_BASE_URL", "https://openrouter.ai/api/v1"),
            review_models=[m.strip() for m in models.split(",") if m.strip()] or list(DEFAULT_REVIEW_MODELS),
            review_timeout_sec=_env_float("CO2DE_REVIEW_TIMEOUT_SEC", 30.0),
            review_max_chars=min(MAX_REVIEW_CHARS, max(1, int(_env_float("CO2DE_REVIEW_MAX_CHARS", MAX_REVIEW_CHARS)))),
            default_region=os.getenv("CO2DE_DEFAULT_REGION", rules.DEFAULT_REGION),
            default_hardware=os.getenv("CO2DE_DEFAULT_HARDWARE", rules.DEFAULT_HARDWARE),
        )


def _env_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if not math.isfinite(value) or value <= 0:
        return default
    return value


@lru_cache
def get_settings() -> Settings:
    """Return cached settings instance."""

    return Settings.from_env()
