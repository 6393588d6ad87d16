"""
OpenRouter reviewer integration.
Requests a sustainability review from an OpenAI-compatible chat completion endpoint.
"""

import json
import re
from typing import Any, List, Optional

from openai import OpenAI, OpenAIError

from co2de_meter.config import Settings
from co2de_meter.errors import ReviewerUnavailableError
from co2de_meter.models import EnergyMetrics

_JSON_OBJECT = re.compile(r"\{[\s\S]*\}")

REVIEW_PROMPT = """You are a Sustainability Auditor. Analyze the code for environmental footprint.{context}
Return a JSON object with exactly these fields:
{{
  "score": integer (1-10, 10 is most efficient),
  "bottleneck": "string",
  "optimization": "string",
  "improvement": "string"
}}
Ensure the score reflects the complexity metrics provided."""


def metric_context(metrics: Optional[EnergyMetrics]) -> str:
    if metrics is None:
        return ""
    return (
        f"\n\nMetric Context: Big_O={metrics.complexity}, Mem_Pressure={metrics.mem_pressure}, "
        f"Lines={metrics.line_count}, Language={metrics.language}, "
        f"Recursion={'yes' if metrics.recursion_detected else 'no'}"
    )


def parse_json_content(content: Optional[str]) -> Any:
    """Decode the model output, recovering a JSON object wrapped in markdown."""
    if not content:
        raise ReviewerUnavailableError("reviewer returned empty content")
    try:
        return json.loads(content)
    except json.JSONDecodeError:
        match = _JSON_OBJECT.search(content)
        if match:
            try:
                return json.loads(match.group(0))
            except json.JSONDecodeError:
                pass
        raise ReviewerUnavailableError("failed to parse reviewer response as JSON")


class OpenRouterReviewer:
    """One reviewer model behind an OpenAI-compatible endpoint; a single attempt per call."""

    def __init__(self, model: str, client: OpenAI):
        self.model = model
        self.name = model
        self.client = client

    def request_review(self, source_text: str, metrics: EnergyMetrics) -> Any:
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": REVIEW_PROMPT.format(context=metric_context(metrics))},
                    {"role": "user", "content": f"Target Code:\n\n{source_text}"},
                ],
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            raise ReviewerUnavailableError(f"{type(exc).__name__}: {exc}") from exc

        choices = getattr(completion, "choices", None) or []
        if not choices:
            raise ReviewerUnavailableError("reviewer returned no choices")
        return parse_json_content(choices[0].message.content)


def build_providers(settings: Settings, client: Optional[OpenAI] = None) -> List[OpenRouterReviewer]:
    """Ordered reviewer list; empty when no API key is configured."""
    if not settings.reviewer_configured:
        return []
    client = client or OpenAI(
        api_key=settings.openrouter_api_key,
        base_url=settings.review_base_url,
        timeout=settings.review_timeout_sec,
        max_retries=0,
        default_headers={"X-Title": "CO2DE Audit Engine"},
    )
    return [OpenRouterReviewer(model, client) for model in settings.review_models]
