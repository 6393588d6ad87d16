"""
External integrations: OpenRouter reviewer, Radon (cyclomatic complexity).
"""

from co2de_meter.integrations.openrouter_integration import OpenRouterReviewer, build_providers
from co2de_meter.integrations.radon_integration import get_max_cyclomatic_complexity

__all__ = ["OpenRouterReviewer", "build_providers", "get_max_cyclomatic_complexity"]
