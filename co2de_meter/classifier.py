"""
Language Classifier - maps a file name to a language tag and energy multiplier.
"""

from typing import Mapping, Optional

from co2de_meter import rules
from co2de_meter.models import Language


def file_extension(file_name: Optional[str]) -> str:
    """Return the lower-cased extension of file_name, or '' when it has none."""
    if not file_name:
        return ""
    base = file_name.replace("\\", "/").rsplit("/", 1)[-1]
    if "." not in base.lstrip("."):
        return ""
    return base.rsplit(".", 1)[-1].lower()


class LanguageClassifier:
    """Total function from file name to Language; unknown extensions get the default."""

    def __init__(
        self,
        multipliers: Mapping[str, float] = rules.LANGUAGE_MULTIPLIERS,
        default_tag: str = rules.DEFAULT_LANGUAGE,
        default_multiplier: float = rules.DEFAULT_LANGUAGE_MULTIPLIER,
    ):
        self.multipliers = multipliers
        self.default = Language(default_tag, default_multiplier)

    def classify(self, file_name: Optional[str]) -> Language:
        ext = file_extension(file_name)
        multiplier = self.multipliers.get(ext)
        if multiplier is None:
            return self.default
        return Language(ext, multiplier)

    def is_known(self, file_name: Optional[str]) -> bool:
        return file_extension(file_name) in self.multipliers
