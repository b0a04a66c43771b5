"""
Static knowledge: supported languages and the local fallback table.

Built once at startup and handed to the lookup chain. Read-only.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

SUPPORTED_LANGUAGES = {
    "tamil": "ta",
    "telugu": "te",
    "hindi": "hi",
    "tulu": "tcy",
    "kannada": "kn",
    "malayalam": "ml",
    "bengali": "bn",
}

FALLBACK_TABLE = {
    "tamil": {
        "vanakkam": "Hello/Welcome",
        "nandri": "Thank you",
        "sugam": "Well/Good",
    },
    "telugu": {
        "namaskaram": "Hello",
        "dhanyavaadhamulu": "Thank you",
        "bagunnana": "How are you?",
    },
    "hindi": {
        "namaste": "Hello",
        "dhanyavaad": "Thank you",
        "kaise ho": "How are you?",
    },
    "tulu": {
        "yenna": "What",
        "aanda": "Yes",
        "porluga": "Good",
    },
}


def _freeze(mapping: Mapping) -> Mapping:
    return MappingProxyType(
        {k: _freeze(v) if isinstance(v, Mapping) else v for k, v in mapping.items()}
    )


@dataclass(frozen=True)
class KnowledgeBase:
    languages: Mapping[str, str] = field(default_factory=lambda: _freeze(SUPPORTED_LANGUAGES))
    fallback: Mapping[str, Mapping[str, str]] = field(default_factory=lambda: _freeze(FALLBACK_TABLE))

    @classmethod
    def build(cls, languages: Mapping[str, str], fallback: Mapping[str, Mapping[str, str]]):
        return cls(languages=_freeze(languages), fallback=_freeze(fallback))

    def language_code(self, language: str) -> Optional[str]:
        return self.languages.get(language.strip().lower())

    def language_names(self) -> list[str]:
        return list(self.languages)

    def fallback_meaning(self, language: str, word: str) -> Optional[str]:
        table = self.fallback.get(language.strip().lower(), {})
        return table.get(word.strip().lower())
