"""
DialectBase Lookup Chain

Tries each definition source in order and returns the first hit, tagged with
the source that produced it. Sources run strictly one after another: the next
one is only contacted once the previous has failed. No source is retried.
"""

import logging
from typing import Sequence

import httpx

from dialectbase.config import Settings
from dialectbase.errors import UnsupportedLanguage, WordNotFound
from dialectbase.search.fetcher import (
    DefinitionSource,
    FreeDictionarySource,
    LocalTableSource,
    WiktionarySource,
)
from dialectbase.search.knowledge import KnowledgeBase
from dialectbase.search.schemas import LookupResult

logger = logging.getLogger(__name__)


class LookupChain:
    def __init__(self, kb: KnowledgeBase, sources: Sequence[DefinitionSource]):
        self.kb = kb
        self.sources = list(sources)

    @classmethod
    def from_settings(cls, settings: Settings, http: httpx.AsyncClient, kb: KnowledgeBase | None = None):
        kb = kb or KnowledgeBase()
        return cls(kb, [
            WiktionarySource(http, kb, settings.primary_api_url, settings.lookup_timeout),
            FreeDictionarySource(http, settings.secondary_api_url, settings.lookup_timeout),
            LocalTableSource(kb),
        ])

    def check_language(self, language: str) -> str:
        """Return the language code, or raise before anything touches the network."""
        code = self.kb.language_code(language)
        if not code:
            raise UnsupportedLanguage(
                "Language not supported. Supported languages: "
                + ", ".join(self.kb.language_names())
            )
        return code

    async def search(self, word: str, language: str) -> LookupResult:
        word = word.strip()
        language = language.strip().lower()
        self.check_language(language)

        for source in self.sources:
            try:
                result = await source.lookup(word, language)
                logger.info(f"'{word}' ({language}) resolved by {source.source.value}")
                return result
            except httpx.TimeoutException:
                logger.warning(f"{source.source.value} timed out for '{word}', falling through")
            except Exception as e:
                logger.warning(f"{source.source.value} failed for '{word}': {e}")

        raise WordNotFound(
            f'No definition found for "{word}" in {language}. '
            "The word might be misspelled or not in our databases."
        )
