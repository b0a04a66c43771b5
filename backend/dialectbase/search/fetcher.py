"""
DialectBase dictionary sources

- Wiktionary REST definitions (primary, keyed by language code)
- Free Dictionary API (secondary, English only)
- Local fallback table (last resort, no network)

Each source either returns a LookupResult or raises. The chain in service.py
decides what happens next.
"""

import logging
import re
from urllib.parse import quote

import httpx
from bs4 import BeautifulSoup

from dialectbase.search.knowledge import KnowledgeBase
from dialectbase.search.schemas import LookupResult, Source

logger = logging.getLogger(__name__)


class SourceMiss(Exception):
    """A source answered but had nothing usable for the word."""


def _clean(text: str) -> str:
    # Inline HTML with entities; \s also matches \xa0
    plain = BeautifulSoup(text or "", "html.parser").get_text()
    return re.sub(r"\s+", " ", plain).strip()


class DefinitionSource:
    source: Source

    async def lookup(self, word: str, language: str) -> LookupResult:
        raise NotImplementedError


# ═══════════════════════════════════════
# Wiktionary (primary)
# ═══════════════════════════════════════

class WiktionarySource(DefinitionSource):
    source = Source.PRIMARY_API

    def __init__(self, http: httpx.AsyncClient, kb: KnowledgeBase, base_url: str, timeout: float = 5.0):
        self.http = http
        self.kb = kb
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def lookup(self, word: str, language: str) -> LookupResult:
        code = self.kb.language_code(language)
        if not code:
            raise SourceMiss(f"no language code for {language}")

        resp = await self.http.get(f"{self.base_url}/{quote(word, safe='')}", timeout=self.timeout)
        resp.raise_for_status()
        sections = resp.json().get(code)
        if not sections:
            raise SourceMiss(f"no '{code}' section for {word}")

        meaning = _clean(sections[0]["definitions"][0]["definition"])
        if not meaning:
            raise SourceMiss(f"empty definition for {word}")
        return LookupResult(word=word, language=language, meaning=meaning, source=self.source)


# ═══════════════════════════════════════
# Free Dictionary (secondary, English)
# ═══════════════════════════════════════

class FreeDictionarySource(DefinitionSource):
    source = Source.SECONDARY_API

    def __init__(self, http: httpx.AsyncClient, base_url: str, timeout: float = 5.0):
        self.http = http
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    async def lookup(self, word: str, language: str) -> LookupResult:
        resp = await self.http.get(f"{self.base_url}/{quote(word, safe='')}", timeout=self.timeout)
        resp.raise_for_status()
        entries = resp.json()
        if not isinstance(entries, list) or not entries:
            raise SourceMiss(f"no English entry for {word}")

        meaning = _clean(entries[0]["meanings"][0]["definitions"][0]["definition"])
        if not meaning:
            raise SourceMiss(f"empty definition for {word}")
        return LookupResult(
            word=word,
            language="english",
            meaning=meaning,
            source=self.source,
            original_word=word,
            note="translated via English dictionary",
        )


# ═══════════════════════════════════════
# Local table (last resort)
# ═══════════════════════════════════════

class LocalTableSource(DefinitionSource):
    source = Source.LOCAL_FALLBACK

    def __init__(self, kb: KnowledgeBase):
        self.kb = kb

    async def lookup(self, word: str, language: str) -> LookupResult:
        meaning = self.kb.fallback_meaning(language, word)
        if meaning is None:
            raise SourceMiss(f"{word} not in local table for {language}")
        return LookupResult(
            word=word,
            language=language,
            meaning=meaning,
            source=self.source,
            note="from local table (limited words)",
        )
