from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field


class Source(str, Enum):
    PRIMARY_API = "primary-api"
    SECONDARY_API = "secondary-api"
    LOCAL_FALLBACK = "local-fallback"


class SearchRequest(BaseModel):
    word: Optional[str] = Field(None, max_length=100)
    language: Optional[str] = Field(None, max_length=50)
    token: Optional[str] = None


class LookupResult(BaseModel):
    word: str
    language: str
    meaning: str
    source: Source
    note: Optional[str] = None
    original_word: Optional[str] = Field(None, serialization_alias="originalWord")


class SearchData(BaseModel):
    word: str
    language: str
    meaning: str
    source: Source
    note: str = ""
    searchesLeft: Union[int, str, None] = None
