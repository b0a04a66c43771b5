"""
Dependency wiring for the FastAPI app.
"""

from __future__ import annotations

import httpx
from fastapi import Depends

from dialectbase.auth.service import AuthService
from dialectbase.config import get_settings
from dialectbase.search.knowledge import KnowledgeBase
from dialectbase.search.quota import QuotaPolicy
from dialectbase.search.service import LookupChain
from dialectbase.users.store import UserStore

_user_store: UserStore | None = None
_http_client: httpx.AsyncClient | None = None
_knowledge_base: KnowledgeBase | None = None


def get_user_store() -> UserStore:
    """
    Return a singleton store so every request shares one engine and pool.
    """
    global _user_store
    if _user_store:
        return _user_store
    _user_store = UserStore(get_settings().database_url)
    return _user_store


def get_auth_service(store: UserStore = Depends(get_user_store)) -> AuthService:
    settings = get_settings()
    return AuthService(
        store,
        secret=settings.signing_secret,
        expires_days=settings.jwt_expires_days,
        bcrypt_rounds=settings.bcrypt_rounds,
    )


def get_quota_policy(store: UserStore = Depends(get_user_store)) -> QuotaPolicy:
    return QuotaPolicy(store, weekly_limit=get_settings().free_weekly_searches)


def get_knowledge_base() -> KnowledgeBase:
    global _knowledge_base
    if _knowledge_base is None:
        _knowledge_base = KnowledgeBase()
    return _knowledge_base


def get_http_client() -> httpx.AsyncClient:
    global _http_client
    if _http_client is None or _http_client.is_closed:
        _http_client = httpx.AsyncClient(
            timeout=get_settings().lookup_timeout,
            headers={"User-Agent": "DialectBase/1.0 (dictionary lookup)"},
            follow_redirects=True,
        )
    return _http_client


async def close_http_client():
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None


def get_lookup_chain(
    http: httpx.AsyncClient = Depends(get_http_client),
    kb: KnowledgeBase = Depends(get_knowledge_base),
) -> LookupChain:
    return LookupChain.from_settings(get_settings(), http, kb)
