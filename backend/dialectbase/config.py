from pydantic_settings import BaseSettings
from functools import lru_cache
import logging

logger = logging.getLogger(__name__)

DEV_JWT_SECRET = "dialectbase-dev-secret-change-me"


class Settings(BaseSettings):
    # Auth
    jwt_secret: str = ""
    jwt_expires_days: int = 90
    bcrypt_rounds: int = 12

    # Storage
    database_url: str = "sqlite:///./database.sqlite"

    # Dictionary sources
    lookup_timeout: float = 5.0
    primary_api_url: str = "https://en.wiktionary.org/api/rest_v1/page/definition"
    secondary_api_url: str = "https://api.dictionaryapi.dev/api/v2/entries/en"

    # Quota
    free_weekly_searches: int = 10

    # App
    frontend_url: str = "http://localhost:3000"
    allowed_hosts: str = ""  # comma-separated; empty accepts any host
    debug: bool = False
    search_rate_limit: str = "30/minute"
    auth_rate_limit: str = "10/minute"

    class Config:
        env_file = ".env"

    @property
    def allowed_host_list(self) -> list[str]:
        return [h.strip() for h in self.allowed_hosts.split(",") if h.strip()]

    @property
    def signing_secret(self) -> str:
        return self.jwt_secret or DEV_JWT_SECRET


@lru_cache
def get_settings() -> Settings:
    s = Settings()
    if not s.jwt_secret:
        logger.warning("JWT_SECRET not configured. Using the development secret; tokens are NOT secure.")
    return s
