import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from dialectbase.config import get_settings
from dialectbase.dependencies import close_http_client, get_knowledge_base, get_user_store
from dialectbase.errors import setup_error_handlers
from dialectbase.middleware import setup_middleware
from dialectbase.search.router import router as search_router
from dialectbase.auth.router import router as auth_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Creates the users table if it does not exist yet
    get_user_store()
    logger.info(f"Supported languages: {', '.join(get_knowledge_base().language_names())}")

    yield

    await close_http_client()


def create_app() -> FastAPI:
    settings = get_settings()
    app = FastAPI(
        title="DialectBase API",
        version="1.0.0",
        docs_url="/docs" if settings.debug else None,
        lifespan=lifespan,
    )

    setup_middleware(app, settings.frontend_url, settings.allowed_host_list)
    setup_error_handlers(app)

    app.include_router(search_router, prefix="/api")
    app.include_router(auth_router, prefix="/api/auth")

    @app.get("/")
    async def root():
        return {"status": "alive", "service": "dialectbase-api"}

    @app.get("/health")
    async def health():
        return {"status": "healthy", "service": "dialectbase-api"}

    return app


app = create_app()
