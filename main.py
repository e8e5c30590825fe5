import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.cors import CORSMiddleware

from api.v1.router import api_router
from config import Settings, configure_logging, get_settings
from core.errors import UpstreamServiceError
from services.db import SqlStorage
from services.gemini import GeminiClient, LLMClient
from services.storage import Storage

_LOG = logging.getLogger(__name__)


def create_app(
    settings: Settings | None = None,
    *,
    storage: Storage | None = None,
    llm: LLMClient | None = None,
) -> FastAPI:
    """
    Build the API.  Tests pass their own `storage` / `llm`; otherwise both
    come from `settings` when the app starts, and a missing Gemini key
    stops startup instead of failing the first AI request.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        app.state.settings = settings
        app.state.llm = llm or GeminiClient.from_settings(settings)
        app.state.storage = storage or SqlStorage.from_settings(settings)
        await app.state.storage.create_schema()
        _LOG.info("Recipe book API ready (env=%s)", settings.env_name)
        try:
            yield
        finally:
            await app.state.storage.close()

    app = FastAPI(title="Recipe Book API", version="1.0.0", lifespan=lifespan)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(api_router, prefix="/api/v1")

    # ───────── error mapping ────────────────────────────────────────
    @app.exception_handler(UpstreamServiceError)
    async def _upstream_failed(_: Request, exc: UpstreamServiceError) -> JSONResponse:
        _LOG.warning("Upstream model call failed: %s", exc)
        return JSONResponse(status_code=502, content={"detail": str(exc)})

    @app.exception_handler(SQLAlchemyError)
    async def _storage_failed(_: Request, exc: SQLAlchemyError) -> JSONResponse:
        _LOG.exception("Storage failure", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Storage failure"})

    @app.exception_handler(Exception)
    async def _unhandled(_: Request, exc: Exception) -> JSONResponse:
        _LOG.exception("Unhandled error", exc_info=exc)
        return JSONResponse(status_code=500, content={"detail": "Internal server error"})

    @app.get("/health", tags=["meta"])
    def health() -> dict[str, str]:
        return {"status": "ok", "env": settings.env_name}

    return app


app = create_app()
