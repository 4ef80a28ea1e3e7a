from __future__ import annotations

import time
from collections.abc import Awaitable, Callable

import structlog
from fastapi import FastAPI, Request
from starlette.responses import Response

from streamhub.infrastructure.config import AppConfig
from streamhub.interfaces.api.errors import install_error_handlers
from streamhub.interfaces.app_state import AppState
from streamhub.interfaces.composition import lifespan

log = structlog.get_logger(__name__)


def build_app(config: AppConfig) -> FastAPI:
    """Build FastAPI app: configuration only, no resource initialization.

    Resources (HTTP client, registry, sessions) are created in lifespan().
    """
    app = FastAPI(
        title="StreamHub",
        description="Multi-provider media source resolution and playback sessions",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state = AppState()
    app.state.config = config

    install_error_handlers(app)

    from streamhub.interfaces.api.sessions.router import router as sessions_router
    from streamhub.interfaces.api.sources.router import router as sources_router
    from streamhub.interfaces.api.subtitles.router import router as subtitles_router

    app.include_router(sources_router)
    app.include_router(subtitles_router)
    app.include_router(sessions_router)

    @app.get("/healthz")
    async def healthz() -> dict[str, str | int]:
        """Liveness probe; reports open session count once started."""
        sessions = getattr(app.state, "sessions", None)
        return {"status": "ok", "sessions": len(sessions) if sessions else 0}

    @app.middleware("http")
    async def log_requests(
        request: Request, call_next: Callable[[Request], Awaitable[Response]]
    ):
        start = time.perf_counter()
        try:
            response = await call_next(request)
            return response
        finally:
            duration_ms = (time.perf_counter() - start) * 1000.0
            status_code = getattr(locals().get("response", None), "status_code", 500)

            log.info(
                "http_request",
                method=request.method,
                path=request.url.path,
                query=str(request.url.query),
                status_code=status_code,
                duration_ms=round(duration_ms, 2),
                client_host=(request.client.host if request.client else None),
            )

    return app
