import time
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import FastAPI, Request

from likeable.database import DatabaseSessionManager, create_sessionmanager
from likeable.logger import logger
from likeable.plugin import LikeablePlugin
from likeable.services.like import Authorizer


def create_app(
    options: Optional[dict[str, Any]] = None,
    authorizer: Optional[Authorizer] = None,
    sessionmanager: Optional[DatabaseSessionManager] = None,
) -> FastAPI:
    """Standalone app serving only the likes endpoints"""
    plugin = LikeablePlugin()
    plugin.initialize(options, authorizer)
    sessionmanager = sessionmanager or create_sessionmanager()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        await sessionmanager.close()

    app = FastAPI(
        title="Likeable",
        version="0.1.0",
        description="Likes for posts, comments and users",
        lifespan=lifespan,
    )

    @app.middleware("http")
    async def log_request_time(request: Request, call_next):
        start_time = time.perf_counter()
        response = await call_next(request)
        process_time = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} completed in {process_time:.2f} ms"
        )
        return response

    plugin.setup_endpoints(app, sessionmanager)
    return app
