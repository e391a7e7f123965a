"""FastAPI application wiring for hexmarch."""

from __future__ import annotations

import logging
from collections.abc import Callable
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hexmarch import __version__
from hexmarch.api import routes
from hexmarch.api.runtime import ApiState, build_state
from hexmarch.config import get_settings
from hexmarch.domain.news import NewsEventNotFoundError

logger = logging.getLogger(__name__)


async def _news_event_not_found(request: Request, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content={"detail": str(exc)})


def create_app(*, state_factory: Callable[[], ApiState] = build_state) -> FastAPI:
    """Build the hexmarch API around a lazily created :class:`ApiState`.

    The state (repository, rules, tick manager) is created when the lifespan
    starts, and the automatic tick loop is stopped when it ends.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        state = state_factory()
        app.state.api_state = state
        logger.info(
            "hexmarch API serving campaigns from %s (rules %s)",
            state.settings.data_dir,
            state.settings.rules_version,
        )
        try:
            yield
        finally:
            await state.shutdown()

    settings = get_settings()
    app = FastAPI(title="hexmarch API", version=__version__, lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(NewsEventNotFoundError, _news_event_not_found)
    app.include_router(routes.router)
    return app


app = create_app()
