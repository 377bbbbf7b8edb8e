"""FastAPI app factory."""

from __future__ import annotations

import logging

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from figure_composer.config import settings
from figure_composer.exceptions import (
    PreconditionError,
    RetrievalError,
    SessionNotFoundError,
    ValidationError,
)

load_dotenv()

logging.basicConfig(
    level=getattr(logging, settings.figure_composer_log_level.upper(), logging.INFO),
    format="%(asctime)s %(name)s %(levelname)s %(message)s",
)

logger = logging.getLogger(__name__)

_STATUS_BY_ERROR: dict[type[Exception], int] = {
    RetrievalError: 502,
    PreconditionError: 409,
    ValidationError: 422,
    SessionNotFoundError: 404,
}


def create_app() -> FastAPI:
    app = FastAPI(
        title="Figure Composer",
        description="Two-figure SVG composition with auto-cropped viewport and pixel-exact export",
        version="0.1.0",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_error_handlers(app)

    from figure_composer.api.router import api_router

    app.include_router(api_router)

    return app


def _register_error_handlers(app: FastAPI) -> None:
    """Map composer exceptions to HTTP status codes with a ``{"detail": ...}`` body."""

    for exc_type, status_code in _STATUS_BY_ERROR.items():

        async def _handler(request: Request, exc: Exception, status_code: int = status_code) -> JSONResponse:
            logger.warning("%s %s -> %d: %s", request.method, request.url.path, status_code, exc)
            return JSONResponse(status_code=status_code, content={"detail": str(exc)})

        app.add_exception_handler(exc_type, _handler)


app = create_app()
