from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from ... import __version__
from ...api import router
from ...domain import ForbiddenError, NotFoundError, StorageError, ValidationError
from ..context import ServiceContext

logger = logging.getLogger(__name__)


def _validation_response(errors: list[dict]) -> JSONResponse:
    return JSONResponse(status_code=400, content={"errors": errors})


def _register_error_handlers(app: FastAPI, *, mask_forbidden: bool) -> None:
    @app.exception_handler(ValidationError)
    async def handle_validation(_request: Request, exc: ValidationError) -> JSONResponse:
        logger.warning("Rejected event input: %s", exc)
        return _validation_response([{"field": field, "message": message} for field, message in exc.errors.items()])

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(_request: Request, exc: RequestValidationError) -> JSONResponse:
        errors = [
            {"field": ".".join(str(part) for part in error["loc"] if part != "body"), "message": error["msg"]}
            for error in exc.errors()
        ]
        return _validation_response(errors)

    @app.exception_handler(NotFoundError)
    async def handle_not_found(_request: Request, exc: NotFoundError) -> JSONResponse:
        return JSONResponse(status_code=404, content={"error": "Event not found"})

    @app.exception_handler(ForbiddenError)
    async def handle_forbidden(_request: Request, exc: ForbiddenError) -> JSONResponse:
        if mask_forbidden:
            return JSONResponse(status_code=404, content={"error": "Event not found"})
        return JSONResponse(status_code=403, content={"error": "Access denied"})

    @app.exception_handler(StorageError)
    async def handle_storage(_request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure while serving request: %s", exc)
        return JSONResponse(status_code=503, content={"error": "Event store unavailable"})


def create_app(context: Optional[ServiceContext] = None) -> FastAPI:
    """Build the API around one ``ServiceContext``, opened and closed with the app lifespan."""

    service_context = context or ServiceContext()

    @asynccontextmanager
    async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
        service_context.open()
        try:
            yield
        finally:
            service_context.close()

    app = FastAPI(title="Daybook API", version=__version__, lifespan=lifespan)
    app.state.context = service_context
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.include_router(router)
    _register_error_handlers(app, mask_forbidden=service_context.settings.http.mask_forbidden)
    return app


def run_local_server(host: str = "127.0.0.1", port: int = 8000, *, context: Optional[ServiceContext] = None) -> None:
    import asyncio
    from hypercorn.asyncio import serve
    from hypercorn.config import Config

    config = Config()
    config.bind = [f"{host}:{port}"]
    logger.info("Serving Daybook API on %s:%s", host, port)
    asyncio.run(serve(create_app(context), config))
