import logging
import time
import traceback
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import uvicorn
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from gallery_api.api.router import api_router, root_router
from gallery_api.config import Settings, get_settings
from gallery_api.core.errors import ErrorCode, StorageError, code_for_status
from gallery_api.core.responses import error_response
from gallery_api.features.images.service import ImageService
from gallery_api.features.images.storage import ImageFileStorage
from gallery_api.features.users.service import UserService

logger = logging.getLogger("gallery_api")


def _validation_message(exc: RequestValidationError) -> str:
    """Collapse FastAPI's validation error list into one readable line."""

    parts = []
    for error in exc.errors():
        location = ".".join(str(item) for item in error.get("loc", ()) if item not in ("body", "query", "path"))
        message = error.get("msg", "Invalid value")
        parts.append(f"{location}: {message}" if location else message)
    return "; ".join(parts) or "Invalid request"


def _register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
        response = error_response(str(exc.detail), exc.status_code, code_for_status(exc.status_code))
        if exc.headers:
            response.headers.update(exc.headers)
        return response

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return error_response(_validation_message(exc), 400, ErrorCode.BAD_REQUEST)

    @app.exception_handler(StorageError)
    async def storage_exception_handler(request: Request, exc: StorageError) -> JSONResponse:
        logger.error("Storage failure on %s %s: %s", request.method, request.url.path, exc)
        return error_response(str(exc), 500, ErrorCode.INTERNAL_SERVER_ERROR)

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        """Log unhandled exceptions and answer with a CORS friendly 500 envelope."""

        logger.error(
            "Unhandled exception on %s %s: %s\n%s",
            request.method,
            request.url.path,
            str(exc),
            traceback.format_exc(),
        )
        response = error_response(str(exc) or "Internal Server Error", 500, ErrorCode.INTERNAL_SERVER_ERROR)

        # ServerErrorMiddleware sits outside CORSMiddleware, so echo the origin here
        origin = request.headers.get("origin", "")
        if origin:
            response.headers["Access-Control-Allow-Origin"] = origin
            response.headers["Access-Control-Allow-Credentials"] = "true"
        return response


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Build the application with its stores, routers and static upload mount."""

    settings = settings or get_settings()
    logging.basicConfig(level=settings.log_level.upper())

    files = ImageFileStorage(settings.upload_dir, settings.upload_url_prefix)

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        files.ensure_directory()
        app.state.started_at = time.monotonic()
        logger.info("Serving uploads from %s at %s", files.directory, settings.upload_url_prefix)
        yield

    app = FastAPI(title="Gallery API", lifespan=lifespan)
    app.state.settings = settings
    app.state.started_at = time.monotonic()
    app.state.user_service = UserService()
    app.state.image_service = ImageService(files)
    if settings.seed_users:
        app.state.user_service.seed_demo_user()

    allowed_origins = settings.allowed_origins
    logger.info("Configured CORS allow_origins=%s", allowed_origins)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=allowed_origins,
        allow_credentials=allowed_origins != ["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    _register_exception_handlers(app)

    app.include_router(root_router, prefix="/api")
    app.include_router(api_router, prefix="/api")
    app.mount(
        settings.upload_url_prefix,
        StaticFiles(directory=str(files.directory), check_dir=False),
        name="uploads",
    )
    return app


app = create_app()


def run() -> None:
    settings = get_settings()
    uvicorn.run("gallery_api.main:app", host=settings.host, port=settings.port)


if __name__ == "__main__":
    run()
