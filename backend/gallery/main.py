"""Gallery Server Application.

This is the main entry point for the gallery backend service. A browser
client uploads PDF and image files, lists them as a gallery, replaces them
and deletes them.

Modules:
    - files: upload directory management and the REST endpoints over it
    - config: YAML settings
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exception_handlers import request_validation_exception_handler
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from gallery import __version__
from gallery.config import AppConfig, get_config
from gallery.files.errors import FileServiceError, MissingFile
from gallery.files.router import router as files_router
from gallery.files.service import FileStorageService

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)

# python-multipart logs every parsed part at DEBUG.
for _noisy in ("multipart", "multipart.multipart", "python_multipart"):
    logging.getLogger(_noisy).setLevel(logging.WARNING)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    # Startup
    config: AppConfig = app.state.config

    configured_level = getattr(logging, config.logging.level.upper(), None)
    if configured_level is not None:
        logging.getLogger().setLevel(configured_level)
        logger.info("Root logger level set to %s", config.logging.level.upper())

    service = FileStorageService.get_instance(config.storage.upload_dir)
    logger.info(
        f"Serving uploads from {service.upload_dir} at {config.storage.url_prefix}"
    )

    yield  # Application runs here

    # Shutdown
    logger.info("Application shutdown complete")


async def file_service_error_handler(request: Request, exc: FileServiceError) -> JSONResponse:
    """Render storage errors as ``{"message": ...}`` with the error's status."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    else:
        logger.warning("%s %s rejected: %s", request.method, request.url.path, exc)
    return JSONResponse({"message": exc.message}, status_code=exc.status_code)


async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """Report a ``file`` form field that is not a file part as MissingFile.

    Any other validation failure keeps FastAPI's default 422 response.
    """
    if any(tuple(err.get("loc", ()))[:2] == ("body", "file") for err in exc.errors()):
        return await file_service_error_handler(request, MissingFile())
    return await request_validation_exception_handler(request, exc)


def create_app(config: Optional[AppConfig] = None) -> FastAPI:
    """Build the FastAPI application for the given config."""
    config = config or get_config()

    app = FastAPI(
        title="Gallery API",
        description="Upload, list, replace and delete PDF and image files",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.config = config

    app.add_middleware(
        CORSMiddleware,
        allow_origins=config.server.allowed_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.add_exception_handler(FileServiceError, file_service_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.include_router(files_router)

    @app.get("/health")
    async def health() -> dict:
        """Health check endpoint.

        Returns:
            dict: Status object indicating the server is running.
        """
        return {"status": "ok"}

    # Stored files are served directly by name; the directory is created by
    # FileStorageService, so it may not exist yet at this point.
    app.mount(
        config.storage.url_prefix,
        StaticFiles(directory=config.storage.upload_dir, check_dir=False),
        name="uploads",
    )
    return app


app = create_app()
