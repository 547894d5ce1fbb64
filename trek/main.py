"""Main FastAPI application."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any

from fastapi import Depends, FastAPI, Request
from fastapi.responses import HTMLResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from fastapi.templating import Jinja2Templates

from trek import __version__, schemas
from trek.config import config
from trek.database import init_db
from trek.errors import TrekError
from trek.logging_config import configure_logging
from trek.tiles import MAP_TYPES, preview_tile_url, resolve_map_type


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Application lifespan manager."""
    await init_db()
    yield


configure_logging(debug=config.DEBUG, log_sql=config.LOG_SQL)
config.ensure_data_dirs()


app = FastAPI(
    title="Trek",
    description="Bookmark and organize places on your own maps",
    version=__version__,
    lifespan=lifespan,
)

static_path = Path(__file__).parent / "static"
app.mount("/static", StaticFiles(directory=str(static_path)), name="static")

templates_path = Path(__file__).parent / "templates"
templates = Jinja2Templates(directory=str(templates_path))


logger = logging.getLogger(__name__)
access_logger = logging.getLogger("trek.access")


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log incoming requests similar to the access log."""

    response = await call_next(request)
    client_host = "-"
    if request.client is not None:
        client_host = request.client.host or "-"

    access_logger.info(
        '%s - "%s %s" %s',
        client_host,
        request.method,
        request.url.path,
        response.status_code,
    )
    return response


@app.exception_handler(TrekError)
async def trek_error_handler(request: Request, exc: TrekError) -> JSONResponse:
    """Report domain errors as ``{"detail": message}``."""
    if exc.status_code >= 500:
        logger.error("%s %s failed: %s", request.method, request.url.path, exc)
    return JSONResponse(status_code=exc.status_code, content={"detail": exc.message})


# Health check endpoint
@app.get("/healthz")
async def healthz() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "ok"}


@app.get("/api/map-types")
async def map_types() -> dict[str, Any]:
    """Base tile layers the UI can switch between."""
    return {
        "default": resolve_map_type(config.DEFAULT_MAP_TYPE),
        "types": {key: cfg.to_dict() for key, cfg in MAP_TYPES.items()},
    }


# Import routes
from trek.routes import auth, categories, maps, markers  # noqa: E402
from trek.routes.auth import get_current_user  # noqa: E402

app.include_router(auth.router)
app.include_router(maps.router)
app.include_router(categories.router)
app.include_router(markers.router)


@app.get("/", response_class=HTMLResponse)
async def index(
    request: Request,
    current_user: schemas.User | None = Depends(get_current_user),
) -> HTMLResponse:
    """Render the map page."""
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "current_user": current_user,
            "map_types": MAP_TYPES,
            "previews": {key: preview_tile_url(key) for key in MAP_TYPES},
            "default_map_type": resolve_map_type(config.DEFAULT_MAP_TYPE),
        },
    )
