"""
CineGraph API — FastAPI application entry point.

Routers are registered here. Each service lives in cinegraph/api/.
Domain errors raised by the services are translated to HTTP responses here
and nowhere else.
"""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from cinegraph.api import directors, films, reference, reviews, users
from cinegraph.core.config import settings
from cinegraph.core.errors import IncorrectParameterError, InvalidFieldError, NotFoundError
from cinegraph.core.logger import setup_json_logging
from cinegraph.db.models import Base
from cinegraph.db.session import SessionLocal, engine
from cinegraph.services.catalog_index import CatalogIndex
from cinegraph.services.reference_service import seed_reference_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_json_logging()

    if settings.AUTO_CREATE_SCHEMA:
        Base.metadata.create_all(bind=engine)
        logger.info("schema_created", extra={"database": engine.url.render_as_string(hide_password=True)})

    catalog = CatalogIndex()
    db = SessionLocal()
    try:
        if settings.AUTO_CREATE_SCHEMA:
            seed_reference_data(db)
        catalog.rebuild(db)
    finally:
        db.close()
    app.state.catalog = catalog

    yield


app = FastAPI(
    title="CineGraph API",
    description="Film catalog with friendships, reviews, an activity feed and recommendations.",
    version="0.1.0",
    docs_url="/docs" if settings.ENABLE_DOCS else None,
    redoc_url="/redoc" if settings.ENABLE_DOCS else None,
    lifespan=lifespan,
)

# ── CORS ──────────────────────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Error translation ─────────────────────────────────────────────────────────
def _error(code: str, message: str) -> dict:
    return {"detail": {"error": {"code": code, "message": message}}}


@app.exception_handler(NotFoundError)
def handle_not_found(request: Request, exc: NotFoundError) -> JSONResponse:
    logger.warning("not_found", extra={"code": exc.code, "path": request.url.path})
    return JSONResponse(status_code=status.HTTP_404_NOT_FOUND, content=_error(exc.code, str(exc)))


@app.exception_handler(InvalidFieldError)
def handle_invalid_fields(request: Request, exc: InvalidFieldError) -> JSONResponse:
    logger.warning(
        "invalid_fields",
        extra={"fields": [e.field for e in exc.errors], "path": request.url.path},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error(exc.code, str(exc)))


@app.exception_handler(IncorrectParameterError)
def handle_incorrect_parameter(request: Request, exc: IncorrectParameterError) -> JSONResponse:
    logger.warning(
        "incorrect_parameter",
        extra={"parameter": exc.parameter, "path": request.url.path},
    )
    return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST, content=_error(exc.code, str(exc)))


# ── Routers ───────────────────────────────────────────────────────────────────
app.include_router(films.router,            prefix="/films",     tags=["films"])
app.include_router(users.router,            prefix="/users",     tags=["users"])
app.include_router(reviews.router,          prefix="/reviews",   tags=["reviews"])
app.include_router(directors.router,        prefix="/directors", tags=["directors"])
app.include_router(reference.genres_router, prefix="/genres",    tags=["genres"])
app.include_router(reference.mpa_router,    prefix="/mpa",       tags=["mpa"])


# ── Health check ──────────────────────────────────────────────────────────────
@app.get("/health", tags=["system"])
def health_check() -> dict:
    """Liveness probe. Returns 200 when the server is up."""
    return {"status": "ok", "version": app.version, "env": settings.APP_ENV}
