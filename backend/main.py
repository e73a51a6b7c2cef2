"""
FastAPI application bootstrap with: \n
- Lifespan-managed database connection check \n
- CORS configured for the frontend \n
- Request logging for `/api` calls \n
- Validation errors reported as 400 \n
- Auth/chat and admin routers \n
- Static file serving for the built frontend, when present \n

Environment contract (from `settings`): \n
- FRONTEND_URL: allowed CORS origin. \n
- LOG_LEVEL: root logging level. \n
"""

import logging
import os
import time
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from backend.api.admin_api import router as admin_router
from backend.api.fast_api import router
from backend.database.config.config import settings
from backend.database.config.connection_engine import connection_engine
from backend.database.core import funcs

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

FRONTEND_DIST = os.path.join("frontend", "dist")
LOG_LINE_MAX_LENGTH = 80


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    App lifespan manager.

    Notes
    ------------
    - On startup: runs `SELECT 1` to report whether the database is reachable,
      then inserts any missing built-in role so user role ids always resolve.
      An unreachable database is logged, not fatal: requests will fail with 500
      until it comes back.
    - On shutdown: disposes the engine's connection pool.
    """
    try:
        with connection_engine.connect() as connection:
            connection.execute(text("SELECT 1"))
        logger.info("Database connection verified")
        created_roles = funcs.seed_roles()
        if created_roles:
            logger.info("Seeded %s missing role(s)", created_roles)
    except SQLAlchemyError:
        logger.exception("Failed to connect to the database or seed roles")

    try:
        yield
    finally:
        connection_engine.dispose()
        logger.info("App shutting down")


app = FastAPI(title="Assistente Legislativo", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.FRONTEND_URL],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.middleware("http")
async def log_api_requests(request: Request, call_next):
    """Log `METHOD path status in Nms` for API calls."""
    start = time.perf_counter()
    response = await call_next(request)
    path = request.url.path
    if path.startswith("/api"):
        duration = int((time.perf_counter() - start) * 1000)
        log_line = f"{request.method} {path} {response.status_code} in {duration}ms"
        if len(log_line) > LOG_LINE_MAX_LENGTH:
            log_line = log_line[: LOG_LINE_MAX_LENGTH - 1] + "…"
        logger.info(log_line)
    return response


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    """Malformed bodies/params are client errors (400), rejected before any side effect."""
    return JSONResponse(
        status_code=400,
        content={"detail": "Dados inválidos", "errors": jsonable_encoder(exc.errors())},
    )


@app.get("/health")
def health():
    return {"status": "ok"}


app.include_router(router)
app.include_router(admin_router)

if os.path.isdir(FRONTEND_DIST):
    app.mount("/assets", StaticFiles(directory=os.path.join(FRONTEND_DIST, "assets")), name="static")

    # Catch-all route for React Router (must come after the API routers)
    @app.get("/")
    @app.get("/{full_path:path}")
    async def serve_react_app(full_path: str = ""):
        """
        Serve the frontend's index.html for all non-API routes to support client-side routing.
        """
        if full_path.startswith("api"):
            raise HTTPException(status_code=404, detail="Not Found")
        return FileResponse(os.path.join(FRONTEND_DIST, "index.html"))
