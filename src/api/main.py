"""FastAPI application entry point."""

import os
import sys
import logging
import tomllib
from contextlib import asynccontextmanager
from pathlib import Path
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from dotenv import load_dotenv

# Must run before importing modules that read env vars at import time
load_dotenv()

# main.py is at <root>/src/api/main.py; src is two levels up
_src_path = Path(__file__).parent.parent
sys.path.insert(0, str(_src_path))

from api.middleware.cors import CORSHeadersMiddleware, cors_headers
from api.routes import entries, health
from utils.config import allowed_origin
from utils.logging import setup_structured_logging
from adapter.mongodb.connection import get_mongodb_client, DATABASE_NAME
from adapter.mongodb.entry_repository import MongoEntryRepository

setup_structured_logging()

logger = logging.getLogger(__name__)

# Read version from pyproject.toml (single source of truth)
_project_root = _src_path.parent
with open(_project_root / "pyproject.toml", "rb") as f:
    VERSION = tomllib.load(f)["project"]["version"]

SERVICE_NAME = "Digital Dictionary API"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan: ensure the uniqueness index exists."""
    client = get_mongodb_client()
    if client:
        if MongoEntryRepository(client[DATABASE_NAME]).ensure_indexes():
            logger.info("MongoDB indexes verified/created successfully")
        else:
            logger.warning("Failed to create some MongoDB indexes")
    else:
        logger.warning("MongoDB unavailable, skipping index creation")

    yield


app = FastAPI(
    title=SERVICE_NAME,
    description="Shared storage for dictionary entries synced across devices",
    version=VERSION,
    lifespan=lifespan,
)

app.add_middleware(CORSHeadersMiddleware)


# Every error response carries {"error": "..."}


@app.exception_handler(StarletteHTTPException)
async def http_exception_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": str(exc.detail)},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_exception_handler(request: Request, exc: RequestValidationError):
    logger.info("Rejected malformed request body", extra={"path": request.url.path})
    return JSONResponse(status_code=400, content={"error": "Missing required fields"})


@app.exception_handler(Exception)
async def unhandled_exception_handler(request: Request, exc: Exception):
    logger.error("Unhandled error", extra={"path": request.url.path}, exc_info=exc)
    # Runs outside CORSHeadersMiddleware, so the headers are added here
    return JSONResponse(
        status_code=500,
        content={"error": str(exc) or "Server error"},
        headers=cors_headers(request.headers.get("origin"), allowed_origin()),
    )


app.include_router(entries.router)
app.include_router(health.router)


@app.get("/")
async def root():
    """Root endpoint."""
    return {
        "service": SERVICE_NAME,
        "version": VERSION,
        "status": "running"
    }


if __name__ == "__main__":
    import uvicorn
    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        app,
        host="0.0.0.0",
        port=port,
        access_log=False  # structured application logs only
    )
