"""FastAPI application entrypoint."""

import logging
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from starlette.exceptions import HTTPException as StarletteHTTPException

from losttofound.api.v1 import v1_router
from losttofound.core.config import get_settings
from losttofound.core.database import init_db
from losttofound.core.errors import (
    LostToFoundError,
    http_error_handler,
    lost_to_found_error_handler,
    request_validation_error_handler,
)
from losttofound.services.identity import auth_events, log_auth_event

_settings = get_settings()

logging.basicConfig(
    level=_settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncGenerator[None, None]:
    # Startup: ensure tables exist (use Alembic in production)
    await init_db()
    unsubscribe = auth_events.subscribe(log_auth_event)
    yield
    unsubscribe()


app = FastAPI(
    title="LostToFound",
    version="0.1.0",
    description="Public profiles, lost boards and sighting reports for pets",
    lifespan=lifespan,
)

app.add_exception_handler(LostToFoundError, lost_to_found_error_handler)
app.add_exception_handler(StarletteHTTPException, http_error_handler)
app.add_exception_handler(RequestValidationError, request_validation_error_handler)

# ── CORS ─────────────────────────────────────────────────────
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in _settings.allowed_origins.split(",")],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ── API routes ───────────────────────────────────────────────
app.include_router(v1_router)


@app.get("/health", tags=["system"])
async def health_check() -> dict:
    return {"status": "ok"}


# ── Uploaded photos ──────────────────────────────────────────
_storage_dir = Path(_settings.storage_dir)
_storage_dir.mkdir(parents=True, exist_ok=True)
app.mount("/storage", StaticFiles(directory=_storage_dir), name="storage")
