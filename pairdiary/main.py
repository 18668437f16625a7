"""PairDiary Server - FastAPI Application Entry Point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from pairdiary.config import settings
from pairdiary.database import init_db
from pairdiary.responses import register_exception_handlers

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database on startup."""
    init_db()
    yield


app = FastAPI(
    title=settings.app_name,
    description="Shared diaries for pairs of friends",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_exception_handlers(app)

# --- Register API routers ---
from pairdiary.api.auth import router as auth_router  # noqa: E402
from pairdiary.api.pairs import router as pairs_router  # noqa: E402
from pairdiary.api.diaries import router as diaries_router  # noqa: E402
from pairdiary.api.public_diaries import router as public_diaries_router  # noqa: E402
from pairdiary.api.friends import router as friends_router  # noqa: E402

API_PREFIX = "/api"

app.include_router(auth_router, prefix=API_PREFIX)
app.include_router(pairs_router, prefix=API_PREFIX)
app.include_router(diaries_router, prefix=API_PREFIX)
app.include_router(public_diaries_router, prefix=API_PREFIX)
app.include_router(friends_router, prefix=API_PREFIX)


@app.get("/")
def root():
    """Server info."""
    return {
        "name": settings.app_name,
        "version": "0.1.0",
        "status": "running",
    }


@app.get("/api/health")
def health():
    return {"status": "ok"}
