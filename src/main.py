from __future__ import annotations

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from pathlib import Path

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from src.api.auth import router as auth_router
from src.api.compare import router as compare_router
from src.api.dashboard import router as dashboard_router
from src.api.districts import router as districts_router
from src.api.health import router as health_router
from src.api.map import router as map_router
from src.api.reports import router as reports_router
from src.api.schools import router as schools_router
from src.config import get_settings

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    """Ensure the data directory, SQLite database, and tables exist on startup."""
    settings = get_settings()
    db_path = Path(settings.SQLITE_PATH)
    db_path.parent.mkdir(parents=True, exist_ok=True)

    from src.db.factory import get_school_repository
    from src.db.seed import seed_repository

    repo = get_school_repository()
    await repo.init_db()
    logger.info("Database ready at %s", db_path)

    if settings.SEED_DEMO_DATA:
        await seed_repository(repo)

    yield

    await repo.close()
    get_school_repository.cache_clear()


app = FastAPI(
    title="ICT Observatory API",
    description="API for recording school ICT observations and assessing ICT policy maturity",
    version="0.1.0",
    lifespan=lifespan,
)

_settings = get_settings()
_cors_origins = [o.strip() for o in _settings.CORS_ORIGINS.split(",") if o.strip()] if _settings.CORS_ORIGINS else []
if _cors_origins:
    app.add_middleware(
        CORSMiddleware,
        allow_origins=_cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

app.include_router(health_router)
app.include_router(auth_router)
app.include_router(schools_router)
app.include_router(districts_router)
app.include_router(reports_router)
app.include_router(compare_router)
app.include_router(dashboard_router)
app.include_router(map_router)


if __name__ == "__main__":
    uvicorn.run("src.main:app", host="0.0.0.0", port=8000, reload=True)
