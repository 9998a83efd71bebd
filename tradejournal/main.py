"""Trade journal: FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy import text

from tradejournal import __version__
from tradejournal.api import reports, strategies, tags, trades, user_settings
from tradejournal.config import settings
from tradejournal.database import create_tables, engine

logger = logging.getLogger(__name__)

logging.basicConfig(
    level=getattr(logging, settings.log_level),
    format="%(asctime)s | %(name)s | %(levelname)s | %(message)s",
    datefmt="%Y-%m-%d %H:%M:%S",
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup: verify DB connection (and create tables in development). Shutdown: dispose engine."""
    try:
        async with engine.begin() as conn:
            await conn.execute(text("SELECT 1"))
        logger.info("Database connected successfully")
    except Exception as e:
        logger.error("Database connection failed: %s", e)
        raise
    if settings.app_env == "development":
        await create_tables()
        logger.info("Development schema ensured")
    yield
    await engine.dispose()
    logger.info("Database engine disposed")


app = FastAPI(
    title="Trade Journal",
    description="Trade log and performance analytics",
    version=__version__,
    lifespan=lifespan,
)

# CORS: restrict in production, allow the local UI dev servers in development
_allowed_origins = (
    ["http://localhost:8000", "http://localhost:3000", "http://localhost:5173"]
    if settings.app_env == "development"
    else settings.allowed_hosts.split(",")
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST", "PUT", "DELETE"],
    allow_headers=["Content-Type", "X-API-Key"],
)

app.include_router(trades.router)
app.include_router(strategies.router)
app.include_router(tags.router)
app.include_router(user_settings.router)
app.include_router(reports.router)


@app.get("/api")
async def api_root():
    return {
        "name": "Trade Journal",
        "version": __version__,
        "status": "running",
    }


@app.get("/api/health")
async def health_check():
    return {"status": "ok"}
