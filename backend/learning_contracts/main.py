"""Learning Contracts API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ContractsError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - DatabaseSessionManager built on startup, kept on app.state, disposed on shutdown

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Three error handler layers (api/error_handlers.py): ContractsError (domain),
      RequestValidationError (Pydantic), Exception (catch-all)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from learning_contracts.api.error_handlers import register_error_handlers
from learning_contracts.api.routes import (
    amendments, clauses, cohorts, contracts, health, recordings, users,
)
from learning_contracts.config import get_settings
from learning_contracts.infrastructure.database import DatabaseSessionManager
from learning_contracts.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    app.state.db_manager = DatabaseSessionManager(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Learning Contracts API started")
    yield
    logger.info("Learning Contracts API shutting down")
    await app.state.db_manager.dispose()
    app.state.db_manager = None


app = FastAPI(
    title="Learning Contracts API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(users.router)
app.include_router(cohorts.router)
app.include_router(contracts.router)
app.include_router(clauses.router)
app.include_router(amendments.router)
app.include_router(recordings.router)

register_error_handlers(app)
