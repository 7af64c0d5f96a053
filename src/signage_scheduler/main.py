from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from signage_scheduler.api.routes import api_router
from signage_scheduler.core.config import Settings, get_settings
from signage_scheduler.core.errors import register_exception_handlers
from signage_scheduler.core.logging import configure_logging
from signage_scheduler.db import session as db_session
from signage_scheduler.repositories.schedule import SqlAlchemyCandidateRepository
from signage_scheduler.services.resolver import ScheduleResolver
from signage_scheduler.services.retry import RetryingCandidateRepository


def build_schedule_resolver(
    session_factory: async_sessionmaker[AsyncSession], settings: Settings
) -> ScheduleResolver:
    repository = RetryingCandidateRepository(
        SqlAlchemyCandidateRepository(session_factory),
        attempts=settings.repository_retry_attempts,
        backoff_seconds=settings.repository_retry_backoff_seconds,
        backoff_max_seconds=settings.repository_retry_backoff_max_seconds,
        timeout_seconds=settings.repository_timeout_seconds,
    )
    return ScheduleResolver(repository)


async def health_check() -> dict[str, str]:
    """Simple health endpoint for infrastructure monitoring."""
    return {"status": "ok"}


def create_application() -> FastAPI:
    settings = get_settings()
    configure_logging(settings.log_level)
    app = FastAPI(
        title=settings.project_name,
        version=settings.version,
        description="API resolving which schedule and layout each signage player displays.",
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    register_exception_handlers(app)
    app.state.schedule_resolver = build_schedule_resolver(db_session.async_session_factory, settings)
    app.include_router(api_router, prefix=settings.api_prefix)
    app.add_api_route("/health", health_check, methods=["GET"])
    return app


app = create_application()
