"""Level Up Arena - FastAPI app entry point."""
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from arena.core.config import get_settings
from arena.core.logging_config import setup_logging
from arena.core.rate_limit import FixedWindowLimiter
from arena.db.base import Base
from arena.db.session import AsyncSessionLocal, engine
from arena.engine.errors import (
    DataIntegrityError,
    EmptyReflection,
    FinalizeSaveError,
    InvalidChoice,
    InvalidOperationError,
)
from arena.llm import LLMProvider, build_provider
from arena.routers import api
from arena.services.content import SqlScenarioProvider
from arena.services.registry import PlayRegistry, build_play_services
from arena.services.seeding import seed_scenarios

logger = logging.getLogger(__name__)

settings = get_settings()


def init_state(
    app: FastAPI,
    session_factory: async_sessionmaker[AsyncSession],
    provider: LLMProvider | None,
) -> None:
    """Attach the scenario provider, play registry and coaching limiter the routes depend on."""
    app.state.scenarios = SqlScenarioProvider(session_factory)
    app.state.registry = PlayRegistry(build_play_services(settings, session_factory, provider))
    app.state.coaching_limiter = FixedWindowLimiter(settings.coaching_rate_limit, settings.coaching_rate_window_seconds)


@asynccontextmanager
async def lifespan(app: FastAPI):
    setup_logging(settings.log_level)

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    if settings.seed_on_startup:
        async with AsyncSessionLocal() as db:
            await seed_scenarios(db)

    provider = build_provider(settings)
    if provider is None:
        logger.warning("No Anthropic API key configured; coaching will use fallback text")
    init_state(app, AsyncSessionLocal, provider)
    logger.info("%s started", settings.app_name)

    yield

    await app.state.registry.close_all()
    await engine.dispose()


app = FastAPI(
    title=settings.app_name,
    description="Scenario-based leadership practice with coaching",
    lifespan=lifespan,
)


def _error(status_code: int, exc: Exception) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"detail": str(exc), "error": type(exc).__name__})


@app.exception_handler(DataIntegrityError)
async def data_integrity_handler(request: Request, exc: DataIntegrityError):
    return _error(422, exc)


@app.exception_handler(InvalidOperationError)
async def invalid_operation_handler(request: Request, exc: InvalidOperationError):
    return _error(409, exc)


@app.exception_handler(InvalidChoice)
async def invalid_choice_handler(request: Request, exc: InvalidChoice):
    return _error(400, exc)


@app.exception_handler(EmptyReflection)
async def empty_reflection_handler(request: Request, exc: EmptyReflection):
    return _error(400, exc)


@app.exception_handler(FinalizeSaveError)
async def finalize_save_handler(request: Request, exc: FinalizeSaveError):
    return _error(503, exc)


app.include_router(api.router)


@app.get("/health")
async def health():
    return {"status": "ok"}
