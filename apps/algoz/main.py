import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

# Environment is loaded by Pydantic Settings (see algoz.core.settings).
from algoz.api import register_routes
from algoz.core.database import init_db, session_scope
from algoz.core.dependencies import get_realtime_hub
from algoz.core.exceptions import register_exception_handlers
from algoz.core.logging import setup_logging
from algoz.core.settings import settings
from algoz.services.learning_resources import LearningResourceService

# Initialize logging early so all modules inherit the handlers/level
setup_logging(settings.log_level or settings.log_level_fallback)

logger = logging.getLogger(__name__)


def _prepare_database() -> None:
    """Create tables and seed the resource catalog.

    Best-effort: logs a warning on failure but does not block app startup.
    """
    try:
        init_db()
        with session_scope() as session:
            LearningResourceService(session).seed_defaults()
    except Exception as exc:  # pragma: no cover - external dependency
        logger.warning("Database bootstrap failed: %s", exc)


async def _stop_profile_updates() -> None:
    if get_realtime_hub.cache_info().currsize == 0:
        return
    scheduler = get_realtime_hub().scheduler
    if scheduler is not None:
        await scheduler.shutdown()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    _prepare_database()
    yield
    await _stop_profile_updates()


app = FastAPI(title="Algo-Z API", lifespan=lifespan)
register_exception_handlers(app)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allow_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_routes(app)

logger.info("Algo-Z API initialized (websocket path %s)", settings.ws_path)
