from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.routing import APIRouter
from loguru import logger

from codeprep.hub.db.engine import create_engine, create_session_factory
from codeprep.hub.execution.adapter import ExecutionAdapter
from codeprep.hub.log import setup_logging
from codeprep.hub.registry import WorkspaceRegistry
from codeprep.hub.settings import get_settings

# ---------------------------------------------------------------------------
# Shared objects initialised during lifespan
# ---------------------------------------------------------------------------
execution_adapter = ExecutionAdapter()


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    # -- Startup ---------------------------------------------------------------
    settings = get_settings()
    setup_logging(settings.log_level, json=settings.log_json)

    auth_token = settings.resolve_auth_token()
    if not settings.auth_token:
        logger.warning("No CODEPREP_AUTH_TOKEN set -- generated token: {}", auth_token)
    _app.state.auth_token = auth_token

    logger.info("CodePrep Hub starting (host={}, port={})", settings.host, settings.port)

    _app.state.db_engine = None
    _app.state.db_session_factory = None
    _app.state.workspace_registry = WorkspaceRegistry(
        default_language=settings.default_language,
        max_editors_per_user=settings.max_editors_per_user,
    )
    _app.state.execution_adapter = execution_adapter
    logger.info(
        "Execution: in-process runners for {}",
        ", ".join(lang.value for lang in execution_adapter.executable_languages) or "none",
    )

    # -- Database --------------------------------------------------------------
    if settings.database_url:
        engine = create_engine(settings.database_url)
        _app.state.db_engine = engine
        _app.state.db_session_factory = create_session_factory(engine)
        logger.info("Database: {} engine ready", engine.dialect.name)
    else:
        logger.warning("CODEPREP_DATABASE_URL not set -- database features disabled")

    yield

    # -- Shutdown --------------------------------------------------------------
    registry: WorkspaceRegistry = _app.state.workspace_registry
    logger.info("CodePrep Hub shutting down (open_editors={})", registry.active_count)
    registry.clear()

    if _app.state.db_engine is not None:
        await _app.state.db_engine.dispose()
        logger.info("Database: engine disposed")


app = FastAPI(title="CodePrep Hub", lifespan=lifespan)

# ---------------------------------------------------------------------------
# API router -- all backend endpoints live under /api
# ---------------------------------------------------------------------------
api = APIRouter(prefix="/api")


@api.get("/health")
async def health() -> dict[str, str]:
    return {"status": "ok"}


# -- Routers -----------------------------------------------------------------
from codeprep.hub.routers.activities import router as activities_router  # noqa: E402
from codeprep.hub.routers.editors import router as editors_router  # noqa: E402
from codeprep.hub.routers.folders import router as folders_router  # noqa: E402
from codeprep.hub.routers.groups import router as groups_router  # noqa: E402
from codeprep.hub.routers.profiles import router as profiles_router  # noqa: E402
from codeprep.hub.routers.programs import router as programs_router  # noqa: E402

api.include_router(profiles_router)
api.include_router(folders_router)
api.include_router(programs_router)
api.include_router(groups_router)
api.include_router(activities_router)
api.include_router(editors_router)

app.include_router(api)
