import asyncio
import logging
from contextlib import asynccontextmanager
from typing import Callable, Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from .config import Settings, load_settings
from .logging_config import setup_logging
from .routers import transactions
from .screen import ScreenController
from .services.permissions import PermissionGate, PermissionProvider, build_permission_provider
from .services.sms_parser import now_ms
from .services.sms_source import SmsSource, build_sms_source


logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # Mount in the background so requests see the loading state meanwhile
    screen: ScreenController = app.state.screen
    app.state.mount_task = asyncio.create_task(screen.mount())
    logger.info("[startup] Mounting screen in background")
    yield
    mount_task = app.state.mount_task
    if not mount_task.done():
        mount_task.cancel()
    try:
        await mount_task
    except asyncio.CancelledError:
        logger.info("[shutdown] Screen mount cancelled before it finished")


def create_app(
    settings: Optional[Settings] = None,
    sms_source: Optional[SmsSource] = None,
    permission_provider: Optional[PermissionProvider] = None,
    clock: Callable[[], int] = now_ms,
) -> FastAPI:
    """Build the app. Served with ``uvicorn sms_expenses.main:create_app --factory``
    so that settings are only read when the server starts."""

    settings = settings or load_settings()
    setup_logging(settings.log_level)

    screen = ScreenController(
        gate=PermissionGate(permission_provider or build_permission_provider(settings)),
        source=sms_source or build_sms_source(settings),
        max_count=settings.max_count,
        fetch_timeout=settings.fetch_timeout,
        clock=clock,
    )

    app = FastAPI(title="SMS Expense Reader", lifespan=lifespan)
    app.state.settings = settings
    app.state.screen = screen

    # CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(transactions.router, prefix="/api", tags=["transactions"])

    @app.get("/")
    async def root():
        return {"message": "SMS Expense Reader is running"}

    return app

