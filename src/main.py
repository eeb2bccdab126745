"""
Production FastAPI Application

API routers plus the hold-expiry sweeper running in the same process.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.core_setting import settings
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.database.orm_db_setting import create_db_and_tables, engine_manager
from src.platform.logging.loguru_io import Logger


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    Logger.base.info('🚀 [Bus Booking] Starting up...')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Bus Booking] Dependency injection wired')

    await create_db_and_tables()
    Logger.base.info('🗄️  [Bus Booking] Database tables ready')

    scheduler = container.hold_expiry_scheduler()

    async with anyio.create_task_group() as tg:
        if settings.ENABLE_HOLD_SWEEPER:
            tg.start_soon(scheduler.run_sweeper)
            Logger.base.info('⏰ [Bus Booking] Hold sweeper running')

        Logger.base.info('✅ [Bus Booking] Ready to serve requests')
        yield

        Logger.base.info('🛑 [Bus Booking] Shutting down...')
        tg.cancel_scope.cancel()

    await scheduler.shutdown()
    Logger.base.info('⏰ [Bus Booking] Hold watchdogs cancelled')

    await engine_manager.dispose()
    Logger.base.info('🗄️  [Bus Booking] Database engine disposed')

    container.unwire()
    Logger.base.info('👋 [Bus Booking] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
