"""
Production FastAPI Application

HTTP API plus the expiry sweeper running in the lifespan task group.
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import anyio
from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from reservation_engine.platform.app_factory import create_app
from reservation_engine.platform.config.core_setting import settings
from reservation_engine.platform.config.di import container
from reservation_engine.platform.config.wire_modules import WIRE_MODULES
from reservation_engine.platform.database.orm_db_setting import dispose_engine, get_engine
from reservation_engine.platform.logging.loguru_io import Logger
from reservation_engine.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Reservation Engine] Starting up...')

    tracing = TracingConfig(service_name='reservation-engine')
    tracing.setup()
    Logger.base.info('📊 [Reservation Engine] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Reservation Engine] Dependency injection wired')

    tracing.instrument_sqlalchemy(engine=get_engine())
    Logger.base.info('🗄️  [Reservation Engine] Database engine ready + instrumented')

    async with anyio.create_task_group() as tg:
        if settings.RESERVATION_SWEEP_ENABLED:
            sweeper = container.reservation_expiry_sweeper()
            await sweeper.start(task_group=tg)
        else:
            Logger.base.warning('⏸️ [Reservation Engine] Expiry sweeper disabled')

        Logger.base.info('✅ [Reservation Engine] Ready to serve requests')

        yield

        Logger.base.info('🛑 [Reservation Engine] Shutting down...')
        tg.cancel_scope.cancel()

    await dispose_engine()
    Logger.base.info('🗄️  [Reservation Engine] Database engine disposed')

    tracing.shutdown()
    Logger.base.info('📊 [Reservation Engine] Tracing shutdown complete')

    container.unwire()

    Logger.base.info('👋 [Reservation Engine] Shutdown complete')


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    """Root endpoint - redirect to docs."""
    return RedirectResponse(url='/docs')
