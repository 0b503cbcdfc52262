"""FastAPI application entry point."""

from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from journal.config import Settings, settings as default_settings
from journal.context import AppContext
from journal.utils.logging import setup_logging
from journal.api import trades, dashboard, report, system


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Startup and shutdown events."""
        setup_logging(settings.log_level)
        context = AppContext(settings)
        app.state.context = context
        # Remote first, local store when the sheet is unreachable
        await context.startup()

        yield

        await context.shutdown()

    app = FastAPI(
        title="Trade Journal",
        description="Stock trading journal synced to a spreadsheet, with offline fallback",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Mount routers
    app.include_router(trades.router)
    app.include_router(dashboard.router)
    app.include_router(report.router)
    app.include_router(system.router)

    return app


app = create_app()
