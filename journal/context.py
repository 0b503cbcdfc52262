"""Application context — the single owner of the journal's long-lived state.

Built once at startup (FastAPI lifespan or CLI) and passed explicitly to
whoever needs it. Components never reach for module-level globals.
"""

import logging
from datetime import date

import httpx
from sqlalchemy.engine import Engine

from journal.config import Settings
from journal.database import create_db_and_tables, make_engine
from journal.engine.commands import Command, CreateTrade, DeleteTrade, RefreshTrades
from journal.engine.dashboard import DashboardCache
from journal.engine.scheduler import RefreshScheduler
from journal.engine.trade_store import TradeStore
from journal.services.fallback_store import FallbackPersistence
from journal.services.remote_sync import RemoteSyncClient, SyncResult
from journal.utils.dates import today_in

logger = logging.getLogger(__name__)


class AppContext:
    def __init__(
        self,
        settings: Settings,
        engine: Engine | None = None,
        http: httpx.AsyncClient | None = None,
    ):
        self.settings = settings
        self.engine = engine or make_engine(settings.database_url)
        self.http = http or httpx.AsyncClient()

        self.store = TradeStore()
        self.persistence = FallbackPersistence(self.engine, key=settings.fallback_key)
        self.dashboard = DashboardCache(self.store, today=self.today)
        self.scheduler = RefreshScheduler(
            refresh=lambda: self.execute(RefreshTrades(reason="scheduled")),
            delay_seconds=settings.refresh_delay_seconds,
        )
        self.sync = RemoteSyncClient.build(
            endpoint=settings.remote_endpoint,
            proxy_templates=settings.proxy_templates,
            http=self.http,
            store=self.store,
            persistence=self.persistence,
            fee_rate=settings.default_fee_rate,
            read_timeout=settings.read_timeout,
            write_timeout=settings.write_timeout,
            on_remote_commit=self.scheduler.schedule_refresh,
        )

    def today(self) -> date:
        return today_in(self.settings.timezone)

    async def startup(self, start_scheduler: bool = True) -> SyncResult:
        """Create tables, load trades (remote first), start background refreshes."""
        create_db_and_tables(self.engine)
        result = await self.execute(RefreshTrades(reason="startup"))
        if start_scheduler:
            minutes = self.settings.auto_refresh_minutes if self.sync.online else 0
            self.scheduler.start(interval_minutes=minutes)
        return result

    async def shutdown(self):
        self.scheduler.stop()
        await self.http.aclose()

    async def execute(self, command: Command) -> SyncResult:
        if isinstance(command, CreateTrade):
            result = await self.sync.create(command.data)
        elif isinstance(command, DeleteTrade):
            result = await self.sync.delete(command.trade_id)
        elif isinstance(command, RefreshTrades):
            logger.debug(f"Refreshing trades ({command.reason})")
            result = await self.sync.read_all()
        else:
            raise TypeError(f"Unknown command: {command!r}")

        logger.info(
            f"{result.operation} -> {result.source} via {result.strategy}"
            + (f" (id={result.trade_id})" if result.trade_id else "")
        )
        return result
