"""Trade synchronization with the spreadsheet endpoint.

Every logical operation (read, create, delete) walks an ordered list of
access strategies: the configured proxies, then the endpoint itself, and
finally the local store. The first strategy that succeeds ends the
operation; a failing strategy is logged and never retried within the same
operation. Reads always succeed (the local store answers last), so callers
only learn whether the result came from the remote sheet or the local store.

Remote contract:
    GET  <endpoint>                                   -> {status, data: [...], message?}
    POST <endpoint> {action: "ADD_TRADE", data: {...}} -> {status, id?, message?}
    POST <endpoint> {action: "DELETE_TRADE", id}       -> {status, message?}
"""

import asyncio
import logging
import secrets
from dataclasses import dataclass
from datetime import datetime
from typing import Callable
from urllib.parse import quote, urlsplit

import httpx

from journal.engine.trade_store import TradeStore
from journal.schemas.trade import Trade, TradeInput
from journal.services.fallback_store import (
    FallbackPersistence,
    FallbackPersistenceError,
    parse_trades,
)
from journal.utils.dates import epoch_millis, now_utc

logger = logging.getLogger(__name__)

SOURCE_REMOTE = "remote"
SOURCE_LOCAL = "local"

WIN_MARKER = "WIN"
LOSS_MARKER = "LOSS"


# ---------------------------------------------------------------------------
# Operations and results
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class ReadOp:
    name = "read"


@dataclass(frozen=True)
class CreateOp:
    data: TradeInput
    fee_rate: float
    name = "create"


@dataclass(frozen=True)
class DeleteOp:
    trade_id: str
    name = "delete"


SyncOp = ReadOp | CreateOp | DeleteOp


@dataclass
class StrategyResult:
    trades: list[Trade] | None = None
    trade_id: str | None = None
    trade: Trade | None = None
    removed: bool = False
    message: str | None = None


@dataclass
class SyncResult:
    """Outcome of one logical operation as reported to callers."""

    operation: str
    source: str  # "remote" or "local"
    strategy: str
    trade_id: str | None = None
    trade: Trade | None = None
    count: int | None = None
    message: str | None = None
    stale: bool = False

    @property
    def remote(self) -> bool:
        return self.source == SOURCE_REMOTE


class TransportError(Exception):
    """A single strategy could not complete the request."""

    def __init__(self, strategy: str, message: str):
        super().__init__(message)
        self.strategy = strategy


class RemoteLogicError(TransportError):
    """The endpoint answered, but not with status "success"."""


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------

class HttpStrategy:
    """Calls the endpoint through some URL; subclasses decide which."""

    name = "http"

    def __init__(
        self,
        endpoint: str,
        http: httpx.AsyncClient,
        read_timeout: float = 10.0,
        write_timeout: float = 15.0,
    ):
        self.endpoint = endpoint
        self.http = http
        self.read_timeout = read_timeout
        self.write_timeout = write_timeout

    def url(self) -> str:
        raise NotImplementedError

    async def attempt(self, op: SyncOp) -> StrategyResult:
        timeout = self.read_timeout if isinstance(op, ReadOp) else self.write_timeout
        try:
            response = await asyncio.wait_for(self._send(op, timeout), timeout)
            response.raise_for_status()
        except (asyncio.TimeoutError, httpx.TimeoutException):
            raise TransportError(self.name, f"timed out after {timeout:g}s")
        except httpx.HTTPStatusError as e:
            raise TransportError(self.name, f"HTTP {e.response.status_code}")
        except httpx.RequestError as e:
            raise TransportError(self.name, f"request error: {e!r}")

        try:
            payload = response.json()
        except ValueError:
            raise TransportError(self.name, f"non-JSON response: {response.text[:120]!r}")
        if not isinstance(payload, dict):
            raise RemoteLogicError(self.name, "response is not a JSON object")
        if payload.get("status") != "success":
            raise RemoteLogicError(
                self.name, payload.get("message") or f"status={payload.get('status')!r}"
            )
        return self._interpret(op, payload)

    async def _send(self, op: SyncOp, timeout: float) -> httpx.Response:
        url = self.url()
        if isinstance(op, ReadOp):
            return await self.http.get(url, timeout=timeout, follow_redirects=True)
        if isinstance(op, CreateOp):
            body = {"action": "ADD_TRADE", "data": build_trade_payload(op.data, op.fee_rate)}
        else:
            body = {"action": "DELETE_TRADE", "id": op.trade_id}
        return await self.http.post(url, json=body, timeout=timeout, follow_redirects=True)

    def _interpret(self, op: SyncOp, payload: dict) -> StrategyResult:
        message = payload.get("message")
        if isinstance(op, ReadOp):
            records = payload.get("data")
            if not isinstance(records, list):
                raise RemoteLogicError(self.name, "response has no data list")
            return StrategyResult(trades=parse_remote_records(records), message=message)
        if isinstance(op, CreateOp):
            trade_id = _stringify_id(payload.get("id"))
            return StrategyResult(trade_id=trade_id, message=message)
        return StrategyResult(trade_id=op.trade_id, removed=True, message=message)


class DirectStrategy(HttpStrategy):
    name = "direct"

    def url(self) -> str:
        return self.endpoint


class ProxyStrategy(HttpStrategy):
    """Routes through a URL-rewriting proxy.

    The template either holds ``{url}`` (replaced by the encoded endpoint)
    or is a prefix the encoded endpoint is appended to.
    """

    def __init__(
        self,
        endpoint: str,
        template: str,
        http: httpx.AsyncClient,
        index: int = 1,
        **timeouts,
    ):
        super().__init__(endpoint, http, **timeouts)
        self.template = template
        self.name = f"proxy[{index}]:{urlsplit(template).netloc or template}"

    def url(self) -> str:
        encoded = quote(self.endpoint, safe="")
        if "{url}" in self.template:
            return self.template.replace("{url}", encoded)
        return self.template + encoded


class LocalFallbackStrategy:
    """Terminal strategy: serve reads from and apply writes to the local store."""

    name = "local"

    def __init__(
        self,
        store: TradeStore,
        persistence: FallbackPersistence,
        id_factory: Callable[[], int] = epoch_millis,
    ):
        self.store = store
        self.persistence = persistence
        self.id_factory = id_factory

    def new_id(self) -> str:
        """Millisecond timestamp id; a random suffix breaks same-ms collisions."""
        base = str(self.id_factory())
        candidate = base
        while candidate in self.store:
            candidate = f"{base}-{secrets.token_hex(2)}"
        return candidate

    async def attempt(self, op: SyncOp) -> StrategyResult:
        if isinstance(op, ReadOp):
            return StrategyResult(trades=self.persistence.load())

        if isinstance(op, CreateOp):
            trade = Trade.from_input(self.new_id(), op.data, op.fee_rate)
            # Persist first so a failed write leaves the store untouched
            self.persistence.save([*self.store.all(), trade])
            self.store.add(trade)
            return StrategyResult(trade_id=trade.id, trade=trade, message="Saved locally")

        if op.trade_id not in self.store:
            return StrategyResult(trade_id=op.trade_id, removed=False, message="Not found")
        self.persistence.save([t for t in self.store.all() if t.id != op.trade_id])
        self.store.remove(op.trade_id)
        return StrategyResult(trade_id=op.trade_id, removed=True, message="Deleted locally")


# ---------------------------------------------------------------------------
# Client
# ---------------------------------------------------------------------------

class RemoteSyncClient:
    """Keeps a TradeStore in step with the remote sheet, falling back locally."""

    def __init__(
        self,
        strategies: list[HttpStrategy],
        store: TradeStore,
        persistence: FallbackPersistence,
        fee_rate: float,
        on_remote_commit: Callable[[], None] | None = None,
        local: LocalFallbackStrategy | None = None,
    ):
        self.strategies = strategies
        self.store = store
        self.persistence = persistence
        self.fee_rate = fee_rate
        self.on_remote_commit = on_remote_commit
        self.local = local or LocalFallbackStrategy(store, persistence)

        self._seq = 0
        self.last_source: str | None = None
        self.last_strategy: str | None = None
        self.last_synced_at: datetime | None = None
        self.last_error: str | None = None

    @classmethod
    def build(
        cls,
        endpoint: str,
        proxy_templates: list[str],
        http: httpx.AsyncClient,
        store: TradeStore,
        persistence: FallbackPersistence,
        fee_rate: float,
        read_timeout: float = 10.0,
        write_timeout: float = 15.0,
        on_remote_commit: Callable[[], None] | None = None,
    ) -> "RemoteSyncClient":
        """Proxies in configured order, then direct. No endpoint -> local only."""
        strategies: list[HttpStrategy] = []
        if endpoint:
            timeouts = {"read_timeout": read_timeout, "write_timeout": write_timeout}
            strategies.extend(
                ProxyStrategy(endpoint, template, http, index=i, **timeouts)
                for i, template in enumerate(proxy_templates, start=1)
            )
            strategies.append(DirectStrategy(endpoint, http, **timeouts))
        else:
            logger.info("No remote endpoint configured; journal runs offline")
        return cls(strategies, store, persistence, fee_rate, on_remote_commit)

    @property
    def online(self) -> bool:
        return bool(self.strategies)

    def _issue_seq(self) -> int:
        self._seq += 1
        return self._seq

    def _is_latest(self, seq: int) -> bool:
        return seq == self._seq

    async def _attempt_remote(self, op: SyncOp) -> tuple[StrategyResult | None, str | None]:
        for strategy in self.strategies:
            try:
                result = await strategy.attempt(op)
            except TransportError as e:
                self.last_error = f"{strategy.name}: {e}"
                logger.warning(f"Remote {op.name} via {strategy.name} failed: {e}")
                continue
            logger.info(f"Remote {op.name} succeeded via {strategy.name}")
            return result, strategy.name
        if self.strategies:
            logger.warning(f"All remote strategies failed for {op.name}; using local store")
        return None, None

    def _record(self, source: str, strategy: str):
        self.last_source = source
        self.last_strategy = strategy
        self.last_synced_at = now_utc()
        if source == SOURCE_REMOTE:
            self.last_error = None

    def _write_through(self):
        try:
            self.persistence.save(self.store.all())
        except FallbackPersistenceError as e:
            # Remote already holds the data; the local copy catches up later
            logger.error(f"Write-through to local store failed: {e}")

    def _remote_committed(self):
        if self.on_remote_commit is not None:
            self.on_remote_commit()

    async def read_all(self) -> SyncResult:
        """Refresh the store from the first strategy that answers."""
        seq = self._issue_seq()
        result, strategy = await self._attempt_remote(ReadOp())
        source = SOURCE_REMOTE
        if result is None:
            result = await self.local.attempt(ReadOp())
            source, strategy = SOURCE_LOCAL, self.local.name

        if not self._is_latest(seq):
            logger.info(f"Discarding stale {source} read #{seq} (latest #{self._seq})")
            return SyncResult("read", source, strategy, count=len(result.trades), stale=True)

        self.store.replace_all(result.trades)
        if source == SOURCE_REMOTE:
            self._write_through()
        self._record(source, strategy)
        logger.info(f"Loaded {len(result.trades)} trades from {source} ({strategy})")
        return SyncResult("read", source, strategy, count=len(result.trades), message=result.message)

    async def create(self, data: TradeInput) -> SyncResult:
        op = CreateOp(data=data, fee_rate=self.fee_rate)
        result, strategy = await self._attempt_remote(op)
        if result is None:
            result = await self.local.attempt(op)
            self._issue_seq()
            self._record(SOURCE_LOCAL, self.local.name)
            return SyncResult(
                "create", SOURCE_LOCAL, self.local.name,
                trade_id=result.trade_id, trade=result.trade, message=result.message,
            )

        # Reads issued before this commit must not overwrite it
        self._issue_seq()
        trade = None
        if result.trade_id and result.trade_id not in self.store:
            trade = Trade.from_input(result.trade_id, data, self.fee_rate)
            self.store.add(trade)
            self._write_through()
        self._record(SOURCE_REMOTE, strategy)
        self._remote_committed()
        return SyncResult(
            "create", SOURCE_REMOTE, strategy,
            trade_id=result.trade_id, trade=trade, message=result.message,
        )

    async def delete(self, trade_id: str) -> SyncResult:
        op = DeleteOp(trade_id=trade_id)
        result, strategy = await self._attempt_remote(op)
        if result is None:
            result = await self.local.attempt(op)
            self._issue_seq()
            self._record(SOURCE_LOCAL, self.local.name)
            return SyncResult(
                "delete", SOURCE_LOCAL, self.local.name,
                trade_id=trade_id, message=result.message,
            )

        self._issue_seq()
        if self.store.remove(trade_id):
            self._write_through()
        self._record(SOURCE_REMOTE, strategy)
        self._remote_committed()
        return SyncResult(
            "delete", SOURCE_REMOTE, strategy, trade_id=trade_id, message=result.message,
        )

    def status(self) -> dict:
        return {
            "online": self.online,
            "strategies": [s.name for s in self.strategies] + [self.local.name],
            "last_source": self.last_source,
            "last_strategy": self.last_strategy,
            "last_synced_at": self.last_synced_at.isoformat() if self.last_synced_at else None,
            "last_error": self.last_error,
            "trade_count": len(self.store),
        }


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------

def _stringify_id(value) -> str | None:
    if value is None or value == "":
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    return str(value)


def build_trade_payload(data: TradeInput, fee_rate: float) -> dict:
    """ADD_TRADE body: the form input plus the derived columns the sheet stores."""
    preview = Trade.from_input("pending", data, fee_rate)
    payload = data.model_dump(mode="json", by_alias=True)
    payload["fee"] = fee_rate
    payload["netPL"] = round(preview.net_pl, 2)
    payload["isWin"] = WIN_MARKER if preview.is_win else LOSS_MARKER
    return payload


def parse_remote_records(records: list) -> list[Trade]:
    """Coerce sheet rows into trades and cross-check the WIN marker."""
    trades = parse_trades(records, source="remote")
    by_id = {t.id: t for t in trades}
    for raw in records:
        if not isinstance(raw, dict):
            continue
        trade = by_id.get(_stringify_id(raw.get("id")))
        marker = raw.get("isWin")
        if trade is None or marker is None:
            continue
        remote_win = marker if isinstance(marker, bool) else str(marker).strip().upper() == WIN_MARKER
        if remote_win != trade.is_win:
            logger.warning(
                f"Trade {trade.id}: sheet marks isWin={marker!r} but net P/L is "
                f"{trade.net_pl:.2f}; using computed value"
            )
    return trades
