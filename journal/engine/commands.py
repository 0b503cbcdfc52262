"""Command values the API and CLI hand to the application context."""

from dataclasses import dataclass

from journal.schemas.trade import TradeInput


@dataclass(frozen=True)
class CreateTrade:
    data: TradeInput


@dataclass(frozen=True)
class DeleteTrade:
    trade_id: str


@dataclass(frozen=True)
class RefreshTrades:
    reason: str = "manual"


Command = CreateTrade | DeleteTrade | RefreshTrades
