"""CLI tool for journal maintenance.

Usage:
    python -m journal.cli summary
    python -m journal.cli sync
    python -m journal.cli export [path]
    python -m journal.cli import <path>
"""

import asyncio
import json
import sys
from pathlib import Path

from journal.config import settings
from journal.context import AppContext
from journal.database import create_db_and_tables, make_engine
from journal.engine.commands import RefreshTrades
from journal.services.fallback_store import FallbackPersistence, parse_trades
from journal.utils.logging import setup_logging


def _local_store() -> FallbackPersistence:
    engine = make_engine(settings.database_url)
    create_db_and_tables(engine)
    return FallbackPersistence(engine, key=settings.fallback_key)


def show_summary():
    """Load trades (sheet first) and print the headline numbers."""

    async def run():
        context = AppContext(settings)
        try:
            await context.startup(start_scheduler=False)
            snap = context.dashboard.snapshot()
            s = snap.summary
            print(f"Source:        {context.sync.last_source} ({context.sync.last_strategy})")
            print(f"Trades:        {s.total_count}")
            print(f"Win rate:      {s.win_rate:.1f}%")
            print(f"Today's P/L:   {s.daily_pl:,.0f}")
            print(f"Total P/L:     {s.total_pl:,.0f}")
            for name, stats in snap.strategies.items():
                print(f"  {name}: {stats.count} trades, win rate {stats.win_rate:.1f}%")
        finally:
            await context.shutdown()

    asyncio.run(run())


def sync():
    """Force a read and report where the trades came from."""

    async def run():
        context = AppContext(settings)
        try:
            create_db_and_tables(context.engine)
            result = await context.execute(RefreshTrades(reason="cli"))
            print(f"Loaded {result.count} trades from {result.source} via {result.strategy}")
        finally:
            await context.shutdown()

    asyncio.run(run())


def export_trades(path: str | None):
    """Dump the local store as a JSON array."""
    records = [t.to_record() for t in _local_store().load()]
    text = json.dumps(records, indent=2)
    if path:
        Path(path).write_text(text)
        print(f"Exported {len(records)} trades to {path}")
    else:
        print(text)


def import_trades(path: str):
    """Replace the local store with a JSON array, e.g. a browser localStorage export."""
    try:
        items = json.loads(Path(path).read_text())
    except (OSError, json.JSONDecodeError) as e:
        print(f"Cannot read {path}: {e}")
        sys.exit(1)
    if not isinstance(items, list):
        print("Expected a JSON array of trades.")
        sys.exit(1)

    trades = parse_trades(items, source=path)
    _local_store().save(trades)
    skipped = len(items) - len(trades)
    print(f"Imported {len(trades)} trades into the local store ({skipped} skipped).")


def main():
    if len(sys.argv) < 2:
        print("Usage: python -m journal.cli <command>")
        print("Commands: summary, sync, export [path], import <path>")
        sys.exit(1)

    setup_logging()
    command = sys.argv[1]
    if command == "summary":
        show_summary()
    elif command == "sync":
        sync()
    elif command == "export":
        export_trades(sys.argv[2] if len(sys.argv) > 2 else None)
    elif command == "import":
        if len(sys.argv) < 3:
            print("Usage: python -m journal.cli import <path>")
            sys.exit(1)
        import_trades(sys.argv[2])
    else:
        print(f"Unknown command: {command}")
        sys.exit(1)


if __name__ == "__main__":
    main()
