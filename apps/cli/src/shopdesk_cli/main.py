"""Entrypoint for the Shopdesk interactive application."""

from __future__ import annotations

import argparse
import sys
from collections.abc import Sequence

from shopdesk_common.config import get_config
from shopdesk_common.db import create_db_engine, create_tables, make_session_factory
from shopdesk_common.probes import probe_store
from shopdesk_common.services import ShopContext

from .console import TerminalOperator
from .logger import configure_logging, log_event
from .menu import run_menu


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="shopdesk",
        description="Shopdesk: auto-repair shop front desk",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
    # Use the PostgreSQL settings from the environment (PGHOST, PGUSER, ...)
    shopdesk

    # Use a local SQLite file and create the tables on first run
    shopdesk --database-url sqlite:///shop.db --create-schema
        """,
    )
    parser.add_argument(
        "--database-url",
        help="SQLAlchemy URL of the store (overrides SHOPDESK_DATABASE_URL and PG*)",
    )
    parser.add_argument(
        "--create-schema",
        action="store_true",
        help="Create missing tables before showing the menu",
    )
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    """Starts the application; returns the process exit status."""
    args = build_parser().parse_args(argv)
    config = get_config()
    if args.database_url:
        config = config.model_copy(update={"database_url": args.database_url})
    configure_logging(environment=config.environment, level=config.log_level)
    log_event("INFO", "starting", **config.log_summary())

    engine = create_db_engine(config)
    try:
        probe = probe_store(engine, config.probe_timeout_ms, config.probe_retries)
        if not probe["ok"]:
            log_event("ERROR", "store_probe_failed", **probe)
            print("Could not connect to the database.", file=sys.stderr)
            return 1
        if args.create_schema or config.create_schema:
            create_tables(engine)

        ctx = ShopContext(make_session_factory(engine), TerminalOperator(), config)
        run_menu(ctx)
        return 0
    finally:
        log_event("INFO", "stopping")
        engine.dispose()


if __name__ == "__main__":
    sys.exit(main())
