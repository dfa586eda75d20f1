"""
Standalone Database Initialization Script.

Creates the shop's tables (and the identifier counter table) in the store
named by the configuration, for:

1.  **Local Development**: setting up a fresh database quickly.
2.  **CI Pipelines**: creating an ephemeral database for integration tests.
3.  **Initial Deployment**: bootstrapping the schema in a new environment.

Usage:
    shopdesk-db-init
    python -m shopdesk_cli.db_init

This script is not a migration tool: it only creates missing tables and
never alters existing ones.
"""

from __future__ import annotations

from shopdesk_common.config import get_config
from shopdesk_common.db import create_db_engine, init_db


def main() -> None:
    """Creates the schema, printing progress to the console."""
    engine = create_db_engine(get_config())
    try:
        print("Initializing database schema...")
        init_db(engine)
        print("Database schema initialized successfully.")
    finally:
        engine.dispose()


if __name__ == "__main__":
    main()
