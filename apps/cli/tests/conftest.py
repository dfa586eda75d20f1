"""Pytest configuration for shopdesk_cli tests."""

from __future__ import annotations

import io
from collections.abc import Callable, Generator
from pathlib import Path

import pytest
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from shopdesk_cli.console import TerminalOperator
from shopdesk_common.config import reset_config
from shopdesk_common.db import create_db_engine, create_tables, drop_tables, make_session_factory
from shopdesk_common.services import ShopContext


@pytest.fixture(autouse=True)
def reset_config_for_tests() -> Generator[None, None, None]:
    """Reset config before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    engine = create_db_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    create_tables(engine)
    yield engine
    drop_tables(engine)
    engine.dispose()


@pytest.fixture
def sessions(engine: Engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture
def terminal_ctx(sessions: sessionmaker[Session]) -> Callable[[str], ShopContext]:
    """Builds a context whose operator reads `typed` and writes to a StringIO."""

    def _make(typed: str) -> ShopContext:
        operator = TerminalOperator(io.StringIO(typed), io.StringIO())
        return ShopContext(sessions, operator)

    return _make
