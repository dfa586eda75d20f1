"""Pytest configuration for shopdesk_common tests."""

from __future__ import annotations

import datetime
from collections import deque
from collections.abc import Callable, Generator, Iterable
from pathlib import Path

import pytest
from sqlalchemy import func, select
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

from shopdesk_common.config import reset_config
from shopdesk_common.db import (
    create_db_engine,
    create_tables,
    drop_tables,
    make_session_factory,
    transaction,
)
from shopdesk_common.models import (
    Base,
    Car,
    ClosedRequest,
    Customer,
    Mechanic,
    Ownership,
    ServiceRequest,
)
from shopdesk_common.services import ShopContext
from shopdesk_common.tabular import QueryResult


class ScriptedOperator:
    """An operator that replays canned answers and records everything shown."""

    def __init__(self, answers: Iterable[str] = ()):
        self.answers = deque(answers)
        self.prompts: list[str] = []
        self.shown: list[QueryResult] = []
        self.notices: list[str] = []

    def ask(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if not self.answers:
            raise EOFError(f"no scripted answer for {prompt!r}")
        return self.answers.popleft()

    def confirm(self, prompt: str) -> bool:
        return self.ask(prompt).strip().lower() in {"y", "yes"}

    def show(self, result: QueryResult) -> None:
        self.shown.append(result)

    def notify(self, message: str) -> None:
        self.notices.append(message)


class Seeder:
    """Inserts rows directly, bypassing the workflows."""

    def __init__(self, sessions: sessionmaker[Session]):
        self.sessions = sessions

    def customer(self, id: int, fname: str = "Jane", lname: str = "Doe") -> None:
        with transaction(self.sessions) as session:
            session.add(Customer(id=id, fname=fname, lname=lname, phone="555-0100", address="1 Main St"))

    def mechanic(self, id: int, fname: str = "Max", lname: str = "Power", experience: int = 5) -> None:
        with transaction(self.sessions) as session:
            session.add(Mechanic(id=id, fname=fname, lname=lname, experience=experience))

    def car(
        self,
        vin: str,
        customer_id: int,
        ownership_id: int,
        year: int = 2015,
        make: str = "Honda",
        model: str = "Civic",
    ) -> None:
        with transaction(self.sessions) as session:
            session.add(Car(vin=vin, make=make, model=model, year=year))
            session.flush()
            session.add(Ownership(ownership_id=ownership_id, customer_id=customer_id, car_vin=vin))

    def request(
        self,
        rid: int,
        customer_id: int,
        vin: str,
        odometer: int = 10000,
        date: datetime.date = datetime.date(2024, 1, 15),
    ) -> None:
        with transaction(self.sessions) as session:
            session.add(
                ServiceRequest(
                    rid=rid,
                    customer_id=customer_id,
                    car_vin=vin,
                    date=date,
                    odometer=odometer,
                    complaint="Strange noise",
                )
            )

    def closed(
        self,
        wid: int,
        rid: int,
        mid: int,
        bill: int,
        date: datetime.date = datetime.date(2024, 1, 20),
    ) -> None:
        with transaction(self.sessions) as session:
            session.add(
                ClosedRequest(wid=wid, rid=rid, mid=mid, date=date, comment="Fixed", bill=bill)
            )


@pytest.fixture(autouse=True)
def reset_config_for_tests() -> Generator[None, None, None]:
    """Reset config before and after each test."""
    reset_config()
    yield
    reset_config()


@pytest.fixture
def engine(tmp_path: Path) -> Generator[Engine, None, None]:
    """A file-backed SQLite store with the full schema."""
    engine = create_db_engine(f"sqlite:///{tmp_path / 'shop.db'}")
    create_tables(engine)
    yield engine
    drop_tables(engine)
    engine.dispose()


@pytest.fixture
def sessions(engine: Engine) -> sessionmaker[Session]:
    return make_session_factory(engine)


@pytest.fixture
def seed(sessions: sessionmaker[Session]) -> Seeder:
    return Seeder(sessions)


@pytest.fixture
def make_ctx(sessions: sessionmaker[Session]) -> Callable[..., ShopContext]:
    """Builds a context whose operator answers with the given lines, in order."""

    def _make(*answers: str) -> ShopContext:
        return ShopContext(sessions, ScriptedOperator(answers))

    return _make


@pytest.fixture
def count_rows(sessions: sessionmaker[Session]) -> Callable[[type[Base]], int]:
    """Counts the rows of a mapped table."""

    def _count(model: type[Base]) -> int:
        with transaction(sessions) as session:
            return session.execute(select(func.count()).select_from(model)).scalar_one()

    return _count
