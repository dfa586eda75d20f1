"""The handle every workflow receives."""

from __future__ import annotations

import datetime
from dataclasses import dataclass, field

from sqlalchemy.orm import Session, sessionmaker

from ..config import ShopdeskConfig
from ..inputs import parse_date, parse_int, require_text
from ..operator import Operator
from ..outcomes import Rejected


@dataclass
class ShopContext:
    """
    Everything a workflow needs, passed explicitly.

    Attributes:
        sessions: Session factory bound to the store's engine.
        operator: Who answers the prompts and sees the results.
        config: Application configuration (report defaults and the like).
    """

    sessions: sessionmaker[Session]
    operator: Operator
    config: ShopdeskConfig = field(default_factory=ShopdeskConfig)

    def ask_int(self, prompt: str, field: str) -> int | Rejected:
        return parse_int(self.operator.ask(prompt), field)

    def ask_text(self, prompt: str, field: str, max_length: int | None = None) -> str | Rejected:
        return require_text(self.operator.ask(prompt), field, max_length)

    def ask_date(self, prompt: str, field: str) -> datetime.date | Rejected:
        return parse_date(self.operator.ask(prompt), field)
