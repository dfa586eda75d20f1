"""
Result Types for Shop Workflows.

Every workflow step returns either its value or a `Rejected` outcome. A
`Rejected` is handed back up unchanged to the menu dispatcher, which is the
only place that turns it into a message for the operator. A finished
creation returns `Created`, carrying the stored row so it can be shown.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import TypeAlias

from .models import EntityKind
from .tabular import QueryResult


class ErrorKind(str, Enum):
    """Why a workflow stopped without creating anything."""

    PARSE_ERROR = "parse_error"  # Not an integer / date where one was expected.
    INVALID_INPUT = "invalid_input"  # Parsed, but empty or out of range.
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"  # Operator confirmed a natural-key match.
    DUPLICATE_VIN = "duplicate_vin"
    NOT_OWNED = "not_owned"  # VIN not owned by the selected customer.
    ALREADY_CLOSED = "already_closed"
    CANCELLED = "cancelled"  # Operator declined to continue.
    STORE_ERROR = "store_error"


@dataclass(frozen=True)
class Created:
    """
    A record was stored.

    Attributes:
        entity: The kind of record that was created.
        key: Its identifier (an integer id, or the VIN for a car).
        row: The stored row, read back inside the creating transaction.
    """

    entity: EntityKind
    key: int | str
    row: QueryResult


@dataclass(frozen=True)
class Rejected:
    """
    A workflow stopped without writing.

    Attributes:
        kind: The error classification.
        message: A message fit to show the operator.
        entity: The kind of record the rejection is about, if any.
    """

    kind: ErrorKind
    message: str
    entity: EntityKind | None = None

    @classmethod
    def not_found(cls, entity: EntityKind, key: int | str) -> Rejected:
        return cls(ErrorKind.NOT_FOUND, f"No {entity.label} with id {key!r}.", entity)

    @classmethod
    def cancelled(cls, message: str = "Cancelled.") -> Rejected:
        return cls(ErrorKind.CANCELLED, message)


Outcome: TypeAlias = Created | Rejected
