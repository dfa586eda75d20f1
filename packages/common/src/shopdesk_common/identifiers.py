"""
Identifier Allocation.

Customers, mechanics, ownerships, service requests and closed requests are
keyed by surrogate integers. A new identifier is one more than the larger of
the highest identifier already stored and the last value handed out for that
entity.

The last value lives in the `id_counter` table. `next_id` reads that row with
`SELECT ... FOR UPDATE` (a no-op on SQLite, which serializes writers anyway)
and updates it inside the caller's session. Because the caller inserts the
new row in the same transaction, two creators cannot be given the same
identifier, and an allocation that is rolled back is simply handed out again.
"""

from __future__ import annotations

from sqlalchemy import func, select
from sqlalchemy.orm import InstrumentedAttribute, Session

from .models import (
    ClosedRequest,
    Customer,
    EntityKind,
    IdCounter,
    Mechanic,
    Ownership,
    ServiceRequest,
)

# The key column of every entity kind that is keyed by an allocated integer.
_KEY_COLUMNS: dict[EntityKind, InstrumentedAttribute[int]] = {
    EntityKind.CUSTOMER: Customer.id,
    EntityKind.MECHANIC: Mechanic.id,
    EntityKind.OWNERSHIP: Ownership.ownership_id,
    EntityKind.SERVICE_REQUEST: ServiceRequest.rid,
    EntityKind.CLOSED_REQUEST: ClosedRequest.wid,
}


def current_max_id(session: Session, kind: EntityKind) -> int:
    """Returns the highest stored identifier for `kind`, or 0 for an empty table."""
    column = _key_column(kind)
    return session.execute(select(func.coalesce(func.max(column), 0))).scalar_one()


def next_id(session: Session, kind: EntityKind) -> int:
    """
    Allocates the next identifier for `kind`.

    Must be called inside the transaction that inserts the row carrying the
    identifier (see `shopdesk_common.db.transaction`).

    Args:
        session: The session of the inserting transaction.
        kind: The entity kind to allocate for.

    Returns:
        The new identifier; 1 when the table is empty and nothing has been
        allocated yet.

    Raises:
        ValueError: If `kind` is not keyed by an allocated integer (cars are
            keyed by VIN).
    """
    column = _key_column(kind)
    counter = session.execute(
        select(IdCounter).where(IdCounter.entity == kind.value).with_for_update()
    ).scalar_one_or_none()
    stored_max = session.execute(select(func.coalesce(func.max(column), 0))).scalar_one()

    if counter is None:
        counter = IdCounter(entity=kind.value, last_value=0)
        session.add(counter)

    counter.last_value = max(counter.last_value, stored_max) + 1
    session.flush()
    return counter.last_value


def _key_column(kind: EntityKind) -> InstrumentedAttribute[int]:
    try:
        return _KEY_COLUMNS[kind]
    except KeyError:
        raise ValueError(f"{kind.label} records are not keyed by an allocated id") from None
