"""
Closing Service Requests.

A service request is closed by inserting a `closed_request` row that names
the mechanic, the closing date, a comment and the bill. Only open requests
can be closed, and each request at most once.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from ..db import transaction
from ..identifiers import next_id
from ..inputs import check_bill, require_text
from ..models import EntityKind
from ..outcomes import Created, ErrorKind, Outcome, Rejected
from ..repositories import ShopRepository
from ..validation import ReferenceValidator
from .context import ShopContext


@dataclass(frozen=True)
class ClosingDraft:
    date: datetime.date
    comment: str
    bill: int


def close_request(
    sessions: sessionmaker[Session], rid: int, mechanic_id: int, draft: ClosingDraft
) -> Outcome:
    """
    Closes an open service request.

    Args:
        sessions: Session factory of the store.
        rid: The request to close.
        mechanic_id: The mechanic who did the work.
        draft: Closing date, comment and bill.

    Returns:
        `Created` keyed by the new closed-request id, or `Rejected`:
        `not_found` (request or mechanic), `already_closed`, or
        `invalid_input` for an empty comment, a negative bill or a closing
        date before the request date. A rejection writes nothing.
    """
    comment = require_text(draft.comment, "Comment")
    if isinstance(comment, Rejected):
        return comment
    negative = check_bill(draft.bill)
    if negative is not None:
        return negative

    with transaction(sessions) as session:
        validator = ReferenceValidator(session)
        rejected = validator.require_open_request(rid) or validator.require_mechanic(mechanic_id)
        if rejected is not None:
            return rejected

        repo = ShopRepository(session)
        request = repo.get_service_request(rid)
        if draft.date < request.date:
            return Rejected(
                ErrorKind.INVALID_INPUT,
                f"Closing date {draft.date.isoformat()} is before the request date "
                f"{request.date.isoformat()}.",
                EntityKind.CLOSED_REQUEST,
            )

        wid = next_id(session, EntityKind.CLOSED_REQUEST)
        repo.add_closed_request(wid, rid, mechanic_id, draft.date, comment, draft.bill)
        row = repo.closed_request_row(wid)
    return Created(EntityKind.CLOSED_REQUEST, wid, row)


def close_request_wizard(ctx: ShopContext) -> Outcome:
    """
    Menu wizard for closing a request.

    The request id and the mechanic id are each checked as soon as they are
    entered, so the operator is not asked for the rest of the details of a
    closure that cannot happen.
    """
    rid = ctx.ask_int("Please enter the service request id:", "Service request id")
    if isinstance(rid, Rejected):
        return rid
    with transaction(ctx.sessions) as session:
        unavailable = ReferenceValidator(session).require_open_request(rid)
    if unavailable is not None:
        return unavailable

    mechanic_id = ctx.ask_int("Please enter the mechanic id:", "Mechanic id")
    if isinstance(mechanic_id, Rejected):
        return mechanic_id
    with transaction(ctx.sessions) as session:
        missing = ReferenceValidator(session).require_mechanic(mechanic_id)
    if missing is not None:
        return missing

    date = ctx.ask_date("Please enter the closing date (YYYY-MM-DD, blank for today):", "Date")
    if isinstance(date, Rejected):
        return date
    comment = ctx.ask_text("Please enter the mechanic's comment:", "Comment")
    if isinstance(comment, Rejected):
        return comment
    bill = ctx.ask_int("Please enter the bill:", "Bill")
    if isinstance(bill, Rejected):
        return bill
    return close_request(ctx.sessions, rid, mechanic_id, ClosingDraft(date, comment, bill))
