"""
Car Registration.

A car enters the shop together with its owner: `add_car` inserts the car row
and the ownership row that links it to an existing customer in one
transaction, so a failure part-way leaves neither behind.

A VIN is accepted only if it is unknown both as a car and in any ownership
record.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from ..db import transaction
from ..identifiers import next_id
from ..inputs import check_model_year, normalize_vin, require_text
from ..models import MAKE_LENGTH, EntityKind
from ..outcomes import Created, Outcome, Rejected
from ..repositories import ShopRepository
from ..validation import ReferenceValidator
from .context import ShopContext


@dataclass(frozen=True)
class CarDraft:
    vin: str
    make: str
    model: str
    year: int


def add_car(sessions: sessionmaker[Session], customer_id: int, draft: CarDraft) -> Outcome:
    """
    Registers a car to an existing customer.

    Args:
        sessions: Session factory of the store.
        customer_id: The owning customer; must exist.
        draft: The car's attributes. The VIN is trimmed and upper-cased.

    Returns:
        `Created` keyed by the VIN, or `Rejected` with `not_found` (unknown
        customer), `duplicate_vin` or `invalid_input`. A rejection writes
        nothing.
    """
    vin = normalize_vin(draft.vin)
    if isinstance(vin, Rejected):
        return vin
    make = require_text(draft.make, "Make", MAKE_LENGTH)
    if isinstance(make, Rejected):
        return make
    model = require_text(draft.model, "Model", MAKE_LENGTH)
    if isinstance(model, Rejected):
        return model
    implausible = check_model_year(draft.year)
    if implausible is not None:
        return implausible

    with transaction(sessions) as session:
        validator = ReferenceValidator(session)
        rejected = validator.require_customer(customer_id) or validator.require_unregistered_vin(vin)
        if rejected is not None:
            return rejected

        repo = ShopRepository(session)
        ownership_id = next_id(session, EntityKind.OWNERSHIP)
        repo.add_owned_car(ownership_id, customer_id, vin, make, model, draft.year)
        row = repo.car_row(vin)
    return Created(EntityKind.CAR, vin, row)


def add_car_wizard(ctx: ShopContext, customer_id: int | None = None) -> Outcome:
    """
    Menu wizard for registering a car.

    The customer id is prompted (and checked) first unless the caller already
    knows it; the VIN is checked for duplicates before make, model and year
    are asked for.
    """
    if customer_id is None:
        answer = ctx.ask_int("Please enter the customer id of the car:", "Customer id")
        if isinstance(answer, Rejected):
            return answer
        customer_id = answer
        with transaction(ctx.sessions) as session:
            missing = ReferenceValidator(session).require_customer(customer_id)
        if missing is not None:
            return missing

    vin = normalize_vin(ctx.operator.ask("Please enter the car's VIN:"))
    if isinstance(vin, Rejected):
        return vin
    with transaction(ctx.sessions) as session:
        duplicate = ReferenceValidator(session).require_unregistered_vin(vin)
    if duplicate is not None:
        return duplicate

    make = ctx.ask_text("Please enter the car's make:", "Make", MAKE_LENGTH)
    if isinstance(make, Rejected):
        return make
    model = ctx.ask_text("Please enter the car's model:", "Model", MAKE_LENGTH)
    if isinstance(model, Rejected):
        return model
    year = ctx.ask_int("Please enter the car's year:", "Year")
    if isinstance(year, Rejected):
        return year
    return add_car(ctx.sessions, customer_id, CarDraft(vin, make, model, year))
