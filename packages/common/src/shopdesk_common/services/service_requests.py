"""
Opening Service Requests.

`ServiceRequestWorkflow` walks the operator through opening a request:

1. Locate the customer by last name. If nobody has that last name, the
   operator may register the customer (and their first car) on the spot and
   search again, or give up.
2. Select the customer by id.
3. List the customer's cars. A customer without cars may have one registered.
4. Select one of the listed cars by VIN.
5. Enter the date, odometer reading and complaint.
6. Store the request.

Steps 1-5 only read (registrations in steps 1 and 3 are complete operations
of their own). Step 6 is `open_service_request`, which re-checks customer,
car and ownership inside the transaction that allocates the request id and
inserts the row.
"""

from __future__ import annotations

import datetime
from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from ..db import transaction
from ..identifiers import next_id
from ..inputs import check_odometer, normalize_vin, require_text
from ..models import EntityKind, ServiceRequest
from ..outcomes import Created, ErrorKind, Outcome, Rejected
from ..repositories import ShopRepository
from ..tabular import QueryResult
from ..validation import ReferenceValidator
from .cars import add_car_wizard
from .context import ShopContext
from .entity_resolver import EntityResolver


@dataclass(frozen=True)
class RequestDraft:
    date: datetime.date
    odometer: int
    complaint: str


def open_service_request(
    sessions: sessionmaker[Session], customer_id: int, vin: str, draft: RequestDraft
) -> Outcome:
    """
    Stores a new, open service request.

    Args:
        sessions: Session factory of the store.
        customer_id: The customer bringing the car in.
        vin: The car; it must be owned by `customer_id`.
        draft: Date, odometer reading and complaint.

    Returns:
        `Created` keyed by the new request id, or `Rejected` (`not_found`,
        `not_owned` or `invalid_input`) with nothing written.
    """
    complaint = require_text(draft.complaint, "Complaint")
    if isinstance(complaint, Rejected):
        return complaint
    negative = check_odometer(draft.odometer)
    if negative is not None:
        return negative

    with transaction(sessions) as session:
        validator = ReferenceValidator(session)
        rejected = (
            validator.require_customer(customer_id)
            or validator.require_car(vin)
            or validator.require_ownership(customer_id, vin)
        )
        if rejected is not None:
            return rejected

        repo = ShopRepository(session)
        rid = next_id(session, EntityKind.SERVICE_REQUEST)
        repo.add_service_request(rid, customer_id, vin, draft.date, draft.odometer, complaint)
        row = repo.service_request_row(rid)
    return Created(EntityKind.SERVICE_REQUEST, rid, row)


def get_service_request(session: Session, rid: int) -> ServiceRequest | None:
    """Fetches a service request by id, or None."""
    return ShopRepository(session).get_service_request(rid)


class ServiceRequestWorkflow:
    """The interactive walk from a customer's last name to a stored request."""

    def __init__(self, ctx: ShopContext):
        self.ctx = ctx

    def run(self) -> Outcome:
        customer_id = self._select_customer()
        if isinstance(customer_id, Rejected):
            return customer_id

        vin = self._select_car(customer_id)
        if isinstance(vin, Rejected):
            return vin

        draft = self._collect_details()
        if isinstance(draft, Rejected):
            return draft

        return open_service_request(self.ctx.sessions, customer_id, vin, draft)

    def _locate_customer(self) -> QueryResult | Rejected:
        """Step 1: loops until customers with the entered last name exist."""
        while True:
            last_name = self.ctx.ask_text("Please enter the customer's last name:", "Last name")
            if isinstance(last_name, Rejected):
                return last_name
            with transaction(self.ctx.sessions) as session:
                matches = ShopRepository(session).find_customers_by_last_name(last_name)
            if not matches.is_empty:
                return matches

            if not self.ctx.operator.confirm(
                "There is no customer with this last name. Add a customer? (y/n)"
            ):
                return Rejected.cancelled("No customer selected.")
            registered = self._register_customer(last_name)
            if registered is not None:
                return registered

    def _register_customer(self, last_name: str) -> Rejected | None:
        first_name = self.ctx.operator.ask("Please enter the customer's first name:")
        customer = EntityResolver(self.ctx).resolve_customer(first_name, last_name)
        if isinstance(customer, Rejected):
            return customer

        self.ctx.operator.notify("This customer does not have a car yet. Please add one.")
        car = add_car_wizard(self.ctx, customer_id=int(customer.key))
        if isinstance(car, Rejected):
            return car
        return None

    def _select_customer(self) -> int | Rejected:
        """Steps 1 and 2."""
        matches = self._locate_customer()
        if isinstance(matches, Rejected):
            return matches
        self.ctx.operator.show(matches)

        customer_id = self.ctx.ask_int("Please select the customer by id:", "Customer id")
        if isinstance(customer_id, Rejected):
            return customer_id
        with transaction(self.ctx.sessions) as session:
            missing = ReferenceValidator(session).require_customer(customer_id)
            if missing is not None:
                return missing
            customer = ShopRepository(session).customer_row(customer_id)
        self.ctx.operator.show(customer)
        return customer_id

    def _select_car(self, customer_id: int) -> str | Rejected:
        """Steps 3 and 4: only a car listed for this customer may be chosen."""
        cars = self._owned_cars(customer_id)
        if cars.is_empty:
            if not self.ctx.operator.confirm(
                "This customer has no cars on file. Add a car? (y/n)"
            ):
                return Rejected.cancelled("No car selected.")
            car = add_car_wizard(self.ctx, customer_id=customer_id)
            if isinstance(car, Rejected):
                return car
            cars = self._owned_cars(customer_id)
        self.ctx.operator.show(cars)

        vin = normalize_vin(self.ctx.operator.ask("Please select the car from the list by VIN:"))
        if isinstance(vin, Rejected):
            return vin
        if vin not in cars.column("vin"):
            return Rejected(
                ErrorKind.NOT_OWNED,
                f"Car {vin} is not one of customer {customer_id}'s cars.",
                EntityKind.CAR,
            )
        with transaction(self.ctx.sessions) as session:
            self.ctx.operator.show(ShopRepository(session).car_row(vin))
        return vin

    def _owned_cars(self, customer_id: int) -> QueryResult:
        with transaction(self.ctx.sessions) as session:
            return ShopRepository(session).cars_owned_by(customer_id)

    def _collect_details(self) -> RequestDraft | Rejected:
        """Step 5."""
        date = self.ctx.ask_date(
            "Please enter the service request's date (YYYY-MM-DD, blank for today):", "Date"
        )
        if isinstance(date, Rejected):
            return date
        odometer = self.ctx.ask_int("Please enter the odometer reading:", "Odometer")
        if isinstance(odometer, Rejected):
            return odometer
        negative = check_odometer(odometer)
        if negative is not None:
            return negative
        complaint = self.ctx.ask_text("Please enter the customer's complaint:", "Complaint")
        if isinstance(complaint, Rejected):
            return complaint
        return RequestDraft(date, odometer, complaint)
