"""
Reference Validation.

Before a workflow writes a row that points at other rows, it confirms those
rows exist. `ReferenceValidator` answers the existence questions and offers
`require_*` helpers that return a `Rejected` outcome (or `None` when the
reference is good), so callers can stop with a single `if`.
"""

from __future__ import annotations

from sqlalchemy import exists, select
from sqlalchemy.orm import Session

from .models import Car, ClosedRequest, Customer, EntityKind, Mechanic, Ownership, ServiceRequest
from .outcomes import ErrorKind, Rejected


class ReferenceValidator:
    """
    Existence checks for customers, mechanics, cars and service requests.

    All checks run through the session they are given, so a check made
    inside a write transaction sees that transaction's own changes.
    """

    def __init__(self, session: Session):
        self.session = session

    def customer_exists(self, customer_id: int) -> bool:
        return self.session.get(Customer, customer_id) is not None

    def mechanic_exists(self, mechanic_id: int) -> bool:
        return self.session.get(Mechanic, mechanic_id) is not None

    def car_exists(self, vin: str) -> bool:
        return self.session.get(Car, vin) is not None

    def service_request_exists(self, rid: int) -> bool:
        return self.session.get(ServiceRequest, rid) is not None

    def vin_registered(self, vin: str) -> bool:
        """True if the VIN is already in use as a car or in an ownership record."""
        owned = exists().where(Ownership.car_vin == vin)
        known_car = exists().where(Car.vin == vin)
        return bool(self.session.execute(select(owned | known_car)).scalar())

    def is_closed(self, rid: int) -> bool:
        """A service request is closed iff a closed request references it."""
        stmt = select(exists().where(ClosedRequest.rid == rid))
        return bool(self.session.execute(stmt).scalar())

    def owns(self, customer_id: int, vin: str) -> bool:
        stmt = select(
            exists().where(Ownership.customer_id == customer_id, Ownership.car_vin == vin)
        )
        return bool(self.session.execute(stmt).scalar())

    def require_customer(self, customer_id: int) -> Rejected | None:
        if not self.customer_exists(customer_id):
            return Rejected.not_found(EntityKind.CUSTOMER, customer_id)
        return None

    def require_mechanic(self, mechanic_id: int) -> Rejected | None:
        if not self.mechanic_exists(mechanic_id):
            return Rejected.not_found(EntityKind.MECHANIC, mechanic_id)
        return None

    def require_car(self, vin: str) -> Rejected | None:
        if not self.car_exists(vin):
            return Rejected.not_found(EntityKind.CAR, vin)
        return None

    def require_service_request(self, rid: int) -> Rejected | None:
        if not self.service_request_exists(rid):
            return Rejected.not_found(EntityKind.SERVICE_REQUEST, rid)
        return None

    def require_open_request(self, rid: int) -> Rejected | None:
        """The request must exist and must not have been closed yet."""
        missing = self.require_service_request(rid)
        if missing is not None:
            return missing
        if self.is_closed(rid):
            return Rejected(
                ErrorKind.ALREADY_CLOSED,
                f"Service request {rid} has already been closed.",
                EntityKind.SERVICE_REQUEST,
            )
        return None

    def require_unregistered_vin(self, vin: str) -> Rejected | None:
        if self.vin_registered(vin):
            return Rejected(
                ErrorKind.DUPLICATE_VIN, f"A car with VIN {vin} already exists.", EntityKind.CAR
            )
        return None

    def require_ownership(self, customer_id: int, vin: str) -> Rejected | None:
        if not self.owns(customer_id, vin):
            return Rejected(
                ErrorKind.NOT_OWNED,
                f"Car {vin} is not owned by customer {customer_id}.",
                EntityKind.CAR,
            )
        return None
