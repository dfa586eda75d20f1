"""Repository for customers, mechanics, cars and service requests."""

from __future__ import annotations

import datetime
from typing import Any

from sqlalchemy import Select, select
from sqlalchemy.orm import Session

from ..models import Car, ClosedRequest, Customer, Mechanic, Ownership, ServiceRequest
from ..tabular import QueryResult


class ShopRepository:
    """
    Repository for the shop's workflow tables.

    Lookups return `QueryResult` row sets so that they can be shown to the
    operator after the session is gone; inserts return the new ORM object.
    Inserts only `add` and `flush`: committing is up to the surrounding
    `transaction` scope.
    """

    def __init__(self, session: Session):
        """
        Initialize the repository with a SQLAlchemy session.

        Args:
            session: Active SQLAlchemy session for database operations
        """
        self.session = session

    def _rows(self, stmt: Select[Any]) -> QueryResult:
        return QueryResult.from_result(self.session.execute(stmt))

    # --- Lookups ---

    def find_customers_by_name(self, first_name: str, last_name: str) -> QueryResult:
        """
        Find customers whose first and last name match exactly.

        The comparison is case-sensitive, matching what the operator typed.

        Args:
            first_name: First name to match
            last_name: Last name to match

        Returns:
            All columns of every matching customer, ordered by id
        """
        stmt = (
            select(*Customer.__table__.c)
            .where(Customer.fname == first_name, Customer.lname == last_name)
            .order_by(Customer.id)
        )
        return self._rows(stmt)

    def find_mechanics_by_name(self, first_name: str, last_name: str) -> QueryResult:
        """
        Find mechanics whose first and last name match exactly.

        Args:
            first_name: First name to match
            last_name: Last name to match

        Returns:
            All columns of every matching mechanic, ordered by id
        """
        stmt = (
            select(*Mechanic.__table__.c)
            .where(Mechanic.fname == first_name, Mechanic.lname == last_name)
            .order_by(Mechanic.id)
        )
        return self._rows(stmt)

    def find_customers_by_last_name(self, last_name: str) -> QueryResult:
        """List id, last and first name of every customer with this last name."""
        stmt = (
            select(Customer.id, Customer.lname, Customer.fname)
            .where(Customer.lname == last_name)
            .order_by(Customer.id)
        )
        return self._rows(stmt)

    def cars_owned_by(self, customer_id: int) -> QueryResult:
        """List the cars registered to a customer through the ownership table."""
        stmt = (
            select(*Car.__table__.c)
            .join(Ownership, Ownership.car_vin == Car.vin)
            .where(Ownership.customer_id == customer_id)
            .order_by(Car.vin)
        )
        return self._rows(stmt)

    def customer_row(self, customer_id: int) -> QueryResult:
        return self._rows(select(*Customer.__table__.c).where(Customer.id == customer_id))

    def mechanic_row(self, mechanic_id: int) -> QueryResult:
        return self._rows(select(*Mechanic.__table__.c).where(Mechanic.id == mechanic_id))

    def car_row(self, vin: str) -> QueryResult:
        return self._rows(select(*Car.__table__.c).where(Car.vin == vin))

    def service_request_row(self, rid: int) -> QueryResult:
        return self._rows(select(*ServiceRequest.__table__.c).where(ServiceRequest.rid == rid))

    def closed_request_row(self, wid: int) -> QueryResult:
        return self._rows(select(*ClosedRequest.__table__.c).where(ClosedRequest.wid == wid))

    def get_service_request(self, rid: int) -> ServiceRequest | None:
        """
        Retrieve a service request by its id.

        Args:
            rid: The request id

        Returns:
            The ServiceRequest instance if found, None otherwise
        """
        return self.session.get(ServiceRequest, rid)

    # --- Inserts ---

    def add_customer(
        self, customer_id: int, first_name: str, last_name: str, phone: str, address: str
    ) -> Customer:
        customer = Customer(
            id=customer_id, fname=first_name, lname=last_name, phone=phone, address=address
        )
        self.session.add(customer)
        self.session.flush()
        return customer

    def add_mechanic(
        self, mechanic_id: int, first_name: str, last_name: str, experience: int
    ) -> Mechanic:
        mechanic = Mechanic(id=mechanic_id, fname=first_name, lname=last_name, experience=experience)
        self.session.add(mechanic)
        self.session.flush()
        return mechanic

    def add_owned_car(
        self,
        ownership_id: int,
        customer_id: int,
        vin: str,
        make: str,
        model: str,
        year: int,
    ) -> Car:
        """
        Insert a car together with the ownership record that links it to a customer.

        Both rows are flushed in the caller's transaction; the car is written
        first so the ownership's foreign key is satisfied.

        Args:
            ownership_id: Allocated id of the new ownership record
            customer_id: The owning customer
            vin: Vehicle identification number (primary key of the car)
            make: Manufacturer
            model: Model name
            year: Model year

        Returns:
            The new Car instance
        """
        car = Car(vin=vin, make=make, model=model, year=year)
        self.session.add(car)
        self.session.flush()
        self.session.add(Ownership(ownership_id=ownership_id, customer_id=customer_id, car_vin=vin))
        self.session.flush()
        return car

    def add_service_request(
        self,
        rid: int,
        customer_id: int,
        vin: str,
        date: datetime.date,
        odometer: int,
        complaint: str,
    ) -> ServiceRequest:
        request = ServiceRequest(
            rid=rid,
            customer_id=customer_id,
            car_vin=vin,
            date=date,
            odometer=odometer,
            complaint=complaint,
        )
        self.session.add(request)
        self.session.flush()
        return request

    def add_closed_request(
        self,
        wid: int,
        rid: int,
        mechanic_id: int,
        date: datetime.date,
        comment: str,
        bill: int,
    ) -> ClosedRequest:
        closed = ClosedRequest(wid=wid, rid=rid, mid=mechanic_id, date=date, comment=comment, bill=bill)
        self.session.add(closed)
        self.session.flush()
        return closed
