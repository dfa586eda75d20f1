"""
SQLAlchemy Models Defining the Shopdesk Database Schema.

This module is the code-first definition of the shop's relational schema.
Each class maps to one table:

- `customer`, `mechanic` and `car` hold the registered entities.
- `ownership` links a customer to the cars they own.
- `service_request` records a car brought in with a complaint. A request is
  open for as long as no `closed_request` row references it; there is no
  status column.
- `closed_request` records the mechanic's outcome and bill for one request.
- `id_counter` backs identifier allocation (see `shopdesk_common.identifiers`).

Constraint names follow the naming convention configured on `metadata_obj`
so that the generated schema is predictable.
"""

from __future__ import annotations

import datetime
from enum import Enum

from sqlalchemy import (
    CheckConstraint,
    Date,
    ForeignKey,
    Index,
    Integer,
    MetaData,
    String,
    Text,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

metadata_obj = MetaData(
    naming_convention={
        "ix": "idx_%(table_name)s__%(column_0_label)s",  # Index
        "uq": "uq_%(table_name)s__%(column_0_name)s",  # Unique Constraint
        "ck": "ck_%(table_name)s__%(constraint_name)s",  # Check Constraint
        "fk": "fk_%(table_name)s__%(referred_table_name)s",  # Foreign Key
        "pk": "pk_%(table_name)s",  # Primary Key
    }
)

# Oldest model year accepted for a car.
MIN_MODEL_YEAR = 1900
# Upper bound (inclusive) for a mechanic's years of experience.
MAX_EXPERIENCE_YEARS = 99
# Largest value a 32-bit Integer column holds.
MAX_INTEGER = 2**31 - 1

# Column widths, shared with input validation.
NAME_LENGTH = 32
PHONE_LENGTH = 16
ADDRESS_LENGTH = 256
VIN_LENGTH = 32
MAKE_LENGTH = 32


class Base(DeclarativeBase):
    """
    A common declarative base for all SQLAlchemy models in the application.

    All ORM models inherit from this class so that they share `metadata_obj`
    and its naming convention.
    """

    metadata = metadata_obj


class EntityKind(str, Enum):
    """
    The kinds of records the shop workflow creates and references.

    The value doubles as the key of the entity's row in `id_counter` and as
    the human-readable name used in operator messages.
    """

    CUSTOMER = "customer"
    MECHANIC = "mechanic"
    CAR = "car"
    OWNERSHIP = "ownership"
    SERVICE_REQUEST = "service_request"
    CLOSED_REQUEST = "closed_request"

    @property
    def label(self) -> str:
        return self.value.replace("_", " ")


class Customer(Base):
    """
    A customer of the shop.

    Attributes:
        id: Surrogate key, allocated by the identifier allocator.
        fname: First name; with `lname` forms the natural key used to detect
            likely duplicates before creation.
        lname: Last name, also used to look customers up when opening a
            service request.
        phone: Contact phone number, free text.
        address: Postal address, free text.
    """

    __tablename__ = "customer"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    fname: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    lname: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    phone: Mapped[str] = mapped_column(String(PHONE_LENGTH), nullable=False)
    address: Mapped[str] = mapped_column(String(ADDRESS_LENGTH), nullable=False)

    __table_args__ = (
        Index("idx_customer__lname_fname", "lname", "fname"),
        {"comment": "Registered customers"},
    )

    def __repr__(self) -> str:
        return f"<Customer(id={self.id}, name={self.fname} {self.lname})>"


class Mechanic(Base):
    """
    A mechanic who closes service requests.

    Attributes:
        id: Surrogate key, allocated by the identifier allocator.
        fname: First name (natural key, with `lname`).
        lname: Last name.
        experience: Years of experience, between 0 and `MAX_EXPERIENCE_YEARS`.
    """

    __tablename__ = "mechanic"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    fname: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    lname: Mapped[str] = mapped_column(String(NAME_LENGTH), nullable=False)
    experience: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        Index("idx_mechanic__lname_fname", "lname", "fname"),
        CheckConstraint(
            f"experience >= 0 AND experience <= {MAX_EXPERIENCE_YEARS}",
            name="experience_range",
        ),
        {"comment": "Mechanics employed by the shop"},
    )

    def __repr__(self) -> str:
        return f"<Mechanic(id={self.id}, name={self.fname} {self.lname})>"


class Car(Base):
    """A car, keyed by its vehicle identification number."""

    __tablename__ = "car"

    vin: Mapped[str] = mapped_column(String(VIN_LENGTH), primary_key=True)
    make: Mapped[str] = mapped_column(String(MAKE_LENGTH), nullable=False)
    model: Mapped[str] = mapped_column(String(MAKE_LENGTH), nullable=False)
    year: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint(f"year >= {MIN_MODEL_YEAR}", name="year_plausible"),
        {"comment": "Cars known to the shop"},
    )

    def __repr__(self) -> str:
        return f"<Car(vin={self.vin}, {self.year} {self.make} {self.model})>"


class Ownership(Base):
    """
    Links a customer to a car they own.

    `car_vin` is unique: a car is registered to exactly one customer. The
    ownership and car rows are always inserted together in one transaction
    (see `shopdesk_common.services.cars`).
    """

    __tablename__ = "ownership"

    ownership_id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customer.id"), nullable=False, index=True
    )
    car_vin: Mapped[str] = mapped_column(
        String(VIN_LENGTH), ForeignKey("car.vin"), nullable=False, unique=True
    )

    __table_args__ = ({"comment": "Customer to car ownership"},)

    def __repr__(self) -> str:
        return (
            f"<Ownership(id={self.ownership_id}, customer_id={self.customer_id}, "
            f"car_vin={self.car_vin})>"
        )


class ServiceRequest(Base):
    """
    A request for work on a customer's car.

    Attributes:
        rid: Surrogate key, allocated by the identifier allocator.
        customer_id: The customer who brought the car in.
        car_vin: The car to be serviced; owned by `customer_id`.
        date: Date the request was opened.
        odometer: Odometer reading when the car was brought in.
        complaint: The customer's description of the problem.
    """

    __tablename__ = "service_request"

    rid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    customer_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("customer.id"), nullable=False, index=True
    )
    car_vin: Mapped[str] = mapped_column(
        String(VIN_LENGTH), ForeignKey("car.vin"), nullable=False, index=True
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    odometer: Mapped[int] = mapped_column(Integer, nullable=False)
    complaint: Mapped[str] = mapped_column(Text, nullable=False)

    __table_args__ = (
        CheckConstraint("odometer >= 0", name="odometer_non_negative"),
        {"comment": "Service requests; open until a closed_request references them"},
    )

    def __repr__(self) -> str:
        return f"<ServiceRequest(rid={self.rid}, car_vin={self.car_vin}, date={self.date})>"


class ClosedRequest(Base):
    """
    The recorded outcome that closes one service request.

    `rid` is unique, so a request can be closed only once.
    """

    __tablename__ = "closed_request"

    wid: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=False)
    rid: Mapped[int] = mapped_column(
        Integer, ForeignKey("service_request.rid"), nullable=False, unique=True
    )
    mid: Mapped[int] = mapped_column(
        Integer, ForeignKey("mechanic.id"), nullable=False, index=True
    )
    date: Mapped[datetime.date] = mapped_column(Date, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
    bill: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("bill >= 0", name="bill_non_negative"),
        {"comment": "Closed service requests with mechanic, comment and bill"},
    )

    def __repr__(self) -> str:
        return f"<ClosedRequest(wid={self.wid}, rid={self.rid}, mid={self.mid}, bill={self.bill})>"


class IdCounter(Base):
    """
    The last identifier handed out for one entity kind.

    Allocation locks this row for the rest of the transaction, so two
    creators can never be given the same identifier.
    """

    __tablename__ = "id_counter"

    entity: Mapped[str] = mapped_column(String(32), primary_key=True)
    last_value: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    __table_args__ = (
        CheckConstraint("last_value >= 0", name="last_value_non_negative"),
        {"comment": "Per-entity identifier counters"},
    )

    def __repr__(self) -> str:
        return f"<IdCounter(entity={self.entity}, last_value={self.last_value})>"
