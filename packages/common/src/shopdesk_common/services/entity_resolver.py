"""
Entity Resolution for Customers and Mechanics.

Customers and mechanics have no natural unique key, so before creating one
the shop looks for an existing record with the same first and last name.
When there is a match, the operator is shown the record and asked whether
it is the person they meant to add:

- yes: nothing is inserted and the outcome is `already_exists`;
- no (a different person sharing the name), or no match at all: the
  remaining attributes are collected, an identifier is allocated and the
  record is inserted in one transaction.
"""

from __future__ import annotations

from dataclasses import dataclass

from sqlalchemy.orm import Session, sessionmaker

from ..db import transaction
from ..identifiers import next_id
from ..inputs import check_experience, require_text
from ..models import ADDRESS_LENGTH, NAME_LENGTH, PHONE_LENGTH, EntityKind
from ..outcomes import Created, ErrorKind, Outcome, Rejected
from ..repositories import ShopRepository
from ..tabular import QueryResult
from .context import ShopContext


@dataclass(frozen=True)
class CustomerDraft:
    first_name: str
    last_name: str
    phone: str
    address: str


@dataclass(frozen=True)
class MechanicDraft:
    first_name: str
    last_name: str
    experience: int


def _natural_key(first_name: str, last_name: str) -> tuple[str, str] | Rejected:
    first = require_text(first_name, "First name", NAME_LENGTH)
    if isinstance(first, Rejected):
        return first
    last = require_text(last_name, "Last name", NAME_LENGTH)
    if isinstance(last, Rejected):
        return last
    return first, last


def create_customer(sessions: sessionmaker[Session], draft: CustomerDraft) -> Outcome:
    """
    Inserts a customer without any duplicate check.

    Args:
        sessions: Session factory of the store.
        draft: The customer's attributes, as entered.

    Returns:
        `Created` with the new id and stored row, or `Rejected` if a field
        is empty or too long.
    """
    names = _natural_key(draft.first_name, draft.last_name)
    if isinstance(names, Rejected):
        return names
    phone = require_text(draft.phone, "Phone", PHONE_LENGTH)
    if isinstance(phone, Rejected):
        return phone
    address = require_text(draft.address, "Address", ADDRESS_LENGTH)
    if isinstance(address, Rejected):
        return address

    with transaction(sessions) as session:
        repo = ShopRepository(session)
        customer_id = next_id(session, EntityKind.CUSTOMER)
        repo.add_customer(customer_id, names[0], names[1], phone, address)
        row = repo.customer_row(customer_id)
    return Created(EntityKind.CUSTOMER, customer_id, row)


def create_mechanic(sessions: sessionmaker[Session], draft: MechanicDraft) -> Outcome:
    """
    Inserts a mechanic without any duplicate check.

    Returns:
        `Created` with the new id and stored row, or `Rejected` if a name is
        empty or the experience is out of range.
    """
    names = _natural_key(draft.first_name, draft.last_name)
    if isinstance(names, Rejected):
        return names
    out_of_range = check_experience(draft.experience)
    if out_of_range is not None:
        return out_of_range

    with transaction(sessions) as session:
        repo = ShopRepository(session)
        mechanic_id = next_id(session, EntityKind.MECHANIC)
        repo.add_mechanic(mechanic_id, names[0], names[1], draft.experience)
        row = repo.mechanic_row(mechanic_id)
    return Created(EntityKind.MECHANIC, mechanic_id, row)


class EntityResolver:
    """
    Resolves a candidate customer or mechanic against existing records.

    Matching is exact and case-sensitive on (first name, last name).
    """

    def __init__(self, ctx: ShopContext):
        self.ctx = ctx

    def resolve_customer(self, first_name: str, last_name: str) -> Outcome:
        """
        Creates the customer unless the operator confirms they already exist.

        Phone and address are prompted only once creation goes ahead.
        """
        names = _natural_key(first_name, last_name)
        if isinstance(names, Rejected):
            return names
        with transaction(self.ctx.sessions) as session:
            matches = ShopRepository(session).find_customers_by_name(*names)
        if self._confirm_existing(matches, EntityKind.CUSTOMER):
            return self._already_exists(EntityKind.CUSTOMER)

        phone = self.ctx.ask_text("Please enter the customer's phone:", "Phone", PHONE_LENGTH)
        if isinstance(phone, Rejected):
            return phone
        address = self.ctx.ask_text(
            "Please enter the customer's address:", "Address", ADDRESS_LENGTH
        )
        if isinstance(address, Rejected):
            return address
        return create_customer(self.ctx.sessions, CustomerDraft(*names, phone, address))

    def resolve_mechanic(self, first_name: str, last_name: str) -> Outcome:
        """Creates the mechanic unless the operator confirms they already exist."""
        names = _natural_key(first_name, last_name)
        if isinstance(names, Rejected):
            return names
        with transaction(self.ctx.sessions) as session:
            matches = ShopRepository(session).find_mechanics_by_name(*names)
        if self._confirm_existing(matches, EntityKind.MECHANIC):
            return self._already_exists(EntityKind.MECHANIC)

        experience = self.ctx.ask_int(
            "Please enter the mechanic's years of experience:", "Experience"
        )
        if isinstance(experience, Rejected):
            return experience
        return create_mechanic(self.ctx.sessions, MechanicDraft(*names, experience))

    def _confirm_existing(self, matches: QueryResult, kind: EntityKind) -> bool:
        if matches.is_empty:
            return False
        self.ctx.operator.show(matches)
        return self.ctx.operator.confirm(f"Is this the {kind.label} you wish to add? (y/n)")

    @staticmethod
    def _already_exists(kind: EntityKind) -> Rejected:
        return Rejected(
            ErrorKind.ALREADY_EXISTS, f"This {kind.label} has already been added.", kind
        )


def add_customer(ctx: ShopContext) -> Outcome:
    """Menu wizard: prompt for a name, then resolve or create the customer."""
    first_name = ctx.operator.ask("Please enter the customer's first name:")
    last_name = ctx.operator.ask("Please enter the customer's last name:")
    return EntityResolver(ctx).resolve_customer(first_name, last_name)


def add_mechanic(ctx: ShopContext) -> Outcome:
    """Menu wizard: prompt for a name, then resolve or create the mechanic."""
    first_name = ctx.operator.ask("Please enter the mechanic's first name:")
    last_name = ctx.operator.ask("Please enter the mechanic's last name:")
    return EntityResolver(ctx).resolve_mechanic(first_name, last_name)
