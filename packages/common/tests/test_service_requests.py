"""Tests for opening service requests."""

from __future__ import annotations

import datetime
from typing import Any

import pytest

from shopdesk_common.db import transaction
from shopdesk_common.models import Car, Customer, EntityKind, ServiceRequest
from shopdesk_common.outcomes import Created, ErrorKind, Rejected
from shopdesk_common.services import (
    RequestDraft,
    ServiceRequestWorkflow,
    get_service_request,
    open_service_request,
)


@pytest.fixture
def doe_with_car(seed: Any) -> None:
    """Customer 1 (Jane Doe) owning car VIN1."""
    seed.customer(1, "Jane", "Doe")
    seed.car("VIN1", customer_id=1, ownership_id=1)


class TestOpenServiceRequest:
    """Test the transactional insert of a request."""

    def test_round_trip(self, sessions: Any, doe_with_car: None) -> None:
        draft = RequestDraft(datetime.date(2024, 5, 1), 12000, "Brakes squeal")

        outcome = open_service_request(sessions, 1, "VIN1", draft)

        assert isinstance(outcome, Created)
        assert outcome.entity is EntityKind.SERVICE_REQUEST
        with transaction(sessions) as session:
            stored = get_service_request(session, outcome.key)
        assert stored is not None
        assert stored.customer_id == 1
        assert stored.car_vin == "VIN1"
        assert stored.date == datetime.date(2024, 5, 1)
        assert stored.odometer == 12000
        assert stored.complaint == "Brakes squeal"

    def test_car_owned_by_someone_else(
        self, sessions: Any, seed: Any, doe_with_car: None, count_rows: Any
    ) -> None:
        seed.customer(2, "John", "Roe")

        outcome = open_service_request(
            sessions, 2, "VIN1", RequestDraft(datetime.date(2024, 5, 1), 100, "Noise")
        )

        assert isinstance(outcome, Rejected)
        assert outcome.kind is ErrorKind.NOT_OWNED
        assert count_rows(ServiceRequest) == 0

    def test_unknown_car(self, sessions: Any, doe_with_car: None) -> None:
        outcome = open_service_request(
            sessions, 1, "NOPE", RequestDraft(datetime.date(2024, 5, 1), 100, "Noise")
        )

        assert isinstance(outcome, Rejected)
        assert outcome.kind is ErrorKind.NOT_FOUND
        assert outcome.entity is EntityKind.CAR

    def test_negative_odometer(self, sessions: Any, doe_with_car: None, count_rows: Any) -> None:
        outcome = open_service_request(
            sessions, 1, "VIN1", RequestDraft(datetime.date(2024, 5, 1), -1, "Noise")
        )

        assert isinstance(outcome, Rejected)
        assert outcome.kind is ErrorKind.INVALID_INPUT
        assert count_rows(ServiceRequest) == 0

    def test_get_missing_request(self, sessions: Any) -> None:
        with transaction(sessions) as session:
            assert get_service_request(session, 5) is None


class TestServiceRequestWorkflow:
    """Test the interactive path through the workflow."""

    def test_existing_customer_and_car(self, make_ctx: Any, doe_with_car: None) -> None:
        ctx = make_ctx("Doe", "1", "vin1", "2024-05-01", "12000", "Brakes squeal")

        outcome = ServiceRequestWorkflow(ctx).run()

        assert isinstance(outcome, Created)
        assert outcome.key == 1
        row = outcome.row.as_dicts()[0]
        assert row["car_vin"] == "VIN1"
        assert row["date"] == datetime.date(2024, 5, 1)
        shown_columns = [result.columns for result in ctx.operator.shown]
        assert shown_columns[0] == ("id", "lname", "fname")
        assert ctx.operator.shown[2].column("vin") == ["VIN1"]

    def test_car_not_in_list(self, make_ctx: Any, seed: Any, doe_with_car: None, count_rows: Any) -> None:
        seed.customer(2, "John", "Roe")
        seed.car("VIN2", customer_id=2, ownership_id=2)

        outcome = ServiceRequestWorkflow(make_ctx("Doe", "1", "VIN2")).run()

        assert isinstance(outcome, Rejected)
        assert outcome.kind is ErrorKind.NOT_OWNED
        assert count_rows(ServiceRequest) == 0

    def test_unknown_customer_id(self, make_ctx: Any, doe_with_car: None) -> None:
        outcome = ServiceRequestWorkflow(make_ctx("Doe", "42")).run()

        assert isinstance(outcome, Rejected)
        assert outcome.kind is ErrorKind.NOT_FOUND
        assert outcome.entity is EntityKind.CUSTOMER

    def test_bad_date(self, make_ctx: Any, doe_with_car: None, count_rows: Any) -> None:
        outcome = ServiceRequestWorkflow(make_ctx("Doe", "1", "VIN1", "05/01/2024")).run()

        assert isinstance(outcome, Rejected)
        assert outcome.kind is ErrorKind.PARSE_ERROR
        assert count_rows(ServiceRequest) == 0

    def test_no_customer_declined(self, make_ctx: Any, count_rows: Any) -> None:
        outcome = ServiceRequestWorkflow(make_ctx("Nobody", "n")).run()

        assert isinstance(outcome, Rejected)
        assert outcome.kind is ErrorKind.CANCELLED
        assert count_rows(Customer) == 0

    def test_registers_missing_customer_then_opens(self, make_ctx: Any, count_rows: Any) -> None:
        ctx = make_ctx(
            "Roe", "y",
            # New customer and their car.
            "Richard", "555-0101", "2 Elm St",
            "vin9", "Ford", "Focus", "2015",
            # Second pass through the search.
            "Roe", "1", "VIN9", "", "30000", "Check engine light",
        )

        outcome = ServiceRequestWorkflow(ctx).run()

        assert isinstance(outcome, Created)
        assert count_rows(Customer) == 1
        assert count_rows(Car) == 1
        row = outcome.row.as_dicts()[0]
        assert row["customer_id"] == 1
        assert row["date"] == datetime.date.today()

    def test_customer_without_cars_declines(
        self, make_ctx: Any, seed: Any, count_rows: Any
    ) -> None:
        seed.customer(1, "Jane", "Doe")

        outcome = ServiceRequestWorkflow(make_ctx("Doe", "1", "n")).run()

        assert isinstance(outcome, Rejected)
        assert outcome.kind is ErrorKind.CANCELLED
        assert count_rows(ServiceRequest) == 0

    def test_customer_without_cars_adds_one(self, make_ctx: Any, seed: Any) -> None:
        seed.customer(1, "Jane", "Doe")
        ctx = make_ctx(
            "Doe", "1", "y",
            "VIN7", "Mazda", "MX-5", "1994",
            "VIN7", "2024-06-01", "48000", "Soft top leaks",
        )

        outcome = ServiceRequestWorkflow(ctx).run()

        assert isinstance(outcome, Created)
        assert outcome.row.as_dicts()[0]["car_vin"] == "VIN7"
