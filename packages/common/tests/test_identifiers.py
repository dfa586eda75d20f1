"""Tests for identifier allocation."""

from __future__ import annotations

from typing import Any

import pytest

from shopdesk_common.db import transaction
from shopdesk_common.identifiers import current_max_id, next_id
from shopdesk_common.models import EntityKind


class TestNextId:
    """Test allocation against the stored rows and the counter."""

    def test_empty_table_starts_at_one(self, sessions: Any) -> None:
        with transaction(sessions) as session:
            assert next_id(session, EntityKind.CUSTOMER) == 1

    def test_follows_seeded_rows(self, sessions: Any, seed: Any) -> None:
        """After seeding ids 1..3 the next id is 4."""
        for customer_id in (1, 2, 3):
            seed.customer(customer_id)

        with transaction(sessions) as session:
            assert current_max_id(session, EntityKind.CUSTOMER) == 3
            assert next_id(session, EntityKind.CUSTOMER) == 4

    def test_consecutive_calls_are_distinct(self, sessions: Any) -> None:
        with transaction(sessions) as session:
            first = next_id(session, EntityKind.SERVICE_REQUEST)
            second = next_id(session, EntityKind.SERVICE_REQUEST)

        assert (first, second) == (1, 2)

    def test_committed_allocation_is_not_reused(self, sessions: Any) -> None:
        """The counter remembers ids handed out even if no row carries them."""
        with transaction(sessions) as session:
            next_id(session, EntityKind.MECHANIC)

        with transaction(sessions) as session:
            assert next_id(session, EntityKind.MECHANIC) == 2

    def test_rolled_back_allocation_is_reused(self, sessions: Any) -> None:
        with pytest.raises(RuntimeError):
            with transaction(sessions) as session:
                assert next_id(session, EntityKind.CUSTOMER) == 1
                raise RuntimeError("abort")

        with transaction(sessions) as session:
            assert next_id(session, EntityKind.CUSTOMER) == 1

    def test_kinds_are_counted_separately(self, sessions: Any, seed: Any) -> None:
        seed.customer(7)

        with transaction(sessions) as session:
            assert next_id(session, EntityKind.CUSTOMER) == 8
            assert next_id(session, EntityKind.MECHANIC) == 1

    def test_car_is_not_allocated(self, sessions: Any) -> None:
        """Cars are keyed by VIN."""
        with pytest.raises(ValueError):
            with transaction(sessions) as session:
                next_id(session, EntityKind.CAR)
