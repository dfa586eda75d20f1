"""
Shop Workflows.

Each workflow takes a `ShopContext` (or, for the non-interactive entry
points, just the session factory) and returns a `Created` or `Rejected`
outcome.
"""

from __future__ import annotations

from .cars import CarDraft, add_car, add_car_wizard
from .closures import ClosingDraft, close_request, close_request_wizard
from .context import ShopContext
from .entity_resolver import (
    CustomerDraft,
    EntityResolver,
    MechanicDraft,
    add_customer,
    add_mechanic,
    create_customer,
    create_mechanic,
)
from .service_requests import (
    RequestDraft,
    ServiceRequestWorkflow,
    get_service_request,
    open_service_request,
)

__all__ = [
    "CarDraft",
    "ClosingDraft",
    "CustomerDraft",
    "EntityResolver",
    "MechanicDraft",
    "RequestDraft",
    "ServiceRequestWorkflow",
    "ShopContext",
    "add_car",
    "add_car_wizard",
    "add_customer",
    "add_mechanic",
    "close_request",
    "close_request_wizard",
    "create_customer",
    "create_mechanic",
    "get_service_request",
    "open_service_request",
]
