"""
Data Access Layer: Repositories for Shopdesk.

This package implements the Repository Pattern for the shop's relational
store. Workflows and the menu ask a repository for rows instead of building
SQL themselves; every statement is a SQLAlchemy construct with bound
parameters.

- `ShopRepository`: lookups and inserts for customers, mechanics, cars,
  ownership records, service requests and closed requests.
- `ReportRepository`: the fixed, read-only report queries.
"""

from __future__ import annotations

from .report_repository import ReportRepository
from .shop_repository import ShopRepository

__all__ = ["ReportRepository", "ShopRepository"]
