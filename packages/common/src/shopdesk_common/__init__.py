"""
Shopdesk Common Package.

This package holds the core of the shop workflow: the relational schema, the
session and transaction helpers, and the business rules that decide whether
a customer, mechanic or car may be created and how a service request moves
from open to closed. The interactive application in `shopdesk_cli` is a thin
layer on top of it.

Key modules include:
-   `config`: Centralized configuration management.
-   `db`: Engine creation and transactional session scopes.
-   `models`: SQLAlchemy data models for the database schema.
-   `identifiers`: Allocation of surrogate integer identifiers.
-   `validation`: Checks that referenced rows exist.
-   `repositories`: Data access layer for workflow and report queries.
-   `services`: The customer, car, service request and closure workflows.
-   `probes`: Connectivity probe used at application startup.
"""

__version__ = "0.1.0"
