"""Exceptions raised by the Shopdesk core."""

from __future__ import annotations


class ShopError(Exception):
    """Base class for errors raised by the Shopdesk core."""


class StoreError(ShopError):
    """
    A statement against the relational store failed.

    Raised by `shopdesk_common.db.transaction` after the transaction has been
    rolled back. The original SQLAlchemy exception is kept as `__cause__`.
    """

    def __init__(self, message: str, statement: str | None = None):
        super().__init__(message)
        self.statement = statement
