"""
The Operator Interface.

Workflows talk to the person at the counter through this protocol rather
than reading stdin or printing directly. The application supplies a terminal
implementation (`shopdesk_cli.console.TerminalOperator`); tests supply a
scripted one.
"""

from __future__ import annotations

from typing import Protocol

from .tabular import QueryResult


class Operator(Protocol):
    """Line-based interaction with the operator."""

    def ask(self, prompt: str) -> str:
        """Shows `prompt` and returns the next line the operator enters."""
        ...

    def confirm(self, prompt: str) -> bool:
        """Asks a yes/no question; only an explicit yes counts as True."""
        ...

    def show(self, result: QueryResult) -> None:
        """Displays a row set."""
        ...

    def notify(self, message: str) -> None:
        """Displays an informational message."""
        ...
