"""
Terminal Surface for the Operator.

`TerminalOperator` implements the `Operator` protocol over a pair of text
streams: prompts and results are written to the output stream and answers
are read one line at a time from the input stream. Result sets are rendered
as a tab-separated header line, one tab-separated line per row and a
`total row(s): N` trailer.
"""

from __future__ import annotations

import datetime
import sys
from typing import Any, TextIO

from shopdesk_common.tabular import QueryResult

_YES = {"y", "yes"}


def _cell(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


def render_table(result: QueryResult) -> str:
    """Renders a result set as tab-separated text."""
    lines = ["\t".join(result.columns)]
    lines.extend("\t".join(_cell(value) for value in row) for row in result.rows)
    lines.append(f"total row(s): {len(result)}")
    return "\n".join(lines)


class TerminalOperator:
    """An operator typing at a terminal (or any pair of text streams)."""

    def __init__(self, stdin: TextIO | None = None, stdout: TextIO | None = None):
        self.stdin = stdin or sys.stdin
        self.stdout = stdout or sys.stdout

    def ask(self, prompt: str) -> str:
        """
        Writes the prompt and reads one line.

        Raises:
            EOFError: If the input stream is exhausted.
        """
        self.stdout.write(f"{prompt} ")
        self.stdout.flush()
        line = self.stdin.readline()
        if not line:
            raise EOFError("input closed")
        return line.rstrip("\r\n")

    def confirm(self, prompt: str) -> bool:
        return self.ask(prompt).strip().lower() in _YES

    def show(self, result: QueryResult) -> None:
        self.notify(render_table(result))

    def notify(self, message: str) -> None:
        self.stdout.write(f"{message}\n")
        self.stdout.flush()
