"""Tests for the numbered menu and its dispatch boundary."""

from __future__ import annotations

import io
import json
from typing import Any

import pytest

from shopdesk_cli import menu
from shopdesk_cli.console import TerminalOperator
from shopdesk_common.errors import StoreError
from shopdesk_common.outcomes import Created, ErrorKind, Rejected


def _output(ctx: Any) -> str:
    return ctx.operator.stdout.getvalue()


def _log_records(stderr: str) -> list[dict[str, Any]]:
    return [json.loads(line) for line in stderr.splitlines() if line.startswith("{")]


class TestReadChoice:
    """Test reading a menu choice."""

    def test_reprompts_until_valid(self) -> None:
        stdout = io.StringIO()
        operator = TerminalOperator(io.StringIO("abc\n12\n0\n3\n"), stdout)

        assert menu.read_choice(operator) == 3
        assert stdout.getvalue().count("Unrecognized choice!") == 3

    def test_exit_is_a_valid_choice(self) -> None:
        operator = TerminalOperator(io.StringIO("11\n"), io.StringIO())

        assert menu.read_choice(operator) == menu.EXIT_CHOICE

    def test_menu_lists_every_operation(self) -> None:
        text = menu.menu_text()

        assert "1. Add customer" in text
        assert "10. Customers by descending total bill" in text
        assert "11. Exit" in text


class TestDispatch:
    """Test that every kind of result is reported once."""

    def test_created_is_shown(self, terminal_ctx: Any, capsys: pytest.CaptureFixture[str]) -> None:
        ctx = terminal_ctx("Jane\nDoe\n555-0100\n1 Main St\n")

        result = menu.dispatch(ctx, 1)

        assert isinstance(result, Created)
        assert "Added customer 1." in _output(ctx)
        assert "id\tfname\tlname\tphone\taddress" in _output(ctx)
        records = _log_records(capsys.readouterr().err)
        assert records[-1]["msg"] == "workflow_completed"
        assert records[-1]["operation"] == "add_customer"

    def test_rejection_message_is_shown(
        self, terminal_ctx: Any, capsys: pytest.CaptureFixture[str]
    ) -> None:
        ctx = terminal_ctx("42\n")

        result = menu.dispatch(ctx, 3)

        assert isinstance(result, Rejected)
        assert "No customer with id 42." in _output(ctx)
        records = _log_records(capsys.readouterr().err)
        assert records[-1]["msg"] == "workflow_rejected"
        assert records[-1]["kind"] == "not_found"

    def test_store_error_becomes_rejection(
        self, terminal_ctx: Any, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def broken(ctx: Any) -> Any:
            raise StoreError("Store operation failed: OperationalError")

        monkeypatch.setitem(menu.MENU, 1, menu.MenuEntry("add_customer", "Add customer", broken))
        ctx = terminal_ctx("")

        result = menu.dispatch(ctx, 1)

        assert isinstance(result, Rejected)
        assert result.kind is ErrorKind.STORE_ERROR
        assert "Store operation failed" in _output(ctx)

    def test_store_error_statement_is_logged(
        self,
        terminal_ctx: Any,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        statement = "INSERT INTO customer (id, fname, lname, phone, address) VALUES (?, ?, ?, ?, ?)"

        def broken(ctx: Any) -> Any:
            raise StoreError("Store operation failed: IntegrityError", statement)

        monkeypatch.setitem(menu.MENU, 1, menu.MenuEntry("add_customer", "Add customer", broken))

        menu.dispatch(terminal_ctx(""), 1)

        records = _log_records(capsys.readouterr().err)
        failure = next(record for record in records if record["msg"] == "store_error")
        assert failure["operation"] == "add_customer"
        assert failure["statement"] == statement
        assert records[-1]["msg"] == "workflow_rejected"
        assert records[-1]["kind"] == "store_error"

    def test_unexpected_error_is_logged(
        self,
        terminal_ctx: Any,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        def buggy(ctx: Any) -> Any:
            raise KeyError("boom")

        monkeypatch.setitem(menu.MENU, 2, menu.MenuEntry("add_mechanic", "Add mechanic", buggy))
        ctx = terminal_ctx("")

        assert menu.dispatch(ctx, 2) is None
        assert "Unexpected error: KeyError" in _output(ctx)
        records = _log_records(capsys.readouterr().err)
        assert records[-1]["msg"] == "workflow_failed"
        assert records[-1]["error_type"] == "KeyError"

    def test_report_uses_configured_threshold(self, terminal_ctx: Any) -> None:
        ctx = terminal_ctx("")

        menu.dispatch(ctx, 6)

        assert "fname\tlname\tdate\tcomment\tbill\ntotal row(s): 0" in _output(ctx)

    def test_top_k_must_be_positive(self, terminal_ctx: Any) -> None:
        ctx = terminal_ctx("0\n")

        result = menu.dispatch(ctx, 9)

        assert isinstance(result, Rejected)
        assert result.kind is ErrorKind.INVALID_INPUT


class TestRunMenu:
    """Test the menu loop."""

    def test_exit_choice_ends_loop(self, terminal_ctx: Any) -> None:
        ctx = terminal_ctx("11\n")

        menu.run_menu(ctx)

        assert _output(ctx).count("MAIN MENU") == 1

    def test_end_of_input_ends_loop(self, terminal_ctx: Any) -> None:
        ctx = terminal_ctx("1\nJane\n")

        menu.run_menu(ctx)

        assert "Added customer" not in _output(ctx)

    def test_continues_after_rejection(self, terminal_ctx: Any) -> None:
        ctx = terminal_ctx("3\nabc\n2\nMax\nPower\n7\n11\n")

        menu.run_menu(ctx)

        output = _output(ctx)
        assert "Customer id must be a whole number" in output
        assert "Added mechanic 1." in output
        assert output.count("MAIN MENU") == 3
