"""
The Numbered Menu.

`run_menu` shows the menu, reads a choice and dispatches it to one workflow
or report, until the operator picks Exit or the input runs out.

Each dispatch is an error boundary. A workflow's `Rejected` outcome, a
`StoreError` (turned into a `store_error` rejection) and any other
unexpected exception are reported to the operator and logged, and the menu
carries on. Only end of input leaves the loop.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from shopdesk_common.db import transaction
from shopdesk_common.errors import StoreError
from shopdesk_common.inputs import parse_int
from shopdesk_common.operator import Operator
from shopdesk_common.outcomes import Created, ErrorKind, Outcome, Rejected
from shopdesk_common.repositories import ReportRepository
from shopdesk_common.services import (
    ServiceRequestWorkflow,
    ShopContext,
    add_car_wizard,
    add_customer,
    add_mechanic,
    close_request_wizard,
)
from shopdesk_common.tabular import QueryResult

from .logger import log_event

MenuResult = Outcome | QueryResult


@dataclass(frozen=True)
class MenuEntry:
    name: str
    title: str
    run: Callable[[ShopContext], MenuResult]


def _bill_below(ctx: ShopContext) -> MenuResult:
    with transaction(ctx.sessions) as session:
        return ReportRepository(session).customers_with_bill_below(
            ctx.config.report_bill_threshold
        )


def _more_cars_than(ctx: ShopContext) -> MenuResult:
    with transaction(ctx.sessions) as session:
        return ReportRepository(session).customers_with_more_cars_than(
            ctx.config.report_car_count_threshold
        )


def _old_low_mileage(ctx: ShopContext) -> MenuResult:
    with transaction(ctx.sessions) as session:
        return ReportRepository(session).cars_older_than_with_mileage_below(
            ctx.config.report_model_year_cutoff, ctx.config.report_mileage_cutoff
        )


def _top_cars(ctx: ShopContext) -> MenuResult:
    k = ctx.ask_int("Please enter the number of cars to list (K):", "K")
    if isinstance(k, Rejected):
        return k
    if k < 1:
        return Rejected(ErrorKind.INVALID_INPUT, f"K must be at least 1, got {k}.")
    with transaction(ctx.sessions) as session:
        return ReportRepository(session).top_cars_by_service_count(k)


def _total_bill(ctx: ShopContext) -> MenuResult:
    with transaction(ctx.sessions) as session:
        return ReportRepository(session).customers_by_total_bill()


MENU: dict[int, MenuEntry] = {
    1: MenuEntry("add_customer", "Add customer", add_customer),
    2: MenuEntry("add_mechanic", "Add mechanic", add_mechanic),
    3: MenuEntry("add_car", "Add car", add_car_wizard),
    4: MenuEntry(
        "insert_service_request",
        "Insert service request",
        lambda ctx: ServiceRequestWorkflow(ctx).run(),
    ),
    5: MenuEntry("close_service_request", "Close service request", close_request_wizard),
    6: MenuEntry("bill_below", "Customers with bill below threshold", _bill_below),
    7: MenuEntry("more_cars_than", "Customers with more than N cars", _more_cars_than),
    8: MenuEntry(
        "old_low_mileage", "Cars older than a year with low mileage", _old_low_mileage
    ),
    9: MenuEntry("top_cars", "Top K cars by service requests", _top_cars),
    10: MenuEntry("total_bill", "Customers by descending total bill", _total_bill),
}
EXIT_CHOICE = 11


def menu_text() -> str:
    lines = ["MAIN MENU", "---------"]
    lines.extend(f"{number}. {entry.title}" for number, entry in MENU.items())
    lines.append(f"{EXIT_CHOICE}. Exit")
    return "\n".join(lines)


def read_choice(operator: Operator) -> int:
    """
    Reads a menu choice, re-prompting until it is a number on the menu.

    Raises:
        EOFError: If the input runs out.
    """
    while True:
        choice = parse_int(operator.ask("Please make your choice:"), "Choice")
        if isinstance(choice, int) and (choice in MENU or choice == EXIT_CHOICE):
            return choice
        operator.notify("Unrecognized choice!")


def dispatch(ctx: ShopContext, choice: int) -> MenuResult | None:
    """
    Runs one menu entry and reports its result to the operator.

    Returns:
        The entry's result, or None if it failed unexpectedly.

    Raises:
        EOFError: If the input runs out in the middle of a workflow.
    """
    entry = MENU[choice]
    try:
        result = entry.run(ctx)
    except StoreError as exc:
        log_event("ERROR", "store_error", operation=entry.name, statement=exc.statement)
        result = Rejected(ErrorKind.STORE_ERROR, str(exc))
    except EOFError:
        raise
    except Exception as exc:
        log_event("ERROR", "workflow_failed", operation=entry.name, error_type=type(exc).__name__)
        ctx.operator.notify(f"Unexpected error: {type(exc).__name__}: {exc}")
        return None

    report(ctx.operator, entry.name, result)
    return result


def report(operator: Operator, operation: str, result: MenuResult) -> None:
    """Shows a result to the operator and logs it. Every outcome ends up here."""
    if isinstance(result, Created):
        operator.notify(f"Added {result.entity.label} {result.key}.")
        operator.show(result.row)
        log_event(
            "INFO", "workflow_completed", operation=operation, outcome="created", key=result.key
        )
    elif isinstance(result, Rejected):
        operator.notify(result.message)
        log_event(
            "WARNING" if result.kind is ErrorKind.STORE_ERROR else "INFO",
            "workflow_rejected",
            operation=operation,
            kind=result.kind.value,
            entity=result.entity.value if result.entity else None,
        )
    else:
        operator.show(result)
        log_event(
            "INFO", "workflow_completed", operation=operation, outcome="report", rows=len(result)
        )


def run_menu(ctx: ShopContext) -> None:
    """Loops over the menu until Exit is chosen or the input is exhausted."""
    try:
        while True:
            ctx.operator.notify(menu_text())
            choice = read_choice(ctx.operator)
            if choice == EXIT_CHOICE:
                return
            dispatch(ctx, choice)
    except EOFError:
        return
