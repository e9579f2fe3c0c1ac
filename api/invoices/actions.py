"""
Invoice mutation handlers (create, update, delete).

Each handler validates the submitted form, issues exactly one SQL
statement and then signals the listing view to be recomputed. Create and
update finish by navigating back to the listing; that navigation raises
and never returns to the caller.

Framework state is passed in explicitly through `ActionContext` so the
handlers can run outside a request (and in tests) with fakes.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Mapping, NoReturn

import asyncpg
from fastapi import HTTPException, status

from core import cache, config

from . import repository
from .schemas import State, to_cents, validate_invoice_form

logger = logging.getLogger(__name__)

# Failures of the write itself; anything else is a bug and propagates.
DATABASE_ERRORS = (asyncpg.PostgresError, asyncpg.InterfaceError, OSError, RuntimeError)


def redirect(location: str) -> NoReturn:
    """
    Navigate the browser to `location` (303 See Other, form-safe).
    """
    raise HTTPException(status_code=status.HTTP_303_SEE_OTHER, headers={"Location": location})


@dataclass
class ActionContext:
    store: Any = repository
    revalidate_path: Callable[[str], Any] = cache.views.revalidate_path
    redirect: Callable[[str], NoReturn] = redirect
    today: Callable[[], datetime.date] = datetime.date.today
    catch_create_errors: bool = field(default_factory=config.catch_create_errors)
    invoices_path: str = field(default_factory=config.invoices_path)


async def create_invoice(
    form: Mapping[str, Any],
    prev_state: State | None = None,
    *,
    ctx: ActionContext | None = None,
) -> State:
    """
    Create an invoice from a submitted form.

    `prev_state` is accepted for progressive-enhancement form bindings and
    is not used. Returns a `State` only on failure; success navigates away.
    """
    ctx = ctx or ActionContext()
    result = validate_invoice_form(form)
    if not result.ok:
        return State(errors=result.errors, message="Missing Fields. Failed to Create Invoice.")

    data = result.data
    amount_in_cents = to_cents(data.amount)
    date = ctx.today()

    try:
        await ctx.store.insert_invoice(
            customer_id=data.customer_id,
            amount=amount_in_cents,
            status=data.status,
            date=date,
        )
    except DATABASE_ERRORS:
        if not ctx.catch_create_errors:
            raise
        logger.exception("invoice_create_failed customer_id=%s", data.customer_id)
        return State(message="Database Error: Failed to Create Invoice.")

    logger.info(
        "invoice_created customer_id=%s amount=%s status=%s date=%s",
        data.customer_id,
        amount_in_cents,
        data.status,
        date.isoformat(),
    )
    ctx.revalidate_path(ctx.invoices_path)
    ctx.redirect(ctx.invoices_path)


async def update_invoice(
    invoice_id: str,
    form: Mapping[str, Any],
    prev_state: State | None = None,
    *,
    ctx: ActionContext | None = None,
) -> State:
    """
    Update customer, amount and status of an invoice. Id and date never change.
    """
    ctx = ctx or ActionContext()
    result = validate_invoice_form(form)
    if not result.ok:
        return State(errors=result.errors, message="Missing Fields. Failed to Update Invoice.")

    data = result.data
    amount_in_cents = to_cents(data.amount)

    try:
        await ctx.store.update_invoice(
            invoice_id,
            customer_id=data.customer_id,
            amount=amount_in_cents,
            status=data.status,
        )
    except DATABASE_ERRORS:
        logger.exception("invoice_update_failed invoice_id=%s", invoice_id)
        return State(message="Database Error: Failed to Update Invoice.")

    logger.info("invoice_updated invoice_id=%s amount=%s status=%s", invoice_id, amount_in_cents, data.status)
    ctx.revalidate_path(ctx.invoices_path)
    ctx.redirect(ctx.invoices_path)


async def delete_invoice(invoice_id: str, *, ctx: ActionContext | None = None) -> State:
    # Caller stays on the listing page, so no navigation here.
    ctx = ctx or ActionContext()
    try:
        await ctx.store.delete_invoice(invoice_id)
    except DATABASE_ERRORS:
        logger.exception("invoice_delete_failed invoice_id=%s", invoice_id)
        return State(message="Database Error: Failed to Delete Invoice.")

    logger.info("invoice_deleted invoice_id=%s", invoice_id)
    ctx.revalidate_path(ctx.invoices_path)
    return State(ok=True, message="Deleted Invoice.")
