"""
Invoice read-side logic: filtered listing, edit form data, dashboard cards.
"""

from __future__ import annotations

import math
from typing import Any
from urllib.parse import urlencode

from fastapi import HTTPException, status

from core import cache, config
from customers import repository as customers_repository

from . import repository
from .schemas import from_cents


def _format_invoice_row(row: dict[str, Any]) -> dict[str, Any]:
    return {**row, "amount": from_cents(int(row["amount"]))}


def total_pages(total: int, page_size: int) -> int:
    return max(1, math.ceil(total / page_size)) if page_size > 0 else 1


async def _load_invoices_page(query: str, page: int, page_size: int) -> dict[str, Any]:
    total = await repository.count_filtered_invoices(query)
    rows = await repository.fetch_filtered_invoices(
        query,
        limit=page_size,
        offset=(page - 1) * page_size,
    )
    return {
        "query": query,
        "page": page,
        "page_size": page_size,
        "total": total,
        "total_pages": total_pages(total, page_size),
        "invoices": [_format_invoice_row(row) for row in rows],
    }


async def list_invoices(*, query: str = "", page: int = 1) -> dict[str, Any]:
    """
    Return one page of invoices matching `query`.

    Results are cached per (query, page) under the listing path until a
    mutation revalidates it.
    """
    query = (query or "").strip()
    page = max(1, page)
    page_size = config.invoices_page_size()
    key = urlencode({"query": query, "page": page, "page_size": page_size})
    return await cache.views.get_or_load(
        config.invoices_path(),
        key,
        lambda: _load_invoices_page(query, page, page_size),
    )


async def create_form() -> dict[str, Any]:
    return {"customers": await customers_repository.list_customers()}


async def edit_form(invoice_id: str) -> dict[str, Any]:
    invoice = await repository.get_invoice(invoice_id)
    if invoice is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Invoice not found.")
    return {
        "invoice": _format_invoice_row(invoice),
        "customers": await customers_repository.list_customers(),
    }


async def card_data() -> dict[str, Any]:
    row = await repository.fetch_card_data()
    return {
        "invoice_count": int(row["invoice_count"]),
        "customer_count": int(row["customer_count"]),
        "total_paid": from_cents(int(row["paid"])),
        "total_pending": from_cents(int(row["pending"])),
    }
