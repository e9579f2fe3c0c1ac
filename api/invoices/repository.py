"""
Invoice persistence (raw SQL).

Amounts are stored in cents. Each mutation is a single statement.
"""

from __future__ import annotations

import datetime
from typing import Any

from core import db

_FILTER_SQL = """
    customers.name ILIKE $1
    OR customers.email ILIKE $1
    OR invoices.amount::text ILIKE $1
    OR invoices.date::text ILIKE $1
    OR invoices.status ILIKE $1
"""


def _like_pattern(query: str) -> str:
    return f"%{(query or '').strip()}%"


async def insert_invoice(
    *,
    customer_id: str,
    amount: int,
    status: str,
    date: datetime.date,
) -> None:
    await db.execute(
        """
        INSERT INTO invoices (customer_id, amount, status, date)
        VALUES ($1, $2, $3, $4)
        """,
        customer_id,
        amount,
        status,
        date,
    )


async def update_invoice(
    invoice_id: str,
    *,
    customer_id: str,
    amount: int,
    status: str,
) -> None:
    await db.execute(
        """
        UPDATE invoices
        SET customer_id = $2, amount = $3, status = $4
        WHERE id = $1
        """,
        invoice_id,
        customer_id,
        amount,
        status,
    )


async def delete_invoice(invoice_id: str) -> None:
    await db.execute(
        """
        DELETE FROM invoices
        WHERE id = $1
        """,
        invoice_id,
    )


async def get_invoice(invoice_id: str) -> dict[str, Any] | None:
    return await db.fetch_one(
        """
        SELECT id::text AS id, customer_id::text AS customer_id, amount, status, date
        FROM invoices
        WHERE id::text = $1
        """,
        invoice_id,
    )


async def fetch_filtered_invoices(
    query: str,
    *,
    limit: int,
    offset: int = 0,
) -> list[dict[str, Any]]:
    """
    Invoices joined with their customer, newest first, matching `query` anywhere.
    """
    return await db.fetch_all(
        f"""
        SELECT
          invoices.id::text AS id,
          invoices.amount,
          invoices.date,
          invoices.status,
          customers.name,
          customers.email,
          customers.image_url
        FROM invoices
        JOIN customers ON invoices.customer_id = customers.id
        WHERE {_FILTER_SQL}
        ORDER BY invoices.date DESC, invoices.id
        LIMIT $2 OFFSET $3
        """,
        _like_pattern(query),
        limit,
        offset,
    )


async def count_filtered_invoices(query: str) -> int:
    count = await db.fetch_val(
        f"""
        SELECT count(*)
        FROM invoices
        JOIN customers ON invoices.customer_id = customers.id
        WHERE {_FILTER_SQL}
        """,
        _like_pattern(query),
    )
    return int(count or 0)


async def fetch_card_data() -> dict[str, Any]:
    row = await db.fetch_one(
        """
        SELECT
          (SELECT count(*) FROM invoices) AS invoice_count,
          (SELECT count(*) FROM customers) AS customer_count,
          COALESCE(SUM(amount) FILTER (WHERE status = 'paid'), 0) AS paid,
          COALESCE(SUM(amount) FILTER (WHERE status = 'pending'), 0) AS pending
        FROM invoices
        """
    )
    if row is None:
        raise RuntimeError("Failed to load card data.")
    return row
