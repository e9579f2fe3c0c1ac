"""
Customer persistence (raw SQL).
"""

from __future__ import annotations

from typing import Any

from core import db


async def list_customers() -> list[dict[str, Any]]:
    """
    Customers for the invoice form's select box.
    """
    return await db.fetch_all(
        """
        SELECT id::text AS id, name
        FROM customers
        ORDER BY name ASC
        """
    )


async def fetch_filtered_customers(query: str) -> list[dict[str, Any]]:
    q = (query or "").strip()
    return await db.fetch_all(
        """
        SELECT
          customers.id::text AS id,
          customers.name,
          customers.email,
          customers.image_url,
          count(invoices.id) AS total_invoices,
          COALESCE(SUM(invoices.amount) FILTER (WHERE invoices.status = 'pending'), 0) AS total_pending,
          COALESCE(SUM(invoices.amount) FILTER (WHERE invoices.status = 'paid'), 0) AS total_paid
        FROM customers
        LEFT JOIN invoices ON customers.id = invoices.customer_id
        WHERE customers.name ILIKE $1
           OR customers.email ILIKE $1
        GROUP BY customers.id, customers.name, customers.email, customers.image_url
        ORDER BY customers.name ASC
        """,
        f"%{q}%",
    )
