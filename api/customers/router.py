"""
Customer API endpoints.
"""

from __future__ import annotations

from fastapi import APIRouter, Query

from invoices.schemas import from_cents

from . import repository

router = APIRouter()


@router.get("/customers")
async def list_customers(query: str = Query(default="", max_length=200)) -> dict:
    rows = await repository.fetch_filtered_customers(query)
    customers = [
        {
            **row,
            "total_invoices": int(row["total_invoices"]),
            "total_pending": from_cents(int(row["total_pending"])),
            "total_paid": from_cents(int(row["total_paid"])),
        }
        for row in rows
    ]
    return {"query": query, "customers": customers, "count": len(customers)}
