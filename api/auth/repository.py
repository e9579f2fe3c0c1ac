"""
User lookups for login.
"""

from __future__ import annotations

from core import db


def normalize_email(email: str) -> str:
    return (email or "").strip().lower()


async def get_user_by_email(email: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id::text AS id, name, email, password_hash
        FROM users
        WHERE lower(email) = $1
        """,
        normalize_email(email),
    )


async def get_user_by_id(user_id: str) -> dict | None:
    return await db.fetch_one(
        """
        SELECT id::text AS id, name, email, password_hash
        FROM users
        WHERE id::text = $1
        """,
        user_id,
    )
