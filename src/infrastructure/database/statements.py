"""Dialect-aware statement helpers shared by the repositories."""

from typing import Any

from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import DeclarativeBase


async def insert_ignore(
    session: AsyncSession,
    model: type[DeclarativeBase],
    values: dict[str, Any] | list[dict[str, Any]],
) -> int:
    """INSERT ... ON CONFLICT DO NOTHING and return the number of rows written.

    A unique violation inside a transaction aborts it on PostgreSQL, so
    duplicates are skipped by the store instead of raised and caught.
    """
    dialect = session.get_bind().dialect.name
    if dialect == "postgresql":
        stmt = postgresql.insert(model).values(values).on_conflict_do_nothing()
    elif dialect == "sqlite":
        stmt = sqlite.insert(model).values(values).on_conflict_do_nothing()
    else:
        raise NotImplementedError(f"insert_ignore is not supported on {dialect}")

    result = await session.execute(stmt)
    return result.rowcount or 0  # type: ignore[attr-defined]
