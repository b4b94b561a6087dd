import logging
import re
from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional, Sequence, Tuple, Type

from sqlalchemy import Select, func, inspect, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from hms.core.exceptions import DuplicateFieldError, InvalidRequestError

logger = logging.getLogger(__name__)

_CAMEL_BOUNDARY = re.compile(r"(?<!^)(?=[A-Z])")


def to_snake(name: str) -> str:
    return _CAMEL_BOUNDARY.sub("_", name).lower()


def resolve_sort_column(model: Type, sort_by: str):
    """Map a camelCase or snake_case field name onto a mapped column of `model`."""
    columns = inspect(model).columns
    key = to_snake(sort_by.strip())
    if key not in columns:
        raise InvalidRequestError(f"Cannot sort by unknown field '{sort_by}'")
    return getattr(model, key)


async def fetch_page(
    db: AsyncSession,
    model: Type,
    offset: int,
    limit: int,
    sort_by: str = "id",
    descending: bool = False,
) -> Tuple[Sequence, int]:
    """Run one page of `select(model)` and the matching total count."""
    column = resolve_sort_column(model, sort_by)
    order = column.desc() if descending else column.asc()

    total = await db.scalar(select(func.count()).select_from(model))
    # id as tie-breaker keeps pages stable when the sort column repeats
    query = select(model).order_by(order, model.id.asc()).offset(offset).limit(limit)
    result = await db.execute(query)
    rows = result.scalars().all()

    logger.debug(
        f"CRUD: page of {model.__tablename__} offset={offset} limit={limit} "
        f"sort={column.key} {'desc' if descending else 'asc'} -> {len(rows)}/{total}"
    )
    return rows, total or 0


async def list_where(db: AsyncSession, query: Select) -> Sequence:
    result = await db.execute(query)
    return result.scalars().all()


def conflicting_column(exc: IntegrityError, table: str, columns: Iterable[str]) -> Optional[str]:
    """
    Work out which of `columns` an IntegrityError is about.

    Postgres reports the constraint name (uq_<table>_<column>), sqlite
    reports "<table>.<column>".
    """
    message = str(exc.orig) if exc.orig is not None else str(exc)
    for column in columns:
        if f"uq_{table}_{column}" in message or f"{table}.{column}" in message:
            return column
    return None


def utcnow() -> datetime:
    """Naive UTC timestamp, the form created_at/updated_at are stored in."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    """Bring a client-supplied datetime into the naive-UTC form of the timestamp columns."""
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


async def commit_unique(
    db: AsyncSession,
    entity: str,
    table: str,
    unique_fields: Dict[str, Tuple[str, Any]],
) -> None:
    """
    Commit the pending unit of work, turning a unique-constraint violation
    into a DuplicateFieldError.

    `unique_fields` maps column name -> (client field name, submitted value).
    The constraint is authoritative: a concurrent duplicate that got past the
    service pre-checks ends up here with the same error as a sequential one.
    """
    try:
        await db.commit()
    except IntegrityError as e:
        await db.rollback()
        column = conflicting_column(e, table, unique_fields)
        if column is None:
            logger.error(f"CRUD: integrity error on {table} not tied to a unique field: {e}")
            raise
        field, value = unique_fields[column]
        logger.warning(f"CRUD: unique constraint on {table}.{field} rejected value {value!r}")
        raise DuplicateFieldError(entity, field, value) from e
