from __future__ import annotations

from collections.abc import Mapping
from typing import Any

import sqlalchemy
from loguru import logger
from sqlalchemy.engine import Connection


def hydrate(model: Any, mapping: Mapping[str, Any]) -> Any:
    """
    Turns a row mapping into an instance of `model`.

    Pydantic models are validated with `model_validate`, any other class is
    called with the row as keyword arguments.
    """
    data = dict(mapping)
    model_validate = getattr(model, "model_validate", None)
    if model_validate is not None:
        return model_validate(data)
    return model(**data)


def insert_record(
    connection: Connection,
    table: sqlalchemy.Table,
    row: Mapping[str, Any],
    model: Any,
    *,
    use_returning: bool | None = None,
) -> Any:
    """
    Inserts `row` into `table` and returns the persisted record as `model`.

    This is the single write performed per factory insert. When the dialect
    supports it (and `use_returning` allows it) the stored row comes back with
    `INSERT ... RETURNING`, otherwise it is selected again through
    `inserted_primary_key`, so server defaults and autoincrement values are
    always part of the returned record.

    Errors raised by SQLAlchemy (constraint violations, connectivity problems)
    are not caught.

    Parameters:
        connection (Connection): The caller's connection. It is neither
            committed nor closed here.
        table (sqlalchemy.Table): The table to insert into.
        row (Mapping[str, Any]): Column values, foreign keys already resolved.
        model (Any): The class the persisted row is hydrated into.
        use_returning (bool | None, optional): Overrides
            `settings.use_returning`.

    Returns:
        Any: The hydrated record.
    """
    if use_returning is None:
        from sqlfactories.conf import settings

        use_returning = settings.use_returning

    statement = table.insert()
    if row:
        statement = statement.values(dict(row))

    logger.debug(f"Inserting into {table.name!r}: {dict(row)!r}")
    if use_returning and connection.dialect.insert_returning:
        mapping = connection.execute(statement.returning(*table.columns)).mappings().one()
    else:
        result = connection.execute(statement)
        primary_key = result.inserted_primary_key
        clauses = [
            column == value
            for column, value in zip(table.primary_key.columns, primary_key, strict=True)
        ]
        mapping = connection.execute(sqlalchemy.select(table).where(*clauses)).mappings().one()
    return hydrate(model, mapping)


__all__ = ["hydrate", "insert_record"]
