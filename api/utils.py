from logging import Logger, getLogger
from typing import Any, Literal, Optional

from fastapi import HTTPException, status
from fastapi.concurrency import run_in_threadpool
from postgrest.exceptions import APIError

from Database.db import is_unique_violation

logger = getLogger(__name__)

Entity = Literal['user', 'hotel', 'room', 'booking', 'payment', 'ticket', 'undefined_entity']

entity_type : Entity = 'undefined_entity'

def _parse_id(
        id: str,
        logger: Logger,
        entity: Entity = entity_type
    ) -> int:
    """Validate and normalize a numeric identifier for any entity among:
    - user
    - hotel
    - room
    - booking
    - payment
    - ticket
    - undefined entity.
    """

    try:
        value = int(id)
    except ValueError as exc:
        logger.warning(f"Invalid id supplied for {entity}_id", extra={f"{entity}_id": id})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The supplied {entity} id is not a valid identifier.",
        ) from exc
    if value <= 0:
        logger.warning(f"Invalid id supplied for {entity}_id", extra={f"{entity}_id": id})
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"The supplied {entity} id is not a valid identifier.",
        )
    return value


async def _fetch_records(
    db: Any,
    table: str,
    failure_detail: str,
    log_context: dict[str, Any],
    filters: Optional[dict[str, Any]] = None,
) -> list[dict[str, Any]]:
    """
    Retrieve every row of a table matching equality filters.

    Args:
        db: Database client.
        table: Table to query.
        failure_detail: Message returned when the database query fails.
        log_context: Extra context for the log record.
        filters: Column/value pairs combined with AND.

    Returns:
        The matching rows, possibly empty.

    Raises:
        HTTPException: 500 on query failures.
    """

    def query():
        builder = db.table(table).select("*")
        for column, value in (filters or {}).items():
            builder = builder.eq(column, value)
        return builder.execute()

    try:
        result = await run_in_threadpool(query)
    except Exception as exc:
        logger.exception("Failed to fetch records", extra={**log_context, "table": table})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail,
        ) from exc

    return result.data or []


async def _fetch_record(
    db: Any,
    table: str,
    id_column: str,
    record_id: int,
    not_found_detail: str,
    failure_detail: str,
    log_context: dict[str, Any],
) -> dict[str, Any]:
    """
    Retrieve a single record or raise an HTTPException.

    Args:
        db: Database client.
        table: Table to query.
        id_column: Primary key column of the table.
        record_id: Identifier of the record to fetch.
        not_found_detail: Message returned when the record does not exist.
        failure_detail: Message returned when the database query fails.
        log_context: Extra context for the log record.

    Returns:
        The first matching record as a dictionary.

    Raises:
        HTTPException: 404 when missing, 500 on query failures.
    """

    rows = await _fetch_records(db, table, failure_detail, log_context, {id_column: record_id})
    if not rows:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=not_found_detail,
        )
    return rows[0]


async def _insert_record(
    db: Any,
    table: str,
    payload: dict[str, Any],
    conflict_detail: str,
    failure_detail: str,
    log_context: dict[str, Any],
) -> dict[str, Any]:
    """
    Insert a row and return it as stored, ids and defaults included.

    Raises:
        HTTPException: 409 on unique violations, 500 on any other failure.
    """

    try:
        result = await run_in_threadpool(lambda: db.table(table).insert(payload).execute())
    except APIError as exc:
        error_code = getattr(exc, "code", None)
        if is_unique_violation(exc):
            logger.info(
                "Insert blocked by unique constraint",
                extra={**log_context, "table": table, "error_code": error_code},
            )
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=conflict_detail,
            ) from exc
        logger.exception("Failed to insert record", extra={**log_context, "table": table, "error_code": error_code})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail,
        ) from exc
    except Exception as exc:
        logger.exception("Failed to insert record", extra={**log_context, "table": table})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail,
        ) from exc

    if not result.data:
        logger.error("Insert returned no row", extra={**log_context, "table": table})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail,
        )
    return result.data[0]


async def _update_record(
    db: Any,
    table: str,
    id_column: str,
    record_id: int,
    updates: dict[str, Any],
    conflict_detail: str,
    failure_detail: str,
    log_context: dict[str, Any],
) -> None:
    """
    Apply a partial update to one row.

    Raises:
        HTTPException: 409 on unique violations, 500 on any other failure.
    """

    try:
        await run_in_threadpool(
            lambda: db.table(table)
            .update(updates)
            .eq(id_column, record_id)
            .execute()
        )
    except APIError as exc:
        if is_unique_violation(exc):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=conflict_detail,
            ) from exc
        logger.exception("Failed to update record", extra={**log_context, "table": table})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail,
        ) from exc
    except Exception as exc:
        logger.exception("Failed to update record", extra={**log_context, "table": table})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail,
        ) from exc


async def _delete_record(
    db: Any,
    table: str,
    id_column: str,
    record_id: int,
    failure_detail: str,
    log_context: dict[str, Any],
) -> None:
    try:
        await run_in_threadpool(
            lambda: db.table(table)
            .delete()
            .eq(id_column, record_id)
            .execute()
        )
    except Exception as exc:
        logger.exception("Unable to delete record", extra={**log_context, "table": table})
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=failure_detail,
        ) from exc


def _require_updates(fields: Any, nullable: tuple[str, ...] = ()) -> dict[str, Any]:
    """Dump a partial update payload, rejecting empty updates with 400.

    An explicit null clears the columns listed in ``nullable``. For every
    other column it is dropped, since those columns are NOT NULL.
    """

    updates = {
        column: value
        for column, value in fields.model_dump(mode="json", exclude_unset=True).items()
        if value is not None or column in nullable
    }
    if not updates:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="At least one field must be provided for update.",
        )
    return updates


def _validate_merged(model: Any, record: dict[str, Any], updates: dict[str, Any]) -> Any:
    """Check that a record still validates once the updates are applied."""

    try:
        return model(**{**record, **updates})
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail=str(exc),
        ) from exc
