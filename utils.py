from datetime import date, datetime, timezone
from typing import Optional, Union

DateLike = Union[date, datetime, str]


def validate_timestamps(date1: Optional[datetime], date2: Optional[datetime]):
    '''Validate that date2 is greater than date1.'''
    if date1 is None or date2 is None:
        return
    if date2 < date1:
        raise ValueError("date2 must be greater than or equal to date1")


def utcnow_iso() -> str:
    '''Current UTC time as an ISO-8601 string, the format stored in the database.'''
    return datetime.now(timezone.utc).isoformat()


def _as_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value)[:10])


def are_overlapping(
    start1: DateLike, end1: DateLike, start2: DateLike, end2: DateLike
) -> bool:
    '''Check if two stays overlap. Check-out day is free for the next check-in.'''
    return _as_date(start1) < _as_date(end2) and _as_date(start2) < _as_date(end1)
