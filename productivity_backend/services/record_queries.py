"""Query construction shared by the record endpoints.

Every listing joins ``records`` to ``users`` so each row carries the
owner's display name, then narrows by whichever filters the caller
supplied.  All filters are combined with AND.
"""

import re
from dataclasses import dataclass
from datetime import MAXYEAR, date

from sqlalchemy.orm import Session

from productivity_backend.models.record import Record
from productivity_backend.models.user import User

MONTH_PATTERN = re.compile(r'^(\d{4})-(\d{2})$')


@dataclass
class RecordFilter:
    user_id: int | None = None
    day: date | None = None
    month: tuple[date, date | None] | None = None
    search: str | None = None


@dataclass
class RecordRow:
    id: int
    user_id: int
    date: date
    task: str
    name: str


def parse_month(value: str) -> tuple[date, date | None]:
    """Turn ``YYYY-MM`` into the half-open range ``[first day, first day of next month)``.

    The upper bound is ``None`` for December 9999, which has no next month.
    Raises ``ValueError`` for anything that is not a real calendar month.
    """
    match = MONTH_PATTERN.match(value.strip())
    if not match:
        raise ValueError(f'Invalid month: {value!r}')

    year, month = int(match.group(1)), int(match.group(2))
    if year < 1 or not 1 <= month <= 12:
        raise ValueError(f'Invalid month: {value!r}')

    start = date(year, month, 1)
    if month < 12:
        end = date(year, month + 1, 1)
    elif year < MAXYEAR:
        end = date(year + 1, 1, 1)
    else:
        end = None
    return start, end


def list_records(db: Session, record_filter: RecordFilter | None = None) -> list[RecordRow]:
    record_filter = record_filter or RecordFilter()

    query = db.query(
        Record.id,
        Record.user_id,
        Record.date,
        Record.task,
        User.name,
    ).join(User, User.id == Record.user_id)

    if record_filter.user_id is not None:
        query = query.filter(Record.user_id == record_filter.user_id)

    if record_filter.day is not None:
        query = query.filter(Record.date == record_filter.day)

    if record_filter.month is not None:
        start, end = record_filter.month
        query = query.filter(Record.date >= start)
        if end is not None:
            query = query.filter(Record.date < end)

    search = record_filter.search
    if search and search.strip():
        query = query.filter(Record.task.icontains(search, autoescape=True))

    rows = query.order_by(Record.date.desc(), Record.id.desc()).all()
    return [
        RecordRow(id=row_id, user_id=user_id, date=record_date, task=task, name=name or '')
        for row_id, user_id, record_date, task, name in rows
    ]
