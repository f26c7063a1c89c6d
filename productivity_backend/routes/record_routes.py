from datetime import date

from fastapi import APIRouter, Depends, HTTPException, Query, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from productivity_backend.auth.dependencies import get_current_user, require_admin
from productivity_backend.models.record import Record
from productivity_backend.models.user import User
from productivity_backend.routes.deps import database_error, ensure_database_ready, get_db
from productivity_backend.services.record_queries import RecordFilter, list_records, parse_month

router = APIRouter(tags=['records'])

INVALID_MONTH_DETAIL = 'Invalid month. Use YYYY-MM.'


class CreateRecordRequest(BaseModel):
    date: date
    task: str
    user_id: int | None = Field(default=None, alias='userId')

    class Config:
        populate_by_name = True

    @field_validator('task')
    @classmethod
    def validate_task(cls, value: str) -> str:
        normalized = value.strip()
        if not normalized:
            raise ValueError('Task is required.')
        return normalized


class RecordResponse(BaseModel):
    id: int
    user_id: int = Field(alias='userId')
    date: date
    task: str
    name: str

    class Config:
        from_attributes = True
        populate_by_name = True


def resolve_visible_user_id(current_user: User, requested_user_id: int | None) -> int | None:
    """Return the user id a listing must be restricted to.

    Admins get whatever they asked for (``None`` meaning every user).
    Everybody else is pinned to their own id and may not ask for anyone else's.
    """
    if current_user.is_admin:
        return requested_user_id

    if requested_user_id is not None and requested_user_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail='You can only view your own records.',
        )

    return current_user.id


def parse_month_or_400(month: str) -> tuple[date, date | None]:
    try:
        return parse_month(month)
    except ValueError as exc:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=INVALID_MONTH_DETAIL,
        ) from exc


def fetch_records(db: Session, record_filter: RecordFilter) -> list[RecordResponse]:
    ensure_database_ready()

    try:
        rows = list_records(db, record_filter)
    except SQLAlchemyError as exc:
        raise database_error(exc) from exc

    return [RecordResponse.model_validate(row) for row in rows]


@router.post('/records', response_model=RecordResponse, status_code=status.HTTP_201_CREATED)
def create_record(
    data: CreateRecordRequest,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    owner_id = current_user.id
    if data.user_id is not None and data.user_id != current_user.id:
        if not current_user.is_admin:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail='You can only add records for yourself.',
            )
        owner_id = data.user_id

    ensure_database_ready()

    try:
        owner = db.query(User).filter(User.id == owner_id).first()
        if owner is None:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail='User not found.',
            )

        record = Record(date=data.date, task=data.task, user_id=owner.id)
        db.add(record)
        db.commit()
        db.refresh(record)

        return RecordResponse(
            id=record.id,
            user_id=record.user_id,
            date=record.date,
            task=record.task,
            name=owner.name or '',
        )
    except SQLAlchemyError as exc:
        db.rollback()
        raise database_error(exc) from exc


@router.get('/records', response_model=list[RecordResponse])
def list_all_records(
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    user_id = resolve_visible_user_id(current_user, None)
    return fetch_records(db, RecordFilter(user_id=user_id))


@router.get('/records/{user_id}', response_model=list[RecordResponse])
def list_user_records(
    user_id: int,
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    visible_user_id = resolve_visible_user_id(current_user, user_id)
    return fetch_records(db, RecordFilter(user_id=visible_user_id))


@router.get('/records-by-date', response_model=list[RecordResponse])
def list_records_by_date(
    day: date = Query(..., alias='date'),
    user_id: int | None = Query(default=None, alias='userId'),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    visible_user_id = resolve_visible_user_id(current_user, user_id)
    return fetch_records(db, RecordFilter(user_id=visible_user_id, day=day))


@router.get(
    '/admin-records-by-date',
    response_model=list[RecordResponse],
    dependencies=[Depends(require_admin)],
)
def list_admin_records_by_date(
    day: date = Query(..., alias='date'),
    db: Session = Depends(get_db),
):
    return fetch_records(db, RecordFilter(day=day))


@router.get('/filter-records', response_model=list[RecordResponse])
def filter_records(
    day: date | None = Query(default=None, alias='date'),
    month: str | None = Query(default=None),
    search: str | None = Query(default=None),
    user_id: int | None = Query(default=None, alias='userId'),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    visible_user_id = resolve_visible_user_id(current_user, user_id)
    month_range = parse_month_or_400(month) if month else None

    return fetch_records(
        db,
        RecordFilter(user_id=visible_user_id, day=day, month=month_range, search=search),
    )


@router.get('/monthly-report', response_model=list[RecordResponse])
def monthly_report(
    month: str = Query(...),
    user_id: int | None = Query(default=None, alias='userId'),
    current_user: User = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    visible_user_id = resolve_visible_user_id(current_user, user_id)
    month_range = parse_month_or_400(month)

    return fetch_records(db, RecordFilter(user_id=visible_user_id, month=month_range))
