import logging

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError

from productivity_backend import database
from productivity_backend.database import SessionLocal

logger = logging.getLogger(__name__)

DB_ERROR_DETAIL = 'DB Error'


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def database_error(exc: SQLAlchemyError, detail: str = DB_ERROR_DETAIL) -> HTTPException:
    logger.exception('Database operation failed: %s', exc)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail=detail,
    )


def ensure_database_ready() -> None:
    try:
        database.ensure_schema()
    except SQLAlchemyError as exc:
        raise database_error(exc) from exc
