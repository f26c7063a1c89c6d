import logging

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, field_validator
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from productivity_backend.auth import jwt_handler
from productivity_backend.auth.dependencies import get_current_user
from productivity_backend.auth.passwords import verify_password
from productivity_backend.models.user import User
from productivity_backend.routes.deps import get_db

router = APIRouter(tags=['auth'])

logger = logging.getLogger(__name__)

LOGIN_SERVER_ERROR_DETAIL = 'Server error'


class LoginRequest(BaseModel):
    email: str
    password: str

    @field_validator('email')
    @classmethod
    def normalize_email(cls, value: str) -> str:
        return value.strip().lower()


@router.post('/login')
def login(data: LoginRequest, db: Session = Depends(get_db)):
    try:
        user = db.query(User).filter(User.email == data.email).first()
    except SQLAlchemyError as exc:
        logger.exception('Login lookup failed.')
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=LOGIN_SERVER_ERROR_DETAIL,
        ) from exc

    if user is None or not verify_password(data.password, user.hashed_password):
        logger.warning('Failed login attempt for %s', data.email)
        return {'success': False}

    token = jwt_handler.create_access_token(user_id=user.id, role=user.role)
    logger.info('User %s logged in', user.id)
    return {
        'success': True,
        'token': token,
        'user': {
            'id': user.id,
            'name': user.name,
            'role': user.role,
        },
    }


@router.get('/me')
def me(current_user: User = Depends(get_current_user)):
    return {
        'id': current_user.id,
        'name': current_user.name,
        'email': current_user.email,
        'role': current_user.role,
    }
