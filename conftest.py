import os

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault('DATABASE_URL', 'sqlite://')
os.environ.setdefault('JWT_SECRET_KEY', 'test-secret-key-for-the-productivity-suite')

from productivity_backend.auth.passwords import hash_password  # noqa: E402
from productivity_backend.database import Base  # noqa: E402
from productivity_backend.models.record import Record  # noqa: E402
from productivity_backend.models.user import User  # noqa: E402


@pytest.fixture(autouse=True)
def skip_schema_upkeep(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr('productivity_backend.database.ensure_schema', lambda: None)


@pytest.fixture
def db_engine():
    engine = create_engine(
        'sqlite://',
        connect_args={'check_same_thread': False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine, tables=[User.__table__, Record.__table__])
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine, tables=[Record.__table__, User.__table__])
        engine.dispose()


@pytest.fixture
def db(db_engine):
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=db_engine)
    session = testing_session_local()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def make_user(db):
    def _make_user(name: str, email: str, password: str = 'secret123', role: str = 'user') -> User:
        user = User(name=name, email=email, hashed_password=hash_password(password), role=role)
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make_user


@pytest.fixture
def make_record(db):
    def _make_record(user: User, day, task: str) -> Record:
        record = Record(date=day, task=task, user_id=user.id)
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make_record
