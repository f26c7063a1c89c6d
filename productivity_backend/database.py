from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from productivity_backend.core import config


engine = create_engine(config.DATABASE_URL)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_user_schema_checked = False
_record_schema_checked = False


def ensure_user_schema() -> None:
    global _user_schema_checked

    if _user_schema_checked:
        return

    with _schema_lock:
        if _user_schema_checked:
            return

        inspector = inspect(engine)

        if 'users' not in inspector.get_table_names():
            _user_schema_checked = True
            return

        # Back-fills name and role only; hashed_password must already exist.
        existing_columns = {column['name'] for column in inspector.get_columns('users')}
        migration_steps = [
            ('name', "ALTER TABLE users ADD COLUMN name VARCHAR(255) NOT NULL DEFAULT ''"),
            ('role', "ALTER TABLE users ADD COLUMN role VARCHAR(32) NOT NULL DEFAULT 'user'"),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))

        _user_schema_checked = True


def ensure_record_schema() -> None:
    global _record_schema_checked

    if _record_schema_checked:
        return

    with _schema_lock:
        if _record_schema_checked:
            return

        inspector = inspect(engine)

        if 'records' not in inspector.get_table_names():
            _record_schema_checked = True
            return

        with engine.begin() as connection:
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_records_date ON records(date)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_records_user_date ON records(user_id, date)')
            )

        _record_schema_checked = True


def ensure_schema() -> None:
    ensure_user_schema()
    ensure_record_schema()
