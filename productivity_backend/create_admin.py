"""Create (or promote) an admin account.

Usage:
    python -m productivity_backend.create_admin --name "Ada" --email ada@example.com --password secret123
"""
import argparse
import sys

from productivity_backend.auth.passwords import hash_password
from productivity_backend.database import Base, SessionLocal, engine, ensure_schema
from productivity_backend.models.record import Record  # noqa: F401
from productivity_backend.models.user import ROLE_ADMIN, User


def upsert_admin(db, name: str, email: str, password: str) -> User:
    email = email.strip().lower()
    user = db.query(User).filter(User.email == email).first()
    if user is None:
        user = User(name=name.strip(), email=email)
        db.add(user)
    else:
        user.name = name.strip() or user.name

    user.hashed_password = hash_password(password)
    user.role = ROLE_ADMIN
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("--name", required=True)
    parser.add_argument("--email", required=True)
    parser.add_argument("--password", required=True)
    args = parser.parse_args(argv)

    if not args.password:
        print("Password must not be empty.", file=sys.stderr)
        sys.exit(1)

    Base.metadata.create_all(bind=engine)
    ensure_schema()

    db = SessionLocal()
    try:
        user = upsert_admin(db, args.name, args.email, args.password)
    finally:
        db.close()

    print(f"Admin ready: id={user.id} email={user.email}")


if __name__ == "__main__":
    main()
