# src/blogshive/scripts/tokens.py
"""
Developer helper that prints a bearer token for an existing or new user.

Usage:
    python -m blogshive.scripts.tokens alice
    python -m blogshive.scripts.tokens alice --create --name "Alice Doe"
"""
from __future__ import annotations

import argparse
import sys

from sqlalchemy.orm import Session

from blogshive.core.security import create_access_token
from blogshive.db.session import SessionLocal, create_tables
from blogshive.models import User


def get_or_create_user(db: Session, username: str, create: bool, name: str | None = None) -> User | None:
    """Return the user called ``username``, creating it when asked to."""
    user = db.query(User).filter(User.username == username).first()
    if user is not None or not create:
        return user

    user = User(username=username, name=name)
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description="Print a bearer token for a user")
    parser.add_argument("username", help="Username to mint a token for")
    parser.add_argument("--create", action="store_true", help="Create the user if missing")
    parser.add_argument("--name", default=None, help="Display name for a newly created user")
    args = parser.parse_args(argv)

    create_tables()
    db = SessionLocal()
    try:
        user = get_or_create_user(db, args.username, args.create, args.name)
    finally:
        db.close()

    if user is None:
        print(f"User {args.username!r} not found (use --create)", file=sys.stderr)
        return 1

    print(create_access_token(user.id))
    return 0


if __name__ == "__main__":
    sys.exit(main())
