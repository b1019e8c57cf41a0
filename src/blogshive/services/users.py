"""Helpers for looking up and maintaining user accounts."""
from __future__ import annotations

import logging

from sqlalchemy.orm import Session

from blogshive.core.errors import NotFoundError
from blogshive.models.user import User
from blogshive.schemas.user import ProfileUpdateRequest
from blogshive.services.relationships import remove_all_relationships_for_user

logger = logging.getLogger(__name__)

__all__ = [
    "get_user_by_identifier",
    "require_user",
    "update_profile",
    "delete_account",
]


def get_user_by_identifier(db: Session, identifier: str) -> User | None:
    """Resolve a path identifier; numeric values are tried as an id before a username."""
    token = identifier.strip()
    if not token:
        return None
    if token.isdigit():
        user = db.get(User, int(token))
        if user is not None:
            return user
    return db.query(User).filter(User.username == token).first()


def require_user(db: Session, identifier: str) -> User:
    """Like ``get_user_by_identifier`` but raise ``NotFoundError`` when missing."""
    user = get_user_by_identifier(db, identifier)
    if user is None:
        raise NotFoundError("User not found")
    return user


def update_profile(db: Session, db_user: User, update_data: ProfileUpdateRequest) -> User:
    """Apply partial profile updates to an existing user."""
    update_dict = update_data.model_dump(exclude_unset=True)
    for key, value in update_dict.items():
        if key in ("pronouns", "topics") and value is None:
            value = []
        setattr(db_user, key, value)

    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    return db_user


def delete_account(db: Session, db_user: User) -> None:
    """Remove a user with their relationships; owned rows cascade in the database."""
    user_id = db_user.id
    remove_all_relationships_for_user(db, user_id)
    db.delete(db_user)
    db.commit()
    logger.info("Deleted account %s", user_id)
