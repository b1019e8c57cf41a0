"""Endpoints for the current user's account settings."""

from fastapi import APIRouter

from blogshive.api.v1.dependencies import CurrentUserDep, SessionDep
from blogshive.schemas.account_settings import SettingsResponse, SettingsUpdate
from blogshive.services import account_settings

router = APIRouter(prefix="/settings", tags=["settings"])


@router.get("/me", response_model=SettingsResponse)
async def read_my_settings(current_user: CurrentUserDep, db: SessionDep) -> SettingsResponse:
    """Return the current user's settings, creating defaults on first access."""
    row = account_settings.ensure_settings(db, current_user)
    return account_settings.serialize_settings(row, current_user)


@router.put("/me", response_model=SettingsResponse)
async def update_my_settings(
    update: SettingsUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> SettingsResponse:
    """Update settings; account fields are written through to the profile."""
    row = account_settings.update_settings(db, current_user, update)
    return account_settings.serialize_settings(row, current_user)
