"""Newsletter subscription endpoints."""

from fastapi import APIRouter

from blogshive.api.v1.dependencies import CurrentUserDep, SessionDep
from blogshive.schemas.account_settings import NewsletterResponse, NewsletterUpdate
from blogshive.services import account_settings

router = APIRouter(prefix="/newsletter", tags=["newsletter"])


@router.get("", response_model=NewsletterResponse)
async def read_newsletter(current_user: CurrentUserDep, db: SessionDep) -> NewsletterResponse:
    newsletter = account_settings.ensure_newsletter(db, current_user.id)
    return NewsletterResponse.model_validate(newsletter)


@router.put("", response_model=NewsletterResponse)
async def update_newsletter(
    update: NewsletterUpdate,
    current_user: CurrentUserDep,
    db: SessionDep,
) -> NewsletterResponse:
    """Subscribe to or unsubscribe from the newsletter."""
    newsletter = account_settings.set_newsletter_subscription(db, current_user.id, update.subscribe)
    return NewsletterResponse.model_validate(newsletter)
