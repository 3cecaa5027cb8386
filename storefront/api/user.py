from typing import Optional

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.api.dependencies import get_optional_subject
from storefront.db.session import get_db
from storefront.schemas.auth import Subject, UserResponse
from storefront.services.user import upsert_user

router = APIRouter(prefix="/api", tags=["auth"])


@router.get("/user", response_model=Optional[UserResponse])
async def current_user(
    subject: Optional[Subject] = Depends(get_optional_subject),
    db: AsyncSession = Depends(get_db)
):
    """Return the signed-in user's profile, or null when not signed in."""
    if subject is None:
        return None

    return await upsert_user(db, subject)
