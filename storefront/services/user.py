import logging
from sqlalchemy.ext.asyncio import AsyncSession

from storefront.db.models import User
from storefront.schemas.auth import Subject

logger = logging.getLogger(__name__)


async def upsert_user(db: AsyncSession, subject: Subject) -> User:
    """Create or refresh the profile row for a verified subject."""
    user = await db.get(User, subject.id)

    if user is None:
        user = User(id=subject.id)
        db.add(user)
        logger.info(f"Registering user {subject.id}")

    user.email = subject.email
    user.first_name = subject.first_name
    user.last_name = subject.last_name
    user.profile_image_url = subject.profile_image_url

    await db.commit()
    await db.refresh(user)
    return user
