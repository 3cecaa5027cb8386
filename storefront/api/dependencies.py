from typing import Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from storefront.core.security import verify_token
from storefront.schemas.auth import Subject

security = HTTPBearer(auto_error=False)


async def get_optional_subject(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security)
) -> Optional[Subject]:
    """
    Optional authentication - returns the subject if the bearer token is valid, None otherwise.
    """
    if credentials is None:
        return None

    payload = verify_token(credentials.credentials)
    if not payload or not payload.get("sub"):
        return None

    return Subject.from_claims(payload)


async def get_current_subject(
    subject: Optional[Subject] = Depends(get_optional_subject)
) -> Subject:
    """
    Dependency to get the authenticated subject from the bearer token.
    """
    if subject is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    return subject
