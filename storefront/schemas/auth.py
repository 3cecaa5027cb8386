from datetime import datetime
from typing import Optional

from storefront.schemas.base import CamelModel


class Subject(CamelModel):
    """The verified identity of the caller, built once from token claims."""

    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None

    @classmethod
    def from_claims(cls, claims: dict) -> "Subject":
        return cls(
            id=str(claims["sub"]),
            email=claims.get("email"),
            first_name=claims.get("first_name"),
            last_name=claims.get("last_name"),
            profile_image_url=claims.get("profile_image_url"),
        )


class UserResponse(CamelModel):
    id: str
    email: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    profile_image_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime
