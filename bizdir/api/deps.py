"""FastAPI dependencies for authentication and business resolution."""

import uuid
from typing import Annotated

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from bizdir.core.database import get_session
from bizdir.core.security import decode_jwt
from bizdir.models.business import Business
from bizdir.models.user import UserRole

bearer_scheme = HTTPBearer()


class AuthContext:
    """Resolved identity carried through a request."""

    __slots__ = ("user_id", "business_id", "user_role")

    def __init__(
        self,
        user_id: uuid.UUID,
        user_role: str,
        business_id: uuid.UUID | None = None,
    ) -> None:
        self.user_id = user_id
        self.user_role = user_role
        self.business_id = business_id

    @property
    def is_admin(self) -> bool:
        return self.user_role == UserRole.ADMIN


async def get_auth_context(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(bearer_scheme)],
) -> AuthContext:
    """Decode a bearer JWT into user id, role and owned business id."""
    try:
        payload = decode_jwt(credentials.credentials)
    except JWTError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired JWT",
        ) from exc

    try:
        business_id = payload.get("bid")
        return AuthContext(
            user_id=uuid.UUID(payload["sub"]),
            user_role=payload.get("role", UserRole.OWNER),
            business_id=uuid.UUID(business_id) if business_id else None,
        )
    except (KeyError, ValueError) as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Malformed JWT payload",
        ) from exc


# Typed shorthand for use in route signatures
Auth = Annotated[AuthContext, Depends(get_auth_context)]
Session = Annotated[AsyncSession, Depends(get_session)]


async def get_owner_business(auth: Auth, session: Session) -> Business:
    """The business owned by the caller, or 404."""
    if auth.business_id is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Business not found",
        )
    business = await session.get(Business, auth.business_id)
    if business is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND, detail="Business not found",
        )
    return business


async def require_admin(auth: Auth) -> AuthContext:
    if not auth.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Administrator access required",
        )
    return auth


OwnerBusiness = Annotated[Business, Depends(get_owner_business)]
Admin = Annotated[AuthContext, Depends(require_admin)]
