"""Authentication endpoints — registration, login and current user."""

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, EmailStr, Field
from sqlmodel import select

from bizdir.api.deps import Auth, Session
from bizdir.core.security import create_jwt, hash_password, verify_password
from bizdir.models.business import Business, BusinessCreate, BusinessRead
from bizdir.models.user import User, UserRead, UserRole

router = APIRouter(prefix="/auth", tags=["auth"])


# ── Schemas ──────────────────────────────────────────────────

class RegisterRequest(BaseModel):
    """Owner account plus the business it registers, in one call."""
    email: EmailStr
    password: str = Field(min_length=8, max_length=128)
    display_name: str = Field(default="", max_length=255)
    business: BusinessCreate


class LoginRequest(BaseModel):
    email: EmailStr
    password: str


class TokenResponse(BaseModel):
    access_token: str
    token_type: str = "bearer"
    user: UserRead
    business: BusinessRead | None = None


class MeResponse(BaseModel):
    user: UserRead
    business: BusinessRead | None = None


# ── Routes ───────────────────────────────────────────────────

@router.post(
    "/register",
    response_model=TokenResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register a business owner and their business",
)
async def register(body: RegisterRequest, session: Session) -> TokenResponse:
    """New businesses start on Basic, pending verification, with no advert slots."""
    existing = await session.execute(select(User).where(User.email == body.email))
    if existing.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="An account with this email already exists",
        )

    user = User(
        email=body.email,
        password_hash=hash_password(body.password),
        display_name=body.display_name,
        role=UserRole.OWNER,
    )
    session.add(user)
    await session.flush()  # populate user.id

    business = Business(owner_id=user.id, **body.business.model_dump())
    session.add(business)
    await session.commit()
    await session.refresh(user)
    await session.refresh(business)

    token = create_jwt(subject=str(user.id), business_id=str(business.id), role=user.role)
    return TokenResponse(
        access_token=token,
        user=UserRead.model_validate(user),
        business=BusinessRead.model_validate(business),
    )


@router.post("/login", response_model=TokenResponse)
async def login(body: LoginRequest, session: Session) -> TokenResponse:
    """Authenticate with email + password, receive a JWT."""
    result = await session.execute(select(User).where(User.email == body.email))
    user = result.scalar_one_or_none()

    if user is None or not verify_password(body.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid email or password",
        )

    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is disabled",
        )

    business = await _owned_business(session, user)
    token = create_jwt(
        subject=str(user.id),
        business_id=str(business.id) if business else None,
        role=user.role,
    )
    return TokenResponse(
        access_token=token,
        user=UserRead.model_validate(user),
        business=BusinessRead.model_validate(business) if business else None,
    )


@router.get("/me", response_model=MeResponse)
async def get_me(auth: Auth, session: Session) -> MeResponse:
    """Return the current authenticated user and their business."""
    user = await session.get(User, auth.user_id)
    if user is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="User not found")

    business = await _owned_business(session, user)
    return MeResponse(
        user=UserRead.model_validate(user),
        business=BusinessRead.model_validate(business) if business else None,
    )


async def _owned_business(session, user: User) -> Business | None:
    result = await session.execute(select(Business).where(Business.owner_id == user.id))
    return result.scalars().first()
