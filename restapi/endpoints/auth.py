"""Authentication endpoints for user login and registration."""

from typing import Any, Optional
from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer, OAuth2PasswordRequestForm
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.identity import IdentityProvider, get_identity_provider
from components.core.init_db import get_db
from components.core.schemas import Message
from components.core.security import create_access_token
from components.user.repository import UserRepository
from components.user.schemas import (
    PasswordChange,
    User as UserSchema,
    UserCreate,
    UserLogin,
    UserUpdate,
    UserWithToken,
)

router = APIRouter(prefix="/auth", tags=["authentication"])
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="auth/token", auto_error=False)


async def get_current_user_id(
    db: AsyncSession = Depends(get_db),
    token: Optional[str] = Depends(oauth2_scheme),
    identity: IdentityProvider = Depends(get_identity_provider),
) -> int:
    """Resolve the calling user's id through the configured identity provider."""
    user_id = await identity.resolve(token, db)
    if user_id is None:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Could not validate credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def _with_token(user) -> UserWithToken:
    access_token = create_access_token(data={"sub": str(user.id)})
    return UserWithToken(
        **UserSchema.model_validate(user).model_dump(),
        access_token=access_token,
    )


@router.post("/register", response_model=UserWithToken, status_code=status.HTTP_201_CREATED)
async def register(
    user_in: UserCreate,
    db: AsyncSession = Depends(get_db)
) -> Any:
    """Create new user and return JWT token."""
    repo = UserRepository(db)
    if await repo.exists(user_in.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="User already exists with this email",
        )

    user = await repo.create(user_in)
    return _with_token(user)


@router.post("/login", response_model=UserWithToken)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db),
) -> Any:
    """Login with email and password and return JWT token."""
    user = await UserRepository(db).authenticate(credentials.email, credentials.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _with_token(user)


@router.post("/token", response_model=UserWithToken, include_in_schema=False)
async def login_form(
    db: AsyncSession = Depends(get_db),
    form_data: OAuth2PasswordRequestForm = Depends()
) -> Any:
    """OAuth2 password flow used by the interactive docs; username is the email."""
    user = await UserRepository(db).authenticate(form_data.username, form_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return _with_token(user)


@router.get("/me", response_model=UserSchema)
async def read_me(
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Get the current user's profile."""
    user = await UserRepository(db).get_by_id(user_id)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/profile", response_model=UserSchema)
async def update_profile(
    changes: UserUpdate,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Update the current user's name, currency or monthly budget."""
    user = await UserRepository(db).update(user_id, changes)
    if user is None:
        raise HTTPException(status_code=404, detail="User not found")
    return user


@router.put("/change-password", response_model=Message)
async def change_password(
    passwords: PasswordChange,
    db: AsyncSession = Depends(get_db),
    user_id: int = Depends(get_current_user_id),
):
    """Change the current user's password after checking the current one."""
    changed = await UserRepository(db).change_password(
        user_id, passwords.current_password, passwords.new_password
    )
    if not changed:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect",
        )
    return Message(message="Password changed successfully")
