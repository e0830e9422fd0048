"""Repository for user operations."""

from datetime import datetime
from typing import Optional
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.user.models import User
from components.user.schemas import UserCreate, UserUpdate
from components.core.security import get_password_hash, verify_password


class UserRepository:
    """Repository for user operations."""

    def __init__(self, session: AsyncSession):
        """Initialize repository with database session."""
        self.session = session

    async def create(self, user: UserCreate) -> User:
        """Create a new user."""
        db_user = User(
            name=user.name,
            email=user.email,
            password=get_password_hash(user.password),
            currency=user.currency.upper(),
            is_active=True,
        )
        self.session.add(db_user)
        await self.session.commit()
        await self.session.refresh(db_user)
        return db_user

    async def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        result = await self.session.execute(
            select(User).where(User.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email."""
        result = await self.session.execute(
            select(User).where(User.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def exists(self, email: str) -> bool:
        """Check if user with given email exists."""
        result = await self.session.execute(
            select(User.id).where(User.email == email.lower())
        )
        return result.scalar_one_or_none() is not None

    async def authenticate(self, email: str, password: str) -> Optional[User]:
        """Return the active user matching the credentials and stamp last_login."""
        user = await self.get_by_email(email)
        if not user or not user.is_active or not verify_password(password, user.password):
            return None

        user.last_login = datetime.now()
        await self.session.commit()
        await self.session.refresh(user)
        return user

    async def update(self, user_id: int, changes: UserUpdate) -> Optional[User]:
        """Update profile fields of a user."""
        db_user = await self.get_by_id(user_id)
        if not db_user:
            return None

        for field, value in changes.model_dump(exclude_unset=True).items():
            if field == "currency" and value:
                value = value.upper()
            setattr(db_user, field, value)

        await self.session.commit()
        await self.session.refresh(db_user)
        return db_user

    async def change_password(self, user_id: int, current_password: str, new_password: str) -> bool:
        """Replace the password hash; False when the current password doesn't match."""
        db_user = await self.get_by_id(user_id)
        if not db_user or not verify_password(current_password, db_user.password):
            return False

        db_user.password = get_password_hash(new_password)
        await self.session.commit()
        return True
