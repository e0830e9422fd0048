"""Identity providers resolving the calling user for a request."""

import logging
from abc import ABC, abstractmethod
from typing import Optional

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from components.core.config import get_settings
from components.core.security import verify_token
from components.user.models import User

logger = logging.getLogger(__name__)


class IdentityProvider(ABC):
    """Resolves a bearer token into a user id, or None when it can't."""

    @abstractmethod
    async def resolve(self, token: Optional[str], session: AsyncSession) -> Optional[int]:
        raise NotImplementedError


class JWTIdentityProvider(IdentityProvider):
    """Accepts access tokens issued by /auth and checks the user still exists."""

    async def resolve(self, token: Optional[str], session: AsyncSession) -> Optional[int]:
        if not token:
            return None
        payload = verify_token(token)
        if payload is None or payload.get("sub") is None:
            return None
        try:
            user_id = int(payload["sub"])
        except (TypeError, ValueError):
            return None

        result = await session.execute(
            select(User.id).where(User.id == user_id, User.is_active.is_(True))
        )
        return result.scalar_one_or_none()


class StaticIdentityProvider(IdentityProvider):
    """Always answers with one fixed user. For tests and local demos."""

    def __init__(self, user_id: int):
        self.user_id = user_id

    async def resolve(self, token: Optional[str], session: AsyncSession) -> Optional[int]:
        logger.warning("Static identity in use, resolving every request to user %s", self.user_id)
        return self.user_id


def get_identity_provider() -> IdentityProvider:
    """FastAPI dependency returning the provider selected by AUTH_MODE."""
    settings = get_settings()
    if settings.AUTH_MODE == "static":
        if settings.STATIC_USER_ID is None:
            raise RuntimeError("AUTH_MODE=static requires STATIC_USER_ID")
        return StaticIdentityProvider(settings.STATIC_USER_ID)
    return JWTIdentityProvider()
